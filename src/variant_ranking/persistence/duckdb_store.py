"""DuckDB storage for ranking results across analysis runs."""

from pathlib import Path
from typing import Optional

import duckdb
import polars as pl
import structlog

logger = structlog.get_logger(__name__)

GENE_SCORES_TABLE = "gene_scores"
ACMG_ASSIGNMENTS_TABLE = "acmg_assignments"


class ResultStore:
    """
    DuckDB-backed store for gene scores and ACMG assignments.

    Every saved table is registered in ``_tables`` with its row count and a
    description, so later runs can check what a database already holds.
    """

    def __init__(self, db_path: Path):
        """
        Open (or create) the result database.

        Args:
            db_path: Path to DuckDB database file. Parent directories
                     are created automatically.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = duckdb.connect(str(self.db_path))
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS _tables (
                table_name VARCHAR PRIMARY KEY,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                row_count INTEGER,
                description VARCHAR
            )
        """)

    def save_frame(
        self,
        df: pl.DataFrame,
        table_name: str,
        description: str = "",
        replace: bool = True,
    ) -> None:
        """
        Save a polars DataFrame as a DuckDB table.

        Args:
            df: Frame to save
            table_name: Name for the DuckDB table
            description: Description stored with the table registration
            replace: If True, replace an existing table; if False, append
        """
        if replace or not self.has_table(table_name):
            self.conn.execute(f"CREATE OR REPLACE TABLE {table_name} AS SELECT * FROM df")
        else:
            self.conn.execute(f"INSERT INTO {table_name} SELECT * FROM df")

        row_count = self.conn.execute(f"SELECT COUNT(*) FROM {table_name}").fetchone()[0]
        self.conn.execute("""
            INSERT OR REPLACE INTO _tables (table_name, row_count, description, created_at)
            VALUES (?, ?, ?, CURRENT_TIMESTAMP)
        """, [table_name, row_count, description])
        logger.debug("table_saved", table=table_name, rows=row_count, replace=replace)

    def load_frame(self, table_name: str) -> Optional[pl.DataFrame]:
        """
        Load a table as a polars DataFrame.

        Returns:
            DataFrame or None if the table doesn't exist
        """
        try:
            return self.conn.execute(f"SELECT * FROM {table_name}").pl()
        except duckdb.CatalogException:
            return None

    def has_table(self, table_name: str) -> bool:
        result = self.conn.execute(
            "SELECT COUNT(*) FROM _tables WHERE table_name = ?",
            [table_name]
        ).fetchone()
        return result[0] > 0

    def list_tables(self) -> list[dict]:
        """
        List registered tables, newest first.

        Returns:
            List of dicts with keys table_name, created_at, row_count, description
        """
        rows = self.conn.execute("""
            SELECT table_name, created_at, row_count, description
            FROM _tables
            ORDER BY created_at DESC
        """).fetchall()
        return [
            {
                "table_name": row[0],
                "created_at": row[1],
                "row_count": row[2],
                "description": row[3],
            }
            for row in rows
        ]

    def save_results(
        self,
        gene_scores: pl.DataFrame,
        acmg_assignments: pl.DataFrame,
        run_id: str,
    ) -> None:
        """
        Append one run's gene scores and ACMG assignments, tagged with ``run_id``.

        Args:
            gene_scores: Flattened gene scores
            acmg_assignments: Flattened ACMG assignments
            run_id: Identifier of the analysis run
        """
        for df, table_name, description in (
            (gene_scores, GENE_SCORES_TABLE, "Per-mode gene scores"),
            (acmg_assignments, ACMG_ASSIGNMENTS_TABLE, "ACMG assignments of contributing variants"),
        ):
            tagged = df.with_columns(pl.lit(run_id).alias("run_id"))
            self.save_frame(tagged, table_name, description=description, replace=False)
        logger.info(
            "results_saved",
            db=str(self.db_path),
            run_id=run_id,
            gene_scores=gene_scores.height,
            acmg_assignments=acmg_assignments.height,
        )

    def top_gene_scores(self, run_id: str, limit: int = 10) -> pl.DataFrame:
        """Best gene scores of a run by rank."""
        return self.execute_query(
            f"""
            SELECT * FROM {GENE_SCORES_TABLE}
            WHERE run_id = ?
            ORDER BY rank ASC
            LIMIT ?
            """,
            [run_id, limit],
        )

    def execute_query(
        self,
        query: str,
        params: Optional[list] = None
    ) -> pl.DataFrame:
        if params:
            result = self.conn.execute(query, params)
        else:
            result = self.conn.execute(query)
        return result.pl()

    def close(self) -> None:
        """Close the DuckDB connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @classmethod
    def from_config(cls, config: "PipelineConfig") -> "ResultStore":
        return cls(config.duckdb_path)
