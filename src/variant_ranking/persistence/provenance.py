"""Provenance of ranking runs for reproducibility."""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import yaml


class RunProvenance:
    """
    Tracks provenance metadata of one analysis run.

    Records the package version, reference data versions, config hash, the
    null population settings and each analysis step.
    """

    def __init__(self, version: str, config: "PipelineConfig"):
        """
        Args:
            version: Package version string (e.g., "0.1.0")
            config: PipelineConfig of the run
        """
        self.run_id = uuid.uuid4().hex
        self.version = version
        self.config_hash = config.config_hash()
        self.data_source_versions = config.versions.model_dump()
        self.null_distribution = {
            "size": config.scoring.null_sample_size,
            "seed": config.scoring.seed,
        }
        self.steps: list[dict] = []
        self.created_at = datetime.now(timezone.utc)

    def record_step(self, step_name: str, details: Optional[dict] = None) -> None:
        """
        Record an analysis step.

        Args:
            step_name: Name of the step
            details: Optional counts or parameters of the step
        """
        step = {
            "step_name": step_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            step["details"] = details
        self.steps.append(step)

    def create_metadata(self) -> dict:
        return {
            "run_id": self.run_id,
            "version": self.version,
            "data_source_versions": self.data_source_versions,
            "config_hash": self.config_hash,
            "null_distribution": self.null_distribution,
            "created_at": self.created_at.isoformat(),
            "steps": self.steps,
        }

    def save_sidecar(self, output_path: Path) -> Path:
        """
        Save provenance as a YAML sidecar next to an output file.

        Args:
            output_path: Path to the main output file; the sidecar is
                         written as {stem}.provenance.yaml

        Returns:
            Path to the sidecar
        """
        output_path = Path(output_path)
        sidecar_path = output_path.with_suffix(".provenance.yaml")
        sidecar_path.parent.mkdir(parents=True, exist_ok=True)
        with open(sidecar_path, "w") as f:
            yaml.safe_dump(self.create_metadata(), f, default_flow_style=False, sort_keys=False)
        return sidecar_path

    def save_to_store(self, store: "ResultStore") -> None:
        """
        Append a provenance row to the result store.

        Args:
            store: ResultStore of the run
        """
        metadata = self.create_metadata()
        store.conn.execute("""
            CREATE TABLE IF NOT EXISTS _provenance (
                run_id VARCHAR,
                version VARCHAR,
                config_hash VARCHAR,
                created_at TIMESTAMP,
                steps_json VARCHAR
            )
        """)
        store.conn.execute("""
            INSERT INTO _provenance (run_id, version, config_hash, created_at, steps_json)
            VALUES (?, ?, ?, ?, ?)
        """, [
            metadata["run_id"],
            metadata["version"],
            metadata["config_hash"],
            metadata["created_at"],
            json.dumps(metadata["steps"]),
        ])

    @staticmethod
    def load_sidecar(sidecar_path: Path) -> dict:
        with open(sidecar_path) as f:
            return yaml.safe_load(f)

    @classmethod
    def from_config(
        cls,
        config: "PipelineConfig",
        version: Optional[str] = None
    ) -> "RunProvenance":
        """
        Create provenance for a run of ``config``.

        Args:
            config: PipelineConfig instance
            version: Version string. If None, uses variant_ranking.__version__
        """
        if version is None:
            from variant_ranking import __version__
            version = __version__

        return cls(version, config)
