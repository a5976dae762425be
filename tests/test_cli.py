"""Integration tests for the CLI commands using CliRunner.

Tests:
- --help and info
- score writes outputs and prints the top gene scores
- score --persist appends to the result store
- score error handling for bad pedigrees
- constraint lookups
- refresh-constraint conversion and download failure
"""

from unittest.mock import patch

import duckdb
import httpx
import pytest
import yaml
from click.testing import CliRunner

from variant_ranking.cli.main import cli



@pytest.fixture
def test_config(tmp_path):
    """Create minimal config YAML for testing."""
    config_path = tmp_path / "test_config.yaml"
    config_path.write_text(f"""
data_dir: {tmp_path}/data
duckdb_path: {tmp_path}/test.duckdb

scoring:
  null_sample_size: 1000
  seed: 1
""")
    return config_path


def test_help():
    """Test the group lists every command."""
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])

    assert result.exit_code == 0
    for command in ('info', 'score', 'constraint', 'refresh-constraint'):
        assert command in result.output


def test_info(test_config):
    """Test info prints version, hash and inheritance ceilings."""
    runner = CliRunner()
    result = runner.invoke(cli, ['--config', str(test_config), 'info'])

    assert result.exit_code == 0
    assert "Variant Ranking v" in result.output
    assert "Config Hash:" in result.output
    assert "AR_COMP_HET: 2.0" in result.output
    assert "Seed: 1" in result.output


def test_score_writes_outputs(test_config, analysis_file, tmp_path):
    """Test score ranks genes and writes TSV, Parquet and provenance files."""
    runner = CliRunner()
    output_dir = tmp_path / "results"

    result = runner.invoke(cli, [
        '--config', str(test_config),
        'score', str(analysis_file),
        '--output-dir', str(output_dir),
        '--top', '3',
    ])

    assert result.exit_code == 0, result.output
    assert "=== Top Gene Scores ===" in result.output
    assert "FBN1" in result.output
    assert "pathogenic" in result.output
    for name in ("child_gene_scores.tsv", "child_gene_scores.parquet",
                 "child_gene_scores.acmg.tsv", "child_gene_scores.provenance.yaml"):
        assert (output_dir / name).exists()

    with open(output_dir / "child_gene_scores.provenance.yaml") as f:
        sidecar = yaml.safe_load(f)
    assert sidecar["provenance"]["null_distribution"] == {"size": 1000, "seed": 1}


def test_score_overrides_and_default_output_dir(test_config, analysis_file, tmp_path):
    """Test --seed and --null-size override the config and outputs go under data_dir."""
    runner = CliRunner()

    result = runner.invoke(cli, [
        '--config', str(test_config),
        'score', str(analysis_file),
        '--seed', '7',
        '--null-size', '500',
    ])

    assert result.exit_code == 0, result.output
    sidecar_path = tmp_path / "data" / "results" / "child_gene_scores.provenance.yaml"
    with open(sidecar_path) as f:
        sidecar = yaml.safe_load(f)
    assert sidecar["provenance"]["null_distribution"] == {"size": 500, "seed": 7}


def test_score_persist(test_config, analysis_file, tmp_path):
    """Test --persist appends gene scores and provenance to DuckDB."""
    runner = CliRunner()

    result = runner.invoke(cli, ['--config', str(test_config), 'score', str(analysis_file), '--persist'])

    assert result.exit_code == 0, result.output
    conn = duckdb.connect(str(tmp_path / "test.duckdb"), read_only=True)
    try:
        top = conn.execute("SELECT gene_symbol, mode FROM gene_scores ORDER BY rank LIMIT 1").fetchone()
        assert top == ("FBN1", "AD")
        assert conn.execute("SELECT COUNT(*) FROM acmg_assignments").fetchone()[0] >= 1
        assert conn.execute("SELECT COUNT(*) FROM _provenance").fetchone()[0] == 1
    finally:
        conn.close()


def test_score_invalid_pedigree(test_config, trio_analysis, tmp_path):
    """Test a pedigree whose proband is unaffected exits with an error."""
    data = trio_analysis
    data["pedigree"][0]["status"] = "unaffected"
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.safe_dump(data))

    runner = CliRunner()
    result = runner.invoke(cli, ['--config', str(test_config), 'score', str(path)])

    assert result.exit_code == 1
    assert "must be affected" in result.output


def test_score_invalid_analysis(test_config, tmp_path):
    """Test an analysis file without a proband exits with an error."""
    path = tmp_path / "bad.yaml"
    path.write_text("genes: []\n")

    runner = CliRunner()
    result = runner.invoke(cli, ['--config', str(test_config), 'score', str(path)])

    assert result.exit_code == 1
    assert "Error loading inputs" in result.output


def test_score_missing_analysis_file(test_config, tmp_path):
    """Test a missing analysis file is rejected by argument validation."""
    runner = CliRunner()
    result = runner.invoke(cli, ['--config', str(test_config), 'score', str(tmp_path / "absent.yaml")])

    assert result.exit_code == 2


def test_constraint_lookup(test_config):
    """Test constraint prints metrics and the default for unknown genes."""
    runner = CliRunner()
    result = runner.invoke(cli, ['--config', str(test_config), 'constraint', 'FBN1', 'NOTAGENE'])

    assert result.exit_code == 0
    lines = [line for line in result.output.splitlines() if line.startswith(("FBN1", "NOTAGENE"))]
    assert lines[0].startswith("FBN1\tpLI=1.000")
    assert lines[0].endswith("LOF intolerant")
    assert lines[1] == "NOTAGENE\tnot in table\tLOF intolerant (default)"


def test_constraint_requires_symbols(test_config):
    """Test constraint without symbols is a usage error."""
    runner = CliRunner()
    result = runner.invoke(cli, ['--config', str(test_config), 'constraint'])

    assert result.exit_code == 2


def test_refresh_constraint_converts_existing_download(test_config, tmp_path):
    """Test an already downloaded gnomAD table is converted without a request."""
    raw = tmp_path / "data" / "gnomad_constraint_raw.tsv"
    raw.parent.mkdir(parents=True, exist_ok=True)
    raw.write_text(
        "gene\ttranscript\tlof.pLI\tlof.oe_ci.upper\n"
        "SCN1A\tENST00000303395\t1.0\t0.12\n"
        "TTN\tENST00000589042\t0.0\t0.92\n"
    )
    output = tmp_path / "converted.tsv"

    runner = CliRunner()
    result = runner.invoke(cli, ['--config', str(test_config), 'refresh-constraint', '--output', str(output)])

    assert result.exit_code == 0, result.output
    assert "Wrote 2 genes" in result.output
    assert output.read_text().startswith("gene_symbol\ttranscript\tpli\tloeuf")


def test_refreshed_table_used_by_constraint(test_config, tmp_path):
    """Test a table refreshed into data_dir replaces the packaged one for lookups."""
    raw = tmp_path / "data" / "gnomad_constraint_raw.tsv"
    raw.parent.mkdir(parents=True, exist_ok=True)
    raw.write_text(
        "gene\ttranscript\tlof.pLI\tlof.oe_ci.upper\n"
        "NEWGENE\tENST00000000001\t0.0\t0.95\n"
    )

    runner = CliRunner()
    refreshed = runner.invoke(cli, ['--config', str(test_config), 'refresh-constraint'])
    result = runner.invoke(cli, ['--config', str(test_config), 'constraint', 'NEWGENE', 'FBN1'])

    assert refreshed.exit_code == 0, refreshed.output
    assert (tmp_path / "data" / "gene_constraint.tsv").exists()
    lines = [line for line in result.output.splitlines() if line.startswith(("NEWGENE", "FBN1"))]
    assert lines[0].startswith("NEWGENE\tpLI=0.000")
    assert lines[0].endswith("LOF tolerant")
    assert lines[1] == "FBN1\tnot in table\tLOF intolerant (default)"


@patch("variant_ranking.cli.constraint_cmd.download_constraint_metrics")
def test_refresh_constraint_download_failure(mock_download, test_config):
    """Test a failed download exits with an error."""
    mock_download.side_effect = httpx.ConnectError("connection refused")

    runner = CliRunner()
    result = runner.invoke(cli, ['--config', str(test_config), 'refresh-constraint', '--force'])

    assert result.exit_code == 1
    assert "Download failed" in result.output
