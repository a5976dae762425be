"""Score command: rank the genes of an analysis file."""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from variant_ranking.analysis import load_analysis, run_analysis
from variant_ranking.config.loader import load_config_with_overrides
from variant_ranking.constraint.table import ConstraintResourceError
from variant_ranking.inheritance.validator import PedigreeValidationError
from variant_ranking.output.writers import gene_scores_frame, acmg_assignments_frame, write_ranking_output
from variant_ranking.persistence import ResultStore, RunProvenance

logger = logging.getLogger(__name__)


@click.command('score')
@click.argument('analysis_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    '--output-dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='Output directory (default: {data_dir}/results)'
)
@click.option(
    '--seed',
    type=int,
    default=None,
    help='Seed for the null distribution (overrides config)'
)
@click.option(
    '--null-size',
    type=int,
    default=None,
    help='Null distribution sample size (overrides config)'
)
@click.option(
    '--top',
    type=int,
    default=10,
    show_default=True,
    help='Number of top gene scores to print'
)
@click.option(
    '--persist',
    is_flag=True,
    help='Also append results to the DuckDB result store'
)
@click.pass_context
def score(ctx, analysis_file, output_dir, seed, null_size, top, persist):
    """Rank the candidate genes in ANALYSIS_FILE (YAML or JSON).

    Validates the pedigree, annotates inheritance modes, scores every gene
    under every configured mode and writes gene scores and ACMG assignments
    as TSV and Parquet with a provenance sidecar.

    Examples:

        variant-ranking score analysis.yaml

        variant-ranking score analysis.yaml --seed 42 --persist
    """
    config_path = ctx.obj['config_path']

    overrides = {}
    if seed is not None:
        overrides['scoring.seed'] = seed
    if null_size is not None:
        overrides['scoring.null_sample_size'] = null_size

    try:
        config = load_config_with_overrides(config_path, overrides)
        analysis = load_analysis(analysis_file)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        click.echo(click.style(f"Error loading inputs: {e}", fg='red'), err=True)
        sys.exit(1)

    provenance = RunProvenance.from_config(config)
    provenance.record_step('load_analysis', {
        'analysis_file': str(analysis_file),
        'genes': len(analysis.genes),
    })

    try:
        result = run_analysis(analysis, config, base_dir=analysis_file.parent)
    except PedigreeValidationError as e:
        click.echo(click.style(f"Invalid pedigree: {e}", fg='red'), err=True)
        sys.exit(1)
    except ConstraintResourceError as e:
        click.echo(click.style(f"Missing reference data: {e}", fg='red'), err=True)
        sys.exit(1)

    provenance.record_step('score_genes', {
        'gene_scores': len(result.gene_scores),
        'null_distribution_size': result.null_distribution_size,
        'reassigned_variants': result.reassigned_variants,
    })

    output_dir = output_dir or config.data_dir / 'results'
    paths = write_ranking_output(
        result.gene_scores,
        output_dir,
        filename_base=f"{analysis.proband}_gene_scores",
        provenance=provenance.create_metadata(),
    )
    provenance.record_step('write_output', {'output_dir': str(output_dir)})

    if persist:
        with ResultStore.from_config(config) as store:
            store.save_results(
                gene_scores_frame(result.gene_scores),
                acmg_assignments_frame(result.gene_scores),
                run_id=provenance.run_id,
            )
            provenance.save_to_store(store)

    click.echo(click.style("=== Top Gene Scores ===", bold=True))
    for rank, gene_score in enumerate(result.gene_scores[:top], start=1):
        classifications = ",".join(a.classification.value for a in gene_score.acmg_assignments)
        click.echo(
            f"{rank:>3}  {gene_score.gene_symbol:<12} {gene_score.mode.value:<4} "
            f"combined={gene_score.combined_score:.4f} p={gene_score.p_value:.3g} "
            f"{classifications}"
        )
    click.echo()
    click.echo(f"Gene scores: {paths['tsv']}")
    click.echo(f"ACMG assignments: {paths['acmg_tsv']}")
    click.echo(f"Provenance: {paths['provenance']}")
    logger.info(f"Scored {len(result.genes)} genes for proband {analysis.proband}")
