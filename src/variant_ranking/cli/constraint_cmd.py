"""Constraint commands: look up and refresh gene constraint metrics."""

import logging
import sys
from pathlib import Path

import click
import httpx

from variant_ranking.config.loader import load_config
from variant_ranking.constraint.fetch import convert_constraint_tsv, download_constraint_metrics
from variant_ranking.constraint.models import GNOMAD_CONSTRAINT_URL
from variant_ranking.constraint.table import ConstraintResourceError, GeneConstraints, resolve_constraint_path

logger = logging.getLogger(__name__)


def _format_metric(value: float | None) -> str:
    return "NA" if value is None else f"{value:.3f}"


@click.command('constraint')
@click.argument('symbols', nargs=-1, required=True)
@click.pass_context
def constraint(ctx, symbols):
    """Show LOF constraint metrics for gene SYMBOLS.

    Uses the configured table, then a refreshed one in the data directory,
    then the packaged one.
    """
    config = load_config(ctx.obj['config_path'])
    path = resolve_constraint_path(config.constraint_path, config.data_dir)
    try:
        constraints = GeneConstraints.from_tsv(
            path,
            pli_threshold=config.acmg.pli_intolerant,
            loeuf_threshold=config.acmg.loeuf_intolerant,
        )
    except ConstraintResourceError as e:
        click.echo(click.style(str(e), fg='red'), err=True)
        sys.exit(1)

    for symbol in symbols:
        entry = constraints.get(symbol)
        intolerant = constraints.is_lof_intolerant(symbol)
        if entry is None:
            click.echo(f"{symbol}\tnot in table\tLOF intolerant (default)")
            continue
        click.echo(
            f"{symbol}\tpLI={_format_metric(entry.pli)}\tLOEUF={_format_metric(entry.loeuf)}\t"
            f"{'LOF intolerant' if intolerant else 'LOF tolerant'}"
        )


@click.command('refresh-constraint')
@click.option(
    '--url',
    default=GNOMAD_CONSTRAINT_URL,
    show_default=True,
    help='gnomAD constraint metrics URL'
)
@click.option(
    '--output',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Converted table path (default: {data_dir}/gene_constraint.tsv)'
)
@click.option(
    '--force',
    is_flag=True,
    help='Re-download even if the raw file exists'
)
@click.pass_context
def refresh_constraint(ctx, url, output, force):
    """Download gnomAD constraint metrics and convert them to the table layout.

    The default output in the data directory is picked up by later runs.
    """
    config = load_config(ctx.obj['config_path'])
    raw_path = config.data_dir / 'gnomad_constraint_raw.tsv'
    output = output or config.data_dir / 'gene_constraint.tsv'

    try:
        download_constraint_metrics(raw_path, url=url, force=force)
    except httpx.HTTPError as e:
        click.echo(click.style(f"Download failed: {e}", fg='red'), err=True)
        sys.exit(1)

    gene_count = convert_constraint_tsv(raw_path, output)
    click.echo(click.style(f"Wrote {gene_count} genes to {output}", fg='green'))
    logger.info(f"Constraint table refreshed from {url}")
