"""Main CLI entry point for variant-ranking.

Provides the command group with global options and the analysis subcommands.
"""

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from variant_ranking import __version__
from variant_ranking.config.loader import load_config
from variant_ranking.cli.constraint_cmd import constraint, refresh_constraint
from variant_ranking.cli.score_cmd import score


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@click.group()
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default='config/default.yaml',
    help='Path to analysis configuration YAML file'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """Variant-ranking: rank candidate genes of a rare-disease proband.

    Scores genes per mode of inheritance from variant and phenotype
    evidence, with bootstrap p-values and ACMG classification of the
    contributing variants.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display version and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"Variant Ranking v{__version__}")
    click.echo(f"Config: {config_path}")
    click.echo()

    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValidationError) as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)

    click.echo(f"Config Hash: {config.config_hash()[:16]}...")
    click.echo()

    click.echo(click.style("Reference Data:", bold=True))
    click.echo(f"  Constraint Table: {config.versions.constraint_version}")
    click.echo(f"  Constraint Path:  {config.constraint_path or 'packaged'}")
    click.echo()

    click.echo(click.style("Paths:", bold=True))
    click.echo(f"  Data Directory: {config.data_dir}")
    click.echo(f"  DuckDB Path: {config.duckdb_path}")
    click.echo()

    click.echo(click.style("Inheritance Modes (max frequency %):", bold=True))
    options = config.inheritance.to_options()
    for sub_mode, max_freq in options.as_dict().items():
        click.echo(f"  {sub_mode}: {max_freq}")
    click.echo()

    click.echo(click.style("Scoring:", bold=True))
    click.echo(f"  Null Sample Size: {config.scoring.null_sample_size}")
    click.echo(f"  Seed: {config.scoring.seed if config.scoring.seed is not None else 'random'}")
    click.echo(f"  Workers: {config.scoring.workers or 'default'}")


cli.add_command(score)
cli.add_command(constraint)
cli.add_command(refresh_constraint)


if __name__ == '__main__':
    cli()
