"""Command-line interface using Click."""

from pathlib import Path

import click

from . import __version__
from .cli_commands import run_align_command, run_export_command, run_replay_command
from .config import AUTO_MATCH_DEFAULT, DEFAULT_EXPORT_NAME
from .utils.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """LyricSmith - align annotated lyric exports with plain-text lyrics."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('annotated', type=click.Path())
@click.argument('plain', type=click.Path())
@click.option('--auto-match/--no-auto-match', default=AUTO_MATCH_DEFAULT,
              help='Re-run fuzzy matching after plain-text merges')
@click.pass_context
def align(ctx, annotated, plain, auto_match):
    """Show annotated and plain syllables side by side."""
    run_align_command(
        ctx=ctx,
        logger=ctx.obj['logger'],
        annotated=annotated,
        plain=plain,
        auto_match=auto_match,
    )


@cli.command()
@click.argument('annotated', type=click.Path())
@click.argument('plain', type=click.Path())
@click.option('-m', '--merge', 'merges', multiple=True,
              help='Merge LINE:SYLLABLE:SIDE (zero-based, SIDE is annotated or plain); repeatable')
@click.option('-o', '--output', help=f'Output path (default: {DEFAULT_EXPORT_NAME})')
@click.option('--auto-match/--no-auto-match', default=AUTO_MATCH_DEFAULT,
              help='Re-run fuzzy matching after plain-text merges')
@click.pass_context
def export(ctx, annotated, plain, merges, output, auto_match):
    """Apply merges and write the corrected annotated export."""
    run_export_command(
        ctx=ctx,
        logger=ctx.obj['logger'],
        annotated=annotated,
        plain=plain,
        merges=merges,
        output=output,
        auto_match=auto_match,
    )


@cli.command()
@click.argument('scenario_path', type=click.Path())
@click.option('--write', type=click.Path(), help='Also write the replayed export here')
@click.pass_context
def replay(ctx, scenario_path, write):
    """Replay a recorded merge scenario and compare with its target."""
    run_replay_command(
        ctx=ctx,
        logger=ctx.obj['logger'],
        scenario_path=scenario_path,
        write=write,
    )


if __name__ == '__main__':
    cli()
