"""Execution helpers for CLI commands."""

import sys
from pathlib import Path

import click

from .config import DEFAULT_EXPORT_NAME
from .core.scenario import load_scenario, run_scenario
from .core.session import LyricSession
from .exceptions import LyricSmithError
from .utils.validation import (
    parse_merge_specs,
    validate_input_file,
    validate_line_index,
    validate_output_path,
)


def _open_session(logger, annotated, plain, auto_match=False) -> LyricSession:
    """Import both inputs into a fresh session, failing on import errors."""
    session = LyricSession(auto_match=auto_match)

    session.import_annotated_file(validate_input_file(annotated))
    if session.error:
        raise LyricSmithError(session.error)

    session.import_plain_text_file(validate_input_file(plain))
    if session.error:
        raise LyricSmithError(session.error)

    logger.info(
        f"Loaded {session.alignment.annotated_count} records in "
        f"{len(session.alignment.line_groups)} lines"
    )
    return session


def _format_syllables(syllables) -> str:
    return " | ".join(syllables) if syllables else "(empty)"


def _fail(ctx, logger, e):
    if isinstance(e, LyricSmithError):
        logger.error(f"❌ {e}")
    else:
        logger.error(f"❌ Unexpected error: {e}")
        if ctx.obj.get("verbose"):
            import traceback

            traceback.print_exc()
    sys.exit(1)


def run_align_command(*, ctx, logger, annotated, plain, auto_match):
    """Execute the `align` command implementation."""
    try:
        session = _open_session(logger, annotated, plain, auto_match=auto_match)

        for view in session.lines():
            marker = "  " if view.is_aligned else "✗ "
            click.echo(f"{marker}Line {view.index}:")
            click.echo(f"    annotated: {_format_syllables(view.annotated)}")
            click.echo(f"    plain:     {_format_syllables(view.plain)}")
            for issue in view.issues:
                click.echo(f"    ! {issue}")

        click.echo(
            f"{session.alignment.annotated_count} annotated syllables, "
            f"{session.alignment.plain_count} plain syllables"
        )
        mismatched = session.alignment.mismatched_lines()
        if mismatched:
            click.echo(f"{len(mismatched)} lines need merges")
        else:
            click.echo("✅ All lines aligned")

    except Exception as e:
        _fail(ctx, logger, e)


def run_export_command(*, ctx, logger, annotated, plain, merges, output, auto_match):
    """Execute the `export` command implementation."""
    try:
        actions = parse_merge_specs(merges)
        output_path = validate_output_path(output or DEFAULT_EXPORT_NAME)

        session = _open_session(logger, annotated, plain, auto_match=auto_match)
        line_count = len(session.alignment.line_groups)
        for action in actions:
            validate_line_index(action.line_index, line_count)
        session.apply_actions(actions)

        remaining = session.alignment.mismatched_lines()
        if remaining:
            logger.warning(
                f"{len(remaining)} lines still misaligned: "
                + ", ".join(str(i) for i in remaining)
            )

        session.export(output_path)
        click.echo(f"✅ Exported {session.alignment.annotated_count} records to {output_path}")

    except Exception as e:
        _fail(ctx, logger, e)


def run_replay_command(*, ctx, logger, scenario_path, write):
    """Execute the `replay` command implementation."""
    try:
        scenario = load_scenario(Path(scenario_path))
        logger.info(f"Replaying {scenario.name} ({len(scenario.merge_actions)} merges)")

        result = run_scenario(scenario)

        if write:
            output_path = validate_output_path(write)
            output_path.write_text(result.output, encoding="utf-8")
            logger.info(f"Wrote replay output to {output_path}")

        if result.comparison is not None:
            click.echo(result.comparison.summary())

        count = result.session.alignment.annotated_count
        if scenario.expected_count is not None and count != scenario.expected_count:
            click.echo(f"Expected {scenario.expected_count} records, got {count}")

        if not result.passed:
            click.echo(f"❌ {scenario.name} failed")
            sys.exit(1)
        click.echo(f"✅ {scenario.name} passed")

    except Exception as e:
        _fail(ctx, logger, e)
