"""
Command-line interface for speedlingo.
"""

import click
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .config import get_config_manager, reset_config_manager, load_credentials, DEFAULT_CREDENTIALS_FILE
from .error_handling import SpeedlingoError, UnsupportedModeError
from .logging import setup_logging, close_logging, redact, LoggerConfig
from .models import PipelineMode, PipelineResult
from .orchestrator import PipelineOrchestrator


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.argument('mode', metavar='COMMAND')
@click.argument('owner')
@click.argument('repo', metavar='REPO_NAME')
@click.option(
    '--config', '-c', 'config_file',
    type=click.Path(path_type=Path),
    default=DEFAULT_CREDENTIALS_FILE,
    show_default=True,
    help='Credentials file with username, email and token'
)
@click.option(
    '--settings', '-s',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Optional settings file (API URL, polling, lingo executable, logging)'
)
@click.option(
    '--verbose', '-v',
    count=True,
    help='Increase verbosity (use -v or -vv)'
)
@click.pass_context
def cli(
    ctx: click.Context,
    mode: str,
    owner: str,
    repo: str,
    config_file: Path,
    settings: Optional[Path],
    verbose: int
) -> None:
    """
    Fork OWNER/REPO_NAME, run lingo against a fresh clone of the fork and
    act on the result.

    COMMAND is one of:

    \b
      review   write lingo's review report to the results directory
      rewrite  commit lingo's rewrites and push them to the 'rewrite' branch

    Examples:

    \b
        speedlingo review acme widget
        speedlingo rewrite acme widget -c ~/speedlingo.yaml
    """
    try:
        pipeline_mode = PipelineMode.from_string(mode)
    except UnsupportedModeError as e:
        raise click.UsageError(e.message, ctx=ctx)

    try:
        reset_config_manager()
        config = get_config_manager(settings).get_config()
        setup_logging(create_logger_config(config.logging, verbose))

        credentials = load_credentials(config_file)
        setup_logging(secrets=[credentials.token])

        orchestrator = PipelineOrchestrator(credentials, config)
        result = orchestrator.run(pipeline_mode, owner, repo)

        display_result(result)
    except SpeedlingoError as e:
        click.echo(redact(f"Error: {e}"), err=True)
        if verbose > 1:
            import traceback
            click.echo(redact(traceback.format_exc()), err=True)
        sys.exit(1)
    finally:
        close_logging()

    sys.exit(0)


def create_logger_config(logging_config, verbose: int) -> LoggerConfig:
    """Build the logger configuration, letting -v/-vv override the configured level."""
    level = logging_config.level
    if verbose == 1:
        level = "INFO"
    elif verbose >= 2:
        level = "DEBUG"

    return LoggerConfig(
        level=level,
        file_path=logging_config.file,
        format_string=logging_config.format,
        max_file_size=logging_config.max_file_size,
        backup_count=logging_config.backup_count,
        enable_structured=logging_config.structured
    )


def display_result(result: PipelineResult) -> None:
    """Display the outcome of a pipeline run."""
    click.echo(f"Fork: {result.fork.html_url or result.fork.clone_url}")

    if result.mode is PipelineMode.REVIEW:
        click.echo(f"Review report: {result.report_path}")
    elif result.pushed:
        click.echo(f"Pushed {result.commit_sha[:8]} to branch '{result.branch}'")
    else:
        click.echo(f"No changes to push on branch '{result.branch}'")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
