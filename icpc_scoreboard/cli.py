"""Command-line interface for icpc_scoreboard."""

import click

from .config import configure_logging, load_config
from .protocol import run_session


@click.command()
@click.version_option(version="1.0.0")
@click.argument("commands", type=click.File("r"), default="-")
@click.option(
    "--log-level",
    default=None,
    help="Diagnostic log level (stderr). Defaults to ICPC_SCOREBOARD_LOG_LEVEL or WARNING.",
)
@click.option(
    "--strict/--lenient",
    default=None,
    help="Abort on malformed command lines instead of skipping them.",
)
def cli(commands, log_level, strict):
    """Run a scoreboard session over COMMANDS (a file, or stdin by default)."""
    try:
        config = load_config(log_level=log_level, strict=strict)
    except ValueError as e:
        raise click.BadParameter(str(e))
    configure_logging(config)

    try:
        for line in run_session(commands, strict=config.strict):
            click.echo(line)
    except ValueError as e:
        raise click.UsageError(str(e))


def main():
    cli()


if __name__ == "__main__":
    main()
