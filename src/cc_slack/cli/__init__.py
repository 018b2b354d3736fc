"""
cc-slack CLI entry point.
"""

import click

from .notify import notify
from .serve import serve, status


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to custom configuration file",
)
@click.pass_context
def cli(ctx: click.Context, config: str | None) -> None:
    """cc-slack - Claude Code hook notifications in Slack threads."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config


cli.add_command(serve)
cli.add_command(status)
cli.add_command(notify)


def main() -> None:
    cli(obj={})
