"""
Daemon commands.
"""

from pathlib import Path
from typing import Any

import click
import httpx

from cc_slack.config.app import load_config


@click.command()
@click.option("--port", "-p", type=int, default=None, help="Hook server listen port")
@click.option("--host", type=str, default=None, help="Hook server bind address")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose debug output",
)
@click.pass_context
def serve(ctx: click.Context, port: int | None, host: str | None, verbose: bool) -> None:
    """Run the hook server (and the Slack reply relay when an app token is set)."""
    from cc_slack.runner import main as run_main

    config_path = ctx.obj.get("config_path")
    overrides: dict[str, Any] = {"port": port, "host": host}
    run_main(
        config_path=Path(config_path) if config_path else None,
        verbose=verbose,
        cli_overrides=overrides,
    )


@click.command()
@click.option("--port", "-p", type=int, default=None, help="Hook server port")
@click.pass_context
def status(ctx: click.Context, port: int | None) -> None:
    """Show whether the hook server is running."""
    try:
        config = load_config(ctx.obj.get("config_path"), {"port": port})
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    url = f"http://127.0.0.1:{config.port}/health"
    try:
        response = httpx.get(url, timeout=2.0)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        click.echo(f"cc-slack is not running on port {config.port} ({e})", err=True)
        ctx.exit(1)

    click.echo(f"cc-slack {data.get('version', '?')} running on port {config.port}")
    click.echo(f"  Threaded sessions: {data.get('sessions', 0)}")
    click.echo(f"  Reply relay: {'enabled' if data.get('bot_enabled') else 'disabled'}")
