import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Any

import uvicorn

from cc_slack.bot.listener import SocketModeListener
from cc_slack.bot.relay import InboundRelay
from cc_slack.config.app import BridgeConfig, load_config, resolve_allowed_user
from cc_slack.hooks.ingestor import HookIngestor
from cc_slack.integrations.slack import SlackClient
from cc_slack.integrations.tmux import TmuxRelay
from cc_slack.servers.http import HTTPServer
from cc_slack.sessions.lifecycle import RegistrySweeper
from cc_slack.sessions.registry import SessionRegistry
from cc_slack.utils.logging import setup_logging

logger = logging.getLogger(__name__)


class BridgeRunner:
    """Runner for the cc-slack daemon."""

    def __init__(self, config: BridgeConfig, verbose: bool = False):
        setup_logging(
            verbose=verbose,
            level=config.logging.level,
            log_file=config.logging.file,
            max_bytes=config.logging.max_size_mb * 1024 * 1024,
            backup_count=config.logging.backup_count,
        )

        config.require_slack()
        self.config = config
        self.verbose = verbose
        self._shutdown_requested = False

        self.registry = SessionRegistry()
        self.sweeper = RegistrySweeper(self.registry, config.sessions)

        self.slack_client = SlackClient(
            token=config.slack.bot_token,
            base_url=config.slack.api_base_url,
            timeout=config.slack.timeout,
        )
        self.ingestor = HookIngestor(
            gateway=self.slack_client,
            channel=config.slack.channel,
            registry=self.registry,
            mention_user_id=config.slack.user_id,
            transcript_delay=config.sessions.transcript_delay_seconds,
        )

        # Socket Mode reply relay (optional)
        self.listener: SocketModeListener | None = None
        if config.slack.bot_enabled:
            allowed_user = resolve_allowed_user(config)
            relay = InboundRelay(
                registry=self.registry,
                terminal=TmuxRelay(config.tmux),
                allowed_user=allowed_user,
            )
            self.listener = SocketModeListener(
                app_token=config.slack.app_token,
                bot_token=config.slack.bot_token,
                relay=relay,
            )

        self.http_server = HTTPServer(
            ingestor=self.ingestor,
            registry=self.registry,
            port=config.port,
            bot_enabled=self.listener is not None,
        )

    def _setup_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, lambda: setattr(self, "_shutdown_requested", True))

    async def run(self) -> None:
        try:
            self._setup_signal_handlers()

            await self.sweeper.start()

            if self.listener:
                await self.listener.start()

            config = uvicorn.Config(
                self.http_server.app,
                host=self.config.host,
                port=self.http_server.port,
                log_level="warning",
                access_log=False,
            )
            server = uvicorn.Server(config)
            server_task = asyncio.create_task(server.serve())
            logger.info(f"listening on {self.config.host}:{self.http_server.port}")

            while not self._shutdown_requested and not server_task.done():
                await asyncio.sleep(0.5)

            # Stop in reverse startup order
            server.should_exit = True
            await server_task

            if self.listener:
                await self.listener.stop()

            await self.sweeper.stop()

        except Exception as e:
            logger.error(f"Fatal error: {e}", exc_info=True)
            sys.exit(1)


async def run_bridge(config: BridgeConfig, verbose: bool = False) -> None:
    runner = BridgeRunner(config, verbose=verbose)
    await runner.run()


def main(
    config_path: Path | None = None,
    verbose: bool = False,
    cli_overrides: dict[str, Any] | None = None,
) -> None:
    try:
        config = load_config(str(config_path) if config_path else None, cli_overrides)
        asyncio.run(run_bridge(config, verbose=verbose))
    except KeyboardInterrupt:
        sys.exit(0)
    except ValueError as e:
        # Configuration problems: missing tokens, invalid values
        print(f"cc-slack: {e}", file=sys.stderr)
        sys.exit(1)
