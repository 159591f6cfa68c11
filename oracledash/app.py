"""
Oracle dashboard application.

Wires the oracle client, view state store, refresh controller and console
renderer together and manages their lifecycle on one asyncio loop.
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import Optional

from .config import DashboardConfig
from .errors import ConfigurationError
from .oracle_client import OracleClient
from .refresh import RefreshController
from .render import ConsoleRenderer
from .snapshot_store import ViewStateStore
from .util import setup_logging

logger = logging.getLogger(__name__)


class DashboardApp:
    """
    Live price dashboard.

    - Startup: validate config, build components, render the fetching state
    - Running: refresh controller publishes, renderer redraws on each publish
    - Shutdown: stop the schedule, close the HTTP session
    """

    def __init__(
        self,
        config: DashboardConfig,
        renderer: Optional[ConsoleRenderer] = None,
        client: Optional[OracleClient] = None,
    ):
        """
        Initialize application.

        Args:
            config: Dashboard configuration
            renderer: Optional renderer (console on stdout if None)
            client: Optional oracle client (built from config if None)
        """
        self._config = config
        self._renderer = renderer
        self._client = client

        self._store: Optional[ViewStateStore] = None
        self._controller: Optional[RefreshController] = None

    def _setup_components(self) -> None:
        """Validate config and initialize all components."""
        cfg = self._config

        errors = cfg.validate()
        if errors:
            for error in errors:
                logger.error(f"Config error: {error}")
            raise ConfigurationError(f"Invalid configuration: {errors}")

        if self._client is None:
            self._client = OracleClient(url=cfg.oracle_url, timeout_s=cfg.fetch_timeout_s)

        if self._renderer is None:
            self._renderer = ConsoleRenderer(cfg.tracked_pairs)

        self._store = ViewStateStore()
        self._controller = RefreshController(
            fetch=self._client.fetch,
            store=self._store,
            pairs=cfg.tracked_pairs,
            period_s=cfg.poll_interval_s,
            explorer_base_url=cfg.explorer_base_url,
            tz=cfg.display_zone(),
        )
        self._controller.add_listener(self._renderer)

        logger.info(f"Dashboard initialized, oracle={cfg.oracle_url}")

    async def run_once(self) -> bool:
        """
        Fetch a single snapshot and render it.

        Returns:
            True if the fetch succeeded
        """
        self._setup_components()
        try:
            published = await self._controller.refresh_once()
            if not published:
                self._renderer.render(self._store.current)
            return published
        finally:
            await self._client.close()

    async def run(self, shutdown_event: Optional[asyncio.Event] = None) -> None:
        """
        Run until shutdown_event is set or SIGINT/SIGTERM arrives.
        """
        self._setup_components()
        stop_event = shutdown_event or asyncio.Event()

        loop = asyncio.get_running_loop()
        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, stop_event.set)
                installed.append(sig)
            except (NotImplementedError, RuntimeError, ValueError):
                # Not on the main thread, or platform without loop signals
                pass

        self._renderer.render(None)
        handle = self._controller.start()

        try:
            await stop_event.wait()
            logger.info("Shutdown requested")
        finally:
            self._controller.stop(handle)
            await self._controller.wait_stopped()
            for sig in installed:
                loop.remove_signal_handler(sig)
            await self._client.close()
            logger.info("Dashboard stopped")

    @property
    def store(self) -> Optional[ViewStateStore]:
        return self._store

    @property
    def controller(self) -> Optional[RefreshController]:
        return self._controller

    def get_stats(self) -> dict:
        """Get application statistics."""
        stats = {
            "oracle_url": self._config.oracle_url,
            "pairs": [p.label for p in self._config.tracked_pairs],
        }
        if self._store:
            stats["store_seq"] = self._store.get_seq()
            stats["has_data"] = self._store.has_data
        if self._controller:
            stats["refresh"] = self._controller.stats
        return stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Live AI price oracle dashboard")
    parser.add_argument("--env-file", help="Load settings from a .env file first")
    parser.add_argument("--once", action="store_true", help="Fetch and render once, then exit")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point."""
    args = build_parser().parse_args(argv)

    try:
        if args.env_file:
            config = DashboardConfig.from_env_file(args.env_file)
        else:
            config = DashboardConfig.from_env()
    except ConfigurationError as e:
        print(f"Config error: {e}", file=sys.stderr)
        sys.exit(2)

    setup_logging("oracledash", args.log_level or config.log_level)

    app = DashboardApp(config)
    try:
        if args.once:
            ok = asyncio.run(app.run_once())
            sys.exit(0 if ok else 1)
        asyncio.run(app.run())
    except ConfigurationError:
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")


if __name__ == "__main__":
    main()
