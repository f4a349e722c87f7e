"""Main entry point for the Now Departing favorites runner."""

import asyncio
import logging
import signal
import sys

import aiohttp

from now_departing.adapters.config import AppConfig, FavoritesLoader
from now_departing.adapters.display import LogDisplayAdapter
from now_departing.adapters.favorites import InMemoryFavoritesStore
from now_departing.adapters.transit_api import HttpArrivalRepository
from now_departing.application import (
    FavoritesCoordinator,
    FavoritesScreenController,
    LoopScheduler,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _install_lifecycle_signals(
    loop: asyncio.AbstractEventLoop, controller: FavoritesScreenController
) -> None:
    """Map SIGUSR1/SIGUSR2 to background/foreground for headless testing."""
    try:
        loop.add_signal_handler(signal.SIGUSR1, controller.on_background)
        loop.add_signal_handler(signal.SIGUSR2, controller.on_foreground)
    except (NotImplementedError, AttributeError):
        logger.info("Lifecycle signals not supported on this platform")


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()
    configure_logging(config.log_level)

    try:
        favorites = FavoritesLoader.load(config)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid favorites configuration: {e}")
        sys.exit(1)

    if not favorites:
        logger.warning("No favorites configured. Add [[favorites]] tables to your favorites file.")

    logger.info(
        f"Loaded {len(favorites)} favorite(s); polling every "
        f"{config.foreground_interval_seconds}s in foreground, "
        f"{config.background_interval_seconds or 'never'}s in background"
    )

    scheduler = LoopScheduler()
    store = InMemoryFavoritesStore(favorites)

    async with aiohttp.ClientSession() as session:
        repository = HttpArrivalRepository(
            session, config.api_base_url, timeout_seconds=config.api_timeout_seconds
        )
        coordinator = FavoritesCoordinator(
            repository,
            scheduler,
            policy=config.poll_interval_policy(),
            stagger_seconds=config.stagger_seconds,
        )
        coordinator.add_listener(LogDisplayAdapter())
        controller = FavoritesScreenController(coordinator, store)
        _install_lifecycle_signals(asyncio.get_running_loop(), controller)

        controller.on_view_became_visible()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            logger.info("Shutting down...")
            raise
        finally:
            controller.close()
            await scheduler.shutdown()


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
