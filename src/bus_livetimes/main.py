"""Main entry point: checks the configured arrival alerts once."""

import asyncio
import logging
import sys

import aiohttp

from bus_livetimes.adapters.config import AlertConfigurationLoader, AppConfig
from bus_livetimes.adapters.in_memory_alert_store import InMemoryAlertStore
from bus_livetimes.adapters.notifiers import LoggingAlertNotifier
from bus_livetimes.adapters.tracker.authority_rules import rules_for_authority
from bus_livetimes.adapters.tracker.factory import create_tracker_endpoint
from bus_livetimes.application.services import AlertEvaluator, ArrivalAlertChecker

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()

    try:
        config.load_tracker_overrides()
        alerts = AlertConfigurationLoader.load(config)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    if not alerts:
        logger.error("No arrival alerts configured.")
        logger.error("Add [[alerts]] entries to the file named by BUS_LIVETIMES_CONFIG_FILE.")
        sys.exit(1)

    logger.info(f"Loaded {len(alerts)} arrival alert(s)")

    async with aiohttp.ClientSession() as session:
        try:
            endpoint = create_tracker_endpoint(config, session)
        except ValueError as e:
            logger.error(f"Invalid tracker configuration: {e}")
            sys.exit(1)

        checker = ArrivalAlertChecker(
            tracker_endpoint=endpoint,
            alert_store=InMemoryAlertStore(alerts),
            notifier=LoggingAlertNotifier(),
            evaluator=AlertEvaluator(
                rules_for_authority(config.authority, config.night_service_colour)
            ),
        )
        try:
            await checker.check_alerts()
        except KeyboardInterrupt:
            logger.info("Shutting down...")
            checker.cancel()


if __name__ == "__main__":
    asyncio.run(main())
