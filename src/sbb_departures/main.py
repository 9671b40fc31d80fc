"""Main entry point for the SBB departures application."""

import asyncio
import logging
import sys
from collections.abc import Callable

import aiohttp
from pydantic import ValidationError

from sbb_departures.adapters.config import AppConfig
from sbb_departures.adapters.ojp_api import OjpHttpClient, OjpStationboardRepository
from sbb_departures.adapters.transport_api import (
    TransportHttpClient,
    TransportRouteRepository,
    TransportStationboardRepository,
)
from sbb_departures.adapters.web import WebAdapter
from sbb_departures.adapters.web.formatters import DepartureFormatter
from sbb_departures.adapters.web.pollers import PollingScheduler
from sbb_departures.adapters.web.state import BoardState
from sbb_departures.adapters.web.updaters import StateUpdater
from sbb_departures.application.services import (
    AggregatorSettings,
    ConnectionMatcher,
    RetryPolicy,
    ScheduleAggregator,
    TrainPositionEstimator,
)
from sbb_departures.domain.errors import ConfigurationError
from sbb_departures.domain.models import Direction
from sbb_departures.domain.models.corridor import CorridorRoute
from sbb_departures.domain.ports import RouteRepository, StationboardRepository

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def build_aggregator_factory(
    config: AppConfig,
    stationboard_repository: StationboardRepository,
    route_repository: RouteRepository,
    state_updater: StateUpdater,
) -> Callable[[Direction], ScheduleAggregator]:
    """Create a factory producing a fresh aggregator per direction."""
    settings = AggregatorSettings(
        origin_board_limit=config.origin_board_limit,
        transfer_board_limit_full=config.transfer_board_limit_full,
        transfer_board_limit_quick=config.transfer_board_limit_quick,
        route_limit=config.route_limit,
        max_cached_quick_cycles=config.max_cached_quick_cycles,
    )
    retry_policy = RetryPolicy(
        base_seconds=config.retry_base_seconds,
        max_delay_seconds=config.retry_max_delay_seconds,
        max_attempts=config.max_retries,
    )

    def create(direction: Direction) -> ScheduleAggregator:
        route = CorridorRoute.for_direction(direction)
        return ScheduleAggregator(
            direction,
            stationboard_repository,
            route_repository,
            state_updater,
            settings=settings,
            matcher=ConnectionMatcher(
                transfer_station=route.transfer,
                min_transfer_minutes=config.min_transfer_minutes,
            ),
            retry_policy=retry_policy,
        )

    return create


async def main() -> None:
    """Main application entry point."""
    try:
        config = AppConfig()
    except ValidationError as e:
        configure_logging("INFO")
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    configure_logging(config.log_level)

    # Create aiohttp session for efficient HTTP connections
    async with aiohttp.ClientSession() as session:
        transport_client = TransportHttpClient(
            session, config.transport_api_base_url, config.api_timeout_seconds
        )
        category_repository = TransportStationboardRepository(transport_client)
        route_repository = TransportRouteRepository(transport_client)

        try:
            ojp_client = OjpHttpClient(
                session,
                config.require_ojp_api_key(),
                endpoint=config.ojp_endpoint,
                requestor_ref=config.ojp_requestor_ref,
                timeout_seconds=config.api_timeout_seconds,
            )
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            logger.error("Set OJP_API_KEY in the environment or in your .env file.")
            sys.exit(1)

        stationboard_repository = OjpStationboardRepository(ojp_client, category_repository)

        state_updater = StateUpdater(BoardState())
        scheduler = PollingScheduler(
            build_aggregator_factory(
                config, stationboard_repository, route_repository, state_updater
            ),
            state_updater,
            quick_interval_seconds=config.quick_refresh_seconds,
            full_interval_seconds=config.full_refresh_seconds,
        )

        web_adapter = WebAdapter(
            config,
            scheduler,
            DepartureFormatter(config),
            TrainPositionEstimator(),
        )

        logger.info("Starting SBB departures board (Muhen - Aarau - Zürich HB)")
        try:
            await web_adapter.start()
        except KeyboardInterrupt:
            logger.info("Shutting down...")
        finally:
            await web_adapter.stop()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
