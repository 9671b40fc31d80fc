"""Starlette web adapter exposing the departure board as a JSON API."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import uvicorn
from starlette.applications import Starlette
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

if TYPE_CHECKING:
    from starlette.requests import Request

    from sbb_departures.adapters.config import AppConfig
    from sbb_departures.adapters.web.formatters import DepartureFormatter
    from sbb_departures.adapters.web.pollers import PollingScheduler
    from sbb_departures.domain.ports import PositionEstimator

logger = logging.getLogger(__name__)


class WebAdapter:
    """Serves board state and accepts direction and visibility changes."""

    def __init__(
        self,
        config: AppConfig,
        scheduler: PollingScheduler,
        formatter: DepartureFormatter,
        position_estimator: PositionEstimator,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        """Initialize the web adapter.

        Args:
            config: Application configuration (host and port).
            scheduler: Polling scheduler owning the board state.
            formatter: Formatter for display fields.
            position_estimator: Locates trains along their pass list.
            clock: Source of the current time.
        """
        self.config = config
        self.scheduler = scheduler
        self.formatter = formatter
        self.position_estimator = position_estimator
        self.clock = clock
        self._server: uvicorn.Server | None = None

    def build_app(self) -> Starlette:
        """Create the Starlette application with all routes."""
        return Starlette(
            routes=[
                Route("/api/state", self.get_state, methods=["GET"]),
                Route("/api/direction/toggle", self.toggle_direction, methods=["POST"]),
                Route("/api/visibility", self.set_visibility, methods=["POST"]),
                Route(
                    "/api/journeys/{index:int}/position",
                    self.get_journey_position,
                    methods=["GET"],
                ),
                Route("/healthz", self.healthz, methods=["GET"]),
            ]
        )

    async def get_state(self, _request: Request) -> JSONResponse:
        """Board state with display fields for each journey."""
        snapshot = self.scheduler.snapshot()
        now = self.clock()
        journeys = self.scheduler.state_updater.board_state.journeys
        for wire, journey in zip(snapshot["journeys"], journeys, strict=True):
            wire["display"] = self.formatter.describe(journey, now)
        return JSONResponse(snapshot)

    async def toggle_direction(self, _request: Request) -> JSONResponse:
        direction = await self.scheduler.toggle_direction()
        return JSONResponse({"direction": direction.value})

    async def set_visibility(self, request: Request) -> JSONResponse:
        """Pause or resume polling, body ``{"visible": true|false}``."""
        try:
            body = await request.json()
        except json.JSONDecodeError:
            return JSONResponse({"error": "invalid JSON body"}, status_code=400)

        visible = body.get("visible") if isinstance(body, dict) else None
        if not isinstance(visible, bool):
            return JSONResponse({"error": "'visible' must be a boolean"}, status_code=400)

        await self.scheduler.set_visible(visible)
        return JSONResponse({"visible": visible})

    async def get_journey_position(self, request: Request) -> JSONResponse:
        """Estimated position of the n-th journey on the board."""
        index = request.path_params["index"]
        journeys = self.scheduler.state_updater.board_state.journeys
        if not 0 <= index < len(journeys):
            return JSONResponse({"error": f"no journey at index {index}"}, status_code=404)

        journey = journeys[index]
        now = self.clock()
        position = self.position_estimator.estimate_position(journey.pass_list, now)
        payload: dict[str, Any] = {
            "journey": journey.product_label,
            "isRunning": self.position_estimator.is_running(journey.pass_list, now),
            "position": None,
        }
        if position is not None:
            payload["position"] = {
                "lat": position.lat,
                "lon": position.lon,
                "progress": position.progress,
                "currentStop": position.current_stop,
                "nextStop": position.next_stop,
                "isMoving": position.is_moving,
            }
        return JSONResponse(payload)

    async def healthz(self, _request: Request) -> Response:
        """Health check endpoint for load balancers and monitoring."""
        return Response(content="Ok", media_type="text/plain")

    async def start(self) -> None:
        """Start polling and serve the web API until the server exits."""
        await self.scheduler.start()

        config = uvicorn.Config(
            self.build_app(),
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower(),
        )
        self._server = uvicorn.Server(config)
        logger.info(f"Serving departure board on http://{self.config.host}:{self.config.port}")
        try:
            await self._server.serve()
        finally:
            await self.scheduler.stop()

    async def stop(self) -> None:
        """Ask the web server to shut down."""
        if self._server is not None:
            self._server.should_exit = True
