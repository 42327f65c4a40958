"""Application container wiring configuration, logging, sessions and the engine."""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Dict, Mapping

from pydantic import ValidationError

from engine.orchestrator import RecommendationOrchestrator, RecommendationResult
from logic.validation import RecommendationRequest, RecommendationResponse, validation_failure
from memory.session_store import SessionRegistry
from stylist_app.config import EngineConfig
from stylist_app.logging_config import configure_logging, get_logger, log_event, operation_context

LOGGER = get_logger(__name__)


class StylistApp:
    """Wires together the recommendation engine and its per-user sessions."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or EngineConfig.from_env()
        configure_logging(self.config.log_level)
        self.session_registry = SessionRegistry(
            idle_window_seconds=self.config.idle_window_seconds, clock=clock
        )
        self.orchestrator = RecommendationOrchestrator(
            config=self.config,
            registry=self.session_registry,
            rng=rng,
            clock=clock,
        )

    def recommend(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate an HTTP-style payload and run one recommendation call.

        Returns a ``needs_review`` payload when the envelope itself is invalid;
        malformed inventory entries are only dropped.
        """

        with operation_context("app:recommend") as correlation_id:
            try:
                request = RecommendationRequest.model_validate(dict(payload))
            except ValidationError as exc:
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "app_request_invalid",
                    method="recommend",
                    error_count=len(exc.errors()),
                    correlation_id=correlation_id,
                )
                return validation_failure("Invalid recommendation request payload", exc)

            result: RecommendationResult = self.orchestrator.recommend(
                request.inventory,
                request.profile.to_domain(),
                request.context.to_domain(),
                include_accessories=request.include_accessories,
            )
            response = RecommendationResponse(
                recommendations=[recommendation.to_dict() for recommendation in result.recommendations],
                diagnostics=_public_diagnostics(result.diagnostics),
            )
            log_event(
                LOGGER,
                logging.INFO,
                "app_call_completed",
                method="recommend",
                outfit_count=len(response.recommendations),
                correlation_id=correlation_id,
            )
            return response.model_dump()

    def reset_session(self, profile_id: str) -> bool:
        """Forget the usage history of one user; returns False if none existed."""

        dropped = self.session_registry.drop_session(profile_id)
        log_event(LOGGER, logging.INFO, "session_reset", profile_id=profile_id, existed=dropped is not None)
        return dropped is not None

    def active_sessions(self) -> int:
        return len(self.session_registry)


def _public_diagnostics(diagnostics: Mapping[str, Any]) -> Dict[str, Any]:
    keys = ("reason", "valid_items", "rejected_items", "weather_removed", "ledger_reset", "shortlisted", "returned", "states")
    return {key: diagnostics[key] for key in keys if key in diagnostics}


__all__ = ["StylistApp"]
