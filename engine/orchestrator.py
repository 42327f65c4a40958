"""Recommendation orchestrator: filter, generate, score, rank and remember."""

from __future__ import annotations

import logging
import random
import threading
import time
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from logic.compatibility import FilteringResult, filter_by_weather
from logic.outfit_builder import CombinationResult, generate_combinations, group_by_category
from logic.outfit_scoring import build_recommendation
from logic.validation import StyleContextPayload, StyleProfilePayload, coerce_inventory
from memory.session_store import SessionRegistry
from memory.usage_ledger import UsageLedger
from models.wardrobe_item import OutfitRecommendation, StyleContext, StyleProfile, WardrobeItem, WeatherData
from stylist_app.config import EngineConfig
from stylist_app.logging_config import get_logger, log_event, operation_context
from stylist_app.observability import instrument_stage

LOGGER = get_logger(__name__)

DIVERSITY_TIE_BAND = 0.1


class EngineState(str, Enum):
    IDLE = "idle"
    FILTERING = "filtering"
    GENERATING = "generating"
    SCORING = "scoring"
    RANKING = "ranking"
    DONE = "done"


@dataclass(frozen=True)
class RecommendationResult:
    recommendations: List[OutfitRecommendation]
    diagnostics: Dict[str, object] = field(default_factory=dict)
    state: EngineState = EngineState.DONE


def compare_recommendations(a: OutfitRecommendation, b: OutfitRecommendation) -> int:
    """Order by diversity descending; within the tie band, by confidence descending."""

    if abs(a.diversity - b.diversity) >= DIVERSITY_TIE_BAND:
        return -1 if a.diversity > b.diversity else 1
    if a.confidence != b.confidence:
        return -1 if a.confidence > b.confidence else 1
    return 0


def rank_recommendations(recommendations: Iterable[OutfitRecommendation]) -> List[OutfitRecommendation]:
    return sorted(recommendations, key=cmp_to_key(compare_recommendations))


def select_shortlist(
    ranked: Sequence[OutfitRecommendation],
    usage: Mapping[str, int],
    usage_cap: int,
    size: int,
) -> List[OutfitRecommendation]:
    """Take the best ``size`` distinct outfits without pushing any item past the cap."""

    accepted: List[OutfitRecommendation] = []
    seen = set()
    appearances: Counter = Counter()
    for recommendation in ranked:
        if len(accepted) >= size:
            break
        if recommendation.id in seen:
            continue
        if any(usage.get(item.id, 0) + appearances[item.id] >= usage_cap for item in recommendation.items):
            continue
        accepted.append(recommendation)
        seen.add(recommendation.id)
        appearances.update(item.id for item in recommendation.items)
    return accepted


ProfileInput = Union[StyleProfile, Mapping[str, Any], None]
ContextInput = Union[StyleContext, Mapping[str, Any], None]


class RecommendationOrchestrator:
    """Public entry point of the engine.

    Each call walks ``IDLE -> FILTERING -> GENERATING -> SCORING -> RANKING ->
    DONE``. The only state kept between calls is the usage ledger, either the
    one passed in as ``session`` or the profile's ledger from the registry.
    Failures never escape: any exception ends the call with an empty result.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        registry: SessionRegistry | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        today: Optional[date] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.registry = registry if registry is not None else SessionRegistry(
            idle_window_seconds=self.config.idle_window_seconds, clock=clock
        )
        self.rng = rng or random.Random(self.config.random_seed)
        self.today = today
        self._local = threading.local()

    @property
    def state(self) -> EngineState:
        return getattr(self._local, "state", EngineState.IDLE)

    def _enter(self, state: EngineState, diagnostics: Dict[str, object]) -> None:
        self._local.state = state
        diagnostics.setdefault("states", []).append(state.value)

    def generate_recommendations(
        self,
        inventory: Optional[Iterable[Any]],
        profile: ProfileInput,
        context: ContextInput,
        include_accessories: bool = False,
        session: UsageLedger | None = None,
    ) -> List[OutfitRecommendation]:
        return self.recommend(inventory, profile, context, include_accessories, session).recommendations

    def recommend(
        self,
        inventory: Optional[Iterable[Any]],
        profile: ProfileInput,
        context: ContextInput,
        include_accessories: bool = False,
        session: UsageLedger | None = None,
    ) -> RecommendationResult:
        """Run one recommendation call and return the outfits with diagnostics."""

        with operation_context("engine.recommend") as correlation_id:
            diagnostics: Dict[str, object] = {"correlation_id": correlation_id}
            try:
                result = self._run(inventory, profile, context, include_accessories, session, diagnostics)
            except Exception as exc:  # noqa: BLE001
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "recommendation_failed",
                    error=type(exc).__name__,
                    exc_info=True,
                )
                diagnostics["error"] = type(exc).__name__
                self._enter(EngineState.DONE, diagnostics)
                result = RecommendationResult(recommendations=[], diagnostics=diagnostics)
            self._local.state = EngineState.IDLE
            return result

    def _empty(self, reason: str, diagnostics: Dict[str, object]) -> RecommendationResult:
        diagnostics["reason"] = reason
        self._enter(EngineState.DONE, diagnostics)
        log_event(LOGGER, logging.INFO, "recommendation_empty", reason=reason)
        return RecommendationResult(recommendations=[], diagnostics=diagnostics)

    def _run(
        self,
        inventory: Optional[Iterable[Any]],
        profile: ProfileInput,
        context: ContextInput,
        include_accessories: bool,
        session: UsageLedger | None,
        diagnostics: Dict[str, object],
    ) -> RecommendationResult:
        self._enter(EngineState.IDLE, diagnostics)
        style_profile = _resolve_profile(profile)
        if style_profile is None or not style_profile.preferred_style:
            return self._empty("invalid_profile", diagnostics)
        style_context = _resolve_context(context)
        if style_context is None or not style_context.occasion:
            return self._empty("invalid_context", diagnostics)

        coercion = coerce_inventory(inventory)
        diagnostics["valid_items"] = len(coercion.items)
        diagnostics["rejected_items"] = coercion.rejected
        if not coercion.items:
            return self._empty("empty_inventory", diagnostics)

        ledger = session if session is not None else self.registry.get_ledger(style_profile.id)
        # Calls sharing a ledger are serialized from touch() through record().
        with ledger.lock:
            diagnostics["ledger_reset"] = ledger.touch()
            return self._run_with_ledger(
                coercion.items, style_profile, style_context, include_accessories, ledger, diagnostics
            )

    def _run_with_ledger(
        self,
        items: List[WardrobeItem],
        style_profile: StyleProfile,
        style_context: StyleContext,
        include_accessories: bool,
        ledger: UsageLedger,
        diagnostics: Dict[str, object],
    ) -> RecommendationResult:
        usage = ledger.snapshot()

        self._enter(EngineState.FILTERING, diagnostics)
        filtered = self._filter(items, style_context.weather)
        diagnostics["weather_removed"] = filtered.removed
        if not filtered.items:
            return self._empty("no_weather_appropriate_items", diagnostics)

        self._enter(EngineState.GENERATING, diagnostics)
        combinations = self._generate(
            filtered.items, style_profile, style_context, include_accessories, usage
        )
        diagnostics["generation"] = combinations.diagnostics
        if not combinations.outfits:
            return self._empty("no_candidates", diagnostics)

        self._enter(EngineState.SCORING, diagnostics)
        scored = self._score(combinations.outfits, style_profile, style_context, usage, diagnostics)
        if not scored:
            return self._empty("no_confident_candidates", diagnostics)

        self._enter(EngineState.RANKING, diagnostics)
        shortlist = self._rank(scored, usage)
        for recommendation in shortlist:
            ledger.record(recommendation.items)
        results = shortlist[: self.config.max_results]
        diagnostics["shortlisted"] = len(shortlist)
        diagnostics["returned"] = len(results)

        self._enter(EngineState.DONE, diagnostics)
        log_event(
            LOGGER,
            logging.INFO,
            "recommendation_completed",
            profile_id=style_profile.id,
            occasion=style_context.occasion,
            returned=len(results),
            candidates=len(combinations.outfits),
        )
        return RecommendationResult(recommendations=results, diagnostics=diagnostics)

    @instrument_stage("filtering")
    def _filter(self, items: List[WardrobeItem], weather: Optional[WeatherData]) -> FilteringResult:
        result = filter_by_weather(items, weather)
        for item_id, reason in result.removed.items():
            LOGGER.info("Weather filter removed %s: %s", item_id, reason)
        return result

    @instrument_stage("generating")
    def _generate(
        self,
        items: List[WardrobeItem],
        profile: StyleProfile,
        context: StyleContext,
        include_accessories: bool,
        usage: Mapping[str, int],
    ) -> CombinationResult:
        return generate_combinations(
            group_by_category(items),
            occasion=context.occasion,
            preferred_style=profile.preferred_style,
            include_accessories=include_accessories,
            weather=context.weather,
            usage=usage,
            rng=self.rng,
            usage_cap=self.config.usage_cap,
            max_dress_candidates=self.config.max_dress_candidates,
            max_pairings=self.config.max_pairings,
        )

    @instrument_stage("scoring")
    def _score(
        self,
        outfits: List[List[WardrobeItem]],
        profile: StyleProfile,
        context: StyleContext,
        usage: Mapping[str, int],
        diagnostics: Dict[str, object],
    ) -> List[OutfitRecommendation]:
        kept: List[OutfitRecommendation] = []
        failures = 0
        below_threshold = 0
        for outfit in outfits:
            try:
                recommendation = build_recommendation(outfit, profile, context, usage, today=self.today)
            except Exception:  # noqa: BLE001
                failures += 1
                LOGGER.warning("Dropping candidate %s after scoring failure", [item.id for item in outfit], exc_info=True)
                continue
            if recommendation.confidence <= self.config.min_confidence:
                below_threshold += 1
                continue
            kept.append(recommendation)
        diagnostics["scored"] = len(outfits) - failures
        diagnostics["scoring_failures"] = failures
        diagnostics["below_threshold"] = below_threshold
        return kept

    @instrument_stage("ranking")
    def _rank(self, scored: List[OutfitRecommendation], usage: Mapping[str, int]) -> List[OutfitRecommendation]:
        return select_shortlist(
            rank_recommendations(scored),
            usage,
            usage_cap=self.config.usage_cap,
            size=self.config.shortlist_size,
        )


def _resolve_profile(profile: ProfileInput) -> Optional[StyleProfile]:
    if profile is None or isinstance(profile, StyleProfile):
        return profile
    try:
        return StyleProfilePayload.model_validate(dict(profile)).to_domain()
    except (ValidationError, TypeError, ValueError) as exc:
        LOGGER.info("Rejected style profile: %s", str(exc).splitlines()[0])
        return None


def _resolve_context(context: ContextInput) -> Optional[StyleContext]:
    if context is None or isinstance(context, StyleContext):
        return context
    try:
        return StyleContextPayload.model_validate(dict(context)).to_domain()
    except (ValidationError, TypeError, ValueError) as exc:
        LOGGER.info("Rejected style context: %s", str(exc).splitlines()[0])
        return None


def generate_recommendations(
    inventory: Optional[Iterable[Any]],
    profile: ProfileInput,
    context: ContextInput,
    include_accessories: bool = False,
    session: UsageLedger | None = None,
    rng: random.Random | None = None,
) -> List[OutfitRecommendation]:
    """One-shot entry point; pass ``session`` to carry usage across calls."""

    orchestrator = RecommendationOrchestrator(rng=rng)
    return orchestrator.generate_recommendations(inventory, profile, context, include_accessories, session)


__all__ = [
    "EngineState",
    "RecommendationResult",
    "RecommendationOrchestrator",
    "compare_recommendations",
    "rank_recommendations",
    "select_shortlist",
    "generate_recommendations",
]
