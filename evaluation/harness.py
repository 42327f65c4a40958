"""Lightweight evaluation harness for deterministic scenarios."""

from __future__ import annotations

import random
from datetime import date
from typing import Dict, List

from engine.orchestrator import RecommendationOrchestrator
from evaluation.scenarios import EvaluationScenario, SCENARIOS
from memory.usage_ledger import UsageLedger
from stylist_app.config import EngineConfig

EVALUATION_DATE = date(2024, 1, 15)


def _item_ids(outfit: Dict[str, object]) -> List[str]:
    return [str(item.get("id")) for item in outfit.get("items", [])]


def _evaluate_expectations(expectations: Dict[str, object], outfits: List[Dict[str, object]]) -> Dict[str, object]:
    checks: Dict[str, bool] = {}
    checks["min_outfits"] = len(outfits) >= int(expectations.get("min_outfits", 1))
    checks["max_outfits"] = len(outfits) <= 6
    checks["confidence_bounds"] = all(0.0 <= float(outfit["confidence"]) <= 1.0 for outfit in outfits)

    required = expectations.get("required_together")
    if required:
        checks["required_together"] = any(set(required).issubset(_item_ids(outfit)) for outfit in outfits)
    if "min_confidence" in expectations:
        threshold = float(expectations["min_confidence"])
        checks["min_confidence"] = bool(outfits) and all(float(outfit["confidence"]) > threshold for outfit in outfits)
    mentions = expectations.get("reasoning_mentions_any")
    if mentions:
        checks["reasoning_mentions_any"] = any(
            any(term in line.lower() for term in mentions for line in outfit.get("reasoning", []))
            for outfit in outfits
        )
    forbidden = set(expectations.get("forbidden_items", []))
    if forbidden:
        checks["forbidden_items"] = not any(forbidden.intersection(_item_ids(outfit)) for outfit in outfits)
    forbidden_categories = set(expectations.get("forbidden_categories", []))
    if forbidden_categories:
        checks["forbidden_categories"] = not any(
            item.get("category") in forbidden_categories for outfit in outfits for item in outfit.get("items", [])
        )
    for pair in expectations.get("forbidden_pairs", []):
        key = f"forbidden_pair:{'+'.join(pair)}"
        checks[key] = not any(set(pair).issubset(_item_ids(outfit)) for outfit in outfits)
    return {"passed": all(checks.values()), "checks": checks}


def run_scenario(scenario: EvaluationScenario) -> Dict[str, object]:
    orchestrator = RecommendationOrchestrator(
        config=EngineConfig(),
        rng=random.Random(scenario.seed),
        today=EVALUATION_DATE,
    )
    result = orchestrator.recommend(
        scenario.wardrobe_items,
        scenario.profile,
        scenario.context,
        include_accessories=scenario.include_accessories,
        session=UsageLedger(),
    )
    outfits = [recommendation.to_dict() for recommendation in result.recommendations]
    evaluation = _evaluate_expectations(scenario.expectations, outfits)
    return {
        "scenario": scenario.name,
        "passed": evaluation["passed"],
        "checks": evaluation["checks"],
        "outfit_count": len(outfits),
        "outfits": outfits,
        "diagnostics": result.diagnostics,
    }


def run_evaluation_suite() -> List[Dict[str, object]]:
    return [run_scenario(scenario) for scenario in SCENARIOS]


def run_smoke_checks() -> List[str]:
    results = run_evaluation_suite()
    return [f"{result['scenario']}: {'passed' if result['passed'] else 'failed'}" for result in results]


__all__ = ["run_evaluation_suite", "run_scenario", "run_smoke_checks"]
