"""Configuration, logging and application wiring tests."""

from pathlib import Path
import io
import json
import logging
import random
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from stylist_app.app import StylistApp
from stylist_app.config import EngineConfig
from stylist_app.logging_config import JsonFormatter, log_event, operation_context, redact_for_log
from stylist_app.observability import instrument_stage

_CONFIG_KEYS = (
    "APP_ENV",
    "APP_CONFIG_PATH",
    "USAGE_CAP",
    "MIN_CONFIDENCE",
    "MAX_RESULTS",
    "RANDOM_SEED",
    "LOG_LEVEL",
    "IDLE_WINDOW_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_config_defaults_match_engine_constants() -> None:
    config = EngineConfig.from_env()
    assert config.usage_cap == 2
    assert config.idle_window_seconds == 300
    assert config.min_confidence == 0.4
    assert (config.shortlist_size, config.max_results) == (8, 6)
    assert (config.max_dress_candidates, config.max_pairings) == (5, 15)
    assert config.random_seed is None
    assert config.environment is None


def test_config_yaml_then_env_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_file = tmp_path / "staging.yaml"
    config_file.write_text(
        "# staging overrides\nusage_cap: 3\nmax_results: \"4\"\nrandom_seed: 99  # fixed\nlog_level: debug\n"
    )
    monkeypatch.setenv("APP_CONFIG_PATH", str(config_file))
    monkeypatch.setenv("MAX_RESULTS", "5")

    config = EngineConfig.from_env()
    assert config.usage_cap == 3
    assert config.max_results == 5
    assert config.random_seed == 99
    assert config.log_level == "DEBUG"


def test_config_env_directory_lookup(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_dir = tmp_path / "environments"
    env_dir.mkdir()
    (env_dir / "prod.yaml").write_text("idle_window_seconds: 600\n")
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("STYLIST_CONFIG_DIR", str(env_dir))

    config = EngineConfig.from_env()
    assert config.idle_window_seconds == 600.0
    assert config.environment == "prod"


def test_config_bad_values_fall_back(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setenv("USAGE_CAP", "lots")
    monkeypatch.setenv("MIN_CONFIDENCE", "-1")
    with caplog.at_level(logging.WARNING):
        config = EngineConfig.from_env()
    assert config.usage_cap == 2
    assert config.min_confidence == 0.4
    assert "usage_cap" in caplog.text


def _capture_json(logger_name: str):
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    logger = logging.getLogger(logger_name)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return logger, handler, stream


def test_log_event_emits_redacted_json() -> None:
    logger, handler, stream = _capture_json("tests.log_event")
    try:
        with operation_context("test", correlation_id="corr-123"):
            log_event(logger, logging.INFO, "recommendation_completed", profile_id="user-9", name="Jane", returned=3)
    finally:
        logger.removeHandler(handler)
    payload = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert payload["event"] == "recommendation_completed"
    assert payload["correlation_id"] == "corr-123"
    assert payload["profile_id"] == "[redacted]"
    assert payload["field_name"] == "[redacted]"
    assert payload["returned"] == 3


def test_redact_for_log_handles_nested_values() -> None:
    scrubbed = redact_for_log({"items": [{"photo_url": "https://x/y.png", "id": "a"}], "note": "mail me@x.io"})
    assert scrubbed["items"][0]["photo_url"] == "[redacted]"
    assert scrubbed["items"][0]["id"] == "a"
    assert scrubbed["note"] == "mail [redacted-email]"


def test_instrument_stage_logs_and_reraises(caplog: pytest.LogCaptureFixture) -> None:
    @instrument_stage("unit")
    def ok() -> int:
        return 1

    @instrument_stage("unit")
    def broken() -> None:
        raise ValueError("nope")

    with caplog.at_level(logging.INFO, logger="stylist_app.observability"):
        assert ok() == 1
        with pytest.raises(ValueError):
            broken()
    events = [getattr(record, "event", None) for record in caplog.records]
    assert "stage_completed" in events
    assert "stage_failed" in events


def test_app_wires_engine_and_sessions() -> None:
    app = StylistApp(config=EngineConfig(), rng=random.Random(0))
    payload = {
        "inventory": [
            {"id": "top", "category": "tops", "color": ["white"], "style": "casual", "occasion": ["casual"]},
            {"id": "bottom", "category": "bottoms", "color": ["black"], "style": "casual", "occasion": ["casual"]},
            {"id": "broken", "category": "tops"},
        ],
        "profile": {"id": "app-user", "preferred_style": "casual"},
        "context": {"occasion": "casual"},
    }
    response = app.recommend(payload)
    assert response["status"] == "ok"
    assert [outfit["id"] for outfit in response["recommendations"]] == ["bottom+top"]
    assert "broken" in response["diagnostics"]["rejected_items"]
    assert app.active_sessions() == 1
    assert app.reset_session("app-user") is True
    assert app.reset_session("app-user") is False


def test_app_forgets_idle_sessions() -> None:
    now = [0.0]
    app = StylistApp(config=EngineConfig(idle_window_seconds=60), rng=random.Random(0), clock=lambda: now[0])
    inventory = [
        {"id": "top", "category": "tops", "color": ["white"], "style": "casual", "occasion": ["casual"]},
        {"id": "bottom", "category": "bottoms", "color": ["black"], "style": "casual", "occasion": ["casual"]},
    ]

    def ask(profile_id: str) -> None:
        app.recommend(
            {
                "inventory": inventory,
                "profile": {"id": profile_id, "preferred_style": "casual"},
                "context": {"occasion": "casual"},
            }
        )

    for profile_id in ("u1", "u2", "u3"):
        ask(profile_id)
    assert app.active_sessions() == 3

    now[0] += 61
    ask("u4")
    assert app.active_sessions() == 1
    assert app.reset_session("u1") is False
    assert app.reset_session("u4") is True


def test_app_returns_review_payload_for_bad_envelope() -> None:
    app = StylistApp(config=EngineConfig())
    response = app.recommend({"inventory": "nope"})
    assert response["status"] == "needs_review"
    assert response["details"]
