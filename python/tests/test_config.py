import importlib

import pytest
from loguru import logger

from dominant_color import config as config_module


@pytest.fixture
def warnings():
    messages: list[str] = []
    logger.enable("dominant_color")
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
    logger.disable("dominant_color")


@pytest.fixture
def reload_config(monkeypatch):
    yield lambda: importlib.reload(config_module)
    monkeypatch.undo()
    importlib.reload(config_module)


def test_defaults(monkeypatch, reload_config) -> None:
    monkeypatch.delenv("DOMINANT_COLOR_MAX_SAMPLES", raising=False)
    monkeypatch.delenv("DOMINANT_COLOR_STRATEGY", raising=False)
    module = reload_config()
    assert module.Config.MAX_SAMPLES == 50_000
    assert module.Config.STRATEGY == "hue"


def test_environment_overrides(monkeypatch, reload_config) -> None:
    monkeypatch.setenv("DOMINANT_COLOR_MAX_SAMPLES", "1234")
    monkeypatch.setenv("DOMINANT_COLOR_STRATEGY", "rgb")
    module = reload_config()
    assert module.config.MAX_SAMPLES == 1234
    assert module.config.STRATEGY == "rgb"


@pytest.mark.parametrize(("strategy", "valid"), [("hue", True), ("rgb", True), ("lab", False), ("", False)])
def test_validate_strategy(strategy, valid) -> None:
    assert config_module.Config.validate_strategy(strategy) is valid


@pytest.mark.parametrize(("max_samples", "valid"), [(1, True), (50_000, True), (0, False), (-5, False), (2.0, False), (True, False)])
def test_validate_max_samples(max_samples, valid) -> None:
    assert config_module.Config.validate_max_samples(max_samples) is valid


def test_strategy_is_case_insensitive(monkeypatch, reload_config) -> None:
    monkeypatch.setenv("DOMINANT_COLOR_STRATEGY", " HUE ")
    assert reload_config().Config.STRATEGY == "hue"


@pytest.mark.parametrize("raw", ["abc", "0", "-10", "1.5"])
def test_bad_max_samples_falls_back(monkeypatch, reload_config, warnings, raw) -> None:
    monkeypatch.setenv("DOMINANT_COLOR_MAX_SAMPLES", raw)
    module = reload_config()
    assert module.Config.MAX_SAMPLES == 50_000
    assert module.Config.validate_max_samples(module.Config.MAX_SAMPLES)
    assert any("DOMINANT_COLOR_MAX_SAMPLES" in m for m in warnings)


def test_bad_strategy_falls_back(monkeypatch, reload_config, warnings) -> None:
    monkeypatch.setenv("DOMINANT_COLOR_STRATEGY", "lab")
    module = reload_config()
    assert module.Config.STRATEGY == "hue"
    assert any("DOMINANT_COLOR_STRATEGY" in m for m in warnings)
