from pathlib import Path

import pytest

import visual_regression.core.config as config_module  # type: ignore[import]

from tests.helpers.visual_imports import ConfigurationError, CrawlerConfig, Viewport, load_configuration

ENV_KEYS = ["HEADLESS", "CRAWL_CONCURRENCY", "CRAWL_SELECTOR", "NAVIGATION_TIMEOUT_MS"]


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    monkeypatch.setattr(config_module, "load_dotenv", lambda *_args, **_kwargs: False)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_load_configuration_defaults():
    config = load_configuration(" https://example.com/ ")

    assert config.seed_url == "https://example.com/"
    assert config.max_depth == 2
    assert config.max_pages == 20
    assert config.concurrency == 5
    assert config.selector == "body"
    assert config.viewport == Viewport(1200, 800)
    assert config.navigation_timeout_ms == 30_000
    assert config.headless is True
    assert config.config_path == Path("config") / "visual-regression.config.json"


def test_load_configuration_uses_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("HEADLESS", "false")
    monkeypatch.setenv("CRAWL_CONCURRENCY", "2")
    monkeypatch.setenv("CRAWL_SELECTOR", "main")
    monkeypatch.setenv("NAVIGATION_TIMEOUT_MS", "5000")
    config_path = tmp_path / "vr.json"

    config = load_configuration("https://example.com", max_depth=0, max_pages=3, config_path=str(config_path))

    assert config.max_depth == 0
    assert config.max_pages == 3
    assert config.concurrency == 2
    assert config.selector == "main"
    assert config.navigation_timeout_ms == 5000
    assert config.headless is False
    assert config.config_path == config_path


def test_explicit_arguments_override_environment(monkeypatch):
    monkeypatch.setenv("CRAWL_CONCURRENCY", "2")
    monkeypatch.setenv("CRAWL_SELECTOR", "main")

    config = load_configuration("https://example.com", concurrency=8, selector="#app")

    assert config.concurrency == 8
    assert config.selector == "#app"


def test_load_configuration_rejects_non_integer_environment(monkeypatch):
    monkeypatch.setenv("NAVIGATION_TIMEOUT_MS", "soon")

    with pytest.raises(ConfigurationError, match="NAVIGATION_TIMEOUT_MS"):
        load_configuration("https://example.com")


@pytest.mark.parametrize(
    "options",
    [
        {"max_depth": -1},
        {"max_pages": 0},
        {"concurrency": 0},
        {"navigation_timeout_ms": 0},
        {"selector": ""},
    ],
)
def test_validate_rejects_out_of_range_options(options):
    with pytest.raises(ConfigurationError):
        CrawlerConfig(seed_url="https://example.com", **options).validate()


def test_viewport_requires_positive_integers():
    with pytest.raises(ValueError):
        Viewport(0, 800)
    with pytest.raises(ValueError):
        Viewport(1200, True)
