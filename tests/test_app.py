from __future__ import annotations

"""
Unit tests for api/app.py.

Model config is a Hydra DictConfig. Tests build it directly with
OmegaConf.create(), without file I/O or network access.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from omegaconf import DictConfig, OmegaConf

from field_validation.api.app import _build_model_client, _configure_logging, create_app
from field_validation.core import FieldValidationPipeline, ResourceLoadError
from field_validation.llm import GeminiClient, OllamaClient

GEMINI_TARGET = "field_validation.llm.gemini.GeminiClient"
OLLAMA_TARGET = "field_validation.llm.ollama.OllamaClient"
UNKNOWN_TARGET = "field_validation.llm.invented.FakeClient"

_CONF_DIR = Path(__file__).resolve().parent.parent / "conf"


def _app_cfg(model: dict | None) -> DictConfig:
    return OmegaConf.create({"model": model or {}})


def _gemini_cfg(**overrides) -> dict:
    cfg = {"_target_": GEMINI_TARGET, "model_id": "gemini-test", "api_key": "test-key"}
    cfg.update(overrides)
    return cfg


# ---------------------------------------------------------------------------
# _configure_logging
# ---------------------------------------------------------------------------

class TestConfigureLogging:
    def test_configure_logging_does_not_raise(self) -> None:
        _configure_logging()


# ---------------------------------------------------------------------------
# _build_model_client
# ---------------------------------------------------------------------------

class TestBuildModelClient:
    def test_builds_gemini_client(self) -> None:
        client = _build_model_client(_app_cfg(_gemini_cfg()))
        assert isinstance(client, GeminiClient)
        assert client.name == "gemini:gemini-test"

    def test_builds_ollama_client(self) -> None:
        client = _build_model_client(
            _app_cfg({"_target_": OLLAMA_TARGET, "model_id": "llama3.1", "host": "http://o.test"})
        )
        assert isinstance(client, OllamaClient)

    def test_unknown_target_raises(self) -> None:
        with pytest.raises(ResourceLoadError, match="Unknown model client"):
            _build_model_client(_app_cfg({"_target_": UNKNOWN_TARGET}))

    def test_missing_model_node_raises(self) -> None:
        with pytest.raises(ResourceLoadError):
            _build_model_client(OmegaConf.create({}))

    def test_empty_model_node_raises(self) -> None:
        with pytest.raises(ResourceLoadError):
            _build_model_client(_app_cfg(None))

    def test_constructor_resource_error_is_unwrapped(self, make_settings) -> None:
        with pytest.raises(ResourceLoadError, match="GEMINI_API_KEY"):
            _build_model_client(_app_cfg(_gemini_cfg(api_key=None)), settings=make_settings())

    def test_settings_are_passed_to_the_client(self, make_settings) -> None:
        settings = make_settings(gemini_api_key="from-settings", request_timeout_s=5)
        client = _build_model_client(_app_cfg(_gemini_cfg(api_key=None)), settings=settings)
        assert client._api_key == "from-settings"
        assert client._timeout_s == 5

    def test_config_values_win_over_settings(self, make_settings) -> None:
        settings = make_settings(gemini_api_key="from-settings")
        client = _build_model_client(_app_cfg(_gemini_cfg(api_key="from-config")), settings=settings)
        assert client._api_key == "from-config"

    def test_bad_constructor_argument_raises_resource_error(self) -> None:
        with pytest.raises(ResourceLoadError, match="Failed to instantiate"):
            _build_model_client(_app_cfg(_gemini_cfg(not_a_parameter=1)))


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

class TestLifespan:
    def test_startup_builds_pipeline(self, make_settings) -> None:
        app = create_app(app_cfg=_app_cfg(_gemini_cfg()), settings=make_settings())
        with TestClient(app) as client:
            assert isinstance(app.state.validation_pipeline, FieldValidationPipeline)
            response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["model"] == "gemini:gemini-test"

    def test_startup_uses_injected_settings_for_the_client(self, make_settings) -> None:
        app = create_app(
            app_cfg=_app_cfg(_gemini_cfg(api_key=None)),
            settings=make_settings(gemini_api_key="injected-key"),
        )
        with TestClient(app):
            client = app.state.validation_pipeline._client
            assert client._api_key == "injected-key"

    def test_startup_fails_when_injected_settings_lack_key(self, make_settings) -> None:
        app = create_app(app_cfg=_app_cfg(_gemini_cfg(api_key=None)), settings=make_settings())
        with pytest.raises(Exception):
            with TestClient(app, raise_server_exceptions=True):
                pass

    def test_startup_fails_without_model_config(self, make_settings) -> None:
        app = create_app(settings=make_settings())
        with pytest.raises(Exception):
            with TestClient(app, raise_server_exceptions=True):
                pass

    def test_startup_fails_on_unknown_target(self, make_settings) -> None:
        app = create_app(app_cfg=_app_cfg({"_target_": UNKNOWN_TARGET}), settings=make_settings())
        with pytest.raises(Exception):
            with TestClient(app, raise_server_exceptions=True):
                pass


# ---------------------------------------------------------------------------
# Shipped Hydra configs
# ---------------------------------------------------------------------------

class TestShippedConfigs:
    @pytest.mark.parametrize("name", ["gemini", "ollama"])
    def test_model_configs_name_registered_clients(self, name: str) -> None:
        from field_validation.llm import CLIENT_REGISTRY

        cfg = OmegaConf.load(_CONF_DIR / "model" / f"{name}.yaml")
        assert cfg["_target_"] in CLIENT_REGISTRY

    def test_default_config_composes(self) -> None:
        from hydra import compose, initialize_config_dir

        with initialize_config_dir(config_dir=str(_CONF_DIR), version_base="1.3"):
            cfg = compose(config_name="config")
        assert cfg.model["_target_"] == GEMINI_TARGET
        assert cfg.model.model_id == "gemini-2.5-flash"
        assert cfg.app.port == 3000


# ---------------------------------------------------------------------------
# main.py
# ---------------------------------------------------------------------------

class TestEntrypoint:
    def test_module_app_is_built_from_default_config(self) -> None:
        import main

        assert main.app.state.app_cfg.model["_target_"] == GEMINI_TARGET
        assert main.app.state.app_cfg.app.port == 3000

    def test_overrides_select_the_ollama_client(self) -> None:
        import main

        cfg = main._load_default_cfg(["model=ollama", "app.port=8080"])
        assert cfg.model["_target_"] == OLLAMA_TARGET
        assert cfg.app.port == 8080
