"""
Starts the Field Validation Assistant on port 3000 by default.

    python main.py                                    # Gemini, reads GEMINI_API_KEY
    python main.py model=ollama model.model_id=llama3.1
    python main.py app.port=8080 model.temperature=0.2

`uvicorn main:app` serves the same app built from conf/config.yaml as-is;
command-line overrides only apply to `python main.py`.
"""
from __future__ import annotations

from pathlib import Path

import hydra
import uvicorn
from omegaconf import DictConfig

from field_validation.api.app import create_app

CONF_DIR = Path(__file__).parent / "conf"


def _load_default_cfg(overrides: list[str] | None = None) -> DictConfig:
    """Compose conf/config.yaml outside @hydra.main."""
    from hydra import compose, initialize_config_dir  # noqa: PLC0415

    with initialize_config_dir(config_dir=str(CONF_DIR), version_base="1.3"):
        return compose(config_name="config", overrides=overrides or [])


app = create_app(app_cfg=_load_default_cfg())


@hydra.main(config_path="conf", config_name="config", version_base="1.3")
def _hydra_main(cfg: DictConfig) -> None:
    server = cfg.get("app", {})
    uvicorn.run(
        create_app(app_cfg=cfg),
        host=server.get("host", "0.0.0.0"),
        port=server.get("port", 3000),
        log_level=server.get("log_level", "info"),
    )


if __name__ == "__main__":  # pragma: no cover
    _hydra_main()
