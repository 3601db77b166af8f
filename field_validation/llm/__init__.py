from __future__ import annotations

from .gemini import DEFAULT_GEMINI_MODEL, GeminiClient
from .ollama import OllamaClient

# ---------------------------------------------------------------------------
# CLIENT_REGISTRY: the model clients a Hydra config may name.
#
# _build_model_client() checks the configured _target_ against this set
# before calling hydra.utils.instantiate(), so a config file cannot point
# at arbitrary importable code.
#
# Adding a backend:
#   1. Implement the class (inheriting TextModelClient)
#   2. Import it above
#   3. Add its fully-qualified name to CLIENT_REGISTRY
#   4. Add conf/model/<backend>.yaml
# ---------------------------------------------------------------------------
CLIENT_REGISTRY: frozenset[str] = frozenset(
    {
        "field_validation.llm.gemini.GeminiClient",
        "field_validation.llm.ollama.OllamaClient",
    }
)

__all__ = [
    "CLIENT_REGISTRY",
    "DEFAULT_GEMINI_MODEL",
    "GeminiClient",
    "OllamaClient",
]
