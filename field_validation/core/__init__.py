from .base import TextModelClient
from .decoder import ResponseDecoder, decode, default_example
from .exceptions import (
    FieldValidationError,
    ModelInvocationError,
    ModelResponseError,
    ResourceLoadError,
)
from .pipeline import FieldValidationPipeline, Observer, PipelineEvent, PipelineTrace, log_event
from .prompt_builder import BuiltPrompt, PromptBuilder, PromptContext, build_context, build_prompt

__all__ = [
    "BuiltPrompt",
    "FieldValidationError",
    "FieldValidationPipeline",
    "ModelInvocationError",
    "ModelResponseError",
    "Observer",
    "PipelineEvent",
    "PipelineTrace",
    "PromptBuilder",
    "PromptContext",
    "ResourceLoadError",
    "ResponseDecoder",
    "TextModelClient",
    "build_context",
    "build_prompt",
    "decode",
    "default_example",
    "log_event",
]
