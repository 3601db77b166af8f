from __future__ import annotations


class FieldValidationError(Exception):
    """
    Base for all internal errors.
    Decoding never raises one of these; only the model boundary and
    startup configuration do.
    """


class ModelInvocationError(FieldValidationError):
    """
    Raised when the generative model could not produce an answer:
    network failure, HTTP error status, timeout, etc.
    Wraps the original exception to preserve the full traceback.
    Not recovered inside the pipeline: the HTTP layer turns it into a 500.
    """

    def __init__(self, client_name: str, cause: Exception) -> None:
        self.client_name = client_name
        self.cause = cause
        super().__init__(
            f"Model client '{client_name}' failed: {type(cause).__name__}: {cause}"
        )


class ModelResponseError(ModelInvocationError):
    """
    Raised when the model service answered, but the payload carries no
    completion text (unexpected JSON shape, blocked candidate, etc.).
    """


class ResourceLoadError(FieldValidationError):
    """
    Raised when the service cannot be configured at startup: missing API
    key, unknown model client target, failed client instantiation.

    `cause` is optional. Omit it for configuration errors where there is no
    underlying exception (e.g. registry validation failures).
    """

    def __init__(self, resource: str, cause: Exception | None = None) -> None:
        self.resource = resource
        self.cause = cause
        if cause is not None:
            msg = f"Failed to load resource '{resource}': {type(cause).__name__}: {cause}"
        else:
            msg = f"Resource error: {resource}"
        super().__init__(msg)
