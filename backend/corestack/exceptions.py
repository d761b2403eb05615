"""
Error taxonomy for the prompt-synthesis and style-extraction core.

The core raises these; the HTTP layer in corestack.main maps them to status codes.
"""
from typing import Any, List, Optional


class CoreStackError(Exception):
    """Base class for every failure raised by the core."""

    kind = "core_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(CoreStackError):
    """A required setting (e.g. the LLM credential) is missing."""

    kind = "configuration_error"


class InvalidInput(CoreStackError):
    """A request was rejected before any model call was made."""

    kind = "invalid_input"


class ModelInvocationError(CoreStackError):
    """The model provider call failed (network, quota, empty response...)."""

    kind = "model_invocation_error"

    def __init__(self, message: str, models: Optional[List[str]] = None):
        super().__init__(message)
        self.models = models or []


class MalformedModelOutput(CoreStackError):
    """Model text could not be parsed as JSON after fence stripping."""

    kind = "malformed_model_output"

    def __init__(self, message: str, excerpt: str = ""):
        super().__init__(message)
        self.excerpt = excerpt


class SchemaValidationError(CoreStackError):
    """Parsed model output does not match the required shape."""

    kind = "schema_validation_error"

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []
