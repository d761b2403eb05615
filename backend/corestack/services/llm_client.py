"""
Gemini client used by every model-backed operation.

Calls go to a primary model; when the caller allows it, a failed primary call
is retried once against a fallback model. The two calls are made one after the
other, never in parallel.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Union

from google import genai
from google.genai import types

from corestack.exceptions import ModelInvocationError
from corestack.services.settings_loader import (
    get_api_key,
    get_api_key_source,
    get_fallback_model,
    get_model_timeout,
    get_primary_model,
)

logger = logging.getLogger(__name__)

Contents = Union[str, List[Any]]


def image_part(mime_type: str, data: bytes) -> types.Part:
    """Inline image payload for a multimodal request."""
    return types.Part.from_bytes(data=data, mime_type=mime_type)


class GeminiClient:
    """
    Wraps google-genai's generate_content with error normalization and fallback.

    Every failure coming out of the SDK (transport, quota, unsupported input,
    empty response) is raised as ModelInvocationError.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        primary_model: Optional[str] = None,
        fallback_model: Optional[str] = None,
        timeout: Optional[int] = None,
        client: Any = None,
    ):
        self.primary_model = primary_model or get_primary_model()
        self.fallback_model = fallback_model if fallback_model is not None else get_fallback_model()
        self.timeout = timeout or get_model_timeout()
        if client is None:
            client = genai.Client(
                api_key=api_key or get_api_key(),
                http_options=types.HttpOptions(timeout=self.timeout * 1000),
            )
        self._client = client

    def call_model(self, model: str, contents: Contents, json_output: bool = True) -> str:
        """
        Call a single model and return its text.

        Args:
            model: Model name, e.g. "gemini-2.0-flash"
            contents: A prompt string or a list of prompt strings / parts
            json_output: Ask the model for an application/json response

        Returns:
            Raw response text (never empty)
        """
        config = types.GenerateContentConfig(response_mime_type="application/json") if json_output else None
        start_time = time.time()

        try:
            response = self._client.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
            text = response.text
        except Exception as e:
            response_time = time.time() - start_time
            logger.error(f"Error calling model {model} after {response_time:.1f}s: {e}")
            raise ModelInvocationError(f"Model {model} failed: {e}", models=[model]) from e

        response_time = time.time() - start_time
        if not text:
            logger.error(f"Model {model} returned an empty response after {response_time:.1f}s")
            raise ModelInvocationError(f"Model {model} returned an empty response", models=[model])

        logger.info(f"Model {model} responded in {response_time:.1f}s ({len(text)} chars)")
        return text

    def generate(self, contents: Contents, json_output: bool = True, use_fallback: bool = True) -> str:
        """Call the primary model, then the fallback model once if the primary fails."""
        models = [self.primary_model]
        if use_fallback and self.fallback_model and self.fallback_model != self.primary_model:
            models.append(self.fallback_model)

        last_error: Optional[ModelInvocationError] = None
        for idx, model in enumerate(models):
            if idx > 0:
                logger.warning(f"Primary model {models[0]} failed ({last_error}); falling back to {model}")
            try:
                return self.call_model(model, contents, json_output=json_output)
            except ModelInvocationError as e:
                last_error = e

        if len(models) == 1:
            raise last_error
        raise ModelInvocationError(
            f"All models failed ({', '.join(models)}): {last_error}",
            models=models,
        ) from last_error

    def check_models(self, models: List[str], prompt: str = "Test") -> List[Dict[str, Any]]:
        """Minimal live generation against each model, for diagnostics."""
        results = []
        for model in models:
            try:
                self.call_model(model, prompt, json_output=False)
                results.append({"model": model, "ok": True, "error": None})
            except ModelInvocationError as e:
                results.append({"model": model, "ok": False, "error": str(e)})
        return results


def get_llm_client() -> GeminiClient:
    """FastAPI dependency. Raises ConfigurationError when no API key is configured."""
    return GeminiClient(api_key=get_api_key())


def get_optional_llm_client() -> Optional[GeminiClient]:
    """FastAPI dependency for endpoints that report a missing key instead of failing on it."""
    if get_api_key_source() is None:
        return None
    return get_llm_client()
