"""Text-generation backends behind the generation gateway.

A backend is anything with `generate_text(prompt) -> str`. The hosted Gemini
backend is the default; a local Hugging Face model can be selected with
`GENERATOR_BACKEND=local`.
"""

import logging
from typing import Protocol

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from blog_generator.config import Settings
from blog_generator.errors import AuthError, RateLimitError, UpstreamError

logger = logging.getLogger(__name__)


class TextBackend(Protocol):
    name: str

    def generate_text(self, prompt: str) -> str:
        ...


class GeminiBackend:
    """Hosted Gemini model via `google-generativeai`."""

    name = "gemini"

    def __init__(self, api_key: str, model_name: str = "gemini-1.5-flash", timeout: float = 60.0):
        if not api_key:
            raise AuthError("Gemini API key not configured")
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.timeout = timeout
        self.model = genai.GenerativeModel(model_name=model_name)

    def generate_text(self, prompt: str) -> str:
        try:
            response = self.model.generate_content(
                prompt,
                request_options={"timeout": self.timeout},
            )
        except (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied) as exc:
            raise AuthError("Invalid API key configuration") from exc
        except google_exceptions.ResourceExhausted as exc:
            raise RateLimitError("API quota exceeded. Please try again later.") from exc
        except google_exceptions.DeadlineExceeded as exc:
            raise UpstreamError("Text generation timed out. Please try again.") from exc

        try:
            return response.text or ""
        except ValueError:
            # `.text` raises when the candidate was blocked or has no parts.
            logger.warning("Gemini returned no text parts for model %s", self.model_name)
            return ""


def build_backend(settings: Settings) -> TextBackend:
    """Instantiate the backend selected by `GENERATOR_BACKEND`."""
    if settings.GENERATOR_BACKEND == "local":
        from blog_generator.local_model import LocalModelBackend

        return LocalModelBackend(model_name_or_path=settings.MODEL_PATH)
    return GeminiBackend(
        api_key=settings.GEMINI_API_KEY,
        model_name=settings.GEMINI_MODEL,
        timeout=settings.REQUEST_TIMEOUT,
    )
