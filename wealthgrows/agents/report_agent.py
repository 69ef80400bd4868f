"""
AI Report Agent for WealthGrows

CRITICAL BOUNDARIES:

1. The agent ONLY sees the payload built by wealthgrows.reports:
   period figures plus a bounded transaction sample.
2. It NEVER reads the store, and NEVER writes anything.
3. Failures are reported, not papered over: a missing key and a
   service outage raise different errors so the UI can say which.

The LLM is a COMMENTATOR, not a CALCULATOR.
Every number it talks about was computed deterministically beforehand.
"""

from typing import Optional

import google.generativeai as genai
import structlog
from google.api_core import exceptions as google_exceptions
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from wealthgrows.config import GeminiSettings, ReportSettings, get_settings
from wealthgrows.models.report import ReportRequest
from wealthgrows.reports import render_report_payload


# Worth another attempt; anything else fails immediately
TRANSIENT_ERRORS = (
    google_exceptions.ServiceUnavailable,
    google_exceptions.DeadlineExceeded,
    google_exceptions.InternalServerError,
    google_exceptions.TooManyRequests,
)

_PLACEHOLDER_KEYS = {"undefined", "none", "null", "changeme"}


class ReportError(Exception):
    """Base exception for report generation."""
    pass


class MissingCredentialError(ReportError):
    """No usable API key is configured, or the service rejected it."""
    pass


class ReportServiceError(ReportError):
    """The report service failed or returned nothing usable."""
    pass


SYSTEM_INSTRUCTION = """You are a top-tier personal finance steward and a rational spending analyst.

Your persona: rational, sharp, candid to the point of bluntness, but warm. You understand how young people spend:
- They pay for emotional value.
- They should stay wary of consumerism.
- The goal is a sustainable, long-term system for growing wealth.

Your tasks:
1. Give the figures a thorough "health check" and point out the bright spots and the danger zones in the spending.
2. Offer concrete, constructive suggestions for improvement.

Rules:
- Use ONLY the figures provided. Do NOT invent transactions or amounts.
- Investment spending is a savings vehicle, not consumption.
- Format the answer in Markdown.
- Answer in {language}."""


class ReportAgent:
    """
    AI agent producing a narrative review of one period.

    RESPONSIBILITIES:
    - Turn a ReportRequest into a prompt
    - Call Gemini and return the text

    BOUNDARIES:
    - NEVER touches storage
    - NEVER computes figures itself
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        report_settings: Optional[ReportSettings] = None,
        model: Optional[object] = None,
    ):
        """
        Initialize the agent.

        Args:
            settings: Gemini configuration; loaded from the environment if None.
            report_settings: Payload/language configuration.
            model: Pre-built generative model (tests inject a fake here).
        """
        self._settings = settings
        self._report_settings = report_settings or get_settings().report
        self._model = model
        self._logger = structlog.get_logger(__name__)

    def _load_settings(self) -> GeminiSettings:
        """Gemini settings with a usable API key, or MissingCredentialError."""
        if self._settings is None:
            try:
                self._settings = get_settings().gemini
            except ValidationError as e:
                raise MissingCredentialError(
                    "No Gemini API key configured (set GEMINI_API_KEY)"
                ) from e

        key = (self._settings.api_key or "").strip()
        if len(key) < 5 or key.lower() in _PLACEHOLDER_KEYS:
            raise MissingCredentialError(
                "The configured Gemini API key is missing or a placeholder"
            )
        return self._settings

    @property
    def system_instruction(self) -> str:
        return SYSTEM_INSTRUCTION.format(language=self._report_settings.language)

    def _configure_genai(self) -> object:
        """Configure Google Generative AI and build the model (once)."""
        if self._model is None:
            settings = self._load_settings()
            genai.configure(api_key=settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=settings.model_name,
                generation_config={
                    "temperature": settings.temperature,
                    "max_output_tokens": settings.max_tokens,
                },
                system_instruction=self.system_instruction,
            )
        return self._model

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _generate(self, model: object, prompt: str) -> object:
        return await model.generate_content_async(prompt)

    async def generate_report(self, request: ReportRequest) -> str:
        """
        Generate the narrative review for `request`.

        Raises:
            MissingCredentialError: No usable key, or the key was rejected
            ReportServiceError: Network/service failure or empty response
        """
        model = self._configure_genai()
        prompt = render_report_payload(request)

        try:
            response = await self._generate(model, prompt)
        except (
            google_exceptions.Unauthenticated,
            google_exceptions.PermissionDenied,
        ) as e:
            raise MissingCredentialError(f"Gemini rejected the API key: {e}") from e
        except Exception as e:
            if "API_KEY_INVALID" in str(e):
                raise MissingCredentialError(f"Gemini rejected the API key: {e}") from e
            self._logger.error(
                "report_generation_failed",
                request_id=str(request.request_id),
                error=str(e),
            )
            raise ReportServiceError(f"Report service error: {e}") from e

        try:
            text = (response.text or "").strip()
        except ValueError as e:
            # Raised by the SDK when the candidate was blocked
            raise ReportServiceError(f"Report was blocked by the service: {e}") from e

        if not text:
            raise ReportServiceError("Report service returned an empty response")

        return text
