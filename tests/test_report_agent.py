"""
Tests for the AI report agent.

No real API calls: a fake model stands in for genai.GenerativeModel.
"""

import asyncio

import pytest
from google.api_core import exceptions as google_exceptions
from tenacity import wait_none

from conftest import income, make_transaction

from wealthgrows.agents import (
    MissingCredentialError,
    ReportAgent,
    ReportServiceError,
)
from wealthgrows.config import GeminiSettings, ReportSettings
from wealthgrows.queries import calculate_stats
from wealthgrows.reports import build_report_request


class FakeResponse:
    def __init__(self, text=None, blocked=False):
        self._text = text
        self._blocked = blocked

    @property
    def text(self):
        if self._blocked:
            raise ValueError("The response was blocked")
        return self._text


class FakeModel:
    """Records prompts and returns (or raises) a canned outcome."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class ScriptedModel:
    """Returns (or raises) one outcome per call, in order."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def generate_content_async(self, prompt):
        outcome = self.outcomes[self.calls]
        self.calls += 1
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def request_():
    transactions = [income("100"), make_transaction("40", note="groceries")]
    return build_report_request(
        report_type="monthly",
        period_label="2024-01",
        stats=calculate_stats(transactions),
        transactions=transactions,
        sample_size=30,
    )


@pytest.fixture
def gemini_settings():
    return GeminiSettings(api_key="test-key-123456")


def make_agent(model, settings):
    return ReportAgent(
        settings=settings,
        report_settings=ReportSettings(language="English"),
        model=model,
    )


class TestGenerateReport:
    """Tests for ReportAgent.generate_report."""

    def test_returns_model_text(self, request_, gemini_settings):
        model = FakeModel(FakeResponse("## Health check\nLooking good."))
        agent = make_agent(model, gemini_settings)

        text = asyncio.run(agent.generate_report(request_))

        assert text == "## Health check\nLooking good."
        [prompt] = model.prompts
        assert "Report period: 2024-01 (monthly)" in prompt
        assert "groceries" in prompt

    def test_empty_response(self, request_, gemini_settings):
        agent = make_agent(FakeModel(FakeResponse("   ")), gemini_settings)
        with pytest.raises(ReportServiceError, match="empty"):
            asyncio.run(agent.generate_report(request_))

    def test_blocked_response(self, request_, gemini_settings):
        agent = make_agent(FakeModel(FakeResponse(blocked=True)), gemini_settings)
        with pytest.raises(ReportServiceError, match="blocked"):
            asyncio.run(agent.generate_report(request_))

    def test_service_failure(self, request_, gemini_settings):
        agent = make_agent(FakeModel(RuntimeError("connection reset")), gemini_settings)
        with pytest.raises(ReportServiceError, match="connection reset"):
            asyncio.run(agent.generate_report(request_))

    def test_rejected_key(self, request_, gemini_settings):
        agent = make_agent(
            FakeModel(google_exceptions.PermissionDenied("API key not valid")),
            gemini_settings,
        )
        with pytest.raises(MissingCredentialError):
            asyncio.run(agent.generate_report(request_))

    def test_api_key_invalid_message(self, request_, gemini_settings):
        agent = make_agent(
            FakeModel(RuntimeError("400 API_KEY_INVALID")),
            gemini_settings,
        )
        with pytest.raises(MissingCredentialError):
            asyncio.run(agent.generate_report(request_))


class TestCredentials:
    """A missing key is reported before any call is made."""

    @pytest.mark.parametrize("key", ["", "abc", "undefined", "  none  "])
    def test_placeholder_key(self, request_, key):
        agent = make_agent(None, GeminiSettings(api_key=key))
        with pytest.raises(MissingCredentialError):
            asyncio.run(agent.generate_report(request_))

    def test_key_not_configured(self, request_, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        agent = ReportAgent(report_settings=ReportSettings())
        with pytest.raises(MissingCredentialError, match="GEMINI_API_KEY"):
            asyncio.run(agent.generate_report(request_))


class TestSystemInstruction:
    def test_language_is_filled_in(self, gemini_settings):
        agent = ReportAgent(
            settings=gemini_settings,
            report_settings=ReportSettings(language="Chinese"),
            model=FakeModel(FakeResponse("ok")),
        )
        assert "Answer in Chinese." in agent.system_instruction
        assert "{language}" not in agent.system_instruction


class TestRetries:
    """Transient service errors are retried, everything else is not."""

    @pytest.fixture(autouse=True)
    def no_wait(self, monkeypatch):
        monkeypatch.setattr(ReportAgent._generate.retry, "wait", wait_none())

    def test_recovers_after_service_unavailable(self, request_, gemini_settings):
        model = ScriptedModel(
            google_exceptions.ServiceUnavailable("overloaded"),
            FakeResponse("## Review\nRecovered."),
        )
        agent = make_agent(model, gemini_settings)

        text = asyncio.run(agent.generate_report(request_))

        assert text == "## Review\nRecovered."
        assert model.calls == 2

    def test_gives_up_after_three_attempts(self, request_, gemini_settings):
        model = ScriptedModel(*[google_exceptions.DeadlineExceeded("slow")] * 3)
        agent = make_agent(model, gemini_settings)

        with pytest.raises(ReportServiceError, match="slow"):
            asyncio.run(agent.generate_report(request_))
        assert model.calls == 3

    def test_other_errors_fail_immediately(self, request_, gemini_settings):
        model = ScriptedModel(RuntimeError("bad request"), FakeResponse("never"))
        agent = make_agent(model, gemini_settings)

        with pytest.raises(ReportServiceError, match="bad request"):
            asyncio.run(agent.generate_report(request_))
        assert model.calls == 1
