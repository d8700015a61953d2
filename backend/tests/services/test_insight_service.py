"""Tests for the ordered-provider insight service."""
import pytest

from models.preference import Preference
from services.exceptions import AllProvidersFailedError, UpstreamError
from services.insight_service import InsightService, build_messages


class StubProvider:
    """Provider returning a canned answer or raising a canned error."""

    def __init__(self, name: str, text: str | None = None, status: int = 500) -> None:
        self.name = name
        self._text = text
        self._status = status
        self.calls: list[list[dict[str, str]]] = []

    async def generate(self, messages: list[dict[str, str]]) -> str:
        self.calls.append(messages)
        if self._text is None:
            raise UpstreamError("Stub", "failed", status=self._status, details={"model": self.name})
        return self._text


def test__build_messages__uses_preferences() -> None:
    pref = Preference(user_id=1, assets=["DOGE"], investor_type="Degen", content=["ai"])

    messages = build_messages(pref)

    assert messages[0]["role"] == "system"
    assert "Risk note" in messages[0]["content"]
    assert messages[1]["content"] == (
        "Give today's crypto market insight tailored to: "
        "InvestorType=Degen, Assets=DOGE. Mention a risk note."
    )


def test__build_messages__defaults_without_preferences() -> None:
    content = build_messages(None)[1]["content"]

    assert "InvestorType=General" in content
    assert "Assets=BTC, ETH" in content


async def test__generate__first_success_wins() -> None:
    first = StubProvider("a", text="from a")
    second = StubProvider("b", text="from b")

    insight = await InsightService([first, second]).generate(None)

    assert insight.text == "from a"
    assert insight.model == "a"
    assert second.calls == []


async def test__generate__tries_providers_in_order() -> None:
    providers = [StubProvider("a"), StubProvider("b"), StubProvider("c", text="from c")]

    insight = await InsightService(providers).generate(None)

    assert insight.model == "c"
    assert all(len(p.calls) == 1 for p in providers)


async def test__generate__all_fail_reports_last_error() -> None:
    providers = [StubProvider("a", status=503), StubProvider("b", status=429)]

    with pytest.raises(AllProvidersFailedError) as exc_info:
        await InsightService(providers).generate(None)

    assert exc_info.value.tried == ["a", "b"]
    assert exc_info.value.last_model == "b"
    assert exc_info.value.last_error.status == 429
