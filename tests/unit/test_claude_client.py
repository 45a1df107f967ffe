from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from review_radar.adapters.claude_client import ClaudeClient, parse_suggestions
from review_radar.utils.logger import NullLayerLogger


def fake_response(text: str) -> SimpleNamespace:
    return SimpleNamespace(
        content=[SimpleNamespace(text=text)],
        usage=SimpleNamespace(input_tokens=120, output_tokens=40),
    )


def configured_client(text: str) -> ClaudeClient:
    client = ClaudeClient(api_key="test-key", logger=NullLayerLogger())
    client.client = MagicMock()
    client.client.messages.create = AsyncMock(return_value=fake_response(text))
    return client


def test_parse_suggestions_validates_entries() -> None:
    raw = [
        {"platform": "best buy", "rating": 4.4, "reviewCount": "2,031", "url": "https://www.bestbuy.com/x"},
        {"platform": "Target", "rating": "4.1", "reviewCount": 88},
        {"platform": "Walmart", "rating": 6.2, "reviewCount": 10},
        {"platform": "Newegg", "rating": 4.0, "reviewCount": "lots"},
        {"rating": 4.0, "reviewCount": 10},
        "not a dict",
    ]
    observations = parse_suggestions(raw)
    assert [o.platform for o in observations] == ["Best Buy", "Target"]
    assert observations[0].review_count == 2031
    assert observations[0].trust_weight == 8.0
    assert observations[0].verified is False
    assert observations[1].rating == 4.1


def test_parse_suggestions_drops_platforms_not_asked_about() -> None:
    raw = [
        {"platform": "Walmart", "rating": 4.0, "reviewCount": 10},
        {"platform": "Costco", "rating": 4.0, "reviewCount": 10},
    ]
    assert [o.platform for o in parse_suggestions(raw, ["Walmart"])] == ["Walmart"]


@pytest.mark.asyncio
async def test_unconfigured_client_returns_nothing() -> None:
    client = ClaudeClient(api_key="", logger=NullLayerLogger())
    client.client = None
    assert not client.is_available()
    assert await client.suggest_platform_ratings("Sony WH-1000XM4", ["Walmart"]) == []


@pytest.mark.asyncio
async def test_suggest_parses_fenced_json() -> None:
    client = configured_client('```json\n[{"platform": "Walmart", "rating": 4.3, "reviewCount": 77}]\n```')
    suggestions = await client.suggest_platform_ratings("Sony WH-1000XM4", ["Walmart"])
    assert suggestions == [{"platform": "Walmart", "rating": 4.3, "reviewCount": 77}]

    kwargs = client.client.messages.create.call_args.kwargs
    assert kwargs["temperature"] == 0
    assert "Walmart" in kwargs["messages"][0]["content"]


@pytest.mark.asyncio
async def test_suggest_rejects_invalid_json() -> None:
    client = configured_client("I could not find any ratings.")
    assert await client.suggest_platform_ratings("Sony WH-1000XM4", ["Walmart"]) == []


@pytest.mark.asyncio
async def test_suggest_swallows_api_errors() -> None:
    client = configured_client("[]")
    client.client.messages.create = AsyncMock(side_effect=RuntimeError("overloaded"))
    assert await client.suggest_platform_ratings("Sony WH-1000XM4", ["Walmart"]) == []
