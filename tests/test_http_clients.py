"""Tests for HTTP-based adapters."""

import asyncio
from datetime import date

import httpx
import pytest

from calorie_tracker.adapters.health_client import HttpxHealthDataClient
from calorie_tracker.domain.health import EnergyKind


def _client(handler) -> HttpxHealthDataClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxHealthDataClient(
        base_url="https://health.example.com",
        token="health-token",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_health_client_fetches_exercise_samples() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/exercise"
        assert request.url.params["start"] == "2024-03-01"
        assert request.url.params["end"] == "2024-03-10"
        assert request.headers["Authorization"] == "Bearer health-token"
        return httpx.Response(
            200,
            json={
                "samples": [
                    {
                        "kind": "active",
                        "kcal": 120.5,
                        "recorded_at": "2024-03-09T10:00:00+00:00",
                    },
                    {
                        "kind": "active",
                        "kcal": 120.5,
                        "recorded_at": "2024-03-09T10:00:00+00:00",
                    },
                    {
                        "kind": "basal",
                        "kcal": 1500,
                        "recorded_at": "2024-03-09T23:00:00+00:00",
                    },
                ]
            },
        )

    client = _client(handler)
    samples = asyncio.run(
        client.fetch_exercise_samples(date(2024, 3, 1), date(2024, 3, 10))
    )

    assert len(samples) == 2
    assert {sample.kind for sample in samples} == {EnergyKind.ACTIVE, EnergyKind.BASAL}


def test_health_client_fetches_weight_samples() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/weight"
        return httpx.Response(
            200,
            json={
                "samples": [
                    {"weight_kg": 80.4, "recorded_at": "2024-03-09T07:00:00+00:00"}
                ]
            },
        )

    client = _client(handler)
    samples = asyncio.run(
        client.fetch_weight_samples(date(2024, 3, 1), date(2024, 3, 10))
    )

    assert samples[0].weight_kg == 80.4
    assert samples[0].day == "2024-03-09"


def test_health_client_raises_on_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "down"})

    client = _client(handler)
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.fetch_weight_samples(date(2024, 3, 1), date(2024, 3, 10)))


def test_health_client_create_and_close() -> None:
    client = HttpxHealthDataClient.create("https://health.example.com/", "token")
    assert client.base_url == "https://health.example.com"
    asyncio.run(client.close())
