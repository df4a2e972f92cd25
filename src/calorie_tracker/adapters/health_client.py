"""Health bridge API client."""

from dataclasses import dataclass
from datetime import date

import httpx

from calorie_tracker.domain.health import EnergyKind, RawExerciseSample, RawWeightSample
from calorie_tracker.domain.units import day_id, parse_timestamp
from calorie_tracker.services.sync import HealthDataSource


@dataclass
class HttpxHealthDataClient(HealthDataSource):
    """HTTPX-backed client for the hosted health-platform bridge."""

    base_url: str
    token: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, token: str) -> "HttpxHealthDataClient":
        """Create a health client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            token=token,
            http_client=httpx.AsyncClient(),
        )

    async def fetch_exercise_samples(
        self, start: date, end: date
    ) -> list[RawExerciseSample]:
        """Fetch active and basal energy samples for an inclusive day range."""
        payload = await self._get("/exercise", start, end)
        samples: dict[tuple[str, str, float], RawExerciseSample] = {}
        for row in payload.get("samples") or []:
            kind = EnergyKind(str(row.get("kind", EnergyKind.ACTIVE)))
            sample = RawExerciseSample(
                kind=kind,
                kcal=float(row.get("kcal", 0.0)),
                recorded_at=parse_timestamp(row.get("recorded_at")),
            )
            key = (kind.value, sample.recorded_at.isoformat(), sample.kcal)
            samples.setdefault(key, sample)
        return list(samples.values())

    async def fetch_weight_samples(
        self, start: date, end: date
    ) -> list[RawWeightSample]:
        """Fetch body weight samples for an inclusive day range."""
        payload = await self._get("/weight", start, end)
        samples: dict[tuple[str, float], RawWeightSample] = {}
        for row in payload.get("samples") or []:
            sample = RawWeightSample(
                weight_kg=float(row.get("weight_kg", 0.0)),
                recorded_at=parse_timestamp(row.get("recorded_at")),
            )
            key = (sample.recorded_at.isoformat(), sample.weight_kg)
            samples.setdefault(key, sample)
        return list(samples.values())

    async def _get(self, path: str, start: date, end: date) -> dict[str, object]:
        response = await self.http_client.get(
            f"{self.base_url}{path}",
            params={"start": day_id(start), "end": day_id(end)},
            headers={"Authorization": f"Bearer {self.token}"},
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
