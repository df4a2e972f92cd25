"""Tests for container wiring."""

import asyncio

from calorie_tracker.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.dashboard_service is not None
    assert container.orchestrator.reconciler.policy.force_refresh_days == 2
    assert container.budget_service.default_budget == 2000
    asyncio.run(container.close_resources())
