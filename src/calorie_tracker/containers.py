"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_tracker.adapters.health_client import HttpxHealthDataClient
from calorie_tracker.adapters.supabase_entry_repository import SupabaseEntryRepository
from calorie_tracker.adapters.supabase_exercise_repository import (
    SupabaseExerciseRepository,
)
from calorie_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from calorie_tracker.config import Settings
from calorie_tracker.services.budget import BudgetService
from calorie_tracker.services.dashboard import DashboardService
from calorie_tracker.services.entries import EntryService
from calorie_tracker.services.reconciler import FreshnessPolicy, HealthSyncReconciler
from calorie_tracker.services.sync import ReconciliationOrchestrator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    entry_service: EntryService
    budget_service: BudgetService
    orchestrator: ReconciliationOrchestrator
    dashboard_service: DashboardService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    entry_repository = SupabaseEntryRepository(supabase_client)
    exercise_repository = SupabaseExerciseRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    health_client = HttpxHealthDataClient.create(
        base_url=resolved_settings.health_api_base_url,
        token=resolved_settings.health_api_token,
    )
    entry_service = EntryService(entry_repository)
    budget_service = BudgetService(
        repository=profile_repository,
        default_budget=resolved_settings.default_calorie_budget,
    )
    orchestrator = ReconciliationOrchestrator(
        entry_repository=entry_repository,
        exercise_repository=exercise_repository,
        profile_repository=profile_repository,
        health_source=health_client,
        reconciler=HealthSyncReconciler(
            FreshnessPolicy(resolved_settings.force_refresh_days)
        ),
        default_budget=resolved_settings.default_calorie_budget,
        default_sync_days=resolved_settings.default_sync_days,
        weight_lookback_days=resolved_settings.weight_lookback_days,
        retry_attempts=resolved_settings.sync_retry_attempts,
        retry_delay_seconds=resolved_settings.sync_retry_delay_seconds,
    )
    dashboard_service = DashboardService(
        entry_repository=entry_repository,
        exercise_repository=exercise_repository,
        budget_service=budget_service,
        orchestrator=orchestrator,
        weight_change_days=resolved_settings.weight_change_days,
    )

    async def close_resources() -> None:
        await health_client.close()

    return AppContainer(
        settings=resolved_settings,
        entry_service=entry_service,
        budget_service=budget_service,
        orchestrator=orchestrator,
        dashboard_service=dashboard_service,
        close_resources=close_resources,
    )
