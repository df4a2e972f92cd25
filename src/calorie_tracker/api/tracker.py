"""Tracker API endpoints with shared token auth."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from calorie_tracker.api.schemas import (
    BodyProfileIn,
    BudgetIn,
    BudgetSuggestionOut,
    DayOut,
    FoodEntryIn,
    FoodEntryOut,
    StreaksOut,
    SyncOut,
    WeekOut,
    WeightIn,
    WeightOut,
    WeightSummaryOut,
)
from calorie_tracker.domain.units import WeightUnit
from calorie_tracker.services.budget import suggest_calorie_budget

if TYPE_CHECKING:
    from calorie_tracker.containers import AppContainer


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(
    prefix="/users", tags=["tracker"], dependencies=[Depends(require_token)]
)


@router.get("/{user_id}/days/{day}")
async def get_day(user_id: UUID, day: date, request: Request) -> DayOut:
    """Return the ledger of one day."""
    container: AppContainer = request.app.state.container
    return DayOut.from_summary(container.dashboard_service.get_day(user_id, day))


@router.get("/{user_id}/weeks/{day}")
async def get_week(user_id: UUID, day: date, request: Request) -> WeekOut:
    """Return weekly aggregates for the week containing a day."""
    container: AppContainer = request.app.state.container
    return WeekOut.from_summary(container.dashboard_service.get_week(user_id, day))


@router.get("/{user_id}/streaks")
async def get_streaks(
    user_id: UUID, request: Request, today: date | None = None
) -> StreaksOut:
    """Return the current streak and perfect-week count."""
    container: AppContainer = request.app.state.container
    summary = container.dashboard_service.get_streaks(user_id, today)
    return StreaksOut(
        current_streak=summary.current_streak,
        perfect_weeks=summary.perfect_weeks,
    )


@router.get("/{user_id}/weight")
async def get_weight(user_id: UUID, request: Request) -> WeightSummaryOut:
    """Return the latest weight and its recent change."""
    container: AppContainer = request.app.state.container
    summary = container.dashboard_service.get_weight(user_id)
    return WeightSummaryOut.from_summary(summary)


@router.post("/{user_id}/sync")
async def sync(user_id: UUID, request: Request, today_only: bool = False) -> SyncOut:
    """Run a health data sync pass."""
    container: AppContainer = request.app.state.container
    orchestrator = container.orchestrator
    if today_only:
        report = await orchestrator.refresh_today(user_id)
    else:
        report = await orchestrator.sync(user_id)
    return SyncOut.from_report(report)


@router.post("/{user_id}/entries", status_code=status.HTTP_201_CREATED)
async def add_entry(
    user_id: UUID, payload: FoodEntryIn, request: Request
) -> FoodEntryOut:
    """Log a food entry."""
    container: AppContainer = request.app.state.container
    entry = container.entry_service.add_food_entry(
        user_id,
        name=payload.name,
        calories=payload.calories,
        meal_type=payload.meal_type,
        logged_at=payload.logged_at,
        fat_g=payload.fat_g,
        carbs_g=payload.carbs_g,
        protein_g=payload.protein_g,
        sugars_g=payload.sugars_g,
    )
    return FoodEntryOut.from_entry(entry)


@router.delete("/{user_id}/entries/{entry_id}")
async def delete_entry(
    user_id: UUID, entry_id: str, request: Request
) -> dict[str, str]:
    """Delete a food entry."""
    container: AppContainer = request.app.state.container
    container.entry_service.delete_food_entry(user_id, entry_id)
    return {"status": "deleted"}


@router.post("/{user_id}/weight", status_code=status.HTTP_201_CREATED)
async def record_weight(
    user_id: UUID, payload: WeightIn, request: Request
) -> WeightOut:
    """Record a body weight."""
    container: AppContainer = request.app.state.container
    sample = container.entry_service.record_weight(
        user_id, payload.weight_kg, payload.measured_at
    )
    return WeightOut.from_sample(sample)


@router.post("/{user_id}/budget", status_code=status.HTTP_201_CREATED)
async def set_budget(user_id: UUID, payload: BudgetIn, request: Request) -> BudgetIn:
    """Record a calorie budget change."""
    container: AppContainer = request.app.state.container
    record = container.budget_service.set_budget(
        user_id, payload.calorie_budget, payload.effective_on
    )
    return BudgetIn(
        calorie_budget=record.calorie_budget, effective_on=record.effective_date
    )


@router.post("/{user_id}/budget/suggestion")
async def suggest_budget(
    user_id: UUID, payload: BodyProfileIn, request: Request, apply: bool = False
) -> BudgetSuggestionOut:
    """Suggest a starting budget from body metrics, optionally saving it."""
    body = payload.to_body()
    if not apply:
        return BudgetSuggestionOut(
            calorie_budget=suggest_calorie_budget(body), applied=False
        )
    container: AppContainer = request.app.state.container
    profile = container.budget_service.apply_body_profile(
        user_id, body, use_metric=payload.weight_unit is WeightUnit.KG
    )
    return BudgetSuggestionOut(calorie_budget=profile.calorie_budget, applied=True)
