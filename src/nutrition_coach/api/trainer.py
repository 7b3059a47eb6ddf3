"""Trainer API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from nutrition_coach.api.models import GoalsPayload, GoalsUpdatePayload, TimezonePayload
from nutrition_coach.domain.nutrition import InvalidGoalsError

if TYPE_CHECKING:
    from nutrition_coach.containers import AppContainer

router = APIRouter(prefix="/clients", tags=["trainer"])


def _get_trainer_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.trainer_token


async def require_trainer(
    x_trainer_token: str | None = Header(default=None),
    trainer_token: str = Depends(_get_trainer_token),
) -> None:
    """Ensure requests include a valid trainer token."""
    if not x_trainer_token or x_trainer_token != trainer_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.put("/{client_id}/goals", dependencies=[Depends(require_trainer)])
async def update_goals(
    client_id: int, payload: GoalsUpdatePayload, request: Request
) -> GoalsPayload:
    """Update a client's daily targets."""
    container: AppContainer = request.app.state.container
    changes = payload.model_dump(exclude_none=True)
    try:
        goals = container.goals_service.update(client_id, changes)
    except InvalidGoalsError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return GoalsPayload.from_goals(goals)


@router.put("/{client_id}/timezone", dependencies=[Depends(require_trainer)])
async def update_timezone(
    client_id: int, payload: TimezonePayload, request: Request
) -> dict[str, str]:
    """Set the timezone used to find a client's local day and meal time."""
    container: AppContainer = request.app.state.container
    if not _is_valid_timezone(payload.timezone):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone: {payload.timezone}",
        )
    container.settings_service.set_timezone(client_id, payload.timezone)
    return {"timezone": payload.timezone}


def _is_valid_timezone(value: str) -> bool:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True
