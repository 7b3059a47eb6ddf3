"""FastAPI application factory."""

import dataclasses
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse

from nutrition_coach.api.models import (
    AdviceRequest,
    BeverageEstimateRequest,
    DailySummaryPayload,
    DrinkRequest,
    GoalsPayload,
    MacroPayload,
    MealRequest,
    ScoreRequest,
)
from nutrition_coach.api.trainer import router as trainer_router
from nutrition_coach.app_logging import configure_logging
from nutrition_coach.containers import AppContainer
from nutrition_coach.domain.entries import (
    BeverageDetails,
    DrinkDraft,
    DrinkRecord,
    MealDraft,
    MealRecord,
)
from nutrition_coach.domain.nutrition import BeverageCategory, ScoreBreakdown
from nutrition_coach.services.advice import FALLBACK_ADVICE
from nutrition_coach.services.entries import EntryNotFoundError
from nutrition_coach.services.goals import GoalsNotFoundError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(trainer_router)

    @app.exception_handler(GoalsNotFoundError)
    async def goals_not_found(
        request: Request, exc: GoalsNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(EntryNotFoundError)
    async def entry_not_found(
        request: Request, exc: EntryNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/clients/{client_id}/goals")
    async def get_goals(client_id: int, request: Request) -> GoalsPayload:
        """Return a client's daily targets."""
        state_container: AppContainer = request.app.state.container
        goals = state_container.goals_service.get(client_id)
        return GoalsPayload.from_goals(goals)

    @app.get("/clients/{client_id}/totals/today")
    async def todays_totals(client_id: int, request: Request) -> DailySummaryPayload:
        """Return today's macros and hydration in the client's timezone."""
        state_container: AppContainer = request.app.state.container
        timezone = state_container.settings_service.get_timezone(client_id)
        summary = state_container.totals_service.today(client_id, timezone)
        return DailySummaryPayload.from_summary(summary)

    @app.get("/clients/{client_id}/totals/history")
    async def totals_history(
        client_id: int, request: Request, days: int = Query(default=7, ge=1, le=90)
    ) -> list[DailySummaryPayload]:
        """Return per-day macros and hydration, oldest day first."""
        state_container: AppContainer = request.app.state.container
        timezone = state_container.settings_service.get_timezone(client_id)
        history = state_container.totals_service.history(client_id, timezone, days)
        return [DailySummaryPayload.from_summary(summary) for summary in history]

    @app.post("/clients/{client_id}/score")
    async def score_entry(
        client_id: int, payload: ScoreRequest, request: Request
    ) -> dict[str, int]:
        """Recalculate a score for edited macros without saving."""
        state_container: AppContainer = request.app.state.container
        score = state_container.entry_service.score_entry(
            client_id,
            payload.to_macros(),
            meal_time=payload.logged_at,
            beverage_category=BeverageCategory.parse(payload.beverage_category),
        )
        return {"score": score}

    @app.post("/clients/{client_id}/meals", status_code=status.HTTP_201_CREATED)
    async def save_meal(
        client_id: int, payload: MealRequest, request: Request
    ) -> dict[str, int | None]:
        """Score and save a meal, including any drink logged with it."""
        state_container: AppContainer = request.app.state.container
        record = state_container.entry_service.save_meal(
            client_id, _meal_draft(payload), logged_at=payload.logged_at
        )
        return {"meal_id": record.id, "score": record.score}

    @app.put("/clients/{client_id}/meals/{meal_id}")
    async def update_meal(
        client_id: int, meal_id: int, payload: MealRequest, request: Request
    ) -> dict[str, int | None]:
        """Replace a meal and re-score it against the rest of its day."""
        state_container: AppContainer = request.app.state.container
        record = state_container.entry_service.update_meal(
            client_id, meal_id, _meal_draft(payload), logged_at=payload.logged_at
        )
        return {"meal_id": record.id, "score": record.score}

    @app.get("/clients/{client_id}/meals")
    async def list_meals(
        client_id: int, request: Request, days: int = Query(default=1, ge=1, le=90)
    ) -> list[dict[str, object]]:
        """List meals from the last ``days`` local days."""
        state_container: AppContainer = request.app.state.container
        meals = state_container.entry_service.list_meals(client_id, days)
        return [_serialize_entry(meal) for meal in meals]

    @app.delete(
        "/clients/{client_id}/meals/{meal_id}",
        status_code=status.HTTP_204_NO_CONTENT,
    )
    async def delete_meal(client_id: int, meal_id: int, request: Request) -> Response:
        state_container: AppContainer = request.app.state.container
        state_container.entry_service.delete_meal(client_id, meal_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/clients/{client_id}/drinks", status_code=status.HTTP_201_CREATED)
    async def log_drink(
        client_id: int, payload: DrinkRequest, request: Request
    ) -> dict[str, int | None]:
        """Score and save a standalone drink."""
        state_container: AppContainer = request.app.state.container
        draft = DrinkDraft(
            drink_type=payload.drink_type,
            volume_ml=payload.volume_ml,
            macros=payload.to_macros(),
            category=BeverageCategory.parse(payload.category),
            notes=payload.notes,
        )
        record = state_container.entry_service.log_drink(
            client_id, draft, logged_at=payload.logged_at
        )
        return {"drink_id": record.id, "score": record.score}

    @app.get("/clients/{client_id}/drinks")
    async def list_drinks(
        client_id: int, request: Request, days: int = Query(default=1, ge=1, le=90)
    ) -> list[dict[str, object]]:
        """List standalone drinks from the last ``days`` local days."""
        state_container: AppContainer = request.app.state.container
        drinks = state_container.entry_service.list_drinks(client_id, days)
        return [_serialize_entry(drink) for drink in drinks]

    @app.delete(
        "/clients/{client_id}/drinks/{drink_id}",
        status_code=status.HTTP_204_NO_CONTENT,
    )
    async def delete_drink(
        client_id: int, drink_id: int, request: Request
    ) -> Response:
        state_container: AppContainer = request.app.state.container
        state_container.entry_service.delete_drink(client_id, drink_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/clients/{client_id}/advice")
    async def meal_advice(
        client_id: int, payload: AdviceRequest, request: Request
    ) -> dict[str, object]:
        """Explain a meal's score and return improvement advice."""
        state_container: AppContainer = request.app.state.container
        breakdown, advice = await state_container.entry_service.advice_for_meal(
            client_id,
            payload.description,
            [c.to_component() for c in payload.components],
            payload.to_macros(),
        )
        if not advice.ok:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=_with_debug(state_container, advice.error, FALLBACK_ADVICE),
            )
        return {"advice": advice.advice, "breakdown": _serialize_breakdown(breakdown)}

    @app.post("/beverages/estimate")
    async def estimate_beverage(
        payload: BeverageEstimateRequest, request: Request
    ) -> dict[str, object]:
        """Estimate drink nutrition and category with the LLM."""
        state_container: AppContainer = request.app.state.container
        try:
            estimate = await state_container.beverage_service.estimate(
                payload.drink_type, payload.volume_ml
            )
        except Exception as exc:
            logger.exception(
                "Beverage estimation failed", extra={"drink_type": payload.drink_type}
            )
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=_with_debug(
                    state_container,
                    f"{type(exc).__name__}: {exc}",
                    "Couldn't estimate that drink. Please enter values manually.",
                ),
            ) from exc
        return {
            "drink_type": estimate.drink_type,
            "volume_ml": estimate.volume_ml,
            **MacroPayload.from_macros(estimate.macros).model_dump(),
            "confidence": estimate.confidence,
            "description": estimate.description,
            "category": estimate.category.value,
        }

    return app


def _meal_draft(payload: MealRequest) -> MealDraft:
    beverage = None
    if payload.beverage is not None:
        beverage = BeverageDetails(
            drink_type=payload.beverage.drink_type,
            volume_ml=payload.beverage.volume_ml,
            macros=payload.beverage.to_macros(),
            category=BeverageCategory.parse(payload.beverage.category),
        )
    return MealDraft(
        meal_type=payload.meal_type,
        macros=payload.to_macros(),
        description=payload.description,
        confidence=payload.confidence,
        beverage=beverage,
        components=[c.to_component() for c in payload.components],
        source=payload.source,
        notes=payload.notes,
    )


def _with_debug(
    state_container: AppContainer, detail: str | None, fallback: str
) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local" and detail:
        return f"{fallback} (debug: {detail})"
    return fallback


def _serialize_breakdown(breakdown: ScoreBreakdown) -> dict[str, object]:
    return {
        "final_score": breakdown.final_score,
        "quality_score": breakdown.quality_score,
        "progress_score": breakdown.progress_score,
        "protein_ratio": breakdown.protein_ratio,
        "fiber_per_100_cal": breakdown.fiber_per_100_cal,
        "is_balanced": breakdown.is_balanced,
        "remaining": dataclasses.asdict(breakdown.remaining),
        "over_budget": list(breakdown.over_budget),
    }


def _serialize_entry(record: MealRecord | DrinkRecord) -> dict[str, object]:
    data = dataclasses.asdict(record)
    data["logged_at"] = record.logged_at.isoformat()
    return data
