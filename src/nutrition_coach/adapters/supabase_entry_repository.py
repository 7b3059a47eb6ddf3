"""Supabase repository for logged meals and drinks."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutrition_coach.domain.entries import (
    BeverageDetails,
    DrinkDraft,
    DrinkRecord,
    MealDraft,
    MealRecord,
    MealSource,
    MealType,
)
from nutrition_coach.domain.nutrition import BeverageCategory, FoodComponent, MacroSet
from nutrition_coach.services.entries import EntryStore

_MEAL_COLUMNS = (
    "id, client_id, logged_at, meal_type, calories, protein, fat, carbs, fibre, "
    "nutrition_score, ai_description, notes, source, components, beverage_type, "
    "beverage_volume_ml, beverage_calories, beverage_protein, beverage_fat, "
    "beverage_carbs, beverage_fibre, beverage_category"
)
_DRINK_COLUMNS = (
    "id, client_id, logged_at, drink_type, volume_ml, calories, protein, fat, "
    "carbs, fibre, nutrition_score, category, notes"
)


@dataclass
class SupabaseEntryRepository(EntryStore):
    """Supabase implementation for meal and drink entries."""

    client: Client

    def create_meal(
        self, client_id: int, draft: MealDraft, score: int, logged_at: datetime
    ) -> MealRecord:
        """Insert a meal row and return the stored record."""
        payload = _meal_row(client_id, draft, score, logged_at)
        response = self.client.table("meals").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_meal(response.data[0])

    def create_drink(
        self, client_id: int, draft: DrinkDraft, score: int, logged_at: datetime
    ) -> DrinkRecord:
        """Insert a drink row and return the stored record."""
        response = (
            self.client.table("drinks")
            .insert(
                {
                    "client_id": client_id,
                    "logged_at": logged_at.isoformat(),
                    "drink_type": draft.drink_type,
                    "volume_ml": draft.volume_ml,
                    **_macro_columns(draft.macros),
                    "nutrition_score": score,
                    "category": draft.category.value if draft.category else None,
                    "notes": draft.notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create drink")
        return _parse_drink(response.data[0])

    def get_meal(self, client_id: int, meal_id: int) -> MealRecord | None:
        """Return a meal if it belongs to the client."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("id", meal_id)
            .eq("client_id", client_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def update_meal(
        self,
        client_id: int,
        meal_id: int,
        draft: MealDraft,
        score: int,
        logged_at: datetime,
    ) -> MealRecord:
        """Overwrite a meal row, clearing beverage columns the draft omits."""
        response = (
            self.client.table("meals")
            .update(_meal_row(client_id, draft, score, logged_at))
            .eq("id", meal_id)
            .eq("client_id", client_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to update meal {meal_id}")
        return _parse_meal(response.data[0])

    def delete_meal(self, client_id: int, meal_id: int) -> bool:
        """Delete a meal row; return whether one was removed."""
        response = (
            self.client.table("meals")
            .delete()
            .eq("id", meal_id)
            .eq("client_id", client_id)
            .execute()
        )
        return bool(response.data)

    def delete_drink(self, client_id: int, drink_id: int) -> bool:
        """Delete a drink row; return whether one was removed."""
        response = (
            self.client.table("drinks")
            .delete()
            .eq("id", drink_id)
            .eq("client_id", client_id)
            .execute()
        )
        return bool(response.data)

    def list_meals(
        self, client_id: int, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals logged in the time range."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("client_id", client_id)
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def list_drinks(
        self, client_id: int, start: datetime, end: datetime
    ) -> list[DrinkRecord]:
        """Return standalone drinks logged in the time range."""
        response = (
            self.client.table("drinks")
            .select(_DRINK_COLUMNS)
            .eq("client_id", client_id)
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=False)
            .execute()
        )
        return [_parse_drink(row) for row in response.data or []]


def _meal_row(
    client_id: int, draft: MealDraft, score: int, logged_at: datetime
) -> dict[str, object]:
    beverage = draft.beverage
    beverage_macros = beverage.macros if beverage else MacroSet.empty()
    return {
        "client_id": client_id,
        "logged_at": logged_at.isoformat(),
        "meal_type": draft.meal_type.value,
        **_macro_columns(draft.macros),
        "nutrition_score": score,
        "ai_description": draft.description,
        "ai_confidence": draft.confidence,
        "notes": draft.notes,
        "source": draft.source.value,
        "components": [_component_row(c) for c in draft.components],
        "beverage_type": beverage.drink_type if beverage else None,
        "beverage_volume_ml": beverage.volume_ml if beverage else None,
        **_macro_columns(beverage_macros, prefix="beverage_"),
        "beverage_category": (
            beverage.category.value if beverage and beverage.category else None
        ),
    }


def _macro_columns(macros: MacroSet, prefix: str = "") -> dict[str, float]:
    return {
        f"{prefix}calories": macros.calories,
        f"{prefix}protein": macros.protein,
        f"{prefix}fat": macros.fat,
        f"{prefix}carbs": macros.carbs,
        f"{prefix}fibre": macros.fibre,
    }


def _component_row(component: FoodComponent) -> dict[str, object]:
    return {"name": component.name, **_macro_columns(component.macros)}


def _parse_macros(row: dict[str, object], prefix: str = "") -> MacroSet:
    return MacroSet(
        calories=float(row.get(f"{prefix}calories") or 0.0),
        protein=float(row.get(f"{prefix}protein") or 0.0),
        fat=float(row.get(f"{prefix}fat") or 0.0),
        carbs=float(row.get(f"{prefix}carbs") or 0.0),
        fibre=float(row.get(f"{prefix}fibre") or 0.0),
    )


def _parse_logged_at(row: dict[str, object]) -> datetime:
    logged_at_raw = row.get("logged_at")
    if not isinstance(logged_at_raw, str) or not logged_at_raw:
        raise ValueError(f"Entry {row.get('id')} has no logged_at timestamp")
    logged_at = datetime.fromisoformat(logged_at_raw)
    if logged_at.tzinfo is None:
        return logged_at.replace(tzinfo=UTC)
    return logged_at


def _parse_score(row: dict[str, object]) -> int | None:
    score = row.get("nutrition_score")
    return int(score) if score is not None else None


def _parse_meal(row: dict[str, object]) -> MealRecord:
    beverage = None
    if row.get("beverage_type"):
        beverage = BeverageDetails(
            drink_type=str(row["beverage_type"]),
            volume_ml=float(row.get("beverage_volume_ml") or 0.0),
            macros=_parse_macros(row, prefix="beverage_"),
            category=BeverageCategory.parse(row.get("beverage_category")),
        )
    components_raw = row.get("components") or []
    components = [
        FoodComponent(name=str(item.get("name", "")), macros=_parse_macros(item))
        for item in components_raw
        if isinstance(item, dict)
    ]
    return MealRecord(
        id=int(row["id"]),
        client_id=int(row["client_id"]),
        logged_at=_parse_logged_at(row),
        meal_type=MealType(row.get("meal_type") or MealType.SNACK),
        macros=_parse_macros(row),
        score=_parse_score(row),
        description=str(row.get("ai_description") or ""),
        beverage=beverage,
        components=components,
        source=MealSource(row.get("source") or MealSource.MEAL_PHOTO),
        notes=row.get("notes"),
    )


def _parse_drink(row: dict[str, object]) -> DrinkRecord:
    return DrinkRecord(
        id=int(row["id"]),
        client_id=int(row["client_id"]),
        logged_at=_parse_logged_at(row),
        drink_type=str(row.get("drink_type") or ""),
        volume_ml=float(row.get("volume_ml") or 0.0),
        macros=_parse_macros(row),
        score=_parse_score(row),
        category=BeverageCategory.parse(row.get("category")),
        notes=row.get("notes"),
    )
