"""Supabase repository for nutrition goals."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutrition_coach.domain.nutrition import NutritionGoals
from nutrition_coach.services.goals import GoalsRepository


@dataclass
class SupabaseGoalsRepository(GoalsRepository):
    """Supabase implementation for nutrition goals."""

    client: Client

    def get_goals(self, client_id: int) -> NutritionGoals | None:
        """Return the client's goals row, if any."""
        response = (
            self.client.table("nutrition_goals")
            .select(
                "calories_target, protein_target, fat_target, carbs_target, "
                "fibre_target, hydration_target"
            )
            .eq("client_id", client_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        hydration = row.get("hydration_target")
        return NutritionGoals(
            calories_target=float(row["calories_target"]),
            protein_target=float(row["protein_target"]),
            fat_target=float(row["fat_target"]),
            carbs_target=float(row["carbs_target"]),
            fibre_target=float(row["fibre_target"]),
            hydration_target_ml=float(hydration) if hydration is not None else None,
        )

    def save_goals(self, client_id: int, goals: NutritionGoals) -> None:
        """Upsert the client's goals row."""
        self.client.table("nutrition_goals").upsert(
            {
                "client_id": client_id,
                "calories_target": goals.calories_target,
                "protein_target": goals.protein_target,
                "fat_target": goals.fat_target,
                "carbs_target": goals.carbs_target,
                "fibre_target": goals.fibre_target,
                "hydration_target": goals.hydration_target_ml,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="client_id",
        ).execute()
