"""Tests for the HTTP API."""

from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi.testclient import TestClient

from nutrition_coach.api.app import create_app
from nutrition_coach.domain.nutrition import BeverageCategory, MacroSet
from nutrition_coach.domain.scoring import calculate_score
from tests.conftest import BURGER, GOALS

TRAINER_HEADERS = {"X-Trainer-Token": "trainer-token"}
MACRO_KEYS = ("calories", "protein", "fat", "carbs", "fibre")
BURGER_JSON = {"calories": 800, "protein": 45, "fat": 45, "carbs": 50, "fibre": 3}
MEAL_FIELDS = {"meal_type": "lunch", "description": "Test meal"}


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_get_goals(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/clients/1/goals")

    assert response.status_code == 200
    assert response.json()["calories_target"] == GOALS.calories_target


def test_get_goals_unknown_client(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/clients/99/goals")

    assert response.status_code == 404


def test_update_goals_requires_trainer_token(container) -> None:
    client = TestClient(create_app(container))

    response = client.put("/clients/1/goals", json={"protein_target": 170})

    assert response.status_code == 401


def test_update_goals(container) -> None:
    client = TestClient(create_app(container))

    response = client.put(
        "/clients/1/goals", json={"protein_target": 170}, headers=TRAINER_HEADERS
    )

    assert response.status_code == 200
    assert response.json()["protein_target"] == 170
    assert container.goals_service.get(1).protein_target == 170


def test_update_goals_rejects_zero_target(container) -> None:
    client = TestClient(create_app(container))

    response = client.put(
        "/clients/1/goals", json={"calories_target": 0}, headers=TRAINER_HEADERS
    )

    assert response.status_code == 422


def test_update_timezone(container) -> None:
    client = TestClient(create_app(container))

    url = "/clients/1/timezone"

    ok = client.put(url, json={"timezone": "Europe/Paris"}, headers=TRAINER_HEADERS)
    bad = client.put(url, json={"timezone": "Mars/Olympus"}, headers=TRAINER_HEADERS)

    assert ok.status_code == 200
    assert container.settings_service.get_timezone(1) == "Europe/Paris"
    assert bad.status_code == 422


def test_score_entry(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/clients/1/score",
        json={**BURGER_JSON, "logged_at": "2026-01-22T08:00:00+08:00"},
    )

    assert response.status_code == 200
    assert response.json() == {"score": 4}


def test_score_negligible_entry_is_neutral(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/clients/1/score",
        json={
            "calories": 2,
            "protein": 0,
            "fat": 0,
            "carbs": 0,
            "fibre": 0,
            "beverage_category": "soda",
        },
    )

    assert response.json() == {"score": 3}


def test_score_rejects_negative_macros(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/clients/1/score", json={**BURGER_JSON, "fat": -1})

    assert response.status_code == 422


def test_save_meal(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/clients/1/meals",
        json={
            **BURGER_JSON,
            "meal_type": "lunch",
            "description": "Cheeseburger",
            "components": [{"name": "Burger", **BURGER_JSON}],
            "beverage": {
                "drink_type": "Water",
                "volume_ml": 500,
                "calories": 0,
                "protein": 0,
                "fat": 0,
                "carbs": 0,
                "fibre": 0,
                "category": "water",
            },
            "logged_at": "2026-01-22T08:00:00+08:00",
        },
    )

    assert response.status_code == 201
    assert response.json() == {
        "meal_id": 1,
        "score": calculate_score(
            BURGER,
            GOALS,
            MacroSet.empty(),
            datetime(2026, 1, 22, 8, 0, tzinfo=ZoneInfo("Asia/Singapore")),
            BeverageCategory.WATER,
        ),
    }
    repository = container.entry_service.repository
    assert repository.meals[0].components[0].name == "Burger"
    assert repository.meals[0].beverage is not None


def test_log_water(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/clients/1/drinks",
        json={
            "drink_type": "Water",
            "volume_ml": 500,
            "calories": 0,
            "protein": 0,
            "fat": 0,
            "carbs": 0,
            "fibre": 0,
            "category": "water",
        },
    )

    assert response.status_code == 201
    assert response.json() == {"drink_id": 1, "score": 3}


def test_todays_totals(container) -> None:
    client = TestClient(create_app(container))
    client.post(
        "/clients/1/drinks",
        json={"drink_type": "Shake", "volume_ml": 400, **BURGER_JSON},
    )

    response = client.get("/clients/1/totals/today")

    assert response.status_code == 200
    data = response.json()
    assert MacroSet(**{key: data[key] for key in MACRO_KEYS}) == BURGER
    assert data["hydration_ml"] == 400
    today = datetime.now(tz=ZoneInfo("Asia/Singapore")).date()
    assert data["day"] == today.isoformat()


def test_meal_advice(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/clients/1/advice", json={**BURGER_JSON, "description": "Cheeseburger"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["advice"].startswith("1.")
    assert data["breakdown"]["remaining"]["calories"] == GOALS.calories_target
    assert data["breakdown"]["over_budget"] == []


def test_meal_advice_failure(container, llm_client) -> None:
    llm_client.failures = 5
    client = TestClient(create_app(container))

    response = client.post(
        "/clients/1/advice", json={**BURGER_JSON, "description": "Cheeseburger"}
    )

    assert response.status_code == 502
    assert response.json()["detail"] == "Unable to generate advice at this time."


def test_estimate_beverage(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/beverages/estimate", json={"drink_type": "Orange juice", "volume_ml": 250}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["calories"] == 112
    assert data["confidence"] == 79
    assert data["category"] == "juice_fruit"


def test_estimate_beverage_failure(container, llm_client) -> None:
    llm_client.failures = 5
    client = TestClient(create_app(container))

    response = client.post(
        "/beverages/estimate", json={"drink_type": "Orange juice", "volume_ml": 250}
    )

    assert response.status_code == 502
    assert response.json()["detail"].startswith("Couldn't estimate that drink")


def test_score_unknown_client(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/clients/99/score", json=BURGER_JSON)

    assert response.status_code == 404


def test_totals_history(container) -> None:
    client = TestClient(create_app(container))
    client.post(
        "/clients/1/drinks",
        json={"drink_type": "Water", "volume_ml": 500, **BURGER_JSON},
    )

    response = client.get("/clients/1/totals/history", params={"days": 3})

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 3
    assert data[0]["calories"] == 0
    assert data[-1]["calories"] == BURGER.calories
    assert data[-1]["hydration_ml"] == 500


def test_totals_history_rejects_bad_range(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/clients/1/totals/history", params={"days": 0})

    assert response.status_code == 422


def test_update_meal(container) -> None:
    client = TestClient(create_app(container))
    created = client.post(
        "/clients/1/meals",
        json={**BURGER_JSON, **MEAL_FIELDS, "logged_at": "2026-01-22T20:00:00+08:00"},
    ).json()
    salad = {"calories": 150, "protein": 5, "fat": 2, "carbs": 25, "fibre": 8}

    response = client.put(
        f"/clients/1/meals/{created['meal_id']}", json={**salad, **MEAL_FIELDS}
    )

    assert response.status_code == 200
    assert response.json() == {
        "meal_id": created["meal_id"],
        "score": calculate_score(
            MacroSet(**salad),
            GOALS,
            MacroSet.empty(),
            datetime(2026, 1, 22, 20, 0, tzinfo=ZoneInfo("Asia/Singapore")),
        ),
    }


def test_update_unknown_meal(container) -> None:
    client = TestClient(create_app(container))

    response = client.put(
        "/clients/1/meals/42", json={**BURGER_JSON, **MEAL_FIELDS}
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Meal 42 not found"


def test_list_and_delete_meals(container) -> None:
    client = TestClient(create_app(container))
    meal_id = client.post(
        "/clients/1/meals", json={**BURGER_JSON, **MEAL_FIELDS}
    ).json()["meal_id"]

    listed = client.get("/clients/1/meals")
    deleted = client.delete(f"/clients/1/meals/{meal_id}")
    deleted_again = client.delete(f"/clients/1/meals/{meal_id}")

    assert listed.status_code == 200
    assert [meal["id"] for meal in listed.json()] == [meal_id]
    assert listed.json()[0]["macros"]["calories"] == BURGER.calories
    assert deleted.status_code == 204
    assert deleted_again.status_code == 404
    assert client.get("/clients/1/meals").json() == []


def test_list_and_delete_drinks(container) -> None:
    client = TestClient(create_app(container))
    drink_id = client.post(
        "/clients/1/drinks",
        json={"drink_type": "Water", "volume_ml": 250, **BURGER_JSON},
    ).json()["drink_id"]

    listed = client.get("/clients/1/drinks", params={"days": 7})
    deleted = client.delete(f"/clients/1/drinks/{drink_id}")

    assert [drink["volume_ml"] for drink in listed.json()] == [250]
    assert deleted.status_code == 204
    assert client.delete(f"/clients/1/drinks/{drink_id}").status_code == 404
