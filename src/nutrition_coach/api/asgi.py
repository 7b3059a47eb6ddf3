"""ASGI entrypoint: ``uvicorn nutrition_coach.api.asgi:app``."""

import logging

from nutrition_coach.api.app import create_app
from nutrition_coach.config import Settings
from nutrition_coach.containers import build_container

settings = Settings()
app = create_app(build_container(settings))

logging.getLogger(__name__).info(
    "Nutrition coach API ready (environment=%s, model=%s)",
    settings.environment,
    settings.openai_model,
)
