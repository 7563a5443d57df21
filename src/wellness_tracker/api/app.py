"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from wellness_tracker.api.models import BodyProfileRequest
from wellness_tracker.api.users import router as users_router
from wellness_tracker.app_logging import configure_logging
from wellness_tracker.containers import AppContainer
from wellness_tracker.services.custom_foods import CustomFoodValidationError
from wellness_tracker.services.energy import estimate_energy, validate_profile
from wellness_tracker.services.food_log import FoodLogUnavailable
from wellness_tracker.services.nutrition import LookupFailure


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to release resources on shutdown")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(users_router)

    @app.exception_handler(LookupFailure)
    async def lookup_failure_handler(
        request: Request, exc: LookupFailure
    ) -> JSONResponse:
        logger.warning("Food lookup failed: %s", exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(FoodLogUnavailable)
    async def food_log_unavailable_handler(
        request: Request, exc: FoodLogUnavailable
    ) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(CustomFoodValidationError)
    async def custom_food_error_handler(
        request: Request, exc: CustomFoodValidationError
    ) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.errors})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/energy")
    async def energy(body: BodyProfileRequest) -> dict[str, object]:
        """Estimate BMR, TDEE and the goal target; field errors are advisory."""
        profile = body.to_profile()
        estimate = estimate_energy(profile)
        return {
            "bmr": estimate.bmr,
            "tdee": estimate.tdee,
            "target": estimate.target,
            "errors": validate_profile(profile),
        }

    return app
