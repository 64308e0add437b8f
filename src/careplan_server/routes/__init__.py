"""Route registration — mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from careplan_server.routes.care_plans import router as care_plans_router
from careplan_server.routes.constipation import router as constipation_router
from careplan_server.routes.dehydration import router as dehydration_router
from careplan_server.routes.inflammation import router as inflammation_router
from careplan_server.routes.pain import router as pain_router
from careplan_server.routes.reference import router as reference_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(care_plans_router, prefix=API_PREFIX)
    app.include_router(dehydration_router, prefix=API_PREFIX)
    app.include_router(pain_router, prefix=API_PREFIX)
    app.include_router(constipation_router, prefix=API_PREFIX)
    app.include_router(inflammation_router, prefix=API_PREFIX)
    app.include_router(reference_router, prefix=API_PREFIX)
