from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from gymovoo import __version__
from gymovoo.engine.equipment import classify_environment, resolve_with_warnings
from gymovoo.engine.orchestrator import generate_plans_with_warnings
from gymovoo.engine.verifier_fast import fast_verify
from gymovoo.errors import InsufficientCatalogError, InvalidProfileError
from gymovoo.engine.profile_adapter import normalize_answers
from gymovoo.logger import configure_from_env
from gymovoo.models.schemas import Category, EquipmentResolveRequest, ExperienceLevel, PlansResponse
from gymovoo.tools.exercise_db import load_catalog

configure_from_env()

app = FastAPI(title="GYMovoo Plan Engine", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidProfileError)
async def invalid_profile_handler(request: Request, exc: InvalidProfileError):
    logger.error(f"Invalid profile on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "field": exc.field, "value": repr(exc.value)},
    )


@app.exception_handler(InsufficientCatalogError)
async def insufficient_catalog_handler(request: Request, exc: InsufficientCatalogError):
    logger.warning(f"Catalog could not fill plan on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=422,
        content={
            "detail": f"{exc}. Try different equipment or a different goal.",
            "day_index": exc.day_index,
        },
    )


@app.get("/health")
def health():
    return {"status": "ok", "exercises": len(load_catalog())}


@app.post("/api/plans", response_model=PlansResponse)
def api_plans(answers: Dict[str, Any] = Body(...)):
    """Generate basic and smart plans from stored questionnaire answers.

    Request body
    - Raw answers in any supported shape (flat, `questionnaire`,
      `questionnaireData`, `smartQuestionnaireData.answers`).

    Response
    - `{ plans: {basic, smart}, warnings, verification: {basic, smart} }`.
    """
    catalog = load_catalog()
    result = normalize_answers(answers)
    profile = result.profile
    plans, engine_warnings = generate_plans_with_warnings(profile, catalog)
    warnings = list(result.warnings) + engine_warnings
    verification = {
        "basic": fast_verify(profile, plans.basic, catalog),
        "smart": fast_verify(profile, plans.smart, catalog),
    }
    return PlansResponse(plans=plans, warnings=warnings, verification=verification)


@app.post("/api/equipment/resolve")
def api_resolve_equipment(request: EquipmentResolveRequest):
    profile, warnings = resolve_with_warnings(request.location, request.equipment)
    return {
        "equipment_profile": profile.model_dump(mode="json"),
        "environment": classify_environment(profile),
        "warnings": [w.model_dump(mode="json") for w in warnings],
    }


@app.get("/api/exercises")
def api_exercises(
    equipment: Optional[List[str]] = Query(None),
    muscle: Optional[str] = None,
    category: Optional[Category] = None,
    max_difficulty: Optional[ExperienceLevel] = None,
    injury: Optional[List[str]] = Query(None),
):
    """List catalog exercises, optionally filtered.

    `equipment` restricts to exercises needing only the given ids (repeat the
    parameter; pass none for the whole catalog).
    """
    results = load_catalog().filter(
        equipment_available=equipment,
        max_difficulty=max_difficulty,
        primary_muscles=[muscle] if muscle else None,
        category_any_of=[category] if category else None,
        exclude_contraindications=injury,
    )
    return {"count": len(results), "results": [ex.model_dump(mode="json") for ex in results]}
