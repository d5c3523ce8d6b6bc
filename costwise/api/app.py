"""FastAPI application serving the estimate and what-if scenario endpoints."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

# Load .env from the project root
_project_root = Path(__file__).resolve().parent.parent.parent
load_dotenv(_project_root / ".env")

from costwise.engine import ENGINE_VERSION
from costwise.exceptions import CostEstimationError, EstimateValidationError
from costwise.services.assembler import coerce_number
from costwise.services.narrator import FALLBACK_EXPLANATION
from costwise.services.scenarios import ScenarioRecalculator

if TYPE_CHECKING:
    from costwise.data.repository import EstimateRepository
    from costwise.models.estimate import Estimate, ScenarioResult
    from costwise.services.assembler import EstimateAssembler
    from costwise.services.narrator import ScenarioNarrator

logger = logging.getLogger(__name__)

# Sentinel: build the narrator from the environment on first use
_FROM_ENV: Any = object()


async def _read_payload(request: Request) -> dict[str, Any]:
    """Read a JSON or form body into a plain dict. File uploads are dropped."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        return {
            key: value
            for key, value in form.multi_items()
            if not isinstance(value, UploadFile)
        }

    body = await request.body()
    if not body:
        return {}
    try:
        payload = await request.json()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Request body must be valid JSON") from exc
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return payload


def create_app(
    *,
    assembler: EstimateAssembler | None = None,
    narrator: ScenarioNarrator | None = _FROM_ENV,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    assembler
        Optional pre-built assembler (and with it the calculator and
        repository) for dependency injection, e.g. in tests. If not provided,
        one is created via create_default_assembler.
    narrator
        Optional scenario narrator. By default one is created from
        ANTHROPIC_API_KEY on first use; pass None to disable narratives.
    """
    from costwise.api.deps import cors_origins

    app = FastAPI(title="Costwise", version=ENGINE_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if assembler is None:
        from costwise.factory import create_default_assembler

        assembler = create_default_assembler()

    # Collaborators live on app.state so they can be swapped after creation
    app.state.assembler = assembler
    app.state.recalculator = ScenarioRecalculator(assembler)
    app.state.narrator = narrator

    def _get_repository() -> EstimateRepository:
        return app.state.assembler.repository

    def _get_narrator() -> ScenarioNarrator | None:
        nar = app.state.narrator
        if nar is not _FROM_ENV:
            return nar
        from costwise.api.deps import create_narrator

        nar = create_narrator()
        app.state.narrator = nar
        return nar

    def _get_estimate(estimate_id: int) -> Estimate:
        estimate = _get_repository().get(estimate_id)
        if estimate is None:
            raise HTTPException(
                status_code=404, detail=f"Estimate {estimate_id} not found",
            )
        return estimate

    async def _explain(result: ScenarioResult, original: Estimate | None) -> str:
        nar = _get_narrator()
        if nar is None:
            return FALLBACK_EXPLANATION
        return await run_in_threadpool(nar.explain, result, original)

    @app.exception_handler(EstimateValidationError)
    async def validation_error_handler(
        request: Request, exc: EstimateValidationError,
    ) -> JSONResponse:
        logger.warning("Rejected estimate input on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid input data", "details": exc.errors},
        )

    @app.exception_handler(CostEstimationError)
    async def estimation_error_handler(
        request: Request, exc: CostEstimationError,
    ) -> JSONResponse:
        logger.error("Cost estimation failed on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to create estimate", "detail": str(exc)},
        )

    # ------------------------------------------------------------------
    # GET /api/health
    # ------------------------------------------------------------------

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": ENGINE_VERSION}

    # ------------------------------------------------------------------
    # POST /api/estimates, POST /api/estimate/basic
    # ------------------------------------------------------------------

    @app.post("/api/estimates")
    async def create_estimate(request: Request) -> dict[str, Any]:
        payload = await _read_payload(request)
        estimate = app.state.assembler.assemble(payload)
        response = estimate.to_response_dict()
        response["summary"] = estimate.to_summary_dict()
        return response

    @app.post("/api/estimate/basic")
    async def create_basic_estimate(request: Request) -> dict[str, Any]:
        payload = await _read_payload(request)
        estimate = app.state.assembler.assemble(payload)
        return estimate.to_response_dict()

    # ------------------------------------------------------------------
    # GET /api/estimates, GET /api/estimates/{id}
    # ------------------------------------------------------------------

    @app.get("/api/estimates")
    def list_estimates() -> list[dict[str, Any]]:
        return [e.to_response_dict() for e in _get_repository().list_estimates()]

    @app.get("/api/estimates/{estimate_id}")
    def get_estimate(estimate_id: int) -> dict[str, Any]:
        estimate = _get_estimate(estimate_id)
        response = estimate.to_response_dict()
        response["summary"] = estimate.to_summary_dict()
        return response

    # ------------------------------------------------------------------
    # What-if scenarios
    # ------------------------------------------------------------------

    @app.post("/api/estimates/{estimate_id}/scenario")
    async def estimate_scenario(estimate_id: int, request: Request) -> dict[str, Any]:
        original = _get_estimate(estimate_id)
        overrides = await _read_payload(request)
        result = app.state.recalculator.recalculate(original, overrides)
        response = result.to_response_dict()
        response["explanation"] = await _explain(result, original)
        return response

    @app.get("/api/estimates/{estimate_id}/scenarios")
    def preset_scenarios(estimate_id: int) -> dict[str, Any]:
        original = _get_estimate(estimate_id)
        scenarios = app.state.recalculator.preset_scenarios(original)
        return {name: result.to_response_dict() for name, result in scenarios.items()}

    @app.post("/api/calculate-scenario")
    async def calculate_scenario(request: Request) -> dict[str, Any]:
        payload = await _read_payload(request)
        recalculator: ScenarioRecalculator = app.state.recalculator

        original: Estimate | None = None
        raw_id = payload.get("id")
        if raw_id is not None:
            original = _get_repository().get(int(coerce_number(raw_id)))

        if original is not None:
            result = recalculator.recalculate(original, payload)
        else:
            baseline = payload.get("estimatedCost", payload.get("estimated_cost"))
            baseline_cost = None if baseline is None else coerce_number(baseline)
            result = recalculator.compare(payload, baseline_cost)

        response = result.to_response_dict()
        response["explanation"] = await _explain(result, original)
        return response

    return app
