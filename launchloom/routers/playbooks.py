"""Playbook generation endpoints."""

import logging
import traceback
from datetime import date, datetime, timezone

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse, Response

from ..schemas import ErrorResponse, HealthResponse, PlaybookRequest
from ..services.llm_client import GenerationError
from ..services.pdf_emitter import EmissionError
from ..services.playbook_pipeline import (
    AssetNotFoundError,
    generate_playbook_pdf,
    load_free_asset,
    playbook_filename,
)
from ..services.tiers import policy_for

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"

router = APIRouter(prefix="/api", tags=["playbooks"])


def error_response(status_code: int, error: str, details=None) -> JSONResponse:
    body = {"error": error}
    if details is not None:
        body["details"] = details
    return JSONResponse(body, status_code=status_code)


def _pdf_response(data: bytes, filename: str) -> Response:
    return Response(
        content=data,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Length": str(len(data)),
        },
    )


_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
    404: {"model": ErrorResponse, "description": "Free tier PDF not found"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    500: {"model": ErrorResponse, "description": "Failed to generate PDF"},
}


@router.post(
    "/generate-pdf",
    responses={200: {"content": {"application/pdf": {}}}, **_ERROR_RESPONSES},
)
async def generate_pdf(
    request: Request,
    req: PlaybookRequest = Body(
        ...,
        example={
            "productName": "Acme Analytics",
            "targetAudience": "B2B SaaS founders",
            "launchDate": "2030-03-01",
            "tier": "standard",
        },
    ),
):
    """Return the launch playbook PDF for the requested tier."""

    filename = playbook_filename(req.product_name, req.tier)

    today = date.today()
    if req.launch_date <= today:
        return error_response(
            400,
            "Invalid launch date",
            f"launchDate: {req.launch_date.isoformat()} is not in the future; pick a date after {today.isoformat()}",
        )

    if policy_for(req.tier).uses_static_asset:
        try:
            data = load_free_asset()
        except AssetNotFoundError:
            return error_response(404, "Free tier PDF not found")
        logger.info("free_asset_served", extra={"bytes": len(data)})
        return _pdf_response(data, filename)

    form = req.to_form(today)
    try:
        data = await generate_playbook_pdf(
            form,
            request.app.state.llm_client,
            getattr(request.app.state, "content_cache", None),
            today=today,
        )
    except GenerationError as exc:
        logger.error(f"PLAYBOOK_GENERATION_ERROR: {exc}")
        return error_response(500, "Failed to generate PDF", str(exc))
    except EmissionError as exc:
        logger.exception("pdf_emission_failed")
        return error_response(500, "Failed to generate PDF", str(exc))
    except Exception as exc:
        logger.error(f"PLAYBOOK_UNEXPECTED_ERROR: {exc}")
        logger.error(f"TRACEBACK: {traceback.format_exc()}")
        return error_response(500, "Failed to generate PDF", str(exc))

    return _pdf_response(data, filename)


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(timestamp=datetime.now(timezone.utc).isoformat(), version=APP_VERSION)
