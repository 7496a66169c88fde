import logging
import re
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response
from supabase import Client

from app.api.deps import ensure_db, get_current_actor, get_optional_db, to_http_exception
from app.core.errors import EduGeniusError, PersistenceError
from app.models.profile import Actor
from app.models.worksheet import PDFExportRequest, WorksheetGenerationResponse, WorksheetRequest
from app.services.ai import get_ai_service
from app.services.pdf import get_pdf_service
from app.services.persistence import persist_generation
from app.services.plans import LIMIT_REACHED_MESSAGE, can_export_pdf, can_generate
from app.services.profiles import get_or_create_profile
from app.services.telemetry import emit_event, instrument
from app.services.worksheet_generator import generate_worksheet

router = APIRouter(prefix="/api/worksheets", tags=["worksheets"])
pdf_service = get_pdf_service()

logger = logging.getLogger("edugenius.worksheets")

EXPORT_REQUIRES_PREMIUM = "La exportación a PDF es exclusiva del plan Premium."


@router.post("/generate", response_model=WorksheetGenerationResponse)
@instrument(route="/api/worksheets/generate")
async def generate(
    request: WorksheetRequest,
    actor: Actor = Depends(get_current_actor),
    supabase: Client | None = Depends(get_optional_db),
):
    """Gate on the plan quota, generate the worksheet, then persist it."""
    start_time = datetime.now()
    if actor.can_persist:
        supabase = ensure_db(supabase)

    try:
        profile = get_or_create_profile(supabase, actor)
    except EduGeniusError as e:
        raise to_http_exception(e)

    # ── Quota gate ──
    if not can_generate(profile):
        raise HTTPException(
            status_code=402,
            detail={
                "detail": LIMIT_REACHED_MESSAGE,
                "generations_remaining": 0,
                "plan": profile.plan.value,
            },
        )

    # ── Generation ──
    try:
        ai_service = get_ai_service()
        worksheet = await generate_worksheet(request, ai_service)
    except EduGeniusError as e:
        logger.warning("Generation failed for user=%s topic=%r: %s", actor.id, request.topic, e.cause or e)
        emit_event(
            "worksheet_generated",
            route="/api/worksheets/generate",
            user_id=actor.id,
            topic=request.topic,
            error_type=e.__class__.__name__,
            ok=False,
        )
        raise to_http_exception(e)

    # ── Persistence (skipped for actors that cannot persist) ──
    try:
        outcome = persist_generation(supabase, actor, profile, request, worksheet)
    except PersistenceError as e:
        # The content exists but was not saved; hand it back with the error
        raise HTTPException(
            status_code=500,
            detail={
                "detail": e.user_message,
                "worksheet": worksheet.model_dump(),
            },
        )

    generation_time_ms = int((datetime.now() - start_time).total_seconds() * 1000)
    emit_event(
        "worksheet_generated",
        route="/api/worksheets/generate",
        user_id=actor.id,
        topic=request.topic,
        latency_ms=generation_time_ms,
        ok=True,
    )
    return WorksheetGenerationResponse(
        worksheet=worksheet,
        persisted=outcome.persisted,
        resource_id=outcome.resource_id,
        generated_count=outcome.generated_count,
        counter_updated=outcome.counter_updated,
        generation_time_ms=generation_time_ms,
    )


def _pdf_filename(title: str) -> str:
    slug = re.sub(r"[^\w\-]+", "_", title, flags=re.ASCII).strip("_")
    return f"{slug or 'ficha'}.pdf"


@router.post("/export-pdf")
@instrument(route="/api/worksheets/export-pdf")
async def export_pdf(
    request: PDFExportRequest,
    actor: Actor = Depends(get_current_actor),
    supabase: Client | None = Depends(get_optional_db),
):
    """Export worksheet Markdown as a PDF. Premium only."""
    if actor.can_persist:
        supabase = ensure_db(supabase)

    try:
        profile = get_or_create_profile(supabase, actor)
    except EduGeniusError as e:
        raise to_http_exception(e)

    if not can_export_pdf(profile):
        raise HTTPException(status_code=403, detail=EXPORT_REQUIRES_PREMIUM)

    try:
        pdf_bytes = pdf_service.generate_pdf(request.title, request.content)
    except Exception as e:
        logger.exception("PDF export failed for user=%s", actor.id)
        raise HTTPException(status_code=500, detail=f"Failed to generate PDF: {str(e)}")

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{_pdf_filename(request.title)}"'
        },
    )
