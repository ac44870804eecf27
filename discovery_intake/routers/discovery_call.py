# discovery_intake/routers/discovery_call.py

import base64
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from discovery_intake.core.errors import IntakeError, SubmissionValidationError
from discovery_intake.core.rate_limit import intake_limit, limiter
from discovery_intake.dependencies import get_discovery_call_service
from discovery_intake.schemas.discovery_call import DiscoveryCallResponse, DiscoveryCallSubmission
from discovery_intake.services.intake_service import DiscoveryCallService

router = APIRouter(prefix="/api/hubspot", tags=["hubspot"])
logger = structlog.get_logger(__name__)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
REPEATABLE_KEYS = ("phase[]", "phase", "photos", "photos[]")


async def _photo_as_data_url(value: Any) -> Any:
    # Bestanden uit een multipart upload omzetten naar hetzelfde data-URL formaat als JSON
    if isinstance(value, UploadFile):
        content = await value.read()
        content_type = value.content_type or "image/jpeg"
        return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"
    return value


async def read_submission(request: Request, max_part_size: int = 1024 * 1024) -> Dict[str, Any]:
    """JSON is canonical; form bodies are normalized into the same shape."""
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form(max_part_size=max_part_size)
        data: Dict[str, Any] = {
            key: form.get(key) for key in form.keys() if key not in REPEATABLE_KEYS
        }
        phases = form.getlist("phase[]") or form.getlist("phase")
        if phases:
            data["phase[]"] = [str(p) for p in phases]
        photos = form.getlist("photos") or form.getlist("photos[]")
        data["photos"] = [await _photo_as_data_url(p) for p in photos]
        return data

    try:
        data = await request.json()
    except ValueError as e:
        raise SubmissionValidationError(f"body is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SubmissionValidationError("JSON body must be an object")
    return data


@router.post("/discovery-call", response_model=DiscoveryCallResponse)
@limiter.limit(intake_limit)
async def discovery_call(
    request: Request,
    service: DiscoveryCallService = Depends(get_discovery_call_service),
):
    """
    Discovery call formulier -> HubSpot.

    1. Contact aanmaken, of bij 409 het bestaande contact updaten
    2. Foto's uploaden naar de Files API
    3. Eén note met alle geüploade foto's aan het contact koppelen

    Photo failures never fail the request; contact failures return a generic 500.
    """
    raw = await read_submission(request, service.settings.FORM_MAX_PART_BYTES)
    try:
        submission = DiscoveryCallSubmission.model_validate(raw)
    except ValidationError as e:
        fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise SubmissionValidationError(f"invalid fields: {fields}") from e

    try:
        # requests + optionele delay blokkeren; niet op de event loop
        outcome = await run_in_threadpool(service.process, submission)
    except IntakeError:
        raise
    except Exception as e:
        logger.exception("discovery_call_crashed")
        raise IntakeError(f"unexpected error: {e!r}") from e

    return DiscoveryCallResponse(
        success=True,
        contactId=outcome.contact_id,
        message=service.settings.SUCCESS_MESSAGE,
    )
