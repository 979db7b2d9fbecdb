"""
Paste routes.
Handles create and fetch operations.
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse

from pastr.models import ErrorResponse, PasteCreated, Reason
from pastr.notifier import Notifier
from pastr.service import PasteService

router = APIRouter()
logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

# Stand-in payload for structured bodies; validation rejects it as WRONG_TYPE.
STRUCTURED_BODY = object()
# Returned instead of a payload once the body is known to exceed the size limit.
OVERSIZED_BODY = object()

ERRORS = {
    Reason.EMPTY_INPUT: (400, "No file provided."),
    Reason.WRONG_TYPE: (400, "Paste body must be plain text."),
    Reason.NON_PLAIN_TEXT: (400, "Paste contains characters outside printable ASCII."),
    Reason.TOO_LARGE: (413, "Paste is too large."),
    Reason.RATE_LIMITED: (429, "Rate limit exceeded. Try again later."),
    Reason.NOT_FOUND: (404, "Paste not found."),
    Reason.STORE_ERROR: (500, "Internal Server Error"),
}

ERROR_RESPONSES = {
    status: {"model": ErrorResponse}
    for status in sorted({status for status, _ in ERRORS.values()})
}


def get_service(request: Request) -> PasteService:
    return request.app.state.service


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def _error_response(reason: Reason, details: Optional[str] = None) -> JSONResponse:
    status_code, message = ERRORS[reason]
    body = ErrorResponse(error=message, reason=reason.value, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def _read_payload(request: Request, max_bytes: Optional[int] = None) -> Any:
    """
    Extract the paste payload from a request.

    Form submissions carry it in the "body" field; a JSON body is a
    structured upload; anything else is taken as raw text. Bodies larger
    than max_bytes are refused from Content-Length, or while streaming when
    the header is absent, without being buffered whole.
    """
    declared = request.headers.get("content-length", "")
    if max_bytes is not None and declared.isdigit() and int(declared) > max_bytes:
        return OVERSIZED_BODY

    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return form.get("body")
    if content_type.startswith("application/json"):
        return STRUCTURED_BODY

    chunks = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if max_bytes is not None and size > max_bytes:
            return OVERSIZED_BODY
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/create",
    response_model=PasteCreated,
    responses=ERROR_RESPONSES,
)
async def create_paste(
    request: Request,
    background_tasks: BackgroundTasks,
    service: PasteService = Depends(get_service),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Create a new paste.

    Args:
        request: HTTP request; raw text body or a form with a "body" field
        background_tasks: Runs failure notifications after the response
        service: Paste pipelines
        notifier: Failure notification channel

    Returns:
        {"status": "success", "key": ...} or an error response
    """
    payload = await _read_payload(request, service.max_paste_bytes)
    if payload is OVERSIZED_BODY:
        return _error_response(Reason.TOO_LARGE)

    outcome = await run_in_threadpool(service.create, payload)

    if outcome.ok:
        return PasteCreated(key=outcome.key)

    if outcome.reason is Reason.STORE_ERROR:
        background_tasks.add_task(notifier.notify, "create failed", outcome.details)
        return _error_response(outcome.reason, details="Failed to store paste")

    return _error_response(outcome.reason)


@router.get(
    "/get/{key}",
    response_class=PlainTextResponse,
    responses=ERROR_RESPONSES,
)
async def get_paste(
    key: str,
    background_tasks: BackgroundTasks,
    service: PasteService = Depends(get_service),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Fetch a paste's raw text by key.

    Raises no exceptions to the caller: a missing paste is a 404 response,
    store failures are a 500 response with minimal detail.
    """
    outcome = await run_in_threadpool(service.retrieve, key)

    if outcome.ok:
        return PlainTextResponse(outcome.content)

    if outcome.reason is Reason.STORE_ERROR:
        background_tasks.add_task(notifier.notify, "get failed", outcome.details)
        return _error_response(outcome.reason, details="Failed to fetch paste")

    return _error_response(outcome.reason)
