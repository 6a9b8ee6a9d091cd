"""API routers — /chat, /upload, /analysis, /session, /forex endpoints.

No business logic. Delegates to the advisor service, its session store,
and the forex data service, all injected via ``configure_routers()``.
"""

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, File, Form, Query, UploadFile

from fxadvisor.chat.intent import resolve_symbol
from fxadvisor.errors import ValidationFailure

logger = logging.getLogger("fxadvisor")
router = APIRouter()

# ── Dependencies (set during app startup) ────────────────────────────────

_advisor = None  # AdvisorService
_forex = None  # ForexDataService
_max_upload_bytes: int = 10 * 1024 * 1024


def configure_routers(
    advisor,
    forex=None,
    max_upload_bytes: Optional[int] = None,
) -> None:
    """Inject dependencies from the application startup.

    Args:
        advisor: An ``AdvisorService`` instance (or duck-type for tests).
        forex: A ``ForexDataService`` instance for the /forex endpoints.
        max_upload_bytes: Largest accepted chart upload.
    """
    global _advisor, _forex, _max_upload_bytes  # noqa: PLW0603
    _advisor = advisor
    _forex = forex
    if max_upload_bytes is not None:
        _max_upload_bytes = max_upload_bytes


def _require_advisor():
    if _advisor is None:
        raise RuntimeError("Routers used before configure_routers()")
    return _advisor


def _require_forex():
    if _forex is None:
        raise RuntimeError("Forex data service not configured")
    return _forex


# ── Chat ─────────────────────────────────────────────────────────────────


@router.post("/chat")
async def post_chat(body: dict):
    """Answer a chat message.

    Expects ``{"input": "...", "sessionId": "..."}``; ``sessionId`` is
    optional and a new session is issued when absent.
    """
    text = body.get("input")
    if not isinstance(text, str):
        raise ValidationFailure("Missing input")
    session_id = body.get("sessionId") or None
    reply = await _require_advisor().handle_chat(text, session_id=session_id)
    return {"result": reply.result, "sessionId": reply.session_id}


@router.post("/upload")
async def post_upload(
    image: Optional[UploadFile] = File(default=None),
    sessionId: Optional[str] = Form(default=None),
    prompt: Optional[str] = Form(default=None),
):
    """Analyze an uploaded chart image."""
    if image is None:
        raise ValidationFailure("No image file uploaded")
    data = await image.read()
    if len(data) > _max_upload_bytes:
        raise ValidationFailure(
            f"Image exceeds the {_max_upload_bytes // (1024 * 1024)} MB upload limit"
        )
    reply = await _require_advisor().analyze_chart(
        data, image.content_type or "", prompt=prompt, session_id=sessionId,
    )
    return {"result": reply.result, "sessionId": reply.session_id}


@router.get("/analysis")
async def get_analysis(symbol: str = Query(..., min_length=1)):
    """Return the structured indicator/confluence/signal analysis for *symbol*."""
    resolved = resolve_symbol(symbol)
    analysis = await _require_advisor().analyze_market(resolved)
    return analysis.to_dict()


# ── Sessions ─────────────────────────────────────────────────────────────


@router.get("/session")
async def get_session(sessionId: Optional[str] = Query(default=None)):
    """Return the given session, or a new one."""
    record = _require_advisor().sessions.get_or_create(sessionId)
    return {
        "sessionId": record.session_id,
        "created": record.created_at,
        "messagesCount": len(record.history),
    }


@router.get("/session/{session_id}/history")
async def get_session_history(session_id: str):
    record = _require_advisor().sessions.get(session_id)
    return {
        "sessionId": session_id,
        "history": [m.to_dict() for m in record.history],
    }


@router.delete("/session/{session_id}")
async def delete_session_history(session_id: str):
    """Clear a session's chat history."""
    _require_advisor().sessions.clear_history(session_id)
    logger.info("Session %s history cleared", session_id)
    return {"success": True, "message": "Chat history cleared", "sessionId": session_id}


# ── Forex data ───────────────────────────────────────────────────────────


@router.get("/forex/rates")
async def get_rates():
    forex = _require_forex()
    forex.refresh_if_stale()
    return {
        "rates": {s: asdict(r) for s, r in forex.get_rates().items()},
    }


@router.get("/forex/rates/{symbol}")
async def get_rate(symbol: str):
    """Return one rate; *symbol* as ``EUR-USD``, ``EUR_USD`` or ``EURUSD``."""
    rate = _require_forex().get_rate(symbol)
    if rate is None:
        raise ValidationFailure(f"Rate for symbol {symbol} not found")
    return asdict(rate)


@router.get("/forex/news")
async def get_news(limit: int = Query(default=10, ge=1, le=20)):
    return {"news": [asdict(n) for n in _require_forex().get_news(limit)]}


@router.get("/forex/calendar")
async def get_calendar(days: int = Query(default=7, ge=0, le=14)):
    events = _require_forex().get_economic_calendar(days)
    return {"events": [asdict(e) for e in events]}
