# -*- coding: utf-8 -*-
"""Assistant — nutrition chat endpoint."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..auth.security import Session, get_current_session, get_store
from ..config import resolve_assistant_settings
from ..errors import CaloricError, UpstreamError
from ..food_log.models import Period
from ..food_log.storage import list_entries
from ..food_log.summary import period_start
from ..llm import ChatCompletionClient
from ..profiles.storage import get_profile
from ..store import StoreClient
from .context import build_user_context

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/assistant", tags=["Assistant"])

SYSTEM_PROMPT = (
    "You are a helpful AI fitness and nutrition assistant. You have access to the user's "
    "nutrition data including their profile, daily intake, weekly and monthly averages.\n\n"
    "Provide personalized advice based on their data. Be encouraging, specific, and actionable. Focus on:\n"
    "- Analyzing their nutrition patterns\n"
    "- Comparing intake to goals\n"
    "- Identifying trends and improvements\n"
    "- Giving practical tips\n"
    "- Celebrating progress\n\n"
    "Here's the user's current data:\n"
)


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str = Field(..., max_length=4000)


class ChatRequest(BaseModel):
    message: str = Field(..., max_length=4000)
    history: List[ChatTurn] = Field(default_factory=list)


class ChatResponse(BaseModel):
    status: Literal["ok", "degraded"]
    answer: str
    model: Optional[str] = None


def get_assistant_client() -> ChatCompletionClient:
    return ChatCompletionClient(resolve_assistant_settings())


@router.post("/chat", response_model=ChatResponse, summary="Ask the nutrition assistant")
def chat(
    request: ChatRequest,
    session: Session = Depends(get_current_session),
    store: StoreClient = Depends(get_store),
    client: ChatCompletionClient = Depends(get_assistant_client),
):
    question = request.message.strip()
    if not question:
        raise HTTPException(status_code=400, detail="Message is required")

    today = datetime.now(timezone.utc).date()
    try:
        client.ensure_configured()
        profile = get_profile(store, session.user_id)
        entries = list_entries(store, session.user_id, start=period_start(Period.month, today), end=today)
    except CaloricError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

    messages: List[Dict[str, str]] = [
        {"role": "system", "content": SYSTEM_PROMPT + build_user_context(profile, entries, today)}
    ]
    for turn in request.history[-6:]:
        messages.append({"role": turn.role, "content": turn.content})
    messages.append({"role": "user", "content": question})

    try:
        answer = client.complete(messages, json_mode=False)
    except UpstreamError as exc:
        log.warning("assistant call failed: %s", exc, exc_info=True)
        return ChatResponse(
            status="degraded",
            answer=f"Sorry, I encountered an error: {exc.message}. Please try again later.",
        )
    return ChatResponse(status="ok", answer=answer, model=client.cfg.model)
