# -*- coding: utf-8 -*-
"""Auth — caller session resolution + FastAPI helpers.

The access token is issued by the managed store's auth service; we only pass
it through and ask the store who it belongs to.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import Depends, HTTPException, Request

from ..config import StoreSettings, resolve_store_settings
from ..errors import CaloricError
from ..store import StoreClient


@dataclass(frozen=True)
class Session:
    user_id: str
    email: Optional[str]
    access_token: str


def get_store_settings() -> StoreSettings:
    return resolve_store_settings()


def get_store_transport() -> Optional[httpx.BaseTransport]:
    """Overridden in tests to fake the store."""
    return None


def get_token_from_request(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        token = auth.split(" ", 1)[1].strip()
        return token or None
    return None


def get_current_session(
    request: Request,
    cfg: StoreSettings = Depends(get_store_settings),
    transport: Optional[httpx.BaseTransport] = Depends(get_store_transport),
) -> Session:
    # If already resolved for this request, reuse it.
    session = getattr(request.state, "session", None)
    if session:
        return session

    token = get_token_from_request(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        user = StoreClient(cfg, token, transport=transport).get_user()
    except CaloricError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

    session = Session(user_id=str(user["id"]), email=user.get("email"), access_token=token)
    request.state.session = session
    return session


def get_store(
    session: Session = Depends(get_current_session),
    cfg: StoreSettings = Depends(get_store_settings),
    transport: Optional[httpx.BaseTransport] = Depends(get_store_transport),
) -> StoreClient:
    return StoreClient(cfg, session.access_token, transport=transport)
