# -*- coding: utf-8 -*-
"""REST client for the managed store (PostgREST tables + auth user lookup).

Every request is made with the caller's own access token, so the store's
row-level security decides which rows are visible; this client never widens
access with a service key.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import StoreSettings
from .errors import ConfigurationError, StoreError

log = logging.getLogger(__name__)


def _store_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or "").replace("\n", " ").strip()[:200] or resp.reason_phrase
    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error", "hint"):
            val = body.get(key)
            if isinstance(val, str) and val.strip():
                return val.strip()
    return str(body)[:200]


class StoreClient:
    def __init__(
        self,
        cfg: StoreSettings,
        access_token: str,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not cfg.base_url or not cfg.anon_key:
            raise ConfigurationError("Store not configured (SUPABASE_URL / SUPABASE_ANON_KEY)")
        self.cfg = cfg
        self.access_token = access_token
        self._transport = transport

    def _headers(self, prefer: str | None = None) -> Dict[str, str]:
        headers = {
            "apikey": self.cfg.anon_key or "",
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> Any:
        url = f"{(self.cfg.base_url or '').rstrip('/')}{path}"
        try:
            with httpx.Client(timeout=self.cfg.timeout, transport=self._transport) as client:
                resp = client.request(method, url, params=params, json=json, headers=self._headers(prefer))
        except httpx.HTTPError as exc:
            log.warning("store %s %s failed: %s", method, path, exc)
            raise StoreError(f"Store unreachable: {exc}") from exc

        if resp.status_code >= 500:
            raise StoreError(f"Store error ({resp.status_code}): {_store_message(resp)}")
        if resp.status_code >= 400:
            raise StoreError(_store_message(resp), status_code=resp.status_code)
        if resp.status_code == 204 or not (resp.content or b"").strip():
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise StoreError("Store returned non-JSON response") from exc

    # ---- auth ----

    def get_user(self) -> Dict[str, Any]:
        try:
            data = self._request("GET", "/auth/v1/user")
        except StoreError as exc:
            if exc.status_code in (400, 401, 403):
                raise StoreError("Invalid or expired session", status_code=401) from exc
            raise
        if not isinstance(data, dict) or not data.get("id"):
            raise StoreError("Invalid or expired session", status_code=401)
        return data

    # ---- tables ----

    def select(self, table: str, params: Any) -> List[Dict[str, Any]]:
        data = self._request("GET", f"/rest/v1/{table}", params=params)
        return data if isinstance(data, list) else []

    def insert(self, table: str, row: Dict[str, Any], *, upsert: bool = False) -> Dict[str, Any]:
        prefer = "return=representation"
        if upsert:
            prefer = "resolution=merge-duplicates,return=representation"
        data = self._request("POST", f"/rest/v1/{table}", json=row, prefer=prefer)
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        raise StoreError(f"Store did not return the written {table} row")

    def delete(self, table: str, params: Any) -> List[Dict[str, Any]]:
        data = self._request("DELETE", f"/rest/v1/{table}", params=params, prefer="return=representation")
        return data if isinstance(data, list) else []
