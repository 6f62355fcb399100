# -*- coding: utf-8 -*-
"""OpenAI-compatible chat completions client."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import CompletionSettings
from .errors import ConfigurationError, UpstreamError

log = logging.getLogger(__name__)


def completions_url(base_url: str) -> str:
    base = base_url.rstrip("/")
    if base.endswith("/chat/completions"):
        return base
    return f"{base}/chat/completions"


def extract_message_text(data: object) -> str:
    """Concatenate assistant text from a `choices` response (string or parts content)."""
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list):
        return ""
    out: list[str] = []
    for choice in choices:
        if not isinstance(choice, dict):
            continue
        msg = choice.get("message")
        if isinstance(msg, dict):
            content = msg.get("content")
            if isinstance(content, str) and content:
                out.append(content)
            elif isinstance(content, list):
                for part in content:
                    if isinstance(part, dict) and part.get("type") in {None, "text", "output_text"}:
                        text = part.get("text")
                        if isinstance(text, str) and text:
                            out.append(text)
        maybe_text = choice.get("text")
        if isinstance(maybe_text, str) and maybe_text:
            out.append(maybe_text)
    return "".join(out).strip()


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or "").replace("\n", " ").strip()[:200]
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            return err["message"]
        if isinstance(err, str):
            return err
    return str(body)[:200]


class ChatCompletionClient:
    """One POST per call, no retries. Failures surface as `UpstreamError`."""

    def __init__(
        self,
        cfg: CompletionSettings,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.cfg = cfg
        self._transport = transport

    def ensure_configured(self) -> None:
        if not self.cfg.api_key:
            raise ConfigurationError("OpenAI API key not configured")

    def complete(self, messages: List[Dict[str, Any]], *, json_mode: bool | None = None) -> str:
        self.ensure_configured()
        payload: Dict[str, Any] = {
            "model": self.cfg.model,
            "messages": messages,
            "temperature": self.cfg.temperature,
            "max_tokens": self.cfg.max_tokens,
        }
        use_json = self.cfg.json_mode if json_mode is None else json_mode
        if use_json:
            payload["response_format"] = {"type": "json_object"}
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.cfg.api_key}",
        }
        url = completions_url(self.cfg.base_url)

        try:
            with httpx.Client(timeout=self.cfg.timeout, transport=self._transport) as client:
                resp = client.post(url, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            raise UpstreamError(f"Model API timed out after {self.cfg.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Model API unreachable: {exc}") from exc

        if resp.status_code >= 400:
            raise UpstreamError(f"Model API error ({resp.status_code}): {_error_detail(resp)}")
        try:
            data = resp.json()
        except ValueError as exc:
            snippet = (resp.text or "").replace("\n", " ").strip()[:200]
            raise UpstreamError(f"Model API returned non-JSON response: {snippet}") from exc

        content = extract_message_text(data)
        if not content:
            raise UpstreamError("Model API returned no content")
        log.debug("model %s replied with %d chars", self.cfg.model, len(content))
        return content
