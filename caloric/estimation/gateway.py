# -*- coding: utf-8 -*-
"""Estimation — the nutrition estimation gateway.

One shared component serves both the text-search path and the photo path:
validate the query, build the prompt variant, call the model once, parse the
reply, and substitute a placeholder item whenever the model side fails.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import List, Optional, Tuple

import httpx

from ..config import GatewaySettings
from ..errors import MalformedResponseError, PreconditionError, UpstreamError
from ..llm import ChatCompletionClient
from .models import Estimate, EstimateRequest, NutritionItem, NutritionQuery, PromptKind
from .parsing import parse_nutrition_reply
from .prompts import build_image_messages, build_text_messages

log = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:([^;,]*)(;base64)?,(.*)$", flags=re.DOTALL)

# (offset, magic, mime)
_IMAGE_SIGNATURES: Tuple[Tuple[int, bytes, str], ...] = (
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"BM", "image/bmp"),
    (4, b"ftypheic", "image/heic"),
    (4, b"ftypheix", "image/heic"),
    (4, b"ftypmif1", "image/heif"),
    (4, b"ftypavif", "image/avif"),
)


def sniff_image_mime(data: bytes) -> Optional[str]:
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    for offset, magic, mime in _IMAGE_SIGNATURES:
        if data[offset : offset + len(magic)] == magic:
            return mime
    return None


def decode_image_payload(image: str, *, max_bytes: int) -> Tuple[bytes, str]:
    """Decode a data URL (or raw base64) into image bytes and a sniffed MIME type."""
    raw = (image or "").strip()
    if not raw:
        raise PreconditionError("No image provided")

    match = _DATA_URL_RE.match(raw)
    if match:
        declared, is_b64, raw = match.group(1), match.group(2), match.group(3)
        if declared and not declared.lower().startswith("image/"):
            raise PreconditionError(f"Unsupported image data URL type: {declared}")
        if not is_b64:
            raise PreconditionError("Image data URL must be base64 encoded")

    compact = "".join(raw.split())
    try:
        data = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PreconditionError(f"Invalid base64 image: {exc}") from exc
    if not data:
        raise PreconditionError("No image provided")
    if len(data) > max_bytes:
        raise PreconditionError(f"Image too large: {len(data)} bytes > {max_bytes}")

    mime = sniff_image_mime(data)
    if mime is None:
        raise PreconditionError("Image payload is not a recognized image format")
    return data, mime


def query_from_request(request: EstimateRequest, *, max_image_bytes: int) -> NutritionQuery:
    kind = request.prompt_kind
    if kind is None:
        if request.image:
            kind = PromptKind.image
        elif request.food_query is not None:
            kind = PromptKind.text
        else:
            raise PreconditionError("Either foodQuery or image is required")

    if kind is PromptKind.image:
        if not request.image:
            raise PreconditionError("No image provided")
        data, mime = decode_image_payload(request.image, max_bytes=max_image_bytes)
        return NutritionQuery(image=data, mime_type=mime)

    text = (request.food_query or "").strip()
    if not text:
        raise PreconditionError("Food query is required")
    return NutritionQuery(text=text)


class NutritionGateway:
    def __init__(
        self,
        cfg: GatewaySettings,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.cfg = cfg
        self._text_client = ChatCompletionClient(cfg.text, transport=transport)
        self._vision_client = ChatCompletionClient(cfg.vision, transport=transport)

    def _validate(self, query: NutritionQuery) -> None:
        if query.image is not None:
            if not query.image:
                raise PreconditionError("No image provided")
            return
        if query.text is None:
            raise PreconditionError("Either a food description or an image is required")
        if not query.text.strip():
            raise PreconditionError("Food query is required")

    def fallback_item(self, query: NutritionQuery) -> NutritionItem:
        fb = self.cfg.fallback
        if query.kind is PromptKind.image:
            return NutritionItem(
                name=fb.image_name,
                calories=fb.image_calories,
                protein=fb.image_protein,
                carbs=fb.image_carbs,
                fat=fb.image_fat,
                serving_size=fb.image_serving,
            )
        return NutritionItem(
            name=f"{(query.text or '').strip()} (estimated)",
            calories=fb.text_calories,
            protein=fb.text_protein,
            carbs=fb.text_carbs,
            fat=fb.text_fat,
            serving_size=fb.text_serving,
        )

    def estimate_detailed(self, query: NutritionQuery) -> Estimate:
        """Run the pipeline; only `PreconditionError` / `ConfigurationError` escape."""
        self._validate(query)

        if query.kind is PromptKind.image:
            client = self._vision_client
            messages = build_image_messages(query.image or b"", query.mime_type, detail=self.cfg.vision_detail)
            log.info("estimating nutrition from %s photo (%d bytes)", query.mime_type, len(query.image or b""))
        else:
            client = self._text_client
            messages = build_text_messages((query.text or "").strip())
            log.info("estimating nutrition for: %s", query.text)
        client.ensure_configured()

        content = ""
        try:
            content = client.complete(messages)
            items = parse_nutrition_reply(content)
            if not items:
                raise MalformedResponseError("Model reply contained no usable items")
        except (UpstreamError, MalformedResponseError) as exc:
            log.warning("nutrition estimate degraded to fallback: %s", exc, exc_info=True)
            if content:
                log.debug("raw model reply: %s", content[:800])
            return Estimate(items=[self.fallback_item(query)], fallback_reason=exc.message)

        return Estimate(items=items)

    def estimate(self, query: NutritionQuery) -> List[NutritionItem]:
        return self.estimate_detailed(query).items
