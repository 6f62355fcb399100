from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


def _env_flag(name: str, default: str) -> bool:
    return (os.environ.get(name) or default).strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    """Centralized configuration for the nutrition tracking backend."""

    def __init__(self) -> None:
        # ---- Model API (OpenAI-compatible chat completions) ----
        self.openai_api_key: str | None = (
            os.environ.get("OPENAI_API_KEY") or os.environ.get("OPENAI_KEY") or None
        )
        self.openai_base_url: str = os.environ.get("OPENAI_BASE_URL", "https://api.openai.com/v1")
        self.llm_timeout: float = float(os.environ.get("CALORIC_LLM_TIMEOUT") or "30")
        # Ask for structured JSON output; the reply scanner still tolerates prose.
        self.llm_json_mode: bool = _env_flag("CALORIC_LLM_JSON_MODE", "1")

        self.text_model: str = os.environ.get("CALORIC_TEXT_MODEL", "gpt-4o-mini")
        self.text_temperature: float = float(os.environ.get("CALORIC_TEXT_TEMPERATURE") or "0.3")
        self.text_max_tokens: int = int(os.environ.get("CALORIC_TEXT_MAX_TOKENS") or "500")

        self.vision_model: str = os.environ.get("CALORIC_VISION_MODEL", "gpt-4o")
        self.vision_temperature: float = float(os.environ.get("CALORIC_VISION_TEMPERATURE") or "0.1")
        self.vision_max_tokens: int = int(os.environ.get("CALORIC_VISION_MAX_TOKENS") or "1000")
        self.vision_detail: str = os.environ.get("CALORIC_VISION_DETAIL", "high")
        self.max_image_bytes: int = int(os.environ.get("CALORIC_MAX_IMAGE_BYTES") or str(5 * 1024 * 1024))

        self.assistant_model: str = os.environ.get("CALORIC_ASSISTANT_MODEL", "gpt-3.5-turbo")
        self.assistant_temperature: float = float(os.environ.get("CALORIC_ASSISTANT_TEMPERATURE") or "0.7")
        self.assistant_max_tokens: int = int(os.environ.get("CALORIC_ASSISTANT_MAX_TOKENS") or "500")

        # ---- Fallback placeholder shown when estimation fails ----
        self.fallback_text_calories: float = float(os.environ.get("CALORIC_FALLBACK_TEXT_CALORIES") or "100")
        self.fallback_text_protein: float = float(os.environ.get("CALORIC_FALLBACK_TEXT_PROTEIN") or "5")
        self.fallback_text_carbs: float = float(os.environ.get("CALORIC_FALLBACK_TEXT_CARBS") or "15")
        self.fallback_text_fat: float = float(os.environ.get("CALORIC_FALLBACK_TEXT_FAT") or "3")
        self.fallback_text_serving: str = os.environ.get("CALORIC_FALLBACK_TEXT_SERVING", "100g")
        self.fallback_image_name: str = os.environ.get("CALORIC_FALLBACK_IMAGE_NAME", "Mixed meal (AI estimated)")
        self.fallback_image_calories: float = float(os.environ.get("CALORIC_FALLBACK_IMAGE_CALORIES") or "350")
        self.fallback_image_protein: float = float(os.environ.get("CALORIC_FALLBACK_IMAGE_PROTEIN") or "20")
        self.fallback_image_carbs: float = float(os.environ.get("CALORIC_FALLBACK_IMAGE_CARBS") or "30")
        self.fallback_image_fat: float = float(os.environ.get("CALORIC_FALLBACK_IMAGE_FAT") or "15")
        self.fallback_image_serving: str = os.environ.get("CALORIC_FALLBACK_IMAGE_SERVING", "1 serving")

        # ---- Managed store (PostgREST + auth) ----
        self.supabase_url: str | None = (os.environ.get("SUPABASE_URL") or "").rstrip("/") or None
        self.supabase_anon_key: str | None = os.environ.get("SUPABASE_ANON_KEY") or None
        self.store_timeout: float = float(os.environ.get("CALORIC_STORE_TIMEOUT") or "15")

        self.log_level: str = (os.environ.get("CALORIC_LOG_LEVEL") or "INFO").upper()

        cors = os.environ.get("CALORIC_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()


@dataclass(frozen=True)
class CompletionSettings:
    api_key: str | None
    base_url: str
    model: str
    temperature: float
    max_tokens: int
    timeout: float
    json_mode: bool = False


@dataclass(frozen=True)
class FallbackSettings:
    text_calories: float = 100.0
    text_protein: float = 5.0
    text_carbs: float = 15.0
    text_fat: float = 3.0
    text_serving: str = "100g"
    image_name: str = "Mixed meal (AI estimated)"
    image_calories: float = 350.0
    image_protein: float = 20.0
    image_carbs: float = 30.0
    image_fat: float = 15.0
    image_serving: str = "1 serving"


@dataclass(frozen=True)
class GatewaySettings:
    text: CompletionSettings
    vision: CompletionSettings
    fallback: FallbackSettings
    vision_detail: str = "high"
    max_image_bytes: int = 5 * 1024 * 1024


@dataclass(frozen=True)
class StoreSettings:
    base_url: str | None
    anon_key: str | None
    timeout: float = 15.0


def resolve_gateway_settings(cfg: Settings | None = None) -> GatewaySettings:
    cfg = cfg or settings
    text = CompletionSettings(
        api_key=cfg.openai_api_key,
        base_url=cfg.openai_base_url,
        model=cfg.text_model,
        temperature=cfg.text_temperature,
        max_tokens=cfg.text_max_tokens,
        timeout=cfg.llm_timeout,
        json_mode=cfg.llm_json_mode,
    )
    vision = CompletionSettings(
        api_key=cfg.openai_api_key,
        base_url=cfg.openai_base_url,
        model=cfg.vision_model,
        temperature=cfg.vision_temperature,
        max_tokens=cfg.vision_max_tokens,
        timeout=cfg.llm_timeout,
        json_mode=cfg.llm_json_mode,
    )
    fallback = FallbackSettings(
        text_calories=cfg.fallback_text_calories,
        text_protein=cfg.fallback_text_protein,
        text_carbs=cfg.fallback_text_carbs,
        text_fat=cfg.fallback_text_fat,
        text_serving=cfg.fallback_text_serving,
        image_name=cfg.fallback_image_name,
        image_calories=cfg.fallback_image_calories,
        image_protein=cfg.fallback_image_protein,
        image_carbs=cfg.fallback_image_carbs,
        image_fat=cfg.fallback_image_fat,
        image_serving=cfg.fallback_image_serving,
    )
    return GatewaySettings(
        text=text,
        vision=vision,
        fallback=fallback,
        vision_detail=cfg.vision_detail,
        max_image_bytes=cfg.max_image_bytes,
    )


def resolve_assistant_settings(cfg: Settings | None = None) -> CompletionSettings:
    cfg = cfg or settings
    return CompletionSettings(
        api_key=cfg.openai_api_key,
        base_url=cfg.openai_base_url,
        model=cfg.assistant_model,
        temperature=cfg.assistant_temperature,
        max_tokens=cfg.assistant_max_tokens,
        timeout=cfg.llm_timeout,
    )


def resolve_store_settings(cfg: Settings | None = None) -> StoreSettings:
    cfg = cfg or settings
    return StoreSettings(
        base_url=cfg.supabase_url,
        anon_key=cfg.supabase_anon_key,
        timeout=cfg.store_timeout,
    )
