import logging
import os
from functools import lru_cache
from supabase import create_client, Client
from openai import OpenAI
from app.core.config import get_settings, Settings
from app.core.errors import ConfigurationError

_prompt_logger = logging.getLogger("edugenius.gemini_prompts")

MISSING_GEMINI_KEY = "Falta la API Key de Gemini. Configúrala para continuar."
MISSING_OPENAI_KEY = "Falta la API Key de OpenAI. Configúrala para continuar."
MISSING_SUPABASE = "Faltan las claves de Supabase (SUPABASE_URL / SUPABASE_KEY)."


@lru_cache
def get_supabase_client() -> Client:
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_key:
        raise ConfigurationError(MISSING_SUPABASE)
    return create_client(settings.supabase_url, settings.supabase_key)


# ── Gemini adapter: mimics the OpenAI client interface ──────────────────────
# AIService calls client.chat.completions.create(...) for either provider;
# this adapter routes those calls to Gemini and returns plain Markdown text.

class _FakeMessage:
    def __init__(self, content: str):
        self.content = content


class _FakeChoice:
    def __init__(self, content: str):
        self.message = _FakeMessage(content)


class _FakeResponse:
    def __init__(self, text: str):
        self.choices = [_FakeChoice(text)]


class _FakeCompletions:
    def __init__(self, api_key: str, default_model: str):
        self._api_key = api_key
        self._default_model = default_model

    def create(
        self,
        model=None,
        messages=None,
        temperature=0.7,
        max_tokens=None,
        **kwargs,
    ):
        from google import genai
        from google.genai import types

        system_parts = [
            m["content"] for m in (messages or []) if m.get("role") == "system"
        ]
        user_parts = [
            m["content"] for m in (messages or []) if m.get("role") != "system"
        ]

        system_instruction = "\n\n".join(system_parts) or None
        user_prompt = "\n\n".join(user_parts)
        model = model or self._default_model

        if os.environ.get("DEBUG_LLM_PROMPTS", "").lower() in ("1", "true"):
            _prompt_logger.warning(
                "\n\n%s\n"
                "── SYSTEM ──────────────────────────────────────────────\n%s\n"
                "── USER ────────────────────────────────────────────────\n%s\n"
                "── CONFIG ──────────────────────────────────────────────\n"
                "  model=%s  temp=%s  max_tokens=%s\n"
                "%s",
                "=" * 60,
                system_instruction or "(none)",
                user_prompt,
                model,
                temperature,
                max_tokens or "default",
                "=" * 60,
            )

        client = genai.Client(api_key=self._api_key)

        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=temperature,
            max_output_tokens=max_tokens,
        )
        response = client.models.generate_content(
            model=model,
            contents=user_prompt,
            config=config,
        )
        return _FakeResponse(response.text or "")


class _FakeChat:
    def __init__(self, api_key: str, default_model: str):
        self.completions = _FakeCompletions(api_key, default_model)


class GeminiClientAdapter:
    def __init__(self, api_key: str, default_model: str = "gemini-2.5-flash"):
        self.chat = _FakeChat(api_key, default_model)


def get_llm_client(settings: Settings | None = None):
    """Return the active LLM client based on llm_provider setting.

    Raises ConfigurationError when the selected provider has no API key, so
    callers fail before any network traffic.
    """
    if settings is None:
        settings = get_settings()
    if settings.llm_provider == "openai":
        if not settings.openai_api_key:
            raise ConfigurationError(MISSING_OPENAI_KEY)
        return OpenAI(api_key=settings.openai_api_key)
    if not settings.gemini_api_key:
        raise ConfigurationError(MISSING_GEMINI_KEY)
    return GeminiClientAdapter(api_key=settings.gemini_api_key, default_model=settings.gemini_model)
