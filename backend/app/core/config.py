from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Literal


class Settings(BaseSettings):
    # Application
    app_name: str = "EduGenius AI"
    debug: bool = False

    # Supabase (empty values are reported when a client is first requested)
    supabase_url: str = ""
    supabase_key: str = ""

    # Gemini
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    llm_provider: str = "gemini"

    # OpenAI (alternative provider)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"

    # Usage counter: "never" keeps a lifetime count, "monthly" resets it
    usage_reset_policy: Literal["never", "monthly"] = "never"

    # CORS
    frontend_url: str = "http://localhost:5173"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
