import logging

from app.core.config import get_settings
from app.core.deps import get_llm_client
from app.core.errors import GenerationError

logger = logging.getLogger("edugenius.ai")


class AIService:
    def __init__(self, client=None, model: str | None = None):
        settings = get_settings()
        # Raises ConfigurationError when no credential is configured
        self.client = client if client is not None else get_llm_client(settings)
        if model is None:
            model = settings.openai_model if settings.llm_provider == "openai" else settings.gemini_model
        self.model = model

    async def generate_completion(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> str:
        """Run a single completion and return its text.

        Any failure of the underlying client, and an empty answer, is raised as
        GenerationError. Nothing is retried.
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            text = response.choices[0].message.content or ""
        except Exception as e:
            logger.error("Completion call failed (model=%s): %s", self.model, e)
            raise GenerationError(cause=e) from e

        if not text.strip():
            logger.warning("Completion returned no text (model=%s)", self.model)
            raise GenerationError()
        return text


def get_ai_service() -> AIService:
    return AIService()
