"""Worksheet request builder and generation caller.

Turns a WorksheetRequest into the fixed Markdown prompt and runs one
completion. The generated text is returned as-is: nothing checks that the
model produced the requested number of exercises.
"""

import logging

from app.models.worksheet import WorksheetMetadata, WorksheetRequest, WorksheetResponse
from app.prompts.worksheet_generation import NO_EXTRA_INSTRUCTIONS, WORKSHEET_GENERATION_PROMPT
from app.services.ai import AIService

logger = logging.getLogger("edugenius.worksheet_generator")

DEFAULT_DIFFICULTY = "Adaptable"
DEFAULT_ESTIMATED_TIME = "20 min"


def build_worksheet_prompt(request: WorksheetRequest) -> str:
    return WORKSHEET_GENERATION_PROMPT.format(
        subject=request.subject.value,
        level=request.level.value,
        topic=request.topic,
        exercise_count=request.exercise_count,
        instructions=request.instructions or NO_EXTRA_INSTRUCTIONS,
    )


async def generate_worksheet(request: WorksheetRequest, ai_service: AIService) -> WorksheetResponse:
    """Generate worksheet Markdown for ``request``.

    Raises GenerationError when the completion fails or comes back empty.
    Persists nothing.
    """
    prompt = build_worksheet_prompt(request)
    logger.info(
        "Generating worksheet subject=%s level=%s topic=%r exercises=%d",
        request.subject.value, request.level.value, request.topic, request.exercise_count,
    )
    content = await ai_service.generate_completion(prompt)
    return WorksheetResponse(
        content=content,
        metadata=WorksheetMetadata(
            difficulty=DEFAULT_DIFFICULTY,
            estimated_time=DEFAULT_ESTIMATED_TIME,
            topics=[request.topic],
        ),
    )
