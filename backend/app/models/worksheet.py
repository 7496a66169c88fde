from enum import Enum
from pydantic import BaseModel, Field, field_validator


class Subject(str, Enum):
    MATH = "Matemáticas"
    SCIENCE = "Ciencias"
    HISTORY = "Historia"
    LANGUAGE = "Lengua"
    ENGLISH = "Inglés"
    PROGRAMMING = "Programación"


class EducationLevel(str, Enum):
    PRIMARY = "Primaria"
    SECONDARY = "Secundaria"
    BACHILLERATO = "Bachillerato"
    UNIVERSITY = "Universidad"


class WorksheetRequest(BaseModel):
    subject: Subject = Subject.MATH
    level: EducationLevel = EducationLevel.PRIMARY
    topic: str
    exercise_count: int = Field(default=5, ge=1, le=20)
    instructions: str | None = None

    @field_validator("topic")
    @classmethod
    def _topic_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Por favor, introduce un tema.")
        return v

    @field_validator("instructions")
    @classmethod
    def _blank_instructions_are_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def resource_title(self) -> str:
        return f"{self.subject.value}: {self.topic} ({self.level.value})"


class WorksheetMetadata(BaseModel):
    difficulty: str = "Adaptable"
    estimated_time: str = "20 min"
    topics: list[str] = []


class WorksheetResponse(BaseModel):
    content: str
    metadata: WorksheetMetadata


class WorksheetGenerationResponse(BaseModel):
    worksheet: WorksheetResponse
    persisted: bool
    resource_id: str | None = None
    generated_count: int
    counter_updated: bool = False
    generation_time_ms: int


class PDFExportRequest(BaseModel):
    title: str = "Ficha"
    content: str
