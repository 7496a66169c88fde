from pydantic import BaseModel


class Resource(BaseModel):
    id: str
    user_id: str
    title: str
    content: str
    created_at: str
    type: str = "worksheet"
    is_public: bool = False
    description: str | None = None


class VisibilityUpdate(BaseModel):
    is_public: bool
