
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

class RecommendRequest(BaseModel):
    # Required fields are checked by the handler so that it can answer 400
    genre: Optional[str] = Field(None, description="Book genre (e.g., 'Fantasy')")
    mood: Optional[str] = Field(None, description="Reader mood (e.g., 'Curious')")
    level: Optional[str] = Field(None, description="Beginner, Intermediate or Expert")
    prompt: Optional[str] = Field(None, description="Custom prompt, used verbatim when set")

    def missing_fields(self) -> List[str]:
        return [name for name in ("genre", "mood", "level") if not getattr(self, name)]

class RecommendResponse(BaseModel):
    text: str

class ErrorResponse(BaseModel):
    error: str

class SelectRequest(BaseModel):
    field: Literal["genre", "mood", "level"]
    value: str = ""

class SubmitRequest(BaseModel):
    prompt: Optional[str] = None
