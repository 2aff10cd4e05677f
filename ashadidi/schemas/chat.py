from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional

Role = Literal["user", "assistant", "system"]


class ChatMessage(BaseModel):
    role: Role
    content: str


class ChatResponse(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str = Field(min_length=1)
    is_emergency: bool = Field(False, alias="isEmergency")
    intent: Optional[str] = None
    category: Optional[str] = None


class ChatIn(BaseModel):
    message: str
    # prior turns, oldest first; the route keeps only the most recent ones
    messages: List[ChatMessage] = Field(default_factory=list)
    language: Literal["hi", "en"] = "hi"

    @field_validator("message")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message is required")
        return v


class ChatOut(ChatResponse):
    timestamp: str
