from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]


class ChatMessage(BaseModel):
    id: str
    role: Role = Field(examples=["user", "assistant"])
    content: str
    timestamp: int = Field(description="Creation time, epoch milliseconds")


class Session(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    messages: List[ChatMessage] = Field(default_factory=list)
    created_at: int = Field(alias="createdAt")
    updated_at: int = Field(alias="updatedAt")

    def to_record(self) -> dict:
        """Serialize with wire (camelCase) keys, as stored in the backend."""
        return self.model_dump(by_alias=True)


class CreateSessionRequest(BaseModel):
    title: Optional[str] = None


class RenameSessionRequest(BaseModel):
    title: str


class ChatRequest(BaseModel):
    message: str


class ChatResponse(BaseModel):
    response: str


class SuccessResponse(BaseModel):
    success: bool


class HealthResponse(BaseModel):
    status: str = "ok"
