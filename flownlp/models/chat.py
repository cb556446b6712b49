"""Chat models exchanged with callers and the Ollama backend."""

from typing import Any, List

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationInfo,
    field_validator,
    model_validator,
)


class NullAsDefaultModel(BaseModel):
    """Base model that reads JSON null as the field's zero value."""

    @model_validator(mode="before")
    @classmethod
    def null_object_as_empty(cls, data: Any) -> Any:
        return {} if data is None else data

    @field_validator("*", mode="before")
    @classmethod
    def null_field_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class Message(NullAsDefaultModel):
    """A single chat message."""

    role: StrictStr = Field(default="", description="Author role, e.g. user or assistant")
    content: StrictStr = Field(default="", description="Message text")


class ChatRequest(NullAsDefaultModel):
    """Request model accepted on /api/chat and forwarded to the backend."""

    model: StrictStr = Field(default="", description="Backend model identifier")
    messages: List[Message] = Field(
        default_factory=list, description="Conversation so far, oldest first"
    )
    stream: StrictBool = Field(
        default=False, description="Passed through to the backend unmodified"
    )

    def is_complete(self) -> bool:
        """Whether the request names a model and carries at least one message."""
        return self.model != "" and len(self.messages) > 0


class ChatResponse(NullAsDefaultModel):
    """Response model returned by the backend and relayed to the caller."""

    # Backend extras (timing counters and the like) are relayed untouched.
    model_config = ConfigDict(extra="allow")

    model: StrictStr = Field(default="", description="Model that produced the reply")
    created_at: StrictStr = Field(default="", description="Backend timestamp")
    done: StrictBool = Field(default=False, description="Whether generation finished")
    message: Message = Field(default_factory=Message, description="Backend reply")
