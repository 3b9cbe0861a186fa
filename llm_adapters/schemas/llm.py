"""Chat messages and generation results shared by LLM adapters."""

from enum import Enum

from pydantic import BaseModel, Field


class MessageType(str, Enum):
    SYSTEM = "system"
    HUMAN = "human"
    AI = "ai"
    TOOL = "tool"


class Message(BaseModel):
    """One conversational turn."""

    content: str
    message_type: MessageType = Field(default=MessageType.HUMAN)

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(content=content, message_type=MessageType.SYSTEM)

    @classmethod
    def human(cls, content: str) -> "Message":
        return cls(content=content, message_type=MessageType.HUMAN)

    @classmethod
    def ai(cls, content: str) -> "Message":
        return cls(content=content, message_type=MessageType.AI)

    @classmethod
    def tool(cls, content: str) -> "Message":
        return cls(content=content, message_type=MessageType.TOOL)


class TokenUsage(BaseModel):
    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)


class GenerateResult(BaseModel):
    """Generated text plus token usage when the service reports it."""

    generation: str
    tokens: TokenUsage | None = None


_TRANSCRIPT_LABELS: dict[MessageType, str] = {
    MessageType.SYSTEM: "System",
    MessageType.HUMAN: "Human",
    MessageType.AI: "AI",
    MessageType.TOOL: "Tool",
}


def messages_to_string(messages: list[Message]) -> str:
    """Flatten messages into a plain transcript. A lone human message is returned as-is."""
    if len(messages) == 1 and messages[0].message_type == MessageType.HUMAN:
        return messages[0].content
    return "\n".join(f"{_TRANSCRIPT_LABELS[m.message_type]}: {m.content}" for m in messages)
