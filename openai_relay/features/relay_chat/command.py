from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000

class ConversationMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: Literal["system", "user", "assistant"]
    content: str

class RelayRequest(BaseModel):
    messages: List[ConversationMessage] = Field(min_length=1)
    model: str = DEFAULT_MODEL
    temperature: float = Field(DEFAULT_TEMPERATURE, allow_inf_nan=False)
    max_tokens: int = DEFAULT_MAX_TOKENS

    def upstream_payload(self) -> Dict[str, Any]:
        """The exact body sent to the chat completions endpoint."""
        return {
            "model": self.model,
            "messages": [message.model_dump() for message in self.messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

class RelaySuccess(BaseModel):
    success: Literal[True] = True
    content: str
    model: Optional[str] = None
    usage: Any = None

class RelayFailure(BaseModel):
    success: Literal[False] = False
    error: str
