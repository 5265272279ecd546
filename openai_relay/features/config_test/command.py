from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional

class ConfigTestResponse(BaseModel):
    """
    Result of checking the configured key against OpenAI. Unset fields are
    left out of the JSON body.
    """
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    configured: bool
    source: Optional[str] = None
    masked_key: Optional[str] = Field(default=None, alias="maskedKey")
    message: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[Literal["auth", "connection"]] = Field(default=None, alias="errorType")
