from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class ProviderStatus(BaseModel):
    """
    Credential status for one upstream provider, in the camelCase shape
    the dashboard expects.
    """
    model_config = ConfigDict(populate_by_name=True)

    is_configured: bool = Field(alias="isConfigured")
    source: str
    masked_key: Optional[str] = Field(default=None, alias="maskedKey")

class ConfigStatusResponse(BaseModel):
    success: bool = True
    openai: ProviderStatus
