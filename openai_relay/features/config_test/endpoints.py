from fastapi import APIRouter, Depends
from .command import ConfigTestResponse
from .handler import ConfigTestHandler

router = APIRouter()

@router.post(
    "/config/test",
    response_model=ConfigTestResponse,
    response_model_exclude_none=True,
    tags=["Monitoring"],
)
async def config_test(handler: ConfigTestHandler = Depends()):
    """Checks that the configured key is accepted by OpenAI."""
    return await handler.handle()
