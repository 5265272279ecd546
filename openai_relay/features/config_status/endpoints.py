from fastapi import APIRouter, Depends
from .handler import ConfigStatusHandler
from .query import ConfigStatusResponse

router = APIRouter()

@router.get("/config/status", response_model=ConfigStatusResponse, tags=["Monitoring"])
def config_status(handler: ConfigStatusHandler = Depends()):
    """Returns the credential configuration status with a masked key."""
    return handler.handle()
