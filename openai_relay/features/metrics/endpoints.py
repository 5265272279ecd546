from fastapi import APIRouter, Depends
from fastapi.responses import Response

from .handler import MetricsHandler

router = APIRouter()

@router.get("/metrics", tags=["Monitoring"])
def metrics_raw(handler: MetricsHandler = Depends(MetricsHandler)) -> Response:
    """Returns raw Prometheus format metrics."""
    return handler.get_raw_metrics()
