from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from .handler import RelayHandler

RELAY_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]

router = APIRouter()

@router.api_route("/{path:path}", methods=RELAY_METHODS, response_model=None, tags=["Relay"])
async def relay_chat(
    request: Request,
    path: str,
    handler: RelayHandler = Depends(RelayHandler)
) -> Response:
    """Relays a chat completion to OpenAI and wraps the result in a success/error envelope."""
    body = b"" if request.method == "OPTIONS" else await request.body()
    response = await handler.handle(request.method, body)
    request.state.relay_outcome = handler.outcome
    return response
