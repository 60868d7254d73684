"""AI completion proxy endpoint."""

from fastapi import APIRouter, Depends, Request
from loguru import logger

from api.dependencies import get_completion_proxy
from api.licenses import read_body
from core.exceptions import RelayError
from middleware.error_handler import error_response
from services.ai_proxy import CompletionProxy

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/chat/completions")
async def chat_completions(
    request: Request,
    proxy: CompletionProxy = Depends(get_completion_proxy)
):
    """Forward an OpenAI-style chat completion with the configured model."""
    body = await read_body(request)
    try:
        return await proxy.complete(body)
    except RelayError as e:
        logger.warning(f"[AI Proxy] request failed: {e.message}")
        return error_response(e)
