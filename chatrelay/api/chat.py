from fastapi import APIRouter, Depends
from loguru import logger

from chatrelay.core.config import settings
from chatrelay.core.errors import GatewayError, UpstreamError
from chatrelay.schemas.chat import ChatRequest, ChatResponse, ErrorOut
from chatrelay.services.llm_gateway import CompletionGateway, get_completion_gateway

router = APIRouter(tags=['chat'])


@router.post(
    '/chat',
    response_model=ChatResponse,
    responses={400: {'model': ErrorOut}, 500: {'model': ErrorOut}},
)
async def chat(
    payload: ChatRequest,
    gateway: CompletionGateway = Depends(get_completion_gateway),
) -> ChatResponse:
    try:
        text = await gateway.complete(payload.message)
    except GatewayError:
        raise
    except Exception as e:
        logger.exception(f"Server Error: {str(e)}")
        raise UpstreamError(settings.ERROR_MESSAGE, str(e)) from e
    return ChatResponse(response=text)
