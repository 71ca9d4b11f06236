from fastapi import APIRouter

from src.core.exceptions import BadRequestError
from src.models.dto.common import ChatRequest, ChatResponse
from src.services.chatbot_service import get_bot_response

router = APIRouter(prefix="/chatbot", tags=["chatbot"])


@router.post("", response_model=ChatResponse)
async def chat(body: ChatRequest):
    if not body.message.strip():
        raise BadRequestError("Message must not be empty")
    return {"reply": get_bot_response(body.message)}
