from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from expense_tracker.api.dependencies import get_pipeline, get_user_id
from expense_tracker.api.schemas import ChatbotRequest
from expense_tracker.services.chatbot import ChatbotPipeline, ChatbotReply

router = APIRouter()


@router.post("/api/chatbot", response_model=ChatbotReply)
async def chatbot(
    req: ChatbotRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    pipeline: Annotated[ChatbotPipeline, Depends(get_pipeline)],
) -> ChatbotReply:
    if not req.message or not req.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")
    return await pipeline.handle(user_id, req.message.strip())
