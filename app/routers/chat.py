# =============================================================================
# app/routers/chat.py - Dealership Chat Endpoint
# =============================================================================
# Backs the customer chat widget. Each request carries the new message and
# the visible history; nothing is stored server-side.
# =============================================================================

import logging

from fastapi import APIRouter, Depends
from pydantic import Field

from agents.chat_assistant import reply
from agents.client import AssistantError
from app.auth import get_current_user
from app.exceptions import MissingFieldError, ProviderError
from core.models.base import CamelModel
from core.models.content import ChatMessage

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


# =============================================================================
# Request/Response Models
# =============================================================================

class ChatRequest(CamelModel):
    """A chat message plus the conversation so far."""
    message: str = Field(
        default="",
        max_length=2000,
        description="The customer's question",
        examples=["Do you have any SUVs under $30,000?"],
    )
    history: list[ChatMessage] = Field(default_factory=list)


class ChatResponse(CamelModel):
    message: str


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest) -> ChatResponse:
    """
    Answer a customer question about vehicles, financing or the dealership.

    Raises:
        400: Empty message
        500: OpenAI failed or returned nothing
    """
    if not request.message.strip():
        raise MissingFieldError("Message is required", ["message"])

    try:
        text = reply(request.message, request.history)
    except AssistantError as e:
        logger.error(f"Chat completion failed: {e.message}")
        raise ProviderError("Failed to process chat message", error=e.message)

    return ChatResponse(message=text)
