# reunion/api/routes/conversations.py
# GET /api/conversations: funny moments extracted offline by scripts/extract_conversations.py.
from fastapi import APIRouter, Depends, Response

from reunion.core.config import Settings, get_settings
from reunion.schemas.media import ConversationsResponse
from reunion.services.conversations import load_moments

api_router = APIRouter(tags=["conversations"])


@api_router.get("/conversations", response_model=ConversationsResponse)
def list_conversations(response: Response, settings: Settings = Depends(get_settings)):
    # EmptyResultError / ParseError are turned into {"error": ...} by the app handler
    moments = load_moments(settings.conversations_path)
    response.headers["Cache-Control"] = settings.cache_control["conversations"]
    return ConversationsResponse(moments=moments, count=len(moments))

