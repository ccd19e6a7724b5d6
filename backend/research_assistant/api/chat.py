from fastapi import APIRouter, Depends, HTTPException
from research_assistant.conversation import ConversationService
from research_assistant.models import ChatRequest, ChatResponse
from research_assistant.state import SessionNotFoundError, SessionStore, get_store

router = APIRouter(prefix="/chat", tags=["chat"])


def get_conversation(store: SessionStore = Depends(get_store)) -> ConversationService:
    return ConversationService(store)


@router.post("/{session_id}", response_model=ChatResponse)
def chat(
    session_id: str,
    req: ChatRequest,
    service: ConversationService = Depends(get_conversation),
) -> ChatResponse:
    if not req.message.strip():
        raise HTTPException(status_code=400, detail="Message must not be empty")

    try:
        reply = service.respond(session_id, req.message)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")

    return ChatResponse(response=reply)
