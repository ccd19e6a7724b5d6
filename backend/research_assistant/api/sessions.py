from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from research_assistant.models import CreateSessionRequest, RenameSessionRequest, Session, SuccessResponse
from research_assistant.state import SessionStore, get_store

router = APIRouter(tags=["sessions"])


@router.post("/session", response_model=Session)
def create_session(
    req: Optional[CreateSessionRequest] = Body(default=None),
    store: SessionStore = Depends(get_store),
) -> Session:
    title = req.title if req else None
    return store.create_session(title)


@router.get("/sessions", response_model=List[Session])
def list_sessions(store: SessionStore = Depends(get_store)) -> List[Session]:
    return store.list_sessions()


@router.get("/session/{session_id}", response_model=Session)
def get_session(session_id: str, store: SessionStore = Depends(get_store)) -> Session:
    session = store.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.delete("/session/{session_id}/delete", response_model=SuccessResponse)
def delete_session(session_id: str, store: SessionStore = Depends(get_store)) -> SuccessResponse:
    return SuccessResponse(success=store.delete_session(session_id))


@router.put("/session/{session_id}/title", response_model=SuccessResponse)
def rename_session(
    session_id: str,
    req: RenameSessionRequest,
    store: SessionStore = Depends(get_store),
) -> SuccessResponse:
    title = req.title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title must not be empty")
    return SuccessResponse(success=store.rename_session(session_id, title))
