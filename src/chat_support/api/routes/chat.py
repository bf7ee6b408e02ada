# src/chat_support/api/routes/chat.py
from typing import List

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from chat_support.api.dependencies import ChatService
from chat_support.api.schemas.chat import (
    AgentResponse,
    ChatSessionResponse,
    PollResponse,
    QueueStatusResponse,
    SessionLookupResponse,
    StartChatRequest,
    StartChatResponse,
)
from chat_support.domain.exceptions import SessionNotFound

router = APIRouter()


# Handlers are plain functions: FastAPI runs them in its worker threadpool,
# concurrently with each other and with the monitoring loop.


@router.post(
    "/start",
    response_model=StartChatResponse,
    summary="Start a chat session",
    responses={status.HTTP_400_BAD_REQUEST: {"model": StartChatResponse, "description": "Queue is full"}},
)
def start_chat(body: StartChatRequest, chat: ChatService):
    """
    Ask for a chat with an agent.

    The session is queued if there is room; an agent is assigned later by
    the monitoring loop. The client must poll the session every second or
    it will be dropped.
    """
    result = chat.start_chat(body.user_id)
    response = StartChatResponse(**result.model_dump())
    if not result.success:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=response.model_dump())
    return response


@router.post(
    "/poll/{session_id}",
    response_model=PollResponse,
    summary="Keep a chat session alive",
)
def poll(session_id: str, chat: ChatService) -> PollResponse:
    if not chat.poll(session_id):
        raise SessionNotFound(details={"session_id": session_id})
    return PollResponse()


@router.get(
    "/status",
    response_model=QueueStatusResponse,
    summary="Queue load and capacity",
)
def queue_status(chat: ChatService) -> QueueStatusResponse:
    return QueueStatusResponse(**chat.get_queue_status().model_dump())


@router.get(
    "/session/{session_id}",
    response_model=SessionLookupResponse,
    summary="Get a chat session",
)
def get_session(session_id: str, chat: ChatService) -> SessionLookupResponse:
    lookup = chat.get_session(session_id)
    if not lookup.found:
        raise SessionNotFound("Session not found", details={"session_id": session_id})
    return SessionLookupResponse(
        found=True,
        session=ChatSessionResponse.from_session(lookup.session),
    )


@router.get(
    "/agents",
    response_model=List[AgentResponse],
    summary="Agent roster with shift and load",
)
def list_agents(chat: ChatService) -> List[AgentResponse]:
    return [AgentResponse.from_agent(agent) for agent in chat.list_agents()]
