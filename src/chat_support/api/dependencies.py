# src/chat_support/api/dependencies.py
from typing import Annotated
from fastapi import Depends, Request

from chat_support.container import ChatSupportContainer
from chat_support.services import ChatSupportService
from chat_support.workers.monitor import MonitoringLoop


def get_container(request: Request) -> ChatSupportContainer:
    return request.app.state.container


def get_chat_service(
    container: Annotated[ChatSupportContainer, Depends(get_container)],
) -> ChatSupportService:
    return container.chat


def get_monitor(
    container: Annotated[ChatSupportContainer, Depends(get_container)],
) -> MonitoringLoop:
    return container.monitor


# Type aliases for clean injection
Container = Annotated[ChatSupportContainer, Depends(get_container)]
ChatService = Annotated[ChatSupportService, Depends(get_chat_service)]
Monitor = Annotated[MonitoringLoop, Depends(get_monitor)]
