"""Scheduling and admission services."""

from chat_support.services.admission import AdmissionController
from chat_support.services.assignment import AssignmentService, SENIORITY_PRIORITY
from chat_support.services.chat import ChatSupportService
from chat_support.services.shift_policy import ShiftDecision, ShiftPolicy

__all__ = [
    "AdmissionController",
    "AssignmentService",
    "SENIORITY_PRIORITY",
    "ChatSupportService",
    "ShiftDecision",
    "ShiftPolicy",
]
