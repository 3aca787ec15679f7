"""
mathcoach/api/deps.py
Per-app singletons, created in create_app() and read back from app.state.
"""
from fastapi import Request

from mathcoach.core.orchestrator import ProblemOrchestrator
from mathcoach.knowledge.history import HistoryStore


def get_history_store(request: Request) -> HistoryStore:
    return request.app.state.history_store


def get_orchestrator(request: Request) -> ProblemOrchestrator:
    return request.app.state.orchestrator
