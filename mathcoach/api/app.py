"""
mathcoach/api/app.py
FastAPI application factory. Mounts middleware and all routers, and builds
the history store and orchestrator once per app.
This is the only place that wires layers together.
"""
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mathcoach.api.routes import analytics, history, problems
from mathcoach.core.orchestrator import ProblemOrchestrator
from mathcoach.knowledge.history import HistoryStore, build_history_store

VERSION = "0.1.0"


def create_app(
    history_store: Optional[HistoryStore] = None,
    orchestrator: Optional[ProblemOrchestrator] = None,
) -> FastAPI:
    app = FastAPI(
        title="MathCoach API",
        version=VERSION,
        description="LLM-generated math problems with a local solve history and learning analysis.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.history_store = history_store or build_history_store()
    app.state.orchestrator = orchestrator or ProblemOrchestrator()

    # Routers
    app.include_router(problems.router, tags=["Problems"])
    app.include_router(history.router, tags=["History"])
    app.include_router(analytics.router, tags=["Analytics"])

    @app.get("/health")
    def health():
        return {"status": "ok", "version": VERSION}

    return app
