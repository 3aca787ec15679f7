"""
mathcoach/api/routes/analytics.py
Local statistics and LLM learning analysis over the stored history.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from mathcoach.api.deps import get_history_store, get_orchestrator
from mathcoach.core.errors import UpstreamError, ValidationError
from mathcoach.core.orchestrator import ProblemOrchestrator
from mathcoach.knowledge.history import HistoryStore
from mathcoach.knowledge.models import AnalysisResult, UserStats

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/stats", response_model=UserStats)
def get_stats(store: HistoryStore = Depends(get_history_store)):
    """Per-topic totals and overall correct rate, computed locally."""
    return store.stats()


@router.post("/analysis", response_model=AnalysisResult)
def analyze_history(
    store: HistoryStore = Depends(get_history_store),
    orchestrator: ProblemOrchestrator = Depends(get_orchestrator),
):
    records = store.read_all()
    if not records:
        raise HTTPException(status_code=400, detail="No solved problems to analyze yet")
    try:
        return orchestrator.analyze(records)
    except RuntimeError as exc:
        logger.error(f"Generation service not configured: {exc}")
        raise HTTPException(status_code=500, detail=str(exc))
    except (UpstreamError, ValidationError) as exc:
        logger.warning(f"Learning analysis failed: {exc}")
        raise HTTPException(status_code=502, detail=f"Failed to analyze learning data: {exc}")
