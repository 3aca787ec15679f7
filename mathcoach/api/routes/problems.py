"""
mathcoach/api/routes/problems.py
Problem generation endpoints — delegates to the orchestrator.
Nothing is written to history here; the UI records the outcome via /history.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from mathcoach.api.deps import get_orchestrator
from mathcoach.api.schemas import GenerateRequest, ProblemResponse, SimilarRequest
from mathcoach.core.errors import ParseError, UpstreamError
from mathcoach.core.orchestrator import ProblemOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# POST /problems/generate
# ---------------------------------------------------------------------------

@router.post("/problems/generate", response_model=ProblemResponse)
def generate_problem(req: GenerateRequest, orchestrator: ProblemOrchestrator = Depends(get_orchestrator)):
    try:
        result = orchestrator.generate(req.topic)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except RuntimeError as exc:
        logger.error(f"Generation service not configured: {exc}")
        raise HTTPException(status_code=500, detail=str(exc))
    except (UpstreamError, ParseError) as exc:
        logger.warning(f"Problem generation failed for {req.topic!r}: {exc}")
        raise HTTPException(status_code=502, detail=f"Error generating problem: {exc}")
    return ProblemResponse(problem=result.problem, solution=result.solution)


# ---------------------------------------------------------------------------
# POST /problems/similar
# ---------------------------------------------------------------------------

@router.post("/problems/similar", response_model=ProblemResponse)
def similar_problem(req: SimilarRequest, orchestrator: ProblemOrchestrator = Depends(get_orchestrator)):
    """
    Generate a new problem on the same topic, easier / similar / harder than the original.
    """
    try:
        result = orchestrator.generate_similar(req.problem, req.topic, req.difficulty)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except RuntimeError as exc:
        logger.error(f"Generation service not configured: {exc}")
        raise HTTPException(status_code=500, detail=str(exc))
    except (UpstreamError, ParseError) as exc:
        logger.warning(f"Similar problem generation failed for {req.topic!r}: {exc}")
        raise HTTPException(status_code=502, detail=f"Error generating similar problem: {exc}")
    return ProblemResponse(problem=result.problem, solution=result.solution)
