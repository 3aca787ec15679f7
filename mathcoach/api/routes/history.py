"""
mathcoach/api/routes/history.py
Solved-problem history endpoints backed by the configured HistoryStore.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from mathcoach.api.deps import get_history_store
from mathcoach.core.errors import StorageError
from mathcoach.knowledge.history import HistoryStore
from mathcoach.knowledge.models import ProblemRecord, ProblemRecordInput

router = APIRouter()


@router.get("/history", response_model=List[ProblemRecord])
def list_history(limit: Optional[int] = Query(None, ge=1), store: HistoryStore = Depends(get_history_store)):
    records = store.read_all()
    if limit is not None:
        records = records[:limit]
    return records


@router.post("/history", response_model=ProblemRecord)
def record_problem(entry: ProblemRecordInput, store: HistoryStore = Depends(get_history_store)):
    try:
        return store.append(entry)
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=f"Could not save problem: {exc}")


@router.delete("/history", status_code=204)
def clear_history(store: HistoryStore = Depends(get_history_store)):
    try:
        store.clear()
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=f"Could not clear history: {exc}")
    return Response(status_code=204)
