"""
mathcoach/api/schemas.py
Request/response models for the problem endpoints.
History, stats and analysis reuse the domain models in knowledge/models.py.
No logic here — only data shapes.
"""
from pydantic import BaseModel, Field

from mathcoach.core.prompts import Difficulty


class GenerateRequest(BaseModel):
    topic: str = Field(..., min_length=1, max_length=200)


class SimilarRequest(BaseModel):
    problem: str = Field(..., min_length=1, max_length=5000)
    topic: str = Field(..., min_length=1, max_length=200)
    difficulty: Difficulty = "similar"


class ProblemResponse(BaseModel):
    problem: str
    solution: str
