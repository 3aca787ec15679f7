"""
mathcoach/knowledge/models.py
Domain records for the history log and the views derived from it.
Serialized with camelCase keys; Python attributes stay snake_case.
"""
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# --- History ---

class ProblemRecordInput(CamelModel):
    topic: str = Field(..., min_length=1)
    problem_text: str = Field(..., min_length=1)
    solution_text: str = Field(..., min_length=1)
    is_correct: bool


class ProblemRecord(CamelModel):
    id: str
    topic: str
    problem_text: str
    solution_text: str
    is_correct: bool
    timestamp_millis: int


# --- Stats ---

class TopicStat(CamelModel):
    topic: str
    total_attempts: int = Field(0, ge=0)
    correct_attempts: int = Field(0, ge=0)

    @model_validator(mode="after")
    def check_correct_within_total(self):
        if self.correct_attempts > self.total_attempts:
            raise ValueError("correctAttempts cannot exceed totalAttempts")
        return self

    @computed_field(alias="correctRate")
    @property
    def correct_rate(self) -> float:
        if not self.total_attempts:
            return 0.0
        return round(self.correct_attempts / self.total_attempts * 100, 1)


class UserStats(CamelModel):
    total_attempts: int = 0
    correct_attempts: int = 0
    overall_correct_rate: float = 0.0
    topics: Dict[str, TopicStat] = {}
    most_frequent_topics: List[str] = []


# --- Analysis ---

class TopicPerformance(CamelModel):
    topic: str
    correct_rate: float
    total_problems: int


class OverallStats(CamelModel):
    total_problems: int
    average_correct_rate: float
    most_frequent_topics: List[str] = []


class AnalysisResult(CamelModel):
    strengths: List[TopicPerformance]
    weaknesses: List[TopicPerformance]
    recommendations: List[str]
    overall_stats: OverallStats
