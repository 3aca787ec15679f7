"""
mathcoach/core/orchestrator.py
Prompt → generation service → extractor/validator. One upstream call per
operation; failures propagate and nothing is written to history here.
"""
import logging
from typing import Iterable, Optional

from mathcoach.core.analysis_validator import parse_analysis
from mathcoach.core.extractor import ExtractedProblem, extract
from mathcoach.core.llm import GeminiClient, get_client
from mathcoach.core.prompts import (
    DIFFICULTY_PHRASES, SAFETY_SETTINGS, SIMILAR_GENERATION_CONFIG, Difficulty,
    build_analysis_prompt, build_generate_prompt, build_similar_prompt,
)
from mathcoach.knowledge.models import AnalysisResult, ProblemRecord

logger = logging.getLogger(__name__)


def _require_text(value: str, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} is required")
    return value.strip()


class ProblemOrchestrator:
    def __init__(self, client: Optional[GeminiClient] = None):
        self._client = client

    @property
    def client(self) -> GeminiClient:
        # Built lazily so a missing API key only fails the calls that need it.
        if self._client is None:
            self._client = get_client()
        return self._client

    def generate(self, topic: str) -> ExtractedProblem:
        topic = _require_text(topic, "Topic")
        text = self.client.generate_text(build_generate_prompt(topic))
        result = extract(text)
        logger.info(f"Generated problem for topic {topic!r} ({len(result.problem)} chars)")
        return result

    def generate_similar(self, problem: str, topic: str, difficulty: Difficulty = "similar") -> ExtractedProblem:
        problem = _require_text(problem, "Problem")
        topic = _require_text(topic, "Topic")
        if difficulty not in DIFFICULTY_PHRASES:
            raise ValueError(f"Unknown difficulty {difficulty!r}; expected one of {sorted(DIFFICULTY_PHRASES)}")

        text = self.client.generate_text(
            build_similar_prompt(problem, topic, difficulty),
            generation_config=SIMILAR_GENERATION_CONFIG,
            safety_settings=SAFETY_SETTINGS,
        )
        result = extract(text)
        logger.info(f"Generated {difficulty} variant for topic {topic!r}")
        return result

    def analyze(self, log: Iterable[ProblemRecord]) -> AnalysisResult:
        records = list(log)
        text = self.client.generate_text(build_analysis_prompt(records))
        analysis = parse_analysis(text)
        logger.info(
            f"Analysis over {len(records)} records: "
            f"{len(analysis.strengths)} strengths, {len(analysis.weaknesses)} weaknesses"
        )
        return analysis
