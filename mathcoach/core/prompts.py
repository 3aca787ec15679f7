"""
mathcoach/core/prompts.py
Prompt text sent to the generation service. The answer-format lines must keep
the exact markers the extractor looks for.
"""
import json
from typing import Iterable, Literal

from mathcoach.core.extractor import PROBLEM_MARKER, SOLUTION_MARKER
from mathcoach.knowledge.models import ProblemRecord

Difficulty = Literal["easier", "similar", "harder"]

DIFFICULTY_PHRASES = {
    "easier": "더 쉬운",
    "similar": "비슷한",
    "harder": "더 어려운",
}

STRENGTH_THRESHOLD = 70
WEAKNESS_THRESHOLD = 50

SIMILAR_GENERATION_CONFIG = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 1024,
}

SAFETY_SETTINGS = [
    {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
]

LATEX_RULES = (
    "4. 수학 기호와 수식은 LaTeX 형식으로 작성해주세요:\n"
    "   - 인라인 수식은 $...$ 안에 작성 (예: $x^2 + 2x + 1$)\n"
    "   - 블록 수식은 $$...$$ 안에 작성 (예: $$\\int_{0}^{1} x^2 dx$$)\n"
    "5. 분수는 \\frac{분자}{분모} 형식으로 작성해주세요.\n"
    "6. 적분은 \\int_{하한}^{상한} 형식으로 작성해주세요.\n"
    "7. 제곱근은 \\sqrt{내용} 형식으로 작성해주세요."
)


def _answer_format(problem_hint: str) -> str:
    return (
        "다음 형식으로 응답해주세요:\n"
        f"{PROBLEM_MARKER} [{problem_hint}]\n"
        f"{SOLUTION_MARKER} [해답과 풀이 과정]"
    )


def build_generate_prompt(topic: str) -> str:
    return (
        f"다음 수학 주제에 대한 문제와 해답을 생성해주세요: {topic}\n\n"
        f"{_answer_format('문제 내용')}\n\n"
        "주의사항:\n"
        "1. 하나의 문제만 생성해주세요.\n"
        "2. 문제와 해답은 반드시 위의 형식을 정확히 지켜주세요.\n"
        "3. 추가 설명이나 다른 문제는 포함하지 마세요.\n"
        f"{LATEX_RULES}"
    )


def build_similar_prompt(problem: str, topic: str, difficulty: Difficulty) -> str:
    phrase = DIFFICULTY_PHRASES[difficulty]
    return (
        f"다음 수학 문제와 {phrase} 난이도의 새로운 문제를 생성해주세요:\n\n"
        f"원본 문제: {problem}\n"
        f"주제: {topic}\n\n"
        f"{_answer_format('새로운 문제 내용')}"
    )


def build_analysis_prompt(log: Iterable[ProblemRecord]) -> str:
    records = [r.to_json_dict() for r in log]
    example = {
        "strengths": [{"topic": "주제명", "correctRate": "정답률(0-100)", "totalProblems": "총 문제 수"}],
        "weaknesses": [{"topic": "주제명", "correctRate": "정답률(0-100)", "totalProblems": "총 문제 수"}],
        "recommendations": ["개선을 위한 구체적인 추천사항"],
        "overallStats": {
            "totalProblems": "전체 문제 수",
            "averageCorrectRate": "전체 평균 정답률",
            "mostFrequentTopics": ["가장 자주 푼 주제들"],
        },
    }
    return (
        "다음은 사용자의 수학 문제 풀이 기록입니다. 각 문제는 주제, 정답 여부, 시간 정보를 포함합니다.\n"
        "이 데이터를 바탕으로 사용자의 학습 분석을 해주세요.\n\n"
        "문제 기록:\n"
        f"{json.dumps(records, ensure_ascii=False, indent=2)}\n\n"
        "다음 형식으로 분석 결과를 JSON 형태로 제공해주세요. 숫자 항목에는 숫자만 넣고, 반드시 유효한 JSON 형식을 지켜주세요:\n"
        f"{json.dumps(example, ensure_ascii=False, indent=2)}\n\n"
        "분석 시 다음 사항을 고려해주세요:\n"
        f"1. 정답률이 {STRENGTH_THRESHOLD}% 이상인 주제는 강점으로 분류\n"
        f"2. 정답률이 {WEAKNESS_THRESHOLD}% 미만인 주제는 약점으로 분류\n"
        "3. 추천사항은 구체적이고 실천 가능한 내용으로 작성\n"
        "4. 전체 통계는 모든 문제를 종합적으로 분석\n"
        "5. 반드시 유효한 JSON 형식을 지켜주세요"
    )
