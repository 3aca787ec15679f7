"""
mathcoach/core/extractor.py
Splits free-form model output into a problem and a solution segment.

The generation prompts ask the model to answer as

    문제: <problem>
    해답: <solution and working>

and these two literal markers are the whole contract.
"""
from dataclasses import dataclass

from mathcoach.core.errors import ParseError

PROBLEM_MARKER = "문제:"
SOLUTION_MARKER = "해답:"


@dataclass(frozen=True)
class ExtractedProblem:
    problem: str
    solution: str


def extract(raw_text: str) -> ExtractedProblem:
    """
    Problem = text after the first problem marker up to the first solution
    marker that follows it. Solution = everything after that solution marker.
    """
    if not isinstance(raw_text, str):
        raise ParseError("Model response is not text.")

    p_idx = raw_text.find(PROBLEM_MARKER)
    if p_idx < 0:
        raise ParseError(f"Could not parse problem and solution: '{PROBLEM_MARKER}' marker not found.")

    p_start = p_idx + len(PROBLEM_MARKER)
    s_idx = raw_text.find(SOLUTION_MARKER, p_start)
    if s_idx < 0:
        raise ParseError(f"Could not parse problem and solution: no '{SOLUTION_MARKER}' marker after the problem.")

    problem = raw_text[p_start:s_idx].strip()
    solution = raw_text[s_idx + len(SOLUTION_MARKER):].strip()

    if not problem:
        raise ParseError("Could not parse problem and solution: problem text is empty.")
    if not solution:
        raise ParseError("Could not parse problem and solution: solution text is empty.")
    return ExtractedProblem(problem=problem, solution=solution)
