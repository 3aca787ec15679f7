import pytest

from mathcoach.core.errors import ParseError
from mathcoach.core.extractor import extract


def test_extracts_trimmed_segments_without_markers():
    text = "문제:  $x + 2 = 5$ 일 때 $x$의 값은?\n\n해답:\n$x = 3$ 입니다.  "

    result = extract(text)

    assert result.problem == "$x + 2 = 5$ 일 때 $x$의 값은?"
    assert result.solution == "$x = 3$ 입니다."
    assert "문제:" not in result.solution
    assert "해답:" not in result.problem


def test_preamble_before_problem_marker_is_ignored():
    text = "물론입니다! 다음은 문제입니다.\n문제: 2 + 2는?\n해답: 4"

    result = extract(text)

    assert result.problem == "2 + 2는?"
    assert result.solution == "4"


def test_solution_runs_to_end_of_text():
    text = "문제: A\n해답: 첫째 줄\n둘째 줄\n셋째 줄"

    assert extract(text).solution == "첫째 줄\n둘째 줄\n셋째 줄"


def test_missing_problem_marker_fails():
    with pytest.raises(ParseError):
        extract("해답: 4")


def test_missing_solution_marker_fails():
    with pytest.raises(ParseError):
        extract("문제: 2 + 2는?")


def test_solution_marker_before_problem_marker_fails():
    with pytest.raises(ParseError):
        extract("해답: 4\n문제: 2 + 2는?")


def test_empty_problem_segment_fails():
    with pytest.raises(ParseError):
        extract("문제:   \n해답: 4")


def test_empty_solution_segment_fails():
    with pytest.raises(ParseError):
        extract("문제: 2 + 2는?\n해답:   ")


def test_non_text_input_fails():
    with pytest.raises(ParseError):
        extract(None)
