"""Normalization of stored interview questions.

Rows written by different generations of the upload flow hold
``interview_questions`` either as a raw LLM string (sometimes a JSON array,
sometimes a fenced block, sometimes one question per line) or as a list of
lines. ``QuestionList.from_stored`` is the single place that turns any of
those into a clean list of strings.
"""
import json
from dataclasses import dataclass
from typing import Any, Optional, Union

_NOISE_LINES = {"```", "```json", "[", "]"}


def _strip_line(line: str) -> str:
    text = line.strip()
    if text.endswith(","):
        text = text[:-1].rstrip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        text = text[1:-1]
    return text.strip()


def _string_items(items: list) -> list[str]:
    return [q.strip() for q in items if isinstance(q, str)]


def _clean_lines(lines: list[str]) -> list[str]:
    cleaned = (_strip_line(ln) for ln in lines if ln.strip() not in _NOISE_LINES)
    return [ln for ln in cleaned if ln]


@dataclass(frozen=True)
class Raw:
    text: str

    def normalize(self) -> list[str]:
        text = self.text.strip()
        if text.startswith("["):
            try:
                parsed = json.loads(text)
            except ValueError:
                # A truncated array is unusable, not a list of lines
                return []
            if isinstance(parsed, list):
                return _string_items(parsed)
        return _clean_lines(text.split("\n"))


@dataclass(frozen=True)
class Parsed:
    items: tuple

    def normalize(self) -> list[str]:
        joined = "\n".join(q for q in self.items if isinstance(q, str))
        joined = joined.replace("```json", "").replace("```", "")

        start, end = joined.find("["), joined.rfind("]")
        if start != -1 and end > start:
            try:
                parsed = json.loads(joined[start:end + 1])
            except ValueError:
                parsed = None
            if isinstance(parsed, list):
                return _string_items(parsed)

        lines = [q.strip() for q in self.items if isinstance(q, str)]
        return _clean_lines(lines)


class QuestionList:
    def __init__(self, value: Union[Raw, Parsed]):
        self.value = value

    @classmethod
    def from_stored(cls, raw: Any) -> Optional["QuestionList"]:
        if not raw:
            return None
        if isinstance(raw, str):
            return cls(Raw(raw))
        if isinstance(raw, (list, tuple)):
            return cls(Parsed(tuple(raw)))
        return None

    def to_list(self) -> list[str]:
        return self.value.normalize()


def normalize_questions(raw: Any) -> list[str]:
    questions = QuestionList.from_stored(raw)
    return questions.to_list() if questions else []
