# regionalise/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class UnitType(str, Enum):
    LENGTH = "length"
    MASS = "mass"
    VOLUME = "volume"
    TEMPERATURE = "temperature"
    AREA = "area"


class WordType(str, Enum):
    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    UNKNOWN = "unknown"


class IgnoreKind(str, Enum):
    LINE = "line"
    NEXT = "next"
    FILE = "file"


@dataclass
class Span:
    start: int
    end: int
    conf: float
    source: str
    replacement: Optional[str] = None
    priority: int = 0

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    def overlaps(self, other: "Span") -> bool:
        return not (self.end <= other.start or other.end <= self.start)

    def length(self) -> int:
        return self.end - self.start


@dataclass
class UnitMatch(Span):
    value: float = 0.0
    unit: str = ""
    unit_type: UnitType = UnitType.LENGTH
    is_compound: bool = False
    context: str = field(default="", repr=False, compare=False)


@dataclass
class WordMatch(Span):
    original_word: str = ""
    word_type: WordType = WordType.UNKNOWN
    base_word: str = ""


@dataclass(frozen=True)
class ConversionResult:
    value: float
    unit: str
    formatted: str
    conf: float = 1.0


@dataclass(frozen=True)
class IgnoreDirective:
    line_number: int
    kind: IgnoreKind
    marker_line: int = 0
