# api/schemas.py

from typing import Dict, List, Optional
from pydantic import BaseModel


class SpanSchema(BaseModel):
    start: int
    end: int
    conf: float
    source: str
    replacement: Optional[str] = None


class UnitSpanSchema(SpanSchema):
    value: float
    unit: str
    unit_type: str
    is_compound: bool = False


class WordSpanSchema(SpanSchema):
    original_word: str
    word_type: str
    base_word: str


class ConvertRequest(BaseModel):
    text: str
    normalise_smart_quotes: bool = False
    ignore_directives: bool = True  # honour m2e-ignore markers
    plain: bool = False  # skip code / markdown awareness
    sentence_aware: bool = False  # with plain: convert sentence by sentence


class ConvertResponse(BaseModel):
    converted_text: str
    spans: List[SpanSchema]
    ignore_directives: Dict[str, int] = {}


class DetectRequest(BaseModel):
    text: str


class UnitDetectResponse(BaseModel):
    spans: List[UnitSpanSchema]


class WordDetectResponse(BaseModel):
    spans: List[WordSpanSchema]
