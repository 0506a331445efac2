import os
import logging
import logging.config

import yaml
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.schemas import (
    ConvertRequest,
    ConvertResponse,
    DetectRequest,
    SpanSchema,
    UnitDetectResponse,
    UnitSpanSchema,
    WordDetectResponse,
    WordSpanSchema,
)
from regionalise.errors import UnsupportedUnitError
from regionalise.ignore import scan_ignores
from regionalise.pipeline import build_converter


def setup_logging():
    cfg_path = os.path.join("configs", "logging.yaml")
    if os.path.exists(cfg_path):
        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
            os.makedirs("logs", exist_ok=True)
            logging.config.dictConfig(config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"[logging] Failed to load logging.yaml: {e}")
            logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.INFO)


def _existing(path):
    return path if path and os.path.exists(path) else None


setup_logging()
logger = logging.getLogger("api")

converter = build_converter(
    unit_config_path=_existing(os.getenv("REGIONALISE_UNIT_CONFIG", "configs/unit_config.yaml")),
    word_config_path=_existing(os.getenv("REGIONALISE_WORD_CONFIG", "configs/word_config.yaml")),
    dictionary_path=_existing(os.getenv("REGIONALISE_DICTIONARY", "configs/user_dictionary.yaml")),
    detect_raw_code=os.getenv("REGIONALISE_DETECT_RAW_CODE", "").lower() in ("1", "true", "yes"),
)

app = FastAPI(
    title="Regionalise",
    version="0.1.0",
    description="American-to-British spelling and imperial-to-metric conversion.",
)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/convert", response_model=ConvertResponse)
def convert(req: ConvertRequest) -> ConvertResponse:
    logger.info("Received /convert request (%d chars)", len(req.text))
    if req.plain and req.sentence_aware:
        converted = converter.convert_by_sentence(req.text, req.normalise_smart_quotes)
    elif req.plain:
        converted = converter.convert_plain(req.text, req.normalise_smart_quotes)
    elif req.ignore_directives:
        converted = converter.convert_to_regional(req.text, req.normalise_smart_quotes)
    else:
        converted = converter.convert_ignoring_directives(req.text, req.normalise_smart_quotes)

    if req.plain and req.sentence_aware:
        spans = converter.sentence_spans(req.text)
    elif req.plain:
        spans = converter.collect_spans(req.text)
    else:
        spans = converter.report_spans(req.text, req.normalise_smart_quotes, req.ignore_directives)
    span_schemas = [
        SpanSchema(
            start=s.start,
            end=s.end,
            conf=s.conf,
            source=s.source,
            replacement=s.replacement,
        )
        for s in spans
    ]
    return ConvertResponse(
        converted_text=converted,
        spans=span_schemas,
        ignore_directives=scan_ignores(req.text).stats(),
    )


@app.post("/detect/units", response_model=UnitDetectResponse)
def detect_units(req: DetectRequest) -> UnitDetectResponse:
    logger.info("Received /detect/units request")
    spans = []
    for m in converter.detect_unit_spans(req.text):
        try:
            replacement = converter.convert_unit_span(m).formatted
        except UnsupportedUnitError as e:
            logger.warning("Skipping unit span %d-%d: %s", m.start, m.end, e)
            continue
        spans.append(
            UnitSpanSchema(
                start=m.start,
                end=m.end,
                conf=m.conf,
                source=m.source,
                replacement=replacement,
                value=m.value,
                unit=m.unit,
                unit_type=m.unit_type.value,
                is_compound=m.is_compound,
            )
        )
    return UnitDetectResponse(spans=spans)


@app.post("/detect/words", response_model=WordDetectResponse)
def detect_words(req: DetectRequest) -> WordDetectResponse:
    logger.info("Received /detect/words request")
    spans = [
        WordSpanSchema(
            start=m.start,
            end=m.end,
            conf=m.conf,
            source=m.source,
            replacement=m.replacement,
            original_word=m.original_word,
            word_type=m.word_type.value,
            base_word=m.base_word,
        )
        for m in converter.detect_word_spans(req.text)
    ]
    return WordDetectResponse(spans=spans)
