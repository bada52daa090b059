"""
HTTP surface of Pricing2Yaml: parse and validate uploaded pricing documents.
"""
from __future__ import annotations

import math
from typing import Any, Dict

import yaml
from fastapi import FastAPI, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import get_settings
from ..errors import PricingError
from ..logging import configure_logging, get_logger
from ..yaml_utils import retrieve_pricing_from_yaml

settings = get_settings()
configure_logging(settings.log_level)
logger = get_logger(__name__)

app = FastAPI(
    title="Pricing2Yaml API",
    description="API for parsing, updating and validating Pricing2Yaml documents",
    version="1.0.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class ParseTextPayload(BaseModel):
    content: str = Field(min_length=1)


def is_yaml_file(content_type: str) -> bool:
    return content_type == "application/yaml" or content_type == "application/x-yaml"


def replace_infinity(value: Any) -> Any:
    """Recursively replace infinite floats with the "Infinity" string JSON can carry."""
    if isinstance(value, float) and math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    elif isinstance(value, dict):
        return {k: replace_infinity(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [replace_infinity(item) for item in value]
    return value


def parse_document(content: str) -> Dict[str, Any]:
    try:
        pricing = retrieve_pricing_from_yaml(content)
    except PricingError as exc:
        raise HTTPException(
            status_code=422,
            detail={"kind": type(exc).__name__, "message": str(exc)},
        ) from exc
    except yaml.YAMLError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid YAML: {exc}") from exc
    return replace_infinity(pricing.to_dict())


@app.get("/health")
def health_check():
    return {"status": "UP"}


@app.post("/pricing/parse")
async def parse_pricing_file(file: UploadFile):
    if not is_yaml_file(file.content_type):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid Content-Type: {file.content_type}. Only application/yaml is supported",
        )
    contents = await file.read()
    if len(contents) > settings.max_document_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Pricing documents are limited to {settings.max_document_bytes} bytes",
        )
    try:
        text = contents.decode(settings.file_encoding)
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail=f"File is not valid {settings.file_encoding}") from exc

    logger.info("pricing.api.upload", filename=file.filename, size=len(contents))
    return await run_in_threadpool(parse_document, text)


@app.post("/pricing/parse/text")
def parse_pricing_text(payload: ParseTextPayload):
    if len(payload.content.encode(settings.file_encoding)) > settings.max_document_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Pricing documents are limited to {settings.max_document_bytes} bytes",
        )
    return parse_document(payload.content)
