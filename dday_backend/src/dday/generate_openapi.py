"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

Usage:
    python -m src.dday.generate_openapi

Output file path is relative to the container root: interfaces/openapi.json
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List

from .main import app, openapi_tags

logger = logging.getLogger(__name__)


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Make sure every tag from openapi_tags is present in the schema's tag
    metadata without overriding existing definitions.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


def _output_path() -> str:
    # <container_root>/interfaces/openapi.json, where this file is <container_root>/src/dday/
    src_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(os.path.dirname(src_dir), "interfaces", "openapi.json")


# PUBLIC_INTERFACE
def generate_openapi(out_path: str = "") -> str:
    """Write the OpenAPI schema file and return the written file path."""
    schema = app.openapi()
    _ensure_tags(schema)

    path = out_path or _output_path()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    logger.info("Wrote OpenAPI schema to: %s", path)
    return path


if __name__ == "__main__":
    generate_openapi()
