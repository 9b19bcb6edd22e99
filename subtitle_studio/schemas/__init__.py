"""Bundled JSON schemas for the word-list and transcript-record formats.

WHY: Both the exporters and the importers speak the same two JSON shapes.
Keeping the schemas as data files next to the code gives one source of
truth that jsonschema validates against in both directions.

HOW: load_schema(name) reads ``<name>.schema.json`` from this package
directory once and caches the parsed dict.

RULES:
- Names: "word_list", "prtranscript" (strict, checked on export),
  "prtranscript_import" (lenient, checked on import)
- Callers must not mutate the returned dict
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

_SCHEMA_DIR = Path(__file__).resolve().parent

_CACHED_SCHEMAS: dict[str, dict[str, Any]] = {}


def load_schema(name: str) -> dict[str, Any]:
    """Load a bundled schema by name, cached after first call."""
    if name not in _CACHED_SCHEMAS:
        with open(_SCHEMA_DIR / "{}.schema.json".format(name), encoding="utf-8") as f:
            _CACHED_SCHEMAS[name] = json.load(f)
    return _CACHED_SCHEMAS[name]
