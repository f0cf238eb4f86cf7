"""YAML/dict config loader for docscrub.

Supports loading from a YAML file or a plain dict (for embedding in a larger
application config).

Example YAML:

    docscrub:
      common_word_filtering: true
      preselect_threshold: 0.7
      categories:
        - email
        - phone
        - ssn
      allow_list:
        - support@example.com
      parsers: [txt, csv, pdf, office]
      redaction:
        method: asterisks
        preserve_length: true
        case_sensitive: false
        whole_word: true
      output_dir: redacted
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

from .analyzer import AnalyzerConfig
from .parsers import PARSERS, create_default_registry
from .pipeline import DocumentScrubber
from .types import DEFAULT_REPLACEMENT, RedactionMethod, RedactionOptions, SensitiveCategory


def load_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    data = data or {}
    # Support nested under "docscrub" key or flat
    if "docscrub" in data:
        data = data["docscrub"] or {}

    categories = data.get("categories")
    redaction = data.get("redaction") or {}
    return {
        "common_word_filtering": bool(data.get("common_word_filtering", True)),
        "preselect_threshold": float(data.get("preselect_threshold", 0.7)),
        "categories": None if categories is None else {SensitiveCategory(c) for c in categories},
        "allow_list": set(data.get("allow_list") or []),
        "parsers": list(data.get("parsers") or PARSERS),
        "redaction": {
            "method": RedactionMethod(redaction.get("method", RedactionMethod.REPLACE)),
            "replacement_text": redaction.get("replacement_text", DEFAULT_REPLACEMENT),
            "preserve_length": bool(redaction.get("preserve_length", False)),
            "case_sensitive": bool(redaction.get("case_sensitive", False)),
            "whole_word": bool(redaction.get("whole_word", True)),
        },
        "output_dir": str(data.get("output_dir", ".")),
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml
    with open(Path(path).expanduser(), encoding="utf-8") as f:
        return load_config(yaml.safe_load(f))


def create_scrubber(config: dict[str, Any] | None = None) -> DocumentScrubber:
    """Create a fully configured scrubber from a raw or normalized config dict."""
    cfg = load_config(config)  # idempotent on already-normalized dicts

    analyzer_config = AnalyzerConfig(
        use_common_word_filtering=cfg["common_word_filtering"],
        preselect_threshold=cfg["preselect_threshold"],
        categories=cfg["categories"],
        allow_list=cfg["allow_list"],
    )
    return DocumentScrubber.create(
        config=analyzer_config,
        options=RedactionOptions(**cfg["redaction"]),
        registry=create_default_registry(cfg["parsers"]),
    )
