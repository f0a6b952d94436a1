from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .document import TimelineDocument
from .rules import InvalidFormat
from .schema import TimelineData

YAML_SUFFIXES = {".yaml", ".yml"}


def read_yaml(path: str | Path) -> Any:
    p = Path(path)
    try:
        return yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise InvalidFormat(f"Invalid YAML: {e}") from e


def load_document(path: str | Path) -> TimelineDocument:
    p = Path(path)
    doc = TimelineDocument()
    if p.suffix.lower() in YAML_SUFFIXES:
        doc.from_dict(read_yaml(p))
    else:
        doc.from_json(p.read_text(encoding="utf-8"))
    return doc


def save_document(doc: TimelineDocument, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    if p.suffix.lower() in YAML_SUFFIXES:
        text = yaml.safe_dump(doc.to_dict(), sort_keys=False)
    else:
        text = doc.to_json() + "\n"
    p.write_text(text, encoding="utf-8")
    return p


def write_jsonschema(out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    schema = TimelineData.model_json_schema(by_alias=True)
    out_path.write_text(json.dumps(schema, indent=2), encoding="utf-8")
    return out_path
