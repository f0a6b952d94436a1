from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .io import load_document
from .rules import InvalidFormat


@dataclass
class ValidationResult:
    ok: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def validate_file(path: Path, strict: bool = False) -> ValidationResult:
    try:
        doc = load_document(path)
    except InvalidFormat as e:
        return ValidationResult(False, [str(e)], [])
    except OSError as e:
        return ValidationResult(False, [f"Failed reading {path}: {e}"], [])

    warnings = doc.lint()
    if strict:
        return ValidationResult(len(warnings) == 0, [], warnings)
    return ValidationResult(True, [], warnings)
