"""JSON Schema validation for batch configuration sections.

Sections are authored as YAML but validated as JSON Schema Draft 2020-12
documents. Validation is strict:
- Unknown keys are rejected.
- Unknown kinds are rejected.
- Validation errors are surfaced with stable JSON Pointer-like paths.

Mode values are deliberately only type-checked here; `RunMode.parse` owns
the descriptive error for an unrecognized mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from jsonschema import Draft202012Validator

from batchloop.errors import ConfigurationError, SchemaValidationError, SchemaViolation

BATCH_SECTION_KIND = "BatchSection"

BATCH_SECTION_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Batch section",
    "type": "object",
    "required": ["handler"],
    "additionalProperties": False,
    "properties": {
        "handler": {"type": "string", "minLength": 1},
        "sleepSeconds": {"type": "integer", "minimum": 0},
        "mode": {"type": "string"},
        "ping": {"type": "boolean"},
    },
}


def _escape_json_pointer_token(token: str) -> str:
    # RFC 6901 escaping.
    return token.replace("~", "~0").replace("/", "~1")


def _json_pointer(path: Iterable[Any]) -> str:
    parts: list[str] = []
    for p in path:
        if isinstance(p, int):
            parts.append(str(p))
        else:
            parts.append(_escape_json_pointer_token(str(p)))
    return "/" + "/".join(parts) if parts else "/"


@dataclass(frozen=True)
class SchemaBundle:
    kind: str
    schema: dict[str, Any]


class SchemaValidator:
    """Validates configuration documents by kind."""

    def __init__(self, bundles: dict[str, SchemaBundle]):
        self._bundles = dict(bundles)
        self._validators: dict[str, Draft202012Validator] = {}

    @classmethod
    def default(cls) -> "SchemaValidator":
        return cls({BATCH_SECTION_KIND: SchemaBundle(kind=BATCH_SECTION_KIND, schema=BATCH_SECTION_SCHEMA)})

    def validate(self, kind: str, document: Any, *, prefix: Iterable[Any] = ()) -> None:
        validator = self._get_or_build_validator(kind)
        base = list(prefix)

        violations = [
            SchemaViolation(path=_json_pointer(base + list(err.absolute_path)), message=err.message)
            for err in validator.iter_errors(document)
        ]

        if violations:
            # Stable order: helps tests and makes errors easier to scan.
            violations.sort(key=lambda v: (v.path, v.message))
            raise SchemaValidationError(kind=kind, violations=violations)

    def _get_or_build_validator(self, kind: str) -> Draft202012Validator:
        if kind in self._validators:
            return self._validators[kind]

        if kind not in self._bundles:
            raise ConfigurationError(f"Unknown schema kind: {kind}")
        schema = self._bundles[kind].schema

        Draft202012Validator.check_schema(schema)
        validator = Draft202012Validator(schema)
        self._validators[kind] = validator
        return validator
