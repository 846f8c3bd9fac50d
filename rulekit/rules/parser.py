"""Parse and validate YAML rule documents."""

from __future__ import annotations

import functools
import json
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator

from rulekit.constants import GENERAL_LANGUAGE
from rulekit.errors import InvalidRuleDocumentError
from rulekit.rules.models import Rule, RuleDocument

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.json"


@functools.lru_cache(maxsize=1)
def document_validator() -> Draft202012Validator:
    schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    return Draft202012Validator(schema)


def _schema_error_message(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


def parse_rule_document(text: str, origin: str) -> RuleDocument:
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InvalidRuleDocumentError(origin, f"malformed YAML: {exc}") from exc

    if raw is None:
        return RuleDocument(origin=origin)
    if not isinstance(raw, dict):
        raise InvalidRuleDocumentError(origin, "must be a YAML mapping")

    error = next(iter(document_validator().iter_errors(raw)), None)
    if error is not None:
        raise InvalidRuleDocumentError(origin, _schema_error_message(error))

    version = raw.get("version")
    return RuleDocument(
        origin=origin,
        version="" if version is None else str(version),
        language=str(raw.get("language") or GENERAL_LANGUAGE),
        framework=raw.get("framework"),
        extends=tuple(raw.get("extends") or ()),
        rules=tuple(Rule.from_mapping(item) for item in raw.get("rules") or ()),
    )


def serialize_rule_document(document: RuleDocument) -> str:
    payload: dict[str, Any] = {}
    if document.version:
        payload["version"] = document.version
    payload["language"] = document.language
    if document.framework:
        payload["framework"] = document.framework
    if document.extends:
        payload["extends"] = list(document.extends)
    payload["rules"] = [rule.to_dict() for rule in document.rules]
    return yaml.safe_dump(payload, default_flow_style=False, sort_keys=False)
