"""Declarative interception policy loaded from YAML.

A policy file looks like::

    schema_version: 1
    default: intercept          # or "skip"
    rules:
      - type: "billing.*Service"
        include: ["charge*", "refund"]
        exclude: ["_*"]

Rules are evaluated in order. A rule applies when its ``type`` glob matches the
declaring type's qualified name (``module.QualName``) or its bare ``__qualname__``.
The first applicable rule whose exclude or include globs match the member name
decides; otherwise the policy default is used.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import TYPE_CHECKING, Final, cast

import yaml

from nexus_proxy.constants import POLICY_SCHEMA_VERSION
from nexus_proxy.domain.typeutil import qualified_name

if TYPE_CHECKING:
    from os import PathLike

    from nexus_proxy.domain.members import MethodInfo

logger = logging.getLogger(__name__)

_ALLOWED_TOP_LEVEL: Final[frozenset[str]] = frozenset({"schema_version", "default", "rules"})
_ALLOWED_RULE_FIELDS: Final[frozenset[str]] = frozenset({"type", "include", "exclude"})
_DECISIONS: Final[dict[str, bool]] = {"intercept": True, "skip": False}


class PolicyLoadError(ValueError):
    """Raised when a policy file cannot be read or validated."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path = path
        prefix = f"{path}: " if path is not None else ""
        super().__init__(f"{prefix}{message}")


@dataclass(frozen=True, slots=True)
class PolicyRule:
    type_pattern: str
    include: tuple[str, ...] = ("*",)
    exclude: tuple[str, ...] = ()

    def applies_to(self, declaring_type: type) -> bool:
        return fnmatchcase(qualified_name(declaring_type), self.type_pattern) or fnmatchcase(
            declaring_type.__qualname__, self.type_pattern
        )

    def decide(self, member_name: str) -> bool | None:
        if any(fnmatchcase(member_name, pattern) for pattern in self.exclude):
            return False
        if any(fnmatchcase(member_name, pattern) for pattern in self.include):
            return True
        return None


@dataclass(frozen=True, slots=True)
class PatternHook:
    """Generation hook driven by ordered glob rules; compares by value."""

    rules: tuple[PolicyRule, ...] = ()
    default: bool = True

    def should_intercept(self, member: MethodInfo) -> bool:
        for rule in self.rules:
            if not rule.applies_to(member.declaring_type):
                continue
            decision = rule.decide(member.name)
            if decision is not None:
                return decision
        return self.default

    def non_proxyable_member_notification(self, member: MethodInfo, reason: str) -> None:
        logger.debug("policy skipped non-proxyable member %s: %s", member.qualified_name, reason)

    def methods_inspected(self) -> None:
        return None


def load_policy_hook(path: str | PathLike[str]) -> PatternHook:
    """Read and validate a YAML policy file."""
    policy_path = Path(path)
    try:
        with policy_path.open("r", encoding="utf-8") as handle:
            loaded = cast("object", yaml.safe_load(handle))
    except FileNotFoundError as exc:
        raise PolicyLoadError("policy file does not exist", path=policy_path) from exc
    except OSError as exc:
        raise PolicyLoadError(f"unable to read policy file: {exc}", path=policy_path) from exc
    except yaml.YAMLError as exc:
        raise PolicyLoadError(f"invalid YAML ({exc})", path=policy_path) from exc

    try:
        return parse_policy_hook(loaded)
    except PolicyLoadError as exc:
        raise PolicyLoadError(str(exc), path=policy_path) from exc


def parse_policy_hook(document: object) -> PatternHook:
    """Build a :class:`PatternHook` from an already parsed mapping."""
    if document is None:
        return PatternHook()
    parsed = _as_string_key_mapping(document, "policy")

    unknown = sorted(set(parsed) - _ALLOWED_TOP_LEVEL)
    if unknown:
        raise PolicyLoadError(
            f"policy: unexpected fields: {unknown}; allowed fields: {sorted(_ALLOWED_TOP_LEVEL)}"
        )

    version = parsed.get("schema_version", POLICY_SCHEMA_VERSION)
    if isinstance(version, bool) or not isinstance(version, int):
        raise PolicyLoadError("policy.schema_version: expected integer")
    if version != POLICY_SCHEMA_VERSION:
        raise PolicyLoadError(
            f"policy.schema_version: unsupported version {version}; "
            f"expected {POLICY_SCHEMA_VERSION}"
        )

    default = _coerce_decision(parsed.get("default", "intercept"), "policy.default")

    raw_rules = parsed.get("rules", [])
    if not isinstance(raw_rules, list):
        raise PolicyLoadError(
            f"policy.rules: expected a sequence, got {type(raw_rules).__name__}"
        )
    rules = tuple(
        _parse_rule(item, f"policy.rules[{index}]") for index, item in enumerate(raw_rules)
    )
    return PatternHook(rules=rules, default=default)


def _parse_rule(value: object, location: str) -> PolicyRule:
    parsed = _as_string_key_mapping(value, location)
    unknown = sorted(set(parsed) - _ALLOWED_RULE_FIELDS)
    if unknown:
        raise PolicyLoadError(f"{location}: unexpected fields: {unknown}")
    if "type" not in parsed:
        raise PolicyLoadError(f"{location}: missing required field 'type'")

    type_pattern = _coerce_non_empty_str(parsed["type"], f"{location}.type")
    include = (
        _coerce_patterns(parsed["include"], f"{location}.include")
        if "include" in parsed
        else ("*",)
    )
    exclude = (
        _coerce_patterns(parsed["exclude"], f"{location}.exclude") if "exclude" in parsed else ()
    )
    return PolicyRule(type_pattern=type_pattern, include=include, exclude=exclude)


def _coerce_decision(value: object, path: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _DECISIONS:
        return _DECISIONS[value.strip().lower()]
    allowed = ", ".join(sorted(_DECISIONS))
    raise PolicyLoadError(f"{path}: invalid decision {value!r}; expected one of: {allowed}")


def _coerce_patterns(value: object, path: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (_coerce_non_empty_str(value, path),)
    if not isinstance(value, list):
        raise PolicyLoadError(f"{path}: expected string or list of strings")
    return tuple(
        _coerce_non_empty_str(item, f"{path}[{index}]") for index, item in enumerate(value)
    )


def _as_string_key_mapping(value: object, path: str) -> dict[str, object]:
    if not isinstance(value, Mapping):
        raise PolicyLoadError(f"{path}: expected object, got {type(value).__name__}")

    parsed: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise PolicyLoadError(f"{path}: object keys must be strings, got {type(key).__name__}")
        parsed[key] = item
    return parsed


def _coerce_non_empty_str(value: object, path: str) -> str:
    if not isinstance(value, str):
        raise PolicyLoadError(f"{path}: expected string, got {type(value).__name__}")
    normalized = value.strip()
    if not normalized:
        raise PolicyLoadError(f"{path}: must not be empty")
    return normalized


__all__ = ["PatternHook", "PolicyLoadError", "PolicyRule", "load_policy_hook", "parse_policy_hook"]
