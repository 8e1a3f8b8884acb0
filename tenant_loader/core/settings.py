"""Settings loading and validation.

This module provides a minimal, type-safe configuration loader for the project.

Design principles:
- Fail-fast: missing required fields raise a readable error that includes field path
- No side effects: this module only parses/validates configuration; no network/IO init
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from tenant_loader.core.types import IdStrategy


class SettingsError(ValueError):
    """Raised when settings are missing or invalid."""


@dataclass(frozen=True)
class HttpSettings:
    timeout: float
    max_workers: int | None


@dataclass(frozen=True)
class LoadingSettings:
    resource_root: str
    package: str | None
    okapi_url: str | None


@dataclass(frozen=True)
class ObservabilitySettings:
    log_level: str
    trace_enabled: bool
    trace_file: str
    structured_logging: bool


@dataclass(frozen=True)
class RuleSettings:
    key: str
    lead: str
    path: str
    uri: str
    strategy: IdStrategy
    id_property: str
    accept_status: list[int]
    filter: str | None


@dataclass(frozen=True)
class Settings:
    http: HttpSettings
    loading: LoadingSettings
    observability: ObservabilitySettings
    rules: list[RuleSettings]


def _optional_section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise SettingsError(f"Invalid section type: {key}")
    return value


def _require(raw: Mapping[str, Any], key: str, path: str) -> Any:
    if key not in raw:
        raise SettingsError(f"Missing required field: {path}")
    return raw[key]


def _as_str(value: Any, path: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise SettingsError(f"Invalid value for {path}: expected non-empty string")
    return value


def _as_optional_str(value: Any, path: str) -> str | None:
    if value is None:
        return None
    return _as_str(value, path)


def _as_int(value: Any, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SettingsError(f"Invalid value for {path}: expected int")
    return value


def _as_optional_positive_int(value: Any, path: str) -> int | None:
    if value is None:
        return None
    number = _as_int(value, path)
    if number <= 0:
        raise SettingsError(f"Invalid value for {path}: expected positive int")
    return number


def _as_bool(value: Any, path: str) -> bool:
    if not isinstance(value, bool):
        raise SettingsError(f"Invalid value for {path}: expected bool")
    return value


def _as_float(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SettingsError(f"Invalid value for {path}: expected float")
    return float(value)


def _as_int_list(value: Any, path: str) -> list[int]:
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        raise SettingsError(f"Invalid value for {path}: expected list[int]")
    return [_as_int(item, f"{path}[{i}]") for i, item in enumerate(value)]


def _as_strategy(value: Any, path: str) -> IdStrategy:
    try:
        return IdStrategy(_as_str(value, path).strip().lower())
    except ValueError as e:
        allowed = ", ".join(s.value for s in IdStrategy)
        raise SettingsError(f"Invalid value for {path}: expected one of {allowed}") from e


def _parse_rule(raw: Any, index: int) -> RuleSettings:
    prefix = f"rules[{index}]"
    if not isinstance(raw, Mapping):
        raise SettingsError(f"Invalid value for {prefix}: expected mapping")

    path = raw.get("path", "")
    if not isinstance(path, str):
        raise SettingsError(f"Invalid value for {prefix}.path: expected string")
    lead = raw.get("lead", "")
    if not isinstance(lead, str):
        raise SettingsError(f"Invalid value for {prefix}.lead: expected string")

    uri_default = path if path else None
    uri_raw = raw.get("uri", uri_default)
    if uri_raw is None:
        raise SettingsError(f"Missing required field: {prefix}.uri")

    return RuleSettings(
        key=_as_str(_require(raw, "key", f"{prefix}.key"), f"{prefix}.key"),
        lead=lead,
        path=path,
        uri=_as_str(uri_raw, f"{prefix}.uri"),
        strategy=_as_strategy(raw.get("strategy", "content"), f"{prefix}.strategy"),
        id_property=_as_str(raw.get("id_property", "id"), f"{prefix}.id_property"),
        accept_status=_as_int_list(raw.get("accept_status", []), f"{prefix}.accept_status"),
        filter=_as_optional_str(raw.get("filter"), f"{prefix}.filter"),
    )


def validate_settings(settings: Settings) -> None:
    """Validate required fields and basic invariants."""

    if settings.http.timeout <= 0:
        raise SettingsError("Invalid value for http.timeout: expected positive number")
    if not settings.loading.package and not settings.loading.resource_root:
        raise SettingsError("Missing required field: loading.resource_root")


def load_settings(path: str | Path) -> Settings:
    """Load settings from a YAML file."""

    settings_path = Path(path)
    if not settings_path.exists():
        raise SettingsError(f"Settings file not found: {settings_path}")

    try:
        raw_obj = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in settings file: {settings_path}") from e

    if raw_obj is None or not isinstance(raw_obj, Mapping):
        raise SettingsError(f"Invalid settings root: expected mapping in {settings_path}")

    http_raw = _optional_section(raw_obj, "http")
    loading_raw = _optional_section(raw_obj, "loading")
    observability_raw = _optional_section(raw_obj, "observability")

    rules_raw = _require(raw_obj, "rules", "rules")
    if not isinstance(rules_raw, Sequence) or isinstance(rules_raw, (str, bytes)):
        raise SettingsError("Invalid value for rules: expected list")

    http = HttpSettings(
        timeout=_as_float(http_raw.get("timeout", 30.0), "http.timeout"),
        max_workers=_as_optional_positive_int(http_raw.get("max_workers"), "http.max_workers"),
    )

    loading = LoadingSettings(
        resource_root=_as_str(
            loading_raw.get("resource_root", "./resources"),
            "loading.resource_root",
        ),
        package=_as_optional_str(loading_raw.get("package"), "loading.package"),
        okapi_url=_as_optional_str(loading_raw.get("okapi_url"), "loading.okapi_url"),
    )

    observability = ObservabilitySettings(
        log_level=_as_str(observability_raw.get("log_level", "INFO"), "observability.log_level"),
        trace_enabled=_as_bool(
            observability_raw.get("trace_enabled", False),
            "observability.trace_enabled",
        ),
        trace_file=_as_str(
            observability_raw.get("trace_file", "./logs/traces.jsonl"),
            "observability.trace_file",
        ),
        structured_logging=_as_bool(
            observability_raw.get("structured_logging", False),
            "observability.structured_logging",
        ),
    )

    settings = Settings(
        http=http,
        loading=loading,
        observability=observability,
        rules=[_parse_rule(rule_raw, i) for i, rule_raw in enumerate(rules_raw)],
    )

    validate_settings(settings)
    return settings
