"""Core data types for tenant loading.

These types are shared by the loader, the settings layer and the CLI.

Rules:
- a LoadRule is immutable once built; builders snapshot their state into one
- flags are enabled by `True` or the string "true" (any case)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional

ContentFilter = Callable[[str], str]


class IdStrategy(str, Enum):
    """How the unique identifier of a resource is determined."""

    CONTENT = "content"  # id in JSON content, PUT/POST
    BASENAME = "basename"  # id is the file basename, PUT/POST
    RAW_PUT = "raw_put"  # PUT without id
    RAW_POST = "raw_post"  # POST without id

    @property
    def is_raw(self) -> bool:
        return self in (IdStrategy.RAW_PUT, IdStrategy.RAW_POST)


@dataclass(frozen=True)
class LoadRule:
    """One directory-to-endpoint upload rule."""

    key: str
    lead: str
    file_path: str
    uri_path: str
    strategy: IdStrategy = IdStrategy.CONTENT
    id_property: str = "id"
    content_filter: Optional[ContentFilter] = None
    accept_status: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("LoadRule.key must be a non-empty string")
        if not self.uri_path:
            raise ValueError("LoadRule.uri_path must be a non-empty string")
        if not isinstance(self.strategy, IdStrategy):
            object.__setattr__(self, "strategy", IdStrategy(self.strategy))
        object.__setattr__(self, "accept_status", frozenset(self.accept_status))

    @property
    def source_directory(self) -> str:
        parts = [p.strip("/") for p in (self.lead, self.file_path) if p]
        return "/".join(p for p in parts if p)

    def is_triggered(self, flags: Mapping[str, Any] | None) -> bool:
        if not flags:
            return False
        return is_flag_enabled(flags.get(self.key))


@dataclass(frozen=True)
class LoadOutcome:
    """Result of one `perform` call: a file count or the first failure."""

    count: int
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, count: int) -> "LoadOutcome":
        return cls(count=count)

    @classmethod
    def failure(cls, message: str, count: int = 0) -> "LoadOutcome":
        return cls(count=count, error=message)

    def to_dict(self) -> dict[str, Any]:
        return {"succeeded": self.succeeded, "count": self.count, "error": self.error}


def is_flag_enabled(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def flags_from_tenant_attributes(attributes: Mapping[str, Any] | None) -> dict[str, Any]:
    """Turn a tenant-attributes document into a flag mapping.

    The document carries `parameters` as a list of `{"key": ..., "value": ...}`
    objects. Later entries win when a key repeats.
    """

    if not attributes:
        return {}

    parameters = attributes.get("parameters") or []
    if not isinstance(parameters, list):
        raise ValueError("tenant attributes 'parameters' must be a list")

    flags: dict[str, Any] = {}
    for index, parameter in enumerate(parameters):
        if not isinstance(parameter, Mapping) or "key" not in parameter:
            raise ValueError(f"parameters[{index}] must be an object with a 'key'")
        flags[str(parameter["key"])] = parameter.get("value")
    return flags
