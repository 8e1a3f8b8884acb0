"""Identifier resolution strategies.

Each `IdStrategy` maps to one resolver registered in `IdResolverFactory`.
A resolver decides the identifier of a resource, the verb of the first
request, and whether a 400/404 answer falls back to POST-create.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import ClassVar
from urllib.parse import quote_plus

from tenant_loader.core.errors import IdentifierError
from tenant_loader.core.types import IdStrategy, LoadRule
from tenant_loader.observability.logger import get_logger

logger = get_logger(__name__)


class BaseIdResolver(ABC):
    """Contract for per-strategy identifier resolution."""

    method: ClassVar[str] = "PUT"
    post_fallback: ClassVar[bool] = True

    @abstractmethod
    def resolve(self, rule: LoadRule, resource_name: str, content: str) -> str | None:
        """Return the identifier, or `None` when requests carry no id suffix.

        Raises:
            IdentifierError: the identifier is missing or cannot be encoded.
        """


class ContentIdResolver(BaseIdResolver):
    """Identifier taken from a named field of the JSON content."""

    def resolve(self, rule: LoadRule, resource_name: str, content: str) -> str | None:
        try:
            document = json.loads(content)
        except ValueError as error:
            raise IdentifierError(f"Invalid JSON for url={resource_name}: {error}") from error

        value = document.get(rule.id_property) if isinstance(document, dict) else None
        if value is None or isinstance(value, (dict, list)):
            message = f"Missing property {rule.id_property} for url={resource_name}"
            logger.warning(message)
            raise IdentifierError(message)

        raw_id = value if isinstance(value, str) else json.dumps(value)
        try:
            return quote_plus(raw_id, safe="", encoding="utf-8", errors="strict")
        except UnicodeEncodeError as error:
            raise IdentifierError(f"Encoding of {raw_id} failed") from error


class BasenameIdResolver(BaseIdResolver):
    """Identifier taken from the file name, without directory and extension."""

    def resolve(self, rule: LoadRule, resource_name: str, content: str) -> str | None:
        name = resource_name.rsplit("/", 1)[-1]
        dot = name.rfind(".")
        identifier = name[:dot] if dot >= 0 else name
        if not identifier:
            raise IdentifierError(f"No basename for {resource_name}")
        return identifier


class RawPutResolver(BaseIdResolver):
    """PUT to the endpoint itself; the service reads the id from the body."""

    post_fallback = False

    def resolve(self, rule: LoadRule, resource_name: str, content: str) -> str | None:
        return None


class RawPostResolver(BaseIdResolver):
    """POST to the endpoint itself, without an identifier."""

    method = "POST"
    post_fallback = False

    def resolve(self, rule: LoadRule, resource_name: str, content: str) -> str | None:
        return None


class IdResolverFactory:
    """Registry mapping identifier strategies to resolver classes."""

    _RESOLVERS: dict[IdStrategy, type[BaseIdResolver]] = {}

    @classmethod
    def register_resolver(cls, strategy: IdStrategy, resolver_cls: type[BaseIdResolver]) -> None:
        if not issubclass(resolver_cls, BaseIdResolver):
            raise ValueError("Resolver class must inherit from BaseIdResolver")
        cls._RESOLVERS[IdStrategy(strategy)] = resolver_cls

    @classmethod
    def create(cls, strategy: IdStrategy | str) -> BaseIdResolver:
        try:
            normalized = IdStrategy(strategy)
        except ValueError as error:
            raise ValueError(
                f"Unsupported id strategy '{strategy}'. "
                f"Available strategies: {', '.join(cls.list_strategies())}"
            ) from error

        resolver_cls = cls._RESOLVERS.get(normalized)
        if resolver_cls is None:
            available = ", ".join(cls.list_strategies()) or "(none)"
            raise ValueError(
                f"No resolver registered for id strategy '{normalized.value}'. "
                f"Available strategies: {available}"
            )
        return resolver_cls()

    @classmethod
    def list_strategies(cls) -> list[str]:
        return sorted(strategy.value for strategy in cls._RESOLVERS)


IdResolverFactory.register_resolver(IdStrategy.CONTENT, ContentIdResolver)
IdResolverFactory.register_resolver(IdStrategy.BASENAME, BasenameIdResolver)
IdResolverFactory.register_resolver(IdStrategy.RAW_PUT, RawPutResolver)
IdResolverFactory.register_resolver(IdStrategy.RAW_POST, RawPostResolver)
