"""Build a `TenantLoading` from settings."""

from __future__ import annotations

from importlib import import_module

from tenant_loader.core.settings import RuleSettings, Settings
from tenant_loader.core.types import ContentFilter, LoadRule
from tenant_loader.libs.resource import (
    BaseResourceLocator,
    DirectoryResourceLocator,
    PackageResourceLocator,
)
from tenant_loader.loading.tenant_loading import TenantLoading


class RuleConfigError(ValueError):
    """Raised when a configured rule cannot be turned into a `LoadRule`."""


def resolve_filter(reference: str) -> ContentFilter:
    """Import a content filter given as `"package.module:function"`."""

    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise RuleConfigError(
            f"Invalid filter reference '{reference}': expected 'package.module:function'"
        )

    try:
        module = import_module(module_name)
    except ImportError as error:
        raise RuleConfigError(f"Cannot import filter module '{module_name}'") from error

    target = getattr(module, attribute, None)
    if not callable(target):
        raise RuleConfigError(f"Filter '{reference}' is not a callable")
    return target


def rule_from_settings(rule: RuleSettings) -> LoadRule:
    return LoadRule(
        key=rule.key,
        lead=rule.lead,
        file_path=rule.path,
        uri_path=rule.uri,
        strategy=rule.strategy,
        id_property=rule.id_property,
        content_filter=resolve_filter(rule.filter) if rule.filter else None,
        accept_status=frozenset(rule.accept_status),
    )


def build_locator(settings: Settings) -> BaseResourceLocator:
    if settings.loading.package:
        return PackageResourceLocator(settings.loading.package)
    return DirectoryResourceLocator(settings.loading.resource_root)


def build_loader(
    settings: Settings,
    locator: BaseResourceLocator | None = None,
) -> TenantLoading:
    """Create a loader holding the configured rules, in file order."""

    loading = TenantLoading(
        locator or build_locator(settings),
        timeout=settings.http.timeout,
        max_workers=settings.http.max_workers,
    )
    for rule in settings.rules:
        loading.add_rule(rule_from_settings(rule))
    return loading
