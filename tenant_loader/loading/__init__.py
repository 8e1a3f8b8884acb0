"""Tenant loading: rules, identifier strategies and the loader itself."""

from tenant_loader.loading.identifier import (
    BaseIdResolver,
    BasenameIdResolver,
    ContentIdResolver,
    IdResolverFactory,
    RawPostResolver,
    RawPutResolver,
)
from tenant_loader.loading.rule_factory import RuleConfigError, build_loader, resolve_filter
from tenant_loader.loading.tenant_loading import TenantLoading, resolve_endpoint_base_url
from tenant_loader.loading.uploader import ResourceUploader

__all__ = [
    "BaseIdResolver",
    "BasenameIdResolver",
    "ContentIdResolver",
    "IdResolverFactory",
    "RawPostResolver",
    "RawPutResolver",
    "ResourceUploader",
    "RuleConfigError",
    "TenantLoading",
    "build_loader",
    "resolve_endpoint_base_url",
    "resolve_filter",
]
