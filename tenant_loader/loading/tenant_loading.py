"""Loading of bundled reference and sample data during tenant initialization.

Rules are declared with a small builder and executed by `perform`:

    loading = (
        TenantLoading(DirectoryResourceLocator("resources"))
        .with_key("loadReference").with_lead("ref-data")
        .add("groups")
        .with_key("loadSample").with_lead("sample-data")
        .with_id_basename()
        .add("users")
    )
    outcome = loading.perform({"loadReference": "true"}, headers)

Builder state carries over from one `add` to the next; each `add` snapshots
it into an immutable `LoadRule`.

Identifier strategies:
- `with_id_content` / `with_content`: id read from a JSON field, PUT then
  POST-create on 400/404
- `with_id_basename`: id is the file basename, PUT then POST-create
- `with_id_raw` / `with_post_only`: no id, plain PUT / POST to the endpoint
"""

from __future__ import annotations

import warnings
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any, Mapping

from tenant_loader.core.errors import TenantLoadingError
from tenant_loader.core.trace.trace_context import TraceContext
from tenant_loader.core.types import ContentFilter, IdStrategy, LoadOutcome, LoadRule
from tenant_loader.libs.http.upsert_client import UpsertClient
from tenant_loader.libs.resource.base_locator import BaseResourceLocator, Resource
from tenant_loader.libs.resource.package_locator import PackageResourceLocatorError
from tenant_loader.loading.identifier import IdResolverFactory
from tenant_loader.loading.uploader import ResourceUploader
from tenant_loader.observability.logger import get_logger

logger = get_logger(__name__)

URL_TO_HEADER = "X-Okapi-Url-to"
URL_HEADER = "X-Okapi-Url"


@dataclass
class _RuleDraft:
    key: str = ""
    lead: str = ""
    strategy: IdStrategy = IdStrategy.CONTENT
    id_property: str = "id"
    content_filter: ContentFilter | None = None
    accept_status: set[int] = field(default_factory=set)


def _header(headers: Mapping[str, str], name: str) -> str | None:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def resolve_endpoint_base_url(headers: Mapping[str, str] | None) -> str | None:
    """Base URL from `X-Okapi-Url-to`, falling back to `X-Okapi-Url`."""

    headers = headers or {}
    url = _header(headers, URL_TO_HEADER)
    if url is None:
        logger.warning("No %s header", URL_TO_HEADER)
        url = _header(headers, URL_HEADER)
    if url is None:
        logger.warning("No %s header", URL_HEADER)
    return url


class TenantLoading:
    """Ordered set of load rules executed against a tenant's endpoints."""

    def __init__(
        self,
        locator: BaseResourceLocator,
        *,
        timeout: float | None = None,
        max_workers: int | None = None,
    ) -> None:
        if max_workers is not None and max_workers <= 0:
            raise ValueError("max_workers must be positive")
        self.locator = locator
        self.timeout = timeout
        self.max_workers = max_workers
        self._rules: list[LoadRule] = []
        self._next = _RuleDraft()

    @property
    def rules(self) -> tuple[LoadRule, ...]:
        return tuple(self._rules)

    def add_rule(self, rule: LoadRule) -> "TenantLoading":
        if not isinstance(rule, LoadRule):
            raise ValueError("rule must be a LoadRule instance")
        self._rules.append(rule)
        return self

    # builder

    def with_key(self, key: str) -> "TenantLoading":
        """Tenant parameter that triggers the rules added next.

        Conventions are `loadReference` for reference data and `loadSample`
        for sample data.
        """
        self._next.key = key
        return self

    def with_lead(self, lead: str) -> "TenantLoading":
        """Leading resource directory for the rules added next."""
        self._next.lead = lead
        return self

    def with_id_content(self) -> "TenantLoading":
        return self.with_content("id")

    def with_content(self, id_property: str) -> "TenantLoading":
        """Take the unique id from JSON field `id_property`."""
        self._next.id_property = id_property
        self._next.strategy = IdStrategy.CONTENT
        return self

    def with_filter(self, content_filter: ContentFilter | None) -> "TenantLoading":
        """Rewrite each file's content before it is loaded."""
        self._next.content_filter = content_filter
        return self

    def with_accept_status(self, code: int) -> "TenantLoading":
        """Accept `code` as success in addition to 200, 201 and 204.

        Repeated calls accumulate.
        """
        self._next.accept_status.add(int(code))
        return self

    def with_id_basename(self) -> "TenantLoading":
        self._next.strategy = IdStrategy.BASENAME
        return self

    def with_id_raw(self) -> "TenantLoading":
        self._next.strategy = IdStrategy.RAW_PUT
        return self

    def with_post_only(self) -> "TenantLoading":
        self._next.strategy = IdStrategy.RAW_POST
        return self

    def add(self, file_path: str, uri_path: str | None = None) -> "TenantLoading":
        """Add the directory `file_path` below the lead, loaded to `uri_path`.

        `uri_path` defaults to `file_path`; it is relative to the base URL
        and given without a leading slash.
        """
        draft = self._next
        return self.add_rule(
            LoadRule(
                key=draft.key,
                lead=draft.lead,
                file_path=file_path,
                uri_path=uri_path if uri_path is not None else file_path,
                strategy=draft.strategy,
                id_property=draft.id_property,
                content_filter=draft.content_filter,
                accept_status=frozenset(draft.accept_status),
            )
        )

    def add_json_id_content(self, key: str, lead: str, file_path: str, uri_path: str) -> None:
        warnings.warn(
            "add_json_id_content is deprecated; use with_key().with_lead().with_id_content().add()",
            DeprecationWarning,
            stacklevel=2,
        )
        self.with_key(key).with_lead(lead).with_id_content().add(file_path, uri_path)

    def add_json_id_basename(self, key: str, lead: str, file_path: str, uri_path: str) -> None:
        warnings.warn(
            "add_json_id_basename is deprecated; use with_key().with_lead().with_id_basename().add()",
            DeprecationWarning,
            stacklevel=2,
        )
        self.with_key(key).with_lead(lead).with_id_basename().add(file_path, uri_path)

    # execution

    def perform(
        self,
        flags: Mapping[str, Any] | None,
        headers: Mapping[str, str] | None,
        endpoint_base_url: str | None = None,
        trace: TraceContext | None = None,
    ) -> LoadOutcome:
        """Run every triggered rule in order.

        Returns the number of files loaded, or the first failure together
        with the count of files loaded by rules completed before it.
        """

        base_url = endpoint_base_url or resolve_endpoint_base_url(headers)
        if not base_url:
            return LoadOutcome.failure("No X-Okapi-Url header")
        base_url = base_url.rstrip("/")

        loaded = 0
        with UpsertClient(headers, timeout=self.timeout) as client:
            for index, rule in enumerate(self._rules):
                if not rule.is_triggered(flags):
                    continue

                started = perf_counter()
                stage = f"rule_{index}_{rule.key}"
                try:
                    count = self._load_rule(rule, client, base_url)
                except TenantLoadingError as error:
                    if trace is not None:
                        trace.record_stage(
                            f"{stage}_error",
                            {
                                "uri_path": rule.uri_path,
                                "directory": rule.source_directory,
                                "error": str(error),
                                "duration_seconds": perf_counter() - started,
                            },
                        )
                    return LoadOutcome.failure(str(error), count=loaded)

                loaded += count
                if trace is not None:
                    trace.record_stage(
                        stage,
                        {
                            "uri_path": rule.uri_path,
                            "directory": rule.source_directory,
                            "files_loaded": count,
                            "duration_seconds": perf_counter() - started,
                        },
                    )

        return LoadOutcome.success(loaded)

    def _list_resources(self, directory: str) -> list[Resource]:
        try:
            return self.locator.list_resources(directory)
        except (OSError, ValueError, PackageResourceLocatorError) as error:
            raise TenantLoadingError(f"IOException for path {directory} ex={error}") from error

    def _load_rule(self, rule: LoadRule, client: UpsertClient, base_url: str) -> int:
        directory = rule.source_directory
        endpoint = f"{base_url}/{rule.uri_path.lstrip('/')}"
        logger.info("Loading uri_path=%s directory=%s", rule.uri_path, directory)

        resources = self._list_resources(directory)
        if not resources:
            logger.info("No resources found in %s", directory)
            return 0

        uploader = ResourceUploader(
            rule,
            IdResolverFactory.create(rule.strategy),
            client,
            endpoint,
        )
        workers = min(self.max_workers or len(resources), len(resources))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(uploader.upload, resource) for resource in resources]
            for future in as_completed(futures):
                try:
                    future.result()
                except TenantLoadingError:
                    for pending in futures:
                        pending.cancel()
                    raise

        return len(resources)
