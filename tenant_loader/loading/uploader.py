"""Upsert of a single resource.

PUT (or POST for raw-POST rules) to the identified URL; on 400/404 for
identified rules retry once with POST to the base endpoint.
"""

from __future__ import annotations

from tenant_loader.core.errors import ResourceReadError, TenantLoadingError, UpsertError
from tenant_loader.core.types import LoadRule
from tenant_loader.libs.http.upsert_client import UpsertClient
from tenant_loader.libs.resource.base_locator import Resource
from tenant_loader.loading.identifier import BaseIdResolver
from tenant_loader.observability.logger import get_logger

logger = get_logger(__name__)

ID_PLACEHOLDER = "%d"
SUCCESS_STATUSES = frozenset({200, 201, 204})
FALLBACK_STATUSES = frozenset({400, 404})


def build_url(endpoint: str, identifier: str | None) -> str:
    """Target URL for the first request of an upsert."""

    if identifier is None:
        return endpoint
    if ID_PLACEHOLDER in endpoint:
        return endpoint.replace(ID_PLACEHOLDER, identifier)
    return f"{endpoint}/{identifier}"


def base_endpoint(endpoint: str, identifier: str | None = None) -> str:
    """Collection URL used for the POST fallback.

    A template ending in the placeholder (`perms/%d`) posts to the part
    before it. A placeholder inside the path (`users/%d/permissions`) names
    a nested collection, so the fallback posts there with the id filled in.
    """

    if ID_PLACEHOLDER not in endpoint:
        return endpoint
    if endpoint.rstrip("/").endswith(ID_PLACEHOLDER) or identifier is None:
        return endpoint.split(ID_PLACEHOLDER, 1)[0].rstrip("/")
    return endpoint.replace(ID_PLACEHOLDER, identifier)


def is_accepted(rule: LoadRule, status_code: int) -> bool:
    return status_code in SUCCESS_STATUSES or status_code in rule.accept_status


class ResourceUploader:
    """Uploads resources of one rule to one endpoint."""

    def __init__(
        self,
        rule: LoadRule,
        resolver: BaseIdResolver,
        client: UpsertClient,
        endpoint: str,
    ) -> None:
        self.rule = rule
        self.resolver = resolver
        self.client = client
        self.endpoint = endpoint

    def _read(self, resource: Resource) -> str:
        try:
            content = resource.read_text()
        except (OSError, UnicodeDecodeError) as error:
            raise ResourceReadError(resource.name, error) from error
        if self.rule.content_filter is not None:
            try:
                content = self.rule.content_filter(content)
            except Exception as error:  # noqa: BLE001 - filters are caller code
                raise TenantLoadingError(
                    f"Content filter failed for url={resource.name}: {error}"
                ) from error
            if not isinstance(content, str):
                raise TenantLoadingError(
                    f"Content filter returned {type(content).__name__} "
                    f"instead of text for url={resource.name}"
                )
        return content

    def upload(self, resource: Resource) -> None:
        """Upsert one resource.

        Raises:
            TenantLoadingError: on read, identifier or HTTP failure.
        """

        logger.info("Loading resource %s", resource.name)
        content = self._read(resource)
        identifier = self.resolver.resolve(self.rule, resource.name, content)

        method = self.resolver.method
        url = build_url(self.endpoint, identifier)
        status = self._send(method, url, content)

        if self.resolver.post_fallback and status in FALLBACK_STATUSES:
            post_url = base_endpoint(self.endpoint, identifier)
            logger.info("%s %s returned status %s, creating with POST %s", method, url, status, post_url)
            status = self._send("POST", post_url, content)
            method, url = "POST", post_url

        if not is_accepted(self.rule, status):
            error = UpsertError(method, url, status_code=status)
            logger.warning(str(error))
            raise error

    def _send(self, method: str, url: str, content: str) -> int:
        try:
            return self.client.send(method, url, content)
        except UpsertError as error:
            logger.warning(str(error))
            raise
