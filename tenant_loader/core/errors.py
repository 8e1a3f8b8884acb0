"""Errors raised while loading a single resource.

`TenantLoading.perform` converts these into a failed `LoadOutcome`; they do
not escape the loader.
"""

from __future__ import annotations


class TenantLoadingError(RuntimeError):
    """Base class for per-resource loading failures."""


class ResourceReadError(TenantLoadingError):
    """A resource could not be read."""

    def __init__(self, resource: str, cause: Exception) -> None:
        super().__init__(f"IOException for url={resource} ex={cause}")
        self.resource = resource


class IdentifierError(TenantLoadingError):
    """The identifier of a resource could not be determined or encoded."""


class UpsertError(TenantLoadingError):
    """A PUT/POST was rejected or could not be sent."""

    def __init__(
        self,
        method: str,
        url: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        if status_code is not None:
            message = f"{method} {url} returned status {status_code}"
        else:
            message = f"{method} {url}: {reason}"
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
