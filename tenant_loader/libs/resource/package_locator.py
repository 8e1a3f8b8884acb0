"""Package-data resource locator.

Resolves directories shipped inside an installed Python package through
`importlib.resources`, so resources are found the same way whether the
package is installed as files or imported from a zip archive.
"""

from __future__ import annotations

from importlib import import_module, resources
from typing import Any

from tenant_loader.libs.resource.base_locator import BaseResourceLocator, Resource
from tenant_loader.observability.logger import get_logger

logger = get_logger(__name__)


class PackageResourceLocatorError(RuntimeError):
    """Raised when the resource package cannot be imported."""


class PackageResourceLocator(BaseResourceLocator):
    """Resolves resource directories inside a Python package."""

    def __init__(self, package: str) -> None:
        if not package or not package.strip():
            raise ValueError("Package name cannot be empty")
        self.package = package.strip()

    def _package_root(self) -> Any:
        try:
            module = import_module(self.package)
        except ImportError as error:
            raise PackageResourceLocatorError(
                f"Resource package '{self.package}' cannot be imported"
            ) from error
        return resources.files(module)

    def list_resources(self, directory: str) -> list[Resource]:
        normalized = self._normalize_directory(directory)
        target = self._package_root()
        for part in filter(None, normalized.split("/")):
            target = target.joinpath(part)

        if not target.is_dir():
            logger.info("Resource directory not found: %s:%s", self.package, normalized)
            return []

        entries = sorted((e for e in target.iterdir() if e.is_file()), key=lambda e: e.name)
        prefix = f"{self.package}:{normalized}" if normalized else f"{self.package}:"
        return [
            Resource(
                name=f"{prefix}/{entry.name}",
                reader=lambda entry=entry: entry.read_text(encoding="utf-8"),
            )
            for entry in entries
        ]
