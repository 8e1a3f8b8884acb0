"""Resource locators.

Locators enumerate the bundled JSON files of a resource directory, either
from a directory on disk or from an installed Python package.
"""

from tenant_loader.libs.resource.base_locator import BaseResourceLocator, Resource
from tenant_loader.libs.resource.directory_locator import DirectoryResourceLocator
from tenant_loader.libs.resource.package_locator import (
    PackageResourceLocator,
    PackageResourceLocatorError,
)

__all__ = [
    "BaseResourceLocator",
    "Resource",
    "DirectoryResourceLocator",
    "PackageResourceLocator",
    "PackageResourceLocatorError",
]
