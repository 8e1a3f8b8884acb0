"""Filesystem-backed resource locator."""

from __future__ import annotations

from functools import partial
from pathlib import Path

from tenant_loader.libs.resource.base_locator import BaseResourceLocator, Resource
from tenant_loader.observability.logger import get_logger

logger = get_logger(__name__)


def _read_file(path: Path) -> str:
    return path.read_text(encoding="utf-8")


class DirectoryResourceLocator(BaseResourceLocator):
    """Resolves resource directories below a root directory on disk."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def list_resources(self, directory: str) -> list[Resource]:
        normalized = self._normalize_directory(directory)
        target = self.root / normalized if normalized else self.root
        if not target.is_dir():
            logger.info("Resource directory not found: %s", target)
            return []

        resources: list[Resource] = []
        for path in sorted(target.iterdir()):
            if not path.is_file():
                continue
            resources.append(Resource(name=path.as_posix(), reader=partial(_read_file, path)))
        return resources
