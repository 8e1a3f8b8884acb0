"""Base resource locator contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class Resource:
    """A bundled file to be loaded.

    `name` is a slash-separated path, used in log and error messages and by
    the basename identifier strategy.
    """

    name: str
    reader: Callable[[], str]

    def read_text(self) -> str:
        return self.reader()


class BaseResourceLocator(ABC):
    """Abstract lookup of bundled resource directories."""

    @staticmethod
    def _normalize_directory(directory: str) -> str:
        normalized = directory.strip().strip("/")
        if ".." in normalized.split("/"):
            raise ValueError(f"Directory must not leave the resource root: {directory}")
        return normalized

    @abstractmethod
    def list_resources(self, directory: str) -> list[Resource]:
        """Return files directly under `directory`, sorted by name.

        A directory that does not exist yields an empty list.
        """
