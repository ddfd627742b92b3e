"""Content store contract: path-addressed text files with commit messages"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ContentFile:
    path: str
    content: str


class ContentStore(ABC):
    """Versioned file host holding page content.

    Reads return None for a missing path; any other failure raises and is
    left to the caller. Writes replace the file and record `message` as
    commit metadata.
    """

    @abstractmethod
    async def get_content(self, path: str) -> ContentFile | None:
        raise NotImplementedError

    @abstractmethod
    async def put_content(self, path: str, content: str, message: str) -> bool:
        """Write content at path. Returns False when the stored content was already identical."""
        raise NotImplementedError
