from __future__ import annotations

from abc import ABC, abstractmethod


class BasePlatform(ABC):
    name: str = "base"

    @abstractmethod
    def matches(self, value: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def resolve(self, value: str, timeout: float | None = None) -> str:
        """Return a direct, fetchable media URL for a post URL."""
        raise NotImplementedError
