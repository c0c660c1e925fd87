from __future__ import annotations

from typing import Iterable

from .base import BasePlatform
from ..errors import InvalidSourceError


class PlatformResolver:
    def __init__(self, platforms: Iterable[BasePlatform]) -> None:
        self.platforms = list(platforms)

    def find(self, value: str) -> BasePlatform | None:
        for platform in self.platforms:
            if platform.matches(value):
                return platform
        return None

    def supports(self, value: str) -> bool:
        return self.find(value) is not None

    def resolve(self, value: str, timeout: float | None = None) -> str:
        platform = self.find(value)
        if platform is None:
            raise InvalidSourceError("Unsupported input for platform resolution")
        return platform.resolve(value, timeout=timeout)
