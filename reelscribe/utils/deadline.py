import time
from typing import Optional

from ..errors import PipelineTimeoutError


class Deadline:
    def __init__(self, seconds: Optional[float]) -> None:
        self.seconds = seconds
        self.started = time.monotonic()

    def remaining(self) -> Optional[float]:
        if self.seconds is None:
            return None
        return self.seconds - (time.monotonic() - self.started)

    def check(self, stage: str) -> None:
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise PipelineTimeoutError(
                f"Pipeline deadline of {self.seconds:g}s exceeded before {stage}",
                stage=stage,
            )

    def cap(self, timeout: Optional[float]) -> Optional[float]:
        """Shrink a stage timeout so it cannot outlive the deadline."""
        remaining = self.remaining()
        if remaining is None:
            return timeout
        if timeout is None:
            return max(remaining, 0.0)
        return max(min(timeout, remaining), 0.0)
