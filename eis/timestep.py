"""Frame time step."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TimeStep:
    """Elapsed time of one frame, in seconds."""

    seconds: float = 0.0

    @property
    def milliseconds(self) -> float:
        return self.seconds * 1000.0

    def __float__(self) -> float:
        return float(self.seconds)

    def __mul__(self, other: float) -> float:
        return self.seconds * other

    __rmul__ = __mul__