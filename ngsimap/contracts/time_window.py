"""TimeWindow — inclusive interval over observation timestamps."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, model_validator


class TimeWindow(BaseModel):
    """``[start, end]`` in epoch seconds.

    ``start <= end`` always holds: construction swaps reversed bounds and the
    ``with_*`` helpers clamp.
    """

    start: float
    end: float

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def order_bounds(cls, data: Any) -> Any:
        if isinstance(data, dict) and "start" in data and "end" in data:
            try:
                a, b = float(data["start"]), float(data["end"])
            except (TypeError, ValueError):
                return data
            return {**data, "start": min(a, b), "end": max(a, b)}
        return data

    def contains(self, timestamp: float) -> bool:
        return self.start <= timestamp <= self.end

    def with_start(self, start: float) -> Self:
        return self.model_copy(update={"start": min(start, self.end)})

    def with_end(self, end: float) -> Self:
        return self.model_copy(update={"end": max(end, self.start)})
