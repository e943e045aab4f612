"""Filter state and aggregate result types."""

from dataclasses import dataclass, field
from enum import Enum

HOURS_PER_DAY = 24


class Granularity(str, Enum):
    """Bucket width."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"


@dataclass(frozen=True)
class FilterState:
    """User-selected slice of the data.

    ``year`` left as None means "latest year present". When
    ``trailing_range_months`` is set, ``year`` and ``month`` are ignored.
    """

    year: int | None = None
    month: int | None = None
    trailing_range_months: int | None = None

    def __post_init__(self) -> None:
        if self.month is not None and not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")
        if self.trailing_range_months is not None and self.trailing_range_months <= 0:
            raise ValueError(
                f"trailing_range_months must be positive, got {self.trailing_range_months}"
            )

    @property
    def is_range(self) -> bool:
        return self.trailing_range_months is not None


@dataclass(frozen=True)
class Bucket:
    """Count and value total over records sharing a time key."""

    key: str | int
    year: int
    month: int | None
    count: int
    total_value: float

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "year": self.year,
            "month": self.month,
            "count": self.count,
            "total_value": self.total_value,
        }


@dataclass(frozen=True)
class AggregateResult:
    granularity: Granularity
    buckets: list[Bucket] = field(default_factory=list)
    hourly_profile: list[int] = field(default_factory=lambda: [0] * HOURS_PER_DAY)

    @classmethod
    def empty(cls, granularity: Granularity) -> "AggregateResult":
        return cls(granularity=granularity)

    @property
    def total_count(self) -> int:
        return sum(b.count for b in self.buckets)

    @property
    def total_value(self) -> float:
        return sum(b.total_value for b in self.buckets)

    def to_dict(self) -> dict:
        """JSON-ready payload for the presentation layer."""
        return {
            "granularity": self.granularity.value,
            "buckets": [b.to_dict() for b in self.buckets],
            "hourly_profile": list(self.hourly_profile),
            "totals": {"count": self.total_count, "total_value": self.total_value},
        }
