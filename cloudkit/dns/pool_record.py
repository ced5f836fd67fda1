"""
Pool record shapes for DNS traffic-controller pools.

UpdatePoolRecord holds the pending updates for one record in a pool. It is
immutable and checks its fields once, when it is constructed; the Builder
is the mutable staging area used to assemble one field by field, usually
primed from the PoolRecordSpec and TrafficControllerPoolRecord it replaces.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PoolRecordSpec:
    """Configuration of a pool record as reported by the provider"""
    description: str
    state: str  # e.g. "Normal", "Active-Force", "Inactive-Force"
    active: bool
    weight: int
    fail_over_delay: int  # minutes
    threshold: int
    ttl: int  # seconds


@dataclass(frozen=True)
class TrafficControllerPoolRecord:
    """A record inside a traffic controller pool"""
    id: str
    pool_id: str
    points_to: str
    weight: int
    priority: int
    type: str  # record type, e.g. "A" or "CNAME"
    forced_answer: str


@dataclass(frozen=True)
class UpdatePoolRecord:
    """Updates for a pool record"""
    points_to: str  # correlates to TrafficControllerPoolRecord.points_to
    mode: str  # correlates to PoolRecordSpec.state
    priority: int
    weight: int
    fail_over_delay: int
    threshold: int
    ttl: int

    def __post_init__(self):
        if self.points_to is None:
            raise TypeError("points_to is required")
        if self.mode is None:
            raise TypeError(f"mode for {self.points_to} is required")

        for field_name in ("weight", "fail_over_delay", "threshold", "ttl"):
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} of {self.points_to} must be >= 0")

    @staticmethod
    def pointing_to(spec: PoolRecordSpec, points_to: str) -> "UpdatePoolRecord":
        """
        Prime updates from `spec`, pointing the record at a new value.

        Args:
            spec: What to prime updates from
            points_to: New value to point to
        """
        return UpdatePoolRecord.builder().from_spec(spec).points_to(points_to).build()

    @staticmethod
    def builder() -> "UpdatePoolRecord.Builder":
        return UpdatePoolRecord.Builder()

    def to_builder(self) -> "UpdatePoolRecord.Builder":
        return UpdatePoolRecord.Builder().from_update(self)

    class Builder:
        """Mutable staging for an UpdatePoolRecord; validated by build()"""

        def __init__(self):
            self._points_to: Optional[str] = None
            self._mode: Optional[str] = None
            self._priority = 0
            self._weight = 0
            self._fail_over_delay = 0
            self._threshold = 0
            self._ttl = 0

        def points_to(self, points_to: str) -> "UpdatePoolRecord.Builder":
            self._points_to = points_to
            return self

        def mode(self, mode: str) -> "UpdatePoolRecord.Builder":
            self._mode = mode
            return self

        def priority(self, priority: int) -> "UpdatePoolRecord.Builder":
            self._priority = priority
            return self

        def weight(self, weight: int) -> "UpdatePoolRecord.Builder":
            self._weight = weight
            return self

        def fail_over_delay(self, fail_over_delay: int) -> "UpdatePoolRecord.Builder":
            self._fail_over_delay = fail_over_delay
            return self

        def threshold(self, threshold: int) -> "UpdatePoolRecord.Builder":
            self._threshold = threshold
            return self

        def ttl(self, ttl: int) -> "UpdatePoolRecord.Builder":
            self._ttl = ttl
            return self

        def build(self) -> "UpdatePoolRecord":
            return UpdatePoolRecord(
                points_to=self._points_to,
                mode=self._mode,
                priority=self._priority,
                weight=self._weight,
                fail_over_delay=self._fail_over_delay,
                threshold=self._threshold,
                ttl=self._ttl,
            )

        def from_spec(self, spec: PoolRecordSpec) -> "UpdatePoolRecord.Builder":
            """Copy mode, weight, fail-over delay, threshold and ttl"""
            return (self.mode(spec.state)
                    .weight(spec.weight)
                    .fail_over_delay(spec.fail_over_delay)
                    .threshold(spec.threshold)
                    .ttl(spec.ttl))

        def from_pool_record(self, record: TrafficControllerPoolRecord) -> "UpdatePoolRecord.Builder":
            """Copy weight, target and priority"""
            return self.weight(record.weight).points_to(record.points_to).priority(record.priority)

        def from_update(self, update: "UpdatePoolRecord") -> "UpdatePoolRecord.Builder":
            return (self.points_to(update.points_to)
                    .mode(update.mode)
                    .priority(update.priority)
                    .weight(update.weight)
                    .fail_over_delay(update.fail_over_delay)
                    .threshold(update.threshold)
                    .ttl(update.ttl))
