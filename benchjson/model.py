"""Data describing a benchmark environment and the runs reported for it."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import ClassVar


class TimeUnit(enum.Enum):
    """Unit in which the times of a run are reported."""

    NANOSECOND = "ns"
    MICROSECOND = "us"
    MILLISECOND = "ms"
    SECOND = "s"

    @property
    def multiplier(self) -> float:
        """Factor that converts seconds into this unit."""
        return _MULTIPLIERS[self]


_MULTIPLIERS = {
    TimeUnit.NANOSECOND: 1e9,
    TimeUnit.MICROSECOND: 1e6,
    TimeUnit.MILLISECOND: 1e3,
    TimeUnit.SECOND: 1.0,
}


class RunType(enum.Enum):
    """Whether a run is a single repetition or an aggregate over repetitions."""

    ITERATION = "iteration"
    AGGREGATE = "aggregate"


class StatisticUnit(enum.Enum):
    """Unit of an aggregate statistic."""

    TIME = "time"
    PERCENTAGE = "percentage"


class Skipped(enum.Enum):
    """Why a run was skipped, if it was."""

    NOT_SKIPPED = enum.auto()
    WITH_MESSAGE = enum.auto()
    WITH_ERROR = enum.auto()


@dataclass
class CacheInfo:
    """One CPU cache."""

    type: str
    level: int
    size: int
    num_sharing: int = 0


@dataclass
class CPUInfo:
    """CPU facts reported in the context block.

    ``scaling`` is ``None`` when frequency scaling is unknown.
    """

    num_cpus: int = 1
    cycles_per_second: float = 1.0
    scaling: bool | None = None
    caches: list[CacheInfo] = field(default_factory=list)
    load_avg: list[float] = field(default_factory=list)


@dataclass
class Context:
    """Environment of a benchmark session.

    ``date`` defaults to the local time when the context is reported.
    """

    host_name: str = ""
    cpu_info: CPUInfo = field(default_factory=CPUInfo)
    executable_name: str | None = None
    date: str | None = None


@dataclass
class MemoryResult:
    """Memory figures of a run; ``TOMBSTONE`` marks a value that was not measured."""

    TOMBSTONE: ClassVar[int] = 2**63 - 1

    max_bytes_used: int = 0
    total_allocated_bytes: int = TOMBSTONE
    net_heap_growth: int = TOMBSTONE


@dataclass
class Run:
    """The result of one benchmark run or aggregate."""

    run_name: str
    family_index: int = 0
    per_family_instance_index: int = 0
    run_type: RunType = RunType.ITERATION
    repetitions: int = 1
    repetition_index: int = 0
    threads: int = 1
    aggregate_name: str = ""
    aggregate_unit: StatisticUnit = StatisticUnit.TIME
    skipped: Skipped = Skipped.NOT_SKIPPED
    skip_message: str = ""
    iterations: int = 1
    real_accumulated_time: float = 0.0
    cpu_accumulated_time: float = 0.0
    time_unit: TimeUnit = TimeUnit.NANOSECOND
    report_big_o: bool = False
    report_rms: bool = False
    big_o: str = ""
    counters: dict[str, float] = field(default_factory=dict)
    memory_result: MemoryResult | None = None
    allocs_per_iter: float = 0.0
    report_label: str = ""

    def benchmark_name(self) -> str:
        """Name of the run, with the aggregate name appended for aggregates."""
        if self.run_type is RunType.AGGREGATE:
            return f"{self.run_name}_{self.aggregate_name}"
        return self.run_name

    def _adjusted(self, seconds: float) -> float:
        value = seconds * self.time_unit.multiplier
        if self.iterations != 0:
            value /= self.iterations
        return value

    @property
    def adjusted_real_time(self) -> float:
        """Real time per iteration in the run's time unit."""
        return self._adjusted(self.real_accumulated_time)

    @property
    def adjusted_cpu_time(self) -> float:
        """CPU time per iteration in the run's time unit."""
        return self._adjusted(self.cpu_accumulated_time)