"""
Delta trackers.

Each tracker keeps the previous cumulative sample for one metric family and
turns the next sample into a utilization or rate figure. The first reading
after construction is always zero.
"""
from typing import Optional, Sequence, Tuple

from .models import CoreTimes, CpuUsage, NetworkRates, NetworkSample


def _busy_percent(total_delta: float, idle_delta: float) -> float:
    if total_delta == 0:
        return 0
    return round((total_delta - idle_delta) / total_delta * 100, 1)


class CpuDeltaTracker:
    """Per-core CPU utilization from successive time-counter samples."""

    def __init__(self):
        self.previous: Optional[Tuple[CoreTimes, ...]] = None

    def compute(self, current: Sequence[CoreTimes]) -> CpuUsage:
        current = tuple(current)
        previous, self.previous = self.previous, current

        if previous is None:
            return CpuUsage(overall=0, cores=[0] * len(current))

        total_idle_delta = 0.0
        total_delta = 0.0
        cores = []
        for index, cur in enumerate(current):
            if index >= len(previous):
                # Core appeared since the last sample (hotplug); no baseline yet
                cores.append(0)
                continue
            prev = previous[index]
            idle_delta = cur.idle - prev.idle
            core_delta = cur.total - prev.total
            total_idle_delta += idle_delta
            total_delta += core_delta
            cores.append(_busy_percent(core_delta, idle_delta))

        # Overall usage weights every core by its own total delta
        return CpuUsage(overall=_busy_percent(total_delta, total_idle_delta), cores=cores)

    def reset(self) -> None:
        self.previous = None


class NetworkDeltaTracker:
    """Byte rates from successive cumulative network counters."""

    def __init__(self):
        self.previous: Optional[NetworkSample] = None
        self.previous_time: Optional[float] = None

    def compute(self, current: NetworkSample, now: float) -> NetworkRates:
        previous, previous_time = self.previous, self.previous_time
        self.previous, self.previous_time = current, now

        if previous is None or previous_time is None:
            return NetworkRates(rate_in=0, rate_out=0)

        elapsed = now - previous_time
        if elapsed <= 0:
            return NetworkRates(rate_in=0, rate_out=0)

        return NetworkRates(
            rate_in=max(0, (current.bytes_in - previous.bytes_in) / elapsed),
            rate_out=max(0, (current.bytes_out - previous.bytes_out) / elapsed),
        )

    def reset(self) -> None:
        self.previous = None
        self.previous_time = None
