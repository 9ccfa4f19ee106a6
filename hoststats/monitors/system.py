"""System statistics monitoring functionality."""
import platform
import socket
import sys
import time
from typing import Any, Callable, Dict, List, Optional
from flask import current_app
import psutil

from hoststats.stats.models import CoreTimes, NetworkSample
from hoststats.stats.trackers import CpuDeltaTracker, NetworkDeltaTracker
from hoststats.stats.utils import (
    format_bytes, format_rate, format_uptime,
    parse_cpu_model, parse_df_output, parse_net_dev
)
from .base import CommandMonitor

DISK_COMMAND = ['df', '-B1', '/']
KERNEL_COMMAND = ['uname', '-r']
NET_DEV_COMMAND = ['cat', '/proc/net/dev']
CPUINFO_PATH = '/proc/cpuinfo'


def read_core_times() -> List[CoreTimes]:
    """Snapshot per-core CPU time counters."""
    return [
        CoreTimes(
            user=times.user,
            nice=getattr(times, 'nice', 0.0),
            system=times.system,
            idle=times.idle,
            irq=getattr(times, 'irq', 0.0),
        )
        for times in psutil.cpu_times(percpu=True)
    ]


class SystemStatsMonitor(CommandMonitor):
    """Monitor host identity, CPU, memory, disk, load and network throughput."""

    def __init__(self, *args, cpu_tracker: Optional[CpuDeltaTracker] = None,
                 network_tracker: Optional[NetworkDeltaTracker] = None,
                 clock: Callable[[], float] = time.monotonic, **kwargs):
        super().__init__(*args, **kwargs)
        self.cpu_tracker = cpu_tracker or CpuDeltaTracker()
        self.network_tracker = network_tracker or NetworkDeltaTracker()
        self.clock = clock
        self._cpu_model: Optional[str] = None

    def prime(self) -> None:
        """Take a baseline CPU sample so the first broadcast is already a delta."""
        try:
            self.cpu_tracker.compute(read_core_times())
        except Exception as e:
            current_app.logger.warning(f"[SYSTEM] Could not prime CPU baseline: {str(e)}")

    def get_cpu_model(self) -> str:
        if self._cpu_model is None:
            model = ''
            try:
                with open(CPUINFO_PATH, 'r') as f:
                    model = parse_cpu_model(f.read())
            except OSError:
                pass
            self._cpu_model = model or platform.processor() or 'Unknown'
        return self._cpu_model

    def collect_cpu(self) -> Dict[str, Any]:
        try:
            core_times = read_core_times()
            usage = self.cpu_tracker.compute(core_times)
            overall, cores = usage.overall, usage.cores
        except Exception as e:
            current_app.logger.error(f"[SYSTEM] Error reading CPU times: {str(e)}")
            overall, cores = 0, []
        return {
            'model': self.get_cpu_model(),
            'count': psutil.cpu_count() or len(cores),
            'overall': overall,
            'cores': cores,
        }

    def collect_memory(self) -> Dict[str, Any]:
        try:
            mem = psutil.virtual_memory()
        except Exception as e:
            current_app.logger.error(f"[SYSTEM] Error reading memory: {str(e)}")
            return {'used': format_bytes(0), 'total': format_bytes(0), 'percent': 0}
        used = mem.total - mem.free
        return {
            'used': format_bytes(used),
            'total': format_bytes(mem.total),
            'percent': round(used / mem.total * 100, 1) if mem.total else 0,
        }

    def collect_disk(self) -> Dict[str, Any]:
        raw = self.query(DISK_COMMAND)
        if not raw:
            return {'used': 0, 'total': 0, 'percent': 0}
        usage = parse_df_output(raw)
        return {
            'used': format_bytes(usage.used),
            'total': format_bytes(usage.total),
            'percent': usage.percent,
        }

    def collect_load_average(self) -> Dict[str, str]:
        try:
            one, five, fifteen = psutil.getloadavg()
        except Exception as e:
            current_app.logger.error(f"[SYSTEM] Error reading load average: {str(e)}")
            one = five = fifteen = 0.0
        return {'1m': f"{one:.2f}", '5m': f"{five:.2f}", '15m': f"{fifteen:.2f}"}

    def collect_network(self) -> Dict[str, Any]:
        raw = self.query(NET_DEV_COMMAND)
        if not raw:
            return {'bytesIn': 0, 'bytesOut': 0, 'rateIn': 0, 'rateOut': 0}
        sample: NetworkSample = parse_net_dev(raw)
        rates = self.network_tracker.compute(sample, self.clock())
        return {
            'bytesIn': format_bytes(sample.bytes_in),
            'bytesOut': format_bytes(sample.bytes_out),
            'rateIn': format_rate(rates.rate_in),
            'rateOut': format_rate(rates.rate_out),
        }

    def get_uptime_seconds(self) -> int:
        try:
            return max(0, int(time.time() - psutil.boot_time()))
        except Exception as e:
            current_app.logger.error(f"[SYSTEM] Error reading boot time: {str(e)}")
            return 0

    def collect_stats(self) -> Dict[str, Any]:
        """Collect current system statistics."""
        cpu = self.collect_cpu()
        memory = self.collect_memory()
        disk = self.collect_disk()
        network = self.collect_network()
        kernel = self.query(KERNEL_COMMAND) or platform.release()
        uptime_seconds = self.get_uptime_seconds()

        return {
            'hostname': socket.gethostname(),
            'platform': sys.platform,
            'arch': platform.machine(),
            'kernel': kernel,
            'uptime': format_uptime(uptime_seconds),
            'uptimeSeconds': uptime_seconds,
            'cpu': cpu,
            'memory': memory,
            'disk': disk,
            'loadAvg': self.collect_load_average(),
            'network': network,
        }
