"""Records carried inside a snapshot."""
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class CoreTimes:
    """Cumulative CPU time counters for one core."""
    user: float
    nice: float
    system: float
    idle: float
    irq: float

    @property
    def total(self) -> float:
        return self.user + self.nice + self.system + self.idle + self.irq


@dataclass(frozen=True)
class NetworkSample:
    """Cumulative byte counters summed over all non-loopback interfaces."""
    bytes_in: int
    bytes_out: int


@dataclass(frozen=True)
class CpuUsage:
    overall: float
    cores: List[float]


@dataclass(frozen=True)
class NetworkRates:
    rate_in: float
    rate_out: float


@dataclass(frozen=True)
class DiskUsage:
    used: int
    total: int

    @property
    def percent(self) -> float:
        if not self.total:
            return 0
        return round(self.used / self.total * 100, 1)


@dataclass(frozen=True)
class ContainerRecord:
    id: str
    name: str
    image: str
    status: str
    ports: str
    state: str
    running: bool
    created_at: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'image': self.image,
            'status': self.status,
            'ports': self.ports,
            'state': self.state,
            'running': self.running,
            'createdAt': self.created_at,
        }


@dataclass(frozen=True)
class SessionRecord:
    name: str
    windows: int
    created: str
    attached: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'windows': self.windows,
            'created': self.created,
            'attached': self.attached,
        }


@dataclass(frozen=True)
class ProcessRecord:
    user: str
    pid: str
    cpu: str
    mem: str
    vsz: str
    rss: str
    command: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'user': self.user,
            'pid': self.pid,
            'cpu': self.cpu,
            'mem': self.mem,
            'vsz': self.vsz,
            'rss': self.rss,
            'command': self.command,
        }


@dataclass(frozen=True)
class ProcessRankings:
    by_cpu: List[ProcessRecord] = field(default_factory=list)
    by_mem: List[ProcessRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'byCpu': [p.to_dict() for p in self.by_cpu],
            'byMem': [p.to_dict() for p in self.by_mem],
        }


@dataclass(frozen=True)
class Snapshot:
    """One complete, timestamped bundle of metrics as delivered to subscribers."""
    system: Dict[str, Any]
    docker: List[ContainerRecord]
    sessions: List[SessionRecord]
    processes: ProcessRankings
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'system': self.system,
            'docker': [c.to_dict() for c in self.docker],
            'sessions': [s.to_dict() for s in self.sessions],
            'processes': self.processes.to_dict(),
            'timestamp': self.timestamp,
        }
