"""
Pure parsers and formatters for system statistics.

Each parser takes the raw text an external tool printed and returns typed
records. Malformed input never raises; it yields empty or zero records so a
single bad field cannot take down a snapshot.
"""
import json
import re
from typing import Any, Dict, Iterable, List

from .models import ContainerRecord, DiskUsage, NetworkSample, ProcessRecord, SessionRecord

BYTE_UNITS = ['B', 'KB', 'MB', 'GB', 'TB']
PROCESS_LIMIT = 5
COMMAND_MAX_LENGTH = 80

SESSION_PATTERN = re.compile(r'^(.+?):\s+(\d+)\s+windows?\s+\(created\s+(.+?)\)\s*(\[.*\])?\s*(.*)')
SESSION_FALLBACK_PATTERN = re.compile(r'^(.+?):\s+(\d+)\s+windows?')
ATTACHED_MARKER = '(attached)'


def _to_int(value: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def format_bytes(size: float) -> str:
    """Format a byte count with a base-1024 unit suffix, two decimals at most."""
    if size <= 0:
        return '0 B'
    index = 0
    while size >= 1024 and index < len(BYTE_UNITS) - 1:
        size = size / 1024
        index += 1
    text = f"{size:.2f}".rstrip('0').rstrip('.')
    return f"{text} {BYTE_UNITS[index]}"


def format_rate(bytes_per_second: float) -> str:
    return f"{format_bytes(bytes_per_second)}/s"


def format_uptime(seconds: float) -> str:
    """Format uptime as 'Xd Yh Zm', dropping zero days/hours but always showing minutes."""
    seconds = int(seconds)
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60
    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    parts.append(f"{minutes}m")
    return ' '.join(parts)


def parse_net_dev(raw: str) -> NetworkSample:
    """Sum receive/transmit byte counters from /proc/net/dev, skipping loopback."""
    bytes_in = 0
    bytes_out = 0
    for line in raw.splitlines():
        if ':' not in line:
            continue
        iface, counters = line.split(':', 1)
        if iface.strip() == 'lo':
            continue
        values = counters.split()
        if not values:
            continue
        bytes_in += _to_int(values[0])
        if len(values) > 8:
            bytes_out += _to_int(values[8])
    return NetworkSample(bytes_in=bytes_in, bytes_out=bytes_out)


def parse_df_output(raw: str) -> DiskUsage:
    """Parse `df -B1 <mount>` output into used/total bytes."""
    lines = [line for line in raw.splitlines() if line.strip()]
    if lines and lines[0].startswith('Filesystem'):
        lines = lines[1:]
    if not lines:
        return DiskUsage(used=0, total=0)

    # Long device names make df wrap the row onto a second line
    fields = ' '.join(lines).split()
    if len(fields) < 3:
        return DiskUsage(used=0, total=0)
    return DiskUsage(used=_to_int(fields[2]), total=_to_int(fields[1]))


def parse_ps_output(raw: str, limit: int = PROCESS_LIMIT) -> List[ProcessRecord]:
    """Parse `ps aux` output, keeping the first `limit` rows after the header."""
    lines = [line for line in raw.splitlines() if line.strip()]
    if len(lines) < 2:
        return []

    processes = []
    for line in lines[1:limit + 1]:
        parts = line.split()
        if len(parts) < 6:
            continue
        processes.append(ProcessRecord(
            user=parts[0],
            pid=parts[1],
            cpu=parts[2],
            mem=parts[3],
            vsz=parts[4],
            rss=parts[5],
            command=' '.join(parts[10:])[:COMMAND_MAX_LENGTH],
        ))
    return processes


def parse_container_lines(raw: str) -> List[Dict[str, Any]]:
    """Parse docker's one-JSON-object-per-line output, skipping unparsable lines."""
    rows = []
    for line in raw.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            row = json.loads(line)
        except ValueError:
            continue
        if isinstance(row, dict):
            rows.append(row)
    return rows


def merge_containers(all_rows: Iterable[Dict[str, Any]], running_rows: Iterable[Dict[str, Any]]) -> List[ContainerRecord]:
    """
    Combine the 'all containers' and 'running containers' listings.

    Every container from the full listing is reported. Its running flag comes
    from the running listing, which guards against the two queries racing a
    container state change; its state prefers the container's own report.
    """
    running_ids = {row.get('ID') for row in running_rows if row.get('ID')}
    containers = []
    for row in all_rows:
        container_id = row.get('ID') or ''
        is_running = container_id in running_ids
        containers.append(ContainerRecord(
            id=container_id,
            name=row.get('Names') or '',
            image=row.get('Image') or '',
            status=row.get('Status') or '',
            ports=row.get('Ports') or '',
            state=row.get('State') or ('running' if is_running else 'exited'),
            running=is_running,
            created_at=row.get('CreatedAt') or '',
        ))
    return containers


def parse_session_line(line: str) -> SessionRecord:
    """Parse one `tmux list-sessions` line, degrading to looser matches."""
    attached = ATTACHED_MARKER in line
    match = SESSION_PATTERN.match(line)
    if match:
        return SessionRecord(
            name=match.group(1),
            windows=int(match.group(2)),
            created=match.group(3),
            attached=attached,
        )

    simple = SESSION_FALLBACK_PATTERN.match(line)
    if simple:
        return SessionRecord(name=simple.group(1), windows=int(simple.group(2)), created='', attached=attached)

    return SessionRecord(name=line.split(':')[0], windows=0, created='', attached=False)


def parse_sessions(raw: str) -> List[SessionRecord]:
    return [parse_session_line(line) for line in raw.splitlines() if line.strip()]


def parse_cpu_model(cpuinfo: str) -> str:
    """Return the first 'model name' from /proc/cpuinfo, or '' if absent."""
    for line in cpuinfo.splitlines():
        key, sep, value = line.partition(':')
        if sep and key.strip() == 'model name' and value.strip():
            return value.strip()
    return ''
