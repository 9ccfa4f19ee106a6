"""Tests for parsing captured external tool output."""
from hoststats.stats.models import DiskUsage
from hoststats.stats.utils import (
    merge_containers, parse_container_lines, parse_cpu_model, parse_df_output,
    parse_net_dev, parse_ps_output, parse_session_line, parse_sessions
)

NET_DEV = """Inter-|   Receive                                                |  Transmit
 face |bytes    packets errs drop fifo frame compressed multicast|bytes    packets errs drop fifo colls carrier compressed
    lo:  1000      10    0    0    0     0          0         0     1000      10    0    0    0     0       0          0
  eth0: 2048      20    0    0    0     0          0         0     4096      40    0    0    0     0       0          0
 wlan0:1024        5    0    0    0     0          0         0     1024       5    0    0    0     0       0          0
"""

DF = """Filesystem        1B-blocks        Used   Available Use% Mounted on
/dev/sda1      100000000000 25000000000 75000000000  25% /
"""

DF_WRAPPED = """Filesystem                                   1B-blocks        Used   Available Use% Mounted on
/dev/mapper/very--long--volume--group-root
                                          200000000000 50000000000 150000000000  25% /
"""

PS_AUX = """USER         PID %CPU %MEM    VSZ   RSS TTY      STAT START   TIME COMMAND
root        1234 50.0  1.2 123456 65432 ?        Sl   10:00   1:23 /usr/bin/python3 -m http.server 8000
www-data    2345 12.5  3.4 223344 11223 ?        S    09:00   0:10 nginx: worker process
alice       3456  1.0  0.5  10000  2000 pts/0    Ss   08:00   0:00 bash
bob         4567  0.9  0.1   9000  1000 pts/1    Ss   08:00   0:00 vim notes.txt
carol       5678  0.5  0.1   8000   900 pts/2    S+   08:00   0:00 top
dave        6789  0.1  0.1   7000   800 pts/3    S+   08:00   0:00 less README
"""

RUNNING = '\n'.join([
    '{"ID":"aaa111","Names":"web","Image":"nginx:latest","Status":"Up 2 hours","Ports":"0.0.0.0:80->80/tcp","State":"running","CreatedAt":"2026-10-19 08:00:00 +0000 UTC"}',
    '{"ID":"ddd444","Names":"cache","Image":"redis:7","Status":"Up 5 minutes","Ports":"","State":""}',
])

ALL = '\n'.join([
    '{"ID":"aaa111","Names":"web","Image":"nginx:latest","Status":"Up 2 hours","Ports":"0.0.0.0:80->80/tcp","State":"running","CreatedAt":"2026-10-19 08:00:00 +0000 UTC"}',
    '{"ID":"bbb222","Names":"job","Image":"busybox","Status":"Exited (0) 3 hours ago","Ports":"","State":"exited"}',
    'Error response from daemon: not json',
    '{"ID":"ccc333","Names":"old","Image":"alpine","Status":"Created"}',
    '{"ID":"ddd444","Names":"cache","Image":"redis:7","Status":"Up 5 minutes","Ports":"","State":""}',
    '["not", "an", "object"]',
])


class TestParseNetDev:
    """Tests for /proc/net/dev parsing."""

    def test_sums_non_loopback_interfaces(self):
        sample = parse_net_dev(NET_DEV)

        assert sample.bytes_in == 2048 + 1024
        assert sample.bytes_out == 4096 + 1024

    def test_empty_output(self):
        sample = parse_net_dev('')

        assert (sample.bytes_in, sample.bytes_out) == (0, 0)

    def test_garbage_counters_count_as_zero(self):
        sample = parse_net_dev('eth0: abc 1 2 3 4 5 6 7 xyz\n')

        assert (sample.bytes_in, sample.bytes_out) == (0, 0)


class TestParseDfOutput:
    """Tests for df output parsing."""

    def test_root_filesystem(self):
        usage = parse_df_output(DF)

        assert usage == DiskUsage(used=25000000000, total=100000000000)
        assert usage.percent == 25.0

    def test_wrapped_device_name(self):
        usage = parse_df_output(DF_WRAPPED)

        assert usage.total == 200000000000
        assert usage.used == 50000000000

    def test_header_only(self):
        usage = parse_df_output(DF.splitlines()[0])

        assert usage.total == 0
        assert usage.percent == 0

    def test_zero_total_percent(self):
        assert DiskUsage(used=10, total=0).percent == 0

    def test_percent_one_decimal(self):
        assert DiskUsage(used=1, total=3).percent == 33.3


class TestParsePsOutput:
    """Tests for ps aux parsing."""

    def test_keeps_top_five_after_header(self):
        processes = parse_ps_output(PS_AUX)

        assert [p.pid for p in processes] == ['1234', '2345', '3456', '4567', '5678']

    def test_fixed_column_mapping(self):
        first = parse_ps_output(PS_AUX)[0]

        assert first.user == 'root'
        assert first.cpu == '50.0'
        assert first.mem == '1.2'
        assert first.vsz == '123456'
        assert first.rss == '65432'
        assert first.command == '/usr/bin/python3 -m http.server 8000'

    def test_command_keeps_inner_words(self):
        assert parse_ps_output(PS_AUX)[1].command == 'nginx: worker process'

    def test_command_truncated_to_80_characters(self):
        long_command = 'x' * 200
        raw = PS_AUX.splitlines()[0] + '\n' + f"root 1 0.0 0.0 1 1 ? S 10:00 0:00 {long_command}"

        processes = parse_ps_output(raw)

        assert processes[0].command == 'x' * 80

    def test_header_only_is_empty(self):
        assert parse_ps_output(PS_AUX.splitlines()[0]) == []

    def test_empty_output(self):
        assert parse_ps_output('') == []


class TestContainers:
    """Tests for docker listing parsing and merging."""

    def test_skips_unparsable_lines(self):
        rows = parse_container_lines(ALL)

        assert [row['ID'] for row in rows] == ['aaa111', 'bbb222', 'ccc333', 'ddd444']

    def test_merge_reports_every_container(self):
        containers = merge_containers(parse_container_lines(ALL), parse_container_lines(RUNNING))

        assert [c.id for c in containers] == ['aaa111', 'bbb222', 'ccc333', 'ddd444']

    def test_absent_from_running_set_is_not_running(self):
        containers = {c.id: c for c in merge_containers(parse_container_lines(ALL), parse_container_lines(RUNNING))}

        assert containers['bbb222'].running is False
        assert containers['bbb222'].state == 'exited'
        assert containers['ccc333'].running is False
        assert containers['ccc333'].state == 'exited'

    def test_present_in_both_is_running(self):
        containers = {c.id: c for c in merge_containers(parse_container_lines(ALL), parse_container_lines(RUNNING))}

        assert containers['aaa111'].running is True
        assert containers['aaa111'].state == 'running'
        # Empty state falls back to the running set
        assert containers['ddd444'].running is True
        assert containers['ddd444'].state == 'running'

    def test_own_state_preferred(self):
        all_rows = [{'ID': 'x', 'State': 'paused'}]
        running_rows = [{'ID': 'x'}]

        container = merge_containers(all_rows, running_rows)[0]

        assert container.state == 'paused'
        assert container.running is True

    def test_record_serialization(self):
        container = merge_containers(parse_container_lines(ALL), parse_container_lines(RUNNING))[0]

        assert container.to_dict() == {
            'id': 'aaa111',
            'name': 'web',
            'image': 'nginx:latest',
            'status': 'Up 2 hours',
            'ports': '0.0.0.0:80->80/tcp',
            'state': 'running',
            'running': True,
            'createdAt': '2026-10-19 08:00:00 +0000 UTC',
        }

    def test_missing_optional_fields_default_to_empty(self):
        container = merge_containers([{'ID': 'y'}], [])[0]

        assert container.ports == ''
        assert container.created_at == ''


class TestSessions:
    """Tests for tmux list-sessions parsing."""

    def test_full_line_attached(self):
        session = parse_session_line('main: 3 windows (created Mon Oct 19 10:00:00 2026) (attached)')

        assert session.name == 'main'
        assert session.windows == 3
        assert session.created == 'Mon Oct 19 10:00:00 2026'
        assert session.attached is True

    def test_full_line_with_flags(self):
        session = parse_session_line('build: 1 window (created Mon Oct 19 09:00:00 2026) [200x50]')

        assert session.windows == 1
        assert session.created == 'Mon Oct 19 09:00:00 2026'
        assert session.attached is False

    def test_loose_fallback(self):
        session = parse_session_line('odd: 2 windows and something (attached)')

        assert session.name == 'odd'
        assert session.windows == 2
        assert session.created == ''
        assert session.attached is True

    def test_minimal_record_on_total_failure(self):
        session = parse_session_line('weird:output')

        assert session.name == 'weird'
        assert session.windows == 0
        assert session.attached is False

    def test_one_record_per_line(self):
        raw = 'a: 1 windows (created x)\n\nb: 2 windows (created y)\n'

        assert [s.name for s in parse_sessions(raw)] == ['a', 'b']


class TestCpuModel:
    """Tests for /proc/cpuinfo parsing."""

    def test_first_model_name(self):
        cpuinfo = 'processor\t: 0\nmodel name\t: AMD EPYC 7B13\n\nprocessor\t: 1\nmodel name\t: AMD EPYC 7B13\n'

        assert parse_cpu_model(cpuinfo) == 'AMD EPYC 7B13'

    def test_missing_model(self):
        assert parse_cpu_model('processor\t: 0\nHardware\t: BCM2835\n') == ''
