import sys
import os

# Add backend to path so we can import modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from probes.output_parser import parse_ping_output

LINUX_OUTPUT = """PING 1.1.1.1 (1.1.1.1) 56(84) bytes of data.
64 bytes from 1.1.1.1: icmp_seq=1 ttl=58 time=12.0 ms
64 bytes from 1.1.1.1: icmp_seq=2 ttl=58 time=14.0 ms

--- 1.1.1.1 ping statistics ---
2 packets transmitted, 2 received, 0% packet loss, time 1001ms
rtt min/avg/max/mdev = 12.000/13.000/14.000/1.000 ms
"""

WINDOWS_OUTPUT = """Pinging 1.1.1.1 with 32 bytes of data:
Reply from 1.1.1.1: bytes=32 time=9ms TTL=58
Reply from 1.1.1.1: bytes=32 time=12ms TTL=58
"""


def test_per_packet_times_are_averaged():
    assert parse_ping_output("time=12.0 ms\ntime=14.0 ms") == 13


def test_average_is_truncated():
    assert parse_ping_output("time=10.0 ms time=10.9 ms") == 10


def test_per_packet_times_win_over_summary():
    output = "time=20.0 ms\nrtt min/avg/max/mdev = 1.0/2.0/3.0/0.5 ms"
    assert parse_ping_output(output) == 20


def test_summary_line_fallback():
    assert parse_ping_output("rtt min/avg/max/mdev = 10.0/15.5/20.0/2.1 ms") == 15


def test_bsd_summary_line():
    assert parse_ping_output("round-trip min/avg/max/stddev = 4.1/7.9/9.0/1.2 ms") == 7


def test_real_linux_output():
    assert parse_ping_output(LINUX_OUTPUT) == 13


def test_windows_output():
    assert parse_ping_output(WINDOWS_OUTPUT) == 10


def test_unparseable_output():
    assert parse_ping_output("Request timeout for icmp_seq 0") == -1
    assert parse_ping_output("") == -1


def test_garbage_input_is_no_match():
    assert parse_ping_output(None) == -1
