"""Latency extraction from the text output of the system ping command"""
import logging
import re

logger = logging.getLogger("ReachProbe.OutputParser")

TIME_PATTERN = re.compile(r"time=(\d+(?:\.\d+)?)")
SUMMARY_PATTERN = re.compile(r"=\s*(\d+(?:\.\d+)?)/(\d+(?:\.\d+)?)/(\d+(?:\.\d+)?)")


def parse_ping_output(output: str) -> int:
    """
    Returns latency in whole milliseconds, or -1 if nothing usable was found.

    Per-packet "time=X" samples win over the min/avg/max summary line since
    they cover every reply rather than one aggregate.
    """
    try:
        times = [float(m) for m in TIME_PATTERN.findall(output)]
        if times:
            return int(sum(times) / len(times))

        summary = SUMMARY_PATTERN.search(output)
        if summary:
            return int(float(summary.group(2)))
    except (TypeError, ValueError) as e:
        logger.debug(f"Could not parse ping output: {e}")

    return -1
