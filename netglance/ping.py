"""ICMP latency probe using the system ping command."""

import logging
import platform
import re
import subprocess
from math import ceil

from netglance.errors import ProbeError, ProbeErrorKind

logger = logging.getLogger(__name__)

_LESS_THAN_PATTERN = re.compile(r"time<(\d+)", re.IGNORECASE)
_LATENCY_PATTERN = re.compile(r"time\s*[=<]\s*(\d+(?:\.\d+)?)\s*ms", re.IGNORECASE)

# Hide the console window Windows opens for every ping
_CREATE_NO_WINDOW = getattr(subprocess, "CREATE_NO_WINDOW", 0)


def parse_ping_latency_ms(output: str) -> float | None:
    """Parse latency value from ping command output (pure function).

    Handles various ping output formats across platforms:
    - Linux/macOS: "time=12.3 ms"
    - Windows: "time=12ms" or "time<1ms"

    Windows "time<Nms" is interpreted as N/2 ms (midpoint estimate).

    Args:
        output: Raw ping command output

    Returns:
        Latency in milliseconds (float), or None if parsing failed

    Examples:
        >>> parse_ping_latency_ms("time=12.3 ms")
        12.3
        >>> parse_ping_latency_ms("time<1ms")
        0.5
        >>> parse_ping_latency_ms("Request timed out.")
    """
    if not output:
        return None

    match = _LESS_THAN_PATTERN.search(output)
    if match:
        return float(match.group(1)) / 2.0

    match = _LATENCY_PATTERN.search(output)
    if match:
        try:
            return float(match.group(1))
        except (ValueError, IndexError):
            return None

    return None


class PingProbe:
    """Sends one echo request per probe() call.

    A non-zero exit code from ping (no reply, unreachable) is reported as a
    lost packet. Failures of the probe itself raise ProbeError:

    - the ping process hangs past its own timeout -> TIMEOUT
    - ping cannot be executed -> COMMAND_FAILED
    - ping succeeded but its output has no parsable time -> PARSE_FAILED

    Parsing relies on the English keyword "time"; localized ping output on
    non-English Windows systems surfaces as PARSE_FAILED.
    """

    def __init__(self, target: str = "8.8.8.8", timeout_ms: int = 2000):
        if not target or not target.strip():
            raise ValueError("target cannot be empty")
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")

        self.target = target.strip()
        self.timeout_ms = timeout_ms
        self.timeout_seconds = timeout_ms / 1000.0
        self.system = platform.system()

        logger.debug(
            "PingProbe initialized: target=%s, timeout_ms=%d, system=%s",
            self.target,
            timeout_ms,
            self.system,
        )

    def probe(self) -> float | None:
        """Ping the target once.

        Returns:
            Latency in milliseconds, or None if the packet was lost
        """
        cmd = self._build_ping_command(self.target)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds + 1.0,  # ping enforces its own timeout first
                shell=False,
                creationflags=_CREATE_NO_WINDOW,
            )
        except subprocess.TimeoutExpired:
            raise ProbeError(
                ProbeErrorKind.TIMEOUT, f"ping {self.target} did not exit"
            ) from None
        except OSError as e:
            raise ProbeError(ProbeErrorKind.COMMAND_FAILED, str(e)) from e

        if result.returncode != 0:
            logger.debug(
                "Ping lost: target=%s, returncode=%d", self.target, result.returncode
            )
            return None

        latency = parse_ping_latency_ms(result.stdout)
        if latency is None:
            raise ProbeError(
                ProbeErrorKind.PARSE_FAILED,
                f"no latency in output: {(result.stdout or '(empty)')[:100]!r}",
            )

        logger.debug("Ping reply: target=%s, latency=%.2fms", self.target, latency)
        return latency

    def _build_ping_command(self, host: str) -> list[str]:
        """Build platform-specific ping command."""
        if self.system == "Windows":
            # Windows: ping -n count -w timeout_ms host
            return ["ping", "-n", "1", "-w", str(self.timeout_ms), host]

        elif self.system == "Linux":
            # Linux: ping -c count -W timeout_seconds host
            timeout_secs = max(1, ceil(self.timeout_seconds))
            return ["ping", "-c", "1", "-W", str(timeout_secs), host]

        elif self.system == "Darwin":
            # macOS: -W is per-reply wait in ms, -t bounds the whole run in seconds
            timeout_secs = max(1, ceil(self.timeout_seconds))
            return ["ping", "-c", "1", "-t", str(timeout_secs), host]

        else:
            # other BSDs: rely on subprocess timeout
            return ["ping", "-c", "1", host]
