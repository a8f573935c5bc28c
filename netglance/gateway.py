"""Default IPv4 gateway lookup, used as the ping target when none is configured."""

import ipaddress
import logging
import platform
import re
import subprocess

logger = logging.getLogger(__name__)

FALLBACK_PING_TARGET = "8.8.8.8"

_CREATE_NO_WINDOW = getattr(subprocess, "CREATE_NO_WINDOW", 0)

# Lowest-metric default route, same query the Windows route table UI uses
_WINDOWS_COMMAND = [
    "powershell",
    "-NoProfile",
    "-Command",
    "(Get-NetRoute -DestinationPrefix 0.0.0.0/0 | "
    "Sort-Object RouteMetric,InterfaceMetric | Select-Object -First 1).NextHop",
]
_LINUX_COMMAND = ["ip", "-4", "route", "show", "default"]
_DARWIN_COMMAND = ["route", "-n", "get", "default"]

_LINUX_PATTERN = re.compile(r"^default\s+via\s+(\S+)", re.MULTILINE)
_DARWIN_PATTERN = re.compile(r"^\s*gateway:\s*(\S+)", re.MULTILINE)


def _valid_ipv4(value: str) -> str | None:
    try:
        address = ipaddress.IPv4Address(value.strip())
    except ValueError:
        return None
    if address.is_unspecified:
        return None
    return str(address)


def parse_gateway_output(system: str, output: str) -> str | None:
    """Extract the gateway address from route command output (pure function).

    Examples:
        >>> parse_gateway_output("Linux", "default via 192.168.1.1 dev wlan0 proto dhcp")
        '192.168.1.1'
        >>> parse_gateway_output("Windows", "0.0.0.0")
    """
    if not output:
        return None

    if system == "Windows":
        lines = [line for line in output.splitlines() if line.strip()]
        return _valid_ipv4(lines[0]) if lines else None

    pattern = _DARWIN_PATTERN if system == "Darwin" else _LINUX_PATTERN
    match = pattern.search(output)
    if match:
        return _valid_ipv4(match.group(1))
    return None


def _command_for(system: str) -> list[str] | None:
    if system == "Windows":
        return _WINDOWS_COMMAND
    if system == "Linux":
        return _LINUX_COMMAND
    if system == "Darwin":
        return _DARWIN_COMMAND
    return None


def detect_default_gateway(system: str | None = None, timeout_s: float = 6.0) -> str | None:
    """Ask the OS for its default gateway.

    Returns:
        Gateway IPv4 address, or None if it could not be determined
    """
    system = system or platform.system()
    cmd = _command_for(system)
    if cmd is None:
        logger.debug("Gateway detection not supported on %s", system)
        return None

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout_s,
            shell=False,
            creationflags=_CREATE_NO_WINDOW,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        logger.warning("Gateway detection failed: %s", e)
        return None

    if result.returncode != 0:
        logger.debug("Gateway command exited with %d", result.returncode)
        return None

    gateway = parse_gateway_output(system, result.stdout)
    logger.debug("Default gateway: %s", gateway)
    return gateway


def resolve_ping_target(configured: str, detect=detect_default_gateway) -> str:
    """Configured target if set, else the default gateway, else 8.8.8.8."""
    if configured:
        return configured
    gateway = detect()
    if gateway:
        return gateway
    logger.info("No default gateway found, pinging %s", FALLBACK_PING_TARGET)
    return FALLBACK_PING_TARGET
