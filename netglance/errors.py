"""Exception types raised inside a single refresh tick."""

from enum import Enum


class NetglanceError(Exception):
    """Base class for netglance errors."""


class ProbeErrorKind(str, Enum):
    TIMEOUT = "timeout"
    COMMAND_FAILED = "command_failed"
    PARSE_FAILED = "parse_failed"


class ProbeError(NetglanceError):
    """Metric sampling failed for this tick."""

    def __init__(self, kind: ProbeErrorKind, message: str = ""):
        self.kind = kind
        super().__init__(f"{kind.value}: {message}" if message else kind.value)


class ProviderUnreachable(NetglanceError):
    """One HTTP provider failed; the fallback chain moves on."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")


class AllProvidersExhausted(NetglanceError):
    """No provider in the chain produced a usable location.

    Carries the per-provider attempts and the best partial location seen
    (usually one with an IP but no city).
    """

    def __init__(self, attempts, partial=None):
        self.attempts = tuple(attempts)
        self.partial = partial
        super().__init__(f"all {len(self.attempts)} providers exhausted")


class TimezoneUnresolved(NetglanceError):
    """Timezone is not present in the static offset table."""

    def __init__(self, timezone: str):
        self.timezone = timezone
        super().__init__(f"unknown timezone: {timezone!r}")
