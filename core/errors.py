"""
Error types raised inside the probes and host checks.

Probe errors never reach callers of the probe functions: each entry point
turns them into a failed ProbeResult. The message always names the stage
that failed; the underlying OS/SSL error is chained as __cause__.
"""


class ProbeError(Exception):
    stage = "probe"

    def describe(self) -> str:
        """Message plus the chained cause, e.g. 'TLS handshake failed: EOF occurred'."""
        cause = self.__cause__
        if cause is None:
            return str(self)
        detail = str(cause) or type(cause).__name__
        return f"{self}: {detail}"


class DialError(ProbeError):
    stage = "dial"


class UpgradeError(ProbeError):
    stage = "upgrade"


class HandshakeError(ProbeError):
    stage = "handshake"


class HostCheckError(Exception):
    """Local host diagnostics could not be collected."""
