"""Dispatch errors."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A routed method cannot be dispatched as configured.

    Covers param_names/parameter count mismatches, logical ids with nothing
    registered, and registered objects that are not executables. Logged and
    answered with a fallback value unless the dispatcher runs in strict mode.
    """

    def __init__(self, interface: str, method: str, reason: str) -> None:
        super().__init__(f"Call {interface}.{method}: {reason}")
        self.interface = interface
        self.method = method
        self.reason = reason
