class EyesError(Exception):
    """Base class for scanner errors surfaced to the user."""


class PortSpecError(EyesError, ValueError):
    """
    Raised when a port specification cannot be parsed.
    Carries the offending token and a short reason.
    """
    def __init__(self, token: str, reason: str):
        self.token = token
        self.reason = reason
        super().__init__(f"{reason} in port token {token!r}")


class TargetResolutionError(EyesError):
    """Raised when the scan target cannot be resolved to an address."""
    def __init__(self, target: str, cause: str):
        self.target = target
        self.cause = cause
        super().__init__(f"could not resolve {target}: {cause}")
