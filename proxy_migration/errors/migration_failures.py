"""
Migration failure classifications.

None of these are recovered locally. A raised error means nothing usable
was produced, even when some module deployments individually succeeded.
"""

from typing import Optional, Dict, Any


class MigrationError(Exception):
    """Base class for failures that abort a migration call."""

    def __init__(self, message: str, step: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.step = step
        self.context = context or {}
        self.recoverable = False


class DeploymentFailure(MigrationError):
    """The execution environment rejected a module, proxy or controller deployment."""

    def __init__(self, message: str, role: Optional[str] = None,
                 artifact: Optional[str] = None, **kwargs):
        kwargs.setdefault("step", "deploy")
        super().__init__(message, **kwargs)
        self.role = role
        self.artifact = artifact


class FinalizeFailure(MigrationError):
    """The single registration + ownership transaction failed."""

    def __init__(self, message: str, proxy_address: Optional[str] = None,
                 controller_address: Optional[str] = None, **kwargs):
        kwargs.setdefault("step", "finalize")
        super().__init__(message, **kwargs)
        self.proxy_address = proxy_address
        self.controller_address = controller_address


class ConfigurationError(MigrationError):
    """Invalid caller input, or a required role left unresolved before finalize."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, errors: Optional[list] = None, **kwargs):
        kwargs.setdefault("step", "configure")
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.errors = errors or []


class BindingError(ConfigurationError):
    """Proxy and controller disagree about who may finalize the proxy."""

    def __init__(self, message: str, expected: Optional[str] = None,
                 actual: Optional[str] = None, **kwargs):
        kwargs.setdefault("step", "binding")
        super().__init__(message, field="bootstrapper", value=actual, **kwargs)
        self.expected = expected
        self.actual = actual
