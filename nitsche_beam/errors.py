from __future__ import annotations

from typing import Any


class NitscheBeamError(ValueError):
    """Base class for the fatal errors of a coupled beam run.

    `context` carries the diagnostic location (element index, quadrature
    point, dof, ...) and is appended to the message.
    """

    def __init__(self, message: str, **context: Any):
        self.context = dict(context)
        if context:
            details = ", ".join(f"{k}={v}" for k, v in context.items())
            message = f"{message} ({details})"
        super().__init__(message)


class InvalidMesh(NitscheBeamError):
    """Non-positive subdivisions or inverted/degenerate elements."""


class MeshMismatch(NitscheBeamError):
    """Interface point does not fall inside the element matched on the other side."""


class SingularSystem(NitscheBeamError):
    """The assembled system cannot be solved after boundary conditions."""


class InvalidConfiguration(NitscheBeamError):
    """Bad problem parameters (penalty, material, interface pairing, ...)."""
