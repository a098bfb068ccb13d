"""Rule violations raised inside the engine.

Public entry points never let these escape; they are turned into a failed
``ActionResult`` carrying the message and ``kind``.
"""

from __future__ import annotations


class CribbageError(RuntimeError):
    """Base class for rejected actions."""

    kind = "error"


class IllegalPhase(CribbageError):
    """Raised when the action is not valid in the current phase."""

    kind = "phase"


class IllegalActor(CribbageError):
    """Raised when the acting player may not take this action."""

    kind = "actor"


class IllegalPayload(CribbageError):
    """Raised when the action data is malformed or names cards not held."""

    kind = "payload"


class PreconditionFailed(CribbageError):
    """Raised when the state does not yet allow the action."""

    kind = "precondition"
