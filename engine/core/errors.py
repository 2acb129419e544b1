"""Engine exception types."""


class EngineError(Exception):
    """Base class for engine faults (never raised for illegal player actions)."""


class InvariantViolation(EngineError):
    """A state invariant was broken; this is a programming defect."""


class DiceExhausted(EngineError):
    """A scripted dice source ran out of faces."""
