"""Collection of biot error classes."""


class SolenoidError(ValueError):
    """Reject solenoid configurations that can not be wound."""

    def __init__(self, attr, value, reason: str):
        super().__init__(f"Solenoid {attr}={value!r} is invalid: {reason}.")


class GridSpecError(ValueError):
    """Reject degenerate or inverted grid specifications."""

    def __init__(self, reason: str):
        super().__init__(f"{reason}.")


class WorkerError(GridSpecError):
    """Reject worker numbers that are not positive integers."""

    def __init__(self, workers):
        super().__init__(f"worker number {workers!r} is not a positive integer")


class CoordinateError(ValueError):
    """Raise when a point is built with an unsupported representation."""

    def __init__(self, reason: str):
        super().__init__(f"{reason}.")


class FieldStateError(AttributeError):
    """Guard the single write of a point's field vector."""

    def __init__(self, point, reason: str):
        super().__init__(f"{reason} for {point!r}.")


class GridCancelledError(RuntimeError):
    """Raise when a grid solve is cancelled before completion."""

    def __init__(self, solved: int, number: int):
        super().__init__(
            f"Grid solve cancelled after {solved} of {number} points."
        )
