class ConfigurationError(ValueError):
    """
    Raised when the world cannot be built from the given settings: the grid is
    too small, more items are placed than there are cells, or cell ids do not
    fit the grid. Always raised before the first tick.
    """


class InvariantViolation(RuntimeError):
    """
    Raised when the engine is asked to break one of its own invariants, e.g.
    vegetation placed on a shelter cell or a shelter bound to a foreign cell.
    These are programming errors and are not recovered from.
    """
