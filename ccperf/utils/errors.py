# ccperf/utils/errors.py


class NotFoundError(LookupError):
    """
    A measure, option or statistic is not supported by this evaluator.
    Recoverable: callers treat it as "no data" and continue.
    """


class NotReadyError(RuntimeError):
    """
    An accessor was called before evaluate().
    """


class InvalidStateError(RuntimeError):
    """
    A snapshot failed its self-consistency check, or a parameter
    combination is inconsistent.
    """


class UnstableSystemError(ArithmeticError):
    """
    No numerical solution exists for the current parameters,
    e.g. offered load exceeds capacity.
    """


class UnsupportedOperationError(RuntimeError):
    """
    The operation has no meaning for this object (a stored snapshot
    cannot be re-evaluated).
    """


class UserInputError(RuntimeError):
    """
    Raised for invalid user-provided input (files, levels, names).
    Should NOT print traceback.
    """
