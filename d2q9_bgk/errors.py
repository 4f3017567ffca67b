"""
Exception types raised by the solver.

Loaders and writers raise these; only the command line driver turns them into
an exit status.
"""


class LBMError(Exception):
    """Base class for all solver errors."""


class ConfigurationError(LBMError, ValueError):
    """
    Malformed or out-of-range input (parameter or obstacle file).

    Parameters
    ----------
    message : str
        Human-readable description of the problem
    path : str, optional
        Input file the problem was found in
    line : int, optional
        1-based line number within ``path``
    """

    def __init__(self, message, path=None, line=None):
        self.message = message
        self.path = path
        self.line = line
        super().__init__(str(self))

    def __str__(self):
        if self.path is None:
            return self.message
        if self.line is None:
            return f"{self.path}: {self.message}"
        return f"{self.path}:{self.line}: {self.message}"


class OutputError(LBMError, OSError):
    """A result file could not be written."""


class NumericalInstabilityError(LBMError, ArithmeticError):
    """The simulation produced a non-finite diagnostic."""

    def __init__(self, iteration, value):
        self.iteration = iteration
        self.value = value
        super().__init__(
            f"non-finite average velocity {value!r} at iteration {iteration}; "
            f"reduce accel or move omega away from 2"
        )


class SimulationCompleteError(LBMError, RuntimeError):
    """step() was called after all iterations had run."""
