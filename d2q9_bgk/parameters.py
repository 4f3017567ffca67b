"""
Simulation Parameters

The parameter file holds seven whitespace-separated values, in order:

    nx            cells in x-direction (int)
    ny            cells in y-direction (int)
    maxIters      number of timesteps (int)
    reynolds_dim  characteristic length for the Reynolds number (int)
    density       reference density per link (float)
    accel         density redistributed by the accelerate step (float)
    omega         relaxation parameter (float)
"""

import warnings
from typing import NamedTuple

from .errors import ConfigurationError


PARAMETER_FIELDS = (
    ("nx", int),
    ("ny", int),
    ("max_iters", int),
    ("reynolds_dim", int),
    ("density", float),
    ("accel", float),
    ("omega", float),
)

# Names used in error messages, matching the parameter file documentation
_FILE_NAMES = {
    "nx": "nx",
    "ny": "ny",
    "max_iters": "maxIters",
    "reynolds_dim": "reynolds_dim",
    "density": "density",
    "accel": "accel",
    "omega": "omega",
}


class ParameterSet(NamedTuple):
    """Immutable simulation constants for one run."""

    nx: int
    ny: int
    max_iters: int
    reynolds_dim: int
    density: float
    accel: float
    omega: float

    @property
    def num_cells(self):
        return self.nx * self.ny

    def validate(self, path=None):
        """
        Check value ranges, raising ConfigurationError on the first violation.

        Returns the parameter set so calls can be chained.
        """
        checks = (
            (self.nx >= 1, "nx must be a positive integer"),
            (self.ny >= 1, "ny must be a positive integer"),
            (self.max_iters >= 0, "maxIters must be non-negative"),
            (self.reynolds_dim > 0, "reynolds_dim must be positive"),
            (self.density > 0.0, "density must be positive"),
            (self.omega > 0.0, "omega must be positive"),
        )
        for ok, message in checks:
            if not ok:
                raise ConfigurationError(message, path)

        if self.omega > 2.0:
            warnings.warn(
                f"omega = {self.omega} > 2 is outside the stable range (0, 2]",
                RuntimeWarning,
                stacklevel=2,
            )
        return self


def _tokens_with_lines(text):
    for lineno, line in enumerate(text.splitlines(), start=1):
        for token in line.split():
            yield lineno, token


def parse_parameters(text, path="<string>"):
    """
    Parse parameter file contents.

    Parameters
    ----------
    text : str
        File contents
    path : str
        Name used in error messages

    Returns
    -------
    params : ParameterSet
        Validated parameters
    """
    tokens = list(_tokens_with_lines(text))
    values = {}
    last_line = max((lineno for lineno, _ in tokens), default=None)

    for index, (name, kind) in enumerate(PARAMETER_FIELDS):
        if index >= len(tokens):
            raise ConfigurationError(
                f"could not read param file: {_FILE_NAMES[name]}", path, last_line
            )
        lineno, token = tokens[index]
        try:
            values[name] = kind(token)
        except ValueError:
            raise ConfigurationError(
                f"could not read param file: {_FILE_NAMES[name]} "
                f"(expected {kind.__name__}, got {token!r})",
                path,
                lineno,
            ) from None

    if len(tokens) > len(PARAMETER_FIELDS):
        lineno, token = tokens[len(PARAMETER_FIELDS)]
        raise ConfigurationError(
            f"unexpected trailing value {token!r} in param file", path, lineno
        )

    return ParameterSet(**values).validate(path)


def load_parameters(path):
    """Read and validate a parameter file."""
    try:
        with open(path, "r") as fp:
            text = fp.read()
    except OSError as exc:
        raise ConfigurationError(
            f"could not open input parameter file: {exc.strerror}", path
        ) from exc
    return parse_parameters(text, str(path))


def write_parameters(path, params):
    """Write ``params`` in parameter file format, one value per line."""
    with open(path, "w") as fp:
        for name, _ in PARAMETER_FIELDS:
            fp.write(f"{getattr(params, name)}\n")
