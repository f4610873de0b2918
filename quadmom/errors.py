# -*- coding: utf-8 -*-
"""
Exceptions raised by quadmom.

Only input and configuration problems are raised. Numerical failures inside a
solve are reported through ``quadmom.solvers.results.Failed`` instead.
"""


class QuadmomError(Exception):
    """Base class for all errors raised by quadmom."""


class InvalidInputError(QuadmomError, ValueError):
    """Moment vector, order or initial guess cannot be solved at all."""


class ConfigError(QuadmomError):
    """A configuration value is out of its allowed range."""


class ReferenceFormatError(QuadmomError, ValueError):
    """Output of the external reference quadrature program is unreadable."""
