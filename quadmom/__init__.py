from quadmom.errors import QuadmomError, InvalidInputError, ConfigError, ReferenceFormatError
from quadmom.moments import MomentVector, empirical_moments, quadrature_moments
from quadmom.solvers import (Converged, Failed, FailureReason, NonlinearMomentSolver,
                             RecurrenceQuadratureSolver)
from quadmom.harness import ComparisonHarness, AggregateStats, TrialRecord

__version__ = "0.1.0"
