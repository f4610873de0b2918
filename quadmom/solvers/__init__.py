from quadmom.solvers.results import Converged, Failed, FailureReason, QuadratureNode
from quadmom.solvers.nonlinear_solver import NonlinearMomentSolver
from quadmom.solvers.recurrence_solver import RecurrenceQuadratureSolver
