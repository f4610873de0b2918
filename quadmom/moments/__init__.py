from quadmom.moments.moment_vector import MomentVector
from quadmom.moments.moment_sources import (empirical_moments, quadrature_moments, gamma_moments,
                                            gamma_recurrence, gamma_poisson_moments,
                                            expected_gamma_poisson_histogram)
from quadmom.moments.reference_adapter import (ReferenceQuadrature, ReferenceQuadratureResult,
                                               format_histogram, parse_reference_output)
