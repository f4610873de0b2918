# -*- coding: utf-8 -*-
"""
Compare both moment solvers on the expected histogram of a Gamma-Poisson
population, once for a fixed moment vector and once for randomly perturbed
histograms.
"""
import numpy as np
from quadmom import ComparisonHarness, RecurrenceQuadratureSolver, empirical_moments
from quadmom.moments import expected_gamma_poisson_histogram, gamma_recurrence
from quadmom.solvers.recurrence_solver import gauss_rule_from_recurrence
from quadmom.harness.harness_post import summary_table, trial_table

if __name__ == "__main__":
    p = 3
    shape, scale = 1.0, 4.0
    n_species = 5000
    hist = expected_gamma_poisson_histogram(shape, scale, max_count=2*p, n_species=n_species)
    moments = empirical_moments(hist, 2*p - 1)

    ## Closed-form Laguerre rule of the exponential distribution with scale q = scale/(1+scale)
    q = scale / (1.0 + scale)
    x_ref, w_ref = gauss_rule_from_recurrence(*gamma_recurrence(1.0, q, p))
    result = RecurrenceQuadratureSolver().solve(moments, p)
    print("points   :", result.points, "reference:", x_ref)
    print("weights  :", result.weights, "reference:", w_ref)
    print("estimate :", result.estimate_total(moments.observed_total, moments.singletons))

    ## Sampled histograms: Poisson noise on the expected frequencies
    rng = np.random.default_rng(1)
    def noisy_moments():
        noisy = {count: rng.poisson(freq) for count, freq in hist.items()}
        return empirical_moments(noisy, 2*p - 1)

    harness = ComparisonHarness()
    stats = harness.run_trials(noisy_moments, p, n_trials=200,
                               solver_config={"harness_params": {"n_restarts": 2}})
    print(summary_table(stats))
    print(trial_table(stats).head())
