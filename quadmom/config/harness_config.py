config = {
    "nonlinear_params": {
        "method": "hybr",
        # Root-finding method of scipy.optimize.root.
        # "hybr", "lm": Newton-type with the analytic Jacobian of the moment equations
        # "broyden1", "broyden2", "anderson", "krylov", ...: Jacobian-free quasi-Newton

        "max_iterations": 200,
        # Iteration cap of one solve (function evaluations for "hybr"/"lm").

        "tol": 1e-10,
        # A solve has converged when max_k |F_k| / nu_k is below this value.

        "xtol": 1e-13,
        # Relative step tolerance handed to the root finder.
    },

    "recurrence_params": {
        "pivot_tol": 1e-10,
        # Wheeler pivots smaller than pivot_tol times the size of the cancelling
        # terms are treated as zero, the moments then count as ill-conditioned.

        "weight_tol": 1e-8,
        # Allowed deviation of the sum of the Gauss weights from one.

        "use_central": False,
        # Shift to central moments before computing the recurrence.
    },

    "harness_params": {
        "seed": 0,
        # Seed of the per-trial random streams. None draws fresh OS entropy.

        "n_restarts": 0,
        # Additional nonlinear attempts with new random guesses after a failure.

        "point_low": 0.1,
        "point_high": 10.0,
        # Initial points are drawn log-uniformly in [point_low, point_high] * nu_1.

        "weight_low": 1e-2,
        # Initial weights are drawn log-uniformly in [weight_low, 1] and normalized.

        "n_jobs": 1,
        # Number of parallel workers. Values > 1 use a ray multiprocessing pool.

        "verbose": True,
        # Print run information and warnings.
    },
}
