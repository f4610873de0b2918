# -*- coding: utf-8 -*-
"""
Tabular views of a harness run for downstream reporting.
"""
import numpy as np
import pandas as pd


def trial_table(stats):
    """
    One row per trial with both solvers' status and estimate.

    Failed solves show their failure reason in the status column and NaN as
    estimate.
    """
    rows = []
    for rec in stats.records:
        rows.append({
            "trial": rec.trial,
            "nonlinear_status": _status(rec.nonlinear),
            "nonlinear_attempts": rec.nonlinear_attempts,
            "nonlinear_iterations": rec.nonlinear.iterations if rec.nonlinear.ok else np.nan,
            "nonlinear_estimate": _value(rec.nonlinear_estimate),
            "recurrence_status": _status(rec.recurrence),
            "recurrence_estimate": _value(rec.recurrence_estimate),
            "reference_estimate": _value(rec.reference_estimate),
        })
    return pd.DataFrame(rows).set_index("trial")


def summary_table(stats):
    """Convergence rate and estimate statistics, one row per solver."""
    rows = {}
    for name, rate in stats.convergence_rate.items():
        est = stats.estimates[name]
        rows[name] = {
            "convergence_rate": rate,
            "n_converged": len(est),
            "mean_estimate": est.mean() if len(est) else np.nan,
            "std_estimate": est.std(ddof=1) if len(est) > 1 else np.nan,
            "min_estimate": est.min() if len(est) else np.nan,
            "max_estimate": est.max() if len(est) else np.nan,
        }
    table = pd.DataFrame.from_dict(rows, orient="index")
    table.index.name = "solver"
    return table


def _status(result):
    return "Converged" if result.ok else result.reason.value


def _value(estimate):
    return np.nan if estimate is None else estimate
