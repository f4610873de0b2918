# -*- coding: utf-8 -*-
"""
Monte Carlo comparison of the nonlinear and the recurrence moment solvers.

Every trial draws one moment vector, hands it to both solvers and records the
outcome. The harness aggregates per-solver convergence rates and the paired
difference of the extrapolated total estimates over the trials in which both
solvers converged.
"""
import copy
import functools
import warnings
from dataclasses import dataclass, field, replace
import numpy as np
from quadmom.base.base_solver import load_config
from quadmom.errors import ConfigError, InvalidInputError, ReferenceFormatError
from quadmom.moments.moment_vector import MomentVector
from quadmom.solvers.nonlinear_solver import NonlinearMomentSolver
from quadmom.solvers.recurrence_solver import RecurrenceQuadratureSolver
from quadmom.utils.func.print import print_highlighted

NONLINEAR = "nonlinear"
RECURRENCE = "recurrence"
REFERENCE = "reference"

SOLVER_SECTIONS = ("nonlinear_params", "recurrence_params")
HARNESS_DEFAULTS = {
    "seed": None,
    "n_restarts": 0,
    "point_low": 0.1,
    "point_high": 10.0,
    "weight_low": 1e-2,
    "n_jobs": 1,
    "verbose": True,
}


@dataclass(frozen=True)
class TrialRecord:
    """
    Outcome of one trial.

    Estimates are ``None`` when the corresponding solve failed (or, for the
    reference, when no reference program was used).
    """
    trial: int
    moments: MomentVector
    nonlinear: object
    recurrence: object
    nonlinear_attempts: int = 1
    nonlinear_estimate: float = None
    recurrence_estimate: float = None
    reference_estimate: float = None

    @property
    def both_converged(self):
        return self.nonlinear.ok and self.recurrence.ok


@dataclass(frozen=True)
class AggregateStats:
    """
    Summary of a harness run.

    Parameters
    ----------
    n_trials : int
        Number of trials run (always all requested trials).
    p : int
        Number of quadrature nodes requested.
    convergence_rate : dict
        Solver name -> fraction of trials in which the solver succeeded.
    estimates : dict
        Solver name -> array of per-trial total estimates of the successful trials.
    paired_differences : numpy.ndarray
        ``nonlinear - recurrence`` estimate for every trial in which both converged.
    records : tuple of TrialRecord
        All trial records ordered by trial index.
    """
    n_trials: int
    p: int
    convergence_rate: dict
    estimates: dict
    paired_differences: np.ndarray
    records: tuple = field(repr=False)

    @property
    def n_paired(self):
        return len(self.paired_differences)

    @property
    def mean_difference(self):
        return float(np.mean(self.paired_differences)) if self.n_paired else np.nan

    @property
    def min_difference(self):
        return float(np.min(self.paired_differences)) if self.n_paired else np.nan

    @property
    def max_difference(self):
        return float(np.max(self.paired_differences)) if self.n_paired else np.nan

    @property
    def total_nonlinear_attempts(self):
        return int(sum(rec.nonlinear_attempts for rec in self.records))


def draw_initial_guess(rng, moments, p, point_low=0.1, point_high=10.0, weight_low=1e-2):
    """
    Random log-uniform initial guess for the nonlinear solver.

    Points are drawn log-uniformly in ``[point_low, point_high] * nu_1`` so the
    guess follows the scale of the data; weights log-uniformly in
    ``[weight_low, 1]`` and normalized to sum to one.

    Returns
    -------
    tuple
        ``(weights, points)``, each of length ``p``.
    """
    scale = moments.values[0]
    points = scale * np.exp(rng.uniform(np.log(point_low), np.log(point_high), size=p))
    weights = np.exp(rng.uniform(np.log(weight_low), 0.0, size=p))
    return weights / np.sum(weights), points


def run_trial(trial, moments, p, seed_seq, nonlinear_solver, recurrence_solver, harness_params):
    """
    Run both solvers on one moment vector.

    The nonlinear solver is retried up to ``n_restarts`` times with new random
    guesses from the trial's own generator; every attempt is counted.
    """
    rng = np.random.default_rng(seed_seq)
    n_attempts = 1 + harness_params["n_restarts"]

    for attempt in range(1, n_attempts + 1):
        weights, points = draw_initial_guess(rng, moments, p,
                                             point_low=harness_params["point_low"],
                                             point_high=harness_params["point_high"],
                                             weight_low=harness_params["weight_low"])
        nonlinear = nonlinear_solver.solve(moments, p, weights, points)
        if nonlinear.ok:
            break
    recurrence = recurrence_solver.solve(moments, p)

    return TrialRecord(trial=trial,
                       moments=moments,
                       nonlinear=nonlinear,
                       recurrence=recurrence,
                       nonlinear_attempts=attempt,
                       nonlinear_estimate=_estimate(nonlinear, moments),
                       recurrence_estimate=_estimate(recurrence, moments))


def run_trial_batch(jobs, p, solver_params, harness_params):
    """
    Run a slice of trials with solver instances private to the caller.

    Module level so that worker processes can unpickle it.

    Parameters
    ----------
    jobs : list of tuple
        ``(trial, moments, seed_seq)`` per trial.
    solver_params : dict
        ``{"nonlinear_params": {...}, "recurrence_params": {...}}``.
    """
    nonlinear_solver = NonlinearMomentSolver(**solver_params["nonlinear_params"])
    recurrence_solver = RecurrenceQuadratureSolver(**solver_params["recurrence_params"])
    return [run_trial(trial, moments, p, seed_seq, nonlinear_solver, recurrence_solver, harness_params)
            for trial, moments, seed_seq in jobs]


def _estimate(result, moments):
    if not result.ok:
        return None
    return result.estimate_total(moments.observed_total, moments.singletons)


class ComparisonHarness():
    """
    Run repeated trials of both solvers on the same moment data.

    Parameters
    ----------
    config_path : str, optional
        Path to a configuration file (default: the bundled harness_config.py).
    config : dict, optional
        Configuration dict used instead of loading a file.

    Note
    ----
    Solver instances are created per run (and per worker when ``n_jobs > 1``)
    from plain parameter dicts, so no solver state is shared between trials.
    """

    def __init__(self, config_path=None, config=None):
        if config is None:
            config = load_config(config_path)
        self.config = copy.deepcopy(config)
        self.harness_params = dict(HARNESS_DEFAULTS)
        self.harness_params.update({key: value for key, value in self.config.get("harness_params", {}).items()
                                    if value is not None or key == "seed"})
        self.check_harness_params(self.harness_params)
        if config_path is not None and self.harness_params["verbose"]:
            print_highlighted(f"The comparison harness is using config file at : {config_path}",
                              title="INFO", color="cyan")

    @staticmethod
    def check_harness_params(params):
        """
        Check the validity of harness parameters.

        Raises
        ------
        ConfigError
            On unknown keys, a negative restart count, a non-positive or empty
            guess range, or fewer than one worker.
        """
        unknown = set(params) - set(HARNESS_DEFAULTS)
        if unknown:
            raise ConfigError(f"Unknown harness parameter(s): {', '.join(sorted(unknown))}.")
        if not _is_int(params["n_restarts"]) or params["n_restarts"] < 0:
            raise ConfigError(f"n_restarts must be a non-negative integer, got {params['n_restarts']!r}.")
        if not _is_int(params["n_jobs"]) or params["n_jobs"] < 1:
            raise ConfigError(f"n_jobs must be a positive integer, got {params['n_jobs']!r}.")
        if not 0 < params["point_low"] < params["point_high"]:
            raise ConfigError("Initial point range requires 0 < point_low < point_high, "
                              f"got [{params['point_low']}, {params['point_high']}].")
        if not 0 < params["weight_low"] < 1:
            raise ConfigError(f"weight_low must lie in (0, 1), got {params['weight_low']}.")

    def solver_params(self, solver_config=None):
        """
        Validated parameter dicts of both solvers for one run.

        Values from ``solver_config`` override the loaded configuration.
        Building the solvers here surfaces ``ConfigError`` before any trial runs.
        """
        solver_config = solver_config or {}
        params = {}
        for section, solver_cls in zip(SOLVER_SECTIONS, (NonlinearMomentSolver, RecurrenceQuadratureSolver)):
            merged = dict(self.config.get(section, {}))
            merged.update(solver_config.get(section, {}))
            params[section] = solver_cls(**merged).get_params()
        return params

    def run_trials(self, moment_source, p, n_trials, solver_config=None, reference=None):
        """
        Run ``n_trials`` independent trials of both solvers.

        Parameters
        ----------
        moment_source : callable or MomentVector
            Zero-argument callable returning a fresh MomentVector per trial,
            or one fixed MomentVector used for every trial.
        p : int
            Number of quadrature nodes.
        n_trials : int
            Number of trials; all of them are always completed.
        solver_config : dict, optional
            Overrides for the ``nonlinear_params``, ``recurrence_params`` and
            ``harness_params`` sections for this run only.
        reference : ReferenceQuadrature, optional
            External reference program. It is called in the driver process on
            each trial's histogram and recorded as a third estimate.

        Returns
        -------
        AggregateStats

        Raises
        ------
        InvalidInputError
            If ``p`` or ``n_trials`` is invalid or a drawn moment vector cannot
            supply ``p`` nodes. Raised before any solver runs.
        """
        solver_config = solver_config or {}
        unknown = set(solver_config) - set(SOLVER_SECTIONS) - {"harness_params"}
        if unknown:
            raise ConfigError(f"Unknown solver_config section(s): {', '.join(sorted(unknown))}.")
        if not _is_int(n_trials) or n_trials < 1:
            raise InvalidInputError(f"n_trials must be a positive integer, got {n_trials!r}.")
        harness_params = dict(self.harness_params)
        harness_params.update(solver_config.get("harness_params", {}))
        self.check_harness_params(harness_params)
        solver_params = self.solver_params(solver_config)
        verbose = harness_params["verbose"]

        # Moments are drawn in the driver, so stateful sources stay consistent
        jobs = []
        seed_seqs = np.random.SeedSequence(harness_params["seed"]).spawn(n_trials)
        for trial, seed_seq in enumerate(seed_seqs):
            moments = moment_source if isinstance(moment_source, MomentVector) else moment_source()
            moments.validate(p)
            jobs.append((trial, moments, seed_seq))

        if verbose:
            print_highlighted(f"Running {n_trials} trials with p = {p}, nonlinear method = "
                              f"{solver_params['nonlinear_params']['method']}, "
                              f"n_jobs = {harness_params['n_jobs']}.", title="INFO", color="cyan")

        n_jobs = self.check_num_jobs(harness_params["n_jobs"], n_trials)
        if n_jobs == 1:
            records = run_trial_batch(jobs, p, solver_params, harness_params)
        else:
            records = self.run_parallel(jobs, p, solver_params, harness_params, n_jobs)
        records.sort(key=lambda rec: rec.trial)

        if reference is not None:
            records = [self.run_reference(reference, rec, p, verbose) for rec in records]

        stats = aggregate(records, p, with_reference=reference is not None)
        if verbose:
            self.report(stats)
        return stats

    @staticmethod
    def check_num_jobs(n_jobs, n_trials):
        """Clip the number of workers to the number of trials."""
        if n_jobs > n_trials:
            warnings.warn(f"n_jobs = {n_jobs} exceeds the number of trials, using {n_trials} workers.")
            n_jobs = n_trials
        return n_jobs

    @staticmethod
    def run_parallel(jobs, p, solver_params, harness_params, n_jobs):
        """
        Distribute the trials over a ray multiprocessing pool.

        Each worker receives an interleaved slice of the job list and builds its
        own solver instances; results are gathered by the pool's ``map``.
        """
        import ray.util.multiprocessing as mp

        worker = functools.partial(run_trial_batch, p=p, solver_params=solver_params,
                                   harness_params=harness_params)
        # split into roughly equal slices
        job_slices = [jobs[i::n_jobs] for i in range(n_jobs)]
        records = []
        with mp.Pool(n_jobs) as pool:
            batches = pool.map(worker, job_slices)
        for batch in batches:
            records.extend(batch)
        return records

    @staticmethod
    def run_reference(reference, record, p, verbose=True):
        """
        Attach the reference program's estimate to a trial record.

        Unreadable reference output counts as a failed reference run for that
        trial only; a reference that achieves fewer than ``p`` points is failed too.
        """
        moments = record.moments
        if moments.histogram is None:
            raise InvalidInputError("The reference program needs moments derived from a histogram.")
        try:
            result = reference.estimate(moments.histogram, p)
        except ReferenceFormatError as e:
            warnings.warn(f"Trial {record.trial}: reference output rejected ({e}).")
            return record
        if not result.achieved(p):
            if verbose:
                print_highlighted(f"Trial {record.trial}: reference achieved only {result.n_points} "
                                  f"of {p} points.", title="WARNING", color="yellow")
            return record
        return replace(record, reference_estimate=result.estimate_total(moments.observed_total))

    @staticmethod
    def report(stats):
        rates = ", ".join(f"{name} = {rate:.3f}" for name, rate in stats.convergence_rate.items())
        print_highlighted(f"Convergence rates over {stats.n_trials} trials: {rates}.",
                          title="INFO", color="cyan")
        for name, rate in stats.convergence_rate.items():
            if rate == 0.0:
                print_highlighted(f"The {name} solver did not converge in any trial.",
                                  title="WARNING", color="yellow")
        if stats.n_paired:
            print_highlighted(f"Paired difference (nonlinear - recurrence) over {stats.n_paired} trials: "
                              f"mean = {stats.mean_difference:.6g}, "
                              f"range = [{stats.min_difference:.6g}, {stats.max_difference:.6g}].",
                              title="DONE", color="green")
        else:
            print_highlighted("No trial in which both solvers converged, no paired difference available.",
                              title="WARNING", color="yellow")


def aggregate(records, p, with_reference=False):
    """
    Aggregate trial records into ``AggregateStats``.

    Failed solves only drop out of their own solver's estimate list.
    """
    n_trials = len(records)
    estimate_fields = {NONLINEAR: "nonlinear_estimate", RECURRENCE: "recurrence_estimate"}
    if with_reference:
        estimate_fields[REFERENCE] = "reference_estimate"

    estimates = {}
    convergence_rate = {}
    for name, attr in estimate_fields.items():
        values = [getattr(rec, attr) for rec in records if getattr(rec, attr) is not None]
        estimates[name] = np.array(values, dtype=float)
        convergence_rate[name] = len(values) / n_trials

    paired = np.array([rec.nonlinear_estimate - rec.recurrence_estimate
                       for rec in records if rec.both_converged], dtype=float)
    return AggregateStats(n_trials=n_trials,
                          p=p,
                          convergence_rate=convergence_rate,
                          estimates=estimates,
                          paired_differences=paired,
                          records=tuple(records))


def _is_int(value):
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)
