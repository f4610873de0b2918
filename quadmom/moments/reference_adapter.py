# -*- coding: utf-8 -*-
"""
Narrow adapter for an external quadrature reference program.

The program itself is not run from here. Callers that do run it implement
``ReferenceQuadrature``; this module only fixes the exchange formats: the
histogram handed over as tab-separated ``count<TAB>frequency`` lines, and the
header-labelled tab-separated table it answers with, of which exactly the
fields ``n_points`` and ``quadrature_estimated_unobs`` are consumed.
"""
import io
import math
from dataclasses import dataclass
from typing import Protocol
import pandas as pd
from quadmom.moments.moment_sources import as_histogram
from quadmom.errors import ReferenceFormatError

N_POINTS_FIELD = "n_points"
ESTIMATED_UNOBS_FIELD = "quadrature_estimated_unobs"


@dataclass(frozen=True)
class ReferenceQuadratureResult:
    """
    Parameters
    ----------
    n_points : int
        Quadrature order actually achieved; may be below the requested one.
    estimated_unobs : float
        The program's estimate of the unobserved total.
    """
    n_points: int
    estimated_unobs: float

    def achieved(self, p):
        return self.n_points >= p

    def estimate_total(self, observed_total):
        return observed_total + self.estimated_unobs


class ReferenceQuadrature(Protocol):
    def estimate(self, histogram, p) -> ReferenceQuadratureResult:
        ...


def format_histogram(histogram):
    """Render a histogram as ``count\\tfrequency`` lines sorted by count."""
    hist = as_histogram(histogram)
    lines = [f"{count}\t{freq:g}" for count, freq in sorted(hist.items())]
    return "\n".join(lines) + "\n"


def parse_reference_output(text):
    """
    Read the reference program's tabular output.

    Parameters
    ----------
    text : str
        Tab-separated table with a header row; only the first data row is used.

    Returns
    -------
    ReferenceQuadratureResult

    Raises
    ------
    ReferenceFormatError
        If the table is empty, a required column is missing, or a value is
        non-numeric or not finite.
    """
    try:
        table = pd.read_csv(io.StringIO(text), sep="\t")
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise ReferenceFormatError(f"Reference output is not a readable table: {e}") from e
    table.columns = [str(col).strip() for col in table.columns]
    missing = [col for col in (N_POINTS_FIELD, ESTIMATED_UNOBS_FIELD) if col not in table.columns]
    if missing:
        raise ReferenceFormatError(f"Reference output lacks column(s): {', '.join(missing)}.")
    if table.empty:
        raise ReferenceFormatError("Reference output has a header but no data row.")
    row = table.iloc[0]
    try:
        n_points = int(row[N_POINTS_FIELD])
        estimated_unobs = float(row[ESTIMATED_UNOBS_FIELD])
    except (TypeError, ValueError) as e:
        raise ReferenceFormatError(f"Reference output holds non-numeric values: {e}") from e
    if not math.isfinite(estimated_unobs):
        raise ReferenceFormatError(f"Reference estimate is not a finite number: {estimated_unobs}.")
    return ReferenceQuadratureResult(n_points=n_points, estimated_unobs=estimated_unobs)
