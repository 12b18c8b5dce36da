# -*- coding: utf-8 -*-

# External
import numpy as np

# Codatools
from .basis import pairwise_matrix
from .exceptions import InvalidDimensionError, InvalidParameterError
from .utils import (
    DEFAULT_TOLERANCE,
    check_integer,
    check_tolerance,
    format_rows,
    pack_table,
    report,
    unpack_table,
)

__all__ = [
    "number_of_parts_from_pairs",
    "recover_from_pairwise",
]

def number_of_parts_from_pairs(p):
    """
    Solve p = D*(D-1)/2 for the number of parts D
    """
    p = check_integer(p, "p")
    message = "Number of columns ({}) does not correspond to D*(D-1)/2 for any integer D >= 2".format(p)
    if p < 1:
        raise InvalidDimensionError(message)
    discriminant = 1 + 8*p
    root = int(round(np.sqrt(discriminant)))
    if root*root != discriminant:
        raise InvalidDimensionError(message)
    return (1 + root)//2

def recover_from_pairwise(PW, D=None, tol=DEFAULT_TOLERANCE, verbose=False):
    """
    # Description
    Check that `PW` contains pairwise log-ratios log(x_i/x_j) (i < j) and recover the compositions

    The log-composition is recovered by least squares, X_log = PW @ pinv(H), where H = pairwise_matrix(D).
    `PW` is valid if every row is reproduced by X_log @ H within `tol` (Euclidean norm of the residual).

    # Parameters
        * PW:
            - Pairwise log-ratios (n x D*(D-1)/2)
            (1D): pd.Series or 1D np.array
            (2D): pd.DataFrame or 2D np.array
        * D: Number of parts.  If None, computed from the number of columns
        * tol: Reconstruction error tolerance
        * verbose: Report the result to sys.stderr

    # Output
        (is_pairwise, D, X)
            * is_pairwise: True if all rows are valid pairwise log-ratios
            * D: Number of parts
            * X: Recovered compositions closed to 1 (NaN if `PW` is not valid)
                pd.DataFrame (index=PW.index, columns=c1..cD) for Pandas input, else np.array
    """
    tol = check_tolerance(tol)
    table = unpack_table(PW, name="PW")
    values = table.values
    n, p = values.shape

    # Number of parts
    if D is None:
        D = number_of_parts_from_pairs(p)
    else:
        D = check_integer(D, "D")
        if D < 2:
            raise InvalidParameterError("`D` must be an integer >= 2.  Got {}".format(D))
        expected_p = D*(D - 1)//2
        if p != expected_p:
            raise InvalidDimensionError("For D={}, expected {} columns but got {}".format(D, expected_p, p))

    # Least squares recovery
    H = pairwise_matrix(D)
    X_log = values @ np.linalg.pinv(H)
    PW_reconstructed = X_log @ H
    errors = np.sqrt(np.sum((values - PW_reconstructed)**2, axis=1))
    max_error = errors.max() if errors.size else 0.0
    # NaN reconstruction errors fail the comparison
    is_pairwise = bool(max_error < tol)

    if is_pairwise:
        X = np.exp(X_log)
        X = X/X.sum(axis=1, keepdims=True)
    else:
        X = np.full((n, D), np.nan)

    if verbose:
        if is_pairwise:
            report(
                "✓ All {} rows are valid pairwise coordinates for D={}".format(n, D),
                "  Max reconstruction error: {:.2e} (tolerance: {:.2e})".format(max_error, tol),
                "  Composition X recovered successfully",
            )
        else:
            invalid_rows = ~(errors < tol)
            report(
                "✗ Some rows are NOT valid pairwise scores for D={}".format(D),
                "  Max reconstruction error: {:.2e} (tolerance: {:.2e})".format(max_error, tol),
                "  Number of invalid rows: {} / {}".format(int(np.sum(invalid_rows)), n),
                "  Row indices: {}".format(format_rows(invalid_rows, table)),
            )

    components = ["c{}".format(i + 1) for i in range(D)]
    return is_pairwise, D, pack_table(X, table, components)
