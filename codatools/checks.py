# -*- coding: utf-8 -*-

# External
import numpy as np
import pandas as pd

# Codatools
from .exceptions import NonPositiveInputError
from .utils import (
    DEFAULT_TOLERANCE,
    check_tolerance,
    format_rows,
    report,
    unpack_table,
)

__all__ = [
    "check_composition",
    "check_closure",
    "check_clr",
    "assert_composition",
]

def _row_mask(mask, table):
    if table.index is not None:
        return pd.Series(mask, index=table.index)
    return mask

def _positive_rows(table):
    # NaN > 0 is False so missing values invalidate a row
    return np.all(table.values > 0, axis=1)

def _assert_positive(table, name="X"):
    row_check = _positive_rows(table)
    if not np.all(row_check):
        n = row_check.size
        n_invalid = int(np.sum(~row_check))
        raise NonPositiveInputError(
            "`{}` contains zeros, negative values or NaN.  Invalid rows: {} / {}.  Row indices: {}".format(
                name, n_invalid, n, format_rows(~row_check, table),
            ))

def assert_composition(X, name="X"):
    """
    Raise `NonPositiveInputError` unless every entry of `X` is strictly positive
    """
    _assert_positive(unpack_table(X, name=name), name=name)

def check_composition(X, verbose=False):
    """
    # Description
    Check that every composition (row) contains strictly positive values

    # Parameters
        * X:
            (1D): pd.Series or 1D np.array
            (2D): pd.DataFrame or 2D np.array
        * verbose: Report the result to sys.stderr

    # Output
        (is_composition, row_check)
            * is_composition: True if all rows are valid
            * row_check: boolean mask per row (pd.Series for pd.DataFrame input)
    """
    table = unpack_table(X)
    row_check = _positive_rows(table)
    is_composition = bool(np.all(row_check))

    if verbose:
        n = row_check.size
        if is_composition:
            report("✓ All {} rows contain strictly positive values".format(n))
        else:
            report(
                "✗ Some rows contain zeros or negative values",
                "  Invalid rows: {} / {}".format(int(np.sum(~row_check)), n),
                "  Row indices: {}".format(format_rows(~row_check, table)),
            )
    return is_composition, _row_mask(row_check, table)

def check_closure(X, tol=DEFAULT_TOLERANCE, verbose=False):
    """
    # Description
    Check that compositions are strictly positive and closed to a common constant (e.g., 1 or 100)

    # Parameters
        * X:
            (1D): pd.Series or 1D np.array
            (2D): pd.DataFrame or 2D np.array
        * tol: Maximum deviation of a row sum from the common sum
        * verbose: Report the result to sys.stderr

    # Output
        (is_closed, row_check, closure_value)
            * closure_value: The common row sum or np.nan if `X` is not closed

    The common sum is the mode of the row sums rounded to multiples of `tol`
    """
    tol = check_tolerance(tol)
    table = unpack_table(X)
    n = table.values.shape[0]

    row_positive = _positive_rows(table)
    if not np.all(row_positive):
        if verbose:
            report(
                "✗ Some rows contain zeros or negative values",
                "  Invalid rows: {} / {}".format(int(np.sum(~row_positive)), n),
                "  Row indices: {}".format(format_rows(~row_positive, table)),
            )
        return False, _row_mask(row_positive, table), np.nan

    row_sums = table.values.sum(axis=1)
    if tol > 0:
        rounded_sums = np.round(row_sums/tol)*tol
    else:
        rounded_sums = row_sums
    # Smallest mode on ties
    reference = pd.Series(rounded_sums).mode().iloc[0]
    reference_sum = row_sums[rounded_sums == reference][0]

    row_check = np.abs(row_sums - reference_sum) <= tol
    is_closed = bool(np.all(row_check))
    closure_value = float(reference_sum) if is_closed else np.nan

    if verbose:
        if is_closed:
            report("✓ All {} rows are closed to {:.6f} (tolerance: {:.2e})".format(n, closure_value, tol))
        else:
            report(
                "✗ Invalid rows: {} / {} (tolerance: {:.2e})".format(int(np.sum(~row_check)), n, tol),
                "  Expected sum: {:.6f}".format(reference_sum),
                "  Row indices: {}".format(format_rows(~row_check, table)),
            )
    return is_closed, _row_mask(row_check, table), closure_value

def check_clr(X, tol=DEFAULT_TOLERANCE, verbose=False):
    """
    # Description
    Check that data are valid clr scores (each row sums to zero)

    # Parameters
        * X: clr scores as pd.DataFrame, pd.Series or np.array
        * tol: Maximum deviation of a row sum from zero
        * verbose: Report the result to sys.stderr

    # Output
        (is_clr, row_check)
    """
    tol = check_tolerance(tol)
    table = unpack_table(X)
    n = table.values.shape[0]

    row_sums = table.values.sum(axis=1)
    row_check = np.abs(row_sums) <= tol
    is_clr = bool(np.all(row_check))

    if verbose:
        if is_clr:
            report("✓ All {} rows sum to zero (tolerance: {:.2e})".format(n, tol))
        else:
            report(
                "✗ Some rows do not sum to zero (tolerance: {:.2e})".format(tol),
                "  Invalid rows: {} / {}".format(int(np.sum(~row_check)), n),
                "  Row indices: {}".format(format_rows(~row_check, table)),
            )
    return is_clr, _row_mask(row_check, table)
