# -*- coding: utf-8 -*-

# Built-ins
from itertools import combinations

# External
import numpy as np
import pandas as pd

# Codatools
from .exceptions import (
    InvalidDimensionError,
    InvalidParameterError,
    NotOrthogonalError,
    NotOrthonormalError,
)
from .utils import (
    DEFAULT_TOLERANCE,
    check_integer,
    check_tolerance,
)

__all__ = [
    "pairwise_matrix",
    "pivot_basis",
    "check_sbp",
    "sbp_basis",
    "check_orthonormal",
]

def check_number_of_parts(D):
    D = check_integer(D, "D")
    if D < 2:
        raise InvalidDimensionError("`D` must be an integer >= 2.  Got {}".format(D))
    return D

def _balance_coefficients(r, s):
    """
    Coefficients of a balance between a group of `r` parts (+) and a group of `s` parts (-)
    """
    coef_pos = np.sqrt(s/(r*(r + s)))
    coef_neg = -np.sqrt(r/(s*(r + s)))
    return coef_pos, coef_neg

# ========
# Pairwise
# ========
def pairwise_matrix(D, components=None):
    """
    # Description
    Pairwise contrast matrix H (D x D*(D-1)/2) for all pairwise log-ratios

    Column k corresponds to the k-th pair (i,j) with i < j in lexicographic order
    and has +1 at row i and -1 at row j (i.e., log(x_i/x_j) = log(x) @ H[:,k])

    # Parameters
        * D: Number of parts
        * components: Optional labels of the D parts.  If provided, returns a pd.DataFrame

    # Output
        2D np.array or pd.DataFrame (index=components, columns="{i}/{j}")
    """
    if components is not None:
        components = pd.Index(components)
        if D is None:
            D = components.size
    D = check_number_of_parts(D)

    pairs = list(combinations(range(D), 2))
    H = np.zeros((D, len(pairs)))
    for k, (i, j) in enumerate(pairs):
        H[i, k] = 1
        H[j, k] = -1

    if components is not None:
        if components.size != D:
            raise InvalidDimensionError("`components` must have {} labels.  Got {}".format(D, components.size))
        columns = ["{}/{}".format(components[i], components[j]) for i, j in pairs]
        H = pd.DataFrame(H, index=components, columns=columns)
    return H

# =====
# Bases
# =====
def pivot_basis(D, order=None):
    """
    # Description
    Orthonormal pivot basis (D x D-1)

    Column c contrasts part `order[c]` against the remaining parts `order[c+1:]`

    # Parameters
        * D: Number of parts
        * order: Permutation of range(D) giving the pivot sequence (default: range(D))

    # Example
        pivot_basis(4, order=[1,0,2,3])
            Column 0: {1} vs {0,2,3}
            Column 1: {0} vs {2,3}
            Column 2: {2} vs {3}
    """
    D = check_number_of_parts(D)
    if order is None:
        order = np.arange(D)
    order = np.asarray(order)
    conditions = [
        order.ndim == 1,
        order.size == D,
    ]
    if not all(conditions) or not np.array_equal(np.sort(order), np.arange(D)):
        raise InvalidParameterError("`order` must be a permutation of range({})".format(D))
    # Integer-valued floats pass the check above
    order = order.astype(int)

    Psi = np.zeros((D, D - 1))
    for col in range(D - 1):
        pivot = order[col]
        remaining = order[col + 1:]
        coef_pos, coef_neg = _balance_coefficients(1, remaining.size)
        Psi[pivot, col] = coef_pos
        Psi[remaining, col] = coef_neg
    return Psi

def check_sbp(SBP, tol=DEFAULT_TOLERANCE):
    """
    # Description
    Check that `SBP` is a valid Sequential Binary Partition.  Raises on the first failing check:

        1. Dimensions: D rows and D-1 columns (InvalidDimensionError)
        2. Values: only -1, 0, +1 (InvalidParameterError)
        3. Partitions: each column has at least one +1 and one -1 (InvalidParameterError)
        4. Orthogonality: all column pairs have |dot product| <= tol (NotOrthogonalError)

    # Parameters
        * SBP: pd.DataFrame or 2D np.array (D x D-1)
        * tol: Orthogonality tolerance

    # Output
        True
    """
    tol = check_tolerance(tol)
    if isinstance(SBP, pd.DataFrame):
        SBP = SBP.values
    try:
        SBP = np.asarray(SBP, dtype=float)
    except (TypeError, ValueError):
        raise InvalidParameterError("`SBP` must be numeric")

    # Dimensions
    if SBP.ndim != 2 or SBP.shape[1] != SBP.shape[0] - 1:
        raise InvalidDimensionError("`SBP` must have D rows and D-1 columns.  Got shape {}".format(SBP.shape))
    D, K = SBP.shape

    # Values
    unique_values = np.unique(SBP)
    invalid_values = unique_values[~np.isin(unique_values, [-1, 0, 1])]
    if invalid_values.size:
        raise InvalidParameterError("`SBP` must contain only -1, 0, or +1.  Found: {}".format(invalid_values.tolist()))

    # Partitions
    n_pos = np.sum(SBP == 1, axis=0)
    n_neg = np.sum(SBP == -1, axis=0)
    invalid_partitions = np.flatnonzero((n_pos == 0) | (n_neg == 0))
    if invalid_partitions.size:
        raise InvalidParameterError("Each `SBP` column must have at least one +1 and one -1.  Invalid columns: {}".format(invalid_partitions.tolist()))

    # Orthogonality
    non_orthogonal = list()
    for i, j in combinations(range(K), 2):
        dot_product = SBP[:,i] @ SBP[:,j]
        if abs(dot_product) > tol:
            non_orthogonal.append((i, j, dot_product))
    if non_orthogonal:
        i, j, dot_product = max(non_orthogonal, key=lambda x: abs(x[2]))
        pairs = " ".join("({},{})={:.2e}".format(*x) for x in non_orthogonal)
        raise NotOrthogonalError("`SBP` columns are not orthogonal (max |dot product| {:.2e} for columns ({},{})).  Non-orthogonal pairs: {}".format(abs(dot_product), i, j, pairs))

    return True

def sbp_basis(SBP, tol=DEFAULT_TOLERANCE):
    """
    # Description
    Orthonormal basis (D x D-1) from a Sequential Binary Partition

    For a partition with r parts coded +1 and s parts coded -1:
        +sqrt(s/(r*(r+s))) for the +1 parts
        -sqrt(r/(s*(r+s))) for the -1 parts
        0 otherwise

    # Parameters
        * SBP: pd.DataFrame or 2D np.array (D x D-1) validated with `check_sbp`
        * tol: Orthogonality tolerance for `check_sbp`

    # Output
        Psi matching the input object class

    # Example
        SBP = [[ 1,  1,  0],
               [ 1, -1,  0],
               [-1,  0,  1],
               [-1,  0, -1]]
        Psi = sbp_basis(SBP)
    """
    check_sbp(SBP, tol=tol)

    index = None
    columns = None
    if isinstance(SBP, pd.DataFrame):
        index = SBP.index
        columns = SBP.columns
        SBP = SBP.values
    SBP = np.asarray(SBP, dtype=float)

    D, K = SBP.shape
    Psi = np.zeros((D, K))
    for i in range(K):
        mask_pos = SBP[:,i] == 1
        mask_neg = SBP[:,i] == -1
        coef_pos, coef_neg = _balance_coefficients(mask_pos.sum(), mask_neg.sum())
        Psi[mask_pos, i] = coef_pos
        Psi[mask_neg, i] = coef_neg

    if index is not None:
        Psi = pd.DataFrame(Psi, index=index, columns=columns)
    return Psi

def check_orthonormal(Psi, tol=DEFAULT_TOLERANCE):
    """
    # Description
    Raise `NotOrthonormalError` unless max|Psi.T @ Psi - I| < tol

    # Output
        Maximum absolute deviation from the identity
    """
    tol = check_tolerance(tol)
    if isinstance(Psi, pd.DataFrame):
        Psi = Psi.values
    Psi = np.asarray(Psi, dtype=float)
    if Psi.ndim != 2:
        raise InvalidDimensionError("Basis `Psi` must be 2D (D x D-1).  Got {}D".format(Psi.ndim))
    K = Psi.shape[1]

    deviation = np.abs(Psi.T @ Psi - np.eye(K))
    max_error = deviation.max() if deviation.size else 0.0
    if not max_error < tol:
        i, j = np.unravel_index(np.argmax(deviation), deviation.shape)
        raise NotOrthonormalError("Basis `Psi` is not orthonormal (max error: {:.2e} at columns ({},{}), tolerance: {:.2e})".format(max_error, i, j, tol))
    return max_error
