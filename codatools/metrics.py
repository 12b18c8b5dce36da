# -*- coding: utf-8 -*-

# Built-ins
import numbers, warnings
from itertools import combinations

# External
import numpy as np
import pandas as pd
from scipy.optimize import minimize_scalar
from scipy.spatial.distance import squareform

# Codatools
from .basis import pairwise_matrix
from .checks import _assert_positive
from .exceptions import InvalidDimensionError, InvalidParameterError
from .transforms import _clr, _mlr, _mrlr
from .utils import (
    assert_acceptable_arguments,
    check_integer,
    check_tolerance,
    pack_vector,
    row_labels,
    unpack_table,
)

__all__ = [
    "NORM_TYPES",
    "DISTANCE_OPTIONS",
    "aitchison_norm",
    "l1clr_norm",
    "l1coda_norm",
    "linfcoda_norm",
    "l1plr_norm",
    "lpcoda_norm",
    "aitchison_inner_product",
    "coda_distance",
]

# ===================
# Norms on log values
# ===================
# Each function maps log(X) (n x D) to one non-negative value per row
def _aitchison_norm(X_log):
    return np.sqrt(np.sum(_clr(X_log)**2, axis=1))

def _l1clr_norm(X_log):
    return np.sum(np.abs(_clr(X_log)), axis=1)

def _l1coda_norm(X_log):
    return np.sum(np.abs(_mlr(X_log)), axis=1)

def _linfcoda_norm(X_log):
    return np.max(np.abs(_mrlr(X_log)), axis=1)

def _l1plr_norm(X_log):
    n, D = X_log.shape
    if D < 2:
        return np.zeros(n)
    X_pw = X_log @ pairwise_matrix(D)
    return np.sum(np.abs(X_pw), axis=1)/(D - 1)

def _lpcoda_norm(X_log, p, xatol, maxiter):
    """
    min over lambda of ||clr(x) + lambda||_p with lambda in [-max|clr(x)|, max|clr(x)|]
    """
    X_clr = _clr(X_log)
    n = X_clr.shape[0]
    Y = np.zeros(n)
    not_converged = list()
    for i in range(n):
        z = X_clr[i]
        L = np.max(np.abs(z))
        if L == 0:
            continue
        if np.isinf(p):
            objective = lambda lam: np.max(np.abs(z + lam))
        else:
            objective = lambda lam: np.sum(np.abs(z + lam)**p)
        result = minimize_scalar(objective, bounds=(-L, L), method="bounded", options={"xatol":xatol, "maxiter":maxiter})
        if not result.success:
            Y[i] = np.nan
            not_converged.append(i)
            continue
        Y[i] = result.fun if np.isinf(p) else result.fun**(1/p)

    if not_converged:
        warnings.warn("LpCoDa minimization did not converge for N={} rows (maxiter={}).  Returning NaN for rows: {}".format(len(not_converged), maxiter, not_converged), RuntimeWarning)
    return Y

_NORMS = {
    "ait":_aitchison_norm,
    "l1coda":_l1coda_norm,
    "l1plr":_l1plr_norm,
    "l1clr":_l1clr_norm,
    "linf":_linfcoda_norm,
}
NORM_TYPES = tuple(_NORMS)
DISTANCE_OPTIONS = ("paired", "all-to-all")

def _norm(X, func, name):
    table = unpack_table(X)
    _assert_positive(table)
    return pack_vector(func(np.log(table.values)), table, name)

# =====
# Norms
# =====
def aitchison_norm(X):
    """
    # Description
    Aitchison norm: Euclidean norm of the clr scores, sqrt(sum(clr(x)**2))

    # Parameters
        * X:
            - Compositional data (strictly positive)
            (1D): pd.Series or 1D np.array
            (2D): pd.DataFrame or 2D np.array
    * Output
        float (1D), pd.Series (pd.DataFrame) or 1D np.array with one norm per composition
    """
    return _norm(X, _aitchison_norm, "aitchison_norm")

def l1clr_norm(X):
    """
    L1 norm of the clr scores
    """
    return _norm(X, _l1clr_norm, "l1clr_norm")

def l1coda_norm(X):
    """
    Induced L1 norm: L1 norm of the mlr (median-centered) scores
    """
    return _norm(X, _l1coda_norm, "l1coda_norm")

def linfcoda_norm(X):
    """
    Induced Linf norm: max |mrlr(x)| (midrange-centered scores)
    """
    return _norm(X, _linfcoda_norm, "linfcoda_norm")

def l1plr_norm(X):
    """
    # Description
    Mean absolute pairwise log-ratio norm:
        (1/(D-1)) * sum_{i<j} |log(x_i/x_j)|

    Computed as ||log(X) @ pairwise_matrix(D)||_1/(D-1)
    """
    return _norm(X, _l1plr_norm, "l1plr_norm")

def lpcoda_norm(X, p=2, xatol=1e-10, maxiter=500):
    """
    # Description
    Induced Lp norm of a composition:
        min_lambda ||clr(x) + lambda * 1_D||_p

    Each composition is solved with a bounded scalar minimization (Brent's method)
    over lambda in [-L, L] where L = max|clr(x)|.  p=2 is the Aitchison norm,
    p=1 is the L1CoDa norm and p=np.inf is the LinfCoDa norm.

    # Parameters
        * X: Compositional data (see `aitchison_norm`)
        * p: Norm order (p >= 1, np.inf allowed)
        * xatol: Absolute tolerance on lambda for the minimizer
        * maxiter: Maximum number of minimizer iterations per composition.
            Compositions that do not converge are returned as NaN with a RuntimeWarning.
    """
    conditions = [
        isinstance(p, numbers.Real),
        not isinstance(p, bool),
    ]
    if not all(conditions) or np.isnan(p) or p < 1:
        raise InvalidParameterError("`p` must be a scalar >= 1.  Got {!r}".format(p))
    xatol = check_tolerance(xatol, name="xatol")
    maxiter = check_integer(maxiter, "maxiter")
    if maxiter < 1:
        raise InvalidParameterError("`maxiter` must be >= 1.  Got {}".format(maxiter))

    func = lambda X_log: _lpcoda_norm(X_log, p=p, xatol=xatol, maxiter=maxiter)
    return _norm(X, func, "lpcoda_norm")

# ========
# Pairwise
# ========
def _paired_tables(X1, X2, option):
    """
    Validate two compositional datasets and resolve the paired/all-to-all option
    """
    if option is not None:
        if not isinstance(option, str):
            raise InvalidParameterError("`option` must be 'paired' or 'all-to-all'.  Got {!r}".format(option))
        option = option.lower()
        assert_acceptable_arguments(option, DISTANCE_OPTIONS)

    table_1 = unpack_table(X1, name="X1")
    _assert_positive(table_1, name="X1")

    within = X2 is None
    if within:
        table_2 = table_1
    else:
        table_2 = unpack_table(X2, name="X2")
        _assert_positive(table_2, name="X2")

    n1, D1 = table_1.values.shape
    n2, D2 = table_2.values.shape
    if D1 != D2:
        raise InvalidDimensionError("`X1` and `X2` must have same number of columns.  Got {} and {}".format(D1, D2))

    if option is None:
        if n1 == n2 and not within:
            option = "paired"
        else:
            option = "all-to-all"

    if option == "paired" and n1 != n2:
        raise InvalidDimensionError("For paired option, `X1` and `X2` must have same number of rows.  Got {} and {}".format(n1, n2))
    return table_1, table_2, within, option

def _format_pairwise(Y, table_1, table_2, option, name, redundant_form):
    is_pandas = table_1.is_pandas or table_2.is_pandas
    if option == "paired":
        if table_1.n_dimensions == 1 and table_2.n_dimensions == 1:
            return Y[0].item()
        if is_pandas:
            Y = pd.Series(Y, index=row_labels(table_1), name=name)
        return Y

    if not redundant_form:
        Y = squareform(Y, checks=False)
        if is_pandas:
            index = row_labels(table_1)
            index = pd.Index(list(map(frozenset, combinations(index, 2))), name=index.name)
            if index.name is None:
                index.name = name
            Y = pd.Series(Y, index=index, name=name)
        return Y

    if is_pandas:
        Y = pd.DataFrame(Y, index=row_labels(table_1), columns=row_labels(table_2))
    return Y

def aitchison_inner_product(X1, X2=None, option=None):
    """
    # Description
    Aitchison inner product <x1, x2>_A = sum(clr(x1) * clr(x2))

    # Parameters
        * X1: Compositional data (n1 x D)
        * X2: Compositional data (n2 x D).  If None, inner products within X1 (squared norms on the diagonal)
        * option: 'paired', 'all-to-all' or None
            None: 'paired' if X2 is provided and n1 == n2, else 'all-to-all'

    # Output
        'paired': one value per row (float, pd.Series, or 1D np.array)
        'all-to-all': n1 x n2 (pd.DataFrame or 2D np.array)
    """
    table_1, table_2, within, option = _paired_tables(X1, X2, option)

    X1_clr = _clr(np.log(table_1.values))
    X2_clr = _clr(np.log(table_2.values))
    if option == "paired":
        Y = np.sum(X1_clr*X2_clr, axis=1)
    else:
        Y = X1_clr @ X2_clr.T
    return _format_pairwise(Y, table_1, table_2, option, "aitchison_inner_product", redundant_form=True)

def coda_distance(X1, X2=None, norm_type="ait", option=None, redundant_form=True):
    """
    # Description
    Compositional distances d(x1, x2) = norm(x1/x2) for an induced norm

    # Parameters
        * X1: Compositional data (n1 x D)
            (1D): pd.Series or 1D np.array
            (2D): pd.DataFrame or 2D np.array
        * X2: Compositional data (n2 x D).  If None, distances within X1
        * norm_type: 'ait', 'l1coda', 'l1plr', 'l1clr', or 'linf' (case-insensitive)
        * option: 'paired', 'all-to-all' or None
            None: 'paired' if X2 is provided and n1 == n2, else 'all-to-all'
        * redundant_form: Only used for distances within X1
            - True: Return output in squareform
            - False: Return the dereplicated distances

    # Output:
        - 'paired': one distance per row
            * float if X1 and X2 are 1D
            * pd.Series (index=X1.index) if X1 or X2 is Pandas, else 1D np.array
        - 'all-to-all':
            * pd.DataFrame (index=X1.index, columns=X2.index) if X1 or X2 is Pandas, else 2D np.array
            * Within X1 with redundant_form=False:
                pd.Series with index as a frozenset of combinations (i.e., list(map(frozenset, combinations(index, 2)))) or 1D np.array
    """
    if not isinstance(norm_type, str):
        raise InvalidParameterError("`norm_type` must be one of: {}.  Got {!r}".format(", ".join(NORM_TYPES), norm_type))
    norm_type = norm_type.lower()
    assert_acceptable_arguments(norm_type, NORM_TYPES)

    table_1, table_2, within, option = _paired_tables(X1, X2, option)
    if not redundant_form and not (within and option == "all-to-all"):
        raise InvalidParameterError("`redundant_form=False` is only available for all-to-all distances within `X1`")

    func = _NORMS[norm_type]
    X1_log = np.log(table_1.values)
    X2_log = np.log(table_2.values)
    n1, D = X1_log.shape
    n2 = X2_log.shape[0]

    # log(x1/x2) as a difference of logs keeps d(x1,x2) == d(x2,x1)
    if option == "paired":
        Y = func(X1_log - X2_log)
    else:
        X_ratio_log = (X1_log[:,np.newaxis,:] - X2_log[np.newaxis,:,:]).reshape(n1*n2, D)
        Y = func(X_ratio_log).reshape(n1, n2)

    return _format_pairwise(Y, table_1, table_2, option, "distance", redundant_form=redundant_form)
