# -*- coding: utf-8 -*-

# Built-ins
import numbers

# External
import numpy as np
import pandas as pd

# Codatools
from .basis import check_orthonormal, pairwise_matrix
from .checks import _assert_positive
from .exceptions import InvalidDimensionError, InvalidParameterError
from .utils import (
    DEFAULT_TOLERANCE,
    check_integer,
    pack_table,
    unpack_table,
)

__all__ = [
    "transform_closure",
    "transform_clr",
    "transform_mlr",
    "transform_mrlr",
    "transform_alr",
    "transform_olr",
    "transform_nalr",
    "transform_plr",
]

# ==================
# Numerical core (2D)
# ==================
def _clr(X_log):
    return X_log - X_log.mean(axis=1, keepdims=True)

def _mlr(X_log):
    return X_log - np.median(X_log, axis=1, keepdims=True)

def _mrlr(X_log):
    midrange = (X_log.max(axis=1, keepdims=True) + X_log.min(axis=1, keepdims=True))/2
    return X_log - midrange

def _alr_matrix(D, denominator):
    """
    Identity (D-1 x D-1) with a row of -1 inserted at `denominator`
    """
    return np.insert(np.eye(D - 1), denominator, -1, axis=0)

def _resolve_component(key, components, name):
    """
    Position of a component given as a label (Pandas input) or a 0-based integer position
    """
    D = components.size
    if not isinstance(components, pd.RangeIndex) and key in components:
        position = components.get_loc(key)
        if not isinstance(position, numbers.Integral):
            raise InvalidParameterError("`{}` label {!r} is not unique in the components".format(name, key))
        return int(position)
    position = check_integer(key, name)
    if not 0 <= position < D:
        raise InvalidDimensionError("`{}` must be between 0 and {} (number of parts - 1).  Got {}".format(name, D - 1, position))
    return position

def _log_composition(X, name="X"):
    table = unpack_table(X, name=name)
    _assert_positive(table, name=name)
    return np.log(table.values), table

# ==========
# Transforms
# ==========
def transform_closure(X):
    """
    # Description
    Closure (e.g., total sum scaling, relative abundance) that can handle 1D and 2D NumPy and Pandas objects

    # Parameters
        * X:
            - Compositional data
            (1D): pd.Series or 1D np.array
            (2D): pd.DataFrame or 2D np.array
    * Output
        Closure transformed matching input object class
    """
    table = unpack_table(X)
    _assert_positive(table)
    X_closure = table.values/table.values.sum(axis=1, keepdims=True)
    return pack_table(X_closure, table, table.components)

# CLR Normalization
def transform_clr(X):
    """
    # Description
    Centered log-ratio: log(X) - mean(log(X)) per composition.  Each row sums to zero.

    # Parameters
        * X:
            - Compositional data (strictly positive)
            (1D): pd.Series or 1D np.array
            (2D): pd.DataFrame or 2D np.array
    * Output
        clr scores matching input object class (columns are the components)
    """
    X_log, table = _log_composition(X)
    return pack_table(_clr(X_log), table, table.components)

def transform_mlr(X):
    """
    # Description
    Median log-ratio: log(X) - median(log(X)) per composition.
    For even D the median is the mean of the two central log values.

    # Parameters
        * X: Compositional data (see `transform_clr`)
    """
    X_log, table = _log_composition(X)
    return pack_table(_mlr(X_log), table, table.components)

def transform_mrlr(X):
    """
    # Description
    Midrange log-ratio: log(X) - (max(log(X)) + min(log(X)))/2 per composition

    # Parameters
        * X: Compositional data (see `transform_clr`)
    """
    X_log, table = _log_composition(X)
    return pack_table(_mrlr(X_log), table, table.components)

def transform_alr(X, denominator):
    """
    # Description
    Additive log-ratio coordinates log(x_i/x_denominator) for all i != denominator (in component order)

    # Parameters
        * X: Compositional data (see `transform_clr`)
        * denominator: 0-based position of the reference part or a component label for Pandas input
            (e.g., denominator=3 is the 4th part, the last one when D=4)

    # Output
        alr coordinates (n x D-1) with names "{i}/{denominator}"

    # Example
        transform_alr([0.4, 0.3, 0.2, 0.1], denominator=3)
        array([1.38629436, 1.09861229, 0.69314718])
    """
    table = unpack_table(X)
    D = table.values.shape[1]
    denominator = _resolve_component(denominator, table.components, "denominator")
    _assert_positive(table)

    X_alr = np.log(table.values) @ _alr_matrix(D, denominator)

    reference = table.components[denominator]
    coord_names = ["{}/{}".format(component, reference) for i, component in enumerate(table.components) if i != denominator]
    return pack_table(X_alr, table, coord_names)

def transform_olr(X, Psi, tol=DEFAULT_TOLERANCE):
    """
    # Description
    Orthonormal log-ratio coordinates: clr(X) @ Psi

    # Parameters
        * X: Compositional data (see `transform_clr`)
        * Psi: Orthonormal basis (D x D-1) such as `sbp_basis` or `pivot_basis`
        * tol: Orthonormality tolerance (max|Psi.T @ Psi - I| < tol)

    # Output
        olr coordinates (n x D-1) with names olr_1..olr_{D-1} (or the columns of Psi if pd.DataFrame)
    """
    coord_names = None
    if isinstance(Psi, pd.DataFrame):
        coord_names = list(Psi.columns)
        Psi = Psi.values
    try:
        Psi = np.asarray(Psi, dtype=float)
    except (TypeError, ValueError):
        raise InvalidParameterError("Basis `Psi` must be numeric")
    if Psi.ndim != 2:
        raise InvalidDimensionError("Basis `Psi` must be 2D (D x D-1).  Got {}D".format(Psi.ndim))

    table = unpack_table(X)
    D = table.values.shape[1]
    D_Psi, K = Psi.shape
    if D != D_Psi:
        raise InvalidDimensionError("`X` has {} columns but `Psi` has {} rows".format(D, D_Psi))
    if K != D - 1:
        raise InvalidDimensionError("Basis `Psi` must have D-1 = {} columns.  Got {}".format(D - 1, K))
    check_orthonormal(Psi, tol=tol)
    _assert_positive(table)

    X_olr = _clr(np.log(table.values)) @ Psi

    if coord_names is None:
        coord_names = ["olr_{}".format(i + 1) for i in range(K)]
    return pack_table(X_olr, table, coord_names)

def _validate_index_sets(index_sets, components):
    """
    Nested chain all-parts ⊃ S_1 ⊃ ... ⊃ S_K with |S_K| = 1 and K <= D-1
    """
    D = components.size
    if isinstance(index_sets, (str, bytes)) or not hasattr(index_sets, "__iter__"):
        raise InvalidParameterError("`index_sets` must be a non-empty sequence of index sets")
    index_sets = list(index_sets)
    if not index_sets:
        raise InvalidParameterError("`index_sets` must be a non-empty sequence of index sets")

    K = len(index_sets)
    if K > D - 1:
        raise InvalidDimensionError("Number of sets ({}) exceeds D-1 ({})".format(K, D - 1))

    chain = [list(range(D))]
    for k, index_set in enumerate(index_sets, start=1):
        if isinstance(index_set, (str, bytes)) or not hasattr(index_set, "__iter__"):
            index_set = [index_set]
        index_set = [_resolve_component(key, components, "index_sets[{}]".format(k - 1)) for key in index_set]
        if len(set(index_set)) != len(index_set):
            raise InvalidDimensionError("Set {} contains duplicate indices".format(k - 1))
        previous_set = chain[-1]
        if not set(index_set) < set(previous_set):
            raise InvalidDimensionError("Set {} is not strictly contained in the previous set".format(k - 1))
        chain.append(index_set)

    if len(chain[-1]) != 1:
        raise InvalidDimensionError("Last set must contain exactly 1 component.  Got {}".format(len(chain[-1])))
    return chain

def transform_nalr(X, index_sets):
    """
    # Description
    Nested additive log-ratio coordinates.  Each set of the chain uses the geometric mean
    of its components as denominator for the components dropped from the previous set.

    # Parameters
        * X: Compositional data (see `transform_clr`)
        * index_sets: Sequence of nested sets [S_1, ..., S_K] of 0-based positions (or labels for Pandas input)
            - Each set is strictly contained in the previous one (S_0 = all parts)
            - The last set contains exactly 1 component
            - At most D-1 sets

    # Output
        nalr coordinates (n x D-1), grouped by set, with names "{j}/[{S_k}]"

    # Example
        # D=4: {2,3} -> log(x_0/gm(x_2,x_3)), log(x_1/gm(x_2,x_3)); {3} -> log(x_2/x_3)
        transform_nalr(X, index_sets=[[2,3], [3]])
    """
    table = unpack_table(X)
    chain = _validate_index_sets(index_sets, table.components)
    _assert_positive(table)

    X_log = np.log(table.values)
    n, D = X_log.shape
    X_nalr = np.zeros((n, D - 1))
    coord_names = list()
    col = 0
    for previous_set, current_set in zip(chain[:-1], chain[1:]):
        numerators = sorted(set(previous_set) - set(current_set))
        denominator_log = X_log[:,current_set].mean(axis=1)
        denominator_label = "[{}]".format(" ".join(map(str, table.components[current_set])))
        for j in numerators:
            X_nalr[:,col] = X_log[:,j] - denominator_log
            coord_names.append("{}/{}".format(table.components[j], denominator_label))
            col += 1

    return pack_table(X_nalr, table, coord_names)

def transform_plr(X):
    """
    # Description
    Pairwise log-ratio coordinates log(x_i/x_j) for all i < j: log(X) @ pairwise_matrix(D)

    # Parameters
        * X: Compositional data (see `transform_clr`)

    # Output
        plr coordinates (n x D*(D-1)/2) with names "{i}/{j}"
    """
    X_log, table = _log_composition(X)
    H = pairwise_matrix(None, components=table.components)
    return pack_table(X_log @ H.values, table, H.columns)
