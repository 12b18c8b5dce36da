# -*- coding: utf-8 -*-

# Built-ins
import sys, numbers, operator
from collections import namedtuple

# External
import numpy as np
import pandas as pd

# Codatools
from .exceptions import InvalidParameterError

__all__ = [
    "DEFAULT_TOLERANCE",
    "assert_acceptable_arguments",
]

DEFAULT_TOLERANCE = 1e-12

# =========
# Utilities
# =========
def assert_acceptable_arguments(query, target, operation="le", message="Invalid option provided.  Please refer to the following for acceptable arguments:"):
    """
    le: operator.le(a, b) : <=
    eq: operator.eq(a, b) : ==
    ge: operator.ge(a, b) : >=
    """
    def is_nonstring_iterable(obj):
        condition_1 = hasattr(obj, "__iter__")
        condition_2 =  not type(obj) == str
        return all([condition_1,condition_2])

    # If query is not a nonstring iterable or a tuple
    if any([
            not is_nonstring_iterable(query),
            isinstance(query,tuple),
            ]):
        query = [query]
    query = set(query)
    target = set(target)
    func_operation = getattr(operator, operation)
    if not func_operation(query,target):
        raise InvalidParameterError("{} {}\n{}".format(message, sorted(query - target, key=str), sorted(target, key=str)))

def check_tolerance(tol, name="tol"):
    """
    Tolerances must be non-negative real scalars
    """
    conditions = [
        isinstance(tol, numbers.Real),
        not isinstance(tol, bool),
    ]
    if not all(conditions) or not np.isfinite(tol) or tol < 0:
        raise InvalidParameterError("`{}` must be a non-negative scalar.  Got {!r}".format(name, tol))
    return float(tol)

def check_integer(value, name):
    """
    Accepts Python/NumPy integers and integer-valued floats
    """
    if isinstance(value, bool):
        raise InvalidParameterError("`{}` must be an integer.  Got {!r}".format(name, value))
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real) and np.isfinite(value) and float(value).is_integer():
        return int(value)
    raise InvalidParameterError("`{}` must be an integer.  Got {!r}".format(name, value))

def report(*messages):
    for message in messages:
        print(message, file=sys.stderr)

# =====================
# Labeled table adapter
# =====================
Table = namedtuple("Table", ["values", "index", "components", "n_dimensions", "is_pandas"])

def unpack_table(X, name="X"):
    """
    # Description
    Strip labels from a 1D/2D NumPy or Pandas object so the numerical core only sees 2D float arrays

    # Parameters
        * X:
            (1D): pd.Series or 1D np.array (a single composition)
            (2D): pd.DataFrame or 2D np.array (rows=compositions, columns=components)
        * name: Used in error messages

    # Output
        Table(values, index, components, n_dimensions, is_pandas)
            * values: 2D float np.array
            * index: pd.Index of the rows for pd.DataFrame input, else None
            * components: pd.Index of the columns (pd.RangeIndex for NumPy input)
    """
    index = None
    components = None
    is_pandas = isinstance(X, (pd.DataFrame, pd.Series))
    if isinstance(X, pd.DataFrame):
        index = X.index
        components = X.columns
        X = X.values
    elif isinstance(X, pd.Series):
        components = X.index
        X = X.values

    try:
        values = np.asarray(X, dtype=float)
    except (TypeError, ValueError):
        raise InvalidParameterError("`{}` must be numeric".format(name))

    n_dimensions = values.ndim
    if n_dimensions not in {1, 2}:
        raise InvalidParameterError("`{}` must be 1D or 2D.  Got {}D".format(name, n_dimensions))
    if n_dimensions == 1:
        values = values.reshape(1, -1)
    if components is None:
        components = pd.RangeIndex(values.shape[1])

    return Table(values=values, index=index, components=components, n_dimensions=n_dimensions, is_pandas=is_pandas)

def pack_table(values, table, columns):
    """
    Inverse of `unpack_table` for outputs with one row per composition
    """
    if table.n_dimensions == 1:
        values = values[0]
        if table.is_pandas:
            return pd.Series(values, index=pd.Index(columns))
        return values
    if table.is_pandas:
        return pd.DataFrame(values, index=table.index, columns=pd.Index(columns))
    return values

def pack_vector(values, table, name):
    """
    One value per composition: float for 1D input, pd.Series for pd.DataFrame input, 1D np.array otherwise
    """
    if table.n_dimensions == 1:
        return values[0].item()
    if table.index is not None:
        return pd.Series(values, index=table.index, name=name)
    return values

def row_labels(table):
    if table.index is not None:
        return table.index
    return pd.RangeIndex(table.values.shape[0])

def format_rows(mask, table):
    """
    Positions (and labels for pd.DataFrame input) of the rows flagged in `mask`
    """
    positions = np.flatnonzero(mask).tolist()
    if table.index is not None:
        return "{} (labels: {})".format(positions, table.index[positions].tolist())
    return str(positions)
