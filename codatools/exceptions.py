# -*- coding: utf-8 -*-

__all__ = [
    "CoDaError",
    "NonPositiveInputError",
    "InvalidDimensionError",
    "InvalidParameterError",
    "NotOrthonormalError",
    "NotOrthogonalError",
]

class CoDaError(ValueError):
    pass

class NonPositiveInputError(CoDaError):
    """
    A composition contains zeros, negative values or NaN.
    The message reports the number and the positions of the offending rows.
    """
    pass

class InvalidDimensionError(CoDaError):
    """
    Shapes are incompatible (number of parts, basis rows/columns, row counts)
    or an index falls outside the components of a composition.
    """
    pass

class InvalidParameterError(CoDaError):
    pass

class NotOrthonormalError(CoDaError):
    pass

class NotOrthogonalError(NotOrthonormalError):
    pass
