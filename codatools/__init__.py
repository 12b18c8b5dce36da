# -*- coding: utf-8 -*-

__version__= "2025.11.0"
__author__ = "CoDaTools contributors"
__license__ = "BSD-3"
__developmental__ = True

# ==============
# Direct Exports
# ==============
__functions__ = [
    # Checks
    "check_composition", "check_closure", "check_clr", "assert_composition",
    # Bases
    "pairwise_matrix", "pivot_basis", "check_sbp", "sbp_basis", "check_orthonormal",
    # Transforms
    "transform_closure", "transform_clr", "transform_mlr", "transform_mrlr",
    "transform_alr", "transform_olr", "transform_nalr", "transform_plr",
    # Norms
    "aitchison_norm", "l1clr_norm", "l1coda_norm", "linfcoda_norm", "l1plr_norm", "lpcoda_norm",
    # Pairwise
    "aitchison_inner_product", "coda_distance", "recover_from_pairwise", "number_of_parts_from_pairs",
    # Utilities
    "assert_acceptable_arguments",
]
__classes__ = [
    "CoDaError", "NonPositiveInputError", "InvalidDimensionError", "InvalidParameterError",
    "NotOrthonormalError", "NotOrthogonalError",
]

__constants__ = ["DEFAULT_TOLERANCE", "NORM_TYPES", "DISTANCE_OPTIONS"]

__all__ = sorted(__functions__ + __classes__ + __constants__)

from .exceptions import *
from .utils import *
from .checks import *
from .basis import *
from .transforms import *
from .metrics import *
from .pairwise import *
