"""
Tests for codatools.basis: pairwise contrast matrix, pivot and SBP bases.
"""

import numpy as np
import pandas as pd
import pytest

from codatools import (
    InvalidDimensionError,
    InvalidParameterError,
    NotOrthogonalError,
    NotOrthonormalError,
    check_orthonormal,
    check_sbp,
    pairwise_matrix,
    pivot_basis,
    sbp_basis,
)


# -- Pairwise matrix --------------------------------------------------------

class TestPairwiseMatrix:
    def test_shape_and_first_column(self):
        H = pairwise_matrix(4)
        assert H.shape == (4, 6)
        np.testing.assert_array_equal(H[:, 0], [1, -1, 0, 0])

    def test_lexicographic_pair_order(self):
        H = pairwise_matrix(4)
        pairs = [(np.flatnonzero(H[:, k] == 1)[0], np.flatnonzero(H[:, k] == -1)[0]) for k in range(H.shape[1])]
        assert pairs == [(0, 1), (0, 2), (0, 3), (1, 2), (1, 3), (2, 3)]

    def test_columns_are_contrasts(self):
        H = pairwise_matrix(6)
        np.testing.assert_array_equal(H.sum(axis=0), np.zeros(15))
        np.testing.assert_array_equal(np.abs(H).sum(axis=0), np.full(15, 2))

    def test_labeled(self):
        H = pairwise_matrix(3, components=["x", "y", "z"])
        assert isinstance(H, pd.DataFrame)
        assert list(H.columns) == ["x/y", "x/z", "y/z"]
        assert list(H.index) == ["x", "y", "z"]

    def test_labels_must_match_D(self):
        with pytest.raises(InvalidDimensionError):
            pairwise_matrix(4, components=["x", "y", "z"])

    def test_invalid_D(self):
        with pytest.raises(InvalidDimensionError):
            pairwise_matrix(1)
        with pytest.raises(InvalidParameterError):
            pairwise_matrix(2.5)


# -- Pivot basis ------------------------------------------------------------

class TestPivotBasis:
    @pytest.mark.parametrize("D", [2, 3, 4, 7])
    def test_orthonormal(self, D):
        Psi = pivot_basis(D)
        assert Psi.shape == (D, D - 1)
        np.testing.assert_allclose(Psi.T @ Psi, np.eye(D - 1), atol=1e-12)
        np.testing.assert_allclose(Psi.sum(axis=0), 0, atol=1e-12)

    def test_default_coefficients(self):
        Psi = pivot_basis(4)
        np.testing.assert_allclose(Psi[:, 0], [np.sqrt(3 / 4), -np.sqrt(1 / 12), -np.sqrt(1 / 12), -np.sqrt(1 / 12)])
        np.testing.assert_allclose(Psi[:, 2], [0, 0, np.sqrt(1 / 2), -np.sqrt(1 / 2)])

    def test_custom_order(self):
        Psi = pivot_basis(4, order=[1, 0, 2, 3])
        assert Psi[1, 0] == pytest.approx(np.sqrt(3 / 4))
        assert Psi[1, 1] == 0
        assert Psi[0, 1] == pytest.approx(np.sqrt(2 / 3))

    def test_float_order(self):
        np.testing.assert_array_equal(
            pivot_basis(4, order=[1.0, 0.0, 2.0, 3.0]),
            pivot_basis(4, order=[1, 0, 2, 3]),
        )

    @pytest.mark.parametrize("order", [[0, 1, 2], [0, 1, 1, 2], [1, 2, 3, 4], [0.5, 1, 2, 3]])
    def test_invalid_order(self, order):
        with pytest.raises(InvalidParameterError):
            pivot_basis(4, order=order)


# -- SBP --------------------------------------------------------------------

class TestCheckSbp:
    def test_valid(self, sbp4):
        assert check_sbp(sbp4) is True

    def test_dataframe(self, sbp4):
        assert check_sbp(pd.DataFrame(sbp4, index=list("abcd")))

    def test_wrong_shape(self, sbp4):
        with pytest.raises(InvalidDimensionError):
            check_sbp(sbp4[:, :2])

    def test_wrong_values(self, sbp4):
        SBP = sbp4.copy()
        SBP[0, 0] = 2
        with pytest.raises(InvalidParameterError, match=r"\[2"):
            check_sbp(SBP)

    def test_partition_without_negative(self, sbp4):
        SBP = sbp4.copy()
        SBP[:, 1] = [1, 1, 0, 0]
        with pytest.raises(InvalidParameterError, match=r"Invalid columns: \[1\]"):
            check_sbp(SBP)

    def test_not_orthogonal(self):
        SBP = np.array([
            [1, 1, 0],
            [-1, 1, 0],
            [0, -1, 1],
            [0, 0, -1],
        ])
        with pytest.raises(NotOrthogonalError, match=r"\(1,2\)"):
            check_sbp(SBP)

    def test_first_failing_check_wins(self):
        # Wrong shape and wrong values: the shape check comes first
        with pytest.raises(InvalidDimensionError):
            check_sbp(np.full((3, 3), 5))

    def test_not_orthogonal_is_not_orthonormal(self):
        assert issubclass(NotOrthogonalError, NotOrthonormalError)


class TestSbpBasis:
    def test_orthonormal(self, sbp4):
        Psi = sbp_basis(sbp4)
        np.testing.assert_allclose(Psi.T @ Psi, np.eye(3), atol=1e-9)
        np.testing.assert_allclose(np.linalg.norm(Psi, axis=0), 1)

    def test_coefficients(self, sbp4):
        Psi = sbp_basis(sbp4)
        s = 1 / np.sqrt(2)
        np.testing.assert_allclose(Psi[:, 0], [0.5, 0.5, -0.5, -0.5])
        np.testing.assert_allclose(Psi[:, 1], [s, -s, 0, 0])
        np.testing.assert_allclose(Psi[:, 2], [0, 0, s, -s])

    def test_unbalanced_partition(self):
        SBP = np.array([
            [1, 0],
            [-1, 1],
            [-1, -1],
        ])
        Psi = sbp_basis(SBP)
        np.testing.assert_allclose(Psi[:, 0], [np.sqrt(2 / 3), -np.sqrt(1 / 6), -np.sqrt(1 / 6)])
        np.testing.assert_allclose(Psi.T @ Psi, np.eye(2), atol=1e-12)

    def test_dataframe_keeps_labels(self, sbp4):
        SBP = pd.DataFrame(sbp4, index=list("abcd"), columns=["b1", "b2", "b3"])
        Psi = sbp_basis(SBP)
        assert isinstance(Psi, pd.DataFrame)
        assert list(Psi.index) == list("abcd")
        assert list(Psi.columns) == ["b1", "b2", "b3"]

    def test_invalid_sbp(self):
        with pytest.raises(NotOrthogonalError):
            sbp_basis(np.array([[1, 1], [1, 1], [-1, -1]]), tol=1e-12)


class TestCheckOrthonormal:
    def test_orthonormal(self, sbp4):
        assert check_orthonormal(sbp_basis(sbp4)) < 1e-12

    def test_not_orthonormal(self):
        with pytest.raises(NotOrthonormalError, match="max error"):
            check_orthonormal(np.array([[1.0, 1.0], [0.0, 1.0], [0.0, 0.0]]))

    def test_1d_basis(self):
        with pytest.raises(InvalidDimensionError, match="2D"):
            check_orthonormal(np.array([np.sqrt(0.5), -np.sqrt(0.5)]))
