"""
Tests for the projections module.

This file contains tests for the hard thresholding functions in the
ihtcore.projections module.
"""

import unittest
import numpy as np
from ihtcore.projections import project_k, top_k_indices, threshold

class TestProjections(unittest.TestCase):
    """Test class for projection functions."""

    def setUp(self):
        """Set up test fixtures."""
        # Set random seed for reproducibility
        np.random.seed(42)

        self.b = np.array([0.5, -3.0, 2.0, 0.1, -1.0])

    def test_keeps_largest_magnitudes(self):
        """Test that the top k components by magnitude survive unchanged."""
        projected = project_k(self.b.copy(), 2)

        np.testing.assert_array_equal(projected, [0.0, -3.0, 2.0, 0.0, 0.0])

    def test_projection_is_in_place(self):
        """Test that project_k overwrites and returns its argument."""
        b = self.b.copy()
        out = project_k(b, 3)

        self.assertIs(out, b)
        np.testing.assert_array_equal(b, [0.0, -3.0, 2.0, 0.0, -1.0])

    def test_ties_broken_by_index(self):
        """Test that equal magnitudes are resolved in favour of the lower index."""
        b = np.array([1.0, -1.0, 1.0, 0.5])
        projected = project_k(b.copy(), 2)

        np.testing.assert_array_equal(projected, [1.0, -1.0, 0.0, 0.0])
        np.testing.assert_array_equal(top_k_indices(b), [0, 1, 2, 3])

    def test_idempotence(self):
        """Test that a k-sparse vector is returned unchanged."""
        b = np.array([0.0, 4.0, 0.0, -2.0, 0.0])
        once = project_k(b.copy(), 3)
        twice = project_k(once.copy(), 3)

        np.testing.assert_array_equal(once, b)
        np.testing.assert_array_equal(twice, once)

    def test_k_zero_and_k_at_least_p(self):
        """Test the boundary model sizes."""
        np.testing.assert_array_equal(project_k(self.b.copy(), 0), np.zeros(5))
        np.testing.assert_array_equal(project_k(self.b.copy(), 5), self.b)
        np.testing.assert_array_equal(project_k(self.b.copy(), 9), self.b)

    def test_random_vectors(self):
        """Test projections of random vectors for every k."""
        p = 20
        for _ in range(10):
            b = np.random.randn(p)
            magnitudes = np.sort(np.abs(b))[::-1]
            for k in range(p + 1):
                projected = project_k(b.copy(), k)
                nonzero = np.flatnonzero(projected)

                self.assertLessEqual(len(nonzero), k)
                # survivors keep their values
                np.testing.assert_array_equal(projected[nonzero], b[nonzero])
                # and are exactly the k largest in magnitude
                np.testing.assert_array_equal(np.sort(np.abs(projected[nonzero]))[::-1],
                                              magnitudes[:k])

    def test_precomputed_sort_order(self):
        """Test that a supplied sort order and scratch buffer give the same answer."""
        b = np.random.randn(15)
        sortidx = top_k_indices(b)
        bk = np.empty(4)

        expected = project_k(b.copy(), 4)
        projected = project_k(b.copy(), 4, sortidx=sortidx, bk=bk)

        np.testing.assert_array_equal(projected, expected)
        np.testing.assert_array_equal(bk, b[sortidx[:4]])

    def test_top_k_indices_prefix(self):
        """Test that top_k_indices with k returns the prefix of the full ordering."""
        b = np.random.randn(12)
        np.testing.assert_array_equal(top_k_indices(b, 5), top_k_indices(b)[:5])

    def test_threshold(self):
        """Test that small components are snapped to exactly zero."""
        b = np.array([1e-8, -2e-5, 0.5, -1e-3])
        threshold(b, 1e-4)

        np.testing.assert_array_equal(b, [0.0, 0.0, 0.5, -1e-3])

if __name__ == "__main__":
    unittest.main()
