"""
Tests for the workspace module.
"""

import unittest
import numpy as np
from ihtcore.workspace import ActiveSetCache, IHTWorkspace

class TestActiveSetCache(unittest.TestCase):
    """Test class for the active-set cache."""

    def setUp(self):
        """Set up test fixtures."""
        np.random.seed(42)
        self.n, self.p, self.k = 6, 5, 2
        self.x = np.random.randn(self.n, self.p)
        self.g = np.random.randn(self.p)
        self.cache = ActiveSetCache(self.n, self.p, self.k)

    def test_buffer_shapes(self):
        """Test that buffers are sized to the model size."""
        self.assertEqual(self.cache.xk.shape, (self.n, self.k))
        self.assertEqual(self.cache.gk.shape, (self.k,))
        self.assertEqual(self.cache.bk.shape, (self.k,))

        self.cache.resize(4)
        self.assertEqual(self.cache.xk.shape, (self.n, 4))
        self.assertFalse(self.cache.valid)

        # never more columns than predictors
        self.cache.resize(10)
        self.assertEqual(self.cache.xk.shape, (self.n, self.p))

    def test_refresh_extracts_active_set(self):
        """Test that the cache holds the active columns and gradient entries."""
        mask = np.array([False, True, False, False, True])
        rebuilt = self.cache.refresh(self.x, self.g, mask)

        self.assertTrue(rebuilt)
        np.testing.assert_array_equal(self.cache.xk, self.x[:, [1, 4]])
        np.testing.assert_array_equal(self.cache.gk, self.g[[1, 4]])

    def test_rebuild_only_on_support_change(self):
        """Test that columns are only re-extracted when the support moves."""
        mask = np.array([True, True, False, False, False])
        self.cache.refresh(self.x, self.g, mask)
        self.assertFalse(self.cache.refresh(self.x, self.g, mask))
        self.assertEqual(self.cache.rebuilds, 1)

        # gradient slice still follows the new gradient
        g_new = self.g * 2.0
        self.cache.refresh(self.x, g_new, mask)
        np.testing.assert_array_equal(self.cache.gk, g_new[[0, 1]])

        moved = np.array([True, False, True, False, False])
        self.assertTrue(self.cache.refresh(self.x, self.g, moved))
        self.assertEqual(self.cache.rebuilds, 2)

        self.cache.invalidate()
        self.assertTrue(self.cache.refresh(self.x, self.g, moved))

class TestWorkspace(unittest.TestCase):
    """Test class for IHTWorkspace."""

    def setUp(self):
        """Set up test fixtures."""
        np.random.seed(42)
        self.x = np.random.randn(8, 6)
        self.ws = IHTWorkspace.for_problem(self.x, 3)

    def test_dimensions(self):
        self.assertTrue(self.ws.fits(8, 6))
        self.assertFalse(self.ws.fits(6, 8))
        self.assertEqual(self.ws.b0.shape, (6,))
        self.assertEqual(self.ws.xb.shape, (8,))
        self.assertEqual(self.ws.cache.xk.shape, (8, 3))

    def test_resize(self):
        """Test that resize reallocates the k-sized buffers only."""
        b0 = self.ws.b0
        self.ws.resize(5)

        self.assertEqual(self.ws.k, 5)
        self.assertEqual(self.ws.cache.xk.shape, (8, 5))
        self.assertIs(self.ws.b0, b0)

    def test_resize_after_cache_shrank(self):
        """Test that resize restores the cache after it shrank to a smaller active set."""
        # the cache resizes itself when it is refreshed with fewer active columns
        self.ws.cache.resize(1)
        self.ws.resize(3)

        self.assertEqual(self.ws.k, 3)
        self.assertEqual(self.ws.cache.k, 3)
        self.assertEqual(self.ws.cache.xk.shape, (8, 3))
        self.assertEqual(self.ws.cache.bk.shape, (3,))

    def test_sort_order_reuse(self):
        """Test that an unchanged vector is not sorted twice."""
        b = np.random.randn(6)
        first = self.ws.sort_order(b).copy()
        self.ws.sort_order(b)
        self.assertEqual(self.ws.sort_count, 1)
        np.testing.assert_array_equal(first, np.argsort(-np.abs(b), kind="stable"))

        b[0] += 1.0
        second = self.ws.sort_order(b)
        self.assertEqual(self.ws.sort_count, 2)
        np.testing.assert_array_equal(second, np.argsort(-np.abs(b), kind="stable"))

    def test_project(self):
        """Test projection through the workspace buffers."""
        b = np.array([0.2, -4.0, 1.0, 3.0, 0.0, -0.5])
        self.ws.project(b, 3)

        np.testing.assert_array_equal(b, [0.0, -4.0, 1.0, 3.0, 0.0, 0.0])
        np.testing.assert_array_equal(self.ws.indices[:3], [1, 3, 2])

    def test_reset_support(self):
        """Test that resetting clears the previous support and invalidates the cache."""
        self.ws.support0.fill(True)
        self.ws.cache.valid = True
        b = np.array([0.0, 1.0, 0.0, 0.0, 2.0, 0.0])

        self.ws.reset_support(b)

        self.assertFalse(self.ws.support0.any())
        self.assertFalse(self.ws.cache.valid)
        np.testing.assert_array_equal(self.ws.support, b != 0)

if __name__ == "__main__":
    unittest.main()
