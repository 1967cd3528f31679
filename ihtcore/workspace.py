"""
Preallocated working memory for the IHT solvers.

An IHTWorkspace holds every scratch buffer a solve needs: the previous
iterate, residual, gradient, X*b products, sort order, support masks, and
the active-set cache whose buffers are sized to the model size k. The path
driver keeps one workspace alive across model sizes and calls resize()
whenever k changes. A workspace belongs to one solve at a time.
"""

import numpy as np

from ihtcore.projections import project_k, top_k_indices
from ihtcore.support import support_changed, support_mask


class ActiveSetCache:
    """
    Columns of x, and slices of the gradient and coefficients, on the active set.

    Parameters:
    -----------
    n : int
        Number of samples
    p : int
        Number of predictors
    k : int
        Model size
    """

    def __init__(self, n, p, k):
        self.n = n
        self.p = p
        self.built_for = np.zeros(p, dtype=bool)
        self.rebuilds = 0
        self.resize(k)

    def resize(self, k):
        # buffers never need more than p columns
        kk = min(k, self.p)
        self.k = kk
        self.xk = np.zeros((self.n, kk))     # k columns of x
        self.gk = np.zeros(kk)               # gradient on the active set
        self.bk = np.zeros(kk)               # coefficients on the active set
        self.active = np.zeros(kk, dtype=np.intp)
        self.valid = False

    def invalidate(self):
        self.valid = False

    def refresh(self, x, g, mask):
        """
        Update the cache for the active set given by mask.

        The columns of x are only re-extracted when the cache is invalid or
        mask differs from the support the cache was last built for. The
        gradient slice is refreshed on every call.

        Returns:
        --------
        bool : True if the columns of x were rebuilt
        """
        rebuilt = False
        if not self.valid or support_changed(mask, self.built_for):
            active = np.flatnonzero(mask)
            if active.shape[0] != self.k:
                self.resize(active.shape[0])
            self.active[:] = active
            np.take(x, self.active, axis=1, out=self.xk)
            np.copyto(self.built_for, mask)
            self.valid = True
            self.rebuilds += 1
            rebuilt = True
        np.take(g, self.active, out=self.gk)
        return rebuilt


class IHTWorkspace:
    """
    Scratch space for solve_l0 and iht_step.

    Parameters:
    -----------
    n : int
        Number of samples
    p : int
        Number of predictors
    k : int, optional
        Model size used to size the active-set cache
    """

    def __init__(self, n, p, k=0):
        self.n = n
        self.p = p
        self.b0 = np.zeros(p)                    # previous iterate
        self.df = np.zeros(p)                    # negative gradient x'(y - xb)
        self.r = np.zeros(n)                     # residual y - xb
        self.xb = np.zeros(n)                    # x*b
        self.xb0 = np.zeros(n)                   # x*b0
        self.xgk = np.zeros(n)                   # xk*gk
        self.indices = np.arange(p)              # indices that sort b
        self.support = np.zeros(p, dtype=bool)   # nonzero components of b
        self.support0 = np.zeros(p, dtype=bool)  # support before the last step
        self.cache = ActiveSetCache(n, p, k)
        self.k = k
        self.sort_count = 0
        self._sorted = np.zeros(p)
        self._sorted_valid = False

    @classmethod
    def for_problem(cls, x, k=0):
        n, p = x.shape
        return cls(n, p, k)

    def fits(self, n, p):
        return self.n == n and self.p == p

    def resize(self, k):
        """Reallocate the k-sized buffers if the model size changed."""
        if min(k, self.p) != self.cache.k:
            self.cache.resize(k)
        self.k = k
        return self

    def reset_support(self, b=None):
        """
        Forget the previous support and force a fresh active-set rebuild.

        If b is given, the current support is recomputed from it.
        """
        if b is not None:
            support_mask(b, out=self.support)
        self.support0.fill(False)
        self.cache.invalidate()

    def sort_order(self, b):
        """
        Ordering of b by decreasing magnitude.

        The previous ordering is reused when b is unchanged since it was
        last sorted.
        """
        if not (self._sorted_valid and np.array_equal(b, self._sorted)):
            self.indices[:] = top_k_indices(b)
            np.copyto(self._sorted, b)
            self._sorted_valid = True
            self.sort_count += 1
        return self.indices

    def project(self, b, k):
        """Project b onto its top k components in place, using the workspace buffers."""
        bk = self.cache.bk if self.cache.bk.shape[0] == k else None
        return project_k(b, k, sortidx=self.sort_order(b), bk=bk)
