"""
Support (active set) bookkeeping for IHT iterates.
"""

import numpy as np


def support_mask(b, out=None):
    """
    Boolean mask of the nonzero components of b.

    Parameters:
    -----------
    b : numpy.ndarray
        Coefficient vector of shape (p,)
    out : numpy.ndarray, optional
        Boolean array of shape (p,) to write into

    Returns:
    --------
    numpy.ndarray : boolean mask
    """
    return np.not_equal(b, 0.0, out=out)


def support_changed(mask, mask0):
    """True iff the two masks differ in at least one position."""
    return bool(np.any(mask != mask0))


def support_is_empty(mask):
    return not mask.any()


def fill_support(mask, g, k):
    """
    Grow mask in place to min(k, p) entries using the gradient g.

    Components outside the current support are added in order of decreasing
    |g|, ties broken by index. On the null model this picks the top k
    components of the gradient, which is where the first IHT step can move.

    Parameters:
    -----------
    mask : numpy.ndarray
        Boolean support mask of shape (p,)
    g : numpy.ndarray
        Gradient of shape (p,)
    k : int
        Target size of the active set

    Returns:
    --------
    numpy.ndarray : mask, for convenience
    """
    missing = min(k, mask.shape[0]) - int(np.count_nonzero(mask))
    if missing <= 0:
        return mask
    outside = np.flatnonzero(~mask)
    order = np.argsort(-np.abs(g[outside]), kind="stable")
    mask[outside[order[:missing]]] = True
    return mask
