"""
Hard thresholding projections onto the set of k-sparse vectors.

    S_k = { b in R^p : ||b||_0 <= k }

The projection keeps the k components of b that are largest in magnitude
and sends the remaining p - k components to zero.
"""

import numpy as np


def top_k_indices(b, k=None):
    """
    Indices that sort b by decreasing magnitude.

    Ties in magnitude are broken by position, lower index first, so repeated
    calls on the same vector always give the same ordering.

    Parameters:
    -----------
    b : numpy.ndarray
        Vector of shape (p,)
    k : int, optional
        If given, only the first k indices are returned

    Returns:
    --------
    numpy.ndarray : integer index array
    """
    sortidx = np.argsort(-np.abs(b), kind="stable")
    if k is None:
        return sortidx
    return sortidx[:k]


def project_k(b, k, sortidx=None, bk=None):
    """
    Preserve the top k components of b in place.

    Parameters:
    -----------
    b : numpy.ndarray
        Vector of shape (p,), overwritten with its projection
    k : int
        Number of components to keep, k >= 0
    sortidx : numpy.ndarray, optional
        Ordering of b by decreasing magnitude, as returned by top_k_indices.
        Computed when omitted.
    bk : numpy.ndarray, optional
        Scratch array of k floats for the kept values

    Returns:
    --------
    numpy.ndarray : b, for convenience
    """
    p = b.shape[0]
    if k >= p:
        return b
    if sortidx is None:
        sortidx = top_k_indices(b)
    keep = sortidx[:k]
    if bk is None or bk.shape[0] != k:
        bk = np.empty(k, dtype=b.dtype)
    np.take(b, keep, out=bk)
    b.fill(0.0)
    b[keep] = bk
    return b


def threshold(b, tol):
    """Send components of b smaller than tol in magnitude to zero, in place."""
    b[np.abs(b) < tol] = 0.0
    return b
