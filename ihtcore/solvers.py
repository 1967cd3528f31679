"""
Iterative hard thresholding solvers for L0-constrained least squares.

This module solves

    min 0.5 * || y - X b ||_2^2   subject to   b in S_k = { b : ||b||_0 <= k }

with the projected gradient update

    b+ = P_{S_k}(b + mu * X'(y - X b)),

where P_{S_k} keeps the k largest components of b in magnitude. The step
size mu is estimated on the active set and halved until the stability bound

    mu <= 0.99 * omega,   omega = || b+ - b ||_2^2 / || X(b+ - b) ||_2^2

holds or the candidate support falls back to the support the search
started from.
"""

import time

import numpy as np

from ihtcore.config import IHTConfig
from ihtcore.exceptions import (
    ConfigurationError,
    DescentViolationError,
    NumericalInstabilityError,
)
from ihtcore.projections import threshold
from ihtcore.results import SolutionRecord, SolverStatus
from ihtcore.support import (
    fill_support,
    support_changed,
    support_is_empty,
    support_mask,
)
from ihtcore.workspace import IHTWorkspace


def _sqeuclidean(a, b):
    d = a - b
    return float(np.dot(d, d))


def _update_xb(xb, x, b, sortidx, k):
    """xb = x*b using only the k columns of x that can carry a nonzero."""
    keep = sortidx[:k]
    np.dot(x[:, keep], b[keep], out=xb)
    return xb


def compute_step_size(xk, gk, xgk=None):
    """
    Step size for the gradient step, restricted to the active set.

        mu = ||gk||^2 / ||xk * gk||^2

    Parameters:
    -----------
    xk : numpy.ndarray
        Columns of the design matrix on the active set, shape (n, k)
    gk : numpy.ndarray
        Gradient on the active set, shape (k,)
    xgk : numpy.ndarray, optional
        Output buffer of n floats for xk * gk

    Returns:
    --------
    float : the step size mu
    """
    if xgk is None:
        xgk = np.empty(xk.shape[0])
    np.dot(xk, gk, out=xgk)
    top = float(np.dot(gk, gk))
    bot = float(np.dot(xgk, xgk))
    if bot == 0.0:
        raise NumericalInstabilityError("Step size is not finite, is active set all zero?")
    mu = top / bot
    if not np.isfinite(mu):
        raise NumericalInstabilityError("Step size is not finite, is active set all zero?")
    return mu


def iht_step(b, x, k, g, workspace, config=None, iteration=1):
    """
    One hard threshold update with backtracking on the step size.

    On entry workspace.b0 must hold a copy of b and workspace.xb0 a copy of
    x*b; solve_l0 takes these snapshots before every call. On exit b holds
    the new iterate, workspace.xb holds x*b and workspace.support its
    nonzero pattern.

    Parameters:
    -----------
    b : numpy.ndarray
        Current iterate of p model components, updated in place
    x : numpy.ndarray
        Design matrix of shape (n, p)
    k : int
        Model size
    g : numpy.ndarray
        Negative gradient x'(y - x*b), shape (p,)
    workspace : IHTWorkspace
        Scratch buffers sized for (n, p, k)
    config : IHTConfig, optional
        Supplies max_step, the cap on step halvings
    iteration : int, optional
        Current MM iteration. The active-set columns are always rebuilt on
        the first iteration.

    Returns:
    --------
    tuple : (mu, mu_step), the accepted step size and number of halvings
    """
    if config is None:
        config = IHTConfig()
    ws = workspace
    max_step = config.max_step

    # which components of b are nonzero? pad with the largest gradient
    # components so the active set has k entries
    support_mask(b, out=ws.support)
    fill_support(ws.support, g, k)

    if iteration < 2:
        ws.cache.invalidate()
    ws.cache.refresh(x, g, ws.support)

    mu = compute_step_size(ws.cache.xk, ws.cache.gk, xgk=ws.xgk)

    # gradient step on all p components, then keep the top k
    b += mu * g
    ws.project(b, k)

    np.copyto(ws.support0, ws.support)
    support_mask(b, out=ws.support)
    _update_xb(ws.xb, x, b, ws.indices, k)

    omega_top = _sqeuclidean(b, ws.b0)
    omega_bot = _sqeuclidean(ws.xb, ws.xb0)

    mu_step = 0
    while (mu * omega_bot > 0.99 * omega_top
           and not support_is_empty(ws.support)
           and support_changed(ws.support, ws.support0)
           and mu_step < max_step):

        mu *= 0.5

        # redo the step from the previous iterate
        np.copyto(b, ws.b0)
        b += mu * g
        ws.project(b, k)

        support_mask(b, out=ws.support)
        _update_xb(ws.xb, x, b, ws.indices, k)

        omega_top = _sqeuclidean(b, ws.b0)
        omega_bot = _sqeuclidean(ws.xb, ws.xb0)

        mu_step += 1

    return mu, mu_step


def _check_model_size(k):
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise ConfigurationError(f"Model size k must be an integer, got {k!r}")
    if k < 0:
        raise ConfigurationError("Value of k must be nonnegative!")


def validate_problem(x, y, b):
    """Coerce x, y to float64 arrays, check shapes, and copy or create the warm start."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.ndim != 2:
        raise ConfigurationError(f"Design matrix must be 2-dimensional, got shape {x.shape}")
    n, p = x.shape
    if y.shape != (n,):
        raise ConfigurationError(f"Response must have shape ({n},), got {y.shape}")
    if b is None:
        b = np.zeros(p)
    else:
        b = np.array(b, dtype=np.float64, copy=True)
        if b.shape != (p,):
            raise ConfigurationError(f"Warm start must have shape ({p},), got {b.shape}")
    return x, y, b


def _finish(b, x, y, ws, tol, k):
    # send elements below tol to zero and recompute the loss at the returned beta
    threshold(b, tol)
    _update_xb(ws.xb, x, b, ws.sort_order(b), k)
    np.subtract(y, ws.xb, out=ws.r)
    return 0.5 * float(np.dot(ws.r, ws.r))


def solve_l0(x, y, k, config=None, b=None, workspace=None):
    """
    L0-constrained least squares by iterative hard thresholding.

    Solves min 0.5 * ||y - x*b||_2^2 subject to ||b||_0 <= k with an MM
    loop around iht_step.

    Parameters:
    -----------
    x : numpy.ndarray
        Design matrix of shape (n, p)
    y : numpy.ndarray
        Response vector of shape (n,)
    k : int
        Desired size of the support, k >= 0
    config : IHTConfig, optional
        Tolerance, iteration caps and verbosity
    b : numpy.ndarray, optional
        Warm start of shape (p,). Defaults to the null model. The array
        passed in is copied, never modified.
    workspace : IHTWorkspace, optional
        Preallocated buffers for an (n, p) problem. Allocated when omitted.

    Returns:
    --------
    SolutionRecord : beta, loss, iter, time and status of the solve

    Raises:
    -------
    ConfigurationError
        Invalid k, config or array shapes; raised before any computation.
    NumericalInstabilityError
        Non-finite step size or loss. This includes a gradient that is
        exactly zero on the active set, which a noiseless fit that is
        exactly representable with k columns can reach.
    DescentViolationError
        The objective increased by more than config.tol.
    """
    if config is None:
        config = IHTConfig()
    _check_model_size(k)
    config.validate()
    x, y, b = validate_problem(x, y, b)
    n, p = x.shape

    if workspace is None:
        workspace = IHTWorkspace(n, p, k)
    elif not workspace.fits(n, p):
        raise ConfigurationError(
            f"Workspace is sized for ({workspace.n}, {workspace.p}), problem is ({n}, {p})"
        )
    ws = workspace.resize(k)

    tol = config.tol
    max_iter = config.max_iter
    verbose = config.verbose

    start = time.perf_counter()

    if k == 0:
        b.fill(0.0)
        loss = 0.5 * float(np.dot(y, y))
        return SolutionRecord(beta=b, loss=loss, iter=0,
                              time=time.perf_counter() - start)

    # warm starts may carry more than k nonzeros
    ws.project(b, k)
    ws.reset_support(b)

    # update x*b, residual and gradient
    _update_xb(ws.xb, x, b, ws.indices, k)
    np.subtract(y, ws.xb, out=ws.r)
    np.dot(x.T, ws.r, out=ws.df)
    next_obj = 0.5 * float(np.dot(ws.r, ws.r))

    if verbose:
        print(f"\n--- Begin MM algorithm (IHT, k={k}) ---")
        print("Iter\tHalves\tMu\t\tNorm\t\tObjective")
        print(f"0\t0\tInf\t\tInf\t\t{next_obj:.7f}")

    for mm_iter in range(1, max_iter + 1):

        # save values from previous iterate
        np.copyto(ws.b0, b)
        np.copyto(ws.xb0, ws.xb)
        current_obj = next_obj

        mu, mu_step = iht_step(b, x, k, ws.df, ws, config, iteration=mm_iter)

        # recompute residual and gradient from the new x*b
        np.subtract(y, ws.xb, out=ws.r)
        np.dot(x.T, ws.r, out=ws.df)
        next_obj = 0.5 * float(np.dot(ws.r, ws.r))

        if not np.isfinite(next_obj):
            raise NumericalInstabilityError("Loss function is not finite, something went wrong...")

        the_norm = float(np.max(np.abs(b - ws.b0)))
        scaled_norm = the_norm / (float(np.max(np.abs(ws.b0))) + 1.0)

        if verbose:
            print(f"{mm_iter}\t{mu_step}\t{mu:3.7f}\t{the_norm:3.7f}\t{next_obj:3.7f}")

        if scaled_norm < tol:
            loss = _finish(b, x, y, ws, tol, k)
            elapsed = time.perf_counter() - start
            if verbose:
                print("MM algorithm has converged successfully.")
                print(f"Iterations: {mm_iter}, Final Loss: {loss:.7f}, Total Compute Time: {elapsed:.4f}")
            return SolutionRecord(beta=b, loss=loss, iter=mm_iter, time=elapsed,
                                  status=SolverStatus.CONVERGED)

        if next_obj > current_obj + tol:
            if verbose:
                print(f"MM algorithm fails to descend at iteration {mm_iter}!")
                print(f"Current Objective: {current_obj:.7f}, Next Objective: {next_obj:.7f}")
            raise DescentViolationError(mm_iter, current_obj, next_obj)

    loss = _finish(b, x, y, ws, tol, k)
    elapsed = time.perf_counter() - start
    if verbose:
        print(f"MM algorithm has hit maximum iterations {max_iter}!")
        print(f"Current Objective: {loss:.7f}")
    return SolutionRecord(beta=b, loss=loss, iter=max_iter, time=elapsed,
                          status=SolverStatus.ITERATION_CAPPED)


solve = solve_l0
