"""
Regularization paths for IHT.

solve_path fits one L0-constrained model per requested model size, warm
starting each fit from the previous solution. The fitted models can be
collected into a sparse coefficient table and scored on new data.
"""

import numpy as np
import jax.numpy as jnp
from scipy import sparse

from ihtcore.config import IHTConfig
from ihtcore.exceptions import ConfigurationError
from ihtcore.losses import path_losses
from ihtcore.solvers import solve_l0, validate_problem
from ihtcore.workspace import IHTWorkspace


def _check_path(path):
    sizes = []
    for q in path:
        if isinstance(q, bool) or not isinstance(q, (int, np.integer)):
            raise ConfigurationError(f"Model sizes must be integers, got {q!r}")
        if q < 0:
            raise ConfigurationError(f"Model sizes must be nonnegative, got {q}")
        sizes.append(int(q))
    return sizes


def solve_path(x, y, path, config=None, b=None):
    """
    Compute an IHT regularization path for least squares regression.

    Parameters:
    -----------
    x : numpy.ndarray
        Design matrix of shape (n, p)
    y : numpy.ndarray
        Response vector of shape (n,)
    path : sequence of int
        Model sizes to fit, in order. Any order is accepted; warm starts
        help most when the sizes increase.
    config : IHTConfig, optional
        Shared by every fit on the path
    b : numpy.ndarray, optional
        Warm start for the first model. Defaults to the null model.

    Returns:
    --------
    list of SolutionRecord : one record per entry of path, in the same order
    """
    if config is None:
        config = IHTConfig()
    config.validate()
    sizes = _check_path(path)
    x, y, b = validate_problem(x, y, b)
    n, p = x.shape

    # one workspace for the whole path; only the k-sized buffers change
    workspace = IHTWorkspace(n, p)
    records = []

    for i, q in enumerate(sizes):
        # store projection of beta onto largest q components in magnitude
        workspace.project(b, q)
        workspace.resize(q)

        if config.verbose:
            print(f"\n--- Path model {i + 1}/{len(sizes)}: model size {q} ---")

        output = solve_l0(x, y, q, config, b=b, workspace=workspace)
        records.append(output)

        if config.verbose:
            print(f"Model size {q}: loss = {output.loss:.7f}, iterations = {output.iter}, "
                  f"status = {output.status.value}")

        # carry the model forward as the next warm start
        b = output.beta.copy()
        workspace.reset_support(b)

    return records


def path_to_sparse(records, p=None):
    """
    Collect the models of a path into a sparse matrix.

    Parameters:
    -----------
    records : list of SolutionRecord
        Output of solve_path
    p : int, optional
        Number of predictors; only needed when records is empty

    Returns:
    --------
    scipy.sparse.csc_matrix : shape (p, len(records)), column i is model i
    """
    if not records:
        if p is None:
            raise ValueError("p is required to build an empty coefficient table")
        return sparse.csc_matrix((p, 0))
    return sparse.csc_matrix(np.column_stack([r.beta for r in records]))


def evaluate_path(records, x, y):
    """
    Loss of every path model on the data (x, y).

    Typically (x, y) is held out from the fit, so that the losses can be
    used to pick a model size.

    Returns:
    --------
    numpy.ndarray : losses of shape (len(records),)
    """
    if not records:
        return np.zeros(0)
    betas = np.column_stack([r.beta for r in records])
    losses = path_losses(jnp.asarray(betas), jnp.asarray(x), jnp.asarray(y))
    return np.asarray(losses)


def select_model(records, x, y):
    """Index of the path model with the smallest loss on (x, y)."""
    return int(np.argmin(evaluate_path(records, x, y)))
