"""
Least squares objective for L0-constrained regression, written with JAX.

The solvers evaluate the loss and gradient with in-place numpy buffers;
the functions here are the differentiable reference versions, used to
score fitted models (for example every model on a regularization path)
and to check gradients.
"""

import jax
import jax.numpy as jnp


def least_squares_loss(b, x, y):
    """
    Half the residual sum of squares.

    Parameters:
    -----------
    b : jnp.ndarray
        Coefficient vector of shape (p,)
    x : jnp.ndarray
        Design matrix of shape (n, p)
    y : jnp.ndarray
        Response vector of shape (n,)

    Returns:
    --------
    float : 0.5 * ||y - x @ b||_2^2
    """
    residual = y - x @ b
    return 0.5 * jnp.sum(residual**2)


# Gradient with respect to b; this is -x'(y - x b), the negative of the
# direction used by the IHT step
least_squares_grad = jax.jit(jax.grad(least_squares_loss))


@jax.jit
def path_losses(betas, x, y):
    """
    Loss of every model in a path.

    Parameters:
    -----------
    betas : jnp.ndarray
        Dense coefficient table of shape (p, num_models), one model per column
    x : jnp.ndarray
        Design matrix of shape (n, p)
    y : jnp.ndarray
        Response vector of shape (n,)

    Returns:
    --------
    jnp.ndarray : losses of shape (num_models,)
    """
    return jax.vmap(least_squares_loss, in_axes=(1, None, None))(betas, x, y)
