"""
Solver configuration.

A single IHTConfig is built once by the caller and passed down through
solve_path -> solve_l0 -> iht_step.
"""

from dataclasses import dataclass

import numpy as np

from ihtcore.exceptions import ConfigurationError


@dataclass
class IHTConfig:
    """
    Options shared by the L0 solver and the path driver.

    Parameters:
    -----------
    tol : float, optional
        Global tolerance. Used for the convergence test, the descent check,
        and for snapping small coefficients to zero. Must exceed machine
        precision.
    max_iter : int, optional
        Maximum number of MM iterations.
    max_step : int, optional
        Maximum number of step halvings per IHT step.
    verbose : bool, optional
        Whether to print progress information
    """
    tol: float = 1e-4
    max_iter: int = 100
    max_step: int = 50
    verbose: bool = False

    def validate(self):
        if self.max_iter < 0:
            raise ConfigurationError("Value of max_iter must be nonnegative!")
        if self.max_step < 0:
            raise ConfigurationError("Value of max_step must be nonnegative!")
        if not self.tol > np.finfo(np.float64).eps:
            raise ConfigurationError("Value of global tol must exceed machine precision!")
        return self
