"""
Result containers returned by the solvers.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np


class SolverStatus(Enum):
    CONVERGED = "converged"
    ITERATION_CAPPED = "iteration_capped"


@dataclass
class SolutionRecord:
    """
    Output of one call to solve_l0.

    Attributes:
    -----------
    beta : numpy.ndarray
        Final iterate, shape (p,)
    loss : float
        Half the residual sum of squares at beta
    iter : int
        Number of MM iterations performed
    time : float
        Wall-clock seconds spent inside the solver
    status : SolverStatus
        CONVERGED, or ITERATION_CAPPED when max_iter ran out first
    """
    beta: np.ndarray
    loss: float
    iter: int
    time: float
    status: SolverStatus = SolverStatus.CONVERGED

    @property
    def converged(self):
        return self.status is SolverStatus.CONVERGED

    @property
    def support_size(self):
        return int(np.count_nonzero(self.beta))
