# IHT Library for L0-Constrained Least Squares
# This package implements iterative hard thresholding with a backtracking
# step size, an MM convergence loop, and warm-started regularization paths.

__version__ = "0.1.0"

# Import key functions for convenient access
from .config import IHTConfig

from .exceptions import (
    IHTError,
    ConfigurationError,
    NumericalInstabilityError,
    DescentViolationError
)

from .results import (
    SolutionRecord,
    SolverStatus
)

from .projections import (
    project_k,
    top_k_indices,
    threshold
)

from .support import (
    support_mask,
    support_changed,
    support_is_empty,
    fill_support
)

from .workspace import (
    ActiveSetCache,
    IHTWorkspace
)

from .solvers import (
    compute_step_size,
    iht_step,
    solve_l0,
    solve
)

from .losses import (
    least_squares_loss,
    least_squares_grad,
    path_losses
)

from .path import (
    solve_path,
    path_to_sparse,
    evaluate_path,
    select_model
)
