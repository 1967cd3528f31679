"""
Exceptions raised by the IHT solvers.

All fatal conditions abort the running solve (and any remaining path);
nothing here is caught and retried inside the package.
"""


class IHTError(Exception):
    """Base class for errors raised by ihtcore."""


class ConfigurationError(IHTError, ValueError):
    """Invalid arguments, detected before any numerical work starts."""


class NumericalInstabilityError(IHTError, ArithmeticError):
    """Step size or loss is not finite."""


class DescentViolationError(IHTError, ArithmeticError):
    """The MM objective increased by more than the tolerance."""

    def __init__(self, iteration, previous, current):
        self.iteration = iteration
        self.previous = previous
        self.current = current
        super().__init__(
            f"Descent failure at MM iteration {iteration}: objective went from "
            f"{previous:.7f} to {current:.7f}"
        )
