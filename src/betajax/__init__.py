from . import checks
from . import continued_fraction
from . import gamma1p
from . import incomplete_beta
from . import log_beta
from . import precision
from . import stirling
from . import validation

__version__ = "0.1.0"

__all__ = [
    "checks",
    "continued_fraction",
    "gamma1p",
    "incomplete_beta",
    "log_beta",
    "precision",
    "stirling",
    "validation",
]
