# gpmoe/__init__.py

from . import config
from . import num
from . import errors
from . import core
from . import kernel
from . import surrogates
from . import mixture
from . import misc
from .surrogates import params_for, load
from .mixture import GaussianMixture

__all__ = [
    "num",
    "errors",
    "kernel",
    "surrogates",
    "mixture",
    "params_for",
    "load",
    "GaussianMixture",
    "__version__",
]

__version__ = config.get_config().version
