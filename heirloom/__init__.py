"""Public API of :mod:`heirloom`."""

from . import accessors as _accessors
from . import constants as _constants
from . import errors as _errors
from . import runtime as _runtime
from .accessors import *  # noqa: F401,F403
from .constants import *  # noqa: F401,F403
from .errors import *  # noqa: F401,F403
from .runtime import *  # noqa: F401,F403

__all__ = []
__all__ += getattr(_constants, "__all__", [])
__all__ += getattr(_accessors, "__all__", [])
__all__ += getattr(_errors, "__all__", [])
__all__ += getattr(_runtime, "__all__", [])
__all__ = list(dict.fromkeys(__all__))
