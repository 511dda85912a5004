"""
Protected member sharing for class hierarchies.

A class layer calls ``share`` while it is being constructed (or once for the
class itself) and keeps the returned facade. Descendant layers see, shadow and
reach back to those members; code outside the hierarchy never gets a facade.

| Piece                  | Purpose                                         |
<----------------------- + ----------------------------------------------- >
| **share / registry**   | per-owner layered data, facades, ``super`` view |
| **accessor**           | get/set pairs resolved on the facade            |
| **abstract / final**   | construction guards aliased into the registry   |
| **save_self / define** | self references and bulk attribute definitions  |
| **analysis / cli**     | NetworkX layer graphs, DOT export, inspection   |
"""

from . import core as _core
from . import facade as _facade
from . import registry as _registry
from . import guards as _guards
from . import helpers as _helpers
from . import analysis as _analysis
from .cli import main, parse_args
from ..accessors import Accessor, BoundAccessor, accessor, bind_member, is_accessor

from .core import *
from .facade import *
from .registry import *
from .guards import *
from .helpers import *
from .analysis import *

__all__ = []
for module in (_core, _facade, _registry, _guards, _helpers, _analysis):
    __all__.extend(getattr(module, '__all__', []))
__all__ += ['main', 'parse_args', 'Accessor', 'BoundAccessor', 'accessor', 'bind_member', 'is_accessor']
__all__ = list(dict.fromkeys(__all__))
