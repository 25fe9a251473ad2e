from .config import Equality, IdentityConfig, Storage
from .exceptions import IdentitySetError, InvalidConfig, TypeMismatch
from .identity_set import IdentitySet

from .version import __version__, VERSION_STRING
from . import combinators, config, exceptions, identity_set

import inspect

# The classes re-exported above live in submodules only to keep file sizes manageable, so present them as members of
# the top-level `pointerset` module.
SUBMODULES_TO_SUBSUME = (config, exceptions, identity_set)
for module_to_subsume in SUBMODULES_TO_SUBSUME:
    for name, obj in inspect.getmembers(module_to_subsume, inspect.isclass):
        if obj.__module__ == module_to_subsume.__name__ and name in globals():
            obj.__module__ = 'pointerset'
    del module_to_subsume

del inspect, SUBMODULES_TO_SUBSUME, name, obj
