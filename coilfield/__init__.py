"""
Coilfield: closed-form magnetic fields of multi-layer solenoids.

Subpackages
-----------
Using any of these subpackages requires an explicit import. For example,
``import coilfield.scripts``.

::

 biot            --- Loop, solenoid and grid field solvers.
 scripts         --- Command line interface.


Public API in the main Coilfield namespace
------------------------------------------

::

 __version__       --- Coilfield version string

"""

__all__ = [
    "biot",
]

import importlib
import importlib.metadata

from . import biot

try:
    __version__ = importlib.metadata.version(__package__ or __name__)
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"
__all__.append("__version__")

submodules = [
    "scripts",
]
__all__.extend(submodules)


def __dir__():
    return __all__


def __getattr__(name):
    if name in submodules:
        return importlib.import_module(f"coilfield.{name}")
    try:
        return globals()[name]
    except KeyError:
        raise AttributeError(f"Module 'coilfield' has no attribute '{name}'")
