'''
Input/Output functionality:

* Reading/Writing Simulation Definition Files
* Building the immutable run configuration
* Reading/Writing attitude traces
* Logging results (`SATVIEW.IO.Logging`)

SATVIEW.IO Relies on SATVIEW.Motion for the attitude states, inertia and trajectory types it parses into.
'''
# Make the classes in all submodules importable directly from SATVIEW.IO
from .simDefinition import *
from .subDictReader import *
from .simConfig import *
from .AttitudeTrace import *

subModules = [ simDefinition, subDictReader, simConfig, AttitudeTrace ]

__all__ = []

for subModule in subModules:
    __all__ += subModule.__all__
