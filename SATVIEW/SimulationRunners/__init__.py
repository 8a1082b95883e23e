'''
Defines functions and classes that manage simulations.
`TrajectorySources` provide the attitude trajectory (replayed or integrated), `AttitudeSimulation` builds, logs and plays it back.
'''

# Make the classes in all submodules importable directly from SATVIEW.SimulationRunners
from .TrajectorySources import *
from .SingleSimulations import *

subModules = [ TrajectorySources, SingleSimulations ]

__all__ = [ ]

for subModule in subModules:
    __all__ += subModule.__all__
