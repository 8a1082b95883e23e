'''
Satellite attitude motion.
Fundamental data types used throughout the simulator defined in:

* `AttitudeStates` - quaternion and Euler angle attitude states
* `inertia` - principal moments of inertia
* `Trajectories` - time-ordered sequences of attitude states

Equations of motion (quaternion and Euler angle models) are defined in `AttitudeDynamics`

Generalized constant and adaptive time stepping integrators are defined in `Integration`, and are used by `TrajectoryIntegration` to produce sampled trajectories
'''
# Make the classes in all submodules importable directly from SATVIEW.Motion
from .AttitudeStates import *
from .inertia import *
from .AttitudeDynamics import *
from .Integration import *
from .Trajectories import *
from .TrajectoryIntegration import *

subModules = [ AttitudeStates, inertia, AttitudeDynamics, Integration, Trajectories, TrajectoryIntegration ]

__all__ = []

for subModule in subModules:
    __all__ += subModule.__all__
