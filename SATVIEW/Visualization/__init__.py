'''
Display of attitude trajectories:

* `Playback` - conversion of trajectory samples to display units, and the cyclic playback loop
* `SceneRendering` - the matplotlib 3D animation window
* `Plotting` - static attitude history plots
'''
from .Playback import *
from .SceneRendering import *
from .Plotting import *

subModules = [ Playback, SceneRendering, Plotting ]

__all__ = []

for subModule in subModules:
    __all__ += subModule.__all__
