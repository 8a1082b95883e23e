'''
SATVIEW: satellite attitude viewer.

Simulation entry point: `SATVIEW.Main.main`.  
`SATVIEW.Main.main` initializes a `SATVIEW.SimulationRunners.AttitudeSimulation` to drive the run.
The simulation runner obtains a `SATVIEW.Motion.Trajectory`, either by replaying a recorded attitude trace or by integrating
one of the attitude dynamics models in `SATVIEW.Motion`, then loops it through the animation in `SATVIEW.Visualization`.

See `SATVIEW/Examples/Simulations` for sample simulation definition (.satview) files,
and `SATVIEW.IO.defaultConfigValues` for all available options and their default values.
'''

__version__ = "0.3.1"

__pdoc__ = {
    'Examples': False
}
