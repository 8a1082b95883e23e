'''
Functions to create static plots of attitude trajectories.
'''

import matplotlib.pyplot as plt
import numpy as np

from SATVIEW.Visualization.Playback import toRenderableAttitude

__all__ = [ "plotAttitudeHistory", "getAttitudeHistory" ]

def getAttitudeHistory(trajectory):
    '''
        Returns (times, rollPitchYaw, rates) arrays for a trajectory, shapes (n,), (n,3) and (n,3)
        Angles in degrees, rates in degrees/s (body rates for quaternion trajectories, Euler angle rates otherwise)
    '''
    renderables = [ toRenderableAttitude(sample) for sample in trajectory ]
    times = np.array([ r.time for r in renderables ])
    rollPitchYaw = np.array([ r.rollPitchYaw for r in renderables ])
    rates = np.array([ r.rates for r in renderables ])
    return times, rollPitchYaw, rates

def plotAttitudeHistory(trajectory, showPlot=True, saveFilePath=None):
    '''
        Plots roll/pitch/yaw and rates vs time in two stacked subplots.
        Returns the figure
    '''
    times, rollPitchYaw, rates = getAttitudeHistory(trajectory)

    fig, (angleAx, rateAx) = plt.subplots(2, 1, sharex=True, figsize=(8, 7))

    if trajectory.stateVariant == "Quaternion":
        rateLabels = [ "Omega1", "Omega2", "Omega3" ]
    else:
        rateLabels = [ "Theta1 rate", "Theta2 rate", "Theta3 rate" ]

    for i, label in enumerate([ "Roll", "Pitch", "Yaw" ]):
        angleAx.plot(times, rollPitchYaw[:, i], label=label)
        rateAx.plot(times, rates[:, i], label=rateLabels[i])

    angleAx.set_ylabel("Attitude (deg)")
    angleAx.legend()
    angleAx.grid(True)

    rateAx.set_ylabel("Rate (deg/s)")
    rateAx.set_xlabel("Time (s)")
    rateAx.legend()
    rateAx.grid(True)

    fig.suptitle("{} attitude history".format(trajectory.stateVariant))

    if saveFilePath is not None:
        fig.savefig(saveFilePath)

    if showPlot:
        plt.show()

    return fig
