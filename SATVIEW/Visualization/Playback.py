'''
Converts trajectory samples into renderable attitudes and feeds them to a renderer, cycling through the trajectory until the renderer asks to stop.

Playback is not paced against the wall clock: frames are presented as fast as the renderer accepts them.
'''

from abc import ABC, abstractmethod
from typing import NamedTuple, Tuple

import numpy as np
from scipy.spatial.transform import Rotation

from SATVIEW.Motion import EulerAngleAttitudeState, QuaternionAttitudeState

__all__ = [ "RenderableAttitude", "AttitudeRenderer", "PlaybackDriver", "stateToRotation", "rotationToRollPitchYaw", "rollPitchYawToRotation", "toRenderableAttitude" ]

class RenderableAttitude(NamedTuple):
    ''' Display-ready view of a single trajectory sample '''
    time: float
    rotation: Rotation # body-to-reference rotation
    rollPitchYaw: Tuple[float, float, float] # degrees, 3-2-1 sequence
    rates: Tuple[float, float, float] # degrees/s

class AttitudeRenderer(ABC):
    ''' Interface expected by `PlaybackDriver` from the visualization shell '''

    @abstractmethod
    def render(self, renderableAttitude: RenderableAttitude):
        ''' Present a single frame. Called once per frame, return value ignored '''
        pass

    @abstractmethod
    def shouldClose(self) -> bool:
        ''' True once the user has asked to stop (ex. closed the window) '''
        pass

#### Attitude conversions ####
def _quaternionToRotation(orientation):
    # scipy expects scalar-last quaternions
    q0, q1, q2, q3 = orientation
    return Rotation.from_quat([ q1, q2, q3, q0 ])

def stateToRotation(state) -> Rotation:
    '''
        Quaternion states: rotation described by the (scalar-first) orientation quaternion
        Euler angle states: R = Rz(theta3) * Ry(theta2) * Rx(theta1), the same 3-2-1 sequence used to decompose rotations into roll/pitch/yaw
    '''
    if isinstance(state, QuaternionAttitudeState):
        return _quaternionToRotation(state.orientation)
    elif isinstance(state, EulerAngleAttitudeState):
        theta1, theta2, theta3 = state.angles
        return Rotation.from_euler('ZYX', [ theta3, theta2, theta1 ])
    else:
        raise ValueError("Can't convert a {} to a rotation".format(type(state).__name__))

def rotationToRollPitchYaw(rotation) -> Tuple[float, float, float]:
    ''' (roll, pitch, yaw) in degrees, aerospace 3-2-1 (yaw-pitch-roll) decomposition. Pitch is in [-90, 90] '''
    yaw, pitch, roll = rotation.as_euler('ZYX', degrees=True)
    return (float(roll), float(pitch), float(yaw))

def rollPitchYawToRotation(rollPitchYaw) -> Rotation:
    ''' Inverse of `rotationToRollPitchYaw` '''
    roll, pitch, yaw = rollPitchYaw
    return Rotation.from_euler('ZYX', [ yaw, pitch, roll ], degrees=True)

def toRenderableAttitude(sample) -> RenderableAttitude:
    '''
        Converts a `SATVIEW.Motion.TrajectorySample` to display units.
        Rates are the body angular velocity for quaternion states and the Euler angle rates for Euler angle states
    '''
    time, state = sample
    rotation = stateToRotation(state)

    if isinstance(state, QuaternionAttitudeState):
        rates = np.degrees(state.angularVelocity)
    else:
        rates = np.degrees(state.angleRates)

    return RenderableAttitude(float(time), rotation, rotationToRollPitchYaw(rotation), tuple(float(x) for x in rates))

#### Playback ####
class PlaybackDriver():
    '''
        Cyclic playback of a `SATVIEW.Motion.Trajectory`:
            Every sample is presented in order, then playback restarts from the first sample.
            The trajectory is never recomputed. Each sample is converted to a `RenderableAttitude` when it is presented.
    '''

    def __init__(self, trajectory, renderer, checkCloseEveryFrame=False):
        '''
            Inputs:
                trajectory:             (`SATVIEW.Motion.Trajectory`)
                renderer:               (`AttitudeRenderer`) or any object with render(renderableAttitude) and shouldClose() methods
                checkCloseEveryFrame:   (bool) By default, renderer.shouldClose() is only checked once per pass through the trajectory
                                            Set to True to also check it after every frame, to stop sooner after a window is closed
        '''
        self.trajectory = trajectory
        self.renderer = renderer
        self.checkCloseEveryFrame = checkCloseEveryFrame

    def frames(self):
        ''' Infinite generator of `RenderableAttitude`s, wrapping around to the first sample after the last one '''
        while True:
            for sample in self.trajectory:
                yield toRenderableAttitude(sample)

    def run(self, maxPasses=None) -> int:
        '''
            Presents frames until the renderer asks to close (or maxPasses full passes have been presented, if provided).
            Returns the number of frames presented
        '''
        framesPerPass = len(self.trajectory)
        frames = self.frames()
        framesPresented = 0

        while True:
            # Start of a pass
            if framesPresented % framesPerPass == 0:
                passesCompleted = framesPresented // framesPerPass
                if maxPasses is not None and passesCompleted >= maxPasses:
                    break
                if self.renderer.shouldClose():
                    break

            self.renderer.render(next(frames))
            framesPresented += 1

            if self.checkCloseEveryFrame and self.renderer.shouldClose():
                break

        return framesPresented
