'''
Holds attitude trajectories: ordered, finite sequences of timestamped attitude states.
Trajectories are produced once (by integration or by loading a trace) and are re-read by the playback loop as many times as required.
'''

from typing import NamedTuple

import numpy as np

__all__ = [ "Trajectory", "TrajectorySample" ]

class TrajectorySample(NamedTuple):
    time: float
    state: object # QuaternionAttitudeState or EulerAngleAttitudeState

class Trajectory():
    ''' Immutable, time-ordered sequence of `TrajectorySample`s. Iterating over it always starts a new pass from the first sample '''

    def __init__(self, times, states):
        '''
            Inputs:
                times:  (list/array of float) strictly increasing sample times (s)
                states: (list of `SATVIEW.Motion.QuaternionAttitudeState` or `SATVIEW.Motion.EulerAngleAttitudeState`), one per time
                    All states must be of the same type
        '''
        times = np.array(times, dtype=np.float64).flatten()
        states = tuple(states)

        if len(times) != len(states):
            raise ValueError("Trajectory requires one state per sample time, got {} times and {} states".format(len(times), len(states)))
        if len(times) == 0:
            raise ValueError("Trajectory must contain at least one sample")
        if not np.all(np.isfinite(times)):
            raise ValueError("Trajectory sample times must be finite")
        if np.any(np.diff(times) <= 0):
            raise ValueError("Trajectory sample times must be strictly increasing")

        stateType = type(states[0])
        for state in states:
            if type(state) != stateType:
                raise ValueError("All trajectory states must be of the same type, found {} and {}".format(stateType.__name__, type(state).__name__))

        times.setflags(write=False)
        self._times = times
        self._states = states
        self._stateType = stateType

    @property
    def times(self):
        ''' Read-only array of sample times '''
        return self._times

    @property
    def states(self):
        return self._states

    @property
    def stateType(self):
        return self._stateType

    @property
    def stateVariant(self):
        ''' "Quaternion" or "EulerAngles" '''
        return self._stateType.variant

    def getStartTime(self):
        return float(self._times[0])

    def getEndTime(self):
        return float(self._times[-1])

    def getDuration(self):
        return float(self._times[-1] - self._times[0])

    def getTimeStep(self):
        ''' Mean spacing between samples, 0 for single-sample trajectories '''
        if len(self) < 2:
            return 0.0
        return self.getDuration() / (len(self) - 1)

    def isEvenlySpaced(self, relTolerance=1e-9):
        if len(self) < 3:
            return True
        spacings = np.diff(self._times)
        return bool(np.allclose(spacings, self.getTimeStep(), rtol=relTolerance, atol=0))

    def __len__(self):
        return len(self._states)

    def __getitem__(self, index):
        return TrajectorySample(float(self._times[index]), self._states[index])

    def __iter__(self):
        for i in range(len(self._states)):
            yield TrajectorySample(float(self._times[i]), self._states[i])

    def __str__(self):
        return "{} trajectory: {} samples from t = {:.3f} s to t = {:.3f} s".format(self.stateVariant, len(self), self.getStartTime(), self.getEndTime())
