'''
Define the two attitude states that can be integrated / replayed.
For integration, states are flattened into numpy arrays (see `toArray` / `fromArray`), which the Runge-Kutta integrators in
`SATVIEW.Motion.Integration` can add and scale like scalars.
'''

import math

import numpy as np

__all__ = [ "QuaternionAttitudeState", "EulerAngleAttitudeState", "normalizeQuaternion", "checkUnitQuaternion" ]

def _readOnlyArray(values, expectedLength, name):
    array = np.array(values, dtype=np.float64).flatten()
    if array.size != expectedLength:
        raise ValueError("{} must have {} components, got {}: {}".format(name, expectedLength, array.size, values))

    array.setflags(write=False)
    return array

def normalizeQuaternion(quaternion):
    '''
        Returns a unit-length copy of a scalar-first quaternion (q0, q1, q2, q3)
        Raises a ValueError if the quaternion has zero length or contains non-finite values, since it can't represent a rotation
    '''
    quaternion = np.asarray(quaternion, dtype=np.float64)
    norm = np.linalg.norm(quaternion)

    if not math.isfinite(norm) or norm == 0:
        raise ValueError("Quaternion {} can't be normalized: it does not represent a rotation".format(quaternion))

    return quaternion / norm

def checkUnitQuaternion(quaternion, tolerance=1e-6):
    ''' Raises a ValueError if the quaternion's norm differs from 1 by more than tolerance '''
    norm = np.linalg.norm(quaternion)
    if not abs(norm - 1.0) <= tolerance:
        raise ValueError("Expected a unit quaternion, but {} has norm {}".format(quaternion, norm))

class QuaternionAttitudeState():
    """
        Attitude described by:
            angularVelocity: (omega1, omega2, omega3) body rates in rad/s, defined in the body frame
            orientation: scalar-first unit quaternion (q0, q1, q2, q3), rotation from the body frame to the reference (orbit) frame

        Flattened layout: [ omega1, omega2, omega3, q0, q1, q2, q3 ]
    """
    __slots__ = [ "angularVelocity", "orientation" ]

    size = 7
    variant = "Quaternion"

    def __init__(self, angularVelocity=(0,0,0), orientation=(1,0,0,0)):
        self.angularVelocity = _readOnlyArray(angularVelocity, 3, "Angular velocity")
        self.orientation = _readOnlyArray(orientation, 4, "Orientation quaternion")

    @classmethod
    def fromArray(cls, array):
        return cls(array[:3], array[3:7])

    def toArray(self):
        return np.concatenate((self.angularVelocity, self.orientation))

    def normalized(self):
        ''' Returns a copy of this state with a unit-length orientation quaternion '''
        return QuaternionAttitudeState(self.angularVelocity, normalizeQuaternion(self.orientation))

    def __eq__(self, state2):
        try:
            return np.array_equal(self.angularVelocity, state2.angularVelocity) and np.array_equal(self.orientation, state2.orientation)
        except AttributeError:
            return False

    ### String Functions ###
    def getLogHeader(self):
        return " AngularVelocity1(rad/s) AngularVelocity2(rad/s) AngularVelocity3(rad/s) OrientationQuat0 OrientationQuat1 OrientationQuat2 OrientationQuat3"

    def __str__(self):
        ''' Called by print function '''
        angVel = " ".join("{:>11.7f}".format(x) for x in self.angularVelocity)
        quat = " ".join("{:>10.7f}".format(x) for x in self.orientation)
        return " {} {}".format(angVel, quat)

    def __repr__(self):
        return "QuaternionAttitudeState(angularVelocity={}, orientation={})".format(list(self.angularVelocity), list(self.orientation))

class EulerAngleAttitudeState():
    """
        Attitude described by:
            angles: (theta1, theta2, theta3) in rad, a 3-2-1 (yaw-pitch-roll) rotation sequence: theta1 = roll, theta2 = pitch, theta3 = yaw
            angleRates: time derivatives of the angles in rad/s

        No unit-norm invariant. The kinematics become singular at pitch = +/- 90 degrees, which is not guarded against.

        Flattened layout: [ theta1, theta2, theta3, theta1Dot, theta2Dot, theta3Dot ]
    """
    __slots__ = [ "angles", "angleRates" ]

    size = 6
    variant = "EulerAngles"

    def __init__(self, angles=(0,0,0), angleRates=(0,0,0)):
        self.angles = _readOnlyArray(angles, 3, "Euler angles")
        self.angleRates = _readOnlyArray(angleRates, 3, "Euler angle rates")

    @classmethod
    def fromArray(cls, array):
        return cls(array[:3], array[3:6])

    def toArray(self):
        return np.concatenate((self.angles, self.angleRates))

    def __eq__(self, state2):
        try:
            return np.array_equal(self.angles, state2.angles) and np.array_equal(self.angleRates, state2.angleRates)
        except AttributeError:
            return False

    ### String Functions ###
    def getLogHeader(self):
        return " Theta1(rad) Theta2(rad) Theta3(rad) Theta1Rate(rad/s) Theta2Rate(rad/s) Theta3Rate(rad/s)"

    def __str__(self):
        ''' Called by print function '''
        return " " + " ".join("{:>10.6f}".format(x) for x in self.toArray())

    def __repr__(self):
        return "EulerAngleAttitudeState(angles={}, angleRates={})".format(list(self.angles), list(self.angleRates))
