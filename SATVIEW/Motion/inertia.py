import math

import numpy as np

__all__ = [ "PrincipalInertia", "meanMotion" ]

class PrincipalInertia():
    '''
        Diagonal inertia tensor of a rigid body, defined about its CG in the principal axis (body) frame.
        Immutable after construction.
    '''

    __slots__ = [ "_MOI" ]

    def __init__(self, J1, J2, J3):
        """
            * J1, J2, J3: principal moments of inertia (kg*m^2) about body axes 1, 2 and 3
        """
        MOI = np.array([ J1, J2, J3 ], dtype=np.float64)

        for i in range(3):
            if not math.isfinite(MOI[i]) or MOI[i] <= 0:
                raise ValueError("Principal moment of inertia J{} must be positive and finite, got: {}".format(i+1, MOI[i]))

        MOI.setflags(write=False)
        self._MOI = MOI

    @classmethod
    def fromVector(cls, MOIVector):
        if len(MOIVector) != 3:
            raise ValueError("Expected three principal moments of inertia, got: {}".format(MOIVector))
        return cls(*MOIVector)

    @property
    def MOI(self):
        ''' Read-only array of (J1, J2, J3) '''
        return self._MOI

    def matrix(self):
        return np.diag(self._MOI)

    def inverse(self):
        ''' Inverse of the (diagonal) inertia tensor. Always defined, since construction rejects non-positive moments '''
        return np.diag(1.0 / self._MOI)

    def isIsotropic(self):
        return self._MOI[0] == self._MOI[1] == self._MOI[2]

    def __mul__(self, vector):
        ''' J * vector '''
        return self._MOI * vector

    def __eq__(self, inertia2):
        try:
            return np.array_equal(self._MOI, inertia2.MOI)
        except AttributeError:
            return False

    def __str__(self):
        return 'MOI=({} {} {})'.format(*self._MOI)

    def __repr__(self):
        return 'PrincipalInertia({}, {}, {})'.format(*self._MOI)

def meanMotion(orbitalPeriod):
    ''' Mean motion (rad/s) of a circular orbit with the given period (s) '''
    if not orbitalPeriod > 0:
        raise ValueError("Orbital period must be positive, got: {}".format(orbitalPeriod))
    return 2*math.pi / orbitalPeriod
