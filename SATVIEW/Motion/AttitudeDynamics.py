'''
Rotational equations of motion for a rigid satellite on a circular orbit.

Two interchangeable dynamics models are defined, both as pure functions of (time, flattened state array):

* Quaternion: Euler's rotational equations (gravity-gradient + constant disturbance torque) coupled with quaternion kinematics
    State: [ omega1, omega2, omega3, q0, q1, q2, q3 ]
* EulerAngles: Gravity-gradient librations written directly in terms of 3-2-1 Euler angles, in normalized form (orbit rate n)
    State: [ theta1, theta2, theta3, theta1Dot, theta2Dot, theta3Dot ]

`DynamicsModel` selects one of them by name and carries the constants it needs.
Its instances are callable, so they can be passed straight to the integrators in `SATVIEW.Motion.Integration`.
'''

import numpy as np

from SATVIEW.Motion import (EulerAngleAttitudeState, QuaternionAttitudeState,
                            checkUnitQuaternion, normalizeQuaternion)

__all__ = [ "DynamicsModel", "dynamicsModelVariants", "quaternionToDCM", "quaternionRateMatrix", "quaternionStateDerivative", "eulerAngleStateDerivative" ]

dynamicsModelVariants = [ "Quaternion", "EulerAngles" ]

#### Quaternion model ####
def quaternionToDCM(q):
    '''
        Direction cosine matrix corresponding to the scalar-first quaternion q = (q0, q1, q2, q3)
        No normalization is performed, q is expected to be a unit quaternion
    '''
    q0, q1, q2, q3 = q
    return np.array([
        [ q0*q0 + q1*q1 - q2*q2 - q3*q3,    2*(q1*q2 - q0*q3),                  2*(q1*q3 + q0*q2)                 ],
        [ 2*(q1*q2 + q0*q3),                q0*q0 - q1*q1 + q2*q2 - q3*q3,      2*(q2*q3 - q0*q1)                 ],
        [ 2*(q1*q3 - q0*q2),                2*(q2*q3 + q0*q1),                  q0*q0 - q1*q1 - q2*q2 + q3*q3     ]
    ])

def quaternionRateMatrix(angularVelocity):
    '''
        4x4 skew-symmetric matrix Omega(w), such that dq/dt = 0.5 * Omega(w) * q for a scalar-first quaternion q
        Skew-symmetry means d/dt(q.q) = 0: the norm of q is preserved to first order
    '''
    w1, w2, w3 = angularVelocity
    return np.array([
        [ 0.0, -w1, -w2, -w3 ],
        [ w1,  0.0,  w3, -w2 ],
        [ w2,  -w3, 0.0,  w1 ],
        [ w3,   w2, -w1, 0.0 ]
    ])

def quaternionStateDerivative(time, state, inertia, orbitRate, disturbanceTorque):
    '''
        Inputs:
            time:               (float) unused, the model is time-invariant
            state:              (array-like, length 7) [ omega1, omega2, omega3, q0, q1, q2, q3 ]
            inertia:            (`SATVIEW.Motion.PrincipalInertia`)
            orbitRate:          (float) mean motion of the orbit, rad/s
            disturbanceTorque:  (array-like, length 3) constant disturbance torque in the body frame, Nm

        Returns:
            (np.ndarray, length 7) [ omega1Dot, omega2Dot, omega3Dot, q0Dot, q1Dot, q2Dot, q3Dot ]
    '''
    angVel = state[:3]
    quat = state[3:7]
    J = inertia.MOI

    dcm = quaternionToDCM(quat)

    # Body rates relative to the rotating orbit frame
    angVel_orbit = angVel - orbitRate*dcm[:,1]

    # Gravity gradient torque
    nadir = dcm[:,2]
    gravityGradientTorque = 3 * orbitRate**2 * np.cross(nadir, J*nadir)

    # Euler's rotational equations, J is diagonal
    angAccel = (gravityGradientTorque + disturbanceTorque - np.cross(angVel, J*angVel)) / J

    # Quaternion kinematics
    quatRate = 0.5 * quaternionRateMatrix(angVel_orbit).dot(quat)

    return np.concatenate((angAccel, quatRate))

#### Euler angle model ####
def eulerAngleStateDerivative(time, state, inertia, normalizedOrbitRate=1.0):
    '''
        Inputs:
            time:                   (float) unused, the model is time-invariant
            state:                  (array-like, length 6) [ theta1, theta2, theta3, theta1Dot, theta2Dot, theta3Dot ]
            inertia:                (`SATVIEW.Motion.PrincipalInertia`)
            normalizedOrbitRate:    (float) dimensionless orbit rate n

        Returns:
            (np.ndarray, length 6) [ theta1Dot, theta2Dot, theta3Dot, theta1DDot, theta2DDot, theta3DDot ]
    '''
    theta1, theta2, _ = state[:3]
    rates = state[3:6]
    J1, J2, J3 = inertia.MOI
    n2 = normalizedOrbitRate**2

    # Direction cosines of the nadir direction (small libration approximation)
    c13 = -np.sin(theta2)
    c23 = np.sin(theta1) * np.cos(theta2)
    c33 = np.cos(theta1) * np.sin(theta2)

    theta1DDot = (-3*n2*(J2 - J3)*c23*c33 + (J2 - J3)*rates[1]*rates[2]) / J1
    theta2DDot = (-3*n2*(J3 - J1)*c33*c13 + (J3 - J1)*rates[2]*rates[0]) / J2
    theta3DDot = (-3*n2*(J1 - J2)*c13*c23 + (J1 - J2)*rates[0]*rates[1]) / J3

    return np.concatenate((rates, [ theta1DDot, theta2DDot, theta3DDot ]))

#### Tagged model selection ####
class DynamicsModel():
    '''
        Callable wrapper around one of the dynamics models above: model(time, stateArray) -> derivative array

        Select the model with variant = "Quaternion" or "EulerAngles".
        Constants not used by the selected model are ignored:
            Quaternion uses inertia, orbitRate and disturbanceTorque
            EulerAngles uses inertia and normalizedOrbitRate
    '''

    def __init__(self, variant, inertia, orbitRate=0.0, disturbanceTorque=(0,0,0), normalizedOrbitRate=1.0):
        self.variant = variant
        self.inertia = inertia

        if variant == "Quaternion":
            self.orbitRate = float(orbitRate)
            self.disturbanceTorque = np.array(disturbanceTorque, dtype=np.float64)
            self.disturbanceTorque.setflags(write=False)
            self.stateType = QuaternionAttitudeState
        elif variant == "EulerAngles":
            self.normalizedOrbitRate = float(normalizedOrbitRate)
            self.stateType = EulerAngleAttitudeState
        else:
            raise ValueError("Dynamics model: {} not implemented. Options are: {}".format(variant, dynamicsModelVariants))

    def __call__(self, time, state):
        if self.variant == "Quaternion":
            return quaternionStateDerivative(time, state, self.inertia, self.orbitRate, self.disturbanceTorque)
        else:
            return eulerAngleStateDerivative(time, state, self.inertia, self.normalizedOrbitRate)

    @property
    def stateSize(self):
        return self.stateType.size

    def createState(self, stateArray):
        ''' Converts a flattened state array back into a state object of the type handled by this model '''
        return self.stateType.fromArray(stateArray)

    def initialStateArray(self, initialState, tolerance=1e-6):
        '''
            Checks that initialState can be integrated by this model and returns it as a flattened array.
            Quaternion states must already be (close to) unit length: they are re-normalized to remove the residual.
        '''
        if not isinstance(initialState, self.stateType):
            raise ValueError("The {} dynamics model integrates {} objects, got: {}".format(self.variant, self.stateType.__name__, type(initialState).__name__))

        if self.variant == "Quaternion":
            checkUnitQuaternion(initialState.orientation, tolerance)
            initialState = initialState.normalized()

        return initialState.toArray()

    def normalizeState(self, stateArray):
        ''' Re-normalizes the quaternion part of a flattened quaternion state, no-op for Euler angles '''
        if self.variant == "Quaternion":
            return np.concatenate((stateArray[:3], normalizeQuaternion(stateArray[3:7])))
        return stateArray

    def __str__(self):
        if self.variant == "Quaternion":
            return "Quaternion dynamics model, {}, orbit rate = {:1.6e} rad/s, disturbance torque = {}".format(self.inertia, self.orbitRate, self.disturbanceTorque)
        else:
            return "Euler angle dynamics model, {}, normalized orbit rate = {}".format(self.inertia, self.normalizedOrbitRate)
