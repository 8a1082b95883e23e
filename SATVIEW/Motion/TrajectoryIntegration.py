'''
Integrates a `SATVIEW.Motion.DynamicsModel` from an initial attitude state, producing a `SATVIEW.Motion.Trajectory` sampled on a fixed, evenly spaced time grid.
'''

import numpy as np

from SATVIEW.Motion import AdaptiveIntegrator, Trajectory

__all__ = [ "integrateTrajectory", "outputTimes" ]

def outputTimes(startTime, endTime, sampleCount):
    ''' Evenly spaced output times, including both end points: dt = (endTime - startTime) / (sampleCount - 1) '''
    if int(sampleCount) != sampleCount or sampleCount < 2:
        raise ValueError("Trajectory sample count must be an integer >= 2, got: {}".format(sampleCount))
    if not endTime > startTime:
        raise ValueError("Trajectory end time ({}) must be after its start time ({})".format(endTime, startTime))

    return np.linspace(startTime, endTime, int(sampleCount))

def integrateTrajectory(dynamicsModel, initialState, startTime, endTime, sampleCount, integrator=None, initialTimeStep=None, progressBar=None):
    '''
        Inputs:
            dynamicsModel:      (`SATVIEW.Motion.DynamicsModel`)
            initialState:       (`SATVIEW.Motion.QuaternionAttitudeState` or `SATVIEW.Motion.EulerAngleAttitudeState`) must match the dynamics model
            startTime, endTime: (float) Time span to integrate over (s)
            sampleCount:        (int) Number of evenly spaced samples in the resulting trajectory, first at startTime, last at endTime
            integrator:         (callable integrator from `SATVIEW.Motion.Integration`) Defaults to a Dormand-Prince RK45 integrator
                Adaptive integrators choose their own internal time steps, but these are always clipped to land exactly on the next output time
            initialTimeStep:    (float) First time step to attempt. Defaults to the output time spacing
            progressBar:        (tqdm progress bar or None) updated with the simulated time advanced by each step

        Returns:
            `SATVIEW.Motion.Trajectory` with exactly sampleCount samples

        Raises:
            `SATVIEW.Motion.IntegrationError` if the integrator can't meet its accuracy requirements. No partial trajectory is returned
            ValueError for invalid time spans, sample counts, or initial states
    '''
    times = outputTimes(startTime, endTime, sampleCount)

    if integrator is None:
        integrator = AdaptiveIntegrator(method="RK45Adaptive", controller="elementary", targetError=1e-9, minTimeStep=1e-6, maxTimeStep=times[1] - times[0])

    state = dynamicsModel.initialStateArray(initialState)
    states = [ dynamicsModel.createState(state) ]

    time = times[0]
    dt = initialTimeStep if initialTimeStep is not None else times[1] - times[0]

    for outputTime in times[1:]:
        while time < outputTime:
            requestedDt = min(dt, outputTime - time)
            landsOnOutputTime = (requestedDt == outputTime - time)

            integrationResult = integrator(state, time, dynamicsModel, requestedDt)
            state = dynamicsModel.normalizeState(integrationResult.newValue)

            if landsOnOutputTime and integrationResult.dt == requestedDt:
                # Avoid accumulating round-off in the sample times
                time = outputTime
            else:
                time += integrationResult.dt

            if progressBar is not None:
                progressBar.update(integrationResult.dt)

            # A step shortened to hit an output time says little about the step size the solution needs
            nextDt = integrationResult.dt * integrationResult.timeStepAdaptationFactor
            if landsOnOutputTime and requestedDt < dt and integrationResult.dt == requestedDt:
                nextDt = max(nextDt, dt)
            dt = nextDt

        states.append(dynamicsModel.createState(state))

    return Trajectory(times, states)
