'''
Trajectory sources: the two origins of an attitude trajectory (a replayed trace or a freshly integrated one), behind a common interface.
Either way, the trajectory is built on the first call to getTrajectory() and returned unchanged by subsequent calls.
'''

from abc import ABC, abstractmethod

from tqdm import tqdm

from SATVIEW.IO import readAttitudeTrace
from SATVIEW.Motion import DynamicsModel, integrateTrajectory, integratorFactory

__all__ = [ "TrajectorySource", "ReplaySource", "IntegratedSource", "createDynamicsModel", "trajectorySourceFactory" ]

class TrajectorySource(ABC):

    def __init__(self):
        self._trajectory = None

    @property
    @abstractmethod
    def description(self) -> str:
        pass

    @abstractmethod
    def _buildTrajectory(self):
        pass

    def getTrajectory(self):
        '''
            Returns the `SATVIEW.Motion.Trajectory` produced by this source, building it on the first call.
            Load/integration errors propagate to the caller, nothing is cached in that case
        '''
        if self._trajectory is None:
            self._trajectory = self._buildTrajectory()
        return self._trajectory

class ReplaySource(TrajectorySource):
    ''' Trajectory read from an attitude trace file (see `SATVIEW.IO.readAttitudeTrace`) '''

    def __init__(self, filePath):
        super().__init__()
        self.filePath = filePath

    @property
    def description(self):
        return "Replaying attitude trace: {}".format(self.filePath)

    def _buildTrajectory(self):
        return readAttitudeTrace(self.filePath)

class IntegratedSource(TrajectorySource):
    ''' Trajectory produced by integrating a `SATVIEW.Motion.DynamicsModel` '''

    def __init__(self, dynamicsModel, integrationConfig, integrator=None, initialTimeStep=None, showProgressBar=False):
        '''
            Inputs:
                dynamicsModel:      (`SATVIEW.Motion.DynamicsModel`)
                integrationConfig:  (`SATVIEW.IO.IntegrationConfig`) time span, sample count and initial state
                integrator:         (integrator from `SATVIEW.Motion.Integration`) None -> default RK45 integrator
                initialTimeStep:    (float) First time step attempted, None -> output time spacing
                showProgressBar:    (bool) Display a tqdm progress bar over simulated time while integrating
        '''
        super().__init__()

        if integrationConfig.modelVariant != dynamicsModel.variant:
            raise ValueError("Integration config is set up for the {} model, but the dynamics model is: {}".format(integrationConfig.modelVariant, dynamicsModel.variant))

        self.dynamicsModel = dynamicsModel
        self.integrationConfig = integrationConfig
        self.integrator = integrator
        self.initialTimeStep = initialTimeStep
        self.showProgressBar = showProgressBar

    @property
    def description(self):
        config = self.integrationConfig
        return "Integrating {} from t = {} s to t = {} s, {} samples".format(self.dynamicsModel, config.startTime, config.endTime, config.sampleCount)

    def _buildTrajectory(self):
        config = self.integrationConfig

        progressBar = None
        if self.showProgressBar:
            progressBar = tqdm(total=config.endTime - config.startTime, unit="s")

        try:
            return integrateTrajectory(self.dynamicsModel, config.initialState, config.startTime, config.endTime, config.sampleCount,
                integrator=self.integrator, initialTimeStep=self.initialTimeStep, progressBar=progressBar)
        finally:
            if progressBar is not None:
                progressBar.close()

def createDynamicsModel(simConfig) -> DynamicsModel:
    return DynamicsModel(
        simConfig.integration.modelVariant,
        simConfig.inertia,
        orbitRate=simConfig.orbitRate,
        disturbanceTorque=simConfig.disturbanceTorque,
        normalizedOrbitRate=simConfig.normalizedOrbitRate
    )

def trajectorySourceFactory(simConfig, simDefinition=None, showProgressBar=False) -> TrajectorySource:
    '''
        Inputs:
            simConfig:      (`SATVIEW.IO.SimConfig`)
            simDefinition:  (`SATVIEW.IO.SimDefinition`) Source of the SimControl.TimeStepAdaptation parameters for adaptive integrators
                                If None, adaptive methods fall back to the default RK45 integrator
    '''
    if simConfig.source == "Replay":
        return ReplaySource(simConfig.replayFilePath)

    elif simConfig.source == "Integrate":
        if simDefinition is None and "Adapt" in simConfig.integrationMethod:
            integrator = None
        else:
            integrator = integratorFactory(simConfig.integrationMethod, simDefinition)

        return IntegratedSource(createDynamicsModel(simConfig), simConfig.integration, integrator, simConfig.initialTimeStep, showProgressBar)

    else:
        raise ValueError("Trajectory source: {} not implemented. Options are: Integrate, Replay".format(simConfig.source))
