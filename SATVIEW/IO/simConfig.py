'''
Immutable, validated run configuration, built once from a `SATVIEW.IO.SimDefinition` before anything is integrated or displayed.
'''

from pathlib import Path
from typing import NamedTuple, Tuple, Union

from SATVIEW.IO.subDictReader import SubDictReader
from SATVIEW.Motion import (EulerAngleAttitudeState, PrincipalInertia,
                            QuaternionAttitudeState, dynamicsModelVariants,
                            meanMotion)

__all__ = [ "IntegrationConfig", "SimConfig", "buildSimConfig", "trajectorySourceTypes", "plotTypes" ]

trajectorySourceTypes = [ "Integrate", "Replay" ]
plotTypes = [ "AttitudeHistory" ]

class IntegrationConfig(NamedTuple):
    ''' Options recognized by `SATVIEW.Motion.integrateTrajectory` '''
    startTime: float
    endTime: float
    sampleCount: int
    initialState: Union[QuaternionAttitudeState, EulerAngleAttitudeState]
    modelVariant: str

class SimConfig(NamedTuple):
    simDefinitionPath: str
    source: str
    replayFilePath: Union[str, None]

    integration: IntegrationConfig
    integrationMethod: str
    initialTimeStep: float

    inertia: PrincipalInertia
    orbitRate: float
    disturbanceTorque: Tuple[float, float, float]
    normalizedOrbitRate: float

    loggingLevel: int
    plots: Tuple[str, ...]

    animate: bool
    windowTitle: str
    cameraPosition: Tuple[float, float, float]
    checkCloseEveryFrame: bool

def _resolveReplayFilePath(replayFile, simDefinitionPath):
    ''' Relative trace paths are tried relative to the working directory first, then relative to the definition file '''
    path = Path(replayFile)
    if path.is_absolute() or path.exists() or simDefinitionPath in (None, "None"):
        return str(path)

    pathBesideDefinition = Path(simDefinitionPath).parent / path
    if pathBesideDefinition.exists():
        return str(pathBesideDefinition)

    return str(path)

def _readVector3(reader, key):
    vector = reader.getArray(key)
    if len(vector) != 3:
        raise ValueError("{}.{} must have three components, got: {}".format(reader.simDefDictPathToReadFrom, key, reader.getString(key)))
    return tuple(float(x) for x in vector)

def buildSimConfig(simDefinition) -> SimConfig:
    '''
        Reads and validates all the values required to run a simulation.
        Raises ValueError for missing/invalid values, before any trajectory is built or any window is opened
    '''
    simControl = SubDictReader("SimControl", simDefinition)
    satellite = SubDictReader("Satellite", simDefinition)
    orbit = SubDictReader("Orbit", simDefinition)
    visualization = SubDictReader("Visualization", simDefinition)

    #### Trajectory source ####
    source = simControl.getString("source")
    if source not in trajectorySourceTypes:
        raise ValueError("SimControl.source: {} not recognized. Options are: {}".format(source, trajectorySourceTypes))

    replayFilePath = None
    if source == "Replay":
        replayFile = simControl.getString("replayFile")
        if replayFile == "None":
            raise ValueError("SimControl.replayFile must be provided when SimControl.source is Replay")
        replayFilePath = _resolveReplayFilePath(replayFile, simDefinition.fileName)

    #### Time grid ####
    startTime = simControl.getFloat("startTime")
    endTime = simControl.getFloat("endTime")
    sampleCount = simControl.getInt("sampleCount")
    if source == "Integrate":
        if sampleCount < 2:
            raise ValueError("SimControl.sampleCount must be >= 2, got: {}".format(sampleCount))
        if not endTime > startTime:
            raise ValueError("SimControl.endTime ({}) must be greater than SimControl.startTime ({})".format(endTime, startTime))

    #### Satellite ####
    modelVariant = satellite.getString("dynamicsModel")
    if modelVariant not in dynamicsModelVariants:
        raise ValueError("Satellite.dynamicsModel: {} not recognized. Options are: {}".format(modelVariant, dynamicsModelVariants))

    inertia = PrincipalInertia(*_readVector3(satellite, "inertia"))

    orbitRate = 0.0
    disturbanceTorque = (0.0, 0.0, 0.0)
    normalizedOrbitRate = 1.0
    if modelVariant == "Quaternion":
        initialState = QuaternionAttitudeState(_readVector3(satellite, "angularVelocity"), satellite.getArray("orientation"))
        disturbanceTorque = _readVector3(satellite, "disturbanceTorque")
        orbitRate = meanMotion(orbit.getFloat("period"))
    else:
        initialState = EulerAngleAttitudeState(_readVector3(satellite, "eulerAngles"), _readVector3(satellite, "eulerAngleRates"))
        normalizedOrbitRate = orbit.getFloat("normalizedRate")

    integration = IntegrationConfig(startTime, endTime, sampleCount, initialState, modelVariant)

    #### Output ####
    plotString = simControl.getString("plot")
    plots = () if plotString == "None" else tuple(plotString.split())
    for plot in plots:
        if plot not in plotTypes:
            raise ValueError("SimControl.plot: {} not recognized. Options are: {}".format(plot, plotTypes))

    return SimConfig(
        simDefinitionPath=simDefinition.fileName,
        source=source,
        replayFilePath=replayFilePath,
        integration=integration,
        integrationMethod=simControl.getString("timeDiscretization"),
        initialTimeStep=simControl.getFloat("timeStep"),
        inertia=inertia,
        orbitRate=orbitRate,
        disturbanceTorque=disturbanceTorque,
        normalizedOrbitRate=normalizedOrbitRate,
        loggingLevel=simControl.getInt("loggingLevel"),
        plots=plots,
        animate=visualization.getBool("animate"),
        windowTitle=visualization.getString("windowTitle"),
        cameraPosition=_readVector3(visualization, "cameraPosition"),
        checkCloseEveryFrame=visualization.getBool("checkCloseEveryFrame"),
    )
