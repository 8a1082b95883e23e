import os
import sys
from pathlib import Path

from SATVIEW.IO import Logging, SimDefinition, buildSimConfig, writeAttitudeTrace
from SATVIEW.SimulationRunners.TrajectorySources import trajectorySourceFactory

__all__ = [ "AttitudeSimulation", "runSimulation", "loadSimDefinition" ]

def loadSimDefinition(simDefinitionFilePath=None, simDefinition=None, silent=False):
    ''' Loads a simulation definition file into a `SATVIEW.IO.SimDefinition` object - accepts either a file path or a `SATVIEW.IO.SimDefinition` object as input '''
    if simDefinition is None and simDefinitionFilePath is not None:
        return SimDefinition(simDefinitionFilePath, silent=silent)

    elif simDefinition is not None:
        return simDefinition

    else:
        raise ValueError(""" Insufficient information to initialize a Simulation.
            Please provide either simDefinitionFilePath (string) or simDefinition (SimDefinition), which has been created from the desired Sim Definition file.
            If both are provided, the SimDefinition is used.""")

class AttitudeSimulation():

    def __init__(self, simDefinitionFilePath=None, simDefinition=None, silent=False, resultsDirectory=None):
        '''
            Inputs:

                * simDefinitionFilePath:  (string) path to simulation definition file
                * simDefinition:          (`SATVIEW.IO.SimDefinition`) object that's already loaded and parsed the desired sim definition file
                * silent:                 (bool) toggles optional outputs to the console
                * resultsDirectory:       (string) where results folders are created. Defaults to the directory containing the sim definition file

            Configuration errors are raised here, before anything is integrated or displayed
        '''
        self.simDefinition = loadSimDefinition(simDefinitionFilePath, simDefinition, silent)
        ''' Instance of `SATVIEW.IO.SimDefinition`. Defines the current simulation '''

        self.simConfig = buildSimConfig(self.simDefinition)
        ''' Instance of `SATVIEW.IO.SimConfig`. Immutable, validated configuration read from self.simDefinition '''

        self.silent = silent
        self.loggingLevel = self.simConfig.loggingLevel

        if resultsDirectory is None:
            if self.simDefinition.fileName in (None, "None"):
                resultsDirectory = "."
            else:
                resultsDirectory = str(Path(self.simDefinition.fileName).parent)
        self.resultsDirectory = resultsDirectory

        self.trajectory = None
        ''' `SATVIEW.Motion.Trajectory`, filled in by self.run() '''

        self.resultsFolder = None
        self.logger = None
        self.consoleOutputLog = None

    def run(self):
        '''
            Builds the trajectory defined by self.simDefinition (by integrating or replaying a trace), logs and plots it as requested

            Returns:
                * trajectory: (`SATVIEW.Motion.Trajectory`)
                * logFilePaths: (list[string]) list of paths to all log files created by this simulation

            Load and integration errors propagate to the caller, no log files are written in that case
        '''
        self._setUpConsoleLogging()

        try:
            source = trajectorySourceFactory(self.simConfig, self.simDefinition, showProgressBar=not self.silent)
            print(source.description)

            self.trajectory = source.getTrajectory()
            print(self.trajectory)
            print("Simulation Complete")

            logFilePaths = self._postProcess(self.trajectory)
        finally:
            if self.logger is not None:
                Logging.removeLogger()

        return self.trajectory, logFilePaths

    def playTrajectory(self, maxPasses=None, showWindow=True):
        '''
            Shows the animation window and cycles through the trajectory until the window is closed (or maxPasses passes have been shown).
            Returns the number of frames presented
        '''
        # Imported here so that integrating/replaying doesn't require a display backend to be set up
        from SATVIEW.Visualization import AttitudeAnimationWindow, PlaybackDriver

        if self.trajectory is None:
            self.run()

        config = self.simConfig
        window = AttitudeAnimationWindow(config.windowTitle, config.cameraPosition, showWindow=showWindow)
        driver = PlaybackDriver(self.trajectory, window, checkCloseEveryFrame=config.checkCloseEveryFrame)

        try:
            return driver.run(maxPasses)
        finally:
            window.close()

    #### Pre-sim ####
    def _setUpConsoleLogging(self):
        if self.loggingLevel > 0:
            # Set up logging so that the output of any print calls after this point is captured in self.consoleOutputLog
            self.consoleOutputLog = []
            self.logger = Logging.Logger(self.consoleOutputLog, continueWritingToTerminal=not self.silent)
            sys.stdout = self.logger

            # Output system info to console and to log
            Logging.getSystemInfo(printToConsole=True)
            # Output sim definition file and default value dict to the log only
            self.consoleOutputLog += Logging.getSimDefinitionAndDefaultValueDictsForOutput(simDefinition=self.simDefinition, printToConsole=False)

            print("Starting Simulation:")

        elif self.silent:
            # No intention of writing things to a log file, just prevent them from being printed to the terminal
            self.logger = Logging.Logger([], continueWritingToTerminal=False)
            sys.stdout = self.logger

    #### Post-sim ####
    def _postProcess(self, trajectory):
        self.simDefinition.printDefaultValuesUsed() # Print these out before logging, to include them in the log

        logFilePaths = self._logSimulationResults(trajectory)
        self._plotSimulationResults(trajectory)

        # Keys like the replay file path are only read for some sources
        self.simDefinition.printUnusedKeys()

        if self.resultsFolder is not None:
            self._writeConsoleOutput()

        return logFilePaths

    def _logSimulationResults(self, trajectory):
        ''' Creates the results folder and writes the attitude trace to file (as/if specified in sim definition) '''
        logFilePaths = []

        if self.loggingLevel > 0:
            self.resultsFolder = Logging.createResultsFolder(self.simDefinition.fileName, self.resultsDirectory)
            logFilePaths.append(os.path.join(self.resultsFolder, "consoleOutput.txt"))

            if self.loggingLevel > 1:
                if trajectory.stateVariant == "Quaternion":
                    tracePath = os.path.join(self.resultsFolder, "attitudeTrace.csv")
                    print("Writing attitude trace: {}".format(tracePath))
                    logFilePaths.append(writeAttitudeTrace(trajectory, tracePath))
                else:
                    print("Attitude traces can only be written for quaternion trajectories, skipping")

        return logFilePaths

    def _writeConsoleOutput(self):
        consoleOutputPath = os.path.join(self.resultsFolder, "consoleOutput.txt")
        print("Writing log file: {}".format(consoleOutputPath))
        self.logger.writeLogToFile(consoleOutputPath, overwrite=True)

    def _plotSimulationResults(self, trajectory):
        ''' Plot simulation results (as/if specified in sim definition) '''
        if "AttitudeHistory" in self.simConfig.plots:
            from SATVIEW.Visualization import plotAttitudeHistory

            saveFilePath = None
            if self.resultsFolder is not None:
                saveFilePath = os.path.join(self.resultsFolder, "attitudeHistory.png")

            print("Plotting attitude history")
            plotAttitudeHistory(trajectory, showPlot=not self.silent, saveFilePath=saveFilePath)

def runSimulation(simDefinitionFilePath=None, simDefinition=None, silent=False):
    sim = AttitudeSimulation(simDefinitionFilePath, simDefinition, silent)
    return sim.run()
