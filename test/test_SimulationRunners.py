import os
import tempfile
import unittest

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt

import test.testUtilities
from SATVIEW.IO import SimDefinition, buildSimConfig, readAttitudeTrace
from SATVIEW.Motion import AdaptiveIntegrator, ClassicalIntegrator
from SATVIEW.SimulationRunners import (AttitudeSimulation, IntegratedSource,
                                       ReplaySource, createDynamicsModel,
                                       loadSimDefinition, runSimulation,
                                       trajectorySourceFactory)
from test.testUtilities import (captureOutput, exampleSimulationsDirectory,
                                exampleTracesDirectory)

quaternionExample = str(exampleSimulationsDirectory / "QuaternionGravityGradient.satview")
eulerAngleExample = str(exampleSimulationsDirectory / "EulerAngleLibration.satview")
replayExample = str(exampleSimulationsDirectory / "ReplayTrace.satview")

def minimalSimDefinition(path=quaternionExample):
    simDefinition = SimDefinition(path, silent=True)
    test.testUtilities.setUpSimDefForMinimalRunCheck(simDefinition)
    return simDefinition

class TestTrajectorySources(unittest.TestCase):
    def test_replaySource(self):
        source = ReplaySource(str(exampleTracesDirectory / "sampleTrace.csv"))
        self.assertIn("sampleTrace.csv", source.description)

        trajectory = source.getTrajectory()
        self.assertEqual(len(trajectory), 127)
        # Built once, returned unchanged afterwards
        self.assertIs(source.getTrajectory(), trajectory)

    def test_replaySourceMissingFile(self):
        source = ReplaySource("nonexistentTrace.csv")
        with self.assertRaises(FileNotFoundError):
            source.getTrajectory()

    def test_integratedSource(self):
        simConfig = buildSimConfig(minimalSimDefinition())
        source = IntegratedSource(createDynamicsModel(simConfig), simConfig.integration)

        trajectory = source.getTrajectory()
        self.assertEqual(len(trajectory), 11)
        self.assertEqual(trajectory.getEndTime(), 10)
        self.assertIs(source.getTrajectory(), trajectory)

    def test_integratedSourceProgressBar(self):
        simConfig = buildSimConfig(minimalSimDefinition())
        source = IntegratedSource(createDynamicsModel(simConfig), simConfig.integration, showProgressBar=True)
        with captureOutput():
            self.assertEqual(len(source.getTrajectory()), 11)

    def test_mismatchedModel(self):
        quaternionConfig = buildSimConfig(minimalSimDefinition())
        eulerConfig = buildSimConfig(minimalSimDefinition(eulerAngleExample))
        with self.assertRaises(ValueError):
            IntegratedSource(createDynamicsModel(quaternionConfig), eulerConfig.integration)

    def test_createDynamicsModel(self):
        simConfig = buildSimConfig(minimalSimDefinition())
        model = createDynamicsModel(simConfig)
        self.assertEqual(model.variant, "Quaternion")
        self.assertEqual(model.inertia, simConfig.inertia)
        self.assertEqual(model.orbitRate, simConfig.orbitRate)

        model = createDynamicsModel(buildSimConfig(minimalSimDefinition(eulerAngleExample)))
        self.assertEqual(model.variant, "EulerAngles")
        self.assertEqual(model.normalizedOrbitRate, 1.0)

    def test_trajectorySourceFactory(self):
        simDefinition = minimalSimDefinition()
        source = trajectorySourceFactory(buildSimConfig(simDefinition), simDefinition)
        self.assertIsInstance(source, IntegratedSource)
        self.assertIsInstance(source.integrator, AdaptiveIntegrator)
        self.assertEqual(source.integrator.targetError, 1e-9)

        simDefinition.setValue("SimControl.timeDiscretization", "RK4")
        source = trajectorySourceFactory(buildSimConfig(simDefinition), simDefinition)
        self.assertIsInstance(source.integrator, ClassicalIntegrator)

        source = trajectorySourceFactory(buildSimConfig(SimDefinition(replayExample, silent=True)))
        self.assertIsInstance(source, ReplaySource)

    def test_unknownIntegrationMethod(self):
        simDefinition = minimalSimDefinition()
        simDefinition.setValue("SimControl.timeDiscretization", "Leapfrog")
        with self.assertRaises(ValueError):
            trajectorySourceFactory(buildSimConfig(simDefinition), simDefinition)

class TestAttitudeSimulation(unittest.TestCase):
    def setUp(self):
        self.tempDir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tempDir.cleanup()
        plt.close('all')

    def test_Init(self):
        with self.assertRaises(ValueError):
            AttitudeSimulation() # Needs a sim definition

        AttitudeSimulation(quaternionExample, silent=True)

        # Configuration errors are raised before running anything
        simDefinition = minimalSimDefinition()
        simDefinition.setValue("SimControl.source", "Extrapolate")
        with self.assertRaises(ValueError):
            AttitudeSimulation(simDefinition=simDefinition, silent=True)

    def test_loadSimDefinition(self):
        simDefinition = minimalSimDefinition()
        self.assertIs(loadSimDefinition(quaternionExample, simDefinition), simDefinition)
        self.assertEqual(loadSimDefinition(quaternionExample).getValue("SimControl.sampleCount"), "1000")
        with self.assertRaises(ValueError):
            loadSimDefinition()

    def test_runWithoutLogs(self):
        sim = AttitudeSimulation(simDefinition=minimalSimDefinition(), silent=True, resultsDirectory=self.tempDir.name)
        trajectory, logFilePaths = sim.run()

        self.assertEqual(len(trajectory), 11)
        self.assertEqual(logFilePaths, [])
        self.assertEqual(os.listdir(self.tempDir.name), [])

    def test_runWithAttitudeTrace(self):
        simDefinition = minimalSimDefinition()
        simDefinition.setValue("SimControl.loggingLevel", "2")
        sim = AttitudeSimulation(simDefinition=simDefinition, silent=True, resultsDirectory=self.tempDir.name)
        trajectory, logFilePaths = sim.run()

        self.assertEqual(len(logFilePaths), 2)
        for path in logFilePaths:
            self.assertTrue(os.path.isfile(path))
        self.assertEqual(os.path.basename(sim.resultsFolder), "QuaternionGravityGradient_Run1")

        with open(logFilePaths[0], 'r') as file:
            self.assertIn("Simulation Complete", file.read())

        # The trace reproduces the trajectory
        trace = readAttitudeTrace(logFilePaths[1])
        self.assertEqual(len(trace), len(trajectory))
        for original, reread in zip(trajectory, trace):
            test.testUtilities.assertAttitudeStatesAlmostEqual(self, original.state, reread.state, n=12)

    def test_eulerAngleRunSkipsTrace(self):
        simDefinition = minimalSimDefinition(eulerAngleExample)
        simDefinition.setValue("SimControl.loggingLevel", "2")
        simDefinition.setValue("SimControl.plot", "AttitudeHistory")
        sim = AttitudeSimulation(simDefinition=simDefinition, silent=True, resultsDirectory=self.tempDir.name)
        trajectory, logFilePaths = sim.run()

        self.assertEqual(trajectory.stateVariant, "EulerAngles")
        self.assertEqual([ os.path.basename(path) for path in logFilePaths ], [ "consoleOutput.txt" ])
        self.assertTrue(os.path.isfile(os.path.join(sim.resultsFolder, "attitudeHistory.png")))

    def test_replay(self):
        trajectory, _ = runSimulation(replayExample, silent=True)
        self.assertEqual(len(trajectory), 127)
        self.assertEqual(trajectory.stateVariant, "Quaternion")

    def test_replayErrorPropagates(self):
        badTracePath = os.path.join(self.tempDir.name, "badTrace.csv")
        with open(badTracePath, 'w') as file:
            file.write("t, omega1, omega2, omega3, q0, q1, q2, q3\n0, 0, 0, abc, 1, 0, 0, 0\n")

        simDefinition = minimalSimDefinition(replayExample)
        simDefinition.setValue("SimControl.replayFile", badTracePath)
        simDefinition.setValue("SimControl.loggingLevel", "1")
        sim = AttitudeSimulation(simDefinition=simDefinition, silent=True, resultsDirectory=self.tempDir.name)

        with self.assertRaises(ValueError):
            sim.run()
        # No results written, console output restored
        self.assertEqual(os.listdir(self.tempDir.name), [ "badTrace.csv" ])
        self.assertIsNone(sim.trajectory)

    def test_playTrajectory(self):
        sim = AttitudeSimulation(simDefinition=minimalSimDefinition(), silent=True, resultsDirectory=self.tempDir.name)
        framesPresented = sim.playTrajectory(maxPasses=2, showWindow=False)

        # Trajectory is built on demand
        self.assertEqual(len(sim.trajectory), 11)
        self.assertEqual(framesPresented, 22)

#If this file is run by itself, run the tests above
if __name__ == '__main__':
    unittest.main()
