import math
import os
import tempfile
import unittest

from SATVIEW.IO import (attitudeTraceColumns, readAttitudeTrace,
                        writeAttitudeTrace)
from SATVIEW.Motion import (EulerAngleAttitudeState, QuaternionAttitudeState,
                            Trajectory)
from test.testUtilities import (assertAttitudeStatesAlmostEqual,
                                assertIterablesAlmostEqual,
                                exampleTracesDirectory)

header = "t, omega1, omega2, omega3, q0, q1, q2, q3\n"

class TestReadAttitudeTrace(unittest.TestCase):
    def setUp(self):
        self.tempDir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tempDir.cleanup()

    def writeTrace(self, contents, fileName="trace.csv"):
        path = os.path.join(self.tempDir.name, fileName)
        with open(path, 'w') as file:
            file.write(contents)
        return path

    def test_readRowsInOrder(self):
        path = self.writeTrace(header +
            "0.0, 0.1, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0\n" +
            "0.5, 0.1, 0.0, 0.0, 0.9689, 0.2474, 0.0, 0.0\n" +
            "1.0, 0.1, 0.0, 0.0, 0.8776, 0.4794, 0.0, 0.0\n"
        )
        trajectory = readAttitudeTrace(path)

        self.assertEqual(len(trajectory), 3)
        self.assertEqual(trajectory.stateVariant, "Quaternion")
        assertIterablesAlmostEqual(self, trajectory.times, [ 0.0, 0.5, 1.0 ])
        assertIterablesAlmostEqual(self, trajectory[1].state.orientation, [ 0.9689, 0.2474, 0.0, 0.0 ])
        assertIterablesAlmostEqual(self, trajectory[2].state.angularVelocity, [ 0.1, 0.0, 0.0 ])

    def test_noSpacesAndScientificNotation(self):
        path = self.writeTrace("t,omega1,omega2,omega3,q0,q1,q2,q3\n0,1e-3,0,0,1,0,0,0\n2,1E-3,0,0,1,0,0,0\n")
        trajectory = readAttitudeTrace(path)
        self.assertEqual(len(trajectory), 2)
        self.assertEqual(trajectory[0].state.angularVelocity[0], 0.001)

    def test_quaternionsKeptAsRead(self):
        path = self.writeTrace(header + "0, 0, 0, 0, 2, 0, 0, 0\n")
        trajectory = readAttitudeTrace(path)
        assertIterablesAlmostEqual(self, trajectory[0].state.orientation, [ 2, 0, 0, 0 ])

    def test_invalidTraces(self):
        invalidContents = {
            "nonNumericField":  header + "0, 0, 0, 0, 1, 0, 0, 0\n1, abc, 0, 0, 1, 0, 0, 0\n",
            "missingField":     header + "0, 0, 0, 0, 1, 0, 0\n",
            "emptyField":       header + "0, 0, , 0, 1, 0, 0, 0\n",
            "blankLine":        header + "0, 0, 0, 0, 1, 0, 0, 0\n\n1, 0, 0, 0, 1, 0, 0, 0\n",
            "extraField":       header + "0, 0, 0, 0, 1, 0, 0, 0\n1, 0, 0, 0, 1, 0, 0, 0, 5\n",
            "wrongHeader":      "time, w1, w2, w3, q0, q1, q2, q3\n0, 0, 0, 0, 1, 0, 0, 0\n",
            "noHeader":         "0, 0, 0, 0, 1, 0, 0, 0\n",
            "headerOnly":       header,
            "emptyFile":        "",
            "infiniteValue":    header + "0, inf, 0, 0, 1, 0, 0, 0\n",
            "nanValue":         header + "0, nan, 0, 0, 1, 0, 0, 0\n",
            "zeroQuaternion":   header + "0, 0, 0, 0, 0, 0, 0, 0\n",
            "repeatedTime":     header + "0, 0, 0, 0, 1, 0, 0, 0\n0, 0, 0, 0, 1, 0, 0, 0\n",
            "decreasingTime":   header + "1, 0, 0, 0, 1, 0, 0, 0\n0, 0, 0, 0, 1, 0, 0, 0\n",
        }
        for name, contents in invalidContents.items():
            with self.subTest(trace=name):
                path = self.writeTrace(contents, name + ".csv")
                with self.assertRaises(ValueError):
                    readAttitudeTrace(path)

    def test_errorMessageNamesLine(self):
        path = self.writeTrace(header + "0, 0, 0, 0, 1, 0, 0, 0\n1, abc, 0, 0, 1, 0, 0, 0\n")
        with self.assertRaisesRegex(ValueError, "line 3"):
            readAttitudeTrace(path)

    def test_blankLineReported(self):
        path = self.writeTrace(header + "0, 0, 0, 0, 1, 0, 0, 0\n\n1, 0, 0, 0, 1, 0, 0, 0\n")
        with self.assertRaisesRegex(ValueError, "line 3"):
            readAttitudeTrace(path)

    def test_missingFile(self):
        with self.assertRaises(FileNotFoundError):
            readAttitudeTrace(os.path.join(self.tempDir.name, "nonexistent.csv"))

    def test_sampleTrace(self):
        trajectory = readAttitudeTrace(exampleTracesDirectory / "sampleTrace.csv")
        self.assertEqual(trajectory.getStartTime(), 0)
        self.assertTrue(trajectory.isEvenlySpaced())

        # Constant spin about axis 3
        for time, state in trajectory:
            angle = state.angularVelocity[2] * time
            assertIterablesAlmostEqual(self, state.orientation, [ math.cos(angle/2), 0, 0, math.sin(angle/2) ], n=6)

class TestWriteAttitudeTrace(unittest.TestCase):
    def test_writeThenRead(self):
        states = [
            QuaternionAttitudeState((0.001, 0.002, -0.003), (1, 0, 0, 0)),
            QuaternionAttitudeState((0.0011, 0.0021, -0.0031), (math.cos(0.1), 0, math.sin(0.1), 0)),
            QuaternionAttitudeState((1/3, 2/3, -1e-9), (0.5, 0.5, 0.5, 0.5)),
        ]
        trajectory = Trajectory([ 0, 0.5, 1/3 + 1 ], states)

        with tempfile.TemporaryDirectory() as tempDir:
            path = os.path.join(tempDir, "attitudeTrace.csv")
            writeAttitudeTrace(trajectory, path)

            with open(path, 'r') as file:
                firstLine = file.readline().strip()
            self.assertEqual(firstLine, ", ".join(attitudeTraceColumns))

            rereadTrajectory = readAttitudeTrace(path)

        self.assertEqual(len(rereadTrajectory), 3)
        assertIterablesAlmostEqual(self, rereadTrajectory.times, trajectory.times, n=14)
        for original, reread in zip(trajectory.states, rereadTrajectory.states):
            assertAttitudeStatesAlmostEqual(self, original, reread, n=14)

    def test_eulerTrajectoriesRejected(self):
        trajectory = Trajectory([ 0, 1 ], [ EulerAngleAttitudeState(), EulerAngleAttitudeState() ])
        with tempfile.TemporaryDirectory() as tempDir:
            with self.assertRaises(ValueError):
                writeAttitudeTrace(trajectory, os.path.join(tempDir, "trace.csv"))

#If this file is run by itself, run the tests above
if __name__ == '__main__':
    unittest.main()
