import math
import unittest
from unittest.mock import patch

import numpy as np
from scipy.spatial.transform import Rotation

from SATVIEW.Motion import (EulerAngleAttitudeState, QuaternionAttitudeState,
                            Trajectory, TrajectorySample)
from SATVIEW.Visualization import (PlaybackDriver, rollPitchYawToRotation,
                                   rotationToRollPitchYaw, stateToRotation,
                                   toRenderableAttitude)
from test.testUtilities import (RecordingRenderer, assertIterablesAlmostEqual,
                                assertRotationsAlmostEqual)


def spinningTrajectory(nSamples=5):
    times = list(range(nSamples))
    states = []
    for time in times:
        angle = 0.1*time
        states.append(QuaternionAttitudeState((0, 0, 0.1), (math.cos(angle/2), 0, 0, math.sin(angle/2))))
    return Trajectory(times, states)

class TestAttitudeConversions(unittest.TestCase):
    def test_quaternionToRotation(self):
        angle = math.radians(30)
        state = QuaternionAttitudeState((0, 0, 0), (math.cos(angle/2), 0, 0, math.sin(angle/2)))
        rotation = stateToRotation(state)
        assertRotationsAlmostEqual(self, rotation, Rotation.from_euler('z', 30, degrees=True))

        # Rotates body vectors into the reference frame
        assertIterablesAlmostEqual(self, rotation.apply([ 1, 0, 0 ]), [ math.cos(angle), math.sin(angle), 0 ])

    def test_eulerAnglesToRotation(self):
        theta1, theta2, theta3 = 0.1, -0.2, 0.3
        rotation = stateToRotation(EulerAngleAttitudeState((theta1, theta2, theta3)))

        def Rx(a):
            return np.array([ [ 1, 0, 0 ], [ 0, math.cos(a), -math.sin(a) ], [ 0, math.sin(a), math.cos(a) ] ])
        def Ry(a):
            return np.array([ [ math.cos(a), 0, math.sin(a) ], [ 0, 1, 0 ], [ -math.sin(a), 0, math.cos(a) ] ])
        def Rz(a):
            return np.array([ [ math.cos(a), -math.sin(a), 0 ], [ math.sin(a), math.cos(a), 0 ], [ 0, 0, 1 ] ])

        expected = Rz(theta3).dot(Ry(theta2)).dot(Rx(theta1))
        assertIterablesAlmostEqual(self, rotation.as_matrix().flatten(), expected.flatten())

    def test_eulerAnglesMatchRollPitchYaw(self):
        angles = (0.1, -0.2, 0.3)
        rotation = stateToRotation(EulerAngleAttitudeState(angles))
        assertIterablesAlmostEqual(self, rotationToRollPitchYaw(rotation), np.degrees(angles))

    def test_rollPitchYawRoundTrip(self):
        for rollPitchYaw in [ (10, 20, 30), (-170, 45, 100), (0, -89, 0) ]:
            rotation = rollPitchYawToRotation(rollPitchYaw)
            assertIterablesAlmostEqual(self, rotationToRollPitchYaw(rotation), rollPitchYaw, n=6)

    def test_unsupportedState(self):
        with self.assertRaises(ValueError):
            stateToRotation((1, 0, 0, 0))

    def test_toRenderableAttitude(self):
        sample = TrajectorySample(2.5, QuaternionAttitudeState((0.1, 0, -0.2), (1, 0, 0, 0)))
        renderable = toRenderableAttitude(sample)

        self.assertEqual(renderable.time, 2.5)
        assertIterablesAlmostEqual(self, renderable.rollPitchYaw, [ 0, 0, 0 ])
        assertIterablesAlmostEqual(self, renderable.rates, [ math.degrees(0.1), 0, math.degrees(-0.2) ])

        sample = TrajectorySample(1.0, EulerAngleAttitudeState((0, 0, 0), (0.01, 0.02, 0.03)))
        renderable = toRenderableAttitude(sample)
        assertIterablesAlmostEqual(self, renderable.rates, np.degrees([ 0.01, 0.02, 0.03 ]))

class TestPlaybackDriver(unittest.TestCase):
    def setUp(self):
        self.trajectory = spinningTrajectory(5)

    def test_framesWrapAround(self):
        driver = PlaybackDriver(self.trajectory, RecordingRenderer())
        frames = driver.frames()
        times = [ next(frames).time for _ in range(12) ]
        self.assertEqual(times, [ 0, 1, 2, 3, 4, 0, 1, 2, 3, 4, 0, 1 ])

    def test_maxPasses(self):
        renderer = RecordingRenderer()
        framesPresented = PlaybackDriver(self.trajectory, renderer).run(maxPasses=3)

        self.assertEqual(framesPresented, 15)
        self.assertEqual([ frame.time for frame in renderer.rendered ], [ 0, 1, 2, 3, 4 ]*3)
        # Every pass presents identical frames
        for i in range(5):
            assertRotationsAlmostEqual(self, renderer.rendered[i].rotation, renderer.rendered[i + 10].rotation)

    def test_closeCheckedOncePerPass(self):
        renderer = RecordingRenderer(closeAfterNFrames=2)
        framesPresented = PlaybackDriver(self.trajectory, renderer).run()

        # The current pass is completed before the close request is noticed
        self.assertEqual(framesPresented, 5)
        self.assertEqual(renderer.shouldCloseCalls, 2)

    def test_closeCheckedEveryFrame(self):
        renderer = RecordingRenderer(closeAfterNFrames=7)
        framesPresented = PlaybackDriver(self.trajectory, renderer, checkCloseEveryFrame=True).run()
        self.assertEqual(framesPresented, 7)
        self.assertEqual(len(renderer.rendered), 7)

    def test_closedBeforeFirstFrame(self):
        renderer = RecordingRenderer(closeAfterNFrames=0)
        self.assertEqual(PlaybackDriver(self.trajectory, renderer).run(), 0)
        self.assertEqual(renderer.rendered, [])

    def test_singleSampleTrajectory(self):
        trajectory = Trajectory([ 0 ], [ QuaternionAttitudeState() ])
        renderer = RecordingRenderer()
        self.assertEqual(PlaybackDriver(trajectory, renderer).run(maxPasses=4), 4)

    def test_samplesConvertedWhenPresented(self):
        trajectory = spinningTrajectory(1000)
        with patch("SATVIEW.Visualization.Playback.toRenderableAttitude", wraps=toRenderableAttitude) as converter:
            driver = PlaybackDriver(trajectory, RecordingRenderer(closeAfterNFrames=3), checkCloseEveryFrame=True)
            self.assertEqual(converter.call_count, 0)
            self.assertFalse(hasattr(driver, "renderables"))

            self.assertEqual(driver.run(), 3)
            self.assertEqual(converter.call_count, 3)

        # Converted frames match converting the samples directly
        frames = PlaybackDriver(self.trajectory, RecordingRenderer()).frames()
        for sample in self.trajectory:
            frame = next(frames)
            self.assertEqual(frame.time, sample.time)
            assertIterablesAlmostEqual(self, frame.rollPitchYaw, toRenderableAttitude(sample).rollPitchYaw)

    def test_samplesConvertedEveryPass(self):
        with patch("SATVIEW.Visualization.Playback.toRenderableAttitude", wraps=toRenderableAttitude) as converter:
            framesPresented = PlaybackDriver(self.trajectory, RecordingRenderer()).run(maxPasses=2)
            self.assertEqual(framesPresented, 10)
            self.assertEqual(converter.call_count, 10)

#If this file is run by itself, run the tests above
if __name__ == '__main__':
    unittest.main()
