import math
import unittest

import numpy as np

from SATVIEW.Motion import PrincipalInertia, meanMotion
from test.testUtilities import assertIterablesAlmostEqual


class TestPrincipalInertia(unittest.TestCase):
    def setUp(self):
        self.inertia = PrincipalInertia(2500, 2300, 3000)

    def test_MOI(self):
        assertIterablesAlmostEqual(self, self.inertia.MOI, [ 2500, 2300, 3000 ])

        with self.assertRaises(ValueError):
            self.inertia.MOI[0] = 1 # Read-only

    def test_rejectsNonPositiveMoments(self):
        with self.assertRaises(ValueError):
            PrincipalInertia(0, 1, 1)
        with self.assertRaises(ValueError):
            PrincipalInertia(1, -2, 1)
        with self.assertRaises(ValueError):
            PrincipalInertia(1, 1, math.inf)
        with self.assertRaises(ValueError):
            PrincipalInertia(1, 1, math.nan)

    def test_fromVector(self):
        self.assertEqual(PrincipalInertia.fromVector([ 2500, 2300, 3000 ]), self.inertia)
        with self.assertRaises(ValueError):
            PrincipalInertia.fromVector([ 1, 2 ])

    def test_matrixAndInverse(self):
        product = self.inertia.matrix().dot(self.inertia.inverse())
        assertIterablesAlmostEqual(self, product.flatten(), np.eye(3).flatten())

    def test_multiplication(self):
        assertIterablesAlmostEqual(self, self.inertia * np.array([ 1, 2, 3 ]), [ 2500, 4600, 9000 ])

    def test_isIsotropic(self):
        self.assertFalse(self.inertia.isIsotropic())
        self.assertTrue(PrincipalInertia(5, 5, 5).isIsotropic())

    def test_str(self):
        self.assertEqual(str(PrincipalInertia(1, 2, 3)), "MOI=(1.0 2.0 3.0)")

class TestMeanMotion(unittest.TestCase):
    def test_meanMotion(self):
        self.assertAlmostEqual(meanMotion(2*math.pi), 1.0)
        self.assertAlmostEqual(meanMotion(5928), 0.0010599165, 9)

        with self.assertRaises(ValueError):
            meanMotion(0)
        with self.assertRaises(ValueError):
            meanMotion(-10)

#If this file is run by itself, run the tests above
if __name__ == '__main__':
    unittest.main()
