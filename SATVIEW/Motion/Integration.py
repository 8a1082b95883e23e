'''
    Defines ODE integrators for constant and adaptive time stepping. Used by `SATVIEW.Motion.TrajectoryIntegration` to integrate attitude dynamics models.

    Both the integrator and the adaptive integrator classes are callable, meaning they can be called like a function once instantiated
        This is facilitated by their __call__ methods

    Values being integrated can be floats or numpy arrays (flattened attitude states)

    Integration methods are defined by Butcher tableaus, represented by lists of lists as follows:
        Expected Format (Example is RK4 - 3/8 method, see conventional Butcher tableau here: https://en.wikipedia.org/wiki/List_of_Runge%E2%80%93Kutta_methods#3/8-rule_fourth-order_method):
            [                                   # Top 0 row ommitted
                [ 1/3, 1/3 ],                   # Row 1: c_i first, then a_{i1} to a_{in}
                [ 2/3, -1/3, 1.0 ],             # Row 2: ''
                [ 1.0, 1.0, -1.0, 1.0 ],        # Row 3: ''
                [ 1/8, 3/8, 3/8, 1/8 ]          # Row 4: (result calculation row) b_1 to b_n
            ]

        For adaptive methods, the bottom two rows are 'result calculation rows'
            The second last row is expected to represent the higher-accuracy method
            The last row is expected to represent the lower-accuracy method
            The difference between the results obtained from the two methods becomes the error estimate

        Learn about Butcher Tableaus here: https://en.wikipedia.org/wiki/Runge%E2%80%93Kutta_methods
'''
import math
from abc import ABC, abstractmethod
from typing import Callable

import numpy as np

__all__ = [ "integratorFactory", "ClassicalIntegrator", "AdaptiveIntegrator", "IntegrationResult", "IntegrationError" ]

class IntegrationError(ArithmeticError):
    ''' Raised when an integrator can't take a time step that meets its accuracy requirements '''
    pass

def checkButcherTableau(tableau):
    ''' Checks that the Butcher tableau passed in represents a consistent R-K method, raises a ValueError if not '''
    lastRowLength = 0
    for i in range(len(tableau)):
        if len(tableau[i]) == lastRowLength or i == len(tableau) - 1:
            # Row of "b" coefficients (constructing a final answer), should sum to 1
            sumB = sum(tableau[i])
            if not math.isclose(sumB, 1.0):
                raise ValueError("Sum of 'b' coefficients ({}) of butcher tableau row {} don't = 1".format(sumB, i))
        else:
            # Row of "c" and "a" coefficients (constructing one of the k values), c should equal the sum of the a's
            c = tableau[i][0]
            sumA = sum(tableau[i][1:])
            if not math.isclose(c, sumA):
                raise ValueError("Sum of 'a' coefficients ({}) of butcher tableau row {} don't = 'c' coefficient from the same row {}".format(sumA, i, c))

        lastRowLength = len(tableau[i])

def errorMagnitude(errorEstimate) -> float:
    ''' Largest absolute component of the error estimate. NaN if any component is NaN '''
    errorEstimate = np.abs(errorEstimate)
    if np.isnan(errorEstimate).any():
        return math.nan
    return float(np.max(errorEstimate))

def integratorFactory(integrationMethod="RK45Adaptive", simDefinition=None):
    '''
        Returns a callable integrator object

        Inputs:
            * integrationMethod: (str) Name of integration method: Examples = "Euler", "RK4", "RK23Adaptive", and "RK45Adaptive"
            * simDefinition: (`SATVIEW.IO.SimDefinition`) for adaptive integration, provide a simdefinition with time step adaptation parameters
    '''
    if "Adapt" in integrationMethod:
        if simDefinition is None:
            raise ValueError("SimDefinition object required to initialize adaptive integrator")

        from SATVIEW.IO import SubDictReader
        adaptDictReader = SubDictReader("SimControl.TimeStepAdaptation", simDefinition)

        controller = adaptDictReader.getString("controller")
        safetyFactor = adaptDictReader.getFloat("Elementary.safetyFactor")
        targetError = adaptDictReader.getFloat("targetError")
        minFactor = adaptDictReader.getFloat("minFactor")
        maxFactor = adaptDictReader.getFloat("maxFactor")
        maxTimeStep = adaptDictReader.getFloat("maxTimeStep")
        minTimeStep = adaptDictReader.getFloat("minTimeStep")

        return AdaptiveIntegrator(
            method=integrationMethod,
            controller=controller,
            targetError=targetError,
            maxMinSafetyFactors=[maxFactor, minFactor, safetyFactor],
            maxTimeStep=maxTimeStep,
            minTimeStep=minTimeStep
        )

    else:
        # Constant time step integrator
        return ClassicalIntegrator(method=integrationMethod)


class Integrator(ABC):
    @abstractmethod
    def __call__(self, initVal, initTime:float, derivativeFunc:Callable, dt:float):
        '''
            Inputs:
                initVal: float or numpy array
                derivativeFunc: function accepting (time, value), returning the derivative of value, of the same type/shape as initVal
                    See `SATVIEW.Motion.DynamicsModel` for an example of derivativeFunc

            Returns:
                An object of type IntegrationResult
        '''
        pass

class IntegrationResult():
    __slots__ = [ 'newValue', 'timeStepAdaptationFactor', 'errorMagEstimate', 'dt', 'derivativeEstimate' ]

    def __init__(self, newValue, dt, derivativeEstimate, timeStepAdaptationFactor=1.0, errorMagEstimate=0.0):
        '''
            newValue:                   Value of quantity represented by initVal at time initTime+dt
            dt:                         The size of the time step actually taken (error-limited adaptive integrators can override to shrink the time step)
            derivativeEstimate:         Estimate of the value of the function derivative obtained by the integrator over the last time step
            timeStepAdaptationFactor:   For adaptive methods, suggested time step adaption (otherwise 1)
            errorMagEstimate:           For adaptive methods, provide error estimate (otherwise 0)
        '''
        self.newValue = newValue
        self.dt = dt
        self.derivativeEstimate = derivativeEstimate
        self.timeStepAdaptationFactor = timeStepAdaptationFactor
        self.errorMagEstimate = errorMagEstimate

def _weightedSum(coefficients, k):
    ''' coefficients[0]*k[0] + coefficients[1]*k[1] + ... '''
    total = k[0] * coefficients[0]
    for i in range(1, len(coefficients)):
        if coefficients[i] != 0:
            total = total + k[i]*coefficients[i]
    return total

class ClassicalIntegrator(Integrator):
    ''' Callable class for constant-dt ODE integration '''

    def __init__(self, method="RK4"):
        self.method = method

        if method == "Euler":
            self.tableau = [
                [ 1.0 ]
            ]
        elif method == "RK2Midpoint":
            self.tableau = [
                [0.5, 0.5],
                [0,   1  ]
            ]
        elif method == "RK2Heun":
            self.tableau = [
                [1, 1],
                [0.5, 0.5]
            ]
        elif method == "RK4":
            self.tableau = [
                [ 0.5, 0.5 ],
                [ 0.5, 0, 0.5 ],
                [ 1, 0, 0, 1 ],
                [ 1/6, 1/3, 1/3, 1/6 ]
            ]
        elif method == "RK4_3/8":
            self.tableau = [
                [ 1/3, 1/3 ],
                [ 2/3, -1/3, 1.0 ],
                [ 1.0, 1.0, -1.0, 1.0 ],
                [ 1/8, 3/8, 3/8, 1/8 ]
            ]
        else:
            raise ValueError("Integration method: {} not implemented. See SATVIEW.IO.defaultConfigValues for options.".format(method))

        checkButcherTableau(self.tableau)

    def __call__(self, initVal, initTime, derivativeFunc, dt):
        '''
            Integrates a function based on self.tableau
            For row i of the tableau, ki = derivativefunc(t + ci*dt, y + dt(ai1*k1 + ai2*k2 + ...))
            Then final result is y + dt*(b1*k1 + b2*k2 + ...)
            Further explanation: https://en.wikipedia.org/wiki/Runge%E2%80%93Kutta_methods#Use
        '''
        tab = self.tableau

        k = [ derivativeFunc(initTime, initVal) ]
        for row in tab[:-1]:
            evalTime = initTime + dt*row[0]
            evalY = initVal + _weightedSum(row[1:], k)*dt
            k.append(derivativeFunc(evalTime, evalY))

        derivative = _weightedSum(tab[-1], k)
        return IntegrationResult(initVal + derivative*dt, dt, derivative)

class AdaptiveIntegrator(Integrator):
    ''' Callable class for error-limited adaptive-dt ODE integration '''

    def __init__(self, method="RK45Adaptive", controller="elementary", targetError=0.001, maxMinSafetyFactors=[1.5, 0.3, 0.9], maxTimeStep=5, minTimeStep=0.0001):
        '''
            targetError:            Target for the (max-norm) difference between the fine and coarse solutions over a single time step
            maxMinSafetyFactors:    [ max time step growth factor, min time step growth factor, safety factor (elementary controller) ]
            maxTimeStep/minTimeStep: Limits for the time step sizes suggested by the controller
                If the error at minTimeStep is still too large, the integration fails with an IntegrationError
        '''
        self.method = method

        # For first-same-as-last methods, the last derivative evaluation of a step is the first derivative of the following step. Cached here as (value, derivative)
        self.derivativeCache = None

        if method == "RK12Adaptive":
            self.tableau = [
                [ 0.5, 0.5 ],
                [ 0.0, 1.0 ],
                [ 1.0, 0.0 ]
            ]
            self.firstSameAsLast = False
        elif method == "RK23Adaptive": # Bogacki-Shampine method
            self.tableau = [
                [ 0.5, 0.5 ],
                [ 3/4, 0.0, 3/4 ],
                [ 1.0, 2/9, 1/3, 4/9 ],
                [ 2/9, 1/3, 4/9, 0.0 ],
                [ 7/24, 1/4, 1/3, 1/8 ]
            ]
            self.firstSameAsLast = True
        elif method == "RK45Adaptive": # Dormand-Prince RK5(4)7FM method
            self.tableau = [
                [ 1/5, 1/5 ],
                [ 3/10, 3/40, 9/40 ],
                [ 4/5, 44/45, -56/15, 32/9 ],
                [ 8/9, 19372/6561, -25360/2187, 64448/6561, -212/729 ],
                [ 1.0, 9017/3168, -355/33, 46732/5247, 49/176, -5103/18656 ],
                [ 1.0, 35/384, 0.0, 500/1113, 125/192, -2187/6784, 11/84 ],
                [ 35/384, 0.0, 500/1113, 125/192, -2187/6784, 11/84, 0.0 ], # 5th order
                [ 5179/57600, 0.0, 7571/16695, 393/640, -92097/339200, 187/2100, 1/40 ] # 4th order
            ]
            self.firstSameAsLast = True
        elif method == "RK78Adaptive": # Dormand-Prince RK8(7)13M method (rational approximation)
            self.tableau = [
                [ 1/18, 1/18 ],
                [ 1/12, 1/48, 1/16 ],
                [ 1/8, 1/32, 0, 3/32 ],
                [ 5/16, 5/16, 0, -75/64, 75/64 ],
                [ 3/8, 3/80, 0, 0, 3/16, 3/20 ],
                [ 59/400, 29443841/614563906, 0, 0, 77736538/692538347, -28693883/1125000000, 23124283/1800000000 ],
                [ 93/200, 16016141/946692911, 0, 0, 61564180/158732637, 22789713/633445777, 545815736/2771057229, -180193667/1043307555 ],
                [ 5490023248/9719169821, 39632708/573591083, 0, 0, -433636366/683701615, -421739975/2616292301, 100302831/723423059, 790204164/839813087, 800635310/3783071287 ],
                [ 13/20, 246121993/1340847787, 0, 0, -37695042795/15268766246, -309121744/1061227803, -12992083/490766935, 6005943493/2108947869, 393006217/1396673457, 123872331/1001029789 ],
                [ 1201146811/1299019798, -1028468189/846180014, 0, 0, 8478235783/508512852, 1311729495/1432422823, -10304129995/1701304382, -48777925059/3047939560, 15336726248/1032824649, -45442868181/3398467696, 3065993473/597172653 ],
                [ 1, 185892177/718116043, 0, 0, -3185094517/667107341, -477755414/1098053517, -703635378/230739211, 5731566787/1027545527, 5232866602/850066563, -4093664535/808688257, 3962137247/1805957418, 65686358/487910083 ],
                [ 1, 403863854/491063109, 0, 0, -5068492393/434740067, -411421997/543043805, 652783627/914296604, 11173962825/925320556, -13158990841/6184727034, 3936647629/1978049680, -160528059/685178525, 248638103/1413531060, 0 ],
                [ 14005451/335480064, 0, 0, 0, 0, -59238493/1068277825, 181606767/758867731,   561292985/797845732,   -1041891430/1371343529,  760417239/1151165299, 118820643/751138087, -528747749/2220607170,  1/4], # 8th order
                [ 13451932/455176623, 0, 0, 0, 0, -808719846/976000145, 1757004468/5645159321, 656045339/265891186,   -3867574721/1518517206,   465885868/322736535,  53011238/667516719,                  2/45,    0] # 7th order
            ]
            self.firstSameAsLast = False
        else:
            raise ValueError("Integration method: {} not implemented. See SATVIEW.IO.defaultConfigValues for options.".format(method))

        checkButcherTableau(self.tableau)

        self.maxFactor, self.minFactor, self.safetyFactor = maxMinSafetyFactors
        self.targetError = targetError
        self.maxTimeStep = maxTimeStep
        self.minTimeStep = minTimeStep

        if minTimeStep <= 0 or maxTimeStep < minTimeStep:
            raise ValueError("Time step limits must satisfy 0 < minTimeStep ({}) <= maxTimeStep ({})".format(minTimeStep, maxTimeStep))

        if controller == "elementary":
            self.getTimeStepAdjustmentFactor = self._getTimeStepAdjustmentFactor_Elementary
        elif controller == "Constant":
            self.getTimeStepAdjustmentFactor = self._getTimeStepAdjustmentFactor_Constant
        else:
            raise ValueError("Adaptive Integrator requires a step size controller: 'elementary' or 'Constant', got: {}".format(controller))

    def __call__(self, initVal, initTime, derivativeFunc, dt):
        '''
            Takes a single time step of size <= dt.
            Steps with an estimated error > maxErrorMultiple*targetError are discarded and recomputed with a third of the time step.
            Raises an IntegrationError if that is still the case at self.minTimeStep
        '''
        maxErrorMultiple = 20

        cachedDerivative = None
        if self.derivativeCache is not None and self.derivativeCache[0] is initVal:
            cachedDerivative = self.derivativeCache[1]

        while True:
            result, derivative, errorMagEstimate, lastDerivativeEvaluation = self._integrate(initVal, initTime, derivativeFunc, dt, cachedDerivative)

            # NaN errors fail this check too
            if errorMagEstimate <= maxErrorMultiple*self.targetError:
                break

            if dt <= self.minTimeStep:
                raise IntegrationError("Step size underflow at t = {}: estimated error {} exceeds {} x targetError ({}) at the minimum time step ({})".format(
                    initTime, errorMagEstimate, maxErrorMultiple, self.targetError, self.minTimeStep))

            dt = max(self.minTimeStep, dt/3)

        if self.firstSameAsLast:
            self.derivativeCache = (result, lastDerivativeEvaluation)

        desiredAdaptFactor = self.getTimeStepAdjustmentFactor(errorMagEstimate, dt)
        limitedAdaptFactor = self._limitAdaptationFactor(desiredAdaptFactor, dt)

        return IntegrationResult(result, dt, derivative, limitedAdaptFactor, errorMagEstimate)

    #### Time Step adjustment ####
    def _limitAdaptationFactor(self, desiredAdaptFactor, dt):
        '''
            Apply adaptation limiters
            Adaptation can be limited in two ways: by self.maxFactor/self.minFactor and by self.minTimeStep/self.maxTimeStep.
            The below checks which limitation is currently most restrictive and applies that one
        '''
        minFactor = max(self.minTimeStep / dt, self.minFactor)
        maxFactor = min(self.maxTimeStep / dt, self.maxFactor)

        return min(max(desiredAdaptFactor, minFactor), maxFactor)

    def _getTimeStepAdjustmentFactor_Constant(self, errorMag, dt):
        ''' Don't adjust the time step (always 1.0) '''
        return 1

    def _getTimeStepAdjustmentFactor_Elementary(self, errorMag, dt):
        ''' Calculates the time step adjustment factor when using an elementary controller '''
        if errorMag == 0:
            return math.inf
        return self.safetyFactor * (self.targetError / (2*errorMag))**0.5

    #### Adaptive Integration Method ####
    def _integrate(self, initVal, initTime, derivativeFunc, dt, firstSameAsLast=None):
        '''
            Integrates a function based on self.tableau, computing two estimates of the solution (from the last two tableau rows)
            Subtracting these gives an error estimate which can be used to adjust the time step size
            Also see comment at the top of this file
        '''
        tab = self.tableau

        if firstSameAsLast is not None:
            k = [ firstSameAsLast ]
        else:
            k = [ derivativeFunc(initTime, initVal) ]

        # One k for each row of the tableau except the last two
        for row in tab[:-2]:
            evalTime = initTime + dt*row[0]
            evalY = initVal + _weightedSum(row[1:], k)*dt
            k.append(derivativeFunc(evalTime, evalY))

        lastDerivativeEvaluation = k[-1]

        fineDerivative = _weightedSum(tab[-2], k)
        coarseDerivative = _weightedSum(tab[-1], k)

        finePred = initVal + fineDerivative*dt
        errorMagEstimate = errorMagnitude((fineDerivative - coarseDerivative)*dt)

        # Non-finite predictions can't be accepted, whatever the error estimate says
        if not np.all(np.isfinite(finePred)):
            errorMagEstimate = math.nan

        return finePred, fineDerivative, errorMagEstimate, lastDerivativeEvaluation
