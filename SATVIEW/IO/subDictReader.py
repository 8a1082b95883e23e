'''
    Wrapper class to read from a specific sub-dictionary in a SimDefinition.
'''

import numpy as np

__all__ = [ "SubDictReader", "parseArray", "parseBool" ]

_trueStrings = { "y", "yes", "t", "true", "on", "1" }
_falseStrings = { "n", "no", "f", "false", "off", "0" }

def parseBool(value: str) -> bool:
    ''' Accepts the same spellings as the old distutils strtobool: y/yes/t/true/on/1 and n/no/f/false/off/0, case-insensitive '''
    lowerValue = value.strip().lower()
    if lowerValue in _trueStrings:
        return True
    elif lowerValue in _falseStrings:
        return False
    else:
        raise ValueError("Invalid truth value: {}".format(value))

def parseArray(value: str) -> np.ndarray:
    '''
        Parses a space- (or comma-) separated list of numbers, optionally enclosed in round brackets, into a float array
        ## Example
            parseArray("(2500 2300 3000)") -> array([2500., 2300., 3000.])
    '''
    components = value.strip().strip("()").replace(",", " ").split()
    if len(components) == 0:
        raise ValueError("Expected a list of numbers, got: '{}'".format(value))

    try:
        return np.array([ float(x) for x in components ])
    except ValueError:
        raise ValueError("Expected a list of numbers, got: '{}'".format(value))

class SubDictReader():

    def __init__(self, stringPathToThisItemsSubDictionary, simDefinition):
        '''
            Example stringPathToThisItemsSubDictionary = 'SimControl.TimeStepAdaptation' if we're reading the parameters of an adaptive integrator
        '''
        self.simDefDictPathToReadFrom = stringPathToThisItemsSubDictionary
        self.simDefinition = simDefinition

    def getString(self, key):
        '''
            Pass in either relative key or absolute key:
                Ex 1 (Relative): If object subdictionary (self.simDefDictPathToReadFrom) is 'Satellite', relative keys could be 'inertia' or 'orientation'
                    These would retrieve Satellite.inertia or Satellite.orientation from the sim definition
                Ex 2 (Absolute): Can also pass in full absolute key, like 'Orbit.period', and it will retrieve that value, as long as there isn't a 'path collision' with a relative path
        '''
        try:
            return self.simDefinition.getValue(self.simDefDictPathToReadFrom + "." + key)
        except KeyError:
            try:
                return self.simDefinition.getValue(key)
            except KeyError:
                attemptedKey1 = self.simDefDictPathToReadFrom + "." + key
                raise KeyError("{} and {} not found in {} or in default value dictionary".format(attemptedKey1, key, self.simDefinition.fileName))

    def _parse(self, key, parser, typeName):
        stringValue = self.getString(key)
        try:
            return parser(stringValue)
        except ValueError:
            raise ValueError("Value of {}.{}: '{}' in {} could not be read as {}".format(self.simDefDictPathToReadFrom, key, stringValue, self.simDefinition.fileName, typeName))

    #### Get parsed values ####
    def getInt(self, key: str) -> int:
        return self._parse(key, int, "an integer")

    def getFloat(self, key: str) -> float:
        return self._parse(key, float, "a number")

    def getArray(self, key: str) -> np.ndarray:
        return self._parse(key, parseArray, "a list of numbers")

    def getBool(self, key: str) -> bool:
        return self._parse(key, parseBool, "True/False")
