'''
Contains a class meant to read and modify simulation definition (.satview) files, and the master dictionary of
default values for simulation definitions
'''
import re
from pathlib import Path

__all__ = [ "defaultConfigValues", "SimDefinition", "getAbsoluteFilePath" ]

#################### Default value dictionary  #########################
defaultConfigValues = {
    "SimControl.source":                                    "Integrate",
    "SimControl.replayFile":                                "None",
    "SimControl.startTime":                                 "0",
    "SimControl.endTime":                                   "5928",
    "SimControl.sampleCount":                               "1000",
    "SimControl.timeDiscretization":                        "RK45Adaptive",
    "SimControl.timeStep":                                  "1",
    "SimControl.TimeStepAdaptation.controller":             "elementary",
    "SimControl.TimeStepAdaptation.targetError":            "1e-9",
    "SimControl.TimeStepAdaptation.minFactor":              "0.3",
    "SimControl.TimeStepAdaptation.maxFactor":              "1.5",
    "SimControl.TimeStepAdaptation.Elementary.safetyFactor":"0.9",
    "SimControl.TimeStepAdaptation.maxTimeStep":            "60",
    "SimControl.TimeStepAdaptation.minTimeStep":            "1e-6",
    "SimControl.loggingLevel":                              "1",
    "SimControl.plot":                                      "None",

    "Satellite.dynamicsModel":                              "Quaternion",
    "Satellite.inertia":                                    "(2500 2300 3000)",
    "Satellite.disturbanceTorque":                          "(0.0001 0.0001 0.0001)",
    "Satellite.angularVelocity":                            "(0 0 0)",
    "Satellite.orientation":                                "(1 0 0 0)",
    "Satellite.eulerAngles":                                "(0 0 0)",
    "Satellite.eulerAngleRates":                            "(0 0 0)",

    "Orbit.period":                                         "5928",
    "Orbit.normalizedRate":                                 "1",

    "Visualization.animate":                                "True",
    "Visualization.windowTitle":                            "AE4313",
    "Visualization.cameraPosition":                         "(80 -80 -80)",
    "Visualization.checkCloseEveryFrame":                   "False",
}

simDefinitionHelpMessage = \
"""
    All non-empty, non-comment lines are expected to end in either:
    {   (dictionary start)
    }   (dictionary end)

    Or to contain a space-separated key-value pair:
    key value
"""
class SimDefinition():

    #### Parsing / Initialization ####
    def __init__(self, fileName=None, dictionary=None, silent=False, defaultDict=None):
        '''
        Parse simulation definition files into a dictionary of string values accessible by string keys.

        Inputs:
            * fileName: (str) path to simulation definition file
            * dictionary: (dict[str,str]) if not providing a fileName, provide a pre-parsed dictionary equivalent to a simulation definition file
            * silent: (bool) Console output control
            * defaultDict: (dict[str,str] provide a custom dictionary of default values. If none is provided, defaultConfigValues is used.)

        Example:
            The file contents:
                'SimControl{
                    &nbsp;&nbsp;&nbsp;&nbsp;timeDiscretization RK4
                }'
            Would be parsed into a single-key Python dictionary, stored in self.dict:
            `{ "SimControl.timeDiscretization": "RK4"}`
        '''
        self.silent = silent
        ''' Boolean, controls console output '''

        self.dict = None
        ''' Main dictionary of values, usually populated from a simulation definition file '''

        self.defaultDict = defaultConfigValues if defaultDict is None else defaultDict
        ''' Holds all of the defined default values. These will fill in for missing values in self.dict '''

        if fileName is not None:
            self._parseSimDefinitionFile(fileName)
        elif dictionary is not None:
            self.dict = dictionary
            self.fileName = "None"
        else:
            raise ValueError("No fileName or dictionary provided to initialize the SimDefinition")

        self._resetUsedAndUnusedKeyTrackers()

    def _parseDictionaryContents(self, workingText, startLine, currDictName) -> int:
        '''
            Parses an individual subdictionary in a simdefinition file.
            Calls itself recursively to parse further sub dictionaries.
            Saves parsed key-value pairs to self.dict

            Returns index of the line that closes the current dictionary (len(workingText) for the root dictionary)
        '''
        i = startLine

        while i < len(workingText):
            line = workingText[i].strip()

            if line[-1] == '{':
                subDictName = line[:-1].strip()
                if subDictName == "" or len(subDictName.split()) > 1:
                    print(simDefinitionHelpMessage)
                    raise ValueError("Invalid dictionary name: '{}' in file: {}".format(line, self.fileName))

                if currDictName == "":
                    i = self._parseDictionaryContents(workingText, i+1, subDictName)
                else:
                    i = self._parseDictionaryContents(workingText, i+1, currDictName + "." + subDictName)

            elif line == '}':
                if currDictName == "":
                    raise ValueError("Unmatched '}}' in file: {}".format(self.fileName))
                return i

            elif len(line.split()) > 1:
                keyVal = line.split()

                key = keyVal[0]
                value = " ".join(keyVal[1:])
                if currDictName == "":
                    keyString = key
                else:
                    keyString = currDictName + "." + key

                if keyString in self.dict:
                    raise ValueError("Duplicate Key: " + keyString + " in File: " + self.fileName)
                self.dict[keyString] = value

            else:
                # Line not recognized as a dict start/end or a key/value pair
                print(simDefinitionHelpMessage)
                raise ValueError("Problem reading line '{}' in file: {}".format(line, self.fileName))

            i += 1

        if currDictName != "":
            raise ValueError("Dictionary {} is missing its closing '}}' in file: {}".format(currDictName, self.fileName))

        return i

    def _replaceSATVIEWRelativeFilePathsWithAbsolutePaths(self):
        '''
            Tries to detect paths relative to the SATVIEW installation directory and replaces them with absolute paths.
            This allows the example definitions to refer to the example traces when SATVIEW is installed from pip and run outside its installation directory.
        '''
        for key in self.dict:
            val = self.dict[key]

            if val[:2] == "./":
                val = val[2:]

            if len(val) > 8 and val[:8] == "SATVIEW/":
                self.dict[key] = getAbsoluteFilePath(val)

    def _parseSimDefinitionFile(self, fileName):
        self.fileName = str(fileName)
        self.dict = {}

        if not Path(fileName).is_file():
            raise FileNotFoundError("Simulation definition file not found: {}".format(fileName))

        with open(fileName, "r") as file:
            workingText = file.read()

        # Remove comments
        comment = re.compile("#.*")
        workingText = re.sub(comment, "", workingText)

        # Remove blank lines
        workingText = [line for line in workingText.split('\n') if line.strip() != '']

        # Start recursive parse by asking to parse the root-level dictionary
        self._parseDictionaryContents(workingText, 0, "")

        self._replaceSATVIEWRelativeFilePathsWithAbsolutePaths()

    #### Normal Usage ####
    def getValue(self, key: str) -> str:
        """
            Input:
                Key should be a string of format "DictionaryName.SubdictionaryName.Key"
            Output:
                Always returns a string value
                Returns value from defaultConfigValues if key not present in current SimDefinition's dictionary
        """
        key = key.strip()

        if key in self.dict:
            if key in self.unaccessedFields:
                self.unaccessedFields.remove(key)
            return self.dict[key]

        elif key in self.defaultDict:
            self.defaultValuesUsed.add(key)
            return self.defaultDict[key]

        else:
            raise KeyError("Key: " + key + " not found in {} or default config values".format(self.fileName))

    def setValue(self, key: str, value) -> None:
        '''
            Will add the entry if it's not present
        '''
        key = key.strip()
        self.dict[key] = value

    #### Usage Reporting ####
    def printUnusedKeys(self):
        '''
            Checks which keys in the present simulation definition have not yet been accessed.
            Prints a list of those to the console.
        '''
        if len(self.unaccessedFields) > 0:
            print("\nWarning: The following keys were loaded from: {} but never accessed:".format(self.fileName))
            for key in sorted(self.unaccessedFields):
                print("{:<45}{}".format(key+":", self.dict[key]))
            print("")

    def printDefaultValuesUsed(self):
        '''
            Checks which default values have been used since the creation of the current instance of SimDefinition. Prints those to the console.
        '''
        if len(self.defaultValuesUsed):
            print("\nWarning: The following default values were used in this simulation:")
            for key in sorted(self.defaultValuesUsed):
                print("{:<45}{}".format(key+":", self.defaultDict[key]))
            print("\nIf this was not intended, override the default values by adding the above information to your simulation definition file.\n")

    def _resetUsedAndUnusedKeyTrackers(self):
        self.unaccessedFields = set(self.dict.keys())
        self.defaultValuesUsed = set()

    #### Utilities ####
    def __str__(self):
        result = "File: " + self.fileName + "\n"

        for key, value in self.dict.items():
            result += "{}: {}\n".format(key, value)

        return result + "\n"

    def __eq__(self, simDef2):
        try:
            return self.dict == simDef2.dict
        except AttributeError:
            return False

################### Utility functions ########################
def getAbsoluteFilePath(relativePath: str) -> str:
    '''
        Takes a path defined relative to the SATVIEW repository and tries to return an absolute path for the current installation.
        Returns original relativePath if an absolute path is not found
    '''
    # This file is at SATVIEW/IO/simDefinition.py, so SATVIEW's install directory is three levels up
    pathToSATVIEWInstallation = Path(__file__).parent.parent.parent
    absolutePath = pathToSATVIEWInstallation / Path(relativePath)

    if absolutePath.exists():
        return str(absolutePath)
    else:
        print("WARNING: Unable to compute absolute path replacement for a path which is suspected to be relative to the SATVIEW installation location: {}".format(relativePath))
        return relativePath
