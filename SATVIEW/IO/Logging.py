'''
Classes and functions for capturing console output (Logger) and creating simulation result folders
'''

import os
import sys
from pathlib import Path

__all__ = [ "Logger", "removeLogger", "findNextAvailableNumberedFileName", "createResultsFolder", "getSystemInfo", "getSimDefinitionAndDefaultValueDictsForOutput" ]

class Logger():
    '''
        Class intended to capture calls to print() and copy their contents to a list of strings, while still (optionally) printing them to the console

        Ex:
            logger = Logger(stringResultList)
            sys.stdout = logger

        Now anything passed into print() will be printed to the console and stored in stringResultList
    '''

    def __init__(self, stringListToCopyTo, continueWritingToTerminal=True):
        self.terminal = sys.__stdout__
        self.log = stringListToCopyTo
        self.continueWritingToTerminal = continueWritingToTerminal

    def write(self, msg):
        if self.continueWritingToTerminal:
            self.terminal.write(msg)
        self.log.append(msg)

    def flush(self):
        if self.continueWritingToTerminal:
            self.terminal.flush()

    def writeLogToFile(self, filePath, overwrite=False):
        if overwrite or not os.path.exists(filePath):
            with open(filePath, 'w+') as file:
                file.writelines(self.log)

def removeLogger():
    sys.stdout = sys.__stdout__

def findNextAvailableNumberedFileName(fileBaseName="simLog", extension=".txt"):
    '''
        If fileBaseName is simLog, returns the first of: simLog1, simLog2, simLog3, etc... that isn't already a file (or folder).
        Returns a string of the form fileBaseName + Number + extension
    '''
    fileNumber = 0
    filePath = None
    while filePath is None or os.path.exists(filePath):
        fileNumber += 1
        filePath = fileBaseName + str(fileNumber) + extension

    return filePath

def createResultsFolder(simDefinitionFilePath, parentDirectory="."):
    '''
        Creates and returns the path of a new numbered results folder named after the simulation definition file:
            QuaternionGravityGradient_Run1, QuaternionGravityGradient_Run2, ...
        Existing folders are never reused
    '''
    if simDefinitionFilePath in (None, "None"):
        baseName = "Simulation"
    else:
        baseName = Path(simDefinitionFilePath).stem

    folderPath = findNextAvailableNumberedFileName(os.path.join(parentDirectory, baseName + "_Run"), extension="")
    os.makedirs(folderPath)
    return folderPath

def getSystemInfo(printToConsole=False):
    ''' Returns string array containing info about git status, machine type, date, etc... '''

    from datetime import datetime
    from platform import platform
    from subprocess import DEVNULL, CalledProcessError, check_output

    result = []

    try:
        currentCommit = check_output(['git', 'rev-parse', 'HEAD'], stderr=DEVNULL).decode().strip()
        currentBranch = check_output(['git', 'rev-parse', '--abbrev-ref', 'HEAD'], stderr=DEVNULL).decode().strip()
        result.append("# SATVIEW, branch: {}, latest commit: {}".format(currentBranch, currentCommit))
    except (CalledProcessError, OSError):
        result.append("# Could not obtain current branch/commit info from git")

    now = datetime.now().strftime("%d/%m/%Y %H:%M:%S")
    result.append("# {}".format(now))

    try:
        user = os.getlogin()
        result.append("# User: {}".format(user))
    except OSError:
        pass # Probably running on a platform like Github Actions, which doesn't allow this command
    result.append("# OS: {}".format(platform()))

    if printToConsole:
        for line in result:
            print(line)

    return result

def getSimDefinitionAndDefaultValueDictsForOutput(simDefinition, printToConsole=True):
    ''' Returns a string array '''

    stringResultArray = []

    print("# Using sim definition file: {}".format(simDefinition.fileName))

    stringResultArray.append("\n---- Start Sim Definition File ----\n")
    stringResultArray.append(str(simDefinition))
    stringResultArray.append("---- End Sim Definition File ----\n\n")

    from pprint import pformat
    stringResultArray.append("\n---- Start Default Value Dictionary ----\n")
    stringResultArray.append(pformat(simDefinition.defaultDict))
    stringResultArray.append("\n---- End Default Value Dictionary ----\n\n")

    if printToConsole:
        for line in stringResultArray:
            print(line)

    return stringResultArray
