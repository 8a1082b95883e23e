'''
Script to run attitude simulations/replays from the command line
If SATVIEW has been installed with pip, this script is accessible through the 'satview' command
'''

import argparse
import os
import sys
import time
from pathlib import Path

from SATVIEW.IO import SimDefinition
from SATVIEW.Motion import IntegrationError
from SATVIEW.SimulationRunners import AttitudeSimulation


def buildParser() -> argparse.ArgumentParser:
    ''' Builds the command-line argument parser using argparse '''
    parser = argparse.ArgumentParser(formatter_class=argparse.RawTextHelpFormatter, description="""
    Integrate or replay satellite attitude trajectories and animate them.
    Expects runs to be defined by simulation definition files like those in ./SATVIEW/Examples/Simulations
    See SATVIEW.IO.defaultConfigValues for all possible options
    """)

    parser.add_argument(
        "--replay",
        metavar="traceFile",
        default=None,
        help="Replay an attitude trace (.csv: t, omega1, omega2, omega3, q0, q1, q2, q3) instead of integrating the dynamics model"
    )
    parser.add_argument(
        "--noAnimation",
        action='store_true',
        help="If present, builds (and logs) the trajectory without opening the animation window"
    )
    parser.add_argument(
        "--silent",
        action='store_true',
        help="If present, does not output to console"
    )
    parser.add_argument(
        "simDefinitionFile",
        nargs='?',
        default="QuaternionGravityGradient.satview",
        help="Path to a simulation definition (.satview) file, or the name of one of the example cases"
    )

    return parser

def findSimDefinitionFile(providedPath):
    '''
        Returns the path to the simulation definition file, checking the current directory and then the bundled examples.
        Raises FileNotFoundError if it can't be found
    '''
    if os.path.isfile(providedPath):
        return providedPath

    exampleLocation = Path(__file__).parent / "Examples" / "Simulations"

    possibleRelativePaths = [ providedPath ]
    if not providedPath.endswith(".satview"):
        # If it's just the case name (ex: 'EulerAngleLibration') try also adding the file extension
        possibleRelativePaths.append(providedPath + ".satview")

    for path in possibleRelativePaths:
        absPath = exampleLocation / path
        if absPath.is_file():
            return str(absPath)

    raise FileNotFoundError("Unable to locate simulation definition file: {}! Checked whether the path was relative to the current command line location or one of the example cases. To be sure that your file will be found, try using an absolute path.".format(providedPath))

def main(argv=None) -> int:
    '''
        Main function to run a SATVIEW simulation.
        Expects to be called from the command line, usually using the `satview` command

        For testing purposes, can also pass a list of command line arguments into the argv parameter

        Returns 0 on success, 1 if the definition, the trace, or the integration failed (before any window is opened)
    '''
    startTime = time.time()

    parser = buildParser()
    args = parser.parse_args(argv)

    try:
        simDefPath = findSimDefinitionFile(args.simDefinitionFile)
        simDef = SimDefinition(simDefPath, silent=args.silent)

        if args.replay is not None:
            simDef.setValue("SimControl.source", "Replay")
            simDef.setValue("SimControl.replayFile", os.path.abspath(args.replay))

        sim = AttitudeSimulation(simDefinition=simDef, silent=args.silent)
        sim.run()

    except (ValueError, FileNotFoundError, IntegrationError) as e:
        print("ERROR: {}".format(e), file=sys.stderr)
        return 1

    if sim.simConfig.animate and not args.noAnimation:
        if not args.silent:
            print("Showing attitude animation, close the window to exit")
        sim.playTrajectory()

    if not args.silent:
        print("Run time: {:1.2f} seconds".format(time.time() - startTime))
        print("Exiting")

    return 0

if __name__ == "__main__":
    sys.exit(main())
