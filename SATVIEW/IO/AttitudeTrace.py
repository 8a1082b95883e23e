'''
Reading and writing of attitude traces: comma-separated files with one quaternion attitude sample per row.

    t, omega1, omega2, omega3, q0, q1, q2, q3
    0.0, 0.001, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0
    ...

Columns are fixed: time (s), body angular velocity (rad/s), scalar-first orientation quaternion.
Traces are read whole: any malformed row fails the load and nothing is returned.
'''

from pathlib import Path

import numpy as np
import pandas as pd

from SATVIEW.Motion import (QuaternionAttitudeState, Trajectory,
                            normalizeQuaternion)

__all__ = [ "attitudeTraceColumns", "readAttitudeTrace", "writeAttitudeTrace" ]

attitudeTraceColumns = [ "t", "omega1", "omega2", "omega3", "q0", "q1", "q2", "q3" ]

def readAttitudeTrace(filePath) -> Trajectory:
    '''
        Inputs:
            filePath: (str/Path) path to a trace file

        Returns:
            `SATVIEW.Motion.Trajectory` of `SATVIEW.Motion.QuaternionAttitudeState`s, one sample per row, in file order

        Raises:
            FileNotFoundError if the file does not exist
            ValueError if the header or any row is malformed (wrong number of fields, blank lines, empty or non-numeric values, time not increasing)
    '''
    filePath = Path(filePath)
    if not filePath.is_file():
        raise FileNotFoundError("Attitude trace not found: {}".format(filePath))

    try:
        # Read as text first (header included), so that missing and non-numeric fields can be reported instead of silently becoming NaN
        # The field count is fixed by the header line: longer rows are parser errors, shorter rows are padded with NaN
        # Blank lines are kept as empty rows so that they fail the load too
        rawData = pd.read_csv(filePath, header=None, skipinitialspace=True, dtype=str, keep_default_na=False, skip_blank_lines=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValueError("Unable to parse attitude trace {}: {}".format(filePath, e))

    columns = [ str(column).strip() for column in rawData.iloc[0] ]
    if columns != attitudeTraceColumns:
        raise ValueError("Attitude trace {} has header: {}, expected: {}".format(filePath, ", ".join(columns), ", ".join(attitudeTraceColumns)))

    traceData = rawData.iloc[1:]
    if len(traceData) == 0:
        raise ValueError("Attitude trace {} contains no samples".format(filePath))

    values = np.empty((len(traceData), len(attitudeTraceColumns)))
    for rowIndex, row in enumerate(traceData.itertuples(index=False)):
        lineNumber = rowIndex + 2 # 1-based, after the header
        for columnIndex, field in enumerate(row):
            if not isinstance(field, str) or field.strip() == "":
                raise ValueError("Attitude trace {}, line {}: expected {} fields, column '{}' is missing or empty".format(filePath, lineNumber, len(attitudeTraceColumns), attitudeTraceColumns[columnIndex]))
            try:
                values[rowIndex, columnIndex] = float(field)
            except ValueError:
                raise ValueError("Attitude trace {}, line {}: value '{}' in column '{}' is not a number".format(filePath, lineNumber, field, attitudeTraceColumns[columnIndex]))

    if not np.all(np.isfinite(values)):
        badRow = np.where(~np.all(np.isfinite(values), axis=1))[0][0]
        raise ValueError("Attitude trace {}, line {}: contains non-finite values".format(filePath, badRow + 2))

    times = values[:, 0]
    states = []
    for i in range(len(values)):
        # Zero quaternions can't be displayed
        try:
            normalizeQuaternion(values[i, 4:8])
        except ValueError as e:
            raise ValueError("Attitude trace {}, line {}: {}".format(filePath, i + 2, e))
        states.append(QuaternionAttitudeState(values[i, 1:4], values[i, 4:8]))

    try:
        return Trajectory(times, states)
    except ValueError as e:
        raise ValueError("Attitude trace {}: {}".format(filePath, e))

def writeAttitudeTrace(trajectory, filePath):
    '''
        Writes a quaternion trajectory to filePath in the format read by `readAttitudeTrace`, overwriting any existing file.
        Euler angle trajectories can't be represented in this format (ValueError)

        Returns the path written to
    '''
    if trajectory.stateVariant != QuaternionAttitudeState.variant:
        raise ValueError("Only quaternion trajectories can be written as attitude traces, got a {} trajectory".format(trajectory.stateVariant))

    rows = np.array([ [ sample.time, *sample.state.angularVelocity, *sample.state.orientation ] for sample in trajectory ])
    traceData = pd.DataFrame(rows, columns=attitudeTraceColumns)

    with open(filePath, 'w', newline='') as file:
        file.write(", ".join(attitudeTraceColumns) + "\n")
        traceData.to_csv(file, header=False, index=False, float_format="%.15g")

    return str(filePath)
