'''
Matplotlib window showing the satellite (a wireframe cube with its body axes) rotating inside the reference frame axes,
along with the current time, attitude and rates.

Built once, then updated in place every frame by `AttitudeAnimationWindow.render`.
'''

import math

import matplotlib.pyplot as plt
import numpy as np

from SATVIEW.Visualization.Playback import AttitudeRenderer

__all__ = [ "AttitudeAnimationWindow", "cameraViewAngles", "formatTime", "formatAttitude", "formatRates" ]

#### Text ####
def formatTime(time):
    return "Time: {:.2f}s".format(time)

def formatAttitude(rollPitchYaw):
    return "Attitude:\nRoll:  {:.2f}°\nPitch: {:.2f}°\nYaw:   {:.2f}°".format(*rollPitchYaw)

def formatRates(rates):
    return "Rates:\nRoll:  {:.4f}°/s\nPitch: {:.4f}°/s\nYaw:   {:.4f}°/s".format(*rates)

#### Camera ####
def cameraViewAngles(cameraPosition):
    '''
        Returns (elevation, azimuth) in degrees for a camera at cameraPosition looking at the origin.
        The displayed y and z axes are inverted, such that -z points up on screen while keeping the axes right-handed
    '''
    x, y, z = cameraPosition
    if x == 0 and y == 0 and z == 0:
        raise ValueError("Camera position must not coincide with the origin")

    # Direction to the camera in on-screen (y and z flipped) coordinates
    screenX, screenY, screenZ = x, -y, -z
    elevation = math.degrees(math.atan2(screenZ, math.hypot(screenX, screenY)))
    azimuth = math.degrees(math.atan2(screenY, screenX))
    return elevation, azimuth

#### Geometry ####
def _cubeEdges(halfSize):
    ''' Returns a list of (2,3) arrays, one for each of the 12 edges of a cube centered on the origin '''
    corners = [ np.array([ x, y, z ]) for x in (-halfSize, halfSize) for y in (-halfSize, halfSize) for z in (-halfSize, halfSize) ]
    edges = []
    for i in range(len(corners)):
        for j in range(i+1, len(corners)):
            # Edges connect corners differing in exactly one coordinate
            if np.count_nonzero(corners[i] != corners[j]) == 1:
                edges.append(np.array([ corners[i], corners[j] ]))
    return edges

def _axisLines(length, start=0.0):
    ''' Returns a list of (2,3) arrays: the x, y and z axes from start to length '''
    return [ np.array([ start*unitVector, length*unitVector ]) for unitVector in np.eye(3) ]

class AttitudeAnimationWindow(AttitudeRenderer):

    axisColors = [ "red", "green", "blue" ]

    def __init__(self, windowTitle="AE4313", cameraPosition=(80, -80, -80), showWindow=True, cubeSize=50, bodyAxisLength=40, sceneSize=60):
        '''
            Inputs:
                windowTitle:    (str)
                cameraPosition: (3 floats) Camera location in the reference frame, the camera always looks at the origin
                showWindow:     (bool) Set to False to render off-screen (ex. for testing)
                cubeSize:       Edge length of the satellite cube
                bodyAxisLength: Length of the body axes drawn from the satellite's center
                sceneSize:      Half-width of the region displayed, also the length of the reference frame axes
        '''
        self.showWindow = showWindow
        self.closed = False

        self.fig = plt.figure(figsize=(8, 8))
        self.ax = self.fig.add_subplot(111, projection='3d')

        if self.fig.canvas.manager is not None:
            self.fig.canvas.manager.set_window_title(windowTitle)
        self.fig.canvas.mpl_connect('close_event', self._onClose)

        #### Axes / Camera ####
        ax = self.ax
        ax.set_xlim3d([ -sceneSize, sceneSize ])
        ax.set_ylim3d([ -sceneSize, sceneSize ])
        ax.set_zlim3d([ -sceneSize, sceneSize ])
        ax.invert_yaxis()
        ax.invert_zaxis()
        ax.set_xlabel('X')
        ax.set_ylabel('Y')
        ax.set_zlabel('Z')
        elevation, azimuth = cameraViewAngles(cameraPosition)
        ax.view_init(elev=elevation, azim=azimuth)

        #### Reference frame axes ####
        for i, (positiveAxis, negativeAxis) in enumerate(zip(_axisLines(sceneSize), _axisLines(-sceneSize))):
            ax.plot(*positiveAxis.T, color=self.axisColors[i], linewidth=1)
            ax.plot(*negativeAxis.T, color="lightgray", linewidth=1)

        #### Satellite ####
        # Points defined in the body frame, rotated every frame
        self.bodyLinePoints = _cubeEdges(cubeSize/2) + _axisLines(bodyAxisLength)
        bodyLineColors = [ "black" ]*12 + self.axisColors

        self.bodyLines = []
        for points, color in zip(self.bodyLinePoints, bodyLineColors):
            self.bodyLines.append(ax.plot(*points.T, color=color, linewidth=2 if color != "black" else 1)[0])

        #### Text ####
        textProperties = { "family": "monospace", "fontsize": 11, "verticalalignment": "top" }
        self.timeText = self.fig.text(0.03, 0.97, formatTime(0), **textProperties)
        self.attitudeText = self.fig.text(0.03, 0.91, "", **textProperties)
        self.ratesText = self.fig.text(0.03, 0.75, "", **textProperties)

        if showWindow:
            plt.ion()
            plt.show(block=False)

    def _onClose(self, event):
        self.closed = True

    def render(self, renderableAttitude):
        ''' Rotates the satellite to the current attitude, updates the text, and redraws the figure '''
        rotation = renderableAttitude.rotation

        for line, points in zip(self.bodyLines, self.bodyLinePoints):
            rotatedPoints = rotation.apply(points)
            line.set_data(rotatedPoints[:, 0], rotatedPoints[:, 1])
            line.set_3d_properties(rotatedPoints[:, 2])

        self.timeText.set_text(formatTime(renderableAttitude.time))
        self.attitudeText.set_text(formatAttitude(renderableAttitude.rollPitchYaw))
        self.ratesText.set_text(formatRates(renderableAttitude.rates))

        self.fig.canvas.draw_idle()
        self.fig.canvas.flush_events()

    def shouldClose(self):
        return self.closed or not plt.fignum_exists(self.fig.number)

    def close(self):
        if not self.closed:
            self.closed = True
            plt.close(self.fig)
