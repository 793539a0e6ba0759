import cv2
import numpy as np

from surface_navigator.mapping.surface_cache import SurfaceSnapshot
from surface_navigator.planners.distance_field import DistanceField


class FieldVisualizerCV:
    """
    Quick & dirty OpenCV-based top-down view of the ground surface and its
    distance field, for debugging.
    """

    def __init__(self, scale: int = 8, window_name: str = "Distance Field Debug View"):
        """
        scale: pixels per voxel
        """
        self.scale = scale
        self.window_name = window_name
        self._surface: SurfaceSnapshot = None
        self._field: DistanceField = None
        self._origin = np.zeros(2)
        self._shape = (1, 1)

    def update(self, surface: SurfaceSnapshot, field: DistanceField = None):
        self._surface = surface
        self._field = field

        points = np.vstack([surface.ground_points[:, :2], surface.obstacle_points[:, :2]])
        if len(points) == 0:
            self._origin = np.zeros(2)
            self._shape = (1, 1)
            return

        self._origin = points.min(axis=0)
        extent = np.rint((points.max(axis=0) - self._origin) / surface.resolution).astype(int) + 1
        self._shape = (int(extent[1]), int(extent[0]))  # (rows=y, cols=x)

    def _make_canvas(self):
        """
        Convert the surface to a BGR image.
        """
        h, w = self._shape
        img = np.full((h, w, 3), 64, dtype=np.uint8)   # unknown / not ground = dark grey

        if self._surface is not None:
            ground_rc = self._to_cells(self._surface.ground_points)
            if self._field is not None and len(ground_rc) > 0:
                # Near goal = blue, far = red
                values = np.clip(self._field.normalized * 255.0, 0, 255).astype(np.uint8)
                colors = cv2.applyColorMap(values.reshape(-1, 1), cv2.COLORMAP_JET).reshape(-1, 3)
                img[ground_rc[:, 0], ground_rc[:, 1]] = colors
            elif len(ground_rc) > 0:
                img[ground_rc[:, 0], ground_rc[:, 1]] = (255, 255, 255)

            obstacle_rc = self._to_cells(self._surface.obstacle_points)
            if len(obstacle_rc) > 0:
                img[obstacle_rc[:, 0], obstacle_rc[:, 1]] = (0, 0, 0)

        # Upscale for visibility, flip so +y points up
        img = cv2.resize(
            img,
            (w * self.scale, h * self.scale),
            interpolation=cv2.INTER_NEAREST
        )
        return np.ascontiguousarray(img[::-1])

    def render(self, path=None, robot=None, goal=None, target=None):
        """
        path:   list of (x, y, ...) world points
        robot, goal, target: (x, y, ...) world points
        """
        img = self._make_canvas()

        if path and len(path) > 1:
            for i in range(1, len(path)):
                cv2.line(img, self._world_to_px(path[i - 1]), self._world_to_px(path[i]), (255, 255, 0), thickness=2)

        radius = max(1, self.scale // 2)
        if robot is not None:
            cv2.circle(img, self._world_to_px(robot), radius, (0, 255, 0), -1)
        if goal is not None:
            cv2.circle(img, self._world_to_px(goal), radius, (0, 0, 255), -1)
        if target is not None:
            cv2.circle(img, self._world_to_px(target), radius, (255, 0, 255), -1)

        return img

    def show(self, wait=True, **kwargs):
        cv2.namedWindow(self.window_name, cv2.WINDOW_NORMAL)
        cv2.imshow(self.window_name, self.render(**kwargs))
        cv2.waitKey(0 if wait else 1)

    def _to_cells(self, points):
        if len(points) == 0:
            return np.empty((0, 2), dtype=int)
        cells = np.rint((points[:, :2] - self._origin) / self._surface.resolution).astype(int)
        cells[:, 0] = np.clip(cells[:, 0], 0, self._shape[1] - 1)
        cells[:, 1] = np.clip(cells[:, 1], 0, self._shape[0] - 1)
        return cells[:, ::-1]  # (row, col)

    def _world_to_px(self, point):
        res = self._surface.resolution if self._surface is not None else 1.0
        c = (point[0] - self._origin[0]) / res
        r = (point[1] - self._origin[1]) / res
        x = int(c * self.scale + self.scale // 2)
        y = int((self._shape[0] - r) * self.scale - self.scale // 2)
        return (x, y)
