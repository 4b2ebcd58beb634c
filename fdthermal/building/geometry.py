from __future__ import annotations
import math
import numpy as np


class Loop3D:
    """A closed, planar loop of vertices in 3D space (x east, y north,
    z up). The orientation of the vertices determines the normal by the
    right-hand rule.
    """

    def __init__(self, vertices) -> None:
        vertices = np.asarray(vertices, dtype=float)
        if vertices.ndim != 2 or vertices.shape[1] != 3 or len(vertices) < 3:
            raise ValueError('a loop needs at least 3 vertices with 3 coordinates each')
        self.vertices = vertices

    def _newell_vector(self) -> np.ndarray:
        # twice the vector area of the loop
        nxt = np.roll(self.vertices, -1, axis=0)
        return np.sum(np.cross(self.vertices, nxt), axis=0)

    @property
    def area(self) -> float:
        return 0.5 * float(np.linalg.norm(self._newell_vector()))

    def normal(self) -> np.ndarray:
        """Returns the unit normal of the loop."""
        n = self._newell_vector()
        norm = np.linalg.norm(n)
        if norm == 0.0:
            raise ValueError('degenerate loop has no normal')
        return n / norm

    def perimeter(self) -> float:
        nxt = np.roll(self.vertices, -1, axis=0)
        return float(np.sum(np.linalg.norm(nxt - self.vertices, axis=1)))


class Polygon3D:
    """A planar polygon with an outer loop and optional holes (e.g. the
    openings of the windows in a wall).
    """

    def __init__(self, outer: Loop3D, holes: list[Loop3D] | None = None) -> None:
        self._outer = outer
        self.holes = holes or []

    @classmethod
    def from_vertices(cls, vertices, holes=None) -> Polygon3D:
        holes = [Loop3D(hole) for hole in holes or []]
        return cls(Loop3D(vertices), holes)

    @classmethod
    def vertical_rectangle(
        cls,
        width: float,
        height: float,
        azimuth: float = 180.0,
        origin: tuple[float, float, float] = (0.0, 0.0, 0.0)
    ) -> Polygon3D:
        """
        Returns a vertical rectangle whose normal points to `azimuth`.

        Parameters
        ----------
        width, height:
            Dimensions of the rectangle in m.
        azimuth:
            Compass direction of the normal in degrees (0 north, 90 east,
            180 south, 270 west).
        origin:
            Lower left corner, seen from the side the normal points to.
        """
        a = math.radians(azimuth)
        # direction along the width, such that width x up = normal
        u = np.array([-math.cos(a), math.sin(a), 0.0])
        up = np.array([0.0, 0.0, 1.0])
        o = np.asarray(origin, dtype=float)
        vertices = [o, o + width * u, o + width * u + height * up, o + height * up]
        return cls(Loop3D(vertices))

    def outer(self) -> Loop3D:
        return self._outer

    @property
    def area(self) -> float:
        """Net area: the area of the outer loop minus the area of the holes."""
        return self._outer.area - sum(hole.area for hole in self.holes)

    def normal(self) -> np.ndarray:
        return self._outer.normal()

    @property
    def cos_tilt(self) -> float:
        """Cosine of the angle between the normal and the zenith (1 for a
        surface that faces up).
        """
        return float(self.normal()[2])

    @property
    def azimuth(self) -> float:
        """Compass direction (degrees, clockwise from north) of the normal."""
        n = self.normal()
        return math.degrees(math.atan2(n[0], n[1])) % 360.0
