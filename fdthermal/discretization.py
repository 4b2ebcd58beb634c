"""
Discretization of layered constructions for one-dimensional transient heat
conduction.

Each layer of a construction is divided into `n` elements of equal thickness
`dx <= max_dx`. Nodes sit on the faces of the construction and on the
boundaries between elements: node 0 is the front face, node `N - 1` the back
face, and a construction with layers of `n_1, n_2, ...` elements has
`N = n_1 + n_2 + ... + 1` nodes. Half of the heat capacity of each element is
lumped in each of its two nodes; the element itself is a conductance `k / dx`
between them. Layers without heat capacity (massless layers) only add
conductances; their nodes are solved as steady-state nodes.

The planner also determines into how many substeps the main timestep must be
divided so that the Fourier number `Fo = alpha * dt / dx ** 2` of every
massive layer stays below the bound of the conduction scheme. For schemes
with an explicit part (theta < 1), the substep is also bounded per node:
`(1 - theta) * dt * sum(g) / C < 1`, where `sum(g)` includes the
conductances of adjacent massless layers, which the Fourier numbers of the
layers do not see.
"""
from __future__ import annotations
import math
import warnings
from enum import Enum
import numpy as np
from .building.construction import Construction
from .exceptions import DiscretizationError, TimestepWarning
from .logging import ModuleLogger

logger = ModuleLogger.get_logger(__name__)
logger.setLevel(ModuleLogger.ERROR)


# volumetric heat capacity (J/(m3.K)) below which a layer is massless
MASSLESS_HEAT_CAPACITY = 1.0


class Scheme(Enum):
    """
    Time integration scheme of the conduction equation (the theta-method).

    EXPLICIT (theta = 0) is only stable for Fourier numbers up to 1/2.
    CRANK_NICOLSON (theta = 1/2) and IMPLICIT (theta = 1, backward Euler) are
    unconditionally stable; their Fourier number is bounded to keep the
    solution accurate.
    """
    EXPLICIT = 'explicit'
    CRANK_NICOLSON = 'crank-nicolson'
    IMPLICIT = 'implicit'

    @property
    def theta(self) -> float:
        match self:
            case Scheme.EXPLICIT:
                return 0.0
            case Scheme.CRANK_NICOLSON:
                return 0.5
            case Scheme.IMPLICIT:
                return 1.0

    @property
    def max_fourier(self) -> float:
        match self:
            case Scheme.EXPLICIT:
                return 0.5
            case Scheme.CRANK_NICOLSON | Scheme.IMPLICIT:
                return 1.0


class Discretization:
    """Spatial grid of a construction and the substep divisor it needs.

    `n_elements` counts the elements of each layer, not its nodes: nodes sit
    on the element boundaries, so the construction has `sum(n_elements) + 1`
    nodes (`n_nodes`), with one node on each face.

    Use `Discretization.create` to plan the discretization of a construction.
    """

    def __init__(self):
        self.construction_ID: str = ''
        self.scheme: Scheme = Scheme.IMPLICIT
        self.main_dt: float = 0.0
        self.n_elements: list[int] = []
        self.dx: list[float] = []
        self.massive: list[bool] = []
        self.diffusivity: list[float] = []
        self.tstep_subdivision: int = 1
        self.node_capacitance: np.ndarray = np.zeros(0)
        self.conductance: np.ndarray = np.zeros(0)

    @classmethod
    def create(
        cls,
        construction: Construction,
        main_dt: float,
        max_dx: float = 0.04,
        min_dt: float = 60.0,
        scheme: Scheme = Scheme.IMPLICIT,
        max_fourier: float | None = None
    ) -> Discretization:
        """
        Plans the discretization of `construction`.

        Parameters
        ----------
        construction:
            Layered construction, from front to back.
        main_dt:
            Main timestep of the simulation in seconds.
        max_dx:
            Maximum thickness of an element in m.
        min_dt:
            Preferred minimum substep in seconds. When stability requires a
            shorter substep, a `TimestepWarning` is issued and the shorter
            substep is used anyway.
        scheme:
            Conduction scheme the surfaces will be solved with.
        max_fourier: optional
            Bound on the Fourier number of the massive layers; by default the
            bound of `scheme`.

        Raises
        ------
        DiscretizationError
            If the construction has no layers or a layer has invalid
            properties.
        """
        if not construction.layers:
            raise DiscretizationError(f"construction '{construction.ID}' has no layers")
        if not (main_dt > 0.0 and max_dx > 0.0):
            raise ValueError('`main_dt` and `max_dx` must be positive')

        disc = cls()
        disc.construction_ID = construction.ID
        disc.scheme = scheme
        disc.main_dt = main_dt
        for layer in construction.layers:
            t, k, rho, c = cls._layer_properties(construction, layer)
            n = max(1, math.ceil(round(t / max_dx, 9)))
            while t / n > max_dx:
                n += 1
            dx = t / n
            massive = rho * c >= MASSLESS_HEAT_CAPACITY
            disc.n_elements.append(n)
            disc.dx.append(dx)
            disc.massive.append(massive)
            disc.diffusivity.append(k / (rho * c) if massive else 0.0)
        disc._build_network(construction)

        limit = max_fourier if max_fourier is not None else scheme.max_fourier
        disc.tstep_subdivision = disc._find_subdivision(limit)
        dt = main_dt / disc.tstep_subdivision
        if dt < min_dt:
            warnings.warn(
                f"construction '{construction.ID}' needs a substep of "
                f"{dt:.2f} s to keep Fo < {limit}, which is less than the "
                f"minimum substep of {min_dt:.2f} s",
                category=TimestepWarning
            )
        logger.debug(
            f"construction '{construction.ID}': "
            f"elements per layer = {disc.n_elements}, "
            f"tstep_subdivision = {disc.tstep_subdivision}"
        )
        return disc

    @staticmethod
    def _layer_properties(construction: Construction, layer) -> tuple[float, float, float, float]:
        t = layer.t.to('m').m
        k = layer.material.k.to('W / (m * K)').m
        rho = layer.material.rho.to('kg / m ** 3').m
        c = layer.material.c.to('J / (kg * K)').m
        if not all(math.isfinite(v) for v in (t, k, rho, c)):
            raise DiscretizationError(
                f"layer '{layer.ID}' of construction '{construction.ID}' "
                f"has non-finite properties"
            )
        if t <= 0.0 or k <= 0.0:
            raise DiscretizationError(
                f"layer '{layer.ID}' of construction '{construction.ID}' "
                f"must have a positive thickness and conductivity"
            )
        if rho < 0.0 or c < 0.0:
            raise DiscretizationError(
                f"layer '{layer.ID}' of construction '{construction.ID}' "
                f"has a negative density or specific heat"
            )
        return t, k, rho, c

    def _build_network(self, construction: Construction) -> None:
        N = sum(self.n_elements) + 1
        C = np.zeros(N)
        g = np.zeros(N - 1)
        i = 0
        for layer, n, dx, massive in zip(construction.layers, self.n_elements, self.dx, self.massive):
            m = layer.material
            c_elem = m.rho.to('kg / m ** 3').m * m.c.to('J / (kg * K)').m * dx if massive else 0.0
            g_elem = m.k.to('W / (m * K)').m / dx
            for _ in range(n):
                C[i] += c_elem / 2
                C[i + 1] += c_elem / 2
                g[i] = g_elem
                i += 1
        self.node_capacitance = C
        self.conductance = g

    def _node_rates(self) -> np.ndarray:
        """Returns `(1 - theta) * sum(g) / C` (1/s) of each node with heat
        capacity. The explicit part of the node equation keeps a positive
        weight on the node's own temperature only while `dt` times this rate
        stays below 1.
        """
        w = 1.0 - self.scheme.theta
        if w == 0.0:
            return np.zeros(0)
        g = np.concatenate(([0.0], self.conductance)) + np.concatenate((self.conductance, [0.0]))
        massive = self.node_capacitance > 0.0
        return w * g[massive] / self.node_capacitance[massive]

    def _find_subdivision(self, limit: float) -> int:
        rates = [a / dx ** 2 / limit for a, dx in zip(self.diffusivity, self.dx) if a > 0.0]
        rates.extend(self._node_rates())
        if not rates:
            return 1
        s = max(1, math.floor(self.main_dt * max(rates)) + 1)
        while not self._is_admissible(self.main_dt / s, limit):
            s += 1
        return s

    def _is_admissible(self, dt: float, limit: float) -> bool:
        return bool(
            np.all(self.fourier_numbers(dt) < limit)
            and np.all(dt * self._node_rates() < 1.0)
        )

    @property
    def n_nodes(self) -> int:
        return len(self.node_capacitance)

    @property
    def is_massive(self) -> bool:
        return any(self.massive)

    def fourier_numbers(self, dt: float) -> np.ndarray:
        """Fourier number of each layer at substep `dt`; zero for massless
        layers."""
        return np.array([a * dt / dx ** 2 for a, dx in zip(self.diffusivity, self.dx)])

    def r_value(self) -> float:
        """Thermal resistance (m2.K/W) between the front and back face."""
        return float(np.sum(1.0 / self.conductance))
