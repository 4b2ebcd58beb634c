import CoolProp
from .exceptions import CoolPropError
from ..constants import STANDARD_PRESSURE


class Gas:
    """
    Thermophysical properties of a gas at constant pressure as a function of
    its absolute temperature, backed by a CoolProp `AbstractState` object.

    The methods take and return plain floats in SI-units, as they are called
    every substep for every zone and every air inflow.
    """

    def __init__(
        self,
        name: str,
        backend: str = 'HEOS',
        pressure: float = STANDARD_PRESSURE.to('Pa').m
    ) -> None:
        """
        Creates a `Gas`-instance.

        Parameters
        ----------
        name: str
            Name of the gas as known by CoolProp (e.g. 'Air').
        backend: str, default: 'HEOS'
            The backend CoolProp must use to perform state calculations.
        pressure: float, default: 101325.0
            Absolute pressure of the gas in Pa.
        """
        self.name = name
        self.backend = backend
        self.pressure = pressure
        self._state = CoolProp.AbstractState(backend, name)

    @classmethod
    def air(cls) -> 'Gas':
        """Returns dry air at standard atmospheric pressure."""
        return cls('Air')

    def _update(self, T: float) -> None:
        try:
            self._state.update(CoolProp.PT_INPUTS, self.pressure, T)
        except ValueError as err:
            raise CoolPropError(
                f"cannot determine the state of {self.name} "
                f"at T = {T} K: {err}"
            ) from None

    def density(self, T: float) -> float:
        """Returns the mass density (kg/m3) of the gas at absolute
        temperature `T` (K).
        """
        self._update(T)
        return self._state.rhomass()

    def heat_capacity(self, T: float) -> float:
        """Returns the specific heat capacity at constant pressure
        (J/(kg.K)) of the gas at absolute temperature `T` (K).
        """
        self._update(T)
        return self._state.cpmass()

    def __deepcopy__(self, memo):
        # CoolProp's AbstractState cannot be copied: create a new instance with
        # the same attributes.
        return type(self)(self.name, self.backend, self.pressure)
