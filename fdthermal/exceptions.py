class ThermalModelError(Exception):
    """Base class of the errors raised while building or marching a thermal
    model.
    """
    pass


class DiscretizationError(ThermalModelError):
    """A construction cannot be discretized: it has no layers, or one of its
    layers has a non-positive thickness or conductivity, or a negative or
    non-finite density or specific heat.
    """
    pass


class MissingWeatherError(ThermalModelError):
    """The weather provider did not return a required field (the outdoor
    dry-bulb temperature) for the current substep.
    """
    pass


class UnsupportedBoundaryError(ThermalModelError):
    """A surface face borders the ground. Heat transfer to the ground is not
    calculated.
    """
    pass


class SolverError(ThermalModelError):
    """A node or zone temperature became non-finite, or the linear system of
    a surface could not be solved.
    """
    pass


class OutOfBoundsError(ThermalModelError):
    """An index refers to a zone, surface, fenestration or space that does
    not exist.
    """
    pass


class InvariantViolationError(ThermalModelError):
    """A slot of the simulation state does not hold the kind of element that
    the reader expected, which means that a collaborator was wired to the
    wrong index.
    """
    pass


class ThermalModelWarning(Warning):
    pass


class TimestepWarning(ThermalModelWarning):
    """The main timestep is coarse, or stability forced a substep below the
    requested minimum substep.
    """
    pass
