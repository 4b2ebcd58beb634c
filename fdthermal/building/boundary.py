"""
What lies on the other side of a face of a surface.

A face either borders the outdoor air, the air of one of the spaces in the
building, or the ground. A surface without a boundary on one of its faces is
taken to border the outdoor air on that face.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Outdoor:
    pass


@dataclass(frozen=True)
class AnotherZone:
    space_index: int


@dataclass(frozen=True)
class Ground:
    pass


Boundary = Outdoor | AnotherZone | Ground
