"""Manage field points expressed in polar or cartesian coordinates."""

import dataclasses
from dataclasses import dataclass
from enum import Enum

import numpy as np

from coilfield.biot.coordinate import (
    cartesian_to_polar_coords,
    cartesian_to_polar_field,
    polar_to_cartesian_coords,
    polar_to_cartesian_field,
)
from coilfield.biot.error import CoordinateError, FieldStateError


class Coordinate(Enum):
    """Closed set of point representations."""

    POLAR = "polar"
    CARTESIAN = "cartesian"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        return None


Vector = tuple[float, float, float]


def to_coordinate(coordinate) -> Coordinate:
    """Return Coordinate member, raise CoordinateError when unsupported."""
    try:
        return Coordinate(coordinate)
    except ValueError:
        raise CoordinateError(
            f"Unsupported point coordinate {coordinate!r}, "
            f"expected one of {[member.value for member in Coordinate]}"
        ) from None


@dataclass
class FieldPoint:
    """
    Position and magnetic field vector in a single coordinate system.

    Both the position and the field are stored in the point's own coordinate
    system. Reads in the other system transform on the fly. The field is
    written exactly once.

    Parameters
    ----------
    position: tuple[float, float, float]
        (r, phi, z) for polar points, (x, y, z) for cartesian points.
    coordinate: Coordinate | str, optional
        Point representation. The default is Coordinate.POLAR.

    Raises
    ------
    CoordinateError
        Unsupported coordinate or malformed position.

    """

    position: Vector
    coordinate: Coordinate = Coordinate.POLAR
    error: Exception | None = dataclasses.field(init=False, default=None)
    _field: Vector | None = dataclasses.field(init=False, repr=False, default=None)

    def __post_init__(self):
        """Validate point representation."""
        self.coordinate = to_coordinate(self.coordinate)
        try:
            position = tuple(float(value) for value in self.position)
        except (TypeError, ValueError):
            raise CoordinateError(
                f"Point position {self.position!r} is not numeric"
            ) from None
        if len(position) != 3 or not np.all(np.isfinite(position)):
            raise CoordinateError(
                f"Point position {self.position!r} must hold three finite values"
            )
        self.position = position

    @classmethod
    def polar(cls, r, phi, z):
        """Return point located at cylindrical coordinates (r, phi, z)."""
        return cls((r, phi, z), Coordinate.POLAR)

    @classmethod
    def cartesian(cls, x, y, z):
        """Return point located at cartesian coordinates (x, y, z)."""
        return cls((x, y, z), Coordinate.CARTESIAN)

    @property
    def phi(self) -> float:
        """Return azimuth, recomputed from the current position."""
        match self.coordinate:
            case Coordinate.POLAR:
                return self.position[1]
            case Coordinate.CARTESIAN:
                return float(np.arctan2(self.position[1], self.position[0]))

    @property
    def polar_position(self) -> Vector:
        """Return cylindrical coordinates (r, phi, z)."""
        match self.coordinate:
            case Coordinate.POLAR:
                return self.position
            case Coordinate.CARTESIAN:
                return tuple(map(float, cartesian_to_polar_coords(*self.position)))

    @property
    def cartesian_position(self) -> Vector:
        """Return cartesian coordinates (x, y, z)."""
        match self.coordinate:
            case Coordinate.POLAR:
                return tuple(map(float, polar_to_cartesian_coords(*self.position)))
            case Coordinate.CARTESIAN:
                return self.position

    @property
    def solved(self) -> bool:
        """Return True once the field vector has been written."""
        return self._field is not None

    @property
    def failed(self) -> bool:
        """Return True when the field solve recorded an error."""
        return self.error is not None

    @property
    def field(self) -> Vector:
        """Return field vector in the point's own coordinate system."""
        if self._field is None:
            raise FieldStateError(self, "Field is unset")
        return self._field

    @property
    def polar_field(self) -> Vector:
        """Return cylindrical field components (Br, Bphi, Bz)."""
        match self.coordinate:
            case Coordinate.POLAR:
                return self.field
            case Coordinate.CARTESIAN:
                return tuple(
                    map(float, cartesian_to_polar_field(*self.field, self.phi))
                )

    @property
    def cartesian_field(self) -> Vector:
        """Return cartesian field components (Bx, By, Bz)."""
        match self.coordinate:
            case Coordinate.POLAR:
                return tuple(
                    map(float, polar_to_cartesian_field(*self.field, self.phi))
                )
            case Coordinate.CARTESIAN:
                return self.field

    def set_field(self, components):
        """Write field components expressed in the point's coordinate system."""
        if self._field is not None:
            raise FieldStateError(self, "Field has already been set")
        components = tuple(float(value) for value in components)
        if len(components) != 3:
            raise ValueError(f"Field vector {components} must have length 3.")
        self._field = components

    def set_polar_field(self, br, bphi, bz):
        """Write field from cylindrical components."""
        match self.coordinate:
            case Coordinate.POLAR:
                self.set_field((br, bphi, bz))
            case Coordinate.CARTESIAN:
                self.set_field(polar_to_cartesian_field(br, bphi, bz, self.phi))

    def set_cartesian_field(self, bx, by, bz):
        """Write field from cartesian components."""
        match self.coordinate:
            case Coordinate.POLAR:
                self.set_field(cartesian_to_polar_field(bx, by, bz, self.phi))
            case Coordinate.CARTESIAN:
                self.set_field((bx, by, bz))

    @property
    def magnitude(self) -> float:
        """Return field magnitude |B|."""
        return float(np.linalg.norm(self.field))
