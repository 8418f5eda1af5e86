"""Closed-form Biot-Savart solvers for loops, solenoids and grids."""
__all__ = [
    "Coordinate",
    "Field",
    "FieldPoint",
    "Grid",
    "GridCoord",
    "GridSpec",
    "Solenoid",
    "loop_field_cartesian",
    "loop_field_polar",
    "mu_0",
    "serialize",
]

from coilfield.biot.grid import Field, Grid, GridCoord, GridSpec, serialize
from coilfield.biot.loop import loop_field_cartesian, loop_field_polar, mu_0
from coilfield.biot.point import Coordinate, FieldPoint
from coilfield.biot.solenoid import Solenoid
