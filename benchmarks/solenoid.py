"""Benchmark solenoid field solvers."""
import timeit

from coilfield.biot.grid import Grid, GridSpec
from coilfield.biot.loop import loop_field_polar
from coilfield.biot.point import FieldPoint
from coilfield.biot.solenoid import Solenoid


class Winding:
    """Benchmark solenoid methods - winding base class."""

    timer = timeit.default_timer

    def setup(self, *args):
        """Build reference solenoid and compile field kernels."""
        self.solenoid = Solenoid(0.25, 0.28, 1.31, 200.0, 768, 64, 0.0)
        self.solenoid.field(FieldPoint.polar(0.1, 0, 0.2))
        self.solenoid.field(FieldPoint.cartesian(0.1, 0, 0.2))


class Loop(Winding):
    """Time single loop evaluation."""

    number = 5000

    def time_loop_field(self):
        """Time closed-form loop field."""
        loop_field_polar(200.0, 0.25, 0.1, 0.2)


class Layers(Winding):
    """Time parallel layer sums at a single point."""

    params = [1, 2, 4, 8]
    param_names = ["workers"]

    def time_polar_field(self, workers):
        """Time solenoid field at a polar point."""
        self.solenoid.field(FieldPoint.polar(0.1, 0, 0.2), workers)

    def time_cartesian_field(self, workers):
        """Time solenoid field at a cartesian point."""
        self.solenoid.field(FieldPoint.cartesian(0.1, 0, 0.2), workers)


class GridSolve(Winding):
    """Time grid solves with a bounded worker pool."""

    params = [1, 2, 4, 8]
    param_names = ["workers"]
    timeout = 600

    def setup(self, workers):
        """Build reference solenoid and grid specification."""
        super().setup()
        self.spec = GridSpec(0, 0.24, 0, 0, -1, 1, 6, 1, 200)

    def time_grid(self, workers):
        """Time grid solve."""
        Grid(self.solenoid, workers).solve(self.spec)
