"""Sum closed-form loop fields over every winding of a multi-layer solenoid."""

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import asdict, dataclass
import logging
from numbers import Integral, Real

import numba
import numpy as np

from coilfield.biot.error import SolenoidError, WorkerError
from coilfield.biot.loop import loop_field_cartesian, loop_field_polar
from coilfield.biot.point import Coordinate, FieldPoint

logger = logging.getLogger(__name__)


@numba.njit(nogil=True, error_model="numpy")
def polar_partials(current, radii, r, z, z_start, pitch, nturn):
    """
    Return per-layer field sums (Br, Bphi, Bz) at a polar point.

    Turns are accumulated in ascending order within each layer. Each row of
    the returned array depends only on its layer radius.
    """
    partials = np.zeros((len(radii), 3))
    for j in range(len(radii)):
        for i in range(nturn):
            br, bphi, bz = loop_field_polar(
                current, radii[j], r, z - (z_start + i * pitch)
            )
            partials[j, 0] += br
            partials[j, 1] += bphi
            partials[j, 2] += bz
    return partials


@numba.njit(nogil=True, error_model="numpy")
def cartesian_partials(current, radii, x, y, z, z_start, pitch, nturn):
    """Return per-layer field sums (Bx, By, Bz) at a cartesian point."""
    partials = np.zeros((len(radii), 3))
    for j in range(len(radii)):
        for i in range(nturn):
            bx, by, bz = loop_field_cartesian(
                current, radii[j], x, y, z - (z_start + i * pitch)
            )
            partials[j, 0] += bx
            partials[j, 1] += by
            partials[j, 2] += bz
    return partials


def check_workers(workers):
    """Raise WorkerError unless workers is a positive integer."""
    if isinstance(workers, bool) or not isinstance(workers, Integral) or workers < 1:
        raise WorkerError(workers)


def reduce_partials(partials: np.ndarray) -> tuple[float, float, float]:
    """Return sum of per-layer partials folded in ascending layer order."""
    total = [0.0, 0.0, 0.0]
    for partial in partials:
        for i in range(3):
            total[i] += float(partial[i])
    return tuple(total)


@dataclass(frozen=True)
class Solenoid:
    """
    Tightly wound multi-layer solenoid with its axis on z.

    Parameters
    ----------
    rinner: float
        Inner winding radius [m].
    router: float
        Outer winding radius [m].
    length: float
        Axial winding length [m].
    current: float
        Conductor current [A].
    nturn: int
        Number of turns per layer.
    nlayer: int
        Number of concentric layers.
    centre: float, optional
        Axial position of the solenoid centre [m]. The default is 0.

    Raises
    ------
    SolenoidError
        Non-positive radii, length, turn or layer numbers, inverted radii or
        non-finite current.

    """

    rinner: float
    router: float
    length: float
    current: float
    nturn: int
    nlayer: int
    centre: float = 0.0

    def __post_init__(self):
        """Validate winding geometry."""
        for attr in ["rinner", "router", "length"]:
            value = getattr(self, attr)
            if not isinstance(value, Real) or not np.isfinite(value):
                raise SolenoidError(attr, value, "expected a finite number")
            if value <= 0:
                raise SolenoidError(attr, value, "must be strictly positive")
        for attr in ["current", "centre"]:
            value = getattr(self, attr)
            if not isinstance(value, Real) or not np.isfinite(value):
                raise SolenoidError(attr, value, "expected a finite number")
        for attr in ["nturn", "nlayer"]:
            value = getattr(self, attr)
            if isinstance(value, bool) or not isinstance(value, Integral):
                raise SolenoidError(attr, value, "expected an integer")
            if value < 1:
                raise SolenoidError(attr, value, "must be strictly positive")
        if self.router < self.rinner:
            raise SolenoidError(
                "router", self.router, f"less than rinner={self.rinner}"
            )

    @classmethod
    def from_dict(cls, data: dict):
        """Return solenoid built from a plain mapping."""
        return cls(**data)

    def to_dict(self) -> dict:
        """Return solenoid attributes as a plain dict."""
        return asdict(self)

    @property
    def pitch(self) -> float:
        """Return axial separation between adjacent turns."""
        return self.length / self.nturn

    @property
    def layer_separation(self) -> float:
        """Return radial separation between adjacent layers."""
        return (self.router - self.rinner) / self.nlayer

    @property
    def z_start(self) -> float:
        """Return axial position of the first turn."""
        return self.centre - self.length / 2

    @property
    def radii(self) -> np.ndarray:
        """Return layer radii, offset half a layer from the inner radius."""
        return self.rinner + (np.arange(self.nlayer) + 0.5) * self.layer_separation

    @property
    def offsets(self) -> np.ndarray:
        """Return axial turn positions."""
        return self.z_start + np.arange(self.nturn) * self.pitch

    @property
    def loop_number(self) -> int:
        """Return total number of current loops."""
        return self.nturn * self.nlayer

    def _kernel(self, point: FieldPoint):
        """Return partial kernel and its point coordinates."""
        match point.coordinate:
            case Coordinate.POLAR:
                r, _, z = point.position
                return polar_partials, (r, z)
            case Coordinate.CARTESIAN:
                return cartesian_partials, point.position

    def _batch(self, kernel, coords, radii):
        return kernel(
            self.current, radii, *coords, self.z_start, self.pitch, self.nturn
        )

    def partials(
        self, point: FieldPoint, workers: int = 1, executor: Executor | None = None
    ) -> np.ndarray:
        """
        Return per-layer field sums at point, shape (nlayer, 3).

        Parameters
        ----------
        point: FieldPoint
            Evaluation point. Components are returned in the point's own
            coordinate system.
        workers: int, optional
            Number of contiguous layer batches evaluated concurrently.
            The default is 1 (sequential).
        executor: Executor | None, optional
            Executor used for layer batches. A bounded thread pool sized to
            workers is created when None and workers > 1.

        Raises
        ------
        WorkerError
            workers is not a positive integer.

        """
        check_workers(workers)
        kernel, coords = self._kernel(point)
        radii = self.radii
        if workers == 1 and executor is None:
            return self._batch(kernel, coords, radii)
        batches = [
            batch
            for batch in np.array_split(np.arange(self.nlayer), workers)
            if len(batch) > 0
        ]
        logger.debug(
            f"Solenoid layers split into {len(batches)} batches "
            f"for {point.coordinate.value} point {point.position}"
        )
        partials = np.zeros((self.nlayer, 3))

        def solve_batch(batch):
            partials[batch] = self._batch(kernel, coords, radii[batch])

        if executor is None:
            with ThreadPoolExecutor(max_workers=len(batches)) as pool:
                list(pool.map(solve_batch, batches))
        else:
            list(executor.map(solve_batch, batches))
        return partials

    def field(
        self, point: FieldPoint, workers: int = 1, executor: Executor | None = None
    ) -> tuple[float, float, float]:
        """Return field components at point in the point's coordinate system."""
        return reduce_partials(self.partials(point, workers, executor))

    def solve(
        self, point: FieldPoint, workers: int = 1, executor: Executor | None = None
    ) -> FieldPoint:
        """Write solenoid field into point and return point."""
        point.set_field(self.field(point, workers, executor))
        return point
