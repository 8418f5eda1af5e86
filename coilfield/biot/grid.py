"""Solve solenoid fields over cylindrical grids with a bounded worker pool."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import itertools
import logging
from numbers import Integral, Real
import threading
import time
from typing import Iterator

import numpy as np
from tqdm import tqdm
import xarray

from coilfield.biot.coordinate import polar_to_cartesian_coords
from coilfield.biot.error import GridCancelledError, GridSpecError
from coilfield.biot.point import Coordinate, FieldPoint, to_coordinate
from coilfield.biot.solenoid import Solenoid, check_workers

logger = logging.getLogger(__name__)


@dataclass
class GridCoord:
    """
    Manage closed-interval grid coordinate.

    Samples are evenly spaced over [start, stop] with both limits included.
    A single sample is placed at start.
    """

    start: float
    stop: float
    num: int = 1
    name: str = "coord"

    def __post_init__(self):
        """Validate coordinate limits and sample number."""
        for attr in ["start", "stop"]:
            value = getattr(self, attr)
            if not isinstance(value, Real) or not np.isfinite(value):
                raise GridSpecError(f"{self.name} {attr} {value!r} is not finite")
        if isinstance(self.num, bool) or not isinstance(self.num, Integral):
            raise GridSpecError(f"{self.name} sample number {self.num!r} not int")
        if self.num < 1:
            raise GridSpecError(f"{self.name} sample number {self.num} < 1")
        if self.stop < self.start:
            raise GridSpecError(
                f"{self.name} limits inverted ({self.start} > {self.stop})"
            )
        if self.num > 1 and self.stop == self.start:
            raise GridSpecError(
                f"{self.name} limits coincide for {self.num} samples"
            )

    def __len__(self):
        """Return coordinate dimension."""
        return self.num

    def __call__(self):
        """Return coordinate point vector."""
        return np.linspace(self.start, self.stop, self.num)

    @property
    def limit(self):
        """Return coordinate limits."""
        return self.start, self.stop

    @property
    def delta(self):
        """Return sample spacing."""
        if self.num == 1:
            return 0.0
        return (self.stop - self.start) / (self.num - 1)


@dataclass(frozen=True)
class GridSpec:
    """
    Cylindrical sample box in (r, phi, z).

    Each axis holds nr, nphi and nz closed-interval samples so that a grid
    holds exactly nr * nphi * nz points.
    """

    rmin: float
    rmax: float
    phimin: float
    phimax: float
    zmin: float
    zmax: float
    nr: int
    nphi: int
    nz: int

    def __post_init__(self):
        """Validate grid coordinates."""
        if isinstance(self.rmin, Real) and self.rmin < 0:
            raise GridSpecError(f"r minimum {self.rmin} < 0")
        self.coords  # raises GridSpecError

    @classmethod
    def from_dict(cls, data: dict):
        """Return grid specification built from a plain mapping."""
        return cls(**data)

    @property
    def coords(self) -> dict[str, GridCoord]:
        """Return grid coordinates."""
        return {
            "r": GridCoord(self.rmin, self.rmax, self.nr, "r"),
            "phi": GridCoord(self.phimin, self.phimax, self.nphi, "phi"),
            "z": GridCoord(self.zmin, self.zmax, self.nz, "z"),
        }

    @property
    def shape(self) -> tuple[int, int, int]:
        """Return grid shape."""
        return self.nr, self.nphi, self.nz

    def __len__(self):
        """Return grid point number."""
        return self.nr * self.nphi * self.nz

    def points(
        self, coordinate: Coordinate | str = Coordinate.POLAR
    ) -> Iterator[tuple[int, FieldPoint]]:
        """
        Yield enumerated grid points.

        Points are generated lazily in C order (r slowest, z fastest).

        Parameters
        ----------
        coordinate: Coordinate | str, optional
            Point representation. The default is Coordinate.POLAR.

        Yields
        ------
        index: int
            Flat grid index.
        point: FieldPoint
            Point with unset field.

        """
        coordinate = to_coordinate(coordinate)
        axes = [coord() for coord in self.coords.values()]
        for index, (r, phi, z) in enumerate(itertools.product(*axes)):
            match coordinate:
                case Coordinate.POLAR:
                    point = FieldPoint.polar(r, phi, z)
                case Coordinate.CARTESIAN:
                    point = FieldPoint.cartesian(
                        *polar_to_cartesian_coords(r, phi, z)
                    )
            yield index, point


@dataclass
class Field:
    """
    Collection of solved field points.

    Attributes
    ----------
    points: list[FieldPoint]
        Solved points in collection order.
    index: list[int]
        Flat grid index of each point.
    spec: GridSpec | None
        Grid specification used to enumerate the points.
    attrs: dict
        Metadata carried to datasets.

    """

    points: list[FieldPoint] = field(default_factory=list)
    index: list[int] = field(default_factory=list)
    spec: GridSpec | None = None
    attrs: dict = field(default_factory=dict)

    def __post_init__(self):
        """Check point and index alignment."""
        if len(self.points) != len(self.index):
            raise ValueError(
                f"point number {len(self.points)} != "
                f"index number {len(self.index)}"
            )

    def __len__(self):
        """Return point number."""
        return len(self.points)

    def __iter__(self):
        """Iterate over points."""
        return iter(self.points)

    def __getitem__(self, item):
        """Return point(s) from collection order."""
        return self.points[item]

    @property
    def ordered(self) -> bool:
        """Return True when points are in grid enumeration order."""
        return all(a < b for a, b in itertools.pairwise(self.index))

    @property
    def failed(self) -> list[FieldPoint]:
        """Return points whose solve raised an error."""
        return [point for point in self.points if point.failed]

    def sort(self):
        """Return field sorted by grid index."""
        order = np.argsort(self.index, kind="stable")
        return Field(
            [self.points[i] for i in order],
            [self.index[i] for i in order],
            self.spec,
            dict(self.attrs),
        )

    def to_dataset(self) -> xarray.Dataset:
        """
        Return field as an xarray Dataset on dims (r, phi, z).

        Unsolved or failed points are filled with nan.
        """
        if self.spec is None:
            raise ValueError("Field has no grid spec to shape a dataset.")
        shape = self.spec.shape
        data = {
            attr: np.full(shape, np.nan)
            for attr in ["br", "bphi", "bz", "bx", "by", "magnitude"]
        }
        for index, point in zip(self.index, self.points):
            if not point.solved:
                continue
            loc = np.unravel_index(index, shape)
            data["br"][loc], data["bphi"][loc], data["bz"][loc] = point.polar_field
            data["bx"][loc], data["by"][loc], _ = point.cartesian_field
            data["magnitude"][loc] = point.magnitude
        dims = list(self.spec.coords)
        dataset = xarray.Dataset(
            {attr: (dims, value) for attr, value in data.items()},
            coords={name: coord() for name, coord in self.spec.coords.items()},
            attrs=self.attrs,
        )
        for attr in ["br", "bphi", "bz", "bx", "by", "magnitude"]:
            dataset[attr].attrs["units"] = "T"
        for coord, units in zip(dims, ["m", "rad", "m"]):
            dataset[coord].attrs["units"] = units
        return dataset

    def serialize(self) -> bytes:
        """Return field serialized as netCDF3 bytes."""
        return bytes(self.to_dataset().to_netcdf())


def serialize(field: Field) -> bytes:
    """Return field serialized as netCDF3 bytes."""
    return field.serialize()


@dataclass
class Grid:
    """
    Evaluate solenoid field over a grid with a bounded worker pool.

    A producer enumerates grid points lazily onto a bounded queue. Each of
    the workers takes one point at a time, solves it on a dedicated thread
    pool and posts the result to a bounded results queue. A collector drains
    results until every worker has exited.

    Parameters
    ----------
    solenoid: Solenoid
        Field source.
    workers: int, optional
        Number of concurrent point solves. The default is 1.
    ordered: bool, optional
        Return points in grid enumeration order. The default is False.
    maxsize: int | None, optional
        Hand-off queue size. The default is None (2 * workers).
    coordinate: Coordinate | str, optional
        Representation of generated points. The default is Coordinate.POLAR.
    isolate: bool, optional
        Tag failing points and continue instead of aborting the grid.
        The default is False.
    progress: bool, optional
        Display tqdm progress bar. The default is False.

    """

    solenoid: Solenoid
    workers: int = 1
    ordered: bool = False
    maxsize: int | None = None
    coordinate: Coordinate | str = Coordinate.POLAR
    isolate: bool = False
    progress: bool = False

    def __post_init__(self):
        """Validate worker pool configuration."""
        check_workers(self.workers)
        if self.maxsize is None:
            self.maxsize = 2 * self.workers
        if self.maxsize < 1:
            raise GridSpecError(f"queue maxsize {self.maxsize} < 1")
        self.coordinate = to_coordinate(self.coordinate)

    def solve(self, spec: GridSpec, cancel: threading.Event | None = None) -> Field:
        """Return field solved at every point of spec."""
        return asyncio.run(self.async_solve(spec, cancel))

    async def async_solve(
        self, spec: GridSpec, cancel: threading.Event | None = None
    ) -> Field:
        """
        Return field solved at every point of spec.

        Parameters
        ----------
        spec: GridSpec
            Grid specification.
        cancel: threading.Event | None, optional
            Cooperative cancellation flag checked by the producer before each
            point and by each worker between points. The default is None.

        Raises
        ------
        GridCancelledError
            Cancel flag set before every point was solved.

        """
        if cancel is None:
            cancel = threading.Event()
        points = asyncio.Queue(self.maxsize)
        results = asyncio.Queue(self.maxsize)
        logger.info(
            f"Solving {len(spec)} grid points {spec.shape} "
            f"with {self.workers} workers"
        )
        start_time = time.perf_counter()
        with ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="coilfield"
        ) as executor:
            tasks = [asyncio.create_task(self._produce(spec, points, cancel))]
            tasks.extend(
                asyncio.create_task(
                    self._work(worker, executor, points, results, cancel)
                )
                for worker in range(self.workers)
            )
            collector = asyncio.create_task(self._collect(spec, results))
            tasks.append(collector)
            try:
                await asyncio.gather(*tasks)
            except BaseException:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
        result = collector.result()
        if len(result) < len(spec):
            raise GridCancelledError(len(result), len(spec))
        logger.info(
            f"Solved {len(result)} grid points in "
            f"{time.perf_counter() - start_time:1.3f}s"
        )
        return result

    async def _produce(
        self, spec: GridSpec, points: asyncio.Queue, cancel: threading.Event
    ):
        """Publish enumerated points followed by one sentinel per worker."""
        for item in spec.points(self.coordinate):
            if cancel.is_set():
                logger.info(f"Grid producer cancelled at point {item[0]}")
                break
            await points.put(item)
        for _ in range(self.workers):
            await points.put(None)

    async def _work(
        self,
        worker: int,
        executor: ThreadPoolExecutor,
        points: asyncio.Queue,
        results: asyncio.Queue,
        cancel: threading.Event,
    ):
        """Solve points until the producer's sentinel is received."""
        loop = asyncio.get_running_loop()
        number = 0
        while (item := await points.get()) is not None:
            if cancel.is_set():
                continue  # drain
            index, point = item
            try:
                await loop.run_in_executor(executor, self.solenoid.solve, point)
            except Exception as error:
                if not self.isolate:
                    raise
                point.error = error
                logger.warning(f"Grid point {index} {point.position} failed: {error!r}")
            await results.put(item)
            number += 1
        await results.put(None)
        logger.debug(f"Grid worker {worker} exited after {number} points")

    async def _collect(self, spec: GridSpec, results: asyncio.Queue) -> Field:
        """Drain results until every worker has exited."""
        points, index = [], []
        finished = 0
        with tqdm(
            total=len(spec), ncols=65, desc="grid", disable=not self.progress
        ) as progress:
            while finished < self.workers:
                item = await results.get()
                if item is None:
                    finished += 1
                    continue
                index.append(item[0])
                points.append(item[1])
                progress.update()
        result = Field(
            points,
            index,
            spec,
            self.solenoid.to_dict() | {"workers": self.workers},
        )
        if self.ordered:
            return result.sort()
        return result
