"""Manage script access to solenoid grid solvers."""
import logging
import os
from pathlib import Path
import time

import click
import numpy as np

from coilfield.biot.error import GridSpecError, SolenoidError
from coilfield.biot.grid import Grid, GridSpec
from coilfield.biot.solenoid import Solenoid


def grid_options(command):
    """Attach grid specification options to command."""
    options = [
        click.option("-r", "rlim", nargs=2, type=float, default=(0.0, 0.24),
                     help="radial limits [m]"),
        click.option("-phi", "philim", nargs=2, type=float, default=None,
                     help="azimuthal limits [rad], default spans one period "
                          "without repeating phi=2pi"),
        click.option("-z", "zlim", nargs=2, type=float, default=(-1.0, 1.0),
                     help="axial limits [m]"),
        click.option("-n", "number", nargs=3, type=int, default=(6, 6, 2000),
                     help="sample number (nr, nphi, nz)"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def build_spec(rlim, philim, zlim, number) -> GridSpec:
    """Return grid specification from command line limits."""
    if philim is None:
        nphi = max(number[1], 1)
        philim = (0.0, 2 * np.pi * (nphi - 1) / nphi)
    try:
        return GridSpec(*rlim, *philim, *zlim, *number)
    except GridSpecError as error:
        raise click.UsageError(str(error)) from error


@click.group(context_settings={"show_default": True, "max_content_width": 160})
@click.option("-rinner", "rinner", type=float, default=0.25,
              help="inner winding radius [m]")
@click.option("-router", "router", type=float, default=0.28,
              help="outer winding radius [m]")
@click.option("-length", "length", type=float, default=1.31,
              help="winding length [m]")
@click.option("-current", "current", type=float, default=200.0,
              help="conductor current [A]")
@click.option("-nturn", "nturn", type=int, default=768,
              help="turns per layer")
@click.option("-nlayer", "nlayer", type=int, default=64,
              help="layer number")
@click.option("-centre", "centre", type=float, default=0.0,
              help="axial centre [m]")
@click.option("-v", "--verbose", count=True, help="increase log level")
@click.version_option(package_name="coilfield", message="%(package)s %(version)s")
@click.pass_context
def coilfield(ctx, rinner, router, length, current, nturn, nlayer, centre,
              verbose):
    """
    Solve the magnetic field of a multi-layer solenoid.

    The default solenoid has 64 layers of 768 turns wound between radii of
    0.25 and 0.28 m over a length of 1.31 m and carries 200 A.
    """
    logging.basicConfig(
        level={0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG),
        force=True,
    )
    try:
        ctx.obj = Solenoid(rinner, router, length, current, nturn, nlayer, centre)
    except SolenoidError as error:
        raise click.UsageError(str(error)) from error


@coilfield.command()
@grid_options
@click.option("-workers", "workers", type=int, default=os.cpu_count() or 1,
              help="worker number")
@click.option("-coordinate", "coordinate", default="polar",
              type=click.Choice(["polar", "cartesian"]),
              help="point representation")
@click.option("-o", "--output", "output", type=click.Path(dir_okay=False),
              default="field.nc", help="netCDF output file")
@click.option("--progress/--no-progress", default=False,
              help="display progress bar")
@click.pass_obj
def solve(solenoid, rlim, philim, zlim, number, workers, coordinate, output,
          progress):
    """
    Solve field over a cylindrical grid and write it to a netCDF file.

    \b
    Examples
    --------
    Solve the default grid with 8 workers.

    >>> coilfield solve -workers 8 -o field.nc
    """
    spec = build_spec(rlim, philim, zlim, number)
    try:
        grid = Grid(solenoid, workers, ordered=True, coordinate=coordinate,
                    progress=progress)
    except GridSpecError as error:
        raise click.UsageError(str(error)) from error
    field = grid.solve(spec)
    Path(output).write_bytes(field.serialize())
    click.echo(f"Wrote {len(field)} points to {output}")


@coilfield.command()
@grid_options
@click.option("-workers", "workers", nargs=2, type=int,
              default=(1, os.cpu_count() or 1),
              help="worker number range (first, last)")
@click.pass_obj
def benchmark(solenoid, rlim, philim, zlim, number, workers):
    """Time grid solves over a range of worker numbers."""
    spec = build_spec(rlim, philim, zlim, number)
    first, last = workers
    if first < 1 or last < first:
        raise click.BadParameter(f"invalid worker range {workers}",
                                 param_hint="-workers")
    for worker_number in range(first, last + 1):
        start_time = time.perf_counter()
        Grid(solenoid, worker_number).solve(spec)
        click.echo(f"Calculating field using {worker_number} workers... "
                   f"Took {time.perf_counter() - start_time:1.3f}s")


if __name__ == "__main__":
    coilfield()
