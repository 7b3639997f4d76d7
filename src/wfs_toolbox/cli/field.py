"""Command-line tool for simulating 2.5D WFS wave fields.

The wfs-field CLI tool computes the impulse response wave field of a
loudspeaker array for one virtual source and time instant, prints a summary
and optionally saves a figure of the field.
"""

import sys
import time
from pathlib import Path

import click
import numpy as np
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from wfs_toolbox import __version__
from wfs_toolbox.config import (
    FRACDELAY_METHODS,
    GEOMETRIES,
    SecondarySourceConfig,
    WFSConfig,
)
from wfs_toolbox.core.simulation import WaveField, wave_field_imp_wfs_25d
from wfs_toolbox.errors import WFSError
from wfs_toolbox.sources import SourceType, virtual_source

console = Console()


def format_time(seconds: float) -> str:
    """Format a runtime for display, e.g. "850 ms" or "2.4 s"."""
    if seconds < 1:
        return f"{seconds * 1e3:.0f} ms"
    return f"{seconds:.1f} s"


def print_field_info(
    console: Console, conf: WFSConfig, source, field: WaveField, runtime: float
):
    """Print a summary of a simulated wave field.

    Args:
        console: Rich console instance
        conf: Configuration used for the simulation
        source: Virtual source
        field: Result of wave_field_imp_wfs_25d
        runtime: Computation time in seconds
    """
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Source", repr(source))
    array = conf.secondary_sources
    table.add_row("Array", f"{array.geometry}, dx0 = {array.dx0:g} m")
    table.add_row("Active loudspeakers", str(len(field.x0)))
    table.add_row(
        "Grid",
        f"{len(field.x)} × {len(field.y)} "
        f"([{field.x[0]:g}, {field.x[-1]:g}] × [{field.y[0]:g}, {field.y[-1]:g}] m)",
    )
    finite = field.p[np.isfinite(field.p)]
    peak = np.max(np.abs(finite), initial=0.0)
    table.add_row("Peak |p|", f"{peak:.3g}")
    table.add_row("Runtime", format_time(runtime))

    console.print(table)
    console.print()


@click.command()
@click.option(
    "--source-type",
    "-s",
    type=click.Choice([t.value for t in SourceType]),
    default="ps",
    help="Virtual source: plane wave, point source or focused source (default: ps)",
)
@click.option(
    "--xs",
    type=float,
    nargs=3,
    default=(0.0, 1.0, 0.0),
    help="Source position, or propagation direction for plane waves (default: 0 1 0)",
)
@click.option(
    "--time", "-t", "t", type=float, default=200.0, help="Time instant in samples"
)
@click.option(
    "--array-length",
    "-L",
    type=float,
    default=3.0,
    help="Array length, or diameter/edge length for circle/box arrays (m)",
)
@click.option(
    "--geometry",
    type=click.Choice(GEOMETRIES),
    default="linear",
    help="Array geometry (default: linear)",
)
@click.option("--dx0", type=float, default=0.15, help="Loudspeaker spacing (m)")
@click.option("--fs", type=int, default=44100, help="Sampling rate (Hz)")
@click.option("--c", "c", type=float, default=343.0, help="Speed of sound (m/s)")
@click.option(
    "--xref",
    type=float,
    nargs=3,
    default=(0.0, -2.0, 0.0),
    help="Reference point of the 2.5D amplitude correction (default: 0 -2 0)",
)
@click.option(
    "--usehpre/--no-usehpre",
    default=False,
    help="Apply the WFS pre-equalization filter",
)
@click.option(
    "--fracdelay",
    type=click.Choice(FRACDELAY_METHODS),
    default="integer",
    help="Delay line interpolation (default: integer)",
)
@click.option(
    "--resolution", "-r", type=int, default=200, help="Grid points per axis"
)
@click.option(
    "--x-extent",
    "-X",
    type=float,
    nargs=2,
    default=(-2.0, 2.0),
    help="x axis limits XMIN XMAX (m)",
)
@click.option(
    "--y-extent",
    "-Y",
    type=float,
    nargs=2,
    default=(-3.0, 0.15),
    help="y axis limits YMIN YMAX (m)",
)
@click.option("--threads", type=int, help="Threads for the driving signals")
@click.option(
    "--plot",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Save a figure of the wave field to this file",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output with debug info")
@click.version_option(version=__version__, prog_name="wfs-field")
def main(
    source_type: str,
    xs: tuple[float, float, float],
    t: float,
    array_length: float,
    geometry: str,
    dx0: float,
    fs: int,
    c: float,
    xref: tuple[float, float, float],
    usehpre: bool,
    fracdelay: str,
    resolution: int,
    x_extent: tuple[float, float],
    y_extent: tuple[float, float],
    threads: int | None,
    plot: Path | None,
    verbose: bool,
):
    """Simulate the wave field of a 2.5D WFS loudspeaker array.

    Computes the sound pressure in the z = 0 plane at time TIME (in samples,
    counted from the moment the first active loudspeaker emits) for one
    virtual source.

    Example:

    \b
        wfs-field --source-type fs --xs 0 -1 0 --time 250
        wfs-field -s pw --xs 0.5 -1 0 --geometry circle -L 3 --plot pw.png
    """
    try:
        conf = WFSConfig(
            fs=fs,
            c=c,
            xref=xref,
            usehpre=usehpre,
            fracdelay_method=fracdelay,
            secondary_sources=SecondarySourceConfig(geometry=geometry, dx0=dx0),
            resolution=resolution,
        )
        source = virtual_source(xs, source_type)

        console.print(f"\n[bold]WFS wave field:[/bold] {source.kind.name}", style="blue")
        console.print("─" * 60)
        if verbose:
            console.print(f"Configuration: {conf}", style="dim")

        start_time = time.time()
        field = wave_field_imp_wfs_25d(
            x_extent, y_extent, None, source, t, array_length, conf, workers=threads
        )
        runtime = time.time() - start_time

        print_field_info(console, conf, source, field, runtime)

        if plot is not None:
            from wfs_toolbox.analysis.plot import plot_wavefield

            fig, _ = plot_wavefield(field.x, field.y, field.p, field.x0, field.win)
            fig.savefig(plot, dpi=150, bbox_inches="tight")
            console.print(f"  Figure: {plot}")

        console.print("✓ [bold green]Simulation complete![/bold green]")

    except WFSError as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
