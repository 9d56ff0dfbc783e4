# noise_generator/builders.py

"""
================================================================================
GRID BUILDERS
================================================================================
Builders evaluate a module graph over a regular grid and store the results in
a NoiseMap (planar, cylindrical and spherical projections) or a NoiseCube
(box projection). This is the only place where bulk, parallel evaluation
happens.

The grid is split into independent rows (maps) or depth slices (cubes). Each
task writes only its own row, so the tasks run on a thread pool with no
locking, and the result is identical to a sequential fill.

Data Contract:
---------------
- Inputs (on initialization):
    - source (Module): Root of the module graph to sample.
    - width, height[, depth] (int): Destination size, all > 0 at build time.
    - config (dict): Overrides for the defaults in `config.py`. Recognized
      keys: 'workers', 'show_progress', 'check_cycles', 'bounds', plus
      projection-specific keys ('z' and 'seamless' for planes).
    - logger: A Python logging object for runtime messages.
- Outputs:
    - build() -> the populated NoiseMap / NoiseCube.
- Side Effects: Logs build progress. Invokes `row_callback(row)` after each
  completed row or slice, on the calling thread.
- Invariants: The module graph is only read. Configuration errors are raised
  before any worker starts.
================================================================================
"""
from __future__ import annotations

import logging
import math
import multiprocessing
import time
from multiprocessing.pool import ThreadPool

from tqdm import tqdm

from . import config as DEFAULTS
from .containers import NoiseCube, NoiseMap
from .errors import BuildCancelledError, InvalidParameterError, NoModuleError
from .modules.base import Module, validate_graph
from .noise import lat_lon_to_xyz, linear


class GridBuilder:
    """
    Shared machinery for all builders: settings consolidation, validation and
    the parallel fill loop. Subclasses provide the projection.
    """
    bounds_default = None

    def __init__(self, source: Module = None, config: dict = None, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.user_config = config or {}

        # --- Consolidate Configuration ---
        self.settings = {
            'workers': self.user_config.get('workers', DEFAULTS.DEFAULT_BUILD_WORKERS),
            'show_progress': self.user_config.get('show_progress', DEFAULTS.SHOW_BUILD_PROGRESS),
            'check_cycles': self.user_config.get('check_cycles', DEFAULTS.CHECK_GRAPH_CYCLES),
        }
        self.set_bounds(*self.user_config.get('bounds', self.bounds_default))

        self.source_module = source
        self.row_callback = None

    def set_bounds(self, *bounds: float) -> None:
        """Sets the projection bounds as (lower, upper) pairs, one per axis."""
        bounds = tuple(float(b) for b in bounds)
        if len(bounds) != len(self.bounds_default):
            raise InvalidParameterError(
                f"{type(self).__name__} expects {len(self.bounds_default)} bound values, got {len(bounds)}."
            )
        for lower, upper in zip(bounds[0::2], bounds[1::2]):
            if not lower < upper:
                raise InvalidParameterError(
                    f"Lower bound {lower} must be less than upper bound {upper}."
                )
        self._check_bounds(bounds)
        self.settings['bounds'] = bounds

    def _check_bounds(self, bounds: tuple) -> None:
        pass

    @property
    def bounds(self) -> tuple:
        return self.settings['bounds']

    def _resolve_workers(self) -> int:
        workers = self.settings['workers']
        if workers is None:
            return max(1, multiprocessing.cpu_count() - 1)
        workers = int(workers)
        if workers < 1:
            raise InvalidParameterError(f"workers must be at least 1, got {workers}.")
        return workers

    def _validate(self, *sizes: int) -> None:
        if self.source_module is None:
            raise NoModuleError(f"{type(self).__name__} has no source module.")
        for size in sizes:
            if size <= 0:
                raise InvalidParameterError(
                    f"{type(self).__name__} destination size must be positive, got {sizes}."
                )
        module_count = validate_graph(self.source_module, check_cycles=self.settings['check_cycles'])
        self.logger.debug(f"Validated module graph with {module_count} modules.")

    def _run(self, task_count: int, fill_task, cancel_event=None, desc: str = "Building") -> None:
        """
        Runs `fill_task(index)` for every index in range(task_count), in
        parallel when more than one worker is configured.
        """
        workers = self._resolve_workers()

        def _task(index):
            if cancel_event is not None and cancel_event.is_set():
                raise BuildCancelledError(f"Build cancelled before task {index}.")
            fill_task(index)
            return index

        self.logger.info(f"{desc}: {task_count} tasks on {workers} worker(s).")
        start_time = time.perf_counter()

        if workers == 1:
            self._drain(map(_task, range(task_count)), task_count, desc)
        else:
            with ThreadPool(processes=workers) as pool:
                self._drain(pool.imap_unordered(_task, range(task_count)), task_count, desc)

        end_time = time.perf_counter()
        self.logger.info(f"{desc} complete in {end_time - start_time:.3f} seconds.")

    def _drain(self, results, task_count: int, desc: str) -> None:
        for index in tqdm(results, total=task_count, desc=desc, disable=not self.settings['show_progress']):
            if self.row_callback is not None:
                self.row_callback(index)


class NoiseMapBuilder(GridBuilder):
    """Base class for builders that fill a 2D NoiseMap."""

    def __init__(self, source: Module = None, width: int = 0, height: int = 0,
                 config: dict = None, logger: logging.Logger = None):
        super().__init__(source, config, logger)
        self.set_dest_size(width, height)

    def set_dest_size(self, width: int, height: int) -> None:
        self.dest_width = int(width)
        self.dest_height = int(height)

    def _prepare(self) -> None:
        """Hook for per-build pre-computation (deltas, extents)."""

    def _fill_row(self, row: int, values) -> None:
        raise NotImplementedError

    def build(self, dest: NoiseMap = None, cancel_event=None) -> NoiseMap:
        """
        Fills `dest` (or a new NoiseMap) with the projected module output and
        returns it. `dest` is resized to the builder's destination size.
        """
        # 1. Validate everything before any work starts.
        self._validate(self.dest_width, self.dest_height)

        # 2. Prepare the destination.
        if dest is None:
            dest = NoiseMap(self.dest_width, self.dest_height)
        else:
            dest.set_size(self.dest_width, self.dest_height)
        values = dest.values

        # 3. Fill rows in parallel.
        self._prepare()
        self.logger.debug(f"{type(self).__name__} settings: {self.settings}")
        self._run(
            self.dest_height,
            lambda row: self._fill_row(row, values),
            cancel_event=cancel_event,
            desc=f"{type(self).__name__} {self.dest_width}x{self.dest_height}",
        )
        return dest


class PlaneBuilder(NoiseMapBuilder):
    """
    Samples the module on an axis-aligned rectangle of the z = const plane.
    Columns map to x and rows to y.

    With 'seamless', every sample is blended with the samples one bounds
    extent away, so the map tiles without visible seams.
    """
    bounds_default = DEFAULTS.DEFAULT_PLANE_BOUNDS

    def __init__(self, source: Module = None, width: int = 0, height: int = 0,
                 config: dict = None, logger: logging.Logger = None):
        super().__init__(source, width, height, config, logger)
        self.settings['z'] = float(self.user_config.get('z', DEFAULTS.DEFAULT_PLANE_Z))
        self.settings['seamless'] = bool(self.user_config.get('seamless', False))

    def _prepare(self) -> None:
        lower_x, upper_x, lower_y, upper_y = self.bounds
        self._x_extent = upper_x - lower_x
        self._y_extent = upper_y - lower_y
        self._x_delta = self._x_extent / self.dest_width
        self._y_delta = self._y_extent / self.dest_height

    def _fill_row(self, row, values):
        lower_x, _, lower_y, _ = self.bounds
        z = self.settings['z']
        seamless = self.settings['seamless']
        x_extent = self._x_extent
        y_extent = self._y_extent
        source = self.source_module

        cur_y = lower_y + row * self._y_delta
        for col in range(self.dest_width):
            cur_x = lower_x + col * self._x_delta
            if not seamless:
                values[row, col] = source.evaluate(cur_x, cur_y, z)
                continue

            sw_value = source.evaluate(cur_x, cur_y, z)
            se_value = source.evaluate(cur_x + x_extent, cur_y, z)
            nw_value = source.evaluate(cur_x, cur_y + y_extent, z)
            ne_value = source.evaluate(cur_x + x_extent, cur_y + y_extent, z)
            x_blend = 1.0 - ((cur_x - lower_x) / x_extent)
            y_blend = 1.0 - ((cur_y - lower_y) / y_extent)
            y0 = linear(sw_value, se_value, x_blend)
            y1 = linear(nw_value, ne_value, x_blend)
            values[row, col] = linear(y0, y1, y_blend)


class CylinderBuilder(NoiseMapBuilder):
    """
    Samples the module on the surface of a unit cylinder around the y axis.
    Columns sweep the angle (degrees), rows the height.
    """
    bounds_default = DEFAULTS.DEFAULT_CYLINDER_BOUNDS

    def _prepare(self) -> None:
        lower_angle, upper_angle, lower_height, upper_height = self.bounds
        self._angle_delta = (upper_angle - lower_angle) / self.dest_width
        self._height_delta = (upper_height - lower_height) / self.dest_height

    def _fill_row(self, row, values):
        lower_angle, _, lower_height, _ = self.bounds
        source = self.source_module

        cur_height = lower_height + row * self._height_delta
        for col in range(self.dest_width):
            angle = math.radians(lower_angle + col * self._angle_delta)
            values[row, col] = source.evaluate(math.cos(angle), cur_height, math.sin(angle))


class SphereBuilder(NoiseMapBuilder):
    """
    Samples the module on the surface of a unit sphere. Columns sweep the
    longitude and rows the latitude, both in degrees, so the map is an
    equirectangular projection. Bounds are (south, north, west, east).
    """
    bounds_default = DEFAULTS.DEFAULT_SPHERE_BOUNDS

    def _check_bounds(self, bounds):
        south, north, west, east = bounds
        if south < -90.0 or north > 90.0:
            raise InvalidParameterError(f"Latitude bounds must lie in [-90, 90], got ({south}, {north}).")
        if west < -180.0 or east > 180.0:
            raise InvalidParameterError(f"Longitude bounds must lie in [-180, 180], got ({west}, {east}).")

    def _prepare(self) -> None:
        south, north, west, east = self.bounds
        self._lon_delta = (east - west) / self.dest_width
        self._lat_delta = (north - south) / self.dest_height

    def _fill_row(self, row, values):
        south, _, west, _ = self.bounds
        source = self.source_module

        cur_lat = south + row * self._lat_delta
        for col in range(self.dest_width):
            x, y, z = lat_lon_to_xyz(cur_lat, west + col * self._lon_delta)
            values[row, col] = source.evaluate(x, y, z)


class CubeBuilder(GridBuilder):
    """
    Samples the module on a regular 3D grid inside an axis-aligned box and
    fills a NoiseCube, one depth slice per task.
    """
    bounds_default = DEFAULTS.DEFAULT_CUBE_BOUNDS

    def __init__(self, source: Module = None, width: int = 0, height: int = 0, depth: int = 0,
                 config: dict = None, logger: logging.Logger = None):
        super().__init__(source, config, logger)
        self.set_dest_size(width, height, depth)

    def set_dest_size(self, width: int, height: int, depth: int) -> None:
        self.dest_width = int(width)
        self.dest_height = int(height)
        self.dest_depth = int(depth)

    def _fill_slice(self, slice_index, values, deltas):
        lower_x, _, lower_y, _, lower_z, _ = self.bounds
        x_delta, y_delta, z_delta = deltas
        source = self.source_module

        cur_z = lower_z + slice_index * z_delta
        for row in range(self.dest_height):
            cur_y = lower_y + row * y_delta
            for col in range(self.dest_width):
                values[slice_index, row, col] = source.evaluate(lower_x + col * x_delta, cur_y, cur_z)

    def build(self, dest: NoiseCube = None, cancel_event=None) -> NoiseCube:
        """Fills `dest` (or a new NoiseCube) and returns it."""
        self._validate(self.dest_width, self.dest_height, self.dest_depth)

        if dest is None:
            dest = NoiseCube(self.dest_width, self.dest_height, self.dest_depth)
        else:
            dest.set_size(self.dest_width, self.dest_height, self.dest_depth)
        values = dest.values

        lower_x, upper_x, lower_y, upper_y, lower_z, upper_z = self.bounds
        deltas = (
            (upper_x - lower_x) / self.dest_width,
            (upper_y - lower_y) / self.dest_height,
            (upper_z - lower_z) / self.dest_depth,
        )
        self._run(
            self.dest_depth,
            lambda slice_index: self._fill_slice(slice_index, values, deltas),
            cancel_event=cancel_event,
            desc=f"CubeBuilder {self.dest_width}x{self.dest_height}x{self.dest_depth}",
        )
        return dest
