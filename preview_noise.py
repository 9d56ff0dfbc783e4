# preview_noise.py

"""
================================================================================
NOISE PREVIEW SCRIPT
================================================================================
This script is a command-line tool for rendering a noise module graph to a
PNG image. It builds a demo terrain graph (ridged mountains and billowy
lowlands, selected by a Perlin control and roughened by turbulence), fills
a noise map with the chosen projection and colors it with a gradient.

Settings come from a JSON file and/or command-line flags; flags win, and
anything left unset falls back to the defaults in noise_generator/config.py.

Usage:
    python preview_noise.py --output terrain.png --projection sphere
    python preview_noise.py --config path/to/preview.json
================================================================================
"""
import argparse
import json
import logging
import sys
import time

from noise_generator import color_maps
from noise_generator import config as DEFAULTS
from noise_generator.builders import CylinderBuilder, PlaneBuilder, SphereBuilder
from noise_generator.containers import NoiseMap
from noise_generator.errors import NoiseError
from noise_generator.modules import Add, Billow, Cache, Perlin, RidgedMulti, ScaleBias, Select, Turbulence

BUILDERS = {
    "plane": PlaneBuilder,
    "cylinder": CylinderBuilder,
    "sphere": SphereBuilder,
}

PREVIEW_DEFAULTS = {
    'seed': DEFAULTS.DEFAULT_SEED,
    'width': 512,
    'height': 256,
    'projection': "plane",
    'gradient': "terrain",
    'output': "noise_preview.png",
}


def build_terrain_graph(seed: int):
    """
    Returns the root of the demo graph: mountains where the control noise is
    high, flat billowy land elsewhere, with a smooth transition between them.
    The continent noise both picks the terrain type and raises the land, so
    it is cached for the second lookup at each point.
    """
    mountain_terrain = ScaleBias(RidgedMulti(seed=seed), scale=0.5, bias=0.25)
    base_flat_terrain = Billow(frequency=2.0, seed=seed + 1)
    flat_terrain = ScaleBias(base_flat_terrain, scale=0.125, bias=-0.75)
    continents = Cache(Perlin(frequency=0.5, persistence=0.25, seed=seed + 2))

    terrain_selector = Select(
        flat_terrain, mountain_terrain, continents,
        lower_bound=0.0, upper_bound=1000.0, edge_falloff=0.125,
    )
    shaped_terrain = Add(terrain_selector, ScaleBias(continents, scale=0.125))
    return Turbulence(shaped_terrain, frequency=4.0, power=0.125, seed=seed + 3)


def _parse_size(value: str) -> tuple:
    try:
        width, height = (int(v) for v in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got '{value}'.")
    return width, height


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Render a coherent noise graph to a PNG image.")
    parser.add_argument("--config", type=str, help="Path to a JSON file with preview settings.")
    parser.add_argument("--seed", type=int, help="Base seed of the demo graph.")
    parser.add_argument("--size", type=_parse_size, help="Map size as WIDTHxHEIGHT.")
    parser.add_argument("--projection", choices=sorted(BUILDERS), help="Projection used to fill the map.")
    parser.add_argument("--bounds", type=float, nargs=4, metavar="B",
                        help="Projection bounds (lower_x upper_x lower_y upper_y, or the angle/lat-lon equivalent).")
    parser.add_argument("--seamless", action="store_true", help="Make plane maps tileable.")
    parser.add_argument("--gradient", choices=sorted(color_maps.GRADIENTS), help="Color gradient.")
    parser.add_argument("--resample", type=_parse_size, help="Resize the map to WIDTHxHEIGHT before rendering.")
    parser.add_argument("--workers", type=int, help="Number of build threads (1 = sequential).")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar while building.")
    parser.add_argument("--output", type=str, help="Path of the PNG to write.")
    return parser.parse_args(argv)


def load_settings(args, logger: logging.Logger) -> dict:
    """Merges defaults, the optional JSON config and the command-line flags."""
    config = {}
    if args.config:
        logger.info(f"Loading configuration from: {args.config}")
        with open(args.config, 'r') as f:
            config = json.load(f)

    settings = {key: config.get(key, default) for key, default in PREVIEW_DEFAULTS.items()}
    settings['builder'] = {
        key: config[key] for key in ('bounds', 'seamless', 'workers', 'show_progress') if key in config
    }
    settings['resample'] = config.get('resample')

    if args.seed is not None:
        settings['seed'] = args.seed
    if args.size is not None:
        settings['width'], settings['height'] = args.size
    if args.projection is not None:
        settings['projection'] = args.projection
    if args.gradient is not None:
        settings['gradient'] = args.gradient
    if args.output is not None:
        settings['output'] = args.output
    if args.resample is not None:
        settings['resample'] = args.resample
    if args.bounds is not None:
        settings['builder']['bounds'] = args.bounds
    if args.seamless:
        settings['builder']['seamless'] = True
    if args.workers is not None:
        settings['builder']['workers'] = args.workers
    if args.progress:
        settings['builder']['show_progress'] = True

    if settings['projection'] not in BUILDERS:
        raise ValueError(f"Unknown projection '{settings['projection']}'.")
    if settings['gradient'] not in color_maps.GRADIENTS:
        raise ValueError(f"Unknown gradient '{settings['gradient']}'.")
    return settings


def render_preview(settings: dict, logger: logging.Logger) -> NoiseMap:
    """Builds the demo graph, fills a noise map and saves it as a PNG."""
    start_time = time.perf_counter()

    # 1. --- Build the module graph ---
    logger.info(f"Building terrain graph with seed: {settings['seed']}")
    root = build_terrain_graph(settings['seed'])

    # 2. --- Fill the noise map ---
    builder_cls = BUILDERS[settings['projection']]
    builder = builder_cls(
        root, settings['width'], settings['height'], config=settings['builder'], logger=logger
    )
    noise_map = builder.build()

    # 3. --- Optional resample ---
    if settings['resample']:
        width, height = settings['resample']
        logger.info(f"Resampling {noise_map.width}x{noise_map.height} map to {width}x{height}.")
        noise_map = NoiseMap.bilinear_filter(noise_map, width, height, clamp=True)

    # 4. --- Render and save ---
    gradient = color_maps.GRADIENTS[settings['gradient']]()
    image = color_maps.to_image(noise_map, gradient)
    image.save(settings['output'], 'PNG')

    end_time = time.perf_counter()
    logger.info(f"Preview saved to {settings['output']} in {end_time - start_time:.2f} seconds.")
    return noise_map


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("Preview")

    args = parse_args(argv)
    try:
        settings = load_settings(args, logger)
    except (FileNotFoundError, json.JSONDecodeError, ValueError) as e:
        logger.critical(f"Failed to load preview settings: {e}")
        return 1

    try:
        render_preview(settings, logger)
    except NoiseError as e:
        logger.critical(f"Failed to render preview: {e}")
        return 1
    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
