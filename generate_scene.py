# generate_scene.py

"""
================================================================================
QUICK SCENE GENERATOR - COMMAND LINE
================================================================================
This script runs a one-click scene generation into an in-memory host scene
and reports what was built. It is the scriptable counterpart of pressing the
"Generate World" button in an editor.

Usage:
    python generate_scene.py --style desert --size medium --time noon
    python generate_scene.py --config path/to/scene.json --output scene.json
    python generate_scene.py --list-styles
================================================================================
"""
import sys
import json
import logging
import argparse

from scene_generator.builder import SceneBuilder
from scene_generator.host import InMemoryScene, SceneGenerationError
from scene_generator.styles import EnvironmentStyle, TimeOfDay, WorldSize, describe_style


def load_config(config_path: str, logger: logging.Logger) -> dict:
    """Loads the 'scene_generation_parameters' object from a JSON config file."""
    logger.info(f"Loading configuration from: {config_path}")
    with open(config_path, 'r') as f:
        config = json.load(f)
    return config.get('scene_generation_parameters', {})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="One-click procedural scene generator.")
    parser.add_argument("--config", type=str, help="Path to a JSON configuration file.")
    parser.add_argument("--style", choices=[s.name.lower() for s in EnvironmentStyle], help="Environment style.")
    parser.add_argument("--size", choices=[s.name.lower() for s in WorldSize], help="World size.")
    parser.add_argument("--time", choices=[t.name.lower() for t in TimeOfDay], help="Time of day.")
    parser.add_argument("--seed", type=float, help="Noise seed. Drawn at random when omitted.")
    parser.add_argument("--random-seed", type=int, help="Seed for the scatter random source.")
    parser.add_argument("--no-water", action="store_true", help="Do not add a water plane.")
    parser.add_argument("--no-trees", action="store_true", help="Do not plant trees.")
    parser.add_argument("--no-props", action="store_true", help="Do not scatter rocks.")
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")
    parser.add_argument("--clear", action="store_true", help="Clear the scene again after generating.")
    parser.add_argument("--output", type=str, help="Write the generated scene summary to this JSON file.")
    parser.add_argument("--list-styles", action="store_true", help="List the available styles and exit.")
    return parser


def apply_arguments(params: dict, args: argparse.Namespace) -> dict:
    """Command-line flags take precedence over values from the config file."""
    params = dict(params)
    if args.style:
        params['style'] = args.style
    if args.size:
        params['world_size'] = args.size
    if args.time:
        params['time_of_day'] = args.time
    if args.random_seed is not None:
        params['random_seed'] = args.random_seed
    if args.no_water:
        params['add_water'] = False
    if args.no_trees:
        params['add_trees'] = False
    if args.no_props:
        params['add_props'] = False
    if args.no_progress:
        params['show_progress'] = False
    return params


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("SceneGenerator")

    if args.list_styles:
        for style in EnvironmentStyle:
            logger.info(f"  - {style.name.lower():<9} {describe_style(style)}")
        return 0

    params = {}
    if args.config:
        try:
            params = load_config(args.config, logger)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            logger.critical(f"Failed to load or parse config file: {e}")
            return 1
    params = apply_arguments(params, args)

    scene = InMemoryScene(logger=logger)
    try:
        builder = SceneBuilder(scene, params, logger)
        description = builder.generate_world(seed=args.seed)
    except ValueError as e:
        logger.critical(f"Invalid scene configuration: {e}")
        return 1
    except SceneGenerationError as e:
        logger.critical(f"Scene generation failed: {e}")
        return 1

    heightmap_stats = description.heightmap.statistics()
    logger.info("--- Scene Summary ---")
    logger.info(f"  - Style: {description.style.name.lower()} ({describe_style(description.style)})")
    logger.info(f"  - Size: {description.world_size.value} units, seed {description.seed:.3f}")
    logger.info(f"  - Heightmap: {heightmap_stats['resolution']}^2, range [{heightmap_stats['min']:.3f}, {heightmap_stats['max']:.3f}]")
    logger.info(f"  - Water: {'level ' + str(description.water.position[1]) if description.water else 'none'}")
    logger.info(f"  - Trees: {len(description.trees)}, props: {len(description.props)}")
    if description.lighting is not None:
        logger.info(f"  - Sun: elevation {description.lighting.elevation_deg}, intensity {description.lighting.intensity}")
    logger.info(f"  - Scene objects: {sum(1 for _ in scene.walk())}")

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(description.to_dict(), f, indent=2)
        logger.info(f"Scene summary saved to: {args.output}")

    if args.clear:
        builder.clear_world()

    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
