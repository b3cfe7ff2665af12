#!/usr/bin/env python
"""
Logistic Loss Medium Simulation Script
======================================

Runs a random-traffic simulation over the logistic loss radio medium.

Usage:
    # Quick debug run
    python simulate.py --mode debug

    # Wearable deployment (ids below 192 form the backbone)
    python simulate.py --mode wearable --radios 30

    # Custom config, mobility trace and explicit links
    python simulate.py --config my_config.json --mobility positions.dat --links links.txt

Author: Logistic Loss Medium Team
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Simulate the logistic loss radio medium",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python simulate.py --mode debug                 # 4 radios, 5 seconds
  python simulate.py --mode wearable --radios 30  # Gateway backbone enabled
  python simulate.py --config my_config.json      # Custom configuration
        """
    )

    parser.add_argument(
        "--mode",
        type=str,
        choices=["default", "wearable", "debug"],
        default="default",
        help="Configuration preset (default: default)"
    )
    parser.add_argument("--config", type=str, default=None, help="Path to config JSON file")
    parser.add_argument("--mobility", type=str, default=None, help="Mobility trace file")
    parser.add_argument("--links", type=str, default=None, help="Explicit link file")
    parser.add_argument("--radios", type=int, default=None, help="Number of radios")
    parser.add_argument("--duration", type=float, default=None, help="Simulated seconds")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--output", type=str, default=None, help="Output directory")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: from config)"
    )

    return parser.parse_args()


def get_config(args):
    """Get simulation configuration from args."""
    from simulation.config import (
        SimulationConfig,
        get_default_config,
        get_wearable_config,
        get_debug_config,
    )

    if args.config:
        config = SimulationConfig.load(args.config)
    else:
        config_map = {
            "default": get_default_config,
            "wearable": get_wearable_config,
            "debug": get_debug_config,
        }
        config = config_map[args.mode]()

    if args.mobility:
        config.mobility_file = args.mobility
    if args.links:
        config.links_file = args.links
    if args.radios is not None:
        config.num_radios = args.radios
    if args.duration is not None:
        config.duration = args.duration
    if args.seed is not None:
        config.seed = args.seed
    if args.output:
        config.output_dir = args.output
    if args.log_level:
        config.log_level = args.log_level

    return config


def main():
    """Main simulation entry point."""
    args = parse_args()
    config = get_config(args)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("simulate")
    logger.info("Using preset: %s", args.config or args.mode)

    from simulation.simulation import Simulation

    sim = Simulation(config)
    sim.populate()
    sim.start_traffic()

    try:
        summary = sim.run()
    except KeyboardInterrupt:
        logger.warning("Simulation interrupted at %.3f s", sim.current_time())
        return 1

    output_dir = Path(config.output_dir) / config.experiment_name
    config.save(str(output_dir / "config.json"))
    sim.stats.save(str(output_dir / "stats.json"))

    logger.info("Final results:")
    logger.info("  Transmissions: %d", summary["transmissions"])
    logger.info("  Deliveries: %d", summary["deliveries"])
    logger.info("  Interferences: %d", summary["interferences"])
    logger.info("  Mean delivery ratio: %.3f", summary["delivery_ratio_mean"])
    logger.info("  Graph recomputations: %d", summary["graph_recomputations"])
    logger.info("Results saved to %s", output_dir)

    return 0


if __name__ == "__main__":
    sys.exit(main())
