"""
Simulation Runner

This module provides the function to run a Tileworld simulation and the
command line entry point.
"""

import argparse
import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from ..config import PRESETS, TileworldParameters
from .model import TileworldModel

logger = logging.getLogger(__name__)


def run_simulation(
    parameters: Union[TileworldParameters, Mapping[str, Any], None] = None,
    steps: Optional[int] = None,
    seed: Optional[int] = None
) -> Dict[str, Any]:
    """
    Run a multi-agent Tileworld simulation.

    Args:
        parameters: Run parameters, or a mapping of overrides
        steps: Maximum number of steps, defaults to the parameters' end_time
        seed: Random seed, defaults to the parameters' seed

    Returns:
        Simulation status dict
    """
    if isinstance(parameters, TileworldParameters):
        model_parameters = parameters.to_dict()
    else:
        model_parameters = dict(parameters or {})
    resolved = TileworldParameters.from_mapping(model_parameters)

    steps = steps if steps is not None else resolved.end_time
    seed = seed if seed is not None else resolved.seed

    logger.info(
        "Running %d agents on %dx%d for %d steps (seed %s)",
        resolved.num_agents, resolved.width, resolved.height, steps, seed
    )

    model = TileworldModel(model_parameters)
    model.run(steps=steps, seed=seed, display=False)

    status = model.get_status()
    for agent in status['agents']:
        logger.info("%s score %d, fuel %s", agent['name'], agent['score'], agent['fuel_level'])
    logger.info("Total reward: %d", status['reward'])
    return status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tilecrew-run',
        description='Run the decentralized Tileworld agents',
    )
    parser.add_argument('--preset', choices=sorted(PRESETS), help='Named experiment setup')
    parser.add_argument('--steps', type=int, help='Number of steps to simulate')
    parser.add_argument('--agents', type=int, help='Number of agents')
    parser.add_argument('--seed', type=int, help='Random seed')
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging verbosity',
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command line entry point"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    parameters: Dict[str, Any] = {}
    if args.preset:
        parameters['preset'] = args.preset
    if args.agents is not None:
        parameters['num_agents'] = args.agents
    if args.seed is not None:
        parameters['seed'] = args.seed

    try:
        run_simulation(parameters, steps=args.steps)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
