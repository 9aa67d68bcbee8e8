"""
Run parameters for a Tileworld simulation.

All constants of a run live in one immutable TileworldParameters value that
is built when the model is set up and handed to every component.
"""
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class TileworldParameters:
    """Immutable parameter set for one run"""

    # World
    width: int = 50
    height: int = 50
    num_agents: int = 5
    sensor_range: int = 3
    default_fuel_level: float = 500
    carry_capacity: int = 3

    # Objects
    lifetime: float = 100
    tile_mean: float = 0.2
    tile_dev: float = 0.05
    hole_mean: float = 0.2
    hole_dev: float = 0.05
    obstacle_mean: float = 0.2
    obstacle_dev: float = 0.05

    # Fuel management
    fuel_tolerance: float = 0.95
    hard_fuel_limit: float = 100
    refuel_opportunity_fraction: float = 0.75

    # Coordination
    tsp_heuristic: bool = True
    object_lifetime_threshold: float = 1.0
    goal_announce_count: int = 1
    allow_assistance: bool = True
    max_assist_zone_distance: int = 1
    max_search_distance: Optional[int] = None

    # Run
    seed: Optional[int] = None
    end_time: int = 5000

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid must be non-empty, got {self.width}x{self.height}")
        if self.num_agents <= 0:
            raise ValueError("At least one agent is required")
        if self.num_agents > max(self.width, self.height):
            raise ValueError(
                f"{self.num_agents} agents cannot each get a zone on a {self.width}x{self.height} grid"
            )
        if self.sensor_range < 0:
            raise ValueError("sensor_range must not be negative")
        if self.default_fuel_level <= 0:
            raise ValueError("default_fuel_level must be positive")
        if self.carry_capacity <= 0:
            raise ValueError("carry_capacity must be positive")
        if self.lifetime <= 0:
            raise ValueError("lifetime must be positive")
        for name in ('tile_mean', 'tile_dev', 'hole_mean', 'hole_dev', 'obstacle_mean', 'obstacle_dev'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if not 0 < self.fuel_tolerance <= 1:
            raise ValueError("fuel_tolerance must be in (0, 1]")
        if self.hard_fuel_limit < 0:
            raise ValueError("hard_fuel_limit must not be negative")
        if not 0 <= self.refuel_opportunity_fraction <= 1:
            raise ValueError("refuel_opportunity_fraction must be in [0, 1]")
        if self.object_lifetime_threshold <= 0:
            raise ValueError("object_lifetime_threshold must be positive")
        if self.goal_announce_count < 0:
            raise ValueError("goal_announce_count must not be negative")
        if self.max_assist_zone_distance < 0:
            raise ValueError("max_assist_zone_distance must not be negative")
        if self.end_time <= 0:
            raise ValueError("end_time must be positive")

    @property
    def refuel_opportunity_level(self) -> float:
        """Fuel level below which an agent on the station tops up"""
        return self.default_fuel_level * self.refuel_opportunity_fraction

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> 'TileworldParameters':
        """
        Build parameters from a dict such as an agentpy model's ``p``.

        Keys that are not parameters (e.g. ``steps``, ``start_positions``)
        are ignored. A ``preset`` key selects the base values that the other
        keys then override.
        """
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in mapping.items() if key in known}
        preset_name = mapping.get('preset')
        if preset_name:
            return replace(cls.preset(preset_name), **values)
        return cls(**values)

    @classmethod
    def preset(cls, name: str) -> 'TileworldParameters':
        try:
            values = PRESETS[name]
        except KeyError:
            raise ValueError(f"Unknown preset '{name}', choose from {sorted(PRESETS)}") from None
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# Experiment setups used for the benchmark runs
PRESETS: Dict[str, Dict[str, Any]] = {
    'config3': {
        'width': 100,
        'height': 100,
        'default_fuel_level': 500,
        'sensor_range': 3,
        'tile_mean': 0.1, 'tile_dev': 0.025,
        'hole_mean': 0.1, 'hole_dev': 0.025,
        'obstacle_mean': 0.1, 'obstacle_dev': 0.025,
        'lifetime': 150,
        'fuel_tolerance': 0.95,
        'hard_fuel_limit': 100,
        'tsp_heuristic': True,
        'object_lifetime_threshold': 1.0,
        'goal_announce_count': 1,
        'allow_assistance': True,
        'max_assist_zone_distance': 1,
        'seed': 4162012,
    },
    'config4': {
        'width': 150,
        'height': 40,
        'default_fuel_level': 1000,
        'sensor_range': 3,
        'tile_mean': 0.02, 'tile_dev': 0.001,
        'hole_mean': 0.2, 'hole_dev': 0.01,
        'obstacle_mean': 0.5, 'obstacle_dev': 0.1,
        'lifetime': 120,
        'fuel_tolerance': 0.95,
        'hard_fuel_limit': 100,
        'tsp_heuristic': True,
        'object_lifetime_threshold': 1.0,
        'goal_announce_count': 1,
        'allow_assistance': False,
        'max_assist_zone_distance': 1,
        'seed': 9042014,
    },
    'config5': {
        'width': 300,
        'height': 25,
        'default_fuel_level': 1200,
        'sensor_range': 3,
        'tile_mean': 0.8, 'tile_dev': 0.01,
        'hole_mean': 0.2, 'hole_dev': 0.002,
        'obstacle_mean': 4.0, 'obstacle_dev': 0.2,
        'lifetime': 200,
        'fuel_tolerance': 0.85,
        'hard_fuel_limit': 300,
        'tsp_heuristic': False,
        'object_lifetime_threshold': 1.0,
        'goal_announce_count': 1,
        'allow_assistance': False,
        'max_assist_zone_distance': 1,
        'seed': 40462015,
    },
}
