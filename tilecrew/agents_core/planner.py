"""
DefaultPlanner - goal queue plus a path that is rebuilt every tick

The plan is never repaired: each tick the agent voids it, sets a new goal
and asks for a fresh path over its current obstacle beliefs.
"""
from typing import List, Optional

from tileworld.pathfinding import Pathfinder
from tileworld.world_generator import Direction, Position


class DefaultPlanner:
    """Holds the agent's goals and the moves toward the first one"""

    def __init__(self, memory, width: int, height: int, max_search_distance: Optional[int] = None):
        """
        Args:
            memory: DecayMemory whose obstacle beliefs block the search.
                Unknown cells are treated as free.
            width: Grid width
            height: Grid height
            max_search_distance: Longest path the search explores
        """
        self.pathfinder = Pathfinder(width, height, memory.is_cell_blocked, max_search_distance)
        self.goals: List[Position] = []
        self.plan: Optional[List[Direction]] = None

    @property
    def current_goal(self) -> Optional[Position]:
        return self.goals[0] if self.goals else None

    def add_goal(self, goal: Position):
        self.goals.append(tuple(goal))

    def clear_goals(self):
        self.goals.clear()

    def void_plan(self):
        self.plan = None

    def reset(self):
        self.clear_goals()
        self.void_plan()

    def plan_route(self, start: Position, goal: Position) -> Optional[List[Direction]]:
        """Moves from start to goal, or None when no path exists"""
        return self.pathfinder.find_directions(start, goal)

    def generate_plan(self, start: Position) -> Optional[List[Direction]]:
        """Plan from start to the current goal"""
        if self.current_goal is None:
            self.plan = None
        else:
            self.plan = self.plan_route(start, self.current_goal)
        return self.plan

    def has_plan(self) -> bool:
        return bool(self.plan)

    def execute(self) -> Direction:
        """Pop the next move of the plan"""
        if not self.plan:
            raise ValueError("No plan to execute")
        return self.plan.pop(0)
