"""Optional early-stop predicates.

A predicate receives the list of ``GenerationStats`` recorded so far and
returns True when the run should end. The generation count in ``GAConfig``
stays the hard upper bound.
"""
from typing import Optional

from evolab.config import GAConfig
from evolab.errors import ConfigurationError


class StagnationStop:
    """Stop when the best fitness has not improved for ``window`` generations"""

    def __init__(self, window: int, min_delta: float = 0.0):
        if window <= 0:
            raise ConfigurationError(f"window must be positive, got {window}")
        self.window = window
        self.min_delta = min_delta

    def __call__(self, history) -> bool:
        if len(history) <= self.window:
            return False
        reference = max(stats.best_fitness for stats in history[:-self.window])
        recent = max(stats.best_fitness for stats in history[-self.window:])
        return recent - reference <= self.min_delta

    def __repr__(self):
        return f"StagnationStop(window={self.window}, min_delta={self.min_delta})"


class TargetFitnessStop:
    def __init__(self, target: float):
        self.target = target

    def __call__(self, history) -> bool:
        return bool(history) and history[-1].best_fitness >= self.target

    def __repr__(self):
        return f"TargetFitnessStop(target={self.target})"


class AnyOf:
    def __init__(self, *predicates):
        self.predicates = predicates

    def __call__(self, history) -> bool:
        return any(predicate(history) for predicate in self.predicates)

    def __repr__(self):
        return f"AnyOf({', '.join(repr(p) for p in self.predicates)})"


def stopping_from_config(config: GAConfig) -> Optional[AnyOf]:
    """Predicate built from ``stagnation_window``/``target_fitness``, or None"""
    predicates = []
    if config.stagnation_window is not None:
        predicates.append(StagnationStop(config.stagnation_window))
    if config.target_fitness is not None:
        predicates.append(TargetFitnessStop(config.target_fitness))
    if not predicates:
        return None
    return AnyOf(*predicates)
