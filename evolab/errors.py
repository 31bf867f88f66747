class EvolabError(Exception):
    """Base for all evolab exceptions."""


class ConfigurationError(EvolabError, ValueError):
    """Invalid engine or problem parameters, raised at construction."""


class EmptyPopulationError(EvolabError):
    """Selection, sorting or best-of requested on an empty population."""


class UnevaluatedError(EvolabError):
    """Fitness read from an individual that has not been evaluated yet."""


class EngineTerminatedError(EvolabError, RuntimeError):
    """``run`` called on an engine that has already finished a run."""
