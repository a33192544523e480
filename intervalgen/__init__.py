from loguru import logger

from . import (
    canon,
    exceptions,
    types,
    utils,
    validate,
    randomness,
    seed,
    mpan,
    intervals,
    profiles,
    engine,
    aggregate,
    orchestrator,
    schema,
    formats,
    summary,
    config,
)
from .orchestrator import generate, iter_meters
from .types import GenerationConfiguration, GenerationResult

# library stays quiet unless the application enables it
logger.disable("intervalgen")

__all__ = [
    "canon",
    "exceptions",
    "types",
    "utils",
    "validate",
    "randomness",
    "seed",
    "mpan",
    "intervals",
    "profiles",
    "engine",
    "aggregate",
    "orchestrator",
    "schema",
    "formats",
    "summary",
    "config",
    "generate",
    "iter_meters",
    "GenerationConfiguration",
    "GenerationResult",
]
