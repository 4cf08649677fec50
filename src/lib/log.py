"""
Verbosity-aware logging on top of Loguru.

LOG() looks up the ProgramState connected to the current context and only
emits when its verbosity reaches the requested level, so library modules
never need the state passed in.

    state_connectToLogger(state)
    LOG("Processing src/index.js", level=1)         # default
    LOG("Resolved ./utils -> utils/index.js", level=2)   # -v
    LOG("Token trace", level=3)                     # -vv

Verbosity levels map onto Loguru severities (INFO, DEBUG, TRACE) so a
sink added by an embedding application can filter them. When no state is
connected (library use, tests) LOG() is silent.
"""

from loguru import logger
from typing import Any, Dict, Optional
from contextvars import ContextVar
import sys

_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

SEVERITY: Dict[int, str] = {1: "INFO", 2: "DEBUG", 3: "TRACE"}

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{module: <10}</cyan>:"
    "<cyan>{function: <18}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="TRACE")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def verbosity_get() -> int:
    """Verbosity of the connected state, 0 when none is connected"""
    state = _program_state.get()
    return getattr(state, 'verbosity', 0) if state is not None else 0


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=trace)
        **kwargs: Additional loguru metadata
    """
    if verbosity_get() < level:
        return
    severity = SEVERITY.get(level, "TRACE")
    logger.opt(depth=1).log(severity, message, **kwargs)
