import logging
from typing import Callable, List, Optional

from .modes import Mode

logger = logging.getLogger(__name__)


class ModeDispatcher:
    """
    Hands the chosen mode to the external mutator.

    The mutator runs detached: its exit status is never collected, so a
    mutator that fails to reconfigure the outputs goes unnoticed here.
    """

    def __init__(
        self,
        invoke_mutator: Callable[[Mode], None],
        on_dispatched: Optional[Callable[[], None]] = None,
    ):
        self._invoke_mutator = invoke_mutator
        self.on_dispatched = on_dispatched

    def dispatch(self, mode: Mode):
        logger.info("Applying %s display mode...", mode.value)
        try:
            self._invoke_mutator(mode)
        except Exception as e:
            logger.error("Failed to start mutator for %s: %s", mode.value, e)
        else:
            logger.info("Display mode set to: %s", mode.value)
        if self.on_dispatched is not None:
            self.on_dispatched()


def mutator_argv(command: List[str], mode: Mode) -> List[str]:
    return [*command, mode.argument]
