"""
The state machine shared by uploads and downloads.

A session starts with begin() and ends with exactly one of complete() or fail():

    NOPE -> IN_PROGRESS -> (DONE | ERROR)

IN_PROGRESS may repeat to report progress. Once a session has ended, further
outcomes are ignored until the next begin(). Progress and completion need a
started session, while a failure reported before any begin() ends the current
session.
"""
import logging

from agentlink.model import DONE, ERROR, IN_PROGRESS, NOPE, OperationState
from agentlink.support.events import EventSource, OutcomeLatch, StateStream

logger = logging.getLogger(__name__)


class OperationTracker:
    """
    :ivar state: replays the current OperationState
    :ivar in_progress: every IN_PROGRESS state, not replayed
    :ivar done: fires the DONE state of the current session, once
    :ivar error: fires the ERROR state of the current session, once
    """

    def __init__(self, name, log=logger):
        self.name = name
        self.logger = log
        self.state = StateStream(OperationState(NOPE))
        self.in_progress = EventSource()
        self.done = OutcomeLatch()
        self.error = OutcomeLatch()
        self._completed = False

    @property
    def status(self):
        return self.state.value.status

    @property
    def completed(self) -> bool:
        """ True when the current session has ended """
        return self._completed

    def begin(self, msg=None):
        """ starts a new session, re-arming the done and error notifications """
        self._completed = False
        self.done.rearm()
        self.error.rearm()
        self._publish(OperationState(IN_PROGRESS, msg=msg))

    def progress(self, msg=None):
        if self._ignored(IN_PROGRESS):
            return False
        self._publish(OperationState(IN_PROGRESS, msg=msg))
        return True

    def complete(self, msg=None):
        if self._ignored(DONE):
            return False
        self._completed = True
        state = OperationState(DONE, msg=msg)
        self._publish(state)
        self.error.cancel()
        self.done.fire(state)
        return True

    def fail(self, err):
        if self._ignored(ERROR):
            return False
        self._completed = True
        state = OperationState(ERROR, err=err)
        self._publish(state)
        self.done.cancel()
        self.error.fire(state)
        return True

    def _ignored(self, status):
        if self._completed:
            self.logger.warning("%s already %s, ignoring %s" % (self.name, self.status, status))
            return True
        if status != ERROR and self.status == NOPE:
            self.logger.warning("%s not started, ignoring %s" % (self.name, status))
            return True
        return False

    def _publish(self, state: OperationState):
        self.logger.debug("%s: %s" % (self.name, state))
        self.state.fire(state)
        if state.status == IN_PROGRESS:
            self.in_progress.fire(state)
