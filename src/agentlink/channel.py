"""
Tracks connectivity of the channel to the agent, and runs the discovery polling loop
while the channel is open.
"""
import logging
from typing import Callable

from agentlink.devices import DeviceRegistry
from agentlink.model import UNKNOWN
from agentlink.support.events import StateStream
from agentlink.support.timer import CancellationToken, Timer

logger = logging.getLogger(__name__)

_unapplied = object()


class ChannelMonitor:
    """
    channel_open is the raw connectivity stream: every update is delivered, including
    repeated values. channel_open_status is its distinct view.

    After open_channel(callback), each transition to open starts the timer, which calls
    the callback at once and then every period. Each transition from open to closed or
    unknown cancels the timer, empties the device list and publishes agent_found false.
    The first connectivity applied resets the same way when it is not open.
    Calling open_channel again restarts any running poll with the new callback.
    """

    def __init__(self, registry: DeviceRegistry, timer: Timer, agent_found: StateStream=None):
        self.registry = registry
        self.timer = timer
        self.agent_found = agent_found if agent_found is not None else StateStream(None)
        self.channel_open = StateStream(UNKNOWN)
        self.channel_open_status = self.channel_open.distinct()
        self._callback = None
        self._polling = None   # type: CancellationToken
        self._applied = _unapplied     # the last connectivity acted upon

    def set_connectivity(self, state):
        self.channel_open.fire(state)

    @property
    def connectivity(self):
        return self.channel_open.value

    @property
    def polling(self) -> bool:
        return self._polling is not None and not self._polling.cancelled

    def open_channel(self, callback: Callable):
        """
        Starts managing the polling lifecycle. The current connectivity is applied straight away.
        :param callback: called on every poll with the tick number
        """
        if self._callback is not None:
            self.channel_open_status.remove(self._connectivity_changed)
            self._stop_polling()
        self._callback = callback
        self.channel_open_status.add(self._connectivity_changed)

    def close_channel(self):
        """ Stops managing the polling lifecycle, cancelling any running poll. """
        self.channel_open_status.remove(self._connectivity_changed)
        self._callback = None
        self._stop_polling()

    def _connectivity_changed(self, state):
        previous, self._applied = self._applied, state
        if state:
            self._start_polling()
            return
        self._stop_polling()
        # already reset for this closed period
        if previous is not _unapplied and not previous:
            return
        self.registry.reset()
        self.agent_found.fire(False)

    def _start_polling(self):
        if self.polling:
            return
        logger.info("channel open, polling every %ss" % self.timer.period)
        self._polling = self.timer.start(self._callback)

    def _stop_polling(self):
        if self._polling is None:
            return
        logger.info("polling stopped")
        self._polling.cancel()
        self._polling = None
