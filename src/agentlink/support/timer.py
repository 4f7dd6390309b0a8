"""
Cancellable repeating timers.

A Timer calls a callback straight away and then once per period, until the
CancellationToken returned from start() is cancelled.
"""
import logging
import threading
import time
from abc import abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)


class CancellationToken:
    """ Stops a running timer. Cancelling is idempotent. """

    def __init__(self):
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self):
        self._event.set()

    def wait(self, timeout=None) -> bool:
        """ blocks until cancelled or the timeout elapses.
        :return: True if the token was cancelled
        """
        return self._event.wait(timeout)


class Timer:

    @property
    @abstractmethod
    def period(self):
        """ the time in seconds between two callbacks """
        raise NotImplementedError

    @abstractmethod
    def start(self, callback: Callable) -> CancellationToken:
        """
        Calls the callback immediately, and then every period until cancelled.
        :param callback: called with the tick count, starting at 0.
        :return: the token that stops the timer.
        """
        raise NotImplementedError


class IntervalTimer(Timer):
    """
    Runs each started callback on its own daemon thread.
    Ticks are scheduled at start + n * period, so a slow callback does not push back the
    ticks after it. When a callback overruns whole periods, those ticks are skipped.
    The thread waits on the cancellation token between ticks, and checks it again just
    before each callback. A callback already running when the token is cancelled is not
    interrupted, and no callback starts once the cancellation is seen.
    Exceptions from the callback are logged and the timer keeps running.
    """

    def __init__(self, period, log=logger, clock=time.monotonic):
        """
        :param period: the period in seconds
        :param clock: returns the current time in seconds
        """
        self._period = period
        self.logger = log
        self._clock = clock

    @property
    def period(self):
        return self._period

    def start(self, callback: Callable) -> CancellationToken:
        token = CancellationToken()
        t = threading.Thread(target=self._run, args=(callback, token), name="interval-timer")
        t.daemon = True
        t.start()
        return token

    def _run(self, callback, token: CancellationToken):
        start = self._clock()
        tick = 0
        while not token.cancelled:
            self._do(callback, tick, token)
            tick += 1
            if token.wait(self._next_delay(start, self._clock())):
                break
        self.logger.debug("interval timer stopped after %d ticks" % tick)

    def _next_delay(self, start, now):
        """ the time until the next tick boundary after now """
        return self._period - ((now - start) % self._period)

    def _do(self, callback, tick, token: CancellationToken):
        if token.cancelled:
            return
        try:
            callback(tick)
        except Exception as e:
            self.logger.exception(e)
