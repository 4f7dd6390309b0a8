"""
Event streams used for every piece of long-lived state.

- EventSource: a list of handlers. Values fired are delivered to the handlers
  registered at the time, in registration order. Nothing is replayed.
- StateStream: an EventSource that caches the last value fired. A handler added
  to the stream immediately receives the cached value.
- DistinctView: a read side of a StateStream that skips values equal to the one
  delivered just before.
- OutcomeLatch: fires at most once until re-armed, and replays the latched value
  to late handlers.
"""


class EventSource(object):

    def __init__(self):
        self._handlers = []

    def __iadd__(self, handler):
        return self.add(handler)

    def __isub__(self, handler):
        return self.remove(handler)

    def add(self, handler):
        self._handlers.append(handler)
        return self

    def remove(self, handler):
        if handler in self._handlers:
            self._handlers.remove(handler)
        return self

    def fire(self, *args, **kwargs):
        self._fire(*args, **kwargs)

    def _fire(self, *args, **kwargs):
        # copy, since a handler may remove itself while being notified
        for handler in tuple(self._handlers):
            handler(*args, **kwargs)


class StateStream(EventSource):
    """
    Holds the most recent value. New handlers are called with the current value
    synchronously before they are registered for future values.
    """

    def __init__(self, initial=None):
        super().__init__()
        self._value = initial

    @property
    def value(self):
        return self._value

    def add(self, handler):
        handler(self._value)
        return super().add(handler)

    def fire(self, value):
        self._value = value
        self._fire(value)

    def distinct(self):
        """ :return: a view of this stream that suppresses duplicate-in-a-row values """
        return DistinctView(self)


class DistinctView:
    """
    Filters a StateStream so that each handler only sees a value when it differs
    from the value that handler saw last.
    """

    _unset = object()

    def __init__(self, source: StateStream):
        self.source = source
        self._wrappers = {}     # handler -> the wrapper registered on the source

    @property
    def value(self):
        return self.source.value

    def __iadd__(self, handler):
        return self.add(handler)

    def __isub__(self, handler):
        return self.remove(handler)

    def add(self, handler):
        last = [self._unset]

        def deliver(value):
            if last[0] is not self._unset and last[0] == value:
                return
            last[0] = value
            handler(value)

        self._wrappers[handler] = deliver
        self.source.add(deliver)
        return self

    def remove(self, handler):
        wrapper = self._wrappers.pop(handler, None)
        if wrapper is not None:
            self.source.remove(wrapper)
        return self


class OutcomeLatch(EventSource):
    """
    A one-shot notification. The first fire() after arming is delivered and latched,
    further fires are ignored. Handlers added after the latch fired receive the latched
    value immediately. cancel() disarms the latch without delivering anything.
    """

    def __init__(self):
        super().__init__()
        self._armed = True
        self._fired = False
        self._value = None

    def rearm(self):
        self._armed = True
        self._fired = False
        self._value = None

    def cancel(self):
        self._armed = False

    def add(self, handler):
        super().add(handler)
        if self._fired:
            handler(self._value)
        return self

    def fire(self, value):
        if not self._armed:
            return
        self._armed = False
        self._fired = True
        self._value = value
        self._fire(value)
