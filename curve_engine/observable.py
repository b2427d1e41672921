"""Observer pattern used to propagate market-data changes.

An :class:`Observable` keeps its observers as weak references indexed by
identity, in registration order. Observers own strong references to what
they observe, so an input stays alive as long as something depends on it,
while a collected observer silently drops out of every edge set.

Notifications are one-hop: ``update()`` is expected to flip a flag (and
possibly forward the notification), never to recompute.
"""

import logging
import weakref

from .errors import NotificationError

logger = logging.getLogger(__name__)


class Observable:
    """Something whose changes can be observed."""

    def __init__(self):
        self._observers = {}
        super().__init__()

    def _attach(self, observer):
        key = id(observer)
        if key in self._observers:
            return
        self_ref = weakref.ref(self)

        def _drop(_, key=key):
            owner = self_ref()
            if owner is not None:
                owner._observers.pop(key, None)

        self._observers[key] = weakref.ref(observer, _drop)

    def _detach(self, observer):
        self._observers.pop(id(observer), None)

    def observers(self):
        """Return the live observers, in registration order."""
        alive = (ref() for ref in list(self._observers.values()))
        return [o for o in alive if o is not None]

    def notify_observers(self):
        """Call ``update()`` on every observer.

        A failing observer does not prevent the others from being notified;
        the collected failures are raised afterwards as a NotificationError.
        """
        errors = []
        for observer in self.observers():
            try:
                observer.update()
            except Exception as exc:
                errors.append(exc)
        if errors:
            logger.debug("%s observer(s) failed during notification", len(errors))
            raise NotificationError(errors)


class Observer:
    """Something that reacts to changes of the observables it watches."""

    def __init__(self):
        self._observables = {}
        super().__init__()

    def register_with(self, observable):
        """Watch ``observable``. Registering twice has no further effect."""
        if observable is None:
            return
        self._observables[id(observable)] = observable
        observable._attach(self)

    def unregister_with(self, observable):
        if observable is None:
            return
        self._observables.pop(id(observable), None)
        observable._detach(self)

    def unregister_with_all(self):
        for observable in list(self._observables.values()):
            observable._detach(self)
        self._observables = {}

    def observables(self):
        return list(self._observables.values())

    def update(self):
        """Called by the observables this object is registered with."""
        raise NotImplementedError
