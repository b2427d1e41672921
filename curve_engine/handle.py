"""Indirection cells pointing at quotes and term structures.

Observers register with the handle, not with its target: a handle forwards
the notifications of its target (when linked with
``register_as_observer=True``) and always notifies when it is relinked.

A link created with ``owns=False`` only borrows its target: the handle keeps
a weak reference, and the caller remains responsible for keeping the
target alive.
"""

import weakref

from .errors import StateError
from .observable import Observable
from .quotes import Quote, SimpleQuote


class _Link(Observable):

    def __init__(self, target=None, register_as_observer=True, owns=True):
        super().__init__()
        self._ref = None
        self._observing = False
        self.link_to(target, register_as_observer, owns, notify=False)

    def target(self):
        if self._ref is None:
            return None
        target = self._ref()
        if target is None:
            raise StateError("borrowed handle target no longer exists")
        return target

    def link_to(self, target, register_as_observer=True, owns=True, notify=True):
        if self._observing:
            current = self._ref()
            if current is not None:
                current._detach(self)

        if target is None:
            self._ref = None
        elif owns:
            self._ref = lambda t=target: t
        else:
            self._ref = weakref.ref(target)

        self._observing = bool(register_as_observer) and target is not None
        if self._observing:
            target._attach(self)

        if notify:
            self.notify_observers()

    def update(self):
        self.notify_observers()


class Handle:
    """Shared reference to a quote or term structure.

    The target of a plain handle is fixed at construction.
    """

    def __init__(self, target=None, register_as_observer=True):
        self._link = _Link(target, register_as_observer)

    def __repr__(self):
        if self.empty():
            return f"{type(self).__name__}(empty)"
        return f"{type(self).__name__}({self.current_link()!r})"

    def current_link(self):
        target = self._link.target()
        if target is None:
            raise StateError("empty Handle cannot be dereferenced")
        return target

    def empty(self):
        return self._link.target() is None

    def value(self):
        """Shortcut for ``current_link().value()`` on quote handles."""
        return self.current_link().value()

    def _attach(self, observer):
        self._link._attach(observer)

    def _detach(self, observer):
        self._link._detach(observer)


class RelinkableHandle(Handle):
    """Handle whose target can be swapped without touching its holders."""

    def link_to(self, target, register_as_observer=True, owns=True):
        self._link.link_to(target, register_as_observer, owns)


def as_quote_handle(value):
    """Wrap a float or a quote into a quote handle; handles pass through."""
    if isinstance(value, Handle):
        return value
    if isinstance(value, Quote):
        return Handle(value)
    return Handle(SimpleQuote(value))
