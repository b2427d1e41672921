"""Objects caching the result of an expensive calculation."""

import logging

from .observable import Observable, Observer

logger = logging.getLogger(__name__)


class LazyObject(Observable, Observer):
    """Calculation cache invalidated by notifications.

    A notification only marks the object as stale and forwards the
    notification to its own observers; ``perform_calculations()`` runs on the
    next call to ``calculate()``, at most once per stale period.

    Subclasses implement ``perform_calculations()``, which must be idempotent,
    and call ``calculate()`` at the top of every accessor returning derived
    data.
    """

    def __init__(self, always_forward=False):
        super().__init__()
        self._calculated = False
        self._frozen = False
        self._updating = False
        self._always_forward = bool(always_forward)

    def update(self):
        if self._updating:
            return
        # An object that was never calculated has handed nothing out, so its
        # observers have nothing stale to drop.
        if not (self._calculated or self._always_forward):
            return
        self._updating = True
        try:
            self._calculated = False
            if not self._frozen:
                self.notify_observers()
        finally:
            self._updating = False

    def is_calculated(self):
        return self._calculated

    def calculate(self):
        if self._calculated or self._frozen:
            return
        # Set first so that re-entrant calls do not recurse.
        self._calculated = True
        try:
            self.perform_calculations()
        except Exception:
            self._calculated = False
            raise

    def recalculate(self):
        """Recalculate now, whether or not a notification was received."""
        was_frozen = self._frozen
        self._calculated = False
        self._frozen = False
        try:
            self.calculate()
        finally:
            self._frozen = was_frozen
        self.notify_observers()

    def freeze(self):
        """Keep the current results until ``unfreeze()`` is called."""
        self._frozen = True

    def unfreeze(self):
        if not self._frozen:
            return
        self._frozen = False
        self._calculated = False
        self.notify_observers()

    def always_forward_notifications(self):
        self._always_forward = True

    def perform_calculations(self):
        raise NotImplementedError
