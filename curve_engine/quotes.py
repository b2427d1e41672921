"""Market quotes."""

from .errors import StateError
from .observable import Observable


class Quote(Observable):
    """Observable scalar market value."""

    def value(self):
        raise NotImplementedError

    def is_valid(self):
        raise NotImplementedError


class SimpleQuote(Quote):
    """Quote whose value is set by its market-data source.

    ``set_value`` notifies the observers once per actual change and returns
    the difference between the new and the old value.
    """

    def __init__(self, value=None):
        super().__init__()
        self._value = None if value is None else float(value)

    def __repr__(self):
        return f"SimpleQuote({self._value!r})"

    def value(self):
        if self._value is None:
            raise StateError("invalid SimpleQuote: no value set")
        return self._value

    def is_valid(self):
        return self._value is not None

    def set_value(self, value):
        value = None if value is None else float(value)
        old = self._value
        if value == old:
            return 0.0
        self._value = value
        self.notify_observers()
        if value is None or old is None:
            return 0.0
        return value - old

    def reset(self):
        self.set_value(None)
