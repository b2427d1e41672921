import abc

from ..observable import Observable, Observer


class PricingEngine(Observable, Observer, abc.ABC):
    """Abstract interface for pricing engines.

    ``calculate`` receives the plain ``arguments`` dict built by the
    instrument (see ``Bond.arguments``) and returns a results dict with at
    least ``value`` and ``settlement_value``.

    Engines forward the notifications of the market data they observe to
    the instruments using them.
    """

    def update(self):
        self.notify_observers()

    @abc.abstractmethod
    def calculate(self, arguments):
        raise NotImplementedError
