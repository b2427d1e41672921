import gc

import pytest

from curve_engine.errors import NotificationError
from curve_engine.observable import Observable, Observer


class Recorder(Observer):
    def __init__(self, log=None, name=None):
        super().__init__()
        self.updates = 0
        self.log = log
        self.name = name

    def update(self):
        self.updates += 1
        if self.log is not None:
            self.log.append(self.name)


class Exploding(Observer):
    def update(self):
        raise ValueError("boom")


def test_notify_without_observers_is_noop():
    Observable().notify_observers()


def test_repeated_registration_notifies_once():
    subject = Observable()
    rec = Recorder()
    rec.register_with(subject)
    rec.register_with(subject)

    subject.notify_observers()

    assert rec.updates == 1
    assert subject.observers() == [rec]


def test_observers_are_notified_in_registration_order():
    subject = Observable()
    log = []
    observers = [Recorder(log, name) for name in "abc"]
    for o in observers:
        o.register_with(subject)

    subject.notify_observers()

    assert log == ["a", "b", "c"]


def test_failing_observer_does_not_block_the_others():
    subject = Observable()
    first, last = Recorder(), Recorder()
    bad = Exploding()
    for o in (first, bad, last):
        o.register_with(subject)

    with pytest.raises(NotificationError) as info:
        subject.notify_observers()

    assert first.updates == 1
    assert last.updates == 1
    assert len(info.value.errors) == 1
    assert "boom" in str(info.value)


def test_unregister_removes_the_edge():
    subject = Observable()
    rec = Recorder()
    rec.register_with(subject)
    rec.unregister_with(subject)

    subject.notify_observers()

    assert rec.updates == 0
    assert rec.observables() == []


def test_unregister_with_all():
    a, b = Observable(), Observable()
    rec = Recorder()
    rec.register_with(a)
    rec.register_with(b)
    rec.unregister_with_all()

    a.notify_observers()
    b.notify_observers()

    assert rec.updates == 0
    assert a.observers() == [] and b.observers() == []


def test_collected_observer_leaves_no_dangling_edge():
    subject = Observable()
    rec = Recorder()
    rec.register_with(subject)
    del rec
    gc.collect()

    assert subject.observers() == []
    subject.notify_observers()
