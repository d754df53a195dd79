import logging
import unittest
from dataclasses import dataclass, field
from datetime import timedelta
from threading import Event

from reactivex import Subject, Observer, Observable
from reactivex.operators import observe_on

from bidder.core.service import (
    Service,
    ServiceCommand,
    ServiceLifecycleEvent,
    ServiceLifecycleState,
    ServiceStartError,
    ServiceStopError,
    default_scheduler,
)
from tests.test_support import BidderTestCase

logger = logging.getLogger("ServiceTestCase")


class FooService(Service):
    start_error: Exception | None = None
    stop_error: Exception | None = None

    def _start(self):
        if self.start_error:
            raise self.start_error

    def _stop(self):
        if self.stop_error:
            raise self.stop_error


@dataclass
class ServiceStateSubscriber(Observer[ServiceLifecycleEvent]):
    events_received: list[ServiceLifecycleEvent] = field(default_factory=list)
    received: Event = field(default_factory=Event)
    expected_count: int = 0

    def on_next(self, event: ServiceLifecycleEvent) -> None:
        logger.info(f"ServiceStateSubscriber.on_next(): {event}")
        self.events_received.append(event)
        if len(self.events_received) >= self.expected_count:
            self.received.set()


class ServiceTestCase(BidderTestCase):
    def test_service_lifecycle(self) -> None:
        commands: Subject[ServiceCommand] = Subject()
        commands_observable: Observable[ServiceCommand] = commands.pipe(
            observe_on(default_scheduler)
        )

        foo = FooService(commands_observable)
        self.assertEqual(ServiceLifecycleState.NEW, foo.state)
        self.assertEqual("FooService", foo.name)

        # subscribe to service state events
        foo_state_observer = ServiceStateSubscriber(expected_count=5)
        foo.lifecycle_state_observable.subscribe(foo_state_observer)

        # signal the service to start
        commands.on_next(ServiceCommand.START)
        foo.await_running(timedelta(seconds=5))
        self.assertTrue(foo.running)

        # trying to start the service when it's running should be a noop
        foo.start()
        self.assertTrue(foo.running)

        commands.on_next(ServiceCommand.STOP)
        foo.await_stopped(timedelta(seconds=5))
        self.assertTrue(foo.stopped)

        # trying to stop the service when it's stopped should be a noop
        foo.stop()
        self.assertTrue(foo.stopped)

        self.assertTrue(foo_state_observer.received.wait(5))
        self.assertEqual(
            [
                ServiceLifecycleEvent(foo.name, ServiceLifecycleState.NEW),
                ServiceLifecycleEvent(foo.name, ServiceLifecycleState.STARTING),
                ServiceLifecycleEvent(foo.name, ServiceLifecycleState.RUNNING),
                ServiceLifecycleEvent(foo.name, ServiceLifecycleState.STOPPING),
                ServiceLifecycleEvent(foo.name, ServiceLifecycleState.STOPPED),
            ],
            foo_state_observer.events_received,
        )

        with self.subTest("start the stopped service"):
            foo.start()
            self.assertTrue(foo.running)
            foo.stop()
            self.assertTrue(foo.stopped)

    def test_stop_new_service(self) -> None:
        foo = FooService()
        foo.stop()
        self.assertTrue(foo.stopped)
        foo.await_stopped(timedelta(seconds=1))

    def test_start_error(self) -> None:
        foo = FooService()
        foo.start_error = Exception("BOOM!")
        with self.assertRaises(ServiceStartError) as err:
            foo.start()
        self.assertEqual("FooService", err.exception.service_name)
        self.assertIsInstance(err.exception.__cause__, Exception)
        # the service is stopped when it fails to start
        self.assertTrue(foo.stopped)

        with self.subTest("service can be restarted after the start failure is fixed"):
            foo.start_error = None
            foo.start()
            self.assertTrue(foo.running)
            foo.stop()

    def test_stop_error(self) -> None:
        foo = FooService()
        foo.stop_error = Exception("BOOM!")
        foo.start()
        with self.assertRaises(ServiceStopError):
            foo.stop()
        # the service is still transitioned to stopped
        self.assertTrue(foo.stopped)

    def test_await_running_timeout(self) -> None:
        foo = FooService()
        with self.assertRaises(TimeoutError):
            foo.await_running(timedelta(milliseconds=10))


if __name__ == "__main__":
    unittest.main()
