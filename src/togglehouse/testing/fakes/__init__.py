"""Testing fakes – in-memory doubles for kernel ports."""
from togglehouse.kernel.time import FrozenClock
from togglehouse.testing.fakes.clock import FakeClock
from togglehouse.testing.fakes.metrics import FakeMetricsRegistry

__all__ = ["FakeClock", "FakeMetricsRegistry", "FrozenClock"]
