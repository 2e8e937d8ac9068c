"""
Tests para el reintento de operaciones contra la base
"""
import pytest

from mesas.exceptions import (
    DataStoreUnavailable,
    PoolExhausted,
    SlotConflict,
    ValidationError,
)
from mesas.utils.retry import with_retry


class FlakyOperation:
    def __init__(self, errors, result="ok"):
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


def test_retries_transient_errors_until_success():
    operation = FlakyOperation([DataStoreUnavailable(), PoolExhausted()])
    delays = []

    result = with_retry(operation, max_attempts=3, base_delay=0.1, sleep=delays.append)

    assert result == "ok"
    assert operation.calls == 3
    # backoff exponencial
    assert delays == [0.1, 0.2]


def test_exhausted_attempts_raise_last_error():
    last = PoolExhausted()
    operation = FlakyOperation([DataStoreUnavailable(), DataStoreUnavailable(), last])

    with pytest.raises(PoolExhausted) as exc_info:
        with_retry(operation, max_attempts=3, base_delay=0, sleep=lambda s: None)

    assert exc_info.value is last
    assert operation.calls == 3


@pytest.mark.parametrize("error", [SlotConflict(), ValidationError(), ValueError("x")])
def test_non_transient_errors_are_not_retried(error):
    operation = FlakyOperation([error])

    with pytest.raises(type(error)):
        with_retry(operation, max_attempts=5, base_delay=0, sleep=lambda s: None)

    assert operation.calls == 1


def test_backoff_is_capped():
    operation = FlakyOperation([DataStoreUnavailable()] * 4)
    delays = []

    with_retry(
        operation, max_attempts=5, base_delay=1.0, max_delay=2.5, sleep=delays.append
    )

    assert delays == [1.0, 2.0, 2.5, 2.5]


def test_invalid_attempts():
    with pytest.raises(ValueError):
        with_retry(lambda: None, max_attempts=0)
