"""
Pytest configuration and fixtures for all tests.
"""
import concurrent.futures

import pytest

BLOCKING_CALL_TIMEOUT = 5.0


@pytest.fixture
def bounded():
    """
    Run a blocking call on a worker thread and fail the test if it hangs.

    Exceptions raised by the call propagate to the test unchanged.

    Usage:
        bounded(bridge.push, record)
        bounded(bridge.finish, timeout=2.0)
    """
    def call(fn, *args, timeout=BLOCKING_CALL_TIMEOUT):
        pool = concurrent.futures.ThreadPoolExecutor(max_workers=1)
        try:
            future = pool.submit(fn, *args)
            try:
                return future.result(timeout=timeout)
            except concurrent.futures.TimeoutError:
                pytest.fail(f"{getattr(fn, '__qualname__', fn)} blocked for more than {timeout}s")
        finally:
            pool.shutdown(wait=False)
    return call


@pytest.fixture
def csv_payload():
    """One CSV record: the integers 0..99 joined by commas."""
    return ",".join(str(i) for i in range(100))


@pytest.fixture
def temp_dir(tmp_path):
    """
    Provide a temporary directory for tests.

    This wraps pytest's built-in tmp_path fixture.
    """
    return tmp_path
