import pytest

from datasources.retry import retry


@pytest.mark.asyncio
async def test_retry_async_success_after_failure():
    calls = []

    @retry(attempts=3, delay=0.01, backoff=1, exceptions=(ValueError,))
    async def flaky(x):
        calls.append(x)
        if len(calls) < 2:
            raise ValueError("temporary")
        return x * 2

    result = await flaky(5)
    assert result == 10
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_retry_exhausted():
    calls = []

    @retry(attempts=2, delay=0.01, backoff=1, exceptions=(ValueError,))
    async def always_fail():
        calls.append(1)
        raise ValueError("nope")

    with pytest.raises(ValueError):
        await always_fail()
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_retry_ignores_other_exceptions():
    calls = []

    @retry(attempts=3, delay=0.01, exceptions=(ValueError,))
    async def wrong_kind():
        calls.append(1)
        raise KeyError("x")

    with pytest.raises(KeyError):
        await wrong_kind()
    assert len(calls) == 1


def test_retry_rejects_sync_functions():
    with pytest.raises(TypeError):
        @retry(attempts=2)
        def sync():
            return 1


def test_retry_requires_positive_attempts():
    with pytest.raises(ValueError):
        retry(attempts=0)
