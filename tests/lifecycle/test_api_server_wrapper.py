import asyncio
import socket

import pytest
import pytest_asyncio
from fastapi import FastAPI

from conftest import free_port
from lifecycle.api_server_wrapper import APIServerWrapper


async def wait_started(wrapper: APIServerWrapper, timeout: float = 5.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not wrapper.started:
        if asyncio.get_running_loop().time() > deadline:
            raise TimeoutError("uvicorn did not start")
        await asyncio.sleep(0.02)


@pytest_asyncio.fixture
async def api_wrapper():
    wrapper = APIServerWrapper(FastAPI(), host="127.0.0.1", port=free_port())
    yield wrapper
    await wrapper.stop()


@pytest.mark.asyncio
async def test_serve_and_stop(api_wrapper):
    task = asyncio.create_task(api_wrapper.serve())
    await wait_started(api_wrapper)

    assert api_wrapper.is_running
    assert api_wrapper.server is not None

    await api_wrapper.stop()
    await asyncio.wait_for(task, timeout=2.0)

    assert not api_wrapper.is_running
    assert api_wrapper.server is None


@pytest.mark.asyncio
async def test_stop_without_serve(api_wrapper):
    # Should not crash
    await api_wrapper.stop()
    assert not api_wrapper.is_running


@pytest.mark.asyncio
async def test_second_serve_rejected(api_wrapper):
    task = asyncio.create_task(api_wrapper.serve())
    await wait_started(api_wrapper)

    with pytest.raises(RuntimeError):
        await api_wrapper.serve()

    await api_wrapper.stop()
    await asyncio.wait_for(task, timeout=2.0)


@pytest.mark.asyncio
async def test_port_released_after_stop(api_wrapper):
    task = asyncio.create_task(api_wrapper.serve())
    await wait_started(api_wrapper)

    await api_wrapper.stop()
    await asyncio.wait_for(task, timeout=2.0)

    # port must be free now
    s = socket.socket()
    s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    s.bind(("127.0.0.1", api_wrapper.port))
    s.close()


@pytest.mark.asyncio
async def test_serve_cancelled_externally(api_wrapper):
    task = asyncio.create_task(api_wrapper.serve())
    await wait_started(api_wrapper)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert not api_wrapper.is_running


@pytest.mark.asyncio
async def test_port_in_use_is_a_runtime_error(api_wrapper):
    with socket.socket() as blocker:
        blocker.bind(("127.0.0.1", api_wrapper.port))
        blocker.listen()

        with pytest.raises(RuntimeError, match="failed to start") as exc_info:
            await asyncio.wait_for(api_wrapper.serve(), timeout=5.0)

    assert isinstance(exc_info.value.__cause__, SystemExit)
    assert not api_wrapper.is_running
