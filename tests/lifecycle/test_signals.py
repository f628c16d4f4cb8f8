import asyncio
import signal

import pytest

from conftest import send
from lifecycle.signals import (
    NON_TERMINATING_SIGNALS,
    SIGHUP,
    SIGINT,
    SIGQUIT,
    SIGTERM,
    SIGUSR1,
    SIGUSR2,
    TERMINATING_SIGNALS,
    WATCHED_SIGNALS,
    SignalListener,
    classify,
)
from models.enums import SignalAction


def test_watched_signals_partition():
    assert set(WATCHED_SIGNALS) == TERMINATING_SIGNALS | NON_TERMINATING_SIGNALS
    assert not TERMINATING_SIGNALS & NON_TERMINATING_SIGNALS
    assert TERMINATING_SIGNALS == {SIGINT, SIGQUIT, SIGTERM}


@pytest.mark.parametrize("sig", [SIGINT, SIGQUIT, SIGTERM])
def test_terminating_signals_shutdown(sig):
    assert classify(sig) is SignalAction.SHUTDOWN
    assert classify(sig, reload_on_hup=True) is SignalAction.SHUTDOWN


@pytest.mark.parametrize("sig", [SIGHUP, SIGUSR1, SIGUSR2])
def test_non_terminating_signals_ignored_by_default(sig):
    assert classify(sig) is SignalAction.IGNORE


def test_hup_routes_to_reload_when_enabled():
    assert classify(SIGHUP, reload_on_hup=True) is SignalAction.RELOAD
    assert classify(SIGUSR1, reload_on_hup=True) is SignalAction.IGNORE
    assert classify(SIGUSR2, reload_on_hup=True) is SignalAction.IGNORE


def test_unwatched_signal_rejected():
    with pytest.raises(ValueError):
        classify(signal.SIGALRM)


@pytest.mark.asyncio
async def test_listener_receives_signal():
    listener = SignalListener()
    listener.install()
    try:
        send(SIGUSR1)
        assert await asyncio.wait_for(listener.receive(), timeout=1.0) == SIGUSR1
        assert listener.received == 1
    finally:
        assert listener.close() == 0


@pytest.mark.asyncio
async def test_listener_keeps_burst_in_delivery_order():
    listener = SignalListener()
    listener.install()
    try:
        send(SIGUSR1)
        send(SIGUSR2)
        send(SIGHUP)
        received = [await asyncio.wait_for(listener.receive(), timeout=1.0) for _ in range(3)]
        assert received == [SIGUSR1, SIGUSR2, SIGHUP]
    finally:
        listener.close()


@pytest.mark.asyncio
async def test_close_discards_pending_and_restores_defaults():
    listener = SignalListener()
    listener.install()
    send(SIGUSR1)
    send(SIGUSR2)
    await asyncio.sleep(0.05)

    assert listener.pending() == 2
    assert listener.close() == 2
    assert not listener.is_installed
    assert signal.getsignal(signal.SIGUSR1) == signal.SIG_DFL
    assert signal.getsignal(signal.SIGUSR2) == signal.SIG_DFL


@pytest.mark.asyncio
async def test_close_can_leave_signals_ignored():
    listener = SignalListener(signals=(SIGUSR1, SIGTERM))
    listener.install()

    listener.close(absorb=True)

    assert signal.getsignal(signal.SIGUSR1) == signal.SIG_IGN
    assert signal.getsignal(signal.SIGTERM) == signal.SIG_IGN
    send(SIGTERM)
    await asyncio.sleep(0.05)
    assert listener.pending() == 0


@pytest.mark.asyncio
async def test_install_twice_rejected():
    listener = SignalListener()
    listener.install()
    try:
        with pytest.raises(RuntimeError):
            listener.install()
    finally:
        listener.close()


@pytest.mark.asyncio
async def test_receive_requires_install():
    with pytest.raises(RuntimeError):
        await SignalListener().receive()


@pytest.mark.asyncio
async def test_failed_install_rolls_back():
    listener = SignalListener(signals=(SIGUSR1, signal.SIGKILL))

    with pytest.raises(RuntimeError):
        listener.install()

    assert not listener.is_installed
    assert signal.getsignal(signal.SIGUSR1) == signal.SIG_DFL
