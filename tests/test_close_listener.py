import signal
import subprocess
import sys
from pathlib import Path

import pytest

from httptoolkit.core.lifecycle import FAREWELL_MESSAGE, CloseListener, close_listener
from httptoolkit.tools import Tools


@pytest.mark.parametrize("sig", [signal.SIGINT, signal.SIGTERM])
def test_close_listener_invokes_shutdown_callback(sig, capsys):
    calls: list[str] = []

    with CloseListener(on_shutdown=lambda: calls.append("shutdown")):
        signal.raise_signal(sig)

    assert calls == ["shutdown"]
    assert "Thank you!" in capsys.readouterr().out


def test_close_listener_default_exits_with_success():
    listener = close_listener()
    try:
        with pytest.raises(SystemExit) as exc_info:
            signal.raise_signal(signal.SIGTERM)
    finally:
        listener.uninstall()

    assert exc_info.value.code == 0


def test_close_listener_restores_previous_handlers():
    before = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}

    listener = CloseListener(on_shutdown=lambda: None).install()
    assert listener.installed
    assert signal.getsignal(signal.SIGTERM) is not before[signal.SIGTERM]

    listener.uninstall()

    assert not listener.installed
    assert {sig: signal.getsignal(sig) for sig in before} == before


def test_close_listener_install_is_idempotent():
    before = signal.getsignal(signal.SIGINT)
    listener = CloseListener(on_shutdown=lambda: None)

    listener.install()
    listener.install()
    listener.uninstall()

    assert signal.getsignal(signal.SIGINT) is before


def test_close_listener_custom_message(capsys):
    with CloseListener(on_shutdown=lambda: None, message="bye [now]"):
        signal.raise_signal(signal.SIGINT)

    out = capsys.readouterr().out
    assert "bye [now]" in out
    assert FAREWELL_MESSAGE.strip() not in out


def test_tools_close_listener_installs_listener():
    calls: list[str] = []
    listener = Tools().close_listener(on_shutdown=lambda: calls.append("done"))
    try:
        signal.raise_signal(signal.SIGINT)
    finally:
        listener.uninstall()

    assert calls == ["done"]


def test_close_listener_shares_console_without_loading_cli():
    from httptoolkit.cli import output
    from httptoolkit.core import lifecycle

    assert lifecycle.console is output.console

    code = "import sys, httptoolkit.core.lifecycle; sys.exit('httptoolkit.cli.output' in sys.modules)"
    result = subprocess.run([sys.executable, "-c", code], cwd=Path(__file__).resolve().parents[1])
    assert result.returncode == 0
