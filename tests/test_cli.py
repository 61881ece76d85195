from click.testing import CliRunner

from httptoolkit.cli.main import cli
from httptoolkit.core.errors import RemoteTransportError
from httptoolkit.services.text_service import RANDOM_STRING_SOURCE
from httptoolkit.tools import Tools


def test_random_string_command():
    result = CliRunner().invoke(cli, ["random-string", "12"])

    assert result.exit_code == 0
    value = result.output.strip()
    assert len(value) == 12
    assert set(value) <= set(RANDOM_STRING_SOURCE)


def test_slug_command():
    runner = CliRunner()

    ok = runner.invoke(cli, ["slug", "Now is the time"])
    assert ok.exit_code == 0
    assert ok.output.strip() == "now-is-the-time"

    bad = runner.invoke(cli, ["slug", "おはようございます"])
    assert bad.exit_code == 1
    assert "Could not create slug" in bad.output


def test_post_command(monkeypatch):
    sent: list[tuple[str, object]] = []

    class _FakeResponse:
        text = '{"ok": true}'

    async def fake_post(self, url, data, client=None):
        sent.append((url, data))
        return _FakeResponse(), 201

    monkeypatch.setattr(Tools, "post_json_to_remote", fake_post)

    result = CliRunner().invoke(cli, ["post", "http://example.com/hook", "--data", '{"a": 1}'])

    assert result.exit_code == 0
    assert sent == [("http://example.com/hook", {"a": 1})]
    assert "HTTP 201" in result.output
    assert '"ok"' in result.output


def test_post_command_rejects_bad_json():
    result = CliRunner().invoke(cli, ["post", "http://example.com/", "--data", "{nope"])

    assert result.exit_code == 2
    assert "not valid JSON" in result.output


def test_post_command_reports_transport_errors(monkeypatch):
    async def failing_post(self, url, data, client=None):
        raise RemoteTransportError("request to http://example.com/ failed: refused")

    monkeypatch.setattr(Tools, "post_json_to_remote", failing_post)

    result = CliRunner().invoke(cli, ["post", "http://example.com/"])

    assert result.exit_code == 1
    assert "Request failed" in result.output
