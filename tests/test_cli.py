from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

import pytest

from conftest import wait_until
from weatherpoll import cli
from weatherpoll.core.cancellation import CancellationToken
from weatherpoll.core.models import Reading


def _answers(*values: str):
    it = iter(values)
    prompts: list[str] = []

    def _input(prompt: str) -> str:
        prompts.append(prompt)
        return next(it)

    _input.prompts = prompts  # type: ignore[attr-defined]
    return _input


class FakeHttpSource:
    instances: list["FakeHttpSource"] = []

    def __init__(self, endpoint: str, *, timeout_s: float = 10.0) -> None:
        self.endpoint = endpoint
        self.timeout_s = timeout_s
        self.count = 0
        self.closed = False
        FakeHttpSource.instances.append(self)

    def fetch(self) -> Reading:
        self.count += 1
        return Reading(temperature=24.0, pressure=1012.0 + self.count, humidity=50.0)

    def __enter__(self) -> "FakeHttpSource":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True


@pytest.mark.parametrize(
    "address",
    ["192.168.1.10", "0.0.0.0", "255.255.255.255", "10.0.0.01"],
)
def test_valid_ip_addresses(address: str) -> None:
    assert cli.is_valid_ip(address)


@pytest.mark.parametrize(
    "address",
    ["256.1.1.1", "1.2.3", "1.2.3.4.5", "a.b.c.d", "", "192.168.1.10/24"],
)
def test_invalid_ip_addresses(address: str) -> None:
    assert not cli.is_valid_ip(address)


def test_prompt_ip_repeats_until_valid() -> None:
    err = io.StringIO()
    answers = _answers("not-an-ip", "300.1.1.1", "192.168.0.7")
    assert cli.prompt_ip(answers, err) == "192.168.0.7"
    assert len(answers.prompts) == 3
    assert err.getvalue().count("Invalid IP address format") == 2


def test_prompt_zone_rejects_blank() -> None:
    assert cli.prompt_zone(_answers("  ", "North"), io.StringIO()) == "North"


def test_prompt_duration() -> None:
    assert cli.prompt_duration(_answers(""), io.StringIO()) is None
    err = io.StringIO()
    assert cli.prompt_duration(_answers("abc", "-5", "60"), err) == 60
    assert err.getvalue().count("Invalid duration") == 2


def test_quit_listener_cancels_on_q() -> None:
    token = CancellationToken()
    thread = cli.start_quit_listener(token, io.StringIO("hello\n\nq\nmore\n"))
    thread.join(timeout=2.0)
    assert token.cancelled
    assert token.reason == "user abort"


def test_quit_listener_ends_on_eof_without_cancelling() -> None:
    token = CancellationToken()
    thread = cli.start_quit_listener(token, io.StringIO("x\ny\n"))
    thread.join(timeout=2.0)
    assert not thread.is_alive()
    assert not token.cancelled


def test_directory_failure_exits_with_1(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    monkeypatch.setattr(cli, "HttpSampleSource", FakeHttpSource)
    FakeHttpSource.instances.clear()

    code = cli.main(
        ["--ip", "10.0.0.5", "--zone", "A1", "--duration", "5", "--no-gui",
         "--output-root", str(blocker)],
        stdin=io.StringIO(""),
        out=io.StringIO(),
    )

    assert code == 1
    assert FakeHttpSource.instances == []


def test_invalid_ip_and_duration_options_fall_back_to_prompts(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(cli, "HttpSampleSource", FakeHttpSource)
    FakeHttpSource.instances.clear()
    config = tmp_path / "poller.yaml"
    config.write_text("poll_interval_s: 0.3\n", encoding="utf-8")
    answers = _answers("10.0.0.3", "1")

    code = cli.main(
        ["--ip", "999.0.0.1", "--zone", "A1", "--duration", "soon", "--no-gui",
         "--config", str(config), "--output-root", str(tmp_path / "out")],
        input_fn=answers,
        stdin=io.StringIO(""),
        out=io.StringIO(),
    )

    assert code == 0
    assert len(answers.prompts) == 2
    assert FakeHttpSource.instances[0].endpoint == "http://10.0.0.3"


@pytest.mark.parametrize(
    "config_text",
    ["poll_interval_s: [1\n", "poll_interval_s: [1, 2]\nrequest_timeout_s: fast\n", "- 1\n"],
)
def test_bad_config_file_runs_with_defaults(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
    config_text: str,
) -> None:
    caplog.set_level(logging.INFO, logger="weatherpoll")
    monkeypatch.setattr(cli, "HttpSampleSource", FakeHttpSource)
    FakeHttpSource.instances.clear()
    config = tmp_path / "poller.yaml"
    config.write_text(config_text, encoding="utf-8")

    code = cli.main(
        ["--ip", "10.0.0.4", "--zone", "A1", "--duration", "1", "--no-gui",
         "--config", str(config), "--output-root", str(tmp_path / "out")],
        stdin=io.StringIO(""),
        out=io.StringIO(),
    )

    assert code == 0
    source = FakeHttpSource.instances[0]
    assert source.timeout_s == 10.0
    # Default 5 s interval: one fetch before the 1 s limit ends the run.
    assert source.count == 1
    assert "limit 1 s" in caplog.text


def test_headless_run_exports_csv_matching_buffer(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(cli, "HttpSampleSource", FakeHttpSource)
    FakeHttpSource.instances.clear()
    config = tmp_path / "poller.yaml"
    config.write_text("poll_interval_s: 0.3\nbuffer_capacity: 50\n", encoding="utf-8")
    out = io.StringIO()

    code = cli.main(
        ["--config", str(config), "--output-root", str(tmp_path / "out"), "--no-gui"],
        input_fn=_answers("192.168.1.20", "Zone 4", "1"),
        stdin=io.StringIO(""),
        out=out,
    )

    assert code == 0
    source = FakeHttpSource.instances[0]
    assert source.endpoint == "http://192.168.1.20"
    assert source.timeout_s == 10.0
    assert source.closed

    zone_dir = tmp_path / "out" / "Zone_4"
    csv_files = list(zone_dir.glob("data_Zone_4_*.csv"))
    assert len(csv_files) == 1
    with csv_files[0].open(newline="", encoding="utf-8") as fh:
        rows = list(csv.reader(fh))
    assert rows[0] == ["Time", "Temperature", "Pressure", "Humidity"]
    assert len(rows) - 1 == source.count
    assert [r[0] for r in rows[1:]] == [str(i) for i in range(source.count)]
    assert 3 <= source.count <= 4
    assert len(list(zone_dir.glob("realtime_plot_*_Zone_4.png"))) == 3
    assert "Created:" in out.getvalue()


def test_headless_run_stops_on_q(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "HttpSampleSource", FakeHttpSource)
    config = tmp_path / "poller.yaml"
    config.write_text("poll_interval_s: 30\n", encoding="utf-8")

    class SlowStdin(io.StringIO):
        """Yields 'q' only after the first sample has been recorded."""

        def __iter__(self):
            assert wait_until(lambda: any(s.count for s in FakeHttpSource.instances), timeout=5.0)
            yield "q\n"

    FakeHttpSource.instances.clear()
    code = cli.main(
        ["--ip", "10.0.0.9", "--zone", "Q", "--no-duration-prompt", "--no-gui",
         "--output-root", str(tmp_path)],
        stdin=SlowStdin(),
        out=io.StringIO(),
    )

    assert code == 0
    assert FakeHttpSource.instances[0].count == 1
    assert len(list((tmp_path / "Q").glob("*.csv"))) == 1
