"""Tests for handing previews to the external player command."""

from __future__ import annotations

import subprocess

import pytest

import services
from services import PreviewPlayer


class FakeProcess:
    def __init__(self, argv, **kwargs) -> None:
        self.argv = argv
        self.kwargs = kwargs
        self.terminated = False
        self.killed = False
        self.waits = []
        self.ignores_terminate = False

    def poll(self):
        return 0 if self.terminated else None

    def terminate(self) -> None:
        if not self.ignores_terminate:
            self.terminated = True

    def kill(self) -> None:
        self.killed = True
        self.terminated = True

    def wait(self, timeout=None):
        self.waits.append(timeout)
        if not self.terminated:
            raise subprocess.TimeoutExpired(self.argv, timeout)
        return 0


@pytest.fixture
def spawned(monkeypatch):
    processes: list[FakeProcess] = []

    def fake_popen(argv, **kwargs):
        process = FakeProcess(argv, **kwargs)
        processes.append(process)
        return process

    monkeypatch.setattr(services.shutil, "which", lambda command: f"/usr/bin/{command}")
    monkeypatch.setattr(services.subprocess, "Popen", fake_popen)
    return processes


def test_missing_command_is_reported(monkeypatch):
    monkeypatch.setattr(services.shutil, "which", lambda command: None)
    player = PreviewPlayer("no-such-player")

    success, message = player.play("https://audio.test/a.m4a")

    assert not player.is_available
    assert success is False
    assert "no-such-player" in message


def test_play_starts_command_with_url(spawned):
    player = PreviewPlayer("ffplay", ["-nodisp", "-autoexit"])

    success, _ = player.play("https://audio.test/a.m4a")

    assert success is True
    assert spawned[0].argv == ["/usr/bin/ffplay", "-nodisp", "-autoexit", "https://audio.test/a.m4a"]
    assert spawned[0].kwargs["stdout"] is subprocess.DEVNULL


def test_new_preview_replaces_the_previous_one(spawned):
    player = PreviewPlayer("ffplay")

    player.play("https://audio.test/a.m4a")
    player.play("https://audio.test/b.m4a")

    assert [p.terminated for p in spawned] == [True, False]


def test_stop_terminates_running_preview(spawned):
    player = PreviewPlayer("ffplay")
    player.play("https://audio.test/a.m4a")

    player.stop()
    player.stop()

    assert spawned[0].terminated is True


def test_start_failure_is_reported(monkeypatch):
    def broken_popen(argv, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(services.shutil, "which", lambda command: "/usr/bin/ffplay")
    monkeypatch.setattr(services.subprocess, "Popen", broken_popen)

    success, message = PreviewPlayer("ffplay").play("https://audio.test/a.m4a")

    assert success is False
    assert "denied" in message


def test_stop_reaps_terminated_preview(spawned):
    player = PreviewPlayer("ffplay")
    player.play("https://audio.test/a.m4a")

    player.stop()

    assert spawned[0].waits == [2]
    assert spawned[0].killed is False


def test_stop_kills_preview_that_ignores_terminate(spawned):
    player = PreviewPlayer("ffplay")
    player.play("https://audio.test/a.m4a")
    spawned[0].ignores_terminate = True

    player.stop()

    assert spawned[0].killed is True
    assert spawned[0].waits == [2, None]
