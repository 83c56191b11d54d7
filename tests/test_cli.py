"""Tests for the CLI."""

import json
import re

from click.testing import CliRunner

from lavarand import __version__, platform
from lavarand.cli import main
from lavarand.errors import DeviceError, DeviceErrorKind
from lavarand.sources.camera import CameraSource

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")
FAST = ["--width", "48", "--height", "32", "--warmup", "2", "--seed", "1"]


class TestCLI:
    def test_version(self):
        r = CliRunner().invoke(main, ["--version"])
        assert r.exit_code == 0
        assert __version__ in r.output

    def test_generate_hex(self):
        r = CliRunner().invoke(main, ["generate", *FAST])
        assert r.exit_code == 0, r.output
        assert re.fullmatch(r"[0-9a-f]{64}", r.output.strip())

    def test_generate_uuid_count(self):
        r = CliRunner().invoke(main, ["generate", "--kind", "uuid", "--count", "3", *FAST])
        assert r.exit_code == 0, r.output
        lines = r.output.strip().splitlines()
        assert len(lines) == 3
        assert all(UUID_RE.match(line) for line in lines)

    def test_generate_int_range(self):
        r = CliRunner().invoke(main, ["generate", "--kind", "int", "--min", "1", "--max", "6", "--count", "5", *FAST])
        assert r.exit_code == 0, r.output
        assert all(1 <= int(v) <= 6 for v in r.output.split())

    def test_generate_bad_range(self):
        r = CliRunner().invoke(main, ["generate", "--kind", "int", "--min", "9", "--max", "1", *FAST])
        assert r.exit_code != 0

    def test_generate_json_and_log(self):
        r = CliRunner().invoke(main, ["generate", "--json", "--count", "2", "--show-log", *FAST])
        assert r.exit_code == 0, r.output
        first = json.loads(r.output.splitlines()[0])
        assert first["kind"] == "hex"
        assert first["seed_preview"].endswith("...")
        assert "CAPTURE LOG (2 items" in r.output

    def test_simulate(self):
        r = CliRunner().invoke(main, ["simulate", "--ticks", "50", "--seed", "3"])
        assert r.exit_code == 0
        assert "20 blobs" in r.output
        assert "after 50 ticks" in r.output

    def test_generate_max_above_32_bits(self):
        r = CliRunner().invoke(main, ["generate", "--kind", "int", "--min", "0", "--max", "5000000000", *FAST])
        assert r.exit_code == 2
        assert "--max" in r.output
        assert r.exception is None or isinstance(r.exception, SystemExit)

    def test_generate_negative_min(self):
        r = CliRunner().invoke(main, ["generate", "--kind", "int", "--min=-1", "--max", "6", *FAST])
        assert r.exit_code == 2
        assert "--min" in r.output
        assert r.exception is None or isinstance(r.exception, SystemExit)

    def test_generate_camera_unavailable(self, monkeypatch):
        def refuse(self):
            raise DeviceError(DeviceErrorKind.DEVICE_NOT_FOUND)

        monkeypatch.setattr(CameraSource, "start", refuse)
        r = CliRunner().invoke(main, ["generate", "--source", "camera"])
        assert r.exit_code == 1
        assert "Error: No camera device found." in r.output

    def test_scan(self, monkeypatch):
        monkeypatch.setattr(platform, "camera_present", lambda index=0: False)
        r = CliRunner().invoke(main, ["scan"])
        assert r.exit_code == 0, r.output
        assert "Platform" in r.output
        assert "lava" in r.output
        assert "Found 1 available entropy source(s)" in r.output
