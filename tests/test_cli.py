import io
import logging

import pytest

from chip8vm import Chip8
from chip8vm.cli import build_parser, main, run_headless

from conftest import program


@pytest.fixture
def rom_file(tmp_path):
    def _write(data):
        path = tmp_path / "test.ch8"
        path.write_bytes(data)
        return path
    return _write


def test_parser_defaults():
    args = build_parser().parse_args(["game.ch8"])
    assert args.rom == "game.ch8"
    assert args.cpu_hz == 600
    assert args.scale == 10
    assert not args.headless
    assert not args.no_index_overflow_flag


def test_load_file(rom_file):
    vm = Chip8()
    vm.load_file(rom_file(program(0x6005)))
    vm.step()
    assert vm.V[0] == 5


def test_run_headless_prints_screen():
    vm = Chip8()
    vm.load(program(0xA000, 0xD005, 0x1204))
    out = io.StringIO()
    run_headless(vm, 10, out=out)
    lines = out.getvalue().splitlines()
    assert len(lines) == 32
    assert lines[0].startswith("####....")
    assert lines[1].startswith("#..#....")


def test_main_headless(rom_file, capsys):
    path = rom_file(program(0x6000, 0xF029, 0xD005, 0x1206))
    assert main([str(path), "--headless", "--steps", "20", "--seed", "1"]) == 0
    assert "####" in capsys.readouterr().out


def test_main_rejects_large_rom(rom_file, caplog):
    path = rom_file(b"\x00" * 4000)
    with caplog.at_level(logging.ERROR):
        assert main([str(path), "--headless"]) == 1
    assert "ROM too large" in caplog.text


def test_main_reports_fault(rom_file, caplog):
    path = rom_file(program(0x00EE))
    with caplog.at_level(logging.ERROR):
        assert main([str(path), "--headless", "--steps", "5"]) == 1
    assert "Stack underflow" in caplog.text


def test_main_missing_file(tmp_path):
    assert main([str(tmp_path / "missing.ch8"), "--headless"]) == 1
