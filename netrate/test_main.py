"""End-to-end tests for the netrate application and CLI"""

import os

import pytest

from netrate.config import AppConfig, build_output_paths, resolve_prefix_dir
from netrate.errors import ConfigError
from netrate.main import NetRate, build_parser, config_from_args, main


def write_source(path, recv, send):
    path.write_text(f"  eth0: {recv} 0 0 0 0 0 0 0 {send} 0 0 0 0 0 0 0\n")


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "net_dev"
    write_source(path, recv=500, send=300)
    return path


def make_app(tmp_path, source, **overrides):
    config = AppConfig(
        net_dev="eth0",
        enable_alternate_prefix=True,
        alternate_prefix_dir=str(tmp_path),
        source_path=str(source),
        log_dir=str(tmp_path / "logs"),
        interval_seconds=1,
        **overrides,
    )
    return NetRate(config)


def test_two_runs_raw(tmp_path, source):
    app = make_app(tmp_path, source, scaling_enabled=False)
    paths = app.paths

    app.step()
    assert paths.recv_total.read_text() == "500"
    assert paths.send_total.read_text() == "300"
    assert paths.recv_interval.read_text() == "500"
    assert paths.send_interval.read_text() == "300"

    write_source(source, recv=1500, send=900)
    app.step()
    assert paths.recv_total.read_text() == "1500"
    assert paths.send_total.read_text() == "900"
    assert paths.recv_interval.read_text() == "1000"
    assert paths.send_interval.read_text() == "600"


def test_two_runs_scaled(tmp_path, source):
    app = make_app(tmp_path, source)
    app.step()
    assert app.paths.recv_interval.read_text() == "500B"

    write_source(source, recv=500 + 3 * 1024 * 1024 + 1, send=300 + 1536)
    app.step()
    assert app.paths.recv_interval.read_text() == "3.0MB"
    assert app.paths.send_interval.read_text() == "1.5KB"


def test_run_writes_pid_and_ticks(tmp_path, source, monkeypatch):
    app = make_app(tmp_path, source)
    monkeypatch.setattr(app.scheduler, "sleep", lambda seconds: None)

    assert app.run(max_ticks=2) == 2
    assert app.paths.pid.read_text() == str(os.getpid())
    assert app.paths.recv_interval.read_text() == "0B"


def test_output_paths_use_xdg_runtime_dir(tmp_path):
    config = AppConfig(net_dev="eth0", send_total_filename="tx")
    paths = build_output_paths(config, {"XDG_RUNTIME_DIR": str(tmp_path)})
    assert paths.send_total == tmp_path / "tx"
    assert paths.pid == tmp_path / "netrate_pid"


@pytest.mark.parametrize("environ", [{}, {"XDG_RUNTIME_DIR": ""}])
def test_missing_runtime_dir(environ):
    with pytest.raises(ConfigError):
        resolve_prefix_dir(AppConfig(net_dev="eth0"), environ)


def test_alternate_prefix_ignores_environment(tmp_path):
    config = AppConfig(net_dev="eth0", enable_alternate_prefix=True, alternate_prefix_dir=str(tmp_path))
    assert resolve_prefix_dir(config, {}) == tmp_path


def test_parser_defaults():
    config = config_from_args(build_parser().parse_args(["eth0"]))
    assert config.net_dev == "eth0"
    assert config.scaling_enabled is True
    assert config.interval_seconds == 5
    assert config.enable_alternate_prefix is False


def test_parser_flags():
    args = build_parser().parse_args(
        ["wlan0", "-c", "-e", "-p", "/run/x", "-u", "a", "-d", "b", "-s", "c", "-r", "d", "-v", "2"]
    )
    config = config_from_args(args)
    assert config.scaling_enabled is False
    assert config.alternate_prefix_dir == "/run/x"
    assert (config.send_total_filename, config.recv_total_filename) == ("a", "b")
    assert (config.send_interval_filename, config.recv_interval_filename) == ("c", "d")
    assert config.interval_seconds == 2


@pytest.mark.parametrize("value", ["0", "-1", "abc"])
def test_parser_rejects_bad_interval(value):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["eth0", "-v", value])


def test_main_exits_on_missing_device(tmp_path, source):
    argv = [
        "enp9s0", "-e", "-p", str(tmp_path),
        "--source", str(source), "--log-dir", str(tmp_path / "logs"),
    ]
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 1
    assert (tmp_path / "netrate_pid").exists()
    assert not (tmp_path / "netrate_send_interval").exists()


def test_main_exits_without_runtime_dir(tmp_path, monkeypatch):
    monkeypatch.delenv("XDG_RUNTIME_DIR", raising=False)
    with pytest.raises(SystemExit) as excinfo:
        main(["eth0", "--log-dir", str(tmp_path / "logs")])
    assert excinfo.value.code == 1


def test_main_exits_on_unusable_log_dir(tmp_path, source):
    log_dir = tmp_path / "logs_is_a_file"
    log_dir.write_text("")
    argv = [
        "eth0", "-e", "-p", str(tmp_path),
        "--source", str(source), "--log-dir", str(log_dir),
    ]
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 1
    assert not (tmp_path / "netrate_pid").exists()


def test_main_prints_names_with_brackets(tmp_path, source, capsys):
    argv = [
        "eth[bold]", "-e", "-p", str(tmp_path),
        "--source", str(source), "--log-dir", str(tmp_path / "logs"),
    ]
    with pytest.raises(SystemExit):
        main(argv)
    assert 'Using net_dev == "eth[bold]"' in capsys.readouterr().err
