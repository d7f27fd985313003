# tests/test_config.py

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

import firflow.config.loaders as loaders
from firflow.config import FirflowConfig, load_configuration
from firflow.utils.logging_config import setup_logging


def test_defaults():
    config = load_configuration()
    assert isinstance(config, FirflowConfig)
    assert config.defaults.num_taps == 31
    assert config.defaults.design_method == "hamming"
    assert config.defaults.bandwidth == 0.25
    assert config.parallel.num_workers == 4
    assert config.logging.log_file_enabled is False

def test_project_config_file(tmp_path: Path):
    """./firflow.toml overrides the defaults."""
    (tmp_path / "firflow.toml").write_text(
        "[defaults]\nnum_taps = 15\ndesign_method = 'MOVING AVERAGE'\n[parallel]\nnum_workers = 2\n"
    )
    config = load_configuration()
    assert config.defaults.num_taps == 15
    assert config.defaults.design_method == "moving_average"
    assert config.parallel.num_workers == 2

def test_user_config_overrides_project(tmp_path: Path):
    (tmp_path / "firflow.toml").write_text("[defaults]\nnum_taps = 15\nbandwidth = 0.1\n")
    loaders.USER_CONFIG_FILE.parent.mkdir(parents=True)
    loaders.USER_CONFIG_FILE.write_text("[defaults]\nnum_taps = 7\n")
    config = load_configuration()
    assert config.defaults.num_taps == 7
    assert config.defaults.bandwidth == 0.1

def test_disable_project_config(tmp_path: Path):
    (tmp_path / "firflow.toml").write_text("[defaults]\nnum_taps = 15\n")
    config = load_configuration(disable_project_config=True)
    assert config.defaults.num_taps == 31

def test_explicit_config_files(tmp_path: Path):
    first = tmp_path / "a.toml"
    second = tmp_path / "b.toml"
    first.write_text("[defaults]\nnum_taps = 9\nblock_size = 64\n")
    second.write_text("[defaults]\nnum_taps = 11\n")
    config = load_configuration(config_files=[first, second], disable_project_config=True)
    assert config.defaults.num_taps == 11
    assert config.defaults.block_size == 64

def test_env_overrides_files(tmp_path: Path, monkeypatch):
    (tmp_path / "firflow.toml").write_text("[defaults]\nnum_taps = 15\n")
    monkeypatch.setenv("FIRFLOW_DEFAULTS__NUM_TAPS", "63")
    monkeypatch.setenv("FIRFLOW_DEFAULTS__BANDWIDTH", "0.125")
    monkeypatch.setenv("FIRFLOW_LOGGING__LOG_FILE_ENABLED", "false")
    config = load_configuration()
    assert config.defaults.num_taps == 63
    assert config.defaults.bandwidth == 0.125
    assert config.logging.log_file_enabled is False

def test_invalid_values_fall_back_to_defaults(tmp_path: Path, caplog):
    (tmp_path / "firflow.toml").write_text("[defaults]\nnum_taps = 0\ndesign_method = 'blackman'\n")
    with caplog.at_level(logging.WARNING, logger="firflow.config.loaders"):
        config = load_configuration()
    assert config.defaults.num_taps == 31
    assert "Falling back to default configuration" in caplog.text

def test_malformed_toml_is_skipped(tmp_path: Path):
    (tmp_path / "firflow.toml").write_text("[defaults\nnum_taps = ")
    config = load_configuration()
    assert config.defaults.num_taps == 31

def test_invalid_log_level_rejected():
    with pytest.raises(ValueError):
        FirflowConfig(logging={"log_level_file": "LOUD"})

# --- Logging setup ---
def test_setup_logging_console_only():
    config = FirflowConfig()
    log_file = setup_logging(config, verbosity=1)
    assert log_file is None
    handlers = logging.getLogger("firflow").handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], RichHandler)
    assert handlers[0].level == logging.INFO

def test_setup_logging_quiet_has_no_console_handler():
    setup_logging(FirflowConfig(), verbosity=-1)
    assert not any(isinstance(h, RichHandler) for h in logging.getLogger("firflow").handlers)

def test_setup_logging_file(tmp_path: Path):
    config = FirflowConfig(
        logging={"log_file_enabled": True, "log_filename_template": "run.log"},
        paths={"log_directory": tmp_path / "logs"},
    )
    log_file = setup_logging(config, verbosity=0)
    assert log_file == (tmp_path / "logs" / "run.log").resolve()
    logging.getLogger("firflow.test").debug("file only message")
    for handler in logging.getLogger("firflow").handlers:
        handler.flush()
    assert "file only message" in log_file.read_text()
    # Detach handlers so the file is not held open by later tests.
    for handler in list(logging.getLogger("firflow").handlers):
        handler.close()
    logging.getLogger("firflow").handlers.clear()
