# tests/test_cli.py

from pathlib import Path

import pytest
import numpy as np
import pandas as pd
from numpy.testing import assert_allclose
from click.testing import CliRunner
from scipy.signal import lfilter

from firflow.cli.main import cli
from firflow.cli.filter_cmd import parse_sequence
from firflow.config import FirflowConfig
from firflow.core.design import design_filter
from firflow.core.parallel import ParallelConvolver
from firflow.version import __version__

# --- Test Fixtures ---
@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()

@pytest.fixture
def signal_csv(tmp_path: Path) -> Path:
    """A CSV with a time column and a noisy signal column."""
    rng = np.random.default_rng(7)
    t = np.arange(300) / 100.0
    df = pd.DataFrame({"time": t, "value": np.sin(2 * np.pi * t) + 0.2 * rng.standard_normal(t.shape[0])})
    path = tmp_path / "signal.csv"
    df.to_csv(path, index=False)
    return path

# --- Main group ---
def test_cli_help(runner: CliRunner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "FIR filter design" in result.output
    for command in ("design", "convolve", "apply"):
        assert command in result.output

def test_cli_version(runner: CliRunner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert f"firflow, version {__version__}" in result.output.lower()

# --- design ---
def test_design_command(runner: CliRunner):
    result = runner.invoke(cli, ["design", "--method", "hann", "--taps", "7", "--bandwidth", "0.2"])
    assert result.exit_code == 0, result.output
    assert "Method: hann" in result.output
    assert "Taps: 7" in result.output
    assert "Sum: 1.0000000000" in result.output
    expected = design_filter("hann", 7, 0.2).numerator
    assert f"{expected[3]:.10f}" in result.output

def test_design_command_uses_config_defaults(runner: CliRunner, tmp_path: Path):
    (tmp_path / "firflow.toml").write_text("[defaults]\nnum_taps = 4\ndesign_method = 'moving_average'\n")
    result = runner.invoke(cli, ["design"])
    assert result.exit_code == 0, result.output
    assert "Method: moving_average" in result.output
    assert result.output.count("0.2500000000") == 4

def test_design_command_invalid_bandwidth(runner: CliRunner):
    result = runner.invoke(cli, ["design", "--method", "hamming", "--taps", "7", "--bandwidth", "-1"])
    assert result.exit_code == 2
    assert "Filter design failed" in result.output

def test_design_command_unknown_method(runner: CliRunner):
    result = runner.invoke(cli, ["design", "--method", "blackman"])
    assert result.exit_code == 2

# --- convolve ---
@pytest.mark.parametrize("extra", [[], ["--workers", "2"]])
def test_convolve_command(runner: CliRunner, extra):
    result = runner.invoke(cli, ["convolve", "3,4,5", "3,4,5", *extra])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "9, 24, 46, 40, 25"

def test_convolve_command_floats(runner: CliRunner):
    result = runner.invoke(cli, ["convolve", "0.5,0.5", "1,2,3"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "0.5, 1.5, 2.5, 1.5"

def test_convolve_command_bad_input(runner: CliRunner):
    result = runner.invoke(cli, ["convolve", "1,a", "1"])
    assert result.exit_code == 2

def test_convolve_command_bad_workers(runner: CliRunner):
    result = runner.invoke(cli, ["convolve", "1,2", "1", "--workers", "0"])
    assert result.exit_code == 2
    assert "num_workers" in result.output

def test_parse_sequence():
    assert parse_sequence("1, 2,3").tolist() == [1, 2, 3]
    assert parse_sequence("1,2.5").dtype == np.float64

# --- apply ---
@pytest.mark.parametrize("extra", [[], ["--workers", "2"]])
def test_apply_command(runner: CliRunner, signal_csv: Path, tmp_path: Path, extra):
    output = tmp_path / "out" / "filtered.csv"
    args = ["apply", str(signal_csv), "-o", str(output), "--column", "value",
            "--method", "hamming", "--taps", "15", "--bandwidth", "0.1", "--block-size", "37", *extra]
    result = runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert "Filtered 300 samples" in result.output

    df_in = pd.read_csv(signal_csv)
    df_out = pd.read_csv(output)
    assert list(df_out.columns) == ["value", "value_filtered"]
    taps = design_filter("hamming", 15, 0.1).numerator
    expected = lfilter(taps, [1.0], df_in["value"].to_numpy())
    assert_allclose(df_out["value_filtered"].to_numpy(), expected, rtol=1e-9, atol=1e-12)

def test_apply_command_defaults_to_first_numeric_column(runner: CliRunner, signal_csv: Path, tmp_path: Path):
    output = tmp_path / "filtered.csv"
    result = runner.invoke(cli, ["apply", str(signal_csv), "-o", str(output), "--method", "moving_average",
                                 "--taps", "1"])
    assert result.exit_code == 0, result.output
    df_out = pd.read_csv(output)
    assert list(df_out.columns) == ["time", "time_filtered"]
    assert_allclose(df_out["time_filtered"], df_out["time"])

def test_apply_command_missing_column(runner: CliRunner, signal_csv: Path, tmp_path: Path):
    result = runner.invoke(cli, ["apply", str(signal_csv), "-o", str(tmp_path / "x.csv"), "--column", "nope"])
    assert result.exit_code == 2
    assert "not found" in result.output

def test_apply_command_invalid_taps(runner: CliRunner, signal_csv: Path, tmp_path: Path):
    result = runner.invoke(cli, ["apply", str(signal_csv), "-o", str(tmp_path / "x.csv"), "--taps", "0"])
    assert result.exit_code == 2
    assert "Filtering failed" in result.output

# --- Setup failures ---
def test_cli_setup_error_exits(runner: CliRunner, mocker):
    mocker.patch("firflow.cli.base_cmd.load_configuration", side_effect=RuntimeError("broken config"))
    result = runner.invoke(cli, ["convolve", "1", "1"])
    assert result.exit_code == 1
    assert "CRITICAL SETUP ERROR" in result.output

# --- Worker pool selection ---
def test_convolve_parallel_uses_configured_workers(runner: CliRunner, tmp_path: Path, mocker):
    (tmp_path / "firflow.toml").write_text("[parallel]\nnum_workers = 3\n")
    pool_cls = mocker.patch("firflow.cli.filter_cmd.ParallelConvolver", wraps=ParallelConvolver)
    result = runner.invoke(cli, ["convolve", "--parallel", "1,2", "1,2"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "1, 4, 4"
    pool_cls.assert_called_once_with(num_workers=3)

def test_convolve_workers_option_overrides_config(runner: CliRunner, tmp_path: Path, mocker):
    (tmp_path / "firflow.toml").write_text("[parallel]\nnum_workers = 3\n")
    pool_cls = mocker.patch("firflow.cli.filter_cmd.ParallelConvolver", wraps=ParallelConvolver)
    result = runner.invoke(cli, ["convolve", "1,2", "1,2", "--workers", "2"])
    assert result.exit_code == 0, result.output
    pool_cls.assert_called_once_with(num_workers=2)

def test_convolve_sequential_by_default(runner: CliRunner, mocker):
    pool_cls = mocker.patch("firflow.cli.filter_cmd.ParallelConvolver", wraps=ParallelConvolver)
    result = runner.invoke(cli, ["convolve", "1,2", "1,2"])
    assert result.exit_code == 0, result.output
    pool_cls.assert_not_called()

def test_apply_parallel_uses_configured_workers(runner: CliRunner, signal_csv: Path, tmp_path: Path, mocker):
    (tmp_path / "firflow.toml").write_text("[parallel]\nnum_workers = 2\n")
    pool_cls = mocker.patch("firflow.cli.filter_cmd.ParallelConvolver", wraps=ParallelConvolver)
    output = tmp_path / "filtered.csv"
    result = runner.invoke(cli, ["apply", str(signal_csv), "-o", str(output), "--column", "value",
                                 "--taps", "5", "--parallel"])
    assert result.exit_code == 0, result.output
    pool_cls.assert_called_once_with(num_workers=2)

    taps = design_filter("hamming", 5, 0.25).numerator
    expected = lfilter(taps, [1.0], pd.read_csv(signal_csv)["value"].to_numpy())
    assert_allclose(pd.read_csv(output)["value_filtered"].to_numpy(), expected, rtol=1e-9, atol=1e-12)

# --- apply input and output handling ---
def test_apply_command_non_numeric_column(runner: CliRunner, tmp_path: Path):
    path = tmp_path / "labels.csv"
    pd.DataFrame({"label": ["a", "b", "c"], "value": [1.0, 2.0, 3.0]}).to_csv(path, index=False)
    result = runner.invoke(cli, ["apply", str(path), "-o", str(tmp_path / "x.csv"), "--column", "label"])
    assert result.exit_code == 2
    assert "not numeric" in result.output
    assert not (tmp_path / "x.csv").exists()

def test_apply_relative_output_goes_to_output_dir(runner: CliRunner, signal_csv: Path, tmp_path: Path):
    (tmp_path / "firflow.toml").write_text("[paths]\noutput_dir = 'results'\n")
    result = runner.invoke(cli, ["apply", str(signal_csv), "-o", "filtered.csv", "--taps", "3"])
    assert result.exit_code == 0, result.output
    expected_path = (tmp_path / "results" / "filtered.csv").resolve()
    assert expected_path.is_file()
    assert len(pd.read_csv(expected_path)) == 300

def test_cli_uses_preloaded_config(runner: CliRunner, tmp_path: Path):
    (tmp_path / "firflow.toml").write_text("[defaults]\nnum_taps = 7\n")
    config = FirflowConfig(defaults={"num_taps": 2, "design_method": "moving_average"})
    result = runner.invoke(cli, ["design"], obj={"config": config})
    assert result.exit_code == 0, result.output
    assert "Taps: 2" in result.output
    assert result.output.count("0.5000000000") == 2
