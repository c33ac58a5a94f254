"""
Tests for simulated hardware, the simulation loop, run data logging and the CLI.

Run with:
    pytest tests/simulation_test.py -v
"""

import csv
import logging

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from drivetrain_control import config
from drivetrain_control.cli import CustomFormatter, main, setup_logging
from drivetrain_control.data_collector import MODULE_COLUMNS, DataCollector
from drivetrain_control.plot_results import find_latest_run, load_module_data, plot_module_run
from drivetrain_control.sim import SimulatedSwerveHardware
from drivetrain_control.simulation import build_simulated_module, run_swerve_simulation
from drivetrain_control.state import ModuleState


@pytest.fixture(autouse=True)
def no_run_dir_env(monkeypatch):
    monkeypatch.delenv("RUN_DIR", raising=False)


# ============================================================================
# Simulated hardware
# ============================================================================


class TestSimulatedSwerveHardware:
    def test_inverted_rotation_decreases_heading(self):
        hardware = SimulatedSwerveHardware(max_speed=4.0, max_rotation_rate=100.0, inverted=True)
        hardware.rotation_motor.set_percent_output(0.5)
        hardware.step(0.1)
        assert hardware.heading_sensor.read() == pytest.approx(-5.0)

    def test_heading_wraps(self):
        hardware = SimulatedSwerveHardware(
            max_speed=4.0, max_rotation_rate=100.0, initial_heading=178.0, inverted=False
        )
        hardware.rotation_motor.set_percent_output(1.0)
        hardware.step(0.1)
        assert hardware.heading_sensor.read() == pytest.approx(-172.0)

    def test_percent_drive_settles_at_scaled_speed(self):
        hardware = SimulatedSwerveHardware(max_speed=4.0, max_rotation_rate=100.0)
        hardware.drive_motor.set_percent_output(0.5)
        for _ in range(200):
            hardware.step(0.02)
        assert hardware.velocity_sensor.read() == pytest.approx(2.0, abs=1e-3)

    def test_velocity_drive_settles_at_setpoint(self):
        hardware = SimulatedSwerveHardware(max_speed=4.0, max_rotation_rate=100.0)
        hardware.drive_motor.set_velocity_setpoint(-1.5, -3.0)
        for _ in range(200):
            hardware.step(0.02)
        assert hardware.velocity_sensor.read() == pytest.approx(-1.5, abs=1e-3)
        assert hardware.drive_motor.history == [("velocity", -1.5, -3.0)]

    def test_distance_integrates_steady_velocity(self):
        hardware = SimulatedSwerveHardware(max_speed=4.0, max_rotation_rate=100.0)
        hardware.drive_motor.set_percent_output(0.5)
        hardware.velocity_sensor.value = 2.0
        for _ in range(50):
            hardware.step(0.02)
        assert hardware.distance_sensor.read() == pytest.approx(2.0)

    def test_distance_is_trapezoid_of_velocity(self):
        hardware = SimulatedSwerveHardware(max_speed=4.0, max_rotation_rate=100.0)
        hardware.drive_motor.set_velocity_setpoint(-1.0, 0.0)
        before = hardware.velocity_sensor.read()
        hardware.step(0.1)
        after = hardware.velocity_sensor.read()
        assert after < 0.0
        assert hardware.distance_sensor.read() == pytest.approx(0.5 * (before + after) * 0.1)


# ============================================================================
# Simulation loop
# ============================================================================


class TestRunSwerveSimulation:
    def test_module_reaches_optimized_heading(self):
        result = run_swerve_simulation(ModuleState(speed=2.0, heading=135.0), duration=2.0)
        # 135 degrees away is reached by reversing the wheel at -45
        assert result.final_heading == pytest.approx(-45.0, abs=0.5)
        assert result.measured_speed[-1] == pytest.approx(-2.0, abs=1e-2)
        assert np.all(np.abs(result.diagnostics["rotation_output"]) <= 1.0)

    def test_steering_never_exceeds_90_degrees(self):
        result = run_swerve_simulation(
            ModuleState(speed=2.0, heading=-100.0), duration=1.0, initial_heading=30.0
        )
        errors = result.diagnostics["heading_error"]
        assert np.all(np.abs(errors) <= 90.0)

    def test_closed_loop(self):
        result = run_swerve_simulation(
            ModuleState(speed=1.5, heading=20.0), duration=2.0, open_loop=False
        )
        assert result.final_heading == pytest.approx(20.0, abs=0.5)
        assert result.measured_speed[-1] == pytest.approx(1.5, abs=1e-2)
        expected_ff = config.DRIVE_KS + config.DRIVE_KV * 1.5
        assert result.diagnostics["feedforward_volts"][-1] == pytest.approx(expected_ff)

    def test_zero_speed_holds_heading(self):
        result = run_swerve_simulation(
            ModuleState(speed=0.0, heading=90.0), duration=0.5, initial_heading=10.0
        )
        assert result.final_heading == pytest.approx(10.0, abs=1e-6)
        assert np.all(result.diagnostics["rotation_output"] == 0.0)

    def test_time_series_length(self):
        result = run_swerve_simulation(ModuleState(speed=1.0, heading=0.0), duration=1.0)
        assert len(result.time) == 50
        assert len(result.measured_speed) == 50
        assert len(result.diagnostics["commanded_heading"]) == 50

    def test_rejects_bad_duration(self):
        with pytest.raises(ValueError):
            run_swerve_simulation(ModuleState(), duration=0.0)

    def test_rejects_duration_shorter_than_one_period(self):
        with pytest.raises(ValueError, match="shorter than one control period"):
            run_swerve_simulation(ModuleState(speed=1.0), duration=0.005, period=0.02)

    def test_module_position_tracks_distance(self):
        module, hardware = build_simulated_module(0, initial_heading=45.0)
        for _ in range(25):
            module.set_desired_state(ModuleState(speed=2.0, heading=45.0), open_loop=True)
            hardware.step(config.CONTROL_PERIOD)
        position = module.get_position()
        assert position.distance > 0.0
        assert position.distance == hardware.distance_sensor.read()
        assert position.heading == pytest.approx(module.get_heading())

    def test_build_uses_module_offset(self):
        module, hardware = build_simulated_module(1, initial_heading=25.0)
        assert module.get_heading() == pytest.approx(25.0)
        expected_raw = 25.0 - config.MODULES[1].heading_offset
        assert hardware.heading_sensor.read() == pytest.approx(expected_raw)


# ============================================================================
# Data collection and plotting
# ============================================================================


class TestDataCollector:
    def test_writes_one_row_per_period(self, tmp_path):
        with DataCollector(output_dir=str(tmp_path)) as collector:
            run_swerve_simulation(
                ModuleState(speed=1.0, heading=45.0), duration=0.2, collector=collector
            )

        with open(collector.module_output_path, newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0] == MODULE_COLUMNS
        assert len(rows) == 11

    def test_explicit_run_dir(self, tmp_path):
        run_dir = tmp_path / "my_run"
        collector = DataCollector(run_dir=str(run_dir))
        assert collector.run_dir == run_dir
        assert run_dir.is_dir()

    def test_rejects_file_as_output_dir(self, tmp_path):
        path = tmp_path / "not_a_dir"
        path.write_text("x")
        with pytest.raises(ValueError):
            DataCollector(output_dir=str(path))

    def test_plot_saved_from_recorded_run(self, tmp_path):
        with DataCollector(output_dir=str(tmp_path)) as collector:
            run_swerve_simulation(
                ModuleState(speed=2.0, heading=60.0), duration=0.4, collector=collector
            )

        assert find_latest_run(tmp_path / config.RESULTS_DIR) == collector.run_dir
        data = load_module_data(collector.run_dir)
        assert len(data["timestamp"]) == 20

        fig = plot_module_run(collector.run_dir, save_plots=True, show_plots=False)
        assert fig is not None
        assert (collector.run_dir / "module_run.png").exists()

    def test_missing_data_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_module_data(tmp_path)


# ============================================================================
# Command-line interface
# ============================================================================


class TestCli:
    def test_tank_rate_form(self, caplog):
        caplog.set_level(logging.INFO)
        main(["tank", "--velocity", "2", "--omega", "1", "--track-width", "0.6"])
        assert "v_left=1.700" in caplog.text
        assert "v_right=2.300" in caplog.text

    def test_tank_curvature_with_desaturation(self, caplog):
        caplog.set_level(logging.INFO)
        main(["tank", "--velocity", "4", "--curvature", "1", "--max-speed", "2"])
        # 4 * (2 +/- 0.6) / 2 = 2.8 / 5.2, scaled by 2 / 5.2
        assert "v_right=2.000" in caplog.text

    def test_tank_invalid_track_width_exits(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["tank", "--velocity", "1", "--omega", "1", "--track-width", "0"])
        assert excinfo.value.code == 1

    def test_swerve_records_run(self, tmp_path):
        main(
            [
                "swerve",
                "--speed",
                "1",
                "--heading",
                "30",
                "--duration",
                "0.2",
                "--record",
                "--output-dir",
                str(tmp_path),
            ]
        )
        run_dir = find_latest_run(tmp_path / config.RESULTS_DIR)
        assert (run_dir / "module_data.csv").exists()

    def test_setup_logging_installs_one_handler(self):
        root = logging.getLogger()
        handlers_before = list(root.handlers)
        level_before = root.level
        try:
            setup_logging(verbose=False)
            setup_logging(verbose=False)
            main(["tank", "--velocity", "1", "--omega", "0"])
            custom = [h for h in root.handlers if isinstance(h.formatter, CustomFormatter)]
            assert len(custom) == 1
        finally:
            for handler in root.handlers[:]:
                if handler not in handlers_before:
                    root.removeHandler(handler)
            root.setLevel(level_before)
