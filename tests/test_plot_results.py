"""Tests for session plotting."""

import matplotlib

matplotlib.use("Agg")

import pytest

from mecanum_control.data_collector import DataCollector
from mecanum_control.plot_results import find_latest_run, load_csv_to_dict, plot_run_summary
from mecanum_control.pose import MotionTarget, Pose, RelativeMotion, WheelPowers


@pytest.fixture
def run_dir(tmp_path):
    results = tmp_path / "results"
    with DataCollector(run_dir=str(results / "run_20261018_101500")) as collector:
        for i in range(5):
            t = float(i)
            collector.log_pose(t, Pose(100.0 * i, 0.0, 0.0))
            collector.log_motion(t, RelativeMotion(600.0 - 100.0 * i, 0.0, 0.0), MotionTarget(600.0, 0.0))
            collector.log_wheel_powers(t, WheelPowers(0.5, 0.5, 0.5, 0.5))
    return collector.run_dir


def test_load_csv_to_dict(run_dir):
    data = load_csv_to_dict(run_dir / "pose_data.csv")
    assert list(data) == ["timestamp", "x", "y", "heading"]
    assert data["x"].tolist() == [0.0, 100.0, 200.0, 300.0, 400.0]


def test_load_csv_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_csv_to_dict(tmp_path / "missing.csv")


def test_find_latest_run(run_dir):
    (run_dir.parent / "run_20250101_000000").mkdir()
    assert find_latest_run(run_dir.parent) == run_dir


def test_find_latest_run_without_runs(tmp_path):
    with pytest.raises(FileNotFoundError):
        find_latest_run(tmp_path)


def test_plot_run_summary_saves_figure(run_dir):
    fig = plot_run_summary(run_dir, save_plots=True, show_plots=False)
    assert (run_dir / "session_summary.png").exists()
    assert len(fig.axes) == 4
