import csv
from pathlib import Path

import pytest

import benchmark
import plot
from satbot import SolverConfig
from satbot.formula import pigeonhole, random_ksat
from satbot.utils import Timer, write_dimacs
from satbot.utils.memory import MemoryTracker


def test_group_by_folder():
    paths = [Path("benchmarks/php/a.cnf"), Path("benchmarks/uf20/b.cnf"), Path("benchmarks/php/c.cnf")]
    groups = benchmark.group_by_folder(paths)
    assert list(groups) == ["php", "uf20"]
    assert [p.name for p in groups["php"]] == ["a.cnf", "c.cnf"]


def test_next_csv_path(tmp_path):
    base = str(tmp_path / "benchmark.csv")
    assert benchmark.get_next_csv_path(base) == base
    Path(base).touch()
    assert benchmark.get_next_csv_path(base).endswith("benchmark (1).csv")


def test_summary_row():
    folder_stats = benchmark.new_folder_stats()
    assert benchmark.summary_row("luby", "php", folder_stats, 2) is None

    folder_stats.update(times=[1.0, 3.0], mems=[10.0, 30.0], mem_min=5.0, mem_max=40.0,
                        decisions=10, conflicts=4)
    row = benchmark.summary_row("luby", "php", folder_stats, 2)
    assert row[:3] == ["luby", "php", "2.000000"]
    assert row[-2:] == ["5.00", "2.00"]
    assert len(row) == len(benchmark.CSV_HEADER)


def test_run_instance_reports_valid_model():
    problem = random_ksat(20, 60, seed=1)
    status, valid, decisions, conflicts, elapsed, low, avg, high = \
        benchmark._run_instance(problem, SolverConfig())
    assert status in ("SAT", "UNSAT")
    assert valid
    assert elapsed >= 0.0
    assert low <= avg <= high


def test_run_instance_aborted():
    status, valid, *_ = benchmark._run_instance(pigeonhole(7, 6), SolverConfig(max_conflicts=2))
    assert status == "ABORTED"
    assert valid


def test_timer_and_memory_tracker():
    with MemoryTracker() as mem, Timer() as timer:
        data = [list(range(100)) for _ in range(1000)]
    assert data
    assert timer.elapsed > 0.0
    assert 0.0 <= mem.min_usage <= mem.avg_usage <= mem.max_usage


def test_benchmark_all(tmp_path, monkeypatch):
    folder = tmp_path / "benchmarks" / "php"
    folder.mkdir(parents=True)
    for pigeons in (2, 3):
        (folder / f"php{pigeons}.cnf").write_text(write_dimacs(pigeonhole(pigeons, 2)))
    (tmp_path / "configs.yaml").write_text("luby: {}\nno-restarts:\n  restart_policy: none\n")

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(benchmark, "stats", {})
    monkeypatch.setattr(benchmark, "CNF_PATHS", sorted(Path("benchmarks").rglob("*.cnf")))

    stats = benchmark.benchmark_all("configs.yaml")
    assert set(stats) == {"luby", "no-restarts"}
    assert stats["luby"]["php"]["completed"]
    assert stats["luby"]["php"]["failed"] == 0

    with open("results/benchmark.csv", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == benchmark.CSV_HEADER
    assert [row[0] for row in rows[1:]] == ["luby", "no-restarts"]


@pytest.fixture
def results_csv(tmp_path):
    path = tmp_path / "benchmark.csv"
    rows = [benchmark.CSV_HEADER]
    for solver, scale in (("luby", 1.0), ("geometric", 2.0)):
        for folder in ("php", "uf20"):
            rows.append([solver, folder, 0.5 * scale, 0.1 * scale, 1.0 * scale,
                         200.0, 100.0, 300.0, 0, 0, 40.0 * scale, 12.0 * scale])
    rows.append(["no-restarts", "php", 9.0, 8.0, 10.0, 1.0, 1.0, 1.0, 30, 0, 1.0, 1.0])
    with open(path, "w", newline="") as f:
        csv.writer(f).writerows(rows)
    return path


def test_load_results_drops_inconclusive_folders(results_csv):
    df = plot.load_results(results_csv)
    assert set(df["solver"]) == {"luby", "geometric"}


def test_plot_results(results_csv, tmp_path):
    out_dir = tmp_path / "plots"
    plot.plot_results(results_csv, out_dir=str(out_dir))
    names = {p.name for p in out_dir.iterdir()}
    assert {
        "avg_time_log.png", "avg_memory_log.png", "avg_decisions_log.png",
        "avg_conflicts_log.png", "avg_time_php_log.png", "solver_comparison_log.png",
    } <= names
