import os
import csv
import json
import atexit
import concurrent.futures
from pathlib import Path
from statistics import mean

from satbot import CdclSolver, SolveStatus, check_assignment, load_configs
from satbot.utils.parser import read_cnf
from satbot.utils.timer import Timer
from satbot.utils.memory import MemoryTracker

TIMEOUT = 300
# extra time the worker gets to notice its cooperative deadline
GRACE = 30
CONFIG_PATH = "benchmark.yaml"
CNF_PATHS = sorted(Path("benchmarks").rglob("*.cnf"))

BACKUP_PATH = "results/backup.tmp"
CSV_HEADER = [
    "solver", "folder", "avg_time", "min_time", "max_time",
    "avg_mem", "min_mem", "max_mem", "inconclusive", "failed", "decisions", "conflicts"
]
stats = {}


def save_backup():
    os.makedirs(os.path.dirname(BACKUP_PATH), exist_ok=True)
    with open(BACKUP_PATH, "w") as f:
        json.dump(stats, f, indent=2)


def load_backup():
    global stats
    if os.path.exists(BACKUP_PATH):
        print(">> Resuming from previous backup...")
        try:
            with open(BACKUP_PATH, "r") as f:
                stats = json.load(f)
        except json.JSONDecodeError:
            print(">> Error loading backup file, starting fresh")
            stats = {}


def _run_instance(problem, config):
    with MemoryTracker() as mem, Timer() as timer:
        solver = CdclSolver(problem, config)
        result = solver.solve()

    valid = result.status is not SolveStatus.SAT or check_assignment(problem, result.assignment)
    return (result.status.name, valid, result.stats.decisions, result.stats.conflicts,
            timer.elapsed, mem.min_usage, mem.avg_usage, mem.max_usage)


def group_by_folder(paths):
    groups = {}
    for p in paths:
        folder = p.parent.name
        groups.setdefault(folder, []).append(p)
    return groups


def get_next_csv_path(base_path):
    if not os.path.exists(base_path):
        return base_path
    index = 1
    while True:
        new_path = base_path.replace(".csv", f" ({index}).csv")
        if not os.path.exists(new_path):
            return new_path
        index += 1


def new_folder_stats():
    return {
        "times": [],
        "mems": [],
        "mem_min": float('inf'),
        "mem_max": float('-inf'),
        "inconclusive": 0,
        "failed": 0,
        "completed": False,
        "completed_tests": 0,
        "csv_ready_data": [],
        "consecutive_timeouts": 0,
        "decisions": 0,
        "conflicts": 0
    }


def summary_row(label, folder, folder_stats, total_tests):
    '''CSV row with the aggregates of one finished folder, or None if nothing completed.'''
    if not folder_stats.get("times"):
        return None
    avg_decs = folder_stats["decisions"] / total_tests if total_tests > 0 else 0
    avg_confs = folder_stats["conflicts"] / total_tests if total_tests > 0 else 0
    return [
        label,
        folder,
        f"{mean(folder_stats['times']):.6f}",
        f"{min(folder_stats['times']):.6f}",
        f"{max(folder_stats['times']):.6f}",
        f"{mean(folder_stats['mems']):.2f}",
        f"{folder_stats['mem_min']:.2f}",
        f"{folder_stats['mem_max']:.2f}",
        folder_stats["inconclusive"],
        folder_stats["failed"],
        f"{avg_decs:.2f}",
        f"{avg_confs:.2f}"
    ]


def benchmark_all(config_path=CONFIG_PATH):
    global stats
    os.makedirs("results", exist_ok=True)
    configs = load_configs(config_path)
    folder_groups = group_by_folder(CNF_PATHS)
    folders = list(folder_groups.keys())

    load_backup()

    base_csv_path = "results/benchmark.csv"
    csv_path = get_next_csv_path(base_csv_path)
    print(f">> Results will be written to: {csv_path}")

    with open(csv_path, "w", newline="") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(CSV_HEADER)

        for label, folder_data in stats.items():
            for folder, data in folder_data.items():
                for row in data.get("csv_ready_data", []):
                    writer.writerow(row)
                    csvfile.flush()

        with concurrent.futures.ProcessPoolExecutor(max_workers=1) as executor:
            for label, base_config in configs.items():
                config = base_config.with_overrides(timeout=TIMEOUT)
                print(f"\n=== {label.upper()} ===")

                if label not in stats:
                    stats[label] = {}

                for folder in folders:
                    if folder not in stats[label]:
                        stats[label][folder] = new_folder_stats()

                    folder_stats = stats[label][folder]

                    if folder_stats["completed"]:
                        print(f">> Skipping completed: {label} - {folder}")
                        continue

                    test_files = folder_groups[folder]
                    total_tests = len(test_files)
                    start_idx = folder_stats["completed_tests"]

                    for idx in range(start_idx, total_tests):
                        path = test_files[idx]
                        if folder_stats["consecutive_timeouts"] >= 10:
                            print(f">> 10+ consecutive timeouts in {folder}, skipping remaining")
                            folder_stats["inconclusive"] += total_tests - idx
                            folder_stats["completed_tests"] = total_tests
                            break

                        folder_stats["completed_tests"] = idx + 1
                        decs = confs = 0
                        t_elapsed = mem_used = 0.0
                        try:
                            problem = read_cnf(str(path))
                            future = executor.submit(_run_instance, problem, config)
                            (status, valid, decs, confs,
                             t_elapsed, min_mem, mem_used, max_mem) = future.result(timeout=TIMEOUT + GRACE)
                        except concurrent.futures.TimeoutError:
                            status, valid = "TIMEOUT", True
                        except Exception as e:
                            folder_stats["failed"] += 1
                            folder_stats["consecutive_timeouts"] = 0
                            print(f"{folder:10} {path.name:25} ERROR: {e}")
                            save_backup()
                            continue

                        if status in ("TIMEOUT", "ABORTED"):
                            folder_stats["inconclusive"] += 1
                            folder_stats["consecutive_timeouts"] += 1
                        elif not valid:
                            folder_stats["failed"] += 1
                            folder_stats["consecutive_timeouts"] = 0
                            status = "BAD MODEL"
                        else:
                            folder_stats["times"].append(t_elapsed)
                            folder_stats["mems"].append(mem_used)
                            folder_stats["mem_min"] = min(folder_stats["mem_min"], min_mem)
                            folder_stats["mem_max"] = max(folder_stats["mem_max"], max_mem)
                            folder_stats["decisions"] += decs
                            folder_stats["conflicts"] += confs
                            folder_stats["consecutive_timeouts"] = 0

                        print(f"{folder:10} {path.name:25} {status:<12} "
                              f"Time: {t_elapsed:9.6f}s Mem(avg): {mem_used:9.2f}KB "
                              f"Decisions: {decs:<7} Conflicts: {confs:<7} "
                              f"(Consecutive TOs: {folder_stats['consecutive_timeouts']})")

                        save_backup()

                    if folder_stats["completed_tests"] == total_tests:
                        folder_stats["completed"] = True
                        csv_row = summary_row(label, folder, folder_stats, total_tests)
                        if csv_row is not None:
                            writer.writerow(csv_row)
                            csvfile.flush()
                            folder_stats["csv_ready_data"].append(csv_row)

                            del folder_stats["times"]
                            del folder_stats["mems"]

                        save_backup()

    return stats


def print_summary(stats):
    for label, folder_data in stats.items():
        print(f"\n--- Summary for {label.upper()} ---")
        print(f"{'Folder':15} {'AVG(s)':>10} {'MIN(s)':>10} {'MAX(s)':>10} "
              f"{'AVG(KB)':>10} {'MIN(KB)':>10} {'MAX(KB)':>10} "
              f"{'INC':>4} {'FAIL':>5} {'AVG DEC':>8} {'AVG CONF':>9}")

        for folder, data in folder_data.items():
            if data.get("csv_ready_data"):
                row = data["csv_ready_data"][0]
                print(f"{folder:15} {row[2]:>10} {row[3]:>10} {row[4]:>10} "
                      f"{row[5]:>10} {row[6]:>10} {row[7]:>10} "
                      f"{row[8]:>4} {row[9]:>5} {row[10]:>8} {row[11]:>9}")
            else:
                print(f"{folder:15} {'-':>10} {'-':>10} {'-':>10} "
                      f"{'-':>10} {'-':>10} {'-':>10} "
                      f"{data.get('inconclusive', 0):4d} {data.get('failed', 0):5d} {'-':>8} {'-':>9}")


if __name__ == "__main__":
    atexit.register(save_backup)
    try:
        stats = benchmark_all()
    finally:
        save_backup()
    print_summary(stats)
