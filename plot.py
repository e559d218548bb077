import os
import sys

import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.ticker import LogLocator, ScalarFormatter

NUMERIC_COLUMNS = [
    "avg_time", "min_time", "max_time",
    "avg_mem", "min_mem", "max_mem",
    "decisions", "conflicts",
]


def _log_axis(ax, numticks=12):
    ax.set_yscale('log')
    ax.yaxis.set_major_locator(LogLocator(base=10, numticks=numticks))
    ax.yaxis.set_minor_locator(LogLocator(base=10, subs=np.arange(2, 10) * 0.1, numticks=numticks))
    ax.yaxis.set_major_formatter(ScalarFormatter())
    ax.yaxis.grid(True, which='both', linestyle='--', alpha=0.3)


def _range_bar(data, avg, low, high, color, label, ylabel, title, path):
    '''Bar chart of avg with min/max error bars, one bar per row of data.'''
    fig, ax = plt.subplots(figsize=(12, 7))

    yerr = [
        data[avg] - data[low],
        data[high] - data[avg]
    ]

    ax.bar(data.index, data[avg], color=color, label=label)
    ax.errorbar(
        data.index,
        data[avg],
        yerr=yerr,
        fmt='none',
        ecolor='black',
        capsize=5,
        linewidth=1,
        label="Min/Max Range"
    )

    ax.set_ylabel(ylabel)
    ax.set_title(title)
    _log_axis(ax)

    plt.xticks(rotation=45, ha='right')
    plt.tight_layout()
    ax.legend(loc='upper left')
    fig.savefig(path)
    plt.close(fig)


def load_results(csv_path, max_inconclusive=25):
    df = pd.read_csv(csv_path)

    # Folders where a configuration mostly timed out say nothing about its speed
    df = df[df["inconclusive"] <= max_inconclusive]

    for column in NUMERIC_COLUMNS:
        df[column] = pd.to_numeric(df[column], errors='coerce')
    return df


def plot_results(csv_path, out_dir="results"):
    df = load_results(csv_path)
    os.makedirs(out_dir, exist_ok=True)

    time_data = df.groupby("solver").agg({
        "avg_time": "mean",
        "min_time": "min",
        "max_time": "max"
    }).sort_values("avg_time")
    _range_bar(time_data, "avg_time", "min_time", "max_time", "skyblue", "Average Time",
               "Average Time (s)", "Average Execution Time per Configuration",
               os.path.join(out_dir, "avg_time_log.png"))

    mem_data = df.groupby("solver").agg({
        "avg_mem": "mean",
        "min_mem": "min",
        "max_mem": "max"
    }).sort_values("avg_mem")
    _range_bar(mem_data, "avg_mem", "min_mem", "max_mem", "salmon", "Average Memory",
               "Average Memory (KB)", "Average Memory Usage per Configuration",
               os.path.join(out_dir, "avg_memory_log.png"))

    for column, color in (("decisions", "lightgreen"), ("conflicts", "orchid")):
        counts = df.groupby("solver")[column].agg(["mean", "min", "max"]).sort_values("mean")
        _range_bar(counts, "mean", "min", "max", color, f"Average {column.title()}",
                   f"Average {column.title()}", f"Average Number of {column.title()} per Configuration",
                   os.path.join(out_dir, f"avg_{column}_log.png"))

    for folder in df["folder"].unique():
        sub_df = df[df["folder"] == folder].set_index("solver").sort_values("avg_time")
        _range_bar(sub_df, "avg_time", "min_time", "max_time", "mediumseagreen", "Average Time",
                   "Average Time (s)", f"Avg Time - Folder: {folder}",
                   os.path.join(out_dir, f"avg_time_{folder}_log.png"))

    solver_order = df.groupby("solver")["avg_time"].mean().sort_values().index
    pivot_df = df.pivot(index='solver', columns='folder', values='avg_time')
    pivot_df = pivot_df.reindex(solver_order)

    ax = pivot_df.plot(kind='bar', figsize=(14, 8), logy=True)
    ax.set_ylabel('Average Time (s) - Log Scale')
    ax.set_title('Configuration Performance Comparison by Benchmark Folder')
    _log_axis(ax, numticks=15)

    plt.xticks(rotation=45, ha='right')
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "solver_comparison_log.png"))
    plt.close()


if __name__ == "__main__":
    plot_results(sys.argv[1] if len(sys.argv) > 1 else "results/benchmark.csv")
