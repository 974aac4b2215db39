# wavesim/plot_results.py
import argparse, csv, os
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from collections import defaultdict
from statistics import median

DATA_DIR = "data"   # relative to the working directory

def load_rows(path):
    rows = []
    with open(path, "r") as f:
        r = csv.DictReader(f)
        for row in r:
            row["grid"]       = int(row["grid"])
            row["steps"]      = int(row["steps"])
            row["threads"]    = int(row["threads"])
            row["wall_ms"]    = float(row["wall_ms"])
            row["norm_drift"] = float(row["norm_drift"])
            rows.append(row)
    return rows

def median_by_key(rows, key_fields):
    buckets = defaultdict(list)
    for r in rows:
        key = tuple(r[k] for k in key_fields)
        buckets[key].append(r["wall_ms"])
    agg = []
    for key, vals in buckets.items():
        out = dict(zip(key_fields, key))
        out["wall_ms"] = float(median(vals))
        agg.append(out)
    return agg

def plot_runtime_vs_grid(rows, tag, out_dir):
    pts = median_by_key(rows, ["backend", "grid"])
    if not pts: return
    by_backend = defaultdict(list)
    for r in pts:
        by_backend[r["backend"]].append((r["grid"], r["wall_ms"]))
    plt.figure()
    for be, p in by_backend.items():
        xs, ys = zip(*sorted(p))
        plt.plot(xs, ys, marker="o", label=be)
    plt.xscale("log", base=2)
    plt.xlabel("Grid size (N)")
    plt.ylabel("Runtime (ms)")
    plt.title(f"Runtime vs Grid size [{tag}]")
    plt.grid(True)
    plt.legend()
    plt.savefig(os.path.join(out_dir, f"runtime_vs_grid_{tag}.png"), dpi=200)
    plt.close()

def plot_speedup_vs_threads(rows, tag, out_dir):
    pts = sorted(median_by_key(rows, ["threads"]), key=lambda r: r["threads"])
    if not pts: return
    t1 = next((r["wall_ms"] for r in pts if r["threads"] == 1), None)
    if not t1: return
    xs = [r["threads"] for r in pts]
    ys = [t1 / r["wall_ms"] for r in pts]
    plt.figure()
    plt.plot(xs, ys, marker="o")
    plt.xlabel("Threads")
    plt.ylabel("Speedup (T1/Tt)")
    plt.title(f"Speedup vs Threads [{tag}]")
    plt.grid(True)
    plt.savefig(os.path.join(out_dir, f"speedup_vs_threads_{tag}.png"), dpi=200)
    plt.close()

def plot_runtime_vs_steps(rows, tag, out_dir):
    pts = median_by_key(rows, ["backend", "steps"])
    if not pts: return
    by_backend = defaultdict(list)
    for r in pts:
        by_backend[r["backend"]].append((r["steps"], r["wall_ms"]))
    plt.figure()
    for be, p in by_backend.items():
        xs, ys = zip(*sorted(p))
        plt.plot(xs, ys, marker="o", label=be)
    plt.xlabel("Steps")
    plt.ylabel("Runtime (ms)")
    plt.title(f"Runtime vs Steps [{tag}]")
    plt.legend()
    plt.grid(True)
    plt.savefig(os.path.join(out_dir, f"runtime_vs_steps_{tag}.png"), dpi=200)
    plt.close()

def plot_drift_vs_steps(rows, tag, out_dir):
    pts = sorted((r["steps"], r["norm_drift"]) for r in rows)
    if not pts: return
    xs, ys = zip(*pts)
    plt.figure()
    plt.plot(xs, [max(y, 1e-17) for y in ys], marker="o")
    plt.yscale("log")
    plt.xlabel("Steps")
    plt.ylabel("|1 - Σ|ψ|²|")
    plt.title(f"Normalization drift [{tag}]")
    plt.grid(True, which="both", ls="--", lw=0.5)
    plt.savefig(os.path.join(out_dir, f"drift_vs_steps_{tag}.png"), dpi=200)
    plt.close()

def plot_grid_compare(data_dir=DATA_DIR):
    rows_by = {}
    for be in ("serial", "numpy", "numba"):
        p = os.path.join(data_dir, be, "grid.csv")
        if not os.path.exists(p):
            continue
        pts = sorted((r["grid"], r["wall_ms"]) for r in load_rows(p))
        rows_by[be] = pts

    if not rows_by:
        return

    plt.figure()
    for be, pts in rows_by.items():
        xs, ys = zip(*pts)
        plt.plot(xs, ys, marker="o", label=be)

    plt.xlabel("Grid size (N)")
    plt.ylabel("Runtime (ms, log scale)")
    plt.title("Runtime vs Grid size (serial vs numpy vs numba)")
    plt.xscale("log", base=2)
    plt.yscale("log")
    plt.grid(True, which="both", ls="--", lw=0.5)
    plt.legend()
    plt.tight_layout()
    plt.savefig(os.path.join(data_dir, "runtime_vs_grid_compare.png"), dpi=200)
    plt.close()


def main(argv=None):
    p = argparse.ArgumentParser(description="plot mini_wavesim benchmark CSVs")
    p.add_argument("--data", type=str, default=DATA_DIR, help="benchmark directory (default: ./data)")
    data_dir = p.parse_args(argv).data

    # find all CSVs recursively under the data directory
    csvs = []
    for root, _, files in os.walk(data_dir):
        for f in files:
            if f.endswith(".csv"):
                csvs.append(os.path.join(root, f))

    if not csvs:
        print(f"No CSV files found under {data_dir}/")
        return

    for path in csvs:
        tag = os.path.splitext(os.path.basename(path))[0]
        backend = os.path.basename(os.path.dirname(path))
        try:
            rows = load_rows(path)
        except Exception as e:
            print(f"Skipping {path}: {e}")
            continue

        print(f"Plotting from {backend}/{tag}.csv ({len(rows)} rows)...")
        out_dir = os.path.dirname(path)

        if tag.startswith("grid"):
            plot_runtime_vs_grid(rows, backend, out_dir)
        elif tag.startswith("threads"):
            plot_speedup_vs_threads(rows, backend, out_dir)
        elif tag.startswith("steps"):
            plot_runtime_vs_steps(rows, backend, out_dir)
            plot_drift_vs_steps(rows, backend, out_dir)

    plot_grid_compare(data_dir)
    print(f"\nSaved all plots under {data_dir}/<backend>/*.png")


if __name__ == "__main__":
    main()
