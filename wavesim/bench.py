# wavesim/bench.py
import argparse, csv, os, socket, subprocess, time
from datetime import datetime
from .simulation import QuantumSimulation

DATA_DIR = "data"   # relative to the working directory

DX = 0.1
DT = 0.005

def backend_dir(backend, data_dir=DATA_DIR):
    path = os.path.join(data_dir, backend)
    os.makedirs(path, exist_ok=True)
    return path

def make_sim(n, backend, threads=None):
    sim = QuantumSimulation(n, DX, DT, backend=backend, num_threads=threads, seed=0)
    sim.set_potential_type("single")
    return sim

def warmup(sim):
    # one step to JIT-compile & warm caches
    sim.step()
    sim.reset()

# ---------------------------------------------------------------------

def meta_row():
    """Host/commit stamp, taken once per experiment."""
    commit = ""
    try:
        commit = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"],
                                         stderr=subprocess.DEVNULL).decode().strip()
    except Exception:
        pass
    return {
        "hostname": socket.gethostname(),
        "commit": commit,
        "dtype": "complex128",
        "timestamp": datetime.now().isoformat(timespec="seconds"),
    }

HEADER = ["grid","steps","backend","threads","wall_ms","norm_drift","hostname","commit","dtype","timestamp"]

def new_csv(path):
    """Create/overwrite CSV with header."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writeheader()

def write_row(path, row):
    with open(path, "a", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writerow(row)

def make_row(meta, n, steps, backend, threads, wall, drift):
    return {
        "grid": n, "steps": steps, "backend": backend, "threads": threads,
        "wall_ms": f"{wall:.3f}", "norm_drift": f"{drift:.3e}", **meta,
    }

# ---------------------------------------------------------------------

def time_run(sim, steps):
    """Wall time (ms) for `steps` calls of step() and the resulting |1 - sum|psi|^2|."""
    t0 = time.perf_counter()
    for _ in range(steps):
        sim.step()
    wall = (time.perf_counter() - t0) * 1e3
    return wall, abs(1.0 - sim.total_probability())

def numba_max_threads():
    """Size of numba's thread pool (upper bound for set_threads)."""
    try:
        from numba import config
        return int(config.NUMBA_NUM_THREADS)
    except ImportError:
        return os.cpu_count() or 1

def threads_for(backend):
    if backend != "numba":
        return 0
    from .fft_numba import get_threads
    return get_threads()

# ---------------------------------------------------------------------
# individual experiments

def bench_grid(ns, steps, backend, out_path):
    print(f"[run] Grid-size scaling → {out_path}")
    new_csv(out_path)
    meta = meta_row()
    for n in ns:
        sim = make_sim(n, backend)
        warmup(sim)
        wall, drift = time_run(sim, steps)
        write_row(out_path, make_row(meta, n, steps, backend, threads_for(backend), wall, drift))
        print(f"  N={n}  wall={wall:.2f} ms  drift={drift:.1e}")
    print("✓ done.\n")

def bench_threads(n, steps, threads_list, out_path):
    print(f"[run] Thread scaling → {out_path}")
    new_csv(out_path)
    meta = meta_row()
    from .fft_numba import set_threads
    sim = make_sim(n, "numba", threads=1)
    warmup(sim)
    t1, _ = time_run(sim, steps)
    pool = numba_max_threads()
    print(f"  pool={pool}  T1={t1:.1f} ms")

    for t in threads_list:
        tt = min(int(t), pool)
        if tt != t:
            print(f"  requested t={t} > pool={pool}; using t={tt}")
        set_threads(tt)
        sim.reset()
        wall, drift = time_run(sim, steps)
        speedup = t1 / wall if wall > 0 else float("nan")
        write_row(out_path, make_row(meta, n, steps, "numba", tt, wall, drift))
        print(f"  t={tt}  wall={wall:.2f} ms  speedup={speedup:.2f}×")
    print("✓ done.\n")

def bench_steps(n, steps_list, backend, out_path):
    print(f"[run] Step-count scaling → {out_path}")
    new_csv(out_path)
    meta = meta_row()
    sim = make_sim(n, backend)
    warmup(sim)

    for s in steps_list:
        sim.reset()
        wall, drift = time_run(sim, s)
        write_row(out_path, make_row(meta, n, s, backend, threads_for(backend), wall, drift))
        print(f"  steps={s}  wall={wall:.2f} ms  drift={drift:.1e}")
    print("✓ done.\n")

# ---------------------------------------------------------------------
def main(argv=None):
    p = argparse.ArgumentParser(description="mini_wavesim benchmarks → <out>/<backend>/*.csv (auto)")
    p.add_argument("--out", type=str, default=DATA_DIR, help="output directory (default: ./data)")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_grid = sub.add_parser("grid")
    p_grid.add_argument("--ns", type=str, required=True)
    p_grid.add_argument("--steps", type=int, default=100)
    p_grid.add_argument("--backend", type=str, default="numba", choices=["numpy","serial","numba"])

    p_threads = sub.add_parser("threads")
    p_threads.add_argument("--n", type=int, default=256)
    p_threads.add_argument("--steps", type=int, default=100)
    p_threads.add_argument("--threads", type=str, default="1,2,4,8,16")
    # threads always use numba backend
    p_threads.add_argument("--backend", type=str, default="numba", choices=["numba"])

    p_steps = sub.add_parser("steps")
    p_steps.add_argument("--n", type=int, default=128)
    p_steps.add_argument("--steps", type=str, default="10,50,100,300,600")
    p_steps.add_argument("--backend", type=str, default="numba", choices=["numpy","serial","numba"])

    args = p.parse_args(argv)

    base = backend_dir(args.backend, args.out)

    if args.cmd == "grid":
        ns = [int(x) for x in args.ns.split(",")]
        out_path = os.path.join(base, "grid.csv")
        bench_grid(ns, args.steps, args.backend, out_path)

    elif args.cmd == "threads":
        ts = [int(x) for x in args.threads.split(",")]
        out_path = os.path.join(base, "threads.csv")
        bench_threads(args.n, args.steps, ts, out_path)

    elif args.cmd == "steps":
        ss = [int(x) for x in args.steps.split(",")]
        out_path = os.path.join(base, "steps.csv")
        bench_steps(args.n, ss, args.backend, out_path)

if __name__ == "__main__":
    main()
