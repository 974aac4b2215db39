# wavesim/tests/test_bench.py
import csv
import os
from wavesim import bench, plot_results

def read_rows(path):
    with open(path, "r") as f:
        return list(csv.DictReader(f))

def test_grid_bench_writes_into_working_dir(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    bench.main(["grid", "--ns", "8,16", "--steps", "2", "--backend", "numpy"])
    out = tmp_path / "data" / "numpy" / "grid.csv"
    assert out.exists()
    rows = read_rows(out)
    assert [int(r["grid"]) for r in rows] == [8, 16]
    assert all(r["threads"] == "0" for r in rows)
    assert all(float(r["norm_drift"]) < 1e-6 for r in rows)
    assert list(rows[0].keys()) == bench.HEADER

def test_out_option_and_plots(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "results"
    bench.main(["--out", str(target), "steps", "--n", "8", "--steps", "1,3", "--backend", "numpy"])
    assert (target / "numpy" / "steps.csv").exists()
    assert not (tmp_path / "data").exists()
    plot_results.main(["--data", str(target)])
    assert (target / "numpy" / "runtime_vs_steps_numpy.png").exists()
    assert (target / "numpy" / "drift_vs_steps_numpy.png").exists()

def test_metadata_taken_once_per_experiment(monkeypatch, tmp_path):
    calls = []
    real = bench.meta_row
    def counting():
        calls.append(1)
        return real()
    monkeypatch.setattr(bench, "meta_row", counting)
    bench.bench_grid([8, 16, 32], 1, "numpy", os.path.join(str(tmp_path), "grid.csv"))
    assert len(calls) == 1
    assert set(real().keys()) == {"hostname", "commit", "dtype", "timestamp"}

def test_numba_pool_size_matches_config():
    from numba import config
    from wavesim.fft_numba import get_threads
    before = get_threads()
    assert bench.numba_max_threads() == config.NUMBA_NUM_THREADS
    assert get_threads() == before
