# wavesim/tests/test_perf_sanity.py
import time
import numpy as np
from wavesim.simulation import QuantumSimulation

def build_sim(n, backend):
    sim = QuantumSimulation(n, 0.1, 0.005, backend=backend)
    sim.set_potential_type("single")
    sim.initialize(momentum_x=2.0)
    return sim

def run_steps(sim, steps):
    t0 = time.perf_counter()
    for _ in range(steps):
        sim.step()
    return time.perf_counter() - t0

def test_bench_runs_and_times():
    n, steps = 32, 5     # ~moderate but quick in CI/local
    s1 = build_sim(n, "serial")
    s2 = build_sim(n, "numba")
    # JIT-compile outside the timed region
    warm = build_sim(n, "numba")
    warm.step()

    t1 = run_steps(s1, steps)
    t2 = run_steps(s2, steps)

    # correctness
    assert np.allclose(s1.wavefunction().data, s2.wavefunction().data, atol=1e-9, rtol=0)
    # sanity: both timings are positive
    assert t1 > 0 and t2 > 0
    # don't hard-assert speedup (machines vary); just ensure it isn't catastrophically slower
    assert t2 < 5.0 * t1
