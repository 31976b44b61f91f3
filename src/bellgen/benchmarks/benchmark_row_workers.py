"""
Benchmark row-level parallel workers.

This compares wall time of `generate_table` for different `row_workers`
values while keeping the table and shape settings fixed. Results must be
identical across worker counts for the same seed; the script checks that too.

Run:
    python -m bellgen.benchmarks.benchmark_row_workers

Optional env overrides:
    BENCH_SAMPLE, BENCH_REPEATS, BENCH_ATTEMPTS, BENCH_BASE_SEED,
    BENCH_WORKERS

Examples:
    BENCH_SAMPLE=wide BENCH_WORKERS=1,4 python -m bellgen.benchmarks.benchmark_row_workers
"""

import os
import statistics
import time

from bellgen.engine.generation import generate_table
from bellgen.schema import defaults
from bellgen.schema.config import build_shape_config, build_table_config
from bellgen.schema.samples import get_sample_config


def _env_int(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_workers(name, default):
    raw = os.getenv(name)
    if raw is None:
        return default
    out = []
    for part in raw.split(","):
        token = part.strip()
        if not token:
            continue
        try:
            parsed = int(token)
        except ValueError:
            continue
        if parsed >= 1:
            out.append(parsed)
    return out or default


BENCH_SAMPLE = os.getenv("BENCH_SAMPLE", "wide")
BENCH_REPEATS = max(1, _env_int("BENCH_REPEATS", 2))
BENCH_ATTEMPTS = max(1, _env_int("BENCH_ATTEMPTS", defaults.DEFAULT_ATTEMPTS))
BENCH_BASE_SEED = _env_int("BENCH_BASE_SEED", defaults.DEFAULT_SEED)
BENCH_WORKERS = _env_workers("BENCH_WORKERS", [1, 2])


def _run_once(workers, seed):
    document = get_sample_config(BENCH_SAMPLE)
    table_cfg = build_table_config(document)
    shape = build_shape_config(document)

    t0 = time.perf_counter()
    table = generate_table(
        table_cfg,
        rng=seed,
        shape=shape,
        attempts=BENCH_ATTEMPTS,
        row_workers=workers,
    )
    elapsed = time.perf_counter() - t0

    errors = [row.mean_error for row in table.rows]
    return {
        "elapsed_sec": elapsed,
        "max_error": max(errors),
        "fingerprint": tuple(tuple(row.values.values()) for row in table.rows),
        "workers": int(workers),
    }


def main():
    seeds = [BENCH_BASE_SEED + idx for idx in range(BENCH_REPEATS)]
    by_workers = {workers: [] for workers in BENCH_WORKERS}
    fingerprints = {}

    print("[BENCHMARK] row-level workers")
    print(
        f"sample={BENCH_SAMPLE} repeats={BENCH_REPEATS} attempts={BENCH_ATTEMPTS} "
        f"workers={BENCH_WORKERS}"
    )

    for seed_idx, seed in enumerate(seeds):
        order = BENCH_WORKERS if seed_idx % 2 == 0 else list(reversed(BENCH_WORKERS))
        for workers in order:
            result = _run_once(workers, seed)
            by_workers[workers].append(result)
            fingerprints.setdefault(seed, set()).add(result["fingerprint"])
            print(
                f"  seed={seed} workers={workers:<2} "
                f"time={result['elapsed_sec']:.3f}s "
                f"max_error={result['max_error']:.6f}"
            )

    print("\n[SUMMARY]")
    summary = {}
    for workers in BENCH_WORKERS:
        times = [row["elapsed_sec"] for row in by_workers[workers]]
        summary[workers] = {
            "avg_sec": statistics.mean(times),
            "median_sec": statistics.median(times),
        }
        print(
            f"  workers={workers:<2} avg={summary[workers]['avg_sec']:.3f}s "
            f"median={summary[workers]['median_sec']:.3f}s"
        )

    if 1 in summary and len(summary) > 1:
        base = summary[1]["avg_sec"]
        for workers in BENCH_WORKERS:
            if workers == 1:
                continue
            speedup = (
                base / summary[workers]["avg_sec"]
                if summary[workers]["avg_sec"] > 0
                else float("inf")
            )
            print(f"  speedup_workers_{workers}_vs_1={speedup:.2f}x")

    mismatched = [seed for seed, prints in fingerprints.items() if len(prints) > 1]
    if mismatched:
        print(f"  [MISMATCH] seeds with worker-dependent output: {mismatched}")
    else:
        print("  deterministic_across_workers=True")


if __name__ == "__main__":
    main()
