"""Quick local sample run for bellgen."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
SRC_PATH = PROJECT_ROOT / "src"
if SRC_PATH.exists() and str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from bellgen import BellgenSynthesizer, RunConfig, get_sample_config  # noqa: E402


def main() -> int:
    try:
        config = get_sample_config("default")
        run_cfg = RunConfig(
            seed=42,
            attempts=4,
            log_level="info",
            output_path="output/",
        )
        result = BellgenSynthesizer(config, run_cfg).generate()
    except Exception as exc:
        print(f"[SAMPLE RUN ERROR] {exc}", file=sys.stderr)
        print("Tip: install dependencies with `pip install -e .`", file=sys.stderr)
        return 1

    print(result.dataframe.to_string(index=False))
    status = "OK" if result.success else "BEST_EFFORT"
    print(
        f"[SAMPLE RUN] status={status} seed={result.seed} "
        f"max_mean_error={result.max_mean_error():.6f} "
        f"output={result.output_path}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
