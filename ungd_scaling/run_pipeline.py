"""
run_pipeline.py

Run the pipeline steps in order, each in its own interpreter so that
pipeline_config picks up the override freshly:

  01  nlp.load_speeches               text files -> 01_speeches.parquet
  02  nlp.speaker_roles               + speaker role -> 02_speeches_with_roles.parquet
  03  nlp.score_years                 per-year Wordscores -> 03_wordscores.parquet
  04  figures.map_wordscores          choropleth
  05  figures.plot_wordscore_timeseries
  06  figures.plot_wordscore_ridges

Usage:
  ungd-scaling [--from STEP] [--only STEPS] [--override JSON]

Examples:
  ungd-scaling                          # run all from scratch
  ungd-scaling --from 03                # reuse corpus, refit and redraw
  ungd-scaling --only 04,06             # redraw map and ridges only
  ungd-scaling --override exp.json      # e.g. {"run_name": "anchors_chn", "anchor_low": "CHN"}
"""

import argparse
import os
import subprocess
import sys
import time
from pathlib import Path

PYTHON = sys.executable

STEPS = {
    1: ("ungd_scaling.nlp.load_speeches", "Load speeches"),
    2: ("ungd_scaling.nlp.speaker_roles", "Merge speaker roles"),
    3: ("ungd_scaling.nlp.score_years", "Per-year Wordscores"),
    4: ("ungd_scaling.figures.map_wordscores", "Choropleth map"),
    5: ("ungd_scaling.figures.plot_wordscore_timeseries", "Time series"),
    6: ("ungd_scaling.figures.plot_wordscore_ridges", "Ridge densities"),
}


def select_steps(from_step=1, only=None):
    """Step numbers to run, in pipeline order."""
    if only:
        nums = sorted(int(x) for x in only.split(","))
    else:
        nums = [n for n in STEPS if n >= from_step]
    unknown = [n for n in nums if n not in STEPS]
    if unknown:
        raise ValueError(f"Unknown step(s): {unknown}")
    return nums


def step_env(override_path=None):
    env = os.environ.copy()
    if override_path is not None:
        env["PIPELINE_CONFIG_OVERRIDE"] = str(Path(override_path).resolve())
    return env


def run_step(num, env):
    """Run one pipeline step as `python -m module`; True on success."""
    module, label = STEPS[num]
    print(f"\n{'='*60}")
    print(f"  Step {num:02d}: {label}")
    print(f"  {module}")
    print(f"{'='*60}")

    t0 = time.time()
    result = subprocess.run([PYTHON, "-m", module], env=env)
    elapsed = time.time() - t0

    if result.returncode != 0:
        print(f"  FAILED (exit code {result.returncode}) after {elapsed:.0f}s")
        return False
    print(f"  Completed in {elapsed:.0f}s")
    return True


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[0].strip())
    parser.add_argument("--from", dest="from_step", type=int, default=1,
                        help="Start from this step number (default: 1)")
    parser.add_argument("--only", default=None,
                        help="Comma-separated step numbers (default: all)")
    parser.add_argument("--override", default=None,
                        help="JSON file overriding pipeline_config.CONFIG")
    args = parser.parse_args(argv)

    steps = select_steps(args.from_step, args.only)
    env = step_env(args.override)

    print(f"Running steps: {', '.join(f'{n:02d}' for n in steps)}")
    if args.override:
        print(f"Override: {args.override}")

    pipeline_start = time.time()
    for num in steps:
        if not run_step(num, env):
            print(f"ABORT: step {num:02d} failed")
            sys.exit(1)

    print("\n" + "=" * 60)
    print(f"PIPELINE COMPLETE in {time.time() - pipeline_start:.0f}s")
    print("=" * 60)


if __name__ == "__main__":
    main()
