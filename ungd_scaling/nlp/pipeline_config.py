"""
Central configuration for the UN General Debate scaling pipeline.

To create a new run with different settings:
  1. Change RUN_NAME (e.g., "anchors_chn_usa")
  2. Adjust CONFIG values as needed
  3. Run the pipeline: 01 → 02 → 03 → figures

Each run saves outputs to its own directory.
A config.json is saved alongside for reproducibility.

Override mechanism for experiments:
  Set env var PIPELINE_CONFIG_OVERRIDE to a JSON file path.
  The JSON can override any CONFIG value and/or run_name.
  Example: {"run_name": "exp_nltk_stops", "stopwords": "nltk"}
"""

import json
import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("UNGD_SCALING_DIR", "."))

# ── Run name ───────────────────────────────────────────────────────
RUN_NAME = "main"

# ── Pipeline settings ──────────────────────────────────────────────
CONFIG = {
    "run_name": RUN_NAME,
    "year_range": [1971, 2017],         # inclusive: one independent model per year
    "anchor_low": "RUS",                # reference text scored anchor_scores[0]
    "anchor_high": "USA",               # reference text scored anchor_scores[1]
    "anchor_scores": [-1.0, 1.0],
    "idf_scheme": "inverse",            # "inverse" = log10(N/df), "smooth" = sklearn smooth idf
    "stopwords": "sklearn",             # "sklearn" | "nltk"
    "extra_stopwords": [],
    "rescaling": "none",                # "none" | "lbg" | "mv"
    "roles": None,                      # None = all speakers, or list of role names to keep
    "n_jobs": 1,                        # 1 = sequential, -1 = all cores (joblib)
    "top_terms": 15,                    # per direction, diagnostic only
    "timeseries_countries": ["USA", "RUS", "CHN", "GBR", "FRA", "IND", "BRA"],
    "map_years": [2013, 2017],          # inclusive: map shows the mean over these years
    "ridge_group": "decade",            # "decade" | "year"
    "speaker_columns": {
        "year": "Year",
        "country": "ISO Code",
        "post": "Post",
    },
    "input_speech_dir": "data/raw/speeches",
    "speakers_path": "data/raw/Speakers_by_session.xlsx",
    "world_shapefile": "data/raw/shapefiles/ne_110m_admin_0_countries.shp",
    "world_iso_column": "ADM0_A3",
}


def apply_override(config, override_path):
    """Update config in place from a JSON override file; return the run name."""
    with open(override_path) as f:
        overrides = json.load(f)
    run_name = overrides.pop("run_name", config["run_name"])
    config.update(overrides)
    config["run_name"] = run_name
    print(f"  [pipeline_config] Override loaded: run={run_name}")
    for k, v in overrides.items():
        print(f"    {k} = {v}")
    return run_name


# ── Override from environment (for experiments) ────────────────────
_override_path = os.environ.get("PIPELINE_CONFIG_OVERRIDE")
if _override_path:
    RUN_NAME = apply_override(CONFIG, _override_path)

# ── Shared input paths (fixed, independent of run) ────────────────
SPEECH_DIR    = BASE_DIR / CONFIG["input_speech_dir"]
SPEAKERS_PATH = BASE_DIR / CONFIG["speakers_path"]
WORLD_SHP     = BASE_DIR / CONFIG["world_shapefile"]

# ── Run-specific output paths ─────────────────────────────────────
RUN_DIR    = BASE_DIR / "data" / "processed" / "runs" / RUN_NAME
CORPUS_DIR = RUN_DIR / "corpus"
MODEL_DIR  = RUN_DIR / "models"
SCORE_DIR  = RUN_DIR / "scores"
FIG_DIR    = RUN_DIR / "output" / "figures"

SPEECHES_PATH   = CORPUS_DIR / "01_speeches.parquet"
WITH_ROLES_PATH = CORPUS_DIR / "02_speeches_with_roles.parquet"
SCORES_PATH     = SCORE_DIR / "03_wordscores.parquet"


def save_config():
    """Save the current config alongside run outputs."""
    RUN_DIR.mkdir(parents=True, exist_ok=True)
    with open(RUN_DIR / "config.json", "w") as f:
        json.dump(CONFIG, f, indent=2)
    print(f"  Config saved -> {RUN_DIR / 'config.json'}")


def get_years(config=None):
    """Return list of years to score (e.g., 1971-2017)."""
    lo, hi = (config or CONFIG)["year_range"]
    return list(range(lo, hi + 1))
