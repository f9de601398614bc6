"""
load_speeches.py

Step 01: load UN General Debate speeches and save as parquet.

File names carry the metadata: <ISO3>_<session>_<year>.txt
(e.g. USA_72_2017.txt). Files may sit in per-session sub-directories.

Inputs:
  - data/raw/speeches/**/*.txt

Outputs:
  - data/processed/runs/{run}/corpus/01_speeches.parquet
"""

from pathlib import Path

import pandas as pd
from tqdm import tqdm

FILENAME_SEP = "_"
COLUMNS = ["Country", "Session", "Year", "text"]


def parse_filename(name):
    """Split '<ISO3>_<session>_<year>.txt' into (country, session, year)."""
    stem = Path(name).stem
    parts = stem.split(FILENAME_SEP)
    if len(parts) != 3:
        raise ValueError(f"Unexpected speech file name: {name!r}")

    country, session, year = parts
    if not country or not session.isdigit() or not year.isdigit():
        raise ValueError(f"Unexpected speech file name: {name!r}")

    return country.upper(), int(session), int(year)


def load_speeches(raw_dir: Path, encoding="utf-8") -> pd.DataFrame:
    raw_dir = Path(raw_dir)
    if not raw_dir.is_dir():
        raise FileNotFoundError(f"Speech directory not found: {raw_dir}")

    files = sorted(raw_dir.rglob("*.txt"))
    # macOS resource forks shipped with some copies of the corpus
    files = [f for f in files if not f.name.startswith("._")]

    rows = []
    for file in tqdm(files, desc="Loading speeches"):
        country, session, year = parse_filename(file.name)
        text = file.read_text(encoding=encoding)
        rows.append((country, session, year, text.lstrip("\ufeff")))

    if not rows:
        raise RuntimeError(f"No speech files loaded from {raw_dir}")

    df = pd.DataFrame(rows, columns=COLUMNS)

    dup = df.duplicated(subset=["Country", "Year"], keep=False)
    if dup.any():
        pairs = df.loc[dup, ["Country", "Year"]].drop_duplicates()
        raise ValueError(
            "Duplicate speeches for (Country, Year): "
            + ", ".join(f"{c}/{y}" for c, y in pairs.itertuples(index=False))
        )

    return df.sort_values(["Year", "Country"]).reset_index(drop=True)


def main():
    from ungd_scaling.nlp import pipeline_config as cfg

    cfg.CORPUS_DIR.mkdir(parents=True, exist_ok=True)

    df = load_speeches(cfg.SPEECH_DIR)
    df.to_parquet(cfg.SPEECHES_PATH)

    print("Saved:", cfg.SPEECHES_PATH)
    print("Shape:", df.shape)
    print(f"Years: {df['Year'].min()}-{df['Year'].max()}, "
          f"countries: {df['Country'].nunique()}")


if __name__ == "__main__":
    main()
