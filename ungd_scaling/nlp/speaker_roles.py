"""
speaker_roles.py

Step 02: load the speakers-by-session spreadsheet, map each speaker's
post to a role category and merge it onto the speech corpus.

Roles:
  - head_of_state_or_government  (President, King, Prime Minister, ...)
  - deputy_or_foreign_minister   (Vice-President, Deputy PM, Minister, ...)
  - un_representative            (Permanent Representative, Ambassador, ...)

Posts that match none of the rules keep role = NaN.

Inputs:
  - data/raw/Speakers_by_session.xlsx (or .csv)
  - data/processed/runs/{run}/corpus/01_speeches.parquet

Outputs:
  - data/processed/runs/{run}/corpus/02_speeches_with_roles.parquet
"""

import re
from pathlib import Path

import numpy as np
import pandas as pd

HEAD = "head_of_state_or_government"
MINISTER = "deputy_or_foreign_minister"
UN_REP = "un_representative"
ROLES = (HEAD, MINISTER, UN_REP)

# Checked in order: "Deputy Prime Minister" must hit the deputy rule before
# the head-of-government rule, "Vice-President" before "President".
# Delegation and observer titles only decide the role when nothing else in
# the post does ("Minister for Foreign Affairs, Chairman of the Delegation").
ROLE_RULES = [
    (MINISTER, re.compile(
        r"\b(vice|deputy)[\s-]*(president|prime|premier|chancellor)\b",
        re.IGNORECASE)),
    (UN_REP, re.compile(
        r"\b(permanent\s+)?representative\b|\bambassador\b|\bchargé|\bcharge\s+d",
        re.IGNORECASE)),
    (HEAD, re.compile(
        r"\bpresident\b|\bprime\s+minister\b|\bpremier\b|\bchancellor\b"
        r"|\bking\b|\bqueen\b|\bemir\b|\bamir\b|\bsultan\b|\bprince\b"
        r"|\bhead\s+of\s+(state|government)\b|\bgovernor[\s-]general\b"
        r"|\bchairman\s+of\s+the\s+(presidential|presidency|state|revolutionary"
        r"|supreme|council\s+of\s+ministers)\b"
        r"|\bcaptain[s]?\s+regent\b|\bmonarch\b", re.IGNORECASE)),
    (MINISTER, re.compile(
        r"\bminister\b|\bsecretary\s+of\s+state\b|\bforeign\s+secretary\b",
        re.IGNORECASE)),
    (UN_REP, re.compile(r"\bdelegation\b|\bobserver\b", re.IGNORECASE)),
]


def classify_post(post):
    """Map a free-text post (e.g. 'Minister for Foreign Affairs') to a role."""
    if not isinstance(post, str) or not post.strip():
        return np.nan
    for role, pattern in ROLE_RULES:
        if pattern.search(post):
            return role
    return np.nan


def load_speaker_roles(path: Path, columns: dict) -> pd.DataFrame:
    """Read the spreadsheet and return (Country, Year, post, role)."""
    path = Path(path)
    if path.suffix.lower() in (".xlsx", ".xls"):
        df = pd.read_excel(path)
    else:
        df = pd.read_csv(path)

    missing = [c for c in columns.values() if c not in df.columns]
    if missing:
        raise ValueError(f"{path.name}: missing columns {missing}")

    # The sheet also has a full-name "Country" column; select before renaming
    df = df[[columns["country"], columns["year"], columns["post"]]].copy()
    df.columns = ["Country", "Year", "post"]

    df = df.dropna(subset=["Country", "Year"])
    df["Country"] = df["Country"].astype(str).str.strip().str.upper()
    df["Year"] = df["Year"].astype(int)
    df["role"] = df["post"].map(classify_post)

    # Keep the first listed speaker when a delegation has several rows
    return df.drop_duplicates(subset=["Country", "Year"], keep="first").reset_index(drop=True)


def merge_roles(speeches: pd.DataFrame, speakers: pd.DataFrame) -> pd.DataFrame:
    merged = speeches.merge(
        speakers[["Country", "Year", "post", "role"]],
        on=["Country", "Year"],
        how="left",
        validate="one_to_one",
    )
    assert len(merged) == len(speeches)
    return merged


def filter_roles(speeches: pd.DataFrame, roles) -> pd.DataFrame:
    """Keep only speeches whose speaker role is in roles (None keeps all)."""
    if roles is None:
        return speeches
    unknown = set(roles) - set(ROLES)
    if unknown:
        raise ValueError(f"Unknown roles: {sorted(unknown)}")
    return speeches[speeches["role"].isin(roles)].reset_index(drop=True)


def main():
    from ungd_scaling.nlp import pipeline_config as cfg

    speeches = pd.read_parquet(cfg.SPEECHES_PATH)
    speakers = load_speaker_roles(cfg.SPEAKERS_PATH, cfg.CONFIG["speaker_columns"])

    merged = merge_roles(speeches, speakers)

    n_unmatched = merged["post"].isna().sum()
    n_unknown = (merged["post"].notna() & merged["role"].isna()).sum()
    if n_unmatched:
        print(f"  WARNING: {n_unmatched:,} speeches have no speaker row")
    if n_unknown:
        print(f"  WARNING: {n_unknown:,} posts matched no role rule")

    print("\nRole counts:")
    print(merged["role"].value_counts(dropna=False).to_string())

    merged = filter_roles(merged, cfg.CONFIG.get("roles"))

    merged.to_parquet(cfg.WITH_ROLES_PATH)
    print("\nSaved:", cfg.WITH_ROLES_PATH)
    print("Shape:", merged.shape)


if __name__ == "__main__":
    main()
