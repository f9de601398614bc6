"""
score_years.py

Step 03: fit one Wordscores model per year and score every speech of
that year.

For each year in CONFIG["year_range"] (inclusive):
  1. Subset the corpus to that year's speeches
  2. Tokenize + stem, build counts, reweight by IDF (build_tfidf.py)
  3. Reference texts: anchor_low country -> anchor_scores[0],
                      anchor_high country -> anchor_scores[1]
  4. Fit word scores on the two references, predict all speeches

Vocabulary and IDF are rebuilt from that year's speeches alone, so
scores are positions within a year, not on a common scale across years.
A year missing either anchor country is skipped with a warning.

Inputs:
  - corpus/02_speeches_with_roles.parquet (falls back to 01_speeches.parquet)

Outputs:
  - scores/03_wordscores.parquet, scores/03_wordscores.csv
  - scores/03_year_summary.csv
  - scores/03_top_terms.csv (diagnostic)
  - models/03_wordscores_{year}.joblib
"""

import time

import joblib
import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from ungd_scaling.nlp.build_tfidf import build_count_matrix, tfidf
from ungd_scaling.nlp.wordscores import (
    MissingAnchorError,
    fit_wordscores,
    predict_wordscores,
    top_terms,
)
from ungd_scaling.utils.text_analyzer import TextAnalyzer, load_stopwords

SCORE_COLUMNS = ["Country", "Year", "wordscore"]


def make_analyzer(config):
    stops = load_stopwords(config.get("stopwords", "sklearn"), config.get("extra_stopwords"))
    return TextAnalyzer(stops)


def check_anchors(config):
    if config["anchor_low"] == config["anchor_high"]:
        raise ValueError(
            f"anchor_low and anchor_high are both {config['anchor_low']!r}"
        )


def reference_scores(countries, config):
    """NaN everywhere except the two anchor countries."""
    lo, hi = config["anchor_low"], config["anchor_high"]
    a_lo, a_hi = config["anchor_scores"]
    countries = np.asarray(countries)

    ref = np.full(len(countries), np.nan)
    ref[countries == lo] = a_lo
    ref[countries == hi] = a_hi
    return ref


def score_year(corpus, year, config, analyzer=None):
    """
    Score one year's speeches from scratch.

    Returns (scores DataFrame, fitted model, summary dict).
    Raises MissingAnchorError if the year lacks an anchor country.
    """
    check_anchors(config)
    docs = corpus[corpus["Year"] == year]
    if docs.empty:
        raise MissingAnchorError(f"no speeches for {year}")

    countries = docs["Country"].to_numpy()
    missing = [c for c in (config["anchor_low"], config["anchor_high"]) if c not in countries]
    if missing:
        raise MissingAnchorError(f"anchor(s) {', '.join(missing)} missing in {year}")

    if analyzer is None:
        analyzer = make_analyzer(config)

    counts, feature_names, _ = build_count_matrix(docs["text"].tolist(), analyzer)
    X = tfidf(counts, config.get("idf_scheme", "inverse"))

    ref = reference_scores(countries, config)
    model = fit_wordscores(X, ref, feature_names)
    scores = predict_wordscores(
        model, X,
        rescaling=config.get("rescaling", "none"),
        virgin_mask=np.isnan(ref),
    )

    out = pd.DataFrame({
        "Country": countries,
        "Year": int(year),
        "wordscore": scores,
    })
    summary = {
        "Year": int(year),
        "n_docs": len(docs),
        "n_features": X.shape[1],
        "n_scored_terms": model.n_scored,
        "n_scored_docs": int(np.sum(~np.isnan(scores))),
        "wordscore_mean": float(np.nanmean(scores)) if np.any(~np.isnan(scores)) else np.nan,
        "wordscore_std": float(np.nanstd(scores)) if np.any(~np.isnan(scores)) else np.nan,
    }
    return out, model, summary


def _try_score_year(docs, year, config, analyzer):
    try:
        return year, score_year(docs, year, config, analyzer), None
    except MissingAnchorError as e:
        return year, None, str(e)


def score_all_years(corpus, years, config, n_jobs=1):
    """
    Run score_year for every year and concatenate.

    Returns (scores, summary, models) where models maps year -> model.
    Skipped years contribute no rows; any error other than
    MissingAnchorError aborts the run.
    """
    analyzer = make_analyzer(config)
    years = list(years)
    pipeline_start = time.time()

    if n_jobs == 1:
        results = []
        for i, year in enumerate(years, 1):
            year_start = time.time()
            res = _try_score_year(corpus, year, config, analyzer)
            results.append(res)

            elapsed = time.time() - year_start
            total_elapsed = time.time() - pipeline_start
            remaining = total_elapsed / i * (len(years) - i)
            if res[1] is None:
                print(f"  [{i}/{len(years)}] WARNING: {res[2]}, skipping")
            else:
                s = res[1][2]
                print(f"  [{i}/{len(years)}] Year {year}: {s['n_docs']} speeches, "
                      f"{s['n_features']:,} terms ({s['n_scored_terms']:,} scored)  |  "
                      f"{elapsed:.1f}s  ETA: {remaining:.0f}s")
    else:
        print(f"  Scoring {len(years)} years with n_jobs={n_jobs} ...")
        results = Parallel(n_jobs=n_jobs)(
            delayed(_try_score_year)(corpus[corpus["Year"] == year], year, config, analyzer)
            for year in years
        )
        for year, res, reason in results:
            if res is None:
                print(f"  WARNING: {reason}, skipping")

    frames, summaries, models = [], [], {}
    for year, res, _ in results:
        if res is None:
            continue
        out, model, summary = res
        frames.append(out)
        summaries.append(summary)
        models[year] = model

    if frames:
        scores = pd.concat(frames, ignore_index=True)
    else:
        scores = pd.DataFrame(columns=SCORE_COLUMNS)
    scores = scores.astype({"Year": int, "wordscore": float})

    dup = scores.duplicated(subset=["Country", "Year"])
    assert not dup.any(), f"{int(dup.sum())} duplicate (Country, Year) rows"

    summary_cols = ["Year", "n_docs", "n_features", "n_scored_terms",
                    "n_scored_docs", "wordscore_mean", "wordscore_std"]
    return scores, pd.DataFrame(summaries, columns=summary_cols), models


def check_score_table(df):
    """Validate the (Country, Year, wordscore) table the figures consume."""
    missing = [c for c in SCORE_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"score table missing columns {missing}")
    if not pd.api.types.is_integer_dtype(df["Year"]):
        raise ValueError("score table Year must be integer")
    if not pd.api.types.is_numeric_dtype(df["wordscore"]):
        raise ValueError("score table wordscore must be numeric")
    if df.duplicated(subset=["Country", "Year"]).any():
        raise ValueError("score table has duplicate (Country, Year) rows")
    return df


def main():
    from ungd_scaling.nlp import pipeline_config as cfg

    if cfg.WITH_ROLES_PATH.exists():
        corpus = pd.read_parquet(cfg.WITH_ROLES_PATH)
    else:
        print(f"WARNING: {cfg.WITH_ROLES_PATH.name} not found, using {cfg.SPEECHES_PATH.name}")
        corpus = pd.read_parquet(cfg.SPEECHES_PATH)

    years = cfg.get_years()
    print(f"Corpus: {len(corpus):,} speeches")
    print(f"\nSettings:")
    print(f"  Years:     {years[0]}-{years[-1]} ({len(years)} models)")
    print(f"  Anchors:   {cfg.CONFIG['anchor_low']}={cfg.CONFIG['anchor_scores'][0]:+g}, "
          f"{cfg.CONFIG['anchor_high']}={cfg.CONFIG['anchor_scores'][1]:+g}")
    print(f"  IDF:       {cfg.CONFIG['idf_scheme']}")
    print(f"  Rescaling: {cfg.CONFIG['rescaling']}\n")

    cfg.save_config()
    scores, summary, models = score_all_years(
        corpus, years, cfg.CONFIG, n_jobs=cfg.CONFIG.get("n_jobs", 1)
    )
    check_score_table(scores)

    cfg.SCORE_DIR.mkdir(parents=True, exist_ok=True)
    cfg.MODEL_DIR.mkdir(parents=True, exist_ok=True)

    top = []
    for year, model in models.items():
        joblib.dump(model, cfg.MODEL_DIR / f"03_wordscores_{year}.joblib")
        t = top_terms(model, cfg.CONFIG["top_terms"])
        t.insert(0, "Year", year)
        top.append(t)

    scores.to_parquet(cfg.SCORES_PATH)
    scores.to_csv(cfg.SCORE_DIR / "03_wordscores.csv", index=False)
    summary.to_csv(cfg.SCORE_DIR / "03_year_summary.csv", index=False)
    if top:
        pd.concat(top, ignore_index=True).to_csv(cfg.SCORE_DIR / "03_top_terms.csv", index=False)

    print("\n" + "=" * 72)
    print("SUMMARY: Per-year Wordscores models")
    print("=" * 72)
    print(summary.to_string(index=False))
    print(f"\n  Years scored: {len(models)} / {len(years)}")
    print(f"  Rows:         {len(scores):,}")
    print(f"  Saved scores -> {cfg.SCORES_PATH}")
    print("=" * 72)


if __name__ == "__main__":
    main()
