"""
plot_wordscore_timeseries.py

Wordscore over time for the countries in CONFIG["timeseries_countries"].
Each year is a separate model, so lines show position relative to the
two anchors within each year, not movement on a fixed scale.

Inputs:
  - scores/03_wordscores.parquet

Outputs:
  - output/figures/wordscore_timeseries.png
"""

import matplotlib
import matplotlib.pyplot as plt
import pandas as pd

from ungd_scaling.nlp.score_years import check_score_table

matplotlib.rcParams.update({
    "font.family": "serif",
    "font.serif": ["Computer Modern Roman", "CMU Serif", "Times New Roman"],
    "mathtext.fontset": "cm",
    "text.usetex": False,
})


def prepare_timeseries(scores, countries):
    """Year x Country table of wordscores for the requested countries."""
    check_score_table(scores)
    present = [c for c in countries if c in set(scores["Country"])]
    missing = [c for c in countries if c not in present]
    if missing:
        print(f"  WARNING: no scores for {', '.join(missing)}")

    sub = scores[scores["Country"].isin(present)]
    wide = sub.pivot(index="Year", columns="Country", values="wordscore")
    return wide.reindex(columns=present).sort_index()


def render_timeseries(wide, anchors, out_path):
    fig, ax = plt.subplots(figsize=(11, 5.5))

    for country in wide.columns:
        series = wide[country]
        lw = 1.8 if country in anchors else 1.1
        ax.plot(series.index, series.values, marker="o", markersize=3,
                linewidth=lw, label=country)

    ax.axhline(0, color="gray", linewidth=0.8, linestyle="--", alpha=0.6)
    ax.set_xlabel("Year", fontsize=11)
    ax.set_ylabel("Wordscore", fontsize=11)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.grid(axis="y", alpha=0.2)
    ax.legend(fontsize=8, ncol=2, loc="upper left", framealpha=0.9)

    fig.tight_layout()
    fig.savefig(out_path, dpi=300, bbox_inches="tight", facecolor="white")
    plt.close(fig)


def main():
    from ungd_scaling.nlp import pipeline_config as cfg

    cfg.FIG_DIR.mkdir(parents=True, exist_ok=True)

    scores = pd.read_parquet(cfg.SCORES_PATH)
    wide = prepare_timeseries(scores, cfg.CONFIG["timeseries_countries"])

    anchors = (cfg.CONFIG["anchor_low"], cfg.CONFIG["anchor_high"])
    out_path = cfg.FIG_DIR / "wordscore_timeseries.png"
    render_timeseries(wide, anchors, out_path)

    print(wide.describe().T[["count", "mean", "min", "max"]].to_string())
    print(f"  Saved -> {out_path}")


if __name__ == "__main__":
    main()
