"""
plot_wordscore_ridges.py

Ridge (joy) plot of the cross-country wordscore distribution, one
density per decade (or per year with CONFIG["ridge_group"] = "year").

Inputs:
  - scores/03_wordscores.parquet

Outputs:
  - output/figures/wordscore_ridges.png
"""

import matplotlib
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from ungd_scaling.nlp.score_years import check_score_table

matplotlib.rcParams.update({
    "font.family": "serif",
    "font.serif": ["Computer Modern Roman", "CMU Serif", "Times New Roman"],
    "mathtext.fontset": "cm",
    "text.usetex": False,
})

PALETTE = "crest"


def prepare_ridge_data(scores, group="decade"):
    """
    Drop missing scores and label each row with its ridge.

    Groups with fewer than two distinct scores are dropped: no density
    can be estimated for them.
    """
    check_score_table(scores)
    df = scores.dropna(subset=["wordscore"]).copy()

    if group == "decade":
        df["group"] = (df["Year"] // 10 * 10).astype(str) + "s"
        df["order"] = df["Year"] // 10
    elif group == "year":
        df["group"] = df["Year"].astype(str)
        df["order"] = df["Year"]
    else:
        raise ValueError(f"Unsupported ridge_group: {group}")

    n_distinct = df.groupby("group")["wordscore"].transform("nunique")
    df = df[n_distinct >= 2]
    return df.sort_values(["order", "Country"]).reset_index(drop=True)


def render_ridges(df, out_path):
    if df.empty:
        print("  WARNING: no scores to plot, skipping ridges")
        return

    groups = list(dict.fromkeys(df["group"]))
    height = 0.9 if len(groups) < 15 else 0.5

    with sns.axes_style("white", rc={"axes.facecolor": (0, 0, 0, 0)}):
        pal = sns.color_palette(PALETTE, len(groups))
        g = sns.FacetGrid(df, row="group", hue="group", row_order=groups,
                          hue_order=groups, aspect=12, height=height, palette=pal)

        g.map(sns.kdeplot, "wordscore", bw_adjust=0.6, clip_on=False,
              fill=True, alpha=0.85, linewidth=1.0)
        g.map(sns.kdeplot, "wordscore", bw_adjust=0.6, clip_on=False,
              color="white", linewidth=1.5)
        g.refline(y=0, linewidth=1.5, linestyle="-", color=".2", clip_on=False)

        def label(x, color, label):
            ax = plt.gca()
            ax.text(0, 0.2, label, fontweight="bold", color=color,
                    ha="left", va="center", transform=ax.transAxes)

        g.map(label, "wordscore")
        g.figure.subplots_adjust(hspace=-0.25)
        g.set_titles("")
        g.set(yticks=[], ylabel="")
        g.despine(bottom=True, left=True)
        g.set_xlabels("Wordscore")

    g.figure.savefig(out_path, dpi=300, bbox_inches="tight", facecolor="white")
    plt.close(g.figure)


def main():
    from ungd_scaling.nlp import pipeline_config as cfg

    cfg.FIG_DIR.mkdir(parents=True, exist_ok=True)

    scores = pd.read_parquet(cfg.SCORES_PATH)
    df = prepare_ridge_data(scores, cfg.CONFIG["ridge_group"])
    if df.empty:
        print("  WARNING: no group has two or more distinct scores, skipping ridges")
        return

    for grp, sub in df.groupby("group", sort=False):
        x = sub["wordscore"]
        print(f"  {grp}: N={len(x)}, mean={x.mean():.3f}, sd={x.std():.3f}")

    out_path = cfg.FIG_DIR / "wordscore_ridges.png"
    render_ridges(df, out_path)
    print(f"  Saved -> {out_path}")


if __name__ == "__main__":
    main()
