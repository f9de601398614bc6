"""
map_wordscores.py

Choropleth world map of mean wordscore per country over
CONFIG["map_years"], diverging palette centred on zero (midpoint of
the two anchors).

Inputs:
  - scores/03_wordscores.parquet
  - Natural Earth admin-0 shapefile (CONFIG["world_shapefile"])

Outputs:
  - output/figures/wordscore_map.png
"""

import geopandas as gpd
import matplotlib
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.colors import TwoSlopeNorm

from ungd_scaling.nlp.score_years import check_score_table

# LaTeX-style fonts
matplotlib.rcParams.update({
    "font.family": "serif",
    "font.serif": ["Computer Modern Roman", "CMU Serif", "Times New Roman"],
    "mathtext.fontset": "cm",
    "text.usetex": False,
})

CMAP = "RdBu_r"
NO_DATA_COLOR = "#ededed"
EDGE_COLOR = "white"
EDGE_LW = 0.3

# Equal Earth projection for world maps
WORLD_CRS = "EPSG:8857"


def mean_scores(scores, years):
    """Mean wordscore per country over an inclusive year range."""
    lo, hi = years
    sub = scores[(scores["Year"] >= lo) & (scores["Year"] <= hi)]
    return (
        sub.groupby("Country")["wordscore"]
        .mean()
        .reset_index()
    )


def prepare_map_data(scores, world, iso_column, years):
    """Left-join mean scores onto the world shapes (unmatched -> NaN)."""
    check_score_table(scores)
    means = mean_scores(scores, years)
    return world.merge(means, left_on=iso_column, right_on="Country", how="left")


def symmetric_norm(values):
    vmax = np.nanmax(np.abs(values)) if np.any(~np.isnan(values)) else 1.0
    vmax = vmax if vmax > 0 else 1.0
    return TwoSlopeNorm(vmin=-vmax, vcenter=0.0, vmax=vmax)


def render_map(gdf, title, out_path):
    gdf = gdf.to_crs(WORLD_CRS) if gdf.crs is not None else gdf
    norm = symmetric_norm(gdf["wordscore"].to_numpy(dtype=float))

    fig, ax = plt.subplots(figsize=(12, 6.5))
    gdf.plot(
        column="wordscore", ax=ax, cmap=CMAP, norm=norm,
        edgecolor=EDGE_COLOR, linewidth=EDGE_LW,
        legend=True,
        legend_kwds={"label": "Wordscore", "orientation": "horizontal",
                     "shrink": 0.5, "pad": 0.02},
        missing_kwds={"color": NO_DATA_COLOR, "edgecolor": EDGE_COLOR,
                      "linewidth": EDGE_LW},
    )
    ax.set_axis_off()
    ax.set_title(title, fontsize=12)

    fig.tight_layout()
    fig.savefig(out_path, dpi=300, bbox_inches="tight", facecolor="white")
    plt.close(fig)


def main():
    from ungd_scaling.nlp import pipeline_config as cfg

    cfg.FIG_DIR.mkdir(parents=True, exist_ok=True)

    scores = pd.read_parquet(cfg.SCORES_PATH)
    world = gpd.read_file(cfg.WORLD_SHP)
    years = cfg.CONFIG["map_years"]

    gdf = prepare_map_data(scores, world, cfg.CONFIG["world_iso_column"], years)
    n_matched = int(gdf["wordscore"].notna().sum())
    unmatched = sorted(set(mean_scores(scores, years)["Country"]) - set(gdf["Country"].dropna()))
    print(f"  Countries on map with scores: {n_matched}")
    if unmatched:
        print(f"  WARNING: no shape for {len(unmatched)} countries: {', '.join(unmatched)}")

    title = (f"Mean wordscore, {years[0]}" if years[0] == years[1]
             else f"Mean wordscore, {years[0]}–{years[1]}")
    out_path = cfg.FIG_DIR / "wordscore_map.png"
    render_map(gdf, title, out_path)
    print(f"  Saved -> {out_path}")


if __name__ == "__main__":
    main()
