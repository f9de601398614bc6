import geopandas as gpd
import numpy as np
import pandas as pd
import pytest
from shapely.geometry import box

from ungd_scaling.figures.map_wordscores import mean_scores, prepare_map_data, render_map
from ungd_scaling.figures.plot_wordscore_ridges import prepare_ridge_data, render_ridges
from ungd_scaling.figures.plot_wordscore_timeseries import (
    prepare_timeseries,
    render_timeseries,
)


@pytest.fixture
def scores():
    rng = np.random.default_rng(1)
    rows = []
    for year in range(1978, 1993):
        for country in ["USA", "RUS", "FRA", "CHN", "BRA", "IND"]:
            rows.append((country, year, float(rng.normal())))
    df = pd.DataFrame(rows, columns=["Country", "Year", "wordscore"])
    df.loc[(df["Country"] == "CHN") & (df["Year"] == 1980), "wordscore"] = np.nan
    return df


@pytest.fixture
def world():
    return gpd.GeoDataFrame(
        {"ADM0_A3": ["USA", "RUS", "FRA", "ATA"]},
        geometry=[box(-120, 30, -70, 50), box(40, 45, 150, 70),
                  box(-4, 42, 8, 51), box(-180, -85, 180, -70)],
        crs="EPSG:4326",
    )


def test_mean_scores_year_range(scores):
    means = mean_scores(scores, [1990, 1992])
    usa = scores[(scores["Country"] == "USA") & scores["Year"].between(1990, 1992)]
    assert means.set_index("Country").loc["USA", "wordscore"] == pytest.approx(usa["wordscore"].mean())


def test_prepare_map_data(scores, world):
    gdf = prepare_map_data(scores, world, "ADM0_A3", [1990, 1992])
    assert isinstance(gdf, gpd.GeoDataFrame)
    assert len(gdf) == len(world)
    assert gdf.crs == world.crs
    by_code = gdf.set_index("ADM0_A3")["wordscore"]
    assert np.isnan(by_code["ATA"])
    assert by_code[["USA", "RUS", "FRA"]].notna().all()


def test_render_map(scores, world, tmp_path):
    gdf = prepare_map_data(scores, world, "ADM0_A3", [1990, 1990])
    out = tmp_path / "map.png"
    render_map(gdf, "Mean wordscore, 1990", out)
    assert out.exists()


def test_prepare_timeseries(scores, capsys):
    wide = prepare_timeseries(scores, ["USA", "RUS", "ZZZ"])
    assert list(wide.columns) == ["USA", "RUS"]
    assert list(wide.index) == list(range(1978, 1993))
    assert "ZZZ" in capsys.readouterr().out


def test_render_timeseries(scores, tmp_path):
    wide = prepare_timeseries(scores, ["USA", "RUS", "CHN"])
    out = tmp_path / "ts.png"
    render_timeseries(wide, ("RUS", "USA"), out)
    assert out.exists()


def test_prepare_ridge_data_decades(scores):
    df = prepare_ridge_data(scores, "decade")
    assert list(dict.fromkeys(df["group"])) == ["1970s", "1980s", "1990s"]
    assert df["wordscore"].notna().all()
    assert len(df) == len(scores) - 1


def test_prepare_ridge_data_drops_degenerate_groups():
    scores = pd.DataFrame({
        "Country": ["USA", "RUS", "USA", "RUS", "FRA"],
        "Year": [2000, 2000, 2001, 2001, 2001],
        "wordscore": [0.5, 0.5, 0.1, -0.2, np.nan],
    })
    df = prepare_ridge_data(scores, "year")
    assert set(df["group"]) == {"2001"}


def test_prepare_ridge_data_bad_group(scores):
    with pytest.raises(ValueError):
        prepare_ridge_data(scores, "century")


def test_render_ridges(scores, tmp_path):
    out = tmp_path / "ridges.png"
    render_ridges(prepare_ridge_data(scores, "decade"), out)
    assert out.exists()


def test_render_ridges_empty(tmp_path, capsys):
    scores = pd.DataFrame({
        "Country": ["USA", "RUS"],
        "Year": [2000, 2000],
        "wordscore": [np.nan, np.nan],
    })
    df = prepare_ridge_data(scores, "decade")
    assert df.empty

    out = tmp_path / "ridges.png"
    render_ridges(df, out)
    assert not out.exists()
    assert "WARNING" in capsys.readouterr().out
