import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest


@pytest.fixture
def config():
    return {
        "anchor_low": "RUS",
        "anchor_high": "USA",
        "anchor_scores": [-1.0, 1.0],
        "idf_scheme": "inverse",
        "stopwords": "sklearn",
        "extra_stopwords": [],
        "rescaling": "none",
    }


@pytest.fixture
def corpus():
    rows = [
        ("USA", 55, 2000, "Freedom, democracy and market liberty. Freedom!"),
        ("RUS", 55, 2000, "Sovereignty against imperialism; solidarity of peoples. Sovereignty."),
        ("FRA", 55, 2000, "Freedom and solidarity."),
        ("GBR", 55, 2000, "Democracy, markets."),
        ("USA", 56, 2001, "Freedom and democracy bring peace."),
        ("RUS", 56, 2001, "Sovereignty and solidarity bring peace."),
        ("CHN", 56, 2001, "Peace, peace, peace in 2001."),
        ("USA", 57, 2002, "Freedom and democracy."),
        ("CHN", 57, 2002, "Sovereignty and development."),
    ]
    return pd.DataFrame(rows, columns=["Country", "Session", "Year", "text"])
