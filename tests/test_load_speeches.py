import pytest

from ungd_scaling.nlp.load_speeches import load_speeches, parse_filename


def write(path, text, encoding="utf-8"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding=encoding)


@pytest.fixture
def speech_dir(tmp_path):
    root = tmp_path / "speeches"
    write(root / "Session 56 - 2001" / "USA_56_2001.txt", "Freedom and democracy.")
    write(root / "Session 56 - 2001" / "RUS_56_2001.txt", "Sovereignty.")
    write(root / "Session 55 - 2000" / "USA_55_2000.txt", "\ufeffFreedom.")
    write(root / "Session 55 - 2000" / "._USA_55_2000.txt", "resource fork")
    return root


def test_parse_filename():
    assert parse_filename("USA_72_2017.txt") == ("USA", 72, 2017)
    assert parse_filename("/data/Session 26 - 1971/gbr_26_1971.txt") == ("GBR", 26, 1971)


@pytest.mark.parametrize("name", [
    "USA-72-2017.txt",
    "USA_72.txt",
    "USA_LXXII_2017.txt",
    "USA_72_2017_v2.txt",
    "_72_2017.txt",
])
def test_parse_filename_rejects(name):
    with pytest.raises(ValueError):
        parse_filename(name)


def test_load_speeches(speech_dir):
    df = load_speeches(speech_dir)

    assert list(df.columns) == ["Country", "Session", "Year", "text"]
    assert list(zip(df["Country"], df["Year"])) == [
        ("USA", 2000), ("RUS", 2001), ("USA", 2001),
    ]
    assert df.loc[0, "Session"] == 55
    assert df.loc[0, "text"] == "Freedom."


def test_bad_filename_fails_whole_load(speech_dir):
    write(speech_dir / "notes.txt", "not a speech")
    with pytest.raises(ValueError):
        load_speeches(speech_dir)


def test_duplicate_country_year(speech_dir):
    write(speech_dir / "extra" / "USA_55_2000.txt", "Again.")
    with pytest.raises(ValueError, match="USA/2000"):
        load_speeches(speech_dir)


def test_empty_directory(tmp_path):
    (tmp_path / "empty").mkdir()
    with pytest.raises(RuntimeError):
        load_speeches(tmp_path / "empty")


def test_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_speeches(tmp_path / "nowhere")
