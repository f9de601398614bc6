import pickle
import re

import pytest

from ungd_scaling.utils.text_analyzer import TextAnalyzer, load_stopwords

MESSY = (
    "Mr. President, the 1970s were marked by self-determination (art. 1, para. 2) "
    "and co-operation; see http://www.un.org/en/ga or www.example.org! "
    "Peace-keeping costs $4.5bn -- 23% of U.N. budgets... #solidarity @UN "
    "Développement durable, l'économie. Emissions per km² of H₂O vapour."
)


def test_empty_text():
    analyzer = TextAnalyzer()
    assert analyzer("") == []
    assert analyzer(None) == []


def test_basic_stemming_and_stopwords():
    analyzer = TextAnalyzer()
    assert analyzer("The United Nations") == ["unit", "nation"]


def test_tokens_are_clean():
    tokens = TextAnalyzer()(MESSY)
    assert tokens
    for t in tokens:
        assert len(t) > 2
        assert re.fullmatch(r"[^\W\d_]+", t), t
        assert t.isalpha(), t
        assert t == t.lower()


def test_super_and_subscript_digits_rejected():
    assert TextAnalyzer()("area of km² and H₂O") == ["area"]


def test_urls_removed():
    tokens = TextAnalyzer()("Visit http://www.un.org/en/ga today")
    assert not any("org" in t or "www" in t for t in tokens)


def test_hyphenated_words_split():
    analyzer = TextAnalyzer()
    tokens = analyzer("self-determination")
    assert "self" in tokens
    assert analyzer("determination")[0] in tokens


def test_short_tokens_dropped_before_stemming():
    assert TextAnalyzer()("UN at ok") == []


def test_custom_stop_words():
    analyzer = TextAnalyzer(load_stopwords("sklearn", extra=["Peace"]))
    assert analyzer("peace security") == analyzer("security")


def test_picklable():
    analyzer = TextAnalyzer()
    analyzer(MESSY)
    restored = pickle.loads(pickle.dumps(analyzer))
    assert restored(MESSY) == analyzer(MESSY)


def test_unknown_stopword_source():
    with pytest.raises(ValueError):
        load_stopwords("spacy")
