import numpy as np
import pytest
import scipy.sparse as sp

from ungd_scaling.nlp.build_tfidf import (
    build_count_matrix,
    document_frequency,
    idf_weights,
    tfidf,
)
from ungd_scaling.utils.text_analyzer import TextAnalyzer


def test_count_matrix_vocabulary():
    analyzer = TextAnalyzer()
    counts, names, _ = build_count_matrix(
        ["peace peace security", "security development"], analyzer
    )
    names = list(names)
    assert counts.shape == (2, 3)
    peace = names.index(analyzer("peace")[0])
    security = names.index(analyzer("security")[0])
    assert counts[0, peace] == 2
    assert counts[1, peace] == 0
    assert counts[:, security].sum() == 2


def test_empty_vocabulary_raises():
    with pytest.raises(ValueError):
        build_count_matrix(["", "a an the 42"])


def test_document_frequency():
    counts = sp.csr_matrix(np.array([[1, 0, 3], [2, 0, 0], [1, 1, 0]]))
    assert list(document_frequency(counts)) == [3, 1, 1]


@pytest.mark.parametrize("scheme", ["inverse", "smooth"])
def test_idf_non_increasing_in_df(scheme):
    # term j appears in j + 1 of the 4 documents, always with tf = 1
    dense = np.array([
        [1, 1, 1, 1],
        [0, 1, 1, 1],
        [0, 0, 1, 1],
        [0, 0, 0, 1],
    ])
    idf = idf_weights(sp.csr_matrix(dense), scheme)
    assert np.all(np.diff(idf) <= 0)
    assert idf[0] > idf[-1]


def test_inverse_idf_values():
    counts = sp.csr_matrix(np.array([[1, 1], [1, 0], [1, 0], [1, 0]]))
    idf = idf_weights(counts, "inverse")
    assert idf[0] == pytest.approx(0.0)
    assert idf[1] == pytest.approx(np.log10(4))


def test_tfidf_scales_columns():
    counts = sp.csr_matrix(np.array([[2, 1], [0, 3]]))
    X = tfidf(counts).toarray()
    # column 1 appears everywhere -> weight 0
    assert X[0, 0] == pytest.approx(2 * np.log10(2))
    assert X[1, 0] == 0
    assert np.all(X[:, 1] == 0)


def test_unknown_idf_scheme():
    with pytest.raises(ValueError):
        idf_weights(sp.csr_matrix(np.eye(2)), "bm25")
