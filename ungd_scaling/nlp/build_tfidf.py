"""
build_tfidf.py

Document-feature matrix for one set of speeches (one year in the pipeline).

Preprocessing is done by utils.text_analyzer.TextAnalyzer (URLs,
punctuation, digits and short tokens removed, stop words removed,
Porter stemmed). Counts come from a CountVectorizer driven by that
analyzer; IDF weights are applied on top:

  weight(t, d) = tf(t, d) * idf(t)

  idf schemes:
    "inverse" (default): log10(N / df)
    "smooth":            ln((1 + N) / (1 + df)) + 1   (sklearn TfidfTransformer)

No row normalization: Wordscores works on relative weights itself.
The vocabulary is rebuilt from scratch for every call; nothing is
shared across years.
"""

import numpy as np
import scipy.sparse as sp
from sklearn.feature_extraction.text import CountVectorizer, TfidfTransformer

from ungd_scaling.utils.text_analyzer import TextAnalyzer

IDF_SCHEMES = ("inverse", "smooth")


def build_count_matrix(texts, analyzer=None):
    """Return (counts CSR, feature names array, fitted vectorizer)."""
    vectorizer = CountVectorizer(
        analyzer=analyzer if analyzer is not None else TextAnalyzer(),
        dtype=np.float64,
    )
    # CountVectorizer raises ValueError("empty vocabulary ...") when nothing survives
    counts = vectorizer.fit_transform(texts)
    feature_names = vectorizer.get_feature_names_out()
    return counts.tocsr(), feature_names, vectorizer


def document_frequency(counts):
    """Number of documents each term appears in."""
    return np.asarray((counts > 0).sum(axis=0)).ravel()


def idf_weights(counts, scheme="inverse"):
    n_docs = counts.shape[0]
    df = document_frequency(counts)

    if scheme == "inverse":
        # Every column of a fitted count matrix has df >= 1
        return np.log10(n_docs / df)
    elif scheme == "smooth":
        transformer = TfidfTransformer(norm=None, use_idf=True, smooth_idf=True)
        transformer.fit(counts)
        return transformer.idf_
    else:
        raise ValueError(f"Unsupported idf_scheme: {scheme}")


def tfidf(counts, scheme="inverse"):
    """Reweight a count matrix by IDF (columns scaled, rows untouched)."""
    idf = idf_weights(counts, scheme)
    X = sp.csr_matrix(counts, dtype=np.float64) @ sp.diags(idf)
    X = sp.csr_matrix(X)
    X.eliminate_zeros()
    return X
