"""
wordscores.py

Supervised Wordscores scaling (Laver, Benoit & Garry 2003) on a weighted
document-feature matrix.

Fit (reference texts r with scores A_r):
  F_tr = weight(t, r) / sum_t weight(t, r)          relative weight in r
  s(t) = sum_r A_r * F_tr / sum_r F_tr               word score

  Terms absent from every reference text have no score (NaN) and are
  ignored at prediction time.

Predict (any document d):
  raw(d) = sum_t weight(t, d) * s(t) / sum_t weight(t, d)

  Sums run over scored terms only. A document with no weight on any
  scored term gets NaN.

Rescaling:
  "none"  raw scores
  "lbg"   (raw - mean_v) * (sd_ref / sd_v) + mean_v      over virgin texts v
  "mv"    (raw - raw_lo) / (raw_hi - raw_lo) * (A_hi - A_lo) + A_lo
          where raw_lo / raw_hi are the reference texts' own raw scores
"""

import numpy as np
import pandas as pd
import scipy.sparse as sp

RESCALINGS = ("none", "lbg", "mv")


class MissingAnchorError(ValueError):
    """The document set does not have exactly two usable reference texts."""


class WordscoresModel:
    """Fitted word scores for one document set (one year)."""

    def __init__(self, word_scores, feature_names, ref_scores, ref_raw):
        self.word_scores = word_scores
        self.feature_names = feature_names
        self.ref_scores = ref_scores
        self.ref_raw = ref_raw

    @property
    def n_scored(self):
        return int(np.sum(~np.isnan(self.word_scores)))


def _raw_scores(X, word_scores):
    scored = ~np.isnan(word_scores)
    Xs = X[:, scored]
    totals = np.asarray(Xs.sum(axis=1)).ravel()
    weighted = np.asarray(Xs @ word_scores[scored]).ravel()

    raw = np.full(X.shape[0], np.nan)
    ok = totals > 0
    raw[ok] = weighted[ok] / totals[ok]
    return raw


def fit_wordscores(X, ref_scores, feature_names=None):
    """
    Fit word scores from the rows of X whose ref_scores entry is not NaN.

    Raises MissingAnchorError unless exactly two reference rows are
    labeled, or when a reference row has no weighted terms.
    """
    X = sp.csr_matrix(X, dtype=np.float64)
    ref_scores = np.asarray(ref_scores, dtype=np.float64)
    if ref_scores.shape[0] != X.shape[0]:
        raise ValueError(
            f"ref_scores has {ref_scores.shape[0]} entries for {X.shape[0]} documents"
        )

    ref_idx = np.flatnonzero(~np.isnan(ref_scores))
    if len(ref_idx) != 2:
        raise MissingAnchorError(
            f"need exactly two reference texts, found {len(ref_idx)}"
        )

    R = X[ref_idx].toarray()
    totals = R.sum(axis=1)
    if np.any(totals <= 0):
        raise MissingAnchorError("a reference text has no weighted terms")

    F = R / totals[:, None]
    denom = F.sum(axis=0)
    A = ref_scores[ref_idx]

    word_scores = np.full(X.shape[1], np.nan)
    present = denom > 0
    word_scores[present] = (A @ F[:, present]) / denom[present]

    if feature_names is None:
        feature_names = np.arange(X.shape[1]).astype(str)

    ref_raw = _raw_scores(X[ref_idx], word_scores)
    return WordscoresModel(word_scores, np.asarray(feature_names), A, ref_raw)


def rescale(raw, model, method="none", virgin_mask=None):
    if method == "none":
        return raw

    if method == "lbg":
        mask = np.ones(len(raw), dtype=bool) if virgin_mask is None else np.asarray(virgin_mask)
        virgin = raw[mask & ~np.isnan(raw)]
        sd_virgin = virgin.std(ddof=1) if len(virgin) > 1 else 0.0
        if sd_virgin == 0:
            raise ValueError("lbg rescaling needs two or more virgin texts with distinct scores")
        mean_virgin = virgin.mean()
        sd_ref = model.ref_scores.std(ddof=1)
        return (raw - mean_virgin) * (sd_ref / sd_virgin) + mean_virgin

    if method == "mv":
        lo = int(np.argmin(model.ref_scores))
        hi = int(np.argmax(model.ref_scores))
        raw_lo, raw_hi = model.ref_raw[lo], model.ref_raw[hi]
        if raw_hi == raw_lo:
            raise ValueError("mv rescaling needs reference texts with distinct raw scores")
        a_lo, a_hi = model.ref_scores[lo], model.ref_scores[hi]
        return (raw - raw_lo) / (raw_hi - raw_lo) * (a_hi - a_lo) + a_lo

    raise ValueError(f"Unsupported rescaling: {method}")


def predict_wordscores(model, X, rescaling="none", virgin_mask=None):
    """Score every row of X; NaN where a row has no scored terms."""
    if rescaling not in RESCALINGS:
        raise ValueError(f"Unsupported rescaling: {rescaling}")
    X = sp.csr_matrix(X, dtype=np.float64)
    if X.shape[1] != len(model.word_scores):
        raise ValueError(
            f"X has {X.shape[1]} features, model has {len(model.word_scores)}"
        )
    raw = _raw_scores(X, model.word_scores)
    return rescale(raw, model, rescaling, virgin_mask)


def top_terms(model, n=15):
    """Lowest and highest scoring terms (diagnostic)."""
    scored = np.flatnonzero(~np.isnan(model.word_scores))
    if len(scored) == 0:
        return pd.DataFrame(columns=["rank", "term", "wordscore", "direction"])

    order = scored[np.argsort(model.word_scores[scored], kind="stable")]
    low = order[:n]
    high = order[::-1][:n]

    rows = []
    for direction, idx in (("low", low), ("high", high)):
        for rank, fi in enumerate(idx, 1):
            rows.append({
                "rank": rank,
                "term": model.feature_names[fi],
                "wordscore": float(model.word_scores[fi]),
                "direction": direction,
            })
    return pd.DataFrame(rows)
