"""
text_analyzer.py

Picklable tokenizer for UN General Debate speech text.
Used by build_tfidf.py as the CountVectorizer analyzer.

This module exists so that joblib can serialize and deserialize the
analyzer (fitted vectorizers are saved per year, and joblib workers
receive it when years are scored in parallel).  Closures cannot be
pickled; a callable class can.
"""

import re
from nltk.stem.porter import PorterStemmer
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS


URL_RE = re.compile(r"(?:https?://|www\.)\S+", re.IGNORECASE)

# Letters only: digits, punctuation, symbols and hyphens all act as separators.
# Superscript and subscript digits still match \w without \d, so tokens are
# also checked with str.isalpha
WORD_RE = re.compile(r"[^\W\d_]+")

MIN_TOKEN_LEN = 3


def load_stopwords(source="sklearn", extra=None):
    """Return the stopword set ("sklearn" or "nltk") plus any extra words."""
    if source == "sklearn":
        words = set(ENGLISH_STOP_WORDS)
    elif source == "nltk":
        import nltk
        try:
            nltk.data.find("corpora/stopwords")
        except LookupError:
            print("Downloading NLTK 'stopwords' data...")
            nltk.download("stopwords")
        from nltk.corpus import stopwords
        words = set(stopwords.words("english"))
    else:
        raise ValueError(f"Unsupported stopword source: {source}")

    if extra:
        words |= {w.lower() for w in extra}
    return frozenset(words)


class TextAnalyzer:
    """
    Picklable analyzer with Porter Stemmer + filtering.

    Pipeline per document:
      1. Remove URLs
      2. Tokenize on letters (drops punctuation, symbols, digits, hyphens)
      3. Drop noise tokens (length <= 2)
      4. Lowercase
      5. Remove stop words
      6. Stem (cached), drop stems of length <= 2
    """

    def __init__(self, stop_words=None):
        self.stop_words = frozenset(ENGLISH_STOP_WORDS if stop_words is None else stop_words)
        self.stemmer = PorterStemmer()
        self.stem_cache = {}

    def __call__(self, doc):
        if not doc:
            return []

        text = URL_RE.sub(" ", doc)
        raw_tokens = WORD_RE.findall(text)

        tokens = []
        for t in raw_tokens:
            if len(t) < MIN_TOKEN_LEN or not t.isalpha():
                continue
            t = t.lower()
            if t in self.stop_words:
                continue
            s = self.stem_cache.get(t)
            if s is None:
                s = self.stemmer.stem(t)
                self.stem_cache[t] = s
            if len(s) >= MIN_TOKEN_LEN:
                tokens.append(s)

        return tokens
