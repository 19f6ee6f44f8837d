from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from scipy import sparse
from sklearn.feature_extraction import DictVectorizer
from sklearn.linear_model import SGDClassifier
from sklearn.metrics import log_loss

from .config import ModelConfig
from .data import EntitySpan, TaggedSentence, decode_spans, tokenize
from .features import sentence_features


@dataclass
class NerTagger:
    """Token-level BIO tagger: DictVectorizer features into an incremental SGD classifier."""

    vectorizer: DictVectorizer
    classifier: SGDClassifier
    labels: tuple[str, ...]

    @property
    def is_trained(self) -> bool:
        return hasattr(self.classifier, "classes_")

    def update(
        self,
        sentences: Sequence[TaggedSentence],
        *,
        drop: float,
        rng: np.random.Generator,
    ) -> float:
        """Run one training step and return the log-loss over the undropped batch."""
        X, y = self._encode(sentences)
        order = rng.permutation(X.shape[0])
        X_step = drop_features(X, drop=drop, rng=rng)[order]
        self.classifier.partial_fit(X_step, y[order], classes=np.asarray(self.labels))
        proba = self.classifier.predict_proba(X)
        return float(log_loss(y, proba, labels=self.classifier.classes_))

    def predict(self, text: str) -> list[EntitySpan]:
        if not self.is_trained:
            raise RuntimeError("NerTagger has not been trained; run at least one update first.")
        tokens = tokenize(text)
        if not tokens:
            return []
        X = self.vectorizer.transform(sentence_features(tokens))
        tags = [str(tag) for tag in self.classifier.predict(X)]
        return decode_spans(tokens, tags)

    def _encode(self, sentences: Sequence[TaggedSentence]) -> tuple[sparse.csr_matrix, np.ndarray]:
        features: list[dict[str, object]] = []
        targets: list[str] = []
        for sentence in sentences:
            features.extend(sentence_features(sentence.tokens))
            targets.extend(sentence.tags)
        return sparse.csr_matrix(self.vectorizer.transform(features)), np.asarray(targets)


def build_tagger(sentences: Sequence[TaggedSentence], *, config: ModelConfig) -> NerTagger:
    if not sentences:
        raise ValueError("At least one training sentence is required")

    vectorizer = DictVectorizer(sparse=True)
    vectorizer.fit([f for s in sentences for f in sentence_features(s.tokens)])
    labels = tuple(sorted({tag for s in sentences for tag in s.tags}))
    classifier = SGDClassifier(
        loss="log_loss",
        alpha=config.alpha,
        random_state=config.seed,
    )
    return NerTagger(vectorizer=vectorizer, classifier=classifier, labels=labels)


def drop_features(
    X: sparse.csr_matrix,
    *,
    drop: float,
    rng: np.random.Generator,
) -> sparse.csr_matrix:
    """Inverted dropout over the stored entries of a sparse feature matrix."""
    if not 0.0 <= drop < 1.0:
        raise ValueError(f"drop must be in [0, 1), got {drop}")
    dropped = X.copy()
    if drop == 0.0 or dropped.nnz == 0:
        return dropped
    keep = rng.random(dropped.nnz) >= drop
    dropped.data = np.where(keep, dropped.data / (1.0 - drop), 0.0)
    dropped.eliminate_zeros()
    return dropped
