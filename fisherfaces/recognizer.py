"""
Face Recognizer - nearest neighbour in the learned subspace.

Recognition of a probe p against a trained model (μ, W, gallery):
    1. c = Wᵀ (p - μ)
    2. d²ᵢ = ‖c - zᵢ‖² for every gallery entry zᵢ
    3. best = argmin d²ᵢ (ties -> lowest gallery index)
    4. match iff d²_best < τ

Works with any model exposing mean / final_projection / gallery_projections /
gallery_labels / is_trained (FisherfacesModel, EigenfacesModel).
"""

import math
from dataclasses import dataclass

import numpy as np

from fisherfaces.config import (
    DEFAULT_THRESHOLD, UNKNOWN_LABEL, UNTRAINED_LABEL, RANKING_SIZE
)
from fisherfaces.errors import DimensionMismatchError
from fisherfaces.metrics import squared_euclidean_distance_to_rows


@dataclass(frozen=True)
class RecognitionResult:
    """Outcome of recognizing one probe."""

    source_name: str
    label: str
    distance: float
    is_match: bool

    def __str__(self):
        verdict = "MATCH" if self.is_match else "NO MATCH"
        return f"{verdict} [{self.source_name}]: {self.label} (distance: {self.distance:.2f})"


class FaceRecognizer:
    """
    Classifier over a trained model plus a mutable threshold.

    The recognizer does not own the model; retraining the model is picked up
    by the next recognize() call.

    Args:
        model: Trained (or not yet trained) subspace model
        threshold: τ, squared-distance cutoff for a match
        verbose: Print the top candidates and the conclusion per probe
        ranking_size: Number of candidates printed in verbose mode
    """

    def __init__(self, model, threshold=DEFAULT_THRESHOLD, verbose=False,
                 ranking_size=RANKING_SIZE):
        self.model = model
        self.verbose = verbose
        self.ranking_size = ranking_size
        self.threshold = None
        self.set_threshold(threshold)

    def set_threshold(self, value):
        value = float(value)
        if math.isnan(value):
            raise ValueError("Threshold must be a number, got NaN")
        self.threshold = value

    def project(self, vector):
        """c = Wᵀ (p - μ)."""
        p = np.asarray(vector, dtype=np.float64).ravel()
        if p.shape[0] != self.model.mean.shape[0]:
            raise DimensionMismatchError(
                f"Probe has length {p.shape[0]}, model expects {self.model.mean.shape[0]}"
            )
        return (p - self.model.mean) @ self.model.final_projection

    def distances(self, vector):
        """Squared distance from the projected probe to every gallery entry."""
        return squared_euclidean_distance_to_rows(self.project(vector),
                                                  self.model.gallery_projections)

    def rank(self, vector, top_k=None):
        """
        Gallery candidates ordered by squared distance.

        Args:
            vector: Probe pixel vector (D,)
            top_k: Keep only the first top_k (None = all)

        Returns:
            list of (label, squared_distance), nearest first; ties keep
            gallery order
        """
        d2 = self.distances(vector)
        order = np.argsort(d2, kind="stable")
        if top_k is not None:
            order = order[:top_k]
        labels = self.model.gallery_labels
        return [(labels[i], float(d2[i])) for i in order]

    def recognize(self, vector, source_name):
        """
        Recognize one probe.

        Returns:
            RecognitionResult. Untrained model -> label "Untrained",
            distance -1, no match.
        """
        if not self.model.is_trained:
            return RecognitionResult(source_name, UNTRAINED_LABEL, -1.0, False)

        d2 = self.distances(vector)
        best = int(np.argmin(d2))   # first minimum = lowest gallery index
        best_distance = float(d2[best])
        is_match = best_distance < self.threshold
        label = self.model.gallery_labels[best] if is_match else UNKNOWN_LABEL

        if self.verbose:
            self._print_ranking(source_name, d2, is_match)

        return RecognitionResult(source_name, label, best_distance, is_match)

    def _print_ranking(self, source_name, d2, is_match):
        labels = self.model.gallery_labels
        order = np.argsort(d2, kind="stable")[:self.ranking_size]
        print("-" * 50)
        print(f"Analyzing image: {source_name}")
        print("Proximity ranking (squared Euclidean distance):")
        for rank, i in enumerate(order, 1):
            print(f"  #{rank} Candidate: {labels[i]:<15} | Distance: {d2[i]:.2f}")
        if is_match:
            print("  -> CONCLUSION: match confirmed")
        else:
            print(f"  -> CONCLUSION: distance above threshold ({self.threshold:.2f}), unknown")
        print("-" * 50, flush=True)
