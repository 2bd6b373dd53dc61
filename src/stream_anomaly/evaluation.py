"""Scoring detector verdicts against labelled data."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

__all__ = ["EvaluationReport", "precision_recall_f1"]


class EvaluationReport(NamedTuple):
    """Precision, recall and F1 score, each in ``[0, 1]``."""

    precision: float
    recall: float
    f1: float


def precision_recall_f1(
    predicted: Sequence[bool], actual: Sequence[bool]
) -> EvaluationReport:
    """Compare predicted anomaly flags with ground-truth labels.

    Args:
        predicted: Verdicts produced by a detector.
        actual: Ground-truth labels aligned with ``predicted``.

    Returns:
        An :class:`EvaluationReport`. Ratios with a zero denominator are
        reported as ``0.0``.

    Raises:
        ValueError: If the sequences differ in length.
    """

    if len(predicted) != len(actual):
        raise ValueError(
            f"predicted and actual must have the same length "
            f"({len(predicted)} != {len(actual)})"
        )

    true_positive = false_positive = false_negative = 0
    for guess, truth in zip(predicted, actual):
        if guess and truth:
            true_positive += 1
        elif guess:
            false_positive += 1
        elif truth:
            false_negative += 1

    flagged = true_positive + false_positive
    relevant = true_positive + false_negative
    precision = true_positive / flagged if flagged else 0.0
    recall = true_positive / relevant if relevant else 0.0
    f1 = (
        2.0 * precision * recall / (precision + recall)
        if precision + recall > 0.0
        else 0.0
    )
    return EvaluationReport(precision=precision, recall=recall, f1=f1)
