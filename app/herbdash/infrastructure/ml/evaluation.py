from typing import Sequence
import numpy as np
from sklearn.metrics import accuracy_score, confusion_matrix
from herbdash.domain.models.category import Category
from herbdash.domain.models.prediction import ModelEvaluation
from herbdash.domain.models.reference import TrainingRecord
from herbdash.domain.models.sample import sample_class_for
from herbdash.config.logging import get_logger

logger = get_logger(__name__)


def evaluate_classifier(classifier, records: Sequence[TrainingRecord]) -> ModelEvaluation:
    """
    Run held-out records through a trained classifier and log accuracy plus
    the confusion matrix (true category -> predicted category).
    Diagnostic only; nothing here changes later predictions.
    """
    sample_cls = sample_class_for(classifier.modality)
    y_true = [record.category.index for record in records]
    y_pred = [
        classifier.classify_sync(sample_cls(record.vector(classifier.spec))).category.index
        for record in records
    ]

    labels = [category.index for category in Category]
    if records:
        cm = confusion_matrix(y_true, y_pred, labels=labels)
        correct = int(round(accuracy_score(y_true, y_pred, normalize=False)))
    else:
        cm = np.zeros((len(labels), len(labels)), dtype=int)
        correct = 0

    matrix = {
        true_cat.code: {pred_cat.code: int(cm[true_cat.index, pred_cat.index]) for pred_cat in Category}
        for true_cat in Category
    }
    evaluation = ModelEvaluation(
        modality=classifier.modality,
        correct=correct,
        total=len(records),
        confusion_matrix=matrix,
    )

    logger.info(
        f"{classifier.modality.value} evaluation accuracy: {evaluation.accuracy * 100:.2f}% "
        f"({evaluation.correct}/{evaluation.total})"
    )
    logger.info(f"{classifier.modality.value} confusion matrix (true -> predicted): "
                f"{ {t: {p: n for p, n in row.items() if n} for t, row in matrix.items()} }")
    return evaluation
