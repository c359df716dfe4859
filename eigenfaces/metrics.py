"""
This module provides functions for computing and comparing recognition
metrics: identification accuracy, rejection rate, precision, recall,
F1-score, and confidence intervals via bootstrap sampling.

Rejected queries (no enrolled face closer than the threshold) are encoded
with the REJECTED label and always count as errors.
"""

import json
import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score, precision_score, recall_score, f1_score, confusion_matrix
)
import config

REJECTED = "<rejected>"


def encode_predictions(labels):
    """Replace the None of rejected recognitions with REJECTED."""
    return np.array([REJECTED if label is None else str(label) for label in labels], dtype=object)


def compute_recognition_metrics(y_true, y_pred, distances=None):
    """
    Compute metrics for a batch of recognitions.

    Args:
        y_true: Ground truth labels
        y_pred: Recognized labels, None (or REJECTED) for rejected queries
        distances: Optional nearest-neighbor distances of each query

    Returns:
        dict: accuracy over all queries, accuracy over accepted queries,
              rejection rate, macro precision/recall/F1 and confusion matrix
    """
    y_true = np.array([str(label) for label in y_true], dtype=object)
    y_pred = encode_predictions(y_pred)
    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length")

    accepted = y_pred != REJECTED
    classes = sorted(set(y_true))

    metrics = {}
    metrics["n_queries"] = int(len(y_true))
    metrics["accuracy"] = float(accuracy_score(y_true, y_pred)) if len(y_true) else 0.0
    metrics["rejection_rate"] = float(1.0 - accepted.mean()) if len(y_true) else 0.0
    if accepted.any():
        metrics["accuracy_accepted"] = float(accuracy_score(y_true[accepted], y_pred[accepted]))
    else:
        metrics["accuracy_accepted"] = 0.0

    metrics["precision_macro"] = float(precision_score(y_true, y_pred, labels=classes, average="macro", zero_division=0))
    metrics["recall_macro"] = float(recall_score(y_true, y_pred, labels=classes, average="macro", zero_division=0))
    metrics["f1_macro"] = float(f1_score(y_true, y_pred, labels=classes, average="macro", zero_division=0))

    # rejected queries get their own column
    cm_labels = classes + [REJECTED] if not accepted.all() else classes
    metrics["labels"] = cm_labels
    metrics["confusion_matrix"] = confusion_matrix(y_true, y_pred, labels=cm_labels).tolist()

    if distances is not None:
        distances = np.asarray(distances, dtype=np.float64)
        metrics["mean_distance"] = float(distances.mean())
        metrics["median_distance"] = float(np.median(distances))

    return metrics


def calculate_confidence_intervals(y_true, y_pred, n_bootstrap=config.CI_N_BOOTSTRAP, confidence_level=0.95):
    """
    Compute confidence intervals for accuracy using bootstrap sampling.

    Args:
        y_true: Ground truth labels
        y_pred: Recognized labels (None for rejected)
        n_bootstrap: Number of bootstrap iterations
        confidence_level: Desired confidence level (default 0.95 for 95% CI)

    Returns:
        dict: Dictionary containing mean accuracy, lower/upper bounds, and std
    """
    y_true = np.array([str(label) for label in y_true], dtype=object)
    y_pred = encode_predictions(y_pred)
    n_samples = len(y_true)

    if n_samples == 0:
        return {"accuracy": 0.0, "lower_bound": 0.0, "upper_bound": 0.0, "std": 0.0}

    rng = np.random.default_rng(config.RANDOM_STATE)
    correct = (y_true == y_pred).astype(float)
    bootstrap_accuracies = np.array([
        correct[rng.integers(0, n_samples, size=n_samples)].mean()
        for _ in range(n_bootstrap)
    ])

    alpha = 1 - confidence_level
    lower_bound = np.percentile(bootstrap_accuracies, (alpha / 2) * 100)
    upper_bound = np.percentile(bootstrap_accuracies, (1 - alpha / 2) * 100)

    return {
        "accuracy": float(bootstrap_accuracies.mean()),
        "lower_bound": float(lower_bound),
        "upper_bound": float(upper_bound),
        "confidence_level": confidence_level,
        "std": float(np.std(bootstrap_accuracies))
    }


def create_metrics_dataframe(metrics_dict, model_name, n_components):
    """
    Convert a metrics dictionary to a single-row pandas DataFrame.

    Args:
        metrics_dict: Dictionary of computed metrics
        model_name: Name of the recognizer configuration
        n_components: Number of eigen-images used

    Returns:
        pd.DataFrame: Single-row DataFrame with formatted metrics
    """
    row = {
        "model": model_name,
        "components": n_components,
        "accuracy": metrics_dict["accuracy"],
        "accuracy_accepted": metrics_dict["accuracy_accepted"],
        "rejection_rate": metrics_dict["rejection_rate"],
        "precision_macro": metrics_dict["precision_macro"],
        "recall_macro": metrics_dict["recall_macro"],
        "f1_macro": metrics_dict["f1_macro"]
    }

    if "confidence_interval" in metrics_dict:
        ci = metrics_dict["confidence_interval"]
        row["acc_lower"] = ci["lower_bound"]
        row["acc_upper"] = ci["upper_bound"]

    return pd.DataFrame([row])


def compare_models_metrics(metrics_list, save_path=None):
    """
    Aggregate metrics from several recognizer configurations.

    Args:
        metrics_list: List of tuples (model_name, n_components, metrics_dict)
        save_path: Optional CSV destination

    Returns:
        pd.DataFrame: Combined DataFrame sorted by accuracy
    """
    dfs = [create_metrics_dataframe(m, name, n) for name, n, m in metrics_list]
    if not dfs:
        return pd.DataFrame()

    df_comparison = pd.concat(dfs, ignore_index=True)
    df_comparison = df_comparison.sort_values("accuracy", ascending=False).reset_index(drop=True)

    if save_path is not None:
        df_comparison.to_csv(save_path, index=False)

    return df_comparison


def save_metrics_to_json(metrics, path):
    with open(path, "w") as f:
        json.dump(metrics, f, indent=2, default=float)


def print_metrics_summary(metrics, title):
    print(f"\n{title}")
    print(f"  Accuracy: {metrics['accuracy']:.4f}")
    print(f"  Accuracy (accepted): {metrics['accuracy_accepted']:.4f}")
    print(f"  Rejection rate: {metrics['rejection_rate']:.4f}")
    print(f"  F1 macro: {metrics['f1_macro']:.4f}")
    if "confidence_interval" in metrics:
        ci = metrics["confidence_interval"]
        print(f"  {ci['confidence_level']*100:.0f}% CI: [{ci['lower_bound']:.4f}, {ci['upper_bound']:.4f}]")
