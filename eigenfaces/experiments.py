# eigenfaces/experiments.py
import numpy as np
import config
from eigenfaces.image import as_image
from eigenfaces.metrics import compute_recognition_metrics
from eigenfaces.projection import eigen_decomposite, eigen_reconstruct
from eigenfaces.recognizer import EigenfaceRecognizer
from eigenfaces.utils import plot_ablation_study, plot_eigenfaces, plot_eigenvalue_spectrum


def reconstruction_error(images, eigen_space):
    """Mean absolute pixel error of reconstructing `images` from their coefficients."""
    errors = []
    for image in images:
        image = as_image(image)
        rec = eigen_reconstruct(eigen_decomposite(image, eigen_space), eigen_space)
        errors.append(np.mean(np.abs(image.pixels - rec.pixels)))
    return float(np.mean(errors))


def run_component_experiments(train_pairs, test_images, test_labels, components_list=None,
                              eps=config.EIGEN_EPS, plot=True, verbose=True):
    if components_list is None:
        components_list = config.COMPONENTS_RANGE

    results = {}
    accuracies = []
    errors = []

    for n_comp in components_list:
        if verbose:
            print(f"\n--- Eigenfaces with up to {n_comp} components ---")

        # threshold 0: always report the nearest face
        recognizer = EigenfaceRecognizer(threshold=0, max_components=n_comp, eps=eps)
        recognizer.train(train_pairs)
        eigen_space = recognizer.eigen_space

        predictions, distances = [], []
        for image in test_images:
            label, distance = recognizer.recognize(image)
            predictions.append(label)
            distances.append(distance)

        metrics = compute_recognition_metrics(test_labels, predictions, distances)
        rec_error = reconstruction_error(test_images, eigen_space)

        accuracies.append(metrics["accuracy"])
        errors.append(rec_error)

        if verbose:
            print(f"  Retained components: {eigen_space.component_count} (eps reached {eigen_space.eps:.2e})")
            print(f"  Reconstruction MAE: {rec_error:.4f}")
            print(f"  Recognition accuracy: {metrics['accuracy']:.4f}")

        results[n_comp] = {
            "recognizer": recognizer,
            "component_count": eigen_space.component_count,
            "metrics": metrics,
            "reconstruction_mae": rec_error,
            "accuracy": metrics["accuracy"]
        }

    if plot and results:
        plot_ablation_study(list(components_list), accuracies, errors)
        best = max(results, key=lambda k: results[k]["accuracy"])
        plot_eigenfaces(results[best]["recognizer"].eigen_space)
        plot_eigenvalue_spectrum(results[best]["recognizer"].eigen_space)
        if verbose:
            print(f"\nAblation study figures saved in {config.OUTPUT_PATH}")

    return results
