# eigenfaces/utils.py
import os
import joblib
import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns
import config


def _output_file(name):
    os.makedirs(config.OUTPUT_PATH, exist_ok=True)
    return os.path.join(config.OUTPUT_PATH, name)


def plot_mean_face(eigen_space):
    """Mean image of the enrolled faces."""
    plt.figure(figsize=(4, 4))
    plt.imshow(eigen_space.mean.pixels, cmap='gray')
    plt.title("Mean Face")
    plt.axis('off')
    plt.savefig(_output_file("mean_face.png"), bbox_inches='tight')
    plt.close()


def plot_eigenfaces(eigen_space, n_top=config.N_EIGENFACES_DISPLAY):
    """Show the first n eigen-images, largest eigenvalue first."""
    n_top = min(n_top, eigen_space.component_count)
    cols = 4
    rows = int(np.ceil(n_top / cols))

    plt.figure(figsize=(12, 3 * rows))
    for i in range(n_top):
        plt.subplot(rows, cols, i + 1)
        plt.imshow(eigen_space.eigen_images[i].pixels, cmap='gray')
        plt.title(f"Eigenface {i+1}")
        plt.axis('off')
    plt.suptitle("Leading Eigenfaces (Jacobi)")
    plt.savefig(_output_file("eigenfaces.png"), bbox_inches='tight')
    plt.close()


def plot_eigenvalue_spectrum(eigen_space):
    """Retained eigenvalues relative to the largest one (log scale)."""
    ratios = np.abs(eigen_space.eigenvalues / eigen_space.eigenvalues[0])
    plt.figure(figsize=config.PLOT_FIGSIZE_SMALL)
    plt.semilogy(range(1, len(ratios) + 1), ratios, marker='o', linestyle='--')
    plt.xlabel("Component")
    plt.ylabel("|eigenvalue / eigenvalue[0]|")
    plt.title("Eigenvalue Spectrum")
    plt.grid(True)
    plt.savefig(_output_file("eigenvalue_spectrum.png"), bbox_inches='tight')
    plt.close()


def plot_reconstruction_comparison(originals, reconstructions, n_images=5):
    """
    Side by side view of faces and their eigen-space reconstructions.
    originals, reconstructions: sequences of ImageBuffer
    """
    n_images = min(n_images, len(originals))
    plt.figure(figsize=(6, 3 * n_images))

    for i in range(n_images):
        plt.subplot(n_images, 2, i * 2 + 1)
        plt.imshow(originals[i].pixels, cmap='gray')
        plt.title("Original")
        plt.axis('off')

        plt.subplot(n_images, 2, i * 2 + 2)
        plt.imshow(reconstructions[i].pixels, cmap='gray')
        plt.title("Reconstruction")
        plt.axis('off')

    plt.savefig(_output_file("reconstruction_comparison.png"), bbox_inches='tight')
    plt.close()


def plot_confusion_matrix(cm, labels, model_name):
    """Confusion matrix heatmap, rejected queries in the last column when present."""
    plt.figure(figsize=(10, 8))
    sns.heatmap(np.asarray(cm), annot=True, fmt='d', cmap='Blues',
                xticklabels=labels, yticklabels=labels)
    plt.title(f"Confusion Matrix: {model_name}")
    plt.ylabel('True identity')
    plt.xlabel('Recognized identity')
    plt.savefig(_output_file(f"cm_{model_name.lower().replace(' ', '_')}.png"), bbox_inches='tight')
    plt.close()


def plot_distance_distribution(genuine, impostor, threshold=None):
    """Histogram of eigen-distances for genuine and impostor pairs."""
    plt.figure(figsize=config.PLOT_FIGSIZE_SMALL)
    sns.histplot(genuine, color='tab:green', label='Genuine', kde=True, stat='density')
    sns.histplot(impostor, color='tab:red', label='Impostor', kde=True, stat='density')
    if threshold is not None:
        plt.axvline(threshold, color='k', linestyle='--', label=f'EER threshold ({threshold:.1f})')
    plt.xlabel("Eigen-distance")
    plt.title("Genuine vs Impostor Distances")
    plt.legend()
    plt.savefig(_output_file("distance_distribution.png"), bbox_inches='tight')
    plt.close()


def plot_ablation_study(components, accuracies, reconstruction_errors):
    """Accuracy and reconstruction error against the number of components."""
    plt.style.use(config.PLOT_STYLE)
    plt.figure(figsize=config.PLOT_FIGSIZE_MEDIUM)

    ax1 = plt.gca()
    ax1.set_xlabel("Eigen-images")
    ax1.set_ylabel("Recognition Accuracy", color='tab:blue')
    ax1.plot(components, accuracies, marker='o', color='tab:blue', linewidth=2, markersize=8)
    ax1.tick_params(axis='y', labelcolor='tab:blue')
    ax1.grid(True, alpha=0.3)

    ax2 = ax1.twinx()
    ax2.set_ylabel("Reconstruction MAE", color='tab:orange')
    ax2.plot(components, reconstruction_errors, marker='s', color='tab:orange',
             linewidth=2, markersize=8, linestyle='--')
    ax2.tick_params(axis='y', labelcolor='tab:orange')

    plt.title("Ablation Study: Eigen-images vs Performance", fontsize=14, fontweight='bold')
    plt.tight_layout()
    plt.savefig(_output_file("component_ablation_study.png"), dpi=config.PLOT_DPI, bbox_inches='tight')
    plt.close()


def save_model(model, name):
    """Persist a trained recognizer (or any picklable object) with joblib."""
    os.makedirs(config.MODELS_PATH, exist_ok=True)
    path = os.path.join(config.MODELS_PATH, f"{name}.joblib")
    joblib.dump(model, path)
    print(f"Model saved: {path}")
    return path


def load_model(path):
    return joblib.load(path)
