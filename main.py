# main.py
import sys
import logging
from logging.handlers import RotatingFileHandler

import config
from eigenfaces.preprocessing import (
    DataPreprocessor, to_labeled_images, compute_dataset_statistics, print_dataset_statistics
)
from eigenfaces.recognizer import EigenfaceRecognizer
from eigenfaces.experiments import run_component_experiments, reconstruction_error
from eigenfaces.verification import run_verification_study
from eigenfaces.metrics import (
    compute_recognition_metrics, calculate_confidence_intervals, compare_models_metrics,
    save_metrics_to_json, print_metrics_summary
)
from eigenfaces.projection import eigen_decomposite, eigen_reconstruct
from eigenfaces.utils import (
    plot_mean_face, plot_reconstruction_comparison, plot_confusion_matrix, save_model
)


def setup_logging():
    config.ensure_output_dirs()
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format=config.LOG_FORMAT,
        handlers=[
            RotatingFileHandler(config.LOG_FILE, maxBytes=config.LOG_MAX_BYTES,
                                backupCount=config.LOG_BACKUP_COUNT),
            logging.StreamHandler(sys.stdout)
        ]
    )


def evaluate(recognizer, images):
    predictions, distances = [], []
    for image in images:
        label, distance = recognizer.recognize(image)
        predictions.append(label)
        distances.append(distance)
    return predictions, distances


def main():
    setup_logging()
    config.print_config()

    # 1. DATA LOADING
    print("\n1. DATA LOADING")

    preprocessor = DataPreprocessor()
    images, y, target_names = preprocessor.load_dataset()

    stats = compute_dataset_statistics(y, target_names)
    print_dataset_statistics(stats)

    data = preprocessor.split_data(images, y, test_size=config.TEST_SIZE)
    train_pairs = to_labeled_images(data['X_train'], data['y_train'], target_names)
    test_pairs = to_labeled_images(data['X_test'], data['y_test'], target_names)
    test_images = [image for _, image in test_pairs]
    test_labels = [label for label, _ in test_pairs]

    # 2. TRAINING
    print("\n2. EIGEN SPACE TRAINING")

    recognizer = EigenfaceRecognizer(threshold=0, eps=config.EIGEN_EPS)
    recognizer.train(train_pairs)
    eigen_space = recognizer.eigen_space
    print(f"Eigen space: {eigen_space.component_count} components from {len(train_pairs)} faces")

    plot_mean_face(eigen_space)
    reconstructions = [eigen_reconstruct(eigen_decomposite(image, eigen_space), eigen_space)
                       for image in test_images[:5]]
    plot_reconstruction_comparison(test_images[:5], reconstructions)
    print(f"Test reconstruction MAE: {reconstruction_error(test_images, eigen_space):.4f}")

    # 3. THRESHOLD SELECTION
    print("\n3. VERIFICATION STUDY")

    # threshold is picked on the enrollment set, evaluated on the query set
    verification = run_verification_study(eigen_space,
                                          [image for _, image in train_pairs],
                                          [label for label, _ in train_pairs])
    save_metrics_to_json(verification, f"{config.METRICS_PATH}/verification.json")

    # 4. RECOGNITION
    print("\n4. RECOGNITION")

    all_results = []
    for name, threshold in [("Open set (no rejection)", 0),
                            ("EER threshold", verification["distance_threshold"])]:
        recognizer.set_threshold(threshold)
        predictions, distances = evaluate(recognizer, test_images)

        metrics = compute_recognition_metrics(test_labels, predictions, distances)
        metrics['threshold'] = threshold
        metrics['confidence_interval'] = calculate_confidence_intervals(test_labels, predictions)

        print_metrics_summary(metrics, name)
        slug = name.split(" ")[0].lower()
        save_metrics_to_json(metrics, f"{config.METRICS_PATH}/recognition_{slug}.json")
        plot_confusion_matrix(metrics['confusion_matrix'], metrics['labels'], f"Eigenfaces {slug}")

        all_results.append((name, eigen_space.component_count, metrics))

    # 5. ABLATION
    print("\n5. COMPONENT ABLATION STUDY")
    print(f"Components range: {config.COMPONENTS_RANGE}")

    ablation = run_component_experiments(train_pairs, test_images, test_labels,
                                         components_list=config.COMPONENTS_RANGE)
    for n_comp, res in ablation.items():
        all_results.append((f"Ablation k<={n_comp}", res['component_count'], res['metrics']))

    df_comparison = compare_models_metrics(all_results, save_path=f"{config.METRICS_PATH}/comparison.csv")
    print("\nComparison table:")
    print(df_comparison.to_string(index=False))

    # 6. SAVE MODEL
    print("\n6. SAVING MODEL")

    recognizer.set_threshold(verification["distance_threshold"])
    save_model(recognizer, f"eigenfaces_{eigen_space.component_count}")

    print("\nAll results saved.")


if __name__ == "__main__":
    main()
