# config.py
import os
import logging

RANDOM_STATE = 42
VERBOSE = True

# Recognition engine
EIGEN_DISTANCE_THRESHOLD = 2000.0
MAX_COMPONENTS = 0
EIGEN_EPS = 0.001
JACOBI_EPS = 0.0
FACE_SIZE = (100, 100)

# Evaluation dataset
MIN_FACES_PER_PERSON = 70
RESIZE_FACTOR = 0.4
TEST_SIZE = 0.25

COMPONENTS_RANGE = [10, 25, 50, 75, 100, 150, 200]

VERIFICATION_N_PAIRS = 1000
CI_N_BOOTSTRAP = 1000

PLOT_STYLE = 'seaborn-v0_8-whitegrid'
PLOT_DPI = 150
PLOT_FIGSIZE_SMALL = (8, 6)
PLOT_FIGSIZE_MEDIUM = (12, 8)
PLOT_COLORMAP = 'viridis'

N_EIGENFACES_DISPLAY = 12

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_PATH = os.path.join(BASE_DIR, "data")
MODELS_PATH = os.path.join(BASE_DIR, "results", "models")
OUTPUT_PATH = os.path.join(BASE_DIR, "results", "figures")
METRICS_PATH = os.path.join(BASE_DIR, "results", "metrics")

LOG_FILE = os.path.join(BASE_DIR, "results", "experiment.log")
LOG_LEVEL = logging.INFO
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 3


def ensure_output_dirs():
    for path in [DATA_PATH, MODELS_PATH, OUTPUT_PATH, METRICS_PATH]:
        os.makedirs(path, exist_ok=True)


def get_config_summary():
    return {
        'Recognizer': {
            'Distance Threshold': EIGEN_DISTANCE_THRESHOLD,
            'Max Components': MAX_COMPONENTS or 'all',
            'Eigenvalue Ratio Cutoff': EIGEN_EPS,
            'Jacobi Accuracy': max(JACOBI_EPS, 1e-7)
        },
        'Dataset': {
            'MIN_FACES_PER_PERSON': MIN_FACES_PER_PERSON,
            'RESIZE_FACTOR': RESIZE_FACTOR,
            'TEST_SIZE': TEST_SIZE
        },
        'Experiments': {
            'Components Range': COMPONENTS_RANGE,
            'Verification Pairs': VERIFICATION_N_PAIRS,
            'Random State': RANDOM_STATE
        }
    }


def print_config():
    print("PROJECT CONFIGURATION")
    summary = get_config_summary()
    for section, params in summary.items():
        print(f"\n{section}:")
        for key, value in params.items():
            print(f"  {key}: {value}")
