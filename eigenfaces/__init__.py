"""
Eigenface face recognition package.

This package provides modules for:
- image: Grayscale pixel buffer shared by faces and eigen-images
- covariance: Mean image and covariance of a training set
- jacobi: Jacobi eigen-solver for symmetric matrices
- eigenspace: Face space construction (mean + eigen-images)
- projection: Encoding images as coefficients and reconstructing them
- recognizer: Nearest-neighbor recognition with a rejection threshold
- preprocessing: Evaluation data loading (LFW) and splitting
- metrics: Recognition metrics and reporting
- verification: Genuine/impostor distance study and threshold selection
- experiments: Component-count ablation study
- utils: Visualization and model saving
"""
