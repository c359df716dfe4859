"""
Cyclic Jacobi eigen-solver for real symmetric matrices.

Each rotation annihilates one off-diagonal entry a[p][q]. Entries are only
rotated while their magnitude is at least the current threshold `a_max`,
which starts at the off-diagonal norm and is divided by n before and after
every round of sweeps. The solver stops once `a_max` falls to
anorm * eps / n.
"""

import logging
import math

import numpy as np

from eigenfaces.exceptions import DegenerateMatrix

logger = logging.getLogger(__name__)

MIN_EPS = 1.0e-7


def _rotate(a, v, p, q):
    app = a[p, p]
    aqq = a[q, q]
    apq = a[p, q]

    y = 0.5 * (app - aqq)
    x = -apq / math.sqrt(apq * apq + y * y)
    if y < 0.0:
        x = -x
    s = x / math.sqrt(2.0 * (1.0 + math.sqrt(max(0.0, 1.0 - x * x))))
    s2 = s * s
    c = math.sqrt(1.0 - s2)
    c2 = c * c
    z = 2.0 * apq * c * s

    row_p = a[p].copy()
    row_q = a[q].copy()
    a[p] = row_p * c - row_q * s
    a[q] = row_q * c + row_p * s
    a[:, p] = a[p]
    a[:, q] = a[q]

    vec_p = v[p].copy()
    vec_q = v[q].copy()
    v[p] = vec_p * c - vec_q * s
    v[q] = vec_q * c + vec_p * s

    a[p, p] = app * c2 + aqq * s2 - z
    a[q, q] = app * s2 + aqq * c2 + z
    a[p, q] = a[q, p] = 0.0


def _sort_by_magnitude(e, v):
    # selection sort on |e|, the first maximal entry wins
    n = len(e)
    for i in range(n):
        m = i
        em = abs(e[i])
        for j in range(i + 1, n):
            ej = abs(e[j])
            if em < ej:
                m = j
                em = ej

        if m != i:
            e[i], e[m] = e[m], e[i]
            v[[i, m]] = v[[m, i]]


def jacobi_eigens(matrix, eps=0.0):
    """
    Compute all eigenvalues and eigenvectors of a symmetric matrix.

    Args:
        matrix: Square symmetric (n, n) array; it is not modified
        eps: Relative accuracy, clamped to at least 1e-7

    Returns:
        tuple: (eigenvalues, eigenvectors) where eigenvalues is a length-n
               array sorted by descending absolute value and row i of the
               (n, n) eigenvectors array belongs to eigenvalues[i]

    Raises:
        DegenerateMatrix: If the matrix is empty or not square
    """
    a = np.array(matrix, dtype=np.float64)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise DegenerateMatrix(f"Expected a square matrix, got shape {a.shape}")
    n = a.shape[0]
    if n <= 0:
        raise DegenerateMatrix("Cannot solve an empty eigenproblem")

    if eps < MIN_EPS:
        eps = MIN_EPS

    v = np.eye(n)

    lower = a[np.tril_indices(n, -1)]
    anorm = math.sqrt(2.0 * float(np.dot(lower, lower)))
    ax = anorm * eps / n
    a_max = anorm

    sweeps = 0
    rotations = 0
    while a_max > ax:
        a_max /= n

        rotated = True
        while rotated:
            rotated = False
            sweeps += 1
            for p in range(n - 1):
                for q in range(p + 1, n):
                    if abs(a[p, q]) < a_max:
                        continue
                    _rotate(a, v, p, q)
                    rotated = True
                    rotations += 1

        a_max /= n

    logger.debug("Jacobi converged on %dx%d matrix: %d sweeps, %d rotations",
                 n, n, sweeps, rotations)

    e = a.diagonal().copy()
    _sort_by_magnitude(e, v)

    return e, v
