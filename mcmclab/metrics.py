"""
Description:
    Sample statistics for checking a chain against its target.

Created: 2026-10-16
Last Modified: 2026-10-16
Version: 0.1
"""
import jax.numpy as jnp
import numpy as np
from typing import Sequence, Tuple

from mcmclab.target import DensityModel

Extent = Tuple[float, float, float, float]

def as_array(samples: Sequence) -> np.ndarray:
    """(n, 2) array of positions from Samples, Points or an array"""
    return np.asarray([(s[0], s[1]) for s in samples], dtype=float)

def accept_rate(samples: Sequence) -> float:
    if len(samples) == 0:
        return 0.0
    return float(np.mean([s.accepted for s in samples]))

def cov(X):
    Xμ = jnp.mean(X, axis = 0)
    n=X.shape[0]
    return (X - Xμ).T@(X-Xμ)/(n-1)

def maxdiagdiff(X,Y):
    x = np.diag(X)
    y = np.diag(Y)
    return np.max(np.abs(x-y))

def grid_density(model: DensityModel, extent: Extent, bins: int) -> np.ndarray:
    """
    Target probability mass per cell of a bins x bins grid, normalised
    numerically over the extent. Indexed [ix, iy] like np.histogram2d.
    """
    xmin, xmax, ymin, ymax = extent
    dx = (xmax - xmin) / bins
    dy = (ymax - ymin) / bins
    # evaluate at cell centres
    _, _, logp = model.grid((xmin + dx/2, xmax - dx/2, ymin + dy/2, ymax - dy/2), bins)
    logp = np.asarray(logp, dtype=float).T
    p = np.exp(logp - logp.max())
    return p / p.sum()

def histogram(X: np.ndarray, extent: Extent, bins: int) -> np.ndarray:
    """Empirical mass per cell; samples outside the extent are dropped"""
    xmin, xmax, ymin, ymax = extent
    H, _, _ = np.histogram2d(X[:, 0], X[:, 1], bins=bins, range=[[xmin, xmax], [ymin, ymax]])
    return H / max(H.sum(), 1)

def total_variation(P: np.ndarray, Q: np.ndarray) -> float:
    return 0.5 * float(np.abs(P - Q).sum())

def kl_divergence(P: np.ndarray, Q: np.ndarray, eps: float = 1e-12) -> float:
    """KL(P || Q) over grid cells"""
    P = P + eps
    Q = Q + eps
    P = P / P.sum()
    Q = Q / Q.sum()
    return float(np.sum(P * np.log(P / Q)))

def target_distance(
    model: DensityModel,
    samples: Sequence,
    extent: Extent = (-5.0, 5.0, -5.0, 5.0),
    bins: int = 20
) -> Tuple[float, float]:
    """
    (total variation, KL(empirical || target)) between a chain's histogram
    and the grid-normalised target.
    """
    X = samples if isinstance(samples, np.ndarray) else as_array(samples)
    P = histogram(X, extent, bins)
    Q = grid_density(model, extent, bins)
    return total_variation(P, Q), kl_divergence(P, Q)
