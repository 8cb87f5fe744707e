"""
Description:
    Target distribution catalog.

Created: 2026-10-16
Last Modified: 2026-10-16
Version: 0.1

Every target is an unnormalised log density over q = [x, y] with its exact
analytic gradient. Only density ratios matter to the kernels, so additive
constants are dropped.
"""
from typing import NamedTuple, Optional, Dict, List, Tuple
import jax
import jax.numpy as jnp
from mcmclab.datatypes import LogDensity, Gradient

EPS = 1e-9

class DensityModel(NamedTuple):
    """Named log density with an optional analytic gradient"""
    name: str
    log_density: LogDensity
    gradient: Optional[Gradient] = None

    def grad_fn(self) -> Gradient:
        """Analytic gradient if supplied, autodiff of log_density otherwise"""
        if self.gradient is not None:
            return self.gradient
        return jax.grad(self.log_density)

    def log_likelihood(self, q: jnp.ndarray) -> float:
        """
        log p(q) - log N(q; 0, I), up to a constant.

        Splits the target into likelihood x standard normal prior, as
        elliptical slice sampling requires.
        """
        return self.log_density(q) + 0.5 * jnp.dot(q, q)

    def grid(
        self,
        extent: Tuple[float, float, float, float] = (-5.0, 5.0, -5.0, 5.0),
        n: int = 100,
    ) -> Tuple[jnp.ndarray, jnp.ndarray, jnp.ndarray]:
        """
        Evaluate the log density on an n x n grid.

        Returns (xs, ys, logp) with logp[i, j] = log_density([xs[j], ys[i]]).
        """
        xmin, xmax, ymin, ymax = extent
        xs = jnp.linspace(xmin, xmax, n)
        ys = jnp.linspace(ymin, ymax, n)
        X, Y = jnp.meshgrid(xs, ys)
        pts = jnp.stack([X.ravel(), Y.ravel()], axis=-1)
        logp = jax.vmap(self.log_density)(pts).reshape(n, n)
        return xs, ys, logp

# Gaussian

def gaussian_logp(q: jnp.ndarray) -> float:
    return -0.5 * jnp.dot(q, q)

def gaussian_grad(q: jnp.ndarray) -> jnp.ndarray:
    return -q

# Bimodal: two narrow isotropic components, sigma = 0.5

BIMODAL_CENTERS = jnp.array([[-1.5, -1.5], [1.5, 1.5]])

def _bimodal_components(q: jnp.ndarray) -> jnp.ndarray:
    d2 = jnp.sum((q - BIMODAL_CENTERS)**2, axis=-1)
    return jnp.exp(-2.0 * d2)

def bimodal_logp(q: jnp.ndarray) -> float:
    return jnp.log(jnp.sum(_bimodal_components(q)) + EPS)

def bimodal_grad(q: jnp.ndarray) -> jnp.ndarray:
    """Chain rule through the mixture: responsibility-weighted component gradients"""
    e = _bimodal_components(q)
    total = jnp.sum(e) + EPS
    return jnp.sum(e[:, None] * (-4.0 * (q - BIMODAL_CENTERS)), axis=0) / total

# Donut: ring of radius 2.5

DONUT_RADIUS = 2.5

def donut_logp(q: jnp.ndarray) -> float:
    r = jnp.sqrt(jnp.dot(q, q))
    return -2.0 * (r - DONUT_RADIUS)**2

def donut_grad(q: jnp.ndarray) -> jnp.ndarray:
    r = jnp.sqrt(jnp.dot(q, q)) + EPS
    return -4.0 * (r - DONUT_RADIUS) * q / r

# Banana: Rosenbrock with a = 1, b = 5, tempered by 10

BANANA_A = 1.0
BANANA_B = 5.0

def banana_logp(q: jnp.ndarray) -> float:
    x, y = q[0], q[1]
    return -((BANANA_A - x)**2 + BANANA_B * (y - x**2)**2) / 10.0

def banana_grad(q: jnp.ndarray) -> jnp.ndarray:
    x, y = q[0], q[1]
    t = y - x**2
    dx = -(2.0 * (x - BANANA_A) - 4.0 * BANANA_B * t * x) / 10.0
    dy = -(2.0 * BANANA_B * t) / 10.0
    return jnp.stack([dx, dy])

# Catalog

_TARGETS: Dict[str, DensityModel] = {}

def register_target(model: DensityModel) -> None:
    """Add a model to the catalog (name is case-insensitive)"""
    _TARGETS[model.name.lower()] = model

def available_targets() -> List[str]:
    return sorted(_TARGETS.keys())

def get_target(name: str) -> DensityModel:
    key = name.lower()
    if key not in _TARGETS:
        available = ', '.join(available_targets())
        raise ValueError(f"Unknown target '{name}'. Available: {available}")
    return _TARGETS[key]

register_target(DensityModel('gaussian', gaussian_logp, gaussian_grad))
register_target(DensityModel('bimodal', bimodal_logp, bimodal_grad))
register_target(DensityModel('donut', donut_logp, donut_grad))
register_target(DensityModel('banana', banana_logp, banana_grad))
