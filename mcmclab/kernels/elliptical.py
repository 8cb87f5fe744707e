"""
Elliptical slice sampling (Murray, Adams & MacKay, 2010).

The target is split as likelihood x N(0, I) prior. Proposals move along the
ellipse through the current point and an auxiliary prior draw ν, and the
angle bracket shrinks toward the current point after every miss.
"""
import jax
import jax.numpy as jnp
import jax.random as jr

from mcmclab.datatypes import Proposal, KernelParams
from mcmclab.sampler import slice_threshold

MAX_ITER = 50
TWO_PI = 2.0 * jnp.pi

def step(
    key: jax.random.PRNGKey,
    q: jnp.ndarray,
    model,
    params: KernelParams
) -> Proposal:
    """
    Single elliptical slice step. params is unused.

    Keys: split(key, 4) -> (slice height, ν, initial angle, shrinkage).
    The slice height is taken on model.log_likelihood.
    """
    key_u, key_nu, key_theta, key_shrink = jr.split(key, 4)
    loglik = model.log_likelihood

    nu = jr.normal(key_nu, shape=q.shape, dtype=q.dtype)
    threshold = slice_threshold(loglik(q), key_u)

    theta = jr.uniform(key_theta, shape=(), dtype=q.dtype, maxval=TWO_PI)

    def on_ellipse(t):
        return q * jnp.cos(t) + nu * jnp.sin(t)

    def cond(carry):
        i, _, _, _, _, found = carry
        return (~found) & (i < MAX_ITER)

    def body(carry):
        i, key, t, t_min, t_max, _ = carry
        found = loglik(on_ellipse(t)) > threshold
        t_min = jnp.where((~found) & (t < 0), t, t_min)
        t_max = jnp.where((~found) & (t >= 0), t, t_max)
        key, subkey = jr.split(key)
        t_next = jr.uniform(subkey, shape=(), dtype=q.dtype, minval=t_min, maxval=t_max)
        return i + 1, key, jnp.where(found, t, t_next), t_min, t_max, found

    init = (jnp.int32(0), key_shrink, theta, theta - TWO_PI, theta, jnp.bool_(False))
    _, _, theta, _, _, found = jax.lax.while_loop(cond, body, init)

    q_new = jnp.where(found, on_ellipse(theta), q)
    margin = jnp.where(found, loglik(q_new) - threshold, -jnp.inf)
    return Proposal(q=q_new, accepted=found, log_ratio=margin)
