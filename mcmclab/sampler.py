"""
Description:
    Building blocks shared by the kernels: accept/reject, auxiliary draws,
    and the bracket search used by the slice-family kernels.

Created: 2026-10-16
Last Modified: 2026-10-16
Version: 0.1

Everything here is jittable; loops are lax.while_loop with explicit caps.
"""
import jax
import jax.numpy as jnp
import jax.random as jr
from typing import Callable, Tuple

from mcmclab.datatypes import QP, LogDensity

def accept_reject(log_ratio: float, key: jax.random.PRNGKey) -> bool:
    """
    Metropolis-Hastings accept/reject step.

    Accept iff log U < log_ratio, i.e. with probability min(1, exp(log_ratio)).

    Args:
        log_ratio: Log acceptance ratio (or H_current - H_proposed)
        key: Random key

    Returns:
        True if accepted, False otherwise
    """
    u = jr.uniform(key, shape=())
    return jnp.log(u) < log_ratio

def draw_momentum(q: jnp.ndarray, key: jax.random.PRNGKey) -> QP:
    """
    Resample momentum from standard Gaussian.

    Keeps position q, resamples p ~ N(0, I)
    """
    p_new = jr.normal(key, shape=q.shape, dtype=q.dtype)
    return QP(q=q, p=p_new)

def draw_direction(key: jax.random.PRNGKey) -> jnp.ndarray:
    """Unit vector at angle θ ~ U(0, 2π)"""
    theta = jr.uniform(key, shape=(), maxval=2.0 * jnp.pi)
    return jnp.stack([jnp.cos(theta), jnp.sin(theta)])

def slice_threshold(logp_current: float, key: jax.random.PRNGKey) -> float:
    """Height of the slice: log p(current) + log U"""
    return logp_current + jnp.log(jr.uniform(key, shape=()))

def step_out(
    logp: LogDensity,
    q: jnp.ndarray,
    direction: jnp.ndarray,
    edge: float,
    expand: Callable[[float], float],
    threshold: float,
    max_iter: int
) -> float:
    """
    Push one bracket edge outward while it is still inside the slice.

    Args:
        logp: Log density
        q: Point the line passes through
        direction: Unit direction of the line
        edge: Signed distance of the edge from q
        expand: Maps an edge to the next one further out
        threshold: Slice height
        max_iter: Cap on expansions

    Returns:
        Final edge distance
    """
    def cond(carry):
        i, e = carry
        return (i < max_iter) & (logp(q + e * direction) > threshold)

    def body(carry):
        i, e = carry
        return i + 1, expand(e)

    _, edge = jax.lax.while_loop(cond, body, (jnp.int32(0), jnp.asarray(edge, dtype=q.dtype)))
    return edge

def shrink_sample(
    key: jax.random.PRNGKey,
    logp: LogDensity,
    q: jnp.ndarray,
    direction: jnp.ndarray,
    L: float,
    R: float,
    threshold: float,
    max_iter: int
) -> Tuple[jnp.ndarray, bool, float, float, float]:
    """
    Draw uniformly along [L, R] until a point lands above the slice,
    shrinking the bracket toward q after every miss.

    Returns:
        (q_new, found, L, R, margin). On exhausting max_iter q_new is q,
        found is False and margin is -inf.
    """
    def cond(carry):
        i, _, _, _, found, _ = carry
        return (~found) & (i < max_iter)

    def body(carry):
        i, key, L, R, _, _ = carry
        key, subkey = jr.split(key)
        dist = jr.uniform(subkey, shape=(), dtype=q.dtype, minval=L, maxval=R)
        found = logp(q + dist * direction) > threshold
        L = jnp.where((~found) & (dist < 0), dist, L)
        R = jnp.where((~found) & (dist >= 0), dist, R)
        return i + 1, key, L, R, found, dist

    L = jnp.asarray(L, dtype=q.dtype)
    R = jnp.asarray(R, dtype=q.dtype)
    init = (jnp.int32(0), key, L, R, jnp.bool_(False), jnp.zeros_like(L))
    _, _, L, R, found, dist = jax.lax.while_loop(cond, body, init)

    q_new = jnp.where(found, q + dist * direction, q)
    margin = jnp.where(found, logp(q_new) - threshold, -jnp.inf)
    return q_new, found, L, R, margin
