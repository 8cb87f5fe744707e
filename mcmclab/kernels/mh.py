"""
Independent Metropolis-Hastings.

Proposals come from a fixed N(0, σ²I) that ignores the current state, so the
acceptance ratio carries the proposal density correction.
"""
import jax
import jax.numpy as jnp
import jax.random as jr

from mcmclab.datatypes import Proposal, KernelParams
from mcmclab.sampler import accept_reject

SIGMA = 1.5 # fixed, not tunable

def log_q(q: jnp.ndarray) -> float:
    """Unnormalised log density of the proposal"""
    return -0.5 * jnp.dot(q, q) / SIGMA**2

def step(
    key: jax.random.PRNGKey,
    q: jnp.ndarray,
    model,
    params: KernelParams
) -> Proposal:
    """
    Single independent MH step. params is unused.

    Keys: split(key) -> (proposal draw, acceptance uniform).
    """
    key_prop, key_acc = jr.split(key)
    q_new = SIGMA * jr.normal(key_prop, shape=q.shape, dtype=q.dtype)

    log_ratio = (model.log_density(q_new) + log_q(q)) - (model.log_density(q) + log_q(q_new))
    accepted = accept_reject(log_ratio, key_acc)

    return Proposal(q=jnp.where(accepted, q_new, q), accepted=accepted, log_ratio=log_ratio)
