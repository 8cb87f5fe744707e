"""
Random Walk Metropolis.

Proposes q' = q + σ·N(0, I) with σ = step_size. The proposal is symmetric,
so the acceptance ratio is the density ratio alone.
"""
import jax
import jax.numpy as jnp
import jax.random as jr

from mcmclab.datatypes import Proposal, KernelParams
from mcmclab.sampler import accept_reject

def step(
    key: jax.random.PRNGKey,
    q: jnp.ndarray,
    model,
    params: KernelParams
) -> Proposal:
    """
    Single RWM step.

    Keys: split(key) -> (proposal noise, acceptance uniform).
    """
    key_prop, key_acc = jr.split(key)
    q_new = q + params.step_size * jr.normal(key_prop, shape=q.shape, dtype=q.dtype)

    log_ratio = model.log_density(q_new) - model.log_density(q)
    accepted = accept_reject(log_ratio, key_acc)

    return Proposal(q=jnp.where(accepted, q_new, q), accepted=accepted, log_ratio=log_ratio)
