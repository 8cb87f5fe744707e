"""
Hit-and-run slice sampling.

Like slice sampling along a random line, but the bracket starts at [-1, 1]
and grows by doubling, and no bracket is reported.
"""
import jax
import jax.numpy as jnp
import jax.random as jr

from mcmclab.datatypes import Proposal, KernelParams
from mcmclab.sampler import draw_direction, slice_threshold, step_out, shrink_sample

MAX_DOUBLING = 20 # per side
MAX_SHRINK = 50

def step(
    key: jax.random.PRNGKey,
    q: jnp.ndarray,
    model,
    params: KernelParams
) -> Proposal:
    """
    Single hit-and-run step. params is unused.

    Keys: split(key, 3) -> (slice height, direction, shrinkage).
    """
    key_u, key_dir, key_shrink = jr.split(key, 3)
    logp = model.log_density

    threshold = slice_threshold(logp(q), key_u)
    d = draw_direction(key_dir)

    L = step_out(logp, q, d, -1.0, lambda e: 2.0 * e, threshold, MAX_DOUBLING)
    R = step_out(logp, q, d, 1.0, lambda e: 2.0 * e, threshold, MAX_DOUBLING)

    q_new, found, _, _, margin = shrink_sample(key_shrink, logp, q, d, L, R, threshold, MAX_SHRINK)

    return Proposal(q=q_new, accepted=found, log_ratio=margin)
