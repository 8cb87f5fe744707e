"""
Slice sampling along a random direction.

Draws a slice height under the current density, picks a random line through
the current point, brackets the slice along it with stepping-out, then
shrink-samples inside the bracket (Neal, 2003).
"""
import jax
import jax.numpy as jnp
import jax.random as jr

from mcmclab.datatypes import Proposal, KernelParams
from mcmclab.sampler import draw_direction, slice_threshold, step_out, shrink_sample

MAX_STEP_OUT = 100 # per side
MAX_SHRINK = 100

def step(
    key: jax.random.PRNGKey,
    q: jnp.ndarray,
    model,
    params: KernelParams
) -> Proposal:
    """
    Single slice step with bracket width params.step_size.

    Keys: split(key, 4) -> (slice height, direction, bracket offset, shrinkage).

    The path is the final bracket [q + L·d, q + R·d]. It is reported even
    when the shrinkage cap is hit and the chain stays put.
    """
    key_u, key_dir, key_offset, key_shrink = jr.split(key, 4)
    logp = model.log_density
    w = params.step_size

    threshold = slice_threshold(logp(q), key_u)
    d = draw_direction(key_dir)

    # bracket of width w placed uniformly around q
    L = -jr.uniform(key_offset, shape=(), dtype=q.dtype) * w
    R = L + w
    L = step_out(logp, q, d, L, lambda e: e - w, threshold, MAX_STEP_OUT)
    R = step_out(logp, q, d, R, lambda e: e + w, threshold, MAX_STEP_OUT)

    q_new, found, L, R, margin = shrink_sample(key_shrink, logp, q, d, L, R, threshold, MAX_SHRINK)
    path = jnp.stack([q + L * d, q + R * d])

    return Proposal(q=q_new, accepted=found, path=path, log_ratio=margin)
