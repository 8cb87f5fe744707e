"""
Hamiltonian Monte Carlo with a fixed-length leapfrog trajectory.
"""
import jax
import jax.numpy as jnp
import jax.random as jr

from mcmclab.datatypes import Proposal, KernelParams
from mcmclab.hamiltonian import from_model
from mcmclab.integrator import lf_integrate
from mcmclab.sampler import draw_momentum, accept_reject

def step(
    key: jax.random.PRNGKey,
    q: jnp.ndarray,
    model,
    params: KernelParams
) -> Proposal:
    """
    Single HMC step.

    Resamples momentum, integrates params.leapfrog_steps steps of size
    params.leapfrog_epsilon and accepts on the energy difference. The
    trajectory (leapfrog_steps + 1 positions, starting at q) is reported
    whether or not the move is accepted.

    leapfrog_steps must be a Python int; it fixes the trajectory shape.

    Keys: split(key) -> (momentum, acceptance uniform).
    """
    key_mom, key_acc = jr.split(key)
    H = from_model(model)

    qp0 = draw_momentum(q, key_mom)
    qp_star, path = lf_integrate(qp0, H, params.leapfrog_epsilon, params.leapfrog_steps)

    delta_H = H.energy(qp0) - H.energy(qp_star) # -(final - init)
    accepted = accept_reject(delta_H, key_acc)

    return Proposal(q=jnp.where(accepted, qp_star.q, q), accepted=accepted, path=path, log_ratio=delta_H)
