"""
Description:
    Leapfrog integrator for Hamiltonian dynamics.

Created: 2026-10-16
Last Modified: 2026-10-16
Version: 0.1
"""
import jax
import jax.numpy as jnp
from functools import partial
from typing import Tuple
from mcmclab.datatypes import QP
from mcmclab.hamiltonian import Hamiltonian

def lf_step(
        qp: QP,
        H: Hamiltonian,
        τ: float
) -> QP:
    """
    Single lf integration step.

    Does p-first: half momentum, full position, half momentum.
    """
    # Half step momentum
    p_half = qp.p - 0.5 * τ * H.grad_q(qp.q)

    # Full step position
    q_new = qp.q + τ * H.grad_p(p_half)

    # Half step momentum
    p_new = p_half - 0.5 * τ * H.grad_q(q_new)

    return QP(q=q_new, p=p_new)

@partial(jax.jit, static_argnames=['H', 'N'])
def lf_integrate(
    qp: QP,
    H: Hamiltonian,
    τ: float,
    N: int
) -> Tuple[QP, jnp.ndarray]:
    """
    LF integration using scan, recording every position visited.

    Consecutive half momentum steps are fused into one full step, and the
    gradient at each new position is carried so it is evaluated once.

    Args:
        qp: Initial state
        H: Hamiltonian
        τ: Step size
        N: Number of steps

    Returns:
        (final state, positions) where positions has shape (N+1, dim) and
        starts at qp.q
    """
    def body_fn(carry, _):
        qp_state, grad_q = carry
        p_half = qp_state.p - 0.5 * τ * grad_q
        q_new = qp_state.q + τ * H.grad_p(p_half)
        grad_new = H.grad_q(q_new)
        p_new = p_half - 0.5 * τ * grad_new
        return (QP(q=q_new, p=p_new), grad_new), q_new

    (qp_final, _), qs = jax.lax.scan(body_fn, (qp, H.grad_q(qp.q)), None, length=N)
    positions = jnp.concatenate([qp.q[None, :], qs], axis=0)
    return qp_final, positions
