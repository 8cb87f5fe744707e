"""
Description:
    Hamiltonian for HMC on a 2D target.

Created: 2026-10-16
Last Modified: 2026-10-16
Version: 0.1
"""
from typing import NamedTuple
import jax.numpy as jnp
from mcmclab.datatypes import QP, LogDensity, Gradient

class Hamiltonian(NamedTuple):
    """
    H(q,p) = U(q) + K(p) with unit mass:
        U(q) = -log π(q)
        K(p) = 0.5 * p.T@p
    """
    log_density: LogDensity
    gradient: Gradient

    def potential(self, q: jnp.ndarray) -> float:
        return -self.log_density(q)

    def kinetic(self, p: jnp.ndarray) -> float:
        return 0.5 * jnp.dot(p, p)

    def energy(self, qp: QP) -> float:
        """total energy H(q,p) = U(q) + K(p)"""
        return self.potential(qp.q) + self.kinetic(qp.p)

    def grad_q(self, q: jnp.ndarray) -> jnp.ndarray:
        """∂H/∂q = -∇log π(q)"""
        return -self.gradient(q)

    def grad_p(self, p: jnp.ndarray) -> jnp.ndarray:
        """∂H/∂p = p"""
        return p

def from_model(model) -> Hamiltonian:
    """Hamiltonian of a DensityModel, using its analytic gradient when present"""
    return Hamiltonian(log_density=model.log_density, gradient=model.grad_fn())
