"""
Description:
    Core data structures for the MCMCLab sampling engine.

Created: 2026-10-16
Last Modified: 2026-10-16
Version: 0.1

All modules import from here to ensure type consistency and avoid indexing bugs.
Positions are 2-vectors q = [x, y] throughout.
"""
from typing import NamedTuple, Callable, Optional, Tuple
import jax.numpy as jnp

class Point(NamedTuple):
    """Position in the plane"""
    x: float
    y: float

class Sample(NamedTuple):
    """One emitted chain position, tagged with the outcome of its proposal"""
    x: float
    y: float
    accepted: bool

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)

class QP(NamedTuple):
    """Phase space state(q,p)"""
    q: jnp.ndarray # position
    p: jnp.ndarray # momentum

    @classmethod
    def from_array(cls, arr: jnp.ndarray):
        """Convert from flat array[q,p]"""
        dim = arr.shape[0]//2
        return cls(q=arr[:dim], p=arr[dim:])

class Proposal(NamedTuple):
    """Result of a single kernel step"""
    q: jnp.ndarray # new position, equal to the input on rejection
    accepted: bool
    path: Optional[jnp.ndarray] = None # (n, 2) intermediate points, None for simple kernels
    log_ratio: float = 0.0 # log acceptance ratio, or margin over the slice threshold

    @property
    def x(self) -> float:
        return self.q[0]
    @property
    def y(self) -> float:
        return self.q[1]

class KernelParams(NamedTuple):
    """Tunable knobs shared by the kernels. Each kernel reads only what it needs."""
    step_size: float = 0.5 # RWM sigma, slice bracket width
    leapfrog_steps: int = 10 # HMC only
    leapfrog_epsilon: float = 0.1 # HMC only

class BatchResult(NamedTuple):
    """Summary of one advance() call"""
    accepted_count: int
    samples: Tuple[Sample, ...]

    @property
    def n_steps(self) -> int:
        return len(self.samples)
    @property
    def accept_rate(self) -> float:
        if not self.samples:
            return 0.0
        return self.accepted_count / len(self.samples)

# Type aliases for clarity
LogDensity = Callable[[jnp.ndarray], float]
Gradient = Callable[[jnp.ndarray], jnp.ndarray]
