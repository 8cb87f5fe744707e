"""
Kernel registry.

A kernel is a pure function

    step(key, q, model, params) -> Proposal

that consumes randomness only through `key`. Kernels are looked up by name
so callers can switch algorithms without touching the engine.
"""

from typing import Callable, Dict, List

from mcmclab.kernels import rwm, mh, slice_sampling, elliptical, hit_and_run, hmc

Kernel = Callable

_KERNEL_REGISTRY: Dict[str, Kernel] = {}
_DESCRIPTIONS: Dict[str, str] = {}

# kernels that read the target gradient
REQUIRES_GRADIENTS = {'hmc'}


def register_kernel(name: str, kernel: Kernel, description: str = '') -> None:
    """
    Register a kernel under a case-insensitive name.

    Parameters
    ----------
    name : str
        Registry name.
    kernel : callable
        step(key, q, model, params) -> Proposal.
    description : str
        One-line summary shown to users.
    """
    _KERNEL_REGISTRY[name.lower()] = kernel
    _DESCRIPTIONS[name.lower()] = description


def available_kernels() -> List[str]:
    return sorted(_KERNEL_REGISTRY.keys())


def get_kernel(name: str) -> Kernel:
    """
    Look up a kernel by name.

    Raises
    ------
    ValueError
        If the name is not registered.
    """
    name_lower = name.lower()
    if name_lower not in _KERNEL_REGISTRY:
        available = ', '.join(available_kernels())
        raise ValueError(f"Unknown kernel '{name}'. Available: {available}")
    return _KERNEL_REGISTRY[name_lower]


def describe(name: str) -> str:
    get_kernel(name)
    return _DESCRIPTIONS[name.lower()]


def _register_builtins() -> None:
    register_kernel(
        'rwm', rwm.step,
        "Proposes a move nearby. Fails in high dimensions or correlated "
        "distributions (random walk behaviour).",
    )
    register_kernel(
        'mh', mh.step,
        "Uses a fixed proposal distribution. Good if the proposal matches "
        "the target, terrible otherwise.",
    )
    register_kernel(
        'slice', slice_sampling.step,
        "Samples uniformly under the density along a random line. Robust "
        "and needs little tuning.",
    )
    register_kernel(
        'elliptical', elliptical.step,
        "Specialised for Gaussian priors. Replaces the linear search with "
        "an elliptical rotation.",
    )
    register_kernel(
        'hitnrun', hit_and_run.step,
        "Picks a random direction and samples along the line.",
    )
    register_kernel(
        'hmc', hmc.step,
        "Uses gradients to simulate Hamiltonian dynamics, suppressing random "
        "walk behaviour.",
    )


_register_builtins()

__all__ = [
    'REQUIRES_GRADIENTS',
    'available_kernels',
    'describe',
    'get_kernel',
    'register_kernel',
]
