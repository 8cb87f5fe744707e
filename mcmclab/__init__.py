"""
MCMCLab: a 2D MCMC sampling engine for interactive visualisation.

Quick Start
-----------
>>> from mcmclab import SamplerEngine
>>> engine = SamplerEngine(target='donut', kernel='hmc', seed=0)
>>> engine.set_params(leapfrog_steps=20, leapfrog_epsilon=0.1)
>>> batch = engine.advance(10)
>>> batch.accepted_count, engine.position, engine.last_trajectory

Importing the package enables JAX float64.
"""

import jax

jax.config.update("jax_enable_x64", True)

from mcmclab.datatypes import Point, Sample, Proposal, KernelParams, BatchResult, QP
from mcmclab.errors import InvalidParameter
from mcmclab.target import DensityModel, get_target, available_targets, register_target
from mcmclab.kernels import get_kernel, available_kernels, register_kernel, describe
from mcmclab.config import EngineConfig, PARAM_BOUNDS, validate_params
from mcmclab.engine import SamplerEngine, ChainState, ORIGIN

__version__ = '0.1.0'

__all__ = [
    # Data
    'Point',
    'Sample',
    'Proposal',
    'KernelParams',
    'BatchResult',
    'QP',
    'InvalidParameter',
    # Targets
    'DensityModel',
    'get_target',
    'available_targets',
    'register_target',
    # Kernels
    'get_kernel',
    'available_kernels',
    'register_kernel',
    'describe',
    # Engine
    'EngineConfig',
    'PARAM_BOUNDS',
    'validate_params',
    'SamplerEngine',
    'ChainState',
    'ORIGIN',
]
