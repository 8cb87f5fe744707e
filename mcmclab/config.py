"""
Configuration for the sampling engine.

Parameter bounds mirror the ranges the interactive front end offers, and are
enforced here as well so the engine is safe to drive as a standalone library.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from mcmclab.datatypes import KernelParams
from mcmclab.errors import InvalidParameter


# name -> (min, max, type)
PARAM_BOUNDS: Dict[str, Tuple[float, float, type]] = {
    'step_size': (0.1, 3.0, float),
    'leapfrog_steps': (1, 50, int),
    'leapfrog_epsilon': (0.01, 0.5, float),
}

STEPS_PER_FRAME_BOUNDS = (1, 20)


def _check_number(name: str, value: Any, lo: float, hi: float, kind: type) -> None:
    if isinstance(value, bool):
        raise InvalidParameter(name, value, "expected a number")
    if kind is int and not isinstance(value, numbers.Integral):
        raise InvalidParameter(name, value, "expected an integer")
    if not isinstance(value, numbers.Real):
        raise InvalidParameter(name, value, "expected a number")
    if not lo <= value <= hi:
        raise InvalidParameter(name, value, f"must be in [{lo}, {hi}]")


def validate_params(**params: Any) -> Dict[str, Any]:
    """
    Validate a partial set of kernel parameters.

    Parameters
    ----------
    **params
        Any subset of step_size, leapfrog_steps, leapfrog_epsilon.

    Returns
    -------
    dict
        The same values, floats coerced to float.

    Raises
    ------
    InvalidParameter
        Unknown name, wrong type, or value outside PARAM_BOUNDS.
    """
    checked = {}
    for name, value in params.items():
        if name not in PARAM_BOUNDS:
            raise InvalidParameter(
                name, value, f"unknown parameter, expected one of {sorted(PARAM_BOUNDS)}"
            )
        lo, hi, kind = PARAM_BOUNDS[name]
        _check_number(name, value, lo, hi, kind)
        checked[name] = kind(value)
    return checked


def validate_steps_per_frame(value: Any) -> int:
    _check_number('steps_per_frame', value, *STEPS_PER_FRAME_BOUNDS, int)
    return int(value)


@dataclass
class EngineConfig:
    """
    Complete engine setup.

    Attributes
    ----------
    target : str
        Catalog name of the target density.
    kernel : str
        Registry name of the kernel.
    step_size : float
        RWM proposal scale and slice bracket width.
    leapfrog_steps : int
        HMC trajectory length.
    leapfrog_epsilon : float
        HMC integrator step size.
    steps_per_frame : int
        Steps per advance() call when driven through SamplerEngine.frames().
    capacity : int
        Number of samples kept in the history ring.
    seed : int, optional
        Random seed for reproducibility. If None, uses the system clock.

    Examples
    --------
    >>> config = EngineConfig(target='donut', kernel='hmc', leapfrog_steps=20)
    >>> engine = SamplerEngine.from_config(config)
    """

    target: str = 'bimodal'
    kernel: str = 'rwm'
    step_size: float = 0.5
    leapfrog_steps: int = 10
    leapfrog_epsilon: float = 0.1
    steps_per_frame: int = 1
    capacity: int = 2000
    seed: Optional[int] = None

    def __post_init__(self):
        validate_params(
            step_size=self.step_size,
            leapfrog_steps=self.leapfrog_steps,
            leapfrog_epsilon=self.leapfrog_epsilon,
        )
        validate_steps_per_frame(self.steps_per_frame)
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, int) or self.capacity < 1:
            raise InvalidParameter('capacity', self.capacity, "must be a positive integer")

    def to_params(self) -> KernelParams:
        return KernelParams(
            step_size=float(self.step_size),
            leapfrog_steps=int(self.leapfrog_steps),
            leapfrog_epsilon=float(self.leapfrog_epsilon),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'EngineConfig':
        """
        Build a config from a plain dict, rejecting unknown keys.
        """
        known = set(cls.__dataclass_fields__)
        unknown = set(config_dict) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**config_dict)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'EngineConfig':
        """
        Load configuration from YAML file.

        Parameters
        ----------
        path : str or Path
            Path to YAML configuration file.

        Returns
        -------
        EngineConfig
            Loaded configuration.
        """
        path = Path(path)

        with open(path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}

        return cls.from_dict(config_dict)
