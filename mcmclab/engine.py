"""
Description:
    Chain state and the engine that drives a kernel over it.

Created: 2026-10-16
Last Modified: 2026-10-16
Version: 0.1

One engine owns one chain. Run independent chains with independent engines.
"""
import logging
import time
from collections import deque
from functools import partial
from typing import Deque, Iterator, Optional, Tuple

import jax
import jax.numpy as jnp
import jax.random as jr
import numpy as np

from mcmclab.config import EngineConfig, validate_params, validate_steps_per_frame
from mcmclab.datatypes import Point, Sample, KernelParams, BatchResult
from mcmclab.errors import InvalidParameter
from mcmclab.kernels import get_kernel, REQUIRES_GRADIENTS
from mcmclab.target import get_target, DensityModel

logger = logging.getLogger(__name__)

ORIGIN = Point(0.1, 0.1)
DEFAULT_CAPACITY = 2000


@partial(jax.jit, static_argnames=['kernel', 'model', 'n_steps', 'leapfrog_steps'])
def run_chain(
    key: jax.random.PRNGKey,
    q: jnp.ndarray,
    step_size: float,
    leapfrog_epsilon: float,
    kernel,
    model: DensityModel,
    n_steps: int,
    leapfrog_steps: int
) -> Tuple[jnp.ndarray, jnp.ndarray, Optional[jnp.ndarray]]:
    """
    Run n_steps kernel steps from q using scan.

    Keys: split(key, n_steps), one per step in order.

    Returns:
        positions: (n_steps, 2) chain positions after each step
        accepted: (n_steps,) acceptance flags
        last_path: path of the final step, None for kernels without one
    """
    params = KernelParams(step_size=step_size, leapfrog_steps=leapfrog_steps,
                          leapfrog_epsilon=leapfrog_epsilon)

    def body_fn(q_state, step_key):
        proposal = kernel(step_key, q_state, model, params)
        return proposal.q, (proposal.q, proposal.accepted, proposal.path)

    keys = jr.split(key, n_steps)
    _, (positions, accepted, paths) = jax.lax.scan(body_fn, q, keys)
    last_path = None if paths is None else paths[-1]
    return positions, accepted, last_path


class ChainState:
    """
    Current position, bounded sample history and latest trajectory.

    history is a FIFO ring: once it holds `capacity` samples the oldest is
    evicted for every new one.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, origin: Point = ORIGIN):
        self.capacity = capacity
        self.position: Point = Point(float(origin.x), float(origin.y))
        self.history: Deque[Sample] = deque(maxlen=capacity)
        self.last_trajectory: Optional[Tuple[Point, ...]] = None

    def record(self, sample: Sample) -> None:
        self.history.append(sample)
        self.position = sample.point

    def __len__(self) -> int:
        return len(self.history)


class SamplerEngine:
    """
    Drives the selected kernel on the selected target.

    Parameters
    ----------
    target : str
        Target catalog name ('gaussian', 'bimodal', 'donut', 'banana'), or a
        DensityModel for a custom target.
    kernel : str
        Kernel registry name ('rwm', 'mh', 'slice', 'elliptical', 'hitnrun', 'hmc').
    params : KernelParams, optional
        Initial parameters, validated against the configured bounds.
    capacity : int
        History ring size.
    seed : int, optional
        Seed for the random key. If None, uses the system clock.
    key : PRNGKey, optional
        Explicit random key, takes precedence over seed.

    Examples
    --------
    >>> engine = SamplerEngine(target='donut', kernel='hmc', seed=0)
    >>> while running:
    ...     batch = engine.advance(steps_per_frame)
    ...     draw(engine.history, engine.last_trajectory)
    """

    def __init__(
        self,
        target='bimodal',
        kernel: str = 'rwm',
        params: Optional[KernelParams] = None,
        capacity: int = DEFAULT_CAPACITY,
        seed: Optional[int] = None,
        key: Optional[jax.random.PRNGKey] = None,
        steps_per_frame: int = 1,
    ):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise InvalidParameter('capacity', capacity, "must be a positive integer")
        self.capacity = capacity
        self._steps_per_frame = validate_steps_per_frame(steps_per_frame)

        if key is None:
            if seed is None:
                seed = int(time.time() * 1000) % 2**32
                logger.debug("No seed given, using %d", seed)
            key = jr.PRNGKey(seed)
        self._key = key

        params = KernelParams() if params is None else params
        self._params = KernelParams(**validate_params(**params._asdict()))

        self._model = self._resolve_target(target)
        self._kernel_name = kernel.lower()
        self._kernel = get_kernel(kernel)
        self._state = ChainState(capacity)

    @classmethod
    def from_config(cls, config: EngineConfig, key: Optional[jax.random.PRNGKey] = None) -> 'SamplerEngine':
        return cls(
            target=config.target,
            kernel=config.kernel,
            params=config.to_params(),
            capacity=config.capacity,
            seed=config.seed,
            key=key,
            steps_per_frame=config.steps_per_frame,
        )

    @staticmethod
    def _resolve_target(target) -> DensityModel:
        if isinstance(target, DensityModel):
            return target
        return get_target(target)

    # Selection

    def select_target(self, target) -> None:
        """Switch target density and start a fresh chain"""
        self._model = self._resolve_target(target)
        logger.info("Target set to '%s'", self._model.name)
        self.reset()

    def select_kernel(self, name: str) -> None:
        """Switch kernel and start a fresh chain"""
        self._kernel = get_kernel(name)
        self._kernel_name = name.lower()
        if self._kernel_name in REQUIRES_GRADIENTS and self._model.gradient is None:
            logger.info("Target '%s' has no analytic gradient, using autodiff", self._model.name)
        logger.info("Kernel set to '%s'", self._kernel_name)
        self.reset()

    def set_params(self, **params) -> KernelParams:
        """
        Update a subset of the kernel parameters, and optionally
        steps_per_frame.

        Raises InvalidParameter without changing anything if any value is
        invalid. The chain is not reset.
        """
        steps_per_frame = params.pop('steps_per_frame', None)
        if steps_per_frame is not None:
            steps_per_frame = validate_steps_per_frame(steps_per_frame)
        checked = validate_params(**params)
        self._params = self._params._replace(**checked)
        if steps_per_frame is not None:
            self._steps_per_frame = steps_per_frame
        logger.debug("Params set to %s", self._params)
        return self._params

    def reset(self) -> None:
        """Re-seed the chain at the origin with empty history and no trajectory"""
        self._state = ChainState(self.capacity)
        logger.debug("Chain reset to %s", ORIGIN)

    # Stepping

    def advance(self, steps: int) -> BatchResult:
        """
        Run `steps` kernel steps and fold them into the chain state.

        Raises
        ------
        InvalidParameter
            If steps is not an integer >= 1. Nothing is mutated.
        """
        if isinstance(steps, bool) or not isinstance(steps, (int, np.integer)) or steps < 1:
            raise InvalidParameter('steps', steps, "must be an integer >= 1")
        steps = int(steps)

        self._key, subkey = jr.split(self._key)
        q = jnp.array([self._state.position.x, self._state.position.y])
        positions, accepted, last_path = run_chain(
            subkey,
            q,
            self._params.step_size,
            self._params.leapfrog_epsilon,
            kernel=self._kernel,
            model=self._model,
            n_steps=steps,
            leapfrog_steps=self._params.leapfrog_steps,
        )

        positions = np.asarray(positions)
        accepted = np.asarray(accepted)
        samples = tuple(
            Sample(float(x), float(y), bool(a)) for (x, y), a in zip(positions, accepted)
        )
        for sample in samples:
            self._state.record(sample)
        if last_path is None:
            self._state.last_trajectory = None
        else:
            self._state.last_trajectory = tuple(Point(float(x), float(y)) for x, y in np.asarray(last_path))

        accepted_count = int(accepted.sum())
        logger.debug(
            "%s on %s: %d/%d accepted", self._kernel_name, self._model.name, accepted_count, steps
        )
        return BatchResult(accepted_count=accepted_count, samples=samples)

    def frames(self, steps_per_frame: Optional[int] = None, n_frames: Optional[int] = None) -> Iterator[BatchResult]:
        """
        Yield one BatchResult per frame. The caller owns the loop and its cadence;
        stop iterating to stop sampling.

        Without an explicit steps_per_frame each frame reads the engine's
        current setting, so set_params(steps_per_frame=...) applies from the
        next frame on.

        Raises
        ------
        InvalidParameter
            If steps_per_frame is given and outside [1, 20]. Raised on the
            call, before any frame runs.
        """
        if steps_per_frame is not None:
            steps_per_frame = validate_steps_per_frame(steps_per_frame)
        return self._frames(steps_per_frame, n_frames)

    def _frames(self, steps_per_frame: Optional[int], n_frames: Optional[int]) -> Iterator[BatchResult]:
        frame = 0
        while n_frames is None or frame < n_frames:
            steps = self._steps_per_frame if steps_per_frame is None else steps_per_frame
            yield self.advance(steps)
            frame += 1

    # Read-only snapshots

    @property
    def position(self) -> Point:
        return self._state.position

    @property
    def history(self) -> Tuple[Sample, ...]:
        return tuple(self._state.history)

    @property
    def last_trajectory(self) -> Optional[Tuple[Point, ...]]:
        return self._state.last_trajectory

    @property
    def sample_count(self) -> int:
        return len(self._state)

    @property
    def params(self) -> KernelParams:
        return self._params

    @property
    def steps_per_frame(self) -> int:
        return self._steps_per_frame

    @steps_per_frame.setter
    def steps_per_frame(self, value: int) -> None:
        self._steps_per_frame = validate_steps_per_frame(value)

    @property
    def target(self) -> DensityModel:
        return self._model

    @property
    def kernel(self) -> str:
        return self._kernel_name
