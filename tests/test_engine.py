"""
Tests for ChainState and SamplerEngine.

Covers:
- Seeded reproducibility of a single step
- History bounding and ordering
- Reset and selection lifecycle
- Parameter validation at the engine boundary
"""

import jax.numpy as jnp
import jax.random as jr
import numpy as np
import pytest

from mcmclab import (
    SamplerEngine,
    ChainState,
    DensityModel,
    EngineConfig,
    InvalidParameter,
    KernelParams,
    Point,
    Sample,
    BatchResult,
    ORIGIN,
    get_kernel,
    get_target,
)
from mcmclab.engine import run_chain
from mcmclab.target import gaussian_logp


# ==============================================================================
# Fixtures
# ==============================================================================


@pytest.fixture
def engine():
    return SamplerEngine(target='gaussian', kernel='rwm', seed=0)


# ==============================================================================
# Reproducibility
# ==============================================================================


def test_single_rwm_step_matches_seeded_draws():
    """One RWM step from (0.1, 0.1) is fixed by the seed"""
    engine = SamplerEngine(target='gaussian', kernel='rwm', params=KernelParams(step_size=0.5), seed=42)
    batch = engine.advance(1)

    # engine: split once per advance, then one key per step
    _, subkey = jr.split(jr.PRNGKey(42))
    step_key = jr.split(subkey, 1)[0]
    # rwm: (proposal noise, acceptance uniform)
    key_prop, key_acc = jr.split(step_key)
    q = np.array([0.1, 0.1])
    q_prop = q + 0.5 * np.asarray(jr.normal(key_prop, shape=(2,), dtype=jnp.float64))
    log_ratio = -0.5 * q_prop @ q_prop + 0.5 * q @ q
    accepted = bool(np.log(float(jr.uniform(key_acc, shape=()))) < log_ratio)

    sample = batch.samples[0]
    assert sample.accepted == accepted
    expected = q_prop if accepted else q
    np.testing.assert_allclose([sample.x, sample.y], expected, rtol=1e-14, atol=1e-15)
    assert batch.accepted_count == int(accepted)


def test_engine_output_is_exactly_the_compiled_chain():
    """advance() hands the documented subkey to run_chain and copies its output exactly"""
    engine = SamplerEngine(target='gaussian', kernel='rwm', params=KernelParams(step_size=0.5), seed=42)
    batch = engine.advance(5)

    _, subkey = jr.split(jr.PRNGKey(42))
    positions, accepted, last_path = run_chain(
        subkey, jnp.array([0.1, 0.1]), 0.5, 0.1,
        kernel=get_kernel('rwm'), model=get_target('gaussian'), n_steps=5, leapfrog_steps=10,
    )
    assert last_path is None
    for sample, (x, y), a in zip(batch.samples, np.asarray(positions), np.asarray(accepted)):
        assert sample.x == float(x)
        assert sample.y == float(y)
        assert sample.accepted == bool(a)


@pytest.mark.parametrize('kernel', ['rwm', 'mh', 'slice', 'elliptical', 'hitnrun', 'hmc'])
def test_same_seed_same_chain(kernel):
    a = SamplerEngine(target='banana', kernel=kernel, seed=7)
    b = SamplerEngine(target='banana', kernel=kernel, seed=7)
    assert a.advance(25) == b.advance(25)
    assert a.history == b.history
    assert a.last_trajectory == b.last_trajectory


def test_explicit_key_overrides_seed():
    a = SamplerEngine(target='donut', kernel='slice', key=jr.PRNGKey(3), seed=99)
    b = SamplerEngine(target='donut', kernel='slice', seed=3)
    assert a.advance(10) == b.advance(10)


# ==============================================================================
# Chain state
# ==============================================================================


def test_initial_state(engine):
    assert engine.position == Point(0.1, 0.1)
    assert engine.history == ()
    assert engine.last_trajectory is None
    assert engine.sample_count == 0


def test_position_tracks_last_sample(engine):
    batch = engine.advance(17)
    assert isinstance(batch, BatchResult)
    assert len(batch.samples) == 17
    assert batch.n_steps == 17
    assert batch.accept_rate == batch.accepted_count / 17
    assert engine.position == engine.history[-1].point
    assert engine.position == batch.samples[-1].point


def test_rejected_steps_repeat_position():
    engine = SamplerEngine(target='bimodal', kernel='mh', seed=1)
    batch = engine.advance(200)
    assert batch.accepted_count < 200
    prev = ORIGIN
    for sample in batch.samples:
        if not sample.accepted:
            assert sample.point == prev
        prev = sample.point


def test_history_is_bounded():
    engine = SamplerEngine(target='gaussian', kernel='rwm', capacity=50, seed=2)
    first = engine.advance(40)
    second = engine.advance(80)

    assert len(engine.history) == 50
    assert engine.sample_count == 50
    expected = (first.samples + second.samples)[-50:]
    assert engine.history == expected


def test_default_capacity():
    engine = SamplerEngine(target='gaussian', kernel='mh', seed=2)
    engine.advance(2500)
    assert len(engine.history) == 2000


def test_chain_state_ring():
    state = ChainState(capacity=3)
    for i in range(5):
        state.record(Sample(float(i), 0.0, True))
    assert [s.x for s in state.history] == [2.0, 3.0, 4.0]
    assert state.position == Point(4.0, 0.0)
    assert len(state) == 3


def test_history_snapshot_is_read_only(engine):
    engine.advance(3)
    snapshot = engine.history
    engine.advance(3)
    assert len(snapshot) == 3
    assert isinstance(snapshot, tuple)


# ==============================================================================
# Trajectories
# ==============================================================================


@pytest.mark.parametrize('kernel', ['rwm', 'mh', 'elliptical', 'hitnrun'])
def test_simple_kernels_have_no_trajectory(kernel):
    engine = SamplerEngine(target='donut', kernel=kernel, seed=0)
    engine.advance(3)
    assert engine.last_trajectory is None


def test_slice_trajectory_is_bracket():
    engine = SamplerEngine(target='donut', kernel='slice', seed=0)
    engine.advance(3)
    traj = engine.last_trajectory
    assert len(traj) == 2
    assert all(isinstance(p, Point) for p in traj)


def test_hmc_trajectory_length():
    engine = SamplerEngine(target='donut', kernel='hmc', seed=0)
    engine.set_params(leapfrog_steps=12)
    engine.advance(4)
    assert len(engine.last_trajectory) == 13


def test_hmc_trajectory_starts_at_previous_position():
    engine = SamplerEngine(target='banana', kernel='hmc', seed=4)
    engine.advance(3)
    start = engine.position
    engine.advance(1)
    np.testing.assert_allclose(engine.last_trajectory[0], start)


# ==============================================================================
# Lifecycle
# ==============================================================================


@pytest.mark.parametrize('kernel', ['rwm', 'slice', 'hmc'])
def test_reset_is_idempotent(kernel):
    engine = SamplerEngine(target='banana', kernel=kernel, seed=0)
    engine.advance(30)
    engine.reset()
    assert engine.position == Point(0.1, 0.1)
    assert len(engine.history) == 0
    assert engine.last_trajectory is None
    engine.reset()
    assert engine.position == Point(0.1, 0.1)
    assert len(engine.history) == 0
    assert engine.last_trajectory is None


def test_select_target_resets(engine):
    engine.advance(10)
    engine.select_target('donut')
    assert engine.target.name == 'donut'
    assert engine.history == ()
    assert engine.position == ORIGIN


def test_select_kernel_resets(engine):
    engine.set_params(step_size=1.2)
    engine.advance(10)
    engine.select_kernel('HMC')
    assert engine.kernel == 'hmc'
    assert engine.history == ()
    assert engine.last_trajectory is None
    # params survive the switch
    assert engine.params.step_size == 1.2


def test_unknown_names_fail_at_selection(engine):
    with pytest.raises(ValueError, match="Unknown target"):
        engine.select_target('funnel')
    with pytest.raises(ValueError, match="Unknown kernel"):
        engine.select_kernel('nuts')
    with pytest.raises(ValueError):
        SamplerEngine(target='gaussian', kernel='gibbs')
    # failed selection leaves the engine usable
    assert engine.target.name == 'gaussian'
    assert engine.kernel == 'rwm'
    engine.advance(1)


def test_custom_target_without_gradient_runs_hmc():
    model = DensityModel('plain_gaussian', gaussian_logp)
    engine = SamplerEngine(target=model, kernel='hmc', seed=0)
    batch = engine.advance(20)
    assert batch.accepted_count > 10


# ==============================================================================
# Validation
# ==============================================================================


@pytest.mark.parametrize('steps', [0, -3, 2.5, True, '4'])
def test_advance_rejects_bad_steps(engine, steps):
    engine.advance(2)
    history = engine.history
    with pytest.raises(InvalidParameter):
        engine.advance(steps)
    assert engine.history == history


def test_advance_accepts_numpy_int(engine):
    batch = engine.advance(np.int64(3))
    assert len(batch.samples) == 3


@pytest.mark.parametrize('params', [
    {'step_size': 0.0},
    {'step_size': -1.0},
    {'step_size': 3.5},
    {'leapfrog_steps': 0},
    {'leapfrog_steps': 51},
    {'leapfrog_steps': 2.0},
    {'leapfrog_epsilon': 0.0},
    {'leapfrog_epsilon': 0.6},
    {'steps_per_frame': 0},
    {'steps_per_frame': 21},
    {'steps_per_frame': 2.0},
    {'momentum': 1.0},
])
def test_set_params_rejects(engine, params):
    before = engine.params
    with pytest.raises(InvalidParameter):
        engine.set_params(**params)
    assert engine.params == before
    assert engine.steps_per_frame == 1


def test_set_params_is_all_or_nothing(engine):
    with pytest.raises(InvalidParameter):
        engine.set_params(steps_per_frame=5, step_size=10.0)
    assert engine.steps_per_frame == 1
    with pytest.raises(InvalidParameter):
        engine.set_params(steps_per_frame=50, step_size=1.0)
    assert engine.params.step_size == 0.5


def test_set_params_accepts_numpy_integers(engine):
    params = engine.set_params(leapfrog_steps=np.int64(20), steps_per_frame=np.int64(3))
    assert params.leapfrog_steps == 20
    assert type(params.leapfrog_steps) is int
    assert engine.steps_per_frame == 3


def test_set_params_partial_update(engine):
    engine.advance(5)
    params = engine.set_params(leapfrog_epsilon=0.05)
    assert params == KernelParams(step_size=0.5, leapfrog_steps=10, leapfrog_epsilon=0.05)
    # no reset on parameter change
    assert len(engine.history) == 5


def test_invalid_constructor_arguments():
    with pytest.raises(InvalidParameter):
        SamplerEngine(capacity=0)
    with pytest.raises(InvalidParameter):
        SamplerEngine(params=KernelParams(step_size=10.0))
    with pytest.raises(InvalidParameter):
        SamplerEngine(steps_per_frame=0)


# ==============================================================================
# Frame loop
# ==============================================================================


def test_frames_yields_batches():
    engine = SamplerEngine(target='gaussian', kernel='rwm', seed=0, steps_per_frame=4)
    batches = list(engine.frames(n_frames=3))
    assert len(batches) == 3
    assert all(len(b.samples) == 4 for b in batches)
    assert len(engine.history) == 12


def test_set_params_changes_frame_size_between_frames():
    engine = SamplerEngine(target='gaussian', kernel='rwm', seed=0)
    frames = engine.frames()
    assert len(next(frames).samples) == 1
    params = engine.set_params(steps_per_frame=5)
    # kernel params are untouched
    assert params == KernelParams()
    assert engine.steps_per_frame == 5
    assert len(next(frames).samples) == 5
    assert len(engine.history) == 6


def test_steps_per_frame_attribute_is_validated(engine):
    engine.steps_per_frame = 20
    assert engine.steps_per_frame == 20
    for bad in [0, 21, 999, 1.5, True]:
        with pytest.raises(InvalidParameter):
            engine.steps_per_frame = bad
    assert engine.steps_per_frame == 20


@pytest.mark.parametrize('steps', [0, 21, 999, 2.5])
def test_frames_rejects_out_of_range_steps(engine, steps):
    with pytest.raises(InvalidParameter):
        engine.frames(steps_per_frame=steps)
    assert engine.history == ()


def test_frames_can_be_stopped():
    engine = SamplerEngine(target='gaussian', kernel='rwm', seed=0)
    for i, batch in enumerate(engine.frames(steps_per_frame=2)):
        if i == 4:
            break
    assert len(engine.history) == 10


def test_from_config():
    config = EngineConfig(target='donut', kernel='hmc', leapfrog_steps=20, capacity=100, seed=1)
    engine = SamplerEngine.from_config(config)
    assert engine.target.name == 'donut'
    assert engine.kernel == 'hmc'
    assert engine.params.leapfrog_steps == 20
    engine.advance(150)
    assert len(engine.history) == 100
