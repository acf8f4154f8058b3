"""
Test the random-walk Metropolis-Hastings chain on Gaussian targets.
"""
import math
import jax
import jax.numpy as jnp
import numpy as np
import numpy.testing as npt
import pytest
from mhbayes.errors import InvalidParameterError
from mhbayes.samplers import GaussianTarget, UniformProposal, ChainState, init_chain, reset, step, sample_chain, \
    acceptance_rate, acceptance_probability, propose, mh_kernel, target_pdf

jax.config.update("jax_enable_x64", True)


def test_step_records_every_sample():
    key = jax.random.PRNGKey(666)
    target, proposal = GaussianTarget(), UniformProposal()

    state = init_chain()
    for i in range(200):
        key, subkey = jax.random.split(key)
        new_state = step(subkey, state, target, proposal)

        assert new_state.samples.shape[0] == state.samples.shape[0] + 1
        assert new_state.accepted_count - state.accepted_count in (0, 1)
        assert new_state.accepted_count <= new_state.samples.shape[0]
        assert new_state.samples[-1] == new_state.position
        if new_state.accepted_count == state.accepted_count:
            assert new_state.position == state.position
        else:
            assert new_state.position == new_state.proposed
        npt.assert_array_equal(new_state.samples[:-1], state.samples)
        state = new_state

    assert 0. < acceptance_rate(state) < 1.


def test_step_is_deterministic_given_key():
    key = jax.random.PRNGKey(1)
    target, proposal = GaussianTarget(1., 2.), UniformProposal(0.3)

    state0 = init_chain()
    state1 = step(key, state0, target, proposal)
    state2 = step(key, state0, target, proposal)
    assert state1.position == state2.position
    assert state1.proposed == state2.proposed
    assert state1.accepted_count == state2.accepted_count


def test_reset():
    key = jax.random.PRNGKey(2)
    state = sample_chain(key, init_chain(), GaussianTarget(3., 1.), UniformProposal(), 50)
    assert state.samples.shape[0] == 50

    state = reset(state)
    assert state.samples.shape[0] == 0
    assert state.accepted_count == 0
    assert state.position == 0.
    assert state.proposed == 0.
    assert acceptance_rate(state) == 0.


def test_acceptance_probability():
    target = GaussianTarget()
    npt.assert_allclose(acceptance_probability(1., 0., target), 1.)
    npt.assert_allclose(acceptance_probability(0., 1., target), math.exp(-0.5))
    npt.assert_allclose(acceptance_probability(0., -1., target), math.exp(-0.5))

    # Both linear densities underflow here
    assert target_pdf(60., target) == 0.
    npt.assert_allclose(acceptance_probability(60., 59., target), 1.)
    npt.assert_allclose(acceptance_probability(59., 60., target), math.exp(-59.5))


def test_propose():
    key = jax.random.PRNGKey(666)
    proposal = UniformProposal(0.7)
    half_width = 0.7 * math.sqrt(12)

    keys = jax.random.split(key, num=100000)
    x_props = jax.vmap(propose, in_axes=[0, None, None])(keys, 1., proposal)

    assert jnp.all(jnp.abs(x_props - 1.) <= half_width)
    npt.assert_allclose(jnp.mean(x_props), 1., atol=2e-2)
    npt.assert_allclose(jnp.var(x_props), half_width ** 2 / 3, rtol=2e-2)
    npt.assert_allclose(jnp.var(x_props), 4 * 0.7 ** 2, rtol=2e-2)


def test_mh_kernel():
    key = jax.random.PRNGKey(666)
    target, proposal = GaussianTarget(0.5, 1.5), UniformProposal(1.)

    keys = jax.random.split(key, num=1000)
    xs, mcmc_states = jax.vmap(mh_kernel, in_axes=[0, None, None, None])(keys, 2., target, proposal)

    accepted = mcmc_states.is_accepted
    assert jnp.any(accepted) and jnp.any(~accepted)
    npt.assert_array_equal(xs[accepted], mcmc_states.proposed[accepted])
    npt.assert_array_equal(xs[~accepted], 2.)
    assert jnp.all((mcmc_states.acceptance_prob >= 0.) & (mcmc_states.acceptance_prob <= 1.))


@pytest.mark.parametrize('mean, std', [(0., 1.), (2., 0.5)])
def test_long_run(mean, std):
    key = jax.random.PRNGKey(666)
    target = GaussianTarget(mean, std)

    state = sample_chain(key, init_chain(), target, UniformProposal(), 100000)

    assert state.samples.shape[0] == 100000
    assert state.position == state.samples[-1]
    npt.assert_allclose(np.mean(state.samples), mean, atol=5e-2)
    npt.assert_allclose(np.std(state.samples), std, atol=1e-1)


def test_sample_chain_extends():
    key = jax.random.PRNGKey(3)
    target, proposal = GaussianTarget(), UniformProposal()

    state = init_chain()
    assert sample_chain(key, state, target, proposal, 0) is state

    state = sample_chain(key, state, target, proposal, 30)
    key, _ = jax.random.split(key)
    state2 = sample_chain(key, state, target, proposal, 20)
    assert state2.samples.shape[0] == 50
    npt.assert_array_equal(state2.samples[:30], state.samples)
    assert state.accepted_count <= state2.accepted_count <= state.accepted_count + 20


@pytest.mark.parametrize('target, proposal', [(GaussianTarget(0., 0.), UniformProposal()),
                                              (GaussianTarget(0., -1.), UniformProposal()),
                                              (GaussianTarget(math.nan, 1.), UniformProposal()),
                                              (GaussianTarget(), UniformProposal(0.)),
                                              (GaussianTarget(), UniformProposal(-0.5)),
                                              (GaussianTarget(), UniformProposal(math.inf))])
def test_invalid_parameters(target, proposal):
    key = jax.random.PRNGKey(0)
    state = init_chain()
    with pytest.raises(InvalidParameterError):
        step(key, state, target, proposal)
    with pytest.raises(InvalidParameterError):
        sample_chain(key, state, target, proposal, 10)


def test_negative_nsteps():
    with pytest.raises(InvalidParameterError):
        sample_chain(jax.random.PRNGKey(0), init_chain(), GaussianTarget(), UniformProposal(), -1)


def test_empty_acceptance_rate():
    assert acceptance_rate(ChainState()) == 0.


def test_default_samples_are_shared_and_read_only():
    state0, state1 = ChainState(), init_chain()
    assert not state0.samples.flags.writeable
    with pytest.raises(ValueError):
        state0.samples[...] = 1.

    state = step(jax.random.PRNGKey(5), state1, GaussianTarget(), UniformProposal())
    assert state.samples.shape[0] == 1
    assert state0.samples.shape[0] == 0
    assert state1.samples.shape[0] == 0
