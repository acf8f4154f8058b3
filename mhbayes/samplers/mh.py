"""Random-walk Metropolis-Hastings on the real line.
"""
import math
import jax
import jax.numpy as jnp
import numpy as np
from mhbayes.errors import InvalidParameterError
from mhbayes.samplers.common import MCMCState, ChainState, EMPTY_SAMPLES
from mhbayes.typings import JArray, JKey, FloatScalar
from typing import NamedTuple, Tuple

ORIGIN = 0.


class GaussianTarget(NamedTuple):
    mean: FloatScalar = 0.
    std: FloatScalar = 1.


class UniformProposal(NamedTuple):
    """Symmetric random-walk proposal `x + U(-1, 1) * scale * sqrt(12)`.
    """
    scale: FloatScalar = 0.5


def check_target(target: GaussianTarget):
    mean, std = float(target.mean), float(target.std)
    if not math.isfinite(mean):
        raise InvalidParameterError(f'Target mean must be finite, got {mean}.')
    if not (math.isfinite(std) and std > 0):
        raise InvalidParameterError(f'Target std must be positive and finite, got {std}.')


def check_proposal(proposal: UniformProposal):
    scale = float(proposal.scale)
    if not (math.isfinite(scale) and scale > 0):
        raise InvalidParameterError(f'Proposal scale must be positive and finite, got {scale}.')


def target_logpdf(x: JArray, target: GaussianTarget) -> JArray:
    return jax.scipy.stats.norm.logpdf(x, target.mean, target.std)


def target_pdf(x: JArray, target: GaussianTarget) -> JArray:
    return jnp.exp(target_logpdf(x, target))


def propose(key: JKey, x: FloatScalar, proposal: UniformProposal) -> JArray:
    """Draw a candidate around `x` with a single uniform variate.

    Notes
    -----
    The perturbation is `U(-1, 1) * scale * sqrt(12)`, whose variance is `4 scale^2` rather than `scale^2`.
    """
    return x + jax.random.uniform(key, minval=-1., maxval=1.) * proposal.scale * math.sqrt(12)


def acceptance_probability(x: FloatScalar, x_prop: FloatScalar, target: GaussianTarget) -> JArray:
    r"""The Metropolis acceptance probability :math:`\min(1, \pi(x') / \pi(x))`.

    The ratio is taken in the log domain, otherwise both densities underflow to zero in the far tails.
    """
    log_ratio = target_logpdf(x_prop, target) - target_logpdf(x, target)
    return jnp.minimum(1., jnp.exp(log_ratio))


@jax.jit
def mh_kernel(key: JKey, x: FloatScalar, target: GaussianTarget,
              proposal: UniformProposal) -> Tuple[JArray, MCMCState]:
    """One Metropolis step. The proposal is symmetric so no Hastings correction is needed.

    Parameters
    ----------
    key : JKey
        A JAX random key.
    x : FloatScalar
        The current position of the chain.
    target : GaussianTarget
        The stationary distribution.
    proposal : UniformProposal
        The random-walk proposal.

    Returns
    -------
    JArray (), MCMCState
        The next position, and the step diagnostics.
    """
    key_prop, key_acc = jax.random.split(key)
    x_prop = propose(key_prop, x, proposal)
    acceptance_prob = acceptance_probability(x, x_prop, target)
    is_accepted = jax.random.uniform(key_acc) < acceptance_prob
    return jnp.where(is_accepted, x_prop, x), MCMCState(acceptance_prob, is_accepted, x_prop)


@jax.jit
def _scan_chain(keys: JArray, x0: FloatScalar, target: GaussianTarget,
                proposal: UniformProposal) -> Tuple[JArray, MCMCState]:
    def scan_body(carry, elem):
        x, mcmc_state = mh_kernel(elem, carry, target, proposal)
        return x, (x, mcmc_state)

    _, (xs, mcmc_states) = jax.lax.scan(scan_body, jnp.asarray(x0, dtype=jnp.result_type(float)), keys)
    return xs, mcmc_states


def init_chain(position: float = ORIGIN) -> ChainState:
    return ChainState(position=float(position), proposed=float(position), accepted_count=0, samples=EMPTY_SAMPLES)


def reset(state: ChainState = None) -> ChainState:
    """Discard the history of a chain and move it back to the origin.
    """
    return init_chain(ORIGIN)


def step(key: JKey, state: ChainState, target: GaussianTarget, proposal: UniformProposal) -> ChainState:
    """Advance the chain by one step, recording the resulting position whether or not the candidate was accepted.
    """
    check_target(target)
    check_proposal(proposal)
    x, mcmc_state = mh_kernel(key, state.position, target, proposal)
    is_accepted = bool(mcmc_state.is_accepted)
    position = float(x)
    return ChainState(position=position,
                      proposed=float(mcmc_state.proposed),
                      accepted_count=state.accepted_count + int(is_accepted),
                      samples=np.append(state.samples, position))


def sample_chain(key: JKey, state: ChainState, target: GaussianTarget, proposal: UniformProposal,
                 nsteps: int) -> ChainState:
    """Run `nsteps` steps at once. Same law as calling `step` repeatedly, but scanned.
    """
    check_target(target)
    check_proposal(proposal)
    if nsteps < 0:
        raise InvalidParameterError(f'The number of steps must be non-negative, got {nsteps}.')
    if nsteps == 0:
        return state

    keys = jax.random.split(key, num=nsteps)
    xs, mcmc_states = _scan_chain(keys, state.position, target, proposal)
    xs = np.asarray(xs, dtype=float)
    return ChainState(position=float(xs[-1]),
                      proposed=float(mcmc_states.proposed[-1]),
                      accepted_count=state.accepted_count + int(jnp.sum(mcmc_states.is_accepted)),
                      samples=np.concatenate([state.samples, xs]))


def acceptance_rate(state: ChainState) -> float:
    nsamples = state.samples.shape[0]
    if nsamples == 0:
        return 0.
    return state.accepted_count / nsamples
