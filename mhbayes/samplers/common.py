import numpy as np
from mhbayes.typings import FloatScalar, BoolScalar
from typing import NamedTuple

EMPTY_SAMPLES = np.zeros((0,))
EMPTY_SAMPLES.setflags(write=False)


class MCMCState(NamedTuple):
    acceptance_prob: FloatScalar
    is_accepted: BoolScalar
    proposed: FloatScalar


class ChainState(NamedTuple):
    """The carry of a scalar Markov chain.

    `samples` records the position after every step, accepted or not, hence `accepted_count <= samples.shape[0]`.
    The default `samples` is a shared read-only empty array. Steps never write into `samples` in place, they append
    to a copy.
    """
    position: float = 0.
    proposed: float = 0.
    accepted_count: int = 0
    samples: np.ndarray = EMPTY_SAMPLES
