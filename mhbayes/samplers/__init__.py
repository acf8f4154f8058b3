from .common import MCMCState, ChainState
from .mh import (GaussianTarget, UniformProposal, target_logpdf, target_pdf, propose, acceptance_probability,
                 mh_kernel, init_chain, reset, step, sample_chain, acceptance_rate, check_target, check_proposal)
