from .bayes import BayesParams, PopulationBreakdown, posterior, population_breakdown, insights
from .errors import MHBayesError, InvalidParameterError, DegeneratePosteriorError
from .samplers import ChainState, GaussianTarget, UniformProposal, step, reset, sample_chain, acceptance_rate
