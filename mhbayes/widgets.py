"""
Models behind the two interactive widgets. A front end (matplotlib, a notebook, a web page) binds its slider and
button callbacks to the setters and transitions here, and re-renders from the accessors.
"""
import math
import logging
import jax
from mhbayes.bayes import BayesParams, PopulationBreakdown, posterior, population_breakdown, insights, \
    check_percentage, DEFAULT_POPULATION
from mhbayes.errors import InvalidParameterError, DegeneratePosteriorError
from mhbayes.samplers.common import ChainState
from mhbayes.samplers.mh import GaussianTarget, UniformProposal, check_target, check_proposal, \
    acceptance_probability, init_chain, reset, step, acceptance_rate
from mhbayes.typings import JKey
from typing import Optional, List, Dict

logger = logging.getLogger(__name__)

SPEED_LABELS = ('Very Slow', 'Slow', 'Medium', 'Fast', 'Very Fast')


class MedicalTestCalculator:
    """Prevalence, sensitivity, and specificity sliders in percent, and what follows from them.
    """

    def __init__(self, prevalence: float = 1., sensitivity: float = 95., specificity: float = 95.,
                 total: int = DEFAULT_POPULATION):
        self._params = BayesParams(prevalence, sensitivity, specificity)
        self.total = total
        population_breakdown(*self._params, total=total)

    def _set(self, name: str, value: float):
        try:
            check_percentage(name, value)
        except InvalidParameterError:
            logger.warning('Rejected %s=%r.', name, value)
            raise
        self._params = self._params._replace(**{name: float(value)})

    def set_prevalence(self, value: float):
        self._set('prevalence', value)

    def set_sensitivity(self, value: float):
        self._set('sensitivity', value)

    def set_specificity(self, value: float):
        self._set('specificity', value)

    @property
    def params(self) -> BayesParams:
        return self._params

    @property
    def posterior(self) -> float:
        """Raises `DegeneratePosteriorError` when nobody tests positive.
        """
        return posterior(*self._params)

    @property
    def breakdown(self) -> PopulationBreakdown:
        return population_breakdown(*self._params, total=self.total)

    @property
    def insights(self) -> List[str]:
        return insights(*self._params, total=self.total)

    def labels(self) -> Dict[str, str]:
        prevalence, sensitivity, specificity = self._params
        try:
            result = f'{self.posterior * 100:.1f}%'
        except DegeneratePosteriorError:
            result = 'undefined'
        return {'prevalence': f'{prevalence:.1f}%',
                'sensitivity': f'{sensitivity:.1f}%',
                'specificity': f'{specificity:.1f}%',
                'posterior': result}


class MCMC1D:
    """A Metropolis-Hastings chain that advances one step per tick while running.

    The model owns no timer. Whoever drives it calls `tick` and, if a delay is returned, schedules the next call after
    that many milliseconds. Pausing makes the next `tick` return `None`, which ends the loop.
    """

    def __init__(self, key: JKey, target: GaussianTarget = GaussianTarget(),
                 proposal: UniformProposal = UniformProposal(), speed: int = 3):
        check_target(target)
        check_proposal(proposal)
        self._check_speed(speed)
        self.key = key
        self._target = target
        self._proposal = proposal
        self._speed = speed
        self._state = init_chain()
        self._running = False

    @staticmethod
    def _check_speed(speed: int):
        if isinstance(speed, bool) or not math.isfinite(speed) or int(speed) != speed \
                or not 1 <= speed <= len(SPEED_LABELS):
            raise InvalidParameterError(f'Animation speed must be an integer in 1..{len(SPEED_LABELS)}, got {speed}.')

    # Setters
    def set_target_mean(self, mean: float):
        target = self._target._replace(mean=float(mean))
        self._validate(check_target, target, 'target mean', mean)
        self._target = target

    def set_target_std(self, std: float):
        target = self._target._replace(std=float(std))
        self._validate(check_target, target, 'target std', std)
        self._target = target

    def set_proposal_scale(self, scale: float):
        proposal = self._proposal._replace(scale=float(scale))
        self._validate(check_proposal, proposal, 'proposal scale', scale)
        self._proposal = proposal

    def set_speed(self, speed: int):
        self._validate(self._check_speed, speed, 'speed', speed)
        self._speed = int(speed)

    @staticmethod
    def _validate(check, params, name, value):
        try:
            check(params)
        except InvalidParameterError:
            logger.warning('Rejected %s=%r.', name, value)
            raise

    # Accessors
    @property
    def state(self) -> ChainState:
        return self._state

    @property
    def target(self) -> GaussianTarget:
        return self._target

    @property
    def proposal(self) -> UniformProposal:
        return self._proposal

    @property
    def speed(self) -> int:
        return self._speed

    @property
    def speed_label(self) -> str:
        return SPEED_LABELS[self._speed - 1]

    @property
    def delay(self) -> int:
        """Milliseconds to wait before the next tick.
        """
        return max(1, 6 - self._speed) * 100

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def acceptance_rate(self) -> float:
        return acceptance_rate(self._state)

    def proposal_info(self) -> str:
        position, proposed = self._state.position, self._state.proposed
        if not self._running:
            return f'Current position: {position:.2f}'
        prob = float(acceptance_probability(position, proposed, self._target))
        return f'Current: {position:.2f} | Proposed: {proposed:.2f} | Accept Prob: {prob * 100:.1f}%'

    # Transitions
    def start(self):
        self._running = True
        logger.debug('Sampling started at step %d.', self._state.samples.shape[0])

    def pause(self):
        self._running = False
        logger.debug('Sampling paused at step %d.', self._state.samples.shape[0])

    def reset(self):
        self.pause()
        self._state = reset(self._state)
        logger.debug('Chain reset.')

    def advance(self) -> ChainState:
        """Take exactly one step, running or not.
        """
        self.key, subkey = jax.random.split(self.key)
        self._state = step(subkey, self._state, self._target, self._proposal)
        return self._state

    def tick(self) -> Optional[int]:
        """Step once if running. Returns the delay until the next tick, or `None` if no further tick is wanted.
        """
        if not self._running:
            return None
        self.advance()
        return self.delay
