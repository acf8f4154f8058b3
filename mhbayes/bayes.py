"""Bayes' theorem for a binary medical test.

All inputs are percentages in [0, 100].
"""
import math
import logging
from mhbayes.errors import InvalidParameterError, DegeneratePosteriorError
from typing import NamedTuple, List

logger = logging.getLogger(__name__)

DEFAULT_POPULATION = 10000


class BayesParams(NamedTuple):
    prevalence: float = 1.
    sensitivity: float = 95.
    specificity: float = 95.


class PopulationBreakdown(NamedTuple):
    total: int
    diseased: int
    healthy: int
    true_positives: int
    false_negatives: int
    true_negatives: int
    false_positives: int

    @property
    def total_positives(self) -> int:
        return self.true_positives + self.false_positives

    @property
    def total_negatives(self) -> int:
        return self.true_negatives + self.false_negatives


def check_percentage(name: str, value: float):
    value = float(value)
    if not (math.isfinite(value) and 0. <= value <= 100.):
        raise InvalidParameterError(f'{name.capitalize()} must be a percentage in [0, 100], got {value}.')


def check_bayes_params(prevalence: float, sensitivity: float, specificity: float):
    check_percentage('prevalence', prevalence)
    check_percentage('sensitivity', sensitivity)
    check_percentage('specificity', specificity)


def _round_half_up(x: float) -> int:
    # The counts are non-negative, so this is rounding half away from zero.
    return math.floor(x + 0.5)


def posterior(prevalence: float, sensitivity: float, specificity: float) -> float:
    r"""The probability of having the disease given a positive test,

    .. math::

        P(D \mid +) = \frac{P(+ \mid D) P(D)}{P(+ \mid D) P(D) + P(+ \mid \neg D) (1 - P(D))}.

    Parameters
    ----------
    prevalence : float
        :math:`P(D)` in percent.
    sensitivity : float
        :math:`P(+ \mid D)` in percent.
    specificity : float
        :math:`P(- \mid \neg D)` in percent.

    Returns
    -------
    float
        The posterior probability in [0, 1].

    Raises
    ------
    InvalidParameterError
        If any of the percentages is outside of [0, 100].
    DegeneratePosteriorError
        If both the true-positive and the false-positive terms vanish, so that the posterior is undefined. This is
        not the same as a zero posterior.
    """
    check_bayes_params(prevalence, sensitivity, specificity)
    p_d = prevalence / 100
    p_t_given_d = sensitivity / 100
    p_t_given_not_d = (100 - specificity) / 100

    true_positive_term = p_t_given_d * p_d
    false_positive_term = p_t_given_not_d * (1 - p_d)
    evidence = true_positive_term + false_positive_term
    if evidence == 0.:
        raise DegeneratePosteriorError(f'Nobody tests positive with prevalence={prevalence}, '
                                       f'sensitivity={sensitivity}, specificity={specificity}.')
    return min(max(true_positive_term / evidence, 0.), 1.)


def population_breakdown(prevalence: float, sensitivity: float, specificity: float,
                         total: int = DEFAULT_POPULATION) -> PopulationBreakdown:
    """Split a hypothetical population into the four cells of the confusion matrix.

    The diseased and positive counts are rounded, and their complements are taken by subtraction, so the four cells
    sum to `total`.
    """
    check_bayes_params(prevalence, sensitivity, specificity)
    if isinstance(total, bool) or not math.isfinite(total) or int(total) != total or total <= 0:
        raise InvalidParameterError(f'The population must be a positive integer, got {total}.')
    total = int(total)

    diseased = _round_half_up(total * prevalence / 100)
    healthy = total - diseased

    true_positives = _round_half_up(diseased * sensitivity / 100)
    false_negatives = diseased - true_positives
    true_negatives = _round_half_up(healthy * specificity / 100)
    false_positives = healthy - true_negatives

    return PopulationBreakdown(total=total,
                               diseased=diseased,
                               healthy=healthy,
                               true_positives=true_positives,
                               false_negatives=false_negatives,
                               true_negatives=true_negatives,
                               false_positives=false_positives)


def insights(prevalence: float, sensitivity: float, specificity: float,
             total: int = DEFAULT_POPULATION) -> List[str]:
    """Plain-language remarks on the current test parameters.
    """
    stats = population_breakdown(prevalence, sensitivity, specificity, total)
    try:
        prob = posterior(prevalence, sensitivity, specificity)
    except DegeneratePosteriorError:
        logger.debug('Degenerate posterior for prevalence=%s, sensitivity=%s, specificity=%s.',
                     prevalence, sensitivity, specificity)
        prob = None

    remarks = []
    if prob is not None and prob < 0.5:
        remarks.append('Even with a positive test, you are more likely to be healthy than sick! '
                       'This demonstrates the base rate fallacy.')

    if prevalence < 5:
        remarks.append(f'Low base rate alert: with only {prevalence:g}% prevalence, '
                       f'most positive tests are false positives.')

    if prob is None:
        remarks.append('With these parameters nobody tests positive, so the posterior is undefined.')
    else:
        remarks.append(f'Out of {stats.total_positives} people who test positive, '
                       f'only {stats.true_positives} actually have the disease.')

    if prob is not None and prob > 0.9:
        remarks.append(f'High confidence: with these parameters, a positive test gives {prob * 100:.1f}% confidence.')

    remarks.append('Tip: try adjusting the base rate to see how dramatically it affects the result!')
    return remarks
