"""
Matplotlib renderers for the two widgets. Each function clears and draws on the given axes, and returns them.
"""
import math
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgba
from matplotlib.patches import Rectangle
from mhbayes.bayes import BayesParams, PopulationBreakdown
from mhbayes.samplers.common import ChainState
from mhbayes.samplers.mh import GaussianTarget, UniformProposal, target_pdf

NRECENT = 20
MIN_HIST_SAMPLES = 10


def _target_curve(target: GaussianTarget, lower: float, upper: float, npoints: int = 101):
    xs = np.linspace(lower, upper, npoints)
    return xs, np.asarray(target_pdf(xs, target))


def plot_target(ax: plt.Axes, target: GaussianTarget, state: ChainState = None) -> plt.Axes:
    ax.clear()
    xs, ps = _target_curve(target, target.mean - 4 * target.std, target.mean + 4 * target.std)
    ax.plot(xs, ps, c='tab:blue', linewidth=2)

    if state is not None and state.samples.shape[0] > 0:
        p = float(target_pdf(state.position, target))
        ax.vlines(state.position, 0., p, colors='tab:red', linestyles='--', alpha=0.7)
        ax.scatter(state.position, 0., s=40, c='tab:red', edgecolors='white', zorder=3)

    ax.set_ylim(0., 1.1 * float(target_pdf(target.mean, target)))
    ax.set_xlabel('x')
    ax.set_title('Target distribution')
    ax.grid(linestyle='--', alpha=0.3, which='both')
    return ax


def plot_trace(ax: plt.Axes, samples: np.ndarray, nrecent: int = NRECENT) -> plt.Axes:
    """Trace plot with the last `nrecent` samples highlighted, fading in with age.
    """
    ax.clear()
    ax.set_xlabel('Sample number')
    ax.set_title('Trace')
    nsamples = samples.shape[0]
    if nsamples == 0:
        return ax

    ax.plot(np.arange(nsamples), samples, c='tab:green', linewidth=1.5)
    start = max(0, nsamples - nrecent)
    recent = samples[start:]
    alphas = 0.3 + 0.7 * np.arange(recent.shape[0]) / recent.shape[0]
    colours = np.zeros((recent.shape[0], 4))
    colours[:] = to_rgba('tab:red')
    colours[:, 3] = alphas
    ax.scatter(np.arange(start, nsamples), recent, s=6, c=colours, zorder=3)

    ax.set_xlim(0, max(nsamples, 100))
    ax.grid(linestyle='--', alpha=0.3, which='both')
    return ax


def histogram_bins(nsamples: int) -> int:
    return min(20, math.floor(math.sqrt(nsamples)))


def plot_histogram(ax: plt.Axes, samples: np.ndarray, target: GaussianTarget) -> plt.Axes:
    """Histogram of the samples with the target density, rescaled to the tallest bin, on top.
    """
    ax.clear()
    ax.set_title('Sample histogram')
    nsamples = samples.shape[0]
    if nsamples < MIN_HIST_SAMPLES:
        return ax

    counts, _, _ = ax.hist(samples, bins=histogram_bins(nsamples), color='tab:purple', alpha=0.7, rwidth=0.95)
    xs, ps = _target_curve(target, np.min(samples), np.max(samples))
    ax.plot(xs, ps * np.max(counts) / float(target_pdf(target.mean, target)), c='tab:red', linewidth=2)
    ax.grid(linestyle='--', alpha=0.3, which='both')
    return ax


def plot_proposal(ax: plt.Axes, state: ChainState, proposal: UniformProposal, show_proposed: bool = False) -> plt.Axes:
    """The proposal density around the current position, and the latest candidate if `show_proposed`.
    """
    ax.clear()
    ax.set_title('Proposal')
    ax.set_yticks([])
    if state.samples.shape[0] == 0:
        ax.text(0.5, 0.5, 'Press Start to begin sampling', ha='center', va='center', color='gray',
                transform=ax.transAxes)
        return ax

    half_width = proposal.scale * math.sqrt(12)
    height = 1 / (2 * half_width)
    ax.fill_between([state.position - half_width, state.position + half_width], 0., height,
                    facecolor='tab:orange', alpha=0.3, edgecolor='tab:orange', linewidth=2)
    ax.scatter(state.position, 0., s=40, c='tab:red', edgecolors='white', zorder=3)
    if show_proposed:
        ax.scatter(state.proposed, 0., s=40, c='tab:orange', edgecolors='white', alpha=0.8, zorder=3)

    ax.set_xlim(state.position - 1.5 * half_width, state.position + 1.5 * half_width)
    ax.set_ylim(-0.1 * height, 1.1 * height)
    return ax


def plot_population(ax: plt.Axes, stats: PopulationBreakdown) -> plt.Axes:
    ax.clear()
    names = ['True +', 'False -', 'True -', 'False +']
    counts = [stats.true_positives, stats.false_negatives, stats.true_negatives, stats.false_positives]
    bars = ax.bar(names, counts, color=['tab:green', 'tab:orange', 'tab:blue', 'tab:red'])
    ax.bar_label(bars)
    ax.set_ylabel('People')
    ax.set_title(f'Out of {stats.total} people')
    return ax


def plot_probability(ax: plt.Axes, prior: float, posterior: float = None) -> plt.Axes:
    """Prior against posterior, both in [0, 1]. A `None` posterior is drawn as undefined.
    """
    ax.clear()
    bars = ax.bar(['Prior', 'Posterior'], [prior, 0. if posterior is None else posterior],
                  color=['tab:gray', 'tab:blue'])
    ax.bar_label(bars, labels=[f'{prior * 100:.1f}%', 'undefined' if posterior is None else f'{posterior * 100:.1f}%'])
    ax.set_ylim(0., 1.)
    ax.set_ylabel('Probability of disease')
    return ax


def plot_area_diagram(ax: plt.Axes, params: BayesParams) -> plt.Axes:
    """The unit square split by prevalence horizontally, then by test outcome within each group.
    """
    ax.clear()
    p_d = params.prevalence / 100
    sensitivity = params.sensitivity / 100
    specificity = params.specificity / 100

    cells = [((0., 1 - sensitivity), p_d, sensitivity, 'tab:green', 'TP'),
             ((0., 0.), p_d, 1 - sensitivity, 'tab:orange', 'FN'),
             ((p_d, 0.), 1 - p_d, specificity, 'tab:blue', 'TN'),
             ((p_d, specificity), 1 - p_d, 1 - specificity, 'tab:red', 'FP')]
    for xy, width, height, colour, label in cells:
        ax.add_patch(Rectangle(xy, width, height, facecolor=colour, edgecolor='white', alpha=0.7))
        if width > 0.05 and height > 0.05:
            ax.text(xy[0] + width / 2, xy[1] + height / 2, label, ha='center', va='center', fontweight='bold')

    ax.set_xlim(0., 1.)
    ax.set_ylim(0., 1.)
    ax.set_xlabel('Diseased | Healthy')
    ax.set_ylabel('Test - | Test +')
    return ax
