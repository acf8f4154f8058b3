"""
Animated 1D Metropolis-Hastings: watch a random walk fill in a Gaussian target one step at a time.
"""
import argparse
import logging
import jax
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.widgets import Slider, Button
from mhbayes.errors import MHBayesError
from mhbayes.plotting import plot_target, plot_trace, plot_histogram, plot_proposal
from mhbayes.samplers import GaussianTarget, UniformProposal, sample_chain, acceptance_rate
from mhbayes.widgets import MCMC1D

parser = argparse.ArgumentParser(description='1D Metropolis-Hastings animation.')
parser.add_argument('--proposal_scale', type=float, default=0.5, help='Scale of the uniform random-walk proposal.')
parser.add_argument('--target_mean', type=float, default=0.)
parser.add_argument('--target_std', type=float, default=1.)
parser.add_argument('--speed', type=int, default=3, help='Animation speed from 1 (very slow) to 5 (very fast).')
parser.add_argument('--seed', type=int, default=666)
parser.add_argument('--headless', action='store_true', help='Run the chain without a window and print statistics.')
parser.add_argument('--nsteps', type=int, default=10000, help='Number of steps in headless mode.')
parser.add_argument('--verbose', action='store_true')
args = parser.parse_args()

logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

key = jax.random.PRNGKey(args.seed)
widget = MCMC1D(key,
                target=GaussianTarget(args.target_mean, args.target_std),
                proposal=UniformProposal(args.proposal_scale),
                speed=args.speed)

if args.headless:
    state = sample_chain(key, widget.state, widget.target, widget.proposal, args.nsteps)
    print(f'Steps: {state.samples.shape[0]} | Acceptance rate: {acceptance_rate(state) * 100:.1f}%')
    if args.nsteps > 0:
        print(f'Sample mean: {np.mean(state.samples):.4f} (target {args.target_mean}) | '
              f'Sample std: {np.std(state.samples):.4f} (target {args.target_std})')
    raise SystemExit(0)

fig, axes = plt.subplots(nrows=2, ncols=2, figsize=(12, 8))
plt.subplots_adjust(bottom=0.3, hspace=0.4)
ax_target, ax_trace, ax_hist, ax_proposal = axes.ravel()

ax_sliders = [fig.add_axes([0.15, 0.18 - 0.04 * i, 0.5, 0.03]) for i in range(4)]
sliders = {'proposal_scale': Slider(ax_sliders[0], 'Proposal scale', 0.1, 3., valinit=widget.proposal.scale,
                                    valstep=0.1),
           'target_mean': Slider(ax_sliders[1], 'Target mean', -3., 3., valinit=widget.target.mean, valstep=0.1),
           'target_std': Slider(ax_sliders[2], 'Target std', 0.1, 3., valinit=widget.target.std, valstep=0.1),
           'speed': Slider(ax_sliders[3], 'Speed', 1, 5, valinit=widget.speed, valstep=1)}
buttons = {name: Button(fig.add_axes([0.75, 0.16 - 0.05 * i, 0.1, 0.04]), name.capitalize())
           for i, name in enumerate(('start', 'pause', 'reset'))}

timer = fig.canvas.new_timer(interval=widget.delay)
timer.single_shot = True


def redraw():
    state = widget.state
    plot_target(ax_target, widget.target, state)
    plot_trace(ax_trace, state.samples)
    plot_histogram(ax_hist, state.samples, widget.target)
    plot_proposal(ax_proposal, state, widget.proposal, show_proposed=widget.is_running)
    ax_proposal.set_xlabel(widget.proposal_info())
    fig.suptitle(f'Samples: {state.samples.shape[0]} | Acceptance rate: {widget.acceptance_rate * 100:.1f}% | '
                 f'Speed: {widget.speed_label}')
    fig.canvas.draw_idle()


def on_timer():
    delay = widget.tick()
    redraw()
    if delay is not None:
        timer.interval = delay
        timer.start()


def on_start(_):
    if not widget.is_running:
        widget.start()
        on_timer()


def on_pause(_):
    widget.pause()
    timer.stop()
    redraw()


def on_reset(_):
    widget.reset()
    timer.stop()
    redraw()


def make_callback(setter):
    def on_changed(value):
        try:
            setter(value)
        except MHBayesError as e:
            print(f'Rejected input: {e}')
            return
        redraw()

    return on_changed


timer.add_callback(on_timer)
sliders['proposal_scale'].on_changed(make_callback(widget.set_proposal_scale))
sliders['target_mean'].on_changed(make_callback(widget.set_target_mean))
sliders['target_std'].on_changed(make_callback(widget.set_target_std))
sliders['speed'].on_changed(make_callback(lambda v: widget.set_speed(int(v))))
buttons['start'].on_clicked(on_start)
buttons['pause'].on_clicked(on_pause)
buttons['reset'].on_clicked(on_reset)

redraw()
plt.show()
