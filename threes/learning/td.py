"""
TD(0) learning of the n-tuple network, replayed backward over a finished episode.
"""

from threes.learning.trajectory import Trajectory
from threes.ntuple.network import NTupleNetwork
from threes.ntuple.patterns import PATTERNS


def td_backward(
    network: NTupleNetwork, trajectory: Trajectory, learning_rate: float, normalize: bool = False
) -> float:
    """
    Update the network from the most recent step of the trajectory to the oldest.

    Parameters
    ----------
    network : NTupleNetwork
        The value function, updated in place.
    trajectory : Trajectory
        The episode record, cleared on return.
    learning_rate : float
        Step size applied to the TD error.
    normalize : bool, optional
        Divide the step size by the number of patterns (default is False).

    Returns
    -------
    float
        Mean absolute TD error over the trajectory, 0 for an empty one.

    Notes
    -----
    - The value after the last step is 0.
    - Every step moves its value toward ``reward + next value``, where the next value is
      re-evaluated after the newer step's own update.
    """
    step_size = learning_rate / len(PATTERNS) if normalize else learning_rate
    next_value, total_error = 0.0, 0.0

    for step in reversed(trajectory):
        error = step.reward + next_value - network.value(step.features)
        network.update(step.features, step_size * error)
        next_value = network.value(step.features)
        total_error += abs(error)

    count = len(trajectory)
    trajectory.clear()
    return total_error / count if count else 0.0
