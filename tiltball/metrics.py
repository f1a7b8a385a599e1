import numpy as np


def edge_clearance(states, radius, bounds):
    """(T, 4) states → (T, 4) distance to left/top/right/bottom minus radius."""
    pos = np.asarray(states)[:, :2]
    w, h = bounds
    return np.stack([pos[:, 0] - radius, pos[:, 1] - radius,
                     w - pos[:, 0] - radius, h - pos[:, 1] - radius], axis=1)


def min_clearance(states, radius, bounds):
    return float(edge_clearance(states, radius, bounds).min())


def compute_speed(states):
    vel = np.asarray(states)[:, 2:]
    return np.linalg.norm(vel, axis=1)


def compute_energy(states):
    """Unit-mass kinetic energy per frame."""
    vel = np.asarray(states)[:, 2:]
    return 0.5 * (vel ** 2).sum(axis=1)
