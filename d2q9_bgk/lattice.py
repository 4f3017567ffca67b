"""
D2Q9 Lattice Constants and Utilities

Defines the D2Q9 lattice model for 2D fluid simulations.
"""
import numpy as np

# D2Q9 lattice velocities
#     6   2   5
#       \ | /
#     3 - 0 - 1
#       / | \
#     7   4   8

# Lattice velocity components
EX = np.array([0, 1, 0, -1, 0, 1, -1, -1, 1], dtype=np.int32)
EY = np.array([0, 0, 1, 0, -1, 1, 1, -1, -1], dtype=np.int32)

# Lattice weights
W0 = 4.0 / 9.0
W1 = 1.0 / 9.0
W2 = 1.0 / 36.0
W = np.array([W0, W1, W1, W1, W1, W2, W2, W2, W2], dtype=np.float64)

# Opposite direction indices (for bounce-back)
OPPOSITE = np.array([0, 3, 4, 1, 2, 7, 8, 5, 6], dtype=np.int32)

# Lattice sound speed squared
CS2 = 1.0 / 3.0
CS2_INV = 3.0

# Number of lattice velocities
Q = 9

# Below this local density a cell is treated as being at rest
DENSITY_FLOOR = 1e-10


def equilibrium_weights(density):
    """Rest-state distribution for a uniform fluid of the given density."""
    return W * density
