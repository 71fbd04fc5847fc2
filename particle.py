# particle.py

import numpy as np

class ParticleArena:
    """
    Structure-of-Arrays storage for one particle collection.

    Each field declared in FIELDS becomes a NumPy array attribute whose first
    axis is the particle index. Rows carry no identity between frames: new
    particles are appended in batches and expired ones are dropped with a
    survival mask, which keeps every column the same length.

    Data Contract:
    - FIELDS maps attribute name -> (trailing shape, dtype).
    - Every arena declares an 'ages' field; its length is the particle count.
    - Invariants: all columns always have the same length.
    """
    FIELDS = {}

    def __init__(self):
        self.clear()

    def __len__(self):
        return self.ages.shape[0]

    def clear(self):
        for name, (shape, dtype) in self.FIELDS.items():
            setattr(self, name, np.zeros((0, *shape), dtype=dtype))

    def spawn(self, **columns):
        """
        Appends a batch of particles. Every declared field must be supplied;
        scalars are broadcast across the batch.
        """
        count = max(np.asarray(columns[name]).reshape(-1, *shape).shape[0]
                    for name, (shape, _) in self.FIELDS.items())
        for name, (shape, dtype) in self.FIELDS.items():
            values = np.asarray(columns[name], dtype=dtype)
            values = np.broadcast_to(values.reshape(-1, *shape), (count, *shape))
            setattr(self, name, np.concatenate((getattr(self, name), values)))
        return count

    def keep(self, mask: np.ndarray) -> int:
        """Drops every row where mask is False. Returns the number removed."""
        before = len(self)
        for name in self.FIELDS:
            setattr(self, name, getattr(self, name)[mask])
        return before - len(self)


class Drops(ParticleArena):
    """Primary stream particles."""
    FIELDS = {
        'positions': ((2,), np.float64),
        'velocities': ((2,), np.float64),
        'radii': ((), np.float64),
        'ages': ((), np.float64),
        'ttls': ((), np.float64),
        'seeds': ((), np.float64),
    }


class Splashes(ParticleArena):
    """Decorative debris thrown off by drop collisions. 'weights' only affects rendering."""
    FIELDS = {
        'positions': ((2,), np.float64),
        'velocities': ((2,), np.float64),
        'ages': ((), np.float64),
        'ttls': ((), np.float64),
        'weights': ((), np.int8),
        'sizes': ((), np.float64),
    }


class Ripples(ParticleArena):
    """Growing rings left where drops hit the floor."""
    FIELDS = {
        'positions': ((2,), np.float64),
        'radii': ((), np.float64),
        'ages': ((), np.float64),
        'ttls': ((), np.float64),
    }
