"""Training tracker backend: workouts, sets, warmups, supersets and rest-time cleaning."""

__version__ = "0.1.0"
