"""Driver priority scoring and order assignment ranking."""

__version__ = "0.1.0"
