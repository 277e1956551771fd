"""Building blocks of a cycle-based network-on-chip simulator: data types,
topology helpers, reservation table, traffic generation, statistics, power
model and wireless token ring."""

__version__ = "0.1.0"