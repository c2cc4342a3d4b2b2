"""CorteXia: personal life-management backend."""

__version__ = "0.1.0"
