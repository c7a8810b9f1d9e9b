"""Simulated page sessions."""

from .sim import ISim, Sim

__all__ = ["ISim", "Sim"]
