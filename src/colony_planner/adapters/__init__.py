"""World adapters implementing the colony world contract."""

from .simulated import SimulatedColonyWorld

__all__ = ["SimulatedColonyWorld"]
