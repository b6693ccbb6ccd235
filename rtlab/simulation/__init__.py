"""Simulated subjects for exercising the engine without a human."""

from rtlab.simulation.runner import SimulationRunner
from rtlab.simulation.subject import Press, SimulatedSubject

__all__ = ["Press", "SimulatedSubject", "SimulationRunner"]
