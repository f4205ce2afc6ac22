"""
Agente que mantiene la simulación en marcha durante un número fijo de ticks.
"""

from .base import AgentDefaults, SimulationAgent, AgentConfigurationError, parse_parameters
from src.utils.config import AgentConfig


class TickLimitAgent(AgentDefaults, SimulationAgent):
    """
    Pide continuar la simulación hasta completar `ticks` pasos.

    Parámetros: "ticks=N"
    """

    def __init__(self, ticks: int = AgentConfig.DEFAULT_TICK_LIMIT):
        self.tick_limit = ticks
        self.elapsed = 0

    def configure(self, params: str):
        values = parse_parameters(params)
        if 'ticks' in values:
            try:
                self.tick_limit = int(values['ticks'])
            except ValueError:
                raise AgentConfigurationError(f"ticks no es entero: {values['ticks']}")
        if self.tick_limit < 0:
            raise AgentConfigurationError(f"ticks negativo: {self.tick_limit}")

    def step(self, context) -> bool:
        # Pasos extra después de terminar no tienen efecto
        if self.is_finished():
            return False
        self.elapsed += 1
        return not self.is_finished()

    def is_finished(self) -> bool:
        return self.elapsed >= self.tick_limit
