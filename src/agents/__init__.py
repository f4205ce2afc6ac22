"""
Agentes enchufables para el simulador por ticks.

Este módulo contiene la abstracción de agente y los agentes incluidos:
- TickLimitAgent: mantiene la simulación durante N ticks
- TrafficSourceAgent: genera vehículos con llegadas Poisson
- NodeClosureAgent: cierra un nodo durante una ventana de ticks
"""

from .base import (
    SimulationAgent, AgentDefaults, AgentConfigurationError,
    AgentBindingError, parse_parameters
)
from .tick_limit import TickLimitAgent
from .traffic_source import TrafficSourceAgent
from .node_closure import NodeClosureAgent

__all__ = [
    'SimulationAgent',
    'AgentDefaults',
    'AgentConfigurationError',
    'AgentBindingError',
    'parse_parameters',
    'TickLimitAgent',
    'TrafficSourceAgent',
    'NodeClosureAgent'
]
