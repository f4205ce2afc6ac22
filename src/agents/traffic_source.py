"""
Agente generador de tráfico.

Genera vehículos en un nodo de origen según un proceso de Poisson: en cada
tick la cantidad de llegadas sigue una distribución Poisson(rate).
"""

import logging
from typing import List, Optional

import numpy as np

from .base import AgentDefaults, SimulationAgent, AgentConfigurationError, parse_parameters
from src.simulator.vehicle import Vehicle
from src.utils.config import AgentConfig

logger = logging.getLogger(__name__)


class TrafficSourceAgent(AgentDefaults, SimulationAgent):
    """
    Inyecta vehículos en la red durante `until` ticks.

    Parámetros: "origin=1;destination=5;rate=0.5;seed=42;until=100"
    o bien una ruta explícita "route=1,2,3,4,5" en lugar de origen/destino.
    Si solo se dan origen y destino, la ruta es la más corta de la red.
    """

    def __init__(self):
        self.origin: Optional[int] = None
        self.destination: Optional[int] = None
        self.route: Optional[List[int]] = None

        self.rate = AgentConfig.DEFAULT_SPAWN_RATE
        self.until = AgentConfig.DEFAULT_TICK_LIMIT
        self.rng = np.random.RandomState(AgentConfig.DEFAULT_SEED)

        # Estadísticas
        self.steps_taken = 0
        self.vehicles_spawned = 0

    def configure(self, params: str):
        """
        Lee los parámetros del generador.

        Raises:
            AgentConfigurationError: Si falta el origen o algún valor es inválido
        """
        values = parse_parameters(params)
        try:
            if 'route' in values:
                self.route = [int(n) for n in values['route'].split(',')]
                self.origin, self.destination = self.route[0], self.route[-1]
            else:
                self.origin = int(values['origin'])
                self.destination = int(values.get('destination', self.origin))
            self.rate = float(values.get('rate', self.rate))
            self.until = int(values.get('until', self.until))
            if 'seed' in values:
                self.rng = np.random.RandomState(int(values['seed']))
        except KeyError as e:
            raise AgentConfigurationError(f"Falta el parámetro {e}")
        except ValueError as e:
            raise AgentConfigurationError(f"Valor inválido en '{params}': {e}")

        if self.rate < 0:
            raise AgentConfigurationError(f"Tasa negativa: {self.rate}")

    def _resolve_route(self, context) -> List[int]:
        if self.route is None:
            if self.origin is None:
                raise AgentConfigurationError("Generador sin origen configurado")
            route = context.network.get_shortest_path(self.origin, self.destination)
            if route is None:
                raise AgentConfigurationError(
                    f"No hay ruta de {self.origin} a {self.destination}")
            self.route = route
        return self.route

    def step(self, context) -> bool:
        if self.is_finished():
            return False

        route = self._resolve_route(context)
        arrivals = int(self.rng.poisson(self.rate))
        for _ in range(arrivals):
            context.add_vehicle(Vehicle(route, spawn_tick=context.current_tick))

        self.vehicles_spawned += arrivals
        self.steps_taken += 1
        return not self.is_finished()

    def is_finished(self) -> bool:
        return self.steps_taken >= self.until
