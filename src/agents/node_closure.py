"""
Agente de cierre temporal de un nodo.

Mientras dura el cierre, todo vehículo en la cola del nodo se retira de
circulación (queda estacionado con estado STOPPED).
"""

import logging

from .base import AgentDefaults, SimulationAgent, AgentConfigurationError, parse_parameters

logger = logging.getLogger(__name__)


class NodeClosureAgent(AgentDefaults, SimulationAgent):
    """
    Cierra `node` entre los ticks `start` (incluido) y `end` (excluido).

    Parámetros: "node=3;start=10;end=20"
    """

    def __init__(self, node_id: int = None, start: int = 0, end: int = 0):
        self.node_id = node_id
        self.start = start
        self.end = end

        self.last_tick = -1
        self.vehicles_stopped = 0

    def configure(self, params: str):
        values = parse_parameters(params)
        try:
            self.node_id = int(values.get('node', self.node_id))
            self.start = int(values.get('start', self.start))
            self.end = int(values.get('end', self.end))
        except (TypeError, ValueError):
            raise AgentConfigurationError(f"Parámetros de cierre inválidos: '{params}'")

        if self.end < self.start:
            raise AgentConfigurationError(
                f"Ventana de cierre inválida: [{self.start}, {self.end})")

    def bind_to_simulation(self, context):
        if context.network.get_node(self.node_id) is None:
            raise AgentConfigurationError(f"Nodo inexistente: {self.node_id}")
        super().bind_to_simulation(context)

    def is_closed(self, tick: int) -> bool:
        return self.start <= tick < self.end

    def step(self, context) -> bool:
        if self.is_finished():
            return False

        self.last_tick = context.current_tick
        if self.is_closed(self.last_tick):
            node = context.network.get_node(self.node_id)
            for vehicle in node.queue.vehicles():
                context.stop_vehicle(vehicle)
                self.vehicles_stopped += 1

        return not self.is_finished()

    def is_finished(self) -> bool:
        return self.last_tick >= self.end - 1
