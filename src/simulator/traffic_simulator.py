"""
Motor principal de simulación por ticks.

Este módulo implementa el simulador que coordina la red, las colas de
cada nodo y los agentes registrados. Cada tick se ejecuta en tres fases:

1. Avanzar la cola de cada nodo, recolectando los vehículos que llegaron
   a la cabeza.
2. Enviar cada vehículo llegado al siguiente nodo de su ruta, o
   estacionarlo si terminó su viaje.
3. Ejecutar el paso de cada agente que no haya terminado.
"""

import logging
from typing import Dict, List, Optional, Tuple
import time as timer

from .traffic_network import TrafficNetwork, RoadNode
from .vehicle import Vehicle, VehicleState
from src.agents.base import SimulationAgent
from src.utils.config import SimulatorConfig
from src.utils.metrics import MetricsCalculator

logger = logging.getLogger(__name__)


class TrafficSimulator:
    """
    Motor principal de simulación.

    Es el contexto que reciben los agentes: expone `network`,
    `current_tick`, `add_vehicle()` y `stop_vehicle()`.
    """

    def __init__(self, network: TrafficNetwork):
        """
        Inicializa el simulador.

        Args:
            network: Red vial con sus nodos y colas
        """
        self.network = network
        self.agents: List[SimulationAgent] = []

        # Vehículos
        self.vehicles: List[Vehicle] = []
        self.completed_vehicles: List[Vehicle] = []
        self.stopped_vehicles: List[Vehicle] = []

        # Estado de simulación
        self.current_tick = 0
        self.record_history = SimulatorConfig.RECORD_HISTORY
        self.metrics_history: List[Dict] = []

        logger.info("Simulador inicializado: %s, %d nodos",
                    network.network_name or "red sin nombre", len(network.nodes))

    def register_agent(self, agent: SimulationAgent, params: str = ""):
        """
        Configura, asocia y registra un agente.

        Args:
            agent: Agente a registrar
            params: String de parámetros que recibe agent.configure()

        Raises:
            TypeError: Si el objeto no es un SimulationAgent
        """
        if not isinstance(agent, SimulationAgent):
            raise TypeError(f"{agent!r} no es un SimulationAgent")

        agent.configure(params)
        agent.bind_to_simulation(self)
        self.agents.append(agent)
        logger.debug("Agente registrado: %r", agent)

    def add_vehicle(self, vehicle: Vehicle):
        """
        Ingresa un vehículo en la cola de su nodo de origen.

        Un vehículo agregado antes de step() entra a la cola antes del avance
        de ese tick, por lo que con retardo 0 o 1 sale en ese mismo tick
        (finish_tick == current_tick). Uno agregado por un agente durante
        la fase 3 sale recién en el tick siguiente.

        Raises:
            KeyError: Si el nodo de origen no existe
            DuplicateVehicle: Si el vehículo ya estaba en esa cola
        """
        node = self._require_node(vehicle.current_node)
        node.queue.enqueue(vehicle, node.current_delay())

        vehicle.spawn_tick = self.current_tick
        self.vehicles.append(vehicle)

    def stop_vehicle(self, vehicle: Vehicle):
        """
        Retira de circulación un vehículo que espera en la cola de su nodo actual.

        Un vehículo que ya terminó su viaje (llegado o detenido) no se modifica.
        """
        if vehicle.is_finished():
            return

        node = self._require_node(vehicle.current_node)
        node.queue.park(vehicle)
        vehicle.finish(VehicleState.STOPPED, self.current_tick)
        self.stopped_vehicles.append(vehicle)

    def step(self) -> bool:
        """
        Ejecuta un tick completo.

        Returns:
            bool: True si la simulación debe continuar (algún agente lo pidió
                  o quedan vehículos en colas)
        """
        # 1. Avanzar colas
        arrivals: List[Tuple[RoadNode, Vehicle]] = []
        for node_id in sorted(self.network.nodes):
            node = self.network.nodes[node_id]
            for vehicle in sorted(node.queue.tick(), key=lambda v: v.id):
                arrivals.append((node, vehicle))

        # 2. Enrutar o estacionar los vehículos llegados
        arrived_now = 0
        for node, vehicle in arrivals:
            if self._route_vehicle(node, vehicle):
                arrived_now += 1

        # Las llegadas ya enrutadas dejan de pertenecer a la cola de origen
        for node in self.network.nodes.values():
            node.queue.release_arrived()

        # 3. Agentes
        agents_continue = False
        for agent in self.agents:
            if agent.is_finished():
                continue
            if agent.step(self):
                agents_continue = True

        if self.record_history:
            self._record_metrics(arrived_now)

        self.current_tick += 1
        return agents_continue or not self.network.is_empty()

    def _route_vehicle(self, node: RoadNode, vehicle: Vehicle) -> bool:
        """
        Decide qué hace un vehículo que llegó a la cabeza de `node`.

        Returns:
            bool: True si el vehículo llegó a su destino
        """
        next_id = vehicle.next_node()

        if next_id is None:
            node.queue.park(vehicle)
            vehicle.finish(VehicleState.ARRIVED, self.current_tick)
            self.completed_vehicles.append(vehicle)
            return True

        next_node = self.network.get_node(next_id)
        if next_node is None or not self.network.has_segment(node.id, next_id):
            logger.warning("%s no puede pasar de %s a %s; se retira",
                           vehicle, node.id, next_id)
            node.queue.park(vehicle)
            vehicle.finish(VehicleState.STOPPED, self.current_tick)
            self.stopped_vehicles.append(vehicle)
            return False

        vehicle.advance()
        next_node.queue.enqueue(vehicle, next_node.current_delay())
        return False

    def _require_node(self, node_id: int) -> RoadNode:
        node = self.network.get_node(node_id)
        if node is None:
            raise KeyError(f"Nodo inexistente: {node_id}")
        return node

    def _record_metrics(self, arrived_now: int):
        """Registra métricas instantáneas del tick actual."""
        self.metrics_history.append({
            'tick': self.current_tick,
            'active_vehicles': self.network.total_active_vehicles(),
            'parked_vehicles': self.network.total_parked_vehicles(),
            'arrived': arrived_now,
            'completed_total': len(self.completed_vehicles),
            'stopped_total': len(self.stopped_vehicles),
            'running_agents': sum(1 for a in self.agents if not a.is_finished()),
            'queue_sizes': {n: node.queue.size() for n, node in self.network.nodes.items()}
        })

    def run(self, max_ticks: Optional[int] = None) -> Dict:
        """
        Ejecuta ticks hasta que la simulación termine o se alcance `max_ticks`.

        Args:
            max_ticks: Tope de ticks (por defecto SimulatorConfig.DEFAULT_MAX_TICKS)

        Returns:
            dict: Métricas finales de la simulación
        """
        if max_ticks is None:
            max_ticks = SimulatorConfig.DEFAULT_MAX_TICKS

        logger.info("Iniciando simulación (máx. %d ticks)", max_ticks)
        real_time_start = timer.time()

        ticks_run = 0
        while ticks_run < max_ticks:
            ticks_run += 1
            if not self.step():
                break

        metrics = self.calculate_final_metrics()
        metrics['real_time_s'] = timer.time() - real_time_start

        logger.info("Simulación completada en %d ticks: %d llegaron, %d retirados, %d en colas",
                    self.current_tick, metrics['completed_vehicles'],
                    metrics['stopped_vehicles'], metrics['active_vehicles'])
        return metrics

    def calculate_final_metrics(self) -> Dict:
        """
        Calcula las métricas finales de la simulación.

        Returns:
            dict: Métricas agregadas
        """
        return {
            'ticks': self.current_tick,
            'total_vehicles': len(self.vehicles),
            'completed_vehicles': len(self.completed_vehicles),
            'stopped_vehicles': len(self.stopped_vehicles),
            'active_vehicles': self.network.total_active_vehicles(),
            'avg_travel_ticks': MetricsCalculator.average_travel_ticks(self.completed_vehicles),
            'throughput': MetricsCalculator.throughput(self.completed_vehicles, self.current_tick),
            'avg_active_vehicles': MetricsCalculator.average_active_vehicles(self.metrics_history),
            'max_active_vehicles': MetricsCalculator.max_active_vehicles(self.metrics_history),
        }

    def __repr__(self) -> str:
        return (f"TrafficSimulator(tick={self.current_tick}, agents={len(self.agents)}, "
                f"active={self.network.total_active_vehicles()})")
