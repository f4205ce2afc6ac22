"""
Tests para la abstracción de agentes y los agentes incluidos.
"""

import pytest
import sys
from pathlib import Path

# Agregar src al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.agents import (
    SimulationAgent, AgentDefaults, AgentConfigurationError, AgentBindingError,
    parse_parameters, TickLimitAgent, TrafficSourceAgent, NodeClosureAgent
)
from src.simulator import TrafficNetwork, TrafficSimulator, Vehicle, VehicleState


class CountingAgent(AgentDefaults, SimulationAgent):
    """Agente mínimo: solo implementa step()."""

    def __init__(self):
        self.calls = 0

    def step(self, context) -> bool:
        self.calls += 1
        return False


def make_line_network(delays=(1, 1, 1)):
    """Red lineal 1 -> 2 -> ... con los retardos dados."""
    network = TrafficNetwork()
    for node_id, delay in enumerate(delays, start=1):
        network.add_node(node_id, delay=delay)
    for node_id in range(1, len(delays)):
        network.add_segment(node_id, node_id + 1)
    return network


class TestParseParameters:
    """Tests del parser de parámetros."""

    def test_empty(self):
        assert parse_parameters("") == {}
        assert parse_parameters(None) == {}

    def test_key_values(self):
        """Pares clave=valor separados por ';'."""
        assert parse_parameters("a=1; b = x ;") == {'a': '1', 'b': 'x'}

    def test_malformed(self):
        """Una entrada sin '=' es un error."""
        with pytest.raises(AgentConfigurationError):
            parse_parameters("a=1;oops")


class TestAgentAbstraction:
    """Tests de SimulationAgent y AgentDefaults."""

    def test_step_is_mandatory(self):
        """Sin step() el agente no puede instanciarse."""

        class NoStep(AgentDefaults, SimulationAgent):
            pass

        with pytest.raises(TypeError):
            NoStep()

    def test_defaults(self):
        """Por defecto: configure ignora, el agente está terminado."""
        agent = CountingAgent()

        agent.configure("cualquier cosa")
        assert not agent.is_bound()
        assert agent.is_finished()

    def test_bound_default_agent_is_finished(self):
        """Un agente asociado sin lógica propia está terminado sin dar pasos."""
        agent = CountingAgent()
        context = object()

        agent.bind_to_simulation(context)

        assert agent.simulation is context
        assert agent.is_finished()
        assert agent.calls == 0

    def test_bind_is_one_way(self):
        """No se puede reasociar a otra simulación."""
        agent = CountingAgent()
        context = object()
        agent.bind_to_simulation(context)

        agent.bind_to_simulation(context)  # misma simulación: sin efecto
        with pytest.raises(AgentBindingError):
            agent.bind_to_simulation(object())

        assert agent.simulation is context

    def test_simulator_skips_finished_agents(self):
        """El simulador no ejecuta agentes terminados."""
        simulator = TrafficSimulator(make_line_network())
        agent = CountingAgent()
        simulator.register_agent(agent)

        assert simulator.step() is False
        assert agent.calls == 0

    def test_register_rejects_non_agents(self):
        simulator = TrafficSimulator(make_line_network())

        with pytest.raises(TypeError):
            simulator.register_agent(object())


class TestTickLimitAgent:
    """Tests de TickLimitAgent."""

    def test_runs_for_configured_ticks(self):
        """Mantiene la simulación exactamente N ticks."""
        simulator = TrafficSimulator(make_line_network())
        agent = TickLimitAgent()
        simulator.register_agent(agent, "ticks=5")

        simulator.run(max_ticks=100)

        assert simulator.current_tick == 5
        assert agent.is_finished()

    def test_step_after_finish(self):
        """Un paso extra después de terminar retorna False."""
        agent = TickLimitAgent(ticks=1)

        assert agent.step(None) is False
        assert agent.step(None) is False
        assert agent.elapsed == 1

    def test_invalid_parameters(self):
        with pytest.raises(AgentConfigurationError):
            TickLimitAgent().configure("ticks=muchos")
        with pytest.raises(AgentConfigurationError):
            TickLimitAgent().configure("ticks=-2")


class TestTrafficSourceAgent:
    """Tests de TrafficSourceAgent."""

    def test_spawns_vehicles_at_origin(self):
        """Genera vehículos con la ruta más corta entre origen y destino."""
        simulator = TrafficSimulator(make_line_network())
        source = TrafficSourceAgent()
        simulator.register_agent(source, "origin=1;destination=3;rate=2;seed=1;until=5")

        for _ in range(5):
            simulator.step()

        assert source.is_finished()
        assert source.vehicles_spawned == len(simulator.vehicles)
        assert source.vehicles_spawned > 0
        assert all(v.route == [1, 2, 3] for v in simulator.vehicles)

    def test_same_seed_same_arrivals(self):
        """Con la misma semilla la secuencia de llegadas se repite."""
        counts = []
        for _ in range(2):
            simulator = TrafficSimulator(make_line_network())
            source = TrafficSourceAgent()
            simulator.register_agent(source, "route=1,2,3;rate=1.5;seed=42;until=20")
            simulator.run(max_ticks=20)
            counts.append(source.vehicles_spawned)

        assert counts[0] == counts[1]

    def test_missing_origin(self):
        with pytest.raises(AgentConfigurationError):
            TrafficSourceAgent().configure("rate=1")

    def test_negative_rate(self):
        with pytest.raises(AgentConfigurationError):
            TrafficSourceAgent().configure("origin=1;rate=-1")

    def test_unreachable_destination(self):
        """Sin ruta posible el primer paso falla."""
        network = make_line_network()
        simulator = TrafficSimulator(network)
        source = TrafficSourceAgent()
        simulator.register_agent(source, "origin=3;destination=1")

        with pytest.raises(AgentConfigurationError):
            simulator.step()


class TestNodeClosureAgent:
    """Tests de NodeClosureAgent."""

    def test_closure_stops_queued_vehicles(self):
        """Los vehículos en el nodo cerrado quedan estacionados y detenidos."""
        network = make_line_network(delays=(1, 5, 1))
        simulator = TrafficSimulator(network)
        closure = NodeClosureAgent()
        simulator.register_agent(closure, "node=2;start=2;end=4")

        vehicle = Vehicle(route=[1, 2, 3])
        simulator.add_vehicle(vehicle)

        simulator.run(max_ticks=50)

        assert vehicle.state == VehicleState.STOPPED
        assert vehicle in network.get_node(2).queue.parked
        assert closure.vehicles_stopped == 1
        assert closure.is_finished()
        assert network.is_empty()

    def test_vehicles_pass_outside_window(self):
        """Fuera de la ventana el nodo no afecta el tráfico."""
        network = make_line_network()
        simulator = TrafficSimulator(network)
        simulator.register_agent(NodeClosureAgent(), "node=2;start=10;end=12")

        vehicle = Vehicle(route=[1, 2, 3])
        simulator.add_vehicle(vehicle)
        simulator.run(max_ticks=50)

        assert vehicle.state == VehicleState.ARRIVED

    def test_unknown_node(self):
        simulator = TrafficSimulator(make_line_network())
        agent = NodeClosureAgent()

        with pytest.raises(AgentConfigurationError):
            simulator.register_agent(agent, "node=99;start=0;end=3")

        # Un nodo inválido no deja al agente asociado
        assert not agent.is_bound()
        assert simulator.agents == []

    def test_invalid_window(self):
        with pytest.raises(AgentConfigurationError):
            NodeClosureAgent().configure("node=1;start=5;end=2")
