"""
Tests para el módulo de red vial (TrafficNetwork).
"""

import json

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

import pytest
import sys
from pathlib import Path

# Agregar src al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.simulator.traffic_network import TrafficNetwork, RoadNode
from src.simulator.vehicle import Vehicle
from src.utils.config import SAMPLE_NETWORK_FILE


class TestRoadNode:
    """Tests para la clase RoadNode."""

    def test_node_creation(self):
        """Test de creación básica de nodo."""
        node = RoadNode(
            node_id=1,
            name="Av. Brasil y Rambla",
            delay=3,
            coordinates=(-34.9089, -56.1536)
        )

        assert node.id == 1
        assert node.name == "Av. Brasil y Rambla"
        assert node.current_delay() == 3
        assert node.lat == -34.9089
        assert node.queue.is_empty()

    def test_default_name(self):
        node = RoadNode(7)
        assert node.name == "Nodo 7"

    def test_negative_delay(self):
        """Un nodo no puede tener retardo negativo."""
        with pytest.raises(ValueError):
            RoadNode(1, delay=-1)


class TestTrafficNetwork:
    """Tests para la clase TrafficNetwork."""

    def test_empty_network(self):
        """Test de creación de red vacía."""
        network = TrafficNetwork()

        assert len(network.nodes) == 0
        assert network.graph.number_of_nodes() == 0
        assert network.is_empty()

    def test_add_nodes_and_segments(self):
        """Test de agregar nodos y conexiones."""
        network = TrafficNetwork()
        network.add_node(1, "A", delay=2)
        network.add_node(2, "B", delay=1)
        network.add_segment(1, 2)

        assert network.get_node(1).delay == 2
        assert network.has_segment(1, 2)
        assert not network.has_segment(2, 1)
        assert network.get_neighbors(1) == [2]
        assert network.get_all_node_ids() == [1, 2]

    def test_duplicate_node(self):
        network = TrafficNetwork()
        network.add_node(1)

        with pytest.raises(ValueError):
            network.add_node(1)

    def test_segment_to_unknown_node(self):
        network = TrafficNetwork()
        network.add_node(1)

        with pytest.raises(KeyError):
            network.add_segment(1, 2)

    def test_shortest_path_uses_node_delays(self):
        """La ruta más corta evita nodos con mucho retardo."""
        network = TrafficNetwork()
        network.add_node(1, delay=1)
        network.add_node(2, delay=10)
        network.add_node(3, delay=1)
        network.add_node(4, delay=1)
        for a, b in [(1, 2), (2, 4), (1, 3), (3, 4)]:
            network.add_segment(a, b)

        assert network.get_shortest_path(1, 4) == [1, 3, 4]
        assert network.get_shortest_path(4, 1) is None
        assert network.get_shortest_path(1, 99) is None

    def test_vehicle_counts(self):
        """Cuenta vehículos activos y estacionados de todas las colas."""
        network = TrafficNetwork()
        network.add_node(1)
        network.add_node(2)
        v1, v2 = Vehicle([1]), Vehicle([2])
        network.get_node(1).queue.enqueue(v1, 1)
        network.get_node(2).queue.enqueue(v2, 3)
        network.get_node(2).queue.park(v2)

        assert network.total_active_vehicles() == 1
        assert network.total_parked_vehicles() == 1
        assert not network.is_empty()

    def test_load_sample_network(self):
        """Test de carga de la red de ejemplo."""
        network = TrafficNetwork(str(SAMPLE_NETWORK_FILE))

        assert network.network_name != ""
        assert len(network.nodes) == 5
        assert network.get_node(4).delay == 3
        assert network.get_shortest_path(1, 5) == [1, 2, 3, 4, 5]

    def test_load_from_json(self, tmp_path):
        """Carga desde un archivo escrito por el test."""
        data = {
            "network_name": "Mini",
            "nodes": [{"id": 1, "delay": 0}, {"id": 2}],
            "edges": [{"from_id": 1, "to_id": 2}]
        }
        path = tmp_path / "mini.json"
        path.write_text(json.dumps(data), encoding="utf-8")

        network = TrafficNetwork(str(path))

        assert network.network_name == "Mini"
        assert network.get_node(1).delay == 0
        assert network.get_node(2).delay == 1  # retardo por defecto
        assert network.has_segment(1, 2)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            TrafficNetwork("no_existe.json")

    def test_network_stats(self):
        """Test de estadísticas de la red."""
        network = TrafficNetwork(str(SAMPLE_NETWORK_FILE))
        stats = network.get_network_stats()

        assert stats['num_nodes'] == 5
        assert stats['num_segments'] == 8
        assert stats['is_connected']
        assert stats['active_vehicles'] == 0

    def test_visualize(self):
        """La visualización retorna una figura."""
        network = TrafficNetwork(str(SAMPLE_NETWORK_FILE))
        network.get_node(2).queue.enqueue(Vehicle([2]), 1)

        fig = network.visualize(show_labels=True)

        assert fig is not None
        plt.close(fig)
