"""
Modelo de red vial como grafo dirigido.

Los nodos de la red son puntos de paso (intersecciones, tramos) y cada
uno es dueño de una DelayQueue. Las aristas indican a qué nodos puede
pasar un vehículo al salir de la cabeza de una cola.
"""

import json
import logging
import networkx as nx
from pathlib import Path
from typing import Dict, List, Tuple, Optional
import matplotlib.pyplot as plt

from .delay_queue import DelayQueue
from src.utils.config import SimulatorConfig

logger = logging.getLogger(__name__)


class RoadNode:
    """
    Representa un nodo de la red vial.

    El nodo tiene un retardo fijo: la cantidad de ticks que un vehículo
    permanece en su cola antes de poder salir.
    """

    def __init__(self, node_id: int, name: str = "",
                 delay: int = SimulatorConfig.DEFAULT_NODE_DELAY,
                 coordinates: Tuple[float, float] = (0.0, 0.0)):
        """
        Inicializa un nodo.

        Args:
            node_id: Identificador único del nodo
            name: Nombre descriptivo (ej: "Av. Brasil y Rambla")
            delay: Retardo del nodo en ticks (>= 0)
            coordinates: Tupla (latitud, longitud), usada solo para dibujar
        """
        if delay < 0:
            raise ValueError(f"Retardo de nodo negativo: {delay}")

        self.id = node_id
        self.name = name or f"Nodo {node_id}"
        self.delay = delay
        self.lat, self.lon = coordinates

        self.queue = DelayQueue()

    def current_delay(self) -> int:
        """Retardo que se asigna a un vehículo que entra ahora al nodo."""
        return self.delay

    def __str__(self) -> str:
        return f"RoadNode({self.id}: {self.name})"

    def __repr__(self) -> str:
        return (f"RoadNode(id={self.id}, name='{self.name}', delay={self.delay}, "
                f"queue={self.queue!r})")


class TrafficNetwork:
    """
    Representa la red vial completa como un grafo dirigido G = (V, E).

    Encapsula la topología (networkx) y los nodos con sus colas.
    """

    def __init__(self, network_file: Optional[str] = None):
        """
        Inicializa la red vial.

        Args:
            network_file: Ruta al archivo JSON con datos de la red.
                          Si es None, crea una red vacía.
        """
        self.graph = nx.DiGraph()
        self.nodes: Dict[int, RoadNode] = {}

        self.network_name = ""
        self.description = ""

        if network_file:
            self.load_from_file(network_file)

    def load_from_file(self, filepath: str):
        """
        Carga la red desde un archivo JSON.

        Formato: {"network_name": ..., "nodes": [{"id", "name", "delay",
        "coordinates": {"lat", "lon"}}], "edges": [{"from_id", "to_id"}]}

        Raises:
            FileNotFoundError: Si el archivo no existe
            json.JSONDecodeError: Si el archivo no es JSON válido
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"No se encontró el archivo: {filepath}")

        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        self.network_name = data.get('network_name', '')
        self.description = data.get('description', '')

        for node_data in data.get('nodes', []):
            coords = node_data.get('coordinates', {})
            self.add_node(
                node_id=node_data['id'],
                name=node_data.get('name', ''),
                delay=node_data.get('delay', SimulatorConfig.DEFAULT_NODE_DELAY),
                coordinates=(coords.get('lat', 0.0), coords.get('lon', 0.0))
            )

        for edge_data in data.get('edges', []):
            self.add_segment(edge_data['from_id'], edge_data['to_id'])

        logger.info("Red cargada: %s (%d nodos, %d aristas)",
                    self.network_name, len(self.nodes), self.graph.number_of_edges())

    def add_node(self, node_id: int, name: str = "",
                 delay: int = SimulatorConfig.DEFAULT_NODE_DELAY,
                 coordinates: Tuple[float, float] = (0.0, 0.0)) -> RoadNode:
        """
        Agrega un nodo a la red.

        Raises:
            ValueError: Si ya existe un nodo con ese ID
        """
        if node_id in self.nodes:
            raise ValueError(f"Nodo duplicado: {node_id}")

        node = RoadNode(node_id, name, delay, coordinates)
        self.nodes[node_id] = node

        self.graph.add_node(
            node_id,
            name=node.name,
            lat=node.lat,
            lon=node.lon,
            delay=delay,
            road_node=node
        )
        return node

    def add_segment(self, from_id: int, to_id: int):
        """
        Agrega una conexión dirigida entre dos nodos existentes.

        Raises:
            KeyError: Si alguno de los nodos no existe
        """
        for node_id in (from_id, to_id):
            if node_id not in self.nodes:
                raise KeyError(f"Nodo inexistente: {node_id}")

        # El peso es el retardo del nodo destino, para rutas más cortas
        self.graph.add_edge(from_id, to_id, weight=self.nodes[to_id].delay)

    def get_node(self, node_id: int) -> Optional[RoadNode]:
        """Retorna el nodo con el ID dado."""
        return self.nodes.get(node_id)

    def get_all_node_ids(self) -> List[int]:
        return list(self.nodes.keys())

    def has_segment(self, from_id: int, to_id: int) -> bool:
        return self.graph.has_edge(from_id, to_id)

    def get_neighbors(self, node_id: int) -> List[int]:
        """Retorna los nodos alcanzables directamente desde `node_id`."""
        return list(self.graph.successors(node_id))

    def get_shortest_path(self, origin: int, destination: int) -> Optional[List[int]]:
        """
        Calcula la ruta de menor retardo total entre dos nodos.

        Returns:
            Lista de IDs de nodos formando la ruta, o None si no hay ruta
        """
        try:
            return nx.shortest_path(self.graph, origin, destination, weight='weight')
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return None

    def total_active_vehicles(self) -> int:
        """Vehículos esperando en todas las colas (sin estacionados)."""
        return sum(node.queue.size() for node in self.nodes.values())

    def total_parked_vehicles(self) -> int:
        return sum(node.queue.parked_count() for node in self.nodes.values())

    def is_empty(self) -> bool:
        """True si ninguna cola de la red tiene vehículos esperando."""
        return all(node.queue.is_empty() for node in self.nodes.values())

    def get_network_stats(self) -> Dict:
        """
        Calcula estadísticas de la red.

        Returns:
            dict: Diccionario con estadísticas de la red
        """
        delays = [node.delay for node in self.nodes.values()]
        return {
            'num_nodes': len(self.nodes),
            'num_segments': self.graph.number_of_edges(),
            'avg_node_delay': sum(delays) / len(delays) if delays else 0,
            'is_connected': nx.is_weakly_connected(self.graph) if self.nodes else False,
            'active_vehicles': self.total_active_vehicles(),
            'parked_vehicles': self.total_parked_vehicles(),
            'network_name': self.network_name
        }

    def visualize(self, show_labels: bool = True, figsize: Tuple[int, int] = (12, 8)):
        """
        Visualiza la red, coloreando cada nodo según su cola actual.

        Args:
            show_labels: Si True, muestra nombres de nodos
            figsize: Tamaño de la figura
        """
        plt.figure(figsize=figsize)

        pos = {node_id: (data['lon'], data['lat'])
               for node_id, data in self.graph.nodes(data=True)}

        # Nodos sin coordenadas se ubican con un layout automático
        if len(set(pos.values())) < len(pos):
            pos = nx.spring_layout(self.graph, seed=42)

        node_sizes = [300 + 100 * self.nodes[n].queue.size() for n in self.graph.nodes()]
        node_colors = ['#FF6B6B' if not self.nodes[n].queue.is_empty() else '#4ECDC4'
                       for n in self.graph.nodes()]

        nx.draw_networkx_nodes(self.graph, pos, node_color=node_colors,
                               node_size=node_sizes, alpha=0.9)
        nx.draw_networkx_edges(self.graph, pos, edge_color='gray',
                               width=2, alpha=0.6, arrows=True,
                               arrowsize=20, arrowstyle='->')

        if show_labels:
            labels = {n: self.nodes[n].name for n in self.graph.nodes()}
            nx.draw_networkx_labels(self.graph, pos, labels, font_size=8)

        plt.title(self.network_name or "Red vial", fontsize=14, fontweight='bold')
        plt.axis('off')
        plt.tight_layout()

        return plt.gcf()

    def __str__(self) -> str:
        return f"TrafficNetwork('{self.network_name}', {len(self.nodes)} nodes)"

    def __repr__(self) -> str:
        return (f"TrafficNetwork(name='{self.network_name}', "
                f"nodes={len(self.nodes)}, segments={self.graph.number_of_edges()})")
