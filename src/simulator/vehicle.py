"""
Modelo de vehículo para la simulación por ticks.

El vehículo es un identificador opaco para las colas de los nodos: se
compara por identidad y solo conoce su ruta (lista de nodos) y algunas
estadísticas de su viaje.
"""

from typing import List, Optional
from enum import Enum


class VehicleState(Enum):
    """Estados posibles de un vehículo."""
    QUEUED = "queued"      # Esperando en la cola de algún nodo
    ARRIVED = "arrived"    # Llegó a destino
    STOPPED = "stopped"    # Retirado antes de llegar (ruta cortada, nodo cerrado)


class Vehicle:
    """
    Representa un vehículo individual en la simulación.

    Dos vehículos con la misma ruta son distintos: la igualdad y el hash
    son los de identidad de objeto.
    """

    # Contador global para IDs únicos
    _next_id = 1

    def __init__(self, route: List[int], spawn_tick: int = 0):
        """
        Inicializa un vehículo.

        Args:
            route: Lista de IDs de nodos que forman la ruta (al menos uno)
            spawn_tick: Tick en que el vehículo entra a la red
        """
        if not route:
            raise ValueError("La ruta debe contener al menos un nodo")

        self.id = Vehicle._next_id
        Vehicle._next_id += 1

        self.route = list(route)
        self.route_index = 0  # Posición actual dentro de la ruta

        self.state = VehicleState.QUEUED
        self.spawn_tick = spawn_tick
        self.finish_tick: Optional[int] = None

        # Nodos efectivamente visitados
        self.visited: List[int] = [self.route[0]]

    @property
    def origin(self) -> int:
        return self.route[0]

    @property
    def destination(self) -> int:
        return self.route[-1]

    @property
    def current_node(self) -> int:
        """ID del nodo en cuya cola está (o estuvo por última vez) el vehículo."""
        return self.route[self.route_index]

    def next_node(self) -> Optional[int]:
        """Retorna el siguiente nodo de la ruta, o None si ya está en el destino."""
        if self.route_index + 1 >= len(self.route):
            return None
        return self.route[self.route_index + 1]

    def advance(self) -> int:
        """
        Avanza al siguiente nodo de la ruta.

        Returns:
            int: ID del nuevo nodo actual

        Raises:
            RuntimeError: Si el vehículo ya está en su destino
        """
        next_id = self.next_node()
        if next_id is None:
            raise RuntimeError(f"{self} ya está en su destino")
        self.route_index += 1
        self.visited.append(next_id)
        return next_id

    def finish(self, state: VehicleState, tick: int):
        """Marca el fin del viaje con el estado dado."""
        self.state = state
        self.finish_tick = tick

    def is_finished(self) -> bool:
        return self.state != VehicleState.QUEUED

    def get_travel_ticks(self, current_tick: int) -> int:
        """
        Calcula la duración del viaje en ticks.

        Args:
            current_tick: Tick actual (se usa si el viaje no terminó)
        """
        end = self.finish_tick if self.finish_tick is not None else current_tick
        return end - self.spawn_tick

    def get_statistics(self) -> dict:
        """
        Retorna un diccionario con las estadísticas del vehículo.

        Returns:
            dict: Estadísticas del viaje
        """
        return {
            'vehicle_id': self.id,
            'origin': self.origin,
            'destination': self.destination,
            'spawn_tick': self.spawn_tick,
            'finish_tick': self.finish_tick,
            'travel_ticks': self.get_travel_ticks(self.finish_tick or self.spawn_tick),
            'nodes_visited': len(self.visited),
            'state': self.state.value,
        }

    def __str__(self) -> str:
        return f"Vehicle(#{self.id}, {self.origin}→{self.destination})"

    def __repr__(self) -> str:
        return (f"Vehicle(id={self.id}, route={self.origin}→{self.destination}, "
                f"at={self.current_node}, state={self.state.value})")
