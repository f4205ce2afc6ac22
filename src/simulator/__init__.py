"""
Simulador de tráfico por ticks.

Este módulo contiene el motor de simulación que modela:
- Red vial como grafo dirigido con una cola de retardos por nodo
- Avance de vehículos por las colas en cada tick
- Ejecución de agentes enchufables
"""

from .delay_queue import (
    DelayQueue, DelayQueueError, InvalidDelay, DuplicateVehicle, VehicleNotFound
)
from .vehicle import Vehicle, VehicleState
from .traffic_network import TrafficNetwork, RoadNode
from .traffic_simulator import TrafficSimulator

__all__ = [
    'DelayQueue',
    'DelayQueueError',
    'InvalidDelay',
    'DuplicateVehicle',
    'VehicleNotFound',
    'Vehicle',
    'VehicleState',
    'TrafficNetwork',
    'RoadNode',
    'TrafficSimulator'
]
