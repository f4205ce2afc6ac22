"""
Cola de vehículos con retardo para un nodo de la red.

Cada nodo mantiene sus vehículos agrupados por retardo restante: los
baldes 0 y 1 contienen los que llegan a la cabeza en el próximo tick. En cada
tick los baldes se desplazan una posición hacia adelante y se devuelve
el conjunto de vehículos que alcanzó la cabeza.
"""

import logging
import numbers
from typing import Dict, FrozenSet, List, Optional, Set

logger = logging.getLogger(__name__)


class DelayQueueError(ValueError):
    """Error base de las operaciones sobre una DelayQueue."""


class InvalidDelay(DelayQueueError):
    """Se intentó encolar con un retardo negativo o no entero."""


class DuplicateVehicle(DelayQueueError):
    """El vehículo ya está en la cola (en un balde o estacionado)."""


class VehicleNotFound(DelayQueueError):
    """El vehículo no está en la cola ni acaba de llegar a la cabeza."""


class DelayQueue:
    """
    Cola de retardos de un nodo.

    Los vehículos activos viven en `_buckets` (retardo -> conjunto) y los
    estacionados en un conjunto aparte. Un vehículo está como máximo en
    uno de esos contenedores.
    """

    def __init__(self):
        """Inicializa una cola vacía con el balde 0 presente."""
        self._buckets: Dict[int, Set] = {0: set()}
        self._parked: Set = set()

        # Último conjunto entregado por tick(), aún sin reencolar ni estacionar
        self._last_arrived: Set = set()

    def enqueue(self, vehicle, delay: int):
        """
        Agrega `vehicle` al balde correspondiente a `delay`.

        Args:
            vehicle: Vehículo a encolar
            delay: Ticks que esperará antes de llegar a la cabeza (>= 0)

        Raises:
            InvalidDelay: Si el retardo es negativo o no es entero
            DuplicateVehicle: Si el vehículo ya está en la cola
        """
        if isinstance(delay, bool) or not isinstance(delay, numbers.Integral) or delay < 0:
            raise InvalidDelay(f"Retardo inválido: {delay!r} (debe ser entero >= 0)")

        if vehicle in self._parked or self._find_bucket(vehicle) is not None:
            raise DuplicateVehicle(f"{vehicle} ya está en la cola")

        self._last_arrived.discard(vehicle)
        self._buckets.setdefault(int(delay), set()).add(vehicle)

    def tick(self) -> Set:
        """
        Avanza un paso de tiempo.

        Un vehículo encolado con retardo d sale en el tick número d; con
        retardo 0 sale en el próximo tick, igual que con retardo 1.

        Returns:
            set: Vehículos que llegaron a la cabeza de la cola. El llamador
                 decide si siguen su ruta o se estacionan.
        """
        arrived = self._buckets.pop(0, set())
        arrived |= self._buckets.pop(1, set())

        # Orden ascendente: cada clave k pasa a k-1, que ya quedó libre
        for key in sorted(self._buckets):
            self._buckets[key - 1] = self._buckets.pop(key)

        self._buckets.setdefault(0, set())

        # Los baldes vacíos no aportan nada; el 0 se conserva siempre
        for key in [k for k, v in self._buckets.items() if k > 0 and not v]:
            del self._buckets[key]

        self._last_arrived = set(arrived)
        return arrived

    def park(self, vehicle):
        """
        Retira `vehicle` de circulación.

        Se acepta un vehículo que esté en algún balde o que haya sido
        entregado por el último tick(). Estacionar dos veces no tiene efecto.

        Raises:
            VehicleNotFound: Si el vehículo no pertenece a esta cola
        """
        if vehicle in self._parked:
            return

        key = self._find_bucket(vehicle)
        if key is not None:
            self._buckets[key].remove(vehicle)
        elif vehicle in self._last_arrived:
            self._last_arrived.remove(vehicle)
        else:
            raise VehicleNotFound(f"{vehicle} no está en la cola")

        self._parked.add(vehicle)
        logger.debug("Estacionado %s", vehicle)

    def release_arrived(self):
        """
        Olvida el conjunto entregado por el último tick().

        Después de esto solo se pueden estacionar vehículos que estén en
        algún balde. El simulador lo llama al terminar de enrutar las llegadas.
        """
        self._last_arrived = set()

    def is_empty(self) -> bool:
        """True si no hay vehículos esperando (los estacionados no cuentan)."""
        return all(not bucket for bucket in self._buckets.values())

    def size(self) -> int:
        """Número de vehículos activos; los estacionados se ignoran."""
        return sum(len(bucket) for bucket in self._buckets.values())

    def vehicles(self) -> List:
        """Lista de vehículos activos, desde la cabeza hacia el final."""
        return [v for key in sorted(self._buckets) for v in self._buckets[key]]

    def delay_of(self, vehicle) -> Optional[int]:
        """Retardo restante de `vehicle`, o None si no está activo."""
        return self._find_bucket(vehicle)

    @property
    def parked(self) -> FrozenSet:
        """Vehículos estacionados en este nodo."""
        return frozenset(self._parked)

    def parked_count(self) -> int:
        return len(self._parked)

    def snapshot(self) -> Dict[int, List]:
        """
        Retorna el contenido activo de la cola para reportes.

        Returns:
            dict: {retardo: [ids de vehículo ordenados]} sin baldes vacíos
        """
        return {
            key: sorted(getattr(v, 'id', id(v)) for v in bucket)
            for key, bucket in sorted(self._buckets.items())
            if bucket
        }

    def _find_bucket(self, vehicle) -> Optional[int]:
        for key, bucket in self._buckets.items():
            if vehicle in bucket:
                return key
        return None

    def __contains__(self, vehicle) -> bool:
        return self._find_bucket(vehicle) is not None

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"DelayQueue(active={self.size()}, parked={len(self._parked)})"
