"""
Sistema de métricas y análisis de resultados.

Este módulo proporciona funciones para calcular y analizar métricas
de una simulación por ticks: ocupación de colas, duración de viajes y
rendimiento de la red.
"""

from typing import List, Dict
import numpy as np
import pandas as pd


class MetricsCalculator:
    """
    Calculadora de métricas para simulaciones por ticks.

    Proporciona métodos estáticos sobre el historial por tick que
    registra el simulador y sobre las listas de vehículos.
    """

    @staticmethod
    def average_travel_ticks(vehicles: List) -> float:
        """
        Calcula la duración media de viaje en ticks.

        Args:
            vehicles: Lista de vehículos que terminaron su viaje

        Returns:
            float: Ticks promedio entre ingreso y fin del viaje
        """
        if not vehicles:
            return 0.0

        durations = [v.get_travel_ticks(v.finish_tick) for v in vehicles]
        return float(np.mean(durations))

    @staticmethod
    def percentile_travel_ticks(vehicles: List, percentile: float = 95) -> float:
        """
        Calcula un percentil de la duración de viaje.

        Args:
            vehicles: Lista de vehículos que terminaron su viaje
            percentile: Percentil a calcular (0-100)
        """
        if not vehicles:
            return 0.0

        durations = [v.get_travel_ticks(v.finish_tick) for v in vehicles]
        return float(np.percentile(durations, percentile))

    @staticmethod
    def throughput(vehicles: List, total_ticks: int) -> float:
        """
        Vehículos que llegaron a destino por tick.

        Args:
            vehicles: Vehículos que llegaron a destino
            total_ticks: Duración de la simulación en ticks
        """
        if total_ticks <= 0:
            return 0.0
        return len(vehicles) / total_ticks

    @staticmethod
    def average_active_vehicles(history: List[Dict]) -> float:
        """Promedio de vehículos en colas a lo largo del historial."""
        if not history:
            return 0.0
        return float(np.mean([h['active_vehicles'] for h in history]))

    @staticmethod
    def max_active_vehicles(history: List[Dict]) -> int:
        """Máximo de vehículos simultáneos en colas."""
        if not history:
            return 0
        return int(np.max([h['active_vehicles'] for h in history]))

    @staticmethod
    def history_to_dataframe(history: List[Dict]) -> pd.DataFrame:
        """
        Convierte el historial por tick en un DataFrame indexado por tick.

        El diccionario 'queue_sizes' se expande en una columna por nodo
        ("node_<id>").

        Args:
            history: Lista de registros del simulador

        Returns:
            pd.DataFrame: Una fila por tick
        """
        if not history:
            return pd.DataFrame()

        rows = []
        for record in history:
            row = {k: v for k, v in record.items() if k != 'queue_sizes'}
            for node_id, size in record.get('queue_sizes', {}).items():
                row[f'node_{node_id}'] = size
            rows.append(row)

        return pd.DataFrame(rows).set_index('tick')

    @staticmethod
    def vehicles_to_dataframe(vehicles: List) -> pd.DataFrame:
        """DataFrame con las estadísticas de cada vehículo."""
        return pd.DataFrame([v.get_statistics() for v in vehicles])

    @staticmethod
    def busiest_nodes(history: List[Dict], top: int = 3) -> pd.Series:
        """
        Nodos con mayor ocupación media de cola.

        Returns:
            pd.Series: Ocupación media por nodo, de mayor a menor
        """
        df = MetricsCalculator.history_to_dataframe(history)
        node_cols = [c for c in df.columns if c.startswith('node_')]
        if not node_cols:
            return pd.Series(dtype=float)
        return df[node_cols].mean().sort_values(ascending=False).head(top)
