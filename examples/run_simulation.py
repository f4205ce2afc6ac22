"""
Script de ejemplo: simulación por ticks en el corredor de Av. Brasil.

Carga la red de ejemplo, registra un generador de tráfico en cada sentido
y un cierre temporal de un nodo, y muestra las métricas finales.
"""

import sys
from pathlib import Path

# Agregar src al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.simulator import TrafficNetwork, TrafficSimulator
from src.agents import TickLimitAgent, TrafficSourceAgent, NodeClosureAgent
from src.utils.config import SAMPLE_NETWORK_FILE, setup_logging
from src.utils.metrics import MetricsCalculator


def run_corridor_simulation(with_closure: bool = False):
    """
    Ejecuta la simulación del corredor.

    Args:
        with_closure: Si True, cierra el nodo 3 entre los ticks 20 y 40

    Returns:
        tuple: (métricas finales, simulador)
    """
    network = TrafficNetwork(str(SAMPLE_NETWORK_FILE))
    simulator = TrafficSimulator(network)

    simulator.register_agent(TrafficSourceAgent(), "origin=1;destination=5;rate=0.4;seed=7;until=60")
    simulator.register_agent(TrafficSourceAgent(), "origin=5;destination=1;rate=0.3;seed=11;until=60")
    simulator.register_agent(TickLimitAgent(), "ticks=80")

    if with_closure:
        simulator.register_agent(NodeClosureAgent(), "node=3;start=20;end=40")

    metrics = simulator.run(max_ticks=200)
    return metrics, simulator


if __name__ == "__main__":
    setup_logging()

    for label, closure in [("SIN CIERRE", False), ("CON CIERRE DEL NODO 3", True)]:
        print("\n" + "="*70)
        print(f"SIMULACIÓN {label}")
        print("="*70)

        metrics, simulator = run_corridor_simulation(with_closure=closure)
        for key, value in metrics.items():
            if isinstance(value, float):
                print(f"  {key}: {value:.2f}")
            else:
                print(f"  {key}: {value}")

        print("\n  Nodos con más ocupación:")
        busiest = MetricsCalculator.busiest_nodes(simulator.metrics_history)
        for node_col, occupancy in busiest.items():
            print(f"    {node_col}: {occupancy:.2f}")
