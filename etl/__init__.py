"""
ETL package - envío automático de jobs de ingesta.

Exporta el watcher para que otros módulos puedan reutilizarlo.
"""
from etl.watcher import ETLWatcher

__all__ = ["ETLWatcher"]
