from app.extraction.base import BaseExtractionStrategy
from app.extraction.factory import StrategyFactory
from app.extraction.orchestrator import ExtractionOrchestrator, StrategyCatalog

__all__ = [
    "BaseExtractionStrategy",
    "ExtractionOrchestrator",
    "StrategyCatalog",
    "StrategyFactory",
]
