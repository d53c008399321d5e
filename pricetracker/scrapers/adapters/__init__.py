"""Site-specific extractors."""

from .sporting import SportingExtractor
from .tiendariver import TiendaRiverExtractor
from .dia import DiaExtractor
from .coto import CotoExtractor
from .solofutbol import SoloFutbolExtractor

__all__ = [
    "SportingExtractor",
    "TiendaRiverExtractor",
    "DiaExtractor",
    "CotoExtractor",
    "SoloFutbolExtractor",
]
