"""Registry mapping source type tags to extractor classes."""

from typing import Dict, List, Optional, Type

import structlog

from pricetracker.core.exceptions import UnknownSourceType
from pricetracker.scrapers.base import BaseExtractor


logger = structlog.get_logger(__name__)


class ScraperRegistry:
    """Static dispatch table from a source ``type`` to its extractor.

    Registries are plain objects built at startup (see
    ``create_default_registry``); nothing is discovered dynamically.
    """

    def __init__(self):
        self._extractors: Dict[str, Type[BaseExtractor]] = {}

    def register(self, type_tag: str, extractor_class: Type[BaseExtractor]) -> None:
        """Register an extractor class for a type tag.

        Args:
            type_tag: Source type (e.g., "dia")
            extractor_class: Extractor class (must inherit from BaseExtractor)
        """
        if not isinstance(extractor_class, type) or not issubclass(extractor_class, BaseExtractor):
            raise ValueError(f"Extractor class must inherit from BaseExtractor: {extractor_class}")

        self._extractors[type_tag] = extractor_class
        logger.debug("extractor_registered", type_tag=type_tag, extractor=extractor_class.__name__)

    def resolve(self, type_tag: str) -> BaseExtractor:
        """Create the extractor registered for ``type_tag``.

        Raises:
            UnknownSourceType: If no extractor is registered for the tag
        """
        extractor_class = self._extractors.get(type_tag)
        if extractor_class is None:
            raise UnknownSourceType(type_tag)
        return extractor_class()

    def detect_type(self, url: str) -> Optional[str]:
        """Guess the type tag of a product URL from its domain."""
        for type_tag, extractor_class in self._extractors.items():
            if extractor_class().is_valid_url(url):
                return type_tag
        return None

    def registered_types(self) -> List[str]:
        return list(self._extractors.keys())


def create_default_registry() -> ScraperRegistry:
    """Build a registry with every supported site."""
    from pricetracker.scrapers.adapters import (
        CotoExtractor,
        DiaExtractor,
        SoloFutbolExtractor,
        SportingExtractor,
        TiendaRiverExtractor,
    )

    registry = ScraperRegistry()
    for type_tag, extractor_class in (
        ("sporting", SportingExtractor),
        ("tiendariver", TiendaRiverExtractor),
        ("dia", DiaExtractor),
        ("coto", CotoExtractor),
        ("solofutbol", SoloFutbolExtractor),
    ):
        registry.register(type_tag, extractor_class)

    logger.info("extractors_registered", types=registry.registered_types())
    return registry
