"""Tests for the source type registry."""

import pytest

from pricetracker.core.exceptions import UnknownSourceType
from pricetracker.scrapers.adapters import CotoExtractor, DiaExtractor, SportingExtractor
from pricetracker.scrapers.registry import ScraperRegistry, create_default_registry


class TestScraperRegistry:
    def test_default_registry_knows_every_site(self):
        registry = create_default_registry()
        assert sorted(registry.registered_types()) == [
            "coto",
            "dia",
            "solofutbol",
            "sporting",
            "tiendariver",
        ]

    def test_resolve_returns_fresh_extractor(self):
        registry = create_default_registry()

        first = registry.resolve("coto")
        second = registry.resolve("coto")

        assert isinstance(first, CotoExtractor)
        assert first is not second

    def test_unknown_type_raises(self):
        registry = create_default_registry()

        with pytest.raises(UnknownSourceType) as exc_info:
            registry.resolve("mercadolibre")

        assert exc_info.value.type_tag == "mercadolibre"
        assert "mercadolibre" in exc_info.value.message

    def test_register_rejects_non_extractors(self):
        registry = ScraperRegistry()
        with pytest.raises(ValueError):
            registry.register("bogus", dict)

    def test_registries_are_independent(self):
        registry = ScraperRegistry()
        registry.register("dia", DiaExtractor)

        assert registry.registered_types() == ["dia"]
        with pytest.raises(UnknownSourceType):
            registry.resolve("sporting")

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://www.sporting.com.ar/botin/p", "sporting"),
            ("https://tiendariver.com.ar/camiseta", "tiendariver"),
            ("https://diaonline.supermercadosdia.com.ar/leche/p", "dia"),
            ("https://www.cotodigital3.com.ar/sitios/cdigi/producto", "coto"),
            ("https://www.solofutbol.com/pelota.html", "solofutbol"),
            ("https://www.mercadolibre.com.ar/item", None),
        ],
    )
    def test_detect_type(self, url, expected):
        assert create_default_registry().detect_type(url) == expected

    def test_reregistering_replaces_extractor(self):
        registry = ScraperRegistry()
        registry.register("sitio", DiaExtractor)
        registry.register("sitio", SportingExtractor)
        assert isinstance(registry.resolve("sitio"), SportingExtractor)
