"""Test the construction catalog."""
import dataclasses

import pytest
from outpost.core.bunch import Bunch, ResourceKind
from outpost.core.catalog import CATALOG, all_specs, construction_kinds, get_spec
from outpost.core.errors import InvalidActionError, UnknownConstructionError


class TestCatalog:
    """Tests for catalog lookups."""

    def test_catalog_lists_all_kinds(self):
        assert construction_kinds() == [
            "SolarField", "HydroponicsFarm", "Mine", "FuelRefinery", "FusionReactor",
        ]
        assert len(all_specs()) == len(CATALOG)

    def test_solar_field(self):
        spec = get_spec("SolarField")
        assert spec.request == Bunch()
        assert spec.produce == Bunch.single(ResourceKind.POWER, 3)
        assert spec.cooldown == 1
        assert spec.cost == Bunch.single(ResourceKind.MATERIAL, 2)

    def test_hydroponics_farm(self):
        spec = get_spec("HydroponicsFarm")
        assert spec.request == Bunch.single(ResourceKind.POWER, 2)
        assert spec.produce == Bunch.single(ResourceKind.FOOD, 2)

    def test_multi_resource_request(self):
        spec = get_spec("FuelRefinery")
        assert spec.request == Bunch({ResourceKind.POWER: 2, ResourceKind.MATERIAL: 1})

    def test_every_kind_has_positive_cooldown(self):
        for spec in all_specs():
            assert spec.cooldown >= 1, spec.kind

    def test_unknown_kind(self):
        with pytest.raises(UnknownConstructionError):
            get_spec("Teleporter")

    def test_unknown_kind_is_a_rejected_action_and_key_error(self):
        with pytest.raises(InvalidActionError):
            get_spec("Teleporter")
        with pytest.raises(KeyError):
            get_spec("Teleporter")

    def test_specs_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            get_spec("Mine").cooldown = 5
