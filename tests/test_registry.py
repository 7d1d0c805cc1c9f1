import threading

import pytest

from py_unitconverter.exceptions import AmbiguousUnitError, BadUnitError, UnitNotFoundError
from py_unitconverter.registry import UnitRegistry
from py_unitconverter.unit import Measurement, UnitOfMeasure
from py_unitconverter.units import DEFAULT_UNITS, UNITS_TABLE


@pytest.fixture
def furlong():
    return UnitOfMeasure("furlong", "fur", Measurement.LENGTH, 1 / 201.168, base="m")


class TestRegistryContents:

    def test_empty(self):
        registry = UnitRegistry()
        assert len(registry) == 0
        assert registry.list_units() == ()
        assert registry.list_measurements() == []

    def test_default_catalog(self, registry):
        assert len(registry) == len(DEFAULT_UNITS)
        assert list(registry) == list(DEFAULT_UNITS)
        assert "length.km" in registry
        assert UNITS_TABLE["length.km"] in registry
        assert "km" not in registry
        assert 42 not in registry

    def test_registry_keys_are_unique(self):
        assert len({u.registry_key for u in DEFAULT_UNITS}) == len(DEFAULT_UNITS)

    def test_every_category_has_one_base(self, registry):
        for unit_of in registry.list_measurements():
            bases = registry.list_units(unit_of, lambda u: u.is_base)
            assert len(bases) == 1
            assert registry.get_base_unit(unit_of) is bases[0]
            assert bases[0].units_per_base == 1

    def test_every_unit_resolves_its_base(self, registry):
        for unit in registry:
            assert unit.get_base(registry) is registry.get_base_unit(unit.unit_of)

    def test_list_measurements_order(self):
        registry = UnitRegistry([UNITS_TABLE["time.s"], UNITS_TABLE["length.m"], UNITS_TABLE["time.h"]])
        assert registry.list_measurements() == ["time", "length"]

    def test_list_units_filters(self, registry):
        lengths = registry.list_units(Measurement.LENGTH)
        assert lengths[0].symbol == "m"
        assert all(u.unit_of == Measurement.LENGTH for u in lengths)
        si_lengths = registry.list_units(Measurement.LENGTH, UnitOfMeasure.is_si_unit)
        assert "ft" not in {u.symbol for u in si_lengths}
        assert "km" in {u.symbol for u in si_lengths}

    def test_repr(self, registry):
        assert repr(registry) == f"<UnitRegistry: {len(DEFAULT_UNITS)} units, 14 measurements>"


class TestRegistryLookup:

    def test_get(self, registry):
        assert registry.get("length.km") is UNITS_TABLE["length.km"]
        assert registry.get("length.nope") is None
        assert registry.get("length.nope", 0) == 0

    def test_get_unit(self, registry):
        assert registry.get_unit("mass.kg").name == "kilogram"
        with pytest.raises(UnitNotFoundError):
            registry.get_unit("mass.nope")
        with pytest.raises(UnitNotFoundError):
            registry.get_unit(["unhashable"])  # type: ignore[arg-type]

    def test_is_unit_registered(self, registry):
        assert registry.is_unit_registered("time.min")
        assert not registry.is_unit_registered("min")

    def test_symbol_lookup(self, registry):
        assert registry.get_unit_of_measure_for("km").registry_key == "length.km"
        assert registry.get_unit_of_measure_for("km", Measurement.LENGTH).name == "kilometre"

    def test_symbol_is_case_sensitive(self, registry):
        assert registry.get_unit_of_measure_for("MJ").name == "megajoule"
        assert registry.get_unit_of_measure_for("mJ").name == "millijoule"

    def test_unknown_symbol(self, registry):
        with pytest.raises(UnitNotFoundError):
            registry.get_unit_of_measure_for("parsec")
        with pytest.raises(UnitNotFoundError):
            registry.get_unit_of_measure_for("km", Measurement.MASS)
        with pytest.raises(UnitNotFoundError):
            registry.get_unit_of_measure_for(None)  # type: ignore[arg-type]

    def test_ambiguous_symbol(self, registry):
        with pytest.raises(AmbiguousUnitError) as excinfo:
            registry.get_unit_of_measure_for("a")
        assert excinfo.value.symbol == "a"
        assert set(excinfo.value.candidates) == {"area.a", "time.a"}

    @pytest.mark.parametrize("unit_of, name", [("area", "are"), ("time", "year")])
    def test_ambiguous_symbol_with_category(self, registry, unit_of, name):
        assert registry.get_unit_of_measure_for("a", unit_of).name == name

    def test_missing_base(self):
        registry = UnitRegistry([UNITS_TABLE["length.km"]])
        with pytest.raises(UnitNotFoundError):
            registry.get_base_unit(Measurement.LENGTH)


class TestRegistryMutation:

    def test_add_unit(self, registry, furlong):
        registry.add_unit(furlong)
        assert registry.get_unit_of_measure_for("fur") is furlong
        assert registry.list_units(Measurement.LENGTH)[-1] is furlong

    def test_add_unit_overwrites(self, registry, caplog):
        heavy_gram = UNITS_TABLE["mass.g"].replace(units_per_base=500)
        with caplog.at_level("WARNING", logger="py_uconv"):
            registry.add_unit(heavy_gram)
        assert registry.get_unit("mass.g") is heavy_gram
        assert len(registry) == len(DEFAULT_UNITS)
        assert "Overwriting registered unit mass.g" in caplog.text

    def test_add_invalid_unit(self, registry):
        with pytest.raises(BadUnitError):
            registry.add_unit("km")  # type: ignore[arg-type]

    def test_add_units_is_atomic(self, registry, furlong):
        with pytest.raises(BadUnitError):
            registry.add_units([furlong, object()])  # type: ignore[list-item]
        assert "length.fur" not in registry

    def test_add_units(self, furlong):
        registry = UnitRegistry()
        registry.add_units([UNITS_TABLE["length.m"], furlong])
        assert [u.symbol for u in registry] == ["m", "fur"]

    def test_load_units_replaces_catalog(self, registry, furlong):
        registry.load_units([furlong])
        assert list(registry) == [furlong]

    def test_remove_unit_by_key(self, registry):
        removed = registry.remove_unit("length.km")
        assert removed is UNITS_TABLE["length.km"]
        assert "length.km" not in registry
        assert len(registry) == len(DEFAULT_UNITS) - 1

    def test_remove_unit_by_symbol(self, registry):
        assert registry.remove_unit("km").registry_key == "length.km"

    def test_remove_missing_unit(self, registry):
        with pytest.raises(UnitNotFoundError):
            registry.remove_unit("parsec")

    def test_remove_ambiguous_symbol(self, registry):
        with pytest.raises(AmbiguousUnitError):
            registry.remove_unit("a")
        registry.remove_unit("time.a")
        assert registry.get_unit_of_measure_for("a").name == "are"

    def test_replace_unit(self, registry):
        new = registry.replace_unit("km", name="klick")
        assert registry.get_unit("length.km") is new
        assert new.name == "klick"
        assert new.units_per_base == UNITS_TABLE["length.km"].units_per_base

    def test_replace_unit_symbol_drops_old_key(self, registry):
        registry.replace_unit("length.km", symbol="KM")
        assert "length.km" not in registry
        assert registry.get_unit("length.KM").name == "kilometre"

    def test_replace_unit_is_validated(self, registry):
        with pytest.raises(BadUnitError):
            registry.replace_unit("km", units_per_base=-1)
        assert registry.get_unit("length.km") is UNITS_TABLE["length.km"]

    def test_deprecated_aliases(self, furlong):
        registry = UnitRegistry()
        with pytest.deprecated_call():
            registry.register_unit(furlong)
        with pytest.deprecated_call():
            registry.register_units([UNITS_TABLE["length.m"]])
        with pytest.deprecated_call():
            assert registry.unregister_unit("fur") is furlong
        assert list(registry) == [UNITS_TABLE["length.m"]]


class TestRegistryCopy:

    def test_copy_is_independent(self, registry, furlong):
        clone = registry.copy()
        clone.add_unit(furlong)
        clone.remove_unit("length.km")
        assert "length.fur" not in registry
        assert "length.km" in registry
        assert list(clone)[0] is list(registry)[0]

    def test_iteration_snapshot(self, registry, furlong):
        seen = []
        for unit in registry:
            if not seen:
                registry.add_unit(furlong)
            seen.append(unit)
        assert len(seen) == len(DEFAULT_UNITS)


class TestRegistryThreads:

    def test_concurrent_mutation_and_lookup(self, registry):
        errors = []

        def writer(index):
            try:
                for n in range(50):
                    unit = UnitOfMeasure(f"unit {index}-{n}", f"u{index}_{n}", "scratch", n + 1)
                    registry.add_unit(unit)
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        def reader():
            try:
                for _ in range(200):
                    assert registry.get_unit_of_measure_for("km").name == "kilometre"
                    registry.list_units("scratch")
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(4)]
        threads += [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(registry.list_units("scratch")) == 200
