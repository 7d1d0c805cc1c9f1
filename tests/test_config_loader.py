import pytest

from py_unitconverter import (basicConfig, loadPreciseConfig, loadSimpleConfig, DecimalCalculator, RoundingMode,
                              Settings, SimpleCalculator)


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


class TestConfigLoader:

    @pytest.mark.parametrize(
        "test_name, config_func, expected_calculator, expected_rounding",
        [
            ("simple", loadSimpleConfig, "simple", RoundingMode.HALF_UP),
            ("precise", loadPreciseConfig, "decimal", RoundingMode.HALF_EVEN),
            ("manual", lambda: basicConfig(settings={'calculator': 'decimal', 'rounding': 'floor'}),
             "decimal", RoundingMode.FLOOR),
        ],
    )
    def test_settings_load(self, test_name, config_func, expected_calculator, expected_rounding):
        config_func()
        assert Settings.calculator == expected_calculator
        assert Settings.rounding is expected_rounding

    def test_precise_config_creates_decimal_calculator(self):
        loadPreciseConfig()
        calculator = Settings.create_calculator()
        assert isinstance(calculator, DecimalCalculator)
        assert calculator.digits == 50

    def test_config_file(self, tmp_path):
        config = _write(tmp_path / "custom.toml", '[pyuc]\ncalculator = "decimal"\nprecision = 3\n')
        basicConfig(str(config))
        assert Settings.calculator == "decimal"
        assert Settings.precision == 3

    def test_config_found_in_parent_directory(self, tmp_path, monkeypatch):
        _write(tmp_path / ".pyuc.toml", '[pyuc]\nprecision = 2\ndigits = 34\n')
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        basicConfig()
        assert Settings.precision == 2
        assert Settings.digits == 34

    def test_no_config_keeps_settings(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        Settings.set(precision=5)
        basicConfig()
        assert Settings.precision == 5
        assert isinstance(Settings.create_calculator(), SimpleCalculator)

    def test_missing_section_warns(self, tmp_path, caplog):
        config = _write(tmp_path / "pyuc.toml", '[other]\nprecision = 3\n')
        with caplog.at_level("WARNING", logger="py_uconv"):
            basicConfig(str(config))
        assert "Config has no `pyuc` section" in caplog.text
        assert Settings.precision is None

    def test_missing_section_warning_suppressed(self, tmp_path, caplog):
        config = _write(tmp_path / "pyuc.toml", '[other]\nprecision = 3\n')
        with caplog.at_level("WARNING", logger="py_uconv"):
            basicConfig(str(config), suppress_warnings=True)
        assert "pyuc" not in caplog.text

    def test_invalid_values_are_ignored(self, tmp_path, caplog):
        config = _write(tmp_path / "pyuc.toml",
                        '[pyuc]\ncalculator = 5\nprecision = -1\nrounding = "sideways"\nunknown = 1\n')
        with caplog.at_level("WARNING", logger="py_uconv"):
            basicConfig(str(config))
        assert Settings.calculator == "simple"
        assert Settings.precision is None
        assert Settings.rounding is RoundingMode.HALF_UP
        assert "attribute='unknown' not found in settings" in caplog.text

    def test_file_and_settings_are_exclusive(self, tmp_path):
        with pytest.raises(ValueError):
            basicConfig(str(tmp_path / "pyuc.toml"), settings={'precision': 1})


class TestSettings:

    def test_defaults(self):
        assert Settings.calculator == "simple"
        assert Settings.precision is None
        assert Settings.rounding is RoundingMode.HALF_UP
        assert Settings.digits == 28

    def test_restore_defaults(self):
        Settings.set(calculator="decimal", precision=1, rounding="down", digits=10)
        Settings.restore_defaults()
        assert Settings.calculator == "simple"
        assert Settings.precision is None
        assert Settings.rounding is RoundingMode.HALF_UP
        assert Settings.digits == 28

    def test_calculator_class(self):
        Settings.set(calculator=DecimalCalculator, precision=2)
        calculator = Settings.create_calculator()
        assert isinstance(calculator, DecimalCalculator)
        assert calculator.precision == 2

    def test_unknown_calculator_name(self):
        Settings.set(calculator="abacus")
        with pytest.raises(ValueError):
            Settings.create_calculator()

    def test_repr(self):
        assert "calculator = 'simple'" in repr(Settings)
