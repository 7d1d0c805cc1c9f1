import pytest

from py_unitconverter.helpers import dot_get, dot_has
from py_unitconverter.logger import logger, disable_file_logging, enable_file_logging

CONFIG = {
    'pyuc': {
        'calculator': 'decimal',
        'precision': 0,
        'nested': {'rounding': None},
    },
    'flat': 1,
}


class TestDotAccess:

    @pytest.mark.parametrize(
        "path, expected",
        [
            ('pyuc.calculator', 'decimal'),
            ('pyuc.precision', 0),
            ('pyuc.nested.rounding', None),
            ('flat', 1),
        ],
    )
    def test_dot_get(self, path, expected):
        assert dot_get(CONFIG, path, default='missing') == expected

    @pytest.mark.parametrize("path", ['pyuc.digits', 'flat.value', 'nope', 'pyuc.nested.rounding.mode'])
    def test_dot_get_default(self, path):
        assert dot_get(CONFIG, path) is None
        assert dot_get(CONFIG, path, 7) == 7

    def test_empty_path(self):
        assert dot_get(CONFIG, '') is CONFIG
        assert dot_has(CONFIG, '')

    def test_dot_has(self):
        assert dot_has(CONFIG, 'pyuc.nested.rounding')
        assert not dot_has(CONFIG, 'pyuc.nested.mode')
        assert not dot_has(CONFIG, 'flat.value')

    def test_path_type(self):
        with pytest.raises(TypeError):
            dot_get(CONFIG, ['pyuc'])  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            dot_has(CONFIG, None)  # type: ignore[arg-type]


class TestFileLogging:

    def test_enable_and_disable(self, tmp_path):
        log_file = tmp_path / "uconv.log"
        enable_file_logging(str(log_file))
        try:
            logger.debug("registry loaded")
        finally:
            disable_file_logging()
        assert "registry loaded" in log_file.read_text()

    def test_disable_without_file_handler(self):
        disable_file_logging()
        disable_file_logging()
