"""
Tests for the configuration layer.
"""
import pytest

from service_inventory.core.config import InventoryConfig, create_default_config


def write_config(tmp_path, content):
    path = tmp_path / "config.ini"
    path.write_text(content, encoding='utf-8')
    return str(path)


class TestDefaults:

    def test_missing_file_uses_defaults(self, tmp_path, capsys):
        config = InventoryConfig(str(tmp_path / "absent.ini"))

        assert config.get_manager_config() == {'backend': 'systemctl', 'command_timeout': 10.0}
        assert config.get_collection_config() == {
            'service_suffix': '.service',
            'max_workers': 32,
            'max_line_length': 255,
            'max_value_length': 255,
        }
        assert config.get_output_config() == {'format': 'text', 'file': ''}
        assert config.get_logging_config()['log_level'] == 'WARNING'
        # stdout is reserved for the report
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "absent.ini" in captured.err

    def test_defaults_are_valid(self, config):
        assert config.validate() is True


class TestFileOverrides:

    def test_values_from_file(self, tmp_path):
        path = write_config(tmp_path, (
            "[manager]\nbackend = dbus\ncommand_timeout = 2.5\n"
            "[collection]\nmax_workers = 4\n"
            "[output]\nformat = json\n"
        ))

        config = InventoryConfig(path)

        assert config.get_manager_config() == {'backend': 'dbus', 'command_timeout': 2.5}
        assert config.get_collection_config()['max_workers'] == 4
        # untouched keys keep their defaults
        assert config.get_collection_config()['service_suffix'] == '.service'
        assert config.get_output_config()['format'] == 'json'

    def test_bad_integer_falls_back(self, tmp_path):
        path = write_config(tmp_path, "[collection]\nmax_workers = many\n")

        config = InventoryConfig(path)

        assert config.get_collection_config()['max_workers'] == 32

    def test_unparsable_file_keeps_defaults(self, tmp_path, capsys):
        path = write_config(tmp_path, "no section header\n")

        config = InventoryConfig(path)

        assert config.get('manager', 'backend') == 'systemctl'
        assert "Erreur" in capsys.readouterr().err

    def test_set_stringifies(self, config):
        config.set('collection', 'max_workers', 8)

        assert config.get('collection', 'max_workers') == '8'
        assert config.getint('collection', 'max_workers') == 8


class TestValidate:

    @pytest.mark.parametrize("section, option, value", [
        ('manager', 'backend', 'upstart'),
        ('manager', 'command_timeout', '0'),
        ('manager', 'command_timeout', '-1'),
        ('collection', 'max_workers', '-1'),
        ('collection', 'max_line_length', '0'),
        ('collection', 'max_value_length', '0'),
        ('collection', 'service_suffix', ''),
        ('output', 'format', 'xml'),
        ('inventory', 'log_level', 'VERBOSE'),
    ])
    def test_invalid_values(self, config, capsys, section, option, value):
        config.set(section, option, value)

        assert config.validate() is False
        assert "Erreur de configuration" in capsys.readouterr().err

    def test_zero_workers_is_valid(self, config):
        config.set('collection', 'max_workers', 0)

        assert config.validate() is True


class TestCreateDefaultConfig:

    def test_writes_readable_file(self, tmp_path):
        path = tmp_path / "etc" / "config.ini"

        create_default_config(str(path))
        reloaded = InventoryConfig(str(path))

        assert path.exists()
        assert reloaded.get_manager_config()['backend'] == 'systemctl'
        assert reloaded.get_collection_config()['max_workers'] == 32
