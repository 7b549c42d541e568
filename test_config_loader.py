"""
Unit tests for configuration loader module.
"""

import pytest
from pathlib import Path
from unittest.mock import patch, mock_open

import studio_cms.config_loader as config_loader
from studio_cms.config_loader import (
    load_config, validate_config, get_default_config, deep_merge,
    apply_env_overrides, get_config_value, get_config_summary
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep CMS_* variables and the config cache out of every test."""
    monkeypatch.delenv('CMS_API_BASE_URL', raising=False)
    monkeypatch.delenv('CMS_API_TOKEN', raising=False)
    monkeypatch.setattr(config_loader, '_config_cache', None)


class TestDeepMerge:
    """Test cases for deep_merge function."""

    def test_deep_merge_simple_dicts(self):
        """Test deep merging of simple dictionaries."""
        base = {'a': 1, 'b': 2}
        update = {'b': 3, 'c': 4}

        result = deep_merge(base, update)

        assert result == {'a': 1, 'b': 3, 'c': 4}
        # Ensure original dicts are not modified
        assert base == {'a': 1, 'b': 2}
        assert update == {'b': 3, 'c': 4}

    def test_deep_merge_nested_dicts(self):
        """Test deep merging of nested dictionaries."""
        base = {'api': {'base_url': 'http://a', 'timeout': 15}}
        update = {'api': {'timeout': 30}, 'ui': {'sidebar_title': 'Site'}}

        result = deep_merge(base, update)

        assert result == {
            'api': {'base_url': 'http://a', 'timeout': 30},
            'ui': {'sidebar_title': 'Site'}
        }

    def test_deep_merge_non_dict_values(self):
        """A non-dict value replaces a dict outright."""
        result = deep_merge({'catalog': {'file': None}}, {'catalog': 'custom.yaml'})
        assert result == {'catalog': 'custom.yaml'}


class TestGetDefaultConfig:
    """Test cases for get_default_config function."""

    def test_get_default_config_structure(self):
        """Test that default config has all required sections."""
        config = get_default_config()

        for section in ('app', 'api', 'catalog', 'ui', 'logging'):
            assert section in config
        assert validate_config(config) is True

    def test_get_default_config_values(self):
        """Test default values."""
        config = get_default_config()

        assert config['api']['base_url'] == 'http://localhost:3000/api/v1'
        assert config['api']['timeout'] == 15
        assert config['api']['token'] is None
        assert config['catalog']['file'] is None


class TestLoadConfig:
    """Test cases for load_config function."""

    def test_load_config_file_not_exists(self):
        """Test loading config when file doesn't exist."""
        with patch('pathlib.Path.exists', return_value=False):
            config = load_config(Path('nonexistent.yaml'))

            assert config == get_default_config()

    def test_load_config_valid_file(self):
        """Test loading config from valid YAML file."""
        yaml_content = """
app:
  name: "Test Studio"
api:
  base_url: "https://cms.example.com/api/v1"
"""

        with patch('builtins.open', mock_open(read_data=yaml_content)):
            with patch('pathlib.Path.exists', return_value=True):
                config = load_config(Path('test.yaml'))

                assert config['app']['name'] == 'Test Studio'
                assert config['api']['base_url'] == 'https://cms.example.com/api/v1'
                # Should have defaults for missing values
                assert config['app']['version'] == '1.0.0'
                assert config['api']['timeout'] == 15

    def test_load_config_invalid_yaml(self):
        """Test loading config with invalid YAML."""
        with patch('builtins.open', mock_open(read_data="invalid: yaml: content: [")):
            with patch('pathlib.Path.exists', return_value=True):
                assert load_config(Path('invalid.yaml')) == get_default_config()

    def test_load_config_empty_file(self):
        """Test loading config from empty file."""
        with patch('builtins.open', mock_open(read_data="")):
            with patch('pathlib.Path.exists', return_value=True):
                assert load_config(Path('empty.yaml')) == get_default_config()

    def test_load_config_non_dict_content(self):
        """Test loading config with non-dictionary content."""
        with patch('builtins.open', mock_open(read_data="- item1\n- item2")):
            with patch('pathlib.Path.exists', return_value=True):
                assert load_config(Path('list.yaml')) == get_default_config()

    def test_load_config_io_error(self):
        """Test loading config when IO error occurs."""
        with patch('builtins.open', side_effect=IOError("Permission denied")):
            with patch('pathlib.Path.exists', return_value=True):
                assert load_config(Path('protected.yaml')) == get_default_config()

    def test_load_config_applies_environment(self, monkeypatch):
        """Environment variables win over the file."""
        monkeypatch.setenv('CMS_API_BASE_URL', 'https://env.example.com/api')
        with patch('pathlib.Path.exists', return_value=False):
            config = load_config(Path('nonexistent.yaml'))

        assert config['api']['base_url'] == 'https://env.example.com/api'


class TestEnvOverrides:
    """Test cases for apply_env_overrides function."""

    def test_overrides_token(self):
        config = apply_env_overrides(get_default_config(), {'CMS_API_TOKEN': 'abc'})
        assert config['api']['token'] == 'abc'

    def test_empty_values_ignored(self):
        config = apply_env_overrides(get_default_config(), {'CMS_API_BASE_URL': ''})
        assert config['api']['base_url'] == 'http://localhost:3000/api/v1'

    def test_input_not_modified(self):
        original = get_default_config()
        apply_env_overrides(original, {'CMS_API_TOKEN': 'abc'})
        assert original['api']['token'] is None


class TestValidateConfig:
    """Test cases for validate_config function."""

    def test_validate_config_missing_sections(self):
        config = get_default_config()
        del config['ui']
        assert validate_config(config) is False

    def test_validate_config_invalid_base_url(self):
        config = get_default_config()
        config['api']['base_url'] = 'localhost:3000'
        assert validate_config(config) is False

    @pytest.mark.parametrize('timeout', [0, -5, 'soon', None])
    def test_validate_config_invalid_timeout(self, timeout):
        config = get_default_config()
        config['api']['timeout'] = timeout
        assert validate_config(config) is False

    def test_validate_config_missing_app_fields(self):
        config = get_default_config()
        del config['app']['version']
        assert validate_config(config) is False


class TestGetConfigValue:
    """Test cases for cached config access."""

    def test_reads_value_from_cached_config(self, monkeypatch):
        monkeypatch.setattr(config_loader, '_config_cache', {'ui': {'sidebar_title': 'Site'}})
        assert get_config_value('ui', 'sidebar_title') == 'Site'

    def test_none_falls_back_to_default(self, monkeypatch):
        monkeypatch.setattr(config_loader, '_config_cache', {'catalog': {'file': None}})
        assert get_config_value('catalog', 'file', 'built-in') == 'built-in'
        assert get_config_value('missing', 'key', 3) == 3


class TestGetConfigSummary:
    """Test cases for get_config_summary function."""

    def test_get_config_summary_hides_token(self):
        config = apply_env_overrides(get_default_config(), {'CMS_API_TOKEN': 'secret'})

        summary = get_config_summary(config)

        assert summary['has_api_token'] is True
        assert 'secret' not in summary.values()
        assert summary['catalog_file'] == 'built-in'

    def test_get_config_summary_missing_fields(self):
        summary = get_config_summary({})
        assert summary['app_name'] == 'Unknown'
        assert summary['log_level'] == 'INFO'
