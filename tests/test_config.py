"""Unit tests for the Config module.

Tests configuration loading, getting/setting values, environment overrides,
and the global config instance.
"""

import os
import pytest
import tempfile
from pathlib import Path
from unittest import mock

import yaml

from embed_bridge.common.config import Config, DEFAULT_CONFIG_PATH, get_config


# Sample test configuration
SAMPLE_CONFIG = {
    'renderer': {
        'prefix': 'test_prefix',
        'poll_interval_ms': 100,
        'volumechange_delay_ms': 20
    },
    'provider': {
        'api_url': 'https://provider.example.com/api.js',
        'ready_callback': 'onTestReady',
        'player_vars': {
            'controls': 1
        }
    },
    'events': {
        'publish': False,
        'port': 6000
    }
}


@pytest.fixture
def temp_config_file():
    """Create a temporary config file for testing."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(SAMPLE_CONFIG, f)
        temp_path = f.name
    yield temp_path
    if os.path.exists(temp_path):
        os.unlink(temp_path)


@pytest.fixture
def config(temp_config_file):
    """Create a Config instance with test configuration."""
    with mock.patch.dict(os.environ, {}, clear=True):
        return Config(temp_config_file)


@pytest.fixture
def reset_global_config():
    """Reset the global config instance before and after tests."""
    import embed_bridge.common.config as config_module
    original = config_module._global_config
    config_module._global_config = None
    yield
    config_module._global_config = original


class TestConfigLoading:
    """Tests for configuration file loading."""

    def test_load_valid_config(self, config):
        """Test loading a valid configuration file."""
        assert config._config['renderer']['prefix'] == 'test_prefix'

    def test_load_default_config(self):
        """Test that the shipped default config loads."""
        config = Config()
        assert config.config_path == DEFAULT_CONFIG_PATH
        assert config.get('provider.player_vars.playsinline') == 1

    def test_load_missing_config_raises_error(self):
        """Test that loading a missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError) as exc_info:
            Config('/nonexistent/path/config.yaml')
        assert 'Config file not found' in str(exc_info.value)

    def test_empty_file_loads_as_empty(self, temp_config_file):
        """Test that an empty YAML file gives an empty config."""
        Path(temp_config_file).write_text("")
        config = Config(temp_config_file)
        assert config.get('renderer.prefix') is None

    def test_repr(self, config):
        """Test string representation of Config."""
        assert 'Config' in repr(config)
        assert 'path=' in repr(config)


class TestConfigGetSet:
    """Tests for dot-notation access."""

    def test_get_nested_key(self, config):
        assert config.get('renderer.poll_interval_ms') == 100
        assert config.get('provider.player_vars.controls') == 1

    def test_get_missing_key_returns_default(self, config):
        assert config.get('nonexistent.key') is None
        assert config.get('nonexistent.key', 42) == 42

    def test_get_partial_path_returns_none(self, config):
        """renderer.prefix is a string, so nothing lives below it."""
        assert config.get('renderer.prefix.nonexistent') is None

    def test_set_creates_nested_structure(self, config):
        config.set('new_section.nested.value', 'test')
        assert config.get('new_section.nested.value') == 'test'

    def test_set_overwrites_value(self, config):
        config.set('renderer.prefix', 'other')
        assert config.get('renderer.prefix') == 'other'


class TestConfigSave:
    """Tests for saving configuration to file."""

    def test_save_to_same_path(self, config, temp_config_file):
        config.set('renderer.prefix', 'saved')
        config.save()

        reloaded = Config(temp_config_file)
        assert reloaded.get('renderer.prefix') == 'saved'


class TestConfigProperties:
    """Tests for configuration property accessors."""

    def test_properties(self, config):
        assert config.prefix == 'test_prefix'
        assert config.api_url == 'https://provider.example.com/api.js'
        assert config.ready_callback == 'onTestReady'

    def test_property_defaults(self, temp_config_file):
        with open(temp_config_file, 'w') as f:
            yaml.dump({'events': {'port': 1}}, f)

        config = Config(temp_config_file)
        assert config.prefix == 'youtube_iframe'
        assert config.api_url == 'https://www.youtube.com/player_api'
        assert config.ready_callback == 'onYouTubePlayerAPIReady'


class TestEnvironmentOverrides:
    """Tests for environment variable overrides."""

    def test_prefix_override(self, temp_config_file):
        with mock.patch.dict(os.environ, {'EMBED_BRIDGE_PREFIX': 'env_prefix'}):
            config = Config(temp_config_file)
            assert config.prefix == 'env_prefix'

    def test_api_url_override(self, temp_config_file):
        with mock.patch.dict(os.environ, {'EMBED_BRIDGE_API_URL': 'https://mirror/api.js'}):
            config = Config(temp_config_file)
            assert config.api_url == 'https://mirror/api.js'

    def test_events_port_override(self, temp_config_file):
        with mock.patch.dict(os.environ, {'EMBED_BRIDGE_EVENTS_PORT': '7000'}):
            config = Config(temp_config_file)
            assert config.get('events.port') == 7000


class TestGlobalConfig:
    """Tests for global configuration instance."""

    def test_get_config_returns_same_instance(self, temp_config_file, reset_global_config):
        config1 = get_config(temp_config_file)
        config2 = get_config('/different/path')  # Path ignored after first call
        assert config1 is config2
