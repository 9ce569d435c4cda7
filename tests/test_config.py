"""
Unit tests for shipline.config module
"""
import unittest
import tempfile
import os
import shutil
import json
from pathlib import Path
from unittest.mock import patch

from shipline.config import (
    load_config,
    get_config_path,
    get_default_config,
    merge_configs,
    apply_env_overrides,
    coerce_env_value,
    mask_secrets,
    SECRET_KEYS,
)
from shipline.exit_codes import ConfigError
from shipline.services.secrets import resolve_secrets


class TestConfigManagement(unittest.TestCase):
    """Test configuration management functionality"""

    def setUp(self):
        """Set up test environment"""
        self.temp_dir = tempfile.mkdtemp()
        self.env = patch.dict(os.environ, {}, clear=True)
        self.env.start()

    def tearDown(self):
        """Clean up test environment"""
        self.env.stop()
        shutil.rmtree(self.temp_dir)

    def _write(self, name, content):
        path = Path(self.temp_dir) / name
        path.write_text(content)
        return path

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        for section in ('project', 'parameters', 'secrets', 'key_vault', 'tools', 'feeds', 'git', 'logging'):
            self.assertIn(section, config)

        self.assertEqual(config['project']['output_dir'], 'output')
        self.assertEqual(config['project']['changelog'], 'CHANGELOG.md')
        self.assertEqual(config['git']['main_branches'], ['main', 'origin/main'])
        self.assertEqual(config['feeds']['public_source'], 'https://api.nuget.org/v3/index.json')
        self.assertEqual(set(config['secrets']), set(SECRET_KEYS))
        self.assertEqual(set(config['key_vault']['secret_names']), set(SECRET_KEYS))

    def test_default_config_is_fresh(self):
        """Test defaults are not shared between calls"""
        first = get_default_config()
        first['secrets']['github_token'] = 'changed'
        self.assertEqual(get_default_config()['secrets']['github_token'], '')

    def test_load_config_no_file(self):
        """Test loading config when no file exists"""
        config = load_config(self.temp_dir)
        self.assertEqual(config, get_default_config())
        self.assertIsNone(get_config_path(self.temp_dir))

    def test_load_json_config(self):
        """Test loading a JSON config file from the repository root"""
        self._write('shipline.json', json.dumps({
            'project': {'name': 'NamedPipes.Helper'},
            'git': {'main_branches': ['master']},
        }))

        config = load_config(self.temp_dir)

        self.assertEqual(config['project']['name'], 'NamedPipes.Helper')
        self.assertEqual(config['project']['output_dir'], 'output')
        self.assertEqual(config['git']['main_branches'], ['master'])

    def test_load_toml_config(self):
        """Test loading a TOML config file"""
        self._write('shipline.toml', '[secrets]\nfeed_source = "https://feeds.example.com"\n')

        config = load_config(self.temp_dir)

        self.assertEqual(config['secrets']['feed_source'], 'https://feeds.example.com')
        self.assertEqual(config['secrets']['nuget_api_key'], '')

    def test_load_yaml_config(self):
        """Test loading a YAML config file"""
        self._write('shipline.yaml', 'tools:\n  gitversion: [dotnet, gitversion]\n')

        config = load_config(self.temp_dir)

        self.assertEqual(config['tools']['gitversion'], ['dotnet', 'gitversion'])
        self.assertEqual(config['tools']['dotnet'], 'dotnet')

    def test_json_preferred_over_yaml(self):
        """Test config file discovery order"""
        self._write('shipline.yaml', 'project: {name: FromYaml}\n')
        json_path = self._write('shipline.json', '{"project": {"name": "FromJson"}}')

        self.assertEqual(get_config_path(self.temp_dir), json_path)

    def test_config_env_var(self):
        """Test SHIPLINE_CONFIG points at an explicit file"""
        path = self._write('custom.yml', 'project: {name: Custom}\n')
        os.environ['SHIPLINE_CONFIG'] = str(path)

        config = load_config(self.temp_dir)

        self.assertEqual(config['project']['name'], 'Custom')

    def test_invalid_json(self):
        """Test a broken file raises ConfigError"""
        self._write('shipline.json', '{"project": ')
        with self.assertRaises(ConfigError):
            load_config(self.temp_dir)

    def test_non_mapping_file(self):
        """Test a file whose top level is not a mapping"""
        self._write('shipline.yaml', '- a\n- b\n')
        with self.assertRaises(ConfigError):
            load_config(self.temp_dir)

    def test_empty_yaml_file(self):
        """Test an empty YAML file leaves defaults untouched"""
        self._write('shipline.yaml', '')
        self.assertEqual(load_config(self.temp_dir), get_default_config())


class TestEnvOverrides(unittest.TestCase):
    """Test SHIPLINE_* environment overrides"""

    def test_secret_override(self):
        with patch.dict(os.environ, {'SHIPLINE_SECRETS_NUGET_API_KEY': 'abc123'}, clear=True):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['secrets']['nuget_api_key'], 'abc123')

    def test_nested_key_with_underscores(self):
        with patch.dict(os.environ, {'SHIPLINE_KEY_VAULT_TENANT_ID': 'tenant'}, clear=True):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['key_vault']['tenant_id'], 'tenant')

    def test_numeric_override(self):
        with patch.dict(os.environ, {'SHIPLINE_TOOLS_TIMEOUT_SECONDS': '600'}, clear=True):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['tools']['timeout_seconds'], 600)

    def test_configuration_parameter(self):
        with patch.dict(os.environ, {'SHIPLINE_PARAMETERS_CONFIGURATION': 'Release'}, clear=True):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['parameters']['configuration'], 'Release')

    def test_secret_values_stay_verbatim(self):
        """Test digit-only and flag-like secrets are not converted"""
        env = {
            'SHIPLINE_SECRETS_FEED_ACCESS_TOKEN': '0012345',
            'SHIPLINE_SECRETS_NUGET_API_KEY': 'on',
            'SHIPLINE_KEY_VAULT_CLIENT_ID': '000111',
        }
        with patch.dict(os.environ, env, clear=True):
            config = apply_env_overrides(get_default_config())

        self.assertEqual(config['secrets']['feed_access_token'], '0012345')
        self.assertEqual(config['secrets']['nuget_api_key'], 'on')
        self.assertEqual(config['key_vault']['client_id'], '000111')

        secrets = resolve_secrets(config)
        self.assertEqual(secrets['feed_access_token'], '0012345')
        self.assertEqual(secrets['nuget_api_key'], 'on')

    def test_list_override_is_comma_separated(self):
        with patch.dict(os.environ, {'SHIPLINE_GIT_MAIN_BRANCHES': 'main'}, clear=True):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['git']['main_branches'], ['main'])

        with patch.dict(os.environ, {'SHIPLINE_GIT_MAIN_BRANCHES': 'master, origin/master'}, clear=True):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['git']['main_branches'], ['master', 'origin/master'])

    def test_invalid_numeric_override(self):
        with patch.dict(os.environ, {'SHIPLINE_TOOLS_TIMEOUT_SECONDS': 'forever'}, clear=True):
            with self.assertRaises(ConfigError):
                apply_env_overrides(get_default_config())

    def test_coerce_env_value(self):
        self.assertIs(coerce_env_value('X', 'yes', False), True)
        self.assertIs(coerce_env_value('X', 'off', True), False)
        self.assertEqual(coerce_env_value('X', '007', 1), 7)
        self.assertEqual(coerce_env_value('X', '007', ''), '007')
        with self.assertRaises(ConfigError):
            coerce_env_value('X', 'maybe', True)

    def test_unknown_keys_ignored(self):
        with patch.dict(os.environ, {'SHIPLINE_NOPE_VALUE': 'x', 'SHIPLINE_CONFIG': '/x'}, clear=True):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config, get_default_config())


class TestHelpers(unittest.TestCase):
    """Test merge and masking helpers"""

    def test_merge_configs(self):
        base = {'a': {'b': 1, 'c': 2}, 'd': 3}
        merged = merge_configs(base, {'a': {'c': 20}, 'e': 5})
        self.assertEqual(merged, {'a': {'b': 1, 'c': 20}, 'd': 3, 'e': 5})
        self.assertEqual(base['a']['c'], 2)

    def test_mask_secrets(self):
        config = get_default_config()
        config['secrets']['github_token'] = 'ghp_secret'
        config['key_vault']['client_secret'] = 'vault-secret'

        masked = mask_secrets(config)

        self.assertEqual(masked['secrets']['github_token'], '***')
        self.assertEqual(masked['secrets']['nuget_api_key'], '')
        self.assertEqual(masked['key_vault']['client_secret'], '***')
        self.assertEqual(config['secrets']['github_token'], 'ghp_secret')


if __name__ == '__main__':
    unittest.main()
