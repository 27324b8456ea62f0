"""
Unit tests for repopin.config module
"""
import unittest
import tempfile
import os
import shutil
import json
import logging
from pathlib import Path

import toml
import yaml

from repopin.config import (
    apply_env_overrides,
    check_hash_algorithm,
    configure_logging,
    get_config_path,
    get_default_config,
    load_config,
    logger,
    merge_configs,
    save_config,
)
from repopin.exit_codes import ConfigError


class TestConfigManagement(unittest.TestCase):
    """Test configuration management functionality"""

    def setUp(self):
        """Set up test environment"""
        self.temp_dir = tempfile.mkdtemp()
        self.saved_env = {k: v for k, v in os.environ.items()
                          if k == 'HOME' or k.startswith('REPOPIN_')}
        for key in list(os.environ):
            if key.startswith('REPOPIN_'):
                del os.environ[key]
        os.environ['HOME'] = self.temp_dir
        self.config_dir = Path(self.temp_dir) / '.repopin'
        self.config_dir.mkdir()

    def tearDown(self):
        """Clean up test environment"""
        for key in list(os.environ):
            if key == 'HOME' or key.startswith('REPOPIN_'):
                del os.environ[key]
        os.environ.update(self.saved_env)
        shutil.rmtree(self.temp_dir)

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        for section in ('git', 'verify', 'digest', 'versions', 'logging'):
            self.assertIn(section, config)

        self.assertEqual(config['digest']['algorithm'], 'sha512')
        self.assertEqual(config['git']['clone_depth'], 1)
        self.assertEqual(config['verify']['io_mode'], 'silent')
        self.assertEqual(config['versions']['scheme'], 'semver')

    def test_load_config_no_file(self):
        """Test loading config when no file exists"""
        self.assertEqual(load_config(), get_default_config())
        self.assertEqual(get_config_path(), self.config_dir / 'config.json')

    def test_load_config_json_file(self):
        """Test loading config from JSON file"""
        with open(self.config_dir / 'config.json', 'w') as f:
            json.dump({'digest': {'algorithm': 'sha256'}, 'logging': {'level': 'DEBUG'}}, f)

        config = load_config()

        self.assertEqual(config['digest']['algorithm'], 'sha256')
        self.assertEqual(config['digest']['workers'], 1)
        self.assertEqual(config['logging']['level'], 'DEBUG')

    def test_load_config_toml_file(self):
        """Test loading config from TOML file"""
        with open(self.config_dir / 'config.toml', 'w') as f:
            toml.dump({'git': {'timeout_seconds': 30, 'executable': '/usr/bin/git'}}, f)

        config = load_config()

        self.assertEqual(config['git']['timeout_seconds'], 30)
        self.assertEqual(config['git']['executable'], '/usr/bin/git')
        self.assertEqual(config['git']['clone_depth'], 1)

    def test_load_config_yaml_file(self):
        """Test loading config from YAML file"""
        with open(self.config_dir / 'config.yaml', 'w') as f:
            yaml.safe_dump({'versions': {'scheme': 'pep440'}, 'verify': {'io_mode': 'inherit'}}, f)

        config = load_config()

        self.assertEqual(config['versions']['scheme'], 'pep440')
        self.assertEqual(config['verify']['io_mode'], 'inherit')

    def test_config_env_var_path(self):
        """REPOPIN_CONFIG points at an explicit file"""
        custom = Path(self.temp_dir) / 'custom.json'
        custom.write_text(json.dumps({'digest': {'workers': 4}}))
        os.environ['REPOPIN_CONFIG'] = str(custom)

        self.assertEqual(get_config_path(), custom)
        self.assertEqual(load_config()['digest']['workers'], 4)

    def test_invalid_json_raises_config_error(self):
        (self.config_dir / 'config.json').write_text('{"digest": {"algorithm": ')

        with self.assertRaises(ConfigError):
            load_config()

    def test_unknown_algorithm_rejected(self):
        (self.config_dir / 'config.json').write_text(json.dumps({'digest': {'algorithm': 'md55'}}))

        with self.assertRaises(ConfigError):
            load_config()

    def test_variable_length_algorithm_rejected(self):
        """SHAKE digests need an explicit length and cannot name a manifest"""
        os.environ['REPOPIN_DIGEST_ALGORITHM'] = 'shake_256'

        with self.assertRaises(ConfigError):
            load_config()

    def test_invalid_io_mode_rejected(self):
        (self.config_dir / 'config.json').write_text(json.dumps({'verify': {'io_mode': 'loud'}}))

        with self.assertRaises(ConfigError):
            load_config()

    def test_env_overrides(self):
        """REPOPIN_SECTION_KEY variables override file and defaults"""
        os.environ['REPOPIN_DIGEST_ALGORITHM'] = 'sha384'
        os.environ['REPOPIN_GIT_TIMEOUT_SECONDS'] = '45'

        config = load_config()

        self.assertEqual(config['digest']['algorithm'], 'sha384')
        self.assertEqual(config['git']['timeout_seconds'], 45)

    def test_save_config(self):
        """Saved defaults load back unchanged"""
        path = save_config(get_default_config())

        self.assertEqual(path, self.config_dir / 'config.json')
        self.assertEqual(load_config(), get_default_config())

    def test_save_config_yaml(self):
        path = save_config({'digest': {'algorithm': 'sha1'}}, self.config_dir / 'config.yaml')

        with open(path) as f:
            self.assertEqual(yaml.safe_load(f), {'digest': {'algorithm': 'sha1'}})


class TestConfigHelpers(unittest.TestCase):

    def test_merge_configs_is_recursive(self):
        base = {'a': {'x': 1, 'y': 2}, 'b': 1}
        merged = merge_configs(base, {'a': {'y': 3}, 'c': 4})

        self.assertEqual(merged, {'a': {'x': 1, 'y': 3}, 'b': 1, 'c': 4})
        self.assertEqual(base['a']['y'], 2)

    def test_apply_env_overrides_ignores_unknown_keys(self):
        config = get_default_config()
        env = {'REPOPIN_NOPE_VALUE': 'x', 'REPOPIN_VERIFY_IO_MODE': 'inherit'}
        saved = dict(os.environ)
        os.environ.update(env)
        try:
            config = apply_env_overrides(config)
        finally:
            os.environ.clear()
            os.environ.update(saved)

        self.assertNotIn('nope', config)
        self.assertEqual(config['verify']['io_mode'], 'inherit')

    def test_check_hash_algorithm(self):
        self.assertEqual(check_hash_algorithm('sha256'), 'sha256')
        for name in ('shake_128', 'shake_256', 'md55'):
            with self.assertRaises(ConfigError):
                check_hash_algorithm(name)

    def test_configure_logging(self):
        original = logger.level
        try:
            configure_logging({'logging': {'level': 'warning'}})
            self.assertEqual(logger.level, logging.WARNING)

            configure_logging({'logging': {'level': 'warning'}}, verbose=True)
            self.assertEqual(logger.level, logging.DEBUG)
        finally:
            logger.setLevel(original)


if __name__ == '__main__':
    unittest.main()
