import json
import logging
import os

import pytest
import yaml

from i18next_test.logging_config import LOGGER_NAME


@pytest.fixture
def write_locale_tree(tmp_path):
    """
    Function-scoped fixture that writes a locale root and a matching config file.

    Usage: write_locale_tree({"en/sign-in.json": {...}}, prohibited_text=[...])
    Dict values are dumped as JSON, strings are written verbatim.
    """
    def _write(files, **config_overrides):
        locale_path = os.path.join(str(tmp_path), 'locales')
        os.makedirs(locale_path, exist_ok=True)

        for relative_path, content in files.items():
            file_path = os.path.join(locale_path, relative_path)
            os.makedirs(os.path.dirname(file_path), exist_ok=True)
            if not isinstance(content, str):
                content = json.dumps(content, ensure_ascii=False)
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(content)

        config = {
            'i18n': {'default_locale': 'en'},
            'locale_path': locale_path,
            'default_namespace': 'common',
            'logging': {'log_level': 'WARNING', 'log_to_console': False},
        }
        config.update(config_overrides)

        config_path = os.path.join(str(tmp_path), 'i18next-test.config.yaml')
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config, f)

        return {'locale_path': locale_path, 'config_path': config_path}

    return _write


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Remove handlers added by setup_logger so tests do not leak file handles."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
