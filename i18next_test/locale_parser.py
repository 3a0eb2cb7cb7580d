import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, List

import jsonschema

logger = logging.getLogger(__name__)

# A locale file must be a flat object where every value is a string.
LOCALIZATION_SCHEMA = {
    "type": "object",
    "additionalProperties": {"type": "string"}
}


class LocaleParseError(ValueError):
    """Raised when file content is not a flat JSON object of strings."""


@dataclass(frozen=True)
class LocaleFile:
    """A single namespace file of a locale directory."""
    locale: str
    namespace: str
    path: str

    def read_content(self) -> str:
        with open(self.path, 'r', encoding='utf-8') as file:
            return file.read()


def parse_locale_content(file_content: str) -> Dict[str, str]:
    """
    Parse the content of a locale file.

    Args:
        file_content (str): The raw JSON text of the locale file.

    Returns:
        Dict[str, str]: The translations, in the order the keys appear in the file.

    Raises:
        LocaleParseError: If the content is not valid JSON or not a flat object of strings.
    """
    try:
        locale_map = json.loads(file_content)
    except (json.JSONDecodeError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder can follow
        raise LocaleParseError(f"Invalid JSON: {e}") from e

    try:
        jsonschema.validate(instance=locale_map, schema=LOCALIZATION_SCHEMA)
    except jsonschema.ValidationError as e:
        raise LocaleParseError(f"Unexpected locale file shape: {e.message}") from e

    return locale_map


def discover_locale_files(locale_path: str) -> List[LocaleFile]:
    """
    Find all namespace files below a locale root directory.

    The expected layout is `<locale_path>/<locale>/<namespace>.<ext>`. The
    namespace is the file name without its extension.

    Args:
        locale_path (str): The locale root directory.

    Returns:
        List[LocaleFile]: The namespace files, sorted by locale and file name.
    """
    locale_files = []
    for locale in sorted(os.listdir(locale_path)):
        locale_dir = os.path.join(locale_path, locale)
        if not os.path.isdir(locale_dir):
            logger.debug("Skipping '%s', it is not a locale directory.", locale_dir)
            continue

        for filename in sorted(os.listdir(locale_dir)):
            file_path = os.path.join(locale_dir, filename)
            if not os.path.isfile(file_path):
                logger.debug("Skipping '%s', it is not a namespace file.", file_path)
                continue
            namespace, _ = os.path.splitext(filename)
            locale_files.append(LocaleFile(locale=locale, namespace=namespace, path=file_path))

    logger.debug("Discovered %d locale file(s) in '%s'.", len(locale_files), locale_path)
    return locale_files
