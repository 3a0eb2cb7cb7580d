"""
Command line entry point.

Usage:
    i18next-test -c i18next-test.config.yaml
    i18next-test -c i18next-test.config.yaml --silent
    python -m i18next_test --no-color
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from tqdm import tqdm

from i18next_test import __version__
from i18next_test.app_config import AppConfig, ConfigError, load_app_config
from i18next_test.locale_parser import LocaleFile, discover_locale_files
from i18next_test.locale_validator import Diagnostic, ValidationContext, check_locale_file
from i18next_test.logging_config import setup_logger
from i18next_test.reporter import Reporter

logger = logging.getLogger(__name__)

RULE_UNREADABLE_FILE = 'unreadable-file'

EPILOG = """
Examples:

  $ i18next-test -c i18next-test.config.yaml
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='i18next-test',
        description="Check i18next locale files for missing translations and broken markers.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-c', '--config', metavar='PATH',
                        help="Path to the config file (default: $I18NEXT_TEST_CONFIG_FILE "
                             "or i18next-test.config.yaml)")
    parser.add_argument('-s', '--silent', action='store_true',
                        help="Only print files that fail")
    parser.add_argument('--no-color', action='store_true',
                        help="Disable colored output")
    parser.add_argument('-V', '--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def should_use_color(no_color_flag: bool) -> bool:
    if no_color_flag or 'NO_COLOR' in os.environ:
        return False
    return sys.stdout.isatty()


def check_file(locale_file: LocaleFile, config: AppConfig) -> List[Diagnostic]:
    """
    Reads and validates a single namespace file.

    Unreadable files fail with one diagnostic instead of stopping the run.
    """
    try:
        file_content = locale_file.read_content()
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Could not read locale file '%s': %s", locale_file.path, e)
        return [Diagnostic(RULE_UNREADABLE_FILE, f"File could not be read: {e}")]

    context = ValidationContext(
        file_content=file_content,
        locale=locale_file.locale,
        default_locale=config.default_locale,
        namespace=locale_file.namespace,
        default_namespace=config.default_namespace,
        prohibited_text=tuple(config.prohibited_text),
    )
    return check_locale_file(context)


def run(config: AppConfig, reporter: Reporter) -> bool:
    """
    Validates every namespace file below the configured locale path.

    Returns:
        True if any file produced diagnostics, False otherwise.
    """
    try:
        locale_files = discover_locale_files(config.locale_path)
    except OSError as e:
        raise ConfigError(f"locale path could not be read: {e}") from e
    logger.info("Checking %d locale file(s) in '%s'.", len(locale_files), config.locale_path)

    has_errors = False
    failed_files = 0
    reporter.header()
    for locale_file in tqdm(locale_files, desc="Checking locale files", unit="file",
                            disable=None, leave=False):
        diagnostics = check_file(locale_file, config)
        if diagnostics:
            has_errors = True
            failed_files += 1
            logger.debug("'%s' failed with %d diagnostic(s).", locale_file.path, len(diagnostics))
        reporter.file_result(locale_file.path, diagnostics)
    reporter.footer()

    logger.info("%d of %d locale file(s) failed.", failed_files, len(locale_files))
    return has_errors


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_app_config(args.config)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    setup_logger(config.log_level, config.log_file_path, config.log_to_console)
    if config.dotenv_path:
        logger.info("Loaded environment variables from: %s", config.dotenv_path)
    logger.info("Loaded configuration from: %s", config.config_file)

    reporter = Reporter(
        write=lambda line: tqdm.write(line, file=sys.stdout),
        use_color=should_use_color(args.no_color),
        silent=args.silent or config.silent,
    )

    try:
        has_errors = run(config, reporter)
    except ConfigError as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 1 if has_errors else 0


if __name__ == '__main__':
    sys.exit(main())
