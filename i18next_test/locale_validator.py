"""Validation of locale namespace files, one entry at a time."""
import json
import logging
from dataclasses import dataclass
from re import Pattern
from typing import List, Optional, Sequence, Tuple, Union

from i18next_test.locale_parser import LocaleParseError, parse_locale_content
from i18next_test.translation_validator import (
    ProhibitedMatch,
    compile_prohibited_pattern,
    find_prohibited_text,
    find_unknown_markers,
    highlight_match,
    is_valid_component_marker_structure,
    markers_equal_as_multisets,
    parse_component_markers,
    parse_interpolation_markers,
)

logger = logging.getLogger(__name__)

# i18next-parser moves keys that are no longer used into namespaces with this suffix.
REMOVED_NAMESPACE_SUFFIX = '_old'

INVALID_FILE_MESSAGE = 'File content could not be parsed as locale JSON'

RULE_INVALID_FILE = 'invalid-file'
RULE_MISSING_NAMESPACE = 'missing-namespace'
RULE_REMOVED_FROM_SOURCE = 'removed-from-source'
RULE_MISSING_TRANSLATION = 'missing-translation'
RULE_EQUAL_TO_SOURCE = 'equal-to-source'
RULE_COMPONENT_MARKERS_MISMATCH = 'component-markers-mismatch'
RULE_COMPONENT_MARKERS_STRUCTURE = 'component-markers-structure'
RULE_INTERPOLATION_MARKERS_MISMATCH = 'interpolation-markers-mismatch'
RULE_PROHIBITED_TEXT_KEY = 'prohibited-text-key'
RULE_PROHIBITED_TEXT_TRANSLATION = 'prohibited-text-translation'


@dataclass(frozen=True)
class ProhibitedPattern:
    """A prohibited text pattern as written in the configuration."""
    pattern: str
    ignore_case: bool = False

    def compile(self) -> Pattern[str]:
        return compile_prohibited_pattern(self.pattern, self.ignore_case)


# A bare string is a case-sensitive pattern, a pair is (pattern, ignore_case).
ProhibitedText = Union[ProhibitedPattern, Pattern[str], str, Tuple[str, bool]]


@dataclass(frozen=True)
class ValidationContext:
    """Everything needed to validate the content of one namespace file."""
    file_content: str
    locale: str
    default_locale: str
    namespace: str
    default_namespace: str
    prohibited_text: Tuple[ProhibitedText, ...] = ()


@dataclass(frozen=True)
class ProhibitedFinding:
    """The scanned string together with the prohibited span found in it."""
    text: str
    match: ProhibitedMatch
    pattern: str


@dataclass(frozen=True)
class Diagnostic:
    """
    A single finding for a locale file.

    `str()` renders the plain multi-line message: the first line names the key
    and the violated rule, following lines hold the marker or prohibited text details.
    """
    rule: str
    message: str
    key: Optional[str] = None
    expected: Optional[List[str]] = None
    received: Optional[List[str]] = None
    prohibited: Optional[ProhibitedFinding] = None

    @property
    def headline(self) -> str:
        if self.key is None:
            return self.message
        return f'{quote_key(self.key)} {self.message}'

    def detail_lines(self) -> List[Tuple[str, str]]:
        """Returns (label, value) pairs for the lines following the headline."""
        lines = []
        if self.expected is not None:
            lines.append(('Expected: ', format_markers(self.expected)))
        if self.received is not None:
            lines.append(('Received: ', format_markers(self.received)))
        if self.prohibited is not None:
            lines.append(('Prohibited: ', highlight_match(self.prohibited.text, self.prohibited.match)))
        return lines

    def __str__(self) -> str:
        return '\n'.join([self.headline] + [label + value for label, value in self.detail_lines()])


def quote_key(key: str) -> str:
    return f'"{key}"'


def format_markers(markers: Sequence[str]) -> str:
    """Renders a marker list as compact JSON, e.g. ["</1>","<1>"]."""
    return json.dumps(list(markers), separators=(',', ':'), ensure_ascii=False)


def _compile_pattern(item: ProhibitedText) -> Pattern[str]:
    if isinstance(item, Pattern):
        return item
    if isinstance(item, str):
        item = ProhibitedPattern(item)
    elif isinstance(item, tuple):
        item = ProhibitedPattern(*item)
    if not isinstance(item, ProhibitedPattern):
        raise TypeError(f"Unsupported prohibited text pattern: {item!r}")
    return item.compile()


def _compile_patterns(prohibited_text: Sequence[ProhibitedText]) -> List[Pattern[str]]:
    return [_compile_pattern(item) for item in prohibited_text]


def validate_entry(key: str, translation: str, context: ValidationContext,
                   patterns: Optional[Sequence[Pattern[str]]] = None) -> List[Diagnostic]:
    """
    Runs every rule against a single key and its translation.

    Args:
        key: The translation key, which is the text in the source language.
        translation: The translated value.
        context: The locale and namespace the entry belongs to.
        patterns: Pre-compiled prohibited text patterns. Compiled from the context if omitted.

    Returns:
        The diagnostics of the entry in rule order. Empty if the entry is valid.
    """
    if patterns is None:
        patterns = _compile_patterns(context.prohibited_text)

    diagnostics = []

    if context.namespace == context.default_namespace:
        diagnostics.append(Diagnostic(RULE_MISSING_NAMESPACE, 'is missing an explicit namespace', key))

    if context.namespace.endswith(REMOVED_NAMESPACE_SUFFIX):
        diagnostics.append(Diagnostic(RULE_REMOVED_FROM_SOURCE, 'is tagged as removed from source code', key))

    if translation == '':
        diagnostics.append(Diagnostic(RULE_MISSING_TRANSLATION, 'does not have a translation', key))

    if context.locale != context.default_locale and translation == key:
        diagnostics.append(Diagnostic(
            RULE_EQUAL_TO_SOURCE, 'has a translation equal to the source language', key))

    # The count and names of the component markers have to be the same, but
    # translations are free to move them around.
    component_markers_key = parse_component_markers(key)
    component_markers_translation = parse_component_markers(translation)

    if not markers_equal_as_multisets(component_markers_key, component_markers_translation):
        diagnostics.append(Diagnostic(
            RULE_COMPONENT_MARKERS_MISMATCH,
            'has mismatching component markers in the translation',
            key,
            expected=sorted(component_markers_key),
            received=sorted(component_markers_translation),
        ))

    if not is_valid_component_marker_structure(component_markers_translation):
        diagnostics.append(Diagnostic(
            RULE_COMPONENT_MARKERS_STRUCTURE,
            'has invalid component marker structure in the translation',
            key,
            received=component_markers_translation,
        ))

    interpolation_markers_key = parse_interpolation_markers(key)
    interpolation_markers_translation = parse_interpolation_markers(translation)

    if find_unknown_markers(interpolation_markers_key, interpolation_markers_translation):
        diagnostics.append(Diagnostic(
            RULE_INTERPOLATION_MARKERS_MISMATCH,
            'has mismatching interpolation markers in the translation',
            key,
            expected=sorted(interpolation_markers_key),
            received=sorted(interpolation_markers_translation),
        ))

    # Prohibited text keeps the voice of the translations consistent, e.g. "sign in" instead of "login".
    key_matches = find_prohibited_text(key, patterns)
    translation_matches = find_prohibited_text(translation, patterns)
    for pattern, key_match, translation_match in zip(patterns, key_matches, translation_matches):
        if key_match:
            diagnostics.append(Diagnostic(
                RULE_PROHIBITED_TEXT_KEY, 'has prohibited text in the key', key,
                prohibited=ProhibitedFinding(text=key, match=key_match, pattern=pattern.pattern),
            ))

        if translation_match:
            diagnostics.append(Diagnostic(
                RULE_PROHIBITED_TEXT_TRANSLATION, 'has prohibited text in the translation', key,
                prohibited=ProhibitedFinding(text=translation, match=translation_match, pattern=pattern.pattern),
            ))

    return diagnostics


def check_locale_file(context: ValidationContext) -> List[Diagnostic]:
    """
    Validates the content of one namespace file.

    Content that is not a flat JSON object of strings produces a single
    diagnostic and no per-key checks are run.

    Args:
        context: The file content together with its locale and namespace.

    Returns:
        The diagnostics of all keys, in the order the keys appear in the file.
    """
    try:
        locale_map = parse_locale_content(context.file_content)
    except LocaleParseError as e:
        logger.debug("Could not parse locale file for '%s/%s': %s", context.locale, context.namespace, e)
        return [Diagnostic(RULE_INVALID_FILE, INVALID_FILE_MESSAGE)]

    patterns = _compile_patterns(context.prohibited_text)
    diagnostics = []
    for key, translation in locale_map.items():
        diagnostics.extend(validate_entry(key, translation, context, patterns))
    return diagnostics


def validate_locale_file(
        file_content: str,
        locale: str,
        default_locale: str,
        namespace: str,
        default_namespace: str,
        prohibited_text: Sequence[ProhibitedText] = ()
) -> List[str]:
    """
    Validates the content of one namespace file and returns plain text diagnostics.

    Returns:
        A list of diagnostic messages. An empty list means the file is valid.
    """
    context = ValidationContext(
        file_content=file_content,
        locale=locale,
        default_locale=default_locale,
        namespace=namespace,
        default_namespace=default_namespace,
        prohibited_text=tuple(prohibited_text),
    )
    return [str(diagnostic) for diagnostic in check_locale_file(context)]
