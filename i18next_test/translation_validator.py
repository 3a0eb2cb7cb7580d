import re
from dataclasses import dataclass
from re import Pattern
from typing import Callable, List, Optional, Sequence

# Non-greedy, so "<0>here</0>" yields two markers instead of one.
COMPONENT_MARKER_REGEX = re.compile(r'<.*?>')
INTERPOLATION_MARKER_REGEX = re.compile(r'\{\{.*?\}\}')

# Captures the optional closing slash and the marker name.
_MARKER_PARTS_REGEX = re.compile(r'<(/)?(.*)>')


@dataclass(frozen=True)
class ProhibitedMatch:
    """Location of the first match of a prohibited pattern in a string."""
    start: int
    end: int
    text: str


def parse_component_markers(text: str) -> List[str]:
    """
    Extracts the component markers of a string, e.g. <0>, </0> and <1/>.

    Args:
        text: The key or translation to tokenize.

    Returns:
        The markers in the order they appear in the string.
    """
    return COMPONENT_MARKER_REGEX.findall(text)


def parse_interpolation_markers(text: str) -> List[str]:
    """
    Extracts the interpolation markers of a string, e.g. {{count}}.

    Args:
        text: The key or translation to tokenize.

    Returns:
        The markers in the order they appear in the string.
    """
    return INTERPOLATION_MARKER_REGEX.findall(text)


def markers_equal_as_multisets(base_markers: Sequence[str], target_markers: Sequence[str]) -> bool:
    """
    Checks if two marker sequences contain the same markers with the same counts.
    The position of the markers does not matter, since translations may need to
    reorder components to be grammatically correct.

    Args:
        base_markers: The markers extracted from the key.
        target_markers: The markers extracted from the translation.

    Returns:
        True if both sequences are equal once sorted, False otherwise.
    """
    return sorted(base_markers) == sorted(target_markers)


def find_unknown_markers(base_markers: Sequence[str], target_markers: Sequence[str]) -> List[str]:
    """
    Finds markers of the translation that do not exist in the key.

    Markers of the key are allowed to be omitted in the translation (e.g. to
    replace `{{count}}` with "one"), but the translation must never introduce
    a marker the key does not have.

    Args:
        base_markers: The markers extracted from the key.
        target_markers: The markers extracted from the translation.

    Returns:
        The unknown markers in the order they appear in the translation.
    """
    known_markers = set(base_markers)
    return [marker for marker in target_markers if marker not in known_markers]


def is_valid_component_marker_structure(markers: Sequence[str]) -> bool:
    """
    Checks that opened component markers are closed in the correct order.

    Args:
        markers: The component markers of a single string, as encountered.

    Returns:
        False if a closing marker has no open marker or closes the wrong one.
    """
    # Self-closing markers don't require any structure
    paired_markers = [marker for marker in markers if not marker.endswith('/>')]

    expected_closing_names: List[str] = []
    for marker in paired_markers:
        parts = _MARKER_PARTS_REGEX.match(marker)
        is_closing = parts.group(1) == '/'
        name = parts.group(2)

        if not is_closing:
            expected_closing_names.append(name)
            continue

        if not expected_closing_names:
            return False
        if expected_closing_names.pop() != name:
            return False

    return True


def compile_prohibited_pattern(pattern: str, ignore_case: bool = False) -> Pattern[str]:
    """Compiles a prohibited text pattern, raising re.error for invalid expressions."""
    flags = re.IGNORECASE if ignore_case else 0
    return re.compile(pattern, flags)


def find_first_match(text: str, pattern: Pattern[str]) -> Optional[ProhibitedMatch]:
    match = pattern.search(text)
    if match is None:
        return None
    return ProhibitedMatch(match.start(), match.end(), match.group(0))


def find_prohibited_text(text: str, patterns: Sequence[Pattern[str]]) -> List[Optional[ProhibitedMatch]]:
    """
    Scans a string for prohibited text.

    Every pattern is tested in list order and reports at most its first match,
    so a string can produce one finding per pattern.

    Args:
        text: The key or translation to scan.
        patterns: The compiled prohibited text patterns.

    Returns:
        One entry per pattern: the first match, or None if the pattern did not match.
    """
    return [find_first_match(text, pattern) for pattern in patterns]


def bracket_highlight(text: str) -> str:
    return f"[{text}]"


def highlight_match(text: str, match: ProhibitedMatch,
                    highlight: Callable[[str], str] = bracket_highlight) -> str:
    """Reproduces the string with the matched span passed through `highlight`."""
    return text[:match.start] + highlight(text[match.start:match.end]) + text[match.end:]
