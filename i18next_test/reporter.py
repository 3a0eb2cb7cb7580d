"""Terminal output for the results of a locale file run."""
from typing import Callable, List, Sequence

from i18next_test.locale_validator import Diagnostic, quote_key
from i18next_test.translation_validator import bracket_highlight, highlight_match

ANSI_RESET = "\033[0m"
ANSI_RED = "\033[31m"
ANSI_GREEN = "\033[32m"
ANSI_CYAN = "\033[36m"
ANSI_RED_BACKGROUND = "\033[41m"

# Column under the text following "[pass] " / "[fail] ".
DIAGNOSTIC_PADDING = '         '


class Reporter:
    """
    Formats pass/fail lines and diagnostics, optionally with ANSI colors.

    Lines are handed to `write`, one call per line, so the caller decides
    whether they go to stdout, tqdm.write or a list in tests.
    """

    def __init__(self, write: Callable[[str], None], use_color: bool = True, silent: bool = False):
        self.write = write
        self.use_color = use_color
        self.silent = silent

    def _style(self, code: str, text: str) -> str:
        if not self.use_color:
            return text
        return f"{code}{text}{ANSI_RESET}"

    def cyan(self, text: str) -> str:
        return self._style(ANSI_CYAN, text)

    def green(self, text: str) -> str:
        return self._style(ANSI_GREEN, text)

    def red(self, text: str) -> str:
        return self._style(ANSI_RED, text)

    def highlight(self, text: str) -> str:
        if not self.use_color:
            return bracket_highlight(text)
        return f"{ANSI_RED_BACKGROUND}{text}{ANSI_RESET}"

    def header(self) -> None:
        self.write('')
        self.write(self.cyan('  i18next Test'))
        self.write(self.cyan('  ------------'))
        self.write('')

    def footer(self) -> None:
        self.write('')

    def file_result(self, file_path: str, diagnostics: Sequence[Diagnostic]) -> None:
        if not diagnostics:
            if not self.silent:
                self.write(self.green('  [pass] ') + file_path)
            return

        self.write(self.red('  [fail] ') + file_path)
        for diagnostic in diagnostics:
            self.print_diagnostic(diagnostic)

    def print_diagnostic(self, diagnostic: Diagnostic) -> None:
        lines = self.format_diagnostic(diagnostic)
        for i, line in enumerate(lines):
            prefix = '- ' if i == 0 else '  '
            self.write(DIAGNOSTIC_PADDING + prefix + line)

    def format_diagnostic(self, diagnostic: Diagnostic) -> List[str]:
        """Renders a diagnostic like str(diagnostic), with the key and labels colored."""
        if diagnostic.key is None:
            lines = [diagnostic.message]
        else:
            lines = [self.cyan(quote_key(diagnostic.key)) + ' ' + diagnostic.message]

        for label, value in diagnostic.detail_lines():
            if label.startswith('Expected'):
                lines.append(self.green(label) + value)
            elif label.startswith('Prohibited'):
                highlighted = highlight_match(
                    diagnostic.prohibited.text, diagnostic.prohibited.match, self.highlight)
                lines.append(self.red(label) + highlighted)
            else:
                lines.append(self.red(label) + value)
        return lines
