from html import escape
from typing import Optional

from .contract_template_engine import KNOWN_TOKENS

# command -> (prefix, suffix) wrapped around the selection
INLINE_COMMANDS = {
    "bold": ("**", "**"),
    "italic": ("*", "*"),
    "underline": ("<u>", "</u>"),
    "center": ("<center>", "</center>"),
}

# command -> prefix inserted at the start of every selected line
LINE_COMMANDS = {
    "heading1": "# ",
    "heading2": "## ",
    "bullet_list": "- ",
}

EDITOR_COMMANDS = sorted(
    list(INLINE_COMMANDS) + list(LINE_COMMANDS) + ["ordered_list", "link", "insert_variable"])


class EditorResult:
    def __init__(self, content: str, selection_start: int, selection_end: int):
        self.content = content
        self.selection_start = selection_start
        self.selection_end = selection_end


def _bounds(content: str, start: int, end: int):
    start = min(max(start, 0), len(content))
    end = min(max(end, start), len(content))
    return start, end


def insert_variable(content: str, start: int, end: int, key: str) -> EditorResult:
    """Replace the selection by ``{{KEY}}`` and put the caret after it."""
    if key not in KNOWN_TOKENS:
        raise ValueError(f"Variable inconnue : {key}")
    start, end = _bounds(content, start, end)
    token = "{{" + key + "}}"
    caret = start + len(token)
    return EditorResult(content[:start] + token + content[end:], caret, caret)


def wrap_selection(content: str, start: int, end: int, prefix: str, suffix: str) -> EditorResult:
    start, end = _bounds(content, start, end)
    wrapped = prefix + content[start:end] + suffix
    new_content = content[:start] + wrapped + content[end:]
    return EditorResult(new_content, start + len(prefix), start + len(prefix) + (end - start))


def prefix_lines(content: str, start: int, end: int, prefix_for) -> EditorResult:
    """Prefix every line touched by the selection; ``prefix_for(i)`` gives the i-th prefix."""
    start, end = _bounds(content, start, end)
    line_start = content.rfind("\n", 0, start) + 1
    line_end = content.find("\n", end)
    if line_end == -1:
        line_end = len(content)

    lines = content[line_start:line_end].split("\n")
    block = "\n".join(prefix_for(i) + line for i, line in enumerate(lines))
    new_content = content[:line_start] + block + content[line_end:]
    return EditorResult(new_content, line_start, line_start + len(block))


def apply_command(content: str, start: int, end: int, command: str, value: Optional[str] = None) -> EditorResult:
    if command in INLINE_COMMANDS:
        prefix, suffix = INLINE_COMMANDS[command]
        return wrap_selection(content, start, end, prefix, suffix)

    if command in LINE_COMMANDS:
        return prefix_lines(content, start, end, lambda i: LINE_COMMANDS[command])

    if command == "ordered_list":
        return prefix_lines(content, start, end, lambda i: f"{i + 1}. ")

    if command == "link":
        if not value:
            raise ValueError("URL requise pour créer un lien")
        return wrap_selection(content, start, end, f'<a href="{escape(value, quote=True)}">', "</a>")

    if command == "insert_variable":
        return insert_variable(content, start, end, value or "")

    raise ValueError(f"Commande non supportée : {command}")
