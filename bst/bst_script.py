"""
Parser for the operation mini-script used to replay a session:

    I 8, I 3, D 8
    S 3
    T LEVEL

One command per comma or line. The command letter is case-insensitive.
A JSON array of numbers is accepted as a list of inserts.
"""
import json
import logging
import re
from typing import List, NamedTuple, Tuple

from bst.bst_traverse import TRAVERSE_KINDS

logger = logging.getLogger(__name__)

_COMMANDS = {"I": "insert", "D": "delete", "S": "search", "T": "traverse"}
_TRAVERSE_TOKENS = {kind.upper(): kind for kind in TRAVERSE_KINDS}
_LINE_RE = re.compile(r"^\s*([A-Za-z])\s+(\S+)\s*$")


class ScriptError(ValueError):
    def __init__(self, message, position=None):
        if position is not None:
            message = f"command {position}: {message}"
        super().__init__(message)
        self.position = position


class ScriptCommand(NamedTuple):
    op: str
    argument: object


def coerce_value(value):
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"value is not numeric: {value!r}")


def parse_sequence(text: str) -> list:
    """Comma or whitespace separated numbers, e.g. '8, 3 10'."""
    if not text:
        return []
    normalized = text.replace("，", ",")
    tokens = [part.strip() for part in re.split(r"[,\s]+", normalized) if part.strip()]
    return [coerce_value(token) for token in tokens]


def parse_script_line(line: str) -> ScriptCommand:
    match = _LINE_RE.match(line)
    if not match:
        raise ValueError(f"cannot parse {line.strip()!r}")

    letter, argument = match.group(1).upper(), match.group(2)
    op = _COMMANDS.get(letter)
    if op is None:
        raise ValueError(f"unknown command {letter!r}")

    if op == "traverse":
        kind = _TRAVERSE_TOKENS.get(argument.upper())
        if kind is None:
            raise ValueError(f"unknown traversal {argument!r}")
        return ScriptCommand(op, kind)
    return ScriptCommand(op, coerce_value(argument))


def parse_script(text: str, strict: bool = False) -> List[ScriptCommand]:
    """
    Parse a whole script. Malformed lines are skipped with a warning, or
    raise ScriptError when `strict` is set.
    """
    raw = (text or "").strip()
    if not raw:
        return []

    if raw.startswith("["):
        try:
            values = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ScriptError(f"invalid value list: {exc.msg}") from exc
        if not isinstance(values, list):
            raise ScriptError("value list must be a JSON array")
        commands = []
        for position, value in enumerate(values, start=1):
            try:
                commands.append(ScriptCommand("insert", coerce_value(str(value))))
            except ValueError as exc:
                if strict:
                    raise ScriptError(str(exc), position) from exc
                logger.warning(f"Skipping list entry {position}: {exc}")
        return commands

    commands = []
    for position, line in enumerate(re.split(r"[\n,]+", raw), start=1):
        if not line.strip():
            continue
        try:
            commands.append(parse_script_line(line))
        except ValueError as exc:
            if strict:
                raise ScriptError(str(exc), position) from exc
            logger.warning(f"Skipping script command {position}: {exc}")
    return commands


def run_script(engine, tree, commands) -> Tuple[list, object]:
    """
    Replay `commands` against `tree`, threading each result into the next
    command. Returns the history entries and the final tree.
    """
    entries = []
    for command in commands:
        entry, tree = engine.run(tree, command.op, command.argument)
        entries.append(entry)
    return entries, tree
