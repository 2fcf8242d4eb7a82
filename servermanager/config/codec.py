"""
Server config codec.

Two formats are supported:

* ``json`` - plain JSON objects, written back with two-space indentation.
* ``ini`` - the key=value dialect used by Unreal-based servers::

      ; comment
      top_level=1
      [/Script/Pal.PalGameWorldSettings]
      OptionSettings=(Difficulty=None,ServerName="My Server",ExpRate=1.000000)
      Admins=(alice,bob)

  ``[name]`` opens a section (one nesting level). Values are quoted strings,
  numbers, booleans, bare strings or a parenthesized compound: a list when
  no item contains ``=``, otherwise a mapping of ``k=v`` items. Compound
  items are scalars only; a deeper ``(...)`` stays as its raw text.

The ini codec keeps values, not formatting: comments, blank lines and
quoting style are not preserved.
"""
import json
import re
from decimal import Decimal
from typing import Any, Dict, List, Union

JSON = "json"
INI = "ini"
SUPPORTED_FORMATS = (JSON, INI)

Scalar = Union[str, int, float, bool]
ConfigDocument = Dict[str, Any]

SECTION_RE = re.compile(r"^\[([^\[\]]+)\]$")
NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")
# Characters that force a string to be quoted on output
QUOTE_TRIGGERS = (' ', ',', '"')
# Inside a compound these also change how the item splits
COMPOUND_QUOTE_TRIGGERS = ('(', ')', '=')


class ConfigError(Exception):
    """Base error for config handling"""


class ConfigParseError(ConfigError):
    """Config text is structurally invalid"""


class UnsupportedConfigFormat(ConfigError, ValueError):
    """Format is neither json nor ini"""


def _check_format(fmt: str) -> str:
    if fmt not in SUPPORTED_FORMATS:
        raise UnsupportedConfigFormat(f"Unsupported config format: {fmt!r}")
    return fmt


def parse_config(text: str, fmt: str) -> ConfigDocument:
    """Parse config text into a document.

    Raises:
        ConfigParseError: JSON text is malformed or not an object
        UnsupportedConfigFormat: unknown fmt
    """
    if _check_format(fmt) == JSON:
        try:
            doc = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigParseError(f"Invalid JSON config: {e}") from e
        if not isinstance(doc, dict):
            raise ConfigParseError(f"JSON config must be an object, got {type(doc).__name__}")
        return doc
    return parse_ini(text)


def serialize_config(doc: ConfigDocument, fmt: str) -> str:
    """Render a document in the given format."""
    if _check_format(fmt) == JSON:
        return json.dumps(doc, indent=2, ensure_ascii=False)
    return serialize_ini(doc)


# --- ini parsing -------------------------------------------------------------

def _split_items(interior: str) -> List[str]:
    """Split on commas outside double quotes and nested parentheses."""
    items = []
    current = []
    in_quotes = False
    depth = 0
    for ch in interior:
        if ch == '"':
            in_quotes = not in_quotes
        elif not in_quotes:
            if ch == '(':
                depth += 1
            elif ch == ')' and depth > 0:
                depth -= 1
            elif ch == ',' and depth == 0:
                items.append(''.join(current))
                current = []
                continue
        current.append(ch)
    items.append(''.join(current))
    return [item.strip() for item in items if item.strip()]


def _parse_scalar(value: str) -> Scalar:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    if NUMBER_RE.match(value):
        return float(value) if '.' in value else int(value)
    if value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    return value


def _parse_compound(value: str) -> Union[List[Scalar], Dict[str, Scalar]]:
    items = _split_items(value[1:-1])
    if any('=' in item for item in items):
        mapping: Dict[str, Scalar] = {}
        for item in items:
            if '=' not in item:
                continue
            sub_key, _, sub_value = item.partition('=')
            mapping[sub_key.strip()] = _parse_scalar(sub_value.strip())
        return mapping
    return [_parse_scalar(item) for item in items]


def parse_value(value: str) -> Any:
    """Classify one raw value from the right-hand side of key=value."""
    value = value.strip()
    if value.startswith('(') and value.endswith(')'):
        return _parse_compound(value)
    return _parse_scalar(value)


def parse_ini(text: str) -> ConfigDocument:
    doc: ConfigDocument = {}
    current = doc

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith((';', '#')):
            continue

        section = SECTION_RE.match(line)
        if section:
            name = section.group(1).strip()
            if not isinstance(doc.get(name), dict):
                doc[name] = {}
            current = doc[name]
            continue

        if '=' not in line:
            continue
        key, _, value = line.partition('=')
        key = key.strip()
        if key:
            current[key] = parse_value(value)

    return doc


# --- ini serialization -------------------------------------------------------

def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, int):
        return str(value)
    # Plain notation: 1e-05 would read back as a string
    return format(Decimal(repr(value)), 'f')


def _is_raw_group(value: str) -> bool:
    """A nested compound kept as text, e.g. (Steam,Xbox)."""
    if not (value.startswith('(') and value.endswith(')')) or '"' in value:
        return False
    depth = 0
    for i, ch in enumerate(value):
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            # Must close only at the last character
            if depth == 0 and i != len(value) - 1:
                return False
            if depth < 0:
                return False
    return depth == 0


def _format_string(value: str, in_compound: bool) -> str:
    if in_compound and _is_raw_group(value):
        return value
    needs_quotes = (
        value == ''
        or any(ch in value for ch in QUOTE_TRIGGERS)
        or not isinstance(_parse_scalar(value), str)
        or (value.startswith('(') and value.endswith(')'))
        or value.startswith(('"', ';', '#'))
        or (in_compound and any(ch in value for ch in COMPOUND_QUOTE_TRIGGERS))
    )
    return f'"{value}"' if needs_quotes else value


def _format_scalar(value: Any, in_compound: bool = False) -> str:
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, (int, float)):
        return _format_number(value)
    if value is None:
        return '""'
    if isinstance(value, (list, tuple, dict)):
        return _format_compound(value)
    return _format_string(str(value), in_compound)


def _format_compound(value: Union[list, tuple, dict]) -> str:
    if isinstance(value, dict):
        items = [f"{k}={_format_scalar(v, in_compound=True)}" for k, v in value.items()]
    else:
        items = [_format_scalar(v, in_compound=True) for v in value]
    return "(" + ",".join(items) + ")"


def format_value(value: Any) -> str:
    """Render the right-hand side of a key=value line."""
    if isinstance(value, (list, tuple, dict)):
        return _format_compound(value)
    return _format_scalar(value)


def serialize_ini(doc: ConfigDocument) -> str:
    lines: List[str] = []
    sections = []

    # Unsectioned keys must come before the first header
    for key, value in doc.items():
        if isinstance(value, dict):
            sections.append((key, value))
        else:
            lines.append(f"{key}={format_value(value)}")

    for name, section in sections:
        if lines:
            lines.append("")
        lines.append(f"[{name}]")
        for key, value in section.items():
            lines.append(f"{key}={format_value(value)}")

    return "\n".join(lines) + "\n" if lines else ""
