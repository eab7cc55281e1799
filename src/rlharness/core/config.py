"""Typed, nested configuration store.

Scalar values are tagged with one of four kinds (int, real, string, bool) and
are only handed back when the requested kind matches. A missing key or a kind
mismatch resolves to the caller-supplied default, so unknown or mistyped keys
never raise.

Two on-disk shapes are supported:

- a line-oriented, JSON-like text format::

      {
        # comment
        "num_episodes": 500,
        "agent": "random",
        "render": false,
        // another comment
        "action_low": -1.0,
      }

  Braces and trailing commas are ignored. The format is flat: nested
  sections have to be populated programmatically (or through YAML).

- YAML, where nested mappings become sections.

Example:
    >>> cfg = Config.create({"x": 5, "y": "hi", "z": True})
    >>> cfg.get("x", 0)
    5
    >>> cfg.get("x", 0.0)  # stored as int, requested as real
    0.0
"""
from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import numpy as np
import yaml

from .errors import ConfigError

Scalar = Union[int, float, str, bool]

_COMMENT_PREFIXES = ("#", "//")
_YAML_SUFFIXES = (".yaml", ".yml")
_REAL_LITERALS = {
    "Infinity": math.inf,
    "-Infinity": -math.inf,
    "NaN": math.nan,
}
# line separators json.dumps leaves unescaped with ensure_ascii=False
_LINE_BREAK_ESCAPES = {"\x85": "\\u0085", "\u2028": "\\u2028", "\u2029": "\\u2029"}
# plain decimal literals only, so Python spellings like 1_000 or 0x10 stay strings
_NUMBER = re.compile(r"[-+]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][-+]?[0-9]+)?")


class ValueKind(Enum):
    """Tag of a scalar config value."""

    INT = "int"
    REAL = "real"
    STRING = "string"
    BOOL = "bool"

    @classmethod
    def of(cls, value: Any) -> "ValueKind":
        """Infer the kind of a Python scalar."""
        if isinstance(value, np.generic):
            value = value.item()
        # bool first: it is an int subclass
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            return cls.INT
        if isinstance(value, float):
            return cls.REAL
        if isinstance(value, str):
            return cls.STRING
        raise TypeError(f"Unsupported config value type: {type(value).__name__}")

    @classmethod
    def from_type(cls, tp: type) -> "ValueKind":
        mapping = {bool: cls.BOOL, int: cls.INT, float: cls.REAL, str: cls.STRING}
        if tp not in mapping:
            raise TypeError(f"Unsupported config value type: {getattr(tp, '__name__', tp)}")
        return mapping[tp]


_CASTS = {
    ValueKind.BOOL: bool,
    ValueKind.INT: int,
    ValueKind.REAL: float,
    ValueKind.STRING: str,
}


@dataclass(frozen=True)
class ConfigValue:
    """A scalar config value together with its kind tag."""

    kind: ValueKind
    value: Scalar

    @classmethod
    def of(cls, value: Any) -> "ConfigValue":
        kind = ValueKind.of(value)
        if isinstance(value, np.generic):
            value = value.item()
        return cls(kind, _CASTS[kind](value))

    def format(self) -> str:
        """Render the value as a literal of the text format."""
        if self.kind is ValueKind.STRING:
            return _quote(self.value)
        if self.kind is ValueKind.BOOL:
            return "true" if self.value else "false"
        if self.kind is ValueKind.REAL:
            if math.isnan(self.value):
                return "NaN"
            if math.isinf(self.value):
                return "Infinity" if self.value > 0 else "-Infinity"
            # repr always carries a '.' or an exponent, so it re-parses as real
            return repr(self.value)
        return str(self.value)


class Config:
    """Mapping of scalar values plus a separate mapping of nested sections.

    Scalars and sections live in independent namespaces: ``get("agent")`` and
    ``get_section("agent")`` never see each other.
    """

    def __init__(
        self,
        values: Optional[Mapping[str, Any]] = None,
        sections: Optional[Mapping[str, Any]] = None,
    ):
        self._values: Dict[str, ConfigValue] = {}
        self._sections: Dict[str, Config] = {}
        for key, value in (values or {}).items():
            self.set(key, value)
        for name, section in (sections or {}).items():
            self.set_section(name, section)

    @classmethod
    def create(cls, values: Mapping[str, Any]) -> "Config":
        """Build a flat config from key/value pairs."""
        return cls(values)

    # Scalar access -------------------------------------------------------
    def get(self, key: str, default: Any = None, kind: Union[ValueKind, type, None] = None) -> Any:
        """Return the value under ``key`` if its kind matches, else ``default``.

        Args:
            key: Scalar key
            default: Returned when the key is absent or holds another kind
            kind: Requested kind (``ValueKind`` or one of ``int``, ``float``,
                ``str``, ``bool``). Inferred from ``default`` when omitted.
                With neither, the raw stored value is returned.
        """
        stored = self._values.get(key)
        if stored is None:
            return default
        if kind is None:
            if default is None:
                return stored.value
            kind = ValueKind.of(default)
        elif not isinstance(kind, ValueKind):
            kind = ValueKind.from_type(kind)
        if stored.kind is not kind:
            return default
        return stored.value

    def get_int(self, key: str, default: Optional[int] = 0) -> Optional[int]:
        return self.get(key, default, ValueKind.INT)

    def get_float(self, key: str, default: Optional[float] = 0.0) -> Optional[float]:
        return self.get(key, default, ValueKind.REAL)

    def get_str(self, key: str, default: Optional[str] = "") -> Optional[str]:
        return self.get(key, default, ValueKind.STRING)

    def get_bool(self, key: str, default: Optional[bool] = False) -> Optional[bool]:
        return self.get(key, default, ValueKind.BOOL)

    def get_value(self, key: str) -> Optional[ConfigValue]:
        """Return the tagged value under ``key`` (or ``None``)."""
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"Config keys must be strings, got {type(key).__name__}")
        if not key:
            raise ConfigError("Config keys must be non-empty")
        if not isinstance(value, ConfigValue):
            value = ConfigValue.of(value)
        self._values[key] = value

    def has(self, key: str) -> bool:
        return key in self._values

    def keys(self) -> List[str]:
        return list(self._values)

    def items(self) -> List[Tuple[str, Scalar]]:
        return [(key, cv.value) for key, cv in self._values.items()]

    # Section access ------------------------------------------------------
    def get_section(self, name: str) -> "Config":
        """Return the nested section ``name``, or an empty config."""
        section = self._sections.get(name)
        return section if section is not None else Config()

    def set_section(self, name: str, section: Union["Config", Mapping[str, Any]]) -> None:
        if not isinstance(section, Config):
            if not isinstance(section, Mapping):
                raise TypeError(f"Section '{name}' must be a Config or a mapping")
            section = Config.from_dict(section)
        self._sections[name] = section

    def has_section(self, name: str) -> bool:
        return name in self._sections

    def section_names(self) -> List[str]:
        return list(self._sections)

    # Conversion ----------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        """Build a config from a nested mapping (mappings become sections).

        ``None`` values are dropped; anything that is neither a scalar nor a
        mapping raises ``ConfigError``.
        """
        config = cls()
        for key, value in data.items():
            key = str(key)
            if value is None:
                continue
            if isinstance(value, Mapping):
                config.set_section(key, cls.from_dict(value))
                continue
            try:
                config.set(key, value)
            except TypeError as exc:
                raise ConfigError(f"Unsupported value for '{key}': {value!r}") from exc
        return config

    def copy(self) -> "Config":
        """Return an independent copy (sections are copied recursively)."""
        clone = Config()
        clone._values = dict(self._values)
        clone._sections = {name: section.copy() for name, section in self._sections.items()}
        return clone

    def to_dict(self) -> Dict[str, Any]:
        """Return a nested plain-dict view (sections as nested dicts)."""
        data: Dict[str, Any] = {key: cv.value for key, cv in self._values.items()}
        for name, section in self._sections.items():
            if name in data:
                raise ConfigError(
                    f"'{name}' is both a value and a section and cannot be flattened"
                )
            data[name] = section.to_dict()
        return data

    # Text format ---------------------------------------------------------
    @classmethod
    def from_text(cls, text: str, source: str = "<string>") -> "Config":
        """Parse the line-oriented text format."""
        config = cls()
        # only "\n" ends a line; str.splitlines would also break on U+2028 and friends
        for lineno, raw_line in enumerate(text.split("\n"), start=1):
            line = _strip_structure(raw_line)
            if not line:
                continue
            for pair in _split_pairs(line, source, lineno):
                key, value = _parse_pair(pair, source, lineno)
                config.set(key, value)
        return config

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Config":
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Could not open config file: {path}") from exc
        return cls.from_text(text, source=str(path))

    def to_text(self) -> str:
        """Serialize the scalar values (sorted by key). Sections are not written."""
        lines = [
            f"  {_quote(key)}: {self._values[key].format()}"
            for key in sorted(self._values)
        ]
        body = ",\n".join(lines)
        return "{\n" + (body + "\n" if body else "") + "}\n"

    def to_file(self, path: Union[str, Path]) -> None:
        try:
            Path(path).write_text(self.to_text(), encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Could not create config file: {path}") from exc

    # YAML ----------------------------------------------------------------
    @classmethod
    def from_yaml_text(cls, text: str) -> "Config":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML config: {exc}") from exc
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigError("YAML config must be a mapping at the top level")
        return cls.from_dict(data)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Config":
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Could not open config file: {path}") from exc
        return cls.from_yaml_text(text)

    def to_yaml(self, path: Union[str, Path]) -> None:
        try:
            with open(path, "w", encoding="utf-8") as f:
                yaml.safe_dump(self.to_dict(), f, sort_keys=True)
        except OSError as exc:
            raise ConfigError(f"Could not create config file: {path}") from exc

    # Dunder --------------------------------------------------------------
    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Config):
            return NotImplemented
        return self._values == other._values and self._sections == other._sections

    def __repr__(self) -> str:
        values = {key: cv.value for key, cv in self._values.items()}
        return f"Config(values={values!r}, sections={sorted(self._sections)!r})"


def load_config(path: Union[str, Path]) -> Config:
    """Load a config file, choosing YAML or the text format by suffix."""
    if Path(path).suffix.lower() in _YAML_SUFFIXES:
        return Config.from_yaml(path)
    return Config.from_file(path)


# Text format helpers -----------------------------------------------------
def _quote(text: str) -> str:
    quoted = json.dumps(text, ensure_ascii=False)
    for char, escape in _LINE_BREAK_ESCAPES.items():
        quoted = quoted.replace(char, escape)
    return quoted


def _strip_structure(line: str) -> str:
    """Drop whitespace, comments, braces and trailing commas from a line."""
    line = line.strip()
    if not line or line.startswith(_COMMENT_PREFIXES):
        return ""
    while line and line[0] == "{":
        line = line[1:].lstrip()
    while line and line[-1] in ",}":
        line = line[:-1].rstrip()
    return line


def _find_unquoted(text: str, target: str) -> int:
    in_quotes = False
    escaped = False
    for idx, ch in enumerate(text):
        if in_quotes:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_quotes = False
        elif ch == '"':
            in_quotes = True
        elif ch == target:
            return idx
    return -1


def _split_pairs(line: str, source: str, lineno: int) -> List[str]:
    """Split a line on commas that sit outside quoted strings."""
    parts: List[str] = []
    buf: List[str] = []
    in_quotes = False
    escaped = False
    for ch in line:
        if in_quotes:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_quotes = False
        elif ch == '"':
            in_quotes = True
        elif ch == ",":
            parts.append("".join(buf))
            buf = []
            continue
        buf.append(ch)
    if in_quotes:
        raise ConfigError(f"{source}:{lineno}: unterminated string")
    parts.append("".join(buf))
    return [part.strip() for part in parts if part.strip()]


def _parse_pair(pair: str, source: str, lineno: int) -> Tuple[str, Scalar]:
    idx = _find_unquoted(pair, ":")
    if idx < 0:
        raise ConfigError(f"{source}:{lineno}: expected '\"key\": value', got {pair!r}")
    key = _parse_key(pair[:idx].strip(), source, lineno)
    raw_value = pair[idx + 1:].strip()
    if not raw_value:
        raise ConfigError(f"{source}:{lineno}: missing value for '{key}'")
    if raw_value[0] in "{[":
        raise ConfigError(
            f"{source}:{lineno}: nested values are not supported in the text format ('{key}')"
        )
    return key, _parse_scalar(raw_value, source, lineno)


def _parse_key(raw: str, source: str, lineno: int) -> str:
    if raw.startswith('"'):
        key = _decode_string(raw, source, lineno)
    else:
        key = raw
    if not key:
        raise ConfigError(f"{source}:{lineno}: empty key")
    return key


def _decode_string(raw: str, source: str, lineno: int) -> str:
    if len(raw) < 2 or not raw.endswith('"'):
        raise ConfigError(f"{source}:{lineno}: unterminated string {raw!r}")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{source}:{lineno}: invalid string {raw!r}") from exc


def _parse_scalar(raw: str, source: str, lineno: int) -> Scalar:
    if raw.startswith('"'):
        return _decode_string(raw, source, lineno)
    if raw == "true":
        return True
    if raw == "false":
        return False
    if raw in _REAL_LITERALS:
        return _REAL_LITERALS[raw]
    if not _NUMBER.fullmatch(raw):
        # bare words are kept as strings
        return raw
    if any(ch in raw for ch in ".eE"):
        return float(raw)
    return int(raw)


__all__ = ["Config", "ConfigValue", "ValueKind", "load_config"]
