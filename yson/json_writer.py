"""JSON writer that turns Python values into JSON text."""

from __future__ import annotations

import base64 as _base64
import math

from yson.writer_core import JsonWriterBase, JsonWriterError, LanguageExtensions

_DOUBLE_DIGITS10 = 15

_SHORT_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _escape_char(char: str, escape_non_ascii: bool) -> str:
    short = _SHORT_ESCAPES.get(char)
    if short is not None:
        return short
    code = ord(char)
    if code < 0x20:
        return f"\\u{code:04X}"
    if escape_non_ascii and code > 0x7F:
        if code > 0xFFFF:
            code -= 0x10000
            high = 0xD800 + (code >> 10)
            low = 0xDC00 + (code & 0x3FF)
            return f"\\u{high:04X}\\u{low:04X}"
        return f"\\u{code:04X}"
    return char


def _escape(text: str, escape_non_ascii: bool) -> str:
    return "".join(_escape_char(char, escape_non_ascii) for char in text)


class JsonWriter(JsonWriterBase):
    """Writes JSON values, keys and structures to memory, a file or a stream."""

    # -- keys and values ----------------------------------------------------

    @property
    def current_key(self) -> str:
        """The key, escaped, that the next value inside an object gets."""
        return self._key

    def key(self, key: str) -> JsonWriter:
        """Set the key of the next value written inside an object."""
        self._key = _escape(key, self.escape_non_ascii_characters_enabled)
        return self

    def null(self) -> JsonWriter:
        self.raw_value("null")
        return self

    def boolean(self, value: bool) -> JsonWriter:
        self.raw_value("true" if value else "false")
        return self

    def value(self, value: object) -> JsonWriter:
        """Write None, a bool, an int, a float or a str as a JSON value."""
        if value is None:
            return self.null()
        if isinstance(value, bool):
            return self.boolean(value)
        if isinstance(value, int):
            self.raw_value(str(value))
            return self
        if isinstance(value, float):
            return self._write_float(value)
        if isinstance(value, str):
            self._write_string(
                _escape(value, self.escape_non_ascii_characters_enabled)
            )
            return self
        raise TypeError(f"Cannot write a value of type {type(value).__name__}")

    def binary(self, data: bytes | bytearray | memoryview) -> JsonWriter:
        """Write *data* as a base64-encoded string."""
        return self.base64(data)

    def base64(self, data: bytes | bytearray | memoryview) -> JsonWriter:
        """Write *data* as a base64-encoded string."""
        self._write_string(_base64.b64encode(bytes(data)).decode("ascii"))
        return self

    # -- language extensions ------------------------------------------------

    def language_extension(self, extension: LanguageExtensions) -> bool:
        """Return whether *extension* is enabled."""
        return self._has_extension(extension)

    def set_language_extension(
        self, extension: LanguageExtensions, enabled: bool
    ) -> JsonWriter:
        """Enable or disable *extension*."""
        if enabled:
            self._extensions |= extension
        else:
            self._extensions &= ~extension
        return self

    @property
    def non_finite_floats_enabled(self) -> bool:
        return self.language_extension(LanguageExtensions.NON_FINITE_FLOATS)

    @non_finite_floats_enabled.setter
    def non_finite_floats_enabled(self, value: bool) -> None:
        self.set_language_extension(LanguageExtensions.NON_FINITE_FLOATS, value)

    @property
    def quoted_non_finite_floats_enabled(self) -> bool:
        return self.language_extension(LanguageExtensions.QUOTED_NON_FINITE_FLOATS)

    @quoted_non_finite_floats_enabled.setter
    def quoted_non_finite_floats_enabled(self, value: bool) -> None:
        self.non_finite_floats_enabled = True
        self.set_language_extension(
            LanguageExtensions.QUOTED_NON_FINITE_FLOATS, value
        )

    @property
    def unquoted_value_names_enabled(self) -> bool:
        return self.language_extension(LanguageExtensions.UNQUOTED_VALUE_NAMES)

    @unquoted_value_names_enabled.setter
    def unquoted_value_names_enabled(self, value: bool) -> None:
        self.set_language_extension(LanguageExtensions.UNQUOTED_VALUE_NAMES, value)

    @property
    def multiline_strings_enabled(self) -> bool:
        return self.language_extension(LanguageExtensions.MULTILINE_STRINGS)

    @multiline_strings_enabled.setter
    def multiline_strings_enabled(self, value: bool) -> None:
        self.set_language_extension(LanguageExtensions.MULTILINE_STRINGS, value)

    @property
    def escape_non_ascii_characters_enabled(self) -> bool:
        return self.language_extension(
            LanguageExtensions.ESCAPE_NON_ASCII_CHARACTERS
        )

    @escape_non_ascii_characters_enabled.setter
    def escape_non_ascii_characters_enabled(self, value: bool) -> None:
        self.set_language_extension(
            LanguageExtensions.ESCAPE_NON_ASCII_CHARACTERS, value
        )

    # -- internals ----------------------------------------------------------

    def _write_float(self, number: float) -> JsonWriter:
        if math.isfinite(number):
            precision = min(self.floating_point_precision, _DOUBLE_DIGITS10)
            self.raw_value("%.*g" % (precision, number))
            return self
        if not self.non_finite_floats_enabled:
            raise JsonWriterError(f"Illegal floating point value '{number:f}'")
        if math.isnan(number):
            text = "NaN"
        elif number < 0:
            text = "-Infinity"
        else:
            text = "Infinity"
        if self.quoted_non_finite_floats_enabled:
            return self.value(text)
        self.raw_value(text)
        return self