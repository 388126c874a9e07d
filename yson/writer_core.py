"""State machine and output handling shared by the JSON writers."""

from __future__ import annotations

import dataclasses
import enum
import io
import os
from dataclasses import dataclass, field
from typing import IO, Union

from yson.writer_utils import current_line_width, find_split_pos

MAX_BUFFER_SIZE = 64 * 1024

Target = Union[None, str, os.PathLike, IO]


class JsonWriterError(Exception):
    """Raised when the writer is asked to produce invalid output."""


class JsonFormatting(enum.Enum):
    """How whitespace is laid out between values."""

    DEFAULT = "default"
    NONE = "none"
    FLAT = "flat"
    FORMAT = "format"


class LanguageExtensions(enum.IntFlag):
    """Optional departures from strict JSON."""

    NONE = 0
    NON_FINITE_FLOATS = 1
    QUOTED_NON_FINITE_FLOATS = 2
    UNQUOTED_VALUE_NAMES = 4
    MULTILINE_STRINGS = 8
    ESCAPE_NON_ASCII_CHARACTERS = 16


@dataclass(frozen=True)
class StructureParameters:
    """Layout of one array or object."""

    formatting: JsonFormatting = JsonFormatting.DEFAULT
    values_per_line: int = 1


class _State(enum.Enum):
    AT_START_OF_VALUE_NO_COMMA = enum.auto()
    AT_START_OF_VALUE_AFTER_COMMA = enum.auto()
    AT_START_OF_STRUCTURE = enum.auto()
    AT_END_OF_VALUE = enum.auto()
    AT_START_OF_LINE_NO_COMMA = enum.auto()
    AT_START_OF_LINE_AFTER_COMMA = enum.auto()
    AT_START_OF_LINE_BEFORE_COMMA = enum.auto()
    AFTER_COMMA = enum.auto()


@dataclass
class _Context:
    end_char: str
    parameters: StructureParameters = field(default_factory=StructureParameters)
    value_index: int = 0


def _is_javascript_identifier(text: str) -> bool:
    if not text:
        return False
    first = text[0]
    if not (first in "_$" or first.isalpha()):
        return False
    return all(c in "_$" or c.isalnum() for c in text[1:])


class JsonWriterBase:
    """Writes the structure of a JSON document: arrays, objects, commas, layout.

    *target* is None to collect the output in memory, a path to write a file,
    or an open binary or text stream.
    """

    def __init__(
        self,
        target: Target = None,
        formatting: JsonFormatting = JsonFormatting.NONE,
    ) -> None:
        self._owned_file: IO | None = None
        if target is None:
            self._stream: IO | None = None
        elif isinstance(target, (str, os.PathLike)):
            self._owned_file = open(target, "wb")
            self._stream = self._owned_file
        else:
            self._stream = target
        self._text_stream = isinstance(self._stream, io.TextIOBase)
        if formatting == JsonFormatting.DEFAULT:
            formatting = JsonFormatting.NONE
        self._contexts: list[_Context] = [
            _Context("", StructureParameters(formatting))
        ]
        self._buffer = bytearray()
        self._max_buffer_size = MAX_BUFFER_SIZE if self._stream is not None else None
        self._state = _State.AT_START_OF_VALUE_NO_COMMA
        self._indentation = ""
        self._indentation_character = " "
        self._indentation_width = 2
        self._key = ""
        self._extensions = LanguageExtensions.NONE
        self._floating_point_precision = 9
        self._formatting_enabled = True
        self._maximum_line_width = 120

    # -- output -------------------------------------------------------------

    @property
    def stream(self) -> IO | None:
        """The stream being written to, after flushing pending output."""
        self.flush()
        return self._stream

    def getvalue(self) -> str:
        """Return the text written so far; empty when writing to a stream."""
        if self._stream is not None:
            return ""
        return self._buffer.decode("utf-8")

    def flush(self) -> JsonWriterBase:
        """Pass buffered output on to the stream."""
        if self._stream is not None and self._buffer:
            self._emit(bytes(self._buffer))
            self._buffer.clear()
        return self

    def close(self) -> None:
        """Flush, and close the file if the writer opened it."""
        self.flush()
        if self._owned_file is not None and not self._owned_file.closed:
            self._owned_file.close()

    def __enter__(self) -> JsonWriterBase:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- settings -----------------------------------------------------------

    @property
    def indentation(self) -> tuple[str, int]:
        """The indentation character and width."""
        return self._indentation_character, self._indentation_width

    def set_indentation(self, character: str, width: int) -> JsonWriterBase:
        """Use *width* copies of *character* per indentation level."""
        self._indentation_character = character
        self._indentation_width = width
        return self

    @property
    def formatting_enabled(self) -> bool:
        return self._formatting_enabled

    @formatting_enabled.setter
    def formatting_enabled(self, value: bool) -> None:
        self._formatting_enabled = bool(value)

    @property
    def language_extensions(self) -> LanguageExtensions:
        return self._extensions

    @language_extensions.setter
    def language_extensions(self, value: int) -> None:
        self._extensions = LanguageExtensions(value)

    @property
    def maximum_line_width(self) -> int:
        return self._maximum_line_width

    @maximum_line_width.setter
    def maximum_line_width(self, value: int) -> None:
        if value < 8:
            raise JsonWriterError("Maximum line width can not be less than 8.")
        self._maximum_line_width = value

    @property
    def floating_point_precision(self) -> int:
        return self._floating_point_precision

    @floating_point_precision.setter
    def floating_point_precision(self, value: int) -> None:
        self._floating_point_precision = max(value, 1)

    @property
    def formatting(self) -> JsonFormatting:
        """The formatting in effect at the current position."""
        if not self._formatting_enabled:
            return JsonFormatting.NONE
        if not self._contexts:
            return JsonFormatting.FORMAT
        return self._contexts[-1].parameters.formatting

    # -- structures ---------------------------------------------------------

    def begin_array(self, parameters: StructureParameters | None = None) -> JsonWriterBase:
        return self._begin_structure("[", "]", parameters or StructureParameters())

    def end_array(self) -> JsonWriterBase:
        return self._end_structure("]")

    def begin_object(self, parameters: StructureParameters | None = None) -> JsonWriterBase:
        return self._begin_structure("{", "}", parameters or StructureParameters())

    def end_object(self) -> JsonWriterBase:
        return self._end_structure("}")

    def raw_value(self, value: str) -> JsonWriterBase:
        """Write *value* verbatim as a complete value."""
        self._begin_value()
        self._write_text(value)
        self._state = _State.AT_END_OF_VALUE
        return self

    def raw_text(self, value: str) -> JsonWriterBase:
        """Write *value* verbatim without any commas or layout."""
        self._write_text(value)
        return self

    # -- manual layout ------------------------------------------------------

    def indent(self) -> JsonWriterBase:
        self._indentation += self._indentation_character * self._indentation_width
        return self

    def outdent(self) -> JsonWriterBase:
        if len(self._indentation) < self._indentation_width:
            raise JsonWriterError("Can't outdent, indentation level is 0.")
        self._indentation = self._indentation[: len(self._indentation) - self._indentation_width]
        return self

    def write_comma(self) -> JsonWriterBase:
        if self._state == _State.AT_START_OF_LINE_BEFORE_COMMA:
            if self.formatting == JsonFormatting.FORMAT:
                self._write_indentation_impl()
        elif self._state != _State.AT_END_OF_VALUE:
            raise JsonWriterError("A comma has already been added.")
        self._buffer += b","
        self._state = _State.AFTER_COMMA
        return self

    def write_indentation(self) -> JsonWriterBase:
        transitions = {
            _State.AT_START_OF_LINE_NO_COMMA: _State.AT_START_OF_VALUE_NO_COMMA,
            _State.AT_START_OF_LINE_BEFORE_COMMA: _State.AT_END_OF_VALUE,
            _State.AT_START_OF_LINE_AFTER_COMMA: _State.AT_START_OF_VALUE_AFTER_COMMA,
        }
        new_state = transitions.get(self._state)
        if new_state is not None:
            self._write_indentation_impl()
            self._state = new_state
        return self

    def write_newline(self) -> JsonWriterBase:
        self._buffer += b"\n"
        transitions = {
            _State.AT_START_OF_VALUE_NO_COMMA: _State.AT_START_OF_LINE_NO_COMMA,
            _State.AT_START_OF_STRUCTURE: _State.AT_START_OF_LINE_NO_COMMA,
            _State.AT_START_OF_VALUE_AFTER_COMMA: _State.AT_START_OF_LINE_AFTER_COMMA,
            _State.AFTER_COMMA: _State.AT_START_OF_LINE_AFTER_COMMA,
            _State.AT_END_OF_VALUE: _State.AT_START_OF_LINE_BEFORE_COMMA,
        }
        self._state = transitions.get(self._state, self._state)
        return self

    def write_separator(self, count: int) -> JsonWriterBase:
        if count <= 0:
            return self
        self._buffer += b" " * count
        transitions = {
            _State.AT_START_OF_LINE_NO_COMMA: _State.AT_START_OF_VALUE_NO_COMMA,
            _State.AT_START_OF_LINE_BEFORE_COMMA: _State.AT_END_OF_VALUE,
            _State.AT_START_OF_LINE_AFTER_COMMA: _State.AT_START_OF_VALUE_AFTER_COMMA,
            _State.AFTER_COMMA: _State.AT_START_OF_VALUE_AFTER_COMMA,
        }
        self._state = transitions.get(self._state, self._state)
        return self

    # -- internals ----------------------------------------------------------

    def _has_extension(self, extension: LanguageExtensions) -> bool:
        return bool(self._extensions & extension)

    def _emit(self, data: bytes) -> None:
        assert self._stream is not None
        if self._text_stream:
            self._stream.write(data.decode("utf-8"))
        else:
            self._stream.write(data)

    def _write(self, data: bytes) -> None:
        if (
            self._max_buffer_size is None
            or len(self._buffer) + len(data) <= self._max_buffer_size
        ):
            self._buffer += data
        else:
            self.flush()
            self._emit(data)

    def _write_text(self, text: str) -> None:
        self._write(text.encode("utf-8"))

    def _write_multiline(self, data: bytes) -> None:
        max_width = self._maximum_line_width
        if len(data) <= max_width // 2:
            self._write(data)
            return
        room = max_width - current_line_width(self._buffer, max_width)
        start = 0
        if room > 2:
            start = find_split_pos(data, room - 1)
            self._write(data[:start])
        while True:
            stop = find_split_pos(data, start + max_width - 1)
            if stop == start:
                break
            self._buffer += b"\\\n"
            self._write(data[start:stop])
            start = stop

    def _write_string(self, text: str) -> JsonWriterBase:
        """Write *text*, already escaped, as a quoted string value."""
        self._begin_value()
        self._buffer += b'"'
        data = text.encode("utf-8")
        if self._has_extension(LanguageExtensions.MULTILINE_STRINGS):
            self._write_multiline(data)
        else:
            self._write(data)
        self._buffer += b'"'
        self._state = _State.AT_END_OF_VALUE
        return self

    def _is_inside_object(self) -> bool:
        return bool(self._contexts) and self._contexts[-1].end_char == "}"

    def _write_indentation_impl(self) -> None:
        self._write_text(self._indentation)
        self._contexts[-1].value_index = 0

    def _comma_for_format(self) -> None:
        context = self._contexts[-1]
        per_line = context.parameters.values_per_line
        if per_line <= 1 or context.value_index >= per_line:
            self._buffer += b",\n"
            self._write_indentation_impl()
        else:
            self._buffer += b", "

    def _begin_value(self) -> None:
        formatting = self.formatting
        state = self._state
        if state == _State.AT_START_OF_STRUCTURE:
            if formatting == JsonFormatting.FORMAT:
                self._buffer += b"\n"
                self._write_indentation_impl()
        elif state == _State.AT_END_OF_VALUE:
            if formatting == JsonFormatting.NONE:
                self._buffer += b","
            elif formatting == JsonFormatting.FLAT:
                self._buffer += b", "
            elif formatting == JsonFormatting.FORMAT:
                self._comma_for_format()
        elif state in (_State.AT_START_OF_LINE_NO_COMMA, _State.AT_START_OF_LINE_AFTER_COMMA):
            if formatting == JsonFormatting.FORMAT:
                self._write_indentation_impl()
        elif state == _State.AT_START_OF_LINE_BEFORE_COMMA:
            if formatting == JsonFormatting.NONE:
                self._buffer += b","
            elif formatting == JsonFormatting.FLAT:
                self._buffer += b", "
            elif formatting == JsonFormatting.FORMAT:
                self._write_indentation_impl()
                self._buffer += b",\n"
                self._write_indentation_impl()
        elif state == _State.AFTER_COMMA:
            if formatting == JsonFormatting.FLAT:
                self._buffer += b" "
            elif formatting == JsonFormatting.FORMAT:
                self._buffer += b"\n"
                self._write_indentation_impl()

        self._contexts[-1].value_index += 1
        if self._is_inside_object():
            unquoted = self._has_extension(
                LanguageExtensions.UNQUOTED_VALUE_NAMES
            ) and _is_javascript_identifier(self._key)
            if unquoted:
                self._write_text(self._key)
            else:
                self._buffer += b'"'
                self._write_text(self._key)
                self._buffer += b'"'
            self._buffer += b":"
            if formatting != JsonFormatting.NONE:
                self._buffer += b" "

    def _begin_structure(
        self, start_char: str, end_char: str, parameters: StructureParameters
    ) -> JsonWriterBase:
        self._begin_value()
        self._buffer += start_char.encode("ascii")
        if parameters.formatting == JsonFormatting.DEFAULT:
            parent = self._contexts[-1].parameters
            formatting = parent.formatting
            if parent.values_per_line > 1:
                formatting = JsonFormatting.FLAT
            parameters = dataclasses.replace(parameters, formatting=formatting)
        self._contexts.append(_Context(end_char, parameters))
        if self.formatting == JsonFormatting.FORMAT:
            self.indent()
        self._state = _State.AT_START_OF_STRUCTURE
        return self

    def _end_structure(self, end_char: str) -> JsonWriterBase:
        if len(self._contexts) <= 1 or self._contexts[-1].end_char != end_char:
            raise JsonWriterError(f"Incorrect position for '{end_char}'")

        formatting = self.formatting
        state = self._state
        if state in (_State.AT_START_OF_VALUE_NO_COMMA, _State.AT_START_OF_STRUCTURE):
            if formatting == JsonFormatting.FORMAT:
                self.outdent()
            self._contexts.pop()
        elif state == _State.AT_END_OF_VALUE:
            if formatting == JsonFormatting.FORMAT:
                self.outdent()
                self._contexts.pop()
                if self._contexts[-1].parameters.values_per_line <= 1:
                    self._buffer += b"\n"
                    self._write_indentation_impl()
            else:
                self._contexts.pop()
        elif state in (_State.AT_START_OF_LINE_NO_COMMA, _State.AT_START_OF_LINE_BEFORE_COMMA):
            if formatting == JsonFormatting.FORMAT:
                self.outdent()
                self._write_indentation_impl()
            self._contexts.pop()
        else:
            raise JsonWriterError(f"Incorrect position for '{end_char}'")

        self._buffer += end_char.encode("ascii")
        self._state = _State.AT_END_OF_VALUE
        return self