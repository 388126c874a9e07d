# yson

A streaming JSON writer with fine control over layout, and small readers
that hand out tokens of big-endian binary input such as UBJSON.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Writing JSON

`yson.json_writer.JsonWriter` builds JSON one token at a time. Most
methods return the writer, so calls can be chained.

```python
from yson.json_writer import JsonWriter
from yson.writer_core import JsonFormatting

writer = JsonWriter(formatting=JsonFormatting.FORMAT)
(writer.begin_object()
       .key("name").value("example")
       .key("sizes").begin_array()
           .value(1).value(2.5).null()
       .end_array()
       .key("ok").boolean(True)
 .end_object())
print(writer.getvalue())
```

The first argument, `target`, says where the text goes:

- `None` (the default) keeps the text in memory; `getvalue()` returns it.
- A path opens that file for writing; the writer closes it in `close()`.
- An open text or binary stream is written to as the buffer fills up.
  `getvalue()` then returns an empty string.

`flush()` passes buffered output on to the stream, the `stream` property
flushes and returns the stream, and `close()` flushes and closes a file
the writer opened itself. The writer is also a context manager.

`value()` accepts `None`, `bool`, `int`, `float` and `str`; any other type
raises `TypeError`. Strings and keys are escaped. `binary()` and
`base64()` write bytes as a base64 string. Floats are written with
`%g`-style formatting using `floating_point_precision` significant digits
(default 9, at least 1, at most 15).

### Layout

- `JsonFormatting.NONE` (the default) writes compact output, `FLAT` puts
  everything on one line with spaces after commas and colons, and
  `FORMAT` puts each value on its own indented line.
- `StructureParameters(formatting, values_per_line)` passed to
  `begin_array()` or `begin_object()` sets the layout of that one
  structure, for instance several values on each line. A structure whose
  formatting is `DEFAULT` takes its parent's, or `FLAT` when the parent
  holds several values per line.
- `set_indentation(character, width)` picks the indentation character
  and step (the `indentation` property returns both); `indent()` and
  `outdent()` change the current level.
- `write_newline()`, `write_indentation()`, `write_separator(count)` and
  `write_comma()` place whitespace and commas by hand.
- `raw_value()` writes text verbatim as a complete value, and
  `raw_text()` writes text verbatim with no commas or layout.
- `formatting_enabled = False` turns all layout off; `formatting` reports
  the layout in effect at the current position.
- `maximum_line_width` (default 120, at least 8) is the width used when
  splitting multi-line strings.

### Language extensions

`yson.writer_core.LanguageExtensions` holds flags that relax strict JSON.
Switch them with `set_language_extension(extension, enabled)`, query them
with `language_extension(extension)`, or use the matching properties:

- `non_finite_floats_enabled`: write `NaN`, `Infinity` and `-Infinity`;
- `quoted_non_finite_floats_enabled`: write them as strings (enabling
  this also enables non-finite floats);
- `unquoted_value_names_enabled`: leave object keys unquoted when they
  are JavaScript identifiers;
- `multiline_strings_enabled`: split long strings over several lines with
  a trailing backslash;
- `escape_non_ascii_characters_enabled`: write every non-ASCII character
  as a `\uXXXX` escape.

Closing the wrong kind of structure, adding a second comma, outdenting
below level zero, setting a line width under 8, or writing a non-finite
float while that extension is off raises
`yson.writer_core.JsonWriterError`.

## Reading binary data

`yson.binary_reader` has three readers with the same interface:

- `BinaryBufferReader` reads from a bytes-like object in memory;
- `BinaryStreamReader` reads from a binary stream through an internal
  buffer, optionally starting with bytes already taken from the stream;
- `BinaryFileReader` opens a file by name and should be closed with
  `close()` or used as a context manager. A file that cannot be opened
  raises `BinaryReaderError`.

`read(size)` makes the next `size` bytes the current token and returns
`False` if the input ran out; `data()`, `front()` and `size()` describe
the token, and `front()` raises `BinaryReaderError` when it is empty.
`peek()` returns the next byte, or `None` at the end, without consuming
it. `advance(count)` skips bytes and returns `False` if the input ran
out. `position()` reports the offset of the current token.
`read_units(size, unit_size)` reads `size` bytes and returns them with
each big-endian unit of `unit_size` bytes in native byte order, or `None`
if the input ended first.

## Helpers

`yson.writer_utils` provides `find_split_pos(s, suggested_pos)`, which
finds a place to split an escaped UTF-8 string that does not break a
multi-byte character or an escape sequence, and
`current_line_width(buffer, max_line_width)`, which measures the width of
the last line in an output buffer.

## What this package does not do

There is no JSON parser and no UBJSON value reader or writer here. The
binary readers only hand out raw bytes; turning them into keys and values
is left to the caller.