import base64
import io
import json

import pytest

from yson.json_writer import JsonWriter
from yson.writer_core import (
    JsonFormatting,
    JsonWriterError,
    LanguageExtensions,
    StructureParameters,
)


def test_array_of_scalars_compact():
    writer = JsonWriter()
    writer.begin_array()
    writer.value(None).value(True).value(1).value("x")
    writer.end_array()
    assert writer.getvalue() == '[null,true,1,"x"]'


def test_boolean_and_null_methods():
    writer = JsonWriter()
    writer.begin_array().boolean(False).null().end_array()
    assert json.loads(writer.getvalue()) == [False, None]


@pytest.mark.parametrize(
    "text",
    ['quote"inside', "back\\slash", "line\nbreak", "tab\tand\x01ctrl", "æøå \u20ac"],
)
def test_string_escaping_round_trip(text):
    writer = JsonWriter()
    writer.value(text)
    assert json.loads(writer.getvalue()) == text


def test_escape_non_ascii_produces_ascii():
    text = "blåbær \U0001F600"
    writer = JsonWriter()
    writer.escape_non_ascii_characters_enabled = True
    writer.value(text)
    output = writer.getvalue()
    assert output.isascii()
    assert json.loads(output) == text


def test_control_character_escape():
    writer = JsonWriter()
    writer.value("\x01")
    assert writer.getvalue() == '"\\u0001"'


def test_object_with_escaped_key():
    writer = JsonWriter()
    writer.begin_object()
    writer.key('a"b').value(1)
    writer.key("c").value([].__len__())
    writer.end_object()
    assert json.loads(writer.getvalue()) == {'a"b': 1, "c": 0}


def test_current_key_is_escaped():
    writer = JsonWriter()
    writer.key('a"b')
    assert writer.current_key == 'a\\"b'


def test_formatted_object_layout():
    writer = JsonWriter(formatting=JsonFormatting.FORMAT)
    writer.begin_object().key("a").value(1).end_object()
    assert writer.getvalue() == '{\n  "a": 1\n}'


def test_nested_formatted_round_trip():
    writer = JsonWriter(formatting=JsonFormatting.FORMAT)
    writer.begin_object()
    writer.key("list").begin_array(StructureParameters(values_per_line=3))
    for number in range(7):
        writer.value(number)
    writer.end_array()
    writer.key("name").value("n")
    writer.end_object()
    assert json.loads(writer.getvalue()) == {"list": list(range(7)), "name": "n"}


def test_float_round_trip():
    writer = JsonWriter()
    writer.begin_array().value(0.5).value(-2.25).value(1e20).end_array()
    assert json.loads(writer.getvalue()) == [0.5, -2.25, 1e20]


def test_float_precision_limits_digits():
    writer = JsonWriter()
    writer.floating_point_precision = 3
    writer.value(3.14159)
    digits = [c for c in writer.getvalue() if c.isdigit()]
    assert len(digits) <= 3
    assert abs(float(writer.getvalue()) - 3.14159) < 0.01


def test_non_finite_float_rejected_by_default():
    writer = JsonWriter()
    with pytest.raises(JsonWriterError):
        writer.value(float("inf"))


def test_non_finite_floats_unquoted():
    writer = JsonWriter()
    writer.non_finite_floats_enabled = True
    writer.begin_array()
    writer.value(float("nan")).value(float("inf")).value(float("-inf"))
    writer.end_array()
    assert writer.getvalue() == "[NaN,Infinity,-Infinity]"


def test_quoted_non_finite_enables_non_finite():
    writer = JsonWriter()
    writer.quoted_non_finite_floats_enabled = True
    assert writer.non_finite_floats_enabled
    writer.value(float("-inf"))
    assert json.loads(writer.getvalue()) == "-Infinity"


def test_unquoted_value_names():
    writer = JsonWriter()
    writer.unquoted_value_names_enabled = True
    writer.begin_object().key("abc").value(1).key("1a").value(2).end_object()
    assert writer.getvalue() == '{abc:1,"1a":2}'


def test_base64_and_binary_round_trip():
    payload = bytes(range(20))
    writer = JsonWriter()
    writer.begin_array().base64(payload).binary(payload).end_array()
    decoded = [base64.b64decode(s) for s in json.loads(writer.getvalue())]
    assert decoded == [payload, payload]


def test_unsupported_value_type():
    writer = JsonWriter()
    with pytest.raises(TypeError):
        writer.value(object())


def test_language_extension_toggle():
    writer = JsonWriter()
    assert not writer.language_extension(LanguageExtensions.MULTILINE_STRINGS)
    writer.set_language_extension(LanguageExtensions.MULTILINE_STRINGS, True)
    assert writer.language_extension(LanguageExtensions.MULTILINE_STRINGS)
    assert writer.multiline_strings_enabled
    writer.set_language_extension(LanguageExtensions.MULTILINE_STRINGS, False)
    assert not writer.multiline_strings_enabled


def test_multiline_strings_split_and_rejoin():
    text = "word " * 40
    writer = JsonWriter()
    writer.maximum_line_width = 40
    writer.multiline_strings_enabled = True
    writer.value(text)
    output = writer.getvalue()
    assert "\\\n" in output
    assert all(len(line) <= 41 for line in output.split("\n"))
    assert json.loads(output.replace("\\\n", "")) == text


def test_writes_to_text_stream():
    stream = io.StringIO()
    writer = JsonWriter(stream)
    writer.begin_array().value("a").value(2).end_array()
    assert writer.getvalue() == ""
    writer.flush()
    assert json.loads(stream.getvalue()) == ["a", 2]


def test_writes_to_file(tmp_path):
    path = tmp_path / "out.json"
    with JsonWriter(path) as writer:
        writer.begin_object().key("k").value("v").end_object()
    assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}


def test_end_without_begin_raises():
    writer = JsonWriter()
    with pytest.raises(JsonWriterError):
        writer.end_object()