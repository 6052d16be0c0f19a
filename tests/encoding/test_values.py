import decimal

import pytest

from restli import EncodingError, ListValue, MapValue, NULL, Number, String, encode_value


def test_documented_example():
    assert encode_value({'b': 2, 'a': [1, 2]}) == '(a:List(1,2),b:2)'


@pytest.mark.parametrize('value, expected', [
    (None, ''),
    (True, 'true'),
    (False, 'false'),
    (0, '0'),
    (123, '123'),
    (-5, '-5'),
    (2.0, '2'),
    (-0.0, '0'),
    (1.5, '1.5'),
    (0.1, '0.1'),
    (1e-05, '0.00001'),
    (1e20, '100000000000000000000'),
    (decimal.Decimal('1.50'), '1.5'),
    (decimal.Decimal('1E+3'), '1000'),
    ('', "''"),
    ('abc', 'abc'),
    ('A-z_0.9~', 'A-z_0.9~'),
])
def test_scalars(value, expected):
    assert encode_value(value) == expected


@pytest.mark.parametrize('value, expected', [
    ('a b', 'a%20b'),
    ('a,b', 'a%2Cb'),
    ('(x)', '%28x%29'),
    ('k:v', 'k%3Av'),
    ("it's", 'it%27s'),
    ('100%', '100%25'),
    ('a/b?c#d&e=f', 'a%2Fb%3Fc%23d%26e%3Df'),
    ('urn:li:person:123', 'urn%3Ali%3Aperson%3A123'),
    ('ü', '%C3%BC'),
])
def test_strings_are_escaped(value, expected):
    assert encode_value(value) == expected


@pytest.mark.parametrize('value, expected', [
    ([], 'List()'),
    ([1], 'List(1)'),
    (['a', 'b'], 'List(a,b)'),
    ([[]], 'List(List())'),
    ([''], "List('')"),
    ([[1, 2], [3]], 'List(List(1,2),List(3))'),
    ([{}], 'List(())'),
])
def test_lists(value, expected):
    assert encode_value(value) == expected


@pytest.mark.parametrize('value, expected', [
    ({}, '()'),
    ({'a': 1}, '(a:1)'),
    ({'b': 'x', 'a': 'y'}, '(a:y,b:x)'),
    ({'a': {'b': {'c': []}}}, '(a:(b:(c:List())))'),
    ({'a': ''}, "(a:'')"),
    ({'': 'x'}, "('':x)"),
    ({'key with space': 'v'}, '(key%20with%20space:v)'),
    ({'B': 1, 'a': 2}, '(B:1,a:2)'),  # code-point order: uppercase first
])
def test_maps(value, expected):
    assert encode_value(value) == expected


def test_structured_values_are_accepted():
    value = MapValue((('ids', ListValue((Number(1), String('x')))),))
    assert encode_value(value) == '(ids:List(1,x))'


def test_map_key_order_does_not_matter():
    assert encode_value({'a': 1, 'b': 2, 'c': 3}) == encode_value({'c': 3, 'b': 2, 'a': 1})


@pytest.mark.parametrize('value', [
    [None],
    [1, None],
    {'a': None},
    {'a': [None]},
    [NULL],
])
def test_nested_nulls_fail(value):
    with pytest.raises(EncodingError, match=r"Nulls cannot be encoded"):
        encode_value(value)


@pytest.mark.parametrize('value', [
    {1, 2},
    object(),
    float('nan'),
    {'a': b'bytes'},
    {1: 'x'},
])
def test_unsupported_values_fail(value):
    with pytest.raises(EncodingError):
        encode_value(value)


def test_cycles_fail():
    value = {'a': []}
    value['a'].append(value)
    with pytest.raises(EncodingError):
        encode_value(value)


def test_moderately_deep_nesting_is_encoded():
    value = 'x'
    for _ in range(100):
        value = [value]
    assert encode_value(value) == 'List(' * 100 + 'x' + ')' * 100


def test_safe_chars_pass_unescaped(settings):
    settings.encoding.safe_chars = '@!'
    assert encode_value('a@b!c d', settings=settings) == 'a@b!c%20d'


def test_grammar_delimiters_are_escaped_despite_safe_chars(settings):
    settings.encoding.safe_chars = "(),:'%"
    assert encode_value("(a,b):'%'", settings=settings) == '%28a%2Cb%29%3A%27%25%27'
