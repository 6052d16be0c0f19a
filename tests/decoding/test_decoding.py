import pytest

from restli import DecodingError, decode, encode_value, reduced_decode


@pytest.mark.parametrize('token, expected', [
    ('', None),
    ("''", ''),
    ('abc', 'abc'),
    ('123', '123'),
    ('true', 'true'),
    ('a%20b', 'a b'),
    ('urn%3Ali%3Aperson%3A1', 'urn:li:person:1'),
    ('List()', []),
    ('List(1,2)', ['1', '2']),
    ("List('',x)", ['', 'x']),
    ('List(List(),List(a))', [[], ['a']]),
    ('()', {}),
    ('(a:1)', {'a': '1'}),
    ('(a:List(1,2),b:2)', {'a': ['1', '2'], 'b': '2'}),
    ("('':x)", {'': 'x'}),
    ('(a:(b:(c:List())))', {'a': {'b': {'c': []}}}),
    ('(k%3Ay:v%2Cw)', {'k:y': 'v,w'}),
])
def test_decoding(token, expected):
    assert decode(token) == expected


@pytest.mark.parametrize('token', [
    'List(',
    'List(1,2',
    '(a:1',
    '(a)',
    '(a:1,b)',
    'List(1,)',
    'List(,1)',
    '(a:1))',
    'a)',
    'List(1)x',
    "it's",
    "List('a')",
    '(a:1,a:2)',
    ')',
    ',',
])
def test_malformed_tokens_fail(token):
    with pytest.raises(DecodingError):
        decode(token)


def test_non_strings_fail():
    with pytest.raises(DecodingError):
        decode(123)


def test_too_deep_nesting_fails_as_decoding_error():
    token = 'List(' * 100000 + ')' * 100000
    with pytest.raises(DecodingError, match=r"too deeply"):
        decode(token)


@pytest.mark.parametrize('value', [
    'text with spaces & symbols: (a,b)',
    '',
    123,
    [1, [2, 3], []],
    {'b': {'c': 'x'}, 'a': [True, 'y']},
    {'': '', 'urn': 'urn:li:person:1'},
])
def test_reencoding_is_stable(value):
    token = encode_value(value)
    assert encode_value(decode(token)) == token


@pytest.mark.parametrize('token, expected', [
    ('123', '123'),
    ('urn:li:share:123', 'urn:li:share:123'),  # as the servers send them
    ('urn%3Ali%3Ashare%3A123', 'urn:li:share:123'),
    ('(account:urn%3Ali%3AsponsoredAccount%3A1,user:urn%3Ali%3Aperson%3A2)',
     {'account': 'urn:li:sponsoredAccount:1', 'user': 'urn:li:person:2'}),
    ('a%20b', 'a%20b'),  # not a reserved char, so kept literally
    ('100%25', '100%'),
    ('%28x%29%2C%27', "(x),'"),
])
def test_reduced_decoding(token, expected):
    assert reduced_decode(token) == expected


@pytest.mark.parametrize('token', ['(a:1', 'List(x', '(a:1)x'])
def test_reduced_decoding_of_malformed_structures_fails(token):
    with pytest.raises(DecodingError):
        reduced_decode(token)


@pytest.mark.parametrize('token, expected', [('', None), ("''", '')])
def test_reduced_decoding_of_empty_tokens(token, expected):
    assert reduced_decode(token) == expected
