import pytest

from restli import EncodingError, Placement, build_entity_path, encode_entity_id


@pytest.mark.parametrize('placement', [Placement.PATH, Placement.QUERY])
def test_none_means_no_id(placement):
    assert encode_entity_id(None, placement) == ''


@pytest.mark.parametrize('entity_id, expected', [
    (123, '123'),
    ('abc', 'abc'),
    ('', "''"),
    (True, 'true'),
    ('urn:li:sponsoredAccount:123', 'urn%3Ali%3AsponsoredAccount%3A123'),
    ('a/b', 'a%2Fb'),
    ('a b', 'a%20b'),
])
def test_simple_ids_in_path(entity_id, expected):
    assert encode_entity_id(entity_id) == expected
    assert encode_entity_id(entity_id, Placement.PATH) == expected


def test_compound_ids_in_path():
    entity_id = {'member': 'urn:li:person:1', 'account': 'urn:li:sponsoredAccount:2'}
    encoded = encode_entity_id(entity_id)
    assert encoded == '(account:urn%3Ali%3AsponsoredAccount%3A2,member:urn%3Ali%3Aperson%3A1)'


def test_compound_ids_in_query():
    encoded = encode_entity_id({'b': 'x y', 'a': 1}, Placement.QUERY)
    assert encoded == '(a:1,b:x%20y)'


def test_placement_by_name():
    assert encode_entity_id('x', 'query') == 'x'


def test_lists_are_not_ids():
    with pytest.raises(EncodingError, match=r"Lists cannot be used"):
        encode_entity_id([1, 2])


@pytest.mark.parametrize('safe_chars, placement, expected', [
    ('/', Placement.PATH, 'a%2Fb'),     # not safe in the path, whatever the grammar says
    ('/', Placement.QUERY, 'a/b'),      # but safe in the query
    ('&', Placement.PATH, 'a&b'),
    ('&', Placement.QUERY, 'a%26b'),    # a separator in the query
    ('#', Placement.PATH, 'a%23b'),
    ('#', Placement.QUERY, 'a%23b'),
])
def test_second_layer_per_placement(settings, safe_chars, placement, expected):
    settings.encoding.safe_chars = safe_chars
    entity_id = 'a' + safe_chars + 'b'
    assert encode_entity_id(entity_id, placement, settings=settings) == expected


def test_no_double_escaping():
    assert encode_entity_id('100%') == '100%25'
    assert encode_entity_id('100%', Placement.QUERY) == '100%25'


@pytest.mark.parametrize('entity_id, expected', [
    (None, 'https://host/v2/things'),
    (123, 'https://host/v2/things/123'),
    ('a b', 'https://host/v2/things/a%20b'),
    ({'x': 1, 'y': 2}, 'https://host/v2/things/(x:1,y:2)'),
])
def test_entity_path(entity_id, expected):
    assert build_entity_path('https://host/v2/things', entity_id) == expected
