import pytest

from restli import HTTPMethod, RestliMethod
from restli._cogs.structs.methods import METHODS_TABLE


@pytest.mark.parametrize('method, http_method, has_body', [
    (RestliMethod.GET, HTTPMethod.GET, False),
    (RestliMethod.BATCH_GET, HTTPMethod.GET, False),
    (RestliMethod.GET_ALL, HTTPMethod.GET, False),
    (RestliMethod.FINDER, HTTPMethod.GET, False),
    (RestliMethod.BATCH_FINDER, HTTPMethod.GET, False),
    (RestliMethod.CREATE, HTTPMethod.POST, True),
    (RestliMethod.BATCH_CREATE, HTTPMethod.POST, True),
    (RestliMethod.UPDATE, HTTPMethod.PUT, True),
    (RestliMethod.BATCH_UPDATE, HTTPMethod.PUT, True),
    (RestliMethod.PARTIAL_UPDATE, HTTPMethod.POST, True),
    (RestliMethod.BATCH_PARTIAL_UPDATE, HTTPMethod.POST, True),
    (RestliMethod.DELETE, HTTPMethod.DELETE, False),
    (RestliMethod.BATCH_DELETE, HTTPMethod.DELETE, False),
    (RestliMethod.ACTION, HTTPMethod.POST, True),
])
def test_table(method, http_method, has_body):
    assert method.http_method == http_method
    assert method.has_body == has_body


def test_table_is_complete():
    assert set(METHODS_TABLE) == set(RestliMethod)


def test_methods_are_distinct():
    assert len(set(RestliMethod)) == 14


@pytest.mark.parametrize('value', [
    'batch_get', 'BATCH_GET', 'batch-get', 'Batch-Get', RestliMethod.BATCH_GET,
])
def test_parsing(value):
    assert RestliMethod.parse(value) is RestliMethod.BATCH_GET


def test_parsing_unknown_methods_fails():
    with pytest.raises(ValueError, match=r"Unknown Rest.li method"):
        RestliMethod.parse('upsert')


def test_header_values():
    assert str(RestliMethod.BATCH_PARTIAL_UPDATE) == 'batch_partial_update'
    assert str(HTTPMethod.DELETE) == 'DELETE'
