import aiohttp
import pytest

from restli import APIConflictError, APIError, APIForbiddenError, APINotFoundError, \
                   APIServerError, APIUnauthorizedError, DecodingError, EmptyPatchError, \
                   EncodingError, InvalidPatchInputError, PatchError, RequestError, RestliError


def test_aiohttp_is_not_leaked_outside():
    assert not issubclass(APIError, aiohttp.ClientError)


@pytest.mark.parametrize('cls', [
    EncodingError, DecodingError, PatchError, EmptyPatchError, InvalidPatchInputError,
    RequestError, APIError, APIUnauthorizedError, APIForbiddenError, APINotFoundError,
    APIConflictError, APIServerError,
])
def test_everything_is_a_restli_error(cls):
    assert issubclass(cls, RestliError)


@pytest.mark.parametrize('cls', [
    EncodingError, DecodingError, PatchError, EmptyPatchError, InvalidPatchInputError, RequestError,
])
def test_caller_mistakes_are_value_errors(cls):
    assert issubclass(cls, ValueError)


@pytest.mark.parametrize('cls', [EmptyPatchError, InvalidPatchInputError])
def test_patch_errors(cls):
    assert issubclass(cls, PatchError)


def test_exception_without_payload():
    exc = APIError(None, status=456)
    assert exc.status == 456
    assert exc.payload is None
    assert exc.code is None
    assert exc.message is None
    assert exc.service_error_code is None
    assert exc.details is None


def test_exception_with_payload():
    exc = APIError({
        'status': 456,
        'code': 'SOME_CODE',
        'message': 'msg',
        'serviceErrorCode': 123,
        'errorDetails': {'a': 'b'},
    }, status=456)
    assert exc.status == 456
    assert exc.code == 'SOME_CODE'
    assert exc.message == 'msg'
    assert exc.service_error_code == 123
    assert exc.details == {'a': 'b'}
    assert 'msg' in str(exc)
