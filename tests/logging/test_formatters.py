import json
import logging.handlers

import pytest

from restli._cogs.helpers.loggers import RequestJsonFormatter, RequestLogger, \
                                         RequestPrefixingJsonFormatter, \
                                         RequestPrefixingTextFormatter, RequestTextFormatter


@pytest.fixture()
def base_logger():
    logger = logging.getLogger('restli.tests')
    handler = logging.handlers.BufferingHandler(capacity=100)
    logger.addHandler(handler)
    try:
        yield logger, handler
    finally:
        logger.removeHandler(handler)


@pytest.fixture()
def request_record(base_logger):
    logger, handler = base_logger
    RequestLogger(method='BATCH_GET', url='https://host/v2/things', base=logger).info("hello")
    return handler.buffer[-1]


@pytest.fixture()
def plain_record(base_logger):
    logger, handler = base_logger
    logger.info("hello")
    return handler.buffer[-1]


def test_request_logger_carries_the_reference(request_record):
    assert request_record.restli_ref == {'method': 'BATCH_GET', 'url': 'https://host/v2/things'}


def test_request_logger_merges_the_extras(base_logger):
    logger, handler = base_logger
    RequestLogger(method='GET', url='u', base=logger).info("hello", extra={'custom': 1})
    record = handler.buffer[-1]
    assert record.custom == 1
    assert record.restli_ref == {'method': 'GET', 'url': 'u'}


def test_request_logger_uses_own_logger_by_default():
    logger = RequestLogger(method='GET', url='u')
    assert logger.logger.name == 'restli.requests'


def test_prefixing_text_formatter_adds_prefixes(request_record):
    formatter = RequestPrefixingTextFormatter()
    formatted = formatter.format(request_record)
    assert formatted == '[BATCH_GET https://host/v2/things] hello'


def test_prefixing_text_formatter_ignores_plain_records(plain_record):
    formatter = RequestPrefixingTextFormatter()
    formatted = formatter.format(plain_record)
    assert formatted == 'hello'


def test_prefixing_json_formatter_adds_prefixes(request_record):
    formatter = RequestPrefixingJsonFormatter()
    formatted = formatter.format(request_record)
    decoded = json.loads(formatted)
    assert decoded['message'] == '[BATCH_GET https://host/v2/things] hello'


def test_prefixing_does_not_modify_the_record(request_record):
    RequestPrefixingTextFormatter().format(request_record)
    assert request_record.msg == 'hello'


def test_regular_text_formatter_omits_prefixes(request_record):
    formatter = RequestTextFormatter()
    formatted = formatter.format(request_record)
    assert formatted == 'hello'


def test_regular_json_formatter_omits_prefixes(request_record):
    formatter = RequestJsonFormatter()
    formatted = formatter.format(request_record)
    decoded = json.loads(formatted)
    assert decoded['message'] == 'hello'


@pytest.mark.parametrize('cls', [RequestJsonFormatter, RequestPrefixingJsonFormatter])
@pytest.mark.parametrize('levelno, expected_severity', [
    (0,  'debug'),
    (logging.DEBUG, 'debug'),
    (logging.DEBUG + 1, 'info'),
    (logging.INFO, 'info'),
    (logging.INFO + 1, 'warn'),
    (logging.WARNING, 'warn'),
    (logging.WARNING + 1, 'error'),
    (logging.ERROR, 'error'),
    (logging.ERROR + 1, 'fatal'),
    (logging.FATAL, 'fatal'),
    (999, 'fatal'),
])
def test_json_formatters_add_severity(request_record, cls, levelno, expected_severity):
    request_record.levelno = levelno
    request_record.levelname = 'must-be-irrelevant'
    formatter = cls()
    formatted = formatter.format(request_record)
    decoded = json.loads(formatted)
    assert decoded['severity'] == expected_severity


@pytest.mark.parametrize('cls', [RequestJsonFormatter, RequestPrefixingJsonFormatter])
def test_json_formatters_add_refkey_with_default_key(request_record, cls):
    formatter = cls()
    formatted = formatter.format(request_record)
    decoded = json.loads(formatted)
    assert decoded['request'] == {'method': 'BATCH_GET', 'url': 'https://host/v2/things'}
    assert 'restli_ref' not in decoded


@pytest.mark.parametrize('cls', [RequestJsonFormatter, RequestPrefixingJsonFormatter])
def test_json_formatters_add_refkey_with_custom_key(request_record, cls):
    formatter = cls(refkey='req')
    formatted = formatter.format(request_record)
    decoded = json.loads(formatted)
    assert decoded['req'] == {'method': 'BATCH_GET', 'url': 'https://host/v2/things'}
    assert 'request' not in decoded


@pytest.mark.parametrize('cls', [RequestJsonFormatter, RequestPrefixingJsonFormatter])
def test_json_formatters_add_timestamps(request_record, cls):
    formatter = cls()
    formatted = formatter.format(request_record)
    decoded = json.loads(formatted)
    assert 'timestamp' in decoded
