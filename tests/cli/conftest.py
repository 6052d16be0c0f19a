import functools
import logging

import click.testing
import pytest

from restli.cli import main


@pytest.fixture(autouse=True)
def _restore_logging():
    loggers = [logging.getLogger(name) for name in [None, 'asyncio', 'aiohttp']]
    originals = [(logger.handlers[:], logger.level, logger.propagate) for logger in loggers]
    yield
    for logger, (handlers, level, propagate) in zip(loggers, originals):
        logger.handlers[:] = handlers
        logger.setLevel(level)
        logger.propagate = propagate


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def invoke(runner):
    return functools.partial(runner.invoke, main)


@pytest.fixture()
def srcdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path
