import pytest

from restli import RestliSettings


@pytest.fixture()
def settings():
    return RestliSettings()


@pytest.fixture(autouse=True)
def _caplog_all_levels(caplog):
    caplog.set_level(0)
