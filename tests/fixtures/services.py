from __future__ import annotations

from collections.abc import Generator
from typing import Any
from unittest.mock import create_autospec

import pytest
from dependency_injector import providers

from titleholds.service.container import Services
from titleholds.service.logging.configuration import LogLevel
from titleholds.service.logging.log import setup_logging
from tests.fixtures.holds import HMAC_SECRET
from tests.mocks.catalog import MockAuthenticator, MockCatalogConnection


class ServicesFixture:
    """
    Provide a real services container, with logging mocked out and the
    catalog and authenticator replaced by in-memory mocks.
    """

    def __init__(self) -> None:
        self.logging = create_autospec(setup_logging)
        self.catalog = MockCatalogConnection()
        self.authenticator = MockAuthenticator()
        self.services = Services(
            catalog=providers.Object(self.catalog),
            authenticator=providers.Object(self.authenticator),
        )
        self.services.config.from_dict(
            {
                "logging": {
                    "level": LogLevel.info,
                    "verbose_level": LogLevel.warning,
                    "debug_traceback_interval": 0,
                },
                "holds": {
                    "hide_holdings": [],
                    "allow_holds_override": False,
                    "title_holds_mode": "disabled",
                    "hmac_key": HMAC_SECRET,
                    "hmac_digest": "sha256",
                },
            }
        )

        # Mock out logging
        logging_container = self.services.logging()
        logging_container.logging.override(self.logging)

    def set_config_option(self, key: str, value: Any) -> None:
        path = key.split(".")
        mapping: dict[str, Any] = {path[-1]: value}
        for segment in reversed(path[:-1]):
            mapping = {segment: mapping}
        self.services.config.from_dict(mapping)


@pytest.fixture
def services_fixture() -> Generator[ServicesFixture]:
    fixture = ServicesFixture()
    yield fixture
    fixture.services.shutdown_resources()
    fixture.services.reset_override()
