from __future__ import annotations

from dependency_injector import providers
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Container

from titleholds.holds.catalog import CatalogAuthenticator, CatalogConnection
from titleholds.holds.configuration import HoldsConfiguration
from titleholds.holds.container import Holds
from titleholds.service.logging.configuration import LoggingConfiguration
from titleholds.service.logging.container import Logging


class Services(DeclarativeContainer):
    config = providers.Configuration()

    catalog = providers.Dependency()
    authenticator = providers.Dependency()

    logging = Container(
        Logging,
        config=config.logging,
    )

    holds = Container(
        Holds,
        config=config.holds,
        catalog=catalog,
        authenticator=authenticator,
    )


def create_container(
    catalog: CatalogConnection | None = None,
    authenticator: CatalogAuthenticator | None = None,
) -> Services:
    container = Services(
        catalog=providers.Object(catalog),
        authenticator=providers.Object(authenticator),
    )
    container.config.from_dict(
        {
            "logging": LoggingConfiguration().model_dump(),
            "holds": HoldsConfiguration().model_dump(),
        }
    )
    return container
