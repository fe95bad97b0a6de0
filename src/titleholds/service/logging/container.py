from __future__ import annotations

from logging import Handler

from dependency_injector import providers
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Provider, Singleton

from titleholds.service.logging.debug_traceback import setup_debug_traceback
from titleholds.service.logging.log import (
    JSONFormatter,
    create_stream_handler,
    setup_logging,
)


class Logging(DeclarativeContainer):
    config = providers.Configuration()

    json_formatter: Provider[JSONFormatter] = Singleton(JSONFormatter)

    stream_handler: Provider[Handler] = providers.Singleton(
        create_stream_handler, formatter=json_formatter
    )

    logging = providers.Resource(
        setup_logging,
        level=config.level,
        verbose_level=config.verbose_level,
        stream=stream_handler,
    )

    debug_traceback = providers.Resource(
        setup_debug_traceback,
        interval=config.debug_traceback_interval,
    )
