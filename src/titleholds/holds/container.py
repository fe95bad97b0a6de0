from __future__ import annotations

from dependency_injector import providers
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Provider

from titleholds.holds.catalog import CatalogAuthenticator, CatalogConnection
from titleholds.holds.logic import TitleHolds
from titleholds.holds.signature import HmacSignatureService, SignatureService
from titleholds.holds.token import SecureTokenGenerator


class Holds(DeclarativeContainer):
    config = providers.Configuration()

    # Supplied by the application: the catalog connection and the patron
    # authentication store are owned elsewhere.
    catalog: Provider[CatalogConnection | None] = providers.Dependency()
    authenticator: Provider[CatalogAuthenticator | None] = providers.Dependency()

    signer: Provider[SignatureService] = providers.Singleton(
        HmacSignatureService,
        secret=config.hmac_key,
        digest=config.hmac_digest,
    )

    token_generator: Provider[SecureTokenGenerator] = providers.Singleton(
        SecureTokenGenerator,
        signer=signer,
    )

    # A new TitleHolds is cheap, and it holds no per-request state itself.
    title_holds: Provider[TitleHolds] = providers.Factory(
        TitleHolds,
        catalog=catalog,
        authenticator=authenticator,
        token_generator=token_generator,
        hidden_locations=config.hide_holdings,
        allow_holds_override=config.allow_holds_override,
        default_mode=config.title_holds_mode,
    )
