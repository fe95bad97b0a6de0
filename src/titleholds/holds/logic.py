from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from typing_extensions import assert_never

from titleholds.holds.catalog import (
    HOLDS_FUNCTION,
    CatalogAuthenticator,
    CatalogConnection,
)
from titleholds.holds.data import (
    ActionToken,
    CapabilityDescriptor,
    HoldRequestDescriptor,
)
from titleholds.holds.eligibility import (
    DelegateToCatalog,
    EligibilityEvaluator,
    HoldOutcome,
    NoOffer,
    OfferLocal,
)
from titleholds.holds.holdings import HoldingsAccessor, HoldingsCache
from titleholds.holds.mode import PolicyMode
from titleholds.holds.override import resolve_mode
from titleholds.holds.token import SecureTokenGenerator
from titleholds.util.log import LoggerMixin, LoggerType, RecordLoggerAdapter

HoldResult = ActionToken | str | Literal[False]


class TitleHolds(LoggerMixin):
    """
    Decide whether a title level hold should be offered for a record.

    get_hold returns False when no hold should be shown, a catalog built URL
    when the catalog makes its own hold links, or a signed ActionToken.
    Negative decisions never raise. Errors from the catalog, the
    authenticator or the signer are passed through unchanged.
    """

    def __init__(
        self,
        catalog: CatalogConnection | None,
        authenticator: CatalogAuthenticator | None,
        token_generator: SecureTokenGenerator,
        *,
        hidden_locations: Iterable[str] = (),
        allow_holds_override: bool = False,
        default_mode: PolicyMode = PolicyMode.disabled,
    ) -> None:
        self.catalog = catalog
        self.authenticator = authenticator
        self.token_generator = token_generator
        self.evaluator = EligibilityEvaluator(hidden_locations)
        self.allow_holds_override = allow_holds_override
        self.default_mode = PolicyMode(default_mode)

    def get_hold(
        self,
        id: str,
        *,
        mode: PolicyMode | str | None = None,
        holdings_cache: HoldingsCache | None = None,
    ) -> HoldResult:
        """
        :param id: The bibliographic record id.
        :param mode: Use this mode instead of the one the catalog reports.
        :param holdings_cache: A cache scoped to the current request, so several
            records on one page share lookups. A fresh one is used if omitted.
        """
        log = RecordLoggerAdapter(self.logger(), {"titleholds_record": id})
        catalog = self.catalog
        if catalog is None:
            log.debug("No catalog connection, not offering a hold.")
            return False

        configured = self._configured_mode(catalog, mode)
        request = HoldRequestDescriptor.title(id)
        holdings = HoldingsAccessor(catalog, holdings_cache)

        outcome: HoldOutcome
        match configured:
            case PolicyMode.disabled:
                outcome = NoOffer("holds disabled")
            case PolicyMode.driver:
                patron = (
                    self.authenticator.stored_catalog_login()
                    if self.authenticator is not None
                    else None
                )
                if not patron:
                    outcome = NoOffer("no patron logged in to the catalog")
                else:
                    outcome = self.evaluator.evaluate_driver(
                        self._capability(catalog),
                        request,
                        lambda: bool(
                            catalog.check_request_is_valid(
                                id, request.as_dict(), patron
                            )
                        ),
                    )
            case PolicyMode.always | PolicyMode.availability:
                effective = resolve_mode(
                    id, configured, self.allow_holds_override, holdings
                )
                if effective is not configured:
                    log.debug(
                        f"Every copy has holds disabled, overriding {configured} mode."
                    )
                capability = (
                    self._capability(catalog)
                    if effective is not PolicyMode.disabled
                    else None
                )
                outcome = self.evaluator.evaluate(
                    effective, capability, request, holdings
                )
            case _:
                assert_never(configured)

        return self._result(catalog, outcome, log)

    def _configured_mode(
        self, catalog: CatalogConnection, mode: PolicyMode | str | None
    ) -> PolicyMode:
        if mode is None:
            mode = catalog.get_title_holds_mode()
        return PolicyMode.parse(mode) or self.default_mode

    @staticmethod
    def _capability(catalog: CatalogConnection) -> CapabilityDescriptor | None:
        return CapabilityDescriptor.from_catalog(catalog.check_function(HOLDS_FUNCTION))

    def _result(
        self, catalog: CatalogConnection, outcome: HoldOutcome, log: LoggerType
    ) -> HoldResult:
        match outcome:
            case NoOffer(reason=reason):
                log.debug(f"Not offering a hold: {reason}.")
                return False
            case DelegateToCatalog(request=request):
                log.debug("Offering a catalog built hold link.")
                return catalog.get_hold_link(request.id, request.as_dict())
            case OfferLocal(request=request, signed_keys=signed_keys):
                log.debug("Offering a signed hold link.")
                return self.token_generator.sign(request, signed_keys)
            case _:
                assert_never(outcome)
