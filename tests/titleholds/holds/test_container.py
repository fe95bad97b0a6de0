from titleholds.holds.data import ActionToken
from titleholds.holds.logic import TitleHolds
from titleholds.holds.mode import PolicyMode
from titleholds.holds.signature import HmacSignatureService
from tests.fixtures.holds import HMAC_SECRET
from tests.fixtures.services import ServicesFixture


class TestHoldsContainer:
    def test_title_holds(self, services_fixture: ServicesFixture):
        holds = services_fixture.services.holds()

        title_holds = holds.title_holds()

        assert isinstance(title_holds, TitleHolds)
        assert title_holds.catalog is services_fixture.catalog
        assert title_holds.authenticator is services_fixture.authenticator
        assert title_holds.default_mode == PolicyMode.disabled
        # A new orchestrator each time, sharing the signer.
        assert holds.title_holds() is not title_holds
        assert holds.title_holds().token_generator is title_holds.token_generator
        assert isinstance(holds.signer(), HmacSignatureService)

    def test_configuration(self, services_fixture: ServicesFixture):
        services_fixture.set_config_option("holds.hide_holdings", ["Stacks"])
        services_fixture.set_config_option("holds.allow_holds_override", True)

        title_holds = services_fixture.services.holds.title_holds()

        assert title_holds.evaluator.hidden_locations == frozenset({"Stacks"})
        assert title_holds.allow_holds_override is True

    def test_signs_with_configured_key(self, services_fixture: ServicesFixture):
        services_fixture.catalog.mode = PolicyMode.always

        token = services_fixture.services.holds.title_holds().get_hold("123")

        signature = HmacSignatureService(HMAC_SECRET).generate(
            ["id", "level"], {"id": "123", "level": "title"}
        )
        assert isinstance(token, ActionToken)
        assert token.query == f"id=123&level=title&hashKey={signature}"
