# tests/services/test_email_service.py
from storefront_http_api.services.email_service import EmailService


class TestEmailService:
    def test_confirmation_is_sent_and_recorded(self, db_session, mailer, customer, make_product, make_order):
        order = make_order(customer, items=[(make_product(name="Mug", price=12.0), 2)])

        sent = EmailService(db_session, mailer).send_order_confirmation(order)

        assert sent is True
        assert order.confirmation_email_sent is True
        assert order.confirmation_email_sent_at is not None
        assert mailer.sent[0]["to"] == "customer@example.com"
        assert order.order_number in mailer.sent[0]["subject"]
        assert "2 x Mug" in mailer.sent[0]["body"]

    def test_guest_order_uses_guest_email(self, db_session, mailer, make_order):
        order = make_order(None, guest_email="guest@example.com")

        EmailService(db_session, mailer).send_order_confirmation(order)

        assert mailer.sent[0]["to"] == "guest@example.com"

    def test_disabled_notifications_send_nothing(self, db_session, mailer, store_settings, customer, make_order):
        store_settings.set("order_confirmation_enabled", False)
        db_session.commit()
        order = make_order(customer)

        assert EmailService(db_session, mailer).send_order_confirmation(order) is False
        assert mailer.sent == []

    def test_transport_failure_is_reported_not_raised(self, db_session, mailer, customer, make_order):
        mailer.fail = True
        order = make_order(customer)

        assert EmailService(db_session, mailer).send_order_confirmation(order) is False
        assert order.confirmation_email_sent is False
