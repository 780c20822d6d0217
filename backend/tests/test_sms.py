import asyncio
from datetime import datetime, timezone
from urllib.parse import parse_qs, quote, urlsplit

import httpx
import pytest

from conftest import bearer
from services.sms import (
    ReservationNotice,
    SmsConfig,
    SmsService,
    cancellation_message,
    confirmation_message,
    format_reservation_time,
    is_failure_response,
    parse_credits,
    parse_sender_ids,
)

CONFIG = SmsConfig(enabled=True, username="chez", password="s3cret", sender_id="CHEZTEST")


def _sent(request):
    return {key: values[0] for key, values in parse_qs(urlsplit(str(request.url)).query).items()}


@pytest.mark.parametrize(
    "text, failed",
    [
        ("SMS sent successfully", False),
        ("Error: invalid sender", True),
        ("Insufficient credit", True),
        ("Message sent, 0 errors", False),
        ("OK 12345", False),
    ],
)
def test_is_failure_response(text, failed):
    assert is_failure_response(text) is failed


def test_parse_credits():
    assert parse_credits("Balance: 1234.5") == 1234.5
    assert parse_credits("<b>v2</b> credits 4500") == 4500
    assert parse_credits("12") == 12
    assert parse_credits("no balance") == 0.0


def test_parse_sender_ids():
    assert parse_sender_ids("CHEZ, PROMO\nERROR: pending\n\n OTHER ") == ["CHEZ", "PROMO", "OTHER"]
    assert parse_sender_ids("") == []


def test_reservation_messages_use_local_time():
    notice = ReservationNotice(
        guest_name="Rami",
        guest_phone="+96171111111",
        start_time=datetime(2024, 3, 15, 17, 30, tzinfo=timezone.utc),
        number_of_guests=1,
    )
    assert format_reservation_time(notice.start_time) == "Friday, March 15, 2024 at 7:30 PM"
    assert confirmation_message(notice) == (
        "Dear Rami, your reservation has been confirmed on Friday, March 15, 2024 at 7:30 PM for 1 guest."
    )
    assert cancellation_message(notice).endswith("for 1 guest has been cancelled.")


def test_midnight_and_noon_formatting():
    assert format_reservation_time(datetime(2024, 7, 1, 21, 5)).endswith("at 12:05 AM")
    assert format_reservation_time(datetime(2024, 7, 1, 9, 0)).endswith("at 12:00 PM")


def test_config_repr_hides_credentials():
    assert "s3cret" not in repr(CONFIG)
    assert "chez" not in repr(CONFIG)


def test_send_sms_requires_enabled(sms_service, sms_requests):
    config = SmsConfig(enabled=False, username="chez", password="s3cret", sender_id="CHEZTEST")
    result = asyncio.run(sms_service.send_sms(config, "123", "hi"))
    assert result.success is False
    assert result.message == "SMS is not enabled for this restaurant"
    assert sms_requests == []


def test_send_sms_requires_complete_config(sms_service, sms_requests):
    config = SmsConfig(enabled=True, username="chez", password="s3cret", sender_id=None)
    result = asyncio.run(sms_service.send_sms(config, "123", "hi"))
    assert result.success is False
    assert result.message == "SMS configuration is incomplete"
    assert sms_requests == []


def test_send_sms_builds_gateway_request(sms_service, sms_requests):
    scheduled = datetime(2024, 3, 15, 19, 30, tzinfo=timezone.utc)
    result = asyncio.run(sms_service.send_sms(CONFIG, ["111", "222"], "Hello there", scheduled_time=scheduled))

    assert result.success is True
    sent = _sent(sms_requests[0])
    assert sent == {
        "username": "chez",
        "password": "s3cret",
        "msg": "Hello there",
        "texttype": "text",
        "numbers": "111,222",
        "sender": "CHEZTEST",
        "dtime": "2024-03-15 19:30:00",
    }


def test_unicode_body_is_pre_encoded(sms_service, sms_requests):
    asyncio.run(sms_service.send_sms(CONFIG, "111", "مرحبا", text_type="unicode"))
    sent = _sent(sms_requests[0])
    assert sent["texttype"] == "unicode"
    assert sent["msg"] == quote("مرحبا")


def test_gateway_error_text_is_failure(sms_service, sms_reply):
    sms_reply["text"] = "Error: invalid username"
    result = asyncio.run(sms_service.send_sms(CONFIG, "111", "hi"))
    assert result.success is False
    assert result.data == "Error: invalid username"


def test_transport_error_is_failure():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    service = SmsService(base_url="http://sms.test/http.php", transport=httpx.MockTransport(handler))
    result = asyncio.run(service.send_sms(CONFIG, "111", "hi"))
    assert result.success is False
    assert result.message.startswith("Failed to send SMS")


def test_get_credits(sms_service, sms_reply, sms_requests):
    sms_reply["text"] = "Your balance is 2500.75"
    result = asyncio.run(sms_service.get_credits(CONFIG))
    assert result.success is True
    assert result.data == 2500.75
    assert _sent(sms_requests[0])["type"] == "credits"


def test_get_credits_without_credentials(sms_service):
    result = asyncio.run(sms_service.get_credits(SmsConfig(enabled=True, username=None, password=None, sender_id=None)))
    assert result.success is False
    assert result.data == 0.0


def test_sender_ids_auth_failure(sms_service, sms_reply):
    sms_reply["status"] = 401
    result = asyncio.run(sms_service.get_sender_ids(CONFIG))
    assert result.success is False
    assert result.message == "Invalid SMS credentials"
    assert result.data == []


def test_reservation_notices_respect_toggles(sms_service, sms_requests):
    config = SmsConfig(
        enabled=True, username="chez", password="s3cret", sender_id="CHEZTEST",
        confirmation_enabled=False,
    )
    notice = ReservationNotice("Rami", "111", datetime(2024, 3, 15, 17, 30, tzinfo=timezone.utc), 2)

    result = asyncio.run(sms_service.send_reservation_confirmation(config, notice))
    assert result.message == "SMS confirmation notifications are disabled"
    assert sms_requests == []

    result = asyncio.run(sms_service.send_reservation_cancellation(config, notice))
    assert result.success is True
    assert len(sms_requests) == 1


def test_config_endpoints(client, restaurant, owner):
    url = f"/api/sms/{restaurant.id}/config"
    headers = bearer(owner)

    body = client.get(url, headers=headers).json()
    assert body["sms_enabled"] is False
    assert body["has_password"] is False

    response = client.put(
        url,
        json={"sms_enabled": True, "sms_username": "chez", "sms_password": "s3cret", "sms_sender_id": "CHEZTEST"},
        headers=headers,
    )
    body = response.json()
    assert response.status_code == 200
    assert body["sms_enabled"] is True
    assert body["has_password"] is True
    assert "sms_password" not in body

    # Blank credentials keep the stored values
    body = client.put(url, json={"sms_password": "", "sms_cancellation_enabled": False}, headers=headers).json()
    assert body["has_password"] is True
    assert body["sms_cancellation_enabled"] is False


def test_config_requires_ownership(client, restaurant, other_user):
    response = client.get(f"/api/sms/{restaurant.id}/config", headers=bearer(other_user))
    assert response.status_code == 403


def test_credits_endpoint_persists_balance(client, db, restaurant, owner, sms_reply):
    restaurant.sms_username = "chez"
    restaurant.sms_password = "s3cret"
    db.add(restaurant)
    db.commit()
    sms_reply["text"] = "Balance: 1234.5"

    response = client.get(f"/api/sms/{restaurant.id}/credits", headers=bearer(owner))
    assert response.status_code == 200
    assert response.json()["credits"] == 1234.5

    db.refresh(restaurant)
    assert restaurant.sms_credits == 1234.5
    assert restaurant.sms_last_updated is not None


def test_send_endpoint(client, db, restaurant, owner, sms_requests):
    restaurant.sms_enabled = True
    restaurant.sms_username = "chez"
    restaurant.sms_password = "s3cret"
    restaurant.sms_sender_id = "CHEZTEST"
    db.add(restaurant)
    db.commit()

    response = client.post(
        f"/api/sms/{restaurant.id}/send",
        json={"numbers": ["111"], "message": "Table ready"},
        headers=bearer(owner),
    )
    assert response.json()["success"] is True
    assert _sent(sms_requests[0])["msg"] == "Table ready"


def test_sample_reservation_confirmation(client, db, restaurant, owner, sms_requests):
    restaurant.sms_enabled = True
    restaurant.sms_username = "chez"
    restaurant.sms_password = "s3cret"
    restaurant.sms_sender_id = "CHEZTEST"
    db.add(restaurant)
    db.commit()

    response = client.post(
        f"/api/sms/{restaurant.id}/test-reservation-confirmation",
        json={"guest_name": "Rami", "guest_phone": "111", "start_time": "2024-03-15T19:30:00", "number_of_guests": 2},
        headers=bearer(owner),
    )
    assert response.json()["success"] is True
    assert "Friday, March 15, 2024 at 7:30 PM for 2 guests" in _sent(sms_requests[0])["msg"]
