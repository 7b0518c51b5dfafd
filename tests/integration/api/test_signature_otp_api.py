import pytest
from datetime import timedelta
from uuid import UUID, uuid4

from httpx import AsyncClient
from sqlalchemy import update

from src.domain.base import utcnow
from src.domain.entities import SignatureIdentityVerification, VerificationResult


def extract_code(outbound, length=6):
    text = outbound[-1]["body"]["text"]
    return [token for token in text.split() if token.isdigit() and len(token) == length][0]


async def send_otp(client, sale, test_data, link_id, **extra):
    payload = {
        "action": "send",
        "signature_link_id": str(link_id),
        "sale_id": str(sale.id),
        **test_data.get_copy("signer"),
        **extra,
    }
    return await client.post("/signature-otp", json=payload, headers={"user-agent": "pytest-signer"})


async def verify(client, link_id, code):
    return await client.post(
        "/signature-otp",
        json={"action": "verify", "signature_link_id": str(link_id), "otp_code": code},
        headers={"x-forwarded-for": "203.0.113.7, 10.0.0.1"},
    )


@pytest.mark.asyncio
async def test_send_and_verify_by_email(client: AsyncClient, sale, test_data, outbound, db_session):
    """Signer receives the code by e-mail and verifies it once"""
    link_id = uuid4()

    response = await send_otp(client, sale, test_data, link_id)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["sent"] is True
    assert data["channel_used"] == "email"
    assert data["provider_used"] == "smtp_relay"
    assert data["destination_masked"] == "ju********@mail.com"
    assert data["expires_at"].endswith("Z")
    assert outbound[-1]["url"] == "https://relay.test/send"
    assert outbound[-1]["body"]["smtp"]["host"] == "smtp.saludtotal.test"

    code = extract_code(outbound)
    response = await verify(client, link_id, code)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "verified": True,
        "verification_id": data["verification_id"],
    }

    record = await db_session.get(
        SignatureIdentityVerification, UUID(data["verification_id"]), populate_existing=True
    )
    assert record.result == VerificationResult.verified
    assert record.verified_at is not None
    assert record.attempts == 1
    assert record.ip_address == "203.0.113.7"
    assert code not in record.otp_code_hash

    # a verified record cannot be verified again
    response = await verify(client, link_id, code)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NO_PENDING_VERIFICATION"


@pytest.mark.asyncio
async def test_wrong_codes_exhaust_attempts(client: AsyncClient, sale, test_data, outbound):
    link_id = uuid4()
    await send_otp(client, sale, test_data, link_id)
    wrong = "000000" if extract_code(outbound) != "000000" else "111111"

    remaining = []
    for _ in range(3):
        response = await verify(client, link_id, wrong)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_OTP"
        remaining.append(response.json()["attempts_remaining"])

    assert remaining == [2, 1, 0]

    # even the right code is refused once attempts are used up
    response = await verify(client, link_id, extract_code(outbound))
    assert response.status_code == 429
    assert response.json()["error"]["code"] == "MAX_ATTEMPTS_EXCEEDED"


@pytest.mark.asyncio
async def test_expired_code(client: AsyncClient, sale, test_data, outbound, db_session):
    link_id = uuid4()
    await send_otp(client, sale, test_data, link_id)
    await db_session.execute(
        update(SignatureIdentityVerification)
        .where(SignatureIdentityVerification.signature_link_id == link_id)
        .values(expires_at=utcnow() - timedelta(seconds=1))
    )
    await db_session.commit()

    response = await verify(client, link_id, extract_code(outbound))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "OTP_EXPIRED"
    assert response.json()["expired"] is True


@pytest.mark.asyncio
async def test_resend_supersedes_previous_code(client: AsyncClient, sale, test_data, outbound, db_session):
    link_id = uuid4()
    first = (await send_otp(client, sale, test_data, link_id)).json()
    first_code = extract_code(outbound)
    second = (await send_otp(client, sale, test_data, link_id)).json()
    second_code = extract_code(outbound)

    old = await db_session.get(
        SignatureIdentityVerification, UUID(first["verification_id"]), populate_existing=True
    )
    assert old.result == VerificationResult.superseded

    if first_code != second_code:
        response = await verify(client, link_id, first_code)
        assert response.json()["error"]["code"] == "INVALID_OTP"

    response = await verify(client, link_id, second_code)
    assert response.status_code == 200
    assert response.json()["verification_id"] == second["verification_id"]


@pytest.mark.asyncio
async def test_whatsapp_not_allowed_by_default_policy(client: AsyncClient, sale, test_data):
    response = await send_otp(client, sale, test_data, uuid4(), channel="whatsapp")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CHANNEL_NOT_ALLOWED"


@pytest.mark.asyncio
async def test_invalid_channel(client: AsyncClient, sale, test_data):
    response = await send_otp(client, sale, test_data, uuid4(), channel="sms")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_CHANNEL"


@pytest.mark.asyncio
async def test_get_policy(client: AsyncClient, sale):
    response = await client.post(
        "/signature-otp", json={"action": "get_policy", "sale_id": str(sale.id)}
    )

    assert response.status_code == 200
    assert response.json() == {
        "require_otp": True,
        "allowed_channels": ["email"],
        "default_channel": "email",
        "whatsapp_enabled": False,
    }


@pytest.mark.asyncio
async def test_unknown_sale(client: AsyncClient, company):
    response = await client.post(
        "/signature-otp", json={"action": "get_policy", "sale_id": str(uuid4())}
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SALE_NOT_FOUND"


@pytest.mark.asyncio
async def test_missing_fields_and_invalid_action(client: AsyncClient, company):
    response = await client.post("/signature-otp", json={"action": "send"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_FIELDS"

    response = await client.post("/signature-otp", json={"action": "verify", "signature_link_id": str(uuid4())})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_FIELDS"

    response = await client.post("/signature-otp", json={"action": "explode"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_ACTION"


@pytest.mark.asyncio
async def test_no_pending_verification(client: AsyncClient, company):
    response = await verify(client, uuid4(), "123456")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NO_PENDING_VERIFICATION"


@pytest.mark.asyncio
async def test_malformed_identifiers_are_bad_requests(client: AsyncClient, sale, test_data):
    response = await verify(client, "not-a-uuid", "123456")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_FIELDS"
    assert response.json()["invalid_fields"] == ["signature_link_id"]

    response = await send_otp(client, sale, test_data, uuid4(), sale_id="42")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_FIELDS"
    assert response.json()["invalid_fields"] == ["sale_id"]

    response = await client.post("/signature-otp", json={"action": "get_policy", "sale_id": "abc"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_FIELDS"


@pytest.mark.asyncio
async def test_numeric_otp_code_is_accepted(client: AsyncClient, sale, test_data, outbound):
    """Codes sent as JSON numbers are compared as text"""
    response = await verify(client, uuid4(), 123456)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NO_PENDING_VERIFICATION"

    link_id = uuid4()
    await send_otp(client, sale, test_data, link_id)
    code = extract_code(outbound)
    wrong = 111111 if code != "111111" else 222222

    response = await verify(client, link_id, wrong)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_OTP"
    assert response.json()["attempts_remaining"] == 2
