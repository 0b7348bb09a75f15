import pytest

from coliving_service.app.enum.coliving_enum import BookingStatus
from coliving_service.app.services.signing_client import SigningClient, SigningError, SigningStep, same_email
from coliving_service.app.services.signing_tokens import create_signing_token
from conftest import PNG_DATA_URL

BASE_URL = "http://api.test"


class FakeResponse:
    def __init__(self, body, status_code=200):
        self.body = body
        self.status_code = status_code

    def json(self):
        return self.body


class FakeSession:
    def __init__(self, get_response, post_response=None):
        self.get_response = get_response
        self.post_response = post_response
        self.gets = []
        self.posts = []

    def get(self, url, timeout=None):
        self.gets.append(url)
        return self.get_response

    def post(self, url, json=None, timeout=None):
        self.posts.append((url, json))
        return self.post_response


def _session_payload(signatures):
    return FakeResponse({
        "success": True,
        "data": {"contract": {"id": "c-1", "status": "SENT"}, "signatures": signatures},
    })


@pytest.fixture
def token():
    return create_signing_token("c-1", "marie@example.com", "Marie Dupont")


def test_same_email():
    assert same_email(" Marie@Example.com", "marie@example.com")
    assert not same_email("marie@example.com", None)


def test_review_then_sign(token):
    session = FakeSession(_session_payload([]), FakeResponse({"success": True, "data": {"allSigned": True}}))
    client = SigningClient(BASE_URL, token, session=session)

    assert client.load() == SigningStep.REVIEW
    assert client.proceed_to_sign() == SigningStep.SIGN
    assert client.sign(PNG_DATA_URL, accept_terms=True) == SigningStep.COMPLETE

    assert client.all_signed is True
    url, body = session.posts[0]
    assert url == f"{BASE_URL}/api/contracts/c-1/sign"
    assert body["signerEmail"] == "marie@example.com"
    assert body["signatureData"] == PNG_DATA_URL
    assert session.gets == [f"{BASE_URL}/api/sign-contract/{token}"]


def test_already_signed_short_circuits_without_post(token):
    session = FakeSession(_session_payload([{"signerEmail": "MARIE@example.com"}]))
    client = SigningClient(BASE_URL, token, session=session)

    assert client.load() == SigningStep.COMPLETE
    assert client.already_signed is True

    assert client.sign(PNG_DATA_URL, accept_terms=True) == SigningStep.COMPLETE
    assert session.posts == []


def test_empty_signature_is_rejected_before_any_request(token):
    session = FakeSession(_session_payload([]))
    client = SigningClient(BASE_URL, token, session=session)
    client.load()

    with pytest.raises(SigningError):
        client.sign(None, accept_terms=True)
    with pytest.raises(SigningError):
        client.sign(PNG_DATA_URL, accept_terms=False)

    assert session.posts == []


def test_malformed_token_goes_to_error():
    session = FakeSession(_session_payload([]))
    client = SigningClient(BASE_URL, "garbage", session=session)

    assert client.load() == SigningStep.ERROR
    assert client.redirect_to == "/"
    assert session.gets == []


def test_server_rejection_goes_to_error(token):
    session = FakeSession(FakeResponse({"success": False, "error": "Token invalide"}, status_code=401))
    client = SigningClient(BASE_URL, token, session=session)

    assert client.load() == SigningStep.ERROR
    assert client.error


def test_failed_post_goes_to_error(token):
    session = FakeSession(_session_payload([]), FakeResponse({"success": False}, status_code=400))
    client = SigningClient(BASE_URL, token, session=session)
    client.load()

    assert client.sign(PNG_DATA_URL, accept_terms=True) == SigningStep.ERROR


def test_against_running_app(client, admin_headers, make_user, make_room, make_booking):
    booking = make_booking(make_user(email="marie@example.com"), make_room(),
                           status=BookingStatus.CONFIRMED.value)
    contract = client.post("/api/contracts/generate", json={"bookingId": booking.id},
                           headers=admin_headers).json()["data"]
    signing_url = client.post(f"/api/contracts/{contract['id']}/send", json={},
                              headers=admin_headers).json()["data"]["signingUrl"]
    token = signing_url.rsplit("/", 1)[-1]

    signer = SigningClient("http://testserver", token, session=client)

    assert signer.load() == SigningStep.REVIEW
    assert signer.sign(PNG_DATA_URL, accept_terms=True) == SigningStep.COMPLETE
    assert signer.all_signed is True
