"""
Client side of the e-signature flow.

``SigningClient`` walks a signer through review -> sign -> complete for
one signing link. The token is only decoded here to know who is signing;
the server verifies it on every call.
"""
import logging
from enum import Enum
from typing import Optional

import requests
from jose import JWTError, jwt

logger = logging.getLogger(__name__)


class SigningStep(str, Enum):
    LOADING = "loading"
    REVIEW = "review"
    SIGN = "sign"
    COMPLETE = "complete"
    ERROR = "error"


class SigningError(Exception):
    """Raised when the signer input is rejected before any request."""


def same_email(a: Optional[str], b: Optional[str]) -> bool:
    return (a or "").strip().lower() == (b or "").strip().lower()


class SigningClient:
    ERROR_REDIRECT = "/"

    def __init__(self, base_url: str, token: str, session=None, timeout: int = 15):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

        self.step = SigningStep.LOADING
        self.claims: dict = {}
        self.contract: Optional[dict] = None
        self.signatures: list = []
        self.already_signed = False
        self.all_signed = False
        self.error: Optional[str] = None
        self.redirect_to: Optional[str] = None

    # ----------------- helpers -----------------
    def _fail(self, message: str) -> SigningStep:
        logger.warning(f"Signing flow failed: {message}")
        self.error = message
        self.redirect_to = self.ERROR_REDIRECT
        self.step = SigningStep.ERROR
        return self.step

    def _payload(self, response) -> Optional[dict]:
        try:
            body = response.json()
        except ValueError:
            return None
        if response.status_code >= 400 or not isinstance(body, dict) or not body.get("success"):
            return None
        return body.get("data")

    @property
    def signer_email(self) -> Optional[str]:
        return self.claims.get("signerEmail")

    def has_signed(self) -> bool:
        return any(same_email(s.get("signerEmail"), self.signer_email) for s in self.signatures)

    # ----------------- steps -----------------
    def load(self) -> SigningStep:
        try:
            self.claims = jwt.get_unverified_claims(self.token)
        except JWTError:
            return self._fail("Lien de signature invalide")

        if not self.claims.get("contractId") or not self.signer_email:
            return self._fail("Lien de signature incomplet")

        try:
            response = self.session.get(
                f"{self.base_url}/api/sign-contract/{self.token}", timeout=self.timeout)
        except requests.RequestException as e:
            return self._fail(f"Erreur réseau : {e}")

        data = self._payload(response)
        if not data:
            return self._fail("Contrat introuvable ou lien expiré")

        self.contract = data.get("contract")
        self.signatures = data.get("signatures") or []

        if self.has_signed():
            self.already_signed = True
            self.step = SigningStep.COMPLETE
        else:
            self.step = SigningStep.REVIEW
        return self.step

    def proceed_to_sign(self) -> SigningStep:
        if self.step == SigningStep.REVIEW:
            self.step = SigningStep.SIGN
        return self.step

    def sign(self, signature_data: Optional[str], accept_terms: bool) -> SigningStep:
        if not signature_data:
            raise SigningError("Veuillez apposer votre signature")
        if not accept_terms:
            raise SigningError("Veuillez accepter les conditions du contrat")

        if self.already_signed or self.has_signed():
            self.already_signed = True
            self.step = SigningStep.COMPLETE
            return self.step

        if self.step not in (SigningStep.REVIEW, SigningStep.SIGN):
            raise SigningError("Le contrat n'est pas prêt à être signé")

        body = {
            "token": self.token,
            "signatureData": signature_data,
            "signerName": self.claims.get("signerName"),
            "signerEmail": self.signer_email,
            "signerRole": self.claims.get("signerRole", "TENANT"),
        }
        try:
            response = self.session.post(
                f"{self.base_url}/api/contracts/{self.claims['contractId']}/sign",
                json=body, timeout=self.timeout)
        except requests.RequestException as e:
            return self._fail(f"Erreur réseau : {e}")

        data = self._payload(response)
        if data is None:
            return self._fail("La signature n'a pas pu être enregistrée")

        self.all_signed = bool(data.get("allSigned"))
        self.step = SigningStep.COMPLETE
        return self.step
