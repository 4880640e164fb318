"""
M-Pesa Daraja client
Safaricom Daraja API helpers for the STK Push (Lipa na M-Pesa Online) flow.

Endpoints used
--------------
Authentication
    GET  <oauth_url>   (Basic auth, client_credentials grant)

STK Push
    POST <stk_url>     (Bearer auth)

Both URLs come from the resolved DarajaCredentials, so the same client
talks to sandbox or production depending on configuration.
"""

import base64
import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import requests

from paystore.errors import ValidationError, UnsupportedPhoneFormat
from paystore.providers.base import (
    UpstreamResponse,
    TokenAcquisitionError,
    UpstreamTransportError,
)

logger = logging.getLogger(__name__)

PRODUCTION_HOST = "api.safaricom.co.ke"
SANDBOX_HOST    = "sandbox.safaricom.co.ke"

TRANSACTION_TYPE = "CustomerPayBillOnline"
DEFAULT_TRANSACTION_DESC = "Payment"

OAUTH_TIMEOUT = 15
STK_TIMEOUT   = 20

# Spellings Daraja has been seen to use for the correlation id, in priority order
CHECKOUT_REQUEST_ID_KEYS = ("CheckoutRequestID", "checkoutRequestID", "CheckoutRequestId")

_LOCAL_FORMAT    = re.compile(r"^07\d{8}$")
_BARE_FORMAT     = re.compile(r"^7\d{8}$")
_COUNTRY_FORMAT  = re.compile(r"^2547\d{8}$")


def normalize_phone_for_daraja(raw: Any) -> str:
    """
    Normalise a phone number to the MSISDN format Daraja expects (2547XXXXXXXX).

    Accepts: +254712345678, 0712345678, 254712345678, 712345678
    (spaces, dashes and other separators are ignored).

    Raises:
        ValidationError: if the input is empty
        UnsupportedPhoneFormat: for any other digit pattern
    """
    original = "" if raw is None else str(raw).strip()
    if not original:
        raise ValidationError("Phone is empty")

    phone = original[1:] if original.startswith("+") else original
    phone = re.sub(r"\D", "", phone)

    if _LOCAL_FORMAT.match(phone):
        return "254" + phone[1:]
    if _BARE_FORMAT.match(phone):
        return "254" + phone
    if _COUNTRY_FORMAT.match(phone):
        return phone
    raise UnsupportedPhoneFormat(f"Unsupported phone format: {raw}")


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Daraja timestamp: UTC, YYYYMMDDHHMMSS."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return (
        f"{now.year:04d}{now.month:02d}{now.day:02d}"
        f"{now.hour:02d}{now.minute:02d}{now.second:02d}"
    )


def make_password(paybill: str, passkey: str, timestamp: str) -> str:
    """Password = Base64(BusinessShortCode + Passkey + Timestamp)"""
    raw = f"{paybill}{passkey}{timestamp}"
    return base64.b64encode(raw.encode("utf-8")).decode("utf-8")


def extract_checkout_request_id(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    for key in CHECKOUT_REQUEST_ID_KEYS:
        value = body.get(key)
        if value is not None and value != "":
            return value
    return None


def sandbox_url_for(url: str) -> Optional[str]:
    """Return the sandbox twin of a production Daraja URL, or None."""
    if url and PRODUCTION_HOST in url:
        return url.replace(PRODUCTION_HOST, SANDBOX_HOST)
    return None


def _parse_body(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


class DarajaClient:
    """Daraja API client bound to one resolved credential bundle."""

    def __init__(self, credentials, oauth_timeout: int = OAUTH_TIMEOUT, stk_timeout: int = STK_TIMEOUT):
        self.credentials   = credentials
        self.oauth_timeout = oauth_timeout
        self.stk_timeout   = stk_timeout

    # Auth

    def get_access_token(self, oauth_url: str) -> str:
        """
        Fetch an OAuth access token from a single OAuth URL.

        Raises:
            TokenAcquisitionError: on transport failures, non-2xx statuses,
                or a 2xx response without an access_token field
        """
        creds = f"{self.credentials.consumer_key}:{self.credentials.consumer_secret}"
        encoded = base64.b64encode(creds.encode("utf-8")).decode("utf-8")

        try:
            resp = requests.get(
                oauth_url,
                headers={"Authorization": f"Basic {encoded}"},
                timeout=self.oauth_timeout,
            )
        except requests.RequestException as exc:
            logger.error("Daraja OAuth request to %s failed: %s", oauth_url, exc)
            raise TokenAcquisitionError(f"daraja-oauth-error:network {exc}") from exc

        data = _parse_body(resp)
        if 200 <= resp.status_code < 300 and isinstance(data, dict) and data.get("access_token"):
            return data["access_token"]

        body = json.dumps(data) if isinstance(data, (dict, list)) else (data or "")
        logger.error("Daraja OAuth request to %s returned HTTP %s", oauth_url, resp.status_code)
        raise TokenAcquisitionError(
            f"daraja-oauth-error:status {resp.status_code} {body}",
            status_code=resp.status_code,
            body=body,
        )

    def obtain_token(self) -> str:
        """
        Fetch a token from the configured OAuth URL.

        A production URL that fails for any reason is retried exactly once
        against the sandbox host; any other URL propagates the first error.
        """
        oauth_url = self.credentials.oauth_url
        try:
            return self.get_access_token(oauth_url)
        except TokenAcquisitionError:
            sandbox = sandbox_url_for(oauth_url)
            if not sandbox:
                raise
            logger.warning("Daraja OAuth failed on production host, retrying against %s", SANDBOX_HOST)
            return self.get_access_token(sandbox)

    # STK Push

    def build_stk_payload(
        self,
        phone: str,
        amount: int,
        timestamp: str,
        account_reference: Optional[str] = None,
        transaction_desc: Optional[str] = None,
    ) -> Dict[str, Any]:
        paybill = self.credentials.paybill
        return {
            "BusinessShortCode": paybill,
            "Password":          make_password(paybill, self.credentials.passkey, timestamp),
            "Timestamp":         timestamp,
            "TransactionType":   TRANSACTION_TYPE,
            "Amount":            amount,
            "PartyA":            phone,
            "PartyB":            paybill,
            "PhoneNumber":       phone,
            "CallBackURL":       self.credentials.callback_url,
            "AccountReference":  account_reference or phone,
            "TransactionDesc":   transaction_desc or DEFAULT_TRANSACTION_DESC,
        }

    def submit_stk_push(self, token: str, payload: Dict[str, Any]) -> UpstreamResponse:
        """
        POST the STK Push request.

        Non-2xx responses are returned, not raised: the caller records them.

        Raises:
            UpstreamTransportError: timeout, DNS or connection failure
        """
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type":  "application/json",
        }
        try:
            resp = requests.post(
                self.credentials.stk_url,
                json=payload,
                headers=headers,
                timeout=self.stk_timeout,
            )
        except requests.RequestException as exc:
            logger.error(
                "Daraja STK push to %s failed (BusinessShortCode=%s, Amount=%s): %s",
                self.credentials.stk_url, payload.get("BusinessShortCode"), payload.get("Amount"), exc,
            )
            raise UpstreamTransportError(f"daraja-stk-error:network {exc}") from exc

        response = UpstreamResponse(resp.status_code, _parse_body(resp))
        if not response.ok:
            logger.error(
                "Daraja STK push to %s returned HTTP %s (BusinessShortCode=%s, Amount=%s)",
                self.credentials.stk_url, resp.status_code,
                payload.get("BusinessShortCode"), payload.get("Amount"),
            )
        return response
