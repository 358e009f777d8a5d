"""
SMS Gateway Service
Sends payment reminder SMS through a templated HTTP GET provider API
"""

import logging
from typing import Optional

import httpx

from .. import config
from ..errors import SMSGatewayError

logger = logging.getLogger(__name__)


class SMSGatewayClient:
    """
    Thin client for the SMS provider.

    The provider takes every parameter in the query string: account key,
    route, sender id, DLT template id, recipient number, and message text.
    """

    def __init__(
        self,
        base_url: str,
        account_key: Optional[str],
        route: Optional[str] = None,
        sender: Optional[str] = None,
        template_id: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.account_key = account_key
        self.route = route
        self.sender = sender
        self.template_id = template_id
        self.timeout = timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.account_key)

    def build_params(self, to_phone: str, message: str) -> dict[str, str]:
        return {
            "key": self.account_key or "",
            "route": self.route or "",
            "sender": self.sender or "",
            "number": to_phone,
            "sms": message,
            "templateid": self.template_id or "",
        }

    async def send(self, to_phone: str, message: str) -> Optional[str]:
        """
        Send one SMS.

        Returns:
            The provider's raw response body, or None when the gateway is not
            configured and the message was only logged.

        Raises:
            SMSGatewayError: transport failure or non-2xx provider response
        """
        if not self.enabled:
            logger.warning(f"⚠️ SMS gateway not configured, skipping SMS to {to_phone}: {message}")
            return None

        logger.info(f"📱 Sending SMS to {to_phone}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.base_url, params=self.build_params(to_phone, message))
        except httpx.HTTPError as e:
            logger.error(f"❌ Error sending SMS to {to_phone}: {e}")
            raise SMSGatewayError(f"Failed to send SMS: {e}") from e

        logger.info(f"📡 SMS gateway response status: {response.status_code}")
        if not response.is_success:
            logger.error(f"❌ SMS gateway rejected message to {to_phone}: {response.text[:200]}")
            raise SMSGatewayError(f"SMS gateway returned HTTP {response.status_code}")

        logger.info(f"✅ SMS sent successfully to {to_phone}")
        return response.text


def get_sms_client() -> SMSGatewayClient:
    """Dependency injection for SMSGatewayClient"""
    return SMSGatewayClient(
        base_url=config.SMS_GATEWAY_URL,
        account_key=config.SMS_ACCOUNT_KEY,
        route=config.SMS_ROUTE,
        sender=config.SMS_SENDER,
        template_id=config.SMS_TEMPLATE_ID,
        timeout=config.SMS_TIMEOUT_SECONDS,
    )
