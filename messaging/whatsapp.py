from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from config.settings import Settings, settings as default_settings
from messaging.errors import ConfigurationError, PhoneValidationError, WhatsAppApiError
from messaging.logger import Logger, StdlibLogger
from messaging.phone import is_valid_e164, mask_phone, to_whatsapp_format
from messaging.types import DEFAULT_API_VERSION, GRAPH_API_BASE_URL, SendTemplateParams, SendTemplateResult
from ops.metrics import Timer


class WhatsAppClient:
    """
    WhatsApp Cloud API client for pre-approved template messages.

    One POST per send_template() call, no retries. Configuration is fixed at
    construction, so one instance can serve concurrent sends.

        client = WhatsAppClient(phone_number_id="1234", access_token="EAAG...")
        result = await client.send_template(SendTemplateParams(
            to="+224620123456", template="order_ready", language="fr", parameters=["OTAKOS-0042"],
        ))
    """

    def __init__(
        self,
        phone_number_id: str,
        access_token: str,
        api_version: Optional[str] = None,
        logger: Optional[Logger] = None,
        *,
        base_url: str = GRAPH_API_BASE_URL,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not phone_number_id:
            raise ConfigurationError("WhatsAppClient: phone_number_id is required")
        if not access_token:
            raise ConfigurationError("WhatsAppClient: access_token is required")

        self._phone_number_id = phone_number_id
        self._access_token = access_token
        self._api_version = api_version or DEFAULT_API_VERSION
        self._base_url = base_url.rstrip("/")
        self._logger: Logger = logger or StdlibLogger()
        # caller-owned when given; never closed here
        self._http_client = http_client

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        logger: Optional[Logger] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "WhatsAppClient":
        if settings is None:
            settings = default_settings
        return cls(
            phone_number_id=settings.WHATSAPP_PHONE_NUMBER_ID,
            access_token=settings.WHATSAPP_ACCESS_TOKEN,
            api_version=settings.WHATSAPP_API_VERSION,
            logger=logger,
            base_url=settings.WHATSAPP_API_BASE_URL or GRAPH_API_BASE_URL,
            http_client=http_client,
        )

    @property
    def messages_url(self) -> str:
        return f"{self._base_url}/{self._api_version}/{self._phone_number_id}/messages"

    def __repr__(self) -> str:
        # no token
        return f"WhatsAppClient(phone_number_id={self._phone_number_id!r}, api_version={self._api_version!r})"

    async def send_template(self, params: SendTemplateParams) -> SendTemplateResult:
        """
        Send one template message.

        Raises PhoneValidationError (no request made) when `params.to` is not
        E.164, WhatsAppApiError on a non-2xx response, and lets httpx transport
        errors through after logging them.
        """
        masked = mask_phone(params.to)
        if not is_valid_e164(params.to):
            self._logger.warn(
                "whatsapp_send_rejected",
                {"event": "whatsapp_send_rejected", "channel": "whatsapp", "template": params.template, "phone": masked},
            )
            raise PhoneValidationError(
                f"Invalid E.164 phone number: {masked}. Expected format: +<country_code><number>"
            )

        wa_phone = to_whatsapp_format(params.to)
        body = build_template_body(wa_phone, params)

        self._logger.info(
            "whatsapp_send_attempt",
            {"event": "whatsapp_send_attempt", "channel": "whatsapp", "template": params.template, "phone": masked},
        )

        timer = Timer()
        try:
            resp = await self._post(body)
        except httpx.HTTPError as e:
            self._logger.error(
                "whatsapp_send_exception",
                {
                    "event": "whatsapp_send_exception",
                    "channel": "whatsapp",
                    "template": params.template,
                    "phone": masked,
                    "error_type": type(e).__name__,
                    "latency_ms": timer.ms(),
                },
            )
            raise

        if not resp.is_success:
            error = WhatsAppApiError.from_response(resp.status_code, resp.text)
            self._logger.error(
                "whatsapp_send_failed",
                {
                    "event": "whatsapp_send_failed",
                    "channel": "whatsapp",
                    "template": params.template,
                    "phone": masked,
                    "status": resp.status_code,
                    "code": error.code,
                    "error": error.message,
                    "trace_id": error.trace_id,
                    "latency_ms": timer.ms(),
                },
            )
            raise error

        message_id = _first_message_id(resp.json())
        if not message_id:
            # 2xx without an id is still reported as sent
            self._logger.warn(
                "whatsapp_message_id_missing",
                {"event": "whatsapp_message_id_missing", "channel": "whatsapp", "template": params.template, "phone": masked},
            )

        self._logger.info(
            "whatsapp_template_sent",
            {
                "event": "whatsapp_template_sent",
                "channel": "whatsapp",
                "template": params.template,
                "phone": masked,
                "message_id": message_id,
                "latency_ms": timer.ms(),
            },
        )
        return SendTemplateResult(message_id=message_id, phone=wa_phone)

    async def _post(self, body: Dict[str, Any]) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._access_token}", "Content-Type": "application/json"}
        if self._http_client is not None:
            return await self._http_client.post(self.messages_url, json=body, headers=headers)
        async with httpx.AsyncClient() as http:
            return await http.post(self.messages_url, json=body, headers=headers)


def build_template_body(wa_phone: str, params: SendTemplateParams) -> Dict[str, Any]:
    template: Dict[str, Any] = {
        "name": params.template,
        "language": {"code": params.language},
    }
    # Omit "components" entirely when there is nothing to fill; order maps to {{1}}, {{2}}, ...
    if params.parameters:
        template["components"] = [
            {
                "type": "body",
                "parameters": [{"type": "text", "text": text} for text in params.parameters],
            }
        ]
    return {
        "messaging_product": "whatsapp",
        "to": wa_phone,
        "type": "template",
        "template": template,
    }


def _first_message_id(data: Any) -> str:
    if not isinstance(data, dict):
        return ""
    messages = data.get("messages") or []
    if not isinstance(messages, list) or not messages or not isinstance(messages[0], dict):
        return ""
    return str(messages[0].get("id") or "")
