"""SendCloud SMS client.

Sends template messages through the SendCloud SMS API
(https://www.sendcloud.net/doc/sms/api/): recipients are normalized and
filtered, a template is resolved, the parameters are built and signed, and
the form is POSTed to the template's endpoint.  The JSON answer is mapped
onto ``ActionResult``.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .config import DEFAULT_ENDPOINT, Settings, get_settings
from .countries import Country, Phone, get_country, parse_phone, unique_phones
from .errors import ErrorCode, SMSConfigError, TemplateNotFoundError
from .models import ActionResult, parse_response
from .params import MsgTypeSource, build_params, classify_msg_type
from .signature import Signer, get_signer, sign_request
from .templates import Template, TemplateKind, TemplateRegistry
from .transport import DEFAULT_TIMEOUT_SECONDS, HttpxTransport, Transport

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 2000


class SMSClient:
    """Async client for the SendCloud SMS API.

    Args:
        sms_user: SMS account identifier.
        sms_key: Shared secret used for signing.
        country: Domestic country id; numbers without an international
            prefix are parsed against it.
        templates: Registry used when a send names no template.
        transport: Override for testing; defaults to ``HttpxTransport``.
        endpoint: Fallback URL for templates without an ``end_point``.
        msg_type_source: Recipient list that decides the message type.
        signer: Signature scheme; defaults to the legacy double MD5.
        timeout: Timeout in seconds for the default transport.
    """

    def __init__(
        self,
        sms_user: str,
        sms_key: str,
        country: str = "CN",
        *,
        templates: TemplateRegistry | None = None,
        transport: Transport | None = None,
        endpoint: str = DEFAULT_ENDPOINT,
        msg_type_source: MsgTypeSource = MsgTypeSource.RAW,
        signer: Signer | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        resolved = get_country(country)
        if resolved is None:
            raise SMSConfigError(f"Unknown country {country!r}")
        self._sms_user = sms_user
        self._sms_key = sms_key
        self._country: Country = resolved
        self._templates = templates or TemplateRegistry.build([])
        self._transport: Transport = transport or HttpxTransport(timeout=timeout)
        self._owns_transport = transport is None
        self._endpoint = endpoint
        self._msg_type_source = MsgTypeSource(msg_type_source)
        self._signer = signer or get_signer()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: Transport | None = None,
    ) -> SMSClient:
        """Build a client from ``Settings`` (environment by default).

        Raises:
            SMSConfigError: If the account or key is not configured.
        """
        settings = settings or get_settings()
        sms_key = settings.SENDCLOUD_SMS_KEY.get_secret_value()
        if not settings.SENDCLOUD_SMS_USER or not sms_key:
            raise SMSConfigError("SENDCLOUD_SMS_USER and SENDCLOUD_SMS_KEY must be set")
        return cls(
            settings.SENDCLOUD_SMS_USER,
            sms_key,
            settings.SMS_COUNTRY,
            templates=TemplateRegistry.build(settings.SMS_TEMPLATES),
            transport=transport,
            endpoint=settings.SMS_ENDPOINT,
            msg_type_source=settings.SMS_MSG_TYPE_SOURCE,
            signer=get_signer(settings.SMS_SIGNATURE_SCHEME),
            timeout=settings.SMS_TIMEOUT_SECONDS,
        )

    @property
    def country(self) -> Country:
        return self._country

    @property
    def templates(self) -> TemplateRegistry:
        return self._templates

    async def close(self) -> None:
        """Close the transport if we own it."""
        if self._owns_transport:
            await self._transport.close()

    async def __aenter__(self) -> SMSClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # -- Public API ----------------------------------------------------------

    async def send(
        self,
        kind: TemplateKind,
        mobiles: Iterable[str | Phone],
        variables: Mapping[str, str] | None = None,
        template: Template | None = None,
        *,
        template_id: str | None = None,
    ) -> ActionResult:
        """Send one template message to a batch of mobiles.

        Args:
            kind: Template kind, used when resolving a template.
            mobiles: Raw numbers or already parsed ``Phone`` objects.
            variables: Template variables.
            template: Explicit template; skips registry lookup.
            template_id: Registry id to use when *template* is not given.

        Returns:
            The gateway's answer, or a local rejection (``code == -1``) when
            no number is eligible or the batch exceeds 2000 numbers.

        Raises:
            TemplateNotFoundError: If no template can be resolved.
            SMSTransportError: If the gateway cannot be reached.
        """
        phones = self.normalize(mobiles)
        eligible = [phone for phone in unique_phones(phones) if phone.is_mobile]

        if not eligible:
            logger.warning("SMS send rejected: no eligible numbers (%d given)", len(phones))
            return ActionResult.rejected(ErrorCode.NO_NUMBERS)
        if len(eligible) > MAX_BATCH_SIZE:
            logger.warning("SMS send rejected: %d numbers exceeds %d", len(eligible), MAX_BATCH_SIZE)
            return ActionResult.rejected(ErrorCode.TOO_MANY_NUMBERS)

        template = template or self.resolve_template(kind, eligible, template_id)
        form = self.build_request(template, phones, eligible, variables)
        url = template.end_point or self._endpoint

        logger.info(
            "Sending SMS template=%s recipients=%d msgType=%s",
            template.template_id,
            len(eligible),
            form["msgType"],
        )
        response = await self._transport.post(url, form)
        result = parse_response(response.content)
        if not result.success:
            logger.warning(
                "SMS gateway rejected send http=%d code=%s message=%s",
                response.status_code,
                result.code,
                result.message,
            )
        return result

    async def send_code(
        self,
        mobile: str | Phone,
        code: str,
        template: Template | None = None,
        *,
        template_id: str | None = None,
    ) -> ActionResult:
        """Send a verification code through a ``code`` template."""
        return await self.send(
            TemplateKind.CODE,
            [mobile],
            {"code": code},
            template,
            template_id=template_id,
        )

    # -- Request assembly ----------------------------------------------------

    def normalize(self, mobiles: Iterable[str | Phone]) -> list[Phone]:
        """Parse raw numbers against the domestic country; keep ``Phone`` as-is."""
        phones: list[Phone] = []
        for mobile in mobiles:
            if isinstance(mobile, Phone):
                phones.append(mobile)
                continue
            phone = parse_phone(mobile, self._country)
            if phone is not None:
                phones.append(phone)
        return phones

    def resolve_template(
        self,
        kind: TemplateKind,
        phones: Iterable[Phone],
        template_id: str | None = None,
    ) -> Template:
        """Pick a template by id, else by the recipients' single common country.

        Raises:
            TemplateNotFoundError: If nothing matches.
        """
        if template_id is not None:
            template = self._templates.get_template(kind, template_id=template_id)
            if template is None:
                raise TemplateNotFoundError(kind.value, template_id=template_id)
            return template

        countries = {phone.country_id for phone in phones}
        country = countries.pop() if len(countries) == 1 else None
        template = self._templates.get_template(kind, country=country)
        if template is None:
            raise TemplateNotFoundError(kind.value, country=country)
        return template

    def build_request(
        self,
        template: Template,
        phones: list[Phone],
        eligible: list[Phone],
        variables: Mapping[str, str] | None,
    ) -> dict[str, str]:
        """Classify, build and sign the form for one send.

        Args:
            template: Resolved template.
            phones: Every parsed recipient, before dedup and mobile filtering.
            eligible: The recipients actually sent to.
            variables: Template variables.
        """
        classify_on = phones if self._msg_type_source is MsgTypeSource.RAW else eligible
        msg_type = classify_msg_type(template.country, self._country.id, classify_on)
        params = build_params(
            self._sms_user,
            template.template_id,
            eligible,
            variables,
            msg_type,
            self._country.exit_code,
        )
        return sign_request(self._sms_key, params, self._signer)
