"""Error taxonomy for the SendCloud SMS client.

Business rejections (no eligible numbers, batch too large) are *not*
exceptions: they come back as ``ActionResult(success=False, code=-1, ...)`` so
callers have one code path to branch on.  Exceptions are reserved for
misconfiguration and transport faults.

Usage::

    from sendcloud_sms.errors import SMSTransportError, TemplateNotFoundError

    try:
        result = await client.send(TemplateKind.DEFAULT, mobiles, variables)
    except TemplateNotFoundError:
        ...  # fix the template configuration
    except SMSTransportError:
        ...  # gateway unreachable
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Business rejection reasons reported through ``ActionResult``.

    The gateway-facing message for each reason is ``ErrorCode.message``.
    """

    NO_NUMBERS = "no_numbers"
    TOO_MANY_NUMBERS = "too_many_numbers"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.NO_NUMBERS: "No Numbers",
    ErrorCode.TOO_MANY_NUMBERS: "Max 2000 Items",
}

# Status code carried by every locally synthesized rejection.
REJECTION_CODE = -1


class SMSError(Exception):
    """Base class for all errors raised by the SMS client."""


class SMSConfigError(SMSError):
    """Settings are incomplete or name an unknown country."""


class TemplateNotFoundError(SMSError):
    """No template was supplied and none could be resolved from the registry."""

    def __init__(self, kind: str, template_id: str | None = None, country: str | None = None) -> None:
        self.kind = kind
        self.template_id = template_id
        self.country = country
        if template_id is not None:
            detail = f"id={template_id!r}"
        elif country is not None:
            detail = f"country={country!r}"
        else:
            detail = "recipients span several countries"
        super().__init__(f"No {kind} template found ({detail})")


class SMSTransportError(SMSError):
    """The HTTP request to the gateway failed before a response was received."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(f"POST {url} failed: {message}")
