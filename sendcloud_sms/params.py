"""Canonical request parameters for a send call.

``build_params`` returns a plain dict whose keys are inserted in sorted
order; the signer relies on that order, and so does the gateway when it
recomputes the signature.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Iterable, Mapping, Sequence

from .countries import Phone

MSG_TYPE_DOMESTIC = 0
MSG_TYPE_INTERNATIONAL = 2

PARAM_KEYS: tuple[str, ...] = ("msgType", "phone", "smsUser", "templateId", "vars")


class MsgTypeSource(str, Enum):
    """Which recipient list decides the domestic/international flag.

    ``RAW`` looks at every parsed recipient, including landlines and
    duplicates that are later filtered out.  ``FILTERED`` looks only at the
    numbers actually sent.
    """

    RAW = "raw"
    FILTERED = "filtered"


def classify_msg_type(
    template_country: str,
    default_country: str,
    phones: Iterable[Phone],
) -> int:
    """Return ``2`` (international) or ``0`` (domestic) for the whole batch.

    International only when the template was registered outside the default
    country *and* at least one recipient is outside it too.
    """
    if template_country == default_country:
        return MSG_TYPE_DOMESTIC
    if any(phone.country_id != default_country for phone in phones):
        return MSG_TYPE_INTERNATIONAL
    return MSG_TYPE_DOMESTIC


def format_numbers(phones: Sequence[Phone], msg_type: int, exit_code: str) -> list[str]:
    if msg_type == MSG_TYPE_INTERNATIONAL:
        return [phone.to_international_format(exit_code) for phone in phones]
    return [phone.phone_number for phone in phones]


def serialize_vars(variables: Mapping[str, str] | None) -> str:
    """Compact JSON object, no whitespace between tokens."""
    return json.dumps(dict(variables or {}), separators=(",", ":"))


def build_params(
    sms_user: str,
    template_id: str,
    phones: Sequence[Phone],
    variables: Mapping[str, str] | None,
    msg_type: int,
    exit_code: str,
) -> dict[str, str]:
    """Assemble the unsigned parameter set.

    Args:
        sms_user: Gateway account identifier.
        template_id: Resolved template id.
        phones: Filtered, de-duplicated recipients.
        variables: Template variables.
        msg_type: Result of ``classify_msg_type``.
        exit_code: Exit code of the default country, used for
            international numbers.

    Returns:
        ``{msgType, phone, smsUser, templateId, vars}`` in sorted key order.
    """
    values = {
        "smsUser": sms_user,
        "templateId": template_id,
        "phone": ",".join(format_numbers(phones, msg_type, exit_code)),
        "msgType": str(msg_type),
        "vars": serialize_vars(variables),
    }
    return {key: values[key] for key in sorted(values)}
