"""SendCloud SMS client.

Provides phone normalization, template resolution, request signing and an
async client for the SendCloud SMS gateway.
"""

from .client import MAX_BATCH_SIZE, SMSClient
from .config import Settings, configure_logging, get_settings
from .countries import COUNTRIES, Country, Phone, create_phones, get_country, unique_phones
from .errors import (
    ErrorCode,
    SMSConfigError,
    SMSError,
    SMSTransportError,
    TemplateNotFoundError,
)
from .models import ActionResult
from .params import MsgTypeSource, build_params, classify_msg_type
from .signature import DoubleMd5Signer, SendCloudSigner, SignatureScheme, sign, sign_request
from .templates import Template, TemplateKind, TemplateRegistry
from .transport import HttpxTransport, TransportResponse

__all__ = [
    "SMSClient",
    "MAX_BATCH_SIZE",
    "Settings",
    "get_settings",
    "configure_logging",
    "COUNTRIES",
    "Country",
    "Phone",
    "create_phones",
    "get_country",
    "unique_phones",
    "ErrorCode",
    "SMSError",
    "SMSConfigError",
    "SMSTransportError",
    "TemplateNotFoundError",
    "ActionResult",
    "MsgTypeSource",
    "build_params",
    "classify_msg_type",
    "DoubleMd5Signer",
    "SendCloudSigner",
    "SignatureScheme",
    "sign",
    "sign_request",
    "Template",
    "TemplateKind",
    "TemplateRegistry",
    "HttpxTransport",
    "TransportResponse",
]
