"""Template definitions and the read-only template registry.

Templates are registered with the gateway ahead of time; this module only
knows their ids, what kind of message they carry, the country they were
registered for and an optional endpoint override.

The registry is built once with ``TemplateRegistry.build`` and never mutated,
so a single instance can be shared by concurrent sends.
"""

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class TemplateKind(str, Enum):
    """What a template is used for."""

    DEFAULT = "default"
    CODE = "code"


class Template(BaseModel):
    """A gateway-registered message template.

    Accepts both field names and the camelCase keys used in JSON settings
    (``templateId``, ``endPoint``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    template_id: str = Field(..., min_length=1, alias="templateId")
    kind: TemplateKind = TemplateKind.DEFAULT
    country: str = Field(..., min_length=2)
    end_point: str | None = Field(default=None, alias="endPoint")

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("country")
    @classmethod
    def normalize_country(cls, v: str) -> str:
        return v.strip().upper()


class TemplateRegistry:
    """Immutable index of templates by ``(kind, id)`` and ``(kind, country)``."""

    def __init__(
        self,
        by_id: Mapping[tuple[TemplateKind, str], Template],
        by_country: Mapping[tuple[TemplateKind, str], Template],
    ) -> None:
        self._by_id = MappingProxyType(dict(by_id))
        self._by_country = MappingProxyType(dict(by_country))

    @classmethod
    def build(cls, templates: Iterable[Template]) -> TemplateRegistry:
        """Index *templates*.

        The first template declared for a ``(kind, country)`` pair becomes
        that pair's default; later ones stay reachable by id.
        """
        by_id: dict[tuple[TemplateKind, str], Template] = {}
        by_country: dict[tuple[TemplateKind, str], Template] = {}
        for template in templates:
            id_key = (template.kind, template.template_id)
            if id_key in by_id:
                logger.warning(
                    "Duplicate template kind=%s id=%s ignored",
                    template.kind.value,
                    template.template_id,
                )
                continue
            by_id[id_key] = template
            by_country.setdefault((template.kind, template.country), template)
        return cls(by_id, by_country)

    def __len__(self) -> int:
        return len(self._by_id)

    def get_template(
        self,
        kind: TemplateKind,
        template_id: str | None = None,
        country: str | None = None,
    ) -> Template | None:
        """Look up a template.

        Args:
            kind: Template kind.
            template_id: Exact template id; takes precedence over *country*.
            country: Home country id of the recipients.

        Returns:
            The matching template, or ``None``.  With neither *template_id*
            nor *country* there is nothing to match and ``None`` is returned.
        """
        if template_id is not None:
            return self._by_id.get((kind, template_id))
        if country is not None:
            return self._by_country.get((kind, country.upper()))
        return None
