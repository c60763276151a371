"""Raw upstream payload schemas.

Every schema is lenient: unknown keys are ignored, explicit nulls fall back
to field defaults and numeric ids are coerced to strings.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class RawSchema(BaseModel):
    """Base for upstream records."""

    class Config:
        populate_by_name = True
        coerce_numbers_to_str = True

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# ========== Direct maps ==========


class TooltipBadgeSchema(RawSchema):
    """Vencord / Equicord badge item."""

    tooltip: str
    badge: str
    pending: bool = False


class LabelBadgeSchema(RawSchema):
    """Ra1ncord badge item."""

    label: str
    url: str


class PluginAuthorSchema(RawSchema):
    name: str = ""
    id: str = ""


class PluginSchema(RawSchema):
    """Plugin manifest entry; only authors matter here."""

    name: str = ""
    authors: list[Any] = []


# ========== Id joins ==========


class NekocordUserSchema(RawSchema):
    badges: list[str] = []


class NekocordBadgeSchema(RawSchema):
    name: str
    image: str


class ReviewDbBadgeSchema(RawSchema):
    discord_id: str = Field(alias="discordID")
    name: str
    icon: str


# ========== Keyword / role classified ==========


class AeroBadgeSchema(RawSchema):
    text: str
    image: str | None = None
    color: str | None = None


class AliucordCustomSchema(RawSchema):
    text: str
    url: str


class AliucordUserSchema(RawSchema):
    roles: list[Any] = []
    custom: list[Any] = []


# ========== File trees ==========


class BadgeVaultBadgeSchema(RawSchema):
    name: str
    badge: str
    pending: bool = False


class BadgeVaultUserSchema(RawSchema):
    blocked: bool = False
    badges: list[Any] = []


class EnmityIconSchema(RawSchema):
    dark: str | None = None
    light: str | None = None


class EnmityBadgeSchema(RawSchema):
    id: str
    name: str | None = None
    url: EnmityIconSchema | None = None


# ========== Live lookups ==========


class DiscordUserSchema(RawSchema):
    id: str | None = None
    avatar: str | None = None
    flags: int | None = None


class RepluggedCustomSchema(RawSchema):
    name: str | None = None
    icon: str | None = None
    color: str | None = None


class RepluggedBadgesSchema(RawSchema):
    developer: bool = False
    staff: bool = False
    support: bool = False
    contributor: bool = False
    translator: bool = False
    hunter: bool = False
    early: bool = False
    booster: bool = False
    custom: RepluggedCustomSchema | None = None


class RepluggedUserSchema(RawSchema):
    id: str | None = None
    badges: RepluggedBadgesSchema = RepluggedBadgesSchema()
