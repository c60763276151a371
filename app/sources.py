"""Source catalog and static badge tables."""

from app.models import Badge, SourceDescriptor, SourceKind

VENCORD_CONTRIBUTOR = Badge(tooltip="Vencord Contributor", badge="/public/badges/vencord.png")
EQUICORD_CONTRIBUTOR = Badge(tooltip="Equicord Contributor", badge="/public/badges/equicord.svg")
DISCORD_NITRO = Badge(tooltip="Discord Nitro", badge="/public/badges/discord/NITRO.svg")

# Public flag bits, in the order badges are emitted
DISCORD_FLAGS: dict[str, int] = {
    "STAFF": 1 << 0,
    "PARTNER": 1 << 1,
    "HYPESQUAD": 1 << 2,
    "BUG_HUNTER_LEVEL_1": 1 << 3,
    "HYPESQUAD_ONLINE_HOUSE_1": 1 << 6,
    "HYPESQUAD_ONLINE_HOUSE_2": 1 << 7,
    "HYPESQUAD_ONLINE_HOUSE_3": 1 << 8,
    "PREMIUM_EARLY_SUPPORTER": 1 << 9,
    "TEAM_USER": 1 << 10,
    "SYSTEM": 1 << 12,
    "BUG_HUNTER_LEVEL_2": 1 << 14,
    "VERIFIED_DEVELOPER": 1 << 17,
    "CERTIFIED_MODERATOR": 1 << 18,
    "SPAMMER": 1 << 20,
    "ACTIVE_DEVELOPER": 1 << 22,
    "VERIFIED_BOT": 1 << 16,
    "BOT_HTTP_INTERACTIONS": 1 << 19,
    "SUPPORTS_COMMANDS": 1 << 23,
    "USES_AUTOMOD": 1 << 24,
}

_DISCORD_TOOLTIPS = {
    "HYPESQUAD": "HypeSquad Events",
    "HYPESQUAD_ONLINE_HOUSE_1": "HypeSquad Bravery",
    "HYPESQUAD_ONLINE_HOUSE_2": "HypeSquad Brilliance",
    "HYPESQUAD_ONLINE_HOUSE_3": "HypeSquad Balance",
    "STAFF": "Discord Staff",
    "PARTNER": "Discord Partner",
    "CERTIFIED_MODERATOR": "Certified Moderator",
    "VERIFIED_DEVELOPER": "Verified Bot Developer",
    "ACTIVE_DEVELOPER": "Active Developer",
    "PREMIUM_EARLY_SUPPORTER": "Premium Early Supporter",
    "BUG_HUNTER_LEVEL_1": "Bug Hunter (Level 1)",
    "BUG_HUNTER_LEVEL_2": "Bug Hunter (Level 2)",
    "SUPPORTS_COMMANDS": "Supports Commands",
    "USES_AUTOMOD": "Uses AutoMod",
}

# Flags without an entry here have no visible badge
DISCORD_BADGES: dict[str, Badge] = {
    flag: Badge(tooltip=tooltip, badge=f"/public/badges/discord/{flag}.svg")
    for flag, tooltip in _DISCORD_TOOLTIPS.items()
}

# Replugged boolean flags -> label, in emission order
REPLUGGED_BADGES: dict[str, str] = {
    "developer": "Developer",
    "staff": "Staff",
    "support": "Support",
    "contributor": "Contributor",
    "translator": "Translator",
    "hunter": "Hunter",
    "early": "Early User",
    "booster": "Booster",
}

SOURCES: tuple[SourceDescriptor, ...] = (
    SourceDescriptor(
        name="vencord",
        kind=SourceKind.HTTP_JSON_MANIFEST,
        normalizer="contributor_map",
        description="Custom badges from Vencord Discord client",
        url="https://badges.vencord.dev/badges.json",
        manifest_url="https://raw.githubusercontent.com/Vencord/builds/main/plugins.json",
        contributor_badge=VENCORD_CONTRIBUTOR,
        local_icons=True,
    ),
    SourceDescriptor(
        name="equicord",
        kind=SourceKind.HTTP_JSON_MANIFEST,
        normalizer="contributor_map",
        description="Custom badges from Equicord Discord client",
        url="https://raw.githubusercontent.com/Equicord/Equibored/refs/heads/main/badges.json",
        manifest_url="https://raw.githubusercontent.com/Equicord/Equibored/refs/heads/main/plugins.json",
        contributor_badge=EQUICORD_CONTRIBUTOR,
        local_icons=True,
    ),
    SourceDescriptor(
        name="nekocord",
        kind=SourceKind.HTTP_JSON,
        normalizer="id_join",
        description="Custom badges from Nekocord Discord client",
        url="https://nekocord.dev/assets/badges.json",
    ),
    SourceDescriptor(
        name="reviewdb",
        kind=SourceKind.HTTP_JSON,
        normalizer="reviewdb",
        description="Badges from ReviewDB service",
        url="https://manti.vendicated.dev/api/reviewdb/badges",
    ),
    SourceDescriptor(
        name="aero",
        kind=SourceKind.HTTP_JSON,
        normalizer="keyword",
        description="Custom badges from Aero mod",
        url="https://gist.githubusercontent.com/TheCommieAxolotl/58c22cb5e91c71ce85818395dbe80c24/raw/badges.json",
        icon_base="/public/badges/aero",
        local_icons=True,
    ),
    SourceDescriptor(
        name="aliucord",
        kind=SourceKind.HTTP_JSON,
        normalizer="aliucord",
        description="Custom badges from Aliucord mobile Discord client",
        url="https://aliucord.com/files/badges/data.json",
        icon_base="/public/badges/aliucord",
        local_icons=True,
    ),
    SourceDescriptor(
        name="ra1ncord",
        kind=SourceKind.HTTP_JSON,
        normalizer="label_map",
        description="Custom badges from Ra1ncord Discord client",
        url="https://raw.githubusercontent.com/ra1ncord/badges/main/badges.json",
    ),
    SourceDescriptor(
        name="badgevault",
        kind=SourceKind.GIT_TREE,
        normalizer="badgevault",
        description="Custom badges from the BadgeVault repository",
        repo_url="https://github.com/WolfPlugs/BadgeVault.git",
        users_dir="User",
    ),
    SourceDescriptor(
        name="enmity",
        kind=SourceKind.GIT_TREE,
        normalizer="enmity",
        description="Custom badges from Enmity mobile Discord client",
        repo_url="https://github.com/enmity-mod/badges.git",
        badges_dir="data",
        icon_base="/public/badges/enmity",
        local_icons=True,
    ),
    SourceDescriptor(
        name="discord",
        kind=SourceKind.EXTERNAL,
        normalizer="discord",
        description="Official Discord badges (staff, partner, hypesquad, etc.)",
        url="https://discord.com/api/v10/users/{user_id}",
        auth_scheme="Bot",
        local_icons=True,
    ),
    SourceDescriptor(
        name="replugged",
        kind=SourceKind.EXTERNAL,
        normalizer="replugged",
        description="Custom badges from Replugged Discord client",
        url="https://replugged.dev/api/v1/users/{user_id}",
        icon_base="/public/badges/replugged",
        local_icons=True,
    ),
)


def find_source(name: str, sources: tuple[SourceDescriptor, ...] = SOURCES) -> SourceDescriptor | None:
    """Case-insensitive lookup by source name."""
    name = name.lower()
    return next((s for s in sources if s.name == name), None)
