"""
meeple.engine.assets — Dice Designer Asset Unlock Table
========================================================

Maps (category, asset name) to the gate that controls it in the dice
designer.  A gate is one of:

* ``OPEN`` — no gate at all (assets missing from the table).
* ``THRESHOLD`` — unlocked once the user reaches ``level``.
* ``SPECIAL_EVENT`` — never unlocked by leveling; granted out of band
  (donation, Dice of the Week, Card of the Week).

Special-event assets serialize with ``level: 0`` for display, but every
comparison goes through :meth:`Gate.admits` so level 0 can never act as a
threshold.
"""

from __future__ import annotations

import enum
from collections.abc import Collection
from dataclasses import dataclass

__all__ = [
    "ASSET_LEVEL_REQUIREMENTS",
    "AssetLevelRequirement",
    "Gate",
    "GateKind",
    "UnlockedAsset",
    "can_user_access_asset",
    "get_asset_level_requirement",
    "get_available_assets",
    "get_newly_unlocked_assets",
    "list_categories",
]


class GateKind(enum.StrEnum):
    OPEN = "open"
    THRESHOLD = "threshold"
    SPECIAL_EVENT = "special_event"


@dataclass(frozen=True, slots=True)
class Gate:
    kind: GateKind
    min_level: int | None = None

    @classmethod
    def open(cls) -> Gate:
        return cls(GateKind.OPEN)

    @classmethod
    def threshold(cls, level: int) -> Gate:
        if level < 1:
            raise ValueError(f"threshold level must be >= 1, got {level}")
        return cls(GateKind.THRESHOLD, level)

    @classmethod
    def special_event(cls) -> Gate:
        return cls(GateKind.SPECIAL_EVENT)

    def admits(self, user_level: int) -> bool:
        """Whether leveling alone lets *user_level* through this gate."""
        if self.kind is GateKind.OPEN:
            return True
        if self.kind is GateKind.SPECIAL_EVENT:
            return False
        return user_level >= self.min_level

    def unlocks_between(self, old_level: int, new_level: int) -> bool:
        """True if this gate opens somewhere in ``(old_level, new_level]``."""
        return (
            self.kind is GateKind.THRESHOLD
            and old_level < self.min_level <= new_level
        )


@dataclass(frozen=True, slots=True)
class AssetLevelRequirement:
    category: str
    asset_name: str
    gate: Gate
    level_name: str
    description: str

    @property
    def level(self) -> int:
        """Display level; 0 for special-event assets."""
        return self.gate.min_level or 0

    @property
    def is_special(self) -> bool:
        return self.gate.kind is GateKind.SPECIAL_EVENT

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "asset": self.asset_name,
            "level": self.level,
            "level_name": self.level_name,
            "description": self.description,
            "special": self.is_special,
        }


@dataclass(frozen=True, slots=True)
class UnlockedAsset:
    category: str
    asset: str
    requirement: AssetLevelRequirement


# ---------------------------------------------------------------------------
# Raw table: category → [(asset, level, level name, description)]
# level 0 marks a special-event asset.
# ---------------------------------------------------------------------------
_RAW_TABLE: dict[str, list[tuple[str, int, str, str]]] = {
    "backgrounds": [
        ("WhiteBackground", 1, "Commoner", "Basic white background"),
        ("BlackBackground", 1, "Commoner", "Basic black background"),
        ("BlueBackground", 2, "Squire", "Blue background"),
        ("GreenBackground", 2, "Squire", "Green background"),
        ("RedBackground", 2, "Squire", "Red background"),
        ("YellowBackground", 2, "Squire", "Yellow background"),
        ("GameBoardBackground", 4, "Champion", "Game board themed background"),
        ("ChessBoardBackground", 6, "Lord/Lady", "Chess board themed background"),
        ("CasinoBackground", 8, "Duke/Duchess", "Casino themed background"),
        ("CardGameBackground", 10, "King/Queen", "Card game themed background"),
        ("KingsRoomBackground", 0, "Special",
         "King's Room background - only unlockable by winning Dice of the Week"),
    ],
    "dice": [
        ("WhiteDice", 1, "Commoner", "Basic white dice"),
        ("BlackDice", 2, "Squire", "Basic black dice"),
        ("BlueDice", 2, "Squire", "Basic blue dice"),
        ("GreenDice", 2, "Squire", "Basic green dice"),
        ("OrangeDice", 2, "Squire", "Orange dice"),
        ("PinkDice", 2, "Squire", "Pink dice"),
        ("PurpleDice", 2, "Squire", "Purple dice"),
        ("RedDice", 2, "Squire", "Basic red dice"),
        ("YellowDice", 2, "Squire", "Basic yellow dice"),
        ("BoxDice", 3, "Knight", "Box-themed dice"),
        ("IceCubeDice", 5, "Baron/Baroness", "Ice cube dice"),
        ("RubikDice", 7, "Archmage", "Rubik's cube dice"),
        ("Dice-SkullDice", 8, "Duke/Duchess", "Skull-themed dice"),
        ("SafeDice", 9, "Prince", "Safe-themed dice"),
        ("GiftDice", 0, "Special",
         "Gift dice - only unlockable by donating to the page"),
        ("Dice-BotDice", 0, "Special",
         "Dice-Bot dice - only unlockable by donating to the page"),
    ],
    "patterns": [
        ("1-2-3", 1, "Commoner", "Basic 1-2-3 pattern"),
        ("2-1-4", 1, "Commoner", "Basic 2-1-4 pattern"),
        ("3-6-5", 1, "Commoner", "Basic 3-6-5 pattern"),
        ("4-5-6", 1, "Commoner", "Basic 4-5-6 pattern"),
        ("5-4-1", 1, "Commoner", "Basic 5-4-1 pattern"),
        ("6-3-2", 1, "Commoner", "Basic 6-3-2 pattern"),
        ("ABC", 4, "Champion", "Alphabet pattern"),
        ("Mistery", 6, "Lord/Lady", "Mystery pattern"),
        ("Suits", 6, "Lord/Lady", "Card suit pattern"),
        ("Elements", 8, "Duke/Duchess", "Elemental pattern"),
    ],
    "accessories": [
        ("Bow", 2, "Squire", "Basic bow accessory"),
        ("Belt", 4, "Champion", "Basic belt accessory"),
        ("Blush", 5, "Baron/Baroness", "Blush accessory"),
        ("Sunglasses", 5, "Baron/Baroness", "Cool sunglasses accessory"),
        ("Scar", 7, "Archmage", "Scar accessory"),
        ("Patch", 9, "Prince", "Patch accessory"),
        ("KingsCape", 10, "King/Queen", "King's cape - very exclusive!"),
    ],
    "Crowns & Hats": [
        ("Cone", 2, "Squire", "Basic cone hat"),
        ("Joker", 2, "Squire", "Joker hat"),
        ("TopHat", 5, "Baron/Baroness", "Elegant top hat"),
        ("SorcererHat", 8, "Duke/Duchess", "Powerful sorcerer hat"),
        ("WizardHat", 8, "Duke/Duchess", "Magical wizard hat"),
        ("PrincesCrown", 9, "Prince", "Prince's crown - royal item!"),
        ("QueensCrown", 10, "King/Queen", "Queen's crown - ultimate prestige!"),
        ("KingsCrown", 10, "King/Queen", "King's crown - ultimate prestige!"),
    ],
    "items": [
        ("ManaPotion", 1, "Commoner", "Mana potion"),
        ("HealthPotion", 1, "Commoner", "Health potion"),
        ("CardCastle", 3, "Knight", "Card castle item"),
        ("PokerChips", 4, "Champion", "Poker chips"),
        ("Map", 5, "Baron/Baroness", "Adventure map"),
        ("Coins", 5, "Baron/Baroness", "Coins"),
        ("Shield", 6, "Lord/Lady", "Basic shield"),
        ("Mace", 6, "Lord/Lady", "Heavy mace"),
        ("Bomb", 7, "Archmage", "Explosive bomb"),
        ("Staff", 8, "Duke/Duchess", "Magical staff"),
        ("Spellbook", 8, "Duke/Duchess", "Ancient spellbook"),
        ("Sword", 9, "Prince", "Basic sword"),
        ("HolyGrail", 10, "King/Queen", "Legendary holy grail"),
        ("KingsCard", 0, "Special",
         "King's Card - only unlockable by winning Card of the Week"),
    ],
    "companions": [
        ("Meeple", 3, "Knight", "Basic meeple companion"),
        ("Mini-Dice", 5, "Baron/Baroness", "Mini dice companion"),
        ("JackInTheBox", 6, "Lord/Lady", "Jack in the box companion"),
        ("ChessKnight", 6, "Lord/Lady", "Chess knight companion"),
        ("Dice-Skull", 7, "Archmage", "Legendary dice skull companion"),
        ("EightBall", 8, "Duke/Duchess", "Eight ball companion"),
        ("Mimic", 9, "Prince", "Mysterious mimic companion"),
        ("Dice-Bot", 10, "King/Queen", "Legendary Dice-Bot companion - unlocks at level 10"),
    ],
    "titles": [
        ("Commoner", 1, "Commoner", "Basic title for new players"),
        ("Squire", 2, "Squire", "Squire title"),
        ("Knight", 3, "Knight", "Knight title"),
        ("Champion", 4, "Champion", "Champion title"),
        ("Baron", 5, "Baron/Baroness", "Baron title"),
        ("Baroness", 5, "Baron/Baroness", "Baroness title"),
        ("Lord", 6, "Lord/Lady", "Lord title"),
        ("Lady", 6, "Lord/Lady", "Lady title"),
        ("Archmage", 7, "Archmage", "Archmage title"),
        ("Duke", 8, "Duke/Duchess", "Duke title"),
        ("Duchess", 8, "Duke/Duchess", "Duchess title"),
        ("Prince", 9, "Prince", "Prince title"),
        ("Princess", 9, "Prince", "Princess title"),
        ("King", 10, "King/Queen", "King title"),
        ("Queen", 10, "King/Queen", "Queen title"),
    ],
}


def _build_table() -> dict[str, dict[str, AssetLevelRequirement]]:
    table: dict[str, dict[str, AssetLevelRequirement]] = {}
    for category, rows in _RAW_TABLE.items():
        table[category] = {
            name: AssetLevelRequirement(
                category=category,
                asset_name=name,
                gate=Gate.special_event() if level == 0 else Gate.threshold(level),
                level_name=level_name,
                description=description,
            )
            for name, level, level_name, description in rows
        }
    return table


ASSET_LEVEL_REQUIREMENTS: dict[str, dict[str, AssetLevelRequirement]] = _build_table()


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------
def list_categories() -> list[str]:
    return list(ASSET_LEVEL_REQUIREMENTS)


def get_asset_level_requirement(
    category: str, asset_name: str
) -> AssetLevelRequirement | None:
    """Requirement for an asset, or None when it is not gated at all."""
    return ASSET_LEVEL_REQUIREMENTS.get(category, {}).get(asset_name)


def can_user_access_asset(
    user_level: int,
    category: str,
    asset_name: str,
    unlocked_specials: Collection[str] = (),
) -> bool:
    """True if *user_level* (or a special unlock) grants the asset.

    Special-event assets are only accessible when their name is in
    *unlocked_specials*; no level satisfies them.
    """
    requirement = get_asset_level_requirement(category, asset_name)
    if requirement is None:
        return True
    if requirement.is_special:
        return asset_name in unlocked_specials
    return requirement.gate.admits(user_level)


def get_available_assets(
    user_level: int, category: str, unlocked_specials: Collection[str] = ()
) -> list[str]:
    """Names of every asset in *category* the user can currently use."""
    return [
        name
        for name in ASSET_LEVEL_REQUIREMENTS.get(category, {})
        if can_user_access_asset(user_level, category, name, unlocked_specials)
    ]


def get_newly_unlocked_assets(old_level: int, new_level: int) -> list[UnlockedAsset]:
    """Assets whose threshold lies in ``(old_level, new_level]``.

    Special-event assets are never surfaced by leveling.
    """
    unlocked: list[UnlockedAsset] = []
    for category, assets in ASSET_LEVEL_REQUIREMENTS.items():
        for name, requirement in assets.items():
            if requirement.gate.unlocks_between(old_level, new_level):
                unlocked.append(UnlockedAsset(category, name, requirement))
    return unlocked
