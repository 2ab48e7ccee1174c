"""Standard map pools per supported game."""

from __future__ import annotations

MAP_POOL: dict[str, tuple[str, ...]] = {
    "Valorant": (
        "Abyss",
        "Ascent",
        "Bind",
        "Breeze",
        "Corrode",
        "Fracture",
        "Haven",
        "Icebox",
        "Lotus",
        "Pearl",
        "Split",
        "Sunset",
    ),
    "League of Legends": (
        "Summoner's Rift",
        "Howling Abyss",
        "Nexus Blitz",
        "Arena",
    ),
    "Counter-Strike 2": (
        # Active duty
        "Ancient",
        "Dust II",
        "Inferno",
        "Mirage",
        "Nuke",
        "Overpass",
        "Train",
        # Reserve and community defusal
        "Anubis",
        "Vertigo",
        "Basalt",
        "Edin",
        "Palacio",
        "Golden",
        # Hostage
        "Office",
        "Italy",
        "Agency",
        # Wingman
        "Palais",
        "Whistle",
        "Rooftop",
        "Transit",
        # Arms Race
        "Baggage",
        "Shoots",
        "Pool Day",
    ),
    "Rocket League": (
        "AquaDome",
        "Beckwith Park",
        "Champions Field",
        "Deadeye Canyon",
        "DFH Stadium",
        "Estadio Vida",
        "Farmstead",
        "Forbidden Temple",
        "Mannfield",
        "Neo Tokyo",
        "Neon Fields",
        "Rivals Arena",
        "Salty Shores",
        "Sovereign Heights",
        "Starbase ARC",
        "Urban Central",
        "Utopia Coliseum",
        "Wasteland",
    ),
    "Overwatch 2": (
        "Control - Antarctic Peninsula",
        "Control - Busan",
        "Control - Ilios",
        "Control - Lijiang Tower",
        "Control - Nepal",
        "Control - Oasis",
        "Control - Samoa",
        "Escort - Circuit Royal",
        "Escort - Dorado",
        "Escort - Havana",
        "Escort - Junkertown",
        "Escort - Rialto",
        "Escort - Route 66",
        "Escort - Shambali Monastery",
        "Escort - Watchpoint: Gibraltar",
        "Hybrid - Blizzard World",
        "Hybrid - Eichenwalde",
        "Hybrid - Hollywood",
        "Hybrid - King's Row",
        "Hybrid - Midtown",
        "Hybrid - Numbani",
        "Hybrid - Paraíso",
        "Push - Colosseo",
        "Push - Esperança",
        "Push - New Queen Street",
        "Push - Runasapi",
        "Flashpoint - Aatlis",
        "Flashpoint - New Junk City",
        "Flashpoint - Suravasa",
        "Clash - Hanaoka",
        "Clash - Throne of Anubis",
    ),
    "Rainbow Six Siege": (
        "Clubhouse",
        "Bank",
        "Kafe Dostoyevsky",
        "Chalet",
        "Border",
        "District",
        "Stadium Alpha",
        "Stadium Bravo",
        "Lair",
        "Nighthaven Labs",
        "Close Quarter",
        "Emerald Plains",
        "Coastline",
        "Consulate",
        "Favela",
        "Fortress",
        "Hereford Base",
        "House",
        "Kanal",
        "Oregon",
        "Outback",
        "Presidential Plane",
        "Skyscraper",
        "Theme Park",
        "Tower",
        "Villa",
        "Yacht",
    ),
    "Super Smash Bros. Melee": (
        "Battlefield",
        "Final Destination",
        "Brinstar",
        "Corneria",
        "Venom",
        "Fountain of Dreams",
        "Great Bay",
        "Green Greens",
        "Temple",
        "Icicle Mountain",
        "Jungle Japes",
        "Kongo Jungle",
        "Mushroom Kingdom",
        "Mute City",
        "Onett",
        "Pokémon Stadium",
        "Princess Peach's Castle",
        "Rainbow Cruise",
        "Yoshi's Island",
        "Yoshi's Story",
        "Brinstar Depths",
        "Fourside",
        "Big Blue",
        "Poké Floats",
        "Mushroom Kingdom II",
        "Flat Zone",
        "Dream Land",
    ),
    "Super Smash Bros. Ultimate": (
        # Common competitive stage list
        "Battlefield",
        "Small Battlefield",
        "Final Destination",
        "Pokémon Stadium 2",
        "Smashville",
        "Town & City",
        "Kalos Pokémon League",
        "Yoshi's Story",
        "Lylat Cruise",
        "Hollow Bastion",
        "Northern Cave",
    ),
}

DEFAULT_GAME = "Valorant"

GAME_TITLES: tuple[str, ...] = tuple(MAP_POOL.keys())


def maps_for_game(game: str) -> tuple[str, ...]:
    """Map pool for a game, empty for unknown titles."""
    return MAP_POOL.get(game, ())


__all__ = ["DEFAULT_GAME", "GAME_TITLES", "MAP_POOL", "maps_for_game"]
