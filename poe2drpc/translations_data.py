"""Built-in English area names, keyed by the raw area id from Client.txt.

Cruel difficulty ids carry a ``C_`` prefix and are not listed here; they are
resolved through the base id (see translations.py).
"""

# fmt: off
DEFAULT_AREAS: dict[str, str] = {
    # Act 1
    "G1_1": "The Riverbank",
    "G1_town": "Clearfell Encampment",
    "G1_2": "Clearfell",
    "G1_3": "Mud Burrow",
    "G1_4": "The Grelwood",
    "G1_5": "The Red Vale",
    "G1_6": "The Grim Tangle",
    "G1_7": "Cemetery of the Eternals",
    "G1_8": "Mausoleum of the Praetor",
    "G1_9": "Tomb of the Consort",
    "G1_11": "Hunting Grounds",
    "G1_12": "Freythorn",
    "G1_13_1": "Ogham Farmlands",
    "G1_13_2": "Ogham Village",
    "G1_14": "The Manor Ramparts",
    "G1_15": "Ogham Manor",
    # Act 2
    "G2_1": "Vastiri Outskirts",
    "G2_town": "The Ardura Caravan",
    "G2_2": "Traitor's Passage",
    "G2_3": "The Halani Gates",
    "G2_4_1": "Keth",
    "G2_4_2": "The Lost City",
    "G2_4_3": "Buried Shrines",
    "G2_5_1": "Mastodon Badlands",
    "G2_5_2": "The Bone Pits",
    "G2_6": "Valley of the Titans",
    "G2_7": "The Titan Grotto",
    "G2_8": "Deshar",
    "G2_9_1": "Path of Mourning",
    "G2_9_2": "The Spires of Deshar",
    "G2_10_1": "Mawdun Quarry",
    "G2_10_2": "Mawdun Mine",
    "G2_12_1": "The Dreadnought",
    "G2_12_2": "Dreadnought Vanguard",
    # Act 3
    "G3_1": "Sandswept Marsh",
    "G3_town": "Ziggurat Encampment",
    "G3_2_1": "Infested Barrens",
    "G3_2_2": "The Matlan Waterways",
    "G3_3": "Jungle Ruins",
    "G3_4": "The Venom Crypts",
    "G3_5": "Chimeral Wetlands",
    "G3_6_1": "Jiquani's Machinarium",
    "G3_6_2": "Jiquani's Sanctum",
    "G3_7": "The Azak Bog",
    "G3_8": "The Drowned City",
    "G3_9": "The Molten Vault",
    "G3_10": "Apex of Filth",
    "G3_11": "Temple of Kopec",
    "G3_12": "Utzaal",
    "G3_14": "Aggorat",
    "G3_16": "The Black Chambers",
    # Endgame
    "G_Endgame_Town": "The Ziggurat Refuge",
    "HideoutFelled": "Felled Hideout",
    "HideoutLimestone": "Limestone Hideout",
    "HideoutShrine": "Shrine Hideout",
    "HideoutCanal": "Canal Hideout",
}
# fmt: on
