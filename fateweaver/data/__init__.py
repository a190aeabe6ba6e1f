"""
Sample items and a sample character, used by the demo tool and the
Streamlit page.

They are stored in the same camelCase shape the host extension saves
presets in, so they double as a reference for that format:

    {
        "id": "longsword",
        "name": "Longsword",
        "presets": [
            {
                "id": "longsword-attack",
                "name": "Attack",
                "variables": [{"id": "ac", "name": "Target AC", "defaultValue": 13}],
                "steps": [
                    {
                        "id": "hit",
                        "label": "Attack",
                        "type": "standard",          # or "daggerheart"
                        "formula": "1d20",
                        "statModifier": "dnd_attr:str",
                        "damageType": "none",
                        "addToSum": False,
                        "isCrit": False,
                    },
                    {
                        "id": "dmg",
                        ...
                        "condition": {
                            "checkSource": "step_result",
                            "dependsOnStepId": "hit",
                            "operator": ">=",
                            "compareTarget": "variable",
                            "variableId": "ac",
                        },
                    },
                ],
            },
        ],
    }

ITEMS holds the loaded Item records; SAMPLE_STATS is a stat sheet with
both a d20-system and a duality-system side filled in.
"""

from fateweaver.records import CharacterStats, CustomStat, Item, chain_from_dict

_RAW_ITEMS = [
    {
        "id": "longsword",
        "name": "Longsword",
        "description": "Versatile steel blade.",
        "presets": [
            {
                "id": "longsword-attack",
                "name": "Attack",
                "variables": [{"id": "ac", "name": "Target AC", "defaultValue": 13}],
                "steps": [
                    {
                        "id": "hit",
                        "label": "Attack",
                        "type": "standard",
                        "formula": "1d20",
                        "statModifier": "dnd_attr:str",
                        "damageType": "none",
                    },
                    {
                        "id": "dmg",
                        "label": "Damage",
                        "type": "standard",
                        "formula": "1d8",
                        "statModifier": "dnd_attr:str",
                        "damageType": "slashing",
                        "addToSum": True,
                        "condition": {
                            "checkSource": "step_result",
                            "dependsOnStepId": "hit",
                            "operator": ">=",
                            "compareTarget": "variable",
                            "variableId": "ac",
                        },
                    },
                    {
                        "id": "flame",
                        "label": "Flame Tongue",
                        "type": "standard",
                        "formula": "2d6",
                        "damageType": "fire",
                        "addToSum": True,
                        "condition": {
                            "checkSource": "step_result",
                            "dependsOnStepId": "dmg",
                            "operator": ">",
                            "compareTarget": "value",
                            "value": 0,
                        },
                    },
                ],
            },
        ],
    },
    {
        "id": "greatsword",
        "name": "Greatsword",
        "description": "Two-handed duality-system weapon.",
        "presets": [
            {
                "id": "greatsword-attack",
                "name": "Attack",
                "variables": [{"id": "difficulty", "name": "Difficulty", "defaultValue": 12}],
                "steps": [
                    {
                        "id": "action",
                        "label": "Action Roll",
                        "type": "daggerheart",
                        "formula": "2d12",
                        "statModifier": "dh:strength",
                        "damageType": "none",
                    },
                    {
                        "id": "dmg",
                        "label": "Damage",
                        "type": "standard",
                        "formula": "1d12+3",
                        "damageType": "physical",
                        "addToSum": True,
                        "condition": {
                            "checkSource": "step_result",
                            "dependsOnStepId": "action",
                            "operator": ">=",
                            "compareTarget": "variable",
                            "variableId": "difficulty",
                        },
                    },
                    {
                        "id": "hope-strike",
                        "label": "Hope Strike",
                        "type": "standard",
                        "formula": "1d6",
                        "damageType": "magic",
                        "addToSum": True,
                        "condition": {
                            "checkSource": "step_result",
                            "dependsOnStepId": "action",
                            "operator": "is_hope",
                            "compareTarget": "value",
                        },
                    },
                ],
            },
        ],
    },
]

ITEMS: list[Item] = [
    Item(
        id=raw["id"],
        name=raw["name"],
        description=raw["description"],
        presets=[chain_from_dict(p) for p in raw["presets"]],
    )
    for raw in _RAW_ITEMS
]

SAMPLE_STATS = CharacterStats(
    active_system="dnd5e",
    attributes={"str": 16, "dex": 14, "con": 12, "int": 10, "wis": 10, "cha": 8},
    skills={"athletics": 5, "perception": 2},
    traits={"agility": 1, "strength": 2, "finesse": 0, "instinct": 1, "presence": -1, "knowledge": 0},
    custom=[CustomStat(id="rage", name="Rage", value=2)],
)
