"""Built-in name tables for alias resolution and dispatch extraction."""

from __future__ import annotations

from types import MappingProxyType

# Corrections for native functions whose adjacent comment (or derived name)
# does not match the published script name.
NAME_OVERRIDES: MappingProxyType[str, str] = MappingProxyType(
    {
        "op_sfall_func7": "sfall_func7",  # comment says sfall_func6
        "op_sfall_func8": "sfall_func8",  # comment says sfall_func6
        "opSuccess": "is_success",
        "opCritical": "is_critical",
        "op_type_of": "typeof",
        "opWorldmap": "world_map",
        "_op_gdialog_barter": "gdialog_mod_barter",
    }
)

# Script functions implemented as cases of the metarule dispatcher. Their
# names come from the script compiler, nothing in the native source spells
# them out.
DISPATCH_NAMES: MappingProxyType[str, str] = MappingProxyType(
    {
        "METARULE_SIGNAL_END_GAME": "signal_end_game",
        "METARULE_FIRST_RUN": "map_first_run",
        "METARULE_ELEVATOR": "elevator",
        "METARULE_PARTY_COUNT": "party_member_count",
        "METARULE_AREA_KNOWN": "town_known",
        "METARULE_WHO_ON_DRUGS": "drug_influence",
        "METARULE_MAP_KNOWN": "map_is_known",
        "METARULE_IS_LOADGAME": "is_loading_game",
        "METARULE_CAR_CURRENT_TOWN": "car_current_town",
        "METARULE_GIVE_CAR_TO_PARTY": "car_give_to_party",
        "METARULE_GIVE_CAR_GAS": "car_give_gas",
        "METARULE_SKILL_CHECK_TAG": "is_skill_tagged",
        "METARULE_DROP_ALL_INVEN": "obj_drop_everything",
        "METARULE_INVEN_UNWIELD_WHO": "inven_unwield",
        "METARULE_GET_WORLDMAP_XPOS": "world_map_x_pos",
        "METARULE_GET_WORLDMAP_YPOS": "world_map_y_pos",
        "METARULE_CURRENT_TOWN": "cur_town",
        "METARULE_LANGUAGE_FILTER": "language_filter_is_on",
        "METARULE_VIOLENCE_FILTER": "violence_level_setting",
        "METARULE_WEAPON_DAMAGE_TYPE": "weapon_damage_type",
        "METARULE_CRITTER_BARTERS": "critter_barters",
        "METARULE_CRITTER_KILL_TYPE": "critter_kill_type",
        "METARULE_SET_CAR_CARRY_AMOUNT": "set_car_carry_amount",
        "METARULE_GET_CAR_CARRY_AMOUNT": "get_car_carry_amount",
    }
)

# Checked in order; the first matching prefix names the category.
DEFINE_PREFIXES: tuple[str, ...] = (
    "PERK_",
    "TRAIT_",
    "STAT_",
    "SKILL_",
    "DAM_",
    "DMG_",
    "METARULE_",
    "item_type_",
    "INVEN_",
    "CRITTER_",
    "ONE_GAME_",
    "FLOAT_MSG_",
    "OBJ_TYPE_",
    "PID_",
    "PROTO_",
    "ANIM_",
    "SCRIPT_",
    "TILE_",
    "TEAM_",
    "REPUTATION_",
    "GVAR_",
    "LVAR_",
    "MVAR_",
    "MSG_",
    "AI_",
    "FID_",
    "GAME_",
    "TOWN_",
    "MAP_",
    "AREA_",
)

__all__ = ["DEFINE_PREFIXES", "DISPATCH_NAMES", "NAME_OVERRIDES"]
