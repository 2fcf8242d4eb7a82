"""
Tests for the JSON / ini config codec.
"""
from __future__ import annotations

import pytest

from servermanager.config.codec import (
    ConfigParseError,
    UnsupportedConfigFormat,
    parse_config,
    parse_value,
    serialize_config,
)

PALWORLD_SETTINGS = """; This configuration file is a sample of the default server settings.
; Changes to this file will NOT be reflected on the server.
[/Script/Pal.PalGameWorldSettings]
OptionSettings=(Difficulty=None,DayTimeSpeedRate=1.000000,ExpRate=1.500000,bIsPvP=False,ServerName="Default Palworld Server",ServerDescription="",AdminPassword="",PublicPort=8211,CrossplayPlatforms=(Steam,Xbox,PS5,Mac),bShowPlayerList=True)
"""


def test_basic_ini_document() -> None:
    text = "key1=value1\nkey2 = value with spaces\n[section]\nkey3=123\ninvalidline"
    assert parse_config(text, "ini") == {
        "key1": "value1",
        "key2": "value with spaces",
        "section": {"key3": 123},
    }


def test_comments_and_blank_lines_are_skipped() -> None:
    text = "; comment\n# another\n\n  \nname=x\n"
    assert parse_config(text, "ini") == {"name": "x"}


def test_scalar_classification() -> None:
    assert parse_value('"quoted value"') == "quoted value"
    assert parse_value('"123"') == "123"
    assert parse_value("42") == 42
    assert parse_value("-7") == -7
    assert parse_value("1.500000") == 1.5
    assert parse_value("TRUE") is True
    assert parse_value("false") is False
    assert parse_value("None") == "None"
    assert parse_value("") == ""


def test_compound_list() -> None:
    assert parse_value("(a,b,c)") == ["a", "b", "c"]
    assert parse_value('(1, "two, with comma", true)') == [1, "two, with comma", True]
    assert parse_value("()") == []


def test_compound_mapping() -> None:
    assert parse_value("(k1=v1,k2=v2)") == {"k1": "v1", "k2": "v2"}
    assert parse_value('(Name="a,b",Port=8211,On=False)') == {"Name": "a,b", "Port": 8211, "On": False}


def test_mapping_skips_items_without_equals() -> None:
    assert parse_value("(k1=v1,stray,k2=2)") == {"k1": "v1", "k2": 2}


def test_nested_compound_is_kept_as_text() -> None:
    parsed = parse_value("(Platforms=(Steam,Xbox),Port=1)")
    assert parsed == {"Platforms": "(Steam,Xbox)", "Port": 1}


def test_section_repeated_merges() -> None:
    text = "[s]\na=1\n[t]\nb=2\n[s]\nc=3\n"
    assert parse_config(text, "ini") == {"s": {"a": 1, "c": 3}, "t": {"b": 2}}


def test_palworld_settings() -> None:
    doc = parse_config(PALWORLD_SETTINGS, "ini")
    options = doc["/Script/Pal.PalGameWorldSettings"]["OptionSettings"]

    assert options["Difficulty"] == "None"
    assert options["ExpRate"] == 1.5
    assert options["bIsPvP"] is False
    assert options["ServerName"] == "Default Palworld Server"
    assert options["ServerDescription"] == ""
    assert options["PublicPort"] == 8211
    assert options["CrossplayPlatforms"] == "(Steam,Xbox,PS5,Mac)"
    assert options["bShowPlayerList"] is True


def test_serialize_ini_layout() -> None:
    doc = {
        "top": "plain",
        "list": ["a", "b c"],
        "section": {
            "count": 3,
            "enabled": True,
            "options": {"Name": "My Server", "Port": 8211},
        },
    }
    text = serialize_config(doc, "ini")
    assert text == (
        "top=plain\n"
        'list=(a,"b c")\n'
        "\n"
        "[section]\n"
        "count=3\n"
        "enabled=True\n"
        'options=(Name="My Server",Port=8211)\n'
    )


def test_top_level_keys_are_written_before_sections() -> None:
    doc = {"section": {"a": 1}, "late": "value"}
    text = serialize_config(doc, "ini")
    assert text.index("late=value") < text.index("[section]")
    assert parse_config(text, "ini") == doc


@pytest.mark.parametrize("text", [
    "key1=value1\nkey2 = value with spaces\n[section]\nkey3=123\ninvalidline",
    PALWORLD_SETTINGS,
    '[s]\nnum_text="123"\nbool_text="true"\nempty=\nquote="say ""hi"""\nsmall=0.00001\n',
    "[s]\nlist=(1,2.5,\"x y\",False)\nmap=(a=\"(paren)\",b=c)\n",
    '[s]\nlist=("a(b",c)\n',
    '[s]\nlist=("a)b",c)\n',
    '[s]\nm=(k="x (y",j=1)\n',
    '[s]\nm=(k="x=y")\n',
    '[s]\nOptionSettings=(ServerDescription="my (server",ServerName=Test,Port=1)\n',
    '[s]\nm=(k="(a)(b)",j=(Steam,Xbox))\n',
])
def test_ini_round_trip_is_value_lossless(text: str) -> None:
    parsed = parse_config(text, "ini")
    assert parse_config(serialize_config(parsed, "ini"), "ini") == parsed


def test_compound_items_with_parentheses_are_quoted() -> None:
    doc = {"s": {"list": ["a(b", "c"], "m": {"k": "x=y", "j": 1}, "raw": ["(Steam,Xbox)"]}}
    text = serialize_config(doc, "ini")

    assert 'list=("a(b",c)' in text
    assert 'm=(k="x=y",j=1)' in text
    assert "raw=((Steam,Xbox))" in text
    assert parse_config(text, "ini") == doc


def test_json_round_trip() -> None:
    text = '{"name": "Enshrouded", "slotCount": 16, "userGroups": [{"name": "Admin", "canKickBan": true}]}'
    doc = parse_config(text, "json")
    rendered = serialize_config(doc, "json")

    assert rendered.startswith('{\n  "name": "Enshrouded"')
    assert parse_config(rendered, "json") == doc


def test_invalid_json_raises() -> None:
    with pytest.raises(ConfigParseError):
        parse_config('{"name": ', "json")


def test_json_must_be_object() -> None:
    with pytest.raises(ConfigParseError):
        parse_config("[1, 2]", "json")


def test_unsupported_format() -> None:
    with pytest.raises(UnsupportedConfigFormat):
        parse_config("a=1", "yaml")
    with pytest.raises(ValueError):
        serialize_config({}, "toml")
