"""Shared test fixtures for vdf_keyvalues tests."""

from __future__ import annotations

import pytest

SAMPLE_VDF = (
    'key{"ke\\"y2"{key3 "val\\\\ue3"}\n'
    "}\n"
    "key4 {\n"
    "    none none\n"
    "}\n"
    'key4 value4 // comment {} "" \\\\\n'
    "key5 {\n"
    '    "key\\n{6}" "val\\tue{6}"\n'
    '    "key7" {\n'
    '        key8 "value8"\n'
    "        key8 {\n"
    '            key9 "value9"\n'
    "        }\n"
    "    }\n"
    '    key9 "value9"\n'
    "}\n"
)


@pytest.fixture
def sample_vdf() -> str:
    return SAMPLE_VDF


@pytest.fixture
def sample_earliest() -> dict:
    return {
        "key": {'ke"y2': {"key3": "val\\ue3"}},
        "key4": {"none": "none"},
        "key5": {
            "key\\n{6}": "val\\tue{6}",
            "key7": {"key8": "value8"},
            "key9": "value9",
        },
    }


@pytest.fixture
def sample_latest() -> dict:
    return {
        "key": {'ke"y2': {"key3": "val\\ue3"}},
        "key4": "value4",
        "key5": {
            "key\\n{6}": "val\\tue{6}",
            "key7": {"key8": {"key9": "value9"}},
            "key9": "value9",
        },
    }


@pytest.fixture
def app_manifest() -> str:
    return (
        "\ufeff\"AppState\"\r\n"
        "{\r\n"
        "\t\"appid\"\t\t\"440\"\r\n"
        "\t\"name\"\t\t\"Team Fortress 2\"\r\n"
        "\t\"InstalledDepots\"\r\n"
        "\t{\r\n"
        "\t\t\"441\"\r\n"
        "\t\t{\r\n"
        "\t\t\t\"manifest\"\t\t\"7707612755534328431\"\r\n"
        "\t\t}\r\n"
        "\t}\r\n"
        "}\r\n"
    )
