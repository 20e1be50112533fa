"""Tests for the KeyValues (VDF/ACF) parser."""
from __future__ import annotations

import pytest

from windeck.discovery import keyvalues
from windeck.discovery.steam import library_paths, parse_manifest

LIBRARY_FOLDERS = r'''
"libraryfolders"
{
	"0"
	{
		"path"		"C:\\Program Files (x86)\\Steam"
		"label"		""
		"apps"
		{
			"228980"		"281912489"
		}
	}
	// second drive
	"1"
	{
		"path"		"D:\\SteamLibrary"
	}
}
'''

MANIFEST = '''
"AppState"
{
	"appid"		"620"
	"Universe"		"1"
	"name"		"Portal 2"
	"installdir"		"Portal 2"
	"UserConfig"
	{
		"language"		"english"
	}
}
'''


def test_nested_blocks_and_escapes():
    doc = keyvalues.loads(LIBRARY_FOLDERS)
    folders = doc["libraryfolders"]
    assert folders["0"]["path"] == "C:\\Program Files (x86)\\Steam"
    assert folders["0"]["label"] == ""
    assert folders["0"]["apps"] == {"228980": "281912489"}
    assert folders["1"]["path"] == "D:\\SteamLibrary"


def test_library_paths_in_file_order():
    assert library_paths(LIBRARY_FOLDERS) == ["C:\\Program Files (x86)\\Steam", "D:\\SteamLibrary"]


def test_legacy_library_layout():
    text = '"LibraryFolders"\n{\n "TimeNextStatsReport" "1"\n "1" "E:\\\\Games"\n}\n'
    assert library_paths(text) == ["E:\\Games"]


def test_bare_tokens_conditions_and_comments():
    doc = keyvalues.loads('root { key value [$WIN32] // trailing\n "quoted" "x y" }')
    assert doc == {"root": {"key": "value", "quoted": "x y"}}


def test_duplicate_keys_keep_first():
    assert keyvalues.loads('"a" "1" "a" "2"') == {"a": "1"}


def test_case_insensitive_lookup():
    doc = keyvalues.loads('"AppState" { "AppID" "10" }')
    state = keyvalues.get_ci(doc, "appstate")
    assert keyvalues.get_ci(state, "appid") == "10"
    assert keyvalues.get_ci(state, "name", "?") == "?"
    assert keyvalues.get_ci("not a dict", "x") is None


@pytest.mark.parametrize("text", [
    '"AppState" { "appid" "1"',
    '"AppState" }',
    '"name" "unterminated',
    '"key" {',
    '"lonely"',
])
def test_malformed_input_raises(text):
    with pytest.raises(keyvalues.KeyValuesError):
        keyvalues.loads(text)


def test_parse_manifest_complete():
    assert parse_manifest(MANIFEST) == ("620", "Portal 2", "Portal 2")


@pytest.mark.parametrize("drop", ["appid", "name", "installdir"])
def test_parse_manifest_missing_field(drop):
    lines = [line for line in MANIFEST.splitlines() if f'"{drop}"' not in line]
    assert parse_manifest("\n".join(lines)) is None


def test_parse_manifest_rejects_non_numeric_appid():
    assert parse_manifest(MANIFEST.replace('"620"', '"abc"')) is None


def test_library_paths_ignores_non_block_root():
    assert library_paths('"libraryfolders" "broken"') == []
    assert library_paths('"somethingelse" "x"') == []
