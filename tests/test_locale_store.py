import json

import pytest

from translatehub.locale_store import LocaleStore


@pytest.fixture
def clean_env(monkeypatch):
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def test_stored_language_wins(tmp_path, clean_env):
    clean_env.setenv("LANG", "de_DE.UTF-8")
    path = tmp_path / "locale.json"
    path.write_text(json.dumps({"lang": "fr"}))

    assert LocaleStore(path).get_locale_language() == "fr"


def test_system_language_is_detected_and_persisted(tmp_path, clean_env):
    clean_env.setenv("LANG", "pt_BR.UTF-8")
    path = tmp_path / "nested" / "locale.json"

    assert LocaleStore(path).get_locale_language() == "pt"
    assert json.loads(path.read_text()) == {"lang": "pt"}


def test_falls_back_to_english(tmp_path, clean_env):
    clean_env.setenv("LANG", "C.UTF-8")
    path = tmp_path / "locale.json"

    assert LocaleStore(path).get_locale_language() == "en"
    assert not path.exists()


def test_set_locale_language_overwrites(tmp_path):
    store = LocaleStore(tmp_path / "locale.json")
    store.set_locale_language("es")
    store.set_locale_language("it")
    assert store.get_locale_language() == "it"


def test_unreadable_file_is_ignored(tmp_path, clean_env, capsys):
    path = tmp_path / "locale.json"
    path.write_text("{broken")

    assert LocaleStore(path).get_locale_language() == "en"
    assert "Ignoring unreadable locale file" in capsys.readouterr().out


def test_default_path_comes_from_module_setting(locale_file):
    assert LocaleStore().path == locale_file


def test_get_locale_date_is_non_empty():
    assert LocaleStore.get_locale_date()


def test_undecodable_file_is_ignored(tmp_path, clean_env, capsys):
    path = tmp_path / "locale.json"
    path.write_bytes(b'{"lang": "\xff\xfe"}')

    assert LocaleStore(path).get_locale_language() == "en"
    assert "Ignoring unreadable locale file" in capsys.readouterr().out


def test_detected_language_is_not_persisted_on_request(tmp_path, clean_env):
    clean_env.setenv("LANG", "nl_NL.UTF-8")
    path = tmp_path / "locale.json"

    assert LocaleStore(path).get_locale_language(persist=False) == "nl"
    assert not path.exists()
