import json

import pytest

from translatehub.utils import get_language_name, load_context, load_json_file, write_json_file


@pytest.mark.parametrize(
    "code, name",
    [("de", "German"), ("FR", "French"), ("zh", "Chinese"), ("zh_TW", "Chinese (Traditional)"), ("deu", "German")],
)
def test_get_language_name(code, name):
    assert get_language_name(code) == name


def test_get_language_name_unknown():
    with pytest.raises(ValueError, match="Unknown language code"):
        get_language_name("qq")


def test_load_context(tmp_path):
    path = tmp_path / "translation-context.json"
    path.write_text(json.dumps({
        "instructions": "Formal register.",
        "glossary": {"Controller": "a temperature controller"},
    }))

    context = load_context(path)

    assert "Formal register." in context
    assert '- "Controller" refers to a temperature controller' in context


def test_load_context_none_and_missing(tmp_path):
    assert load_context(None) == ""
    with pytest.raises(FileNotFoundError):
        load_context(tmp_path / "missing.json")


def test_json_files_keep_non_ascii(tmp_path):
    path = tmp_path / "out" / "fr.json"
    write_json_file(path, {"msg": "Déjà vu"})

    assert "Déjà vu" in path.read_text(encoding="utf-8")
    assert load_json_file(path) == {"msg": "Déjà vu"}
