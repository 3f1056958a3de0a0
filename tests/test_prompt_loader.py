import json

import pytest

from decade_restyle.errors import InvalidInputFormat
from decade_restyle.fallback import extract_decade
from decade_restyle.prompt_loader import DEFAULT_PROMPT_TEMPLATE, PromptLoader, get_prompt_loader


def test_every_catalogue_prompt_carries_its_decade():
    loader = get_prompt_loader()
    for decade in loader.get_decades():
        assert extract_decade(loader.build_prompt(decade)) == decade


def test_unknown_decade_is_rejected():
    with pytest.raises(InvalidInputFormat):
        get_prompt_loader().build_prompt("1920s")


def test_template_defaults_when_catalogue_has_none(tmp_path):
    path = tmp_path / "decades.json"
    path.write_text(json.dumps({"decades": ["1920s"]}), encoding="utf-8")
    loader = PromptLoader(str(path))
    assert loader.get_template() == DEFAULT_PROMPT_TEMPLATE
    assert "1920s" in loader.build_prompt("1920s")


def test_missing_catalogue_offers_nothing(tmp_path):
    loader = PromptLoader(str(tmp_path / "missing.json"))
    assert loader.get_decades() == []
    with pytest.raises(InvalidInputFormat):
        loader.build_prompt("1950s")
