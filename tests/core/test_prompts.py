"""
Tests for the prompts module.
"""

from pathlib import Path

import pytest

from core.models import ConversionRequest
from core.prompts import (
    KIND_INSTRUCTIONS,
    STATEFUL_SERVICE_INSTRUCTION,
    SYSTEM_PROMPT,
    build_conversion_prompt,
    extract_code,
)
from models import DefinitionKind


def _request(**overrides):
    values = {
        "name": "foo",
        "kind": DefinitionKind.COMPONENT,
        "source_path": Path("app/foo.component.ts"),
        "output_path": Path("app/Foo.jsx"),
        "content": "@Component({})",
    }
    values.update(overrides)
    return ConversionRequest(**values)


@pytest.mark.unit
def test_every_kind_has_instructions():
    """Each subkind maps to its own conversion instructions."""
    assert set(KIND_INSTRUCTIONS) == set(DefinitionKind)


@pytest.mark.unit
def test_prompt_includes_all_unit_files():
    """Definition, template and style all reach the user prompt."""
    system, user = build_conversion_prompt(
        _request(template="<p>hi</p>", style="p { color: red; }")
    )

    assert system == SYSTEM_PROMPT
    assert KIND_INSTRUCTIONS[DefinitionKind.COMPONENT] in user
    assert "app/Foo.jsx" in user
    assert "Definition (app/foo.component.ts):\n@Component({})" in user
    assert "Template:\n<p>hi</p>" in user
    assert "Style sheet:\np { color: red; }" in user


@pytest.mark.unit
def test_prompt_omits_missing_slots():
    """Empty template and style slots are left out."""
    _, user = build_conversion_prompt(_request())

    assert "Template:" not in user
    assert "Style sheet:" not in user


@pytest.mark.unit
def test_stateful_service_prompt():
    """Stateful services are asked to become a provider and hook."""
    _, user = build_conversion_prompt(
        _request(kind=DefinitionKind.SERVICE, stateful=True)
    )

    assert STATEFUL_SERVICE_INSTRUCTION in user
    assert KIND_INSTRUCTIONS[DefinitionKind.SERVICE] not in user


@pytest.mark.unit
@pytest.mark.parametrize(
    "response, expected",
    [
        ("```jsx\nconst a = 1;\n```", "const a = 1;\n"),
        ("Here you go:\n```javascript\nconst a = 1;\n```\nEnjoy!", "const a = 1;\n"),
        ("const a = 1;", "const a = 1;\n"),
        ("\n\n  const a = 1;  \n", "const a = 1;\n"),
    ],
)
def test_extract_code(response, expected):
    """Code fences and surrounding chatter are removed."""
    assert extract_code(response) == expected
