"""
Prompts used when sending logical units and bucket entries to the LLM.

Every request gets the same system prompt plus a user prompt built from the
item's subkind-specific instructions and its source files. The answer is
expected to be a single code file, optionally wrapped in a markdown fence,
which `extract_code()` removes.
"""

import re

from core.models import ConversionRequest
from models import DefinitionKind

SYSTEM_PROMPT = """You are a code conversion assistant that specializes in converting Angular and AngularJS code to React.
You receive one logical unit of an Angular project at a time: a definition file and, when it has them, its template and its style sheet.
Reply with the converted code for exactly one output file. Provide only the converted code without explanations.
Use function components and hooks. Keep names, behavior and public contracts unchanged. Do not invent code for files you were not given."""

KIND_INSTRUCTIONS: dict[DefinitionKind, str] = {
    DefinitionKind.COMPONENT: "Convert this component into a React function component. Inline the template as JSX and import the style sheet as a CSS module when one is given.",
    DefinitionKind.CONTROLLER: "Convert this controller and its view into a React function component. Scope properties become state, watchers become effects.",
    DefinitionKind.DIRECTIVE: "Convert this directive into a reusable React component, or into a custom hook if it only decorates behavior of its host element.",
    DefinitionKind.SERVICE: "Convert this stateless service into a plain JavaScript module exporting functions.",
    DefinitionKind.FILTER: "Convert this filter or pipe into a pure JavaScript function exported from a module.",
    DefinitionKind.ROUTE_CONFIG: "Convert this route configuration into React Router route definitions.",
    DefinitionKind.MODULE: "Convert this module declaration into the React entry point wiring (providers, context and root rendering) it implies.",
    DefinitionKind.GUARD: "Convert this guard or interceptor into a React Router loader/wrapper component or a fetch wrapper, whichever fits its role.",
    DefinitionKind.MODEL: "Convert these types into plain JavaScript with JSDoc typedefs.",
    DefinitionKind.OTHER: "Convert this file to an equivalent JavaScript module usable from React code.",
}

STATEFUL_SERVICE_INSTRUCTION = "This service holds shared state. Convert it into a React context provider plus a custom hook exposing that state."

_CODE_BLOCK = re.compile(r"```[\w+-]*\s*\n([\s\S]*?)\n?\s*```")


def build_conversion_prompt(request: ConversionRequest) -> tuple[str, str]:
    """
    Build the (system, user) prompt pair for one conversion request.

    Returns:
        tuple[str, str]: The system prompt and the user prompt.
    """
    instruction = KIND_INSTRUCTIONS.get(
        request.kind, KIND_INSTRUCTIONS[DefinitionKind.OTHER]
    )
    if request.kind == DefinitionKind.SERVICE and request.stateful:
        instruction = STATEFUL_SERVICE_INSTRUCTION

    sections = [
        f"{instruction}\nName the result `{request.name}`. It will be saved as `{request.output_path.as_posix()}`.",
        f"Definition ({request.source_path.as_posix()}):\n{request.content}",
    ]
    if request.template is not None:
        sections.append(f"Template:\n{request.template}")
    if request.style is not None:
        sections.append(f"Style sheet:\n{request.style}")

    return SYSTEM_PROMPT, "\n\n".join(sections)


def extract_code(response: str) -> str:
    """Strip an optional markdown code fence from a model answer."""
    text = response.strip()
    code_block = _CODE_BLOCK.search(text)
    if code_block:
        text = code_block.group(1)
    return text.strip() + "\n"
