"""
Conversion requests, converters and concurrent dispatch.

Each logical unit and each bucket entry of an inventory becomes one
ConversionRequest. Requests are handed to a Converter with bounded
concurrency; every outcome is captured as a tagged ConversionResult so one
failing item never aborts the batch. Results keep request order regardless of
completion order.
"""

import asyncio
import threading
from dataclasses import replace
from pathlib import Path
from typing import Callable, Protocol

from rich import print as pr

from constants import DEFAULT_MAX_CONCURRENCY, DEFAULT_MAX_PROMPT_TOKENS
from core.classification import is_stateful_service
from core.exceptions import ConversionError
from core.llm import ask_llm
from core.models import (
    ConversionRequest,
    ConversionResult,
    ConversionStatus,
    LogicalUnit,
    ProjectInventory,
    SourceFile,
)
from core.names import component_name, display_name
from core.prompts import build_conversion_prompt, extract_code
from core.tokens import TiktokenCounter, TokenCounter
from models import DefinitionKind
from ui.progress_display import NoOpProgressDisplay, ProgressDisplay


class Converter(Protocol):
    """
    Protocol for the external text-generation collaborator.

    Implementations return the converted text, or raise (preferably
    ConversionError) when the item cannot be converted.
    """

    async def convert(self, request: ConversionRequest) -> str:
        """Convert one request and return the output file content."""


class LLMConverter:
    """
    Converter backed by an LLM reached through litellm.

    Prompts larger than `max_prompt_tokens` are rejected before any call is
    made.
    """

    def __init__(
        self,
        model: str,
        api_key: str | None,
        counter: TokenCounter | None = None,
        max_prompt_tokens: int = DEFAULT_MAX_PROMPT_TOKENS,
    ):
        self.model = model
        self.api_key = api_key
        self.counter = counter if counter is not None else TiktokenCounter(model)
        self.max_prompt_tokens = max_prompt_tokens

    async def convert(self, request: ConversionRequest) -> str:
        system, user = build_conversion_prompt(request)
        tokens = self.counter.count(system) + self.counter.count(user)
        if tokens > self.max_prompt_tokens:
            raise ConversionError(
                message=f"Prompt for {request.name} has {tokens} tokens, above the limit of {self.max_prompt_tokens}",
                unit_name=request.name,
            )

        try:
            response = await ask_llm(self.model, self.api_key, system, user)
        except Exception as e:  # noqa: BLE001
            # litellm surfaces provider errors under many exception types
            raise ConversionError(
                message=f"LLM call failed for {request.name}: {e}",
                unit_name=request.name,
                original_exception=e,
            ) from e

        if not response.strip():
            raise ConversionError(
                message=f"Empty response for {request.name}", unit_name=request.name
            )
        return extract_code(response)


class MockConverter:
    """
    Mock implementation of Converter for testing.

    Returns `return_value` (or the result of `convert_fn`) and records every
    request. Requests whose name is in `fail_names` raise ConversionError.
    """

    def __init__(
        self,
        return_value: str = "// converted\n",
        convert_fn: Callable[[ConversionRequest], str] | None = None,
        fail_names: set[str] | None = None,
    ):
        self.return_value = return_value
        self.convert_fn = convert_fn
        self.fail_names = fail_names or set()
        self.convert_calls: list[ConversionRequest] = []

    async def convert(self, request: ConversionRequest) -> str:
        self.convert_calls.append(request)
        if request.name in self.fail_names:
            raise ConversionError(
                message=f"Simulated failure for {request.name}",
                unit_name=request.name,
            )
        if self.convert_fn is not None:
            return self.convert_fn(request)
        return self.return_value


def unit_output_path(inventory: ProjectInventory, unit: LogicalUnit) -> Path:
    """Output path of a logical unit: `<source dir>/<PascalName>.jsx`."""
    rel_dir = inventory.relative(unit.primary.path).parent
    return rel_dir / f"{component_name(unit.name)}.jsx"


def bucket_output_path(
    inventory: ProjectInventory, source_file: SourceFile, stateful: bool = False
) -> Path:
    """
    Output path of a bucket entry.

    Stateful services become hooks (`use<Name>.js`); everything else keeps the
    source stem with a `.js` extension.
    """
    rel_path = inventory.relative(source_file.path)
    if stateful:
        return rel_path.parent / f"use{component_name(display_name(source_file))}.js"
    return rel_path.with_suffix(".js")


def build_requests(inventory: ProjectInventory) -> list[ConversionRequest]:
    """
    Create one request per logical unit, then one per bucket entry.

    Units come first in traversal order, followed by buckets in subkind
    declaration order, each bucket in traversal order. Output paths are
    unique across the returned requests.
    """
    requests: list[ConversionRequest] = []

    for unit in inventory.units:
        requests.append(
            ConversionRequest(
                name=unit.name,
                kind=unit.kind,
                source_path=inventory.relative(unit.primary.path),
                output_path=unit_output_path(inventory, unit),
                content=unit.primary.content,
                template=unit.template.content if unit.template else None,
                style=unit.style.content if unit.style else None,
            )
        )

    for kind in DefinitionKind:
        for source_file in inventory.bucket(kind):
            stateful = kind == DefinitionKind.SERVICE and is_stateful_service(
                source_file.content
            )
            requests.append(
                ConversionRequest(
                    name=display_name(source_file),
                    kind=kind,
                    source_path=inventory.relative(source_file.path),
                    output_path=bucket_output_path(inventory, source_file, stateful),
                    content=source_file.content,
                    stateful=stateful,
                )
            )

    return disambiguate_output_paths(requests)


def disambiguate_output_paths(
    requests: list[ConversionRequest],
) -> list[ConversionRequest]:
    """
    Give every request sharing an output path a qualified, unique one.

    All members of a colliding group are renamed, with the first qualifier
    that tells them apart: the subkind (`User.directive.jsx`), else the source
    stem, else the source extension (`http.service.ts.js`). A numeric suffix
    settles anything left.

    Returns:
        The requests in the same order, colliding ones with a new output path.
    """
    groups: dict[Path, list[int]] = {}
    for index, request in enumerate(requests):
        groups.setdefault(request.output_path, []).append(index)

    taken = set(groups)
    resolved = list(requests)
    for output_path, indexes in groups.items():
        if len(indexes) < 2:
            continue
        group = [requests[i] for i in indexes]
        qualifiers = _distinct_qualifiers(group)
        for index, request, qualifier in zip(indexes, group, qualifiers):
            candidate = output_path.with_name(
                f"{output_path.stem}.{qualifier}{output_path.suffix}"
            )
            attempt = 2
            while candidate in taken:
                candidate = output_path.with_name(
                    f"{output_path.stem}.{qualifier}{attempt}{output_path.suffix}"
                )
                attempt += 1
            taken.add(candidate)
            pr(
                f"[yellow]⚠ Warning:[/yellow] {request.source_path.as_posix()} would overwrite "
                f"{output_path.as_posix()}, writing {candidate.as_posix()} instead"
            )
            resolved[index] = replace(request, output_path=candidate)
    return resolved


def _distinct_qualifiers(group: list[ConversionRequest]) -> list[str]:
    for qualify in (
        lambda r: str(r.kind),
        lambda r: r.source_path.stem,
        lambda r: r.source_path.suffix.lstrip("."),
    ):
        qualifiers = [qualify(r) for r in group]
        if all(qualifiers) and len(set(qualifiers)) == len(qualifiers):
            return qualifiers
    return [str(r.kind) for r in group]


def error_placeholder(request: ConversionRequest, message: str) -> str:
    """Content stored in the output slot of an item that failed to convert."""
    return f"// ngshift: conversion of {request.name} ({request.source_path.as_posix()}) failed: {message}\n"


async def dispatch_conversions(
    requests: list[ConversionRequest],
    converter: Converter,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    cancel_event: threading.Event | None = None,
    progress_display: ProgressDisplay | None = None,
) -> list[ConversionResult]:
    """
    Convert every request with at most `max_concurrency` calls in flight.

    A converter exception fails only its own item. Once `cancel_event` is set,
    requests that have not started yet become CANCELLED results; calls
    already in flight run to completion.

    Args:
        requests: The requests to convert.
        converter: The conversion collaborator.
        max_concurrency: Maximum number of simultaneous converter calls.
        cancel_event: Optional event that stops new dispatches when set.
        progress_display: Optional progress reporting; defaults to no-op.

    Returns:
        list[ConversionResult]: One result per request, in request order.
    """
    semaphore = asyncio.Semaphore(max(1, max_concurrency))
    cancel_event = cancel_event if cancel_event is not None else threading.Event()
    display = progress_display if progress_display is not None else NoOpProgressDisplay()

    async def _convert_one(request: ConversionRequest) -> ConversionResult:
        async with semaphore:
            if cancel_event.is_set():
                result = ConversionResult(request, ConversionStatus.CANCELLED)
            else:
                try:
                    content = await converter.convert(request)
                    result = ConversionResult(
                        request, ConversionStatus.CONVERTED, content=content
                    )
                except Exception as e:  # noqa: BLE001
                    # Isolation boundary: no collaborator error escapes its item
                    message = getattr(e, "message", None) or str(e) or type(e).__name__
                    result = ConversionResult(
                        request,
                        ConversionStatus.FAILED,
                        content=error_placeholder(request, message),
                        error=message,
                    )
        display.on_update(advance=1)
        return result

    with display as dp:
        dp.on_start(f"Converting {len(requests)} units...", total=len(requests))
        results = list(await asyncio.gather(*(_convert_one(r) for r in requests)))
        converted = sum(1 for r in results if r.ok)
        dp.on_complete(
            f"✅ Converted {converted} of {len(requests)} units.",
            completed=len(requests),
        )

    return results
