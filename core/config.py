"""
Run configuration for the pipeline.

Every input the pipeline consumes (paths, exclusions, classification tables,
model settings and concurrency limits) is carried by one immutable
PipelineConfig passed to the orchestrator at invocation time.
"""

from dataclasses import dataclass, field
from pathlib import Path

from constants import (
    DEFAULT_HEURISTICS,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_MAX_PROMPT_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_READ_WORKERS,
    EXCLUDED_DIRS,
    EXCLUDED_FILE_PATTERNS,
    GROUPED_KINDS,
)
from core.llm import CONFIG_FILE, get_config_file
from models import ClassificationHeuristics, DefinitionKind


@dataclass(frozen=True)
class PipelineConfig:
    """
    Immutable configuration for one pipeline run.

    Attributes:
        root: Project root to scan.
        output_root: Directory converted files are written under.
        excluded_dirs: Directory names never walked.
        excluded_file_patterns: File name globs never scanned.
        heuristics: Classification tables (extensions, suffix and content rules).
        grouped_kinds: Subkinds forming logical units with a template and style.
        model: LLM model name, as understood by litellm.
        api_key: API key for the model provider. None lets litellm fall back
            to the provider's environment variable.
        max_concurrency: Maximum simultaneous conversion calls.
        read_workers: Threads used to load file contents.
        max_prompt_tokens: Prompts above this size fail without a model call.
    """

    root: Path
    output_root: Path
    excluded_dirs: frozenset[str] = EXCLUDED_DIRS
    excluded_file_patterns: tuple[str, ...] = EXCLUDED_FILE_PATTERNS
    heuristics: ClassificationHeuristics = field(
        default_factory=lambda: DEFAULT_HEURISTICS
    )
    grouped_kinds: frozenset[DefinitionKind] = GROUPED_KINDS
    model: str = DEFAULT_MODEL
    api_key: str | None = None
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    read_workers: int = DEFAULT_READ_WORKERS
    max_prompt_tokens: int = DEFAULT_MAX_PROMPT_TOKENS

    @classmethod
    def from_settings(
        cls,
        root: Path,
        output_root: Path,
        settings_file: Path = CONFIG_FILE,
        **overrides,
    ) -> "PipelineConfig":
        """
        Build a config using the saved settings file for model and API key.

        Overrides whose value is None are ignored, so unset CLI options keep
        the saved (or default) values.
        """
        settings = get_config_file(settings_file)
        values = {
            "model": settings.get("model") or DEFAULT_MODEL,
            "api_key": settings.get("api_key"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(root=root, output_root=output_root, **values)
