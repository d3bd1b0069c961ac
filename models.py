"""
Type definitions shared across the ngshift CLI application.

This module contains the closed enumerations used to tag scanned files and the
TypedDict describing the classification tables, so that the heuristics can be
passed around (and overridden) as plain configuration data.
"""

from enum import StrEnum
from typing import TypedDict


class Category(StrEnum):
    """
    Structural role of a scanned file.

    Every file that survives extension filtering maps to exactly one of these
    values. Files whose extension is not recognized never get a category; they
    are dropped before entering the inventory.
    """

    DEFINITION = "definition"
    TEMPLATE = "template"
    STYLE = "style"
    UNCLASSIFIED = "unclassified"


class DefinitionKind(StrEnum):
    """
    Refined role ("subkind") of a definition file.

    The subkind selects both the grouping behaviour (component, controller and
    directive files become logical units; everything else is bucketed) and the
    conversion prompt used downstream.
    """

    COMPONENT = "component"
    CONTROLLER = "controller"
    DIRECTIVE = "directive"
    SERVICE = "service"
    FILTER = "filter"
    ROUTE_CONFIG = "route-config"
    MODULE = "module"
    GUARD = "guard"
    MODEL = "model"
    OTHER = "other"


class ClassificationHeuristics(TypedDict):
    """
    Type definition for the classification rule tables.

    Attributes:
        definition_extensions: Extensions of files that declare code
            (e.g., ".ts", ".js").
        sniffable_extensions: Subset of definition extensions whose content may
            be searched for registration tokens when no suffix rule matches.
        template_extensions: Markup extensions (e.g., ".html").
        style_extensions: Style sheet extensions (e.g., ".scss").
        auxiliary_extensions: Extensions that are recognized but carry no
            structural role. They are categorized as UNCLASSIFIED.
        suffix_rules: Ordered (stem suffix, subkind) pairs. The first suffix
            the lower-cased file stem ends with wins.
        content_rules: Ordered (subkind, tokens) pairs used for content
            sniffing. The first family with any token present wins.
    """

    definition_extensions: frozenset[str]
    sniffable_extensions: frozenset[str]
    template_extensions: frozenset[str]
    style_extensions: frozenset[str]
    auxiliary_extensions: frozenset[str]
    suffix_rules: tuple[tuple[str, DefinitionKind], ...]
    content_rules: tuple[tuple[DefinitionKind, tuple[str, ...]], ...]
