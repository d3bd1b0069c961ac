"""
Application-wide constants and classification tables.

This module defines the default heuristics used to scan an Angular / AngularJS
project: which directories are never walked, how file names and contents map
to definition subkinds, which patterns reveal a declared name or an external
template/style reference, and where templates and styles conventionally live.
Everything here is a default; the pipeline receives these values through its
configuration and never reads them behind the caller's back.
"""

from typing import Final, Mapping
from models import ClassificationHeuristics, DefinitionKind


# Directory names that are never descended into while walking a project.
# Dependency caches, build output and VCS metadata only add noise.
EXCLUDED_DIRS: Final[frozenset[str]] = frozenset(
    {
        "node_modules",
        "bower_components",
        "dist",
        "build",
        "coverage",
        "tmp",
        ".angular",
        ".git",
        ".hg",
        ".svn",
        ".idea",
        ".vscode",
        "e2e",
    }
)

# File name globs dropped by the walker before classification.
# Unit tests and type declaration files share the definition extensions but
# never describe a convertible unit.
EXCLUDED_FILE_PATTERNS: Final[tuple[str, ...]] = (
    "*.spec.ts",
    "*.spec.js",
    "*.test.ts",
    "*.test.js",
    "*.d.ts",
)

DEFAULT_HEURISTICS: Final[ClassificationHeuristics] = {
    "definition_extensions": frozenset({".ts", ".js"}),
    "sniffable_extensions": frozenset({".ts", ".js"}),
    "template_extensions": frozenset({".html", ".htm"}),
    "style_extensions": frozenset({".css", ".scss", ".sass", ".less"}),
    "auxiliary_extensions": frozenset(),
    # Order matters: "app-routing.module" must be seen as a route config
    # before the generic ".module" rule claims it.
    "suffix_rules": (
        ("-routing.module", DefinitionKind.ROUTE_CONFIG),
        (".routing", DefinitionKind.ROUTE_CONFIG),
        (".routes", DefinitionKind.ROUTE_CONFIG),
        (".route", DefinitionKind.ROUTE_CONFIG),
        (".component", DefinitionKind.COMPONENT),
        (".controller", DefinitionKind.CONTROLLER),
        (".ctrl", DefinitionKind.CONTROLLER),
        (".directive", DefinitionKind.DIRECTIVE),
        (".service", DefinitionKind.SERVICE),
        (".factory", DefinitionKind.SERVICE),
        (".provider", DefinitionKind.SERVICE),
        (".store", DefinitionKind.SERVICE),
        (".pipe", DefinitionKind.FILTER),
        (".filter", DefinitionKind.FILTER),
        (".module", DefinitionKind.MODULE),
        (".guard", DefinitionKind.GUARD),
        (".interceptor", DefinitionKind.GUARD),
        (".resolver", DefinitionKind.GUARD),
        (".model", DefinitionKind.MODEL),
        (".interface", DefinitionKind.MODEL),
        (".enum", DefinitionKind.MODEL),
        (".types", DefinitionKind.MODEL),
        (".type", DefinitionKind.MODEL),
    ),
    # Stateful units first, then transforms, then compile-time directives.
    "content_rules": (
        (DefinitionKind.COMPONENT, ("@Component(", ".component(")),
        (DefinitionKind.CONTROLLER, (".controller(",)),
        # Quoted first argument keeps Array.prototype.filter calls out.
        (DefinitionKind.FILTER, ("@Pipe(", ".filter('", '.filter("')),
        (DefinitionKind.DIRECTIVE, ("@Directive(", ".directive(")),
        (
            DefinitionKind.SERVICE,
            ("@Injectable(", ".service(", ".factory(", ".provider("),
        ),
        (
            DefinitionKind.ROUTE_CONFIG,
            (
                "$routeProvider",
                "$stateProvider",
                "RouterModule.forRoot",
                "RouterModule.forChild",
                ": Routes",
            ),
        ),
        (DefinitionKind.MODULE, ("@NgModule(", "angular.module(")),
        (
            DefinitionKind.GUARD,
            ("CanActivate", "CanDeactivate", "HttpInterceptor"),
        ),
        (
            DefinitionKind.MODEL,
            ("export interface ", "export enum ", "export type "),
        ),
    ),
}

# Subkinds that are grouped with a template and a style into a logical unit.
# Every other subkind lands in a bucket.
GROUPED_KINDS: Final[frozenset[DefinitionKind]] = frozenset(
    {
        DefinitionKind.COMPONENT,
        DefinitionKind.CONTROLLER,
        DefinitionKind.DIRECTIVE,
    }
)

# One pattern per subkind revealing a declared name: a registration call (or a
# pipe declaration) with a quoted identifier. Subkinds missing from this map
# never declare a name and fall back to their base name.
_QUOTED_ID = r"""\s*['"]([\w$.\-]+)['"]"""
NAME_PATTERNS: Final[Mapping[DefinitionKind, str]] = {
    DefinitionKind.COMPONENT: r"\.component\(" + _QUOTED_ID,
    DefinitionKind.CONTROLLER: r"\.controller\(" + _QUOTED_ID,
    DefinitionKind.DIRECTIVE: r"\.directive\(" + _QUOTED_ID,
    DefinitionKind.FILTER: r"(?:\.filter\(|@Pipe\(\s*\{[^}]*?\bname\s*:)"
    + _QUOTED_ID,
    DefinitionKind.SERVICE: r"\.(?:service|factory|provider)\(" + _QUOTED_ID,
    DefinitionKind.MODULE: r"angular\.module\(" + _QUOTED_ID,
}

# External template / style declarations inside a definition file.
TEMPLATE_REFERENCE_PATTERNS: Final[tuple[str, ...]] = (
    r"""\btemplateUrl\s*:\s*['"`]([^'"`]+)['"`]""",
)
STYLE_REFERENCE_PATTERNS: Final[tuple[str, ...]] = (
    r"""\bstyleUrl\s*:\s*['"`]([^'"`]+)['"`]""",
    r"""\bstyleUrls\s*:\s*\[\s*['"`]([^'"`]+)['"`]""",
)

# Conventional directory names holding templates and styles next to (or just
# below) the definition that uses them.
TEMPLATE_DIRS: Final[frozenset[str]] = frozenset({"views", "templates", "partials"})
STYLE_DIRS: Final[frozenset[str]] = frozenset(
    {"styles", "css", "scss", "stylesheets"}
)

# Tokens suggesting a service holds shared, observable state. A service-like
# file containing any of them is converted into a stateful hook rather than a
# plain module. This is a shallow heuristic and may misjudge some services.
STATEFUL_SERVICE_TOKENS: Final[tuple[str, ...]] = (
    "BehaviorSubject",
    "ReplaySubject",
    "new Subject",
    "signal(",
    "$rootScope",
    "$scope",
    "$broadcast",
    "$watch",
    "Store<",
)

# Defaults for the conversion stage.
DEFAULT_MODEL: Final[str] = "gpt-4-turbo"
DEFAULT_MAX_CONCURRENCY: Final[int] = 4
DEFAULT_READ_WORKERS: Final[int] = 8
DEFAULT_MAX_PROMPT_TOKENS: Final[int] = 100_000
