# src/foundry/engine/router.py
"""Category-based routing of generated files into the project tree.

Plugins declare WHAT a file is (a hook, a contract source, a doc); the router
decides WHERE it goes given the project's shape. The same plugin output lands
in ``apps/web/src/hooks`` in a full-stack project and in ``src/hooks`` when
no frontend scaffold is present.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from foundry.contracts.codegen import GeneratedFile
from foundry.contracts.enums import CategoryDomain, PathCategory
from foundry.contracts.paths import PathContext


@dataclass(frozen=True, slots=True)
class CategoryRoute:
    domain: CategoryDomain
    subdir: str
    scopable: bool


CATEGORY_ROUTES: dict[PathCategory, CategoryRoute] = {
    # Frontend
    PathCategory.FRONTEND_APP: CategoryRoute(CategoryDomain.FRONTEND, "app", scopable=False),
    PathCategory.FRONTEND_COMPONENTS: CategoryRoute(CategoryDomain.FRONTEND, "components", scopable=True),
    PathCategory.FRONTEND_HOOKS: CategoryRoute(CategoryDomain.FRONTEND, "hooks", scopable=True),
    PathCategory.FRONTEND_LIB: CategoryRoute(CategoryDomain.FRONTEND, "lib", scopable=True),
    PathCategory.FRONTEND_TYPES: CategoryRoute(CategoryDomain.FRONTEND, "types", scopable=True),
    PathCategory.FRONTEND_STYLES: CategoryRoute(CategoryDomain.FRONTEND, "styles", scopable=False),
    PathCategory.FRONTEND_PUBLIC: CategoryRoute(CategoryDomain.FRONTEND, "public", scopable=False),
    # Backend
    PathCategory.BACKEND_ROUTES: CategoryRoute(CategoryDomain.BACKEND, "routes", scopable=False),
    PathCategory.BACKEND_SERVICES: CategoryRoute(CategoryDomain.BACKEND, "services", scopable=True),
    PathCategory.BACKEND_MIDDLEWARE: CategoryRoute(CategoryDomain.BACKEND, "middleware", scopable=True),
    PathCategory.BACKEND_LIB: CategoryRoute(CategoryDomain.BACKEND, "lib", scopable=True),
    PathCategory.BACKEND_TYPES: CategoryRoute(CategoryDomain.BACKEND, "types", scopable=True),
    # Contracts
    PathCategory.CONTRACT: CategoryRoute(CategoryDomain.CONTRACT, "", scopable=False),
    PathCategory.CONTRACT_TEST: CategoryRoute(CategoryDomain.CONTRACT, "tests", scopable=False),
    PathCategory.CONTRACT_SOURCE: CategoryRoute(CategoryDomain.CONTRACT, "", scopable=False),
    PathCategory.CONTRACT_SCRIPTS: CategoryRoute(CategoryDomain.SHARED, "scripts", scopable=False),
    # Shared
    PathCategory.DOCS: CategoryRoute(CategoryDomain.SHARED, "docs", scopable=True),
    PathCategory.ROOT: CategoryRoute(CategoryDomain.SHARED, "", scopable=False),
    PathCategory.SHARED_TYPES: CategoryRoute(CategoryDomain.SHARED, "shared/types", scopable=False),
}


def _lookup(category: str | None) -> tuple[PathCategory, CategoryRoute] | None:
    if not category:
        return None
    try:
        key = PathCategory(category)
    except ValueError:
        return None
    return key, CATEGORY_ROUTES[key]


def _join(*parts: str) -> str:
    return "/".join(p for p in parts if p)


def _safe_scope(scope: str) -> str:
    """'@org/wallet-auth' -> 'org-wallet-auth'"""
    return scope.replace("@", "", 1).replace("/", "-")


def _base_path(category: PathCategory, route: CategoryRoute, context: PathContext) -> str:
    frontend_root = context.frontend_base_path

    if route.domain is CategoryDomain.FRONTEND:
        if not context.has_frontend:
            # Standalone library layout
            return _join("src", route.subdir)
        if category is PathCategory.FRONTEND_PUBLIC:
            return _join(context.frontend_path, "public")
        return _join(frontend_root, route.subdir)

    if route.domain is CategoryDomain.BACKEND:
        if context.has_backend:
            return _join(context.backend_base_path, route.subdir)
        if context.has_frontend:
            # Backend code folds into the frontend app
            if category is PathCategory.BACKEND_ROUTES:
                return _join(frontend_root, "app", "api")
            return _join(frontend_root, "lib")
        return "src/lib"

    if route.domain is CategoryDomain.CONTRACT:
        return context.contracts_path

    return route.subdir


def resolve_output_path(
    path: str,
    category: PathCategory | str | None,
    context: PathContext,
    *,
    scope: str | None = None,
) -> str:
    """Compute a file's destination inside the assembled tree.

    Args:
        path: Plugin-declared relative path (``useToken.ts``, ``hooks/x.ts``)
        category: Routing key. None or an unrecognised value keeps `path`.
        context: The run's project shape
        scope: Namespace for scopable categories. Frontend code (and backend
            code when a backend exists) is grouped vertically under
            ``plugins/<scope>/<subdir>``; everything else gets ``/<scope>``
            appended to its base.

    Returns:
        POSIX path relative to the assembly root.
    """
    found = _lookup(category)
    if found is None:
        return path
    key, route = found

    base = _base_path(key, route, context)

    if scope and route.scopable:
        safe = _safe_scope(scope)
        if route.domain is CategoryDomain.FRONTEND:
            base = _join(context.frontend_base_path, "plugins", safe, route.subdir)
        elif route.domain is CategoryDomain.BACKEND and context.has_backend:
            base = _join(context.backend_base_path, "plugins", safe, route.subdir)
        else:
            base = _join(base, safe)

    normalized = path.replace("\\", "/").lstrip("/")
    return _join(base, normalized)


def rewrite_output_paths(
    files: Iterable[GeneratedFile],
    context: PathContext,
    *,
    scope: str | None = None,
) -> list[GeneratedFile]:
    """Resolve every file's category into its destination path."""
    return [f.with_path(resolve_output_path(f.path, f.category, context, scope=scope)) for f in files]
