# tests/property/test_assembly_properties.py
"""Property-based tests for routing, patching, globbing and merging.

- Routing keeps the plugin-declared relative path as the suffix
- A patch whose marker is absent leaves the file byte-identical
- A glob without wildcards matches exactly one path
- Line-set and manifest merges never lose existing content
"""

from __future__ import annotations

import json

from hypothesis import given
from hypothesis import strategies as st

from foundry.assembly.globbing import match_glob
from foundry.assembly.merging import merge_json_manifest, merge_line_set
from foundry.assembly.patching import apply_operation
from foundry.contracts.codegen import After, Before, DeleteOperation, InsertOperation, ReplaceOperation
from foundry.contracts.enums import PathCategory
from foundry.contracts.paths import PathContext
from foundry.engine.router import resolve_output_path

segment_st = st.from_regex(r"[A-Za-z0-9_][A-Za-z0-9_.-]{0,12}", fullmatch=True)
relative_path_st = st.lists(segment_st, min_size=1, max_size=4).map("/".join)
context_st = st.builds(PathContext, has_frontend=st.booleans(), has_backend=st.booleans(), has_contracts=st.booleans())
scope_st = st.none() | st.from_regex(r"(@[a-z]{1,6}/)?[a-z][a-z-]{0,10}", fullmatch=True)


class TestRoutingProperties:
    @given(path=relative_path_st, category=st.sampled_from(list(PathCategory)), context=context_st, scope=scope_st)
    def test_declared_path_is_suffix(self, path: str, category: PathCategory, context: PathContext, scope: str | None) -> None:
        resolved = resolve_output_path(path, category, context, scope=scope)

        assert resolved == path or resolved.endswith("/" + path)
        assert not resolved.startswith("/")

    @given(path=relative_path_st, category=st.sampled_from(list(PathCategory)), context=context_st, scope=scope_st)
    def test_same_input_same_destination(self, path: str, category: PathCategory, context: PathContext, scope: str | None) -> None:
        first = resolve_output_path(path, category, context, scope=scope)

        assert resolve_output_path(path, category.value, context, scope=scope) == first
        assert resolve_output_path(path, category, context, scope=scope) == first

    @given(path=relative_path_st, context=context_st)
    def test_uncategorised_paths_unchanged(self, path: str, context: PathContext) -> None:
        assert resolve_output_path(path, None, context) == path
        assert resolve_output_path(path, "not-a-category", context) == path

    @given(path=relative_path_st, category=st.sampled_from(list(PathCategory)), scope=scope_st)
    def test_frontend_code_stays_in_frontend_app(self, path: str, category: PathCategory, scope: str | None) -> None:
        context = PathContext(has_frontend=True)

        resolved = resolve_output_path(path, category, context, scope=scope)

        if category.value.startswith("frontend-"):
            assert resolved.startswith("apps/web/")


class TestPatchProperties:
    @given(text=st.text(max_size=200), marker=st.text(min_size=1, max_size=10), content=st.text(max_size=20))
    def test_missing_marker_is_noop(self, text: str, marker: str, content: str) -> None:
        if marker in text:
            return
        for operation in (
            InsertOperation(After(marker), content),
            InsertOperation(Before(marker), content),
            ReplaceOperation(marker, content),
            DeleteOperation(marker),
        ):
            patched, reason = apply_operation(text, operation)

            assert patched == text
            assert reason is not None

    @given(text=st.text(max_size=200), content=st.text(max_size=20))
    def test_insert_keeps_original(self, text: str, content: str) -> None:
        start, _ = apply_operation(text, InsertOperation("start", content))
        end, _ = apply_operation(text, InsertOperation("end", content))

        assert start.endswith(text)
        assert end.startswith(text)

    @given(text=st.text(alphabet="ab", max_size=50))
    def test_replace_all_removes_every_occurrence(self, text: str) -> None:
        patched, reason = apply_operation(text, ReplaceOperation("a", "c", all=True))

        assert "a" not in patched
        assert (reason is None) == ("a" in text)


class TestGlobProperties:
    @given(path=relative_path_st)
    def test_literal_pattern_matches_itself(self, path: str) -> None:
        assert match_glob(path, path)

    @given(prefix=relative_path_st, rest=relative_path_st)
    def test_double_star_matches_everything_below(self, prefix: str, rest: str) -> None:
        assert match_glob(f"{prefix}/{rest}", f"{prefix}/**")

    @given(path=relative_path_st)
    def test_single_star_never_crosses_directories(self, path: str) -> None:
        assert match_glob(path, "*") is ("/" not in path)


line_st = st.from_regex(r"[a-z.*/_-]{1,12}", fullmatch=True)


class TestMergeProperties:
    @given(existing=st.lists(line_st, min_size=1, max_size=10), incoming=st.lists(line_st, max_size=10))
    def test_line_set_is_a_union(self, existing: list[str], incoming: list[str]) -> None:
        merged = merge_line_set("\n".join(existing) + "\n", "\n".join(incoming) + "\n").content

        lines = merged.splitlines()
        assert lines[: len(existing)] == existing
        assert set(lines) == set(existing) | set(incoming)

    @given(existing=st.lists(line_st, min_size=1, max_size=10), incoming=st.lists(line_st, max_size=10))
    def test_line_set_idempotent(self, existing: list[str], incoming: list[str]) -> None:
        once = merge_line_set("\n".join(existing) + "\n", "\n".join(incoming) + "\n").content

        assert merge_line_set(once, "\n".join(incoming) + "\n").content == once

    @given(
        existing=st.dictionaries(st.from_regex(r"[a-z]{1,6}", fullmatch=True), st.integers() | st.text(max_size=5), max_size=6),
        incoming=st.dictionaries(st.from_regex(r"[a-z]{1,6}", fullmatch=True), st.integers() | st.text(max_size=5), max_size=6),
    )
    def test_manifest_existing_values_win(self, existing: dict[str, object], incoming: dict[str, object]) -> None:
        result = merge_json_manifest(json.dumps(existing), json.dumps(incoming))

        merged = json.loads(result.content)
        assert result.success
        assert merged == {**incoming, **existing}
