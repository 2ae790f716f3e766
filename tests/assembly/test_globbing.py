# tests/assembly/test_globbing.py
"""Tests for the component path-mapping glob grammar."""

import pytest

from foundry.contracts.enums import PathCategory


class TestMatchGlob:
    @pytest.mark.parametrize(
        ("path", "pattern", "expected"),
        [
            ("src/lib/deep/mod.rs", "src/**/*.rs", True),
            ("src/lib.rs", "src/**/*.rs", False),
            ("src/lib.ts", "src/**/*.rs", False),
            ("README.md", "*.md", True),
            ("docs/readme.md", "*.md", False),
            ("contract/src/lib.rs", "contract/**", True),
            ("contracts/src/lib.rs", "contract/**", False),
            ("src/hooks/useX.ts", "src/hooks/*.ts", True),
            ("src/hooks/deep/useX.ts", "src/hooks/*.ts", False),
            ("a.b", "a.b", True),
            ("axb", "a.b", False),
            ("src\\hooks\\useX.ts", "src/hooks/*.ts", True),
        ],
    )
    def test_semantics(self, path: str, pattern: str, expected: bool) -> None:
        from foundry.assembly.globbing import match_glob

        assert match_glob(path, pattern) is expected

    def test_regex_metacharacters_are_literal(self) -> None:
        from foundry.assembly.globbing import match_glob

        assert match_glob("a+(b).ts", "a+(b).ts")
        assert not match_glob("aa(b).ts", "a+(b).ts")


class TestFindMapping:
    def test_first_match_in_declaration_order(self) -> None:
        from foundry.assembly.globbing import find_mapping

        mappings = [("src/**/*.ts", "frontend-lib"), ("src/hooks/**", "frontend-hooks")]

        assert find_mapping("src/hooks/useX.ts", mappings) == ("src/**/*.ts", PathCategory.FRONTEND_LIB)

    def test_deep_pattern_does_not_shadow_shallow_one(self) -> None:
        from foundry.assembly.globbing import find_path_category

        mappings = [("src/**/*.ts", "frontend-lib"), ("src/*.ts", "frontend-types")]

        assert find_path_category("src/types.ts", mappings) is PathCategory.FRONTEND_TYPES
        assert find_path_category("src/lib/chain.ts", mappings) is PathCategory.FRONTEND_LIB

    def test_mapping_dict(self) -> None:
        from foundry.assembly.globbing import find_path_category

        mappings = {"contract/**": PathCategory.CONTRACT, "*.md": "docs"}

        assert find_path_category("contract/Cargo.toml", mappings) is PathCategory.CONTRACT
        assert find_path_category("README.md", mappings) is PathCategory.DOCS
        assert find_path_category("src/x.ts", mappings) is None


class TestLiteralPrefix:
    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [
            ("src/hooks/**/*.ts", "src/hooks"),
            ("contract/**", "contract"),
            ("*.md", ""),
            ("src/*/index.ts", "src"),
            ("src/hooks/useX.ts", "src/hooks"),
        ],
    )
    def test_prefix(self, pattern: str, expected: str) -> None:
        from foundry.assembly.globbing import literal_prefix

        assert literal_prefix(pattern) == expected
