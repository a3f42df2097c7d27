"""
tests/test_utils.py
Unit tests for ormgen.utils (naming engine and helpers).
"""

from __future__ import annotations

import pathlib

import pytest

from ormgen.utils import (
    Timer,
    build_import_block,
    count_lines,
    merge_import_dicts,
    path_to_module,
    pluralize,
    python_string_literal,
    read_text_or_empty,
    safe_identifier,
    sha256_hex,
    singularize,
    to_camel_case,
    to_pascal_case,
    to_plural,
    to_singular,
    to_snake_case,
    write_file,
)


# ===========================================================================
# Case conversion
# ===========================================================================


class TestCaseConversion:

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("UserProfile", "user_profile"),
            ("getHTTPResponse", "get_http_response"),
            ("already_snake", "already_snake"),
            ("blog post", "blog_post"),
            ("Item2", "item2"),
            ("", ""),
        ],
    )
    def test_snake_case(self, name: str, expected: str) -> None:
        assert to_snake_case(name) == expected

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("user_profile", "UserProfile"),
            ("blog post", "BlogPost"),
            ("User", "User"),
            ("HTTPResponse", "HttpResponse"),
        ],
    )
    def test_pascal_case(self, name: str, expected: str) -> None:
        assert to_pascal_case(name) == expected

    def test_camel_case(self) -> None:
        assert to_camel_case("user_profile") == "userProfile"
        assert to_camel_case("") == ""

    @pytest.mark.parametrize("name", ["order_item", "HTTPServer", "userID", "blog-post"])
    def test_snake_of_pascal_is_snake(self, name: str) -> None:
        assert to_snake_case(to_pascal_case(name)) == to_snake_case(name)


# ===========================================================================
# Pluralisation
# ===========================================================================


class TestPluralisation:

    @pytest.mark.parametrize(
        "singular, plural",
        [
            ("user", "users"),
            ("box", "boxes"),
            ("church", "churches"),
            ("company", "companies"),
            ("day", "days"),
            ("person", "people"),
            ("child", "children"),
            ("leaf", "leaves"),
            ("knife", "knives"),
            ("bus", "buses"),
            ("status", "statuses"),
            ("sheep", "sheep"),
            ("blog_person", "blog_people"),
            ("OrderItem", "OrderItems"),
            ("Person", "People"),
        ],
    )
    def test_to_plural(self, singular: str, plural: str) -> None:
        assert to_plural(singular) == plural

    @pytest.mark.parametrize(
        "plural, singular",
        [
            ("users", "user"),
            ("boxes", "box"),
            ("classes", "class"),
            ("companies", "company"),
            ("people", "person"),
            ("leaves", "leaf"),
            ("statuses", "status"),
            ("address", "address"),
            ("status", "status"),
        ],
    )
    def test_to_singular(self, plural: str, singular: str) -> None:
        assert to_singular(plural) == singular

    @pytest.mark.parametrize("word", ["person", "leaf", "box", "company", "user", "post"])
    def test_singularize_then_pluralize(self, word: str) -> None:
        assert pluralize(singularize(word)) == pluralize(word)

    def test_aliases(self) -> None:
        assert pluralize("category") == "categories"
        assert singularize("categories") == "category"

    def test_plural_of_plural_irregular_is_stable(self) -> None:
        assert to_plural("people") == "people"

    def test_empty(self) -> None:
        assert to_plural("") == ""
        assert to_singular("") == ""


# ===========================================================================
# Identifier & module helpers
# ===========================================================================


class TestIdentifiers:

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("User", "user"),
            ("class", "class_"),
            ("id", "id_"),
            ("2fa", "_2fa"),
            ("", "_unnamed"),
        ],
    )
    def test_safe_identifier(self, name: str, expected: str) -> None:
        assert safe_identifier(name) == expected

    @pytest.mark.parametrize(
        "path, module",
        [
            ("app/models", "app.models"),
            ("src/shop/models", "shop.models"),
            ("./models", "models"),
        ],
    )
    def test_path_to_module(self, path: str, module: str) -> None:
        assert path_to_module(path) == module


# ===========================================================================
# Code formatting
# ===========================================================================


class TestFormatting:

    def test_multiline_literal_uses_triple_quotes(self) -> None:
        assert python_string_literal("a\nb") == '"""a\nb"""'

    def test_single_line_literal_uses_repr(self) -> None:
        assert python_string_literal("x") == "'x'"

    def test_multiline_with_backslash_falls_back_to_repr(self) -> None:
        assert python_string_literal("a\\b\nc") == repr("a\\b\nc")

    def test_import_block_sorted(self) -> None:
        block = build_import_block({"typing": {"Optional", "List"}, "base64": set()})
        assert block == "import base64\nfrom typing import List, Optional"

    def test_merge_import_dicts(self) -> None:
        merged = merge_import_dicts({"typing": {"List"}}, {"typing": {"Optional"}, "uuid": {"UUID"}})
        assert merged == {"typing": {"List", "Optional"}, "uuid": {"UUID"}}


# ===========================================================================
# File I/O
# ===========================================================================


class TestFileIO:

    def test_write_file_creates_parents(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "a" / "b" / "c.py"
        size = write_file(target, "x = 1\n")
        assert size == len("x = 1\n".encode("utf-8"))
        assert target.read_text(encoding="utf-8") == "x = 1\n"

    def test_atomic_write_leaves_no_temp_files(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "out.py"
        write_file(target, "first\n")
        write_file(target, "second\n")
        assert target.read_text(encoding="utf-8") == "second\n"
        assert [p.name for p in tmp_path.iterdir()] == ["out.py"]

    def test_non_atomic_write(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "plain.txt"
        write_file(target, "hello", atomic=False)
        assert target.read_text(encoding="utf-8") == "hello"

    def test_read_text_or_empty(self, tmp_path: pathlib.Path) -> None:
        assert read_text_or_empty(tmp_path / "missing.py") == ""

    def test_count_lines(self) -> None:
        assert count_lines("") == 0
        assert count_lines("a\nb\n") == 2
        assert count_lines("a\nb") == 2

    def test_sha256_hex(self) -> None:
        assert sha256_hex("") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_timer(self) -> None:
        with Timer("noop") as t:
            pass
        assert t.elapsed >= 0.0
        assert "noop" in repr(t)
