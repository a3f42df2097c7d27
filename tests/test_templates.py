"""
tests/test_templates.py
Unit tests for ormgen.templates.

Tests cover:
- Migration plans (create / alter / empty) per driver
- Model rendering: columns, foreign keys, relations, markers, methods
- Seeder, factory and handler rendering
- Every rendered module must parse as valid Python
"""

from __future__ import annotations

import ast

import pytest

from ormgen.dsl import build_descriptor, parse_fields_strict
from ormgen.models import DatabaseDriver, FieldDefinition, SchemaDescriptor
from ormgen.templates import (
    MigrationMode,
    TemplateRenderer,
    build_alter_table_plan,
    build_create_table_plan,
    build_empty_plan,
    column_definition,
)


def _parses(source: str) -> ast.Module:
    return ast.parse(source)


def _class_methods(source: str, class_name: str) -> list:
    tree = _parses(source)
    for node in tree.body:
        if isinstance(node, ast.ClassDef) and node.name == class_name:
            return [n.name for n in node.body if isinstance(n, ast.FunctionDef)]
    raise AssertionError(f"class {class_name} not found")


# ===========================================================================
# Migration plans
# ===========================================================================


class TestColumnDefinition:

    def test_plain(self) -> None:
        fld = FieldDefinition(name="age", logical_type="i32")
        assert column_definition(fld, DatabaseDriver.MYSQL) == "age INTEGER NOT NULL"

    def test_modifiers(self) -> None:
        (fld,) = parse_fields_strict("active:bool:nullable:unique:default=1")
        assert column_definition(fld, DatabaseDriver.MYSQL) == (
            "active TINYINT(1) UNIQUE DEFAULT 1"
        )


class TestMigrationPlans:

    def test_create_table_sqlite(self) -> None:
        fields = parse_fields_strict("name:string,email:string:unique")
        plan = build_create_table_plan("users", fields, DatabaseDriver.SQLITE)

        assert plan.mode == MigrationMode.CREATE_TABLE
        (create,) = plan.up_statements
        assert create.startswith("CREATE TABLE IF NOT EXISTS users (")
        assert "id INTEGER PRIMARY KEY AUTOINCREMENT" in create
        assert "name VARCHAR(255) NOT NULL" in create
        assert "email VARCHAR(255) NOT NULL UNIQUE" in create
        assert "created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP" in create
        assert "updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP" in create
        assert "deleted_at" not in create
        assert plan.down_statements == ("DROP TABLE IF EXISTS users",)

    def test_create_table_column_order(self) -> None:
        fields = parse_fields_strict("title:string,body:text")
        plan = build_create_table_plan(
            "posts", fields, DatabaseDriver.POSTGRES, soft_deletes=True
        )
        body_lines = [line.strip().rstrip(",") for line in plan.up_statements[0].splitlines()[1:-1]]
        assert body_lines == [
            "id BIGSERIAL PRIMARY KEY",
            "title VARCHAR(255) NOT NULL",
            "body TEXT NOT NULL",
            "created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()",
            "updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()",
            "deleted_at TIMESTAMPTZ",
        ]

    def test_create_table_without_timestamps(self) -> None:
        plan = build_create_table_plan(
            "tags", [], DatabaseDriver.MYSQL, primary_key="tag_id", timestamps=False
        )
        assert "tag_id BIGINT AUTO_INCREMENT PRIMARY KEY" in plan.up_statements[0]
        assert "created_at" not in plan.up_statements[0]

    @pytest.mark.parametrize(
        "pk_type, driver, expected",
        [
            ("i32", DatabaseDriver.SQLITE, "id INTEGER PRIMARY KEY AUTOINCREMENT"),
            ("i32", DatabaseDriver.POSTGRES, "id SERIAL PRIMARY KEY"),
            ("i16", DatabaseDriver.MYSQL, "id SMALLINT AUTO_INCREMENT PRIMARY KEY"),
            ("i64", DatabaseDriver.POSTGRES, "id BIGSERIAL PRIMARY KEY"),
            ("uuid", DatabaseDriver.POSTGRES, "id UUID PRIMARY KEY"),
            ("uuid", DatabaseDriver.MYSQL, "id VARCHAR(36) PRIMARY KEY"),
            ("string", DatabaseDriver.SQLITE, "id VARCHAR(255) PRIMARY KEY"),
        ],
    )
    def test_primary_key_type(self, pk_type: str, driver: DatabaseDriver, expected: str) -> None:
        plan = build_create_table_plan(
            "users", [], driver, primary_key_logical_type=pk_type, timestamps=False
        )
        assert plan.up_statements[0].splitlines()[1].strip() == expected

    def test_indexes_for_non_unique_indexed_fields(self) -> None:
        fields = parse_fields_strict("slug:string:indexed,code:string:unique:indexed")
        plan = build_create_table_plan("items", fields, DatabaseDriver.POSTGRES)
        assert plan.up_statements[1:] == ("CREATE INDEX idx_items_slug ON items (slug)",)

    def test_alter_table(self) -> None:
        fields = parse_fields_strict("phone:string:nullable,score:i64")
        plan = build_alter_table_plan("users", fields, DatabaseDriver.POSTGRES)
        assert plan.mode == MigrationMode.ALTER_TABLE
        assert plan.up_statements == (
            "ALTER TABLE users ADD COLUMN phone VARCHAR(255)",
            "ALTER TABLE users ADD COLUMN score BIGINT NOT NULL",
        )
        assert plan.down_statements == (
            "ALTER TABLE users DROP COLUMN phone",
            "ALTER TABLE users DROP COLUMN score",
        )

    def test_empty(self) -> None:
        plan = build_empty_plan()
        assert plan.mode == MigrationMode.EMPTY
        assert plan.table is None
        assert plan.up_statements == () and plan.down_statements == ()


class TestRenderMigration:

    def test_create_table_module(self, renderer: TemplateRenderer) -> None:
        fields = parse_fields_strict("name:string,status:string:default='new'")
        plan = build_create_table_plan("users", fields, DatabaseDriver.POSTGRES)
        source = renderer.render_migration(
            "CreateUsersTable", "m20240102030405_create_users_table", plan
        )

        assert _class_methods(source, "CreateUsersTable") == ["up", "down"]
        assert 'name = "m20240102030405_create_users_table"' in source
        assert "CREATE TABLE IF NOT EXISTS users (" in source
        assert "status VARCHAR(255) NOT NULL DEFAULT 'new'" in source
        assert "DROP TABLE IF EXISTS users" in source
        assert "Driver: postgres" in source

    def test_empty_module_has_placeholders(self, renderer: TemplateRenderer) -> None:
        source = renderer.render_migration("Backfill", "backfill", build_empty_plan())
        _parses(source)
        assert source.count("pass") == 2
        assert "# Write your migration here" in source


# ===========================================================================
# Models
# ===========================================================================


class TestRenderModel:

    def test_user_model(self, renderer: TemplateRenderer, user_descriptor: SchemaDescriptor) -> None:
        source = renderer.render_model(user_descriptor)
        _parses(source)

        assert "class User(Base):" in source
        assert '__tablename__ = "users"' in source
        assert (
            "id: Mapped[int] = mapped_column("
            'BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)'
            in source
        )
        assert "email: Mapped[str] = mapped_column(String(255), unique=True, index=True)" in source
        assert "bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)" in source
        assert "age: Mapped[int] = mapped_column(Integer)" in source
        assert 'posts: Mapped[List["Post"]] = relationship("Post", foreign_keys="Post.user_id")' in source
        assert "from .base import Base" in source
        assert "if TYPE_CHECKING:" in source
        assert "    from .comment import Comment" in source
        assert "    from .post import Post" in source

    def test_user_model_methods(self, renderer: TemplateRenderer, user_descriptor: SchemaDescriptor) -> None:
        source = renderer.render_model(user_descriptor)
        assert _class_methods(source, "User") == ["find_by_email", "__repr__"]
        assert "def find_by_email(cls, session: Session, email: str) -> Optional[\"User\"]:" in source

    def test_timestamps(self, renderer: TemplateRenderer, user_descriptor: SchemaDescriptor) -> None:
        source = renderer.render_model(user_descriptor)
        assert (
            "created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), "
            "server_default=func.now())"
        ) in source
        assert "from datetime import datetime" in source
        assert "deleted_at" not in source

    def test_post_model(self, renderer: TemplateRenderer, post_descriptor: SchemaDescriptor) -> None:
        source = renderer.render_model(
            post_descriptor, known_columns=("created_at", "updated_at", "deleted_at")
        )
        _parses(source)

        assert 'author_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"))' in source
        assert "status: Mapped[str] = mapped_column(String(255), server_default=text(\"'draft'\"))" in source
        assert 'author: Mapped[Optional["User"]] = relationship("User", foreign_keys="Post.author_id")' in source
        assert (
            'cover: Mapped[Optional["Image"]] = relationship("Image", '
            'foreign_keys="Image.post_id", uselist=False)'
        ) in source
        assert 'Index("ix_posts_created_at", "created_at"),' in source
        assert "__soft_delete__ = True" in source
        assert "deleted_at: Mapped[Optional[datetime]]" in source

    def test_unknown_table_args_skipped(self, renderer: TemplateRenderer, post_descriptor: SchemaDescriptor) -> None:
        source = renderer.render_model(post_descriptor)
        assert "__table_args__" not in source

    def test_implicit_foreign_key_column(self, renderer: TemplateRenderer) -> None:
        descriptor, _ = build_descriptor(
            "Comment", fields="body:text", relations="author:belongs_to:User"
        )
        source = renderer.render_model(descriptor)
        _parses(source)
        assert (
            'user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), index=True)'
            in source
        )

    def test_relation_overlaps(self, renderer: TemplateRenderer) -> None:
        descriptor, _ = build_descriptor("Post", relations="author:belongs_to:User")
        source = renderer.render_model(descriptor, overlaps={"author": ["posts"]})
        _parses(source)
        assert (
            'author: Mapped[Optional["User"]] = relationship("User", '
            'foreign_keys="Post.user_id", overlaps="posts")'
        ) in source

    def test_self_referential_belongs_to(self, renderer: TemplateRenderer) -> None:
        descriptor, _ = build_descriptor(
            "Category",
            fields="name:string",
            relations="parent:belongs_to:Category:parent_id,children:has_many:Category:parent_id",
        )
        source = renderer.render_model(
            descriptor, overlaps={"parent": ["children"], "children": ["parent"]}
        )
        _parses(source)
        assert (
            'parent: Mapped[Optional["Category"]] = relationship("Category", '
            'foreign_keys="Category.parent_id", remote_side="Category.id", overlaps="children")'
        ) in source
        assert (
            'children: Mapped[List["Category"]] = relationship("Category", '
            'foreign_keys="Category.parent_id", overlaps="parent")'
        ) in source
        assert "parent_id: Mapped[int] = mapped_column(BigInteger, ForeignKey(\"categories.id\"), index=True)" in source

    def test_nullable_override_not_double_wrapped(self, renderer: TemplateRenderer) -> None:
        descriptor, _ = build_descriptor(
            "Profile", fields="bio:text:nullable", nullable="bio"
        )
        source = renderer.render_model(descriptor)
        assert "bio: Mapped[Optional[str]]" in source
        assert "Optional[Optional" not in source

    def test_attachments_share_one_files_column(self, renderer: TemplateRenderer) -> None:
        descriptor, _ = build_descriptor(
            "Post",
            fields="title:string",
            attachments_single="cover,thumbnail",
            attachments_multi="gallery",
            translatable="title",
        )
        source = renderer.render_model(descriptor)
        _parses(source)
        assert source.count("files: Mapped[") == 1
        assert "files: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)" in source
        assert "__has_one_files__ = ('cover', 'thumbnail')" in source
        assert "__has_many_files__ = ('gallery',)" in source
        assert "__translatable__ = ('title',)" in source

    def test_tokenize(self, renderer: TemplateRenderer) -> None:
        descriptor, _ = build_descriptor("Order", fields="total:decimal", tokenize=True)
        source = renderer.render_model(descriptor)
        _parses(source)
        assert "__tokenize__ = True" in source
        assert "import base64" in source
        assert _class_methods(source, "Order") == ["to_token", "from_token", "__repr__"]

    def test_uuid_primary_key(self) -> None:
        renderer = TemplateRenderer(driver=DatabaseDriver.POSTGRES, primary_key_type="uuid")
        descriptor, _ = build_descriptor("ApiKey", fields="label:string", tokenize=True)
        source = renderer.render_model(descriptor)
        _parses(source)
        assert "id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)" in source
        assert "from uuid import UUID, uuid4" in source
        assert "key = UUID(raw)" in source

    def test_jsonb_on_postgres(self, renderer: TemplateRenderer) -> None:
        descriptor, _ = build_descriptor("Event", fields="payload:jsonb")
        source = renderer.render_model(descriptor)
        assert "from sqlalchemy.dialects.postgresql import JSONB" in source
        assert "payload: Mapped[Dict[str, Any]] = mapped_column(JSONB)" in source

    def test_extension_type_passes_through(self, renderer: TemplateRenderer) -> None:
        descriptor, _ = build_descriptor("Invoice", fields="amount:Money")
        source = renderer.render_model(descriptor)
        assert "amount: Mapped[Money] = mapped_column()" in source

    def test_rendering_is_deterministic(
        self, renderer: TemplateRenderer, post_descriptor: SchemaDescriptor
    ) -> None:
        assert renderer.render_model(post_descriptor) == renderer.render_model(post_descriptor)

    @pytest.mark.parametrize("driver", list(DatabaseDriver))
    def test_every_driver_parses(
        self, driver: DatabaseDriver, user_descriptor: SchemaDescriptor
    ) -> None:
        _parses(TemplateRenderer(driver=driver).render_model(user_descriptor))


# ===========================================================================
# Seeders & factories
# ===========================================================================


class TestRenderSeeders:

    def test_model_seeder(self) -> None:
        renderer = TemplateRenderer(models_module="shop.models")
        source = renderer.render_model_seeder("UserSeeder", "User", 25)
        _parses(source)
        assert "from shop.models import User" in source
        assert "count: int = 25" in source
        assert _class_methods(source, "UserSeeder") == ["__init__", "run", "run_with_factory"]
        assert "def test_user_seeder() -> None:" in source

    def test_basic_seeder(self, renderer: TemplateRenderer) -> None:
        source = renderer.render_basic_seeder("DatabaseSeeder")
        _parses(source)
        assert _class_methods(source, "DatabaseSeeder") == ["__init__", "run"]
        assert "from app.models" not in source


class TestRenderFactory:

    def test_factory(self, renderer: TemplateRenderer) -> None:
        source = renderer.render_factory("UserFactory", "User")
        _parses(source)
        assert "from app.models import User" in source
        assert _class_methods(source, "UserFactory") == [
            "__init__",
            "definition",
            "make",
            "make_many",
            "make_with",
            "create",
            "create_many",
            "create_with",
            "_save",
            "fake_name",
            "fake_email",
            "random_number",
            "random_bool",
            "lorem_ipsum",
        ]
        for test_name in ("make", "make_many", "make_with"):
            assert f"def test_user_factory_{test_name}() -> None:" in source


# ===========================================================================
# Handlers
# ===========================================================================


class TestRenderHandlers:

    def test_resource_handler(self, renderer: TemplateRenderer) -> None:
        source = renderer.render_resource_handler("UserHandler", "User")
        _parses(source)
        assert "class CreateUserRequest(BaseModel):" in source
        assert "class UpdateUserRequest(BaseModel):" in source
        assert "model_config = ConfigDict(from_attributes=True)" in source
        assert _class_methods(source, "UserHandler") == [
            "__init__",
            "index",
            "index_paginated",
            "show",
            "create",
            "update",
            "destroy",
            "destroy_many",
        ]
        assert "def test_user_handler_index() -> None:" in source

    def test_resource_handler_with_token(self, renderer: TemplateRenderer) -> None:
        source = renderer.render_resource_handler("UserHandler", "User", tokenize=True)
        _parses(source)
        assert "show_by_token" in _class_methods(source, "UserHandler")

    def test_model_handler(self, renderer: TemplateRenderer) -> None:
        source = renderer.render_model_handler("PostHandler", "Post")
        _parses(source)
        assert _class_methods(source, "PostHandler") == [
            "__init__", "all", "find", "create", "update", "delete",
        ]

    def test_basic_handler(self) -> None:
        source = TemplateRenderer.render_basic_handler("HealthHandler")
        _parses(source)
        assert 'return "Hello from HealthHandler!"' in source
        assert "def test_health_handler_handle() -> None:" in source


# ===========================================================================
# Base & index modules
# ===========================================================================


class TestRenderSupportModules:

    def test_base(self, renderer: TemplateRenderer) -> None:
        source = renderer.render_base()
        _parses(source)
        assert "class Base(DeclarativeBase):" in source

    def test_index_header(self) -> None:
        header = TemplateRenderer.render_index_header("Models.")
        _parses(header)
        assert "MIGRATION_TABLE" not in header

    def test_migration_index_header(self) -> None:
        header = TemplateRenderer.render_index_header("Migrations.", "_ormgen_migrations")
        _parses(header)
        assert "MIGRATION_TABLE = '_ormgen_migrations'" in header
