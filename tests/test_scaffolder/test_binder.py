"""Tests for the value resolver (binding table construction and resolution).

Covers:
- Defaults mode: every value is its default, gates are False
- Interactive mode: top-level prompting, gate-controlled group prompting
- Memoization of prompt-backed bindings
- Table shape: one binding per variable, immutability, unknown names
- Aborted prompts
"""

from __future__ import annotations

import pytest

from stencil.scaffolder.binder import Binding, BindingTable, Mode, Strategy, bind
from stencil.scaffolder.context import parse_context
from stencil.scaffolder.errors import InputError


pytestmark = pytest.mark.unit


@pytest.fixture
def context():
    return parse_context(
        {
            "name": "demo",
            "license": ["MIT", "BSD"],
            "port": 8000,
            "database": {"db_engine": ["postgres", "sqlite"], "db_name": "app"},
            "empty": {},
        }
    )


# ---------------------------------------------------------------------------
# Table shape
# ---------------------------------------------------------------------------


class TestBindingTableShape:
    def test_one_binding_per_variable(self, context):
        table = bind(context, Mode.DEFAULTS)
        assert set(table) == {"name", "license", "port", "database", "db_engine", "db_name"}

    def test_empty_group_binds_nothing(self, context):
        assert "empty" not in bind(context, Mode.DEFAULTS)

    def test_empty_context(self):
        table = bind({}, Mode.INTERACTIVE)
        assert len(table) == 0

    def test_records_are_inspectable(self, context):
        table = bind(context, Mode.INTERACTIVE)
        assert table["database"].strategy is Strategy.GATE
        assert table["db_name"] == Binding(
            name="db_name", value=context["database"].children["db_name"],
            strategy=Strategy.PROMPT, gate="database",
        )
        assert table["name"].gate is None

    def test_table_is_read_only(self, context):
        table = bind(context, Mode.DEFAULTS)
        with pytest.raises(TypeError):
            table["name"] = table["port"]  # type: ignore[index]

    def test_unknown_name(self, context):
        table = bind(context, Mode.DEFAULTS)
        with pytest.raises(KeyError):
            table.resolve("missing")
        with pytest.raises(KeyError):
            table.function("missing")


# ---------------------------------------------------------------------------
# Defaults mode
# ---------------------------------------------------------------------------


class TestDefaultsMode:
    def test_values_are_defaults(self, context):
        table = bind(context, Mode.DEFAULTS)
        assert table.resolve("name") == "demo"
        assert table.resolve("port") == 8000
        assert table.resolve("license") == "MIT"

    def test_gate_is_false_and_children_default(self, context):
        table = bind(context, Mode.DEFAULTS)
        assert table.resolve("database") is False
        assert table.resolve("db_engine") == "postgres"
        assert table.resolve("db_name") == "app"

    def test_prompter_never_used(self, context, prompter):
        table = bind(context, Mode.DEFAULTS, prompter)
        for name in table:
            table.resolve(name)
        assert prompter.calls == []

    def test_function_is_zero_argument(self, context):
        table = bind(context, Mode.DEFAULTS)
        assert table.function("license")() == "MIT"


# ---------------------------------------------------------------------------
# Interactive mode
# ---------------------------------------------------------------------------


class TestInteractiveMode:
    def test_top_level_prompted(self, context, make_prompter):
        prompter = make_prompter(answers={"name": "shop", "license": "BSD"})
        table = bind(context, Mode.INTERACTIVE, prompter)
        assert table.resolve("name") == "shop"
        assert table.resolve("license") == "BSD"
        assert prompter.asked() == ["name", "license"]

    def test_declined_gate_skips_child_prompts(self, context, make_prompter):
        prompter = make_prompter(answers={"db_name": "never"}, confirms={"database": False})
        table = bind(context, Mode.INTERACTIVE, prompter)
        assert table.resolve("db_name") == "app"
        assert table.resolve("db_engine") == "postgres"
        assert prompter.confirmed() == ["database"]
        assert prompter.asked() == []

    def test_accepted_gate_prompts_children(self, context, make_prompter):
        prompter = make_prompter(
            answers={"db_engine": "sqlite", "db_name": "shop"}, confirms={"database": True}
        )
        table = bind(context, Mode.INTERACTIVE, prompter)
        assert table.resolve("database") is True
        assert table.resolve("db_engine") == "sqlite"
        assert table.resolve("db_name") == "shop"
        assert prompter.asked() == ["db_engine", "db_name"]

    def test_bindings_are_lazy(self, context, prompter):
        bind(context, Mode.INTERACTIVE, prompter)
        assert prompter.calls == []

    def test_prompt_answers_memoized(self, context, make_prompter):
        prompter = make_prompter(answers={"name": "shop"}, confirms={"database": True})
        table = bind(context, Mode.INTERACTIVE, prompter)
        for _ in range(3):
            assert table.resolve("name") == "shop"
            table.resolve("db_name")
            table.function("name")()
        assert prompter.asked() == ["name", "db_name"]
        assert prompter.confirmed() == ["database"]

    def test_answers_snapshot(self, context, make_prompter):
        table = bind(context, Mode.INTERACTIVE, make_prompter(answers={"name": "shop"}))
        table.resolve("name")
        assert table.answers == {"name": "shop"}

    def test_aborted_prompt_is_input_error(self, context, aborting_prompter):
        table = bind(context, Mode.INTERACTIVE, aborting_prompter)
        with pytest.raises(InputError):
            table.resolve("name")
        assert "name" not in table.answers


class TestBindingTable:
    def test_repr_lists_names(self):
        table = BindingTable({})
        assert repr(table) == "BindingTable([])"
