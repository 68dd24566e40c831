"""Unit tests for Svelte component type stripping."""

from __future__ import annotations

import pytest

from ionic_create.scaffolder.resolver import resolve_template_root
from ionic_create.scaffolder.svelte import (
    remove_script_attributes,
    strip_markup_types,
    strip_svelte_types,
)

BUNDLED = resolve_template_root()


COMPONENT = """<script lang="ts">
\tlet count: number = 0;
</script>

{#snippet row(item: Item, index: number)}
\t{@const label: string = item.name as string}
\t<button onclick={(e: MouseEvent) => select(item as Item)}>{label}</button>
{/snippet}

<style lang="scss">
\t.a { color: red; }
</style>
"""

STRIPPED = """<script>
\tlet count = 0;
</script>

{#snippet row(item, index)}
\t{@const label = item.name}
\t<button onclick={(e) => select(item)}>{label}</button>
{/snippet}

<style lang="scss">
\t.a { color: red; }
</style>
"""


class TestScriptAttributes:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "tag",
        ['<script lang="ts">', "<script lang='ts'>", "<script lang=ts>", '<script  lang = "ts" >'],
    )
    def test_quoting_styles_are_equivalent(self, tag: str):
        result = remove_script_attributes(tag + "</script>")
        assert result.replace(" >", ">") == "<script></script>"

    @pytest.mark.unit
    def test_other_attributes_are_kept(self):
        source = '<script lang="ts" context="module">\n</script>'
        assert remove_script_attributes(source) == '<script context="module">\n</script>'

    @pytest.mark.unit
    def test_generics_with_angle_brackets_in_value(self):
        source = '<script lang="ts" generics="T extends Array<string>">\n</script>'
        assert remove_script_attributes(source) == "<script>\n</script>"

    @pytest.mark.unit
    def test_style_tags_are_not_touched(self):
        source = '<style lang="scss"></style>'
        assert remove_script_attributes(source) == source


class TestMarkup:
    @pytest.mark.unit
    def test_untyped_handlers_are_left_alone(self):
        markup = "<button onclick={() => count++}>{count}</button>"
        assert strip_markup_types(markup) == markup

    @pytest.mark.unit
    def test_handler_return_type(self):
        markup = "<input oninput={(e: Event): void => update(e)} />"
        assert strip_markup_types(markup) == "<input oninput={(e) => update(e)} />"

    @pytest.mark.unit
    def test_optional_snippet_parameter(self):
        markup = "{#snippet cell(value?: string)}{value}{/snippet}"
        assert strip_markup_types(markup) == "{#snippet cell(value)}{value}{/snippet}"

    @pytest.mark.unit
    def test_generic_parameter_types_with_commas(self):
        markup = "{#snippet row(item: Map<string, number>, i: number)}{i}{/snippet}"
        assert strip_markup_types(markup) == "{#snippet row(item, i)}{i}{/snippet}"

    @pytest.mark.unit
    def test_handler_with_generic_parameter_type(self):
        markup = "<ion-list onselect={(e: CustomEvent<Record<string, number>>, index: number) => pick(e, index)} />"
        assert strip_markup_types(markup) == "<ion-list onselect={(e, index) => pick(e, index)} />"

    @pytest.mark.unit
    def test_plain_markup_unchanged(self):
        markup = '<ion-item href="/planets/{planet.name}">{planet.name}: {planet.moons}</ion-item>'
        assert strip_markup_types(markup) == markup


class TestComponent:
    @pytest.mark.unit
    def test_full_component(self):
        assert strip_svelte_types(COMPONENT) == STRIPPED

    @pytest.mark.unit
    def test_stripping_is_idempotent(self):
        assert strip_svelte_types(STRIPPED) == STRIPPED

    @pytest.mark.unit
    def test_bundled_tabs_component(self):
        source = (BUNDLED / "src/lib/components/Tabs.svelte").read_text(encoding="utf-8")
        result = strip_svelte_types(source)

        assert result.startswith("<script>\n")
        assert "import type" not in result
        assert "interface Props" not in result
        assert "let { tabs, selected = $bindable(tabs[0]?.tab), onselect } = $props();" in result
        assert "function choose(item) {" in result
        assert "{#snippet tabButton(item, index)}" in result
        assert "{@const label = item.label ?? item.tab}" in result
        assert "onclick={(event) => choose(item)}" in result
        assert "--color: var(--ion-color-primary);" in result
        assert strip_svelte_types(result) == result
