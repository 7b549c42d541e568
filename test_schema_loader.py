"""
Tests for the page catalog loader.
"""

import pytest

import studio_cms.schema_loader as schema_loader
from studio_cms.exceptions import CatalogLoadError, SchemaDefinitionError
from studio_cms.field_schema import FieldType
from studio_cms.schema_loader import build_catalog, load_catalog, parse_field


@pytest.fixture(autouse=True)
def clear_catalog_cache():
    schema_loader._catalog_cache.clear()
    yield
    schema_loader._catalog_cache.clear()


class TestBundledCatalog:
    """The catalog shipped with the package."""

    def test_loads_all_pages(self):
        catalog = load_catalog()
        assert [page.id for page in catalog] == ["home", "about", "contact", "online-classes", "corporate"]
        assert len(catalog.section_keys) == 12

    def test_link_targets(self):
        catalog = load_catalog()
        routes = [target.route for target in catalog.link_targets]
        assert routes[0] == "/"
        assert "/online-classes" in routes

    def test_hero_shape(self):
        hero = load_catalog().get_section("hero")
        cta = hero.get_field("cta_primary")
        assert cta.type is FieldType.OBJECT
        assert [child.key for child in cta.children] == ["text", "link", "action"]
        assert cta.children[2].type is FieldType.SELECT
        assert hero.get_field("background_color").type is FieldType.COLOR

    def test_weekly_schedule_is_array_of_days(self):
        schedule = load_catalog().get_section("weekly_schedule").get_field("schedule")
        assert schedule.type is FieldType.ARRAY
        day, classes = schedule.children
        assert day.type is FieldType.SELECT
        assert day.option_values()[0] == "Mon"
        assert classes.type is FieldType.ARRAY
        assert [c.key for c in classes.children] == ["time", "name", "instructor", "level", "type"]

    def test_select_values_are_strings(self):
        social_proof = load_catalog().get_section("cta_home").get_field("social_proof")
        show_avatars = social_proof.children[1]
        assert show_avatars.option_values() == ["true", "false"]

    def test_catalog_is_cached(self):
        assert load_catalog() is load_catalog()


class TestParseField:

    def test_unsupported_type(self):
        with pytest.raises(SchemaDefinitionError, match="unsupported type 'rich_text'"):
            parse_field({'key': 'body', 'type': 'rich_text'}, "hero")

    def test_missing_key(self):
        with pytest.raises(SchemaDefinitionError, match="must have a string 'key'"):
            parse_field({'type': 'text'}, "hero")

    def test_not_a_mapping(self):
        with pytest.raises(SchemaDefinitionError):
            parse_field("title", "hero")

    def test_label_defaults_to_key(self):
        field = parse_field({'key': 'title', 'type': 'text'}, "hero")
        assert field.label == "title"
        assert field.required is False

    def test_nested_children(self):
        field = parse_field({
            'key': 'stats',
            'type': 'array',
            'fields': [{'key': 'name', 'type': 'text', 'required': True}],
        }, "about_stats")
        assert field.children[0].required is True

    def test_option_values_stringified(self):
        field = parse_field({
            'key': 'count',
            'type': 'select',
            'options': [{'value': 1, 'label': 'One'}, {'value': 2}],
        }, "x")
        assert field.option_values() == ["1", "2"]
        assert field.option_label("2") == "2"


class TestBuildCatalog:

    def test_requires_pages_list(self):
        with pytest.raises(SchemaDefinitionError, match="'pages' list"):
            build_catalog({'link_targets': []})

    def test_page_needs_id(self):
        with pytest.raises(SchemaDefinitionError):
            build_catalog({'pages': [{'name': 'Nameless'}]})

    def test_minimal_catalog(self):
        catalog = build_catalog({'pages': [{
            'id': 'home',
            'sections': [{'key': 'hero', 'fields': [{'key': 'title', 'type': 'text'}]}],
        }]})
        assert catalog.get_section("hero").name == "hero"
        assert catalog.link_targets == ()


class TestLoadErrors:

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogLoadError) as exc_info:
            load_catalog(tmp_path / "missing.yaml")
        assert exc_info.value.context['original_error_type'] == 'FileNotFoundError'

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("pages: [unclosed\n")
        with pytest.raises(CatalogLoadError):
            load_catalog(path)

    def test_invalid_definition(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "pages:\n"
            "  - id: home\n"
            "    sections:\n"
            "      - key: hero\n"
            "        fields:\n"
            "          - {key: cta, type: object}\n"
        )
        with pytest.raises(SchemaDefinitionError, match="must declare child fields"):
            load_catalog(path)

    def test_configured_catalog(self, tmp_path, monkeypatch):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "pages:\n"
            "  - id: only\n"
            "    sections:\n"
            "      - key: banner\n"
            "        fields:\n"
            "          - {key: title, type: text}\n"
        )
        monkeypatch.setattr(schema_loader, "get_config_value", lambda section, key, default=None: str(path))
        catalog = schema_loader.get_configured_catalog()
        assert catalog.section_keys == ["banner"]
