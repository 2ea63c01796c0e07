"""
Tests for attribute extraction and records

These tests validate:
- Alias table mapping of namespaced attributes
- Case-sensitive matching, unknown attributes ignored
- Localized titles
- Position/span parsing and component names
"""

import pytest

from homeconf.core.attributes import ATTRIBUTE_ALIASES, build_alias_table, extract_attributes
from homeconf.core.records import (
    AttributeRecord, ComponentName, Container, ItemKind, LaunchIntent,
    PlacementRecord, container_from_string,
)


class TestExtractAttributes:
    """Namespaced attributes to AttributeRecord."""

    def test_all_aliases(self):
        """Every alias lands in its field."""
        record = extract_attributes({
            "launcher:screen": "2",
            "launcher:x": "1",
            "launcher:y": "3",
            "launcher:packageName": "com.android.browser",
            "launcher:className": "com.android.browser.BrowserActivity",
            "launcher:spanX": "4",
            "launcher:spanY": "1",
            "launcher:title": "Web",
        })
        assert record.screen == "2"
        assert record.cell_x == "1"
        assert record.cell_y == "3"
        assert record.package_name == "com.android.browser"
        assert record.class_name == "com.android.browser.BrowserActivity"
        assert record.span_x == "4"
        assert record.span_y == "1"
        assert record.title == "Web"

    def test_missing_attributes_are_none(self):
        """Absent attributes stay None."""
        record = extract_attributes({"launcher:screen": "0"})
        assert record.cell_x is None
        assert record.package_name is None
        assert record.titles_localized == {}

    def test_case_sensitive(self):
        """Wrong case is not recognized."""
        record = extract_attributes({"launcher:spanx": "4", "launcher:PackageName": "a"})
        assert record.span_x is None
        assert record.package_name is None

    def test_unprefixed_and_unknown_ignored(self):
        """Attributes outside the namespace or not in the table are ignored."""
        record = extract_attributes({"screen": "1", "launcher:color": "red", "android:x": "2"})
        assert record == AttributeRecord()

    def test_localized_titles(self):
        """title_<lang> attributes are collected by language."""
        record = extract_attributes({
            "launcher:title": "Games",
            "launcher:title_fr": "Jeux",
            "launcher:title_de": "Spiele",
        })
        assert record.title == "Games"
        assert record.titles_localized == {"fr": "Jeux", "de": "Spiele"}

    def test_container_stamped(self):
        """Container argument is stamped on the record."""
        assert extract_attributes({}).container == Container.DESKTOP
        assert extract_attributes({}, container=7).container == 7

    def test_input_not_modified(self):
        """Extraction does not touch the input mapping."""
        attrs = {"launcher:x": "1"}
        extract_attributes(attrs)
        assert attrs == {"launcher:x": "1"}

    def test_fresh_record_each_call(self):
        """No state leaks between nodes."""
        first = extract_attributes({"launcher:title_fr": "Jeux"})
        second = extract_attributes({})
        assert second.titles_localized == {}
        assert first is not second

    def test_custom_namespace(self):
        """A different prefix can be configured."""
        record = extract_attributes({"home:x": "5", "launcher:y": "1"}, namespace="home")
        assert record.cell_x == "5"
        assert record.cell_y is None

    def test_alias_table_qualified(self):
        """Alias table keys carry the namespace."""
        table = build_alias_table("launcher")
        assert len(table) == len(ATTRIBUTE_ALIASES)
        assert table["launcher:packageName"] == "package_name"


class TestAttributeRecordParsing:
    """Integer parsing of position and span."""

    def test_position(self):
        """Position parses to integers."""
        record = AttributeRecord(screen="1", cell_x="2", cell_y=" 3 ")
        assert record.position() == (1, 2, 3)

    def test_position_missing(self):
        """Missing coordinates are None."""
        assert AttributeRecord().position() == (None, None, None)

    def test_position_invalid(self):
        """Non-integer coordinates raise ValueError."""
        with pytest.raises(ValueError):
            AttributeRecord(screen="one").position()

    def test_span_default(self):
        """Missing span values use the default."""
        assert AttributeRecord(span_x="4").span(default=0) == (4, 0)

    def test_has_component(self):
        """Both package and class are required."""
        assert AttributeRecord(package_name="a", class_name="a.B").has_component
        assert not AttributeRecord(package_name="a").has_component
        assert not AttributeRecord(package_name="", class_name="a.B").has_component


class TestComponentName:
    """Component name formatting and parsing."""

    def test_short_string(self):
        """Class inside the package is abbreviated."""
        c = ComponentName("com.android.browser", "com.android.browser.BrowserActivity")
        assert c.flatten_to_short_string() == "com.android.browser/.BrowserActivity"

    def test_short_string_foreign_class(self):
        """Class outside the package is written in full."""
        c = ComponentName("com.vendor.app", "com.android.Main")
        assert c.flatten_to_short_string() == "com.vendor.app/com.android.Main"

    def test_unflatten_relative(self):
        """Relative class names are expanded."""
        c = ComponentName.unflatten("com.example.mail/.InboxActivity")
        assert c == ComponentName("com.example.mail", "com.example.mail.InboxActivity")

    @pytest.mark.parametrize("text", ["", "nopackage", "/Cls", "pkg/"])
    def test_unflatten_malformed(self, text):
        """Malformed strings give None."""
        assert ComponentName.unflatten(text) is None

    def test_str(self):
        """String form is the widget payload."""
        assert str(ComponentName("a", "a.B")) == "ComponentInfo{a/a.B}"


class TestLaunchIntent:
    """Launch intent URI."""

    def test_uri(self):
        """Main/launcher intent with new-task flags."""
        uri = LaunchIntent(ComponentName("com.android.browser", "com.android.browser.BrowserActivity")).to_uri()
        assert uri == (
            "#Intent;action=android.intent.action.MAIN;"
            "category=android.intent.category.LAUNCHER;"
            "launchFlags=0x10200000;"
            "component=com.android.browser/.BrowserActivity;end"
        )


class TestPlacementRecord:
    """Placement record helpers."""

    def test_in_folder(self):
        """Non-negative container means inside a folder."""
        assert PlacementRecord(id=2, container=1, kind=ItemKind.APPLICATION).in_folder
        assert not PlacementRecord(id=1, container=Container.DESKTOP, kind=ItemKind.FOLDER).in_folder

    def test_component_from_intent(self):
        """Component is recovered from either payload form."""
        c = ComponentName("a.b", "a.b.C")
        shortcut = PlacementRecord(id=1, container=-100, kind=ItemKind.APPLICATION, intent=LaunchIntent(c).to_uri())
        widget = PlacementRecord(id=2, container=-100, kind=ItemKind.APPWIDGET, intent=str(c))
        assert shortcut.component == c
        assert widget.component == c

    def test_dict_round_trip(self):
        """to_dict/from_dict preserve every field."""
        record = PlacementRecord(
            id=5, container=-100, kind=ItemKind.APPWIDGET, screen=1, cell_x=0, cell_y=2,
            span_x=4, span_y=1, intent="ComponentInfo{a/a.B}", app_widget_id=3,
        )
        assert PlacementRecord.from_dict(record.to_dict()) == record


class TestContainerFromString:
    """Container names."""

    def test_names(self):
        assert container_from_string("hotseat") == Container.HOTSEAT
        assert container_from_string("DESKTOP") == Container.DESKTOP

    def test_default(self):
        """Unknown or empty names fall back to the desktop."""
        assert container_from_string(None) == Container.DESKTOP
        assert container_from_string("dock") == Container.DESKTOP
