"""Unit tests for the VSCT and XAML adapters."""

import pytest

from xliffsync.core.adapters import (
    VsctAdapter,
    XamlAdapter,
    IInjectable,
    MalformedSourceError,
    MissingTranslationError,
)


class TestVsctAdapter:
    """Test command table extraction and injection."""

    def test_unit_ids(self, vsct_file):
        units = list(VsctAdapter(vsct_file).extract())

        assert [unit.unit_id for unit in units] == [
            "cmdOpen|ButtonText",
            "cmdOpen|LocCanonicalName",
            "cmdClose|ButtonText",
        ]
        assert units[0].source == "Open Thing"

    def test_canonical_name_never_extracted(self, vsct_file):
        ids = [unit.unit_id for unit in VsctAdapter(vsct_file).extract()]
        assert "cmdOpen|CanonicalName" not in ids

    def test_document_name_keeps_extension(self, vsct_file):
        assert VsctAdapter(vsct_file).document_name == "Commands.vsct"

    def test_strings_without_owner_id(self, tmp_path):
        path = tmp_path / "NoId.vsct"
        path.write_text(
            '<CommandTable xmlns="http://schemas.microsoft.com/VisualStudio/2005-10-18/CommandTable">'
            '<Button guid="g"><Strings><ButtonText>x</ButtonText></Strings></Button>'
            '</CommandTable>',
            encoding='utf-8'
        )

        with pytest.raises(MalformedSourceError):
            list(VsctAdapter(path).extract())

    def test_inject(self, vsct_file, tmp_path):
        adapter = VsctAdapter(vsct_file)
        assert isinstance(adapter, IInjectable)

        output = adapter.inject(adapter.localized_path(tmp_path, "de"), {
            "cmdOpen|ButtonText": "Ding öffnen",
            "cmdOpen|LocCanonicalName": "Ding.Oeffnen",
            "cmdClose|ButtonText": "Ding schließen",
        })

        assert output == tmp_path / "Commands.de.vsct"
        units = {unit.unit_id: unit.source for unit in VsctAdapter(output).extract()}
        assert units["cmdOpen|ButtonText"] == "Ding öffnen"
        assert units["cmdClose|ButtonText"] == "Ding schließen"
        # CanonicalName is the invariant command name
        assert "<CanonicalName>OpenThing</CanonicalName>" in output.read_text(encoding='utf-8')

    def test_inject_missing_translation(self, vsct_file, tmp_path):
        with pytest.raises(MissingTranslationError) as exc_info:
            VsctAdapter(vsct_file).inject(tmp_path / "Commands.de.vsct", {"cmdOpen|ButtonText": "x"})
        assert exc_info.value.unit_id == "cmdOpen|LocCanonicalName"


class TestXamlAdapter:
    """Test rule file extraction and injection."""

    def test_unit_ids(self, xaml_file):
        units = list(XamlAdapter(xaml_file).extract())

        assert [unit.unit_id for unit in units] == [
            "Rule|General|DisplayName",
            "StringProperty|OutputPath|DisplayName",
            "StringProperty|OutputPath|Description",
            "EnumProperty|Platform|DisplayName",
            "EnumValue|Platform.Any|DisplayName",
            "EnumValue|Platform.x64|DisplayName",
        ]

    def test_enum_value_qualified_by_owner(self, tmp_path):
        path = tmp_path / "Rule.xaml"
        path.write_text(
            '<Rule Name="R"><Property Name="Foo" DisplayName="Foo">'
            '<EnumValue Name="Bar" DisplayName="Bar"/></Property></Rule>',
            encoding='utf-8'
        )

        ids = [unit.unit_id for unit in XamlAdapter(path).extract()]
        assert ids == ["Property|Foo|DisplayName", "EnumValue|Foo.Bar|DisplayName"]

    def test_sources(self, xaml_file):
        units = {unit.unit_id: unit.source for unit in XamlAdapter(xaml_file).extract()}
        assert units["StringProperty|OutputPath|Description"] == "Where build output goes"
        assert units["EnumValue|Platform.Any|DisplayName"] == "Any CPU"

    def test_missing_name(self, tmp_path):
        path = tmp_path / "Bad.xaml"
        path.write_text('<Rule Name="R"><StringProperty DisplayName="x"/></Rule>', encoding='utf-8')

        with pytest.raises(MalformedSourceError, match="no Name"):
            list(XamlAdapter(path).extract())

    def test_localized_path_uses_language_directory(self, xaml_file, tmp_path):
        assert XamlAdapter(xaml_file).localized_path(tmp_path, "ja") == tmp_path / "ja" / "General.xaml"

    def test_inject(self, xaml_file, tmp_path):
        adapter = XamlAdapter(xaml_file)
        translations = {unit.unit_id: unit.source.upper() for unit in adapter.extract()}

        output = adapter.inject(adapter.localized_path(tmp_path, "fr"), translations)

        localized = {unit.unit_id: unit.source for unit in XamlAdapter(output).extract()}
        assert localized == translations
        assert 'Visible="false"' in output.read_text(encoding='utf-8')

    def test_inject_missing_translation(self, xaml_file, tmp_path):
        with pytest.raises(MissingTranslationError):
            XamlAdapter(xaml_file).inject(tmp_path / "fr" / "General.xaml", {})
        assert not (tmp_path / "fr" / "General.xaml").exists()
