"""
Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and provides sample source
artifacts and documents written into a temporary repository.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest


RESX_CONTENT = """<?xml version="1.0" encoding="utf-8"?>
<root>
  <resheader name="resmimetype">
    <value>text/microsoft-resx</value>
  </resheader>
  <data name="Greeting" xml:space="preserve">
    <value>Hello</value>
    <comment>Shown on start</comment>
  </data>
  <data name="Farewell" xml:space="preserve">
    <value>Goodbye</value>
  </data>
  <data name="Icon" type="System.Drawing.Bitmap, System.Drawing" mimetype="application/x-microsoft.net.object.bytearray.base64">
    <value>AAAA</value>
  </data>
  <data name="&gt;&gt;button1.Name" xml:space="preserve">
    <value>button1</value>
  </data>
  <data name="panel.LayoutSettings" xml:space="preserve">
    <value>layout</value>
  </data>
  <data name="Blank" xml:space="preserve">
    <value>   </value>
  </data>
</root>
"""

VSCT_CONTENT = """<?xml version="1.0" encoding="utf-8"?>
<CommandTable xmlns="http://schemas.microsoft.com/VisualStudio/2005-10-18/CommandTable">
  <Commands package="guidPackage">
    <Buttons>
      <Button guid="guidCmdSet" id="cmdOpen" priority="0x0100">
        <Strings>
          <CanonicalName>OpenThing</CanonicalName>
          <ButtonText>Open Thing</ButtonText>
          <LocCanonicalName>Open.Thing</LocCanonicalName>
        </Strings>
      </Button>
      <Button guid="guidCmdSet" id="cmdClose" priority="0x0200">
        <Strings>
          <ButtonText>Close Thing</ButtonText>
        </Strings>
      </Button>
    </Buttons>
  </Commands>
</CommandTable>
"""

XAML_CONTENT = """<?xml version="1.0" encoding="utf-8"?>
<Rule Name="General" DisplayName="General" xmlns="http://schemas.microsoft.com/build/2009/properties">
  <StringProperty Name="OutputPath" DisplayName="Output path" Description="Where build output goes" />
  <EnumProperty Name="Platform" DisplayName="Platform">
    <EnumValue Name="Any" DisplayName="Any CPU" />
    <EnumValue Name="x64" DisplayName="64-bit" />
  </EnumProperty>
  <BoolProperty Name="Hidden" Visible="false" />
</Rule>
"""

CSHARP_CONTENT = '''namespace Tools
{
    internal class LocalizableStrings
    {
        // const string Commented = "not a unit";
        public const string AppFullName = ".NET Command Line Tools";
        public const string UsageText = @"Usage: ""dotnet"" [options]";
        public const string Escaped = "Line one\\nTab\\there";
        /* public const string Blocked = "skipped"; */
        public static readonly string Computed = Prefix + "suffix";
    }
}
'''


def write_text(path: Path, content: str) -> Path:
    """Write ``content`` to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    return path


@pytest.fixture
def repo_root(tmp_path):
    """Empty repository root."""
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture
def resx_file(repo_root):
    """A neutral resource file with translatable and filtered entries."""
    return write_text(repo_root / "src" / "Strings.resx", RESX_CONTENT)


@pytest.fixture
def vsct_file(repo_root):
    """A command table with two commands."""
    return write_text(repo_root / "src" / "Commands.vsct", VSCT_CONTENT)


@pytest.fixture
def xaml_file(repo_root):
    """A property-page rule file in a Rules directory."""
    return write_text(repo_root / "src" / "Rules" / "General.xaml", XAML_CONTENT)


@pytest.fixture
def csharp_file(repo_root):
    """A LocalizableStrings constants class."""
    return write_text(repo_root / "cli" / "LocalizableStrings.cs", CSHARP_CONTENT)
