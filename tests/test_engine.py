"""Pack mounting: folders, zips and plain files."""

import zipfile

import pytest

from blockprops.analyzer import ShaderAnalyzer
from blockprops.engine import PROPERTIES_MEMBER, PackSource
from blockprops.errors import BlockPropertiesReadError, PackSourceError


TEXT = "block.1=stone\nblock.2=dirt\n"


def make_folder(root):
    target = root / "MyPack" / "shaders"
    target.mkdir(parents=True)
    (target / "block.properties").write_text(TEXT, encoding="utf-8")
    return root / "MyPack"


def make_zip(root, member=PROPERTIES_MEMBER, name="MyPack.zip"):
    path = root / name
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr(member, TEXT)
        zf.writestr("shaders/final.fsh", "void main() {}")
    return path


def read_lines(src):
    with src.open_text() as stream:
        return stream.read().splitlines()


def test_folder_pack(tmp_path):
    with PackSource(make_folder(tmp_path)) as src:
        assert src.mode == "folder"
        assert src.name == "MyPack"
        assert read_lines(src) == ["block.1=stone", "block.2=dirt"]


def test_zip_pack(tmp_path):
    with PackSource(make_zip(tmp_path)) as src:
        assert src.mode == "zip"
        assert src.display_path.endswith("!/" + PROPERTIES_MEMBER)
        assert read_lines(src) == ["block.1=stone", "block.2=dirt"]


def test_zip_with_top_level_folder(tmp_path):
    path = make_zip(tmp_path, member="MyPack/" + PROPERTIES_MEMBER)
    with PackSource(path) as src:
        assert read_lines(src)[0] == "block.1=stone"


def test_plain_file(tmp_path):
    path = tmp_path / "block.properties"
    path.write_text(TEXT, encoding="utf-8")
    with PackSource(path) as src:
        assert src.mode == "file"
        assert len(read_lines(src)) == 2


def test_missing_path(tmp_path):
    with pytest.raises(PackSourceError):
        PackSource(tmp_path / "nope.zip")


def test_folder_without_properties(tmp_path):
    (tmp_path / "Empty").mkdir()
    with pytest.raises(PackSourceError):
        PackSource(tmp_path / "Empty")


def test_zip_without_properties(tmp_path):
    with pytest.raises(PackSourceError):
        PackSource(make_zip(tmp_path, member="shaders/other.properties"))


def test_zip_with_deeper_nesting_is_rejected(tmp_path):
    with pytest.raises(PackSourceError):
        PackSource(make_zip(tmp_path, member="a/b/" + PROPERTIES_MEMBER))


def test_invalid_zip(tmp_path):
    path = tmp_path / "broken.zip"
    path.write_bytes(b"not a zip")
    with pytest.raises(PackSourceError):
        PackSource(path)


def test_analyze_pack_source(tmp_path, config, catalog):
    with PackSource(make_zip(tmp_path)) as src:
        report = ShaderAnalyzer(config, catalog).analyze(src)
    assert report.pack_name == "MyPack.zip"
    assert report.total_blocks_in_shader == 2


def test_corrupt_zip_member_is_a_read_error(tmp_path, config, catalog):
    path = tmp_path / "Corrupt.zip"
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_STORED) as zf:
        zf.writestr(PROPERTIES_MEMBER, TEXT)
    data = bytearray(path.read_bytes())
    pos = data.index(b"block.1=stone")
    data[pos + len("block.1=")] = ord("S")
    path.write_bytes(bytes(data))

    with PackSource(path) as src:
        with pytest.raises(BlockPropertiesReadError) as info:
            ShaderAnalyzer(config, catalog).analyze(src)
    assert info.value.line_number == 1
    assert info.value.path == src.display_path
    assert isinstance(info.value.__cause__, zipfile.BadZipFile)
