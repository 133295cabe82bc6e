import pytest

from blockprops.ids import BlockStateSpec, base_block_id, normalize_block_id, parse_block_state, split_namespace


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("cobweb", "minecraft:cobweb"),
        ("furnace:lit=true", "minecraft:furnace:lit=true"),
        ("minecraft:stone", "minecraft:stone"),
        ("create:andesite_casing:waterlogged=true", "create:andesite_casing:waterlogged=true"),
        ("  stone  ", "minecraft:stone"),
        (":bad", None),
        ("bad:", None),
        ("", None),
        ("   ", None),
        (None, None),
    ],
)
def test_normalize_block_id(raw, expected):
    assert normalize_block_id(raw) == expected


def test_normalize_uses_given_namespace():
    assert normalize_block_id("lamp", "mod") == "mod:lamp"


def test_parse_block_state():
    assert parse_block_state("minecraft:furnace:lit=true:facing=north") == BlockStateSpec(
        "minecraft:furnace", {"lit": "true", "facing": "north"}
    )
    assert parse_block_state("furnace:lit=true") == BlockStateSpec("minecraft:furnace", {"lit": "true"})
    assert parse_block_state("minecraft:stone") is None
    assert parse_block_state("stone") is None


def test_base_block_id_and_namespace():
    assert base_block_id("mod:lamp:lit=true") == "mod:lamp"
    assert base_block_id("minecraft:stone") == "minecraft:stone"
    assert split_namespace("create:andesite_casing") == "create"
    assert split_namespace("stone") == "minecraft"
