"""Shared fixtures: an in-memory block catalog and parser factories."""

import pytest

from blockprops.catalog import JsonCatalog
from blockprops.config import AnalysisConfig, TagSupportMode
from blockprops.directives import DirectiveEnvironment
from blockprops.parsers import BlockPropertiesParser


SOLID = {"luminance": 0, "opaque_full_cube": True, "render_layer": "solid"}

CATALOG_DOC = {
    "namespace": "minecraft",
    "blocks": {
        "minecraft:stone": {"default": SOLID},
        "minecraft:dirt": {"default": SOLID},
        "minecraft:chest": {
            "block_entity": True,
            "default": {"luminance": 0, "opaque_full_cube": False, "render_layer": "solid"},
        },
        "minecraft:glowstone": {"default": {"luminance": 15, "opaque_full_cube": True, "render_layer": "solid"}},
        "minecraft:glass": {"default": {"luminance": 0, "opaque_full_cube": False, "render_layer": "cutout"}},
        "minecraft:water": {"default": {"luminance": 0, "opaque_full_cube": False, "render_layer": "translucent"}},
        "minecraft:tripwire": {"default": {"luminance": 0, "opaque_full_cube": False, "render_layer": "tripwire"}},
        "minecraft:oak_slab": {
            "properties": {"type": ["bottom", "double", "top"], "waterlogged": ["false", "true"]},
            "default": {"luminance": 0, "opaque_full_cube": False, "render_layer": "solid"},
        },
        "minecraft:furnace": {
            "block_entity": True,
            "properties": {"lit": ["false", "true"], "facing": ["east", "north", "south", "west"]},
            "default": SOLID,
        },
        "minecraft:redstone_lamp": {
            "properties": {"lit": ["false", "true"]},
            "default": SOLID,
            "states": [{"luminance": 15, "opaque_full_cube": True, "render_layer": "solid"}],
        },
        "minecraft:oak_log": {"properties": {"axis": ["x", "y", "z"]}, "default": SOLID},
        "minecraft:birch_log": {"properties": {"axis": ["x", "y", "z"]}, "default": SOLID},
        "mod:lamp": {
            "properties": {"lit": ["true", "false"]},
            "default": SOLID,
        },
        "create:andesite_casing": {"default": SOLID},
    },
    "tags": {
        "minecraft:oak_logs": ["minecraft:oak_log"],
        "minecraft:logs": ["#minecraft:oak_logs", "minecraft:birch_log"],
        "minecraft:t1": ["minecraft:stone", "minecraft:dirt"],
        "minecraft:t2": ["minecraft:dirt", "minecraft:glass"],
        "create:casings": ["create:andesite_casing"],
    },
}


@pytest.fixture
def catalog():
    return JsonCatalog(CATALOG_DOC)


@pytest.fixture
def environment():
    return DirectiveEnvironment(
        flags={"EUPHORIA_PATCHES_IRIS": True, "EUPHORIA_PATCHES_OCULUS": False},
        variables={"MC_VERSION": 12101, "IRIS_TAG_SUPPORT": 2, "EUPHORIA_PATCHES_OCULUS_VERSION": 0},
    )


@pytest.fixture
def make_parser(environment):
    def _make(**kwargs):
        return BlockPropertiesParser(kwargs.pop("environment", environment), **kwargs)

    return _make


@pytest.fixture
def parse(make_parser):
    def _parse(text, **kwargs):
        return make_parser(**kwargs).parse_text(text)

    return _parse


@pytest.fixture
def config():
    return AnalysisConfig(tag_support=TagSupportMode.TRUE)


@pytest.fixture
def catalog_doc():
    return CATALOG_DOC
