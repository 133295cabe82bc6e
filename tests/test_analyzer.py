"""End-to-end analysis over the fixture catalog."""

import json
import threading

import pytest

from blockprops.analyzer import (
    CATEGORY_BLOCK_ENTITY,
    CATEGORY_FULL,
    CATEGORY_LIGHT_EMITTING,
    CATEGORY_NON_FULL,
    CATEGORY_TRANSLUCENT,
    RenderLayerMismatch,
    RunGuard,
    ShaderAnalyzer,
)
from blockprops.config import ScanMode
from blockprops.errors import AnalysisInProgressError


PACK = "\n".join([
    "#define LOGS %logs",
    "#define SPARE %t1",
    "block.1=stone",
    "block.2=furnace:lit=true",
    "block.3=LOGS",
    "layer.translucent=glass water tripwire",
    "layer.cutout=oak_slab:type=top",
])


def run(config, catalog, text=PACK):
    return ShaderAnalyzer(config, catalog).analyze_lines("pack", text.splitlines())


def test_deep_scan_categories(config, catalog):
    report = run(config, catalog)
    assert report.missing_blocks_by_mod == {
        "create": {CATEGORY_FULL: ["create:andesite_casing"]},
        "minecraft": {
            CATEGORY_BLOCK_ENTITY: ["minecraft:chest"],
            CATEGORY_FULL: ["minecraft:dirt"],
            CATEGORY_LIGHT_EMITTING: ["minecraft:glowstone", "minecraft:redstone_lamp"],
            CATEGORY_NON_FULL: ["minecraft:glass", "minecraft:oak_slab"],
            CATEGORY_TRANSLUCENT: ["minecraft:tripwire", "minecraft:water"],
        },
        "mod": {CATEGORY_FULL: ["mod:lamp"]},
    }


def test_quick_scan_checks_default_state_only(config, catalog):
    report = run(config.with_overrides(scan_mode="quick"), catalog)
    mc = report.missing_blocks_by_mod["minecraft"]
    assert mc[CATEGORY_LIGHT_EMITTING] == ["minecraft:glowstone"]
    assert mc[CATEGORY_FULL] == ["minecraft:dirt", "minecraft:redstone_lamp"]


def test_disabled_checks_fall_through(config, catalog):
    cfg = config.with_overrides(check_block_entity=False, check_full=False, check_light_emitting=False)
    mc = run(cfg, catalog).missing_blocks_by_mod["minecraft"]
    assert CATEGORY_BLOCK_ENTITY not in mc
    assert CATEGORY_FULL not in mc
    assert CATEGORY_LIGHT_EMITTING not in mc
    # chest is not a full cube, so it lands in the next enabled check
    assert "minecraft:chest" in mc[CATEGORY_NON_FULL]
    assert "create" not in run(cfg, catalog).missing_blocks_by_mod


def test_tag_coverage_and_statistics(config, catalog):
    report = run(config, catalog)
    assert report.tag_coverage == {"LOGS": {"minecraft:oak_log", "minecraft:birch_log"}}
    assert report.unused_tags == ["SPARE"]
    assert report.duplicate_definitions == {}
    assert report.total_blocks_in_game == 14
    assert report.total_blocks_in_shader == 4
    assert report.total_missing_blocks == 10
    assert report.coverage_percent == pytest.approx(100 * (1 - 10 / 14))
    assert report.tag_support_enabled is True


def test_state_completeness_in_report(config, catalog):
    report = run(config, catalog)
    # layer assignments do not take part in state validation
    assert report.incomplete_block_states == {"minecraft:furnace": {"lit": ["false"]}}


def test_render_layer_mismatches(config, catalog):
    report = run(config, catalog)
    assert report.render_layer_mismatches == {
        "minecraft:glass": RenderLayerMismatch(expected="translucent", actual="cutout"),
        "minecraft:oak_slab:type=top": RenderLayerMismatch(expected="cutout", actual="solid"),
    }


def test_render_layers_skipped_in_quick_mode_or_when_disabled(config, catalog):
    assert run(config.with_overrides(scan_mode=ScanMode.QUICK), catalog).render_layer_mismatches == {}
    assert run(config.with_overrides(validate_render_layers=False), catalog).render_layer_mismatches == {}


def test_tag_support_disabled(config, catalog):
    report = run(config.with_overrides(tag_support="false"), catalog)
    assert report.tag_support_enabled is False
    assert report.tag_coverage == {}
    assert "minecraft:oak_log" in report.missing_blocks_by_mod["minecraft"][CATEGORY_FULL]


def test_duplicates_in_report(config, catalog):
    report = run(config, catalog, "block.1=stone\nblock.2=stone")
    assert dict(report.duplicate_definitions) == {"minecraft:stone": (1, 2)}


def test_empty_catalog_coverage_is_zero(config):
    from blockprops.catalog import JsonCatalog

    report = run(config, JsonCatalog({"blocks": {}}), "block.1=stone")
    assert report.coverage_percent == 0.0
    assert report.missing_blocks_by_mod == {}


def test_report_to_dict_is_json_safe(config, catalog):
    doc = run(config, catalog).to_dict()
    text = json.dumps(doc)
    assert doc["pack"] == "pack"
    assert doc["meta"]["tool"] == "blockprops.analyzer"
    assert doc["meta"]["version"] == "0.3.0"
    assert doc["statistics"]["missing_blocks"] == 10
    assert doc["tag_coverage"] == {"LOGS": ["minecraft:birch_log", "minecraft:oak_log"]}
    assert doc["render_layer_mismatches"]["minecraft:glass"] == {"expected": "translucent", "actual": "cutout"}
    assert "generated" in text


def test_run_guard_rejects_overlap():
    guard = RunGuard()
    with guard.hold("pack"):
        assert guard.is_running("pack")
        with pytest.raises(AnalysisInProgressError):
            with guard.hold("pack"):
                pass
        # different keys may run side by side
        with guard.hold("other"):
            assert guard.is_running("other")
    assert not guard.is_running("pack")
    assert guard.try_acquire("pack")
    guard.release("pack")


def test_run_guard_is_thread_safe():
    guard = RunGuard()
    wins = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        if guard.try_acquire("same"):
            wins.append(1)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(wins) == 1
