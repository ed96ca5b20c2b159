"""Tests for merging child output into the HTML context."""

from multitarget.aggregator import AssetAggregator
from multitarget.builders import Chunk
from multitarget.builders.base import Asset
from multitarget.classifier import ScriptTagClassifier
from multitarget.compiler import Compilation, CompilationRole
from multitarget.html import AssetTagData, HtmlAssets, HtmlPluginData, ScriptTag
from multitarget.runner import child_build_name


def _child(key, *chunks):
    compilation = Compilation(name=child_build_name(key), role=CompilationRole.CHILD)
    for chunk in chunks:
        compilation.chunks.append(chunk)
        for f in chunk.files:
            compilation.assets[f] = Asset(source="x")
    return compilation


def _parent():
    parent = Compilation()
    parent.chunks.append(Chunk(name="main", files=["main.p1.js"], hash="p1", size=3))
    parent.assets["main.p1.js"] = Asset(source="abc")
    return parent


def _data(parent):
    return HtmlPluginData(compilation=parent, filename="index.html", assets=HtmlAssets.from_compilation(parent))


def _aggregator():
    return AssetAggregator(ScriptTagClassifier(["legacy"]))


def test_merge_adds_child_chunks_and_scripts():
    parent = _parent()
    parent.children = [
        _child("modern", Chunk("modern/main", ["modern/main.m1.js", "modern/main.m1.js.map"], "m1", 10)),
        _child("legacy", Chunk("legacy/main", ["legacy/main.l1.js"], "l1", 20)),
    ]
    data = _data(parent)

    added = _aggregator().merge(data)

    assert added == 2
    assert data.assets.chunks["modern/main"].entry == "modern/main.m1.js"
    assert data.assets.chunks["modern/main"].hash == "m1"
    assert data.assets.chunks["modern/main"].size == 10
    assert data.assets.chunks["modern/main"].css == []
    assert data.assets.chunks["legacy/main"].entry == "legacy/main.l1.js"
    assert data.assets.js == ["main.p1.js", "modern/main.m1.js", "legacy/main.l1.js"]


def test_merge_is_idempotent():
    parent = _parent()
    parent.children = [_child("modern", Chunk("modern/main", ["modern/main.m1.js"], "m1", 10))]
    data = _data(parent)
    aggregator = _aggregator()

    aggregator.merge(data)
    chunks_after_first = dict(data.assets.chunks)
    js_after_first = list(data.assets.js)
    assert aggregator.merge(data) == 0

    assert data.assets.chunks == chunks_after_first
    assert data.assets.js == js_after_first


def test_merge_never_overwrites_parent_entries():
    parent = _parent()
    parent.children = [_child("modern", Chunk("main", ["modern-main.js"], "zz", 1))]
    data = _data(parent)

    _aggregator().merge(data)

    assert data.assets.chunks["main"].entry == "main.p1.js"
    assert data.assets.chunks["main"].hash == "p1"


def test_merge_skips_chunks_without_scripts():
    parent = _parent()
    parent.children = [_child("modern", Chunk("modern/styles", ["modern/styles.css"], "c1", 5))]
    data = _data(parent)

    assert _aggregator().merge(data) == 0
    assert "modern/styles" not in data.assets.chunks
    assert data.assets.js == ["main.p1.js"]


def test_merge_noop_without_prefixed_children():
    parent = _parent()
    unrelated = Compilation(name="html-template-compiler", role=CompilationRole.CHILD)
    unrelated.chunks.append(Chunk("tpl", ["tpl.js"], "t", 1))
    unrelated.assets["tpl.js"] = Asset(source="")
    parent.children = [unrelated]
    data = _data(parent)
    before = (dict(data.assets.chunks), list(data.assets.js))

    assert _aggregator().merge(data) == 0
    assert (data.assets.chunks, data.assets.js) == before


def test_register_taps_both_points_in_order():
    parent = _parent()
    _aggregator().register(parent)
    assert parent.html_hooks.before_generation.tap_names() == ["MultiTarget.merge"]
    assert parent.html_hooks.alter_asset_tags.tap_names() == ["MultiTarget.classify"]


def test_classify_delegates_to_classifier():
    parent = _parent()
    parent.children = [_child("legacy", Chunk("legacy/main", ["legacy/main.l1.js"], "l1", 1))]
    tag_data = AssetTagData(compilation=parent, filename="index.html")
    tag_data.body = [ScriptTag.script("legacy/main.l1.js")]
    _aggregator().classify(tag_data)
    assert tag_data.body[0].attributes["nomodule"] is True
