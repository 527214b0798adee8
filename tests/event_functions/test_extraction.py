"""
Page Extraction Tests

Validates type-page recognition, message-row filtering and detail-page
extraction against synthetic script reference pages.

Key Scenarios:
- Non-type pages and type pages without messages are skipped
- All three namespace line forms are recognised
- Rows without links or detail pages are dropped silently
- Static markers, co-routine phrases and code samples feed the observation

Usage:
    pytest tests/event_functions/test_extraction.py
"""

from __future__ import annotations

from pathlib import PurePosixPath

import pytest
from packaging.version import Version

from DocsToApi.EventFunctions.extraction import (
    PageExtractor,
    extract_type_header,
    read_parameter_table,
)
from DocsToApi.EventFunctions.nodes import DocNode
from DocsToApi.EventFunctions.parameters import ParameterRow
from DocsToApi.EventFunctions.typenames import VOID, TypeName
from tests.helpers.reference_pages import REFERENCE_PATH, detail_page, type_page

V1 = Version("1.0")


@pytest.fixture
def tree(reference_tree):
    return reference_tree("1.0")


@pytest.fixture
def extractor(tree):
    return PageExtractor(tree.reference_dir, PurePosixPath(REFERENCE_PATH.as_posix()))


def _section(html: str) -> DocNode:
    section = DocNode.parse(html).select_one("div.content > div.section")
    assert section is not None
    return section


@pytest.mark.parametrize(
    ("line", "namespace", "kind"),
    [
        ("class in UnityEngine", "UnityEngine", "class"),
        ("struct in UnityEngine.Rendering", "UnityEngine.Rendering", "struct"),
        ("Namespace: UnityEditor", "UnityEditor", "class"),
    ],
)
def test_type_header_namespace_forms(line, namespace, kind):
    header = extract_type_header(_section(type_page("Thing", line)), "ScriptReference/Thing.html")
    assert header is not None
    assert (header.namespace, header.name, header.kind) == (namespace, "Thing", kind)


@pytest.mark.parametrize("line", [None, "Inherits from: Behaviour", "interface in"])
def test_type_header_rejects_unrecognised_pages(line):
    assert extract_type_header(_section(type_page("Thing", line)), "x") is None


def test_member_page_is_not_a_type(extractor, tree):
    page = tree.add_detail("Foo.Bar.html", "Foo.Bar(int)")
    assert extractor.extract_page(page, V1) is None


def test_type_without_messages_is_skipped(extractor, tree):
    page = tree.add_type("Vector3", "struct in UnityEngine")
    assert extractor.extract_page(page, V1) is None


def test_missing_page_is_skipped(extractor, tree):
    assert extractor.extract_page(tree.reference_dir / "Missing.html", V1) is None


def test_rows_without_links_or_detail_pages_are_skipped(extractor, tree):
    tree.add_detail("MonoBehaviour.Awake.html", "MonoBehaviour.Awake()")
    tree.add_detail("MonoBehaviour.Start.html", "MonoBehaviour.Start()")
    page = tree.add_type(
        "MonoBehaviour",
        "class in UnityEngine",
        [
            ("Awake", "MonoBehaviour.Awake.html", "Awake is called when the script instance is being loaded."),
            ("Reset", None, "No link."),
            ("OnGone", "MonoBehaviour.OnGone.html", "Detail page missing."),
            ("Start", "MonoBehaviour.Start.html#section", "Start is called before the first frame."),
        ],
    )
    extraction = extractor.extract_page(page, V1)
    assert extraction is not None
    assert extraction.header.path == "Documentation/en/ScriptReference/MonoBehaviour.html"
    assert [o.name for o in extraction.observations] == ["Awake", "Start"]
    awake = extraction.observations[0]
    assert awake.description == "Awake is called when the script instance is being loaded."
    assert awake.doc_path == "Documentation/en/ScriptReference/MonoBehaviour.Awake.html"
    assert awake.version == V1
    assert awake.return_type == VOID
    assert awake.parameters == []


def test_type_page_whose_rows_all_fail_still_yields_type(extractor, tree):
    page = tree.add_type("Foo", "class in NS", [("Bar", "Foo.Bar.html", "Missing.")])
    extraction = extractor.extract_page(page, V1)
    assert extraction is not None
    assert extraction.observations == []


def test_detail_without_signature_is_skipped(extractor, tree):
    tree.write("Foo.Bar.html", "<html><body><div class='content'><div class='section'></div></div></body></html>")
    page = tree.add_type("Foo", "class in NS", [("Bar", "Foo.Bar.html", "Broken.")])
    extraction = extractor.extract_page(page, V1)
    assert extraction is not None
    assert extraction.observations == []


def test_static_marker_and_coroutine_phrase(extractor, tree):
    tree.add_detail(
        "Foo.OnLoad.html",
        "Foo.OnLoad()",
        static=True,
        description="OnLoad can be a co-routine, simply use the yield statement.",
    )
    page = tree.add_type("Foo", "class in NS", [("OnLoad", "Foo.OnLoad.html", "Loaded.")])
    (observation,) = extractor.extract_page(page, V1).observations
    assert observation.is_static is True
    assert observation.is_coroutine is True


def test_example_supplies_names_return_type_and_staticness(extractor, tree):
    tree.add_detail(
        "AssetPostprocessor.OnPostprocessAllAssets.html",
        "AssetPostprocessor.OnPostprocessAllAssets(string[], string[])",
        examples={
            "CS": (
                "class Post : AssetPostprocessor {\n"
                "    static void OnPostprocessAllAssets(string[] importedAssets, string[] deletedAssets) {}\n"
                "}"
            )
        },
    )
    page = tree.add_type(
        "AssetPostprocessor",
        "class in UnityEditor",
        [("OnPostprocessAllAssets", "AssetPostprocessor.OnPostprocessAllAssets.html", "After import.")],
    )
    (observation,) = extractor.extract_page(page, V1).observations
    assert observation.is_static is True
    assert [(p.name, p.type) for p in observation.parameters] == [
        ("importedAssets", TypeName("string", is_array=True)),
        ("deletedAssets", TypeName("string", is_array=True)),
    ]


def test_statically_typed_example_wins_over_prototype_example(extractor, tree):
    tree.add_detail(
        "MonoBehaviour.Start.html",
        "MonoBehaviour.Start()",
        examples={
            "JS": "function Start() : boolean {\n return true;\n}",
            "CS": "IEnumerator Start() {\n yield return null;\n}",
        },
    )
    page = tree.add_type("MonoBehaviour", "class in UnityEngine", [("Start", "MonoBehaviour.Start.html", "Start.")])
    (observation,) = extractor.extract_page(page, V1).observations
    assert observation.return_type == TypeName("System.Collections.IEnumerator")


def test_unparseable_example_falls_back_to_signature(extractor, tree):
    tree.add_detail(
        "MonoBehaviour.OnTriggerEnter.html",
        "MonoBehaviour.OnTriggerEnter(Collider)",
        examples={"Raw": "// nothing useful here"},
    )
    page = tree.add_type(
        "MonoBehaviour",
        "class in UnityEngine",
        [("OnTriggerEnter", "MonoBehaviour.OnTriggerEnter.html", "Trigger.")],
    )
    (observation,) = extractor.extract_page(page, V1).observations
    assert observation.return_type == VOID
    assert [(p.name, p.type) for p in observation.parameters] == [("arg", TypeName("UnityEngine.Collider"))]


def test_read_parameter_table_preserves_row_order():
    details = _section(
        detail_page("Foo.Bar(int, string)", parameters=[("count", "How many."), ("label", "Which one.")])
    )
    assert read_parameter_table(details) == [
        ParameterRow("count", "How many."),
        ParameterRow("label", "Which one."),
    ]


def test_read_parameter_table_without_table():
    assert read_parameter_table(_section(detail_page("Foo.Bar(int)"))) == []
