from app.services.toc import FENCE_CLOSE, FENCE_OPEN, AnchorRegistry, FenceTracker, extract_toc


def test_extract_toc_scenario():
    toc = extract_toc("# Hi\nSome *text*")

    assert [item.model_dump() for item in toc] == [{"level": 1, "text": "Hi", "id": "hi"}]


def test_extract_toc_keeps_document_order_without_nesting_checks():
    markdown = "### Deep first\n\n# Top\ntext\n###### Tiny\n####### too deep\n#nospace"

    toc = extract_toc(markdown)

    assert [(item.level, item.text, item.id) for item in toc] == [
        (3, "Deep first", "deep-first"),
        (1, "Top", "top"),
        (6, "Tiny", "tiny"),
    ]


def test_extract_toc_strips_closing_hashes():
    toc = extract_toc("## Setup ##\n## C#")

    assert [item.text for item in toc] == ["Setup", "C#"]
    assert [item.id for item in toc] == ["setup", "c"]


def test_extract_toc_ignores_headings_inside_code_fences():
    markdown = "# Real\n```bash\n# just a comment\n```\n## After"

    toc = extract_toc(markdown)

    assert [item.text for item in toc] == ["Real", "After"]


def test_repeated_headings_get_counter_suffixes():
    toc = extract_toc("# Notes\n## Notes\n### Notes")

    assert [item.id for item in toc] == ["notes", "notes-2", "notes-3"]


def test_anchor_registry_avoids_collisions_with_literal_suffixes():
    anchors = AnchorRegistry()

    assert anchors.assign("Intro 2") == "intro-2"
    assert anchors.assign("Intro") == "intro"
    assert anchors.assign("Intro") == "intro-3"
    assert anchors.assign("!!!") == "section"
    assert anchors.assign("???") == "section-2"


def test_extract_toc_reads_escaped_fences_as_code():
    toc = extract_toc("# Setup\n\\```sh\n# Setup\n\\```\n## Setup")

    assert [item.id for item in toc] == ["setup", "setup-2"]


def test_extract_toc_ignores_tilde_and_indented_fences():
    toc = extract_toc("# A\n~~~\n# A\n~~~\n  ```\n# A\n  ```\n## A")

    assert [item.id for item in toc] == ["a", "a-2"]


def test_extract_toc_skips_headings_without_text():
    toc = extract_toc("## ##\n##\n   ### Indented")

    assert [(item.level, item.text) for item in toc] == [(3, "Indented")]


def test_fence_tracker_needs_matching_closer():
    fence = FenceTracker()

    assert fence.feed("````python") == FENCE_OPEN
    assert fence.info == "python"
    assert fence.feed("```") is None
    assert fence.feed("~~~~") is None
    assert fence.feed("```` trailing") is None
    assert fence.inside
    assert fence.feed("`````") == FENCE_CLOSE
    assert not fence.inside


def test_fence_tracker_ignores_deeply_indented_or_inline_backticks():
    fence = FenceTracker()

    assert fence.feed("    ```") is None
    assert fence.feed("``` not`a fence") is None
    assert not fence.inside
