"""Tests for merging author and general results."""
from booksearch.merge import RemoteResultMerger
from booksearch.models import RemoteDocument


def doc(key, title=None):
    return RemoteDocument(key, title or f"Title {key}")


def test_author_results_come_first():
    merged = RemoteResultMerger().merge(
        [doc("A")],
        [doc("B"), doc("C")]
    )
    
    assert [d.catalog_key for d in merged] == ["A", "B", "C"]


def test_first_occurrence_wins():
    author_version = doc("A", "Author version")
    merged = RemoteResultMerger().merge(
        [author_version],
        [doc("B"), doc("A", "General version")]
    )
    
    assert [d.catalog_key for d in merged] == ["A", "B"]
    assert merged[0] is author_version


def test_duplicates_within_one_source_collapse():
    merged = RemoteResultMerger().merge([], [doc("A"), doc("B"), doc("A")])
    assert [d.catalog_key for d in merged] == ["A", "B"]


def test_bounded_to_ten():
    """10 author + 10 general distinct keys keeps exactly the author list."""
    author = [doc(f"A{i}") for i in range(10)]
    general = [doc(f"G{i}") for i in range(10)]
    
    merged = RemoteResultMerger().merge(author, general)
    
    assert merged == author


def test_fills_from_general_up_to_limit():
    author = [doc(f"A{i}") for i in range(4)]
    general = [doc("A0")] + [doc(f"G{i}") for i in range(10)]
    
    merged = RemoteResultMerger().merge(author, general)
    
    assert len(merged) == 10
    assert [d.catalog_key for d in merged[:5]] == ["A0", "A1", "A2", "A3", "G0"]


def test_empty_inputs():
    merger = RemoteResultMerger()
    assert merger.merge([], []) == []
    assert merger.merge([doc("A")], []) == [doc("A")]
    assert merger.merge([], [doc("B")]) == [doc("B")]


def test_custom_limit():
    merged = RemoteResultMerger(limit=2).merge([doc("A"), doc("B")], [doc("C")])
    assert [d.catalog_key for d in merged] == ["A", "B"]
