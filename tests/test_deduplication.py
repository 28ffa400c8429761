import unittest

from manuscript_refs.citations.analyzer import count_duplicates, get_dedupe_key
from manuscript_refs.models import Author, Citation


class TestDeduplication(unittest.TestCase):
    def test_get_dedupe_key_with_doi(self):
        ref = Citation(id="1", doi="10.1001/test", title="Different Title")
        self.assertEqual(get_dedupe_key(ref), "doi:10.1001/test")

        ref_case = Citation(id="2", doi="https://doi.org/10.1001/TEST ", title="Title")
        self.assertEqual(get_dedupe_key(ref_case), "doi:10.1001/test")

    def test_get_dedupe_key_without_doi(self):
        ref = Citation(
            id="1",
            title="A Great Paper!",
            authors=[Author("John", "Smith"), Author("Jane", "Doe")],
            year=2023,
        )
        # Normalized title: agreatpaper, first author: smith
        self.assertEqual(get_dedupe_key(ref), "agreatpaper|smith")

    def test_get_dedupe_key_normalization(self):
        ref1 = Citation(id="1", title="Test Paper", authors=[Author("J.", "Smith")])
        ref2 = Citation(id="2", title="  test-paper... ", authors=[Author("John", "SMITH")])
        self.assertEqual(get_dedupe_key(ref1), get_dedupe_key(ref2))

    def test_untitled_falls_back_to_url_then_id(self):
        self.assertEqual(get_dedupe_key(Citation(id="w", url="https://example.org")), "url:https://example.org")
        self.assertEqual(get_dedupe_key(Citation(id="x")), "id:x")

    def test_count_duplicates(self):
        refs = [
            Citation(id="1", doi="10.1111/abc"),
            Citation(id="2", doi="10.1111/ABC"),
            Citation(id="3", doi="10.1111/abc"),
            Citation(id="4", title="No DOI Paper", authors=[Author("A.", "Jones")]),
            Citation(id="5", title="No DOI Paper!", authors=[Author("A.", "Jones")]),
            Citation(id="6", title="Different Paper", authors=[Author("A.", "Jones")]),
        ]
        self.assertEqual(count_duplicates(refs), 3)


if __name__ == "__main__":
    unittest.main()
