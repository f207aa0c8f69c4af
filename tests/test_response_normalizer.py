import unittest

from domain.models import ProductDescription
from domain.normalizer import clean_description, clean_title, content_lines, normalize


class NormalizeExamplesTestCase(unittest.TestCase):
    def test_empty_input_gives_empty_record(self) -> None:
        self.assertEqual(normalize(""), ProductDescription(title="", description=""))

    def test_labelled_title_and_description(self) -> None:
        result = normalize("Title: Blue Lamp\nDescription: A nice lamp.")
        self.assertEqual(result, ProductDescription(title="Blue Lamp", description="A nice lamp."))

    def test_markdown_title_and_separator_line(self) -> None:
        result = normalize("**Blue Lamp**\n---\nA nice lamp.\nGreat for desks.")
        self.assertEqual(
            result,
            ProductDescription(title="Blue Lamp", description="A nice lamp. Great for desks."),
        )

    def test_title_only(self) -> None:
        self.assertEqual(normalize("Blue Lamp"), ProductDescription(title="Blue Lamp", description=""))

    def test_separators_and_blank_lines_only(self) -> None:
        for raw in ["***", "---\n\n===", " _ \n*\n-", "\n\n   \n", "=*=-_ \t\n***"]:
            with self.subTest(raw=raw):
                self.assertEqual(normalize(raw), ProductDescription())

    def test_none_is_treated_as_empty(self) -> None:
        self.assertEqual(normalize(None), ProductDescription())


class NormalizeRulesTestCase(unittest.TestCase):
    def test_label_is_case_insensitive(self) -> None:
        result = normalize("TITLE:   Desk Lamp\nDESCRIPTION:Warm light.")
        self.assertEqual(result.title, "Desk Lamp")
        self.assertEqual(result.description, "Warm light.")

    def test_description_label_removed_once_on_joined_text(self) -> None:
        result = normalize("Lamp\nDescription: First.\nDescription: Second.")
        self.assertEqual(result.description, "First. Description: Second.")

    def test_description_label_not_first_line_is_kept(self) -> None:
        result = normalize("Lamp\nA lamp.\nDescription: more.")
        self.assertEqual(result.description, "A lamp. Description: more.")

    def test_title_emphasis_removed_everywhere(self) -> None:
        self.assertEqual(normalize("__Blue__ *Desk* Lamp").title, "Blue Desk Lamp")

    def test_label_inside_emphasis_is_kept(self) -> None:
        # le libellé n'est cherché qu'avant le retrait de l'emphase
        self.assertEqual(normalize("**Title:** Blue Lamp").title, "Title: Blue Lamp")

    def test_description_keeps_emphasis_markers(self) -> None:
        result = normalize("Lamp\nA *bright* lamp.")
        self.assertEqual(result.description, "A *bright* lamp.")

    def test_description_order_is_preserved(self) -> None:
        raw = "Title\none\n***\ntwo\n\nthree\n- - -\nfour"
        self.assertEqual(normalize(raw).description, "one two three four")

    def test_line_with_text_and_separators_is_kept(self) -> None:
        result = normalize("Lamp\n--- Features ---")
        self.assertEqual(result.description, "--- Features ---")

    def test_windows_line_endings(self) -> None:
        result = normalize("Title: Lamp\r\n---\r\nDescription: Nice.\r\nCheap.")
        self.assertEqual(result, ProductDescription(title="Lamp", description="Nice. Cheap."))

    def test_only_newlines_split_lines(self) -> None:
        for raw in ["Blue\x0cLamp", "Blue\x85Lamp", "Blue\u2028Lamp", "Blue\x1eLamp"]:
            with self.subTest(raw=raw):
                self.assertEqual(normalize(raw), ProductDescription(title=raw, description=""))

    def test_leading_blank_and_separator_lines_skipped_for_title(self) -> None:
        result = normalize("\n\n***\n  Blue Lamp  \nDesc")
        self.assertEqual(result.title, "Blue Lamp")
        self.assertEqual(result.description, "Desc")

    def test_title_label_only_gives_empty_title(self) -> None:
        result = normalize("Title:\nA lamp.")
        self.assertEqual(result, ProductDescription(title="", description="A lamp."))


class NormalizeProperties(unittest.TestCase):
    def test_renormalizing_clean_title_is_noop(self) -> None:
        inputs = [
            "Title: Blue Lamp\nDescription: A nice lamp.",
            "**Blue Lamp**\n---\nA nice lamp.",
            "  _Vintage_ Chair \nSolid oak.",
        ]
        for raw in inputs:
            with self.subTest(raw=raw):
                title = normalize(raw).title
                self.assertEqual(normalize(title), ProductDescription(title=title, description=""))

    def test_labels_removed_only_once(self) -> None:
        raw = "title: title: Lamp\ndescription: description: text"
        result = normalize(raw)
        self.assertFalse(result.title.lower().startswith("title: title"))
        self.assertEqual(result.title, "title: Lamp")
        self.assertEqual(result.description, "description: text")


class HelpersTestCase(unittest.TestCase):
    def test_content_lines_filters_blank_and_separators(self) -> None:
        self.assertEqual(content_lines("a\n\n---\n b \n==="), ["a", " b "])

    def test_clean_title(self) -> None:
        self.assertEqual(clean_title("  Title: **Lamp**  "), "Lamp")

    def test_clean_description_empty(self) -> None:
        self.assertEqual(clean_description([]), "")


if __name__ == "__main__":
    unittest.main()
