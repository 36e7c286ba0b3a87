import unittest

from sheet_quality.pagination import paginate


class PaginateTests(unittest.TestCase):
    def test_middle_page(self):
        page = paginate(list(range(42)), page=2, page_size=10)
        self.assertEqual(page.rows, list(range(10, 20)))
        self.assertEqual(page.total_pages, 5)
        self.assertEqual((page.start, page.end), (10, 20))
        self.assertTrue(page.has_previous)
        self.assertTrue(page.has_next)
        self.assertEqual(page.describe(), "Showing 11 to 20 of 42 rows")

    def test_last_page_is_partial(self):
        page = paginate(list(range(42)), page=5, page_size=10)
        self.assertEqual(page.rows, [40, 41])
        self.assertFalse(page.has_next)
        self.assertEqual(page.describe(), "Showing 41 to 42 of 42 rows")

    def test_page_past_the_end_resets_to_first(self):
        page = paginate(list(range(12)), page=9, page_size=10)
        self.assertEqual(page.page, 1)
        self.assertEqual(page.rows, list(range(10)))

    def test_unknown_page_size_falls_back_to_default(self):
        page = paginate(list(range(30)), page=1, page_size=7)
        self.assertEqual(page.page_size, 10)

    def test_single_page_and_empty(self):
        self.assertEqual(paginate(list(range(7))).describe(), "Showing all 7 rows")
        empty = paginate([])
        self.assertEqual(empty.rows, [])
        self.assertEqual(empty.total_pages, 0)
        self.assertFalse(empty.has_next)


if __name__ == "__main__":
    unittest.main()
