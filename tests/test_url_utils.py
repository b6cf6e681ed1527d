import unittest

from bookmark_mirror.core.url_utils import (
    build_pdf_viewer_url,
    is_fetchable_url,
    is_pdf_content_type,
    url_scheme,
)


class TestUrlUtils(unittest.TestCase):
    def test_url_scheme_is_lowercased(self):
        self.assertEqual(url_scheme("  HTTPS://Example.com/a "), "https")
        self.assertEqual(url_scheme("no-scheme"), "")

    def test_http_and_https_are_fetchable(self):
        self.assertTrue(is_fetchable_url("http://example.com"))
        self.assertTrue(is_fetchable_url("https://example.com/path?q=1"))

    def test_browser_and_script_urls_are_not_fetchable(self):
        for url in (
            "javascript:alert(1)",
            "chrome://settings",
            "about:blank",
            "file:///tmp/x.html",
            "data:text/plain,hi",
            "ftp://example.com/file",
        ):
            with self.subTest(url=url):
                self.assertFalse(is_fetchable_url(url))

    def test_empty_urls_are_not_fetchable(self):
        self.assertFalse(is_fetchable_url(None))
        self.assertFalse(is_fetchable_url(""))
        self.assertFalse(is_fetchable_url("   "))

    def test_pdf_viewer_url_encodes_the_whole_inner_url(self):
        viewer = build_pdf_viewer_url(
            "https://viewer.test/?url=", "https://a.test/doc.pdf?x=1&y=2#page=3"
        )
        self.assertEqual(
            viewer,
            "https://viewer.test/?url=https%3A%2F%2Fa.test%2Fdoc.pdf%3Fx%3D1%26y%3D2%23page%3D3",
        )

    def test_pdf_viewer_url_quotes_spaces(self):
        viewer = build_pdf_viewer_url("v:", "https://a.test/my doc.pdf")
        self.assertEqual(viewer, "v:https%3A%2F%2Fa.test%2Fmy%20doc.pdf")

    def test_pdf_content_type_ignores_parameters(self):
        self.assertTrue(is_pdf_content_type("application/pdf"))
        self.assertTrue(is_pdf_content_type("Application/PDF; charset=binary"))
        self.assertFalse(is_pdf_content_type("text/html"))
        self.assertFalse(is_pdf_content_type(None))


if __name__ == "__main__":
    unittest.main()
