import unittest

from planner.render import HOLIDAY_BANNER, HOLIDAY_FLAG, render_content, render_line


class RenderContentTests(unittest.TestCase):
    def test_empty_text(self):
        self.assertEqual(render_content(""), "")
        self.assertEqual(render_content(None), "")

    def test_headings(self):
        self.assertEqual(render_line("# Title"), "<h1>Title</h1>")
        self.assertEqual(render_line("## Sub"), "<h2>Sub</h2>")
        self.assertEqual(render_line("###   Deep"), "<h3>Deep</h3>")
        self.assertEqual(render_line("   # Indented"), "<h1>Indented</h1>")
        # four hashes is not a heading
        self.assertEqual(render_line("#### x"), "<p>#### x</p>")
        # hash without a space is plain text
        self.assertEqual(render_line("#tag"), "<p>#tag</p>")

    def test_unchecked_checkbox(self):
        html = render_line("- [ ] buy milk")
        self.assertEqual(
            html,
            '<div class="checklist-item"><input type="checkbox" disabled />buy milk</div>',
        )

    def test_checked_checkbox(self):
        html = render_line("- [X] read chapter")
        self.assertIn("checklist-item done", html)
        self.assertIn('type="checkbox" checked disabled', html)
        self.assertTrue(html.endswith("read chapter</div>"))

    def test_editable_checkbox(self):
        self.assertNotIn("disabled", render_line("- [ ] task", editable=True))

    def test_inline_images(self):
        html = render_line("see {https://example.com/a.PNG} and {http://x.org/b.gif}!")
        self.assertEqual(
            html,
            '<div>see <img src="https://example.com/a.PNG" alt="img" class="entry-image" />'
            ' and <img src="http://x.org/b.gif" alt="img" class="entry-image" />!</div>',
        )

    def test_braces_without_image_extension_are_text(self):
        self.assertNotIn("<img", render_line("{https://example.com/doc.pdf}"))

    def test_links(self):
        html = render_line("visit example.com/notes now")
        self.assertEqual(
            html,
            '<p>visit <a href="https://example.com/notes" class="entry-link" '
            'target="_blank" rel="noopener noreferrer">example.com/notes</a> now</p>',
        )
        self.assertIn('href="http://x.org/path"', render_line("http://x.org/path"))
        self.assertIn(
            'href="https://httpbin.org/get"', render_line("httpbin.org/get")
        )
        self.assertIn('href="HTTPS://x.org"', render_line("HTTPS://x.org"))

    def test_text_is_escaped(self):
        self.assertEqual(
            render_line("<script>alert(1)</script>"),
            "<p>&lt;script&gt;alert(1)&lt;/script&gt;</p>",
        )
        self.assertEqual(render_line("# <b>"), "<h1>&lt;b&gt;</h1>")

    def test_lines_are_rendered_in_order(self):
        html = render_content("# Day\n\nplain")
        self.assertEqual(html, "<h1>Day</h1>\n<p></p>\n<p>plain</p>")

    def test_holiday_flag_only_for_school(self):
        self.assertEqual(render_content(HOLIDAY_FLAG, section="school"), HOLIDAY_BANNER)
        self.assertEqual(
            render_content(f"  {HOLIDAY_FLAG}\n", section="school"), HOLIDAY_BANNER
        )
        self.assertEqual(
            render_content(HOLIDAY_FLAG, section="whatidid"), f"<p>{HOLIDAY_FLAG}</p>"
        )


if __name__ == "__main__":
    unittest.main()
