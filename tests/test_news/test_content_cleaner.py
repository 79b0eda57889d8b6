from src.news.services.content_cleaner import ContentCleaner


class TestSanitizeHtml:
    def test_keeps_allowed_tags_and_attributes(self):
        html = '<p class="x">Hello <a href="https://a.com" target="_blank" onclick="evil()">link</a></p>'

        result = ContentCleaner.sanitize_html(html)

        assert result == '<p>Hello <a href="https://a.com" target="_blank">link</a></p>'

    def test_unwraps_disallowed_tags_and_drops_scripts(self):
        html = '<div><span>Text</span><script>alert(1)</script><img src="x.png"></div>'

        assert ContentCleaner.sanitize_html(html) == "Text"

    def test_removes_javascript_links(self):
        result = ContentCleaner.sanitize_html('<a href="javascript:alert(1)">x</a>')

        assert "javascript" not in result
        assert result == "<a>x</a>"

    def test_empty_input(self):
        assert ContentCleaner.sanitize_html(None) == ""
        assert ContentCleaner.sanitize_html("") == ""


class TestMergeContent:
    def test_drops_duplicate_variants(self):
        a = "<p>The council approved the new budget on Monday.</p>"
        b = "The council approved the new budget on Monday!"

        assert ContentCleaner.merge_content([a, b]) == a

    def test_longer_variant_replaces_truncated_one(self):
        short = "The council approved the new budget"
        full = "The council approved the new budget on Monday after a long debate."

        assert ContentCleaner.merge_content([short, full]) == full

    def test_distinct_variants_joined_with_paragraph_break(self):
        a = "The council approved the new budget on Monday."
        b = "Opposition members walked out in protest before the vote."

        assert ContentCleaner.merge_content([a, b]) == f"{a}\n\n{b}"

    def test_short_and_empty_variants_ignored(self):
        assert ContentCleaner.merge_content([None, "", "Too short"]) == ""


class TestExtractSummary:
    def test_first_three_long_sentences(self):
        text = "First sentence is here. Short. Second sentence is here! Third sentence is here? Fourth sentence is here."

        summary = ContentCleaner.extract_summary(text)

        assert summary == "First sentence is here. Second sentence is here. Third sentence is here."

    def test_html_is_stripped(self):
        assert ContentCleaner.extract_summary("<p>A paragraph with <b>bold</b> words.</p>") == "A paragraph with bold words."

    def test_empty(self):
        assert ContentCleaner.extract_summary("") == ""
