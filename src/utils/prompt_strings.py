class PromptStrings:
    ARTICLE_ANSWER_SYSTEM = (
        "You are a helpful news assistant. Answer questions about the article "
        "the user provides. Use only information from the article; if the "
        "article does not contain the answer, say so. Keep answers concise "
        "(at most 3 short paragraphs)."
    )

    ARTICLE_ANSWER = """ARTICLE:
{article_text}

QUESTION:
{question}

Answer the question using the article above."""

    TRANSLATION_SYSTEM = (
        "You are a professional news translator. You reply with a single JSON "
        "object and nothing else."
    )

    TRANSLATION = """Translate the following news article into {target_language}.

Return valid JSON only, with exactly these keys:
{{
  "title": "translated title",
  "summary": "translated summary",
  "content": "translated content"
}}

Rules:
- Keep names, numbers and quotes accurate
- Keep HTML tags in the content unchanged
- Do not add commentary outside the JSON object

ARTICLE:
{text}"""
