"""
News Module
===========

Aggregation of news articles, including:
- Multi-source fetching (RSS feeds and JSON news APIs)
- Bounded concurrent fan-out across sources
- URL-based deduplication and newest-first ordering
- Lexicon-based headline sentiment
- File-backed article cache
"""
