"""Test fixtures for the site generator.

- blocks: builders for typed block trees and pages
- notion_responses: sample Notion API JSON payloads
"""
