"""
Tests for slug generation.
"""
import asyncio

from planner.services.slugs import generate_slug, make_unique_slug


def test_generate_slug():
    assert generate_slug("La Itaba") == "la-itaba"
    assert generate_slug("  ETH Pura Vida 2025! ") == "eth-pura-vida-2025"
    assert generate_slug("Café & Co") == "caf-co"


def test_make_unique_slug_appends_counter():
    taken = {"meetup", "meetup-1"}

    async def is_taken(slug):
        return slug in taken

    assert asyncio.run(make_unique_slug("meetup", is_taken)) == "meetup-2"
    assert asyncio.run(make_unique_slug("conference", is_taken)) == "conference"


def test_generate_slug_without_usable_characters():
    assert generate_slug("日本") == "project"
    assert generate_slug("!!!") == "project"


def test_non_ascii_names_get_distinct_addressable_slugs():
    taken = {generate_slug("日本")}

    async def is_taken(slug):
        return slug in taken

    assert asyncio.run(make_unique_slug(generate_slug("東京"), is_taken)) == "project-1"
