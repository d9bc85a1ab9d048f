import re

from ids import generate_id


def test_format():
    assert re.fullmatch(r"mtg-\d{13,}-[0-9a-z]{9}", generate_id("mtg"))
    assert generate_id().startswith("id-")


def test_uniqueness_over_many_generations():
    ids = [generate_id("note") for _ in range(10_000)]
    assert len(set(ids)) == len(ids)
