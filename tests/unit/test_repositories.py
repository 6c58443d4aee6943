from __future__ import annotations

from pathlib import Path

import pytest

from jsan.repositories import DEFAULT_REPOSITORIES, RepositoryList


def test_defaults_match_historical_include_path() -> None:
    assert list(RepositoryList()) == list(DEFAULT_REPOSITORIES) == [".", "lib"]


def test_later_additions_are_searched_first() -> None:
    repos = RepositoryList(["base"])

    repos.add("x")
    repos.add("y")

    assert list(repos) == ["y", "x", "base"]


def test_add_keeps_given_order_among_new_entries() -> None:
    repos = RepositoryList(["base"])

    repos.add("first", "second")

    assert list(repos) == ["first", "second", "base"]


def test_add_flattens_nested_sequences() -> None:
    repos = RepositoryList([])

    repos.add("a", ["b", ("c", ["d"])], "e")

    assert list(repos) == ["a", "b", "c", "d", "e"]
    assert len(repos) == 5
    assert "c" in repos


def test_add_accepts_paths(tmp_path: Path) -> None:
    repos = RepositoryList([])

    repos.add(tmp_path)

    assert list(repos) == [str(tmp_path)]


def test_duplicates_are_tolerated() -> None:
    repos = RepositoryList(["lib"])

    repos.add("lib")

    assert list(repos) == ["lib", "lib"]


def test_rejects_non_string_entries() -> None:
    repos = RepositoryList([])

    with pytest.raises(TypeError):
        repos.add(42)
