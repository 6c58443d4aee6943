from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest


def write_module(repository: Path, identifier: str, body: str) -> Path:
    """Write ``body`` as the source of ``identifier`` inside ``repository``."""

    target = repository.joinpath(*identifier.split(".")).with_suffix(".py")
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dedent(body), encoding="utf-8")
    return target


@pytest.fixture()
def repositories(tmp_path: Path) -> dict[str, Path]:
    """A shared public tree and a private tree layered over it."""

    public = tmp_path / "public"
    private = tmp_path / "private"
    write_module(
        public,
        "Test.Simple",
        """
        from jsan import declare

        Test = declare(globals(), "Test")


        class Simple:
            EXPORT = ["plan", "ok"]
            EXPORT_OK = ["diag"]
            EXPORT_TAGS = {":all": EXPORT + EXPORT_OK}
            results = []

            @classmethod
            def plan(cls, tests):
                cls.results.clear()
                cls.planned = tests

            @classmethod
            def ok(cls, passed, description=""):
                cls.results.append((bool(passed), description))
                return bool(passed)

            @staticmethod
            def diag(message):
                return f"# {message}"


        Test.Simple = Simple
        """,
    )
    write_module(
        public,
        "Text.Format",
        """
        from jsan import Package, declare

        declare(globals(), "Text").Format = Package(
            EXPORT=["indent"],
            origin="public",
            indent=lambda text, width=2: " " * width + text,
        )
        """,
    )
    write_module(
        private,
        "Text.Format",
        """
        from jsan import Package, declare

        declare(globals(), "Text").Format = Package(
            EXPORT=["indent"],
            origin="private",
            indent=lambda text, width=4: " " * width + text,
        )
        """,
    )
    write_module(
        private,
        "Report.Builder",
        """
        from jsan import declare

        Simple = JSAN.use("Test.Simple", "diag")
        Format = JSAN.use("Text.Format", [])


        class Builder:
            EXPORT_OK = ["build"]

            @staticmethod
            def build(title):
                return Format.indent(diag(title))


        declare(globals(), "Report").Builder = Builder
        """,
    )
    return {"public": public, "private": private}


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically mark tests in this package as integration."""

    package_root = Path(__file__).resolve().parent
    integration_mark = pytest.mark.integration
    for item in items:
        try:
            path = Path(item.fspath).resolve()
        except OSError:
            continue
        if package_root in path.parents:
            item.add_marker(integration_mark)
