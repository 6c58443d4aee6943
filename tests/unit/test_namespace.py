from __future__ import annotations

from textwrap import dedent

import pytest

from jsan.namespace import (
    ExecModuleFactory,
    NamespaceError,
    Package,
    bind_namespace,
    declare,
    lookup,
    unbind,
)


def test_bind_creates_missing_intermediate_packages() -> None:
    scope: dict = {}
    definition = object()

    assert bind_namespace(scope, "A.B.C", definition) is True

    assert isinstance(scope["A"], Package)
    assert isinstance(scope["A"].B, Package)
    assert scope["A"].B.C is definition


def test_bind_keeps_existing_containers() -> None:
    existing = Package(other=1)
    scope: dict = {"A": existing}

    bind_namespace(scope, "A.B", "value")

    assert scope["A"] is existing
    assert scope["A"].other == 1
    assert scope["A"].B == "value"


def test_bind_never_overwrites_final_segment() -> None:
    first = Package(name="first")
    scope: dict = {"Foo": Package(Bar=first)}

    assert bind_namespace(scope, "Foo.Bar", Package(name="second")) is False

    assert scope["Foo"].Bar is first


def test_bind_shares_definition_by_reference() -> None:
    class Widget:
        template = {"color": "red"}

    scope: dict = {}
    bind_namespace(scope, "UI.Widget", Widget)

    Widget.template["color"] = "blue"

    assert scope["UI"].Widget.template is Widget.template
    assert scope["UI"].Widget.template["color"] == "blue"


def test_lookup_walks_mappings_and_attributes() -> None:
    scope = {"Foo": Package(Bar=Package(value=3)), "plain": {"nested": 4}}

    assert lookup(scope, "Foo.Bar").value == 3
    assert lookup(scope, "plain.nested") == 4
    assert lookup(scope, "Foo.Missing") is None
    assert lookup(scope, "Nothing") is None


def test_declare_returns_existing_or_new_container() -> None:
    scope: dict = {}

    created = declare(scope, "Foo.Bar")
    again = declare(scope, "Foo.Bar")

    assert created is again
    assert scope["Foo"].Bar is created


def test_exec_factory_returns_definition_at_identifier() -> None:
    scope: dict = {}
    source = dedent(
        """
        from jsan import Package, declare

        Foo = declare(globals(), "Foo")
        Foo.Bar = Package(EXPORT=["hi"], hi="hello")
        """
    )

    definition = ExecModuleFactory().create(source, "Foo.Bar", scope, "lib/Foo/Bar.py")

    assert definition.hi == "hello"
    assert scope["Foo"].Bar is definition


def test_exec_factory_requires_definition() -> None:
    with pytest.raises(NamespaceError, match="Foo.Bar"):
        ExecModuleFactory().create("x = 1\n", "Foo.Bar", {}, "lib/Foo/Bar.py")


def test_exec_factory_propagates_errors_with_origin() -> None:
    with pytest.raises(ZeroDivisionError) as excinfo:
        ExecModuleFactory().create("1 / 0\n", "Broken", {}, "lib/Broken.py")

    filenames = []
    tb = excinfo.tb
    while tb is not None:
        filenames.append(tb.tb_frame.f_code.co_filename)
        tb = tb.tb_next
    assert "lib/Broken.py" in filenames


def test_bind_leaves_no_partial_packages_when_attach_fails() -> None:
    class Sealed:
        __slots__ = ()

    sealed = Sealed()
    scope: dict = {"Root": sealed}

    with pytest.raises(AttributeError):
        bind_namespace(scope, "Root.Mid.Leaf", "value")

    assert scope == {"Root": sealed}


def test_bind_attaches_missing_branch_in_one_assignment() -> None:
    class RecordingScope(dict):
        def __init__(self) -> None:
            super().__init__()
            self.writes: list[str] = []

        def __setitem__(self, key, value) -> None:
            self.writes.append(key)
            super().__setitem__(key, value)

    scope = RecordingScope()

    bind_namespace(scope, "A.B.C", "value")

    assert scope.writes == ["A"]
    assert scope["A"].B.C == "value"


def test_unbind_removes_only_the_final_segment() -> None:
    scope: dict = {"A": Package(B=Package(C=1, D=2))}

    unbind(scope, "A.B.C")
    unbind(scope, "A.Missing.X")
    unbind(scope, "Gone")

    assert not hasattr(scope["A"].B, "C")
    assert scope["A"].B.D == 2

    unbind(scope, "A")
    assert scope == {}
