import textwrap

import pytest

from archscan.core.config import config
from archscan.core.error_handling import ParsingError, TypeResolutionError
from archscan.models.enums import ReferenceKind, TypeKind
from archscan.repository import PythonSourceTypeRepository


def write(root, path, code):
    target = root / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(textwrap.dedent(code), encoding='utf8')


@pytest.fixture
def project(tmp_path):
    write(tmp_path, 'shop/__init__.py', '')
    write(tmp_path, 'shop/models/__init__.py', """
        from .order import Order, OrderLine
    """)
    write(tmp_path, 'shop/models/order.py', """
        from dataclasses import dataclass
        from typing import List, Optional


        class OrderLine:
            quantity: int


        @dataclass
        class Order:
            lines: List[OrderLine]
            note: Optional[str] = None

            class Status:
                pass
    """)
    write(tmp_path, 'shop/services.py', """
        import abc
        from abc import ABC, abstractmethod
        from typing import Protocol, Union

        import shop.models
        from shop.models import Order
        from .clock import *
        from . import gateways as gw


        class OrderStore(Protocol):
            def save(self, order: Order) -> None:
                ...


        class Notifier(ABC):
            pass


        class Auditor(metaclass=abc.ABCMeta):
            pass


        class Reporter:
            @abstractmethod
            def report(self) -> str:
                ...


        @component("Handles orders", technology="Python")
        class OrderService(Notifier):
            store: "OrderStore"

            def __init__(self, clock: Clock, gateway: gw.PaymentGateway) -> None:
                self.clock = clock
                self.line: shop.models.OrderLine = None

            def place(self, order: Union[Order, None]) -> "shop.models.order.Order.Status":
                def helper(value: Unknown) -> None:
                    class LocalOnly:
                        pass
                return order

            def status(self) -> Order.Status:
                ...
    """)
    write(tmp_path, 'shop/clock.py', """
        class Clock:
            def now(self) -> float:
                return 0.0
    """)
    write(tmp_path, 'shop/gateways.py', """
        class PaymentGateway:
            pass
    """)
    write(tmp_path, 'shop/__pycache__/stale.py', """
        class Stale:
            pass
    """)
    write(tmp_path, 'shop/my-scripts/tool.py', """
        class Tool:
            pass
    """)
    return PythonSourceTypeRepository(tmp_path)


def test_enumerates_types_by_module_then_declaration_order(project):
    assert project.list_types('shop') == [
        'shop.clock.Clock',
        'shop.gateways.PaymentGateway',
        'shop.models.order.OrderLine',
        'shop.models.order.Order',
        'shop.models.order.Order.Status',
        'shop.services.OrderStore',
        'shop.services.Notifier',
        'shop.services.Auditor',
        'shop.services.Reporter',
        'shop.services.OrderService',
    ]
    assert project.list_types('shop.models') == [
        'shop.models.order.OrderLine',
        'shop.models.order.Order',
        'shop.models.order.Order.Status',
    ]


def test_skips_excluded_and_non_importable_directories(project):
    assert not project.contains('shop.__pycache__.stale.Stale')
    assert not any(name.endswith('.Tool') for name in project.list_types(''))


def test_package_is_the_module_package(project):
    assert project.get_package('shop.models.order.Order') == 'shop.models'
    assert project.get_package('shop.services.OrderService') == 'shop'


def test_detects_interfaces_and_abstract_classes(project):
    assert project.get_type('shop.services.OrderStore').kind == TypeKind.INTERFACE
    assert project.get_type('shop.services.Notifier').kind == TypeKind.ABSTRACT
    assert project.get_type('shop.services.Auditor').kind == TypeKind.ABSTRACT
    assert project.get_type('shop.services.Reporter').kind == TypeKind.ABSTRACT
    assert project.get_type('shop.services.OrderService').kind == TypeKind.CLASS
    assert project.is_interface_or_abstract('shop.services.Notifier')
    assert not project.is_interface_or_abstract('shop.clock.Clock')


def test_resolves_supertypes_through_imports(project):
    assert project.get_supertypes('shop.services.OrderService') == ['shop.services.Notifier']
    assert project.get_supertypes('shop.services.Notifier') == ['abc.ABC']
    assert project.is_assignable_to('shop.services.OrderService', 'shop.services.Notifier')
    assert not project.is_assignable_to('shop.services.Notifier', 'shop.services.OrderService')


def test_resolves_references(project):
    referenced = project.get_direct_referenced_types('shop.services.OrderService')

    # string annotation, star import, relative module alias, absolute module path
    assert 'shop.services.OrderStore' in referenced
    assert 'shop.clock.Clock' in referenced
    assert 'shop.gateways.PaymentGateway' in referenced
    assert 'shop.models.order.OrderLine' in referenced
    # re-exported from the package, canonicalized to the declaring module
    assert 'shop.models.order.Order' in referenced
    assert 'shop.models.order.Order.Status' in referenced
    assert 'shop.services.Notifier' in referenced
    # builtins and names local to a function body are ignored
    assert 'str' not in referenced
    assert 'Unknown' not in referenced


def test_reference_kinds(project):
    info = project.get_type('shop.services.OrderService')
    kinds = {(reference.type, reference.kind) for reference in info.references}

    assert ('shop.services.OrderStore', ReferenceKind.ATTRIBUTE) in kinds
    assert ('shop.models.order.OrderLine', ReferenceKind.ATTRIBUTE) in kinds
    assert ('shop.clock.Clock', ReferenceKind.PARAMETER) in kinds
    assert ('shop.models.order.Order.Status', ReferenceKind.RETURN_VALUE) in kinds


def test_generic_annotations(project):
    referenced = project.get_direct_referenced_types('shop.models.order.Order')

    assert 'shop.models.order.OrderLine' in referenced
    assert 'typing.List' in referenced
    assert 'typing.Optional' in referenced


def test_markers_and_arguments(project):
    assert project.has_marker('shop.services.OrderService', 'component')
    assert project.get_marker_arguments('shop.services.OrderService', 'component') == {
        'value': 'Handles orders',
        'technology': 'Python',
    }
    assert project.has_marker('shop.models.order.Order', 'dataclass')
    assert not project.has_marker('shop.clock.Clock', 'component')


def test_function_local_classes_are_not_types(project):
    assert not any(name.endswith('LocalOnly') for name in project.list_types(''))


def test_unknown_type_raises(project):
    with pytest.raises(TypeResolutionError):
        project.get_type('shop.Missing')


def test_missing_root_raises(tmp_path):
    with pytest.raises(ParsingError):
        PythonSourceTypeRepository(tmp_path / 'missing')


def test_refresh_picks_up_new_files(tmp_path):
    write(tmp_path, 'app/a.py', 'class A:\n    pass\n')
    repository = PythonSourceTypeRepository(tmp_path)
    assert repository.list_types('app') == ['app.a.A']

    write(tmp_path, 'app/b.py', 'class B:\n    pass\n')
    repository.refresh()

    assert repository.list_types('app') == ['app.a.A', 'app.b.B']
    assert repository.modules == ['app.a', 'app.b']


def test_configured_interface_bases(tmp_path):
    write(tmp_path, 'app/ports.py', """
        from zope.interface import Interface


        class Port(Interface):
            pass
    """)
    config.set('discovery', 'interface_bases', ['zope.interface.Interface'])

    repository = PythonSourceTypeRepository(tmp_path)

    assert repository.get_type('app.ports.Port').kind == TypeKind.INTERFACE


def test_syntax_errors_do_not_stop_the_scan(tmp_path):
    write(tmp_path, 'app/broken.py', 'class Broken(:\n    pass\n')
    write(tmp_path, 'app/good.py', 'class Good:\n    pass\n')

    repository = PythonSourceTypeRepository(tmp_path)

    assert repository.contains('app.good.Good')


def test_nested_classes_resolve_from_the_enclosing_class_body(tmp_path):
    write(tmp_path, 'app/mod.py', """
        class Inner:
            pass


        class Outer:
            class Inner:
                pass

            class Middle:
                sibling: Inner

            inner: Inner
    """)

    repository = PythonSourceTypeRepository(tmp_path)

    assert repository.get_direct_referenced_types('app.mod.Outer') == ['app.mod.Outer.Inner']
    assert repository.get_direct_referenced_types('app.mod.Outer.Middle') == ['app.mod.Outer.Inner']
