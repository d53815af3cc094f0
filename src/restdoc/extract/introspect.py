"""Build declaration trees from live Python modules."""

from __future__ import annotations

import ast
import collections
import collections.abc
import dataclasses
import enum
import importlib
import inspect
import textwrap
import types
import typing
from collections.abc import Iterable
from typing import Annotated, Any, Literal, get_args, get_origin

import structlog

from restdoc.extract.declarations import Annotation, Declaration, DeclarationKind
from restdoc.extract.markers import markers_of, parameter_annotations
from restdoc.importing import search_path
from restdoc.models.types import (
    ANY_TYPE,
    ITERABLE_TYPE,
    LIST_TYPE,
    MAP_TYPE,
    NONE_TYPE,
    OPTIONAL_TYPE,
    UNION_TYPE,
    TypeDescriptor,
)

_CONTAINER_NAMES: dict[Any, str] = {
    dict: MAP_TYPE,
    collections.OrderedDict: MAP_TYPE,
    collections.defaultdict: MAP_TYPE,
    collections.abc.Mapping: MAP_TYPE,
    collections.abc.MutableMapping: MAP_TYPE,
    list: LIST_TYPE,
    set: LIST_TYPE,
    frozenset: LIST_TYPE,
    collections.deque: LIST_TYPE,
    collections.abc.Sequence: LIST_TYPE,
    collections.abc.MutableSequence: LIST_TYPE,
    collections.abc.Set: LIST_TYPE,
    collections.abc.MutableSet: LIST_TYPE,
    collections.abc.Iterable: ITERABLE_TYPE,
    collections.abc.Iterator: ITERABLE_TYPE,
    collections.abc.Collection: ITERABLE_TYPE,
}

_GENERATED_DOCS = ("An enumeration.",)


def type_name(cls: Any) -> str:
    """Canonical name of a class: bare for builtins, ``module.QualName`` otherwise."""
    if cls in _CONTAINER_NAMES:
        return _CONTAINER_NAMES[cls]
    module = getattr(cls, "__module__", None)
    qualname = getattr(cls, "__qualname__", None) or getattr(cls, "__name__", None)
    if qualname is None:
        return repr(cls)
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


def describe_type(hint: Any) -> TypeDescriptor:
    """
    Convert a resolved type hint into a :class:`TypeDescriptor`.

    ``dict[str, list[Widget] | None]`` becomes
    ``dict(str, typing.Optional(list(shop.Widget)))``.
    """
    if hint is inspect.Parameter.empty or hint is Any:
        return TypeDescriptor.of(ANY_TYPE)
    if hint is None or hint is type(None):
        return TypeDescriptor.of(NONE_TYPE)
    if isinstance(hint, str):
        # Unresolved forward reference: keep the source text.
        return TypeDescriptor.of(hint)
    if isinstance(hint, typing.TypeVar):
        return TypeDescriptor.of(hint.__name__)

    origin = get_origin(hint)
    args = get_args(hint)
    if origin is Annotated:
        return describe_type(args[0])
    if origin is Literal:
        return TypeDescriptor.of(type_name(type(args[0])) if args else ANY_TYPE)
    if origin in (typing.Union, types.UnionType):
        present = [a for a in args if a is not type(None)]
        if len(present) == 1 and len(present) < len(args):
            return TypeDescriptor.of(OPTIONAL_TYPE, describe_type(present[0]))
        return TypeDescriptor.of(UNION_TYPE, *(describe_type(a) for a in args))
    if origin is not None:
        if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
            return TypeDescriptor.of(LIST_TYPE, describe_type(args[0]))
        return TypeDescriptor.of(
            type_name(origin), *(describe_type(a) for a in args if a is not Ellipsis)
        )
    return TypeDescriptor.of(type_name(hint))


def _annotated_markers(hint: Any) -> list[Annotation]:
    if get_origin(hint) is Annotated:
        return parameter_annotations(hint.__metadata__)
    return []


def _own_doc(obj: Any) -> str | None:
    """The object's own docstring, cleaned. Inherited and generated docstrings are ignored."""
    if inspect.isclass(obj):
        doc = obj.__dict__.get("__doc__")
        if dataclasses.is_dataclass(obj) and doc and doc.startswith(f"{obj.__name__}("):
            return None
    else:
        doc = getattr(obj, "__doc__", None)
    if not isinstance(doc, str) or doc in _GENERATED_DOCS:
        return None
    return inspect.cleandoc(doc) or None


def attribute_docs(cls: type) -> dict[str, str]:
    """
    Attribute docstrings of a class body: a string literal directly after an assignment.

    ::

        class Color(Enum):
            RED = "red"
            \"\"\"Stop.\"\"\"

    yields ``{"RED": "Stop."}``. Returns an empty mapping when the source is
    not available.
    """
    try:
        tree = ast.parse(textwrap.dedent(inspect.getsource(cls)))
    except (OSError, TypeError, SyntaxError):
        return {}
    if not tree.body or not isinstance(tree.body[0], ast.ClassDef):
        return {}
    body = tree.body[0].body
    docs: dict[str, str] = {}
    for node, following in zip(body, body[1:]):
        if not (
            isinstance(following, ast.Expr)
            and isinstance(following.value, ast.Constant)
            and isinstance(following.value.value, str)
        ):
            continue
        if isinstance(node, ast.Assign):
            targets = node.targets
        elif isinstance(node, ast.AnnAssign):
            targets = [node.target]
        else:
            continue
        for target in targets:
            if isinstance(target, ast.Name):
                docs[target.id] = inspect.cleandoc(following.value.value)
    return docs


class DeclarationScanner:
    """
    Walks Python modules and produces one :class:`Declaration` tree per module.

    Per module the tree contains its top-level classes (recursively with their
    inner classes) and functions. Per class it contains:

    - enum constants, with attribute docstrings as their docs;
    - the class's own ``__init__`` as a CONSTRUCTOR whose parameters carry the
      ``Annotated`` markers, or, without an own ``__init__``, the annotated
      class attributes as FIELD declarations;
    - every function defined in the class body as a METHOD.
    """

    def __init__(self, search_paths: Iterable[str] = ()) -> None:
        self._search_paths = list(search_paths)
        self._logger = structlog.get_logger("restdoc.scanner")

    def scan(self, modules: Iterable[str | types.ModuleType]) -> list[Declaration]:
        """
        Import and scan modules.

        Args:
            modules: Dotted module names or already imported modules.

        Returns:
            One MODULE declaration per input, in input order.

        Raises:
            ImportError: A named module cannot be imported.
        """
        roots: list[Declaration] = []
        with search_path(self._search_paths):
            for module in modules:
                if isinstance(module, str):
                    module = importlib.import_module(module)
                roots.append(self.scan_module(module))
        return roots

    def scan_module(self, module: types.ModuleType) -> Declaration:
        decl = Declaration(
            name=module.__name__,
            qualified_name=module.__name__,
            kind=DeclarationKind.MODULE,
            doc=_own_doc(module),
            annotations=markers_of(module),
        )
        for name, obj in vars(module).items():
            if getattr(obj, "__module__", None) != module.__name__:
                continue
            if inspect.isclass(obj) and obj.__qualname__ == name:
                decl.add_enclosed(self._scan_class(obj))
            elif inspect.isfunction(obj):
                decl.add_enclosed(self._scan_function(obj, DeclarationKind.METHOD))
        self._logger.debug(
            "module_scanned", module=module.__name__, declarations=len(decl.enclosed)
        )
        return decl

    def _scan_class(self, cls: type) -> Declaration:
        is_enum = issubclass(cls, enum.Enum)
        qualified = type_name(cls)
        decl = Declaration(
            name=cls.__name__,
            qualified_name=qualified,
            kind=DeclarationKind.ENUM if is_enum else DeclarationKind.CLASS,
            type=TypeDescriptor.of(qualified),
            doc=_own_doc(cls),
            annotations=markers_of(cls),
        )

        if is_enum:
            docs = attribute_docs(cls)
            for member in cls:
                decl.add_enclosed(
                    Declaration(
                        name=member.name,
                        qualified_name=f"{qualified}.{member.name}",
                        kind=DeclarationKind.ENUM_CONSTANT,
                        type=TypeDescriptor.of(qualified),
                        doc=docs.get(member.name),
                    )
                )
        elif "__init__" in cls.__dict__ and inspect.isfunction(cls.__dict__["__init__"]):
            decl.add_enclosed(
                self._scan_function(
                    cls.__dict__["__init__"],
                    DeclarationKind.CONSTRUCTOR,
                    skip_first=True,
                    extra_hints=self._class_hints(cls) if dataclasses.is_dataclass(cls) else None,
                )
            )
        else:
            for field_decl in self._scan_fields(cls, qualified):
                decl.add_enclosed(field_decl)

        for name, attr in cls.__dict__.items():
            if inspect.isclass(attr):
                if attr.__qualname__ == f"{cls.__qualname__}.{name}":
                    decl.add_enclosed(self._scan_class(attr))
                continue
            if name == "__init__":
                continue
            func, skip_first, extra = self._unwrap(attr)
            if func is None or not func.__qualname__.startswith(f"{cls.__qualname__}."):
                continue
            decl.add_enclosed(
                self._scan_function(
                    func, DeclarationKind.METHOD, skip_first=skip_first, extra_markers=extra
                )
            )
        return decl

    def _scan_fields(self, cls: type, qualified: str) -> list[Declaration]:
        own = inspect.get_annotations(cls)
        if not own:
            return []
        hints = self._class_hints(cls)
        fields: list[Declaration] = []
        for name, raw in own.items():
            hint = hints.get(name, raw)
            fields.append(
                Declaration(
                    name=name,
                    qualified_name=f"{qualified}.{name}",
                    kind=DeclarationKind.FIELD,
                    type=describe_type(hint),
                    annotations=_annotated_markers(hint),
                )
            )
        return fields

    def _scan_function(
        self,
        func: types.FunctionType,
        kind: DeclarationKind,
        *,
        skip_first: bool = False,
        extra_markers: list[Annotation] | None = None,
        extra_hints: dict[str, Any] | None = None,
    ) -> Declaration:
        qualified = f"{func.__module__}.{func.__qualname__}"
        hints = self._hints(func, qualified)
        if extra_hints:
            hints = {**hints, **extra_hints}
        decl = Declaration(
            name=func.__name__,
            qualified_name=qualified,
            kind=kind,
            type=describe_type(hints.get("return", inspect.Parameter.empty)),
            doc=_own_doc(func),
            annotations=[*(extra_markers or []), *markers_of(func)],
        )
        try:
            params = list(inspect.signature(func).parameters.values())
        except (TypeError, ValueError):
            return decl
        if skip_first:
            params = params[1:]
        for param in params:
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            hint = hints.get(param.name, param.annotation)
            decl.add_parameter(
                Declaration(
                    name=param.name,
                    qualified_name=f"{qualified}.{param.name}",
                    kind=DeclarationKind.PARAMETER,
                    type=describe_type(hint),
                    annotations=_annotated_markers(hint),
                )
            )
        return decl

    @staticmethod
    def _unwrap(attr: Any) -> tuple[types.FunctionType | None, bool, list[Annotation]]:
        """Return ``(function, skip_first_parameter, markers on the wrapper)``."""
        if isinstance(attr, staticmethod):
            return attr.__func__, False, markers_of(attr)
        if isinstance(attr, classmethod):
            return attr.__func__, True, markers_of(attr)
        if inspect.isfunction(attr):
            return attr, True, []
        return None, False, []

    def _hints(self, func: Any, qualified: str) -> dict[str, Any]:
        try:
            return typing.get_type_hints(func, include_extras=True)
        except Exception as exc:
            self._logger.debug("type_hints_unresolved", name=qualified, error=str(exc))
            return {}

    def _class_hints(self, cls: type) -> dict[str, Any]:
        return self._hints(cls, type_name(cls))
