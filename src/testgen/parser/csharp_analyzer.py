"""C# source analyzer using Tree-sitter."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

from tree_sitter import Node

from testgen import heuristics
from testgen.errors import AnalysisError
from testgen.logging import get_logger
from testgen.models import (
    AccessModifier,
    AnalysisResult,
    AttributeInfo,
    ClassInfo,
    ConstructorInfo,
    DependencyInfo,
    MethodInfo,
    ParameterInfo,
    PropertyInfo,
)
from testgen.parser.base import (
    calculate_cyclomatic_complexity,
    create_parser,
    find_child_by_type,
    find_children_by_type,
    find_descendants_by_type,
    get_node_text,
)

TYPE_DECLARATIONS: dict[str, str] = {
    "class_declaration": "class",
    "struct_declaration": "struct",
    "record_declaration": "record",
    "record_struct_declaration": "record",
    "interface_declaration": "interface",
}

NAME_NODE_TYPES = ("identifier", "qualified_name", "generic_name", "alias_qualified_name")

_XML_TAG = re.compile(r"<[^>]+>")


class CSharpAnalyzer:
    """Build AnalysisResults from C# files.

    Classes, structs, records and interfaces are collected in document order,
    nested declarations included. Each type only owns the members declared
    directly in its own body.
    """

    file_type = "csharp"
    supported_extensions: tuple[str, ...] = (".cs",)

    def __init__(self) -> None:
        self._parser = create_parser("csharp")
        self._logger = get_logger()

    def can_analyze(self, file_path: Path) -> bool:
        return Path(file_path).suffix.lower() in self.supported_extensions

    async def analyze(self, file_path: Path) -> AnalysisResult:
        """Analyze a single C# file.

        Raises:
            AnalysisError: The file cannot be read, or it does not parse
                into any type declaration.
        """
        path = Path(file_path)
        try:
            source = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            self._logger.error(f"Failed to read {path}: {e}")
            raise AnalysisError(f"Cannot read source file: {e}", str(path)) from e

        return self.analyze_source(source, str(path))

    async def analyze_batch(self, file_paths: list[Path]) -> list[AnalysisResult]:
        return list(await asyncio.gather(*(self.analyze(p) for p in file_paths)))

    def analyze_source(self, source: bytes, file_path: str = "<memory>") -> AnalysisResult:
        """Analyze already-loaded source bytes."""
        tree = self._parser.parse(source)
        root = tree.root_node

        result = AnalysisResult(file_path=file_path, file_type=self.file_type)
        result.namespace = self._extract_namespace(root, source)
        result.usings = self._extract_usings(root, source)

        type_nodes = [n for n in _walk(root) if n.type in TYPE_DECLARATIONS]
        if root.has_error:
            if not type_nodes:
                self._logger.error(f"Failed to parse {file_path}: syntax errors")
                raise AnalysisError("Source file has syntax errors", file_path)
            self._logger.debug(f"{file_path} has syntax errors; using partial tree")
            result.metadata["parse_errors"] = True

        for node in type_nodes:
            cls = self._extract_class(node, source, result.namespace)
            result.classes.append(cls)
            result.methods.extend(cls.methods)
            result.properties.extend(cls.properties)

        result.dependencies = self._extract_dependencies(result.classes)
        result.metadata["line_count"] = root.end_point[0] + 1
        return result

    # -------------------------------------------------------------------------
    # File level
    # -------------------------------------------------------------------------

    def _extract_namespace(self, root: Node, source: bytes) -> str:
        for node in _walk(root):
            if node.type in ("namespace_declaration", "file_scoped_namespace_declaration"):
                name = node.child_by_field_name("name")
                if name is None:
                    name = _first_child_of_types(node, NAME_NODE_TYPES)
                return get_node_text(name, source) if name is not None else ""
        return ""

    def _extract_usings(self, root: Node, source: bytes) -> list[str]:
        usings = []
        for node in find_descendants_by_type(root, "using_directive"):
            # using X = Y; records Y, which is the last name in the directive
            names = [c for c in node.children if c.type in NAME_NODE_TYPES]
            if names:
                usings.append(get_node_text(names[-1], source))
        return usings

    # -------------------------------------------------------------------------
    # Types
    # -------------------------------------------------------------------------

    def _extract_class(self, node: Node, source: bytes, namespace: str) -> ClassInfo:
        kind = TYPE_DECLARATIONS[node.type]
        name_node = node.child_by_field_name("name") or find_child_by_type(node, "identifier")
        name = get_node_text(name_node, source) if name_node is not None else ""
        modifiers = _modifiers(node, source)

        cls = ClassInfo(
            name=name,
            full_name=f"{namespace}.{name}" if namespace else name,
            namespace=namespace,
            kind=kind,
            access_modifier=_access_modifier(modifiers),
            is_abstract="abstract" in modifiers,
            is_sealed="sealed" in modifiers,
            is_static="static" in modifiers,
            attributes=self._extract_attributes(node, source),
            documentation=_documentation(node, source),
            start_line=node.start_point[0] + 1,
            end_line=node.end_point[0] + 1,
        )

        base_list = find_child_by_type(node, "base_list")
        if base_list is not None:
            for base in base_list.named_children:
                if base.type == "primary_constructor_base_type":
                    base = base.named_children[0] if base.named_children else base
                base_name = get_node_text(base, source)
                if heuristics.is_interface_name(base_name.split(".")[-1]):
                    cls.interfaces.append(base_name)
                else:
                    cls.base_types.append(base_name)

        attribute_names = [a.name for a in cls.attributes]
        cls.is_controller = heuristics.is_controller(
            name, cls.base_types + cls.interfaces, attribute_names
        )
        cls.is_service = heuristics.is_service(name)
        cls.is_repository = heuristics.is_repository(name)

        # Interface members are implicitly public
        member_default = AccessModifier.PUBLIC if kind == "interface" else AccessModifier.PRIVATE

        primary = node.child_by_field_name("parameters") or find_child_by_type(node, "parameter_list")
        if primary is not None:
            cls.constructors.append(
                ConstructorInfo(
                    name=name,
                    access_modifier=cls.access_modifier,
                    parameters=self._extract_parameters(primary, source),
                    is_primary=True,
                )
            )

        body = node.child_by_field_name("body") or find_child_by_type(node, "declaration_list")
        if body is not None:
            for member in body.children:
                if member.type == "method_declaration":
                    cls.methods.append(self._extract_method(member, source, member_default))
                elif member.type == "property_declaration":
                    cls.properties.append(self._extract_property(member, source, member_default))
                elif member.type == "constructor_declaration":
                    cls.constructors.append(self._extract_constructor(member, source))

        return cls

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    def _extract_method(
        self, node: Node, source: bytes, default_access: AccessModifier
    ) -> MethodInfo:
        name_node = node.child_by_field_name("name")
        return_node = node.child_by_field_name("returns") or node.child_by_field_name("type")
        if return_node is None:
            return_node = _declared_type(node, name_node)
        modifiers = _modifiers(node, source)
        return_type = get_node_text(return_node, source) if return_node is not None else "void"

        method = MethodInfo(
            name=get_node_text(name_node, source) if name_node is not None else "",
            return_type=return_type,
            access_modifier=_access_modifier(modifiers, default_access),
            is_async="async" in modifiers or "Task" in return_type,
            is_static="static" in modifiers,
            is_virtual="virtual" in modifiers,
            is_override="override" in modifiers,
            is_abstract="abstract" in modifiers,
            attributes=self._extract_attributes(node, source),
            documentation=_documentation(node, source),
            start_line=node.start_point[0] + 1,
            end_line=node.end_point[0] + 1,
        )

        params = node.child_by_field_name("parameters") or find_child_by_type(node, "parameter_list")
        if params is not None:
            method.parameters = self._extract_parameters(params, source)

        body = _body(node)
        if body is not None:
            method.cyclomatic_complexity = calculate_cyclomatic_complexity(body, "csharp", source)
            method.thrown_exceptions = _thrown_exceptions(body, source)

        return method

    def _extract_constructor(self, node: Node, source: bytes) -> ConstructorInfo:
        name_node = node.child_by_field_name("name") or find_child_by_type(node, "identifier")
        modifiers = _modifiers(node, source)
        ctor = ConstructorInfo(
            name=get_node_text(name_node, source) if name_node is not None else "",
            access_modifier=_access_modifier(modifiers),
            attributes=self._extract_attributes(node, source),
            is_static="static" in modifiers,
            documentation=_documentation(node, source),
        )

        params = node.child_by_field_name("parameters") or find_child_by_type(node, "parameter_list")
        if params is not None:
            ctor.parameters = self._extract_parameters(params, source)

        initializer = find_child_by_type(node, "constructor_initializer")
        if initializer is not None:
            target = get_node_text(initializer, source).lstrip(":").strip()
            ctor.calls_base = target.startswith("base")
            ctor.calls_this = target.startswith("this")

        return ctor

    def _extract_property(
        self, node: Node, source: bytes, default_access: AccessModifier
    ) -> PropertyInfo:
        name_node = node.child_by_field_name("name")
        type_node = node.child_by_field_name("type")
        if type_node is None:
            type_node = _declared_type(node, name_node)
        modifiers = _modifiers(node, source)

        prop = PropertyInfo(
            name=get_node_text(name_node, source) if name_node is not None else "",
            type=get_node_text(type_node, source) if type_node is not None else "object",
            access_modifier=_access_modifier(modifiers, default_access),
            is_static="static" in modifiers,
            is_virtual="virtual" in modifiers,
            attributes=self._extract_attributes(node, source),
        )

        accessors = node.child_by_field_name("accessors") or find_child_by_type(node, "accessor_list")
        if accessors is not None:
            bodiless = True
            for accessor in find_children_by_type(accessors, "accessor_declaration"):
                keyword = _accessor_keyword(accessor, source)
                if keyword == "get":
                    prop.has_getter = True
                elif keyword == "set":
                    prop.has_setter = True
                if _body(accessor) is not None:
                    bodiless = False
            prop.is_auto_property = bodiless

        value = node.child_by_field_name("value")
        if value is not None and value.type == "arrow_expression_clause":
            prop.has_getter = True
        elif value is not None:
            prop.default_value = get_node_text(value, source)
        elif find_child_by_type(node, "arrow_expression_clause") is not None:
            prop.has_getter = True

        return prop

    def _extract_parameters(self, node: Node, source: bytes) -> list[ParameterInfo]:
        params = []
        for child in node.children:
            if child.type == "parameter":
                params.append(self._extract_parameter(child, source))
            elif child.type == "parameter_array":
                param = self._extract_parameter(child, source)
                param.is_params = True
                params.append(param)
            elif child.type == "params":
                # Newer grammars inline the params array into the parameter list
                name_node = node.child_by_field_name("name")
                type_node = node.child_by_field_name("type")
                if name_node is not None:
                    params.append(
                        ParameterInfo(
                            name=get_node_text(name_node, source),
                            type=get_node_text(type_node, source) if type_node is not None else "object[]",
                            is_params=True,
                        )
                    )
        return params

    def _extract_parameter(self, node: Node, source: bytes) -> ParameterInfo:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            identifiers = find_children_by_type(node, "identifier")
            name_node = identifiers[-1] if identifiers else None
        type_node = node.child_by_field_name("type")
        if type_node is None:
            type_node = _declared_type(node, name_node)

        param = ParameterInfo(
            name=get_node_text(name_node, source) if name_node is not None else "",
            type=get_node_text(type_node, source) if type_node is not None else "object",
            attributes=self._extract_attributes(node, source),
        )

        # Newer grammars put `=` and the value directly under the parameter
        children = node.children
        for index, child in enumerate(children):
            if child.type == "=":
                param.is_optional = True
                value = next((c for c in children[index + 1 :] if c.is_named), None)
                param.default_value = get_node_text(value, source) if value is not None else None
                break
        else:
            default = find_child_by_type(node, "equals_value_clause")
            if default is not None:
                param.is_optional = True
                values = default.named_children
                param.default_value = get_node_text(values[-1], source) if values else None

        for child in node.children:
            text = get_node_text(child, source)
            if child.type in ("modifier", "parameter_modifier", "params", "out", "ref"):
                if text == "params":
                    param.is_params = True
                elif text == "out":
                    param.is_out = True
                elif text == "ref":
                    param.is_ref = True

        return param

    def _extract_attributes(self, node: Node, source: bytes) -> list[AttributeInfo]:
        attributes = []
        for attr_list in find_children_by_type(node, "attribute_list"):
            for attr in find_children_by_type(attr_list, "attribute"):
                name_node = attr.child_by_field_name("name") or _first_child_of_types(
                    attr, NAME_NODE_TYPES
                )
                if name_node is None:
                    continue
                name = get_node_text(name_node, source)
                info = AttributeInfo(
                    name=name,
                    full_name=name if name.endswith("Attribute") else f"{name}Attribute",
                )
                arg_list = find_child_by_type(attr, "attribute_argument_list")
                if arg_list is not None:
                    for arg in find_children_by_type(arg_list, "attribute_argument"):
                        self._add_attribute_argument(info, arg, source)
                attributes.append(info)
        return attributes

    def _add_attribute_argument(self, info: AttributeInfo, arg: Node, source: bytes) -> None:
        named = find_child_by_type(arg, "name_equals") or find_child_by_type(arg, "name_colon")
        expressions = [c for c in arg.named_children if c.type not in ("name_equals", "name_colon")]
        value = get_node_text(expressions[-1], source) if expressions else ""
        if named is not None:
            key_node = _first_child_of_types(named, ("identifier",))
            key = get_node_text(key_node, source) if key_node is not None else ""
            info.named_arguments[key] = value
        else:
            info.arguments.append(value)

    # -------------------------------------------------------------------------
    # Dependencies
    # -------------------------------------------------------------------------

    def _extract_dependencies(self, classes: list[ClassInfo]) -> list[DependencyInfo]:
        """Treat constructor parameters that look injectable as mockable dependencies."""
        dependencies: list[DependencyInfo] = []
        seen: set[tuple[str, str]] = set()
        for cls in classes:
            for ctor in cls.constructors:
                for param in ctor.parameters:
                    if not heuristics.requires_mock(param.type):
                        continue
                    key = (param.name, param.type)
                    if key in seen:
                        continue
                    seen.add(key)
                    dependencies.append(
                        DependencyInfo(
                            name=param.name,
                            type=param.type,
                            interface_type=param.type,
                            is_injected=True,
                            lifetime=heuristics.guess_lifetime(param.type),
                            requires_mock=True,
                        )
                    )
        return dependencies


def _walk(node: Node) -> list[Node]:
    """All nodes in document order (pre-order)."""
    nodes = [node]
    for child in node.children:
        nodes.extend(_walk(child))
    return nodes


def _first_child_of_types(node: Node, types: tuple[str, ...]) -> Node | None:
    for child in node.children:
        if child.type in types:
            return child
    return None


def _modifiers(node: Node, source: bytes) -> set[str]:
    return {get_node_text(c, source) for c in find_children_by_type(node, "modifier")}


def _access_modifier(
    modifiers: set[str], default: AccessModifier = AccessModifier.PRIVATE
) -> AccessModifier:
    if "public" in modifiers:
        return AccessModifier.PUBLIC
    if "protected" in modifiers and "internal" in modifiers:
        return AccessModifier.PROTECTED_INTERNAL
    if "private" in modifiers and "protected" in modifiers:
        return AccessModifier.PRIVATE_PROTECTED
    if "protected" in modifiers:
        return AccessModifier.PROTECTED
    if "internal" in modifiers:
        return AccessModifier.INTERNAL
    if "private" in modifiers:
        return AccessModifier.PRIVATE
    return default


def _declared_type(node: Node, name_node: Node | None) -> Node | None:
    """First named child before the member name that is not a modifier or attribute."""
    for child in node.named_children:
        if name_node is not None and child.start_byte >= name_node.start_byte:
            break
        if child.type not in ("modifier", "attribute_list", "parameter_modifier", "explicit_interface_specifier"):
            return child
    return None


def _body(node: Node) -> Node | None:
    body = node.child_by_field_name("body")
    if body is not None and body.type in ("block", "arrow_expression_clause"):
        return body
    return find_child_by_type(node, "block") or find_child_by_type(node, "arrow_expression_clause")


def _accessor_keyword(node: Node, source: bytes) -> str:
    name = node.child_by_field_name("name")
    if name is not None:
        return get_node_text(name, source)
    for child in node.children:
        if child.type in ("get", "set", "init", "add", "remove"):
            return child.type
    return ""


def _thrown_exceptions(body: Node, source: bytes) -> list[str]:
    thrown: list[str] = []
    for kind in ("throw_statement", "throw_expression"):
        for throw in find_descendants_by_type(body, kind):
            for creation in find_descendants_by_type(throw, "object_creation_expression"):
                type_node = creation.child_by_field_name("type")
                if type_node is not None:
                    name = get_node_text(type_node, source)
                    if name not in thrown:
                        thrown.append(name)
    return thrown


def _documentation(node: Node, source: bytes) -> str | None:
    """Text of the ``///`` comment block directly above a declaration."""
    lines: list[str] = []
    sibling = node.prev_sibling
    while sibling is not None and sibling.type == "comment":
        text = get_node_text(sibling, source).strip()
        if not text.startswith("///"):
            break
        lines.insert(0, text[3:].strip())
        sibling = sibling.prev_sibling

    cleaned = " ".join(_XML_TAG.sub("", line).strip() for line in lines)
    cleaned = " ".join(cleaned.split())
    return cleaned or None
