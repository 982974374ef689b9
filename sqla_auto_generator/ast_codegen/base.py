import ast
from typing import List, Optional, Sequence, Union


def add_location(node):
    """Add location info to AST nodes"""
    node.lineno = 1
    node.col_offset = 0
    return node


def create_name(name: str) -> ast.Name:
    return add_location(ast.Name(id=name, ctx=ast.Load()))


def create_dotted_name(path: str) -> ast.expr:
    """Creates a Name/Attribute chain for a dotted path such as 'sa.Column'."""
    parts = path.split(".")
    node: ast.expr = create_name(parts[0])
    for part in parts[1:]:
        node = add_location(ast.Attribute(value=node, attr=part, ctx=ast.Load()))
    return node


def create_docstring(content: str) -> ast.Expr:
    """Creates an AST node for a docstring."""
    return add_location(ast.Expr(value=create_string_constant(content)))


def create_import(
    module: str, names: Optional[List[str]] = None, alias: Optional[str] = None
) -> Union[ast.Import, ast.ImportFrom]:
    """Creates an AST node for an import statement."""
    if names:
        node = ast.ImportFrom(
            module=module,
            names=[ast.alias(name=name, lineno=1, col_offset=0) for name in names],
            level=0
        )
    else:
        node = ast.Import(names=[ast.alias(name=module, asname=alias, lineno=1, col_offset=0)])
    return add_location(node)


def create_assign(target: str, value: ast.expr) -> ast.Assign:
    """Creates an AST node for an assignment."""
    node = ast.Assign(
        targets=[ast.Name(id=target, ctx=ast.Store(), lineno=1, col_offset=0)],
        value=value
    )
    return add_location(node)


def create_ann_assign(target: str, annotation: ast.expr, value: Optional[ast.expr] = None) -> ast.AnnAssign:
    """Creates an AST node for an annotated assignment."""
    node = ast.AnnAssign(
        target=ast.Name(id=target, ctx=ast.Store(), lineno=1, col_offset=0),
        annotation=annotation,
        value=value,
        simple=1
    )
    return add_location(node)


def create_call(
    func: Union[str, ast.expr],
    args: Optional[List[ast.expr]] = None,
    keywords: Optional[List[ast.keyword]] = None,
) -> ast.Call:
    """Creates an AST node for a call; ``func`` may be a dotted path."""
    if isinstance(func, str):
        func = create_dotted_name(func)
    node = ast.Call(
        func=func,
        args=args or [],
        keywords=keywords or []
    )
    return add_location(node)


def create_class_def(
    name: str,
    bases: Sequence[str],
    body: List[ast.stmt],
    keywords: Optional[List[ast.keyword]] = None,
    decorator_list: Optional[List[ast.expr]] = None,
) -> ast.ClassDef:
    """Creates an AST node for a class definition."""
    node = ast.ClassDef(
        name=name,
        bases=[create_dotted_name(base) for base in bases],
        keywords=keywords or [],
        body=body or [add_location(ast.Pass())],
        decorator_list=decorator_list or [],
        type_params=[],
    )
    return add_location(node)


def create_arg(name: str, annotation: Optional[ast.expr] = None) -> ast.arg:
    return add_location(ast.arg(arg=name, annotation=annotation))


def create_function_def(
    name: str,
    args: List[ast.arg],
    body: List[ast.stmt],
    returns: Optional[ast.expr] = None,
    decorator_list: Optional[List[ast.expr]] = None,
) -> ast.FunctionDef:
    """Creates an AST node for a function or method definition."""
    node = ast.FunctionDef(
        name=name,
        args=add_location(ast.arguments(
            posonlyargs=[],
            args=args,
            kwonlyargs=[],
            kw_defaults=[],
            defaults=[],
        )),
        body=body,
        decorator_list=decorator_list or [],
        returns=returns,
        type_params=[],
    )
    return add_location(node)


def create_return(value: ast.expr) -> ast.Return:
    return add_location(ast.Return(value=value))


def create_expr(value: ast.expr) -> ast.Expr:
    return add_location(ast.Expr(value=value))


def create_compare_eq(left: ast.expr, right: ast.expr) -> ast.Compare:
    return add_location(ast.Compare(left=left, ops=[ast.Eq()], comparators=[right]))


def create_subscript(value: ast.expr, items: Sequence[ast.expr]) -> ast.Subscript:
    """Creates ``value[item]`` or ``value[item1, item2]``."""
    if len(items) == 1:
        slice_node = items[0]
    else:
        slice_node = add_location(ast.Tuple(elts=list(items), ctx=ast.Load()))
    return add_location(ast.Subscript(value=value, slice=slice_node, ctx=ast.Load()))


def create_string_constant(value: str) -> ast.Constant:
    """Creates an AST Constant node for a string."""
    return add_location(ast.Constant(value=value))


def create_boolean_constant(value: bool) -> ast.Constant:
    """Creates an AST Constant node for a boolean."""
    return add_location(ast.Constant(value=value))


def create_integer_constant(value: int) -> ast.Constant:
    """Creates an AST Constant node for an integer."""
    return add_location(ast.Constant(value=value))


def create_none_constant() -> ast.Constant:
    """Creates an AST Constant node for None."""
    return add_location(ast.Constant(value=None))


def create_keyword(arg: str, value: ast.expr) -> ast.keyword:
    """Creates an AST keyword argument."""
    return add_location(ast.keyword(arg=arg, value=value))


def create_module(body: List[ast.stmt]) -> ast.Module:
    return add_location(ast.Module(body=body, type_ignores=[]))
