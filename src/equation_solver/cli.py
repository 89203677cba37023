"""Equation solver CLI entry point."""

import logging
from pathlib import Path

import click

from equation_solver.bindings import BindingsError, load_bindings, parse_assignment
from equation_solver.config import ConfigError, SolverConfig
from equation_solver.errors import EquationError
from equation_solver.expression import Expression
from equation_solver.parser import Group, Number, Operator, Variable


def _load_expression(equation: str, config: SolverConfig) -> Expression:
    """Parse an equation, exiting with status 1 on a parse error."""
    try:
        return Expression(equation, config)
    except EquationError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with solver settings (defaults to the environment).",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None):
    """Equation solver: parse, bind and evaluate equations."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        if config_path is not None:
            ctx.obj = SolverConfig.from_yaml(config_path)
        else:
            ctx.obj = SolverConfig.from_env()
    except ConfigError as e:
        raise click.UsageError(str(e))


@cli.command()
@click.argument("equation")
@click.option(
    "--set",
    "assignments",
    multiple=True,
    metavar="NAME=VALUE",
    help="Bind a variable. May be given more than once.",
)
@click.option(
    "--vars",
    "vars_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file of variable values. --set takes precedence.",
)
@click.option(
    "--no-input",
    is_flag=True,
    default=False,
    help="Do not prompt for unbound variables.",
)
@click.pass_obj
def solve(
    config: SolverConfig,
    equation: str,
    assignments: tuple[str, ...],
    vars_path: Path | None,
    no_input: bool,
):
    """Evaluate EQUATION, prompting for any variable left unbound."""
    expression = _load_expression(equation, config)

    values: dict[str, float] = {}
    try:
        if vars_path is not None:
            values.update(load_bindings(vars_path))
        for assignment in assignments:
            name, value = parse_assignment(assignment)
            values[name] = value
    except BindingsError as e:
        raise click.UsageError(str(e))
    expression.bind_all(values)

    if not no_input:
        for name in sorted(expression.list_unresolved_variables()):
            value = click.prompt(f"Enter a value for {name}", type=float)
            expression.bind(name, value)

    try:
        result = expression.evaluate()
    except EquationError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"Solution: {result}")


@cli.command("vars")
@click.argument("equation")
@click.pass_obj
def vars_cmd(config: SolverConfig, equation: str):
    """List the unbound variables of EQUATION."""
    expression = _load_expression(equation, config)
    for name in sorted(expression.list_unresolved_variables()):
        click.echo(name)


def _echo_tree(group: Group) -> None:
    stack = [(node, 0) for node in reversed(group.nodes)]
    while stack:
        node, indent = stack.pop()
        prefix = "  " * indent
        if isinstance(node, Number):
            click.echo(f"{prefix}number {node.value!r}")
        elif isinstance(node, Variable):
            click.echo(f"{prefix}variable {node.name}")
        elif isinstance(node, Operator):
            kind = "binary" if node.is_binary else "function"
            click.echo(f"{prefix}{kind} {node.operator.value}")
        elif isinstance(node, Group):
            click.echo(f"{prefix}group")
            stack.extend((child, indent + 1) for child in reversed(node.nodes))


@cli.command()
@click.argument("equation")
@click.pass_obj
def tokens(config: SolverConfig, equation: str):
    """Print the token tree of EQUATION."""
    expression = _load_expression(equation, config)
    _echo_tree(expression.group)
