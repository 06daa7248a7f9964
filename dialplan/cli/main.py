"""Dialplan command-line interface.

Commands:
    dialplan match <pattern> <input>                 Match a number against a telco expression
    dialplan transform <input> <pattern> <template>  Reformat a matched number
    dialplan route <rules> <destination>             Route a number through a dial plan
    dialplan check <rules>                           Validate a dial plan rules file
"""

import sys
from typing import Optional

import typer

from dialplan.cli.output import OutputFormat, output, output_error
from dialplan.cli.utils import (
    EXIT_NO_MATCH,
    EXIT_PARSE_ERROR,
    EXIT_TRANSFORM_ERROR,
    dataclass_to_dict,
    read_input,
)
from dialplan.core.exceptions import (
    CaptureLengthMismatchError,
    DialPlanConfigError,
    NoMatchError,
    TelcoExpressionError,
)
from dialplan.core.logging import configure_logging
from dialplan.routing.models import Direction
from dialplan.routing.rules import load_dial_plan
from dialplan.telco.expression import TelcoExpressionParser
from dialplan.telco.transformer import AddressTransformer

app = typer.Typer(
    name="dialplan",
    help="Match, transform and route telephone numbers with telco expressions.",
    no_args_is_help=True,
)

FORMAT_OPTION = typer.Option(
    OutputFormat.json,
    "--format",
    "-f",
    help="Output format",
)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Enable JSON logging at this level (DEBUG, INFO, ...)",
    ),
) -> None:
    """Telco expression and dial plan tools."""
    if log_level:
        configure_logging(log_level=log_level, stream=sys.stderr)


@app.command("match")
def match_cmd(
    pattern: str = typer.Argument(..., help="Telco expression, e.g. NxxXXXX"),
    source: str = typer.Argument(..., help="Number to match, or '-' for stdin"),
    format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Match a number against a telco expression.

    Exits with status 1 when the number does not match.

    Examples:
        dialplan match NxxXXXX 5551212
        echo 5551212 | dialplan match NxxXXXX -
    """
    value = read_input(source)
    try:
        result = TelcoExpressionParser().match_result(pattern, value)
    except TelcoExpressionError as e:
        output_error(code=e.code, message=e.message, exit_code=EXIT_PARSE_ERROR)

    output(
        {
            "pattern": pattern,
            "input": value,
            "matched": result.matched,
            "groups": list(result.groups),
            "rest": result.rest,
        },
        format,
    )
    if not result.matched:
        raise typer.Exit(code=EXIT_NO_MATCH)


@app.command("transform")
def transform_cmd(
    source: str = typer.Argument(..., help="Number to reformat, or '-' for stdin"),
    pattern: str = typer.Argument(..., help="Telco expression the number must match"),
    template: str = typer.Argument(..., help="Output template, e.g. '1 (212) $$$-$$$$'"),
    lenient: bool = typer.Option(
        False,
        "--lenient",
        help="Substitute whole capture groups regardless of $-run length",
    ),
    format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Reformat a number through an output template.

    Examples:
        dialplan transform 5551212 NxxXXXX '1 (212) $$$-$$$$'
        dialplan transform 5551212345 NxxXXXXZ '$$$-$$$$ ext Z'
    """
    value = read_input(source)
    transformer = AddressTransformer(strict=False) if lenient else AddressTransformer()
    try:
        formatted = transformer.transform(value, pattern, template)
    except TelcoExpressionError as e:
        output_error(code=e.code, message=e.message, exit_code=EXIT_PARSE_ERROR)
    except NoMatchError as e:
        output_error(code=e.code, message=e.message, exit_code=EXIT_NO_MATCH)
    except CaptureLengthMismatchError as e:
        output_error(code=e.code, message=e.message, exit_code=EXIT_TRANSFORM_ERROR)

    output({"input": value, "pattern": pattern, "result": formatted}, format)


@app.command("route")
def route_cmd(
    rules: str = typer.Argument(..., help="Dial plan rules file (JSON)"),
    destination: str = typer.Argument(..., help="Destination number"),
    sender: Optional[str] = typer.Option(None, "--sender", "-s", help="Sender (caller) number"),
    direction: Optional[Direction] = typer.Option(
        None,
        "--direction",
        "-d",
        help="Only consider routes in this direction",
    ),
    format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Route a destination number through a dial plan.

    Exits with status 1 when no route applies.
    """
    try:
        dial_plan = load_dial_plan(rules)
        plan = dial_plan.route(destination, sender, direction=direction)
    except DialPlanConfigError as e:
        output_error(code=e.code, message=e.message, exit_code=EXIT_PARSE_ERROR)
    except CaptureLengthMismatchError as e:
        output_error(code=e.code, message=e.message, exit_code=EXIT_TRANSFORM_ERROR)

    if plan is None:
        output_error(
            code="NO_ROUTE",
            message=f"No route for destination {destination}",
            exit_code=EXIT_NO_MATCH,
        )

    output(dataclass_to_dict(plan), format)


@app.command("check")
def check_cmd(
    rules: str = typer.Argument(..., help="Dial plan rules file (JSON)"),
    format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Validate a dial plan rules file, compiling every pattern."""
    try:
        dial_plan = load_dial_plan(rules)
    except DialPlanConfigError as e:
        output_error(code=e.code, message=e.message, exit_code=EXIT_PARSE_ERROR)

    output({"rules": rules, "valid": True, "routes": len(dial_plan)}, format)


if __name__ == "__main__":
    app()
