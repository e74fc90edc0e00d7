"""Host glue: source text in, instrumented source text out.

The two syntax extensions are registered in the order the host expands
them: ``cross_check`` (the instrument pass) first, then ``cross_check_raw``
(hand-written raw checks).
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from xcheck.ast_nodes import Program
from xcheck.config import PassOptions
from xcheck.macros import expand_raw_checks
from xcheck.parser import parse
from xcheck.pass_instrument import instrument
from xcheck.printer import print_program

logger = logging.getLogger(__name__)

Extension = Callable[[Program, PassOptions], Program]


def _cross_check(program: Program, options: PassOptions) -> Program:
    return instrument(program, options)


def _cross_check_raw(program: Program, options: PassOptions) -> Program:
    if not options.expand_raw:
        return program
    return expand_raw_checks(program)


EXTENSIONS: list[tuple[str, Extension]] = [
    ("cross_check", _cross_check),
    ("cross_check_raw", _cross_check_raw),
]


def transform(program: Program, options: Optional[PassOptions] = None) -> Program:
    """Run every registered extension over a parsed program."""
    options = options or PassOptions()
    for name, extension in EXTENSIONS:
        logger.debug("running %s over %s", name, program.filename)
        program = extension(program, options)
    return program


def instrument_source(source: str, filename: str = "<stdin>",
                      options: Optional[PassOptions] = None) -> str:
    """Parse, instrument and print one source file."""
    program = parse(source, filename=filename)
    return print_program(transform(program, options))


def instrument_file(path: str, options: Optional[PassOptions] = None,
                    output: Optional[str] = None) -> str:
    """Instrument a file on disk; writes the result to ``output`` if given."""
    with open(path, "r") as f:
        source = f.read()
    result = instrument_source(source, filename=path, options=options)
    if output:
        with open(output, "w") as f:
            f.write(result)
        logger.info("wrote %s", output)
    return result
