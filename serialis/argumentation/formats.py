"""
Text formats for argumentation frameworks.

Converts between ArgumentationFramework and the two formats used by the
ICCMA/ProBo solver ecosystem:

1. ASPARTIX (apx):
       arg(a).
       arg(b).
       att(a,b).
   '%' starts a comment.

2. Trivial Graph Format (tgf):
       a
       b
       #
       a b
"""

from __future__ import annotations

import logging
import re

from .errors import FrameworkParseError, InvalidFrameworkError
from .models import ArgumentationFramework

logger = logging.getLogger("serialis.argumentation.formats")

_APX_ARG = re.compile(r"^arg\(\s*([^(),\s]+)\s*\)\.$")
_APX_ATT = re.compile(r"^att\(\s*([^(),\s]+)\s*,\s*([^(),\s]+)\s*\)\.$")


def parse_apx(text: str) -> ArgumentationFramework:
    """Parse ASPARTIX input. Attacks may precede their arguments."""
    af = ArgumentationFramework()
    attacks: list[tuple[int, str, str]] = []

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("%", 1)[0].strip()
        if not line:
            continue
        # Several facts may share a line.
        for fact in re.findall(r"[^.]+\.", line) or [line]:
            fact = fact.strip()
            arg_match = _APX_ARG.match(fact)
            if arg_match:
                af.add_argument(arg_match.group(1))
                continue
            att_match = _APX_ATT.match(fact)
            if att_match:
                attacks.append((lineno, att_match.group(1), att_match.group(2)))
                continue
            raise FrameworkParseError(f"expected arg(x). or att(x,y). but got {fact!r}", lineno)
        if re.sub(r"[^.]+\.", "", line).strip():
            raise FrameworkParseError(f"unterminated fact in {line!r}", lineno)

    for lineno, attacker, attacked in attacks:
        try:
            af.add_attack(attacker, attacked)
        except InvalidFrameworkError as e:
            raise FrameworkParseError(str(e), lineno) from e

    logger.debug(f"Parsed apx framework {af!r}")
    return af


def write_apx(af: ArgumentationFramework) -> str:
    lines = [f"arg({arg.name})." for arg in af]
    lines += [
        f"att({att.attacker.name},{att.attacked.name})."
        for att in sorted(af.attacks)
    ]
    return "\n".join(lines) + ("\n" if lines else "")


def parse_tgf(text: str) -> ArgumentationFramework:
    """Parse TGF input: argument lines, a '#' separator, then 'a b' lines."""
    af = ArgumentationFramework()
    in_attacks = False

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        if line == "#":
            if in_attacks:
                raise FrameworkParseError("duplicate '#' separator", lineno)
            in_attacks = True
            continue

        parts = line.split()
        if not in_attacks:
            if len(parts) != 1:
                raise FrameworkParseError(f"expected one argument name, got {line!r}", lineno)
            af.add_argument(parts[0])
        else:
            if len(parts) != 2:
                raise FrameworkParseError(f"expected 'attacker attacked', got {line!r}", lineno)
            try:
                af.add_attack(parts[0], parts[1])
            except InvalidFrameworkError as e:
                raise FrameworkParseError(str(e), lineno) from e

    return af


def write_tgf(af: ArgumentationFramework) -> str:
    lines = [arg.name for arg in af]
    lines.append("#")
    lines += [f"{att.attacker.name} {att.attacked.name}" for att in sorted(af.attacks)]
    return "\n".join(lines) + "\n"


def parse_framework(text: str, fmt: str = "apx") -> ArgumentationFramework:
    """Dispatch on a format name ('apx' or 'tgf')."""
    parsers = {"apx": parse_apx, "tgf": parse_tgf}
    try:
        parser = parsers[fmt.lower()]
    except KeyError:
        raise FrameworkParseError(f"unknown format {fmt!r} (expected apx or tgf)") from None
    return parser(text)
