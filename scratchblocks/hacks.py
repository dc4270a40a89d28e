"""
Hacks for blocks whose category or shape depends on their arguments.

There is a small fixed set of them, so each one is a member of BlockHack and the
database maps blockids onto members. applyHack does the dispatching.
"""

import re
from enum import Enum

from .brackets import stripBrackets

class BlockHack(Enum):
    MATH_OR_ATTRIBUTE = "_ of _"    # operators if the first argument is a math function, otherwise sensing
    LIST_OR_STRING_LENGTH = "length of _"   # list if the argument is a dropdown, otherwise operators
    STOP_CAP = "stop _"     # cap block unless stopping "other scripts in sprite"

HACKS_BY_ID = {hack.value: hack for hack in BlockHack}

def _dropdownText(arg, lookup):
    return lookup.minify(re.sub(r" v$", "", stripBrackets(arg)))

def applyHack(info, args, lookup):
    """ Adjust info in place. args are the raw argument pieces, lookup supplies the language strings """
    hack = HACKS_BY_ID.get(info.blockid)
    if hack == None or not args or type(args[0]) != str:
        return

    if hack == BlockHack.MATH_OR_ATTRIBUTE:
        func = _dropdownText(args[0], lookup)
        if func == "e^":
            func = "e ^"
        if func == "10^":
            func = "10 ^"
        info.category = "operators" if func in lookup.math else "sensing"

    elif hack == BlockHack.LIST_OR_STRING_LENGTH:
        info.category = "list" if re.fullmatch(r"\[.* v\]", args[0]) else "operators"

    elif hack == BlockHack.STOP_CAP:
        what = _dropdownText(args[0], lookup)
        info.shape = None if what in lookup.osis else "cap"
