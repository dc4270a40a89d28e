"""
Splits one line of block code into pieces: runs of literal text, and bracketed inserts
(with their brackets). Joining the pieces back together gives the original code.

    "say [Hello!] for (2) secs" -> ["say ", "[Hello!]", " for ", "(2)", " secs"]
"""

from .brackets import getMatchingBracket, isCloseBracket, isOpenBracket

def isLtGt(code, index, lookup=None):
    """
    Return True if the "<" or ">" at code[index] is a less than/greater than sign rather than
    a boolean bracket. We need this to parse eg.

        if <(6) < (3)> then

    where the central "<" must be left alone. We also need to handle blocks with a literal
    lt sign in them, like "when distance < (30)"; those are listed in the language strings.
    """
    if code[index] not in "<>" or index == 0:
        return False

    # hat block containing an lt symbol?
    if lookup != None and lookup.isIgnoredLt(code[:index]):
        return True

    # look for an open bracket ahead
    for i in range(index + 1, len(code)):
        c = code[i]
        if isOpenBracket(c):
            break # might be an innocuous lt/gt!
        if c != " ":
            return False # something else, so it's a bracket
    else:
        return False

    # look for a close bracket behind
    for i in range(index - 1, -1, -1):
        c = code[i]
        if isCloseBracket(c):
            break # must be an innocuous lt/gt!
        if c != " ":
            return False
    else:
        return False

    # a close bracket behind and an open bracket ahead, eg. ") < ["
    return True

def splitIntoPieces(code, lookup=None, errors: list=None):
    """
    Split block code into literal text and bracketed pieces.
    "[...]" inserts never nest, everything else does. An unterminated bracket swallows
    the rest of the line; if errors is given, a message is appended to it.
    """
    pieces = []
    piece = ""
    matchingBracket = ""
    nesting = []

    for i, c in enumerate(code):
        if nesting:
            piece += c
            if isOpenBracket(c) and nesting[-1] != "[" and not isLtGt(code, i, lookup):
                nesting.append(c)
                matchingBracket = getMatchingBracket(c)
            elif c == matchingBracket and not isLtGt(code, i, lookup):
                nesting.pop()
                if not nesting:
                    pieces.append(piece)
                    piece = ""
                else:
                    matchingBracket = getMatchingBracket(nesting[-1])
        else:
            if isOpenBracket(c) and not isLtGt(code, i, lookup):
                nesting.append(c)
                matchingBracket = getMatchingBracket(c)

                if piece:
                    pieces.append(piece)
                piece = ""
            piece += c

    if piece:
        pieces.append(piece) # last piece

    if nesting and errors != None:
        errors.append(f'Unterminated "{nesting[0]}" bracket')

    return pieces
