""" Bracket utilities. The four openers come first, each closer sits 4 places after its opener """

BRACKETS = "([<{)]>}"

def isOpenBracket(char):
    return len(char) == 1 and 0 <= BRACKETS.find(char) < 4

def isCloseBracket(char):
    return len(char) == 1 and BRACKETS.find(char) > 3

def getMatchingBracket(char):
    """ Return the closer for an opening bracket. Matching only works one way, closers raise a ValueError """
    if not isOpenBracket(char):
        raise ValueError(f'"{char}" is not an opening bracket')

    return BRACKETS[BRACKETS.index(char) + 4]

def stripBrackets(code):
    """ Strip one level of brackets from around a piece. A missing closer is tolerated """
    if code and isOpenBracket(code[0]):
        if code[-1] == getMatchingBracket(code[0]):
            code = code[:-1]
        code = code[1:]
    return code

def isBlockPiece(piece):
    """ A piece is a block (or insert) if it starts with a bracket """
    return type(piece) == str and len(piece) > 0 and isOpenBracket(piece[0])
