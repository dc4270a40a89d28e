""" Block and line parsing: turns one line of scratchblocks code into a BlockInfo tree """

import re
from collections import deque

from . import INSERT_SHAPES, OVERRIDE_CATEGORIES, OVERRIDE_FLAGS, OVERRIDE_SHAPES, BlockInfo
from .brackets import getMatchingBracket, isBlockPiece, isOpenBracket, stripBrackets
from .database import BlockLookup
from .text import normalizeSpec
from .tokenizer import splitIntoPieces

# For recognising list reporters: blockid -> index of the argument holding the list name
LIST_BLOCK_ARGS = {
    "add _ to _": 1,
    "delete _ of _": 1,
    "insert _ at _ of _": 2,
    "replace item _ of _ with _": 1,
    "item _ of _": 1,
    "length of _": 0,
    "_ contains _": 0,
    "show list _": 0,
    "hide list _": 0,
}

class ParseContext:
    def __init__(self):
        """
        Things only known once the whole script has been read. Holds references to the
        BlockInfo objects that may need their category changed afterwards.
        """
        self.obsoleteBlocks: dict[str, list[BlockInfo]] = {}     # minified spec -> unknown stack blocks
        self.defineHats: list[str] = []                          # minified specs of custom block definitions
        self.customArgs: list[str] = []                          # names of custom block parameters
        self.variableReporters: dict[str, list[BlockInfo]] = {}  # name -> unknown reporters
        self.lists: list[str] = []                               # names used as lists

    def addObsoleteBlock(self, minispec, info):
        self.obsoleteBlocks.setdefault(minispec, []).append(info)

    def addVariableReporter(self, name, info):
        self.variableReporters.setdefault(name, []).append(info)

def filterPieces(pieces):
    """ Return (spec, args): the pieces joined with an underscore for each insert, and the inserts """
    spec = ""
    args = []
    for piece in pieces:
        if isinstance(piece, BlockInfo) or isBlockPiece(piece):
            args.append(piece)
            spec += "_"
        else:
            spec += piece

    return normalizeSpec(spec), args

def getBlockShape(bracket):
    if bracket == "(":
        return "embedded"
    if bracket == "<":
        return "boolean"
    return "stack"

def getInsertShape(bracket, code):
    if bracket == "(":
        if re.fullmatch(r"([0-9e.-]+( v)?)?", code, re.IGNORECASE):
            return "number-dropdown" if code.endswith(" v") else "number"
        if code.endswith(" v"):
            return "number-dropdown" # rounded dropdowns (not actually numbers)
        return "reporter"

    if bracket == "[":
        if re.fullmatch(r"#[a-f0-9]{3}([a-f0-9]{3})?", code, re.IGNORECASE):
            return "color"
        return "dropdown" if code.endswith(" v") else "string"

    if bracket == "<":
        return "boolean"

    return "stack"

def getCustomArgShape(bracket):
    return "boolean" if bracket == "<" else "reporter"

class BlockParser:
    def __init__(self, lookup: BlockLookup, context: ParseContext=None):
        """ Parses blocks against a fixed database snapshot, collecting cross-line info into context """
        self.lookup = lookup
        self.context = context if context != None else ParseContext()
        self._errorsThisLine = []

    def addError(self, msg):
        # the same bracket problem shows up again at each nesting level
        if not msg in self._errorsThisLine:
            self._errorsThisLine.append(msg)

    def popErrors(self):
        errors = self._errorsThisLine[:]
        self._errorsThisLine = []
        return errors

    def splitIntoPieces(self, code):
        errors = []
        pieces = splitIntoPieces(code, self.lookup, errors)
        for err in errors:
            self.addError(err)
        return pieces

    def _parseDefineHat(self, code, pieces, keyword):
        """ Custom block definition: "define jump (height) <fast?>" """
        pieces[0] = pieces[0][len(keyword):].lstrip()

        outline = []
        for piece in pieces:
            if isBlockPiece(piece):
                piece = BlockInfo(
                    shape=getCustomArgShape(piece[0]),
                    category="custom-arg",
                    pieces=[stripBrackets(piece).strip()]
                )
            if piece:
                outline.append(piece)

        return BlockInfo(
            shape="define-hat",
            category="custom",
            pieces=[code[:len(keyword)], BlockInfo(shape="outline", pieces=outline)]
        )

    def _parseArguments(self, text, blockid, args):
        """ Rebuild the pieces of a block from its spec text, parsing each insert """
        splitter = r"([_@▶◀▸◂])" if blockid == "_ + _" else r"([_@▶◀▸◂+])"
        queue = deque(args)

        pieces = []
        for part in re.split(splitter, text):
            if part == "_":
                if queue:
                    part = self.parseBlock(queue.popleft())
                # else there are no args left, so the underscore really is an underscore.
                # this is only a problem if the code has underscores followed by inserts
            if part:
                pieces.append(part)

        return pieces

    def _applyOverrides(self, info, overrides):
        for value in overrides:
            if value in OVERRIDE_CATEGORIES:
                info.category = value
            elif value in OVERRIDE_FLAGS:
                info.flag = value
            elif value in OVERRIDE_SHAPES:
                info.shape = value
            else:
                self.addError(f'Unknown override "{value}"')

        # tag ring-inner pieces
        if info.flag == "ring":
            for piece in info.getArguments():
                piece.isRinged = True

    def _recordList(self, info):
        index = LIST_BLOCK_ARGS[info.blockid]
        spec, args = filterPieces(info.pieces)
        if index >= len(args):
            return

        arg = args[index]
        if not isinstance(arg, BlockInfo):
            return

        if arg.shape == "dropdown" or (arg.shape == "string" and info.category == "list"):
            self.context.lists.append(arg.pieces[0])

    def parseBlock(self, code, dontStripBrackets=False):
        """ Take block code and return a BlockInfo. Unless dontStripBrackets, code still has its outer brackets """
        bracket = None
        if not dontStripBrackets:
            bracket = code[:1]
            if isOpenBracket(bracket) and (len(code) < 2 or code[-1] != getMatchingBracket(bracket)):
                self.addError(f'Unterminated "{bracket}" bracket')
            code = stripBrackets(code)

        # split into text segments and inserts. the text of a "[...]" insert is literal
        pieces = splitIntoPieces(code, self.lookup) if bracket == "[" else self.splitIntoPieces(code)

        # define hat?
        keyword = self.lookup.isDefine(code)
        if keyword != None:
            return self._parseDefineHat(code, pieces or [""], keyword)

        # get shape
        if len(pieces) > 1 and bracket != "[":
            shape = getBlockShape(bracket)
            isBlock = True
        else:
            shape = getInsertShape(bracket, code)
            isBlock = shape not in INSERT_SHAPES
            if "dropdown" in shape:
                code = code[:-2]

        # insert?
        if not isBlock:
            return BlockInfo(shape=shape, pieces=[code])

        # trim ends
        if pieces:
            pieces[0] = pieces[0].lstrip()
            pieces[-1] = pieces[-1].rstrip()

        # filter out block text & args
        spec, args = filterPieces(pieces)

        # override attrs?
        overrides = None
        match = re.fullmatch(r"(.*)::([A-Za-z\- ]*)", spec)
        if match:
            spec = match.group(1).rstrip()
            overrides = match.group(2).split() or None

        # get category & related block info
        found = self.lookup.findBlock(spec, args) if spec else None

        if found:
            info, text = found
            if not info.shape:
                info.shape = shape
            if info.flag == "cend":
                text = ""
        else:
            # unknown block
            info = BlockInfo(
                blockid=spec,
                shape=shape,
                category="variables" if shape == "reporter" else "obsolete",
                lang="en"
            )
            text = spec

            # for recognising list reporters & custom args
            if info.shape == "reporter":
                self.context.addVariableReporter(text, info)

        # rebuild pieces (in case text has changed) and parse arguments
        info.pieces = self._parseArguments(text, info.blockid, args)

        if overrides:
            self._applyOverrides(info, overrides)
        elif info.blockid in LIST_BLOCK_ARGS:
            self._recordList(info)

        return info

    def parseLine(self, line):
        """ Return a BlockInfo for a whole line, including its comment """
        line = line.strip()

        # comments
        comment = None

        i = line.find("//")
        if i != -1 and (i == 0 or line[i-1] != ":"):
            comment = line[i+2:].strip()
            line = line[:i].strip()

            # free-floating comment?
            if not line:
                return BlockInfo(blockid="//", comment=comment)

        if isOpenBracket(line[:1]) and len(splitIntoPieces(line, self.lookup)) == 1:
            # reporter
            info = self.parseBlock(line) # keep the brackets, they give the shape

            if info.category == None: # cheap test for inserts
                # put free-floating inserts in their own stack block
                info = BlockInfo(blockid="_", category="obsolete", shape="stack", pieces=[info])
        else:
            # normal stack block; the line itself isn't surrounded by brackets
            info = self.parseBlock(line, dontStripBrackets=True)

        # category hack (deprecated)
        if comment != None and info.shape != "define-hat":
            match = re.search(r"(^| )category=([a-z]+)($| )", comment)
            if match and match.group(2) in OVERRIDE_CATEGORIES:
                info.category = match.group(2)
                comment = comment.replace(match.group(0), " ", 1).strip()

        # for recognising custom blocks and their arguments
        if info.shape == "define-hat":
            spec, args = filterPieces(info.pieces[1].pieces)
            self.context.defineHats.append(self.lookup.minify(spec))
            for arg in args:
                self.context.customArgs.append(arg.pieces[0])

        if info.shape == "stack" and info.category == "obsolete":
            spec, args = filterPieces(info.pieces)
            self.context.addObsoleteBlock(self.lookup.minify(spec), info)

        if comment != None and not comment.strip():
            comment = None
        info.comment = comment
        return info
