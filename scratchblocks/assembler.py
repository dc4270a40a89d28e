"""
Script assembly: runs the line parser over a whole piece of scratchblocks code, builds
C blocks out of their start/else/end lines, splits the result into scripts, and finally
fixes up the categories that depend on the whole text (custom blocks, lists, custom
block arguments).
"""

from . import BlockInfo, CMouth, CWrap, ParsingError, Script
from .database import BlockDatabase
from .parser import BlockParser, ParseContext

_defaultDatabase = None

def getDefaultDatabase():
    """ The English database, built the first time it is needed """
    global _defaultDatabase
    if _defaultDatabase == None:
        _defaultDatabase = BlockDatabase()
    return _defaultDatabase

class ScriptAssembler:
    def __init__(self, database: BlockDatabase=None):
        """ One assembler per parse; it owns the nesting stack and the parse context """
        self.database = database if database != None else getDefaultDatabase()
        self.context = ParseContext()
        self.parser = BlockParser(self.database.snapshot(), self.context)

        self.scripts: list[Script] = []
        self.nesting: list[list] = [[]] # innermost container last; nesting[0] is the current script
        self.errors: dict[int, list[str]] = {} # line_number : list[str]
        self.currentLine = 1
        self._parsingSource = []

    @property
    def currentScript(self):
        return self.nesting[-1]

    def getLineByNumber(self, num):
        return self._parsingSource[num-1]

    def throwError(self, errorText, critical=True, lineNumber=None):
        """ Add an error message to the current (or specified) line """
        at = self.currentLine if lineNumber == None else lineNumber

        if not at in self.errors:
            self.errors[at] = []

        self.errors[at].append(errorText)

        if critical:
            raise ParsingError(f'line {at}: {errorText}')

    def formatErrors(self):
        s = ""
        for lineNum in sorted(self.errors.keys()):
            badLine = self.getLineByNumber(lineNum).strip()

            for err in self.errors[lineNum]:
                s += f'line {lineNum}: error: {err}\n'
                s += f'    {badLine}\n'
            s += "\n"
        return s

    # nesting

    def newScript(self):
        """ Close any open C blocks and start a new script, if the current one has anything in it """
        if self.nesting[0]:
            while len(self.nesting) > 1:
                self.doCend(BlockInfo(blockid="end", category="control", flag="cend", shape="stack"))

            self.scripts.append(Script(self.nesting[0]))
            self.nesting = [[]]

    def _tagCapEnd(self, cmouth: list, info: BlockInfo):
        if cmouth and cmouth[-1].shape == "cap":
            info.capEnd = True # last block in the mouth is a cap block

    def doCstart(self, info: BlockInfo):
        cwrap = CWrap(info.shape, [info])
        info.shape = "stack"
        self.currentScript.append(cwrap)
        self.nesting.append(cwrap.contents)

        cmouth = CMouth(info.category)
        cwrap.contents.append(cmouth)
        self.nesting.append(cmouth.contents)

    def doCelse(self, info: BlockInfo):
        cmouth = self.nesting.pop()
        self._tagCapEnd(cmouth, info)

        cwrap = self.nesting[-1]
        info.category = cwrap[0].category # category of the c block
        cwrap.append(info)

        cmouth = CMouth(cwrap[0].category)
        cwrap.append(cmouth)
        self.nesting.append(cmouth.contents)

    def doCend(self, info: BlockInfo):
        # pop the innermost mouth and its c block off the stack
        cmouth = self.nesting.pop()
        self._tagCapEnd(cmouth, info)

        cwrap = self.nesting.pop()
        info.category = cwrap[0].category
        cwrap.append(info)

    def addBlock(self, info: BlockInfo):
        if info.blockid == "//" and len(self.nesting) <= 1:
            # free-floating comment
            self.newScript()
            self.currentScript.append(info)
            self.newScript()
            return

        kind = info.flag or info.shape

        if kind in ("hat", "define-hat"):
            self.newScript()
            self.currentScript.append(info)

        elif kind == "cap":
            self.currentScript.append(info)
            if len(self.nesting) <= 1:
                self.newScript()

        elif kind == "cstart":
            self.doCstart(info)

        elif kind in ("celse", "cend"):
            if len(self.nesting) <= 1:
                # not inside a c block; keep it as an ordinary block
                self.currentScript.append(info)
            elif kind == "celse":
                self.doCelse(info)
            else:
                self.doCend(info)

        elif kind in ("reporter", "boolean", "embedded", "ring"):
            # put free-floating reporters in a script of their own
            self.newScript()
            self.currentScript.append(info)
            self.newScript()

        else:
            self.currentScript.append(info)

    # deferred resolution

    def _reclassify(self, blocks, fromCategory, toCategory):
        # overrides and category= comments may have moved a block out of its candidate category
        for info in blocks:
            if info.category == fromCategory:
                info.category = toCategory

    def resolveCustomBlocks(self):
        """ Unknown stack blocks that match a "define" hat are custom blocks """
        for minispec in self.context.defineHats:
            self._reclassify(self.context.obsoleteBlocks.get(minispec, []), "obsolete", "custom")

    def resolveListReporters(self):
        for name in self.context.lists:
            self._reclassify(self.context.variableReporters.get(name, []), "variables", "list")

    def resolveCustomArgs(self):
        for name in self.context.customArgs:
            self._reclassify(self.context.variableReporters.get(name, []), "variables", "custom-arg")

    def _parseLine(self, line):
        try:
            info = self.parser.parseLine(line)
        except RecursionError:
            self.parser.popErrors()
            self.throwError("Blocks are nested too deeply", critical=False)
            info = BlockInfo(blockid=line.strip(), category="obsolete", shape="stack", pieces=[line.strip()])

        for err in self.parser.popErrors():
            self.throwError(err, critical=False)

        return info

    def parseText(self, code, verbose=False):
        """ Parse scratchblocks code into a list of Scripts """
        self._parsingSource = code.strip().split("\n")
        self.currentLine = 1

        while self.currentLine <= len(self._parsingSource):
            line = self.getLineByNumber(self.currentLine)

            if not line.strip():
                if len(self.nesting) <= 1:
                    self.newScript()
            else:
                self.addBlock(self._parseLine(line))

            self.currentLine += 1

        self.newScript()

        # order matters: each pass only touches blocks still in their original category
        self.resolveCustomBlocks()
        self.resolveListReporters()
        self.resolveCustomArgs()

        if verbose and self.errors:
            print(self.formatErrors())

        return self.scripts

def parseScripts(code, database: BlockDatabase=None, verbose=False):
    """ Take scratchblocks text and turn it into a list of Scripts """
    return ScriptAssembler(database).parseText(code, verbose)
