"""
scratchblocks - turn scratchblocks text into a tree of Scratch blocks

scratchblocks text describes Scratch scripts one block per line:

    when flag clicked
    repeat (10)
        move (10) steps
        say [Hello!] for (2) secs
    end

The parser (see assembler.parseScripts) turns this into a list of Script objects.
Each script holds BlockInfo nodes and, for C blocks, CWrap/CMouth containers. The tree
is handed to a renderer, which is not part of this package.

Basic usage:

    from scratchblocks.assembler import parseScripts

    scripts = parseScripts(code)
"""

import json

# Categories a block can be drawn in. These are also the names accepted by the
# "::" override syntax and the deprecated "// category=" comment.
OVERRIDE_CATEGORIES = [
    "motion", "looks", "sound", "pen", "variables", "list", "events", "control",
    "sensing", "operators", "custom", "custom-arg", "extension", "grey", "obsolete"
]
OVERRIDE_FLAGS = ["cstart", "celse", "cend", "ring"]
OVERRIDE_SHAPES = ["hat", "cap", "stack", "embedded", "boolean", "reporter"]

# Shapes that come out of the parser for inserts rather than blocks
INSERT_SHAPES = ["string", "dropdown", "number", "number-dropdown", "color"]

class ParsingError(Exception): pass

class BlockInfo:
    def __init__(self, blockid=None, category=None, shape=None, flag=None, lang=None, pieces=None, comment=None, imageReplacement=None):
        """
        A single parsed block or insert.

        Inserts (strings, numbers, dropdowns...) have no category and a single
        string piece holding their text. Blocks have a category and a list of pieces,
        which are either literal strings or nested BlockInfo objects.
        """
        self.blockid = blockid
        self.category = category
        self.shape = shape
        self.flag = flag
        self.lang = lang
        self.pieces: list = pieces if pieces != None else []
        self.comment = comment
        self.imageReplacement = imageReplacement

        self.isRinged = False # set on the direct children of a "ring" block
        self.capEnd = False   # set on celse/cend blocks whose mouth ends in a cap block

    @property
    def isInsert(self):
        return self.category == None and len(self.pieces) == 1 and type(self.pieces[0]) == str

    def getArguments(self):
        """ Return the nested BlockInfo pieces, in order """
        return [piece for piece in self.pieces if isinstance(piece, BlockInfo)]

    def copy(self):
        """ Return a copy of this block. Pieces are shallow copied """
        other = BlockInfo(
            blockid=self.blockid,
            category=self.category,
            shape=self.shape,
            flag=self.flag,
            lang=self.lang,
            pieces=list(self.pieces),
            comment=self.comment,
            imageReplacement=self.imageReplacement
        )
        other.isRinged = self.isRinged
        other.capEnd = self.capEnd
        return other

    def serialize(self):
        data = {
            "pieces": [piece.serialize() if isinstance(piece, BlockInfo) else piece for piece in self.pieces]
        }

        # only include the attributes this node actually has
        if self.blockid != None:
            data["blockid"] = self.blockid
        if self.category != None:
            data["category"] = self.category
        if self.shape != None:
            data["shape"] = self.shape
        if self.flag != None:
            data["flag"] = self.flag + " capend" if self.capEnd else self.flag
        if self.lang != None:
            data["lang"] = self.lang
        if self.comment != None:
            data["comment"] = self.comment
        if self.imageReplacement != None:
            data["image_replacement"] = self.imageReplacement
        if self.isRinged:
            data["is_ringed"] = True

        return data

    def __repr__(self):
        if self.isInsert:
            return f'<Insert {self.shape} {repr(self.pieces[0])}>'
        return f'<Block "{self.blockid}" category={self.category} shape={self.shape} flag={self.flag}>'

class CMouth:
    def __init__(self, category, contents=None):
        """ The body of one branch of a C block """
        self.category = category
        self.contents: list = contents if contents != None else []

    @property
    def type(self):
        return "cmouth"

    def serialize(self):
        return {
            "type": self.type,
            "category": self.category,
            "contents": [node.serialize() for node in self.contents]
        }

    def __repr__(self):
        return f'<CMouth {self.category} ({len(self.contents)} blocks)>'

class CWrap:
    def __init__(self, shape, contents=None):
        """
        A C block along with everything it wraps. contents holds, in order: the opening
        block, a CMouth, then for each else branch an else block followed by another CMouth,
        and finally the closing "end" block.
        """
        self.shape = shape
        self.contents: list = contents if contents != None else []

    @property
    def type(self):
        return "cwrap"

    @property
    def category(self):
        return self.contents[0].category

    def getMouths(self):
        return [node for node in self.contents if isinstance(node, CMouth)]

    def getBlocks(self):
        """ Return the opening, else and closing blocks """
        return [node for node in self.contents if isinstance(node, BlockInfo)]

    def serialize(self):
        return {
            "type": self.type,
            "shape": self.shape,
            "contents": [node.serialize() for node in self.contents]
        }

    def __repr__(self):
        return f'<CWrap "{self.contents[0].blockid}" ({len(self.getMouths())} mouths)>'

class Script:
    def __init__(self, blocks=None):
        """ One stack of blocks, laid out independently of the other scripts """
        self.blocks: list = blocks if blocks != None else []

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self):
        return len(self.blocks)

    def __getitem__(self, index):
        return self.blocks[index]

    def serialize(self):
        return [node.serialize() for node in self.blocks]

    def __repr__(self):
        return json.dumps(self.serialize(), indent=4)
