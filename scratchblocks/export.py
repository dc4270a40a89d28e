""" Output of parsed scripts: JSON for a renderer, and a readable text dump """

import json

from . import BlockInfo, CMouth, CWrap, Script
from .blocks import IMAGE_TEXT

def scriptsToJSON(scripts: list[Script]):
    """ Return a json-serializable copy of the parsed scripts """
    return [script.serialize() for script in scripts]

def saveToFile(scripts: list[Script], destination, pretty=False):
    outputData = scriptsToJSON(scripts)

    with open(destination, "w", encoding="utf-8") as fl:
        if pretty:
            json.dump(outputData, fl, indent=4, sort_keys=True, ensure_ascii=False)
        else:
            json.dump(outputData, fl, ensure_ascii=False)

def blockText(info: BlockInfo):
    """ Render a block back to one line of text, eg. 'say [Hello!] for (2) secs' """
    if info.isInsert:
        text = info.pieces[0]
        if info.shape in ("dropdown", "number-dropdown"):
            text += " v"
        if info.shape in ("string", "dropdown", "color"):
            return "[" + text + "]"
        return "(" + text + ")"

    if info.shape == "define-hat":
        return info.pieces[0] + " " + blockText(info.pieces[1])

    s = ""
    for piece in info.pieces:
        if isinstance(piece, BlockInfo):
            s += blockText(piece)
        elif piece == "@" and info.imageReplacement:
            s += IMAGE_TEXT.get(info.imageReplacement, "@" + info.imageReplacement)
        else:
            s += piece

    if info.shape == "outline":
        return s
    if info.category == "custom-arg":
        return "<" + s + ">" if info.shape == "boolean" else "(" + s + ")"
    if info.shape == "boolean":
        return "<" + s + ">"
    if info.shape in ("reporter", "embedded"):
        return "(" + s + ")"
    return s

def _dumpNode(node, depth):
    indent = "    "
    s = ""

    if isinstance(node, CWrap):
        for child in node.contents:
            s += _dumpNode(child, depth)

    elif isinstance(node, CMouth):
        for child in node.contents:
            s += _dumpNode(child, depth+1)

    elif node.blockid == "//":
        s += indent*depth + "// " + node.comment + "\n"

    else:
        line = blockText(node) if node.pieces else node.blockid
        s += indent*depth + f'{line}  [{node.category}, {node.flag or node.shape}'
        if node.capEnd:
            s += ", capend"
        s += "]"
        if node.comment != None:
            s += "  // " + node.comment
        s += "\n"

    return s

def dumpScripts(scripts: list[Script]):
    """ Return a readable, indented listing of the parsed scripts with each block's category and shape """
    s = ""

    for i, script in enumerate(scripts):
        s += f'=== Script {i+1} ===\n'
        for node in script:
            s += _dumpNode(node, 0)
        s += "\n"

    return s
