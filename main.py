import sys

from scratchblocks.assembler import parseScripts
from scratchblocks.database import BlockDatabase
from scratchblocks.export import dumpScripts, saveToFile

# usage: python main.py [input.txt] [output.json]

text = """
when flag clicked
set [i v] to (0)
repeat (10)
    change [i v] by (1)
    if <(i) > (5)> then
        say [big]
    else
        jump (i)
    end
end

define jump (height)
change y by (height)
add (height) to [heights v]

(heights)
"""

if len(sys.argv) > 1:
    with open(sys.argv[1], encoding="utf-8") as fl:
        text = fl.read()

database = BlockDatabase.withLanguages("de")
scripts = parseScripts(text, database, verbose=True)
print(dumpScripts(scripts))

if len(sys.argv) > 2:
    saveToFile(scripts, sys.argv[2], pretty=True)
