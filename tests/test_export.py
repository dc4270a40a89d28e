import json

from scratchblocks.assembler import parseScripts
from scratchblocks.export import blockText, dumpScripts, saveToFile, scriptsToJSON


def test_block_text(database):
    for line in [
        "say [Hello!] for (2) secs",
        "set [my var v] to (0)",
        "switch costume to (costume2 v)",
        "define jump (height) <fast?>",
    ]:
        assert blockText(parseScripts(line, database)[0][0]) == line

def test_block_text_c_block(database):
    cwrap = parseScripts("if <(6) < (3)> then\nend", database)[0][0]
    assert blockText(cwrap.contents[0]) == "if <(6) < (3)> then"

def test_block_text_images(database):
    info = parseScripts("turn right (15) degrees", database)[0][0]
    assert blockText(info) == "turn ↻ (15) degrees"

def test_json():
    scripts = parseScripts("when flag clicked\nforever\nsay [hi] // greet\nstop [all v]\nend")
    data = scriptsToJSON(scripts)
    assert len(data) == 1

    hat, cwrap = data[0]
    assert hat["blockid"] == "when @green-flag clicked"
    assert hat["image_replacement"] == "green-flag"
    assert hat["shape"] == "hat"
    assert hat["pieces"] == ["when ", "@", " clicked"]
    assert "comment" not in hat

    assert cwrap["type"] == "cwrap"
    assert cwrap["shape"] == "cap"
    forever, cmouth, end = cwrap["contents"]
    assert forever["flag"] == "cstart"
    assert cmouth["type"] == "cmouth"
    assert cmouth["category"] == "control"
    assert cmouth["contents"][0]["comment"] == "greet"
    assert cmouth["contents"][0]["pieces"][1] == {"shape": "string", "pieces": ["hi"]}
    assert end["flag"] == "cend capend"

    json.dumps(data)

def test_json_ring():
    data = scriptsToJSON(parseScripts("(join [a] [b] :: ring)"))
    ring = data[0][0]
    assert ring["flag"] == "ring"
    assert ring["pieces"][1]["is_ringed"]

def test_save_to_file(tmp_path):
    scripts = parseScripts("move (10) steps\n\nsay [grüß dich]")
    path = tmp_path / "scripts.json"

    saveToFile(scripts, str(path))
    with open(path, encoding="utf-8") as fl:
        assert json.load(fl) == scriptsToJSON(scripts)

    saveToFile(scripts, str(path), pretty=True)
    text = path.read_text(encoding="utf-8")
    assert "grüß dich" in text
    assert json.loads(text) == scriptsToJSON(scripts)

def test_dump():
    scripts = parseScripts("when flag clicked\nrepeat (10)\nmove (10) steps // go\nend\n\n// note")
    assert dumpScripts(scripts) == (
        "=== Script 1 ===\n"
        "when @green-flag clicked  [events, hat]\n"
        "repeat (10)  [control, cstart]\n"
        "    move (10) steps  [motion, stack]  // go\n"
        "end  [control, cend]\n"
        "\n"
        "=== Script 2 ===\n"
        "// note\n"
        "\n"
    )
