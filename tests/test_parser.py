from scratchblocks import BlockInfo
from scratchblocks.parser import (
    BlockParser, ParseContext, filterPieces, getBlockShape, getCustomArgShape, getInsertShape
)


def makeParser(database):
    return BlockParser(database.snapshot(), ParseContext())

def parse(database, line):
    return makeParser(database).parseLine(line)

def test_insert_shapes():
    assert getInsertShape("(", "2") == "number"
    assert getInsertShape("(", "-1.5") == "number"
    assert getInsertShape("(", "") == "number"
    assert getInsertShape("(", "5 v") == "number-dropdown"
    assert getInsertShape("(", "costume name v") == "number-dropdown"
    assert getInsertShape("(", "x position") == "reporter"
    assert getInsertShape("[", "Hello!") == "string"
    assert getInsertShape("[", "my var v") == "dropdown"
    assert getInsertShape("[", "#f0a") == "color"
    assert getInsertShape("[", "#FF0000") == "color"
    assert getInsertShape("[", "#ff00") == "string"
    assert getInsertShape("<", "mouse down?") == "boolean"
    assert getInsertShape(None, "move") == "stack"

def test_block_shapes():
    assert getBlockShape("(") == "embedded"
    assert getBlockShape("<") == "boolean"
    assert getBlockShape(None) == "stack"
    assert getCustomArgShape("<") == "boolean"
    assert getCustomArgShape("(") == "reporter"

def test_filter_pieces():
    arg = BlockInfo(shape="number", pieces=["2"])
    spec, args = filterPieces(["say ", "[Hello!]", " for ", arg, " secs"])
    assert spec == "say _ for _ secs"
    assert args == ["[Hello!]", arg]

def test_stack_block(database):
    info = parse(database, "say [Hello!] for (2) secs")
    assert info.blockid == "say _ for _ secs"
    assert info.category == "looks"
    assert info.shape == "stack"
    assert info.lang == "en"

    assert info.pieces[0] == "say "
    assert info.pieces[2] == " for "
    assert info.pieces[4] == " secs"

    string, number = info.getArguments()
    assert string.shape == "string" and string.pieces == ["Hello!"]
    assert number.shape == "number" and number.pieces == ["2"]
    assert string.isInsert

def test_dropdown_and_color(database):
    info = parse(database, "set [my var v] to (0)")
    assert info.category == "variables"
    dropdown = info.getArguments()[0]
    assert dropdown.shape == "dropdown"
    assert dropdown.pieces == ["my var"]

    color = parse(database, "set pen color to [#ff0000]").getArguments()[0]
    assert color.shape == "color"
    assert color.pieces == ["#ff0000"]

def test_number_dropdown(database):
    arg = parse(database, "switch costume to (costume2 v)").getArguments()[0]
    assert arg.shape == "number-dropdown"
    assert arg.pieces == ["costume2"]

def test_nested_reporters(database):
    info = parse(database, "say (join [a] (x position))")
    join = info.getArguments()[0]
    assert join.blockid == "join _ _"
    assert join.shape == "embedded"
    assert join.category == "operators"
    position = join.getArguments()[1]
    assert position.blockid == "x position"
    assert position.shape == "reporter"
    assert position.category == "motion"

def test_boolean_argument(database):
    info = parse(database, "wait until <mouse down?>")
    boolean = info.getArguments()[0]
    assert boolean.blockid == "mouse down?"
    assert boolean.shape == "boolean"
    assert boolean.category == "sensing"

def test_comparison_argument(database):
    info = parse(database, "if <(6) < (3)> then")
    assert info.blockid == "if _ then"
    assert info.flag == "cstart"
    compare = info.getArguments()[0]
    assert compare.blockid == "_ < _"
    assert compare.shape == "boolean"
    assert [arg.pieces[0] for arg in compare.getArguments()] == ["6", "3"]

def test_ignored_lt(database):
    info = parse(database, "when distance < (30)")
    assert info.blockid == "when distance < _"
    assert info.shape == "hat"

def test_free_floating_reporter(database):
    info = parse(database, "(x position)")
    assert info.blockid == "x position"
    assert info.shape == "reporter"

    info = parse(database, "<mouse down?>")
    assert info.shape == "boolean"

def test_free_floating_insert(database):
    info = parse(database, "[hello]")
    assert info.blockid == "_"
    assert info.category == "obsolete"
    assert info.shape == "stack"
    assert info.pieces[0].shape == "string"
    assert info.pieces[0].pieces == ["hello"]

def test_unknown_blocks(database):
    parser = makeParser(database)

    info = parser.parseLine("fly to (the moon)")
    assert info.category == "obsolete"
    assert info.shape == "stack"
    assert parser.context.obsoleteBlocks["fly to _"] == [info]

    say = parser.parseLine("say (score)")
    score = say.getArguments()[0]
    assert score.category == "variables"
    assert score.shape == "reporter"
    assert parser.context.variableReporters["score"] == [score]

def test_image_blocks(database):
    info = parse(database, "turn left (15) degrees")
    assert info.blockid == "turn @arrow-ccw _ degrees"
    assert info.imageReplacement == "arrow-ccw"
    assert info.pieces[:3] == ["turn ", "@", " "]

    info = parse(database, "when flag clicked")
    assert info.shape == "hat"
    assert info.pieces == ["when ", "@", " clicked"]

def test_ellipsis(database):
    info = parse(database, "...")
    assert info.blockid == "..."
    assert info.pieces == [". . ."]

def test_plus_splits_pieces(database):
    assert parse(database, "foo+bar").pieces == ["foo", "+", "bar"]

    add = parse(database, "((1) + (2))")
    assert add.blockid == "_ + _"
    assert add.pieces[1] == " + "
    assert len(add.getArguments()) == 2

def test_end_has_no_pieces(database):
    info = parse(database, "end")
    assert info.flag == "cend"
    assert info.pieces == []

def test_math_of_hack(database):
    assert parse(database, "([sqrt v] of (9))").category == "operators"
    assert parse(database, "([x position v] of [Sprite1 v])").category == "sensing"

def test_stop_hack(database):
    assert parse(database, "stop [all v]").shape == "cap"
    assert parse(database, "stop [other scripts in sprite v]").shape == "stack"

def test_overrides(database):
    info = parse(database, "move (10) steps :: pen")
    assert info.blockid == "move _ steps"
    assert info.category == "pen"

    info = parse(database, "foo :: control cstart")
    assert info.category == "control"
    assert info.flag == "cstart"

    info = parse(database, "(foo :: boolean)")
    assert info.shape == "boolean"

def test_unknown_override(database):
    parser = makeParser(database)
    info = parser.parseLine("move (10) steps :: sparkly")
    assert info.category == "motion"
    assert parser.popErrors() == ['Unknown override "sparkly"']
    assert parser.popErrors() == []

def test_ring(database):
    info = parse(database, "(join [a] [b] :: ring)")
    assert info.flag == "ring"
    assert all(arg.isRinged for arg in info.getArguments())
    assert not info.isRinged

def test_define_hat(database):
    parser = makeParser(database)
    info = parser.parseLine("define jump (height) <fast?>")
    assert info.shape == "define-hat"
    assert info.category == "custom"
    assert info.pieces[0] == "define"

    outline = info.pieces[1]
    assert outline.shape == "outline"
    assert outline.pieces[0] == "jump "
    args = outline.getArguments()
    assert [arg.shape for arg in args] == ["reporter", "boolean"]
    assert [arg.category for arg in args] == ["custom-arg", "custom-arg"]
    assert [arg.pieces for arg in args] == [["height"], ["fast?"]]

    assert parser.context.defineHats == ["jump _ _"]
    assert parser.context.customArgs == ["height", "fast?"]

def test_define_without_arguments(database):
    parser = makeParser(database)
    info = parser.parseLine("define greet")
    assert info.shape == "define-hat"
    assert parser.context.defineHats == ["greet"]

def test_comments(database):
    info = parse(database, "move (10) steps // go forwards")
    assert info.blockid == "move _ steps"
    assert info.comment == "go forwards"

    assert parse(database, "move (10) steps").comment == None
    assert parse(database, "move (10) steps //").comment == None

def test_url_is_not_a_comment(database):
    info = parse(database, "say [http://example.com]")
    assert info.comment == None
    assert info.getArguments()[0].pieces == ["http://example.com"]

def test_free_floating_comment(database):
    info = parse(database, "// just a note")
    assert info.blockid == "//"
    assert info.comment == "just a note"
    assert info.pieces == []

def test_category_comment(database):
    info = parse(database, "move (10) steps // category=pen")
    assert info.category == "pen"
    assert info.comment == None

    info = parse(database, "move (10) steps // category=pen fast")
    assert info.category == "pen"
    assert info.comment == "fast"

    info = parse(database, "move (10) steps // category=sparkly")
    assert info.category == "motion"
    assert info.comment == "category=sparkly"

def test_list_names_recorded(database):
    parser = makeParser(database)
    parser.parseLine("add [thing] to [mylist v]")
    parser.parseLine("add [thing] to [other list]")
    parser.parseLine("say (length of [hello])")
    parser.parseLine("say (item (1) of [stuff v])")
    assert parser.context.lists == ["mylist", "other list", "stuff"]

def test_german(german):
    info = parse(german, "sage [Hallo] für (2) Sek.")
    assert info.blockid == "say _ for _ secs"
    assert info.lang == "de"
    assert info.pieces[0] == "sage "
    assert info.pieces[2] == " für "

    assert parse(german, "([Wurzel v] von (9))").category == "operators"
    assert parse(german, "stoppe [alle v]").shape == "cap"

def test_german_define(german):
    info = parse(german, "Definiere springe (Höhe)")
    assert info.shape == "define-hat"
    assert info.pieces[0] == "Definiere"
    assert info.pieces[1].pieces[0] == "springe "
