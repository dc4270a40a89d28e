"""
The block database: category, shape and flags for every known block, indexed by block text.

Blocks can be found in two ways:

- by the text of a line minus its inserts, normalized and minified
  (eg. "say [Hi!] for (3) secs" -> "say _ for _ secs")

- by a language code and blockid (BlockLookup.specFor), for translating between languages

Some definitions:

- spec: the text of a block with underscores for inserts. May be translated
        eg. "sage _ für _ Sek."

- blockid: the English spec, used as the language independent name of a block
        eg. "say _ for _ secs"

A BlockDatabase is built once and shared between parses. Parsers read from a BlockLookup
snapshot; loading or resetting languages builds a new lookup and swaps it in, so a parse
that is already running keeps a consistent view.
"""

import json
import os
import re
import threading

import jsonschema
from jsonschema import Draft202012Validator

from . import BlockInfo
from .blocks import ENGLISH, ENGLISH_BLOCKS
from .hacks import applyHack
from .text import minify, normalizeSpec

RESOURCES = os.path.join(os.path.dirname(os.path.realpath(__file__)), "resources")

class LanguageError(Exception): pass

def _loadSchema():
    with open(os.path.join(RESOURCES, "language.schema.json"), encoding="utf-8") as fl:
        return json.load(fl)

LANGUAGE_SCHEMA = _loadSchema()

def validateLanguage(data):
    """ Check a language pack against the language schema, raising LanguageError if it doesn't fit """
    try:
        Draft202012Validator(LANGUAGE_SCHEMA).validate(data)
    except jsonschema.ValidationError as e:
        location = "/".join([str(part) for part in e.absolute_path]) or "(root)"
        raise LanguageError(f'Invalid language pack at {location}: {e.message}') from e

def buildBlockInfo():
    """ Build the blockid -> BlockInfo table from the English block list """
    infoById = {}

    for category, blocks in ENGLISH_BLOCKS:
        for spec, flags in blocks:
            info = BlockInfo(blockid=spec, category=category)

            for flag in flags:
                if flag in ("hat", "cap"):
                    info.shape = flag
                else:
                    assert info.flag == None, Exception(f'Block "{spec}" has more than one flag')
                    info.flag = flag

            imageMatch = re.search(r"@([-A-Za-z]+)", spec)
            if imageMatch:
                info.imageReplacement = imageMatch.group(1)

            infoById[spec] = info

    return infoById

class Language:
    def __init__(self, code, blocks, aliases=None, define=None, ignoreLt=None, math=None, osis=None):
        self.code = code
        self.blocks: dict[str, str] = blocks # blockid -> translated spec
        self.aliases: dict[str, str] = aliases or {}
        self.define: list[str] = define or []
        self.ignoreLt: list[str] = ignoreLt or []
        self.math: list[str] = math or []
        self.osis: list[str] = osis or []

    @staticmethod
    def loadFromParse(data: dict):
        """ Create a Language from a (validated) language pack """
        return Language(
            code=data["code"],
            blocks=dict(data["blocks"]),
            aliases=dict(data.get("aliases", {})),
            define=list(data.get("define", [])),
            ignoreLt=list(data.get("ignorelt", [])),
            math=list(data.get("math", [])),
            osis=list(data.get("osis", []))
        )

    def __repr__(self):
        return f'<Language "{self.code}" ({len(self.blocks)} blocks)>'

class BlockLookup:
    def __init__(self, infoById, foldDiacritics=True):
        """
        Read-only lookup tables built from every loaded language. Instances handed out by
        BlockDatabase.snapshot() are never modified; BlockDatabase works on copies.
        """
        self.infoById: dict[str, BlockInfo] = infoById
        self.foldDiacritics = foldDiacritics

        self.byText: dict[str, tuple] = {} # minified spec -> (blockid, language code)
        self.aliases: dict[str, str] = {}
        self.languages: dict[str, Language] = {}

        # keywords merged from every language. define keywords are lowercased, the rest minified
        self.define: list[str] = []
        self.ignoreLt: list[str] = []
        self.math: list[str] = []
        self.osis: list[str] = []

    def minify(self, text):
        return minify(text, self.foldDiacritics)

    def copy(self):
        other = BlockLookup(self.infoById, self.foldDiacritics)
        other.byText = dict(self.byText)
        other.aliases = dict(self.aliases)
        other.languages = dict(self.languages)
        other.define = list(self.define)
        other.ignoreLt = list(self.ignoreLt)
        other.math = list(self.math)
        other.osis = list(self.osis)
        return other

    def addLanguage(self, language: Language):
        """ Add a language's blocks, aliases and keywords to the tables """
        blocks = {}
        for blockid, spec in language.blocks.items():
            if not blockid in self.infoById:
                continue # translations of blocks we don't know about

            spec = re.sub(r"@[-A-Za-z]+", "@", spec, count=1) # remove images
            blocks[blockid] = spec

            minispec = self.minify(normalizeSpec(spec))
            if minispec:
                self.byText[minispec] = (blockid, language.code)

        # aliases (mostly for image blocks)
        for text, blockid in language.aliases.items():
            if not blockid in self.infoById:
                continue
            self.aliases[text] = blockid
            self.byText[self.minify(normalizeSpec(text))] = (blockid, language.code)

        self.define += [s.strip().lower() for s in language.define if s.strip()]
        self.ignoreLt += [self.minify(s) for s in language.ignoreLt if s]
        self.math += [self.minify(s) for s in language.math if s]
        self.osis += [self.minify(s) for s in language.osis if s]

        self.languages[language.code] = Language(
            language.code,
            blocks,
            aliases=language.aliases,
            define=language.define,
            ignoreLt=language.ignoreLt,
            math=language.math,
            osis=language.osis
        )

    def findBlock(self, spec, args=()):
        """
        Look up a block by its (normalized) spec. Returns a (BlockInfo, text) pair, where text
        is the spec to draw the block with, or None if the block isn't known.
        args are the raw argument pieces, used by the hacks for ambiguous blocks.
        """
        minitext = self.minify(spec)

        if minitext in self.byText:
            blockid, lang = self.byText[minitext]
            info = self.infoById[blockid].copy()
            info.lang = lang

            if info.imageReplacement:
                text = self.languages[lang].blocks[blockid]
            else:
                if spec in ("...", "…"):
                    spec = ". . ."
                text = spec

            applyHack(info, list(args), self)
            return info, text

        if spec.replace(" ", "") == "..." and spec != "...":
            return self.findBlock("...")

        return None

    def isIgnoredLt(self, text):
        """ Whether text starts a block that contains a literal "<" or ">" (like "when distance < _") """
        minitext = self.minify(text)
        for phrase in self.ignoreLt:
            if minitext.startswith(phrase):
                return True
        return False

    def isDefine(self, code):
        """
        Return the define keyword a custom block header starts with, or None. The keyword
        must be the whole of code or be followed by a space. Comparison is on minified text,
        so case and accents don't matter; the returned keyword is as long as the matched prefix
        """
        for keyword in self.define:
            if len(code) > len(keyword) and code[len(keyword)] != " ":
                continue
            if self.minify(code[:len(keyword)]) == self.minify(keyword):
                return keyword

    def specFor(self, blockid, lang="en"):
        """ Return the spec of a block in a loaded language, or None """
        language = self.languages.get(lang)
        if language == None:
            return None
        return language.blocks.get(blockid)

class BlockDatabase:
    def __init__(self, foldDiacritics=True):
        """ Build the database with the English blocks loaded """
        self._lock = threading.RLock()
        self.infoById = buildBlockInfo()

        english = BlockLookup(self.infoById, foldDiacritics)
        english.addLanguage(Language.loadFromParse(ENGLISH))

        # published lookups are never modified, so the initial one can be shared by reset
        self._initialLookup = english
        self._lookup = english

    @staticmethod
    def withLanguages(*codes, foldDiacritics=True):
        """ Create a database with the bundled language packs for [codes] loaded """
        database = BlockDatabase(foldDiacritics)
        for code in codes:
            database.loadBundledLanguage(code)
        return database

    def snapshot(self) -> BlockLookup:
        with self._lock:
            return self._lookup

    @property
    def languages(self):
        return self.snapshot().languages

    def loadLanguage(self, data: dict):
        """ Add a language pack (a dict in the format of resources/language.schema.json) """
        validateLanguage(data)
        language = Language.loadFromParse(data)

        with self._lock:
            lookup = self._lookup.copy()
            lookup.addLanguage(language)
            self._lookup = lookup

        return language

    def loadLanguageFile(self, path):
        with open(path, encoding="utf-8") as fl:
            try:
                data = json.load(fl)
            except json.JSONDecodeError as e:
                raise LanguageError(f'Language pack "{path}" is not valid JSON: {e}') from e

        return self.loadLanguage(data)

    def loadBundledLanguage(self, code):
        path = os.path.join(RESOURCES, code + ".json")
        if not os.path.isfile(path):
            raise LanguageError(f'No bundled language pack for "{code}"')

        return self.loadLanguageFile(path)

    def resetLanguages(self):
        """ Forget every language loaded after English. Don't call this while parsing """
        with self._lock:
            self._lookup = self._initialLookup

    def findBlock(self, spec, args=()):
        return self.snapshot().findBlock(spec, args)

    def __repr__(self):
        return f'<BlockDatabase languages={list(self.languages.keys())}>'
