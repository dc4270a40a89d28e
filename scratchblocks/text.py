""" Text normalization used before looking blocks up in the database """

import re
import unicodedata

def removeDiacritics(text):
    """ "Größe" -> "Grosse". Only combining marks are dropped, compatibility characters such as "…" are kept """
    text = text.replace("ß", "ss")
    decomposed = unicodedata.normalize("NFD", text)
    return "".join([c for c in decomposed if not unicodedata.combining(c)])

def minify(text, foldDiacritics=True):
    """ Reduce block text to the form it is indexed by: no punctuation, lowercase, single spaces """
    minitext = re.sub(r"[.,%?:▶◀▸◂]", "", text).lower()
    minitext = re.sub(r"[ \t]+", " ", minitext).strip()

    if foldDiacritics:
        minitext = removeDiacritics(minitext)

    # the ellipsis block is nothing but punctuation
    if not minitext and text.replace(" ", "") == "...":
        minitext = "..."

    return minitext

def normalizeSpec(spec):
    """ Pad every underscore (insert placeholder) with spaces on both sides """
    spec = re.sub(r"(?<=[^ ])_", " _", spec)
    return re.sub(r"_(?=[^ ])", "_ ", spec)
