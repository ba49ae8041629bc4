"""Naming rules: pluralization, singularization and case helpers."""


# Common English plural words that don't follow standard rules
IRREGULAR_PLURALS = {
    "child": "children",
    "person": "people",
    "man": "men",
    "woman": "women",
    "tooth": "teeth",
    "foot": "feet",
    "mouse": "mice",
    "goose": "geese",
    "ox": "oxen",
    "sheep": "sheep",
    "deer": "deer",
    "fish": "fish",
    "aircraft": "aircraft",
    "series": "series",
    "species": "species",
}

REVERSE_IRREGULARS = {plural: singular for singular, plural in IRREGULAR_PLURALS.items()}

# Words that are commonly already plural in database contexts
COMMON_PLURALS = frozenset({
    "employees", "users", "branches", "companies", "customers", "orders",
    "products", "categories", "addresses", "contacts", "documents", "files",
    "images", "videos", "messages", "notifications", "payments",
    "transactions", "invoices", "reports", "settings", "permissions", "roles",
    "groups", "teams", "departments", "locations", "countries", "states",
    "cities", "suppliers", "vendors", "clients", "projects", "tasks",
    "issues", "tickets", "events", "logs", "records", "entries", "items",
    "assets", "resources", "services", "features", "modules", "components",
    "elements",
})

# Endings that are taken to mean "already plural"
PLURAL_SUFFIXES = ("ies", "ves", "ses", "xes", "zes", "ches", "shes")

# Stems of "-ves" plurals whose singular ends in "fe"; every other stem gets "f"
_VES_FE_STEMS = {"kni", "wi"}

_VOWELS = "aeiou"


def _match_case(template: str, word: str) -> str:
    """Re-apply the casing pattern of *template* (lower, UPPER, Capitalized) to *word*."""
    if template == template.lower():
        return word
    if template == template.upper():
        return word.upper()
    return word[:1].upper() + word[1:]


def pluralize(word: str, custom_plurals: dict = None) -> str:
    """
    Pluralize *word*.

    Lookup order: caller overrides (case-insensitive), known plurals,
    irregular table, already-plural suffixes, then suffix rules.
    """
    lower = word.lower()

    if custom_plurals:
        overrides = {key.lower(): value for key, value in custom_plurals.items()}
        if lower in overrides:
            return _match_case(word, overrides[lower])

    if lower in COMMON_PLURALS or (lower in REVERSE_IRREGULARS and lower not in IRREGULAR_PLURALS):
        return word

    if lower in IRREGULAR_PLURALS:
        return _match_case(word, IRREGULAR_PLURALS[lower])

    # Heuristic: these endings usually mean the word is plural already.
    # "bus" or "class" still fall through to the "-es" rule below.
    if len(word) > 1 and word.endswith(PLURAL_SUFFIXES):
        return word

    if word.endswith("y") and len(word) > 1 and word[-2] not in _VOWELS:
        return word[:-1] + "ies"
    if word.endswith("f"):
        return word[:-1] + "ves"
    if word.endswith("fe"):
        return word[:-2] + "ves"
    if word.endswith("o") and len(word) > 1 and word[-2] not in _VOWELS:
        return word + "es"
    if word.endswith(("s", "sh", "ch", "x", "z")):
        return word + "es"

    return word + "s"


def singularize(word: str) -> str:
    """Convert a plural word back to its singular form (best effort)."""
    lower = word.lower()

    if lower in REVERSE_IRREGULARS:
        return _match_case(word, REVERSE_IRREGULARS[lower])

    if word.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if word.endswith("ves") and len(word) > 3:
        stem = word[:-3]
        if stem.lower() in _VES_FE_STEMS:
            return stem + "fe"
        return stem + "f"
    if word.endswith(("ses", "xes", "zes")) and len(word) > 3:
        return word[:-2]
    if word.endswith(("ches", "shes")) and len(word) > 4:
        return word[:-2]
    if word.endswith("es") and len(word) > 2:
        # heroes -> hero, but issues -> issue
        if word[:-2].endswith("o"):
            return word[:-2]
        return word[:-1]
    if word.endswith("s") and len(word) > 1:
        return word[:-1]

    return word


def pascal_case(word: str) -> str:
    """Upper-case the first character: findMany -> FindMany."""
    if not word:
        return word
    return word[0].upper() + word[1:]


def camel_case(word: str) -> str:
    """Lower-case the first character: BlogPost -> blogPost."""
    if not word:
        return word
    return word[0].lower() + word[1:]

