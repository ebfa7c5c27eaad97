"""
Token and pattern library for business card field classification.

All bilingual (English / Russian) vocabulary lives in the ``KEYWORDS`` table
below; the compiled regexes and predicate functions are derived from it, so
language coverage can be extended by editing the table alone.

Each table entry holds two lists:
    words: regex fragments that must match a whole word
    stems: regex fragments that may be followed by any word characters
"""

import re
from typing import Dict, List, Optional

UPPER = "A-ZÀ-ÖØ-ÞА-ЯЁ"
LOWER = "a-zß-öø-ÿа-яё"

KEYWORDS: Dict[str, Dict[str, List[str]]] = {
    # Job title nouns
    "title": {
        "words": [
            "ceo", "cto", "cfo", "coo", "cmo", "cio", "cpo", "vp", "svp", "evp",
            "founder", "co-founder", "cofounder", "owner", "partner", "president",
            "vice[- ]president", "chairman", "chairwoman", "director", "manager",
            "engineer", "developer", "programmer", "designer", "consultant", "analyst",
            "specialist", "officer", "head", "architect", "administrator", "coordinator",
            "supervisor", "representative", "executive", "assistant", "associate",
            "advisor", "adviser", "attorney", "lawyer", "accountant", "secretary",
            "ambassador", "attach[eé]", "counsell?or", "consul(?:[- ]general)?",
            "minister(?:[- ]counsell?or)?", "envoy", "recruiter", "producer", "editor",
            "agent", "broker", "realtor", "professor", "lecturer", "researcher",
            "scientist", "team lead", "tech lead", "charg[eé] d'affaires",
        ],
        "stems": [
            "директор", "менеджер", "инженер", "руководител", "начальник", "заместител",
            "специалист", "консультант", "советник", "посол(?!ьств)", "посланник",
            "атташе", "секретар", "президент", "основател", "учредител", "председател",
            "аналитик", "бухгалтер", "юрист", "консул(?!ьств)", "программист",
            "дизайнер", "эксперт", "управляющ", "представител",
        ],
    },
    # Department words and diplomatic "affairs" phrases; weaker than titles
    "department": {
        "words": [
            "sales", "marketing", "product", "operations", "business development",
            "human resources", "hr", "procurement", "logistics",
            "(?:political|economic|consular|cultural|press|public|commercial|military|foreign) affairs",
        ],
        "stems": ["продаж", "маркетинг", "разработ", "по связям", "по вопросам"],
    },
    # Modifiers that start a title: "Senior ...", "Head of ...", "Первый ..."
    "title_anchor": {
        "words": [
            "senior", "sr\\.?", "junior", "jr\\.?", "lead", "chief", "head", "vice",
            "deputy", "executive", "assistant", "associate", "general", "managing",
            "principal", "regional", "global", "acting", "first", "second", "third",
        ],
        "stems": [
            "старш", "ведущ", "главн", "генеральн", "исполнительн", "коммерческ",
            "техническ", "финансов", "перв", "втор", "трет",
        ],
    },
    "company": {
        "words": [
            "inc\\.?", "llc", "llp", "ltd\\.?", "limited", "corp\\.?", "corporation",
            "company", "co\\.?(?![\\w-])", "gmbh", "ag", "plc", "s\\.a\\.", "b\\.v\\.",
            "group", "holdings?", "technologies", "technology", "systems", "solutions",
            "studio", "agency", "bank", "embassy", "consulate(?:[- ]general)?",
            "ministry", "university", "institute", "college", "foundation",
            "association", "partners", "associates", "enterprises", "industries",
            "international", "labs?", "ventures", "capital", "consulting", "services",
            "trust", "ооо", "оао", "зао", "пао", "ао", "ип", "нко",
        ],
        "stems": [
            "компани", "корпораци", "групп", "холдинг", "посольств", "консульств",
            "министерств", "банк", "университет", "институт", "фонд", "ассоциаци",
            "агентств", "завод", "фирм", "предприяти", "торгпредств",
        ],
    },
    "address": {
        "words": [
            "street", "st\\.?", "str\\.?", "avenue", "ave\\.?", "road", "rd\\.?",
            "boulevard", "blvd\\.?", "lane", "ln\\.?", "drive", "highway", "hwy\\.?",
            "square", "sq\\.?", "plaza", "parkway", "pkwy\\.?", "court", "ct\\.?",
            "place", "suite", "ste\\.?", "floor", "fl\\.?", "building", "bldg\\.?",
            "room", "rm\\.?", "apt\\.?", "apartment", "p\\.?\\s?o\\.?\\s?box",
            "zip", "postal", "postcode", "usa", "россия", "u\\.s\\.a\\.?",
            "ул\\.", "пр\\.", "пр-т", "пер\\.", "д\\.", "оф\\.", "корп\\.", "стр\\.",
            "кв\\.", "г\\.", "наб\\.", "пл\\.", "обл\\.", "р-н", "б-р", "пом\\.",
        ],
        "stems": [
            "улиц", "просп", "переул", "дом", "офис", "корпус", "строени", "город",
            "шоссе", "набережн", "площад", "бульвар", "индекс", "област",
            "район", "этаж", "помещени",
        ],
    },
    # Labels printed next to contact tokens
    "contact_label": {
        "words": [
            "tel\\.?", "telephone", "phone", "fax", "mob\\.?", "mobile",
            "cell", "cellphone", "e-?mail", "mail", "web", "website", "site", "url",
            "www", "тел\\.?", "телефон", "факс", "моб\\.?",
            "мобильный", "сот\\.?", "эл\\.?\\s?почта", "почта", "сайт",
        ],
        "stems": [],
    },
    # Words that disqualify a span from being a person's name
    "name_stopword": {
        "words": [
            "embassy", "consulate", "ministry", "department", "dept", "office",
            "affairs", "foreign", "general", "republic", "federation", "kingdom",
            "first", "second", "third", "fourth", "secretary", "counsellor",
            "counselor", "attache", "business", "card", "center", "centre",
            "international", "welcome", "thank", "you",
        ],
        "stems": [
            "посольств", "консульств", "министерств", "департамент", "отдел",
            "управлени", "перв", "втор", "трет", "секретар", "советник",
            "российск", "федераци", "республик",
        ],
    },
}


def _compile(category: str) -> re.Pattern:
    entry = KEYWORDS[category]
    parts = []
    if entry["words"]:
        parts.append(r"(?<!\w)(?:%s)(?!\w)" % "|".join(entry["words"]))
    if entry["stems"]:
        parts.append(r"(?<!\w)(?:%s)\w*" % "|".join(entry["stems"]))
    return re.compile("|".join(parts), re.IGNORECASE)


TITLE_RE = _compile("title")
DEPARTMENT_RE = _compile("department")
TITLE_ANCHOR_RE = _compile("title_anchor")
COMPANY_RE = _compile("company")
ADDRESS_RE = _compile("address")
CONTACT_LABEL_RE = _compile("contact_label")
NAME_STOPWORD_RE = _compile("name_stopword")

# Russian organizations are often quoted: ООО «Ромашка»
QUOTED_NAME_RE = re.compile(r"[«\"“][^»\"”]{2,}[»\"”]")

# 2-3 capitalized (optionally accented / hyphenated) words
NAME_WORD = rf"[{UPPER}][{LOWER}]+(?:[-'’][{UPPER}]?[{LOWER}]+)?"
NAME_RE = re.compile(rf"(?<!\w){NAME_WORD}(?:[ \t]+{NAME_WORD}){{1,2}}(?!\w)")

STRICT_TITLE_WORD_RE = re.compile(rf"^[{UPPER}][{LOWER}'’-]+$")
CAPITALIZED_WORD_RE = re.compile(rf"^[{UPPER}][{UPPER}{LOWER}'’.-]*$")
LETTERS_WORD_RE = re.compile(r"^[^\W\d_][^\W\d_'’.-]*$")

_CLAUSE = r"[^\W\d_]+(?:[ .'’-]+[^\W\d_]+)*"
TWO_CLAUSE_RE = re.compile(rf"^{_CLAUSE}\s*,\s*{_CLAUSE}\.?$")

_LABEL_PREFIX_RE = re.compile(
    r"^(?:(?:%s)\s*[.:#]\s*[/|,]?\s*)+" % CONTACT_LABEL_RE.pattern, re.IGNORECASE
)
_LABEL_ONLY_RE = re.compile(
    r"^(?:(?:%s)|[\s.:;,/|()#+-])+$" % CONTACT_LABEL_RE.pattern, re.IGNORECASE
)


def is_title_line(text: str) -> bool:
    """True when text reads like a job title.

    Department words only count when the text is not also an organization
    name ("Acme Sales Inc." is a company, "Sales" alone is a title).
    """
    if not text:
        return False
    if TITLE_RE.search(text):
        return True
    return bool(DEPARTMENT_RE.search(text)) and not is_company_line(text)


def is_company_line(text: str) -> bool:
    if not text:
        return False
    return bool(COMPANY_RE.search(text) or QUOTED_NAME_RE.search(text))


def is_address_line(text: str) -> bool:
    """Street/postal vocabulary, digits mixed with letters, or "Word, Word".

    The two-clause shape only counts when neither clause is a title or an
    organization ("John Smith, CEO" is not an address).
    """
    if not text:
        return False
    if ADDRESS_RE.search(text):
        return True
    if any(c.isdigit() for c in text) and any(c.isalpha() for c in text):
        return True
    if TWO_CLAUSE_RE.match(text):
        return not (is_title_line(text) or is_company_line(text))
    return False


def has_name_stopword(text: str) -> bool:
    return bool(NAME_STOPWORD_RE.search(text))


def is_strict_title_word(word: str) -> bool:
    """"Smith" yes; "SMITH", "smith", "S" no."""
    return bool(STRICT_TITLE_WORD_RE.match(word))


def is_person_ish(text: str) -> bool:
    """At least two strictly title-cased words in a 2-5 word span."""
    words = text.split()
    if not 2 <= len(words) <= 5:
        return False
    return sum(1 for w in words if is_strict_title_word(w.strip(",.;:"))) >= 2


def is_contact_label(text: str) -> bool:
    """True when a line holds nothing but contact labels and punctuation."""
    return bool(text) and bool(_LABEL_ONLY_RE.match(text))


def strip_contact_labels(text: str) -> str:
    return _LABEL_PREFIX_RE.sub("", text).strip()


def find_title_anchor(segment: str) -> Optional[int]:
    """Offset of the first title keyword or modifier in segment, if any."""
    starts = [
        m.start()
        for m in (
            TITLE_ANCHOR_RE.search(segment),
            TITLE_RE.search(segment),
            DEPARTMENT_RE.search(segment),
        )
        if m
    ]
    return min(starts) if starts else None
