"""
German B2 Taxonomies - Static marker data

Contains:
- Mood markers (Konjunktiv II forms)
- Passive and nominalization patterns
- Subordinating conjunctions
- Advanced discourse connectors
- Error-signal patterns (article / preposition + case)
- Fixed feedback texts
"""

import re

# ==================== STRUCTURE MARKERS ====================

MOOD_MARKERS = [
    'würde', 'hätte', 'wäre', 'könnte', 'sollte', 'müsste', 'dürfte'
]

PASSIVE_AUXILIARIES = ['wird', 'wurden', 'worden', 'ist']

NOMINAL_SUFFIXES = ['ung', 'keit', 'heit', 'tion', 'tät', 'ismus']

SUBORDINATORS = [
    'weil', 'dass', 'obwohl', 'wenn', 'während', 'damit', 'sobald', 'falls'
]

# concession, contrast, consequence, enumeration
ADVANCED_CONNECTORS = [
    'obwohl',
    'während',
    'außerdem',
    'allerdings',
    'hingegen',
    'dennoch',
    'infolgedessen',
    'zudem',
    'einerseits',
    'andererseits'
]

DISCOURSE_MARKERS = ['einerseits', 'andererseits', 'abschließend', 'zusammenfassend']

PAST_CONDITIONAL_MARKERS = ['war', 'hatte', 'würde', 'wäre', 'hätte', 'könnte', 'wurde']


def _word_alternation(words):
    return r'\b(' + '|'.join(words) + r')\b'


# ==================== COMPILED PATTERNS ====================

MOOD_PATTERN = re.compile(_word_alternation(MOOD_MARKERS), re.IGNORECASE)

PASSIVE_PATTERN = re.compile(
    r'\b(' + '|'.join(PASSIVE_AUXILIARIES) + r')\s+\w+(t|en)\b',
    re.IGNORECASE
)

# Suffix match only: no leading boundary
NOMINAL_PATTERN = re.compile(r'(' + '|'.join(NOMINAL_SUFFIXES) + r')\b', re.IGNORECASE)

SUBORDINATOR_PATTERN = re.compile(_word_alternation(SUBORDINATORS), re.IGNORECASE)

CONNECTOR_PATTERNS = {
    connector: re.compile(r'\b' + connector + r'\b', re.IGNORECASE)
    for connector in ADVANCED_CONNECTORS
}

DISCOURSE_PATTERN = re.compile('|'.join(DISCOURSE_MARKERS), re.IGNORECASE)

PAST_CONDITIONAL_PATTERN = re.compile(
    _word_alternation(PAST_CONDITIONAL_MARKERS), re.IGNORECASE
)

FIRST_PERSON_OPENER = re.compile(r'^(ich|wir)\s+\w+', re.IGNORECASE)

# Case-sensitive on purpose: the capital letter is the signal
ARTICLE_SIGNAL_PATTERN = re.compile(r'\bein\s+[A-ZÄÖÜ]')

PREPOSITION_SIGNAL_PATTERN = re.compile(r'\bmit\s+der\s+Problem\b|\bwegen\s+dem\b', re.IGNORECASE)

SENTENCE_SPLIT = re.compile(r'[.!?]+')

# ==================== TAG TABLES ====================

MISSING_MOOD = 'Konjunktiv II'
MISSING_PASSIVE = 'Passiv'
MISSING_NOMINAL = 'Nominalisierung'
MISSING_SUBORDINATE = 'Mindestens zwei komplexe Nebensätze'
MISSING_CONNECTORS = 'Fortgeschrittene Konnektoren'

EMPTY_WEAKNESSES = ['Keine auswertbare Antwort vorhanden']
EMPTY_MISSING_STRUCTURES = [
    'Konjunktiv II', 'Passiv', 'Nominalisierung', 'Nebensätze', 'Konnektoren'
]

# (tag, feature key) in declaration order; feature keys map to booleans
# computed by components.weakness_flags()
WEAKNESS_RULES = [
    ('Konjunktiv II Bildung unsicher', 'no_mood'),
    ('Passiv kaum oder falsch eingesetzt', 'no_passive'),
    ('Nominalisierung fehlt im Ausdruck', 'no_nominal'),
    ('Nebensatzstruktur zu einfach', 'few_subordinates'),
    ('Argumentative Verknüpfung zu schwach', 'few_connectors'),
    ('Artikelgebrauch wirkt inkonsistent', 'article_issue'),
    ('Präpositionen mit Kasus unsicher', 'preposition_issue'),
]

# ==================== FIXED TEXTS ====================

ADVANCED_VERSION = (
    'Meines Erachtens sollte das Thema differenziert betrachtet werden, weil sowohl '
    'gesellschaftliche als auch wirtschaftliche Folgen berücksichtigt werden müssen. '
    'Wenn die vorgeschlagenen Maßnahmen konsequent umgesetzt würden, könnte die Qualität '
    'deutlich gesteigert werden; zudem würde die langfristige Planung erleichtert. '
    'Abschließend lässt sich festhalten, dass eine strukturierte Umsetzung unter klaren '
    'Rahmenbedingungen den größten Mehrwert erzeugen würde.'
)

CHALLENGE_EMPTY = (
    'Antwort liefern. Mindestens fünf Sätze mit klarer Argumentationsstruktur verfassen.'
)
CHALLENGE_TOO_SIMPLE = 'Struktur noch nicht auf B2-Niveau. Bitte komplexer formulieren.'
CHALLENGE_PRESSURE = (
    'Bitte anspruchsvoller formulieren. Verwenden Sie Konjunktiv II und mindestens '
    'eine Nominalisierung.'
)
CHALLENGE_EXPAND = (
    'Antwort erweitern. Nutzen Sie mindestens zwei komplexe Nebensätze und eine '
    'Hypothese im Konjunktiv II.'
)
CHALLENGE_DEFAULT = (
    'Erweitern Sie Ihre Antwort mit einer klaren Einleitung, zwei begründeten '
    'Argumenten und einem präzisen Fazit.'
)
