"""
Constants and shared configuration for unsubscribe functionality.

This module contains the multilingual keyword tables (English, Dutch,
German, French), success-phrase heuristics, and the string codes used
across the discovery and execution pipeline.
"""

import re
from typing import List, Pattern

# Candidate kinds
KIND_LINK = "link"
KIND_MAILTO = "mailto"

# Execution methods (which tier produced a verdict)
METHOD_GET = "get"
METHOD_MAILTO = "mailto"
METHOD_FORM = "form"

# Outcome status
STATUS_COMPLETED = "completed"
STATUS_INSTRUCTIONS_ONLY = "instructions_only"
STATUS_FAILED = "failed"

# Failure taxonomy
FAILURE_NETWORK = "network_failure"
FAILURE_TIMEOUT = "timeout"
FAILURE_INVALID_URL = "invalid_url"
FAILURE_HTTP_ERROR = "http_error"
FAILURE_NO_FORM_FOUND = "no_form_found"
FAILURE_AMBIGUOUS = "ambiguous_result"
FAILURE_UNEXPECTED = "unexpected_error"


def _compile(patterns: List[str]) -> List[Pattern]:
    return [re.compile(pattern, re.IGNORECASE) for pattern in patterns]


# Unsubscribe keyword patterns, grouped by language.
# Multi-word phrases accept hyphen, space or nothing between words.
# Keywords also match inside joined tokens (list_unsubscribe, emailunsubscribe);
# "stop" must not touch other letters so "desktop" stays out.
UNSUBSCRIBE_PATTERNS_EN: List[str] = [
    r'unsub',
    r'opt[- ]?out',
    r'remove',
    r'(?<![a-z])stop(?![a-z])',
    r'cancel[- ]?(?:your[- ]?)?subscription',
    r'manage[- ]?(?:your[- ]?)?(?:email[- ]?)?preferences',
    r'email[- ]?preferences',
    r'list[- ]?remove',
    r'no[- ]?longer[- ]?receive',
]

UNSUBSCRIBE_PATTERNS_NL: List[str] = [
    r'afmeld',
    r'uitschrijv',
    r'abonnement[- ]?opzeggen',
    r'opzeggen',
    r'voorkeuren[- ]?(?:beheren|wijzigen|aanpassen)',
    r'niet[- ]?(?:meer|langer)[- ]?ontvangen',
]

UNSUBSCRIBE_PATTERNS_DE: List[str] = [
    r'abmeld',
    r'abbestell',
    r'austragen',
    r'abonnement[- ]?k(?:ü|ue|u)ndigen',
    r'einstellungen[- ]?verwalten',
    r'nicht[- ]?mehr[- ]?(?:erhalten|empfangen)',
]

UNSUBSCRIBE_PATTERNS_FR: List[str] = [
    r'd(?:é|e)sabonn',
    r'd(?:é|e)sinscri',
    r'se[- ]?d(?:é|e)sinscrire',
    r'annuler[- ]?(?:mon[- ]?|votre[- ]?)?abonnement',
    r'g(?:é|e)rer[- ]?(?:les[- ]?|mes[- ]?|vos[- ]?)?pr(?:é|e)f(?:é|e)rences',
    r'ne[- ]?plus[- ]?recevoir',
]

UNSUBSCRIBE_PATTERNS: List[Pattern] = _compile(
    UNSUBSCRIBE_PATTERNS_EN
    + UNSUBSCRIBE_PATTERNS_NL
    + UNSUBSCRIBE_PATTERNS_DE
    + UNSUBSCRIBE_PATTERNS_FR
)

# Forms on an unsubscribe landing page also qualify when they ask for confirmation
CONFIRMATION_PATTERNS: List[Pattern] = _compile([
    r'confirm',
    r'bevestig',
    r'best(?:ä|ae|a)tig',
    r'confirmer',
])

FORM_PATTERNS: List[Pattern] = UNSUBSCRIBE_PATTERNS + CONFIRMATION_PATTERNS

# Response text that indicates the recipient was removed from the list
SUCCESS_PATTERNS: List[Pattern] = _compile([
    # English
    r'\bunsubscribed\b',
    r'successfully\s+removed',
    r'(?:have|has)\s+been\s+removed',
    r'no\s+longer\s+receive',
    r'opted[- ]?out',
    r'will\s+not\s+receive\s+(?:any\s+)?(?:more|further)',
    # Dutch
    r'afgemeld',
    r'uitgeschreven',
    r'succesvol\s+verwijderd',
    r'(?:niet\s+meer|geen\s+e-?mails?\s+meer)\s+ontvangen',
    # German
    r'abgemeldet',
    r'ausgetragen',
    r'erfolgreich\s+entfernt',
    r'(?:nicht|keine\s+e-?mails?)\s+mehr\s+erhalten',
    # French
    r'd(?:é|e)sabonn(?:é|e)(?:e|s)?\b',
    r'd(?:é|e)sinscrit',
    r'ne\s+recevrez\s+plus',
    r'supprim(?:é|e)(?:e)?\s+avec\s+succ(?:è|e)s',
])

# Anchor hrefs that can never be an unsubscribe target
IGNORED_HREF_PREFIXES = ('#', 'javascript:')

# mailto: URIs anywhere in a body, with optional query string
MAILTO_PATTERN: Pattern = re.compile(
    r'mailto:([^?\s"\'<>]+)(\?[^"\'<>\s]*)?',
    re.IGNORECASE
)

# Fallback values for synthesized form fields
SUBMIT_FALLBACK_VALUE = "Unsubscribe"
CONFIRM_FIELD_VALUE = "1"

SUBMIT_INPUT_TYPES = ('submit', 'button')
