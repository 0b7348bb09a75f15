"""
Contract template rendering.

Templates are stored as markup (often produced by the rich text editor)
containing ``{{TOKEN}}`` placeholders drawn from ``TEMPLATE_VARIABLES``.
Rendering sanitizes the markup down to plain text and then substitutes
every token found in the context. Tokens without a value are kept as is
so an admin can see what is missing in the generated document.
"""
import html
import logging
import re
from datetime import date, datetime
from typing import Dict, List, Optional

from shared.wrappers.empty_string_model_wrapper import INVISIBLE_CHARS_PATTERN

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\{\{\s*([A-Z0-9_]+)\s*\}\}")
SIGNATURE_TOKEN_PATTERN = re.compile(r"\{\{\s*([A-Z0-9_]*SIGNATURE)\s*\}\}")
SIGNATURE_PLACEHOLDER_PATTERN = re.compile(r"\[SIGNATURE:([A-Z0-9_]+)\]")

TEMPLATE_VARIABLES: Dict[str, List[Dict[str, str]]] = {
    "Bailleur": [
        {"key": "OWNER_NAME", "label": "Nom du bailleur"},
        {"key": "OWNER_EMAIL", "label": "Email du bailleur"},
        {"key": "OWNER_PHONE", "label": "Téléphone du bailleur"},
        {"key": "OWNER_ADDRESS", "label": "Adresse du bailleur"},
        {"key": "SIRET_NUMBER", "label": "Numéro SIRET"},
    ],
    "Locataire": [
        {"key": "TENANT_FIRSTNAME", "label": "Prénom"},
        {"key": "TENANT_LASTNAME", "label": "Nom"},
        {"key": "TENANT_EMAIL", "label": "Email"},
        {"key": "TENANT_PHONE", "label": "Téléphone"},
        {"key": "TENANT_BIRTHDATE", "label": "Date de naissance"},
        {"key": "TENANT_PROFESSION", "label": "Profession"},
        {"key": "TENANT_INCOME", "label": "Revenus mensuels"},
    ],
    "Logement": [
        {"key": "PROPERTY_ADDRESS", "label": "Adresse du logement"},
        {"key": "ROOM_NAME", "label": "Nom de la chambre"},
        {"key": "ROOM_NUMBER", "label": "Numéro de chambre"},
        {"key": "ROOM_SURFACE", "label": "Surface de la chambre"},
        {"key": "TOTAL_SURFACE", "label": "Surface totale"},
    ],
    "Financier": [
        {"key": "MONTHLY_RENT", "label": "Loyer mensuel"},
        {"key": "BASE_RENT", "label": "Loyer hors charges"},
        {"key": "CHARGES", "label": "Charges"},
        {"key": "SECURITY_DEPOSIT", "label": "Dépôt de garantie"},
    ],
    "Dates": [
        {"key": "START_DATE", "label": "Date de début"},
        {"key": "END_DATE", "label": "Date de fin"},
        {"key": "CONTRACT_DATE", "label": "Date du contrat"},
        {"key": "CITY", "label": "Ville de signature"},
    ],
    "Contact": [
        {"key": "CONTACT_EMAIL", "label": "Email de contact"},
        {"key": "CONTACT_PHONE", "label": "Téléphone de contact"},
        {"key": "EMERGENCY_PHONE", "label": "Téléphone d'urgence"},
        {"key": "WEBSITE_URL", "label": "Site web"},
    ],
}

KNOWN_TOKENS = frozenset(
    var["key"] for group in TEMPLATE_VARIABLES.values() for var in group)

BLOCK_TAG_PATTERN = re.compile(
    r"<\s*(br|/p|/div|/h[1-6]|/li|/tr|/center)\s*/?\s*>", re.IGNORECASE)
LIST_ITEM_PATTERN = re.compile(r"<\s*li[^>]*>", re.IGNORECASE)
TAG_PATTERN = re.compile(r"<[^>]+>")
BLANK_LINES_PATTERN = re.compile(r"\n{3,}")

PUNCTUATION_MAP = str.maketrans({
    "\u2018": "'", "\u2019": "'", "\u201a": "'", "\u2032": "'",
    "\u201c": '"', "\u201d": '"', "\u201e": '"', "\u00ab": '"', "\u00bb": '"',
    "\u2013": "-", "\u2014": "-", "\u2212": "-",
    "\u2026": "...",
    "\u00a0": " ", "\u202f": " ", "\u2009": " ",
})


def find_tokens(body: str) -> List[str]:
    """Distinct token names in order of first appearance."""
    seen = []
    for match in TOKEN_PATTERN.finditer(body or ""):
        if match.group(1) not in seen:
            seen.append(match.group(1))
    return seen


def unknown_tokens(body: str) -> List[str]:
    return [t for t in find_tokens(body) if t not in KNOWN_TOKENS]


def unresolved_tokens(body: str, context: Dict[str, str]) -> List[str]:
    return [t for t in find_tokens(body) if context.get(t) is None]


def substitute(body: str, context: Dict[str, Optional[str]]) -> str:
    def _replace(match: re.Match) -> str:
        value = context.get(match.group(1))
        if value is None:
            return match.group(0)
        return str(value)

    return TOKEN_PATTERN.sub(_replace, body or "")


def sanitize_markup(markup: str) -> str:
    """Reduce rich text markup to plain text. Styling is discarded."""
    text = (markup or "").replace("\r\n", "\n")
    text = BLOCK_TAG_PATTERN.sub("\n", text)
    text = LIST_ITEM_PATTERN.sub("- ", text)
    text = TAG_PATTERN.sub("", text)
    text = html.unescape(text)
    text = text.translate(PUNCTUATION_MAP)
    text = INVISIBLE_CHARS_PATTERN.sub("", text)
    text = "\n".join(line.rstrip() for line in text.split("\n"))
    text = BLANK_LINES_PATTERN.sub("\n\n", text)
    return text.strip()


def mark_signature_slots(body: str) -> str:
    """``{{TENANT_SIGNATURE}}`` becomes ``[SIGNATURE:TENANT_SIGNATURE]``."""
    return SIGNATURE_TOKEN_PATTERN.sub(r"[SIGNATURE:\1]", body or "")


def render(body: str, context: Dict[str, Optional[str]]) -> str:
    text = substitute(mark_signature_slots(sanitize_markup(body)), context)
    missing = find_tokens(text)
    if missing:
        logger.warning(f"Unresolved contract tokens left in output: {', '.join(missing)}")
    return text


# ----------------- Context -----------------

def format_date(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    return str(value)


def format_money(value) -> str:
    if value is None:
        return ""
    amount = round(float(value), 2)
    if amount.is_integer():
        return str(int(amount))
    return f"{amount:.2f}"


def build_contract_context(contract, booking, settings) -> Dict[str, Optional[str]]:
    """Token values for a contract. Empty settings yield no value."""
    user = booking.user
    room = booking.room
    charges = contract.charges or 0

    context = {
        "OWNER_NAME": settings.OWNER_NAME,
        "OWNER_EMAIL": settings.OWNER_EMAIL,
        "OWNER_PHONE": settings.OWNER_PHONE,
        "OWNER_ADDRESS": settings.OWNER_ADDRESS,
        "SIRET_NUMBER": settings.SIRET_NUMBER,

        "TENANT_FIRSTNAME": user.first_name,
        "TENANT_LASTNAME": user.last_name,
        "TENANT_EMAIL": user.email,
        "TENANT_PHONE": user.phone,
        "TENANT_BIRTHDATE": format_date(user.birth_date) or None,
        "TENANT_PROFESSION": user.profession,
        "TENANT_INCOME": format_money(user.monthly_income) or None,

        "PROPERTY_ADDRESS": settings.PROPERTY_ADDRESS,
        "ROOM_NAME": room.name,
        "ROOM_NUMBER": str(room.number),
        "ROOM_SURFACE": format_money(room.surface),
        "TOTAL_SURFACE": settings.TOTAL_SURFACE,

        "MONTHLY_RENT": format_money(contract.monthly_rent),
        "BASE_RENT": format_money(float(contract.monthly_rent) - float(charges)),
        "CHARGES": format_money(charges),
        "SECURITY_DEPOSIT": format_money(contract.deposit or 0),

        "START_DATE": format_date(contract.start_date),
        "END_DATE": format_date(contract.end_date) or None,
        "CONTRACT_DATE": format_date(date.today()),
        "CITY": settings.CITY,

        "CONTACT_EMAIL": settings.CONTACT_EMAIL,
        "CONTACT_PHONE": settings.CONTACT_PHONE,
        "EMERGENCY_PHONE": settings.EMERGENCY_PHONE,
        "WEBSITE_URL": settings.WEBSITE_URL,
    }
    return {k: (v if v not in ("", None) else None) for k, v in context.items()}


DEFAULT_CONTRACT_BODY = """**IL A ÉTÉ CONVENU CE QUI SUIT ENTRE LES SOUSSIGNÉS :**

**{{OWNER_NAME}}**, gestionnaire
Adresse : {{OWNER_ADDRESS}}
Ci-après dénommé "le Bailleur"

Et

**{{TENANT_FIRSTNAME}} {{TENANT_LASTNAME}}**
Téléphone : {{TENANT_PHONE}}
Email : {{TENANT_EMAIL}}
Ci-après dénommé "le Locataire"

===

## Article 1 : OBJET DU CONTRAT
Le Bailleur loue au Locataire la chambre {{ROOM_NAME}} (numéro {{ROOM_NUMBER}}) d'une superficie de {{ROOM_SURFACE}} m², située {{PROPERTY_ADDRESS}}.

## Article 2 : DURÉE
Le présent bail prend effet le {{START_DATE}} et se termine le {{END_DATE}}.

## Article 3 : LOYER ET CHARGES
Le loyer mensuel est fixé à {{MONTHLY_RENT}}€ charges comprises, soit {{BASE_RENT}}€ de loyer et {{CHARGES}}€ de charges.

## Article 4 : DÉPÔT DE GARANTIE
Un dépôt de garantie de {{SECURITY_DEPOSIT}}€ est versé à la signature du présent contrat.

## Article 5 : ESPACES COMMUNS
Le Locataire a accès aux espaces communs : cuisine équipée, salon, salle de bain partagée, jardin.

## Article 6 : RÈGLEMENT INTÉRIEUR
Le Locataire s'engage à respecter le règlement intérieur de la colocation.

## Article 7 : ÉTAT DES LIEUX
Un état des lieux contradictoire sera établi à l'entrée et à la sortie du Locataire.

## Article 8 : RÉSILIATION
Le préavis de résiliation est de 1 mois pour le Locataire et de 3 mois pour le Bailleur.

===

Fait à {{CITY}}, le {{CONTRACT_DATE}}
En deux exemplaires originaux

**Le Bailleur**
[SIGNATURE:ADMIN_SIGNATURE]

**Le Locataire**
[SIGNATURE:TENANT_SIGNATURE]
"""
