import re
from dataclasses import replace
from typing import Iterable, List, Optional
from urllib.parse import quote

from tournament.exceptions import InvalidProfile
from tournament.models import Player, PlayerProfile, generate_id
from tournament.setup import player_from_profile

EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

WHATSAPP_MESSAGE = "Hola {name}, te contacto desde SIX-CRAZYS para el torneo de padel."


def validate_email(email: str) -> bool:
    """Email is optional; an empty value is valid."""
    email = email.strip()
    return not email or bool(EMAIL_RE.match(email))


def _clean_fields(name: str, category: str, phone: str, email: str, id_number: str) -> dict:
    fields = {
        "name": name.strip(),
        "category": category.strip(),
        "phone": phone.strip(),
        "email": email.strip(),
        "id_number": id_number.strip(),
    }
    if not fields["name"]:
        raise InvalidProfile("Name is required")
    if not fields["category"]:
        raise InvalidProfile("Category is required")
    if not validate_email(fields["email"]):
        raise InvalidProfile(f"Invalid email address {fields['email']!r}")
    return fields


def create_profile(name: str, category: str, phone: str = "", email: str = "", id_number: str = "") -> PlayerProfile:
    return PlayerProfile(id=generate_id(), **_clean_fields(name, category, phone, email, id_number))


def update_profile(
    profile: PlayerProfile,
    name: str, category: str, phone: str = "", email: str = "", id_number: str = "",
) -> PlayerProfile:
    return replace(profile, **_clean_fields(name, category, phone, email, id_number))


def list_categories(profiles: Iterable[PlayerProfile]) -> List[str]:
    return sorted({p.category for p in profiles if p.category})


def search_profiles(profiles: Iterable[PlayerProfile], term: str = "", category: str = "") -> List[PlayerProfile]:
    """Match name/email case-insensitively and phone/id number as substrings."""
    term = term.strip()
    lowered = term.lower()

    def matches(p: PlayerProfile) -> bool:
        found = (
            lowered in p.name.lower()
            or term in p.phone
            or lowered in p.email.lower()
            or term in p.id_number
        )
        return found and (not category or p.category == category)

    return sorted((p for p in profiles if matches(p)), key=lambda p: p.name.lower())


def available_profiles(
    profiles: Iterable[PlayerProfile],
    selected: Iterable[Player],
    category: str = "",
    term: str = "",
) -> List[PlayerProfile]:
    """Profiles offered when building a roster: same category, not picked yet."""
    taken = {p.profile_id for p in selected if p.profile_id}
    category = category.lower()
    lowered = term.strip().lower()
    return sorted(
        (
            p for p in profiles
            if (not category or p.category.lower() == category)
            and lowered in p.name.lower()
            and p.id not in taken
        ),
        key=lambda p: p.name.lower(),
    )


def pick_profiles(profiles: Iterable[PlayerProfile], profile_ids: Iterable[str]) -> List[Player]:
    """Roster players for the catalog profiles ticked on a setup form.

    Each profile joins at most once; ids no longer in the catalog are skipped.
    """
    profiles = list(profiles)
    players: List[Player] = []
    for pid in profile_ids:
        offered = {p.id: p for p in available_profiles(profiles, players)}
        if pid in offered:
            players.append(player_from_profile(offered[pid]))
    return players


def whatsapp_link(profile: PlayerProfile) -> Optional[str]:
    phone = re.sub(r"\D", "", profile.phone)
    if not phone:
        return None
    return f"https://wa.me/{phone}?text={quote(WHATSAPP_MESSAGE.format(name=profile.name))}"
