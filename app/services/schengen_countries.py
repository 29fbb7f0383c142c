"""Module A: Schengen country classifier.

Membership is held as a sorted tuple of (effective_date, member_set) entries so a
calculation for a past date can use the member list that was in force that day.
Microstates with open borders to a Schengen neighbour count as Schengen for day
counting. Ireland and Cyprus are EU members outside Schengen and never count.
"""
from bisect import bisect_right
from datetime import date
from typing import AbstractSet, Iterable

from app.schemas.country import CountryClassification, SchengenCountryResponse

MEMBERSHIP_VERSION = "2025-01-07"
MEMBERSHIP_SOURCE_URL = "https://home-affairs.ec.europa.eu/policies/schengen-borders-and-visa/schengen-area_en"

# code -> (name, date the country started applying Schengen rules)
SCHENGEN_MEMBERS: dict[str, tuple[str, date]] = {
    "AT": ("Austria", date(1997, 12, 1)),
    "BE": ("Belgium", date(1995, 3, 26)),
    "BG": ("Bulgaria", date(2025, 1, 1)),
    "HR": ("Croatia", date(2023, 1, 1)),
    "CZ": ("Czech Republic", date(2007, 12, 21)),
    "DK": ("Denmark", date(2001, 3, 25)),
    "EE": ("Estonia", date(2007, 12, 21)),
    "FI": ("Finland", date(2001, 3, 25)),
    "FR": ("France", date(1995, 3, 26)),
    "DE": ("Germany", date(1995, 3, 26)),
    "GR": ("Greece", date(2000, 1, 1)),
    "HU": ("Hungary", date(2007, 12, 21)),
    "IS": ("Iceland", date(2001, 3, 25)),
    "IT": ("Italy", date(1997, 10, 26)),
    "LV": ("Latvia", date(2007, 12, 21)),
    "LI": ("Liechtenstein", date(2011, 12, 19)),
    "LT": ("Lithuania", date(2007, 12, 21)),
    "LU": ("Luxembourg", date(1995, 3, 26)),
    "MT": ("Malta", date(2007, 12, 21)),
    "NL": ("Netherlands", date(1995, 3, 26)),
    "NO": ("Norway", date(2001, 3, 25)),
    "PL": ("Poland", date(2007, 12, 21)),
    "PT": ("Portugal", date(1995, 3, 26)),
    "RO": ("Romania", date(2025, 1, 1)),
    "SK": ("Slovakia", date(2007, 12, 21)),
    "SI": ("Slovenia", date(2007, 12, 21)),
    "ES": ("Spain", date(1995, 3, 26)),
    "SE": ("Sweden", date(2001, 3, 25)),
    "CH": ("Switzerland", date(2008, 12, 12)),
}

# Open borders, no passport control: time here is counted as Schengen presence
SCHENGEN_MICROSTATES: dict[str, str] = {
    "MC": "Monaco",
    "VA": "Vatican City",
    "SM": "San Marino",
    "AD": "Andorra",
}

EXCLUDED_COUNTRIES: dict[str, tuple[str, str]] = {
    "IE": ("Ireland", "EU member, opted out of Schengen"),
    "CY": ("Cyprus", "EU member, not yet implemented Schengen"),
    "GB": ("United Kingdom", "Not EU, not Schengen"),
}

EU_MEMBERS = frozenset({
    "AT", "BE", "BG", "HR", "CY", "CZ", "DK", "EE", "FI", "FR", "DE", "GR", "HU", "IE",
    "IT", "LV", "LT", "LU", "MT", "NL", "PL", "PT", "RO", "SK", "SI", "ES", "SE",
})

_NAME_ALIASES: dict[str, str] = {
    "CZECHIA": "CZ",
    "CZECH": "CZ",
    "HOLLAND": "NL",
    "THE NETHERLANDS": "NL",
    "HELLENIC REPUBLIC": "GR",
    "SWISS CONFEDERATION": "CH",
    "REPUBLIC OF CROATIA": "HR",
    "REPUBLIC OF ESTONIA": "EE",
    "REPUBLIC OF FINLAND": "FI",
    "REPUBLIC OF LATVIA": "LV",
    "REPUBLIC OF LITHUANIA": "LT",
    "REPUBLIC OF MALTA": "MT",
    "REPUBLIC OF POLAND": "PL",
    "REPUBLIC OF SLOVENIA": "SI",
    "SLOVAK REPUBLIC": "SK",
    "KINGDOM OF BELGIUM": "BE",
    "KINGDOM OF DENMARK": "DK",
    "KINGDOM OF THE NETHERLANDS": "NL",
    "KINGDOM OF NORWAY": "NO",
    "KINGDOM OF SPAIN": "ES",
    "KINGDOM OF SWEDEN": "SE",
    "FRENCH REPUBLIC": "FR",
    "FEDERAL REPUBLIC OF GERMANY": "DE",
    "ITALIAN REPUBLIC": "IT",
    "PORTUGUESE REPUBLIC": "PT",
    "REPUBLIC OF AUSTRIA": "AT",
    "GRAND DUCHY OF LUXEMBOURG": "LU",
    "PRINCIPALITY OF LIECHTENSTEIN": "LI",
    "PRINCIPALITY OF MONACO": "MC",
    "PRINCIPALITY OF ANDORRA": "AD",
    "REPUBLIC OF SAN MARINO": "SM",
    "HOLY SEE": "VA",
    "STATE OF VATICAN CITY": "VA",
    "REPUBLIC OF IRELAND": "IE",
    "EIRE": "IE",
    "REPUBLIC OF CYPRUS": "CY",
    "UK": "GB",
    "GREAT BRITAIN": "GB",
    "ENGLAND": "GB",
    "SCOTLAND": "GB",
    "WALES": "GB",
    "NORTHERN IRELAND": "GB",
}


def _build_name_index() -> dict[str, str]:
    index = {name.upper(): code for code, (name, _) in SCHENGEN_MEMBERS.items()}
    index.update({name.upper(): code for code, name in SCHENGEN_MICROSTATES.items()})
    index.update({name.upper(): code for code, (name, _) in EXCLUDED_COUNTRIES.items()})
    index.update(_NAME_ALIASES)
    return index


_NAME_TO_CODE = _build_name_index()
_KNOWN_CODES = frozenset(SCHENGEN_MEMBERS) | frozenset(SCHENGEN_MICROSTATES) | frozenset(EXCLUDED_COUNTRIES) | EU_MEMBERS


def normalize_country(value: str | None) -> str | None:
    """ISO alpha-2 code for a code or recognised country name, else None."""
    if not value or not isinstance(value, str):
        return None
    key = value.strip().upper()
    if not key:
        return None
    if key in _KNOWN_CODES:
        return key
    return _NAME_TO_CODE.get(key)


class SchengenMembership:
    """Schengen member sets keyed by the date they took effect.

    `entries` is a sorted tuple of (effective_date, member_set); each set is the full
    membership from that date until the next entry. With versioned=False every date
    resolves to the latest entry (current snapshot).
    """

    def __init__(self, entries: Iterable[tuple[date, AbstractSet[str]]], versioned: bool = True):
        ordered = sorted(((effective, frozenset(members)) for effective, members in entries), key=lambda e: e[0])
        if not ordered:
            raise ValueError("membership needs at least one entry")
        self._entries = tuple(ordered)
        self._versioned = versioned
        self._dates = tuple(d for d, _ in self._entries)

    @property
    def entries(self) -> tuple[tuple[date, frozenset[str]], ...]:
        return self._entries

    @property
    def versioned(self) -> bool:
        return self._versioned

    @classmethod
    def default(cls, versioned: bool = True) -> "SchengenMembership":
        microstates = frozenset(SCHENGEN_MICROSTATES)
        joins: dict[date, set[str]] = {}
        for code, (_, since) in SCHENGEN_MEMBERS.items():
            joins.setdefault(since, set()).add(code)
        entries = [(date.min, microstates)]
        current = set(microstates)
        for since in sorted(joins):
            current |= joins[since]
            entries.append((since, frozenset(current)))
        return cls(entries, versioned=versioned)

    @property
    def current(self) -> frozenset[str]:
        return self.entries[-1][1]

    def members_on(self, day: date | None = None) -> frozenset[str]:
        if day is None or not self.versioned:
            return self.current
        idx = bisect_right(self._dates, day) - 1
        if idx < 0:
            return frozenset()
        return self.entries[idx][1]

    def effective_from(self, code: str) -> date | None:
        """First date from which `code` counts as Schengen, None if it never does."""
        if code not in self.current:
            return None
        if not self.versioned:
            return date.min
        for effective, members in self.entries:
            if code in members:
                return effective
        return None

    def is_member(self, code: str, day: date | None = None) -> bool:
        return code in self.members_on(day)

    def classify(self, value: str | None, on: date | None = None) -> CountryClassification:
        code = normalize_country(value)
        if code is None:
            raw = value.strip().upper() if isinstance(value, str) else ""
            return CountryClassification(code=raw or None, name=None, is_schengen_member=False, is_non_schengen_eu=False)

        if code in EXCLUDED_COUNTRIES:
            name, reason = EXCLUDED_COUNTRIES[code]
            return CountryClassification(
                code=code,
                name=name,
                is_schengen_member=False,
                is_non_schengen_eu=code in EU_MEMBERS,
                exclusion_reason=reason,
            )

        is_member = self.is_member(code, on)
        if code in SCHENGEN_MICROSTATES:
            name = SCHENGEN_MICROSTATES[code]
        elif code in SCHENGEN_MEMBERS:
            name = SCHENGEN_MEMBERS[code][0]
        else:
            name = None
        return CountryClassification(
            code=code,
            name=name,
            is_schengen_member=is_member,
            is_non_schengen_eu=code in EU_MEMBERS and not is_member,
            is_microstate=code in SCHENGEN_MICROSTATES,
        )


def get_membership(mode: str | None = None) -> SchengenMembership:
    """Membership table for the configured mode ("versioned" or "snapshot")."""
    if mode is None:
        from app.config import get_settings
        mode = get_settings().schengen_membership_mode
    return _DEFAULT_MEMBERSHIPS[mode == "versioned"]


_DEFAULT_MEMBERSHIPS = {
    True: SchengenMembership.default(versioned=True),
    False: SchengenMembership.default(versioned=False),
}


def classify(value: str | None, on: date | None = None) -> CountryClassification:
    return get_membership().classify(value, on)


def is_schengen_country(value: str | None, on: date | None = None) -> bool:
    return classify(value, on).is_schengen_member


def list_schengen_countries() -> list[SchengenCountryResponse]:
    countries = [
        SchengenCountryResponse(code=code, name=name, is_microstate=False, member_since=since.isoformat())
        for code, (name, since) in SCHENGEN_MEMBERS.items()
    ]
    countries.extend(
        SchengenCountryResponse(code=code, name=name, is_microstate=True)
        for code, name in SCHENGEN_MICROSTATES.items()
    )
    return sorted(countries, key=lambda c: c.name)
