"""
In-memory search over profiles that are already loaded.
"""
from enum import Enum


class SearchField(Enum):
    REGN_NUMBER = 'regn_number'
    FULL_NAME = 'full_name_with_surname'
    POB = 'pob'
    GOTHRAM = 'gothram'

    @property
    def label(self):
        return SEARCH_FIELD_LABELS[self]

    @classmethod
    def from_param(cls, value):
        """Parse a query-string value; unknown or empty values mean registration number."""
        try:
            return cls(value)
        except ValueError:
            return cls.REGN_NUMBER


SEARCH_FIELD_LABELS = {
    SearchField.REGN_NUMBER: 'Registration Number',
    SearchField.FULL_NAME: 'Full Name',
    SearchField.POB: 'Place of Birth',
    SearchField.GOTHRAM: 'Gothram',
}

_ACCESSORS = {
    SearchField.REGN_NUMBER: lambda p: p.regn_number,
    SearchField.FULL_NAME: lambda p: p.full_name_with_surname,
    SearchField.POB: lambda p: p.pob,
    SearchField.GOTHRAM: lambda p: p.gothram,
}


def field_value(profile, field):
    """Value of the selected search field, '' when missing."""
    return _ACCESSORS[field](profile) or ''


def filter_profiles(profiles, term, field=SearchField.REGN_NUMBER):
    """
    Case-insensitive substring filter on one field.

    A blank term returns every profile. The result keeps the input order and
    is always a new list.
    """
    if not term or not term.strip():
        return list(profiles)

    needle = term.lower()
    return [p for p in profiles if needle in field_value(p, field).lower()]
