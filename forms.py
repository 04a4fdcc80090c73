"""
Profile form: field layout, validation and the create-or-update dispatch.
"""
import logging
from collections import namedtuple

from errors import StoreWriteError, ValidationError
from utils import digits_only

logger = logging.getLogger(__name__)

FormField = namedtuple('FormField', 'name label required kind options placeholder')


def _field(name, label, required=False, kind='text', options=(), placeholder=''):
    return FormField(name, label, required, kind, tuple(options), placeholder)


GENDER_CHOICES = ('Girl', 'Boy')

# Order and labels are what staff see on the form and on every printed sheet
FORM_FIELDS = (
    _field('regn_number', 'Regn Number', required=True),
    _field('gender', 'Gender', required=True, kind='select', options=GENDER_CHOICES),
    _field('full_name_with_surname', 'Full Name (With surname)', required=True),
    _field('sect_subsect', 'Sect /Subsect'),
    _field('gothram', 'Gothram'),
    _field('dob', 'DOB', placeholder='e.g., 04/07/2000 or 9-May-2000'),
    _field('tob', 'TOB', placeholder='e.g., 1.47 pm'),
    _field('pob', 'POB'),
    _field('star_padam', 'Star-Padam'),
    _field('height', 'Height', placeholder='e.g., 5.5"'),
    _field('complexion', 'Complexion'),
    _field('educational_qualifications', 'Educational Qualifications'),
    _field('employment_details', 'Employment Details'),
    _field('salary', 'Salary'),
    _field('father_name', "Father's Name"),
    _field('mother_name', "Mother's Name"),
    _field('siblings', 'Siblings'),
    _field('requirements_spouse', 'Requirements Spouse', kind='textarea'),
    _field('subsect_bar_no_bar', 'Subsect bar/ No bar'),
    _field('marital_status', 'Marital status'),
    _field('any_other_details', 'Any other details', kind='textarea'),
    _field('address', 'Address', kind='textarea'),
    _field('contact_no', 'Contact No', required=True, kind='tel'),
)

FIELD_NAMES = tuple(f.name for f in FORM_FIELDS)

REQUIRED_MESSAGES = {
    'regn_number': 'Registration number is required',
    'full_name_with_surname': 'Full name is required',
    'gender': 'Gender is required',
    'contact_no': 'Contact number is required',
}


def blank_profile_data():
    return {name: '' for name in FIELD_NAMES}


class ProfileForm:
    """
    Editable field set for one profile.

    ``profile_id`` is None while creating a new profile; submit() then creates
    instead of updating.
    """

    def __init__(self, data=None, profile_id=None):
        self.data = blank_profile_data()
        if data:
            self.data.update({k: '' if v is None else v for k, v in data.items() if k in self.data})
        self.profile_id = profile_id
        self.errors = {}

    @classmethod
    def from_profile(cls, profile):
        return cls({name: getattr(profile, name) or '' for name in FIELD_NAMES}, profile_id=profile.id)

    @classmethod
    def from_mapping(cls, mapping, profile_id=None):
        """Load submitted form values (e.g. request.form), stripping whitespace."""
        return cls({name: (mapping.get(name) or '').strip() for name in FIELD_NAMES}, profile_id=profile_id)

    @property
    def is_new(self):
        return not self.profile_id

    def validate(self):
        """Return every field violation at once; empty dict means valid."""
        errors = {}
        for name in ('regn_number', 'full_name_with_surname', 'gender'):
            if not self.data[name].strip():
                errors[name] = REQUIRED_MESSAGES[name]

        contact = self.data['contact_no']
        if not contact.strip():
            errors['contact_no'] = REQUIRED_MESSAGES['contact_no']
        elif len(digits_only(contact)) != 10:
            errors['contact_no'] = 'Contact number must be 10 digits'

        self.errors = errors
        return errors

    def submit(self, store):
        """
        Validate, then create or update through ``store``.

        Returns the profile id. Raises ValidationError without touching the
        store, or StoreWriteError when saving fails; self.data is kept either
        way so the user can correct it and retry.
        """
        errors = self.validate()
        if errors:
            raise ValidationError(errors)

        try:
            if self.is_new:
                return store.create(dict(self.data))
            store.update(self.profile_id, dict(self.data))
            return self.profile_id
        except StoreWriteError:
            logger.exception('Failed to save profile %s', self.profile_id or '(new)')
            raise
