import pytest

from errors import StoreWriteError, ValidationError
from forms import FORM_FIELDS, FIELD_NAMES, GENDER_CHOICES, ProfileForm
from models import Profile
from conftest import sample_profile


class RecordingStore:
    """Stand-in store that records calls."""

    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def create(self, record):
        self.calls.append(('create', record))
        if self.fail:
            raise StoreWriteError('backend down')
        return 'new-id'

    def update(self, profile_id, partial):
        self.calls.append(('update', profile_id, partial))
        if self.fail:
            raise StoreWriteError('backend down')


def test_field_layout_matches_profile_model():
    assert FIELD_NAMES == Profile.FIELD_NAMES
    assert len(FORM_FIELDS) == 23
    required = [f.name for f in FORM_FIELDS if f.required]
    assert required == ['regn_number', 'gender', 'full_name_with_surname', 'contact_no']
    gender = FORM_FIELDS[1]
    assert gender.kind == 'select'
    assert gender.options == GENDER_CHOICES == ('Girl', 'Boy')
    kinds = {f.name: f.kind for f in FORM_FIELDS}
    assert kinds['address'] == kinds['requirements_spouse'] == kinds['any_other_details'] == 'textarea'
    assert kinds['contact_no'] == 'tel'


def test_new_form_is_blank():
    form = ProfileForm()
    assert form.is_new
    assert set(form.data) == set(FIELD_NAMES)
    assert all(v == '' for v in form.data.values())


def test_formatted_contact_number_passes():
    form = ProfileForm(sample_profile(contact_no='987-654-3210'))
    assert form.validate() == {}


def test_short_contact_number_fails():
    form = ProfileForm(sample_profile(contact_no='98765432'))
    assert form.validate() == {'contact_no': 'Contact number must be 10 digits'}


def test_blank_name_fails():
    form = ProfileForm(sample_profile(full_name_with_surname='   '))
    assert form.validate() == {'full_name_with_surname': 'Full name is required'}


def test_all_violations_reported_together():
    form = ProfileForm(sample_profile(full_name_with_surname='', contact_no='98765432'))
    errors = form.validate()
    assert errors == {
        'full_name_with_surname': 'Full name is required',
        'contact_no': 'Contact number must be 10 digits',
    }
    assert form.errors == errors


def test_blank_form_reports_every_required_field():
    errors = ProfileForm().validate()
    assert set(errors) == {'regn_number', 'full_name_with_surname', 'gender', 'contact_no'}
    assert errors['contact_no'] == 'Contact number is required'


def test_submit_invalid_never_calls_store():
    store = RecordingStore()
    form = ProfileForm(sample_profile(regn_number=''))

    with pytest.raises(ValidationError) as exc:
        form.submit(store)

    assert exc.value.errors == {'regn_number': 'Registration number is required'}
    assert store.calls == []


def test_submit_new_creates():
    store = RecordingStore()
    form = ProfileForm(sample_profile())

    assert form.submit(store) == 'new-id'
    assert store.calls[0][0] == 'create'
    assert store.calls[0][1]['regn_number'] == 'REG001'


def test_submit_existing_updates_with_full_field_set():
    store = RecordingStore()
    form = ProfileForm(sample_profile(), profile_id='abc')

    assert form.submit(store) == 'abc'
    kind, profile_id, partial = store.calls[0]
    assert (kind, profile_id) == ('update', 'abc')
    assert set(partial) == set(FIELD_NAMES)


def test_failed_save_keeps_edits():
    store = RecordingStore(fail=True)
    form = ProfileForm(sample_profile(pob='Pune'))

    with pytest.raises(StoreWriteError):
        form.submit(store)
    assert form.data['pob'] == 'Pune'
    assert form.data['regn_number'] == 'REG001'


def test_from_mapping_strips_and_ignores_unknown_keys():
    form = ProfileForm.from_mapping({'regn_number': '  REG9 ', 'csrf': 'x'}, profile_id='p1')
    assert form.data['regn_number'] == 'REG9'
    assert 'csrf' not in form.data
    assert form.profile_id == 'p1'
    assert not form.is_new


def test_from_profile():
    p = Profile(id='p2', regn_number='REG7', full_name_with_surname='Asha', pob=None)
    form = ProfileForm.from_profile(p)
    assert form.profile_id == 'p2'
    assert form.data['regn_number'] == 'REG7'
    assert form.data['pob'] == ''


def test_none_values_count_as_blank():
    form = ProfileForm({'regn_number': None, 'contact_no': None})
    assert form.data['regn_number'] == ''
    errors = form.validate()
    assert errors['regn_number'] == 'Registration number is required'
    assert errors['contact_no'] == 'Contact number is required'
