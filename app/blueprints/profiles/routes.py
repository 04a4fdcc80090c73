# app/blueprints/profiles/routes.py
"""
Profile routes - list/search, create/edit/delete, print and export
"""

from datetime import datetime
from io import BytesIO

from flask import render_template, redirect, url_for, flash, request, current_app, send_file
from flask_login import login_required, current_user

from app import printing
from app.extensions import cache
from errors import ExportError, NotFoundError, StoreReadError, StoreWriteError, ValidationError
from forms import FORM_FIELDS, ProfileForm
from models import log_action
from search import SearchField, filter_profiles
from store import ProfileStore
from utils import format_timestamp, safe_filename
from . import profiles_bp

# search fields that offer a suggestion list of known values
SUGGESTION_FIELDS = (SearchField.POB, SearchField.GOTHRAM)

PDF_FAILED_MESSAGE = 'Failed to generate PDF. Please use the Print button instead.'


@cache.memoize(timeout=900)
def get_search_suggestions(field_name):
    """Distinct values of a searchable field, for the search box datalist"""
    return ProfileStore().distinct_values(field_name)


def clear_dropdown_cache():
    """Clear search suggestions - call after adding/editing/deleting profiles"""
    cache.delete_memoized(get_search_suggestions)


def _search_params(source):
    """Current search term and field from query args or a posted form."""
    term = source.get('q', '')
    field = SearchField.from_param(source.get('field', ''))
    return term, field


def _list_url(term='', field=None):
    params = {}
    if term:
        params['q'] = term
    if field is not None and field is not SearchField.REGN_NUMBER:
        params['field'] = field.value
    return url_for('profiles.profile_list', **params)


def _audit(action, target_id, details):
    try:
        log_action(current_user.id, action, 'profile', target_id, details)
    except Exception:
        current_app.logger.exception(f'Failed to write audit log for {action}')


def _load_profile(profile_id):
    """
    Fetch one profile for a view/edit page.

    Returns (profile, None) or (None, redirect response) when the profile is
    missing or cannot be read; both send the user back to the list.
    """
    try:
        profile = ProfileStore().get_by_id(profile_id)
    except StoreReadError:
        flash('Failed to load profile', 'danger')
        return None, redirect(url_for('profiles.profile_list'))
    if profile is None:
        flash('Profile not found', 'warning')
        return None, redirect(url_for('profiles.profile_list'))
    return profile, None


# Routes
@profiles_bp.route('/')
@login_required
def index():
    return redirect(url_for('profiles.profile_list'))


@profiles_bp.route('/list')
@login_required
def profile_list():
    term, field = _search_params(request.args)

    try:
        profiles = ProfileStore().list_all()
    except StoreReadError:
        flash('Failed to load profiles', 'danger')
        profiles = []

    filtered = filter_profiles(profiles, term, field)

    suggestions = []
    if field in SUGGESTION_FIELDS:
        try:
            suggestions = get_search_suggestions(field.value)
        except StoreReadError:
            current_app.logger.warning(f'Search suggestions unavailable for {field.value}')

    return render_template('profiles_list.html',
                           profiles=filtered,
                           total_count=len(profiles),
                           search_term=term,
                           search_field=field,
                           search_fields=list(SearchField),
                           suggestions=suggestions)


def _save_profile(form):
    """Submit a form; re-render it on validation or save failure."""
    try:
        profile_id = form.submit(ProfileStore())
    except ValidationError:
        return render_template('profile_form.html', form=form, fields=FORM_FIELDS)
    except StoreWriteError:
        flash('Failed to save profile. Please try again.', 'danger')
        return render_template('profile_form.html', form=form, fields=FORM_FIELDS)

    clear_dropdown_cache()
    regn = form.data['regn_number']
    if form.is_new:
        _audit('profile.create', profile_id, f'regn_number={regn}')
        current_app.logger.info(f'Profile created: {profile_id} by {current_user.email}')
        flash('Profile created successfully!', 'success')
    else:
        _audit('profile.update', profile_id, f'regn_number={regn}')
        current_app.logger.info(f'Profile updated: {profile_id} by {current_user.email}')
        flash('Profile updated successfully!', 'success')
    return redirect(url_for('profiles.profile_list'))


@profiles_bp.route('/form', methods=['GET', 'POST'])
@login_required
def new_profile():
    if request.method == 'POST':
        return _save_profile(ProfileForm.from_mapping(request.form))
    return render_template('profile_form.html', form=ProfileForm(), fields=FORM_FIELDS)


@profiles_bp.route('/form/<profile_id>', methods=['GET', 'POST'])
@login_required
def edit_profile(profile_id):
    if request.method == 'POST':
        return _save_profile(ProfileForm.from_mapping(request.form, profile_id=profile_id))

    profile, response = _load_profile(profile_id)
    if response is not None:
        return response
    return render_template('profile_form.html', form=ProfileForm.from_profile(profile), fields=FORM_FIELDS)


@profiles_bp.route('/view/<profile_id>')
@profiles_bp.route('/print/<profile_id>')
@login_required
def view_profile(profile_id):
    profile, response = _load_profile(profile_id)
    if response is not None:
        return response
    return render_template('profile_view.html', profile=profile, fields=FORM_FIELDS)


@profiles_bp.route('/print/<profile_id>/pdf')
@login_required
def download_profile_pdf(profile_id):
    """Download one profile sheet as <regn_number>.pdf"""
    profile, response = _load_profile(profile_id)
    if response is not None:
        return response

    html_string = render_template('print_sheets.html', profiles=[profile], fields=FORM_FIELDS)
    try:
        pdf = printing.render_pdf(html_string, base_url=current_app.config.get('PDF_BASE_URL'))
    except ExportError:
        flash(PDF_FAILED_MESSAGE, 'warning')
        return redirect(url_for('profiles.view_profile', profile_id=profile_id))

    filename = f"{safe_filename(profile.regn_number, 'profile')}.pdf"
    current_app.logger.info(f'PDF {filename} generated by {current_user.email}')
    return send_file(BytesIO(pdf), as_attachment=True, download_name=filename, mimetype='application/pdf')


@profiles_bp.route('/print-all')
@login_required
def print_all():
    try:
        profiles = ProfileStore().list_all()
    except StoreReadError:
        flash('Failed to load profiles', 'danger')
        profiles = []
    return render_template('print_all.html', profiles=profiles, fields=FORM_FIELDS)


@profiles_bp.route('/print-all/pdf')
@login_required
def download_all_pdf():
    """Download every profile, one sheet per page, as all-profiles.pdf"""
    try:
        profiles = ProfileStore().list_all()
    except StoreReadError:
        flash('Failed to load profiles', 'danger')
        return redirect(url_for('profiles.print_all'))

    if not profiles:
        flash('No profiles to print.', 'warning')
        return redirect(url_for('profiles.print_all'))

    html_string = render_template('print_sheets.html', profiles=profiles, fields=FORM_FIELDS)
    try:
        pdf = printing.render_pdf(html_string, base_url=current_app.config.get('PDF_BASE_URL'))
    except ExportError:
        flash(PDF_FAILED_MESSAGE, 'warning')
        return redirect(url_for('profiles.print_all'))

    current_app.logger.info(f'Bulk PDF ({len(profiles)} profiles) generated by {current_user.email}')
    return send_file(BytesIO(pdf), as_attachment=True, download_name=printing.ALL_PROFILES_FILENAME,
                     mimetype='application/pdf')


@profiles_bp.route('/profiles/<profile_id>/delete', methods=['POST'])
@login_required
def delete_profile(profile_id):
    term, field = _search_params(request.form)
    try:
        ProfileStore().delete(profile_id)
    except NotFoundError:
        flash('Profile was already deleted', 'info')
        return redirect(_list_url(term, field))
    except StoreWriteError:
        flash('Failed to delete profile', 'danger')
        return redirect(_list_url(term, field))

    clear_dropdown_cache()
    name = request.form.get('name', '').strip()
    _audit('profile.delete', profile_id, f'full_name={name}')
    current_app.logger.info(f'Profile deleted: {profile_id} by {current_user.email}')
    flash(f'Profile {name or profile_id} deleted', 'success')
    # preserve search from form (if any)
    return redirect(_list_url(term, field))


@profiles_bp.route('/export')
@login_required
def export():
    """Export the currently filtered profile list to Excel"""
    from openpyxl import Workbook
    from openpyxl.styles import Font, PatternFill, Alignment
    from openpyxl.utils import get_column_letter

    term, field = _search_params(request.args)
    try:
        profiles = filter_profiles(ProfileStore().list_all(), term, field)
    except StoreReadError:
        flash('Failed to load profiles', 'danger')
        return redirect(_list_url(term, field))

    if not profiles:
        flash('No profiles found for export', 'warning')
        return redirect(_list_url(term, field))

    wb = Workbook()
    ws = wb.active
    ws.title = 'Profiles'

    ws.append([f.label for f in FORM_FIELDS] + ['Created', 'Updated'])

    # Style header row
    header_fill = PatternFill(start_color='366092', end_color='366092', fill_type='solid')
    header_font = Font(bold=True, color='FFFFFF')
    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal='center', vertical='center')

    for p in profiles:
        row = [getattr(p, f.name) or '' for f in FORM_FIELDS]
        row += [format_timestamp(p.created_at), format_timestamp(p.updated_at)]
        ws.append(row)

    # Auto-size columns
    for i, col in enumerate(ws.columns, 1):
        max_length = max(len(str(cell.value or '')) for cell in col)
        ws.column_dimensions[get_column_letter(i)].width = min(max_length + 2, 50)

    bio = BytesIO()
    wb.save(bio)
    bio.seek(0)

    filename = f"profiles_export_{datetime.now().strftime('%d-%m-%Y')}.xlsx"
    log_details = f'q={term} field={field.value} count={len(profiles)}'
    try:
        log_action(current_user.id, 'profiles.export', 'export', None, log_details)
    except Exception:
        current_app.logger.exception('Failed to write audit log for export')
    current_app.logger.info(f'Export by {current_user.email}: {log_details}')

    return send_file(bio, as_attachment=True, download_name=filename,
                     mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
