# app/blueprints/auth/routes.py
"""
Authentication routes
"""

import re

from flask import render_template, redirect, url_for, flash, request, current_app
from flask_login import login_user, logout_user, login_required, current_user

from app.extensions import db
from models import User, log_action
from . import auth_bp

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MIN_PASSWORD_LENGTH = 6


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """
    Login page and authentication handler

    GET: Display login form (or go straight to the list when already logged in)
    POST: Authenticate user and redirect to the profile list
    """
    if current_user.is_authenticated:
        return redirect(url_for('profiles.profile_list'))

    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')
        user = User.query.filter_by(email=email).first()

        if user and user.check_password(password):
            login_user(user)
            current_app.logger.info(f'Login: {user.email}')
            return redirect(url_for('profiles.profile_list'))

        current_app.logger.warning(f'Failed login attempt for {email}')
        flash('Failed to login. Please check your credentials.', 'danger')
        return redirect(url_for('auth.login'))

    return render_template('login.html')


@auth_bp.route('/logout')
@login_required
def logout():
    """
    Logout current user and redirect to login page
    """
    logout_user()
    return redirect(url_for('auth.login'))


@auth_bp.route('/create-user', methods=['GET', 'POST'])
@login_required
def create_user():
    """Create another staff account."""
    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')
        confirm_password = request.form.get('confirm_password', '')

        if len(password) < MIN_PASSWORD_LENGTH:
            flash('Password must be at least 6 characters long', 'warning')
            return render_template('create_user.html', email=email)
        if password != confirm_password:
            flash('Passwords do not match', 'warning')
            return render_template('create_user.html', email=email)
        if not EMAIL_RE.match(email):
            flash('Invalid email address', 'warning')
            return render_template('create_user.html', email=email)
        if User.query.filter_by(email=email).first():
            flash('This email is already registered', 'warning')
            return render_template('create_user.html', email=email)

        u = User(email=email)
        u.set_password(password)
        db.session.add(u)
        db.session.commit()
        # audit & log
        try:
            log_action(current_user.id, 'user.create', 'user', str(u.id), f'email={email}')
        except Exception:
            current_app.logger.exception('Failed to write audit log for user.create')
        current_app.logger.info(f'User created: {email} by {current_user.email}')
        flash(f'User account created successfully for {email}', 'success')
        return redirect(url_for('auth.create_user'))

    return render_template('create_user.html', email='')
