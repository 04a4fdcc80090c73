from datetime import datetime
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import UserMixin
from sqlalchemy import event

# SQLAlchemy instance (init in app)
db = SQLAlchemy()
bcrypt = Bcrypt()


def _set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable WAL mode and other optimizations for SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def init_db_events(app):
    """Initialize database event listeners for SQLite optimizations."""
    if app.config.get('SQLALCHEMY_DATABASE_URI', '').startswith('sqlite'):
        with app.app_context():
            event.listen(db.engine, "connect", _set_sqlite_pragma)


class User(UserMixin, db.Model):
    """Staff account allowed to manage profiles."""
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(254), unique=True, nullable=False)
    password_hash = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def set_password(self, password):
        # bcrypt returns bytes, store as decoded UTF-8 string
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f"<User {self.email}>"


class Profile(db.Model):
    """
    One matrimonial profile document.

    Every descriptive field is a plain string; blanks are stored as ''.
    The id and both timestamps are owned by ProfileStore.
    """
    __tablename__ = 'profiles'

    # descriptive fields in display order
    FIELD_NAMES = (
        'regn_number',
        'gender',
        'full_name_with_surname',
        'sect_subsect',
        'gothram',
        'dob',
        'tob',
        'pob',
        'star_padam',
        'height',
        'complexion',
        'educational_qualifications',
        'employment_details',
        'salary',
        'father_name',
        'mother_name',
        'siblings',
        'requirements_spouse',
        'subsect_bar_no_bar',
        'marital_status',
        'any_other_details',
        'address',
        'contact_no',
    )

    id = db.Column(db.String(32), primary_key=True)
    regn_number = db.Column(db.String(100), nullable=False, default='', index=True)
    gender = db.Column(db.String(20), nullable=False, default='')
    full_name_with_surname = db.Column(db.String(200), nullable=False, default='', index=True)
    sect_subsect = db.Column(db.String(200), nullable=False, default='')
    gothram = db.Column(db.String(200), nullable=False, default='')
    dob = db.Column(db.String(50), nullable=False, default='')  # free format, e.g. 9-May-2000
    tob = db.Column(db.String(50), nullable=False, default='')
    pob = db.Column(db.String(200), nullable=False, default='')
    star_padam = db.Column(db.String(100), nullable=False, default='')
    height = db.Column(db.String(50), nullable=False, default='')
    complexion = db.Column(db.String(100), nullable=False, default='')
    educational_qualifications = db.Column(db.Text, nullable=False, default='')
    employment_details = db.Column(db.Text, nullable=False, default='')
    salary = db.Column(db.String(100), nullable=False, default='')
    father_name = db.Column(db.String(200), nullable=False, default='')
    mother_name = db.Column(db.String(200), nullable=False, default='')
    siblings = db.Column(db.Text, nullable=False, default='')
    requirements_spouse = db.Column(db.Text, nullable=False, default='')
    subsect_bar_no_bar = db.Column(db.String(100), nullable=False, default='')
    marital_status = db.Column(db.String(100), nullable=False, default='')
    any_other_details = db.Column(db.Text, nullable=False, default='')
    address = db.Column(db.Text, nullable=False, default='')
    contact_no = db.Column(db.String(50), nullable=False, default='')
    # milliseconds since epoch
    created_at = db.Column(db.BigInteger, nullable=False, index=True)
    updated_at = db.Column(db.BigInteger, nullable=False)

    def to_dict(self):
        """Document representation: id, descriptive fields, createdAt, updatedAt."""
        doc = {'id': self.id}
        for name in self.FIELD_NAMES:
            doc[name] = getattr(self, name) or ''
        doc['createdAt'] = self.created_at
        doc['updatedAt'] = self.updated_at
        return doc

    def __repr__(self):
        return f"<Profile {self.id} {self.regn_number}>"


class Audit(db.Model):
    __tablename__ = 'audit_logs'
    id = db.Column(db.Integer, primary_key=True)
    action = db.Column(db.String(200), nullable=False)
    actor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    actor = db.relationship('User', backref='audit_logs', foreign_keys=[actor_id])
    target_type = db.Column(db.String(50), nullable=True)
    target_id = db.Column(db.String(64), nullable=True)
    details = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Audit {self.id} {self.action}>"


def log_action(actor_id, action, target_type=None, target_id=None, details=None):
    """Create an audit log entry and commit it."""
    a = Audit(actor_id=actor_id, action=action, target_type=target_type, target_id=target_id, details=details)
    db.session.add(a)
    db.session.commit()
    return a
