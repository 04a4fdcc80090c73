"""
Profile store: the only code that reads or writes Profile rows.

Each profile is an independent document keyed by an opaque id that the
store assigns. Timestamps are epoch milliseconds and are never taken from
the caller. There is no locking or version check, so two editors saving the
same profile simply overwrite each other (last write wins).
"""
import logging
import time
import uuid

from sqlalchemy.exc import SQLAlchemyError

from errors import NotFoundError, StoreReadError, StoreWriteError
from models import Profile, db

logger = logging.getLogger(__name__)

# keys the store manages itself and never accepts from callers
PROTECTED_KEYS = ('id', 'createdAt', 'updatedAt', 'created_at', 'updated_at')


def now_ms():
    return int(time.time() * 1000)


def _known_fields(record):
    """Keep only descriptive profile fields from a caller supplied mapping."""
    fields = {}
    for key, value in record.items():
        if key in PROTECTED_KEYS:
            continue
        if key not in Profile.FIELD_NAMES:
            logger.debug('Ignoring unknown profile field %r', key)
            continue
        fields[key] = '' if value is None else str(value)
    return fields


class ProfileStore:
    """
    CRUD access to the profiles collection.

    Args:
        session: SQLAlchemy session (default: Flask-SQLAlchemy db.session)
        clock: callable returning the current time in epoch milliseconds
    """

    def __init__(self, session=None, clock=None):
        self.session = session if session is not None else db.session
        self.clock = clock or now_ms

    def create(self, record):
        """Insert a new profile and return its store-assigned id."""
        fields = _known_fields(record)
        stamp = self.clock()
        profile = Profile(id=uuid.uuid4().hex, created_at=stamp, updated_at=stamp)
        for name in Profile.FIELD_NAMES:
            setattr(profile, name, fields.get(name, ''))
        try:
            self.session.add(profile)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception('Error creating profile')
            raise StoreWriteError('Failed to create profile') from e
        logger.info('Profile created: %s (regn=%s)', profile.id, profile.regn_number)
        return profile.id

    def list_all(self):
        """Return every profile, newest createdAt first."""
        try:
            return (self.session.query(Profile)
                    .order_by(Profile.created_at.desc(), Profile.id.desc())
                    .all())
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception('Error getting profiles')
            raise StoreReadError('Failed to load profiles') from e

    def get_by_id(self, profile_id):
        """Keyed read. Returns None when no profile has this id."""
        if not profile_id:
            return None
        try:
            return self.session.get(Profile, profile_id)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception('Error getting profile %s', profile_id)
            raise StoreReadError(f'Failed to load profile {profile_id}') from e

    def _get_for_write(self, profile_id):
        """Lookup ahead of a write; a failed read fails the write."""
        try:
            profile = self.get_by_id(profile_id)
        except StoreReadError as e:
            raise StoreWriteError(f'Failed to load profile {profile_id} for writing') from e
        if profile is None:
            raise NotFoundError(profile_id)
        return profile

    def update(self, profile_id, partial):
        """
        Merge the supplied fields onto an existing profile.

        Fields missing from ``partial`` are left as they are. updatedAt always
        moves forward, even when the clock has not ticked since the last write.
        """
        try:
            profile = self._get_for_write(profile_id)
        except NotFoundError:
            logger.warning('Update of missing profile %s', profile_id)
            raise

        for name, value in _known_fields(partial).items():
            setattr(profile, name, value)
        profile.updated_at = max(self.clock(), (profile.updated_at or 0) + 1)
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception('Error updating profile %s', profile_id)
            raise StoreWriteError(f'Failed to update profile {profile_id}') from e
        logger.info('Profile updated: %s', profile_id)
        return profile

    def delete(self, profile_id):
        """Permanently remove a profile. Raises NotFoundError if it is already gone."""
        profile = self._get_for_write(profile_id)
        try:
            self.session.delete(profile)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception('Error deleting profile %s', profile_id)
            raise StoreWriteError(f'Failed to delete profile {profile_id}') from e
        logger.info('Profile deleted: %s', profile_id)

    def distinct_values(self, field_name):
        """Sorted distinct non-blank values of one profile field."""
        if field_name not in Profile.FIELD_NAMES:
            raise ValueError(f'Unknown profile field: {field_name}')
        column = getattr(Profile, field_name)
        try:
            rows = (self.session.query(column).distinct()
                    .filter(column != '')
                    .order_by(column).all())
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception('Error reading distinct %s values', field_name)
            raise StoreReadError(f'Failed to read {field_name} values') from e
        return [r[0] for r in rows]
