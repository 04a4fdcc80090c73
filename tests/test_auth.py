from models import User, db
from conftest import ensure_user


def test_login_and_logout(app, client):
    ensure_user(app)
    rv = client.post('/login', data={'email': 'Staff@Example.com', 'password': 'secret1'})
    assert rv.status_code == 302
    assert rv.headers['Location'].endswith('/list')
    assert client.get('/list').status_code == 200

    client.get('/logout')
    assert client.get('/list').status_code == 302


def test_login_wrong_password(app, client):
    ensure_user(app)
    rv = client.post('/login', data={'email': 'staff@example.com', 'password': 'wrong'}, follow_redirects=True)
    assert 'Failed to login. Please check your credentials.' in rv.get_data(as_text=True)
    assert client.get('/list').status_code == 302


def test_create_user(app, logged_in):
    rv = logged_in.post('/create-user', data={
        'email': 'new@example.com', 'password': 'abcdef', 'confirm_password': 'abcdef',
    }, follow_redirects=True)
    assert 'User account created successfully for new@example.com' in rv.get_data(as_text=True)
    with app.app_context():
        u = User.query.filter_by(email='new@example.com').first()
        assert u is not None
        assert u.check_password('abcdef')


def test_create_user_validation(app, logged_in):
    cases = [
        ({'email': 'a@example.com', 'password': 'abc', 'confirm_password': 'abc'},
         'Password must be at least 6 characters long'),
        ({'email': 'a@example.com', 'password': 'abcdef', 'confirm_password': 'abcdeg'},
         'Passwords do not match'),
        ({'email': 'not-an-email', 'password': 'abcdef', 'confirm_password': 'abcdef'},
         'Invalid email address'),
        ({'email': 'staff@example.com', 'password': 'abcdef', 'confirm_password': 'abcdef'},
         'This email is already registered'),
    ]
    for data, message in cases:
        txt = logged_in.post('/create-user', data=data).get_data(as_text=True)
        assert message in txt
    with app.app_context():
        assert User.query.count() == 1


def test_create_user_requires_login(client):
    rv = client.get('/create-user')
    assert rv.status_code == 302
    assert '/login' in rv.headers['Location']


def test_cli_create_user(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=['create-user', 'cli@example.com', 'secret1'])
    assert 'Created user cli@example.com' in result.output

    result = runner.invoke(args=['create-user', 'cli@example.com', 'secret1'])
    assert 'User already exists.' in result.output

    result = runner.invoke(args=['create-user', 'short@example.com', 'abc'])
    assert 'at least 6 characters' in result.output


def test_cli_init_db_with_user(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=['init-db-with-user', '--email', 'first@example.com', '--password', 'secret1'])
    assert 'Created user first@example.com' in result.output
    with app.app_context():
        assert db.session.query(User).filter_by(email='first@example.com').count() == 1


def test_cli_backup_requires_sqlite_file(app):
    result = app.test_cli_runner().invoke(args=['backup-db'])
    assert 'only works with SQLite database files' in result.output
