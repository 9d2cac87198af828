import os


def get_db_connection_params(base_dir):
    """
    Get database connection parameters from the environment.
    Returns a dictionary with connection parameters for Django.

    Falls back to a local SQLite file when DB_ENGINE is not configured.
    """
    engine = os.getenv('DB_ENGINE')
    if not engine:
        return {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': base_dir / 'db.sqlite3',
        }

    params = {
        'ENGINE': engine,
        'NAME': os.getenv('DB_NAME'),
        'USER': os.getenv('DB_USER'),
        'PASSWORD': os.getenv('DB_PASSWORD'),
        'HOST': os.getenv('DB_HOST'),
        'PORT': os.getenv('DB_PORT'),
    }
    if engine.endswith('postgresql'):
        params['OPTIONS'] = {
            'sslmode': os.getenv('DB_SSLMODE', 'prefer'),
            'client_encoding': 'UTF8',
        }
    return params
