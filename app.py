import os
from mpesa_service import create_app
from mpesa_service.extensions import db

app = create_app(os.getenv('FLASK_ENV', 'development'))

@app.shell_context_processor
def make_shell_context():
    from mpesa_service.models import ShortCode, CredentialSet
    return {
        'db': db,
        'daraja': app.extensions['daraja'],
        'ShortCode': ShortCode,
        'CredentialSet': CredentialSet
    }

@app.cli.command('init-db')
def init_db():
    """Create the mpesa_shortcodes table"""
    db.create_all()
    print('Database tables created')
