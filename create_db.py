"""Create all tables in the identity database."""

from identity_server.factory import create_web_app
from identity_server.services import datastore

app = create_web_app()
with app.app_context():
    datastore.create_all()
