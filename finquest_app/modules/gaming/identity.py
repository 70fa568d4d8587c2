"""Identity object for users authenticated upstream."""

from flask_login import UserMixin


class Identity(UserMixin):
    """An already-authenticated, opaque user id. Never persisted here."""

    def __init__(self, user_id: str):
        self.user_id = user_id

    def get_id(self) -> str:
        return self.user_id

    def __repr__(self):
        return f'<Identity {self.user_id}>'
