from db import db
from datetime import datetime, timezone


# Revoked JWTs (logout). A row only matters until the token it names expires,
# after that clean_up.py prunes it
class TokenBlocklist(db.Model):
    __tablename__ = "token_blocklist"

    id = db.Column(db.Integer, primary_key = True)
    # Unique id of the revoked access token
    jti = db.Column(db.String(100), unique = True, nullable = False, index = True)
    revoked_at = db.Column(
        "created_at",
        db.DateTime(timezone = True),
        default = lambda: datetime.now(timezone.utc),
        nullable = False
    )

    @classmethod
    def is_revoked(cls, jti):
        return db.session.query(cls.id).filter_by(jti = jti).first() is not None

    # Idempotent: logging out twice with the same token adds one row
    @classmethod
    def revoke(cls, jti):
        if not cls.is_revoked(jti):
            db.session.add(cls(jti = jti))
            db.session.commit()

    # Returns how many entries were removed
    @classmethod
    def purge_revoked_before(cls, cutoff):
        deleted = cls.query.filter(cls.revoked_at < cutoff).delete()
        db.session.commit()
        return deleted
