from craftlance.extensions import db
from sqlalchemy.sql import func
import uuid

ROLES = ("user", "moderator", "admin")
STAFF_ROLES = ("moderator", "admin")


def gen_uuid(prefix=None):
    uid = str(uuid.uuid4())
    return f"{prefix}-{uid}" if prefix else uid


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(50), primary_key=True, default=lambda: gen_uuid("usr"))
    username = db.Column(db.String(100), nullable=False, index=True)
    discord_id = db.Column(db.String(50), unique=True, nullable=True)
    minecraft_username = db.Column(db.String(32), nullable=True)
    minecraft_uuid = db.Column(db.String(36), nullable=True)
    role = db.Column(db.String(20), nullable=False, default="user")

    is_banned = db.Column(db.Boolean, nullable=False, default=False)
    ban_reason = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "minecraft_username": self.minecraft_username,
            "minecraft_uuid": self.minecraft_uuid,
            "role": self.role,
            "is_banned": self.is_banned,
        }
