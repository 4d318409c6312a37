from craftlance.extensions import db
from sqlalchemy.sql import func
import uuid


def gen_log_id():
    return f"log-{str(uuid.uuid4())[:8]}"


class AdminLog(db.Model):
    __tablename__ = "admin_logs"

    id = db.Column(db.String(50), primary_key=True, default=gen_log_id)
    admin_id = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=False)
    action = db.Column(db.String(50), nullable=False)
    entity = db.Column(db.String(30), nullable=False)
    entity_id = db.Column(db.String(50), nullable=False)
    details = db.Column(db.JSON, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())
