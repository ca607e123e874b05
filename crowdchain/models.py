# models.py

import uuid
from datetime import datetime, timezone

from . import db

# Two independent tables: accounts are keyed by email, creator applications
# by wallet address. There is no foreign key between them.


def utcnow():
    """Naive UTC timestamp, matching what the DateTime columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id():
    return str(uuid.uuid4())


class ApplicationStatus:
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'

    VALUES = (PENDING, APPROVED, REJECTED)

    @classmethod
    def is_valid(cls, value):
        return value in cls.VALUES


# --- 1. ACCOUNT MODEL ---
class Account(db.Model):
    """
    Registered login identity. Created on signup and never modified.
    The password hash never leaves this object: to_dict() omits it.
    """
    __tablename__ = 'accounts'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(255), index=True, unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Account {self.email}>'


# --- 2. CREATOR APPLICATION MODEL ---
class CreatorApplication(db.Model):
    """
    One application per wallet address. verification_docs holds the uploaded
    documents inline as data URIs, in upload order.
    """
    __tablename__ = 'creator_applications'
    __table_args__ = (
        db.CheckConstraint(
            "status IN ('PENDING', 'APPROVED', 'REJECTED')",
            name='ck_creator_applications_status',
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    wallet_address = db.Column(db.String(255), index=True, unique=True, nullable=False)
    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    professional_title = db.Column(db.String(255))
    linkedin_url = db.Column(db.String(500))
    website_url = db.Column(db.String(500))
    verification_docs = db.Column(db.JSON, nullable=False, default=list)
    status = db.Column(db.String(16), nullable=False, default=ApplicationStatus.PENDING, index=True)
    submitted_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        """Converts the application to the camelCase shape the frontend expects."""
        return {
            'id': self.id,
            'walletAddress': self.wallet_address,
            'fullName': self.full_name,
            'email': self.email,
            'professionalTitle': self.professional_title,
            'linkedinUrl': self.linkedin_url,
            'websiteUrl': self.website_url,
            'verificationDocs': list(self.verification_docs or []),
            'status': self.status,
            'submittedAt': self.submitted_at.isoformat() if self.submitted_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<CreatorApplication {self.wallet_address} ({self.status})>'
