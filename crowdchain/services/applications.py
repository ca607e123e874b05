# crowdchain/services/applications.py
# (This file contains the creator application lifecycle services.)

import logging
from collections.abc import Mapping

from crowdchain.errors import (
    ServiceError,
    ValidationError,
    ConflictError,
    InternalError,
    DuplicateKeyError,
)
from crowdchain.models import ApplicationStatus, CreatorApplication, new_id, utcnow
from crowdchain.services.compat import classify_payload, reconcile_payload
from crowdchain.services.documents import encode_documents

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    ('wallet_address', 'walletAddress'),
    ('full_name', 'fullName'),
    ('email', 'email'),
    ('professional_title', 'professionalTitle'),
)

# Fields an applicant may change after submission, keyed by request name.
EDITABLE_FIELDS = {
    'professionalTitle': 'professional_title',
    'linkedinUrl': 'linkedin_url',
    'websiteUrl': 'website_url',
}


def normalize_wallet(wallet_address):
    """Wallet addresses are case-insensitive keys; stored lowercase."""
    if wallet_address is None:
        return None
    return str(wallet_address).strip().lower()


def _check_status(status):
    if not ApplicationStatus.is_valid(status):
        raise ValidationError(
            "Invalid status. Must be PENDING, APPROVED, or REJECTED"
        )


class ApplicationService:
    """
    Creator application lifecycle: submission, lookup, listing, status
    transitions and statistics.

    Status transitions are unrestricted: any of the three states may move to
    any other (including itself), so a rejected application can be approved
    on appeal.
    """

    def __init__(self, applications, max_documents=5, max_document_bytes=10 * 1024 * 1024, clock=utcnow):
        self.applications = applications
        self.max_documents = max_documents
        self.max_document_bytes = max_document_bytes
        self.clock = clock

    # --- SUBMISSION ---

    def submit(self, data, documents=None):
        """
        Stores a new PENDING application.

        Args:
            data (Mapping): Raw form or JSON fields, current or legacy shape
            documents (list[UploadedDocument]): Verification uploads

        Returns:
            dict: {"id": <application id>}

        Raises:
            ValidationError: Missing required fields or upload limits exceeded
            ConflictError: The wallet already has an application
            InternalError: Any storage failure
        """
        normalized = reconcile_payload(classify_payload(data))

        missing = [name for attr, name in REQUIRED_FIELDS if not getattr(normalized, attr)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        verification_docs = encode_documents(
            documents, self.max_documents, self.max_document_bytes
        )
        wallet = normalize_wallet(normalized.wallet_address)

        try:
            if self.applications.find_by_key(wallet) is not None:
                raise ConflictError("Application already exists for this wallet address")

            now = self.clock()
            application = CreatorApplication(
                id=new_id(),
                wallet_address=wallet,
                full_name=normalized.full_name,
                email=normalized.email,
                professional_title=normalized.professional_title,
                linkedin_url=normalized.linkedin_url,
                website_url=normalized.website_url,
                verification_docs=verification_docs,
                status=ApplicationStatus.PENDING,
                submitted_at=now,
                updated_at=now,
            )
            self.applications.create(application)
        except ConflictError:
            logger.warning(f"Duplicate application rejected for wallet {wallet}")
            raise
        except DuplicateKeyError:
            logger.warning(f"Duplicate application rejected by unique constraint for wallet {wallet}")
            raise ConflictError("Application already exists for this wallet address")
        except Exception as e:
            logger.error(f"Error creating application for wallet {wallet}: {str(e)}", exc_info=True)
            raise InternalError("Internal server error", original_error=e)

        logger.info(
            f"Creator application created: {wallet} "
            f"({len(verification_docs)} verification documents)"
        )
        return {"id": application.id}

    # --- QUERIES ---

    def get_by_wallet(self, wallet_address):
        """Returns the application for a wallet, or None if there is none."""
        return self._call(
            lambda: self.applications.find_by_key(normalize_wallet(wallet_address)),
            "fetching creator application",
        )

    def list_all(self, status=None):
        """All applications, most recent submission first."""
        if status is not None:
            _check_status(status)
        applications = self._call(
            lambda: self.applications.find_all(status),
            "fetching creator applications",
        )
        logger.info(f"Retrieved {len(applications)} creator applications")
        return applications

    def stats(self):
        def _count():
            return {
                'total': self.applications.count(),
                'pending': self.applications.count(ApplicationStatus.PENDING),
                'approved': self.applications.count(ApplicationStatus.APPROVED),
                'rejected': self.applications.count(ApplicationStatus.REJECTED),
            }
        return self._call(_count, "fetching application statistics")

    # --- MUTATIONS ---

    def update_status(self, wallet_address, status):
        """
        Overwrites status and last-updated timestamp.

        Returns:
            CreatorApplication or None: The updated record, None if not found

        Raises:
            ValidationError: status is not PENDING, APPROVED or REJECTED
        """
        _check_status(status)
        wallet = normalize_wallet(wallet_address)

        def _update():
            application = self.applications.find_by_key(wallet)
            if application is None:
                return None
            application.status = status
            application.updated_at = self.clock()
            return self.applications.update(application)

        application = self._call(_update, "updating application status")
        if application is not None:
            logger.info(f"Updated application status to {status} for: {wallet}")
        return application

    def update_details(self, wallet_address, changes):
        """
        Updates the applicant-editable fields (title, LinkedIn, website).

        Returns:
            CreatorApplication or None: The updated record, None if not found
        """
        if changes is not None and not isinstance(changes, Mapping):
            raise ValidationError("Request body must be a JSON object")
        changes = dict(changes or {})
        unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")
        if not changes:
            raise ValidationError("No fields to update.")
        if any(value is not None and not isinstance(value, str) for value in changes.values()):
            raise ValidationError("Field values must be strings.")
        if 'professionalTitle' in changes and not (changes['professionalTitle'] or '').strip():
            raise ValidationError("professionalTitle cannot be empty.")

        wallet = normalize_wallet(wallet_address)

        def _update():
            application = self.applications.find_by_key(wallet)
            if application is None:
                return None
            for key, value in changes.items():
                setattr(application, EDITABLE_FIELDS[key], (value or '').strip() or None)
            application.updated_at = self.clock()
            return self.applications.update(application)

        application = self._call(_update, "updating application")
        if application is not None:
            logger.info(f"Updated application for: {wallet}")
        return application

    def delete(self, wallet_address):
        """Administrative removal. Returns False if no application existed."""
        wallet = normalize_wallet(wallet_address)

        def _delete():
            application = self.applications.find_by_key(wallet)
            if application is None:
                return False
            self.applications.delete(application)
            return True

        deleted = self._call(_delete, "deleting application")
        if deleted:
            logger.info(f"Deleted application for: {wallet}")
        return deleted

    # --- HELPERS ---

    def _call(self, operation, description):
        """Runs a storage operation, collapsing unexpected failures into InternalError."""
        try:
            return operation()
        except ServiceError:
            raise
        except Exception as e:
            logger.error(f"Error {description}: {str(e)}", exc_info=True)
            raise InternalError("Internal server error", original_error=e)
