"""
Tests for ApplicationService: submission rules, wallet normalization,
status transitions, ordering and statistics.
"""

from unittest.mock import MagicMock

import pytest

from crowdchain.errors import ConflictError, DuplicateKeyError, InternalError, ValidationError
from crowdchain.models import ApplicationStatus
from crowdchain.repositories import ApplicationRepository
from crowdchain.services.applications import ApplicationService, normalize_wallet
from crowdchain.services.documents import UploadedDocument


def _submit(service, wallet, **overrides):
    data = {
        'walletAddress': wallet,
        'fullName': 'Creator ' + wallet,
        'email': f'{wallet}@crowdchain.io',
        'professionalTitle': 'Designer',
    }
    data.update(overrides)
    return service.submit(data)


# ============================================================================
# Submission
# ============================================================================


class TestSubmit:

    def test_creates_pending_application(self, application_service, application_repo, application_data):
        result = application_service.submit(application_data)

        stored = application_repo.find_by_key('0xabc')
        assert result == {'id': stored.id}
        assert stored.status == ApplicationStatus.PENDING
        assert stored.full_name == 'Jane'
        assert stored.professional_title == 'Engineer'
        assert stored.verification_docs == []
        assert stored.submitted_at == stored.updated_at

    def test_wallet_is_stored_lowercase(self, application_service, application_repo, application_data):
        application_data['walletAddress'] = '  0xAbCdEf  '

        application_service.submit(application_data)

        assert application_repo.find_by_key('0xabcdef') is not None

    def test_duplicate_wallet_is_conflict_and_keeps_original(self, application_service, application_repo, application_data):
        application_service.submit(application_data)
        original = application_repo.find_by_key('0xabc')

        duplicate = dict(application_data, walletAddress='0xabc', fullName='Impostor')
        with pytest.raises(ConflictError):
            application_service.submit(duplicate)

        assert len(application_repo.applications) == 1
        assert application_repo.find_by_key('0xabc') is original
        assert original.full_name == 'Jane'

    def test_unique_constraint_race_is_conflict(self, clock, application_data):
        applications = MagicMock(spec=ApplicationRepository)
        applications.find_by_key.return_value = None
        applications.create.side_effect = DuplicateKeyError('0xabc')
        service = ApplicationService(applications, clock=clock)

        with pytest.raises(ConflictError):
            service.submit(application_data)

    @pytest.mark.parametrize('missing', ['walletAddress', 'fullName', 'email', 'professionalTitle'])
    def test_missing_required_field_fails_validation(self, application_service, application_repo, application_data, missing):
        del application_data[missing]

        with pytest.raises(ValidationError) as exc_info:
            application_service.submit(application_data)

        assert missing in exc_info.value.message
        assert application_repo.applications == {}

    def test_blank_required_field_counts_as_missing(self, application_service, application_data):
        application_data['fullName'] = '   '

        with pytest.raises(ValidationError):
            application_service.submit(application_data)

    def test_optional_links_are_stored(self, application_service, application_repo, application_data):
        application_data['linkedIn'] = 'https://linkedin.com/in/jane'
        application_data['website'] = 'https://jane.dev'

        application_service.submit(application_data)

        stored = application_repo.find_by_key('0xabc')
        assert stored.linkedin_url == 'https://linkedin.com/in/jane'
        assert stored.website_url == 'https://jane.dev'

    def test_legacy_payload_is_reconciled(self, application_service, application_repo):
        application_service.submit({
            'walletAddress': '0xLEGACY',
            'fullName': 'John Doe',
            'email': 'john@crowdchain.io',
            'bio': 'Experienced blockchain developer',
            'experience': '5 years in Web3',
            'portfolio': 'https://johndoe.dev',
        })

        stored = application_repo.find_by_key('0xlegacy')
        assert stored.professional_title == '5 years in Web3'
        assert stored.website_url == 'https://johndoe.dev'

    def test_mixed_title_and_portfolio(self, application_service, application_repo, application_data):
        application_data['portfolio'] = 'https://jane.dev'

        application_service.submit(application_data)

        stored = application_repo.find_by_key('0xabc')
        assert stored.professional_title == 'Engineer'
        assert stored.website_url == 'https://jane.dev'

    def test_mixed_experience_and_website(self, application_service, application_repo, application_data):
        del application_data['professionalTitle']
        application_data['experience'] = '5 years in Web3'
        application_data['website'] = 'https://jane.dev'

        application_service.submit(application_data)

        stored = application_repo.find_by_key('0xabc')
        assert stored.professional_title == '5 years in Web3'
        assert stored.website_url == 'https://jane.dev'

    def test_documents_are_encoded_in_order(self, application_service, application_repo, application_data):
        documents = [
            UploadedDocument('id.pdf', 'application/pdf', b'%PDF-1.4'),
            UploadedDocument('selfie.png', 'image/png', b'\x89PNG'),
        ]

        application_service.submit(application_data, documents)

        stored = application_repo.find_by_key('0xabc')
        assert stored.verification_docs == [
            'data:application/pdf;base64,JVBERi0xLjQ=',
            'data:image/png;base64,iVBORw==',
        ]

    def test_too_many_documents_fail_validation(self, application_service, application_repo, application_data):
        documents = [UploadedDocument(f'{i}.txt', 'text/plain', b'x') for i in range(6)]

        with pytest.raises(ValidationError):
            application_service.submit(application_data, documents)

        assert application_repo.applications == {}

    def test_oversized_document_fails_validation(self, application_service, application_data):
        # The fixture caps documents at 1024 bytes
        documents = [UploadedDocument('big.bin', 'application/octet-stream', b'x' * 1025)]

        with pytest.raises(ValidationError):
            application_service.submit(application_data, documents)

    def test_storage_failure_is_internal_error(self, clock, application_data):
        applications = MagicMock(spec=ApplicationRepository)
        applications.find_by_key.side_effect = RuntimeError('disk full')
        service = ApplicationService(applications, clock=clock)

        with pytest.raises(InternalError) as exc_info:
            service.submit(application_data)

        assert 'disk full' not in exc_info.value.message


# ============================================================================
# Lookup and listing
# ============================================================================


class TestQueries:

    def test_get_by_wallet_is_case_insensitive(self, application_service, application_data):
        application_service.submit(application_data)

        assert application_service.get_by_wallet('0XABC').wallet_address == '0xabc'

    def test_get_by_wallet_absent_returns_none(self, application_service):
        assert application_service.get_by_wallet('0xnothing') is None

    def test_list_all_newest_first(self, application_service):
        for wallet in ('0xa', '0xb', '0xc'):
            _submit(application_service, wallet)

        wallets = [a.wallet_address for a in application_service.list_all()]

        assert wallets == ['0xc', '0xb', '0xa']

    def test_list_all_filters_by_status(self, application_service):
        for wallet in ('0xa', '0xb', '0xc'):
            _submit(application_service, wallet)
        application_service.update_status('0xb', ApplicationStatus.APPROVED)

        approved = application_service.list_all(ApplicationStatus.APPROVED)
        pending = application_service.list_all(ApplicationStatus.PENDING)

        assert [a.wallet_address for a in approved] == ['0xb']
        assert [a.wallet_address for a in pending] == ['0xc', '0xa']

    def test_list_all_rejects_unknown_status_filter(self, application_service):
        with pytest.raises(ValidationError):
            application_service.list_all('ARCHIVED')

    def test_stats_after_mixed_transitions(self, application_service):
        for wallet in ('0xa', '0xb', '0xc'):
            _submit(application_service, wallet)
        application_service.update_status('0xa', ApplicationStatus.APPROVED)
        application_service.update_status('0xb', ApplicationStatus.REJECTED)

        stats = application_service.stats()

        assert stats == {'total': 3, 'pending': 1, 'approved': 1, 'rejected': 1}
        assert stats['pending'] + stats['approved'] + stats['rejected'] == stats['total']
        assert [a.wallet_address for a in application_service.list_all()] == ['0xc', '0xb', '0xa']

    def test_stats_empty(self, application_service):
        assert application_service.stats() == {'total': 0, 'pending': 0, 'approved': 0, 'rejected': 0}


# ============================================================================
# Status transitions
# ============================================================================


class TestUpdateStatus:

    def test_approve_updates_status_and_timestamp(self, application_service, application_data):
        application_service.submit(application_data)

        updated = application_service.update_status('0xabc', 'APPROVED')

        assert updated.status == ApplicationStatus.APPROVED
        assert updated.updated_at > updated.submitted_at

    def test_invalid_status_leaves_record_untouched(self, application_service, application_repo, application_data):
        application_service.submit(application_data)
        before = application_repo.find_by_key('0xabc').updated_at

        with pytest.raises(ValidationError):
            application_service.update_status('0xabc', 'approved-ish')

        stored = application_repo.find_by_key('0xabc')
        assert stored.status == ApplicationStatus.PENDING
        assert stored.updated_at == before
        assert application_repo.update_calls == 0

    def test_invalid_status_checked_before_storage(self, clock):
        applications = MagicMock(spec=ApplicationRepository)
        service = ApplicationService(applications, clock=clock)

        with pytest.raises(ValidationError):
            service.update_status('0xabc', None)

        applications.find_by_key.assert_not_called()

    def test_unknown_wallet_returns_none(self, application_service):
        assert application_service.update_status('0xmissing', 'APPROVED') is None

    def test_any_state_can_move_to_any_state(self, application_service, application_data):
        application_service.submit(application_data)

        path = ['REJECTED', 'APPROVED', 'APPROVED', 'PENDING', 'REJECTED', 'PENDING']
        timestamps = []
        for status in path:
            updated = application_service.update_status('0xABC', status)
            assert updated.status == status
            timestamps.append(updated.updated_at)

        assert timestamps == sorted(timestamps)


# ============================================================================
# Detail updates and deletion
# ============================================================================


class TestUpdateDetailsAndDelete:

    def test_update_details_changes_editable_fields(self, application_service, application_data):
        application_service.submit(application_data)

        updated = application_service.update_details('0xabc', {
            'professionalTitle': 'Lead Engineer',
            'websiteUrl': 'https://jane.dev',
        })

        assert updated.professional_title == 'Lead Engineer'
        assert updated.website_url == 'https://jane.dev'
        assert updated.updated_at > updated.submitted_at

    def test_update_details_rejects_other_fields(self, application_service, application_data):
        application_service.submit(application_data)

        with pytest.raises(ValidationError):
            application_service.update_details('0xabc', {'status': 'APPROVED'})

    def test_update_details_cannot_blank_title(self, application_service, application_data):
        application_service.submit(application_data)

        with pytest.raises(ValidationError):
            application_service.update_details('0xabc', {'professionalTitle': '  '})

    @pytest.mark.parametrize('changes', [['professionalTitle'], 'professionalTitle', 7])
    def test_update_details_requires_a_mapping(self, application_service, application_data, changes):
        application_service.submit(application_data)

        with pytest.raises(ValidationError):
            application_service.update_details('0xabc', changes)

    def test_update_details_unknown_wallet_returns_none(self, application_service):
        assert application_service.update_details('0xmissing', {'linkedinUrl': 'https://x.io'}) is None

    def test_delete(self, application_service, application_data):
        application_service.submit(application_data)

        assert application_service.delete('0xABC') is True
        assert application_service.get_by_wallet('0xabc') is None
        assert application_service.delete('0xabc') is False


def test_normalize_wallet():
    assert normalize_wallet(' 0xAbC ') == '0xabc'
    assert normalize_wallet(None) is None
