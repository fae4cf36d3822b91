"""Tests for SessionState."""

import pytest

from tutor_reports.exceptions import FieldValidationError, NotLoggedInError
from tutor_reports.repositories.slot_repository import SlotRepository
from tutor_reports.services.session_state import SessionState


class TestSessionState:
    """Tests for login, logout and restore."""

    def test_starts_logged_out(self):
        state = SessionState()
        assert state.logged_in is False
        with pytest.raises(NotLoggedInError):
            state.require_identity()

    @pytest.mark.asyncio
    async def test_login_trims_and_persists(self, db_session):
        state = SessionState()

        identity = await state.login(db_session, "  王老師 ")

        assert identity == "王老師"
        assert state.require_identity() == "王老師"
        assert await SlotRepository(db_session).read("tutor_user") == "王老師"

    @pytest.mark.asyncio
    async def test_blank_login_rejected(self, db_session):
        state = SessionState()

        with pytest.raises(FieldValidationError) as exc_info:
            await state.login(db_session, "   ")

        assert exc_info.value.field == "name"
        assert state.logged_in is False

    @pytest.mark.asyncio
    async def test_restore_reads_persisted_identity(self, db_session):
        await SessionState().login(db_session, "admin")

        restored = SessionState()
        assert await restored.restore(db_session) == "admin"
        assert restored.identity == "admin"

    @pytest.mark.asyncio
    async def test_logout_clears_slot(self, db_session):
        state = SessionState()
        await state.login(db_session, "T")

        await state.logout(db_session)

        assert state.identity is None
        assert await SlotRepository(db_session).read("tutor_user") is None

    @pytest.mark.asyncio
    async def test_session_slot_is_separate_from_reports(self, db_session):
        await SessionState().login(db_session, "T")
        assert await SlotRepository(db_session).read("tutor_reports_v1") is None
